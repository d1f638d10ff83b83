# ACA Directory Store
# Offline artifact store persisted as a YAML index plus blob files

import uuid
from collections.abc import Iterable
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import yaml

from aca.models import ArtifactType, RemoteArtifact, RemoteCompanion
from aca.store.base import StoreError
from aca.utils.paths import atomic_write, ensure_dir, resolve_within

INDEX_FILE = "index.yaml"
BLOBS_DIR = "blobs"


class DirectoryStore:
    """
    Artifact store and blob store backed by a local directory.

    Layout:
        <root>/index.yaml   artifacts and companion metadata
        <root>/blobs/<key>  companion file bytes

    The index is loaded lazily and written atomically after every change.
    """

    def __init__(self, root: Path):
        """
        Initialize directory store.

        Args:
            root: Directory holding the index and blobs (created on first write).
        """
        self.root = root
        self.index_path = root / INDEX_FILE
        self.blobs_path = root / BLOBS_DIR
        self._artifacts: Optional[dict[str, RemoteArtifact]] = None
        self._companions: dict[str, RemoteCompanion] = {}

    @property
    def artifacts(self) -> dict[str, RemoteArtifact]:
        """Artifacts by id, loading the index if necessary."""
        if self._artifacts is None:
            self._load()
        assert self._artifacts is not None
        return self._artifacts

    @property
    def companions(self) -> dict[str, RemoteCompanion]:
        """Companion metadata by id, loading the index if necessary."""
        if self._artifacts is None:
            self._load()
        return self._companions

    def _load(self) -> None:
        """Load the index file."""
        self._artifacts = {}
        self._companions = {}

        if not self.index_path.exists():
            return

        try:
            with open(self.index_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise StoreError(f"Cannot read store index {self.index_path}: {e}") from e

        if data is None:
            return
        if not isinstance(data, dict):
            raise StoreError(f"Malformed store index: {self.index_path}")

        try:
            for artifact_id, item in (data.get("artifacts") or {}).items():
                self._artifacts[artifact_id] = RemoteArtifact(
                    id=artifact_id,
                    name=item["name"],
                    type=ArtifactType(item["type"]),
                    content=item.get("content", ""),
                    owner_id=item["owner_id"],
                )
            for companion_id, item in (data.get("companions") or {}).items():
                self._companions[companion_id] = RemoteCompanion(
                    id=companion_id,
                    artifact_id=item["artifact_id"],
                    path=item["path"],
                    blob_key=item["blob_key"],
                    size=item.get("size", 0),
                    mime_type=item.get("mime_type", "application/octet-stream"),
                )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise StoreError(f"Malformed store index {self.index_path}: {e}") from e

    def _save(self) -> None:
        """Write the index file atomically."""
        data: dict[str, Any] = {
            "version": "1",
            "updated": datetime.now().isoformat(),
            "artifacts": {
                a.id: {"name": a.name, "type": a.type.value, "owner_id": a.owner_id, "content": a.content}
                for a in self.artifacts.values()
            },
            "companions": {
                c.id: {k: v for k, v in asdict(c).items() if k != "id"} for c in self.companions.values()
            },
        }
        try:
            atomic_write(
                self.index_path,
                yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True),
            )
        except OSError as e:
            raise StoreError(f"Cannot write store index {self.index_path}: {e}") from e

    def _blob_path(self, key: str) -> Path:
        path = resolve_within(self.blobs_path, key)
        if path is None:
            raise StoreError(f"Invalid blob key: {key!r}")
        return path

    # Artifacts

    def list_owned(self, owner_id: str, types: Optional[Iterable[ArtifactType]] = None) -> list[RemoteArtifact]:
        wanted = set(types) if types is not None else None
        return [
            RemoteArtifact(**asdict(a))
            for a in self.artifacts.values()
            if a.owner_id == owner_id and (wanted is None or a.type in wanted)
        ]

    def get(self, artifact_id: str) -> Optional[RemoteArtifact]:
        artifact = self.artifacts.get(artifact_id)
        return RemoteArtifact(**asdict(artifact)) if artifact else None

    def create(self, owner_id: str, name: str, artifact_type: ArtifactType, content: str) -> RemoteArtifact:
        artifact = RemoteArtifact(
            id=uuid.uuid4().hex,
            name=name,
            type=artifact_type,
            content=content,
            owner_id=owner_id,
        )
        self.artifacts[artifact.id] = artifact
        self._save()
        return RemoteArtifact(**asdict(artifact))

    def update(self, artifact_id: str, content: str) -> Optional[RemoteArtifact]:
        artifact = self.artifacts.get(artifact_id)
        if artifact is None:
            return None
        artifact.content = content
        self._save()
        return RemoteArtifact(**asdict(artifact))

    def delete(self, artifact_id: str) -> bool:
        if self.artifacts.pop(artifact_id, None) is None:
            return False
        self._save()
        return True

    # Companions

    def list_companions(self, artifact_id: str) -> list[RemoteCompanion]:
        return [RemoteCompanion(**asdict(c)) for c in self.companions.values() if c.artifact_id == artifact_id]

    def put_companion(
        self,
        artifact_id: str,
        path: str,
        blob_key: str,
        size: int,
        mime_type: str,
    ) -> RemoteCompanion:
        companion = next(
            (c for c in self.companions.values() if c.artifact_id == artifact_id and c.path == path),
            None,
        )
        if companion is None:
            companion = RemoteCompanion(id=uuid.uuid4().hex, artifact_id=artifact_id, path=path, blob_key=blob_key)
            self.companions[companion.id] = companion

        companion.blob_key = blob_key
        companion.size = size
        companion.mime_type = mime_type
        self._save()
        return RemoteCompanion(**asdict(companion))

    def remove_companion(self, companion_id: str) -> bool:
        if self.companions.pop(companion_id, None) is None:
            return False
        self._save()
        return True

    # Blobs

    def put_blob(self, key: str, data: bytes, content_type: str) -> None:
        path = self._blob_path(key)
        try:
            ensure_dir(path.parent)
            atomic_write(path, data)
        except OSError as e:
            raise StoreError(f"Cannot write blob {key}: {e}") from e

    def delete_blob(self, key: str) -> None:
        """Delete a blob and any blob directories it leaves empty."""
        path = self._blob_path(key)
        try:
            path.unlink(missing_ok=True)
            parent = path.parent
            while parent != self.blobs_path and parent.is_dir() and not any(parent.iterdir()):
                parent.rmdir()
                parent = parent.parent
        except OSError as e:
            raise StoreError(f"Cannot delete blob {key}: {e}") from e

    def read_blob(self, key: str) -> Optional[bytes]:
        """Read blob bytes, or None if the key is absent."""
        path = self._blob_path(key)
        if not path.exists():
            return None
        return path.read_bytes()

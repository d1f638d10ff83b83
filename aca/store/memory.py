# ACA Memory Store
# In-process artifact and blob store

import copy
import uuid
from collections.abc import Iterable
from dataclasses import replace
from typing import Any, Optional

from aca.models import ArtifactType, RemoteArtifact, RemoteCompanion


class MemoryStore:
    """
    Artifact store and blob store held in memory.

    Implements both ArtifactStore and BlobStore; insertion order is kept
    so listings are deterministic.
    """

    def __init__(self) -> None:
        self.artifacts: dict[str, RemoteArtifact] = {}
        self.companions: dict[str, RemoteCompanion] = {}
        self.blobs: dict[str, tuple[bytes, str]] = {}

    # Artifacts

    def list_owned(self, owner_id: str, types: Optional[Iterable[ArtifactType]] = None) -> list[RemoteArtifact]:
        wanted = set(types) if types is not None else None
        return [
            replace(a)
            for a in self.artifacts.values()
            if a.owner_id == owner_id and (wanted is None or a.type in wanted)
        ]

    def get(self, artifact_id: str) -> Optional[RemoteArtifact]:
        artifact = self.artifacts.get(artifact_id)
        return replace(artifact) if artifact else None

    def create(self, owner_id: str, name: str, artifact_type: ArtifactType, content: str) -> RemoteArtifact:
        artifact = RemoteArtifact(
            id=uuid.uuid4().hex,
            name=name,
            type=artifact_type,
            content=content,
            owner_id=owner_id,
        )
        self.artifacts[artifact.id] = artifact
        return replace(artifact)

    def update(self, artifact_id: str, content: str) -> Optional[RemoteArtifact]:
        artifact = self.artifacts.get(artifact_id)
        if artifact is None:
            return None
        artifact.content = content
        return replace(artifact)

    def delete(self, artifact_id: str) -> bool:
        return self.artifacts.pop(artifact_id, None) is not None

    # Companions

    def list_companions(self, artifact_id: str) -> list[RemoteCompanion]:
        return [replace(c) for c in self.companions.values() if c.artifact_id == artifact_id]

    def put_companion(
        self,
        artifact_id: str,
        path: str,
        blob_key: str,
        size: int,
        mime_type: str,
    ) -> RemoteCompanion:
        for companion in self.companions.values():
            if companion.artifact_id == artifact_id and companion.path == path:
                companion.blob_key = blob_key
                companion.size = size
                companion.mime_type = mime_type
                return replace(companion)

        companion = RemoteCompanion(
            id=uuid.uuid4().hex,
            artifact_id=artifact_id,
            path=path,
            blob_key=blob_key,
            size=size,
            mime_type=mime_type,
        )
        self.companions[companion.id] = companion
        return replace(companion)

    def remove_companion(self, companion_id: str) -> bool:
        return self.companions.pop(companion_id, None) is not None

    # Blobs

    def put_blob(self, key: str, data: bytes, content_type: str) -> None:
        self.blobs[key] = (bytes(data), content_type)

    def delete_blob(self, key: str) -> None:
        self.blobs.pop(key, None)

    def snapshot(self) -> dict[str, Any]:
        """Deep copy of the full store contents."""
        return copy.deepcopy(
            {"artifacts": self.artifacts, "companions": self.companions, "blobs": self.blobs}
        )

# ACA Store Interfaces
# Collaborator interfaces for the remote artifact store and blob store

from collections.abc import Iterable
from typing import Optional, Protocol

from aca.models import ArtifactType, RemoteArtifact, RemoteCompanion


class StoreError(Exception):
    """Raised by stores when a read or write cannot be completed."""


def companion_blob_key(artifact_id: str, path: str) -> str:
    """Blob key for a skill companion file."""
    return f"skills/{artifact_id}/files/{path}"


class ArtifactStore(Protocol):
    """Persistence for artifact metadata and skill companion listings."""

    def list_owned(self, owner_id: str, types: Optional[Iterable[ArtifactType]] = None) -> list[RemoteArtifact]:
        """List artifacts owned by owner_id, optionally filtered by type."""
        ...

    def get(self, artifact_id: str) -> Optional[RemoteArtifact]:
        """Fetch one artifact by id."""
        ...

    def create(self, owner_id: str, name: str, artifact_type: ArtifactType, content: str) -> RemoteArtifact:
        """Create a new artifact."""
        ...

    def update(self, artifact_id: str, content: str) -> Optional[RemoteArtifact]:
        """Replace an artifact's content. Returns None if it does not exist."""
        ...

    def delete(self, artifact_id: str) -> bool:
        """Delete an artifact row. Returns False if it did not exist."""
        ...

    def list_companions(self, artifact_id: str) -> list[RemoteCompanion]:
        """List companion file metadata for a skill."""
        ...

    def put_companion(
        self,
        artifact_id: str,
        path: str,
        blob_key: str,
        size: int,
        mime_type: str,
    ) -> RemoteCompanion:
        """Create or replace companion metadata for (artifact_id, path)."""
        ...

    def remove_companion(self, companion_id: str) -> bool:
        """Delete companion metadata. Returns False if it did not exist."""
        ...


class BlobStore(Protocol):
    """Storage for companion file bytes."""

    def put_blob(self, key: str, data: bytes, content_type: str) -> None:
        """Store bytes under key, replacing any previous value."""
        ...

    def delete_blob(self, key: str) -> None:
        """Remove key if present."""
        ...

# ACA Store Module
# Artifact and blob stores used by the reconciliation engine

from aca.store.base import ArtifactStore, BlobStore, StoreError, companion_blob_key
from aca.store.directory import DirectoryStore
from aca.store.memory import MemoryStore

__all__ = [
    # Interfaces
    "ArtifactStore",
    "BlobStore",
    "StoreError",
    "companion_blob_key",
    # Implementations
    "MemoryStore",
    "DirectoryStore",
]

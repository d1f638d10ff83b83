# ACA Sync Backend Interface
# Common interface for the HTTP client and the in-process backend

from collections.abc import Iterable, Sequence
from typing import Protocol

from aca.models import ArtifactRecord, ArtifactType
from aca.sync.wire import DeleteResponse, SyncResponse


class SyncBackend(Protocol):
    """Where a sync driver sends its batches."""

    def sync(
        self,
        records: Sequence[ArtifactRecord],
        types: Iterable[ArtifactType] | None = None,
        dry_run: bool = False,
    ) -> SyncResponse:
        """Reconcile records remotely (preview only when dry_run)."""
        ...

    def delete_batch(self, ids: Sequence[str]) -> DeleteResponse:
        """Delete remote artifacts by id."""
        ...

    def validate(self) -> bool:
        """Check that the backend accepts our credentials."""
        ...

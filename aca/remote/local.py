# ACA Local Backend
# Runs the sync service in-process against a local store

from collections.abc import Iterable, Sequence

from aca.models import ArtifactRecord, ArtifactType
from aca.sync.service import SyncService
from aca.sync.wire import DeleteResponse, SyncResponse, build_sync_body


class LocalBackend:
    """
    Sync backend without a server.

    Requests go through the same wire validation as the HTTP API, so a
    local sync behaves like a remote one.
    """

    def __init__(self, service: SyncService, owner_id: str):
        self.service = service
        self.owner_id = owner_id

    def sync(
        self,
        records: Sequence[ArtifactRecord],
        types: Iterable[ArtifactType] | None = None,
        dry_run: bool = False,
    ) -> SyncResponse:
        types = list(types) if types else None
        body = build_sync_body(records, types, dry_run)
        return SyncResponse.model_validate(self.service.handle_sync(body, self.owner_id))

    def delete_batch(self, ids: Sequence[str]) -> DeleteResponse:
        body = {"config_ids": list(ids)}
        return DeleteResponse.model_validate(self.service.handle_delete(body, self.owner_id))

    def validate(self) -> bool:
        return True

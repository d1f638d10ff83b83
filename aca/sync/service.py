# ACA Sync Service
# Validates wire requests and runs them through the reconciliation engine

from typing import Any

from pydantic import BaseModel, ValidationError

from aca.sync.engine import ReconciliationEngine
from aca.sync.wire import DeleteRequest, DeleteResponse, SyncRequest, SyncResponse


class SyncRequestError(ValueError):
    """Raised when a sync or delete request body is malformed."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Invalid request: " + "; ".join(errors))


def _format_errors(exc: ValidationError) -> list[str]:
    """Flatten pydantic validation errors into readable messages."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return messages


def _parse(model: type[BaseModel], body: Any) -> Any:
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise SyncRequestError(_format_errors(e)) from e


class SyncService:
    """Request-level entry point for sync and batch delete."""

    def __init__(self, engine: ReconciliationEngine):
        self.engine = engine

    def handle_sync(self, body: Any, owner_id: str) -> dict[str, Any]:
        """
        Handle a sync request body.

        Args:
            body: Decoded JSON request body.
            owner_id: Authenticated owner.

        Returns:
            JSON-ready sync response.

        Raises:
            SyncRequestError: If the body is malformed.
        """
        request: SyncRequest = _parse(SyncRequest, body)
        records = [config.to_record() for config in request.configs]
        result = self.engine.reconcile(records, owner_id, request.types, dry_run=request.dry_run)
        return SyncResponse.from_result(result).to_json()

    def handle_delete(self, body: Any, owner_id: str) -> dict[str, Any]:
        """
        Handle a batch delete request body.

        Only artifacts owned by owner_id are deleted; other ids fail.

        Raises:
            SyncRequestError: If the body is malformed or config_ids is empty.
        """
        request: DeleteRequest = _parse(DeleteRequest, body)
        result = self.engine.delete_configs(request.config_ids, owner_id=owner_id)
        return DeleteResponse(deleted=result.deleted, failed=result.failed).to_json()

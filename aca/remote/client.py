# ACA API Client
# HTTP client for the config server sync endpoints

from collections.abc import Iterable, Sequence
from typing import Any

import httpx

from aca.models import ArtifactRecord, ArtifactType
from aca.sync.wire import DeleteResponse, SyncResponse, build_sync_body

SYNC_ENDPOINT = "/api/sync"
DELETE_ENDPOINT = "/api/sync/batch"


class ApiError(Exception):
    """Non-success response from the server."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(message)

    @property
    def is_auth_error(self) -> bool:
        """Check if the server rejected our credentials."""
        return self.status == 401


class ApiClient:
    """
    Synchronous client for the sync API.

    Authenticates with a bearer API key. Use as a context manager or
    call close() when done.
    """

    def __init__(
        self,
        server_url: str,
        api_key: str,
        timeout: float = 30,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize API client.

        Args:
            server_url: Server base URL (trailing slashes are ignored).
            api_key: API key sent as a bearer token.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self.server_url = server_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.server_url,
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._client.close()

    def _request(self, method: str, path: str, body: dict[str, Any], fallback: str) -> Any:
        response = self._client.request(method, path, json=body)
        if response.is_success:
            return response.json()
        raise ApiError(response.status_code, _error_message(response, fallback))

    def sync(
        self,
        records: Sequence[ArtifactRecord],
        types: Iterable[ArtifactType] | None = None,
        dry_run: bool = False,
    ) -> SyncResponse:
        """
        POST a sync batch.

        Args:
            records: Scanned artifacts.
            types: Optional type filter.
            dry_run: Preview only.

        Returns:
            Parsed sync response.

        Raises:
            ApiError: On a non-2xx response.
            httpx.HTTPError: On transport failure.
        """
        types = list(types) if types else None
        body = build_sync_body(records, types, dry_run)
        return SyncResponse.model_validate(self._request("POST", SYNC_ENDPOINT, body, "Sync failed"))

    def delete_batch(self, ids: Sequence[str]) -> DeleteResponse:
        """DELETE a batch of artifacts by id."""
        body = {"config_ids": list(ids)}
        return DeleteResponse.model_validate(self._request("DELETE", DELETE_ENDPOINT, body, "Delete failed"))

    def validate(self) -> bool:
        """
        Validate the API key with an empty dry-run sync.

        Returns:
            True if the server accepted the request.
        """
        try:
            response = self._client.post(SYNC_ENDPOINT, json=build_sync_body([], dry_run=True))
        except httpx.HTTPError:
            return False
        return response.is_success


def _error_message(response: httpx.Response, fallback: str) -> str:
    """Extract the server's error message, falling back to the reason phrase."""
    try:
        data = response.json()
    except ValueError:
        return response.reason_phrase or fallback
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return fallback

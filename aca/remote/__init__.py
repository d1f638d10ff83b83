# ACA Remote Module
# Sync backends: HTTP API client and in-process local backend

from aca.remote.base import SyncBackend
from aca.remote.client import ApiClient, ApiError
from aca.remote.local import LocalBackend

__all__ = [
    "SyncBackend",
    "ApiClient",
    "ApiError",
    "LocalBackend",
]

# ACA Sync Module
# Reconciliation engine, wire service, and sync driver

from aca.sync.driver import DriverOutcome, SyncDriver
from aca.sync.engine import ReconciliationEngine, content_differs
from aca.sync.service import SyncRequestError, SyncService
from aca.sync.wire import (
    CompanionPayload,
    ConfigPayload,
    DeleteRequest,
    DeleteResponse,
    SyncRequest,
    SyncResponse,
    build_sync_body,
)

__all__ = [
    # Engine
    "ReconciliationEngine",
    "content_differs",
    # Wire
    "CompanionPayload",
    "ConfigPayload",
    "SyncRequest",
    "SyncResponse",
    "DeleteRequest",
    "DeleteResponse",
    "build_sync_body",
    # Service
    "SyncService",
    "SyncRequestError",
    # Driver
    "SyncDriver",
    "DriverOutcome",
]

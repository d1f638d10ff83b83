"""ACA - Agent Config Adapter sync.

Keeps Claude Code commands, agents and skills from local .claude/
directories synchronized with a remote artifact store.
"""

__version__ = "1.0.0"
__author__ = "Agent Config Adapter contributors"

__all__ = [
    "__version__",
    "ArtifactRecord",
    "ArtifactType",
    "CompanionFile",
    "ScanWarning",
    "SyncResult",
    "ReconciliationEngine",
    "SyncDriver",
    "scan_root",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name in ("ArtifactRecord", "ArtifactType", "CompanionFile", "ScanWarning", "SyncResult"):
        from aca import models

        return getattr(models, name)
    if name == "scan_root":
        from aca.scan.scanner import scan_root

        return scan_root
    if name == "ReconciliationEngine":
        from aca.sync.engine import ReconciliationEngine

        return ReconciliationEngine
    if name == "SyncDriver":
        from aca.sync.driver import SyncDriver

        return SyncDriver
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

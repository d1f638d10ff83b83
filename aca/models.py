# ACA Data Model
# Artifact records, companion payloads, and sync result types

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from typing import Any, Optional, Union

# Placeholder id reported for artifacts that would be created by a dry run
DRY_RUN_ID = "dry-run"

# Root document every skill bundle must contain
SKILL_MARKER = "SKILL.md"

# Extension of command and agent documents
DOCUMENT_EXTENSION = ".md"

TEXT_EXTENSIONS = frozenset(
    {
        ".md",
        ".txt",
        ".json",
        ".yaml",
        ".yml",
        ".ts",
        ".js",
        ".py",
        ".sh",
        ".toml",
        ".csv",
        ".xml",
        ".html",
        ".css",
        ".tsx",
        ".jsx",
    }
)

MIME_TYPES: dict[str, str] = {
    ".md": "text/markdown",
    ".txt": "text/plain",
    ".json": "application/json",
    ".yaml": "text/yaml",
    ".yml": "text/yaml",
    ".js": "text/javascript",
    ".ts": "text/typescript",
    ".py": "text/x-python",
    ".sh": "text/x-shellscript",
    ".toml": "text/toml",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
}

DEFAULT_MIME_TYPE = "application/octet-stream"


class ArtifactType(str, Enum):
    """Kinds of syncable artifacts."""

    COMMAND = "command"
    AGENT = "agent"
    MCP_CONFIG = "mcp_config"
    SKILL = "skill"


def parse_types(value: str) -> list[ArtifactType]:
    """
    Parse a comma-separated artifact type filter.

    Args:
        value: CSV string such as "command,skill".

    Returns:
        List of artifact types in the given order, without duplicates.

    Raises:
        ValueError: If any entry is not a known artifact type, or no
            type is given at all.
    """
    names = [part.strip() for part in value.split(",") if part.strip()]
    valid = {t.value: t for t in ArtifactType}
    if not names:
        raise ValueError(f"No types given. Valid types: {', '.join(valid)}")
    invalid = [name for name in names if name not in valid]
    if invalid:
        raise ValueError(
            f"Invalid type(s): {', '.join(invalid)}. Valid types: {', '.join(valid)}"
        )

    types: list[ArtifactType] = []
    for name in names:
        if valid[name] not in types:
            types.append(valid[name])
    return types


def guess_mime_type(path: str) -> str:
    """Best-effort MIME type from a file extension."""
    return MIME_TYPES.get(PurePosixPath(path).suffix.lower(), DEFAULT_MIME_TYPE)


def is_text_path(path: str) -> bool:
    """Check if a companion path is transported as UTF-8 text."""
    return PurePosixPath(path).suffix.lower() in TEXT_EXTENSIONS


def normalize_content(content: str) -> str:
    """Normalize content for equality checks (outer whitespace, line endings)."""
    return content.strip().replace("\r\n", "\n")


@dataclass(frozen=True)
class TextPayload:
    """Companion file content stored as text."""

    text: str


@dataclass(frozen=True)
class BinaryPayload:
    """Companion file content stored as raw bytes."""

    data: bytes


Payload = Union[TextPayload, BinaryPayload]


@dataclass(frozen=True)
class CompanionFile:
    """A non-root file inside a skill bundle."""

    path: str
    payload: Payload
    mime_type: str = DEFAULT_MIME_TYPE

    @property
    def is_binary(self) -> bool:
        """Check if the payload holds binary data."""
        return isinstance(self.payload, BinaryPayload)

    @property
    def content(self) -> str:
        """Wire representation: text as-is, binary as base64."""
        if isinstance(self.payload, BinaryPayload):
            return base64.b64encode(self.payload.data).decode("ascii")
        return self.payload.text

    def to_bytes(self) -> bytes:
        """Raw bytes for blob upload."""
        if isinstance(self.payload, BinaryPayload):
            return self.payload.data
        return self.payload.text.encode("utf-8")

    def to_wire(self) -> dict[str, str]:
        """Convert to the sync-wire companion record."""
        return {"path": self.path, "content": self.content, "mimeType": self.mime_type}


@dataclass(frozen=True)
class ArtifactRecord:
    """
    A locally scanned artifact.

    Created fresh on every scan and never mutated. Only skills carry
    companion files; a bundle without extras has companion_files=None.
    """

    name: str
    type: ArtifactType
    content: str
    companion_files: Optional[tuple[CompanionFile, ...]] = None

    def __post_init__(self) -> None:
        if self.companion_files is not None and self.type != ArtifactType.SKILL:
            raise ValueError(f"Only skills can carry companion files: {self.name} ({self.type.value})")

    @property
    def key(self) -> str:
        """Reconciliation key."""
        return f"{self.name}:{self.type.value}"

    def to_wire(self) -> dict[str, Any]:
        """Convert to the sync-wire record."""
        data: dict[str, Any] = {"name": self.name, "type": self.type.value, "content": self.content}
        if self.companion_files is not None:
            data["companionFiles"] = [f.to_wire() for f in self.companion_files]
        return data


@dataclass(frozen=True)
class ScanWarning:
    """Non-fatal problem found while scanning."""

    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


@dataclass
class RemoteArtifact:
    """Artifact as held by the remote store."""

    id: str
    name: str
    type: ArtifactType
    content: str
    owner_id: str

    @property
    def key(self) -> str:
        """Reconciliation key."""
        return f"{self.name}:{self.type.value}"


@dataclass
class RemoteCompanion:
    """Companion file metadata as held by the remote store."""

    id: str
    artifact_id: str
    path: str
    blob_key: str
    size: int = 0
    mime_type: str = DEFAULT_MIME_TYPE


@dataclass(frozen=True)
class SyncResultItem:
    """One classified artifact."""

    name: str
    type: ArtifactType
    id: str


@dataclass(frozen=True)
class SyncFailure:
    """An artifact whose write failed during an applied sync."""

    name: str
    type: ArtifactType
    error: str


@dataclass
class SyncResult:
    """Classification of a sync batch."""

    created: list[SyncResultItem] = field(default_factory=list)
    updated: list[SyncResultItem] = field(default_factory=list)
    unchanged: list[SyncResultItem] = field(default_factory=list)
    deletion_candidates: list[SyncResultItem] = field(default_factory=list)
    failed: list[SyncFailure] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        """Check if anything would be created or updated."""
        return bool(self.created or self.updated)

    def summary(self) -> dict[str, int]:
        """Counts per classification."""
        return {
            "created": len(self.created),
            "updated": len(self.updated),
            "unchanged": len(self.unchanged),
            "deletionCandidates": len(self.deletion_candidates),
        }


@dataclass
class DeleteResult:
    """Outcome of a batch delete."""

    deleted: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

# ACA Sync Wire Models
# Pydantic models for the sync and delete request/response JSON

import base64
import binascii
from collections.abc import Iterable, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from aca.models import (
    ArtifactRecord,
    ArtifactType,
    BinaryPayload,
    CompanionFile,
    SyncResult,
    TextPayload,
    guess_mime_type,
    is_text_path,
)
from aca.utils.paths import normalize_relative


class WireModel(BaseModel):
    """Base for wire models: accepts field names and camelCase aliases."""

    model_config = ConfigDict(populate_by_name=True)

    def to_json(self) -> dict[str, Any]:
        """Serialize with wire aliases."""
        return self.model_dump(by_alias=True, mode="json")


class CompanionPayload(WireModel):
    """A skill companion file on the wire."""

    path: str = Field(description="Forward-slash path relative to the skill directory")
    content: str = Field(description="UTF-8 text for allowlisted extensions, base64 otherwise")
    mime_type: str | None = Field(default=None, alias="mimeType")

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Reject absolute paths and paths escaping the skill directory."""
        normalized = normalize_relative(v)
        if normalized is None:
            raise ValueError(f"Invalid companion path: {v!r}")
        return normalized

    @model_validator(mode="after")
    def validate_encoding(self) -> "CompanionPayload":
        """Binary companions must carry valid base64."""
        if not is_text_path(self.path):
            try:
                base64.b64decode(self.content, validate=True)
            except (binascii.Error, ValueError) as e:
                raise ValueError(f"Companion {self.path!r} is not valid base64: {e}") from e
        return self

    def to_companion(self) -> CompanionFile:
        """Decode into a companion file with an explicit payload variant."""
        mime_type = self.mime_type or guess_mime_type(self.path)
        if is_text_path(self.path):
            return CompanionFile(self.path, TextPayload(self.content), mime_type)
        return CompanionFile(self.path, BinaryPayload(base64.b64decode(self.content)), mime_type)


class ConfigPayload(WireModel):
    """One artifact on the wire."""

    name: str = Field(min_length=1)
    type: ArtifactType
    content: str
    companion_files: list[CompanionPayload] | None = Field(default=None, alias="companionFiles")

    @model_validator(mode="after")
    def validate_companions(self) -> "ConfigPayload":
        """Only skills carry companions, and each path appears once."""
        if self.companion_files is None:
            return self
        if self.type != ArtifactType.SKILL:
            raise ValueError(f"companionFiles is only allowed for skills, not {self.type.value}")
        seen: set[str] = set()
        for companion in self.companion_files:
            if companion.path in seen:
                raise ValueError(f"Duplicate companion path: {companion.path}")
            seen.add(companion.path)
        return self

    def to_record(self) -> ArtifactRecord:
        """Convert to a domain record."""
        companions = None
        if self.companion_files is not None:
            companions = tuple(c.to_companion() for c in self.companion_files)
        return ArtifactRecord(self.name, self.type, self.content, companions)


class SyncRequest(WireModel):
    """Batch sync request."""

    configs: list[ConfigPayload]
    types: list[ArtifactType] | None = None
    dry_run: bool = False


class SyncItem(WireModel):
    name: str
    type: ArtifactType
    id: str


class UnchangedItem(WireModel):
    name: str
    type: ArtifactType


class FailedItem(WireModel):
    name: str
    type: ArtifactType
    error: str


class SyncSummary(WireModel):
    created: int = 0
    updated: int = 0
    unchanged: int = 0
    deletion_candidates: int = Field(default=0, alias="deletionCandidates")


class SyncDetails(WireModel):
    created: list[SyncItem] = Field(default_factory=list)
    updated: list[SyncItem] = Field(default_factory=list)
    unchanged: list[UnchangedItem] = Field(default_factory=list)
    deletion_candidates: list[SyncItem] = Field(default_factory=list, alias="deletionCandidates")
    failed: list[FailedItem] = Field(default_factory=list)


class SyncResponse(WireModel):
    """Batch sync response."""

    success: bool = True
    summary: SyncSummary = Field(default_factory=SyncSummary)
    details: SyncDetails = Field(default_factory=SyncDetails)

    @classmethod
    def from_result(cls, result: SyncResult) -> "SyncResponse":
        """Build the response for an engine result."""
        return cls(
            success=not result.failed,
            summary=SyncSummary.model_validate(result.summary()),
            details=SyncDetails(
                created=[SyncItem(name=i.name, type=i.type, id=i.id) for i in result.created],
                updated=[SyncItem(name=i.name, type=i.type, id=i.id) for i in result.updated],
                unchanged=[UnchangedItem(name=i.name, type=i.type) for i in result.unchanged],
                deletion_candidates=[
                    SyncItem(name=i.name, type=i.type, id=i.id) for i in result.deletion_candidates
                ],
                failed=[FailedItem(name=f.name, type=f.type, error=f.error) for f in result.failed],
            ),
        )

    @property
    def has_changes(self) -> bool:
        """Check if anything would be created or updated."""
        return bool(self.details.created or self.details.updated)


class DeleteRequest(WireModel):
    """Batch delete request."""

    config_ids: list[str] = Field(min_length=1)


class DeleteResponse(WireModel):
    """Batch delete response."""

    deleted: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)


def build_sync_body(
    records: Sequence[ArtifactRecord],
    types: Iterable[ArtifactType] | None = None,
    dry_run: bool = False,
) -> dict[str, Any]:
    """
    Build the JSON body of a sync request.

    Args:
        records: Scanned artifacts.
        types: Optional type filter; omitted from the body when None.
        dry_run: Ask the server for a preview only.

    Returns:
        JSON-ready request body.
    """
    body: dict[str, Any] = {"configs": [r.to_wire() for r in records], "dry_run": dry_run}
    if types is not None:
        body["types"] = [t.value for t in types]
    return body

# ACA Sync Service Tests
# Tests for wire validation and request handling

import base64

import pytest

from aca.models import ArtifactType
from aca.store.memory import MemoryStore
from aca.sync.engine import ReconciliationEngine
from aca.sync.service import SyncRequestError, SyncService
from aca.sync.wire import CompanionPayload, ConfigPayload, SyncResponse, build_sync_body


@pytest.fixture
def service(engine: ReconciliationEngine) -> SyncService:
    return SyncService(engine)


def _body(*configs, **extra):
    return {"configs": list(configs), **extra}


class TestSyncRequestValidation:
    """Malformed request bodies are rejected before the engine runs."""

    def test_unknown_type(self, service: SyncService, memory_store: MemoryStore):
        with pytest.raises(SyncRequestError) as exc_info:
            service.handle_sync(_body({"name": "x", "type": "slash_command", "content": "c"}), "alice")

        assert "configs.0.type" in str(exc_info.value)
        assert memory_store.artifacts == {}

    def test_missing_configs(self, service: SyncService):
        with pytest.raises(SyncRequestError) as exc_info:
            service.handle_sync({"dry_run": True}, "alice")
        assert exc_info.value.errors

    def test_empty_name(self, service: SyncService):
        with pytest.raises(SyncRequestError):
            service.handle_sync(_body({"name": "", "type": "command", "content": "c"}), "alice")

    def test_companions_on_command_rejected(self, service: SyncService):
        config = {
            "name": "deploy",
            "type": "command",
            "content": "c",
            "companionFiles": [{"path": "a.txt", "content": "a"}],
        }
        with pytest.raises(SyncRequestError) as exc_info:
            service.handle_sync(_body(config), "alice")
        assert "only allowed for skills" in str(exc_info.value)

    def test_invalid_base64_rejected(self, service: SyncService):
        config = {
            "name": "writer",
            "type": "skill",
            "content": "# W",
            "companionFiles": [{"path": "logo.png", "content": "not base64!"}],
        }
        with pytest.raises(SyncRequestError) as exc_info:
            service.handle_sync(_body(config), "alice")
        assert "base64" in str(exc_info.value)

    @pytest.mark.parametrize("path", ["../escape.txt", "/etc/passwd", ""])
    def test_escaping_companion_path_rejected(self, service: SyncService, path: str):
        config = {
            "name": "writer",
            "type": "skill",
            "content": "# W",
            "companionFiles": [{"path": path, "content": "x"}],
        }
        with pytest.raises(SyncRequestError):
            service.handle_sync(_body(config), "alice")

    def test_duplicate_companion_path_rejected(self, service: SyncService):
        config = {
            "name": "writer",
            "type": "skill",
            "content": "# W",
            "companionFiles": [{"path": "a.txt", "content": "1"}, {"path": "./a.txt", "content": "2"}],
        }
        with pytest.raises(SyncRequestError) as exc_info:
            service.handle_sync(_body(config), "alice")
        assert "Duplicate companion path" in str(exc_info.value)

    def test_empty_delete_rejected(self, service: SyncService):
        with pytest.raises(SyncRequestError):
            service.handle_delete({"config_ids": []}, "alice")


class TestHandleSync:
    """Valid requests flow through the engine."""

    def test_create_then_unchanged(self, service: SyncService):
        body = _body({"name": "deploy", "type": "command", "content": "Do X"})

        first = service.handle_sync(body, "alice")
        second = service.handle_sync(body, "alice")

        assert first["success"] is True
        assert first["summary"] == {"created": 1, "updated": 0, "unchanged": 0, "deletionCandidates": 0}
        assert first["details"]["created"][0]["name"] == "deploy"
        assert first["details"]["created"][0]["type"] == "command"
        assert second["summary"]["unchanged"] == 1
        assert second["details"]["unchanged"] == [{"name": "deploy", "type": "command"}]

    def test_dry_run_writes_nothing(self, service: SyncService, memory_store: MemoryStore):
        body = _body({"name": "deploy", "type": "command", "content": "Do X"}, dry_run=True)

        response = service.handle_sync(body, "alice")

        assert response["details"]["created"][0]["id"] == "dry-run"
        assert memory_store.artifacts == {}

    def test_types_filter(self, service: SyncService):
        body = _body(
            {"name": "deploy", "type": "command", "content": "x"},
            {"name": "reviewer", "type": "agent", "content": "y"},
            types=["agent"],
        )

        response = service.handle_sync(body, "alice")

        assert [i["name"] for i in response["details"]["created"]] == ["reviewer"]

    def test_binary_companion_stored_as_bytes(self, service: SyncService, memory_store: MemoryStore):
        raw = b"\x89PNG\x00\xff"
        body = _body(
            {
                "name": "writer",
                "type": "skill",
                "content": "# W",
                "companionFiles": [
                    {"path": "img/logo.png", "content": base64.b64encode(raw).decode("ascii")},
                    {"path": "notes.txt", "content": "plain text", "mimeType": "text/plain"},
                ],
            }
        )

        response = service.handle_sync(body, "alice")

        skill_id = response["details"]["created"][0]["id"]
        assert memory_store.blobs[f"skills/{skill_id}/files/img/logo.png"] == (raw, "image/png")
        assert memory_store.blobs[f"skills/{skill_id}/files/notes.txt"] == (b"plain text", "text/plain")

    def test_response_parses_back(self, service: SyncService, content_root):
        from aca.scan.scanner import scan_root

        records = scan_root(content_root).records
        response = SyncResponse.model_validate(service.handle_sync(build_sync_body(records), "alice"))

        assert response.summary.created == len(records)
        assert response.has_changes


class TestScannedBatch:
    """Scanned roots always produce a request the service accepts."""

    def test_odd_companion_name_does_not_abort_batch(self, service: SyncService, temp_dir):
        from aca.remote.local import LocalBackend
        from aca.scan.scanner import scan_root

        root = temp_dir / ".claude"
        (root / "commands").mkdir(parents=True)
        (root / "commands" / "deploy.md").write_text("Do X", encoding="utf-8")
        (root / "skills" / "s").mkdir(parents=True)
        (root / "skills" / "s" / "SKILL.md").write_text("# S", encoding="utf-8")
        (root / "skills" / "s" / "a\\b.txt").write_text("odd", encoding="utf-8")

        result = scan_root(root)
        response = LocalBackend(service, "alice").sync(result.records, dry_run=True)

        assert len(result.warnings) == 1
        assert sorted(i.name for i in response.details.created) == ["deploy", "s"]


class TestHandleDelete:
    """Batch delete requests."""

    def test_owner_scoped(self, service: SyncService, memory_store: MemoryStore):
        mine = memory_store.create("alice", "a", ArtifactType.COMMAND, "a")
        theirs = memory_store.create("bob", "b", ArtifactType.COMMAND, "b")

        response = service.handle_delete({"config_ids": [mine.id, theirs.id]}, "alice")

        assert response == {"deleted": [mine.id], "failed": [theirs.id]}
        assert memory_store.get(theirs.id) is not None


class TestWireModels:
    """Direct tests of wire model conversions."""

    def test_companion_payload_normalizes_path(self):
        payload = CompanionPayload(path="docs//a.md", content="# A")
        companion = payload.to_companion()

        assert companion.path == "docs/a.md"
        assert companion.mime_type == "text/markdown"
        assert not companion.is_binary

    def test_config_payload_alias(self):
        payload = ConfigPayload.model_validate(
            {"name": "s", "type": "skill", "content": "# S", "companionFiles": []}
        )
        record = payload.to_record()

        assert record.type == ArtifactType.SKILL
        assert record.companion_files == ()

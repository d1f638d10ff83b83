# ACA Sync Driver Tests
# Tests for the preview, confirm, apply and delete flow

from io import StringIO
from pathlib import Path

import pytest
from rich.console import Console as RichConsole

from aca.models import ArtifactType
from aca.output.console import Console
from aca.remote.local import LocalBackend
from aca.scan.scanner import ScanRoot
from aca.store.memory import MemoryStore
from aca.sync.driver import SyncDriver
from aca.sync.engine import ReconciliationEngine
from aca.sync.service import SyncService

OWNER = "local"


class Answers:
    """Scripted confirmation prompt."""

    def __init__(self, *answers: bool):
        self.answers = list(answers)
        self.questions: list[str] = []

    def __call__(self, message: str) -> bool:
        self.questions.append(message)
        return self.answers.pop(0)


@pytest.fixture
def console() -> Console:
    """Console writing plain text to a buffer."""
    console = Console(colored=False)
    console._console = RichConsole(file=StringIO(), no_color=True, width=200)
    return console


@pytest.fixture
def backend(engine: ReconciliationEngine) -> LocalBackend:
    return LocalBackend(SyncService(engine), OWNER)


@pytest.fixture
def roots(content_root: Path) -> list[ScanRoot]:
    return [ScanRoot("project", content_root, "project")]


def _output(console: Console) -> str:
    console._console.file.seek(0)
    return console._console.file.read()


class TestSyncDriverRun:
    """Tests for SyncDriver.run."""

    def test_no_records(self, console, backend, temp_dir: Path):
        confirm = Answers()
        driver = SyncDriver(backend, console, confirm)

        outcome = driver.run([ScanRoot("project", temp_dir / "nothing", "project")])

        assert outcome.records == []
        assert outcome.preview is None
        assert "No artifacts found to sync." in _output(console)
        assert confirm.questions == []

    def test_dry_run_stops_after_preview(self, console, backend, roots, memory_store: MemoryStore):
        confirm = Answers()
        outcome = SyncDriver(backend, console, confirm).run(roots, dry_run=True)

        assert outcome.preview.summary.created == 5
        assert outcome.response is None
        assert memory_store.artifacts == {}
        assert confirm.questions == []
        output = _output(console)
        assert "[DRY RUN] Sync Summary" in output
        assert "Dry run complete. No changes made." in output

    def test_apply_after_confirm(self, console, backend, roots, memory_store: MemoryStore):
        confirm = Answers(True)
        outcome = SyncDriver(backend, console, confirm).run(roots)

        assert outcome.applied
        assert confirm.questions == ["Apply these changes?"]
        assert outcome.response.summary.created == 5
        assert len(memory_store.list_owned(OWNER)) == 5
        output = _output(console)
        assert "Found 5 artifact(s) to sync" in output
        assert "Sync complete!" in output

    def test_declined_confirm_cancels(self, console, backend, roots, memory_store: MemoryStore):
        outcome = SyncDriver(backend, console, Answers(False)).run(roots)

        assert outcome.cancelled
        assert not outcome.applied
        assert memory_store.artifacts == {}
        assert "Sync cancelled." in _output(console)

    def test_up_to_date_skips_confirm(self, console, backend, roots):
        SyncDriver(backend, console, Answers(True)).run(roots)
        confirm = Answers()

        outcome = SyncDriver(backend, console, confirm).run(roots)

        assert not outcome.applied
        assert confirm.questions == []
        assert "Everything is up to date!" in _output(console)

    def test_type_filter(self, console, backend, roots, memory_store: MemoryStore):
        SyncDriver(backend, console, Answers(True)).run(roots, [ArtifactType.AGENT])

        assert [a.name for a in memory_store.list_owned(OWNER)] == ["reviewer"]


class TestSyncDriverDeletion:
    """Deletion candidates after a sync."""

    @pytest.fixture
    def orphan(self, memory_store: MemoryStore):
        return memory_store.create(OWNER, "old-command", ArtifactType.COMMAND, "gone")

    def test_candidates_reported_without_delete_flag(self, console, backend, roots, orphan, memory_store):
        confirm = Answers(True)
        outcome = SyncDriver(backend, console, confirm).run(roots)

        assert confirm.questions == ["Apply these changes?"]
        assert outcome.delete_response is None
        assert memory_store.get(orphan.id) is not None
        output = _output(console)
        assert "1 remote artifact(s) have no local match" in output
        assert "old-command" in output
        assert "Use --delete flag" in output

    def test_delete_after_second_confirm(self, console, backend, roots, orphan, memory_store):
        confirm = Answers(True, True)
        outcome = SyncDriver(backend, console, confirm).run(roots, allow_delete=True)

        assert len(confirm.questions) == 2
        assert confirm.questions[1] == "Delete 1 remote artifact(s) that have no local match?"
        assert outcome.delete_response.deleted == [orphan.id]
        assert memory_store.get(orphan.id) is None
        assert "Deleted 1 artifact(s)" in _output(console)

    def test_delete_declined(self, console, backend, roots, orphan, memory_store):
        outcome = SyncDriver(backend, console, Answers(True, False)).run(roots, allow_delete=True)

        assert outcome.delete_response is None
        assert memory_store.get(orphan.id) is not None
        assert "Deletion skipped." in _output(console)

    def test_delete_when_up_to_date(self, console, backend, roots, memory_store):
        """Deletion is still offered when nothing else changed."""
        SyncDriver(backend, console, Answers(True)).run(roots)
        orphan = memory_store.create(OWNER, "stale", ArtifactType.AGENT, "x")

        outcome = SyncDriver(backend, console, Answers(True)).run(roots, allow_delete=True)

        assert not outcome.applied
        assert outcome.delete_response.deleted == [orphan.id]

    def test_dry_run_never_deletes(self, console, backend, roots, orphan, memory_store):
        confirm = Answers()
        SyncDriver(backend, console, confirm).run(roots, dry_run=True, allow_delete=True)

        assert confirm.questions == []
        assert memory_store.get(orphan.id) is not None


class TestSyncDriverScan:
    """Tests for SyncDriver.scan."""

    def test_warnings_summarized(self, console, backend, temp_dir: Path):
        root = temp_dir / ".claude"
        (root / "skills" / "broken").mkdir(parents=True)

        records = SyncDriver(backend, console, Answers()).scan([ScanRoot("global", root, "global")])

        assert records == []
        assert "1 warning(s) during global scan (use --verbose to see)" in _output(console)

    def test_verbose_lists_records(self, backend, roots):
        console = Console(verbose=True, colored=False)
        console._console = RichConsole(file=StringIO(), no_color=True, width=200)

        SyncDriver(backend, console, Answers()).scan(roots)

        output = _output(console)
        assert "Scanned from project" in output
        assert "writer (+2 files)" in output

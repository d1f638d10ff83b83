# ACA Test Fixtures
# Pytest fixtures for ACA tests

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
import yaml

from aca.store.memory import MemoryStore
from aca.sync.engine import ReconciliationEngine

# Smallest valid PNG header plus some non-UTF-8 bytes
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\xff\xfe\x00\x01"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("ACA_CONFIG", raising=False)
    return home


@pytest.fixture
def content_root(temp_dir: Path) -> Path:
    """Create a content root with commands, agents and skills."""
    root = temp_dir / "content" / ".claude"

    commands = root / "commands"
    (commands / "git").mkdir(parents=True)
    (commands / "deploy.md").write_text("Do X\n", encoding="utf-8")
    (commands / "git" / "commit.md").write_text("# Commit\n\nWrite a commit message.\n", encoding="utf-8")
    (commands / "notes.txt").write_text("not a command", encoding="utf-8")

    agents = root / "agents"
    agents.mkdir()
    (agents / "reviewer.md").write_text("---\nname: reviewer\n---\nReview code.\n", encoding="utf-8")

    writer = root / "skills" / "writer"
    (writer / "templates").mkdir(parents=True)
    (writer / "SKILL.md").write_text("---\nname: writer\n---\n# Writer\n", encoding="utf-8")
    (writer / "templates" / "outline.txt").write_text("1. Intro\n2. Body\n", encoding="utf-8")
    (writer / "logo.png").write_bytes(PNG_BYTES)

    plain = root / "skills" / "plain"
    plain.mkdir()
    (plain / "SKILL.md").write_text("# Plain skill\n", encoding="utf-8")

    return root


@pytest.fixture
def memory_store() -> MemoryStore:
    """Create an empty in-memory store."""
    return MemoryStore()


@pytest.fixture
def engine(memory_store: MemoryStore) -> ReconciliationEngine:
    """Create an engine over the in-memory store."""
    return ReconciliationEngine(memory_store, memory_store)


@pytest.fixture
def sample_config() -> dict:
    """Create sample configuration dict."""
    return {
        "server_url": "https://aca.example.com/",
        "api_key": "aca_test_key_1234567890",
        "owner_id": "local",
        "timeout": 5,
        "output": {"verbose": False, "colored": False},
    }


@pytest.fixture
def config_file(temp_home: Path, sample_config: dict, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a configuration file and point ACA_CONFIG at it."""
    config_dir = temp_home / ".config" / "aca"
    config_dir.mkdir(parents=True)
    config_path = config_dir / "config.yaml"

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(sample_config, f, default_flow_style=False)

    monkeypatch.setenv("ACA_CONFIG", str(config_path))
    return config_path

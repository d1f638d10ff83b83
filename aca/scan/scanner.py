# ACA Local Scan Orchestrator
# Scans one content root for commands, agents, and skills

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from aca.models import ArtifactRecord, ArtifactType, ScanWarning
from aca.scan.skills import package_skills
from aca.scan.walker import is_directory, walk_directory

COMMANDS_DIR = "commands"
AGENTS_DIR = "agents"
SKILLS_DIR = "skills"

# Name of the content root inside a home or project directory
CONTENT_DIR = ".claude"


@dataclass
class ScanResult:
    """Artifacts and warnings produced by scanning one root."""

    records: list[ArtifactRecord] = field(default_factory=list)
    warnings: list[ScanWarning] = field(default_factory=list)

    def count_by_type(self) -> dict[ArtifactType, int]:
        """Number of records per artifact type."""
        counts: dict[ArtifactType, int] = {}
        for record in self.records:
            counts[record.type] = counts.get(record.type, 0) + 1
        return counts


@dataclass(frozen=True)
class ScanRoot:
    """A content root to scan, with a display label."""

    label: str
    path: Path
    scope: str = "custom"


def scan_root(root: Path) -> ScanResult:
    """
    Scan a content root for all artifact types.

    Uses a fresh visited set, so cycle detection never leaks between roots.
    Missing category directories are skipped without a warning.

    Args:
        root: Directory containing optional commands/, agents/, skills/.

    Returns:
        ScanResult with all records and warnings. Never raises.
    """
    result = ScanResult()
    visited: set[str] = set()

    for dirname, artifact_type in ((COMMANDS_DIR, ArtifactType.COMMAND), (AGENTS_DIR, ArtifactType.AGENT)):
        category_dir = root / dirname
        if is_directory(category_dir):
            walk_directory(category_dir, artifact_type, result.records, result.warnings, visited)

    skills_dir = root / SKILLS_DIR
    if is_directory(skills_dir):
        package_skills(skills_dir, result.records, result.warnings, visited)

    return result


def default_roots(*, use_global: bool, use_project: bool, cwd: Optional[Path] = None) -> list[ScanRoot]:
    """
    Build the list of roots for a sync run.

    Args:
        use_global: Include ~/.claude.
        use_project: Include ./.claude relative to cwd.
        cwd: Project directory (defaults to the current directory).

    Returns:
        Roots in global-then-project order.
    """
    roots: list[ScanRoot] = []
    if use_global:
        roots.append(ScanRoot(label="~/.claude/ (global)", path=Path.home() / CONTENT_DIR, scope="global"))
    if use_project:
        base = cwd if cwd is not None else Path.cwd()
        roots.append(
            ScanRoot(label="./.claude/ (project)", path=base.resolve() / CONTENT_DIR, scope="project")
        )
    return roots

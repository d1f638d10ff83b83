# ACA Directory Walker
# Recursive scan of command/agent directories with cycle detection

import os
import stat
from pathlib import Path
from typing import Optional

from aca.models import DOCUMENT_EXTENSION, ArtifactRecord, ArtifactType, ScanWarning
from aca.scan.classifier import classify_entry


def canonicalize(path: Path, warnings: list[ScanWarning]) -> Optional[str]:
    """
    Resolve path to its fully symlink-resolved absolute form.

    Args:
        path: Directory to canonicalize.
        warnings: Accumulator for scan warnings.

    Returns:
        Canonical path, or None if it cannot be resolved.
    """
    try:
        return os.path.realpath(path, strict=True)
    except OSError as e:
        warnings.append(ScanWarning(str(path), f"Cannot resolve real path: {e.strerror or e}"))
        return None


def enter_directory(path: Path, warnings: list[ScanWarning], visited: set[str]) -> bool:
    """
    Register a directory in the visited set before descending into it.

    Returns:
        False if the directory cannot be resolved or was already visited.
    """
    real = canonicalize(path, warnings)
    if real is None:
        return False
    if real in visited:
        warnings.append(ScanWarning(str(path), "Already visited (circular symlink), skipping"))
        return False
    visited.add(real)
    return True


def list_entries(path: Path, warnings: list[ScanWarning]) -> Optional[list[str]]:
    """List directory entry names in sorted order, or None on failure."""
    try:
        return sorted(os.listdir(path))
    except OSError as e:
        warnings.append(ScanWarning(str(path), f"Cannot list directory: {e.strerror or e}"))
        return None


def stat_entry(path: Path) -> Optional[os.stat_result]:
    """Stat an entry following a single-level symlink, or None on failure."""
    try:
        return path.stat()
    except OSError:
        return None


def read_text(
    path: Path,
    warnings: list[ScanWarning],
    what: str = "file",
    errors: str = "strict",
) -> Optional[str]:
    """Read a file as UTF-8 text, or None on failure.

    With errors="replace", invalid bytes become U+FFFD instead of failing.
    """
    try:
        return path.read_text(encoding="utf-8", errors=errors)
    except (OSError, UnicodeDecodeError) as e:
        warnings.append(ScanWarning(str(path), f"Cannot read {what}: {e}"))
        return None


def read_bytes(path: Path, warnings: list[ScanWarning], what: str = "file") -> Optional[bytes]:
    """Read a file as raw bytes, or None on failure."""
    try:
        return path.read_bytes()
    except OSError as e:
        warnings.append(ScanWarning(str(path), f"Cannot read {what}: {e.strerror or e}"))
        return None


def is_directory(path: Path) -> bool:
    """Check if path exists and is a directory (following symlinks)."""
    st = stat_entry(path)
    return st is not None and stat.S_ISDIR(st.st_mode)


def join_name(prefix: str, segment: str) -> str:
    """Build a hierarchical artifact name."""
    return f"{prefix}:{segment}" if prefix else segment


def walk_directory(
    dir_path: Path,
    artifact_type: ArtifactType,
    records: list[ArtifactRecord],
    warnings: list[ScanWarning],
    visited: set[str],
    name_prefix: str = "",
) -> None:
    """
    Recursively collect document artifacts from a directory.

    Subdirectories extend the name prefix, so commands/git/commit.md becomes
    "git:commit". Each directory is entered at most once per visited set.
    Problems are appended to warnings; nothing is raised.

    Args:
        dir_path: Directory to walk.
        artifact_type: Type assigned to every record found.
        records: Accumulator for artifacts.
        warnings: Accumulator for scan warnings.
        visited: Canonical paths already entered during this scan.
        name_prefix: Colon-joined name of the enclosing directories.
    """
    if not enter_directory(dir_path, warnings, visited):
        return

    entries = list_entries(dir_path, warnings)
    if entries is None:
        return

    if not entries:
        warnings.append(ScanWarning(str(dir_path), "Empty directory, skipping"))
        return

    for entry in entries:
        entry_path = dir_path / entry

        classification = classify_entry(entry_path)
        if not classification.usable:
            warnings.append(ScanWarning(str(entry_path), classification.reason))
            continue

        st = stat_entry(entry_path)
        if st is None:
            warnings.append(ScanWarning(str(entry_path), "Cannot stat entry, skipping"))
            continue

        if stat.S_ISDIR(st.st_mode):
            walk_directory(
                entry_path,
                artifact_type,
                records,
                warnings,
                visited,
                name_prefix=join_name(name_prefix, entry),
            )
            continue

        stem, ext = os.path.splitext(entry)
        if not stat.S_ISREG(st.st_mode) or ext.lower() != DOCUMENT_EXTENSION:
            continue

        content = read_text(entry_path, warnings)
        if content is None:
            continue

        records.append(
            ArtifactRecord(
                name=join_name(name_prefix, stem),
                type=artifact_type,
                content=content,
            )
        )

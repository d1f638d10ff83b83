# ACA Skill Packager
# Collects skill bundles: root document plus text/binary companion files

import stat
from pathlib import Path, PurePosixPath
from typing import Optional

from aca.models import (
    SKILL_MARKER,
    ArtifactRecord,
    ArtifactType,
    BinaryPayload,
    CompanionFile,
    Payload,
    ScanWarning,
    TextPayload,
    guess_mime_type,
    is_text_path,
)
from aca.scan.classifier import classify_entry
from aca.scan.walker import enter_directory, list_entries, read_bytes, read_text, stat_entry
from aca.utils.paths import normalize_relative


def find_marker(bundle_dir: Path, entries: list[str]) -> Optional[str]:
    """
    Find the bundle's root document among its top-level entries.

    Matching is case-insensitive; an exact-case match wins over others.

    Returns:
        Entry name of the marker file, or None if absent.
    """
    candidates = [e for e in entries if e.lower() == SKILL_MARKER.lower()]
    if SKILL_MARKER in candidates:
        candidates = [SKILL_MARKER]

    for name in candidates:
        path = bundle_dir / name
        if not classify_entry(path).usable:
            continue
        st = stat_entry(path)
        if st is not None and stat.S_ISREG(st.st_mode):
            return name
    return None


def read_payload(path: Path, rel_path: str, warnings: list[ScanWarning]) -> Optional[Payload]:
    """Read a companion file as text or binary depending on its extension."""
    if is_text_path(rel_path):
        # Lossy decode keeps the file in the bundle so it is never pruned as stale
        text = read_text(path, warnings, what="companion file", errors="replace")
        return TextPayload(text) if text is not None else None

    data = read_bytes(path, warnings, what="companion file")
    return BinaryPayload(data) if data is not None else None


def collect_companions(
    bundle_dir: Path,
    current_dir: Path,
    marker: str,
    companions: list[CompanionFile],
    warnings: list[ScanWarning],
    visited: set[str],
) -> None:
    """
    Recursively collect companion files below a bundle directory.

    Args:
        bundle_dir: Root of the skill bundle (paths are relative to it).
        current_dir: Directory being walked.
        marker: Entry name of the root document, excluded from companions.
        companions: Accumulator for companion files.
        warnings: Accumulator for scan warnings.
        visited: Canonical paths already entered during this scan.
    """
    entries = list_entries(current_dir, warnings)
    if entries is None:
        return

    for entry in entries:
        entry_path = current_dir / entry
        rel_path = PurePosixPath(*entry_path.relative_to(bundle_dir).parts).as_posix()

        if rel_path == marker:
            continue

        if normalize_relative(rel_path) != rel_path:
            warnings.append(ScanWarning(str(entry_path), "Companion path cannot be sent as a relative path, skipping"))
            continue

        classification = classify_entry(entry_path)
        if not classification.usable:
            warnings.append(ScanWarning(str(entry_path), classification.reason))
            continue

        st = stat_entry(entry_path)
        if st is None:
            warnings.append(ScanWarning(str(entry_path), "Cannot stat entry, skipping"))
            continue

        if stat.S_ISDIR(st.st_mode):
            if enter_directory(entry_path, warnings, visited):
                collect_companions(bundle_dir, entry_path, marker, companions, warnings, visited)
            continue

        if not stat.S_ISREG(st.st_mode):
            continue

        payload = read_payload(entry_path, rel_path, warnings)
        if payload is None:
            continue

        companions.append(CompanionFile(path=rel_path, payload=payload, mime_type=guess_mime_type(rel_path)))


def package_skill(bundle_dir: Path, warnings: list[ScanWarning], visited: set[str]) -> Optional[ArtifactRecord]:
    """
    Package one skill bundle directory.

    A bundle without its root document is skipped entirely.

    Returns:
        ArtifactRecord for the skill, or None if the bundle is unusable.
    """
    if not enter_directory(bundle_dir, warnings, visited):
        return None

    entries = list_entries(bundle_dir, warnings)
    if entries is None:
        return None

    marker = find_marker(bundle_dir, entries)
    if marker is None:
        warnings.append(ScanWarning(str(bundle_dir), f"Skill directory missing {SKILL_MARKER}, skipping"))
        return None

    content = read_text(bundle_dir / marker, warnings, what=SKILL_MARKER)
    if content is None:
        return None

    companions: list[CompanionFile] = []
    collect_companions(bundle_dir, bundle_dir, marker, companions, warnings, visited)

    return ArtifactRecord(
        name=bundle_dir.name,
        type=ArtifactType.SKILL,
        content=content,
        companion_files=tuple(companions) if companions else None,
    )


def package_skills(
    skills_root: Path,
    records: list[ArtifactRecord],
    warnings: list[ScanWarning],
    visited: set[str],
) -> None:
    """
    Package every skill bundle directly below a skills directory.

    Skills form a flat namespace: each subdirectory is one bundle named
    after the directory. Non-directory children are ignored.

    Args:
        skills_root: Directory containing skill bundles.
        records: Accumulator for artifacts.
        warnings: Accumulator for scan warnings.
        visited: Canonical paths already entered during this scan.
    """
    if not enter_directory(skills_root, warnings, visited):
        return

    entries = list_entries(skills_root, warnings)
    if entries is None:
        return

    for entry in entries:
        bundle_dir = skills_root / entry

        classification = classify_entry(bundle_dir)
        if not classification.usable:
            warnings.append(ScanWarning(str(bundle_dir), classification.reason))
            continue

        st = stat_entry(bundle_dir)
        if st is None or not stat.S_ISDIR(st.st_mode):
            continue

        record = package_skill(bundle_dir, warnings, visited)
        if record is not None:
            records.append(record)

# ACA Path Classifier
# Decides whether a filesystem entry is a usable artifact source

import os
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class EntryKind(str, Enum):
    """Classification outcome for a directory entry."""

    USABLE = "usable"
    BROKEN_SYMLINK = "broken_symlink"
    CHAINED_SYMLINK = "chained_symlink"
    UNREADABLE = "unreadable"


@dataclass(frozen=True)
class Classification:
    """Result of classifying an entry. Carries the link target for symlinks."""

    kind: EntryKind
    target: Optional[str] = None
    error: Optional[str] = None

    @property
    def usable(self) -> bool:
        """Check if the entry may be used."""
        return self.kind == EntryKind.USABLE

    @property
    def reason(self) -> str:
        """Human-readable skip reason (empty for usable entries)."""
        if self.kind == EntryKind.BROKEN_SYMLINK:
            return f'Broken symlink (target "{self.target}" not found), skipping'
        if self.kind == EntryKind.CHAINED_SYMLINK:
            return f'Chained symlink (target "{self.target}" is also a symlink), skipping'
        if self.kind == EntryKind.UNREADABLE:
            return f"Cannot inspect entry: {self.error}"
        return ""


USABLE = Classification(EntryKind.USABLE)


def classify_entry(path: Path) -> Classification:
    """
    Classify a directory entry, applying the symlink policy.

    Regular files and directories are always usable. A symlink is resolved
    exactly one level: its target must exist and must not be a symlink
    itself. Chains are never followed.

    Args:
        path: Entry to classify.

    Returns:
        Classification of the entry. No warnings are emitted here.
    """
    try:
        st = os.lstat(path)
    except OSError as e:
        return Classification(EntryKind.UNREADABLE, error=e.strerror or str(e))

    if not stat.S_ISLNK(st.st_mode):
        return USABLE

    try:
        target = os.readlink(path)
    except OSError as e:
        return Classification(EntryKind.UNREADABLE, error=e.strerror or str(e))

    # Absolute targets replace the parent in the join
    resolved = os.path.join(os.path.dirname(path), target)

    try:
        target_st = os.lstat(resolved)
    except OSError:
        return Classification(EntryKind.BROKEN_SYMLINK, target=target)

    if stat.S_ISLNK(target_st.st_mode):
        return Classification(EntryKind.CHAINED_SYMLINK, target=target)

    return Classification(EntryKind.USABLE, target=target)

# ACA Utilities Module
# Helper functions for path handling

from aca.utils.paths import (
    atomic_write,
    ensure_dir,
    expand_path,
    normalize_relative,
    resolve_within,
)

__all__ = [
    "atomic_write",
    "ensure_dir",
    "expand_path",
    "normalize_relative",
    "resolve_within",
]

# ACA Path Utilities
# Path expansion, containment checks, and atomic writes

import os
import tempfile
from pathlib import Path, PurePosixPath
from typing import Optional


def expand_path(path: str | Path) -> Path:
    """
    Expand ~ and environment variables in path.

    Args:
        path: Path string or Path object.

    Returns:
        Expanded, absolute Path object.
    """
    path_str = str(path)
    # Expand ~ first, then environment variables
    path_str = os.path.expanduser(path_str)
    path_str = os.path.expandvars(path_str)
    return Path(path_str).resolve()


def ensure_dir(path: Path) -> Path:
    """
    Ensure directory exists, creating if necessary.

    Args:
        path: Directory path.

    Returns:
        The path that was ensured.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def atomic_write(path: Path, content: str | bytes, *, encoding: str = "utf-8") -> None:
    """
    Atomically write content to file.

    Uses a temporary file and atomic rename.

    Args:
        path: Target file path.
        content: Content to write (str or bytes).
        encoding: Encoding for string content (default utf-8).
    """
    ensure_dir(path.parent)

    # Create temp file in same directory for atomic rename
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        if isinstance(content, str):
            with os.fdopen(fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
        # Atomic rename
        os.replace(temp_path, path)
    except BaseException:
        # Cleanup on failure
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise


def normalize_relative(path: str) -> Optional[str]:
    """
    Normalize a forward-slash relative path.

    Collapses duplicate slashes and "." segments.

    Returns:
        Normalized path, or None if the path is empty, absolute,
        or escapes its base with "..".
    """
    if not path or path.startswith("/") or "\\" in path:
        return None

    parts = [part for part in PurePosixPath(path).parts if part != "."]
    if not parts or ".." in parts:
        return None
    return "/".join(parts)


def resolve_within(base: Path, relative: str) -> Optional[Path]:
    """
    Join a relative path onto base, refusing anything outside base.

    Returns:
        The joined path, or None if it escapes base.
    """
    normalized = normalize_relative(relative)
    if normalized is None:
        return None
    return base.joinpath(*normalized.split("/"))

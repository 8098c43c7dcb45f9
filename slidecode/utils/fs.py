"""File system utilities for slidecode.

Provides file identifiers, path handling, and source discovery.
"""

import re
import secrets
import shutil
import time
from pathlib import Path

from slidecode.config.constants import PRESENTATION_EXTENSIONS

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")
_RANDOM_BOUND = 10**9


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path

    Returns:
        The directory path
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def sanitize_stem(file_name: str) -> str:
    """Reduce a file name's base name to ASCII letters, digits and underscores.

    Args:
        file_name: Original file name, with or without extension

    Returns:
        Sanitized base name (``"file"`` when nothing usable remains)
    """
    stem = Path(file_name).stem
    sanitized = _NON_ALNUM.sub("_", stem)
    return sanitized or "file"


def generate_file_id(file_name: str) -> str:
    """Generate a unique identifier for one processed file.

    Format: ``<sanitized-stem>-<time_ns>-<random>``. The nanosecond clock
    plus a 30-bit random draw keeps identifiers distinct even for identical
    names staged in the same run.

    Args:
        file_name: Original file name

    Returns:
        File identifier used as the key for staged, converted and code files
    """
    return f"{sanitize_stem(file_name)}-{time.time_ns()}-{secrets.randbelow(_RANDOM_BOUND)}"


def get_unique_path(path: Path) -> Path:
    """Get a unique path by adding a counter suffix if path exists.

    Args:
        path: Original path

    Returns:
        Unique path that doesn't exist
    """
    if not path.exists():
        return path

    stem = path.stem
    suffix = path.suffix
    parent = path.parent

    counter = 1
    while True:
        new_path = parent / f"{stem}_{counter}{suffix}"
        if not new_path.exists():
            return new_path
        counter += 1


def remove_path(path: Path) -> bool:
    """Remove a file or directory tree if it exists.

    Returns:
        True if something was removed
    """
    if path.is_dir():
        shutil.rmtree(path)
        return True
    if path.exists():
        path.unlink()
        return True
    return False


def directory_size(directory: Path) -> int:
    """Total size in bytes of all files below a directory."""
    return sum(f.stat().st_size for f in directory.rglob("*") if f.is_file())


def is_hidden(path: Path) -> bool:
    """Check if a path is hidden (dot-file)."""
    return path.name.startswith(".")


def discover_source_files(
    directory: Path,
    recursive: bool = False,
    extensions: list[str] | set[str] | None = None,
) -> list[Path]:
    """Discover slide decks in a directory.

    Extension matching is case-insensitive. Dot-files are skipped.

    Args:
        directory: Directory to search
        recursive: Search subdirectories
        extensions: Extensions to include (default: presentation formats)

    Returns:
        Files sorted by path
    """
    wanted = {e.lower() for e in (extensions or PRESENTATION_EXTENSIONS)}
    candidates = directory.rglob("*") if recursive else directory.iterdir()

    files = [
        f
        for f in candidates
        if f.is_file() and f.suffix.lower() in wanted and not is_hidden(f)
    ]
    files.sort()
    return files


def format_size(size: int | float) -> str:
    """Format byte size as human-readable string."""
    size_f = float(size)
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size_f < 1024:
            return f"{size_f:.1f} {unit}"
        size_f /= 1024
    return f"{size_f:.1f} PB"

"""Utility module for slidecode."""

from slidecode.utils.fs import (
    directory_size,
    discover_source_files,
    ensure_directory,
    format_size,
    generate_file_id,
    get_unique_path,
    is_hidden,
    remove_path,
    sanitize_stem,
)

__all__ = [
    "ensure_directory",
    "sanitize_stem",
    "generate_file_id",
    "get_unique_path",
    "remove_path",
    "directory_size",
    "is_hidden",
    "discover_source_files",
    "format_size",
]

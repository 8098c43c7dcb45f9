"""CLI callback functions."""

from pathlib import Path

import typer


def validate_output_file(value: Path | None) -> Path | None:
    """Reject output paths that point at an existing directory."""
    if value is None:
        return None

    if value.exists() and value.is_dir():
        raise typer.BadParameter(f"Output path is a directory: {value}")

    return value


def validate_file_id(value: str) -> str:
    """File identifiers are single path components."""
    if not value or value in (".", "..") or "/" in value or "\\" in value:
        raise typer.BadParameter(f"Invalid file identifier: {value!r}")

    return value

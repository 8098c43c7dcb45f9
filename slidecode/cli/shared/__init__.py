"""Shared CLI utilities for the batch and qrcode commands."""

from slidecode.cli.shared.options import StyleCliOptions, resolve_cli_style

__all__ = ["StyleCliOptions", "resolve_cli_style"]

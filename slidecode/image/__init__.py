"""QR code image rendering for slidecode."""

from slidecode.image.compositor import (
    CodeImageCompositor,
    escape_markup,
    format_caption,
)
from slidecode.image.style import StyleConfig, StyleOptions, resolve_style

__all__ = [
    "CodeImageCompositor",
    "StyleConfig",
    "StyleOptions",
    "escape_markup",
    "format_caption",
    "resolve_style",
]

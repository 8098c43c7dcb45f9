"""Shared QR code style options for the batch and qrcode commands."""

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Annotated

import typer
from pydantic import ValidationError
from rich.console import Console

from slidecode.config.constants import STYLE_VARIANTS
from slidecode.image.style import StyleConfig, StyleOptions, resolve_style
from slidecode.utils.logging import get_logger

if TYPE_CHECKING:
    from slidecode.config.settings import SlidecodeSettings

log = get_logger(__name__)

StyleVariantOption = Annotated[
    str | None,
    typer.Option("--style", help=f"Style variant. Options: {', '.join(STYLE_VARIANTS)}"),
]
CodeSizeOption = Annotated[
    int | None,
    typer.Option("--code-size", help="QR code edge length in pixels."),
]
ForegroundOption = Annotated[
    str | None,
    typer.Option("--foreground", help="QR module color (e.g. #000000)."),
]
BackgroundOption = Annotated[
    str | None,
    typer.Option("--background", help="Card background color (e.g. #FFFFFF)."),
]
CaptionColorOption = Annotated[
    str | None,
    typer.Option("--caption-color", help="Caption text color."),
]
CaptionSizeOption = Annotated[
    int | None,
    typer.Option("--caption-size", help="Caption font size in pixels."),
]
CaptionFontOption = Annotated[
    str | None,
    typer.Option("--caption-font", help="Caption font family (TrueType)."),
]


@dataclass
class StyleCliOptions:
    """Style overrides collected from the command line.

    Unset fields fall back to the ``qrcode`` section of the settings.
    """

    style_variant: str | None = None
    code_size: int | None = None
    foreground_color: str | None = None
    background_color: str | None = None
    caption_color: str | None = None
    caption_size: int | None = None
    caption_font: str | None = None

    def to_style_options(self) -> StyleOptions:
        """Build the partial override model.

        Raises:
            pydantic.ValidationError: If a value is out of range
        """
        return StyleOptions(**{k: v for k, v in asdict(self).items() if v is not None})


def resolve_cli_style(
    options: StyleCliOptions,
    settings: "SlidecodeSettings",
    console: Console,
) -> StyleConfig:
    """Resolve CLI style overrides against the configured defaults.

    Raises:
        typer.Exit: If the merged style is invalid
    """
    try:
        return resolve_style(options.to_style_options(), settings.qrcode)
    except ValidationError as e:
        console.print("[red]Error:[/red] Invalid style options")
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"]) or "style"
            console.print(f"  [dim]-[/dim] {field}: {error['msg']}")
        log.error("Invalid style options", error=str(e))
        raise typer.Exit(1) from e

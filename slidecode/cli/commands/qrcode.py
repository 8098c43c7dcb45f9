"""Qrcode command: render one labeled QR code image."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from slidecode.cli.callbacks import validate_output_file
from slidecode.cli.shared.options import (
    BackgroundOption,
    CaptionColorOption,
    CaptionFontOption,
    CaptionSizeOption,
    CodeSizeOption,
    ForegroundOption,
    StyleCliOptions,
    StyleVariantOption,
    resolve_cli_style,
)
from slidecode.config import get_settings
from slidecode.exceptions import CompositionError
from slidecode.image.compositor import CodeImageCompositor, format_caption
from slidecode.utils.fs import ensure_directory, sanitize_stem
from slidecode.utils.logging import get_logger

console = Console()
log = get_logger(__name__)


def qrcode(
    url: Annotated[str, typer.Argument(help="URL to encode.")],
    name: Annotated[
        str,
        typer.Option("--name", "-n", help="File name used as the caption."),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output PNG path (default: ./<name>.png).",
            callback=validate_output_file,
        ),
    ] = None,
    style: StyleVariantOption = None,
    code_size: CodeSizeOption = None,
    foreground: ForegroundOption = None,
    background: BackgroundOption = None,
    caption_color: CaptionColorOption = None,
    caption_size: CaptionSizeOption = None,
    caption_font: CaptionFontOption = None,
) -> None:
    """Render a single labeled QR code image.

    Examples:
        slidecode qrcode https://slides.example.com/preview/abc --name "Q3 Review.pptx"
        slidecode qrcode https://example.com --name demo.pptx -o demo.png --style shadow
    """
    settings = get_settings()
    style_config = resolve_cli_style(
        StyleCliOptions(
            style_variant=style,
            code_size=code_size,
            foreground_color=foreground,
            background_color=background,
            caption_color=caption_color,
            caption_size=caption_size,
            caption_font=caption_font,
        ),
        settings,
        console,
    )

    output_path = output or Path.cwd() / f"{sanitize_stem(name)}.png"
    compositor = CodeImageCompositor(output_path.parent)

    try:
        data = compositor.render(url, format_caption(name), style_config)
        ensure_directory(output_path.parent)
        output_path.write_bytes(data)
    except CompositionError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    except OSError as e:
        console.print(f"[red]Error:[/red] Cannot write {output_path}: {e}")
        raise typer.Exit(1) from e

    log.info("QR code written", path=str(output_path), url=url)
    console.print(f"[green]✓[/green] QR code saved to {output_path}")

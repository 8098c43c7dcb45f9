"""Main CLI application using Typer."""

from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console

from slidecode import __version__
from slidecode.config.constants import APP_NAME
from slidecode.cli.commands.batch import batch
from slidecode.cli.commands.qrcode import qrcode
from slidecode.cli.commands.storage import cleanup, delete, stats

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name=APP_NAME,
    help="Batch-convert slide decks into web previews with labeled QR codes.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console()

app.command(name="batch", help="Convert every slide deck in a directory.")(batch)
app.command(name="qrcode", help="Render a single labeled QR code image.")(qrcode)
app.command(name="cleanup", help="Delete old staged uploads.")(cleanup)
app.command(name="stats", help="Show workspace storage usage.")(stats)
app.command(name="delete", help="Delete every artifact of a processed deck.")(delete)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]{APP_NAME}[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """slidecode - slide decks to browsable previews with QR codes.

    Each deck is converted to slide images (or a fallback page) and gets a
    labeled QR code linking to its preview.
    """
    pass


if __name__ == "__main__":
    app()

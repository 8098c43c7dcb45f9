"""Workspace maintenance commands: cleanup, stats, delete."""

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from slidecode.cli.callbacks import validate_file_id
from slidecode.config import get_settings
from slidecode.core.storage import Workspace
from slidecode.utils.fs import format_size

console = Console()


def cleanup(
    max_age_hours: Annotated[
        float | None,
        typer.Option("--max-age-hours", help="Delete staged uploads older than this."),
    ] = None,
) -> None:
    """Delete staged uploads older than the maximum age."""
    settings = get_settings()
    hours = max_age_hours if max_age_hours is not None else settings.cleanup.max_age_hours
    if hours <= 0:
        console.print(f"[red]Error:[/red] Maximum age must be positive, got {hours}")
        raise typer.Exit(1)

    result = Workspace.from_settings(settings).cleanup_by_age(hours * 3600)

    console.print(f"[green]✓[/green] Deleted {result.deleted_count} staged file(s)")
    for error in result.errors:
        console.print(f"  [yellow]![/yellow] {error}")


def stats() -> None:
    """Show workspace storage usage."""
    workspace = Workspace.from_settings(get_settings())
    usage = workspace.storage_stats()

    table = Table(title="Storage", show_header=True, header_style="bold")
    table.add_column("Area", style="cyan")
    table.add_column("Path")
    table.add_column("Count", justify="right")
    table.add_column("Size", justify="right")

    table.add_row(
        "Uploads",
        str(workspace.uploads_dir),
        str(usage.uploads.count),
        format_size(usage.uploads.size),
    )
    table.add_row(
        "Converted",
        str(workspace.converted_dir),
        str(usage.converted.count),
        format_size(usage.converted.size),
    )
    table.add_row(
        "QR codes",
        str(workspace.qrcodes_dir),
        str(usage.qrcodes.count),
        format_size(usage.qrcodes.size),
    )
    table.add_row("[bold]Total[/bold]", "", "", format_size(usage.total_size))

    console.print(table)


def delete(
    file_id: Annotated[
        str,
        typer.Argument(help="Identifier of a processed deck.", callback=validate_file_id),
    ],
) -> None:
    """Delete a processed deck and all of its artifacts."""
    workspace = Workspace.from_settings(get_settings())

    if not workspace.delete(file_id):
        console.print(f"[yellow]Nothing found for {file_id}[/yellow]")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Deleted {file_id}")

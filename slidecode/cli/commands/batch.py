"""Batch command: every deck in a directory to a preview and a QR code."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

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
from slidecode.config.settings import SlidecodeSettings
from slidecode.converters.deck import SlideDeckConverter
from slidecode.core.models import BatchProgress, BatchReport, SourceFile
from slidecode.core.report import ReportWriter
from slidecode.core.scheduler import BatchScheduler
from slidecode.core.storage import Workspace
from slidecode.core.task import ConversionTask
from slidecode.exceptions import ConfigurationError
from slidecode.image.compositor import CodeImageCompositor
from slidecode.image.style import StyleConfig
from slidecode.utils.fs import discover_source_files
from slidecode.utils.logging import get_console, get_logger, setup_task_logging

console = get_console()
log = get_logger(__name__)

MAX_LISTED_FAILURES = 10


def batch(
    source_dir: Annotated[
        Path,
        typer.Argument(help="Directory containing slide decks."),
    ],
    url: Annotated[
        str | None,
        typer.Option("--url", help="Base URL of the preview server."),
    ] = None,
    concurrency: Annotated[
        int | None,
        typer.Option("--concurrency", "-c", help="Number of files processed per group."),
    ] = None,
    style: StyleVariantOption = None,
    code_size: CodeSizeOption = None,
    foreground: ForegroundOption = None,
    background: BackgroundOption = None,
    caption_color: CaptionColorOption = None,
    caption_size: CaptionSizeOption = None,
    caption_font: CaptionFontOption = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", help="Per-file timeout in seconds."),
    ] = None,
    report_dir: Annotated[
        Path | None,
        typer.Option("--report-dir", help="Directory receiving the JSON report."),
    ] = None,
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-r", help="Recursively process subdirectories."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show batch plan without executing."),
    ] = False,
) -> None:
    """Convert every slide deck in a directory and generate QR codes.

    Per-file failures are listed in the summary and the report; the command
    still exits with status 0.

    Examples:
        slidecode batch ./decks
        slidecode batch ./decks --url https://slides.example.com -c 5
        slidecode batch ./decks --style rounded --code-size 400 -r
    """
    settings = get_settings()

    if not source_dir.is_dir():
        console.print(f"[red]Error:[/red] Source directory not found: {source_dir}")
        raise typer.Exit(1)
    source_dir = source_dir.resolve()

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

    concurrency_limit = concurrency if concurrency is not None else settings.batch.concurrency
    if concurrency_limit <= 0:
        console.print(
            f"[red]Error:[/red] Concurrency must be a positive integer, got {concurrency_limit}"
        )
        raise typer.Exit(1)
    base_url = url or settings.batch.base_url
    task_timeout = timeout if timeout is not None else settings.batch.task_timeout
    reports = report_dir or settings.get_reports_dir()

    task_id, log_path = setup_task_logging(
        log_dir=settings.log_dir,
        prefix="batch",
        verbose=verbose,
    )
    if verbose:
        log.info("Logs will be saved to", log_file=str(log_path))
    log.info("Task Configuration", task_id=task_id, config=settings.model_dump())

    files = discover_source_files(source_dir, recursive, settings.batch.extensions)

    log.info(
        "Starting batch",
        source_dir=str(source_dir),
        files=len(files),
        concurrency=concurrency_limit,
        base_url=base_url,
        style=style_config.style_variant,
    )

    if dry_run:
        _show_dry_run(source_dir, files, concurrency_limit, base_url, style_config)
        return

    try:
        report = asyncio.run(
            _execute_batch(
                settings=settings,
                source_dir=source_dir,
                files=files,
                concurrency_limit=concurrency_limit,
                base_url=base_url,
                style=style_config,
                task_timeout=task_timeout,
            )
        )
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    except KeyboardInterrupt:
        console.print("\n[yellow]Batch interrupted.[/yellow]")
        raise typer.Exit(130) from None

    report_path = ReportWriter(reports).write(report)
    _display_summary(report, report_path)


async def _execute_batch(
    settings: SlidecodeSettings,
    source_dir: Path,
    files: list[Path],
    concurrency_limit: int,
    base_url: str,
    style: StyleConfig,
    task_timeout: float,
) -> BatchReport:
    """Wire up the pipeline and run the scheduler under a progress bar."""
    workspace = Workspace.from_settings(settings)
    workspace.ensure()

    task = ConversionTask(
        workspace=workspace,
        converter=SlideDeckConverter.from_settings(settings, workspace.converted_dir),
        compositor=CodeImageCompositor(workspace.qrcodes_dir),
        timeout=task_timeout,
        style_defaults=settings.qrcode,
    )
    sources = [SourceFile.from_path(path) for path in files]

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TextColumn("({task.completed}/{task.total})"),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    ) as progress:
        progress_task = progress.add_task("[cyan]Converting decks...", total=len(sources))

        def on_progress(update: BatchProgress) -> None:
            progress.update(
                progress_task,
                completed=update.processed,
                description=(
                    f"[cyan]Converting decks (group {update.groups_completed}"
                    f"/{update.total_groups})..."
                ),
            )

        scheduler = BatchScheduler(task, on_progress=on_progress)
        return await scheduler.run(
            sources,
            concurrency_limit,
            style=style,
            source_dir=source_dir,
            base_url=base_url,
        )


def _display_summary(report: BatchReport, report_path: Path | None) -> None:
    """Display batch processing summary."""
    console.print()

    table = Table(title="Batch Summary", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value")

    table.add_row("Total Files", str(report.total_files))
    table.add_row("Succeeded", f"[green]{report.success_count}[/green]")
    table.add_row("Failed", f"[red]{report.failure_count}[/red]")
    degraded = sum(1 for s in report.successes if s.degraded)
    if degraded:
        table.add_row("Fallback Previews", f"[yellow]{degraded}[/yellow]")
    table.add_row("Success Rate", f"{report.success_ratio * 100:.1f}%")

    console.print(table)

    failures = report.failures
    if failures:
        console.print()
        console.print("[bold red]Failed Files:[/bold red]")
        for failure in failures[:MAX_LISTED_FAILURES]:
            console.print(f"  [dim]-[/dim] {failure.file_name}")
            console.print(f"    [dim]{_simplify_error(failure.error_message)}[/dim]")
        if len(failures) > MAX_LISTED_FAILURES:
            console.print(f"  [dim]... and {len(failures) - MAX_LISTED_FAILURES} more[/dim]")

    console.print()
    if report_path is not None:
        console.print(f"[bold]Report:[/bold] {report_path}")
    else:
        console.print("[yellow]Report could not be written, see the log for details.[/yellow]")


def _simplify_error(error: str) -> str:
    """Shorten an error message for display."""
    if "LibreOffice not found" in error:
        return "LibreOffice not found - install it or enable the fallback preview"

    if len(error) > 100:
        return error[:97] + "..."

    return error


def _show_dry_run(
    source_dir: Path,
    files: list[Path],
    concurrency_limit: int,
    base_url: str,
    style: StyleConfig,
) -> None:
    """Display the batch plan without executing."""
    console.print("\n[bold blue]Batch Plan (Dry Run)[/bold blue]\n")
    console.print(f"  [bold]Source Directory:[/bold] {source_dir}")
    console.print(f"  [bold]Base URL:[/bold] {base_url}")
    console.print(f"  [bold]Concurrency:[/bold] {concurrency_limit}")
    console.print(f"  [bold]Style:[/bold] {style.style_variant} ({style.code_size}px)")

    console.print()
    console.print(f"[bold]Files Found:[/bold] {len(files)}")

    if files:
        by_ext: dict[str, int] = {}
        for f in files:
            ext = f.suffix.lower()
            by_ext[ext] = by_ext.get(ext, 0) + 1

        console.print()
        console.print("[bold]By Type:[/bold]")
        for ext, count in sorted(by_ext.items()):
            console.print(f"  {ext}: {count}")

        console.print()
        console.print("[bold]Files:[/bold]")
        for f in files[:10]:
            console.print(f"  - {f.relative_to(source_dir)}")
        if len(files) > 10:
            console.print(f"  ... and {len(files) - 10} more")

    console.print()

"""Group-wise batch scheduling.

Files run in consecutive groups of ``concurrency_limit``. All tasks of a
group run together and the next group starts only once every task of the
current one has finished, so at most ``concurrency_limit`` files are ever in
flight.
"""

import asyncio
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TypeVar

from slidecode.core.models import (
    BatchProgress,
    BatchReport,
    ConversionFailure,
    ConversionOutcome,
    SourceFile,
)
from slidecode.core.report import summarize
from slidecode.core.task import ConversionTask, UrlBuilder
from slidecode.exceptions import ConfigurationError
from slidecode.image.style import StyleConfig, StyleOptions
from slidecode.utils.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")

ProgressCallback = Callable[[BatchProgress], None]


def chunk(items: Sequence[T], size: int) -> list[list[T]]:
    """Split into consecutive groups of ``size``; the last may be shorter."""
    if size <= 0:
        raise ValueError(f"Group size must be positive, got {size}")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


class BatchScheduler:
    """Runs ConversionTasks over a file list and summarizes the outcomes."""

    def __init__(
        self,
        task: ConversionTask,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self.task = task
        self.on_progress = on_progress

    async def run(
        self,
        files: Sequence[SourceFile],
        concurrency_limit: int,
        style: StyleConfig | StyleOptions | None = None,
        url_builder: UrlBuilder | None = None,
        source_dir: str | Path | None = None,
        base_url: str | None = None,
    ) -> BatchReport:
        """Process every file and build the batch report.

        Args:
            files: Decks to process; outcome ``i`` belongs to ``files[i]``
            concurrency_limit: Group size and in-flight ceiling
            style: Style shared by every code image
            url_builder: Maps a file identifier to its preview URL
            source_dir: Recorded in the report
            base_url: Recorded in the report; also the default URL prefix

        Returns:
            BatchReport with one outcome per input file, in input order

        Raises:
            ConfigurationError: If ``concurrency_limit`` is not positive
        """
        if concurrency_limit <= 0:
            raise ConfigurationError(
                f"Concurrency limit must be a positive integer, got {concurrency_limit}"
            )

        if url_builder is None:
            if base_url is None:
                raise ConfigurationError("Either url_builder or base_url is required")
            url_builder = preview_url_builder(base_url)

        if not files:
            log.info("No files to process")
            return summarize([], source_dir=source_dir, base_url=base_url)

        groups = chunk(files, concurrency_limit)
        outcomes: list[ConversionOutcome | None] = [None] * len(files)
        log.info(
            "Starting batch",
            total=len(files),
            groups=len(groups),
            concurrency=concurrency_limit,
        )

        offset = 0
        for group_index, group in enumerate(groups, start=1):
            results = await asyncio.gather(
                *(self.task.process(f, style, url_builder) for f in group),
                return_exceptions=True,
            )
            for position, (file, result) in enumerate(zip(group, results)):
                outcomes[offset + position] = self._guard(file, result)
            offset += len(group)

            log.debug("Group finished", group=group_index, of=len(groups), processed=offset)
            if self.on_progress:
                self.on_progress(
                    BatchProgress(
                        groups_completed=group_index,
                        total_groups=len(groups),
                        processed=offset,
                        total=len(files),
                    )
                )

        report = summarize(
            [o for o in outcomes if o is not None],
            source_dir=source_dir,
            base_url=base_url,
        )
        log.info(
            "Batch finished",
            total=report.total_files,
            succeeded=report.success_count,
            failed=report.failure_count,
        )
        return report

    @staticmethod
    def _guard(file: SourceFile, result: ConversionOutcome | BaseException) -> ConversionOutcome:
        if isinstance(result, BaseException):
            # Cancellation and interpreter exits are not per-file errors
            if not isinstance(result, Exception):
                raise result
            log.error("Task raised unexpectedly", file=file.file_name, error=str(result))
            return ConversionFailure(
                file_name=file.file_name,
                error_message=f"{type(result).__name__}: {result}",
            )
        return result


def preview_url_builder(base_url: str) -> UrlBuilder:
    """URL builder producing ``<base_url>/preview/<file_id>``."""
    base = base_url.rstrip("/")

    def build(file_id: str) -> str:
        return f"{base}/preview/{file_id}"

    return build

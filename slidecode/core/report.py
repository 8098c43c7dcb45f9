"""Batch result aggregation and report persistence."""

import json
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from slidecode.core.models import BatchReport, ConversionOutcome, now_iso
from slidecode.utils.fs import ensure_directory, get_unique_path
from slidecode.utils.logging import get_logger

log = get_logger(__name__)

REPORT_PREFIX = "batch-report"


def summarize(
    outcomes: Sequence[ConversionOutcome],
    source_dir: str | Path | None = None,
    base_url: str | None = None,
    timestamp: str | None = None,
) -> BatchReport:
    """Build a BatchReport from the ordered outcome sequence.

    Pure: the outcomes are packaged in the given order and not modified.

    Args:
        outcomes: One outcome per input file, in input order
        source_dir: Optional source directory recorded in the report
        base_url: Optional preview base URL recorded in the report
        timestamp: Report timestamp (default: now)

    Returns:
        BatchReport with counts and ratio
    """
    success_count = sum(1 for o in outcomes if o.success)
    return BatchReport(
        timestamp=timestamp or now_iso(),
        total_files=len(outcomes),
        success_count=success_count,
        failure_count=len(outcomes) - success_count,
        outcomes=tuple(outcomes),
        source_dir=str(source_dir) if source_dir is not None else None,
        base_url=base_url,
    )


class ReportWriter:
    """Writes one JSON report per batch run, never overwriting older ones."""

    def __init__(self, report_dir: Path) -> None:
        self.report_dir = Path(report_dir)

    def report_path(self, when: datetime | None = None) -> Path:
        """Unused path for a report created at ``when``."""
        stamp = (when or datetime.now()).strftime("%Y%m%d_%H%M%S_%f")
        return get_unique_path(self.report_dir / f"{REPORT_PREFIX}-{stamp}.json")

    def write(self, report: BatchReport) -> Path | None:
        """Persist a report.

        Failures are logged and reported as ``None``; the in-memory report
        stays valid either way.

        Returns:
            Path of the written report, or None if writing failed
        """
        try:
            ensure_directory(self.report_dir)
            path = self.report_path()
            # "x" refuses to clobber a report created concurrently under the same name
            with open(path, "x", encoding="utf-8") as f:
                json.dump(report.to_dict(), f, ensure_ascii=False, indent=2)
        except OSError as e:
            log.error("Failed to write batch report", report_dir=str(self.report_dir), error=str(e))
            return None

        log.info(
            "Batch report written",
            path=str(path),
            total=report.total_files,
            succeeded=report.success_count,
            failed=report.failure_count,
        )
        return path

"""Core batch processing for slidecode."""

from slidecode.core.models import (
    BatchProgress,
    BatchReport,
    ConversionFailure,
    ConversionOutcome,
    ConversionSuccess,
    SourceFile,
)
from slidecode.core.report import ReportWriter, summarize
from slidecode.core.scheduler import BatchScheduler, preview_url_builder
from slidecode.core.storage import Workspace
from slidecode.core.task import ConversionTask

__all__ = [
    "BatchProgress",
    "BatchReport",
    "BatchScheduler",
    "ConversionFailure",
    "ConversionOutcome",
    "ConversionSuccess",
    "ConversionTask",
    "ReportWriter",
    "SourceFile",
    "Workspace",
    "preview_url_builder",
    "summarize",
]

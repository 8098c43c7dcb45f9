"""Data model for batch conversion runs."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class SourceFile:
    """One slide deck queued for conversion."""

    file_name: str
    source_path: Path

    @classmethod
    def from_path(cls, path: Path) -> "SourceFile":
        """Create from a path on disk, using its name as the display name."""
        return cls(file_name=path.name, source_path=path)


@dataclass(frozen=True)
class ConversionSuccess:
    """Terminal record of a converted deck."""

    file_id: str
    original_name: str
    preview_url: str
    code_image_path: Path
    converted_dir: Path | None = None
    degraded: bool = False  # Fallback preview instead of slide images

    @property
    def success(self) -> bool:
        return True

    @property
    def file_name(self) -> str:
        return self.original_name

    def to_dict(self) -> dict[str, Any]:
        """Convert to the report's outcome entry."""
        return {
            "success": True,
            "fileName": self.original_name,
            "fileId": self.file_id,
            "previewUrl": self.preview_url,
            "qrCodePath": str(self.code_image_path),
            "degraded": self.degraded,
        }


@dataclass(frozen=True)
class ConversionFailure:
    """Terminal record of a deck that could not be converted."""

    file_name: str
    error_message: str

    @property
    def success(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        """Convert to the report's outcome entry."""
        return {
            "success": False,
            "fileName": self.file_name,
            "error": self.error_message,
        }


ConversionOutcome = ConversionSuccess | ConversionFailure


@dataclass(frozen=True)
class BatchProgress:
    """Progress snapshot published after each completed group."""

    groups_completed: int
    total_groups: int
    processed: int
    total: int

    @property
    def fraction(self) -> float:
        """Processed share of the batch (0.0 to 1.0)."""
        if self.total == 0:
            return 0.0
        return self.processed / self.total


@dataclass(frozen=True)
class BatchReport:
    """Summary of a whole batch run, built once at the end."""

    timestamp: str
    total_files: int
    success_count: int
    failure_count: int
    outcomes: tuple[ConversionOutcome, ...] = field(default_factory=tuple)
    source_dir: str | None = None
    base_url: str | None = None

    @property
    def success_ratio(self) -> float:
        """Share of successful files (0.0 when the batch was empty)."""
        if self.total_files == 0:
            return 0.0
        return self.success_count / self.total_files

    @property
    def successes(self) -> list[ConversionSuccess]:
        return [o for o in self.outcomes if isinstance(o, ConversionSuccess)]

    @property
    def failures(self) -> list[ConversionFailure]:
        return [o for o in self.outcomes if isinstance(o, ConversionFailure)]

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON-serializable report schema."""
        data: dict[str, Any] = {"timestamp": self.timestamp}
        if self.source_dir is not None:
            data["sourceDir"] = self.source_dir
        if self.base_url is not None:
            data["baseUrl"] = self.base_url
        data.update(
            {
                "totalFiles": self.total_files,
                "successCount": self.success_count,
                "failureCount": self.failure_count,
                "successRatio": round(self.success_ratio, 4),
                "outcomes": [o.to_dict() for o in self.outcomes],
            }
        )
        return data


def now_iso() -> str:
    """Current local time in ISO 8601, as used for report timestamps."""
    return datetime.now().isoformat()

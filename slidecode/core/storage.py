"""Workspace layout: staged uploads, converted decks and code images.

Every artifact of one deck is addressed by its file identifier:

    uploads/<file_id><ext>     staged copy of the source deck
    converted/<file_id>/       converter output (opaque to the pipeline)
    qrcodes/<file_id>.png      composited QR code image
"""

import shutil
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from slidecode.config.constants import (
    DEFAULT_CONVERTED_DIR,
    DEFAULT_QRCODES_DIR,
    DEFAULT_UPLOADS_DIR,
    FALLBACK_PREVIEW_FILE,
    SLIDE_IMAGE_EXTENSIONS,
    SLIDES_SUBDIR,
)
from slidecode.exceptions import StorageError
from slidecode.utils.fs import directory_size, ensure_directory, remove_path
from slidecode.utils.logging import get_logger

if TYPE_CHECKING:
    from slidecode.config.settings import SlidecodeSettings

log = get_logger(__name__)


@dataclass
class AreaStats:
    """File count and total bytes of one workspace area."""

    count: int = 0
    size: int = 0


@dataclass
class StorageStats:
    """Usage of the three workspace areas."""

    uploads: AreaStats = field(default_factory=AreaStats)
    converted: AreaStats = field(default_factory=AreaStats)
    qrcodes: AreaStats = field(default_factory=AreaStats)

    @property
    def total_size(self) -> int:
        return self.uploads.size + self.converted.size + self.qrcodes.size


@dataclass
class CleanupResult:
    """Outcome of a cleanup-by-age pass."""

    deleted_count: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class PreviewInfo:
    """What the serving layer needs to show one converted deck."""

    file_id: str
    slides: list[Path]
    html_preview: Path | None
    original_file: Path | None

    @property
    def total_slides(self) -> int:
        return len(self.slides)

    @property
    def has_html_preview(self) -> bool:
        return self.html_preview is not None


@dataclass
class CodeImageInfo:
    """Metadata of a generated QR code image."""

    file_id: str
    path: Path
    size: int
    modified: datetime


class Workspace:
    """Addressable storage locations keyed by file identifier."""

    def __init__(
        self,
        root: Path | str,
        uploads_dir: str = DEFAULT_UPLOADS_DIR,
        converted_dir: str = DEFAULT_CONVERTED_DIR,
        qrcodes_dir: str = DEFAULT_QRCODES_DIR,
    ) -> None:
        self.root = Path(root)
        self.uploads_dir = self.root / uploads_dir
        self.converted_dir = self.root / converted_dir
        self.qrcodes_dir = self.root / qrcodes_dir

    @classmethod
    def from_settings(cls, settings: "SlidecodeSettings") -> "Workspace":
        """Create from SlidecodeSettings.workspace."""
        ws = settings.workspace
        return cls(
            root=ws.root,
            uploads_dir=ws.uploads_dir,
            converted_dir=ws.converted_dir,
            qrcodes_dir=ws.qrcodes_dir,
        )

    def ensure(self) -> None:
        """Create all workspace directories."""
        for directory in (self.uploads_dir, self.converted_dir, self.qrcodes_dir):
            ensure_directory(directory)

    # Addressing

    def staged_path(self, file_id: str, extension: str) -> Path:
        return self.uploads_dir / f"{file_id}{extension}"

    def converted_path(self, file_id: str) -> Path:
        return self.converted_dir / file_id

    def code_image_path(self, file_id: str) -> Path:
        return self.qrcodes_dir / f"{file_id}.png"

    def find_staged(self, file_id: str) -> Path | None:
        """Locate the staged original of a file identifier, whatever its extension."""
        if not self.uploads_dir.exists():
            return None
        for candidate in self.uploads_dir.iterdir():
            if candidate.stem == file_id:
                return candidate
        return None

    # Lifecycle

    def stage(self, source: Path, file_id: str) -> Path:
        """Copy a source deck into uploads/ under its identifier.

        Raises:
            StorageError: If the source is missing or cannot be copied
        """
        if not source.is_file():
            raise StorageError(f"Source file not found: {source}")

        target = self.staged_path(file_id, source.suffix.lower())
        try:
            ensure_directory(self.uploads_dir)
            shutil.copy2(source, target)
        except OSError as e:
            raise StorageError(f"Failed to stage {source}: {e}") from e

        log.debug("File staged", source=str(source), staged=str(target))
        return target

    def purge(self, file_id: str, staged: Path | None = None) -> list[Path]:
        """Remove everything created for one identifier.

        Errors are logged and skipped so that one stuck file does not keep the
        rest of the artifacts around.

        Returns:
            Paths that were removed
        """
        targets = [
            staged or self.find_staged(file_id),
            self.converted_path(file_id),
            self.code_image_path(file_id),
        ]
        removed = []
        for target in targets:
            if target is None:
                continue
            try:
                if remove_path(target):
                    removed.append(target)
            except OSError as e:
                log.warning("Failed to purge artifact", path=str(target), error=str(e))

        if removed:
            log.debug("Artifacts purged", file_id=file_id, count=len(removed))
        return removed

    def delete(self, file_id: str) -> bool:
        """Delete a processed deck and all its artifacts.

        Returns:
            True if anything existed for the identifier
        """
        return bool(self.purge(file_id))

    def cleanup_by_age(self, max_age_seconds: float, now: float | None = None) -> CleanupResult:
        """Delete staged uploads older than ``max_age_seconds`` (by mtime)."""
        result = CleanupResult()
        if not self.uploads_dir.exists():
            return result

        current = now if now is not None else time.time()
        for path in self.uploads_dir.iterdir():
            try:
                if current - path.stat().st_mtime > max_age_seconds:
                    remove_path(path)
                    result.deleted_count += 1
            except OSError as e:
                result.errors.append(f"Failed to delete {path.name}: {e}")

        log.info(
            "Upload cleanup finished",
            deleted=result.deleted_count,
            errors=len(result.errors),
        )
        return result

    # Queries

    def storage_stats(self) -> StorageStats:
        """Count and size files in each workspace area."""
        stats = StorageStats()

        if self.uploads_dir.exists():
            for path in self.uploads_dir.iterdir():
                if path.is_file():
                    stats.uploads.count += 1
                    stats.uploads.size += path.stat().st_size

        if self.converted_dir.exists():
            for path in self.converted_dir.iterdir():
                if path.is_dir():
                    stats.converted.count += 1
                    stats.converted.size += directory_size(path)

        if self.qrcodes_dir.exists():
            for path in self.qrcodes_dir.iterdir():
                if path.is_file():
                    stats.qrcodes.count += 1
                    stats.qrcodes.size += path.stat().st_size

        return stats

    def get_preview(self, file_id: str) -> PreviewInfo:
        """Describe the converted output of one identifier.

        Raises:
            StorageError: If nothing was converted for the identifier
        """
        converted = self.converted_path(file_id)
        if not converted.is_dir():
            raise StorageError(f"No converted output for {file_id}")

        slides_dir = converted / SLIDES_SUBDIR
        slides: list[Path] = []
        if slides_dir.is_dir():
            slides = sorted(
                p for p in slides_dir.iterdir() if p.suffix.lower() in SLIDE_IMAGE_EXTENSIONS
            )

        html = converted / FALLBACK_PREVIEW_FILE
        return PreviewInfo(
            file_id=file_id,
            slides=slides,
            html_preview=html if html.is_file() else None,
            original_file=self.find_staged(file_id),
        )

    def list_processed(self) -> list[str]:
        """Identifiers that have converted output, sorted."""
        if not self.converted_dir.exists():
            return []
        return sorted(p.name for p in self.converted_dir.iterdir() if p.is_dir())

    def code_image_info(self, file_id: str) -> CodeImageInfo | None:
        """Metadata of the code image, or None if it was never generated."""
        path = self.code_image_path(file_id)
        if not path.is_file():
            return None
        stat = path.stat()
        return CodeImageInfo(
            file_id=file_id,
            path=path,
            size=stat.st_size,
            modified=datetime.fromtimestamp(stat.st_mtime),
        )

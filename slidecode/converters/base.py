"""Base types for external slide deck converters."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ConvertedDeck:
    """Output of converting one staged deck.

    Either ``slides`` holds the rendered slide images, or the converter fell
    back to a single ``preview_html`` page and ``degraded`` is set.
    """

    output_dir: Path
    slides: list[Path] = field(default_factory=list)
    pdf_path: Path | None = None
    preview_html: Path | None = None
    degraded: bool = False

    @property
    def slide_count(self) -> int:
        return len(self.slides)


class BaseSlideConverter(ABC):
    """Abstract base class for deck converters."""

    name: str = "base"

    @abstractmethod
    async def convert(self, staged_path: Path, file_id: str) -> ConvertedDeck:
        """Convert a staged deck into a browsable preview.

        Args:
            staged_path: Staged copy of the source deck
            file_id: Identifier naming the output directory

        Returns:
            ConvertedDeck describing the output

        Raises:
            ConversionError: If no usable preview could be produced
        """
        pass

"""Slide deck conversion: LibreOffice to PDF, PyMuPDF to slide images.

When LibreOffice is missing or cannot convert a deck, a placeholder
``preview.html`` is written instead (unless disabled). Such a deck is
reported as degraded, not failed: the preview link still resolves.
"""

from pathlib import Path
from typing import TYPE_CHECKING

from slidecode.config.constants import FALLBACK_PREVIEW_FILE, SLIDES_SUBDIR
from slidecode.converters.base import BaseSlideConverter, ConvertedDeck
from slidecode.converters.office import LibreOfficeConverter
from slidecode.converters.raster import PdfRasterizer
from slidecode.exceptions import ConversionError
from slidecode.image.compositor import escape_markup
from slidecode.utils.fs import ensure_directory
from slidecode.utils.logging import get_logger

if TYPE_CHECKING:
    from slidecode.config.settings import SlidecodeSettings

log = get_logger(__name__)

FALLBACK_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>Slide preview</title>
    <style>
        body {{ font-family: Arial, sans-serif; padding: 20px; text-align: center; }}
        .placeholder {{ border: 2px dashed #ccc; padding: 50px; margin: 20px 0;
                        background: #f9f9f9; }}
    </style>
</head>
<body>
    <h1>Slide preview</h1>
    <div class="placeholder">
        <p>The presentation was uploaded successfully.</p>
        <p>File: {file_name}</p>
        <p>Install LibreOffice for a full slide-by-slide preview.</p>
    </div>
</body>
</html>
"""


def render_fallback_page(file_name: str) -> str:
    """Placeholder preview page; the file name is markup-escaped."""
    return FALLBACK_TEMPLATE.format(file_name=escape_markup(file_name))


class SlideDeckConverter(BaseSlideConverter):
    """Convert a staged deck into ``<converted_root>/<file_id>/``."""

    name = "slide_deck"

    def __init__(
        self,
        converted_root: Path | str,
        office: LibreOfficeConverter | None = None,
        rasterizer: PdfRasterizer | None = None,
        fallback_preview: bool = True,
    ) -> None:
        """Initialize the deck converter.

        Args:
            converted_root: Root directory of converted output
            office: LibreOffice converter (default: auto-detected soffice)
            rasterizer: PDF page renderer
            fallback_preview: Write a placeholder page when LibreOffice fails
        """
        self.converted_root = Path(converted_root)
        self.office = office or LibreOfficeConverter()
        self.rasterizer = rasterizer or PdfRasterizer()
        self.fallback_preview = fallback_preview

    @classmethod
    def from_settings(
        cls, settings: "SlidecodeSettings", converted_root: Path
    ) -> "SlideDeckConverter":
        """Create from SlidecodeSettings.converter."""
        cfg = settings.converter
        return cls(
            converted_root=converted_root,
            office=LibreOfficeConverter(soffice_path=cfg.soffice_path, timeout=cfg.timeout),
            rasterizer=PdfRasterizer(dpi=cfg.dpi),
            fallback_preview=cfg.fallback_preview,
        )

    async def convert(self, staged_path: Path, file_id: str) -> ConvertedDeck:
        output_dir = ensure_directory(self.converted_root / file_id)

        try:
            pdf_path = await self.office.convert(staged_path, output_dir)
        except ConversionError as e:
            if not self.fallback_preview:
                raise
            log.warning(
                "LibreOffice conversion unavailable, writing fallback preview",
                file=str(staged_path),
                error=str(e),
            )
            return self._write_fallback(staged_path, output_dir)

        slides = await self.rasterizer.rasterize_async(pdf_path, output_dir / SLIDES_SUBDIR)
        log.info("Deck converted", file=str(staged_path), slides=len(slides))
        return ConvertedDeck(output_dir=output_dir, slides=slides, pdf_path=pdf_path)

    def _write_fallback(self, staged_path: Path, output_dir: Path) -> ConvertedDeck:
        html_path = output_dir / FALLBACK_PREVIEW_FILE
        html_path.write_text(render_fallback_page(staged_path.name), encoding="utf-8")
        return ConvertedDeck(output_dir=output_dir, preview_html=html_path, degraded=True)

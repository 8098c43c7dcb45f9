"""PDF to slide image rendering with PyMuPDF."""

from collections.abc import Callable
from pathlib import Path

import anyio
import anyio.from_thread

from slidecode.config.constants import DEFAULT_RENDER_DPI, SLIDE_IMAGE_PATTERN
from slidecode.exceptions import ConversionError
from slidecode.utils.logging import get_logger

log = get_logger(__name__)


class PdfRasterizer:
    """Render every PDF page to ``slide-NNN.png``."""

    def __init__(self, dpi: int = DEFAULT_RENDER_DPI) -> None:
        self.dpi = dpi

    def rasterize(
        self,
        pdf_path: Path,
        images_dir: Path,
        check_cancelled: Callable[[], None] | None = None,
    ) -> list[Path]:
        """Render all pages of a PDF.

        Args:
            pdf_path: PDF to render
            images_dir: Directory receiving one PNG per page
            check_cancelled: Called before each page; raises to stop rendering

        Returns:
            Slide image paths in page order

        Raises:
            ConversionError: If the PDF cannot be opened, rendered or is empty
        """
        import pymupdf

        images_dir.mkdir(parents=True, exist_ok=True)
        slides: list[Path] = []

        try:
            doc = pymupdf.open(pdf_path)
        except Exception as e:
            raise ConversionError(pdf_path, f"Cannot open PDF: {e}", cause=e) from e

        try:
            for index, page in enumerate(doc, start=1):
                if check_cancelled is not None:
                    check_cancelled()
                target = images_dir / SLIDE_IMAGE_PATTERN.format(index=index)
                page.get_pixmap(dpi=self.dpi).save(str(target))
                slides.append(target)
        except Exception as e:
            raise ConversionError(pdf_path, f"Page rendering failed: {e}", cause=e) from e
        finally:
            doc.close()

        if not slides:
            raise ConversionError(pdf_path, "PDF has no pages")

        log.debug("PDF rasterized", file=str(pdf_path), pages=len(slides), dpi=self.dpi)
        return slides

    async def rasterize_async(self, pdf_path: Path, images_dir: Path) -> list[Path]:
        """Run ``rasterize`` in a worker thread.

        The thread is not abandoned on cancellation: it stops at the next page
        boundary, so no slide image is written after the caller gives up.
        """
        return await anyio.to_thread.run_sync(
            self.rasterize, pdf_path, images_dir, anyio.from_thread.check_cancelled
        )

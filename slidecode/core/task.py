"""Per-file conversion task: stage, convert, build URL, compose code image."""

from collections.abc import Callable
from pathlib import Path

import anyio
from pydantic import ValidationError

from slidecode.config.constants import DEFAULT_TASK_TIMEOUT
from slidecode.config.settings import QRCodeConfig
from slidecode.converters.base import BaseSlideConverter
from slidecode.core.models import (
    ConversionFailure,
    ConversionOutcome,
    ConversionSuccess,
    SourceFile,
)
from slidecode.core.storage import Workspace
from slidecode.exceptions import SlidecodeError
from slidecode.image.compositor import CodeImageCompositor
from slidecode.image.style import StyleConfig, StyleOptions, resolve_style
from slidecode.utils.fs import generate_file_id
from slidecode.utils.logging import get_logger

log = get_logger(__name__)

UrlBuilder = Callable[[str], str]


class ConversionTask:
    """Turns one source deck into a terminal ConversionOutcome.

    ``process`` never raises: every error, including a timeout, becomes a
    ConversionFailure after the artifacts created for the file are purged.
    """

    def __init__(
        self,
        workspace: Workspace,
        converter: BaseSlideConverter,
        compositor: CodeImageCompositor,
        timeout: float | None = DEFAULT_TASK_TIMEOUT,
        style_defaults: QRCodeConfig | None = None,
    ) -> None:
        """Initialize the task.

        Args:
            workspace: Storage for staged files and artifacts
            converter: Deck converter writing into ``converted/<file_id>/``
            compositor: QR code image compositor
            timeout: Seconds before a file is given up (None disables)
            style_defaults: Defaults applied to partial StyleOptions
        """
        self.workspace = workspace
        self.converter = converter
        self.compositor = compositor
        self.timeout = timeout
        self.style_defaults = style_defaults

    async def process(
        self,
        file: SourceFile,
        style: StyleConfig | StyleOptions | None,
        url_builder: UrlBuilder,
    ) -> ConversionOutcome:
        """Convert one deck and compose its labeled QR code.

        Args:
            file: Source deck
            style: Resolved style, or a partial override to resolve here
            url_builder: Maps a file identifier to its preview URL

        Returns:
            ConversionSuccess or ConversionFailure, never raises
        """
        file_id = generate_file_id(file.file_name)
        staged: Path | None = None
        log.debug("Processing file", file=file.file_name, file_id=file_id)

        try:
            with anyio.fail_after(self.timeout):
                if not isinstance(style, StyleConfig):
                    style = resolve_style(style, self.style_defaults)

                staged = await anyio.to_thread.run_sync(
                    self.workspace.stage, file.source_path, file_id
                )
                deck = await self.converter.convert(staged, file_id)
                preview_url = url_builder(file_id)
                code_path = await self.compositor.generate(
                    preview_url, file.file_name, file_id, style
                )
        except TimeoutError:
            return self._fail(file, file_id, staged, f"Timed out after {self.timeout}s")
        except ValidationError as e:
            return self._fail(file, file_id, staged, f"Invalid style options: {e}")
        except SlidecodeError as e:
            return self._fail(file, file_id, staged, str(e))
        except Exception as e:
            log.error(
                "Unexpected error while processing file",
                file=file.file_name,
                file_id=file_id,
                error=str(e),
                exc_info=True,
            )
            return self._fail(file, file_id, staged, f"{type(e).__name__}: {e}")

        log.info(
            "File processed",
            file=file.file_name,
            file_id=file_id,
            slides=deck.slide_count,
            degraded=deck.degraded,
        )
        return ConversionSuccess(
            file_id=file_id,
            original_name=file.file_name,
            preview_url=preview_url,
            code_image_path=code_path,
            converted_dir=deck.output_dir,
            degraded=deck.degraded,
        )

    def _fail(
        self,
        file: SourceFile,
        file_id: str,
        staged: Path | None,
        message: str,
    ) -> ConversionFailure:
        self.workspace.purge(file_id, staged)
        log.warning("File failed", file=file.file_name, file_id=file_id, error=message)
        return ConversionFailure(file_name=file.file_name, error_message=message)

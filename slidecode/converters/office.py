"""LibreOffice-based slide deck to PDF conversion."""

from __future__ import annotations

import contextlib
import os
import shutil
import signal
import subprocess
import sys
import tempfile
from pathlib import Path

import anyio
import anyio.abc

from slidecode.config.constants import DEFAULT_CONVERSION_TIMEOUT
from slidecode.exceptions import ConversionError, ConverterUnavailableError
from slidecode.utils.logging import get_logger

log = get_logger(__name__)


def find_soffice() -> str | None:
    """Find the LibreOffice soffice executable."""
    if sys.platform == "win32":
        for path in (
            r"C:\Program Files\LibreOffice\program\soffice.exe",
            r"C:\Program Files (x86)\LibreOffice\program\soffice.exe",
        ):
            if Path(path).exists():
                return path
    elif sys.platform == "darwin":
        app_path = "/Applications/LibreOffice.app/Contents/MacOS/soffice"
        if Path(app_path).exists():
            return app_path

    return shutil.which("soffice") or shutil.which("libreoffice")


def _profile_uri(profile_dir: str) -> str:
    if sys.platform == "win32":
        return f"file:///{profile_dir.replace(os.sep, '/')}"
    return f"file://{profile_dir}"


class LibreOfficeConverter:
    """Convert presentation files to PDF with headless LibreOffice.

    Each run gets its own throwaway user profile so several soffice
    processes can work side by side without profile lock conflicts. The
    soffice process is awaited, and it is killed together with its children
    when the run times out or the calling task is cancelled.
    """

    def __init__(
        self,
        soffice_path: str | None = None,
        timeout: float = DEFAULT_CONVERSION_TIMEOUT,
    ) -> None:
        """Initialize LibreOffice converter.

        Args:
            soffice_path: Path to soffice executable (default: auto-detect)
            timeout: Conversion timeout in seconds
        """
        self.soffice_path = soffice_path or find_soffice()
        self.timeout = timeout

    @property
    def available(self) -> bool:
        return self.soffice_path is not None

    def build_command(self, file_path: Path, output_dir: Path, profile_dir: str) -> list[str]:
        """soffice command line converting ``file_path`` to PDF in ``output_dir``."""
        return [
            str(self.soffice_path),
            "--headless",
            f"-env:UserInstallation={_profile_uri(profile_dir)}",
            "--convert-to",
            "pdf",
            "--outdir",
            str(output_dir),
            str(file_path),
        ]

    async def convert(self, file_path: Path, output_dir: Path) -> Path:
        """Convert a deck to PDF.

        Args:
            file_path: Input deck
            output_dir: Directory receiving the PDF

        Returns:
            Path to the produced PDF

        Raises:
            ConverterUnavailableError: If soffice cannot be found
            ConversionError: If soffice fails, times out or writes nothing
        """
        if not self.available:
            raise ConverterUnavailableError(file_path, "LibreOffice")

        output_dir.mkdir(parents=True, exist_ok=True)

        with tempfile.TemporaryDirectory(prefix="slidecode-lo-") as profile_dir:
            cmd = self.build_command(file_path, output_dir, profile_dir)
            log.debug("Running LibreOffice", command=" ".join(cmd))

            try:
                with anyio.fail_after(self.timeout):
                    returncode, stderr = await _run_to_completion(cmd)
            except TimeoutError as e:
                raise ConversionError(
                    file_path,
                    f"LibreOffice conversion timed out after {self.timeout}s",
                ) from e
            except OSError as e:
                raise ConversionError(file_path, f"Cannot run LibreOffice: {e}", cause=e) from e

        message = stderr.decode(errors="replace").strip()
        if returncode != 0:
            raise ConversionError(file_path, f"LibreOffice error: {message or 'Unknown error'}")
        if message and "warning" not in message.lower():
            log.warning("LibreOffice reported", file=str(file_path), stderr=message)

        pdf_path = output_dir / f"{file_path.stem}.pdf"
        if not pdf_path.exists():
            # LibreOffice might use different naming
            pdf_path = next(iter(sorted(output_dir.glob("*.pdf"))), pdf_path)

        if not pdf_path.exists():
            raise ConversionError(file_path, "LibreOffice did not produce a PDF")

        return pdf_path


async def _run_to_completion(cmd: list[str]) -> tuple[int, bytes]:
    """Run ``cmd`` and return its exit code and stderr.

    On cancellation the process group is killed and reaped before the
    cancellation propagates, so no child outlives the caller.
    """
    process = await anyio.open_process(
        cmd,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.PIPE,
        start_new_session=sys.platform != "win32",
    )
    try:
        chunks = [chunk async for chunk in process.stderr]
        returncode = await process.wait()
    except BaseException:
        _kill(process)
        with anyio.CancelScope(shield=True):
            await process.wait()
        raise
    finally:
        with anyio.CancelScope(shield=True):
            await process.aclose()
    return returncode, b"".join(chunks)


def _kill(process: anyio.abc.Process) -> None:
    with contextlib.suppress(ProcessLookupError):
        if sys.platform == "win32":
            process.kill()
        else:
            os.killpg(process.pid, signal.SIGKILL)

"""Custom exceptions for slidecode."""

from pathlib import Path


class SlidecodeError(Exception):
    """Base exception class for slidecode."""

    pass


class ConfigurationError(SlidecodeError):
    """Setup-level error that aborts a run before any work starts."""

    pass


class ConversionError(SlidecodeError):
    """Error during slide deck conversion."""

    def __init__(self, file_path: Path, message: str, cause: Exception | None = None) -> None:
        self.file_path = file_path
        self.cause = cause
        super().__init__(f"Conversion failed for {file_path}: {message}")


class ConverterUnavailableError(ConversionError):
    """The external conversion tool could not be found."""

    def __init__(self, file_path: Path, tool: str) -> None:
        super().__init__(file_path, f"{tool} not found")
        self.tool = tool


class CompositionError(SlidecodeError):
    """Error while rendering or writing a QR code image."""

    pass


class StorageError(SlidecodeError):
    """Workspace staging or lookup error."""

    pass

"""Tests for exceptions module."""

from pathlib import Path

from slidecode.exceptions import (
    CompositionError,
    ConfigurationError,
    ConversionError,
    ConverterUnavailableError,
    SlidecodeError,
    StorageError,
)


class TestExceptionHierarchy:
    """Tests for the exception hierarchy."""

    def test_all_derive_from_base(self):
        for exc in (
            ConfigurationError,
            ConversionError,
            ConverterUnavailableError,
            CompositionError,
            StorageError,
        ):
            assert issubclass(exc, SlidecodeError)

    def test_unavailable_is_conversion_error(self):
        """Missing tools are handled like any other conversion failure."""
        assert issubclass(ConverterUnavailableError, ConversionError)


class TestConversionError:
    """Tests for ConversionError."""

    def test_message_and_attributes(self):
        cause = OSError("disk full")
        error = ConversionError(Path("deck.pptx"), "boom", cause=cause)

        assert str(error) == "Conversion failed for deck.pptx: boom"
        assert error.file_path == Path("deck.pptx")
        assert error.cause is cause

    def test_unavailable_names_tool(self):
        error = ConverterUnavailableError(Path("deck.pptx"), "LibreOffice")

        assert error.tool == "LibreOffice"
        assert "LibreOffice not found" in str(error)

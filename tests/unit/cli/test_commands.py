"""Tests for the qrcode, cleanup, stats and delete commands."""

import os
import time

import pytest
from PIL import Image
from typer.testing import CliRunner

from slidecode import __version__
from slidecode.cli.main import app


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def populated(isolated_settings):
    """Workspace in the working directory with one processed deck."""
    root = isolated_settings
    (root / "uploads").mkdir()
    (root / "uploads" / "deck-1-2.pptx").write_bytes(b"deck")
    (root / "converted" / "deck-1-2" / "images").mkdir(parents=True)
    (root / "converted" / "deck-1-2" / "images" / "slide-001.png").write_bytes(b"png")
    (root / "qrcodes").mkdir()
    (root / "qrcodes" / "deck-1-2.png").write_bytes(b"png")
    return root


class TestMainApp:
    """Tests for the top-level app."""

    def test_version(self, runner):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("batch", "qrcode", "cleanup", "stats", "delete"):
            assert command in result.output


class TestQrcodeCommand:
    """Tests for the qrcode command."""

    def test_default_output(self, runner, isolated_settings):
        result = runner.invoke(app, ["qrcode", "https://example.com", "--name", "My Deck.pptx"])

        assert result.exit_code == 0, result.output
        image = Image.open(isolated_settings / "My_Deck.png")
        assert image.size == (400, 450)

    def test_explicit_output_and_style(self, runner, isolated_settings):
        output = isolated_settings / "out" / "code.png"

        result = runner.invoke(
            app,
            [
                "qrcode",
                "https://example.com",
                "--name",
                "deck.pptx",
                "-o",
                str(output),
                "--style",
                "shadow",
                "--code-size",
                "150",
            ],
        )

        assert result.exit_code == 0, result.output
        assert Image.open(output).size == (250, 300)

    def test_invalid_color(self, runner, isolated_settings):  # noqa: ARG002
        result = runner.invoke(
            app,
            ["qrcode", "https://example.com", "--name", "d.pptx", "--background", "nope"],
        )

        assert result.exit_code == 1

    def test_output_is_directory(self, runner, isolated_settings):
        result = runner.invoke(
            app,
            ["qrcode", "https://example.com", "--name", "d.pptx", "-o", str(isolated_settings)],
        )

        assert result.exit_code != 0


class TestStorageCommands:
    """Tests for cleanup, stats and delete."""

    def test_stats(self, runner, populated):  # noqa: ARG002
        result = runner.invoke(app, ["stats"])

        assert result.exit_code == 0
        assert "Uploads" in result.output
        assert "Converted" in result.output
        assert "QR codes" in result.output

    def test_cleanup_old_uploads(self, runner, populated):
        staged = populated / "uploads" / "deck-1-2.pptx"
        old = time.time() - 3 * 3600
        os.utime(staged, (old, old))

        result = runner.invoke(app, ["cleanup", "--max-age-hours", "2"])

        assert result.exit_code == 0
        assert "Deleted 1" in result.output
        assert not staged.exists()

    def test_cleanup_keeps_recent(self, runner, populated):
        result = runner.invoke(app, ["cleanup"])

        assert result.exit_code == 0
        assert (populated / "uploads" / "deck-1-2.pptx").exists()

    def test_cleanup_invalid_age(self, runner, populated):  # noqa: ARG002
        result = runner.invoke(app, ["cleanup", "--max-age-hours", "0"])

        assert result.exit_code == 1

    def test_delete(self, runner, populated):
        result = runner.invoke(app, ["delete", "deck-1-2"])

        assert result.exit_code == 0
        assert not (populated / "converted" / "deck-1-2").exists()
        assert not (populated / "qrcodes" / "deck-1-2.png").exists()
        assert not (populated / "uploads" / "deck-1-2.pptx").exists()

    def test_delete_unknown(self, runner, populated):  # noqa: ARG002
        result = runner.invoke(app, ["delete", "nothing-here"])

        assert result.exit_code == 1

    def test_delete_rejects_path(self, runner, populated):  # noqa: ARG002
        result = runner.invoke(app, ["delete", "../etc"])

        assert result.exit_code != 0

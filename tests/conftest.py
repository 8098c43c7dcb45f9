"""Pytest configuration and fixtures."""

import os
import tempfile
from pathlib import Path

import anyio
import pytest

from slidecode.converters.base import BaseSlideConverter, ConvertedDeck
from slidecode.core.storage import Workspace
from slidecode.exceptions import ConversionError
from slidecode.image.compositor import CodeImageCompositor

FAKE_SLIDE = b"\x89PNG fake slide"

# Stand-in soffice prologue: picks --outdir and the input deck off the command line
SOFFICE_PROLOGUE = """#!/bin/sh
for arg in "$@"; do
  if [ "$prev" = "--outdir" ]; then outdir="$arg"; fi
  prev="$arg"
  deck="$arg"
done
name=$(basename "$deck")
stem="${name%.*}"
"""


class FakeSlideConverter(BaseSlideConverter):
    """In-process converter for pipeline tests.

    Decks whose stem is listed in ``fail_on`` raise ConversionError, stems in
    ``hang_on`` never finish. Tracks how many conversions run at once.
    """

    name = "fake"

    def __init__(
        self,
        converted_root: Path,
        fail_on: tuple[str, ...] = (),
        hang_on: tuple[str, ...] = (),
        delay: float = 0.0,
    ) -> None:
        self.converted_root = converted_root
        self.fail_on = fail_on
        self.hang_on = hang_on
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self.calls: list[str] = []

    async def convert(self, staged_path: Path, file_id: str) -> ConvertedDeck:
        self.calls.append(file_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            output_dir = self.converted_root / file_id
            images = output_dir / "images"
            images.mkdir(parents=True, exist_ok=True)
            await anyio.sleep(self.delay)

            stem = file_id.rsplit("-", 2)[0]
            if stem in self.hang_on:
                await anyio.sleep(3600)
            if stem in self.fail_on:
                raise ConversionError(staged_path, "simulated converter failure")

            slide = images / "slide-001.png"
            slide.write_bytes(FAKE_SLIDE)
            return ConvertedDeck(output_dir=output_dir, slides=[slide])
        finally:
            self.in_flight -= 1


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def isolated_settings(tmp_path, monkeypatch):
    """Run in an empty directory without slidecode.yaml or SLIDECODE_ variables."""
    from slidecode.config.settings import get_settings

    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("SLIDECODE_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


@pytest.fixture
def workspace(temp_dir: Path) -> Workspace:
    """Workspace rooted in a temporary directory."""
    ws = Workspace(temp_dir / "workspace")
    ws.ensure()
    return ws


@pytest.fixture
def compositor(workspace: Workspace) -> CodeImageCompositor:
    """Compositor writing into the workspace's qrcodes/ directory."""
    return CodeImageCompositor(workspace.qrcodes_dir)


@pytest.fixture
def fake_converter(workspace: Workspace) -> FakeSlideConverter:
    """Converter that succeeds for every deck."""
    return FakeSlideConverter(workspace.converted_dir)


@pytest.fixture
def source_dir(temp_dir: Path) -> Path:
    """Directory with three sample decks a, b, c."""
    directory = temp_dir / "decks"
    directory.mkdir()
    for name in ("a.pptx", "b.pptx", "c.pptx"):
        (directory / name).write_bytes(b"PK\x03\x04 fake deck " + name.encode())
    return directory


@pytest.fixture
def sample_deck(source_dir: Path) -> Path:
    """A single sample deck."""
    return source_dir / "a.pptx"


@pytest.fixture
def no_soffice(monkeypatch):
    """Pretend LibreOffice is not installed."""
    monkeypatch.setattr("slidecode.converters.office.find_soffice", lambda: None)


@pytest.fixture
def make_converter(workspace: Workspace):
    """Factory for fake converters bound to the workspace."""

    def factory(**kwargs) -> FakeSlideConverter:
        return FakeSlideConverter(workspace.converted_dir, **kwargs)

    return factory


@pytest.fixture
def fake_soffice(tmp_path):
    """Factory writing an executable shell stand-in for soffice."""

    def factory(body: str) -> str:
        script = tmp_path / "bin" / "soffice"
        script.parent.mkdir(exist_ok=True)
        script.write_text(SOFFICE_PROLOGUE + body)
        script.chmod(0o755)
        return str(script)

    return factory

"""Tests for filesystem utilities."""

import re

from slidecode.utils.fs import (
    directory_size,
    discover_source_files,
    ensure_directory,
    format_size,
    generate_file_id,
    get_unique_path,
    remove_path,
    sanitize_stem,
)


class TestSanitizeStem:
    """Tests for sanitize_stem."""

    def test_strips_extension(self):
        assert sanitize_stem("deck.pptx") == "deck"

    def test_replaces_non_alphanumerics(self):
        assert sanitize_stem("Q3 review (final).pptx") == "Q3_review__final_"

    def test_non_ascii_replaced(self):
        assert sanitize_stem("报告.pptx") == "__"

    def test_empty_falls_back(self):
        assert sanitize_stem("") == "file"


class TestGenerateFileId:
    """Tests for generate_file_id."""

    def test_format(self):
        """Identifier is <stem>-<time_ns>-<random>."""
        file_id = generate_file_id("My Deck.pptx")
        assert re.fullmatch(r"My_Deck-\d+-\d+", file_id)

    def test_unique_for_same_name(self):
        """1000 identifiers for the same name are all distinct."""
        ids = {generate_file_id("deck.pptx") for _ in range(1000)}
        assert len(ids) == 1000

    def test_safe_as_path_component(self):
        file_id = generate_file_id("../../etc/passwd")
        assert "/" not in file_id
        assert ".." not in file_id


class TestPaths:
    """Tests for path helpers."""

    def test_ensure_directory_creates_parents(self, tmp_path):
        target = tmp_path / "a" / "b"
        assert ensure_directory(target) == target
        assert target.is_dir()

    def test_get_unique_path_unused(self, tmp_path):
        path = tmp_path / "report.json"
        assert get_unique_path(path) == path

    def test_get_unique_path_adds_counter(self, tmp_path):
        path = tmp_path / "report.json"
        path.touch()
        (tmp_path / "report_1.json").touch()
        assert get_unique_path(path) == tmp_path / "report_2.json"

    def test_remove_path_file_and_tree(self, tmp_path):
        file_path = tmp_path / "f.txt"
        file_path.write_text("x")
        tree = tmp_path / "tree"
        (tree / "sub").mkdir(parents=True)
        (tree / "sub" / "g.txt").write_text("y")

        assert remove_path(file_path) is True
        assert remove_path(tree) is True
        assert not file_path.exists()
        assert not tree.exists()

    def test_remove_path_missing(self, tmp_path):
        assert remove_path(tmp_path / "missing") is False

    def test_directory_size(self, tmp_path):
        (tmp_path / "a.bin").write_bytes(b"1234")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "b.bin").write_bytes(b"123456")
        assert directory_size(tmp_path) == 10


class TestDiscoverSourceFiles:
    """Tests for discover_source_files."""

    def test_empty_dir(self, tmp_path):
        assert discover_source_files(tmp_path) == []

    def test_filters_and_sorts(self, tmp_path):
        for name in ("c.pptx", "a.PPT", "b.odp", "notes.txt", ".hidden.pptx"):
            (tmp_path / name).touch()

        files = discover_source_files(tmp_path)

        assert [f.name for f in files] == ["a.PPT", "b.odp", "c.pptx"]

    def test_recursive(self, tmp_path):
        sub = tmp_path / "sub"
        sub.mkdir()
        (tmp_path / "root.pptx").touch()
        (sub / "nested.pptx").touch()

        assert len(discover_source_files(tmp_path)) == 1
        assert len(discover_source_files(tmp_path, recursive=True)) == 2

    def test_custom_extensions(self, tmp_path):
        (tmp_path / "deck.pptx").touch()
        (tmp_path / "deck.key").touch()

        files = discover_source_files(tmp_path, extensions=[".KEY"])

        assert [f.name for f in files] == ["deck.key"]


class TestFormatSize:
    """Tests for format_size."""

    def test_bytes(self):
        assert format_size(512) == "512.0 B"

    def test_kilobytes(self):
        assert format_size(2048) == "2.0 KB"

    def test_megabytes(self):
        assert format_size(5 * 1024 * 1024) == "5.0 MB"

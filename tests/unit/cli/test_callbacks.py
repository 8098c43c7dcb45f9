import pytest
import typer

from slidecode.cli.callbacks import validate_file_id, validate_output_file


class TestCallbacks:
    def test_validate_output_file_none(self):
        """Test validation of None output path."""
        assert validate_output_file(None) is None

    def test_validate_output_file_new(self, tmp_path):
        """Test validation of a not yet existing output file."""
        target = tmp_path / "code.png"
        assert validate_output_file(target) == target

    def test_validate_output_file_directory(self, tmp_path):
        """Test validation fails if output path is a directory."""
        with pytest.raises(typer.BadParameter, match="is a directory"):
            validate_output_file(tmp_path)

    def test_validate_file_id_valid(self):
        """Test validation of a generated identifier."""
        assert validate_file_id("deck-1700000000-42") == "deck-1700000000-42"

    @pytest.mark.parametrize("value", ["", ".", "..", "../x", "a/b", "a\\b"])
    def test_validate_file_id_rejects_paths(self, value):
        """Test validation fails for anything that is not a single path component."""
        with pytest.raises(typer.BadParameter, match="Invalid file identifier"):
            validate_file_id(value)

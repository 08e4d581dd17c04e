"""Tests for the command line interface."""

import io
import json
import logging

import pytest

from recipe_pipeline.cli import detect_source_kind, main, parse_args

COOKIE_TEXT = "CHOCOLATE CHIP COOKIES\n2 cups flour\n1 cup sugar\nMix dry ingredients.\nBake at 350F.\n"


@pytest.fixture(autouse=True)
def restore_logging():
    """main() reconfigures the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def recipe_file(tmp_path):
    path = tmp_path / "cookies.txt"
    path.write_text(COOKIE_TEXT, encoding="utf-8")
    return path


class TestDetectSourceKind:
    """Tests for detect_source_kind function."""

    def test_by_suffix_and_scheme(self):
        """Test URL, image, HTML and text detection."""
        assert detect_source_kind(parse_args(["https://example.com/a"])) == "url"
        assert detect_source_kind(parse_args(["card.JPG"])) == "image"
        assert detect_source_kind(parse_args(["page.html"])) == "html"
        assert detect_source_kind(parse_args(["notes.txt"])) == "text"
        assert detect_source_kind(parse_args(["-"])) == "text"

    def test_flags_override_suffix(self):
        """Test --html and --image flags."""
        assert detect_source_kind(parse_args(["--html", "saved.txt"])) == "html"
        assert detect_source_kind(parse_args(["--image", "scan"])) == "image"


class TestMain:
    """Tests for main function."""

    def test_text_file(self, recipe_file, capsys):
        """Test a text file prints the draft as JSON."""
        assert main([str(recipe_file)]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["title"] == "Chocolate Chip Cookies"
        assert output["ingredients"] == ["2 cups flour", "1 cup sugar"]
        assert output["instructions"] == ["Mix dry ingredients.", "Bake at 350F."]

    def test_parse_ingredients(self, recipe_file, capsys):
        """Test --parse-ingredients prints structured ingredients."""
        assert main(["--parse-ingredients", str(recipe_file)]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["ingredients"][0] == {
            "name": "flour", "quantity": 2.0, "unit": "cup", "comment": None,
        }

    def test_stdin(self, monkeypatch, capsys):
        """Test reading the recipe from stdin."""
        monkeypatch.setattr("sys.stdin", io.StringIO(COOKIE_TEXT))

        assert main(["-"]) == 0
        assert json.loads(capsys.readouterr().out)["title"] == "Chocolate Chip Cookies"

    def test_multi(self, tmp_path, capsys):
        """Test --multi prints one draft per recipe."""
        path = tmp_path / "spread.txt"
        path.write_text(
            COOKIE_TEXT + "BANANA BREAD\n3 ripe bananas\n2 cups flour\nMash the bananas.\nBake for 60 minutes.\n",
            encoding="utf-8",
        )

        assert main(["--multi", str(path)]) == 0

        output = json.loads(capsys.readouterr().out)
        assert [draft["title"] for draft in output] == ["Chocolate Chip Cookies", "Banana Bread"]

    def test_missing_file(self, tmp_path):
        """Test an unreadable source exits with an error."""
        assert main([str(tmp_path / "missing.txt")]) == 1

    def test_empty_input(self, tmp_path, capsys):
        """Test a pipeline failure is reported on stderr."""
        path = tmp_path / "empty.txt"
        path.write_text("", encoding="utf-8")

        assert main([str(path)]) == 1
        assert "No text was detected" in capsys.readouterr().err

    def test_log_file(self, recipe_file, tmp_path):
        """Test --log-file writes pipeline logs."""
        log_path = tmp_path / "logs" / "run.log"

        assert main(["--log-file", str(log_path), str(recipe_file)]) == 0
        assert "Processing completed" in log_path.read_text(encoding="utf-8")

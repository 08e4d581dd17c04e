"""Tests for the reconstructor module."""

from recipe_pipeline.reconstructor import (
    ReconstructedText,
    filter_artifacts,
    reconstruct_text,
    starts_new_line,
)


class TestFilterArtifacts:
    """Tests for filter_artifacts function."""

    def test_short_and_numeric_lines(self):
        """Test that page numbers and stray glyphs become artifacts."""
        kept, artifacts = filter_artifacts(["Pancakes", "12", "a", "1 cup milk", "2024"])

        assert kept == ["Pancakes", "1 cup milk"]
        assert artifacts == ["12", "a", "2024"]

    def test_empty_lines_dropped_silently(self):
        """Test that blank lines are neither kept nor recorded."""
        kept, artifacts = filter_artifacts(["", "   ", "Soup"])

        assert kept == ["Soup"]
        assert artifacts == []


class TestStartsNewLine:
    """Tests for starts_new_line function."""

    def test_new_line_starts(self):
        """Test capitalised, numeric, bulleted and fraction starts."""
        assert starts_new_line("Mix well")
        assert starts_new_line("2 eggs")
        assert starts_new_line("• salt")
        assert starts_new_line("½ cup milk")

    def test_continuation(self):
        """Test that a lower-case start continues the previous line."""
        assert not starts_new_line("flour and sugar.")

    def test_fraction_must_lead(self):
        """Test that a fraction glyph after the first character does not open a line."""
        assert not starts_new_line("a½ cup more")
        assert starts_new_line("1½ cups flour")


class TestReconstructText:
    """Tests for reconstruct_text function."""

    def test_uppercase_title_spans_lines(self):
        """Test that consecutive upper-case lines join into one title."""
        result = reconstruct_text(["SOUP", "RECIPE", "2 cups water"])

        assert result.title == "SOUP RECIPE"
        assert result.lines == ("SOUP RECIPE", "2 cups water")

    def test_wrapped_sentence_is_merged(self):
        """Test that a lower-case continuation joins the previous line."""
        result = reconstruct_text(["Mix the", "flour and sugar."])

        assert result.title == "Mix the"
        assert result.lines == ("Mix the flour and sugar.",)

    def test_period_closes_line(self):
        """Test that a line ending in a period is not extended."""
        result = reconstruct_text(["Tomato Soup", "Simmer gently.", "then blend"])

        assert result.lines == ("Tomato Soup", "Simmer gently.", "then blend")

    def test_bullets_and_fractions_start_new_lines(self):
        """Test list markers and fraction glyphs with a wrapped bullet."""
        result = reconstruct_text(["Pancakes", "½ cup milk", "• 2 eggs", "whisked"])

        assert result.lines == ("Pancakes", "½ cup milk", "• 2 eggs whisked")

    def test_artifacts_recorded(self):
        """Test that artifacts are kept for diagnostics and not in lines."""
        result = reconstruct_text(["Pancakes", "12", "a", "", "1 cup milk"])

        assert result.title == "Pancakes"
        assert result.lines == ("Pancakes", "1 cup milk")
        assert result.artifacts == ("12", "a")

    def test_no_text_is_lost(self):
        """Test that every kept input line appears in the output."""
        raw = ["BEEF STEW", "2 lbs beef", "Brown the meat in", "batches.", "7", "Serve hot"]
        result = reconstruct_text(raw)

        joined = "\n".join(result.lines)
        for line in raw:
            assert line in joined or line in result.artifacts

    def test_single_line(self):
        """Test that a single line is both title and content."""
        result = reconstruct_text(["Tomato Soup"])

        assert result.title == "Tomato Soup"
        assert result.lines == ("Tomato Soup",)

    def test_empty_input(self):
        """Test empty and artifact-only input."""
        assert reconstruct_text([]) == ReconstructedText()

        result = reconstruct_text(["", "1", "ab"])
        assert result.title == ""
        assert result.lines == ()
        assert result.artifacts == ("1", "ab")

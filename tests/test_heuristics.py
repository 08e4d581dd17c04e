"""Tests for the heuristics module."""

from recipe_pipeline.heuristics import (
    clean_line,
    extract_lines_from_html,
    is_end_marker_line,
    is_ingredient_block,
    is_ingredient_line,
    is_instruction_block,
    is_instruction_line,
    is_properly_capitalized,
    is_section_header_line,
    is_serving_line,
    is_summary_line,
    is_time_line,
    is_title_line,
)


class TestIsIngredientLine:
    """Tests for is_ingredient_line function."""

    def test_quantity_and_unit(self):
        """Test lines starting with quantity + unit."""
        assert is_ingredient_line("2 cups all-purpose flour") > 0.5
        assert is_ingredient_line("1/2 teaspoon salt") > 0.5
        assert is_ingredient_line("3 tablespoons olive oil") > 0.5

    def test_number_and_word(self):
        """Test lines starting with a number + ingredient."""
        assert is_ingredient_line("3 eggs") > 0.3
        assert is_ingredient_line("2 onions, diced") > 0.3

    def test_bullet_and_number(self):
        """Test bullet points with numbers."""
        assert is_ingredient_line("- 2 cloves garlic") > 0.5

    def test_fraction_characters(self):
        """Test lines with unicode fraction characters."""
        assert is_ingredient_line("¼ cup butter") > 0.5
        assert is_ingredient_line("½ teaspoon vanilla") > 0.5

    def test_not_ingredient(self):
        """Test lines that are not ingredients."""
        assert is_ingredient_line("Preheat the oven to 350°F") < 0.4
        assert is_ingredient_line("Mix until well combined") < 0.4

    def test_empty_and_short(self):
        """Test empty and single-character input."""
        assert is_ingredient_line("") == 0.0
        assert is_ingredient_line("a") == 0.0


class TestIsInstructionLine:
    """Tests for is_instruction_line function."""

    def test_numbered_steps(self):
        """Test numbered instruction steps."""
        assert is_instruction_line("1. Preheat oven to 350°F") > 0.5
        assert is_instruction_line("2) Mix the dry ingredients") > 0.5

    def test_starts_with_verb(self):
        """Test lines starting with cooking verbs."""
        assert is_instruction_line("Preheat the oven to 350°F") > 0.4
        assert is_instruction_line("Mix the flour and sugar") >= 0.4
        assert is_instruction_line("Bake for 25 minutes") > 0.4

    def test_sentence_with_period(self):
        """Test that a terminated sentence scores higher than a fragment."""
        assert is_instruction_line("Mix dry ingredients.") > is_instruction_line("Mix dry ingredients")

    def test_not_instruction(self):
        """Test lines that are not instructions."""
        assert is_instruction_line("2 cups all-purpose flour") < 0.3
        assert is_instruction_line("1/2 teaspoon salt") < 0.3


class TestIsTimeLine:
    """Tests for is_time_line function."""

    def test_labelled_time(self):
        """Test timing lines with a label."""
        assert is_time_line("Prep time: 20 min") == 0.9
        assert is_time_line("Cook: 45 minutes") == 0.9
        assert is_time_line("Total Time - 1 hour") == 0.9

    def test_bare_duration(self):
        """Test short duration lines without a label."""
        assert is_time_line("45 minutes") == 0.8
        assert is_time_line("about 2 hours") == 0.8

    def test_not_time(self):
        """Test lines that mention time inside a sentence."""
        assert is_time_line("Bake for 25 minutes") == 0.0
        assert is_time_line("") == 0.0


class TestIsServingLine:
    """Tests for is_serving_line function."""

    def test_serving_statements(self):
        """Test serves/makes/yield lines."""
        assert is_serving_line("Serves 4") == 0.9
        assert is_serving_line("Makes 24 cookies") == 0.9
        assert is_serving_line("Yield: 2 loaves") == 0.9

    def test_count_first(self):
        """Test lines that lead with the count."""
        assert is_serving_line("4 servings") == 0.8
        assert is_serving_line("6-8 people") == 0.8

    def test_needs_a_number(self):
        """Test that a bare serving word is not a serving line."""
        assert is_serving_line("Serves a crowd") == 0.0


class TestIsTitleLine:
    """Tests for is_title_line function."""

    def test_title_case_heading(self):
        """Test short capitalized headings."""
        assert is_title_line("Chocolate Chip Cookies") == 0.8
        assert is_title_line("BANANA BREAD") == 0.8

    def test_rejects_quantities_and_sentences(self):
        """Test lines that cannot be titles."""
        assert is_title_line("2 cups flour") == 0.0
        assert is_title_line("Mix dry ingredients.") == 0.0
        assert is_title_line("Ingredients") == 0.0

    def test_verb_start_penalized(self):
        """Test that a heading starting with a cooking verb scores lower."""
        assert is_title_line("Bake The Bread") < is_title_line("Banana Bread")


class TestIsSummaryLine:
    """Tests for is_summary_line function."""

    def test_descriptive_prose(self):
        """Test a long first-person headnote."""
        line = "This is the cake my grandmother made every summer when we visited her farm"
        assert is_summary_line(line) >= 0.65

    def test_short_line(self):
        """Test that short lines are not summaries."""
        assert is_summary_line("A lovely cake") == 0.0


class TestHelpers:
    """Tests for line helper functions."""

    def test_clean_line(self):
        """Test whitespace and bullet removal."""
        assert clean_line("  •  2   cups flour ") == "2 cups flour"
        assert clean_line("- 1 egg") == "1 egg"
        assert clean_line("+ 1 egg") == "1 egg"

    def test_is_properly_capitalized(self):
        """Test heading-style capitalization detection."""
        assert is_properly_capitalized("Grandma's Apple Pie")
        assert is_properly_capitalized("SOUP")
        assert not is_properly_capitalized("mix the flour")
        assert not is_properly_capitalized("")

    def test_section_headers(self):
        """Test section header detection."""
        assert is_section_header_line("Ingredients:")
        assert is_section_header_line("Directions")
        assert is_section_header_line("Prep time: 10 min")
        assert not is_section_header_line("2 cups flour")

    def test_end_markers(self):
        """Test end marker detection."""
        assert is_end_marker_line("Nutrition Facts")
        assert is_end_marker_line("© 2024 Weekend Kitchen")
        assert is_end_marker_line("Per serving: 250 calories")
        assert not is_end_marker_line("Serves 4")


class TestBlockClassifiers:
    """Tests for web text block classifiers."""

    def test_ingredient_block(self):
        """Test quantity, keyword and bullet ingredient blocks."""
        assert is_ingredient_block("2 cups flour")
        assert is_ingredient_block("Salt to taste")
        assert is_ingredient_block("• a handful of herbs")

    def test_long_block_is_not_ingredient(self):
        """Test that long blocks are rejected as ingredients."""
        assert not is_ingredient_block("salt " + "x" * 250)

    def test_instruction_block(self):
        """Test verb and numbered instruction blocks."""
        assert is_instruction_block("Mix the flour and sugar together well.")
        assert is_instruction_block("3. Let the dough rest overnight in the fridge")

    def test_short_block_is_not_instruction(self):
        """Test that short blocks are rejected as instructions."""
        assert not is_instruction_block("Stir.")


class TestExtractLinesFromHtml:
    """Tests for extract_lines_from_html function."""

    def test_headings_and_list_items(self):
        """Test that headings and list items become plain lines."""
        html = """
        <h2>Ingredients</h2>
        <ul><li>2 cups flour</li><li>1 cup sugar</li></ul>
        <h2>Directions</h2>
        <p>Mix everything together.</p>
        """
        lines = extract_lines_from_html(html)

        assert lines == [
            "Ingredients",
            "2 cups flour",
            "1 cup sugar",
            "Directions",
            "Mix everything together.",
        ]

    def test_empty_html(self):
        """Test empty input."""
        assert extract_lines_from_html("") == []
        assert extract_lines_from_html("   ") == []

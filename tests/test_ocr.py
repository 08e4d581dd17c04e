"""Tests for the ocr module."""

import pytest
from PIL import Image

from recipe_pipeline import ocr
from recipe_pipeline.ocr import (
    TesseractTextRecognizer,
    TextBlock,
    blocks_from_tesseract_data,
    group_blocks_into_columns,
    order_blocks,
)


def tesseract_data(words):
    """Build an image_to_data style dict from (text, block, par, line, left, top, width, height, conf)."""
    keys = ['text', 'block_num', 'par_num', 'line_num', 'left', 'top', 'width', 'height', 'conf']
    return {key: [word[i] for word in words] for i, key in enumerate(keys)}


class TestTextBlock:
    """Tests for TextBlock geometry."""

    def test_edges(self):
        """Test right and bottom edges."""
        block = TextBlock("Soup", left=10, top=20, width=100, height=15)

        assert block.right == 110
        assert block.bottom == 35


class TestGroupBlocksIntoColumns:
    """Tests for group_blocks_into_columns function."""

    def test_two_columns(self):
        """Test blocks split into left and right columns."""
        blocks = [
            TextBlock("left 1", 0, 0, 200, 10),
            TextBlock("right 1", 300, 0, 200, 10),
            TextBlock("left 2", 10, 20, 150, 10),
            TextBlock("right 2", 320, 20, 100, 10),
        ]

        columns = group_blocks_into_columns(blocks)

        assert [[b.text for b in column] for column in columns] == [
            ["left 1", "left 2"],
            ["right 1", "right 2"],
        ]

    def test_extent_grows(self):
        """Test that a wide block joins blocks that overlap only the grown column."""
        blocks = [
            TextBlock("narrow", 0, 0, 50, 10),
            TextBlock("wide", 40, 20, 200, 10),
            TextBlock("far", 200, 40, 30, 10),
        ]

        columns = group_blocks_into_columns(blocks)

        assert len(columns) == 1

    def test_touching_edges_do_not_overlap(self):
        """Test that blocks sharing only an edge are separate columns."""
        blocks = [TextBlock("a", 0, 0, 100, 10), TextBlock("b", 100, 0, 100, 10)]

        assert len(group_blocks_into_columns(blocks)) == 2

    def test_empty(self):
        """Test no blocks."""
        assert group_blocks_into_columns([]) == []


class TestOrderBlocks:
    """Tests for order_blocks function."""

    def test_left_column_first_top_to_bottom(self):
        """Test reading order across two columns."""
        blocks = [
            TextBlock("Mix well.", 300, 50, 200, 10),
            TextBlock("2 cups flour", 0, 50, 200, 10),
            TextBlock("Preheat oven.", 300, 10, 200, 10),
            TextBlock("PANCAKES", 0, 10, 200, 10),
        ]

        assert order_blocks(blocks) == ["PANCAKES", "2 cups flour", "Preheat oven.", "Mix well."]


class TestBlocksFromTesseractData:
    """Tests for blocks_from_tesseract_data function."""

    def test_words_grouped_into_lines(self):
        """Test word boxes merge into one block per line."""
        data = tesseract_data([
            ("", 1, 0, 0, 0, 0, 500, 300, -1),
            ("2", 1, 1, 1, 10, 20, 10, 12, 90),
            ("cups", 1, 1, 1, 25, 20, 40, 12, 80),
            ("flour", 1, 1, 1, 70, 22, 45, 12, 70),
            ("Mix", 1, 1, 2, 10, 40, 30, 12, 95),
        ])

        blocks = blocks_from_tesseract_data(data)

        assert len(blocks) == 2
        first = blocks[0]
        assert first.text == "2 cups flour"
        assert (first.left, first.top, first.right, first.bottom) == (10, 20, 115, 34)
        assert first.confidence == pytest.approx(0.8)
        assert blocks[1].text == "Mix"

    def test_negative_confidence_clamped(self):
        """Test that tesseract's -1 confidence counts as zero."""
        data = tesseract_data([("Soup", 1, 1, 1, 0, 0, 40, 10, -1)])

        assert blocks_from_tesseract_data(data)[0].confidence == 0.0

    def test_empty(self):
        """Test output without words."""
        assert blocks_from_tesseract_data({'text': []}) == []


class TestTesseractTextRecognizer:
    """Tests for TesseractTextRecognizer."""

    def test_recognize_image(self, monkeypatch):
        """Test recognition returns lines in reading order."""
        data = tesseract_data([
            ("Mix", 2, 1, 1, 300, 10, 30, 12, 90),
            ("well.", 2, 1, 1, 335, 10, 40, 12, 90),
            ("PANCAKES", 1, 1, 1, 0, 10, 120, 12, 90),
        ])
        calls = []

        def fake_image_to_data(image, lang, config, output_type):
            calls.append((image.mode, lang, config))
            return data

        monkeypatch.setattr(ocr.pytesseract, "image_to_data", fake_image_to_data)

        lines = TesseractTextRecognizer().recognize_text(Image.new("L", (20, 20)))

        assert lines == ["PANCAKES", "Mix well."]
        assert calls == [("RGB", "eng", "--oem 3 --psm 3")]

    def test_recognize_path(self, monkeypatch, tmp_path):
        """Test that image paths are opened."""
        path = tmp_path / "card.png"
        Image.new("RGB", (20, 20)).save(path)
        monkeypatch.setattr(
            ocr.pytesseract, "image_to_data",
            lambda image, **kwargs: tesseract_data([("Soup", 1, 1, 1, 0, 0, 40, 10, 90)])
        )

        assert TesseractTextRecognizer().recognize_text(path) == ["Soup"]

    def test_failure_returns_empty(self, monkeypatch):
        """Test that OCR errors are swallowed into an empty result."""
        def failing_image_to_data(*args, **kwargs):
            raise RuntimeError("tesseract is not installed")

        monkeypatch.setattr(ocr.pytesseract, "image_to_data", failing_image_to_data)

        assert TesseractTextRecognizer().recognize_text(Image.new("RGB", (20, 20))) == []

    def test_missing_file_returns_empty(self, tmp_path):
        """Test that an unreadable path yields no lines."""
        assert TesseractTextRecognizer().recognize_text(tmp_path / "missing.png") == []

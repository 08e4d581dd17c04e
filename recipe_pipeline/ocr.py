"""
Text recognition for recipe photos.

This module provides the OCR capability the pipeline consumes: an image in,
an ordered list of text lines out. Recognition never raises; a failed run
returns an empty list and the pipeline reports "no text detected".

Recognized lines are re-ordered by layout so a two-column cookbook page reads
left column first, each column top to bottom.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, Union

import pytesseract
from PIL import Image

logger = logging.getLogger(__name__)

ImageSource = Union[str, Path, Image.Image]

# OEM 3: default engine, PSM 3: fully automatic page segmentation
DEFAULT_TESSERACT_CONFIG = r'--oem 3 --psm 3'


class TextRecognizer(Protocol):
    """OCR capability: returns recognized lines, or [] on any failure."""

    def recognize_text(self, image: Any) -> list[str]:
        ...


@dataclass(frozen=True)
class TextBlock:
    """A recognized line of text and its bounding box in pixels."""
    text: str
    left: int
    top: int
    width: int
    height: int
    confidence: float = 0.0

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height


def _overlaps_horizontally(left: int, right: int, block: TextBlock) -> bool:
    return min(right, block.right) - max(left, block.left) > 0


def group_blocks_into_columns(blocks: list[TextBlock]) -> list[list[TextBlock]]:
    """
    Group blocks into columns by horizontal overlap.

    Each column starts from the first unassigned block and absorbs every
    later block whose horizontal extent overlaps the column's extent so far;
    the extent grows as blocks are added.

    Args:
        blocks: Recognized blocks in any order

    Returns:
        Columns, each a list of blocks in input order
    """
    columns = []
    remaining = list(blocks)

    while remaining:
        first = remaining.pop(0)
        column = [first]
        left, right = first.left, first.right

        unassigned = []
        for block in remaining:
            if _overlaps_horizontally(left, right, block):
                column.append(block)
                left, right = min(left, block.left), max(right, block.right)
            else:
                unassigned.append(block)
        remaining = unassigned

        columns.append(column)

    return columns


def order_blocks(blocks: list[TextBlock]) -> list[str]:
    """
    Return block texts in reading order: columns left to right, then top to bottom.

    Examples:
        >>> order_blocks([TextBlock("b", 300, 0, 100, 10), TextBlock("a", 0, 50, 100, 10)])
        ['a', 'b']
    """
    columns = group_blocks_into_columns(blocks)
    columns.sort(key=lambda column: min(block.left for block in column))

    ordered = []
    for column in columns:
        for block in sorted(column, key=lambda block: block.top):
            ordered.append(block.text)
    return ordered


def blocks_from_tesseract_data(data: dict) -> list[TextBlock]:
    """
    Assemble word-level image_to_data output into line blocks.

    Words sharing a (block, paragraph, line) number become one TextBlock
    whose box is the union of the word boxes and whose confidence is the
    mean word confidence on a 0-1 scale.
    """
    lines: dict[tuple, dict] = {}

    for i, word in enumerate(data.get('text', [])):
        word = (word or '').strip()
        if not word:
            continue

        key = (data['block_num'][i], data['par_num'][i], data['line_num'][i])
        left, top = int(data['left'][i]), int(data['top'][i])
        right, bottom = left + int(data['width'][i]), top + int(data['height'][i])
        confidence = max(float(data['conf'][i]), 0.0)

        line = lines.setdefault(key, {
            'words': [], 'left': left, 'top': top, 'right': right, 'bottom': bottom, 'conf': []
        })
        line['words'].append(word)
        line['left'] = min(line['left'], left)
        line['top'] = min(line['top'], top)
        line['right'] = max(line['right'], right)
        line['bottom'] = max(line['bottom'], bottom)
        line['conf'].append(confidence)

    return [
        TextBlock(
            text=' '.join(line['words']),
            left=line['left'],
            top=line['top'],
            width=line['right'] - line['left'],
            height=line['bottom'] - line['top'],
            confidence=sum(line['conf']) / len(line['conf']) / 100.0,
        )
        for line in lines.values()
    ]


class TesseractTextRecognizer:
    """
    Tesseract-backed TextRecognizer.

    Args:
        config: Extra tesseract command-line flags
        lang: Tesseract language code(s)
    """

    def __init__(self, config: str = DEFAULT_TESSERACT_CONFIG, lang: str = 'eng'):
        self.config = config
        self.lang = lang

    def recognize_text(self, image: ImageSource) -> list[str]:
        """
        Recognize text lines in an image, in layout reading order.

        Args:
            image: File path or PIL image

        Returns:
            Recognized lines; empty if the image cannot be read or OCR fails
        """
        try:
            if isinstance(image, (str, Path)):
                with Image.open(image) as img:
                    data = self._image_to_data(img)
            else:
                data = self._image_to_data(image)
            lines = order_blocks(blocks_from_tesseract_data(data))
        except Exception as e:
            logger.error(f"Text recognition failed: {e}", exc_info=True)
            return []

        logger.info(f"Recognized {len(lines)} lines of text")
        return lines

    def _image_to_data(self, img: Image.Image) -> dict:
        return pytesseract.image_to_data(
            img.convert('RGB'),
            lang=self.lang,
            config=self.config,
            output_type=pytesseract.Output.DICT,
        )

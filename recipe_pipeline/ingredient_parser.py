"""
Ingredient string parser.

Turns a single ingredient line ("1/2 cup Sugar", "2 Apples", "Salt") into a
structured Ingredient and renders structured ingredients back to text.

The grammar is driven by the whitespace token count. Anything that cannot be
decomposed becomes the ingredient name: OCR and hand-typed input is noisy and
a best-effort name is more useful than a failed import.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from recipe_pipeline.heuristics import clean_line
from recipe_pipeline.units import FRACTION_GLYPHS, MeasurementUnit

logger = logging.getLogger(__name__)

# "1½" style mixed numbers written without a space
MIXED_GLYPH_PATTERN = re.compile(
    r'^(\d+)([' + ''.join(FRACTION_GLYPHS) + r'])$'
)


@dataclass
class Ingredient:
    """
    Structured ingredient.

    Attributes:
        name: What the ingredient is ("Sugar"); never empty after a parse
        quantity: Numeric amount, only set when a number was recognized
        unit: Measurement unit, only set alongside a quantity
        comment: Trailing preparation note ("sifted", "to taste")
    """
    name: str
    quantity: Optional[float] = None
    unit: Optional[MeasurementUnit] = None
    comment: Optional[str] = None


def parse_fraction(token: str) -> Optional[float]:
    """
    Parse a quantity token.

    Handles plain numbers ("2", "1.5"), slash fractions ("1/2"), single
    vulgar fraction glyphs ("½") and digit+glyph mixed numbers ("1½").

    Args:
        token: Candidate quantity token

    Returns:
        Parsed value, or None if the token is not a quantity
        (including a zero denominator)

    Examples:
        >>> parse_fraction("1/2")
        0.5
        >>> parse_fraction("3")
        3.0
        >>> parse_fraction("1/0") is None
        True
    """
    if not token:
        return None

    token = token.strip()

    if token in FRACTION_GLYPHS:
        return FRACTION_GLYPHS[token]

    mixed = MIXED_GLYPH_PATTERN.match(token)
    if mixed:
        return float(mixed.group(1)) + FRACTION_GLYPHS[mixed.group(2)]

    if token.count('/') == 1:
        numerator, denominator = token.split('/')
        try:
            top = float(numerator)
            bottom = float(denominator)
        except ValueError:
            return None
        if bottom == 0:
            return None
        return top / bottom

    try:
        value = float(token)
    except ValueError:
        return None

    # float() accepts "nan" and "inf", which are not quantities
    if value != value or value in (float('inf'), float('-inf')):
        return None
    return value


def parse_ingredient(text: str) -> Optional[Ingredient]:
    """
    Parse an ingredient line into quantity, unit and name.

    Rules by token count:
    - 1 token: the token is the name
    - 2 tokens: quantity + name if the first token is a quantity,
      otherwise the whole string is the name
    - 3+ tokens: quantity + unit + name when the second token is a known
      unit, quantity + name when it is not, otherwise the whole string

    Args:
        text: Ingredient line

    Returns:
        Ingredient, or None for blank input
    """
    if not text or not text.strip():
        return None

    text = text.strip()
    tokens = text.split()

    if len(tokens) == 1:
        return Ingredient(name=tokens[0])

    quantity = parse_fraction(tokens[0])
    if quantity is None:
        return Ingredient(name=text)

    if len(tokens) == 2:
        return Ingredient(name=tokens[1], quantity=quantity)

    unit = MeasurementUnit.from_string(tokens[1])
    if unit is not None:
        return Ingredient(name=' '.join(tokens[2:]), quantity=quantity, unit=unit)

    return Ingredient(name=' '.join(tokens[1:]), quantity=quantity)


def parse_ingredient_with_comment(text: str) -> Optional[Ingredient]:
    """
    Parse an ingredient line that may carry a trailing comment.

    Strips list bullets, splits everything after the first comma into the
    comment ("2 cups flour, sifted" -> comment "sifted") and parses the
    head with parse_ingredient().

    Args:
        text: Ingredient line, typically scraped from a web page

    Returns:
        Ingredient, or None for blank input
    """
    if not text or not text.strip():
        return None

    cleaned = clean_line(text)

    head, comment = cleaned, None
    if ',' in cleaned:
        head, _, tail = cleaned.partition(',')
        head = head.strip()
        comment = tail.strip() or None
        if not head:
            # Leading comma leaves nothing to parse, keep the line intact
            head, comment = cleaned, None

    ingredient = parse_ingredient(head)
    if ingredient is None:
        return None

    ingredient.comment = comment
    logger.debug(f"Parsed ingredient '{text}' -> {ingredient}")
    return ingredient


def format_quantity(quantity: float) -> str:
    """Render a quantity without a trailing '.0' for whole numbers."""
    if float(quantity).is_integer():
        return str(int(quantity))
    return str(quantity)


def ingredient_to_string(ingredient: Optional[Ingredient]) -> str:
    """
    Render an ingredient as "<quantity> <unit> <name>".

    Absent parts are omitted; a comment is appended after ", ".

    Examples:
        >>> ingredient_to_string(Ingredient(name="Sugar", quantity=0.5, unit=MeasurementUnit.CUP))
        '0.5 cup Sugar'
        >>> ingredient_to_string(Ingredient(name="Salt"))
        'Salt'
    """
    if ingredient is None:
        return ""

    parts = []
    if ingredient.quantity is not None:
        parts.append(format_quantity(ingredient.quantity))
        if ingredient.unit is not None:
            parts.append(ingredient.unit.value)
    parts.append(ingredient.name)

    result = ' '.join(part for part in parts if part)
    if ingredient.comment:
        result += f", {ingredient.comment}"
    return result

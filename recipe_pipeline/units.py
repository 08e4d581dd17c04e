"""
Measurement vocabulary shared by the ingredient parser and the post-processor.

Holds the closed set of units an ingredient line may carry (with the aliases
people actually write), the displayable quantity values, and the vulgar
fraction glyphs that show up in printed and OCR'd recipes.
"""

from enum import Enum
from fractions import Fraction
from typing import Optional


# ==============================================================================
# FRACTION GLYPHS
# ==============================================================================

# Unicode vulgar fractions mapped to their values
FRACTION_GLYPHS = {
    '½': 1 / 2,
    '⅓': 1 / 3,
    '⅔': 2 / 3,
    '¼': 1 / 4,
    '¾': 3 / 4,
    '⅕': 1 / 5,
    '⅖': 2 / 5,
    '⅗': 3 / 5,
    '⅘': 4 / 5,
    '⅙': 1 / 6,
    '⅚': 5 / 6,
    '⅐': 1 / 7,
    '⅛': 1 / 8,
    '⅜': 3 / 8,
    '⅝': 5 / 8,
    '⅞': 7 / 8,
    '⅑': 1 / 9,
    '⅒': 1 / 10,
}

FRACTION_CHARACTERS = ''.join(FRACTION_GLYPHS)


# ==============================================================================
# UNITS
# ==============================================================================

class MeasurementUnit(str, Enum):
    """Units an ingredient quantity can be expressed in."""
    ITEM = 'item'
    TEASPOON = 'teaspoon'
    TABLESPOON = 'tablespoon'
    CUP = 'cup'
    OUNCE = 'ounce'
    POUND = 'pound'
    GRAM = 'gram'
    KILOGRAM = 'kilogram'
    PINT = 'pint'
    QUART = 'quart'
    GALLON = 'gallon'
    LITER = 'liter'
    CAN = 'can'
    BUNCH = 'bunch'
    PIECE = 'piece'
    PINCH = 'pinch'
    CLOVE = 'clove'
    JAR = 'jar'
    BOTTLE = 'bottle'
    CONTAINER = 'container'

    @classmethod
    def from_string(cls, text: Optional[str]) -> Optional['MeasurementUnit']:
        """
        Look up a unit by name or alias, case-insensitively.

        Trailing periods are ignored so "tbsp." and "oz." resolve.

        Args:
            text: Unit token as written in the recipe

        Returns:
            Matching MeasurementUnit, or None if the token is not a unit

        Examples:
            >>> MeasurementUnit.from_string("Tbsp")
            <MeasurementUnit.TABLESPOON: 'tablespoon'>
            >>> MeasurementUnit.from_string("flour") is None
            True
        """
        if not text:
            return None
        key = text.strip().lower().rstrip('.')
        return UNIT_ALIASES.get(key)

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def short_hand(self) -> str:
        return UNIT_SHORTHAND[self]


# Every spelling that resolves to a unit (lowercase)
UNIT_ALIASES = {
    'item': MeasurementUnit.ITEM, 'items': MeasurementUnit.ITEM,
    'ea': MeasurementUnit.ITEM, 'each': MeasurementUnit.ITEM,
    'tsp': MeasurementUnit.TEASPOON, 'tsps': MeasurementUnit.TEASPOON,
    'teaspoon': MeasurementUnit.TEASPOON, 'teaspoons': MeasurementUnit.TEASPOON,
    'tbsp': MeasurementUnit.TABLESPOON, 'tbsps': MeasurementUnit.TABLESPOON,
    'tbs': MeasurementUnit.TABLESPOON, 'tbl': MeasurementUnit.TABLESPOON,
    'tablespoon': MeasurementUnit.TABLESPOON, 'tablespoons': MeasurementUnit.TABLESPOON,
    'c': MeasurementUnit.CUP, 'cup': MeasurementUnit.CUP, 'cups': MeasurementUnit.CUP,
    'oz': MeasurementUnit.OUNCE, 'ounce': MeasurementUnit.OUNCE, 'ounces': MeasurementUnit.OUNCE,
    'lb': MeasurementUnit.POUND, 'lbs': MeasurementUnit.POUND,
    'pound': MeasurementUnit.POUND, 'pounds': MeasurementUnit.POUND,
    'g': MeasurementUnit.GRAM, 'gr': MeasurementUnit.GRAM,
    'gram': MeasurementUnit.GRAM, 'grams': MeasurementUnit.GRAM,
    'kg': MeasurementUnit.KILOGRAM, 'kilogram': MeasurementUnit.KILOGRAM,
    'kilograms': MeasurementUnit.KILOGRAM,
    'pt': MeasurementUnit.PINT, 'pint': MeasurementUnit.PINT, 'pints': MeasurementUnit.PINT,
    'qt': MeasurementUnit.QUART, 'quart': MeasurementUnit.QUART, 'quarts': MeasurementUnit.QUART,
    'gal': MeasurementUnit.GALLON, 'gallon': MeasurementUnit.GALLON,
    'gallons': MeasurementUnit.GALLON,
    'l': MeasurementUnit.LITER, 'liter': MeasurementUnit.LITER, 'liters': MeasurementUnit.LITER,
    'litre': MeasurementUnit.LITER, 'litres': MeasurementUnit.LITER,
    'can': MeasurementUnit.CAN, 'cans': MeasurementUnit.CAN,
    'bunch': MeasurementUnit.BUNCH, 'bunches': MeasurementUnit.BUNCH,
    'p': MeasurementUnit.PIECE, 'pc': MeasurementUnit.PIECE, 'pcs': MeasurementUnit.PIECE,
    'piece': MeasurementUnit.PIECE, 'pieces': MeasurementUnit.PIECE,
    'pinch': MeasurementUnit.PINCH, 'pinches': MeasurementUnit.PINCH,
    'clove': MeasurementUnit.CLOVE, 'cloves': MeasurementUnit.CLOVE,
    'jar': MeasurementUnit.JAR, 'jars': MeasurementUnit.JAR,
    'bottle': MeasurementUnit.BOTTLE, 'bottles': MeasurementUnit.BOTTLE,
    'container': MeasurementUnit.CONTAINER, 'containers': MeasurementUnit.CONTAINER,
}

UNIT_SHORTHAND = {
    MeasurementUnit.ITEM: 'ea',
    MeasurementUnit.TEASPOON: 'tsp',
    MeasurementUnit.TABLESPOON: 'tbsp',
    MeasurementUnit.CUP: 'c',
    MeasurementUnit.OUNCE: 'oz',
    MeasurementUnit.POUND: 'lb',
    MeasurementUnit.GRAM: 'g',
    MeasurementUnit.KILOGRAM: 'kg',
    MeasurementUnit.PINT: 'pt',
    MeasurementUnit.QUART: 'qt',
    MeasurementUnit.GALLON: 'gal',
    MeasurementUnit.LITER: 'l',
    MeasurementUnit.CAN: 'can',
    MeasurementUnit.BUNCH: 'bn',
    MeasurementUnit.PIECE: 'pc',
    MeasurementUnit.PINCH: 'pn',
    MeasurementUnit.CLOVE: 'clv',
    MeasurementUnit.JAR: 'jar',
    MeasurementUnit.BOTTLE: 'btl',
    MeasurementUnit.CONTAINER: 'ctr',
}


# ==============================================================================
# DISPLAYABLE VALUES
# ==============================================================================

class MeasurementValue(float, Enum):
    """Quantity values offered when editing an ingredient."""
    QUARTER = 0.25
    THIRD = 0.333
    HALF = 0.5
    TWO_THIRDS = 0.667
    THREE_QUARTERS = 0.75
    ZERO = 0.0
    ONE = 1.0
    TWO = 2.0
    THREE = 3.0
    FOUR = 4.0
    FIVE = 5.0
    SIX = 6.0
    SEVEN = 7.0
    EIGHT = 8.0
    NINE = 9.0

    @property
    def display_symbol(self) -> str:
        return _VALUE_SYMBOLS.get(self, str(int(self.value)))

    @classmethod
    def fractions(cls) -> list['MeasurementValue']:
        return [cls.QUARTER, cls.THIRD, cls.HALF, cls.TWO_THIRDS, cls.THREE_QUARTERS]

    @classmethod
    def numbers(cls) -> list['MeasurementValue']:
        return [cls.ONE, cls.TWO, cls.THREE, cls.FOUR, cls.FIVE,
                cls.SIX, cls.SEVEN, cls.EIGHT, cls.NINE, cls.ZERO]


_VALUE_SYMBOLS = {
    MeasurementValue.QUARTER: '¼',
    MeasurementValue.THIRD: '⅓',
    MeasurementValue.HALF: '½',
    MeasurementValue.TWO_THIRDS: '⅔',
    MeasurementValue.THREE_QUARTERS: '¾',
}


def to_fraction_string(value: float) -> str:
    """
    Render a quantity as a whole number or a reduced fraction.

    Args:
        value: Quantity to render

    Returns:
        "2" for whole numbers, otherwise "numerator/denominator"

    Examples:
        >>> to_fraction_string(2.0)
        '2'
        >>> to_fraction_string(0.75)
        '3/4'
        >>> to_fraction_string(0.333)
        '333/1000'
    """
    if float(value).is_integer():
        return str(int(value))
    fraction = Fraction(str(value))
    return f"{fraction.numerator}/{fraction.denominator}"

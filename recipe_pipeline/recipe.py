"""
Recipe records produced by the pipeline.

RecipeDraft is the staging record every pipeline stage works on: plain
string fields plus diagnostics. Recipe is the finished value handed to the
caller for storage, with parsed ingredients and timings.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Optional

from recipe_pipeline.classifier import ClassifiedLine
from recipe_pipeline.ingredient_parser import Ingredient, parse_ingredient
from recipe_pipeline.reconstructor import ReconstructedText

logger = logging.getLogger(__name__)

HOUR_PATTERN = re.compile(r'(\d+)\s*h(our)?s?', re.IGNORECASE)
MINUTE_PATTERN = re.compile(r'(\d+)\s*m(in(ute)?s?)?', re.IGNORECASE)
NUMBER_PATTERN = re.compile(r'(\d+)')

# Type given to a timing string that has no "type:" prefix
DEFAULT_TIMING_TYPE = 'total'


class FieldKind(str, Enum):
    """Multi-line text fields of a draft."""
    SUMMARY = 'summary'
    SERVINGS = 'servings'
    TIMINGS = 'timings'
    INGREDIENTS = 'ingredients'
    INSTRUCTIONS = 'instructions'
    NOTES = 'notes'


def _empty_fields() -> dict[FieldKind, list[str]]:
    return {kind: [] for kind in FieldKind}


@dataclass
class Timing:
    type: str
    hours: int = 0
    minutes: int = 0

    @property
    def display_short(self) -> str:
        """Compact rendering such as "1 hr 15 min"."""
        parts = []
        if self.hours > 0:
            parts.append(f"{self.hours} hr")
        if self.minutes > 0:
            parts.append(f"{self.minutes} min")
        return ' '.join(parts)

    @property
    def display(self) -> str:
        """Long rendering such as "1 hour 15 minutes"."""
        if self.hours == 0 and self.minutes == 0:
            return "Set time"

        hour_text = f"{self.hours} {'hour' if self.hours == 1 else 'hours'}"
        minute_text = f"{self.minutes} {'minute' if self.minutes == 1 else 'minutes'}"

        if self.hours == 0:
            return minute_text
        if self.minutes == 0:
            return hour_text
        return f"{hour_text} {minute_text}"


def parse_time_string(text: str) -> tuple[int, int]:
    """
    Parse a duration such as "1 hour 15 minutes", "45 min" or "PT1H30M".

    A bare number with no unit is read as minutes. Decimal amounts are not
    understood: "1.5 hours" reads as 5 hours.

    Args:
        text: Duration text

    Returns:
        Tuple of (hours, minutes)

    Examples:
        >>> parse_time_string("1 hour 15 minutes")
        (1, 15)
        >>> parse_time_string("45")
        (0, 45)
    """
    hours = 0
    minutes = 0

    hour_match = HOUR_PATTERN.search(text)
    if hour_match:
        hours = int(hour_match.group(1))

    minute_match = MINUTE_PATTERN.search(text)
    if minute_match:
        minutes = int(minute_match.group(1))

    if hours == 0 and minutes == 0:
        number_match = NUMBER_PATTERN.search(text)
        if number_match:
            minutes = int(number_match.group(1))

    return hours, minutes


def parse_timing(text: str) -> Optional[Timing]:
    """
    Parse a "type: duration" string ("Prep: 20 Minutes") into a Timing.

    Strings without a type prefix are recorded as total time.

    Returns:
        Timing, or None for blank input
    """
    if not text or not text.strip():
        return None

    if ':' in text:
        type_text, _, value = text.partition(':')
        timing_type = type_text.strip().lower() or DEFAULT_TIMING_TYPE
    else:
        timing_type, value = DEFAULT_TIMING_TYPE, text

    hours, minutes = parse_time_string(value.strip())
    return Timing(type=timing_type, hours=hours, minutes=minutes)


def parse_servings(servings: list[str]) -> Optional[int]:
    """First number found in the first serving string ("Serves 4" -> 4)."""
    if not servings:
        return None
    match = NUMBER_PATTERN.search(servings[0])
    return int(match.group(1)) if match else None


@dataclass
class Recipe:
    """
    Finished recipe value.

    Attributes:
        title: Recipe title
        summary: Summary lines joined with newlines, None if there were none
        ingredients: Parsed ingredients in order
        instructions: Steps in order
        servings: Number of servings when one could be read
        timings: Parsed timings
        notes: Free-form notes
        raw_text: Source transcript
    """
    title: str
    summary: Optional[str] = None
    ingredients: list[Ingredient] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    servings: Optional[int] = None
    timings: list[Timing] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    raw_text: list[str] = field(default_factory=list)
    source: Optional[str] = None
    source_type: Optional[str] = None
    source_title: Optional[str] = None
    website: Optional[str] = None
    author: Optional[str] = None


@dataclass
class RecipeDraft:
    """
    Staging record for one pipeline run.

    All multi-line fields live in `fields`, keyed by FieldKind; the
    properties below expose each list by name.
    """
    title: str = ""
    fields: dict[FieldKind, list[str]] = field(default_factory=_empty_fields)
    raw_text: list[str] = field(default_factory=list)
    reconstructed: Optional[ReconstructedText] = None
    classified_lines: list[ClassifiedLine] = field(default_factory=list)
    skipped_lines: list[ClassifiedLine] = field(default_factory=list)
    source: Optional[str] = None
    source_type: Optional[str] = None
    source_title: Optional[str] = None
    website: Optional[str] = None
    author: Optional[str] = None

    def __post_init__(self):
        for kind in FieldKind:
            self.fields.setdefault(kind, [])

    @property
    def summary(self) -> list[str]:
        return self.fields[FieldKind.SUMMARY]

    @property
    def servings(self) -> list[str]:
        return self.fields[FieldKind.SERVINGS]

    @property
    def timings(self) -> list[str]:
        return self.fields[FieldKind.TIMINGS]

    @property
    def ingredients(self) -> list[str]:
        return self.fields[FieldKind.INGREDIENTS]

    @property
    def instructions(self) -> list[str]:
        return self.fields[FieldKind.INSTRUCTIONS]

    @property
    def notes(self) -> list[str]:
        return self.fields[FieldKind.NOTES]

    def is_empty(self) -> bool:
        return not self.title and not any(self.fields.values())

    def copy(self, **changes) -> 'RecipeDraft':
        """Return a copy with its own field lists, applying any changes."""
        fields = {kind: list(values) for kind, values in self.fields.items()}
        changes.setdefault('fields', fields)
        changes.setdefault('raw_text', list(self.raw_text))
        changes.setdefault('classified_lines', list(self.classified_lines))
        changes.setdefault('skipped_lines', list(self.skipped_lines))
        return replace(self, **changes)

    def to_dict(self) -> dict:
        """Plain-data view of the draft (diagnostics reduced to counts)."""
        data = {'title': self.title}
        data.update({kind.value: list(values) for kind, values in self.fields.items()})
        data.update({
            'raw_text': list(self.raw_text),
            'source': self.source,
            'source_type': self.source_type,
            'source_title': self.source_title,
            'website': self.website,
            'author': self.author,
            'classified_line_count': len(self.classified_lines),
            'skipped_line_count': len(self.skipped_lines),
        })
        return data

    def to_recipe(
        self,
        ingredient_parser: Callable[[str], Optional[Ingredient]] = parse_ingredient
    ) -> Recipe:
        """
        Convert the draft into a finished Recipe.

        Ingredient strings that do not parse are dropped; timing strings are
        read as "type: duration".

        Args:
            ingredient_parser: Parser applied to each ingredient string

        Returns:
            Recipe
        """
        ingredients = []
        for text in self.ingredients:
            ingredient = ingredient_parser(text)
            if ingredient is None:
                logger.debug(f"Dropped unparseable ingredient: '{text}'")
                continue
            ingredients.append(ingredient)

        timings = [timing for timing in (parse_timing(text) for text in self.timings) if timing]

        return Recipe(
            title=self.title,
            summary='\n'.join(self.summary) if self.summary else None,
            ingredients=ingredients,
            instructions=list(self.instructions),
            servings=parse_servings(self.servings),
            timings=timings,
            notes=list(self.notes),
            raw_text=list(self.raw_text),
            source=self.source,
            source_type=self.source_type,
            source_title=self.source_title,
            website=self.website,
            author=self.author,
        )

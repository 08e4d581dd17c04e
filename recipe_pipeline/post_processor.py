"""
Field normalization for classified recipe drafts.

This module cleans each field of a draft into a consistent shape: titles
lose "Recipe for"-style prefixes, ingredient units are spelled out, steps
become capitalized sentences, and timing/serving strings get one canonical
form. Cleaning an already cleaned draft changes nothing.
"""

import logging
import re

from recipe_pipeline.recipe import FieldKind, RecipeDraft
from recipe_pipeline.units import FRACTION_CHARACTERS

logger = logging.getLogger(__name__)

# ==============================================================================
# PATTERNS
# ==============================================================================

TITLE_PREFIXES = ['recipe for', 'how to make', 'recipe:', 'make:']

# Bullets and "1." / "2)" list numbers; "1.5 cups" is a quantity, not a marker
LEADING_MARKER_PATTERN = re.compile(r'^(?:[•\-*+]\s*|\d+[.)](?!\d)\s*)+')

LEADING_STEP_PATTERN = re.compile(
    r'^(?:step\s+\d+[:.]?\s*|[•\-*+]\s*|\d+[.)](?!\d)\s*)+',
    re.IGNORECASE
)

# Abbreviation -> full unit word
UNIT_EXPANSIONS = {
    'tbsp': 'tablespoon',
    'tbs': 'tablespoon',
    'tsp': 'teaspoon',
    'tsps': 'teaspoons',
    'oz': 'ounce',
    'lb': 'pound',
    'lbs': 'pounds',
    'g': 'gram',
    'kg': 'kilogram',
    'ml': 'milliliter',
    'l': 'liter',
    'c': 'cup',
    'pt': 'pint',
    'qt': 'quart',
    'gal': 'gallon',
}

UNIT_EXPANSION_PATTERN = re.compile(
    r'\b(' + '|'.join(sorted(UNIT_EXPANSIONS, key=len, reverse=True)) + r')\b',
    re.IGNORECASE
)

DIGIT_FRACTION_PATTERN = re.compile(r'(\d)([' + FRACTION_CHARACTERS + r'])')
FRACTION_LETTER_PATTERN = re.compile(r'([' + FRACTION_CHARACTERS + r'])([A-Za-z])')

TIME_EXPANSIONS = {
    'min': 'minutes',
    'mins': 'minutes',
    'hr': 'hour',
    'hrs': 'hours',
    'sec': 'seconds',
    'secs': 'seconds',
}

TIME_EXPANSION_PATTERN = re.compile(r'\b(' + '|'.join(TIME_EXPANSIONS) + r')\b')

SINGULAR_TIME_PATTERN = re.compile(r'(\d+)(\s*)(minute|hour|second)\b')

SERVING_VERBS = ('serves', 'yields', 'makes')

WHITESPACE_PATTERN = re.compile(r'\s+')
FIRST_NUMBER_PATTERN = re.compile(r'\d+')


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================

def _is_all_upper(text: str) -> bool:
    return text == text.upper() and text != text.lower()


def _capitalize_first(text: str) -> str:
    if text and text[0].islower():
        return text[0].upper() + text[1:]
    return text


def _capitalize_words(text: str) -> str:
    """Upper-case the first character of every word, lower-casing the rest."""
    return re.sub(r'\S+', lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), text)


# ==============================================================================
# FIELD CLEANERS
# ==============================================================================

def clean_title(title: str) -> str:
    """
    Clean a recipe title.

    Examples:
        >>> clean_title("RECIPE FOR BANANA BREAD:")
        'Banana Bread'
        >>> clean_title("grandma's soup")
        "Grandma's soup"
    """
    cleaned = title.strip()

    stripped = True
    while stripped:
        stripped = False
        lowered = cleaned.lower()
        for prefix in TITLE_PREFIXES:
            if lowered.startswith(prefix):
                cleaned = cleaned[len(prefix):].strip()
                stripped = True
                break

    cleaned = cleaned.rstrip(':.').strip()

    if _is_all_upper(cleaned):
        return _capitalize_words(cleaned)
    return _capitalize_first(cleaned)


def clean_ingredient(ingredient: str) -> str:
    """
    Clean an ingredient line: drop list markers, spell out units, space fractions.

    Examples:
        >>> clean_ingredient("• 2 tbsp butter")
        '2 tablespoon butter'
        >>> clean_ingredient("1½cups milk")
        '1 ½ cups milk'
    """
    cleaned = ingredient.strip()
    cleaned = LEADING_MARKER_PATTERN.sub('', cleaned)
    cleaned = DIGIT_FRACTION_PATTERN.sub(r'\1 \2', cleaned)
    cleaned = FRACTION_LETTER_PATTERN.sub(r'\1 \2', cleaned)
    cleaned = UNIT_EXPANSION_PATTERN.sub(lambda m: UNIT_EXPANSIONS[m.group(1).lower()], cleaned)
    return cleaned.strip()


def clean_instruction(instruction: str) -> str:
    """
    Clean a step into a capitalized, terminated sentence.

    Examples:
        >>> clean_instruction("Step 2: stir well")
        'Stir well.'
    """
    cleaned = LEADING_STEP_PATTERN.sub('', instruction.strip()).strip()
    if not cleaned:
        return ""

    if not cleaned.endswith(('.', '!', '?')):
        cleaned += '.'

    return _capitalize_first(cleaned)


def clean_text(text: str) -> str:
    """Trim and collapse whitespace runs."""
    return WHITESPACE_PATTERN.sub(' ', text.strip())


def standardize_time(time_text: str) -> str:
    """
    Canonicalize a timing string.

    Examples:
        >>> standardize_time("prep: 20 mins")
        'Prep: 20 Minutes'
        >>> standardize_time("2 hr")
        '2 Hours'
    """
    standardized = time_text.strip().lower()
    standardized = TIME_EXPANSION_PATTERN.sub(lambda m: TIME_EXPANSIONS[m.group(1)], standardized)

    def pluralize(match):
        number, space, unit = match.groups()
        if int(number) != 1:
            unit += 's'
        return f"{number}{space}{unit}"

    standardized = SINGULAR_TIME_PATTERN.sub(pluralize, standardized)
    return _capitalize_words(standardized)


def standardize_serving(serving: str) -> str:
    """
    Canonicalize a serving string to "Serves N" / "Makes ..." form.

    Examples:
        >>> standardize_serving("SERVES 4")
        'Serves 4'
        >>> standardize_serving("4 servings")
        'Serves 4'
    """
    standardized = serving.strip().lower()

    for verb in SERVING_VERBS:
        if standardized.startswith(verb):
            return verb.capitalize() + standardized[len(verb):]

    match = FIRST_NUMBER_PATTERN.search(standardized)
    if match:
        return f"Serves {match.group(0)}"
    return standardized


# ==============================================================================
# MAIN POST-PROCESSING FUNCTION
# ==============================================================================

FIELD_CLEANERS = {
    FieldKind.INGREDIENTS: clean_ingredient,
    FieldKind.INSTRUCTIONS: clean_instruction,
    FieldKind.SUMMARY: clean_text,
    FieldKind.TIMINGS: standardize_time,
    FieldKind.SERVINGS: standardize_serving,
    FieldKind.NOTES: clean_text,
}


def post_process(draft: RecipeDraft) -> RecipeDraft:
    """
    Normalize every field of a draft.

    Returns a new draft; the input is left untouched. Entries that clean to
    an empty string are dropped.

    Args:
        draft: Draft with classified fields

    Returns:
        Cleaned copy of the draft
    """
    fields = {}
    for kind, values in draft.fields.items():
        cleaner = FIELD_CLEANERS.get(kind, clean_text)
        cleaned = [cleaner(value) for value in values]
        fields[kind] = [value for value in cleaned if value]

    processed = draft.copy(title=clean_title(draft.title) if draft.title else "", fields=fields)

    logger.debug(f"Post-processed draft '{processed.title}': "
                 f"{len(processed.ingredients)} ingredients, {len(processed.instructions)} instructions")
    return processed

"""
Recipe heuristics module for pattern-based recognition of recipe lines.

This module holds the pattern tables and scoring functions shared by the
rule-based line model, the boundary detector and the web extractor. Each
scorer returns a confidence from 0.0 to 1.0 that a line belongs to one kind
of recipe content (ingredient, instruction, title, time, serving, summary).
"""

import re
import logging
from typing import List

from bs4 import BeautifulSoup

from recipe_pipeline.units import FRACTION_CHARACTERS
from recipe_pipeline.utils import html_to_text

logger = logging.getLogger(__name__)

# ==============================================================================
# INGREDIENT PATTERNS
# ==============================================================================

# Regex patterns that indicate a line is likely an ingredient
INGREDIENT_PATTERNS = [
    r'^\d+[\s/\d]*\s*(cup|cups|tbsp|tsp|tablespoon|tablespoons|teaspoon|teaspoons|oz|ounce|ounces|lb|lbs|pound|pounds|g|gram|grams|kg|kilogram|ml|milliliter|l|liter)\b',
    # Starts with quantity + unit: "2 cups flour"

    r'^\d+[\s/\d]*\s+\w+',
    # Starts with number + word: "3 eggs", "1/2 onion"

    r'^[' + FRACTION_CHARACTERS + r']',
    # Starts with fraction character: ¼, ½, ¾, ⅓, ⅔, etc.

    r'^[-•*]\s*\d',
    # Bullet + number: "- 2 eggs", "• 1 cup"

    r'^\d+\s*[-–]\s*\d+',
    # Range: "2-3 cloves", "1-2 pounds"
]

# Common measurement units and ingredient-related keywords
INGREDIENT_KEYWORDS = [
    'cup', 'cups', 'tablespoon', 'tablespoons', 'tbsp', 'tbs',
    'teaspoon', 'teaspoons', 'tsp', 'ounce', 'ounces', 'oz',
    'pound', 'pounds', 'lb', 'lbs', 'gram', 'grams', 'g',
    'kilogram', 'kilograms', 'kg', 'milliliter', 'milliliters', 'ml',
    'liter', 'liters', 'l', 'quart', 'quarts', 'qt', 'pint', 'pints', 'pt',
    'gallon', 'gallons', 'gal', 'fluid', 'fl',
    'pinch', 'dash', 'clove', 'cloves', 'bunch', 'bunches', 'handful',
    'package', 'packages', 'pkg', 'can', 'cans', 'jar', 'jars',
    'slice', 'slices', 'piece', 'pieces', 'whole', 'half', 'halves',
    'chopped', 'diced', 'minced', 'sliced', 'grated', 'shredded',
    'fresh', 'dried', 'frozen', 'canned', 'cooked', 'raw',
    'large', 'medium', 'small', 'extra', 'optional',
]

# ==============================================================================
# INSTRUCTION PATTERNS
# ==============================================================================

# Regex patterns that indicate a line is likely an instruction/step
INSTRUCTION_PATTERNS = [
    r'^\d+[\.\)]\s+',
    # Numbered step: "1. Mix" or "1) Mix"

    r'^step\s+\d+',
    # "Step 1", "Step 2", etc.

    r'^\d+\.\s*[A-Z]',
    # Numbered step starting with capital: "1. Preheat"
]

# Common cooking action verbs
INSTRUCTION_VERBS = [
    'preheat', 'heat', 'warm', 'boil', 'simmer', 'reduce', 'cook',
    'fry', 'sauté', 'saute', 'pan-fry', 'stir-fry',
    'bake', 'roast', 'broil', 'grill', 'barbecue',
    'steam', 'poach', 'blanch', 'parboil',
    'mix', 'stir', 'whisk', 'beat', 'blend', 'fold', 'combine', 'incorporate',
    'chop', 'dice', 'mince', 'slice', 'cut', 'julienne', 'cube',
    'trim', 'peel', 'core', 'seed', 'debone', 'skin',
    'add', 'pour', 'drizzle', 'pour in', 'stir in', 'mix in',
    'place', 'put', 'set', 'arrange', 'lay', 'spread',
    'season', 'sprinkle', 'coat', 'brush', 'rub', 'marinate',
    'cover', 'wrap', 'seal', 'close', 'uncover',
    'bring', 'let', 'allow', 'leave', 'keep', 'maintain',
    'rest', 'cool', 'chill', 'refrigerate', 'freeze',
    'remove', 'discard', 'drain', 'strain', 'squeeze', 'press',
    'transfer', 'move', 'flip', 'turn', 'rotate', 'shake',
    'serve', 'garnish', 'top', 'finish', 'plate', 'present',
    'enjoy', 'taste', 'adjust', 'check', 'test',
    'thicken', 'dissolve', 'melt', 'caramelize',
    'brown', 'sear', 'char', 'toast', 'crisp',
]

# ==============================================================================
# TIME / SERVING PATTERNS
# ==============================================================================

TIME_LABEL_PATTERN = re.compile(
    r'^(prep|preparation|cook|cooking|bake|baking|total|active|inactive|chill|rest|ready in)'
    r'(\s+time)?\s*[:\-]?\s*\d',
    re.IGNORECASE
)

TIME_VALUE_PATTERN = re.compile(
    r'^(about\s+|approx\.?\s+)?\d+\s*(-\s*\d+\s*)?(minutes?|mins?|hours?|hrs?|seconds?|secs?)\b',
    re.IGNORECASE
)

SERVING_PATTERN = re.compile(r'^(serves|serving|servings|yield|yields|makes)\b', re.IGNORECASE)

SERVING_COUNT_PATTERN = re.compile(r'^\d+\s*(-\s*\d+\s*)?(servings|portions|people)\b', re.IGNORECASE)

# ==============================================================================
# SECTION HEADERS / END MARKERS
# ==============================================================================

# Section headers that indicate recipe structure
SECTION_HEADERS = [
    'ingredients', 'ingredient', 'ingredients:', 'ingredient list',
    'directions', 'instructions', 'method', 'steps', 'preparation',
    'notes', 'tips', 'serving', 'servings', 'yield', 'yields',
    'prep time', 'cook time', 'total time', 'equipment',
]

# End markers that indicate a recipe has concluded
END_MARKERS = [
    'nutrition facts', 'nutritional information', 'calories',
    '© ', 'copyright', 'all rights reserved', 'print recipe',
]

# ==============================================================================
# WEB BLOCK PATTERNS
# ==============================================================================

BLOCK_INGREDIENT_PATTERNS = [
    re.compile(r'\d+\s*(cup|tablespoon|teaspoon|tbsp|tsp|oz|ounce|pound|lb|g|kg)s?\b', re.IGNORECASE),
    re.compile(r'\b(salt|pepper|oil|butter|sugar|flour)\b', re.IGNORECASE),
]

BLOCK_STEP_PATTERN = re.compile(r'^\s*\d+\.?\s+')

BLOCK_VERB_PATTERN = re.compile(
    r'\b(mix|stir|add|place|bake|cook|heat|pour|beat|whisk|combine)\b',
    re.IGNORECASE
)

BLOCK_BULLETS = ('•', '-', '*')

MAX_INGREDIENT_BLOCK_LENGTH = 200
MIN_INSTRUCTION_BLOCK_LENGTH = 20

# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================

def clean_line(line: str) -> str:
    """
    Clean up a line of text by normalizing whitespace and removing formatting.

    Args:
        line: Raw text line

    Returns:
        Cleaned line with normalized whitespace and no leading bullet
    """
    line = ' '.join(line.split())

    # Remove leading bullets/markers (but keep the content)
    line = re.sub(r'^[•\-*+◦▪▫○●]\s*', '', line)

    return line.strip()


def word_count(line: str) -> int:
    return len(line.split())


def has_digit(line: str) -> bool:
    return any(char.isdigit() for char in line)


def is_all_caps(line: str) -> bool:
    return line == line.upper() and line != line.lower()


def is_properly_capitalized(text: str) -> bool:
    """
    Check if a line is capitalized like a title.

    True for ALL CAPS text, or when more than 60% of its words start with
    an upper-case letter.
    """
    if is_all_caps(text):
        return True

    words = text.split()
    if not words:
        return False

    capitalized = sum(1 for word in words if word[0].isupper())
    return capitalized / len(words) > 0.6


def is_section_header_line(line: str) -> bool:
    """Check if a line opens a recipe section ("Ingredients", "Prep time: ...")."""
    lowered = line.strip().lower()
    return any(lowered == header or lowered.startswith(header) for header in SECTION_HEADERS)


def is_end_marker_line(line: str) -> bool:
    """Check if a line marks the end of a recipe ("Nutrition Facts", "© 2024")."""
    lowered = line.lower()
    return any(marker in lowered for marker in END_MARKERS)


# ==============================================================================
# LINE SCORERS
# ==============================================================================

def is_ingredient_line(line: str) -> float:
    """
    Score a line as likely being an ingredient (0.0 to 1.0).

    Uses pattern matching and keyword detection to assign a confidence score.

    Args:
        line: Text line to evaluate

    Returns:
        Float score from 0.0 (definitely not ingredient) to 1.0 (definitely ingredient)
    """
    if not line or len(line) < 2:
        return 0.0

    score = 0.0
    line_lower = line.lower()

    # Check against ingredient patterns
    for pattern in INGREDIENT_PATTERNS:
        if re.match(pattern, line, re.IGNORECASE):
            score += 0.4
            break  # Only count one pattern match

    # Check for measurement keywords
    for word in line_lower.split():
        clean_word = re.sub(r'[^\w]', '', word)
        if clean_word in INGREDIENT_KEYWORDS:
            score += 0.3
            break  # Only count one keyword match

    # Boost score if line starts with a number
    if re.match(r'^\d', line):
        score += 0.2

    # Boost score if line contains fraction characters
    if re.search(r'[' + FRACTION_CHARACTERS + r']', line):
        score += 0.2

    # Penalize if line is very long (likely an instruction)
    if len(line) > 100:
        score -= 0.3

    # Penalize if line starts with an instruction verb
    for verb in INSTRUCTION_VERBS:
        if line_lower.startswith(verb + ' ') or line_lower.startswith(verb + '.'):
            score -= 0.4
            break

    # Penalize if line has numbered step pattern
    if re.match(r'^\d+[\.\)]\s+', line):
        score -= 0.3

    return max(0.0, min(1.0, score))


def is_instruction_line(line: str) -> float:
    """
    Score a line as likely being an instruction (0.0 to 1.0).

    Uses pattern matching and verb detection to assign a confidence score.

    Args:
        line: Text line to evaluate

    Returns:
        Float score from 0.0 (definitely not instruction) to 1.0 (definitely instruction)
    """
    if not line or len(line) < 2:
        return 0.0

    score = 0.0
    line_lower = line.lower()

    # Check against instruction patterns
    for pattern in INSTRUCTION_PATTERNS:
        if re.match(pattern, line, re.IGNORECASE):
            score += 0.5
            break

    # Check for cooking verbs at start of line
    words = line_lower.split()
    first_word_clean = re.sub(r'[^\w]', '', words[0]) if words else ''

    if first_word_clean in INSTRUCTION_VERBS:
        score += 0.4

    # Check for cooking verbs anywhere in line (weaker signal)
    for verb in INSTRUCTION_VERBS:
        if re.search(r'\b' + re.escape(verb) + r'\b', line_lower):
            score += 0.1
            break

    # Boost if line is longer (instructions tend to be sentences)
    if len(line) > 50:
        score += 0.2

    # Sentences end with a period
    if line.endswith('.') and word_count(line) >= 3:
        score += 0.2

    # Boost if line contains time indicators
    if re.search(r'\d+\s*(minute|min|hour|hr|second|sec)', line_lower):
        score += 0.2

    # Boost if line contains temperature indicators
    if re.search(r'\d+\s*(degree|°|fahrenheit|celsius|f\b|c\b)', line_lower):
        score += 0.2

    # Penalize if line looks like an ingredient (starts with number + unit)
    if re.match(r'^\d+[\s/\d]*\s*(cup|tbsp|tsp|oz|lb|g|kg)', line, re.IGNORECASE):
        score -= 0.5

    # Penalize if line contains measurement units
    for word in words:
        clean_word = re.sub(r'[^\w]', '', word)
        if clean_word in ['cup', 'cups', 'tbsp', 'tsp', 'oz', 'lb']:
            score -= 0.2
            break

    return max(0.0, min(1.0, score))


def is_time_line(line: str) -> float:
    """Score a line as a timing ("Prep time: 20 min", "45 minutes")."""
    if not line:
        return 0.0
    stripped = line.strip()
    if TIME_LABEL_PATTERN.match(stripped):
        return 0.9
    if TIME_VALUE_PATTERN.match(stripped) and word_count(stripped) <= 4:
        return 0.8
    return 0.0


def is_serving_line(line: str) -> float:
    """Score a line as a serving/yield statement ("Serves 4", "Makes 24 cookies")."""
    if not line:
        return 0.0
    stripped = line.strip()
    if SERVING_PATTERN.match(stripped) and has_digit(stripped):
        return 0.9
    if SERVING_COUNT_PATTERN.match(stripped):
        return 0.8
    return 0.0


def is_title_line(line: str) -> float:
    """
    Score a line as a recipe title.

    Titles are short, carry no quantities, do not end like a sentence and
    are capitalized like a heading.
    """
    if not line:
        return 0.0

    stripped = line.strip()
    words = word_count(stripped)

    if words < 1 or words > 10 or has_digit(stripped):
        return 0.0
    if stripped.endswith(('.', ':', ',', ';')):
        return 0.0
    if is_section_header_line(stripped) or is_end_marker_line(stripped):
        return 0.0

    score = 0.0
    if is_properly_capitalized(stripped):
        score += 0.5
    if 2 <= words <= 6:
        score += 0.3
    elif words == 1:
        score += 0.1

    first_word = re.sub(r'[^\w]', '', stripped.split()[0].lower())
    if first_word in INSTRUCTION_VERBS:
        score -= 0.3

    return max(0.0, min(1.0, score))


def is_summary_line(line: str) -> float:
    """Score a line as descriptive prose (a headnote rather than a step)."""
    if not line:
        return 0.0

    stripped = line.strip()
    if word_count(stripped) < 12:
        return 0.0

    score = 0.5
    if re.search(r'\b(i|we|my|our|you|this|these)\b', stripped.lower()):
        score += 0.2
    if is_instruction_line(stripped) >= 0.5:
        score -= 0.3
    return max(0.0, min(1.0, score))


# ==============================================================================
# WEB BLOCK CLASSIFIERS
# ==============================================================================

def is_ingredient_block(block: str) -> bool:
    """
    Decide whether a scraped text block is an ingredient.

    Matches a quantity+unit or a common ingredient word, or starts with a
    bullet, and is short.
    """
    looks_like_ingredient = (
        any(pattern.search(block) for pattern in BLOCK_INGREDIENT_PATTERNS)
        or block.startswith(BLOCK_BULLETS)
    )
    return looks_like_ingredient and len(block) < MAX_INGREDIENT_BLOCK_LENGTH


def is_instruction_block(block: str) -> bool:
    """
    Decide whether a scraped text block is an instruction.

    Starts with a step number or mentions a cooking verb, and is long enough
    to be a sentence.
    """
    looks_like_step = bool(BLOCK_STEP_PATTERN.match(block) or BLOCK_VERB_PATTERN.search(block))
    return looks_like_step and len(block) > MIN_INSTRUCTION_BLOCK_LENGTH


# ==============================================================================
# HTML TO LINES
# ==============================================================================

def extract_lines_from_html(html: str) -> List[str]:
    """
    Convert HTML to clean text lines, preserving list structure.

    Args:
        html: Raw HTML content

    Returns:
        List of cleaned text lines
    """
    if not html or not html.strip():
        return []

    # Try html2text first - it handles list and heading structure better
    try:
        text = html_to_text(html)

        lines = []
        for line in text.split('\n'):
            stripped = line.strip()
            if not stripped:
                continue

            # Drop markdown header markers, keep the heading text
            stripped = re.sub(r'^#+\s*', '', stripped)

            # Handle "  * item" and "  - item" (with leading spaces)
            stripped = re.sub(r'^[\*\-]\s+', '', stripped).strip()
            if stripped:
                lines.append(stripped)

        if lines:
            return lines
    except Exception as e:
        logger.warning(f"html2text extraction failed: {e}")

    # Fallback: plain text extraction with BeautifulSoup
    soup = BeautifulSoup(html, 'html.parser')
    for element in soup(['script', 'style', 'meta', 'link']):
        element.decompose()
    text = soup.get_text(separator='\n')
    return [line.strip() for line in text.split('\n') if line.strip()]

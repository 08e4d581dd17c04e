"""
Text reconstruction for OCR and pasted recipe text.

OCR splits sentences at the edge of the photographed column and leaves page
numbers and stray glyphs behind. This module repairs that before
classification:
1. Drop artifacts (lines under 3 characters or made only of digits)
2. Pick a title from the first content line(s)
3. Merge wrapped lower-case continuations back into the line they belong to
"""

import logging
from dataclasses import dataclass, field

from recipe_pipeline.units import FRACTION_CHARACTERS

logger = logging.getLogger(__name__)

# ==============================================================================
# CONSTANTS
# ==============================================================================

MIN_LINE_LENGTH = 3

# Bullets, dashes and check marks that open a new list entry
LINE_START_SYMBOLS = "-•*–—⁃․⁌⁍◦◘○●◎✓✔✗✘❋❖"


@dataclass(frozen=True)
class ReconstructedText:
    """
    Result of reconstruction.

    Attributes:
        title: Title candidate taken from the first content line(s)
        lines: Repaired lines, in input order
        artifacts: Discarded noise kept for diagnostics
    """
    title: str = ""
    lines: tuple[str, ...] = field(default_factory=tuple)
    artifacts: tuple[str, ...] = field(default_factory=tuple)


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================

def is_artifact(line: str) -> bool:
    """True for lines that are too short or contain only digits."""
    return len(line) < MIN_LINE_LENGTH or line.isdecimal()


def is_all_uppercase(line: str) -> bool:
    """True when the line has cased letters and none of them are lower-case."""
    return line == line.upper() and line != line.lower()


def starts_with_symbol(line: str) -> bool:
    return bool(line) and line[0] in LINE_START_SYMBOLS


def starts_with_fraction(line: str) -> bool:
    return bool(line) and line[0] in FRACTION_CHARACTERS


def starts_new_line(line: str) -> bool:
    """
    Decide whether a line opens a new logical line.

    Capitalised sentences, quantities, bullets and fraction glyphs all start
    something new; a lower-case start is a wrapped continuation.
    """
    first = line[0]
    return (
        first.isupper()
        or first.isdigit()
        or starts_with_symbol(line)
        or starts_with_fraction(line)
    )


def filter_artifacts(lines: list[str]) -> tuple[list[str], list[str]]:
    """
    Split raw lines into content and artifacts.

    Empty lines are dropped without being recorded.

    Returns:
        Tuple of (kept lines, artifacts), both trimmed
    """
    kept = []
    artifacts = []
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        if is_artifact(line):
            artifacts.append(line)
            continue
        kept.append(line)
    return kept, artifacts


# ==============================================================================
# MAIN RECONSTRUCTION FUNCTION
# ==============================================================================

def reconstruct_text(lines: list[str]) -> ReconstructedText:
    """
    Repair OCR/line-wrap artifacts and extract a title candidate.

    Args:
        lines: Raw lines in reading order

    Returns:
        ReconstructedText with title, repaired lines and artifacts
    """
    content, artifacts = filter_artifacts(list(lines))

    if not content:
        logger.debug(f"No content lines after filtering {len(artifacts)} artifacts")
        return ReconstructedText(artifacts=tuple(artifacts))

    reconstructed: list[str] = []
    title = content[0]
    body_start = 0

    # An upper-case heading may be split over several lines
    if is_all_uppercase(title):
        title_parts = [title]
        for line in content[1:]:
            if not is_all_uppercase(line):
                break
            title_parts.append(line)
        title = ' '.join(title_parts)
        reconstructed.append(title)
        body_start = len(title_parts)

    current = ""
    for line in content[body_start:]:
        if not current or starts_new_line(line):
            if current:
                reconstructed.append(current)
            current = line
        else:
            current = f"{current} {line}"

        if line.endswith('.'):
            reconstructed.append(current)
            current = ""

    if current:
        reconstructed.append(current)

    logger.debug(f"Reconstructed {len(content)} lines into {len(reconstructed)} "
                 f"(title='{title}', {len(artifacts)} artifacts)")

    return ReconstructedText(
        title=title,
        lines=tuple(reconstructed),
        artifacts=tuple(artifacts),
    )

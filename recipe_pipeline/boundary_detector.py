"""
Multi-recipe boundary detection.

A photographed cookbook spread or a pasted page can hold several recipes.
This module partitions such a line stream into contiguous single-recipe
segments, using re-detected titles and end markers (nutrition panels,
copyright lines) as split points.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from recipe_pipeline.classifier import LineLabel, RecipeTextClassifier
from recipe_pipeline.heuristics import (
    is_end_marker_line,
    is_properly_capitalized,
    is_section_header_line,
    word_count,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundaryConfig:
    """
    Tunable thresholds and weights for boundary detection.

    Attributes:
        title_split_confidence: A title must score above this to split
        min_lines_before_title_split: Lines a segment needs before a title can split it
        min_lines_before_end_marker: Lines a segment needs before an end marker closes it
        title_window: How many leading lines of a segment compete for its title
        title_weight: Weight of the classifier's title confidence
        position_weight: Weight of being early in the window
        capitalization_weight: Bonus for heading-style capitalization
        word_count_weight: Bonus for a 2-10 word line
    """
    title_split_confidence: float = 0.5
    min_lines_before_title_split: int = 3
    min_lines_before_end_marker: int = 5
    title_window: int = 5
    title_weight: float = 0.4
    position_weight: float = 0.2
    capitalization_weight: float = 0.2
    word_count_weight: float = 0.2


@dataclass(frozen=True)
class RecipeSegment:
    """A contiguous run of input lines believed to hold one recipe."""
    title: str
    title_confidence: float
    lines: tuple[str, ...] = field(default_factory=tuple)
    start_index: int = 0
    end_index: int = 0


def find_best_title(
    lines: Sequence[str],
    classifier: RecipeTextClassifier,
    config: Optional[BoundaryConfig] = None
) -> tuple[str, float]:
    """
    Pick the most title-like line among the first lines of a segment.

    Each candidate in the window is scored on classifier confidence,
    position, capitalization and length. The earliest line wins ties.

    Args:
        lines: Lines of one segment
        classifier: Classifier used to score candidates
        config: Weights and window size

    Returns:
        Tuple of (title, score); ("", 0.0) when the window has no content
    """
    config = config or BoundaryConfig()
    best_text, best_score = "", 0.0
    found = False

    for i, raw in enumerate(lines[:config.title_window]):
        line = raw.strip()
        if not line:
            continue

        classified = classifier.classify_line(line)

        score = 0.0
        if classified.label == LineLabel.TITLE:
            score += classified.confidence * config.title_weight

        score += (config.title_window - i) / config.title_window * config.position_weight

        if is_properly_capitalized(line):
            score += config.capitalization_weight

        if 2 <= word_count(line) <= 10:
            score += config.word_count_weight

        if not found or score > best_score:
            best_text, best_score = line, score
            found = True

    return best_text, best_score


class RecipeBoundaryDetector:
    """Split a line stream into per-recipe segments in one forward pass."""

    def __init__(self, classifier: RecipeTextClassifier, config: Optional[BoundaryConfig] = None):
        self.classifier = classifier
        self.config = config or BoundaryConfig()

    def _make_segment(self, lines: Sequence[str], start: int, end: int) -> RecipeSegment:
        segment_lines = tuple(lines[start:end + 1])
        title, confidence = find_best_title(segment_lines, self.classifier, self.config)
        logger.debug(f"Segment [{start}, {end}] title='{title}' ({confidence:.2f})")
        return RecipeSegment(
            title=title,
            title_confidence=confidence,
            lines=segment_lines,
            start_index=start,
            end_index=end,
        )

    def detect_boundaries(self, lines: Sequence[str]) -> list[RecipeSegment]:
        """
        Partition lines into recipe segments.

        A confident title more than min_lines_before_title_split lines into
        the current segment starts a new one; an end marker more than
        min_lines_before_end_marker lines in closes the current segment
        including the marker. Section headers never split.

        Args:
            lines: Lines in reading order (empty lines allowed)

        Returns:
            Segments in input order, contiguous and non-overlapping
        """
        config = self.config
        segments: list[RecipeSegment] = []
        segment_start = 0

        for index, raw in enumerate(lines):
            line = raw.strip()
            if not line:
                continue

            classified = self.classifier.classify_line(line)
            is_title_candidate = (
                classified.label == LineLabel.TITLE
                and classified.confidence > config.title_split_confidence
            )

            if is_section_header_line(line):
                logger.debug(f"Section header at line {index}: {line}")

            if is_title_candidate and index > segment_start + config.min_lines_before_title_split:
                segments.append(self._make_segment(lines, segment_start, index - 1))
                segment_start = index

            if is_end_marker_line(line) and index > segment_start + config.min_lines_before_end_marker:
                segments.append(self._make_segment(lines, segment_start, index))
                segment_start = index + 1

        if segment_start < len(lines):
            segments.append(self._make_segment(lines, segment_start, len(lines) - 1))

        logger.info(f"Detected {len(segments)} recipe segment(s) in {len(lines)} lines")
        return segments

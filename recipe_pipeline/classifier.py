"""
Line classification for recipe text.

Each reconstructed line gets one label from a closed set plus a confidence
score. The scoring itself is a pluggable capability (a LineModel); this
module wraps it with the threshold and bucket routing the pipeline needs.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Protocol, Union

from recipe_pipeline.heuristics import (
    is_ingredient_line,
    is_instruction_line,
    is_serving_line,
    is_summary_line,
    is_time_line,
    is_title_line,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE_THRESHOLD = 0.65


class LineLabel(str, Enum):
    """Kinds of recipe line a classifier can assign."""
    TITLE = 'title'
    INGREDIENT = 'ingredient'
    INSTRUCTION = 'instruction'
    SUMMARY = 'summary'
    TIME = 'time'
    SERVING = 'serving'
    UNKNOWN = 'unknown'

    @classmethod
    def from_value(cls, value: Union['LineLabel', str, None]) -> 'LineLabel':
        """Coerce a model's label output, mapping anything unrecognized to UNKNOWN."""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.UNKNOWN
        key = str(value).strip().lower()
        try:
            return cls(key)
        except ValueError:
            return LABEL_ALIASES.get(key, cls.UNKNOWN)


# Label names other models commonly emit
LABEL_ALIASES = {
    'step': LineLabel.INSTRUCTION,
    'steps': LineLabel.INSTRUCTION,
    'direction': LineLabel.INSTRUCTION,
    'description': LineLabel.SUMMARY,
    'timing': LineLabel.TIME,
    'servings': LineLabel.SERVING,
    'yield': LineLabel.SERVING,
}


@dataclass(frozen=True)
class ClassifiedLine:
    text: str
    label: LineLabel
    confidence: float


class LineModel(Protocol):
    """A trained or rule-based text classifier: one line in, label and confidence out."""

    def classify(self, text: str) -> tuple[Union[LineLabel, str], float]:
        ...


class LabelPredictor(Protocol):
    def predict_label(self, text: str) -> Optional[str]:
        ...

    def predict_confidence(self, text: str, label: str) -> float:
        ...


class PredictorAdapter:
    """
    Adapt a model exposing predict_label()/predict_confidence() to LineModel.

    This is the shape of most exported text classifiers: the label comes
    from one call and the hypothesis score for that label from another.
    """

    def __init__(self, predictor: LabelPredictor):
        self.predictor = predictor

    def classify(self, text: str) -> tuple[Union[LineLabel, str], float]:
        label = self.predictor.predict_label(text) or LineLabel.UNKNOWN.value
        confidence = self.predictor.predict_confidence(text, label)
        return label, confidence


class RuleBasedLineModel:
    """
    Deterministic line model built on the pattern scorers in heuristics.

    Every label is scored independently and the best one wins; ties go to
    the label listed first. Lines where no scorer reaches min_score are
    reported as unknown.
    """

    def __init__(self, min_score: float = 0.3):
        self.min_score = min_score
        self.scorers = [
            (LineLabel.SERVING, is_serving_line),
            (LineLabel.TIME, is_time_line),
            (LineLabel.INGREDIENT, is_ingredient_line),
            (LineLabel.INSTRUCTION, is_instruction_line),
            (LineLabel.TITLE, is_title_line),
            (LineLabel.SUMMARY, is_summary_line),
        ]

    def classify(self, text: str) -> tuple[LineLabel, float]:
        best_label = LineLabel.UNKNOWN
        best_score = 0.0
        for label, scorer in self.scorers:
            score = scorer(text)
            if score > best_score:
                best_label, best_score = label, score

        if best_score < self.min_score:
            return LineLabel.UNKNOWN, round(1.0 - best_score, 2)
        return best_label, round(best_score, 2)


@dataclass
class ClassificationResult:
    """
    Lines routed by label.

    Attributes:
        title: First confident title line, or "" if none was found
        buckets: Confident lines per label, in input order
        skipped: Unknown and low-confidence lines with their scores
        classified: Every line that reached the model, in input order
    """
    title: str = ""
    buckets: dict[LineLabel, list[str]] = field(
        default_factory=lambda: {label: [] for label in LineLabel if label != LineLabel.UNKNOWN}
    )
    skipped: list[ClassifiedLine] = field(default_factory=list)
    classified: list[ClassifiedLine] = field(default_factory=list)

    @property
    def ingredients(self) -> list[str]:
        return self.buckets[LineLabel.INGREDIENT]

    @property
    def instructions(self) -> list[str]:
        return self.buckets[LineLabel.INSTRUCTION]

    @property
    def summary(self) -> list[str]:
        return self.buckets[LineLabel.SUMMARY]

    @property
    def timings(self) -> list[str]:
        return self.buckets[LineLabel.TIME]

    @property
    def servings(self) -> list[str]:
        return self.buckets[LineLabel.SERVING]


class RecipeTextClassifier:
    """
    Threshold and routing wrapper around a LineModel.

    Without a model every line classifies as unknown with confidence 0.0,
    so a missing model degrades the run instead of failing it.
    """

    def __init__(
        self,
        model: Optional[LineModel] = None,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    ):
        self.model = model
        self.confidence_threshold = confidence_threshold
        if model is None:
            logger.warning("No line model configured - all lines will classify as unknown")

    @property
    def available(self) -> bool:
        return self.model is not None

    def classify_line(self, text: str) -> ClassifiedLine:
        """
        Classify a single line of recipe text.

        Args:
            text: Line to classify

        Returns:
            ClassifiedLine with the trimmed text, label and confidence
        """
        trimmed = text.strip()

        if self.model is None:
            return ClassifiedLine(text=trimmed, label=LineLabel.UNKNOWN, confidence=0.0)

        if not trimmed:
            return ClassifiedLine(text=trimmed, label=LineLabel.UNKNOWN, confidence=1.0)

        raw_label, raw_confidence = self.model.classify(trimmed)
        label = LineLabel.from_value(raw_label)
        confidence = max(0.0, min(1.0, float(raw_confidence)))

        return ClassifiedLine(text=trimmed, label=label, confidence=confidence)

    def classify_all(self, lines: Iterable[str]) -> ClassificationResult:
        """
        Classify lines and route them into per-label buckets.

        A line lands in its label's bucket only when its confidence is at or
        above the threshold; unknown and low-confidence lines are skipped.
        The first confident title becomes the result title.

        Args:
            lines: Reconstructed lines

        Returns:
            ClassificationResult
        """
        result = ClassificationResult()

        for line in lines:
            if not line or not line.strip():
                continue

            classified = self.classify_line(line)
            result.classified.append(classified)

            if classified.label == LineLabel.UNKNOWN or classified.confidence < self.confidence_threshold:
                result.skipped.append(classified)
                logger.debug(f"Skipped ({classified.label.value}, {classified.confidence:.2f}): "
                             f"{classified.text}")
                continue

            if classified.label == LineLabel.TITLE and not result.title:
                result.title = classified.text

            result.buckets[classified.label].append(classified.text)

        logger.info(f"Classified {len(result.classified)} lines: "
                    f"{len(result.ingredients)} ingredients, {len(result.instructions)} instructions, "
                    f"{len(result.skipped)} skipped")
        return result

"""
Pipeline orchestration for recipe processing.

RecipeProcessor runs one processing job at a time through these stages:
1. Source acquisition (OCR, pasted text, pasted HTML or given lines)
2. Reconstruction of wrapped lines and title
3. Line classification
4. Field assembly into a RecipeDraft
5. Post-processing

URL input skips stages 2-5 and goes straight to the web extractor. Progress
is exposed through `state`; results and failures are reported through the
on_completion/on_error callbacks.
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from recipe_pipeline.boundary_detector import BoundaryConfig, RecipeBoundaryDetector
from recipe_pipeline.classifier import (
    DEFAULT_CONFIDENCE_THRESHOLD,
    ClassificationResult,
    RecipeTextClassifier,
    RuleBasedLineModel,
)
from recipe_pipeline.heuristics import extract_lines_from_html
from recipe_pipeline.ocr import TesseractTextRecognizer, TextRecognizer
from recipe_pipeline.post_processor import post_process
from recipe_pipeline.recipe import FieldKind, RecipeDraft
from recipe_pipeline.reconstructor import ReconstructedText, reconstruct_text
from recipe_pipeline.utils import split_lines
from recipe_pipeline.web_extractor import ExtractionError, Fetcher, extract_draft

logger = logging.getLogger(__name__)


class ProcessingStage(str, Enum):
    IDLE = 'idle'
    PROCESSING = 'processing'
    COMPLETED = 'completed'
    ERROR = 'error'


@dataclass
class ProcessingState:
    """Progress of the current run, for callers that display it."""
    stage: ProcessingStage = ProcessingStage.IDLE
    status_message: str = ""
    error_message: str = ""
    recognized_text: list[str] = field(default_factory=list)

    def reset(self):
        self.stage = ProcessingStage.IDLE
        self.status_message = ""
        self.error_message = ""
        self.recognized_text = []


# ==============================================================================
# ERRORS
# ==============================================================================

class ProcessingError(Exception):
    """Base class for pipeline failures; the message is shown to the user."""

    default_message = "Recipe processing failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class NoTextDetected(ProcessingError):
    default_message = "No text was detected"


class EmptyContent(ProcessingError):
    default_message = "The content is empty after filtering"


class ClassificationUnavailable(ProcessingError):
    default_message = "Failed to classify the recipe content"


# ==============================================================================
# PROCESSOR
# ==============================================================================

class RecipeProcessor:
    """
    Sequences the recipe pipeline and tracks its state.

    The processor is synchronous. Callers that need to stay responsive run
    it on a worker thread and may pass a threading.Event as cancel_event;
    the event is checked between stages and a cancelled run returns None,
    resets to idle and fires no callback.

    Args:
        classifier: Line classifier; defaults to the rule-based model
        recognizer: OCR capability used by process_image
        fetcher: HTTP fetcher used by process_url
        boundary_config: Tunables for process_multi
        on_completion: Called with the finished draft
        on_error: Called with the error message
    """

    CONFIDENCE_THRESHOLD = DEFAULT_CONFIDENCE_THRESHOLD

    def __init__(
        self,
        classifier: Optional[RecipeTextClassifier] = None,
        recognizer: Optional[TextRecognizer] = None,
        fetcher: Optional[Fetcher] = None,
        boundary_config: Optional[BoundaryConfig] = None,
        on_completion: Optional[Callable[[RecipeDraft], None]] = None,
        on_error: Optional[Callable[[str], None]] = None
    ):
        self.classifier = classifier or RecipeTextClassifier(
            RuleBasedLineModel(), confidence_threshold=self.CONFIDENCE_THRESHOLD
        )
        self.recognizer = recognizer or TesseractTextRecognizer()
        self.fetcher = fetcher
        self.boundary_config = boundary_config or BoundaryConfig()
        self.on_completion = on_completion
        self.on_error = on_error

        self.state = ProcessingState()
        self.draft = RecipeDraft()

    # ==========================================================================
    # STATE
    # ==========================================================================

    def start(self):
        self.state.reset()
        self.draft = RecipeDraft()
        self.state.stage = ProcessingStage.PROCESSING

    def complete(self):
        self.state.stage = ProcessingStage.COMPLETED
        self.state.status_message = ""
        logger.info(f"Processing completed: '{self.draft.title}'")
        if self.on_completion:
            self.on_completion(self.draft)

    def fail(self, message: str):
        self.state.stage = ProcessingStage.ERROR
        self.state.error_message = message
        self.state.status_message = ""
        logger.error(f"Processing failed: {message}")
        if self.on_error:
            self.on_error(message)

    def _cancelled(self, cancel_event: Optional[threading.Event]) -> bool:
        if cancel_event is None or not cancel_event.is_set():
            return False
        logger.info("Processing cancelled")
        self.state.reset()
        self.draft = RecipeDraft()
        return True

    # ==========================================================================
    # STAGES
    # ==========================================================================

    def _acquire(self, lines: list[str], status: str, empty_error: ProcessingError) -> list[str]:
        self.state.status_message = status
        self.state.recognized_text = list(lines)
        if not lines:
            raise empty_error
        return list(lines)

    def _reconstruct(self, lines: list[str]) -> ReconstructedText:
        self.state.status_message = "Reconstructing text..."
        reconstructed = reconstruct_text(lines)
        if not reconstructed.lines:
            raise EmptyContent()
        return reconstructed

    def _classify(self, lines: tuple[str, ...]) -> ClassificationResult:
        self.state.status_message = "Classifying recipe content..."
        return self.classifier.classify_all(lines)

    def _assemble(self, raw_lines: list[str], reconstructed: ReconstructedText,
                  classified: ClassificationResult):
        self.state.status_message = "Finalizing the details..."

        draft = self.draft
        draft.title = reconstructed.title or classified.title
        draft.reconstructed = reconstructed
        draft.raw_text = [line.strip() for line in raw_lines if line.strip()]
        draft.fields[FieldKind.INGREDIENTS] = list(classified.ingredients)
        draft.fields[FieldKind.INSTRUCTIONS] = list(classified.instructions)
        draft.fields[FieldKind.SUMMARY] = list(classified.summary)
        draft.fields[FieldKind.TIMINGS] = list(classified.timings)
        draft.fields[FieldKind.SERVINGS] = list(classified.servings)
        draft.classified_lines = list(classified.classified)
        draft.skipped_lines = list(classified.skipped)

    def _run(
        self,
        acquire: Callable[[], list[str]],
        cancel_event: Optional[threading.Event] = None
    ) -> Optional[RecipeDraft]:
        self.start()
        try:
            lines = acquire()
            if self._cancelled(cancel_event):
                return None

            reconstructed = self._reconstruct(lines)
            if self._cancelled(cancel_event):
                return None

            classified = self._classify(reconstructed.lines)
            if self._cancelled(cancel_event):
                return None

            self._assemble(lines, reconstructed, classified)
            if self._cancelled(cancel_event):
                return None

            self.draft = post_process(self.draft)
        except ProcessingError as e:
            self.fail(str(e))
            return None
        except Exception as e:
            logger.error(f"Unexpected error during {self.state.status_message!r}: {e}", exc_info=True)
            self.fail(str(e))
            return None

        self.complete()
        return self.draft

    # ==========================================================================
    # ENTRY POINTS
    # ==========================================================================

    def process_lines(self, lines: list[str],
                      cancel_event: Optional[threading.Event] = None) -> Optional[RecipeDraft]:
        """
        Run the pipeline on lines that are already split.

        Returns:
            The finished draft, or None if the run failed or was cancelled
        """
        return self._run(
            lambda: self._acquire(lines, "Extracting text...", NoTextDetected()),
            cancel_event
        )

    def process_text(self, text: str,
                     cancel_event: Optional[threading.Event] = None) -> Optional[RecipeDraft]:
        """Run the pipeline on pasted text, one line per input line."""
        return self._run(
            lambda: self._acquire(split_lines(text), "Extracting text...", NoTextDetected()),
            cancel_event
        )

    def process_html(self, html: str,
                     cancel_event: Optional[threading.Event] = None) -> Optional[RecipeDraft]:
        """Run the pipeline on pasted HTML converted to text lines."""
        return self._run(
            lambda: self._acquire(extract_lines_from_html(html), "Extracting text...", NoTextDetected()),
            cancel_event
        )

    def process_image(self, image: Any,
                      cancel_event: Optional[threading.Event] = None) -> Optional[RecipeDraft]:
        """Run the pipeline on the text recognized in a photo."""
        def acquire():
            self.state.status_message = "Extracting text from image..."
            lines = self.recognizer.recognize_text(image)
            return self._acquire(lines, "Extracting text from image...",
                                 NoTextDetected("No text was detected in the image"))

        return self._run(acquire, cancel_event)

    def process_url(self, url: str,
                    cancel_event: Optional[threading.Event] = None) -> Optional[RecipeDraft]:
        """
        Extract a recipe from a web page.

        Returns:
            The extracted draft, or None if extraction failed or was cancelled
        """
        self.start()
        self.state.status_message = "Extracting recipe from website..."
        try:
            draft = extract_draft(url, self.fetcher)
        except ExtractionError as e:
            self.fail(str(e))
            return None
        except Exception as e:
            logger.error(f"Unexpected error extracting {url}: {e}", exc_info=True)
            self.fail(str(e))
            return None

        if self._cancelled(cancel_event):
            return None

        self.draft = draft
        self.complete()
        return self.draft

    def process_draft(self, draft: RecipeDraft) -> RecipeDraft:
        """Adopt an existing draft (such as an imported recipe) as the result."""
        self.start()
        self.draft = draft
        self.complete()
        return self.draft

    def process_multi(self, lines: list[str],
                      cancel_event: Optional[threading.Event] = None) -> list[RecipeDraft]:
        """
        Split a multi-recipe line stream and process each recipe separately.

        Each segment is a full pipeline run, so on_completion/on_error fire
        once per segment. Segments that fail are left out of the result.

        Returns:
            One draft per successfully processed segment, in input order;
            empty if the run was cancelled
        """
        detector = RecipeBoundaryDetector(self.classifier, self.boundary_config)
        segments = detector.detect_boundaries(lines)

        drafts = []
        for segment in segments:
            if self._cancelled(cancel_event):
                return []
            draft = self.process_lines(list(segment.lines), cancel_event)
            if draft is None:
                if self._cancelled(cancel_event):
                    return []
                logger.warning(f"Skipping segment [{segment.start_index}, {segment.end_index}]: "
                               f"{self.state.error_message}")
                continue
            drafts.append(draft)

        logger.info(f"Processed {len(drafts)} of {len(segments)} recipe segment(s)")
        return drafts

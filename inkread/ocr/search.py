"""
Best-of preprocessing search.

Runs single-pass recognition against every preprocessing variant of an
image and keeps the highest-scoring result:

    score = average_confidence × min(len(full_text), cap) / cap

Length matters so a confident but near-empty read cannot beat a fuller,
slightly less confident one; the cap stops long noisy reads from winning
on volume alone.

Each attempt yields a VariantOutcome (result or error). Failed variants
are logged and skipped; only a search where every variant failed is an
error.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from inkread.config import SearchConfig
from inkread.exceptions import InkreadError, InvalidImageError, NoTextDetectedError
from inkread.imaging.preprocess import to_engine_image
from inkread.imaging.variants import ImageVariant, VariantGenerator
from inkread.models import RecognitionResult
from inkread.ocr.recognizer import SinglePassRecognizer

logger = logging.getLogger(__name__)

DEFAULT_SCORE_LENGTH_CAP = 500


# =============================================================================
# DATA STRUCTURES
# =============================================================================


def score_result(result: RecognitionResult, length_cap: int = DEFAULT_SCORE_LENGTH_CAP) -> float:
    """Score a result by confidence weighted by (capped) text length."""
    return result.average_confidence * min(len(result.full_text), length_cap) / length_cap


@dataclass(frozen=True)
class VariantOutcome:
    """Result of recognizing one variant: either a result or an error."""

    index: int  # Position in generation order
    label: str
    result: RecognitionResult | None = None
    error: Exception | None = None
    score: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.result is not None


@dataclass
class SearchResult:
    """Result of a best-of search over one image."""

    result: RecognitionResult
    variant_label: str
    score: float
    outcomes: list[VariantOutcome] = field(default_factory=list)
    processing_time_ms: float = 0.0

    @property
    def variants_tried(self) -> int:
        return len(self.outcomes)

    @property
    def variants_failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.succeeded)


# =============================================================================
# SEARCH
# =============================================================================


def select_best(outcomes: list[VariantOutcome]) -> VariantOutcome | None:
    """
    Pick the best successful outcome.

    Outcomes are considered in generation order; a later one replaces the
    running best only with a strictly higher score.
    """
    best: VariantOutcome | None = None
    for outcome in sorted(outcomes, key=lambda o: o.index):
        if not outcome.succeeded:
            continue
        if best is None or outcome.score > best.score:
            best = outcome
    return best


class BestOfSearch:
    """Recognize every preprocessing variant and return the best result.

    Usage:
        search = BestOfSearch(recognizer, VariantGenerator())
        result = search.recognize_best(photo)

        # With diagnostics
        outcome = search.search(photo)
        print(outcome.variant_label, outcome.score)
    """

    def __init__(
        self,
        recognizer: SinglePassRecognizer,
        generator: VariantGenerator | None = None,
        config: SearchConfig | None = None,
    ):
        self.recognizer = recognizer
        self.config = config or SearchConfig()
        self.generator = generator or VariantGenerator(
            binarize_thresholds=self.config.binarize_thresholds
        )

    def recognize_best(self, image: Any) -> RecognitionResult:
        """
        Recognize image using the best-scoring preprocessing variant.

        Raises:
            NoTextDetectedError: If every variant failed, including when
                image cannot be read at all.
        """
        return self.search(image).result

    def search(self, image: Any) -> SearchResult:
        """Run the search and return the winner with per-variant diagnostics."""
        start_time = time.time()

        try:
            source = to_engine_image(image)
        except InvalidImageError as e:
            raise NoTextDetectedError(f"No readable image to search: {e}") from e

        variants = self.generator.generate(source)

        if self.config.parallel_variants and len(variants) > 1:
            workers = min(self.config.max_workers, len(variants))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                outcomes = list(executor.map(self._attempt, range(len(variants)), variants))
        else:
            outcomes = [self._attempt(i, variant) for i, variant in enumerate(variants)]

        best = select_best(outcomes)
        processing_time_ms = (time.time() - start_time) * 1000

        if best is None:
            raise NoTextDetectedError(
                f"No text detected in any of {len(variants)} preprocessing variants"
            )

        logger.debug(
            "Best variant '%s' (score %.3f) of %d, %d failed, %.0f ms",
            best.label,
            best.score,
            len(outcomes),
            sum(1 for o in outcomes if not o.succeeded),
            processing_time_ms,
        )

        return SearchResult(
            result=best.result,
            variant_label=best.label,
            score=best.score,
            outcomes=outcomes,
            processing_time_ms=processing_time_ms,
        )

    def _attempt(self, index: int, variant: ImageVariant) -> VariantOutcome:
        try:
            result = self.recognizer.recognize(variant.image)
        except InkreadError as e:
            logger.debug("Variant '%s' failed: %s", variant.label, e)
            return VariantOutcome(index=index, label=variant.label, error=e)
        except Exception as e:
            # Unexpected engine errors fail only this variant
            logger.warning(
                "Variant '%s' raised %s: %s", variant.label, type(e).__name__, e, exc_info=True
            )
            return VariantOutcome(index=index, label=variant.label, error=e)

        return VariantOutcome(
            index=index,
            label=variant.label,
            result=result,
            score=score_result(result, self.config.score_length_cap),
        )

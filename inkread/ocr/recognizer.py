"""
Single-pass recognition: one image variant, one engine call, one result.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any

from PIL import Image

from inkread.config import RecognitionConfig
from inkread.exceptions import LowConfidenceError, NoTextDetectedError, RecognitionTimeoutError
from inkread.imaging.preprocess import to_engine_image
from inkread.models import Line, RecognitionResult
from inkread.ocr.assembler import MAX_SECONDARY_CANDIDATES, assemble_line
from inkread.ocr.engines import LineObservation, RecognitionEngine

logger = logging.getLogger(__name__)


class SinglePassRecognizer:
    """Run one recognition attempt and assemble a RecognitionResult.

    The recognizer holds no mutable state, so one instance can serve any
    number of threads at once.

    Usage:
        recognizer = SinglePassRecognizer(create_engine(), RecognitionConfig())
        result = recognizer.recognize(image)
        print(result.full_text, result.average_confidence)
    """

    def __init__(self, engine: RecognitionEngine, config: RecognitionConfig | None = None):
        self.engine = engine
        self.config = config or RecognitionConfig()

    def recognize(self, image: Any) -> RecognitionResult:
        """
        Recognize text in image.

        Args:
            image: PIL image, numpy array, or encoded image bytes.

        Returns:
            RecognitionResult for this image.

        Raises:
            InvalidImageError: If image cannot be converted for the engine.
            NoTextDetectedError: If the engine found no lines.
            LowConfidenceError: If no line produced any words.
            RecognitionTimeoutError: If the engine call exceeded engine_timeout.
            EngineError: If the engine itself failed.
        """
        engine_image = to_engine_image(image)

        start_time = time.time()
        observations = self._call_engine(engine_image)
        elapsed_ms = (time.time() - start_time) * 1000

        if not observations:
            raise NoTextDetectedError("No text detected in image")

        lines = [line for line in map(self._assemble, observations) if line is not None]

        if not lines:
            raise LowConfidenceError(
                f"Engine reported {len(observations)} lines but none contained words"
            )

        result = RecognitionResult(lines=tuple(lines))
        logger.debug(
            "Recognized %d lines (%d chars, confidence %.2f, %d low-confidence words) in %.0f ms",
            len(result.lines),
            len(result.full_text),
            result.average_confidence,
            len(result.low_confidence_words),
            elapsed_ms,
        )
        return result

    def _call_engine(self, image: Image.Image) -> list[LineObservation]:
        timeout = self.config.engine_timeout
        if timeout is None:
            return self.engine.recognize_lines(image, self.config)

        # Don't wait for a hung engine thread on shutdown
        executor = ThreadPoolExecutor(max_workers=1)
        future = executor.submit(self.engine.recognize_lines, image, self.config)
        try:
            return future.result(timeout=timeout)
        except FuturesTimeoutError as e:
            future.cancel()
            raise RecognitionTimeoutError(
                f"{self.engine.name} engine did not finish within {timeout:g}s"
            ) from e
        finally:
            executor.shutdown(wait=False)

    def _assemble(self, observation: LineObservation) -> Line | None:
        candidates = observation.candidates[: self.config.max_candidates]
        if not candidates:
            return None

        return assemble_line(
            primary_text=candidates[0],
            line_confidence=self._line_confidence(observation.confidence),
            secondary_texts=candidates[1 : 1 + MAX_SECONDARY_CANDIDATES],
            word_boxes=observation.word_boxes,
        )

    def _line_confidence(self, confidence: float) -> float:
        if not self.config.clamp_line_confidence or 0.0 <= confidence <= 1.0:
            return confidence

        clamped = min(max(confidence, 0.0), 1.0)
        logger.warning(
            "Engine line confidence %.3f outside [0, 1]; clamped to %.1f", confidence, clamped
        )
        return clamped

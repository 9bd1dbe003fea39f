"""
OCR service: the composition root for inkread.

Wires together:
- RecognitionEngine (Tesseract / docTR, or an injected engine)
- ImagePreprocessor (standard pipeline for the simple path)
- SinglePassRecognizer (one attempt, one result)
- BestOfSearch (variant search for hard-to-read images)
- BatchRecognizer (many independent images)

There is no shared global instance: build one with create_service() and
pass it to whatever needs it.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from inkread.config import ServiceConfig
from inkread.imaging.preprocess import ImagePreprocessor, to_engine_image
from inkread.imaging.variants import VariantGenerator
from inkread.models import RecognitionResult
from inkread.normalizers.cleanup import clean_text
from inkread.ocr.batch import BatchRecognizer
from inkread.ocr.engines import RecognitionEngine, create_engine
from inkread.ocr.recognizer import SinglePassRecognizer
from inkread.ocr.search import BestOfSearch, SearchResult

logger = logging.getLogger(__name__)


class OCRService:
    """
    Main entry point for text recognition.

    Two paths:
    - recognize(): standard preprocessing, then one recognition pass
    - recognize_best(): try several preprocessing variants, keep the best

    Example:
        >>> service = create_service()
        >>> result = service.recognize(photo)
        >>> print(result.full_text)
        >>> texts = service.recognize_batch([page1, page2])
    """

    def __init__(
        self,
        engine: RecognitionEngine,
        config: ServiceConfig | None = None,
        preprocessor: ImagePreprocessor | None = None,
    ):
        self.config = config or ServiceConfig()
        self.engine = engine
        self.preprocessor = preprocessor or ImagePreprocessor()

        self.recognizer = SinglePassRecognizer(engine, self.config.recognition)
        self.search = BestOfSearch(
            self.recognizer,
            VariantGenerator(self.preprocessor, self.config.search.binarize_thresholds),
            self.config.search,
        )
        self.batch = BatchRecognizer(self.recognize, max_workers=self.config.batch_max_workers)

    def recognize(self, image: Any) -> RecognitionResult:
        """
        Recognize text with word-level confidence.

        The image goes through the standard preprocessing pipeline first;
        if preprocessing produces nothing, the input is recognized as-is.

        Raises:
            InvalidImageError, NoTextDetectedError, LowConfidenceError,
            RecognitionTimeoutError, EngineError
        """
        source = to_engine_image(image)
        processed = self.preprocessor.standard_pipeline(source)
        if processed is None:
            logger.debug("Standard preprocessing produced no image; recognizing input as-is")
            processed = source
        return self.recognizer.recognize(processed)

    def recognize_text(self, image: Any, clean: bool = False) -> str:
        """
        Recognize text and return it as a plain string.

        Args:
            image: Image to recognize.
            clean: Normalize checkbox/bullet/spacing artifacts.
        """
        text = self.recognize(image).full_text
        return clean_text(text) if clean else text

    def confidence_score(self, image: Any) -> float:
        """Average word confidence for image."""
        return self.recognize(image).average_confidence

    def recognize_batch(self, images: Sequence[Any]) -> list[str]:
        """Recognize images concurrently; texts come back in input order."""
        return self.batch.recognize(images)

    def recognize_best(self, image: Any) -> RecognitionResult:
        """
        Recognize using the best of several preprocessing variants.

        Use this for difficult handwriting; it costs one engine call per variant.

        Raises:
            NoTextDetectedError: If every variant failed.
        """
        return self.search.recognize_best(image)

    def search_best(self, image: Any) -> SearchResult:
        """Like recognize_best() but with per-variant diagnostics."""
        return self.search.search(image)


def create_service(
    config: ServiceConfig | None = None,
    engine: RecognitionEngine | None = None,
) -> OCRService:
    """
    Create an OCR service with default configuration.

    Args:
        config: Service configuration (defaults to ServiceConfig()).
        engine: Engine to use; detected from config.engine when omitted.

    Returns:
        Configured OCRService instance.

    Raises:
        EngineError: If no engine was given and none is installed.
    """
    config = config or ServiceConfig()
    if engine is None:
        engine = create_engine(config.engine)
        logger.info("Using %s recognition engine", engine.name)

    return OCRService(engine=engine, config=config)

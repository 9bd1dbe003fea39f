"""
Confidence-scored text recognition.

This module turns engine line observations into word-level results:
- Per-word confidence estimation from line confidence and candidate disagreement
- Line assembly with alternative readings
- Single-pass recognition with a typed failure taxonomy
- Best-of search across preprocessing variants
- Order-preserving concurrent batch recognition

Example:
    >>> from inkread.ocr import SinglePassRecognizer, create_engine
    >>> recognizer = SinglePassRecognizer(create_engine())
    >>> result = recognizer.recognize(image)
    >>> [w.text for w in result.low_confidence_words]
    ['rnilk']
"""

from inkread.ocr.assembler import assemble_line
from inkread.ocr.batch import BatchRecognizer
from inkread.ocr.confidence import (
    ALTERNATIVE_PENALTY,
    SINGLE_CHARACTER_PENALTY,
    UNUSUAL_CHARACTER_PENALTY,
    collect_alternatives,
    estimate_word_confidence,
)
from inkread.ocr.engines import (
    DoctrEngine,
    EngineKind,
    LineObservation,
    RecognitionEngine,
    TesseractEngine,
    create_engine,
    detect_available_engines,
)
from inkread.ocr.recognizer import SinglePassRecognizer
from inkread.ocr.search import (
    BestOfSearch,
    SearchResult,
    VariantOutcome,
    score_result,
    select_best,
)

__all__ = [
    # Confidence
    "estimate_word_confidence",
    "collect_alternatives",
    "ALTERNATIVE_PENALTY",
    "UNUSUAL_CHARACTER_PENALTY",
    "SINGLE_CHARACTER_PENALTY",
    # Assembly
    "assemble_line",
    # Engines
    "RecognitionEngine",
    "LineObservation",
    "EngineKind",
    "TesseractEngine",
    "DoctrEngine",
    "create_engine",
    "detect_available_engines",
    # Recognition
    "SinglePassRecognizer",
    "BestOfSearch",
    "SearchResult",
    "VariantOutcome",
    "score_result",
    "select_best",
    "BatchRecognizer",
]

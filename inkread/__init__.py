"""
inkread: confidence-scored text recognition for photographed notes.

This library turns a photo of handwriting or print into structured text
with per-word confidence, alternative readings for doubtful words, and an
optional search across preprocessing variants for hard-to-read pages.

Example:
    >>> import inkread
    >>> service = inkread.create_service()
    >>> result = service.recognize(photo)
    >>> print(result.full_text)
    >>> for word in result.low_confidence_words:
    ...     print(word.text, word.alternatives)

    >>> # Difficult handwriting: try several preprocessing variants
    >>> result = service.recognize_best(photo)
"""

from inkread.config import RecognitionConfig, SearchConfig, ServiceConfig
from inkread.exceptions import (
    ConfigurationError,
    EngineError,
    InkreadError,
    InvalidImageError,
    LowConfidenceError,
    NoTextDetectedError,
    RecognitionError,
    RecognitionTimeoutError,
)
from inkread.models import (
    LOW_CONFIDENCE_THRESHOLD,
    BoundingBox,
    Line,
    RecognitionResult,
    Word,
)
from inkread.normalizers import clean_text
from inkread.service import OCRService, create_service

__version__ = "0.1.0"
__all__ = [
    # Main API
    "OCRService",
    "create_service",
    "clean_text",
    # Configuration
    "ServiceConfig",
    "RecognitionConfig",
    "SearchConfig",
    # Results
    "RecognitionResult",
    "Line",
    "Word",
    "BoundingBox",
    "LOW_CONFIDENCE_THRESHOLD",
    # Exceptions
    "InkreadError",
    "RecognitionError",
    "InvalidImageError",
    "NoTextDetectedError",
    "LowConfidenceError",
    "RecognitionTimeoutError",
    "EngineError",
    "ConfigurationError",
]

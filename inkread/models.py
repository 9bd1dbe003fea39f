"""
Data models for inkread.

These models represent the output of text recognition. All of them are
frozen values: derived fields are computed once at construction and
never recomputed, so a result is never a live view over its lines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Words below this confidence are reported in RecognitionResult.low_confidence_words
LOW_CONFIDENCE_THRESHOLD = 0.7
HIGH_CONFIDENCE_THRESHOLD = 0.85

MAX_ALTERNATIVES = 3


@dataclass(frozen=True)
class BoundingBox:
    """Word rectangle in pixel coordinates of the recognized image."""

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"BoundingBox size must be non-negative, got {self.width}x{self.height}"
            )

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class Word:
    """
    A single recognized word with its estimated confidence.

    Attributes:
        text: The word as read by the engine's top candidate.
        confidence: Estimated correctness, conceptually in [0, 1].
        alternatives: Other readings at the same position (max 3, no
            duplicates, never the word's own text).
        bounding_box: Location in the image, when the engine reported one.
    """

    text: str
    confidence: float
    alternatives: tuple[str, ...] = ()
    bounding_box: BoundingBox | None = None

    def __post_init__(self):
        alternatives = tuple(self.alternatives)
        object.__setattr__(self, "alternatives", alternatives)

        if len(alternatives) > MAX_ALTERNATIVES:
            raise ValueError(
                f"at most {MAX_ALTERNATIVES} alternatives allowed, got {len(alternatives)}"
            )
        if len(set(alternatives)) != len(alternatives):
            raise ValueError(f"alternatives must be unique, got {alternatives!r}")
        if self.text in alternatives:
            raise ValueError(f"alternatives must not contain the word itself ({self.text!r})")

    @property
    def is_low_confidence(self) -> bool:
        return self.confidence < LOW_CONFIDENCE_THRESHOLD

    @property
    def is_medium_confidence(self) -> bool:
        return LOW_CONFIDENCE_THRESHOLD <= self.confidence < HIGH_CONFIDENCE_THRESHOLD

    @property
    def is_high_confidence(self) -> bool:
        return self.confidence >= HIGH_CONFIDENCE_THRESHOLD

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "confidence": self.confidence,
            "alternatives": list(self.alternatives),
            "bounding_box": self.bounding_box.to_dict() if self.bounding_box else None,
        }


@dataclass(frozen=True)
class Line:
    """
    A line of recognized words.

    full_text and confidence are derived from words at construction.
    """

    words: tuple[Word, ...]
    full_text: str = field(init=False)
    confidence: float = field(init=False)

    def __post_init__(self):
        words = tuple(self.words)
        object.__setattr__(self, "words", words)
        object.__setattr__(self, "full_text", " ".join(w.text for w in words))
        object.__setattr__(
            self,
            "confidence",
            sum(w.confidence for w in words) / len(words) if words else 0.0,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "full_text": self.full_text,
            "confidence": self.confidence,
            "words": [w.to_dict() for w in self.words],
        }


@dataclass(frozen=True)
class RecognitionResult:
    """
    The outcome of one completed recognition attempt for one image.

    This is the main output type for callers. Callers that only need
    text use full_text; review UIs use low_confidence_words and the
    per-word alternatives.

    Example:
        >>> result = service.recognize(image)
        >>> print(result.full_text)
        >>> for word in result.low_confidence_words:
        ...     print(word.text, word.alternatives)
    """

    lines: tuple[Line, ...]
    full_text: str = field(init=False)
    average_confidence: float = field(init=False)
    low_confidence_words: tuple[Word, ...] = field(init=False)

    def __post_init__(self):
        lines = tuple(self.lines)
        object.__setattr__(self, "lines", lines)
        object.__setattr__(self, "full_text", "\n".join(line.full_text for line in lines))

        all_words = [w for line in lines for w in line.words]
        object.__setattr__(
            self,
            "average_confidence",
            sum(w.confidence for w in all_words) / len(all_words) if all_words else 0.0,
        )
        object.__setattr__(
            self, "low_confidence_words", tuple(w for w in all_words if w.is_low_confidence)
        )

    @property
    def words(self) -> tuple[Word, ...]:
        """All words across all lines, in reading order."""
        return tuple(w for line in self.lines for w in line.words)

    @property
    def word_count(self) -> int:
        return sum(len(line.words) for line in self.lines)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the result
        """
        return {
            "full_text": self.full_text,
            "average_confidence": self.average_confidence,
            "lines": [line.to_dict() for line in self.lines],
            "low_confidence_words": [w.text for w in self.low_confidence_words],
        }

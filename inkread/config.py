"""
Configuration for inkread text recognition.

Three layers, mirroring how the pieces are wired together:
- RecognitionConfig: what a single engine call asks for
- SearchConfig: how best-of search builds and scores variants
- ServiceConfig: the composition root (engine choice, batch workers)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from inkread.exceptions import ConfigurationError

# Common words in emails and handwritten notes. Passed to the engine as a
# recognition bias list, unchanged.
DEFAULT_CUSTOM_WORDS: tuple[str, ...] = (
    # Email
    "To",
    "From",
    "Subject",
    "Dear",
    "Hi",
    "Hello",
    "Sincerely",
    "Regards",
    "Best",
    "Thanks",
    "Thank",
    "Please",
    "Reply",
    "Forward",
    "Sent",
    "Received",
    "gmail",
    "yahoo",
    "outlook",
    "hotmail",
    "icloud",
    "email",
    "mail",
    "@",
    ".com",
    ".org",
    ".net",
    ".edu",
    # Frequent handwriting misreads
    "the",
    "and",
    "that",
    "this",
    "with",
    "have",
    "from",
    "they",
    "been",
    "would",
    "could",
    "should",
    "which",
    "their",
    "there",
    "about",
    # Meetings
    "Meeting",
    "Agenda",
    "Action",
    "Items",
    "Attendees",
    "Notes",
    "Minutes",
    "Discussion",
    "Decision",
    "Follow-up",
    "TODO",
    "ASAP",
    "FYI",
    # Todos
    "task",
    "tasks",
    "todo",
    "done",
    "pending",
    "complete",
    "deadline",
)

DEFAULT_LANGUAGES: tuple[str, ...] = ("en-US", "en-GB")
DEFAULT_BINARIZE_THRESHOLDS: tuple[float, ...] = (0.35, 0.5, 0.65)


@dataclass
class RecognitionConfig:
    """
    Settings for one engine invocation.

    Defaults are tuned for small handwriting in photographed notes.

    Example:
        >>> config = RecognitionConfig(languages=["en-US", "de-DE"])
        >>> recognizer = SinglePassRecognizer(engine, config)
    """

    # Ranked candidates requested per line (top + up to 4 secondaries)
    max_candidates: int = 5
    recognition_level: Literal["accurate", "fast"] = "accurate"
    uses_language_correction: bool = True
    languages: list[str] = field(default_factory=lambda: list(DEFAULT_LANGUAGES))
    custom_words: list[str] = field(default_factory=lambda: list(DEFAULT_CUSTOM_WORDS))

    # Fraction of image height; lines shorter than this are ignored
    minimum_text_height: float = 0.01

    # Clamp engine line confidence into [0, 1] before word estimation
    clamp_line_confidence: bool = True

    # Seconds per engine call; None waits indefinitely
    engine_timeout: float | None = None

    def __post_init__(self):
        """Validate configuration."""
        if self.max_candidates < 1:
            raise ConfigurationError(f"max_candidates must be >= 1, got {self.max_candidates}")

        valid_levels = ("accurate", "fast")
        if self.recognition_level not in valid_levels:
            raise ConfigurationError(
                f"recognition_level must be one of {valid_levels}, "
                f"got {self.recognition_level!r}"
            )

        if not 0.0 <= self.minimum_text_height < 1.0:
            raise ConfigurationError(
                f"minimum_text_height must be in [0.0, 1.0), got {self.minimum_text_height}"
            )

        if self.engine_timeout is not None and self.engine_timeout <= 0:
            raise ConfigurationError(
                f"engine_timeout must be positive or None, got {self.engine_timeout}"
            )


@dataclass
class SearchConfig:
    """
    Settings for best-of preprocessing search.

    Example:
        >>> config = SearchConfig(parallel_variants=True, max_workers=6)
    """

    binarize_thresholds: tuple[float, ...] = DEFAULT_BINARIZE_THRESHOLDS

    # Text length (characters) beyond which a longer transcription scores no higher
    score_length_cap: int = 500

    # Run variants concurrently; selection still follows generation order
    parallel_variants: bool = False
    max_workers: int = 4

    def __post_init__(self):
        """Validate configuration."""
        for threshold in self.binarize_thresholds:
            if not 0.0 < threshold < 1.0:
                raise ConfigurationError(
                    f"binarize_thresholds must be in (0.0, 1.0), got {threshold}"
                )
        if self.score_length_cap < 1:
            raise ConfigurationError(
                f"score_length_cap must be >= 1, got {self.score_length_cap}"
            )
        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {self.max_workers}")


@dataclass
class ServiceConfig:
    """
    Configuration for OCRService.

    All options have sensible defaults. Create a config only
    if you need to customize behavior.

    Example:
        >>> config = ServiceConfig(
        ...     engine="tesseract",
        ...     search=SearchConfig(parallel_variants=True),
        ... )
        >>> service = create_service(config)
    """

    # "auto", "tesseract", "doctr", "doctr_gpu", "doctr_cpu"
    engine: str = "auto"
    batch_max_workers: int = 4

    recognition: RecognitionConfig = field(default_factory=RecognitionConfig)
    search: SearchConfig = field(default_factory=SearchConfig)

    def __post_init__(self):
        """Validate configuration."""
        valid_engines = ("auto", "tesseract", "doctr", "doctr_gpu", "doctr_cpu")
        if self.engine.lower() not in valid_engines:
            raise ConfigurationError(
                f"engine must be one of {valid_engines}, got {self.engine!r}"
            )
        if self.batch_max_workers < 1:
            raise ConfigurationError(
                f"batch_max_workers must be >= 1, got {self.batch_max_workers}"
            )

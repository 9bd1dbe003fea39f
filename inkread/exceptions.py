"""
Exception classes for inkread.

All inkread exceptions inherit from InkreadError,
making it easy to catch all library errors.

The recognition failures form their own branch so callers can
tell "nothing readable" apart from engine or configuration faults.

Example:
    >>> try:
    ...     result = service.recognize(image)
    ... except inkread.NoTextDetectedError:
    ...     print("Found nothing")
    ... except inkread.LowConfidenceError:
    ...     print("Found marks but couldn't read them")
    ... except inkread.InkreadError as e:
    ...     print(f"inkread error: {e}")
"""


class InkreadError(Exception):
    """
    Base exception for all inkread errors.

    Catch this to handle any inkread-specific error.
    """

    pass


class RecognitionError(InkreadError):
    """Base for failures of a single recognition attempt."""

    pass


class InvalidImageError(RecognitionError):
    """
    Raised when the input cannot be converted to the engine's pixel format.

    Not retried; surfaced to the caller immediately.
    """

    pass


class NoTextDetectedError(RecognitionError):
    """
    Raised when the engine reports zero line observations.

    Best-of search also raises this when every variant failed.
    """

    pass


class LowConfidenceError(RecognitionError):
    """
    Raised when the engine found lines but none produced any words.

    Example:
        Engine observations that are all whitespace end up here,
        not in NoTextDetectedError.
    """

    pass


class RecognitionTimeoutError(RecognitionError):
    """Raised when an engine call exceeds RecognitionConfig.engine_timeout."""

    pass


class EngineError(InkreadError):
    """
    Raised when the recognition engine fails or none is available.

    The underlying library exception is chained as __cause__.
    """

    pass


class ConfigurationError(InkreadError, ValueError):
    """
    Raised for invalid configuration.

    Example:
        >>> RecognitionConfig(max_candidates=0)
        ConfigurationError: max_candidates must be >= 1, got 0
    """

    pass

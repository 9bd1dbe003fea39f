"""
Line assembly: engine candidate strings -> Line of Words.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from inkread.models import BoundingBox, Line, Word
from inkread.ocr.confidence import collect_alternatives, estimate_word_confidence

logger = logging.getLogger(__name__)

# Secondary candidates consulted per line (the top candidate is separate)
MAX_SECONDARY_CANDIDATES = 4


def assemble_line(
    primary_text: str,
    line_confidence: float,
    secondary_texts: Sequence[str] = (),
    word_boxes: Sequence[BoundingBox] | None = None,
) -> Line | None:
    """
    Build a Line from one engine line observation.

    Args:
        primary_text: The engine's top-ranked reading of the line.
        line_confidence: The engine's confidence for the line.
        secondary_texts: Lower-ranked readings (only the first 4 are used).
        word_boxes: Optional per-token boxes; attached only when there is
            exactly one box per token of primary_text.

    Returns:
        The assembled Line, or None if primary_text has no tokens.
    """
    tokens = primary_text.split()
    if not tokens:
        return None

    secondaries = list(secondary_texts[:MAX_SECONDARY_CANDIDATES])

    boxes: Sequence[BoundingBox | None]
    if word_boxes is not None and len(word_boxes) == len(tokens):
        boxes = word_boxes
    else:
        if word_boxes:
            logger.debug(
                "Dropping %d word boxes for line with %d tokens", len(word_boxes), len(tokens)
            )
        boxes = [None] * len(tokens)

    words = []
    for index, token in enumerate(tokens):
        alternatives = collect_alternatives(token, index, secondaries)
        words.append(
            Word(
                text=token,
                confidence=estimate_word_confidence(token, line_confidence, alternatives),
                alternatives=tuple(alternatives),
                bounding_box=boxes[index],
            )
        )

    return Line(words=tuple(words))

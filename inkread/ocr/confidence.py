"""
Per-word confidence estimation.

Engines report confidence per line, not per word. This module derives a
word-level value from three signals:
1. The line confidence (baseline)
2. Disagreement with secondary candidate lines at the same word position
3. Lexical shape (non-standard glyphs, lone characters)

Characters are grapheme clusters, so a decomposed "é" (e + combining
acute) is one letter, exactly like its precomposed form.

Penalties are multiplicative and compound. The multipliers are fixed:
downstream review thresholds are calibrated against them.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Sequence

import regex

from inkread.models import MAX_ALTERNATIVES

# =============================================================================
# CONSTANTS
# =============================================================================

ALTERNATIVE_PENALTY = 0.85  # Engine disagreed on this word across candidates
UNUSUAL_CHARACTER_PENALTY = 0.9  # Contains something not letter/digit/punctuation
SINGLE_CHARACTER_PENALTY = 0.8  # Lone characters are disproportionately misread

# Single characters that are ordinary English words
SINGLE_LETTER_WORDS = frozenset({"I", "a", "A"})

# Unicode general category prefixes: letters, numbers, punctuation
_STANDARD_CATEGORY_PREFIXES = ("L", "N", "P")

# One user-perceived character: a base code point plus any combining marks
_GRAPHEME = regex.compile(r"\X")


# =============================================================================
# ESTIMATION
# =============================================================================


def collect_alternatives(word: str, index: int, secondary_lines: Sequence[str]) -> list[str]:
    """
    Collect differing readings of the word at ``index`` from secondary lines.

    Args:
        word: The primary reading.
        index: Token position of the word within its line.
        secondary_lines: Other ranked interpretations of the whole line.

    Returns:
        Distinct alternatives in first-seen order, at most MAX_ALTERNATIVES.
    """
    alternatives: list[str] = []
    for line in secondary_lines:
        tokens = line.split()
        if index < len(tokens) and tokens[index] != word and tokens[index] not in alternatives:
            alternatives.append(tokens[index])
    return alternatives[:MAX_ALTERNATIVES]


def graphemes(word: str) -> list[str]:
    """Split word into user-perceived characters."""
    return _GRAPHEME.findall(word)


def has_unusual_characters(word: str) -> bool:
    """
    True if any character is neither a letter, a digit, nor punctuation.

    Each grapheme is classified by its base code point, so combining
    accents never count as unusual on their own.
    """
    return any(
        not unicodedata.category(grapheme[0]).startswith(_STANDARD_CATEGORY_PREFIXES)
        for grapheme in graphemes(word)
    )


def estimate_word_confidence(
    word: str, line_confidence: float, alternatives: Sequence[str]
) -> float:
    """
    Estimate a word's confidence from its line confidence.

    Args:
        word: The word text.
        line_confidence: Engine-reported confidence for the whole line.
        alternatives: Differing readings from collect_alternatives().

    Returns:
        The penalized confidence. Not renormalized.
    """
    confidence = line_confidence

    if alternatives:
        confidence *= ALTERNATIVE_PENALTY

    if has_unusual_characters(word):
        confidence *= UNUSUAL_CHARACTER_PENALTY

    if len(graphemes(word)) == 1 and word not in SINGLE_LETTER_WORDS:
        confidence *= SINGLE_CHARACTER_PENALTY

    return confidence

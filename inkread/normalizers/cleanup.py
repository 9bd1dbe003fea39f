"""
Cleanup of common OCR artifacts in recognized note text.

Handwritten checkboxes and bullets are routinely read as bracket pairs,
dashes, or a stray "l"/"I". This module rewrites them to proper Unicode
symbols and tidies spacing.

Key transformations:
- Checkboxes: "[ ]" -> "☐", "[x]" -> "☑" (also "( )" and "(x)")
- Bullets at line start: "l ", "I ", "- ", "* " -> "• "
- Hollow bullets at line start: "() " -> "• "
- Runs of spaces collapsed; at most one blank line between paragraphs

Example:
    >>> clean_text("[ ] milk\\n- eggs")
    '☐ milk\\n• eggs'
"""

from __future__ import annotations

import re

UNCHECKED_BOX = "☐"
CHECKED_BOX = "☑"
BULLET = "•"

# Order matters: "[  ]" before "[ ]"
CHECKBOX_REPLACEMENTS = (
    ("[  ]", UNCHECKED_BOX),
    ("[ ]", UNCHECKED_BOX),
    ("[]", UNCHECKED_BOX),
    ("[x]", CHECKED_BOX),
    ("[X]", CHECKED_BOX),
    ("( )", UNCHECKED_BOX),
    ("(x)", CHECKED_BOX),
    ("(X)", CHECKED_BOX),
)

# Line-start markers read as bullets (only when followed by a space)
BULLET_MARKERS = ("l", "I", "-", "*", "()", "○")

_MULTIPLE_SPACES = re.compile(r" {2,}")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def normalize_checkboxes(text: str) -> str:
    for artifact, symbol in CHECKBOX_REPLACEMENTS:
        text = text.replace(artifact, symbol)
    return text


def normalize_bullets(text: str) -> str:
    """Rewrite bullet-like markers at the start of any line to "• "."""
    markers = "|".join(re.escape(m) for m in BULLET_MARKERS)
    return re.sub(rf"(?m)^(?:{markers}) ", f"{BULLET} ", text)


def normalize_spacing(text: str) -> str:
    text = _MULTIPLE_SPACES.sub(" ", text)
    text = _EXCESS_NEWLINES.sub("\n\n", text)
    return text.strip()


def clean_text(text: str) -> str:
    """
    Clean recognized text by normalizing checkbox, bullet and spacing artifacts.

    Args:
        text: Raw recognized text.

    Returns:
        Cleaned text.
    """
    text = normalize_checkboxes(text)
    text = normalize_bullets(text)
    return normalize_spacing(text)

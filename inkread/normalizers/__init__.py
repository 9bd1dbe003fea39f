"""
Normalizers for recognized text.

- clean_text: checkbox, bullet and spacing cleanup for handwritten notes
"""

from inkread.normalizers.cleanup import (
    clean_text,
    normalize_bullets,
    normalize_checkboxes,
    normalize_spacing,
)

__all__ = [
    "clean_text",
    "normalize_checkboxes",
    "normalize_bullets",
    "normalize_spacing",
]

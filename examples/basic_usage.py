#!/usr/bin/env python3
"""
Basic inkread Usage Example

This example demonstrates the core workflow:
1. Recognize a photographed note with per-word confidence
2. Review doubtful words and their alternatives
3. Search preprocessing variants for difficult handwriting
4. Recognize a batch of pages
5. Clean up checkbox and bullet artifacts
"""

import logging
from pathlib import Path

from PIL import Image

import inkread
from inkread import NoTextDetectedError, SearchConfig, ServiceConfig


def main():
    logging.basicConfig(level=logging.INFO)

    # ─────────────────────────────────────────────────────────────────────────
    # 1. Basic Recognition
    # ─────────────────────────────────────────────────────────────────────────

    service = inkread.create_service()
    photo = Image.open("path/to/note.jpg")

    result = service.recognize(photo)

    print(result.full_text)
    print(f"  Lines: {len(result.lines)}")
    print(f"  Words: {result.word_count}")
    print(f"  Average confidence: {result.average_confidence:.2f}")

    # ─────────────────────────────────────────────────────────────────────────
    # 2. Review Doubtful Words
    # ─────────────────────────────────────────────────────────────────────────

    for word in result.low_confidence_words:
        options = ", ".join(word.alternatives) or "no alternatives"
        print(f"  ? {word.text} ({word.confidence:.2f}): {options}")

    # ─────────────────────────────────────────────────────────────────────────
    # 3. Difficult Handwriting
    # ─────────────────────────────────────────────────────────────────────────

    config = ServiceConfig(
        engine="tesseract",  # Or "auto", "doctr", "doctr_cpu"
        search=SearchConfig(
            binarize_thresholds=(0.3, 0.45, 0.6),  # Lighter thresholds for faint pencil
            parallel_variants=True,  # Run variants concurrently
        ),
    )
    service = inkread.create_service(config)

    try:
        outcome = service.search_best(photo)
        print(f"Best variant: {outcome.variant_label} (score {outcome.score:.3f})")
        print(f"  {outcome.variants_failed} of {outcome.variants_tried} variants failed")
    except NoTextDetectedError:
        print("No variant produced any text")

    # ─────────────────────────────────────────────────────────────────────────
    # 4. Batch Recognition
    # ─────────────────────────────────────────────────────────────────────────

    pages = [Image.open(p) for p in sorted(Path("path/to/scans").glob("*.png"))]
    for text in service.recognize_batch(pages):
        print(text[:80])

    # ─────────────────────────────────────────────────────────────────────────
    # 5. Cleanup
    # ─────────────────────────────────────────────────────────────────────────

    # "[ ] call mom" -> "☐ call mom", "- eggs" -> "• eggs"
    print(service.recognize_text(photo, clean=True))


if __name__ == "__main__":
    main()

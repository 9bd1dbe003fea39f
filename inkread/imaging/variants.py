"""
Preprocessing variants for best-of search.

Different photos respond to different preprocessing: faint pencil needs
a low binarization threshold, heavy marker a high one. The generator
produces a small fixed set of alternatives in a fixed order; that order
is also the tie-break order of the search.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import partial

from PIL import Image

from inkread.config import DEFAULT_BINARIZE_THRESHOLDS
from inkread.imaging.preprocess import ImagePreprocessor

logger = logging.getLogger(__name__)

ORIGINAL_LABEL = "original"


@dataclass(frozen=True)
class ImageVariant:
    """One preprocessed version of the source image."""

    label: str
    image: Image.Image


class VariantGenerator:
    """Produce the ordered set of preprocessing variants for one image.

    Order: standard pipeline, scaled, binarized at each threshold (ascending
    as configured), grayscale. Steps that return None are dropped; if all
    of them do, the original image is the only variant.

    Usage:
        generator = VariantGenerator(ImagePreprocessor())
        for variant in generator.generate(photo):
            print(variant.label, variant.image.size)
    """

    def __init__(
        self,
        preprocessor: ImagePreprocessor | None = None,
        binarize_thresholds: Sequence[float] = DEFAULT_BINARIZE_THRESHOLDS,
    ):
        self.preprocessor = preprocessor or ImagePreprocessor()
        self.binarize_thresholds = tuple(binarize_thresholds)

    def steps(self) -> list[tuple[str, Callable[[Image.Image], Image.Image | None]]]:
        """Labelled preprocessing steps in generation order."""
        p = self.preprocessor
        steps: list[tuple[str, Callable[[Image.Image], Image.Image | None]]] = [
            ("standard", p.standard_pipeline),
            ("scaled", p.scale_for_recognition),
        ]
        steps.extend(
            (f"binarize-{threshold:g}", partial(p.binarize, threshold=threshold))
            for threshold in self.binarize_thresholds
        )
        steps.append(("grayscale", p.to_grayscale))
        return steps

    def generate(self, image: Image.Image) -> list[ImageVariant]:
        """
        Generate variants of image.

        Returns:
            Non-empty list of variants in generation order.
        """
        produced = [(label, step(image)) for label, step in self.steps()]

        variants = [ImageVariant(label, output) for label, output in produced if output is not None]

        skipped = [label for label, output in produced if output is None]
        if skipped:
            logger.debug("Skipped variants with no output: %s", ", ".join(skipped))

        if not variants:
            logger.warning("No preprocessing variant succeeded; using the original image")
            return [ImageVariant(ORIGINAL_LABEL, image)]

        return variants

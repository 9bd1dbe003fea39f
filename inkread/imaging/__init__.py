"""
Image preprocessing and variant generation.

- ImagePreprocessor: Pillow-based grayscale, binarization, scaling,
  deskew and enhancement; each step returns None on failure
- VariantGenerator: the fixed, ordered set of variants for best-of search
- to_engine_image: input gate that converts arrays/bytes to PIL images
"""

from inkread.imaging.preprocess import ImagePreprocessor, to_engine_image
from inkread.imaging.variants import ImageVariant, VariantGenerator

__all__ = [
    "ImagePreprocessor",
    "to_engine_image",
    "ImageVariant",
    "VariantGenerator",
]

"""
Image preprocessing for handwriting recognition.

Every public operation returns a new image or None on failure; callers
decide what to do about a missing result. The one exception is
to_engine_image(), which is the recognizer's input gate and raises
InvalidImageError.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Any

from PIL import Image, ImageEnhance, ImageFilter, ImageOps, ImageStat, UnidentifiedImageError

from inkread.exceptions import InvalidImageError

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Long-edge pixel range engines read best
MIN_OPTIMAL_DIMENSION = 2000
MAX_OPTIMAL_DIMENSION = 4000
TARGET_MAX_DIMENSION = 3000

# Skew angles below this are left alone
MIN_DESKEW_ANGLE = 0.5

# Modes engines accept as-is
ENGINE_MODES = ("RGB", "L")


# =============================================================================
# ENGINE INPUT
# =============================================================================


def _to_8bit_gray(image: Image.Image) -> Image.Image:
    """
    Map a 16-bit, 32-bit or float image into mode L without clipping.

    16-bit images keep their absolute brightness (65535 -> 255). Float
    images in [0, 1] are scaled by 255. Anything else outside 0-255 is
    stretched from its own minimum and maximum. Results round to the
    nearest gray level.
    """
    if image.mode.startswith("I;16"):
        return image.convert("I").point(lambda p: p * (255 / 65535) + 0.5).convert("L")

    low, high = image.getextrema()
    if image.mode == "F" and 0.0 <= low and high <= 1.0:
        return image.point(lambda p: p * 255).convert("L")
    if 0 <= low and high <= 255:
        return image.convert("L")
    if image.mode == "I" and 0 <= low and high <= 65535:
        return image.point(lambda p: p * (255 / 65535) + 0.5).convert("L")
    if high == low:
        return Image.new("L", image.size, 255)

    scale = 255 / (high - low)
    return image.convert("F").point(lambda p: p * scale - low * scale).convert("L")


def to_engine_image(image: Any) -> Image.Image:
    """
    Convert input to a PIL image in a mode engines accept.

    Accepts PIL images, array-likes exposing __array_interface__
    (numpy arrays), and encoded image bytes.

    Raises:
        InvalidImageError: If the input cannot be converted.
    """
    try:
        if isinstance(image, Image.Image):
            pil_image = image
        elif isinstance(image, (bytes, bytearray)):
            pil_image = Image.open(io.BytesIO(image))
            pil_image.load()
        elif hasattr(image, "__array_interface__"):
            pil_image = Image.fromarray(image)
        else:
            raise InvalidImageError(f"Unsupported image type: {type(image).__name__}")

        if pil_image.width == 0 or pil_image.height == 0:
            raise InvalidImageError(f"Image has no pixels ({pil_image.width}x{pil_image.height})")

        if pil_image.mode in ENGINE_MODES:
            return pil_image
        if pil_image.mode == "1":
            return pil_image.convert("L")
        if pil_image.mode in ("I", "F") or pil_image.mode.startswith("I;16"):
            return _to_8bit_gray(pil_image)
        return pil_image.convert("RGB")

    except (OSError, ValueError, TypeError, UnidentifiedImageError) as e:
        raise InvalidImageError(f"Cannot convert image for recognition: {e}") from e


# =============================================================================
# PREPROCESSOR
# =============================================================================


@dataclass
class ImagePreprocessor:
    """
    Pillow-based preprocessing pipeline optimized for handwriting.

    Attributes:
        contrast: Contrast factor applied after auto-contrast.
        sharpen_percent: UnsharpMask strength.
        denoise_size: Median filter size (0 disables denoising).
        max_skew_degrees: Largest skew deskew() searches for.
        skew_step_degrees: Search resolution for deskew().

    Example:
        >>> preprocessor = ImagePreprocessor()
        >>> cleaned = preprocessor.standard_pipeline(photo) or photo
    """

    contrast: float = 1.2
    sharpen_percent: int = 40
    denoise_size: int = 3
    max_skew_degrees: float = 5.0
    skew_step_degrees: float = 0.5

    def to_grayscale(self, image: Image.Image) -> Image.Image | None:
        try:
            return ImageOps.grayscale(image)
        except (OSError, ValueError) as e:
            logger.warning("Grayscale conversion failed: %s", e)
            return None

    def binarize(self, image: Image.Image, threshold: float = 0.5) -> Image.Image | None:
        """
        Black/white image: pixels at or above threshold × 255 become white.

        Low thresholds keep faint strokes; high thresholds thin heavy ones.
        """
        gray = self.to_grayscale(image)
        if gray is None:
            return None

        cutoff = round(threshold * 255)
        try:
            return gray.point(lambda p: 255 if p >= cutoff else 0)
        except (OSError, ValueError) as e:
            logger.warning("Binarization at %.2f failed: %s", threshold, e)
            return None

    def scale_for_recognition(self, image: Image.Image) -> Image.Image | None:
        """
        Scale so the long edge lands in the optimal range.

        Images already within [2000, 4000] px are returned unchanged; smaller
        ones are upscaled to 2000 px, larger ones downscaled to 3000 px.
        """
        current_max = max(image.size)
        if current_max == 0:
            return None
        if MIN_OPTIMAL_DIMENSION <= current_max <= MAX_OPTIMAL_DIMENSION:
            return image

        if current_max < MIN_OPTIMAL_DIMENSION:
            scale = MIN_OPTIMAL_DIMENSION / current_max
        else:
            scale = TARGET_MAX_DIMENSION / current_max

        new_size = (max(1, round(image.width * scale)), max(1, round(image.height * scale)))
        try:
            return image.resize(new_size, Image.Resampling.LANCZOS)
        except (OSError, ValueError) as e:
            logger.warning("Scaling to %s failed: %s", new_size, e)
            return None

    def correct_orientation(self, image: Image.Image) -> Image.Image:
        """Apply EXIF orientation so text is upright."""
        try:
            return ImageOps.exif_transpose(image)
        except (OSError, ValueError) as e:
            logger.debug("EXIF transpose failed: %s", e)
            return image

    def estimate_skew(self, image: Image.Image) -> float:
        """
        Estimate text skew by maximizing row-profile variance.

        Text lines that run horizontally produce sharply alternating dark
        and light rows; the rotation with the highest row variance wins.

        Returns:
            Skew angle in degrees (counter-clockwise rotation to apply).
        """
        gray = ImageOps.grayscale(image)
        gray.thumbnail((800, 800))
        inverted = ImageOps.invert(gray)

        steps = int(self.max_skew_degrees / self.skew_step_degrees)
        # Smallest rotations first so ties (e.g. a blank page) keep the image level
        angles = sorted((i * self.skew_step_degrees for i in range(-steps, steps + 1)), key=abs)

        best_angle = 0.0
        best_variance = -1.0
        for angle in angles:
            rotated = inverted.rotate(angle, resample=Image.Resampling.BILINEAR, fillcolor=0)
            # One pixel per row: the mean ink per row
            profile = rotated.resize((1, rotated.height), Image.Resampling.BOX)
            variance = ImageStat.Stat(profile).var[0]
            if variance > best_variance:
                best_variance = variance
                best_angle = angle

        return best_angle

    def deskew(self, image: Image.Image) -> Image.Image | None:
        try:
            angle = self.estimate_skew(image)
        except (OSError, ValueError) as e:
            logger.warning("Skew estimation failed: %s", e)
            return None

        if abs(angle) < MIN_DESKEW_ANGLE:
            return image

        logger.debug("Deskewing by %.1f degrees", angle)
        base = image if image.mode in ENGINE_MODES else image.convert("RGB")
        fill = 255 if base.mode == "L" else (255, 255, 255)
        try:
            return base.rotate(
                angle, resample=Image.Resampling.BICUBIC, expand=True, fillcolor=fill
            )
        except (OSError, ValueError) as e:
            logger.warning("Deskew rotation failed: %s", e)
            return None

    def enhance(self, image: Image.Image) -> Image.Image | None:
        """Denoise, auto-contrast, boost contrast and sharpen."""
        try:
            enhanced = image if image.mode in ENGINE_MODES else image.convert("RGB")
            if self.denoise_size > 0:
                enhanced = enhanced.filter(ImageFilter.MedianFilter(self.denoise_size))
            enhanced = ImageOps.autocontrast(enhanced, cutoff=1)
            enhanced = ImageEnhance.Contrast(enhanced).enhance(self.contrast)
            return enhanced.filter(
                ImageFilter.UnsharpMask(radius=2, percent=self.sharpen_percent, threshold=3)
            )
        except (OSError, ValueError) as e:
            logger.warning("Enhancement failed: %s", e)
            return None

    def standard_pipeline(self, image: Image.Image) -> Image.Image | None:
        """
        Complete preprocessing: orientation, scaling, deskew, enhancement.

        A stage that fails is skipped and the next stage gets the previous
        stage's image.
        """
        processed = self.correct_orientation(image)

        for stage in (self.scale_for_recognition, self.deskew, self.enhance):
            result = stage(processed)
            if result is not None:
                processed = result

        return processed

"""
Recognition engines.

An engine turns one image into ranked line observations. Supported:
- docTR with GPU acceleration (best quality)
- Tesseract CPU (widely available, word boxes)
- docTR CPU fallback (good quality, slower)

Engines are selected in that priority order when "auto" is requested.
Any object implementing RecognitionEngine can be injected instead, which
is how tests drive the pipeline with scripted observations.
"""

from __future__ import annotations

import io
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from inkread.exceptions import EngineError
from inkread.models import BoundingBox

if TYPE_CHECKING:
    from PIL import Image

    from inkread.config import RecognitionConfig

logger = logging.getLogger(__name__)


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class LineObservation:
    """
    One detected line of text as reported by an engine.

    Attributes:
        candidates: Readings of the whole line, best first.
        confidence: Engine confidence for the line.
        word_boxes: Optional boxes, one per whitespace token of the top candidate.
    """

    candidates: tuple[str, ...]
    confidence: float
    word_boxes: tuple[BoundingBox, ...] | None = None


class EngineKind(Enum):
    """Available recognition engines."""

    DOCTR_GPU = "doctr_gpu"
    DOCTR_CPU = "doctr_cpu"
    TESSERACT = "tesseract"
    NONE = "none"


class RecognitionEngine(ABC):
    """Abstract base for recognition engines."""

    name: str = "base"

    @abstractmethod
    def recognize_lines(
        self, image: Image.Image, config: RecognitionConfig
    ) -> list[LineObservation]:
        """Recognize text lines in image.

        Should return an empty list when nothing is found and raise
        EngineError when the input cannot be processed.
        """
        pass


# =============================================================================
# ENGINE DETECTION
# =============================================================================


def _cuda_available() -> bool:
    try:
        import torch
    except ImportError:
        return False

    if not torch.cuda.is_available():
        return False
    logger.debug("docTR can run on %s", torch.cuda.get_device_name(0))
    return True


def _doctr_installed() -> bool:
    try:
        from doctr.models import ocr_predictor  # noqa: F401
    except ImportError:
        return False
    return True


def _tesseract_installed() -> bool:
    """pytesseract importable and the tesseract binary on PATH."""
    try:
        import pytesseract
    except ImportError:
        return False

    try:
        pytesseract.get_tesseract_version()
    except pytesseract.TesseractNotFoundError:
        logger.debug("pytesseract is installed but the tesseract binary is missing")
        return False
    return True


def detect_available_engines() -> list[EngineKind]:
    """Installed engines, best first: docTR on GPU, Tesseract, docTR on CPU."""
    has_doctr = _doctr_installed()
    candidates = [
        (EngineKind.DOCTR_GPU, has_doctr and _cuda_available()),
        (EngineKind.TESSERACT, _tesseract_installed()),
        (EngineKind.DOCTR_CPU, has_doctr),
    ]

    available = [kind for kind, installed in candidates if installed]
    if not available:
        logger.warning("No recognition engine found; install pytesseract or python-doctr")
    return available


_PREFERENCE_MAP = {
    "doctr_gpu": EngineKind.DOCTR_GPU,
    "doctr": EngineKind.DOCTR_GPU,  # Default doctr to GPU if available
    "tesseract": EngineKind.TESSERACT,
    "doctr_cpu": EngineKind.DOCTR_CPU,
}


def select_engine_kind(preferred: str, available: list[EngineKind]) -> EngineKind:
    """Pick an engine kind honouring preference, else the first available."""
    if preferred.lower() != "auto":
        kind = _PREFERENCE_MAP.get(preferred.lower(), EngineKind.NONE)
        if kind in available:
            return kind
        if kind is EngineKind.DOCTR_GPU and EngineKind.DOCTR_CPU in available:
            return EngineKind.DOCTR_CPU
        logger.warning("Preferred engine '%s' not available; falling back to auto", preferred)

    return available[0] if available else EngineKind.NONE


def create_engine(preferred: str = "auto") -> RecognitionEngine:
    """
    Create the best available recognition engine.

    Args:
        preferred: "auto", "tesseract", "doctr", "doctr_gpu" or "doctr_cpu".

    Returns:
        A ready RecognitionEngine.

    Raises:
        EngineError: If no engine is installed.
    """
    kind = select_engine_kind(preferred, detect_available_engines())

    if kind is EngineKind.TESSERACT:
        return TesseractEngine()
    if kind is EngineKind.DOCTR_GPU:
        return DoctrEngine(use_gpu=True)
    if kind is EngineKind.DOCTR_CPU:
        return DoctrEngine(use_gpu=False)

    raise EngineError("No recognition engine available. Install pytesseract or python-doctr.")


# =============================================================================
# TESSERACT
# =============================================================================

# BCP-47 language prefix -> Tesseract traineddata name
TESSERACT_LANGUAGES = {
    "en": "eng",
    "de": "deu",
    "fr": "fra",
    "es": "spa",
    "it": "ita",
    "pt": "por",
    "nl": "nld",
}


def tesseract_languages(languages: list[str]) -> str:
    """Map language hints like "en-US" to a Tesseract language string."""
    codes = []
    for language in languages:
        code = TESSERACT_LANGUAGES.get(language.split("-")[0].lower())
        if code and code not in codes:
            codes.append(code)
    return "+".join(codes) or "eng"


class TesseractEngine(RecognitionEngine):
    """
    Tesseract via pytesseract.

    Tesseract has no ranked line alternatives, so every observation carries
    a single candidate. Word boxes come from image_to_data.
    """

    name = "tesseract"

    def _build_config(self, config: RecognitionConfig, user_words_path: str | None) -> str:
        options = ["--oem 1", "--psm 3"]
        if config.recognition_level == "fast":
            options.append("-c tessedit_do_invert=0")
        if not config.uses_language_correction:
            options.append("-c load_system_dawg=0 -c load_freq_dawg=0")
        if user_words_path:
            options.append(f"--user-words {user_words_path}")
        return " ".join(options)

    def recognize_lines(
        self, image: Image.Image, config: RecognitionConfig
    ) -> list[LineObservation]:
        import pytesseract

        user_words_path = None
        if config.custom_words:
            with tempfile.NamedTemporaryFile(
                "w", suffix=".user-words", delete=False, encoding="utf-8"
            ) as f:
                f.write("\n".join(config.custom_words))
                user_words_path = f.name

        try:
            data = pytesseract.image_to_data(
                image,
                lang=tesseract_languages(config.languages),
                config=self._build_config(config, user_words_path),
                output_type=pytesseract.Output.DICT,
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as e:
            raise EngineError(f"Tesseract recognition failed: {e}") from e
        finally:
            if user_words_path:
                os.unlink(user_words_path)

        return self._group_lines(data, image.height, config.minimum_text_height)

    def _group_lines(
        self, data: dict[str, list[Any]], image_height: int, minimum_text_height: float
    ) -> list[LineObservation]:
        """Group image_to_data word rows into line observations."""
        grouped: OrderedDict[tuple[int, int, int], list[int]] = OrderedDict()
        for i, text in enumerate(data["text"]):
            if not str(text).strip():
                continue
            key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
            grouped.setdefault(key, []).append(i)

        min_height_px = minimum_text_height * image_height
        observations = []
        for indices in grouped.values():
            line_height = max(int(data["height"][i]) for i in indices)
            if line_height < min_height_px:
                logger.debug("Skipping line of height %d px (< %.1f)", line_height, min_height_px)
                continue

            words = [str(data["text"][i]).strip() for i in indices]
            # -1 means no confidence
            confidences = [float(data["conf"][i]) for i in indices if float(data["conf"][i]) >= 0]
            boxes = tuple(
                BoundingBox(
                    x=float(data["left"][i]),
                    y=float(data["top"][i]),
                    width=float(data["width"][i]),
                    height=float(data["height"][i]),
                )
                for i in indices
            )

            observations.append(
                LineObservation(
                    candidates=(" ".join(words),),
                    confidence=sum(confidences) / len(confidences) / 100.0 if confidences else 0.0,
                    word_boxes=boxes,
                )
            )

        return observations


# =============================================================================
# DOCTR
# =============================================================================


class DoctrEngine(RecognitionEngine):
    """
    docTR end-to-end predictor.

    The predictor is loaded lazily on first use, once per engine even when
    several threads ask for it at the same time. Language hints and custom
    words are not supported by docTR and are ignored.
    """

    name = "doctr"

    def __init__(self, use_gpu: bool = True):
        self.use_gpu = use_gpu
        self._predictor: Any = None
        self._load_lock = threading.Lock()

    def _get_predictor(self) -> Any:
        if self._predictor is not None:
            return self._predictor

        with self._load_lock:
            # Another thread may have finished loading while we waited
            if self._predictor is not None:
                return self._predictor

            device = "cuda" if self.use_gpu else "cpu"
            logger.info("Loading docTR predictor on %s", device)
            try:
                from doctr.models import ocr_predictor

                self._predictor = ocr_predictor(pretrained=True).to(device)
            except Exception as e:
                raise EngineError(f"Failed to initialize docTR: {e}") from e

        return self._predictor

    def recognize_lines(
        self, image: Image.Image, config: RecognitionConfig
    ) -> list[LineObservation]:
        predictor = self._get_predictor()

        try:
            from doctr.io import DocumentFile

            buf = io.BytesIO()
            image.save(buf, format="PNG")
            result = predictor(DocumentFile.from_images([buf.getvalue()]))
        except Exception as e:
            raise EngineError(f"docTR recognition failed: {e}") from e

        width, height = image.size
        observations = []
        for page in result.pages:
            for block in page.blocks:
                for line in block.lines:
                    (_, y0), (_, y1) = line.geometry
                    if y1 - y0 < config.minimum_text_height:
                        continue
                    if not line.words:
                        continue

                    boxes = tuple(
                        BoundingBox(
                            x=word.geometry[0][0] * width,
                            y=word.geometry[0][1] * height,
                            width=(word.geometry[1][0] - word.geometry[0][0]) * width,
                            height=(word.geometry[1][1] - word.geometry[0][1]) * height,
                        )
                        for word in line.words
                    )
                    confidences = [word.confidence for word in line.words]
                    observations.append(
                        LineObservation(
                            candidates=(" ".join(word.value for word in line.words),),
                            confidence=sum(confidences) / len(confidences),
                            word_boxes=boxes,
                        )
                    )

        return observations

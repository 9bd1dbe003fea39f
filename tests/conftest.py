"""
Pytest configuration and fixtures for inkread tests.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest
from PIL import Image

from inkread.config import RecognitionConfig
from inkread.exceptions import EngineError
from inkread.imaging.preprocess import ImagePreprocessor
from inkread.ocr.engines import LineObservation, RecognitionEngine


class ScriptedEngine(RecognitionEngine):
    """Engine returning canned observations.

    ``script`` is either a list of observations returned for every image,
    or a callable mapping the image to observations (or raising).
    """

    name = "scripted"

    def __init__(
        self,
        script: list[LineObservation] | Callable[[Image.Image], list[LineObservation]],
    ):
        self.script = script
        self.calls: list[Image.Image] = []
        self.configs: list[RecognitionConfig] = []

    def recognize_lines(self, image, config):
        self.calls.append(image)
        self.configs.append(config)
        if callable(self.script):
            return self.script(image)
        return list(self.script)


def line(text: str, confidence: float = 0.9, *secondaries: str) -> LineObservation:
    """Shorthand for a line observation with optional secondary candidates."""
    return LineObservation(candidates=(text, *secondaries), confidence=confidence)


def by_variant(table: dict[str, list[LineObservation]]):
    """Script engine output by the ``variant`` tag in image.info; untagged images fail."""

    def script(image):
        label = image.info.get("variant")
        if label not in table:
            raise EngineError(f"no script for variant {label!r}")
        return table[label]

    return script


@pytest.fixture
def make_image() -> Callable[..., Image.Image]:
    """Factory for small in-memory images."""

    def factory(size=(200, 100), color="white", mode="RGB", tag=None):
        image = Image.new(mode, size, color)
        if tag is not None:
            image.info["variant"] = tag
        return image

    return factory


@pytest.fixture
def blank_image(make_image) -> Image.Image:
    return make_image()


@pytest.fixture
def text_image() -> Image.Image:
    """White page with dark horizontal stroke bands standing in for lines of text."""
    from PIL import ImageDraw

    image = Image.new("L", (400, 300), 255)
    draw = ImageDraw.Draw(image)
    for top in range(40, 260, 40):
        draw.rectangle((30, top, 370, top + 12), fill=20)
    return image


@pytest.fixture
def scripted_engine() -> type[ScriptedEngine]:
    """The ScriptedEngine class, for building engines inside tests."""
    return ScriptedEngine


@pytest.fixture
def obs() -> Callable[..., LineObservation]:
    """The line() observation shorthand."""
    return line


@pytest.fixture
def variant_script():
    """The by_variant() script builder."""
    return by_variant


class TaggingPreprocessor(ImagePreprocessor):
    """Returns tiny images tagged with their variant label, or None for ``failing`` labels."""

    def __init__(self, failing=()):
        super().__init__()
        self.failing = set(failing)

    def _tag(self, label):
        if label in self.failing:
            return None
        image = Image.new("L", (4, 4), 255)
        image.info["variant"] = label
        return image

    def standard_pipeline(self, image):
        return self._tag("standard")

    def scale_for_recognition(self, image):
        return self._tag("scaled")

    def binarize(self, image, threshold=0.5):
        return self._tag(f"binarize-{threshold:g}")

    def to_grayscale(self, image):
        return self._tag("grayscale")


@pytest.fixture
def tagging_preprocessor() -> type[TaggingPreprocessor]:
    """The TaggingPreprocessor class."""
    return TaggingPreprocessor

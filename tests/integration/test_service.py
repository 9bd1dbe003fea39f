"""
Integration tests for OCRService.

Most tests drive the full pipeline (real Pillow preprocessing, real variant
generation) with a scripted engine. The Tesseract test at the end runs only
where the tesseract binary is installed.
"""

import pytest
from PIL import Image, ImageDraw, ImageFont

from inkread import (
    NoTextDetectedError,
    OCRService,
    RecognitionResult,
    SearchConfig,
    ServiceConfig,
    create_service,
)
from inkread.exceptions import InvalidImageError, RecognitionError
from inkread.ocr.engines import _tesseract_installed


@pytest.fixture
def note_image() -> Image.Image:
    image = Image.new("RGB", (600, 200), "white")
    ImageDraw.Draw(image).text((40, 80), "Buy milk", fill="black")
    return image


class TestCreateService:
    def test_injected_engine_used(self, scripted_engine, obs):
        engine = scripted_engine([obs("hi")])
        service = create_service(engine=engine)

        assert isinstance(service, OCRService)
        assert service.engine is engine

    def test_config_reaches_components(self, scripted_engine, obs):
        config = ServiceConfig(search=SearchConfig(binarize_thresholds=(0.5,)))
        service = create_service(config, engine=scripted_engine([obs("hi")]))

        assert service.recognizer.config is config.recognition
        assert service.search.generator.binarize_thresholds == (0.5,)

    def test_services_are_independent(self, scripted_engine, obs):
        first = create_service(engine=scripted_engine([obs("one")]))
        second = create_service(engine=scripted_engine([obs("two")]))
        assert first is not second
        assert first.recognizer is not second.recognizer


class TestRecognize:
    """End-to-end single-pass recognition through the service."""

    def test_buy_milk(self, scripted_engine, obs, note_image):
        service = create_service(engine=scripted_engine([obs("Buy milk", 0.9)]))

        result = service.recognize(note_image)

        assert isinstance(result, RecognitionResult)
        assert len(result.lines) == 1
        assert [w.text for w in result.words] == ["Buy", "milk"]
        assert all(w.confidence == 0.9 for w in result.words)
        assert result.full_text == "Buy milk"
        assert result.average_confidence == pytest.approx(0.9)
        assert result.low_confidence_words == ()

    def test_engine_sees_preprocessed_image(self, scripted_engine, obs, note_image):
        engine = scripted_engine([obs("Buy milk")])

        create_service(engine=engine).recognize(note_image)

        assert max(engine.calls[0].size) >= 2000

    def test_no_observations(self, scripted_engine, note_image):
        service = create_service(engine=scripted_engine([]))

        with pytest.raises(NoTextDetectedError):
            service.recognize(note_image)

    def test_cat_car_alternative(self, scripted_engine, obs, note_image):
        service = create_service(engine=scripted_engine([obs("cat", 0.9, "car")]))

        word = service.recognize(note_image).words[0]

        assert word.alternatives == ("car",)
        assert word.confidence == pytest.approx(0.765)
        assert word.is_medium_confidence

    def test_invalid_input(self, scripted_engine, obs):
        engine = scripted_engine([obs("hi")])

        with pytest.raises(InvalidImageError):
            create_service(engine=engine).recognize(b"")

        assert engine.calls == []

    def test_recognize_text_raw_and_clean(self, scripted_engine, obs, note_image):
        engine = scripted_engine([obs("[ ] call   mom", 0.9), obs("- pay rent", 0.9)])
        service = create_service(engine=engine)

        assert service.recognize_text(note_image) == "[ ] call mom\n- pay rent"
        assert service.recognize_text(note_image, clean=True) == "☐ call mom\n• pay rent"

    def test_confidence_score(self, scripted_engine, obs, note_image):
        engine = scripted_engine([obs("Buy milk", 0.9), obs("x", 0.5)])
        score = create_service(engine=engine).confidence_score(note_image)
        assert score == pytest.approx((0.9 + 0.9 + 0.5 * 0.8) / 3)


class TestRecognizeBatch:
    def test_texts_in_input_order(self, scripted_engine, obs, make_image):
        def by_width(image):
            return [obs(f"page {image.width}")]

        service = create_service(engine=scripted_engine(by_width))
        images = [make_image((2100, 50)), make_image((2200, 50)), make_image((2300, 50))]

        assert service.recognize_batch(images) == ["page 2100", "page 2200", "page 2300"]

    def test_empty(self, scripted_engine):
        assert create_service(engine=scripted_engine([])).recognize_batch([]) == []

    def test_one_failure_fails_batch(self, scripted_engine, obs, make_image):
        def script(image):
            return [] if image.width == 2200 else [obs("text")]

        service = create_service(engine=scripted_engine(script))
        images = [make_image((2100, 50)), make_image((2200, 50))]

        with pytest.raises(NoTextDetectedError):
            service.recognize_batch(images)


class TestRecognizeBest:
    def test_best_variant_returned(self, scripted_engine, obs, note_image):
        def script(image):
            # Binarized variants are single-channel; they read more text
            if image.mode == "L":
                return [obs("Buy milk and eggs", 0.8)]
            return [obs("Buy", 0.95)]

        service = create_service(engine=scripted_engine(script))

        outcome = service.search_best(note_image)

        assert outcome.result.full_text == "Buy milk and eggs"
        assert outcome.variant_label == "binarize-0.35"
        assert outcome.variants_tried == 6
        assert service.recognize_best(note_image).full_text == "Buy milk and eggs"

    def test_all_variants_fail(self, scripted_engine, note_image):
        service = create_service(engine=scripted_engine([]))

        with pytest.raises(NoTextDetectedError, match="preprocessing variants"):
            service.recognize_best(note_image)

    def test_only_binarize_half_succeeds(
        self, scripted_engine, obs, variant_script, tagging_preprocessor, note_image
    ):
        text = "Meeting notes for the planning sessions!"
        engine = scripted_engine(variant_script({"binarize-0.5": [obs(text, 0.8)]}))
        service = OCRService(engine, preprocessor=tagging_preprocessor())

        outcome = service.search_best(note_image)

        assert outcome.variant_label == "binarize-0.5"
        assert outcome.score == pytest.approx(0.064)


# =============================================================================
# Real engine
# =============================================================================


@pytest.mark.skipif(not _tesseract_installed(), reason="Tesseract not installed")
class TestTesseractEndToEnd:
    def test_printed_note(self):
        image = Image.new("RGB", (900, 240), "white")
        font = ImageFont.load_default(size=64)
        ImageDraw.Draw(image).text((40, 80), "Buy milk", fill="black", font=font)

        service = create_service(ServiceConfig(engine="tesseract"))
        try:
            result = service.recognize(image)
        except RecognitionError as e:
            pytest.fail(f"Tesseract could not read a clean printed note: {e}")

        assert "milk" in result.full_text.lower()
        assert 0.0 <= result.average_confidence <= 1.0

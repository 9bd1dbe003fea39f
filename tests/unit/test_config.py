"""
Unit tests for configuration validation.
"""

import pytest

from inkread.config import (
    DEFAULT_BINARIZE_THRESHOLDS,
    DEFAULT_CUSTOM_WORDS,
    RecognitionConfig,
    SearchConfig,
    ServiceConfig,
)
from inkread.exceptions import ConfigurationError


class TestRecognitionConfig:
    def test_defaults(self):
        config = RecognitionConfig()

        assert config.max_candidates == 5
        assert config.recognition_level == "accurate"
        assert config.uses_language_correction is True
        assert config.languages == ["en-US", "en-GB"]
        assert config.custom_words == list(DEFAULT_CUSTOM_WORDS)
        assert config.minimum_text_height == 0.01
        assert config.clamp_line_confidence is True
        assert config.engine_timeout is None

    def test_defaults_not_shared(self):
        first = RecognitionConfig()
        first.custom_words.append("zzz")
        assert "zzz" not in RecognitionConfig().custom_words

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_candidates": 0},
            {"recognition_level": "turbo"},
            {"minimum_text_height": -0.1},
            {"minimum_text_height": 1.0},
            {"engine_timeout": 0},
        ],
    )
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ConfigurationError):
            RecognitionConfig(**kwargs)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError, match="max_candidates"):
            RecognitionConfig(max_candidates=-1)


class TestSearchConfig:
    def test_defaults(self):
        config = SearchConfig()
        assert config.binarize_thresholds == DEFAULT_BINARIZE_THRESHOLDS == (0.35, 0.5, 0.65)
        assert config.score_length_cap == 500
        assert config.parallel_variants is False

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"binarize_thresholds": (0.0,)},
            {"binarize_thresholds": (0.5, 1.2)},
            {"score_length_cap": 0},
            {"max_workers": 0},
        ],
    )
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ConfigurationError):
            SearchConfig(**kwargs)


class TestServiceConfig:
    def test_nested_defaults(self):
        config = ServiceConfig()
        assert config.engine == "auto"
        assert isinstance(config.recognition, RecognitionConfig)
        assert isinstance(config.search, SearchConfig)

    @pytest.mark.parametrize("engine", ["auto", "Tesseract", "doctr", "doctr_cpu"])
    def test_engine_names_accepted(self, engine):
        assert ServiceConfig(engine=engine).engine == engine

    def test_unknown_engine_rejected(self):
        with pytest.raises(ConfigurationError, match="engine must be one of"):
            ServiceConfig(engine="vision")

    def test_batch_workers_validated(self):
        with pytest.raises(ConfigurationError):
            ServiceConfig(batch_max_workers=0)

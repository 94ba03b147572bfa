"""Tests for AnalysisConfig validation."""

import pytest

from delivery_coach.config import AnalysisConfig, DEFAULT_MINIMUM_PAUSE, DEFAULT_SILENCE_THRESHOLD
from delivery_coach.lexicon import FILLER_WORDS


class TestAnalysisConfig:
    """Tests for AnalysisConfig dataclass."""

    def test_defaults(self):
        config = AnalysisConfig()
        assert config.silence_threshold == DEFAULT_SILENCE_THRESHOLD
        assert config.minimum_pause_duration == DEFAULT_MINIMUM_PAUSE
        assert config.filler_words == FILLER_WORDS

    def test_custom_fillers_normalised(self):
        config = AnalysisConfig(filler_words=frozenset({"Er", "I MEAN"}))
        assert config.filler_words == frozenset({"er", "i mean"})

    @pytest.mark.parametrize("threshold", [0.0, -0.1, 1.5])
    def test_invalid_threshold(self, threshold):
        with pytest.raises(ValueError, match="silence_threshold"):
            AnalysisConfig(silence_threshold=threshold)

    def test_negative_minimum_pause(self):
        with pytest.raises(ValueError, match="minimum_pause_duration"):
            AnalysisConfig(minimum_pause_duration=-1.0)

    def test_invalid_workers(self):
        with pytest.raises(ValueError, match="max_workers"):
            AnalysisConfig(max_workers=0)

    def test_frozen(self):
        config = AnalysisConfig()
        with pytest.raises(AttributeError):
            config.silence_threshold = 0.5

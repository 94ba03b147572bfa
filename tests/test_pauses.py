"""Tests for pause detection."""

import numpy as np
import pytest

from delivery_coach.errors import InvalidAudioInput
from delivery_coach.pauses import detect_pauses, pauses_from_word_gaps, window_rms
from delivery_coach.types import PauseInterval, WordTiming

SR = 1000  # 100-frame windows


def tone(seconds: float, amplitude: float = 0.5) -> np.ndarray:
    return np.full(int(seconds * SR), amplitude, dtype=np.float32)


def silence(seconds: float) -> np.ndarray:
    return np.zeros(int(seconds * SR), dtype=np.float32)


class TestWindowRms:
    """Tests for window_rms function."""

    def test_full_windows(self):
        samples = np.array([1.0, 1.0, 0.0, 0.0])
        assert window_rms(samples, 2).tolist() == [1.0, 0.0]

    def test_partial_tail_window(self):
        samples = np.array([0.0, 0.0, 0.5])
        rms = window_rms(samples, 2)
        assert len(rms) == 2
        assert rms[1] == pytest.approx(0.5)


class TestDetectPauses:
    """Tests for detect_pauses function."""

    def test_all_silent_buffer_is_one_pause(self):
        pauses = detect_pauses(silence(3.0), SR)
        assert pauses == [PauseInterval(start_time=0.0, duration=3.0)]

    def test_loud_buffer_has_no_pauses(self):
        assert detect_pauses(tone(5.0), SR) == []

    def test_empty_buffer(self):
        assert detect_pauses([], SR) == []

    def test_pause_between_speech(self):
        samples = np.concatenate([tone(1.0), silence(2.5), tone(1.0)])
        pauses = detect_pauses(samples, SR)
        assert len(pauses) == 1
        assert pauses[0].start_time == pytest.approx(1.0)
        assert pauses[0].duration == pytest.approx(2.5)

    def test_short_silence_ignored(self):
        samples = np.concatenate([tone(1.0), silence(1.5), tone(1.0)])
        assert detect_pauses(samples, SR) == []

    def test_trailing_silence_reported(self):
        samples = np.concatenate([tone(1.0), silence(2.0)])
        pauses = detect_pauses(samples, SR)
        assert len(pauses) == 1
        assert pauses[0].start_time == pytest.approx(1.0)
        assert pauses[0].end_time == pytest.approx(3.0)

    def test_pauses_ordered_and_disjoint(self):
        samples = np.concatenate([
            tone(1.0), silence(2.0), tone(1.0), silence(3.0), tone(0.5),
        ])
        pauses = detect_pauses(samples, SR)
        assert [round(p.start_time, 3) for p in pauses] == [1.0, 4.0]
        assert pauses[0].end_time <= pauses[1].start_time

    def test_custom_thresholds(self):
        samples = np.concatenate([tone(1.0), tone(1.0, amplitude=0.05), tone(1.0)])
        assert detect_pauses(samples, SR) == []
        pauses = detect_pauses(samples, SR, minimum_duration=0.5, silence_threshold=0.1)
        assert len(pauses) == 1
        assert pauses[0].duration == pytest.approx(1.0)

    def test_zero_sample_rate_raises(self):
        with pytest.raises(InvalidAudioInput, match="sample_rate"):
            detect_pauses(silence(1.0), 0)

    def test_negative_sample_rate_raises(self):
        with pytest.raises(InvalidAudioInput):
            detect_pauses(silence(1.0), -44100)

    def test_negative_threshold_raises(self):
        with pytest.raises(InvalidAudioInput, match="silence_threshold"):
            detect_pauses(silence(1.0), SR, silence_threshold=-0.1)

    def test_two_dimensional_buffer_raises(self):
        with pytest.raises(InvalidAudioInput, match="one-dimensional"):
            detect_pauses(np.zeros((10, 2)), SR)

    def test_nan_samples_raise(self):
        with pytest.raises(InvalidAudioInput, match="NaN"):
            detect_pauses([0.0, float("nan")], SR)

    def test_unnormalised_samples_warn(self):
        with pytest.warns(UserWarning, match="exceed"):
            detect_pauses(np.full(SR, 2000.0), SR)

    def test_invalid_audio_is_value_error(self):
        with pytest.raises(ValueError):
            detect_pauses(silence(1.0), 0)


class TestPausesFromWordGaps:
    """Tests for pauses_from_word_gaps function."""

    def test_long_gap_becomes_pause(self):
        words = [
            WordTiming("hello", 0.0, 0.5),
            WordTiming("world", 3.0, 3.5),
        ]
        assert pauses_from_word_gaps(words) == [PauseInterval(start_time=0.5, duration=2.5)]

    def test_short_gap_ignored(self):
        words = [WordTiming("a", 0.0, 0.5), WordTiming("b", 1.0, 1.5)]
        assert pauses_from_word_gaps(words) == []

    def test_untimed_words_warn(self):
        words = [WordTiming("a", 0.0, 0.5), WordTiming("b")]
        with pytest.warns(UserWarning, match="no timestamps"):
            assert pauses_from_word_gaps(words) == []

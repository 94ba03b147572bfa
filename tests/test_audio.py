"""Tests for audio discovery and loading."""

import numpy as np
import pytest
import soundfile as sf

from delivery_coach.audio import (
    discover_audio_files,
    get_audio_duration,
    is_supported_audio,
    load_samples,
    to_mono,
)


class TestIsSupportedAudio:
    """Tests for is_supported_audio function."""

    def test_supported(self, tmp_path):
        assert is_supported_audio(tmp_path / "a.wav")
        assert is_supported_audio(tmp_path / "a.FLAC")

    def test_unsupported(self, tmp_path):
        assert not is_supported_audio(tmp_path / "a.txt")


class TestDiscoverAudioFiles:
    """Tests for discover_audio_files function."""

    def test_directory(self, tmp_path):
        (tmp_path / "b.wav").touch()
        (tmp_path / "a.flac").touch()
        (tmp_path / "notes.txt").touch()
        assert discover_audio_files([tmp_path]) == [tmp_path / "a.flac", tmp_path / "b.wav"]

    def test_recursive(self, tmp_path):
        nested = tmp_path / "nested"
        nested.mkdir()
        (nested / "c.wav").touch()
        assert discover_audio_files([tmp_path]) == []
        assert discover_audio_files([tmp_path], recursive=True) == [nested / "c.wav"]

    def test_deduplicates(self, tmp_path):
        path = tmp_path / "a.wav"
        path.touch()
        assert discover_audio_files([path, tmp_path]) == [path]


class TestLoadSamples:
    """Tests for load_samples and to_mono functions."""

    def test_to_mono(self):
        frames = np.array([[1.0, 0.0], [0.5, 0.5]])
        assert to_mono(frames).tolist() == [0.5, 0.5]

    def test_stereo_file_is_mixed_down(self, tmp_path):
        path = tmp_path / "stereo.wav"
        frames = np.zeros((800, 2), dtype=np.float32)
        frames[:, 0] = 0.5
        sf.write(str(path), frames, 8000)

        samples, sample_rate = load_samples(path)
        assert sample_rate == 8000
        assert samples.shape == (800,)
        assert samples.dtype == np.float32
        assert samples[0] == pytest.approx(0.25, abs=1e-3)

    def test_duration(self, tmp_path):
        path = tmp_path / "short.wav"
        sf.write(str(path), np.zeros(4000, dtype=np.float32), 8000)
        assert get_audio_duration(path) == pytest.approx(0.5)

    def test_duration_of_unreadable_file(self, tmp_path):
        path = tmp_path / "broken.wav"
        path.write_bytes(b"not audio")
        assert get_audio_duration(path) is None

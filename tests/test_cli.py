"""Tests for the coach command line."""

import numpy as np
import pytest
import soundfile as sf
from typer.testing import CliRunner

from delivery_coach import __version__
from delivery_coach.cli import app, parse_formats
from delivery_coach.formatters import parse_json

runner = CliRunner()

SR = 8000


@pytest.fixture
def speech(tmp_path):
    """Five-second recording with a three-second pause and a sidecar transcript."""
    samples = np.concatenate([
        np.full(SR, 0.5), np.zeros(3 * SR), np.full(SR, 0.5),
    ]).astype(np.float32)
    path = tmp_path / "speech.wav"
    sf.write(str(path), samples, SR)
    (tmp_path / "speech.txt").write_text(
        " ".join(["word"] * 11) + " um", encoding="utf-8"
    )
    return path


class TestParseFormats:
    """Tests for parse_formats function."""

    def test_single(self):
        assert parse_formats("json") == ["json"]

    def test_all(self):
        assert parse_formats("all") == ["txt", "json"]

    def test_unknown_falls_back_to_txt(self):
        assert parse_formats("srt") == ["txt"]


class TestEagerOptions:
    """Tests for --version and --list-fillers."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_list_fillers(self):
        result = runner.invoke(app, ["--list-fillers"])
        assert result.exit_code == 0
        assert "you know" in result.output


class TestAnalyzeCommand:
    """Tests for analyzing files from the command line."""

    def test_writes_reports(self, speech):
        result = runner.invoke(app, [str(speech), "--format", "all"])
        assert result.exit_code == 0, result.output
        assert "Overall score:" in result.output

        txt = speech.with_name("speech.coach.txt")
        assert txt.read_text(encoding="utf-8").startswith("Overall score: ")

        report = parse_json(speech.with_name("speech.coach.json").read_text(encoding="utf-8"))
        assert report.metrics.word_count == 12
        assert report.metrics.filler_word_count == 1
        assert len(report.metrics.pauses) == 1

    def test_output_directory(self, speech, tmp_path):
        out = tmp_path / "reports"
        result = runner.invoke(app, [str(speech), "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert (out / "speech.coach.txt").exists()

    def test_voice_options(self, speech):
        result = runner.invoke(app, [
            str(speech), "-f", "json",
            "--pitch", "120",
            "--pitch-variability", "3",
            "--jitter", "0.025",
            "--shimmer", "0.15",
        ])
        assert result.exit_code == 0, result.output
        report = parse_json(speech.with_name("speech.coach.json").read_text(encoding="utf-8"))
        assert report.voice_quality.label == "Monotone"
        assert report.voice_quality.score == 50

    def test_speaking_rate(self, speech):
        result = runner.invoke(app, [str(speech), "-f", "json", "--speaking-rate", "90"])
        assert result.exit_code == 0, result.output
        report = parse_json(speech.with_name("speech.coach.json").read_text(encoding="utf-8"))
        assert report.pace.label == "Too slow"

    def test_explicit_transcript(self, speech, tmp_path):
        other = tmp_path / "notes.txt"
        other.write_text("um uh like so", encoding="utf-8")
        result = runner.invoke(app, [str(speech), "-f", "json", "-T", str(other)])
        assert result.exit_code == 0, result.output
        report = parse_json(speech.with_name("speech.coach.json").read_text(encoding="utf-8"))
        assert report.metrics.filler_word_count == 4

    def test_script(self, speech):
        result = runner.invoke(app, [str(speech), "--script"])
        assert result.exit_code == 0, result.output
        assert "practicing" in result.output

    def test_missing_transcript_fails(self, speech):
        speech.with_name("speech.txt").unlink()
        result = runner.invoke(app, [str(speech)])
        assert result.exit_code == 1
        assert not speech.with_name("speech.coach.txt").exists()

    def test_dry_run_writes_nothing(self, speech):
        result = runner.invoke(app, [str(speech), "--dry-run"])
        assert result.exit_code == 0
        assert "Would analyze 1 file(s)" in result.output
        assert not speech.with_name("speech.coach.txt").exists()

    def test_no_audio_files(self, tmp_path):
        result = runner.invoke(app, [str(tmp_path)])
        assert result.exit_code == 1
        assert "No audio files found" in result.output


class TestBadParameters:
    """Tests for rejected option values."""

    def test_transcript_with_many_inputs(self, speech, tmp_path):
        second = tmp_path / "second.wav"
        sf.write(str(second), np.zeros(SR, dtype=np.float32), SR)
        result = runner.invoke(app, [
            str(speech), str(second), "-T", str(speech.with_name("speech.txt")),
        ])
        assert result.exit_code == 2

    def test_invalid_silence_threshold(self, speech):
        result = runner.invoke(app, [str(speech), "--silence-threshold", "2"])
        assert result.exit_code == 2

    def test_negative_top(self, speech):
        result = runner.invoke(app, [str(speech), "--top", "-1"])
        assert result.exit_code == 2

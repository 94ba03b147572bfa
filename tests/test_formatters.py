"""Tests for output formatters."""

import json

import pytest

from delivery_coach.analyzer import SpeechAnalyzer
from delivery_coach.formatters import (
    EXTENSIONS,
    FORMATTERS,
    JSON_SCHEMA_VERSION,
    _format_timestamp_simple,
    format_json,
    format_txt,
    parse_json,
)
from delivery_coach.transcript import transcript_from_text
from delivery_coach.types import Transcript, VoiceMetrics, WordTiming


def make_result():
    transcript = Transcript(
        text="So um hello everyone like welcome",
        words=[
            WordTiming("So", 0.0, 0.3),
            WordTiming("um", 0.4, 0.6),
            WordTiming("hello", 3.0, 3.4),
            WordTiming("everyone", 3.5, 4.0),
            WordTiming("like", 4.1, 4.3),
            WordTiming("welcome", 70.0, 70.5),
        ],
    )
    voice = VoiceMetrics(pitch_hz=190.0, pitch_variability=8.0, jitter=0.01, shimmer=0.05)
    return SpeechAnalyzer().analyze(transcript, 75.0, voice=voice)


class TestFormatTimestamp:
    """Tests for _format_timestamp_simple function."""

    def test_minutes(self):
        assert _format_timestamp_simple(65.4) == "01:05"

    def test_hours(self):
        assert _format_timestamp_simple(3665.0) == "01:01:05"


class TestFormatTxt:
    """Tests for format_txt function."""

    def test_header_and_ratings(self):
        output = format_txt(make_result())
        lines = output.splitlines()
        assert lines[0].startswith("Overall score: ")
        assert lines[0].endswith("/100")
        assert "Pace:" in output
        assert "Filler Words:" in output
        assert "Voice Quality:" in output
        assert output.endswith("\n")

    def test_lists_pauses(self):
        output = format_txt(make_result())
        assert "Pauses:\n  At 00:00  2.4s\n  At 00:04  65.7s" in output

    def test_top_limits_feedback(self):
        result = make_result()
        output = format_txt(result, top=1)
        feedback = output.split("Feedback:\n")[1].split("\n\n")[0]
        assert len(feedback.splitlines()) == 1

    def test_empty_recording(self):
        output = format_txt(SpeechAnalyzer().analyze(transcript_from_text(""), 0.0))
        assert "Overall score: 77/100" in output
        assert "Pauses:\n" not in output


class TestJson:
    """Tests for format_json and parse_json functions."""

    def test_schema_fields(self):
        data = json.loads(format_json(make_result()))
        assert data["schema_version"] == JSON_SCHEMA_VERSION
        assert data["generated_at"].endswith("Z")
        assert set(data["ratings"]) == {"pace", "filler_words", "voice_quality", "pauses"}
        assert data["ratings"]["pace"]["tone"] in {"positive", "neutral", "caution", "negative"}

    def test_histogram_order_preserved(self):
        data = json.loads(format_json(make_result()))
        assert [e["word"] for e in data["metrics"]["filler_histogram"]] == ["so", "um", "like"]

    def test_parse_restores_result(self):
        result = make_result()
        assert parse_json(format_json(result)) == result

    def test_unknown_schema_version_raises(self):
        data = json.loads(format_json(make_result()))
        data["schema_version"] = "0.1"
        with pytest.raises(ValueError, match="Unsupported schema version"):
            parse_json(json.dumps(data))


class TestRegistry:
    """Tests for FORMATTERS and EXTENSIONS."""

    def test_every_format_has_extension(self):
        assert set(FORMATTERS) == set(EXTENSIONS)

"""Tests for transcript loading."""

import json

import pytest

from delivery_coach.transcript import (
    SidecarTranscripts,
    find_sidecar,
    load_transcript,
    parse_transcript_json,
    transcript_from_text,
)


class TestTranscriptFromText:
    """Tests for transcript_from_text function."""

    def test_untimed_words(self):
        transcript = transcript_from_text("Hello, world.")
        assert [w.text for w in transcript.words] == ["hello", "world"]
        assert not transcript.has_timestamps


class TestParseTranscriptJson:
    """Tests for parse_transcript_json function."""

    def test_words_layout(self):
        content = json.dumps({
            "text": "Hello world",
            "words": [
                {"word": "Hello", "start": 0.0, "end": 0.4},
                {"word": "world", "start": 0.5, "end": 0.9},
            ],
        })
        transcript = parse_transcript_json(content)
        assert transcript.text == "Hello world"
        assert transcript.has_timestamps
        assert transcript.words[1].start == 0.5

    def test_segments_layout(self):
        content = json.dumps({
            "segments": [
                {"tokens": [{"text": " Hello", "start": 0.0, "end": 0.4}]},
                {"tokens": [{"text": " again", "start": 2.0, "end": 2.4}]},
            ],
        })
        transcript = parse_transcript_json(content)
        assert transcript.text == "Hello again"
        assert [w.text for w in transcript.words] == ["Hello", "again"]

    def test_text_only(self):
        transcript = parse_transcript_json('{"text": "just text"}')
        assert transcript.text == "just text"
        assert not transcript.has_timestamps

    def test_missing_fields_raise(self):
        with pytest.raises(ValueError, match="'words', 'segments' or 'text'"):
            parse_transcript_json('{"language": "en"}')

    def test_non_object_raises(self):
        with pytest.raises(ValueError, match="object"):
            parse_transcript_json("[]")


class TestSidecars:
    """Tests for sidecar lookup and SidecarTranscripts."""

    def test_load_txt(self, tmp_path):
        path = tmp_path / "talk.txt"
        path.write_text("So, um, welcome\n", encoding="utf-8")
        assert load_transcript(path).text == "So, um, welcome"

    def test_json_preferred_over_txt(self, tmp_path):
        audio = tmp_path / "talk.wav"
        (tmp_path / "talk.txt").write_text("plain", encoding="utf-8")
        (tmp_path / "talk.json").write_text('{"text": "structured"}', encoding="utf-8")
        assert find_sidecar(audio) == tmp_path / "talk.json"

    def test_no_sidecar(self, tmp_path):
        assert find_sidecar(tmp_path / "talk.wav") is None

    def test_transcribe_reads_sidecar(self, tmp_path):
        (tmp_path / "talk.txt").write_text("hello there", encoding="utf-8")
        transcript = SidecarTranscripts().transcribe(tmp_path / "talk.wav")
        assert transcript.text == "hello there"

    def test_explicit_path_wins(self, tmp_path):
        (tmp_path / "talk.txt").write_text("sidecar", encoding="utf-8")
        explicit = tmp_path / "other.txt"
        explicit.write_text("explicit", encoding="utf-8")
        transcript = SidecarTranscripts(explicit).transcribe(tmp_path / "talk.wav")
        assert transcript.text == "explicit"

    def test_missing_transcript_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="No transcript found"):
            SidecarTranscripts().transcribe(tmp_path / "talk.wav")

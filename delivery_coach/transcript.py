"""Transcript construction and sidecar loading."""

import json
from pathlib import Path

from .lexicon import tokenize
from .types import Transcript, WordTiming

# Sidecar files looked up next to an audio file, in order
SIDECAR_SUFFIXES = (".json", ".txt")


def transcript_from_text(text: str) -> Transcript:
    """Build an untimed transcript from plain text."""
    return Transcript(text=text, words=[WordTiming(text=w) for w in tokenize(text)])


def _word_from_dict(data: dict) -> WordTiming:
    text = data.get("word", data.get("text"))
    if text is None:
        raise ValueError(f"Word entry has no 'word' or 'text' field: {data}")
    start = data.get("start")
    end = data.get("end")
    return WordTiming(
        text=str(text).strip(),
        start=float(start) if start is not None else None,
        end=float(end) if end is not None else None,
    )


def parse_transcript_json(content: str) -> Transcript:
    """
    Parse a JSON transcript.

    Accepted layouts:
        {"text": ..., "words": [{"word"|"text", "start", "end"}, ...]}
        {"text": ..., "segments": [{"tokens": [{"text", "start", "end"}]}]}

    Raises:
        ValueError: If the document has neither words nor segments nor text
    """
    data = json.loads(content)
    if not isinstance(data, dict):
        raise ValueError("Transcript JSON must be an object")

    if "words" in data:
        words = [_word_from_dict(w) for w in data["words"]]
    elif "segments" in data:
        words = [
            _word_from_dict(tok)
            for seg in data["segments"]
            for tok in seg.get("tokens", [])
        ]
    elif "text" in data:
        return transcript_from_text(data["text"])
    else:
        raise ValueError("Transcript JSON needs a 'words', 'segments' or 'text' field")

    words = [w for w in words if w.text]
    text = data.get("text") or " ".join(w.text for w in words)
    return Transcript(text=text.strip(), words=words)


def load_transcript(path: Path) -> Transcript:
    """Load a transcript from a .txt or .json file."""
    content = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return parse_transcript_json(content)
    return transcript_from_text(content.strip())


def find_sidecar(audio_path: Path) -> Path | None:
    """Find a transcript file sharing the audio file's stem."""
    for suffix in SIDECAR_SUFFIXES:
        candidate = audio_path.with_suffix(suffix)
        if candidate.is_file():
            return candidate
    return None


class SidecarTranscripts:
    """Transcript source that reads files stored next to the audio.

    An explicit path overrides the sidecar lookup.
    """

    def __init__(self, transcript_path: Path | None = None):
        self.transcript_path = transcript_path

    def transcribe(self, audio_path: "Path | str") -> Transcript:
        audio_path = Path(audio_path)
        path = self.transcript_path or find_sidecar(audio_path)
        if path is None:
            raise FileNotFoundError(
                f"No transcript found for {audio_path} "
                f"(looked for {', '.join(audio_path.stem + s for s in SIDECAR_SUFFIXES)})"
            )
        return load_transcript(path)

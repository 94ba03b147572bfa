"""Analysis configuration."""

from dataclasses import dataclass, field

from .lexicon import FILLER_WORDS, validate_lexicon

# RMS below this is treated as silence for normalised [-1, 1] PCM
DEFAULT_SILENCE_THRESHOLD = 0.02

# Silences shorter than this are not reported as pauses (seconds)
DEFAULT_MINIMUM_PAUSE = 2.0


@dataclass(frozen=True)
class AnalysisConfig:
    """Tunable parameters for an analysis run.

    Rating bands and score weights are fixed and live in ratings/scoring.
    """

    silence_threshold: float = DEFAULT_SILENCE_THRESHOLD
    """RMS level under which a 100 ms window counts as silent."""

    minimum_pause_duration: float = DEFAULT_MINIMUM_PAUSE
    """Shortest silence, in seconds, reported as a pause."""

    filler_words: frozenset[str] = field(default=FILLER_WORDS)
    """Filler words and phrases counted in the transcript."""

    max_workers: int = 3
    """Threads used to run transcription, voice analytics and pause detection."""

    def __post_init__(self):
        if not 0.0 < self.silence_threshold <= 1.0:
            raise ValueError(
                f"silence_threshold must be in (0, 1], got {self.silence_threshold}"
            )
        if self.minimum_pause_duration < 0:
            raise ValueError(
                f"minimum_pause_duration must be >= 0, got {self.minimum_pause_duration}"
            )
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        object.__setattr__(self, "filler_words", validate_lexicon(self.filler_words))

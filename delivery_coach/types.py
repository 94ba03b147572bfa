"""Analysis result types.

Contains dataclasses shared between the analyzer facade, the evaluators,
the feedback generator and the playback session.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


@dataclass
class WordTiming:
    """A transcribed word with optional timing information."""

    text: str
    start: float | None = None  # seconds
    end: float | None = None  # seconds

    @property
    def is_timed(self) -> bool:
        return self.start is not None and self.end is not None


@dataclass
class Transcript:
    """Transcript text plus its ordered words."""

    text: str
    words: list[WordTiming] = field(default_factory=list)

    @property
    def has_timestamps(self) -> bool:
        """True only when every word carries both timestamps."""
        return bool(self.words) and all(w.is_timed for w in self.words)


@dataclass(frozen=True)
class PauseInterval:
    """A stretch of silence detected in the recording."""

    start_time: float  # seconds
    duration: float  # seconds

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration


@dataclass(frozen=True)
class VoiceMetrics:
    """Acoustic measurements supplied by a voice-analysis collaborator.

    Any value may be missing; evaluators fall back to a neutral rating.
    """

    pitch_hz: float | None = None
    """Average fundamental frequency."""

    pitch_variability: float | None = None
    """Spread of the pitch contour (Hz)."""

    jitter: float | None = None
    """Cycle-to-cycle frequency instability as a fraction."""

    shimmer: float | None = None
    """Cycle-to-cycle amplitude instability in dB."""

    @property
    def is_complete(self) -> bool:
        return (
            self.pitch_variability is not None
            and self.jitter is not None
            and self.shimmer is not None
        )


@dataclass(frozen=True)
class SpeechMetrics:
    """Delivery metrics consumed by the evaluators.

    Read-only; the histogram is stored as a mapping proxy.
    """

    words_per_minute: float = 0.0
    word_count: int = 0
    filler_word_count: int = 0
    filler_histogram: Mapping[str, int] = field(default_factory=dict)
    duration_seconds: float = 0.0
    pauses: tuple[PauseInterval, ...] = ()
    pitch_hz: float | None = None
    pitch_variability: float | None = None
    jitter: float | None = None
    shimmer: float | None = None

    def __post_init__(self):
        object.__setattr__(self, "filler_histogram", MappingProxyType(dict(self.filler_histogram)))
        object.__setattr__(self, "pauses", tuple(self.pauses))

    @property
    def voice(self) -> VoiceMetrics:
        return VoiceMetrics(
            pitch_hz=self.pitch_hz,
            pitch_variability=self.pitch_variability,
            jitter=self.jitter,
            shimmer=self.shimmer,
        )

    @property
    def total_pause_time(self) -> float:
        return sum(p.duration for p in self.pauses)


@dataclass(frozen=True)
class RatingResult:
    """A rating label and its 0-100 score."""

    label: str
    score: int


class FeedbackCategory(str, Enum):
    """Feedback categories, in presentation order."""

    PACE = "pace"
    FILLER_WORDS = "filler_words"
    VOICE_QUALITY = "voice_quality"
    PAUSES = "pauses"

    def __str__(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def order(self) -> int:
        return list(FeedbackCategory).index(self)


_DISPLAY_NAMES = {
    FeedbackCategory.PACE: "Pace",
    FeedbackCategory.FILLER_WORDS: "Filler Words",
    FeedbackCategory.VOICE_QUALITY: "Voice Quality",
    FeedbackCategory.PAUSES: "Pauses",
}


@dataclass(frozen=True)
class FeedbackPoint:
    """A single feedback statement or suggestion."""

    category: FeedbackCategory
    text: str
    priority: int = 3  # 1-5, with 5 being most urgent
    is_suggestion: bool = False


@dataclass(frozen=True)
class AnalysisResult:
    """Immutable snapshot of one analysis run."""

    overall_score: int
    pace: RatingResult
    filler: RatingResult
    voice_quality: RatingResult
    pause: RatingResult
    feedback_points: tuple[FeedbackPoint, ...]
    suggestions: tuple[FeedbackPoint, ...]
    metrics: SpeechMetrics

    def rating_for(self, category: FeedbackCategory) -> RatingResult:
        """Return the rating for a feedback category."""
        return {
            FeedbackCategory.PACE: self.pace,
            FeedbackCategory.FILLER_WORDS: self.filler,
            FeedbackCategory.VOICE_QUALITY: self.voice_quality,
            FeedbackCategory.PAUSES: self.pause,
        }[category]

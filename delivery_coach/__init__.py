"""Speech delivery coaching: pause detection, ratings, scoring and feedback."""

__version__ = "0.1.0"

from .analyzer import SpeechAnalyzer, build_metrics, build_result
from .config import AnalysisConfig
from .errors import AnalysisError, InvalidAudioInput, InvalidMetric
from .pauses import detect_pauses
from .session import FeedbackSession, PlaybackState
from .types import (
    AnalysisResult,
    FeedbackCategory,
    FeedbackPoint,
    PauseInterval,
    RatingResult,
    SpeechMetrics,
    Transcript,
    VoiceMetrics,
    WordTiming,
)

__all__ = [
    "AnalysisConfig",
    "AnalysisError",
    "AnalysisResult",
    "FeedbackCategory",
    "FeedbackPoint",
    "FeedbackSession",
    "InvalidAudioInput",
    "InvalidMetric",
    "PauseInterval",
    "PlaybackState",
    "RatingResult",
    "SpeechAnalyzer",
    "SpeechMetrics",
    "Transcript",
    "VoiceMetrics",
    "WordTiming",
    "build_metrics",
    "build_result",
    "detect_pauses",
]

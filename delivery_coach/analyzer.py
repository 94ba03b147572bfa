"""Speech analysis engine facade.

Builds SpeechMetrics from collaborator inputs, rates them, aggregates the
overall score and generates feedback.
"""

import math
import warnings
from concurrent.futures import ThreadPoolExecutor, wait
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .audio import load_samples
from .config import AnalysisConfig
from .errors import InvalidMetric
from .feedback import generate_feedback
from .lexicon import FILLER_WORDS, count_fillers, tokenize
from .pauses import detect_pauses, pauses_from_word_gaps
from .ratings import (
    evaluate_fillers,
    evaluate_pace,
    evaluate_pauses,
    evaluate_voice_quality,
)
from .scoring import score_ratings
from .types import (
    AnalysisResult,
    FeedbackCategory,
    PauseInterval,
    RatingResult,
    SpeechMetrics,
    Transcript,
    VoiceMetrics,
)

if TYPE_CHECKING:
    import numpy as np


@runtime_checkable
class TranscriptSource(Protocol):
    """Speech-to-text collaborator."""

    def transcribe(self, audio_path: "Path | str") -> Transcript:
        """Return the transcript of an audio file."""
        ...


@runtime_checkable
class VoiceAnalyzer(Protocol):
    """Acoustic-analysis collaborator producing pitch, jitter and shimmer."""

    def analyze_voice(self, samples: "np.ndarray", sample_rate: int) -> VoiceMetrics:
        """Measure voice characteristics of a mono recording."""
        ...


class FixedVoiceMetrics:
    """Voice analyzer that reports values measured elsewhere."""

    def __init__(self, metrics: VoiceMetrics):
        self.metrics = metrics

    def analyze_voice(self, samples: "np.ndarray", sample_rate: int) -> VoiceMetrics:
        return self.metrics


def build_metrics(
    transcript: Transcript,
    duration_seconds: float,
    pauses: "list[PauseInterval] | tuple[PauseInterval, ...]" = (),
    voice: VoiceMetrics | None = None,
    speaking_rate: float | None = None,
    filler_words: frozenset[str] = FILLER_WORDS,
) -> SpeechMetrics:
    """
    Derive delivery metrics from a transcript and recording facts.

    Args:
        transcript: Transcribed speech
        duration_seconds: Recording length
        pauses: Detected pauses
        voice: Optional acoustic measurements
        speaking_rate: Words per minute reported by the transcription
            service; replaces the word-count estimate when given
        filler_words: Filler lexicon

    Raises:
        InvalidMetric: If duration or speaking rate is negative
    """
    if duration_seconds is None or math.isnan(duration_seconds) or duration_seconds < 0:
        raise InvalidMetric(f"duration_seconds must be >= 0, got {duration_seconds}")

    words = tokenize(transcript.text)
    filler_count, histogram = count_fillers(words, filler_words)

    if speaking_rate is not None:
        if math.isnan(speaking_rate) or speaking_rate < 0:
            raise InvalidMetric(f"speaking_rate must be >= 0, got {speaking_rate}")
        wpm = float(speaking_rate)
    elif duration_seconds > 0:
        wpm = len(words) / (duration_seconds / 60.0)
    else:
        wpm = 0.0

    voice = voice or VoiceMetrics()
    return SpeechMetrics(
        words_per_minute=wpm,
        word_count=len(words),
        filler_word_count=filler_count,
        filler_histogram=histogram,
        duration_seconds=float(duration_seconds),
        pauses=tuple(sorted(pauses, key=lambda p: p.start_time)),
        pitch_hz=voice.pitch_hz,
        pitch_variability=voice.pitch_variability,
        jitter=voice.jitter,
        shimmer=voice.shimmer,
    )


def rate_metrics(metrics: SpeechMetrics) -> dict[FeedbackCategory, RatingResult]:
    """Run the four evaluators over a set of metrics."""
    if metrics.pitch_hz is not None and not metrics.pitch_hz > 0:
        raise InvalidMetric(f"pitch_hz must be > 0 when present, got {metrics.pitch_hz}")
    return {
        FeedbackCategory.PACE: evaluate_pace(metrics.words_per_minute),
        FeedbackCategory.FILLER_WORDS: evaluate_fillers(
            metrics.filler_word_count,
            metrics.duration_seconds,
            metrics.word_count,
        ),
        FeedbackCategory.VOICE_QUALITY: evaluate_voice_quality(metrics.voice),
        FeedbackCategory.PAUSES: evaluate_pauses(metrics.pauses, metrics.duration_seconds),
    }


def build_result(metrics: SpeechMetrics) -> AnalysisResult:
    """Rate metrics, score them and generate feedback."""
    ratings = rate_metrics(metrics)
    feedback_points, suggestions = generate_feedback(metrics, ratings)
    pace = ratings[FeedbackCategory.PACE]
    filler = ratings[FeedbackCategory.FILLER_WORDS]
    voice_quality = ratings[FeedbackCategory.VOICE_QUALITY]
    pause = ratings[FeedbackCategory.PAUSES]

    return AnalysisResult(
        overall_score=score_ratings(pace, filler, voice_quality, pause),
        pace=pace,
        filler=filler,
        voice_quality=voice_quality,
        pause=pause,
        feedback_points=feedback_points,
        suggestions=suggestions,
        metrics=metrics,
    )


class SpeechAnalyzer:
    """
    Speech performance analyzer.

    Holds the configuration and collaborators and runs one analysis per
    call. No state survives between calls.
    """

    def __init__(
        self,
        config: AnalysisConfig | None = None,
        transcript_source: TranscriptSource | None = None,
        voice_analyzer: VoiceAnalyzer | None = None,
    ):
        """
        Initialize the analyzer.

        Args:
            config: Detection thresholds and filler lexicon
            transcript_source: Speech-to-text collaborator used by analyze_file
            voice_analyzer: Acoustic collaborator used by analyze_file
        """
        self.config = config or AnalysisConfig()
        self.transcript_source = transcript_source
        self.voice_analyzer = voice_analyzer

    def detect_pauses(self, samples: "np.ndarray", sample_rate: float) -> list[PauseInterval]:
        return detect_pauses(
            samples,
            sample_rate,
            minimum_duration=self.config.minimum_pause_duration,
            silence_threshold=self.config.silence_threshold,
        )

    def analyze(
        self,
        transcript: Transcript,
        duration_seconds: float,
        samples: "np.ndarray | None" = None,
        sample_rate: float | None = None,
        voice: VoiceMetrics | None = None,
        speaking_rate: float | None = None,
    ) -> AnalysisResult:
        """
        Analyze one recording.

        Pauses come from the raw samples when given, otherwise from gaps
        between timed words.

        Raises:
            InvalidAudioInput: If the samples cannot be analysed
            InvalidMetric: If a metric is out of range
        """
        if samples is not None:
            pauses = self.detect_pauses(samples, sample_rate if sample_rate is not None else 0)
        elif any(w.is_timed for w in transcript.words):
            pauses = pauses_from_word_gaps(
                transcript.words, self.config.minimum_pause_duration
            )
        else:
            pauses = []

        metrics = build_metrics(
            transcript,
            duration_seconds,
            pauses=pauses,
            voice=voice,
            speaking_rate=speaking_rate,
            filler_words=self.config.filler_words,
        )
        return build_result(metrics)

    def analyze_file(
        self,
        audio_path: "Path | str",
        speaking_rate: float | None = None,
    ) -> AnalysisResult:
        """
        Analyze an audio file.

        Transcription, voice analytics and pause detection run concurrently
        and are joined before rating. A failing voice analyzer only removes
        the voice data; any other failure aborts the run.

        Raises:
            ValueError: If no transcript source is configured
        """
        if self.transcript_source is None:
            raise ValueError("analyze_file needs a transcript source")

        audio_path = Path(audio_path)
        samples, sample_rate = load_samples(audio_path)
        duration = len(samples) / sample_rate

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
            transcript_future = pool.submit(self.transcript_source.transcribe, audio_path)
            pauses_future = pool.submit(self.detect_pauses, samples, sample_rate)
            voice_future = (
                pool.submit(self.voice_analyzer.analyze_voice, samples, sample_rate)
                if self.voice_analyzer is not None
                else None
            )
            wait([f for f in (transcript_future, pauses_future, voice_future) if f is not None])

        transcript = transcript_future.result()
        pauses = pauses_future.result()
        voice = None
        if voice_future is not None:
            try:
                voice = voice_future.result()
            except Exception as e:
                warnings.warn(f"Voice analysis failed, continuing without voice data: {e}")

        metrics = build_metrics(
            transcript,
            duration,
            pauses=pauses,
            voice=voice,
            speaking_rate=speaking_rate,
            filler_words=self.config.filler_words,
        )
        return build_result(metrics)

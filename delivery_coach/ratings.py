"""Metric evaluators and the rating band registry.

Each evaluator maps continuous delivery metrics to a RatingResult through
ordered threshold bands. The registry records, for every category and band
label, the band's score, the priority given to feedback about it, and the
tone used when presenting it.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from .errors import InvalidMetric
from .types import FeedbackCategory, PauseInterval, RatingResult, VoiceMetrics


class RatingTone(str, Enum):
    """How a rating should be presented."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    CAUTION = "caution"
    NEGATIVE = "negative"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RatingBand:
    """Registry entry for one rating label."""

    label: str
    score: int
    priority: int
    """Priority (1-5) of feedback statements produced for this band."""

    tone: RatingTone


# Pace labels
TOO_SLOW = "Too slow"
SLIGHTLY_SLOW = "Slightly slow"
GOOD_PACE = "Good"
SLIGHTLY_FAST = "Slightly fast"
TOO_FAST = "Too fast"

# Filler labels
EXCELLENT = "Excellent"
GOOD_FILLERS = "Good"
AVERAGE = "Average"
NEEDS_IMPROVEMENT = "Needs improvement"
POOR = "Poor"

# Voice quality labels
NO_VOICE_DATA = "No voice data"
MONOTONE = "Monotone"
SOMEWHAT_VARIED = "Somewhat varied"
WELL_VARIED = "Well varied"
HIGHLY_EXPRESSIVE = "Highly expressive"

# Pause labels
FEW_PAUSES = "Few pauses"
GOOD_PAUSES = "Good use of pauses"
SLIGHTLY_TOO_MANY_PAUSES = "Slightly too many pauses"
TOO_MANY_PAUSES = "Too many pauses"


def _bands(*bands: RatingBand) -> dict[str, RatingBand]:
    return {band.label: band for band in bands}


RATING_REGISTRY: dict[FeedbackCategory, dict[str, RatingBand]] = {
    FeedbackCategory.PACE: _bands(
        RatingBand(TOO_SLOW, 60, 5, RatingTone.CAUTION),
        RatingBand(SLIGHTLY_SLOW, 80, 4, RatingTone.NEUTRAL),
        RatingBand(GOOD_PACE, 100, 2, RatingTone.POSITIVE),
        RatingBand(SLIGHTLY_FAST, 80, 4, RatingTone.NEUTRAL),
        RatingBand(TOO_FAST, 60, 5, RatingTone.CAUTION),
    ),
    FeedbackCategory.FILLER_WORDS: _bands(
        RatingBand(EXCELLENT, 100, 1, RatingTone.POSITIVE),
        RatingBand(GOOD_FILLERS, 90, 2, RatingTone.POSITIVE),
        RatingBand(AVERAGE, 75, 3, RatingTone.NEUTRAL),
        RatingBand(NEEDS_IMPROVEMENT, 60, 4, RatingTone.NEGATIVE),
        RatingBand(POOR, 40, 5, RatingTone.NEGATIVE),
    ),
    FeedbackCategory.VOICE_QUALITY: _bands(
        RatingBand(NO_VOICE_DATA, 75, 3, RatingTone.NEUTRAL),
        RatingBand(MONOTONE, 60, 4, RatingTone.NEGATIVE),
        RatingBand(SOMEWHAT_VARIED, 75, 3, RatingTone.NEUTRAL),
        RatingBand(WELL_VARIED, 90, 2, RatingTone.POSITIVE),
        RatingBand(HIGHLY_EXPRESSIVE, 100, 1, RatingTone.POSITIVE),
    ),
    FeedbackCategory.PAUSES: _bands(
        RatingBand(FEW_PAUSES, 70, 3, RatingTone.NEUTRAL),
        RatingBand(GOOD_PAUSES, 100, 1, RatingTone.POSITIVE),
        RatingBand(SLIGHTLY_TOO_MANY_PAUSES, 80, 3, RatingTone.NEUTRAL),
        RatingBand(TOO_MANY_PAUSES, 60, 4, RatingTone.NEGATIVE),
    ),
}

# Voice-quality score penalties
JITTER_LIMIT = 0.02
SHIMMER_LIMIT = 0.1
INSTABILITY_PENALTY = 5


def get_band(category: FeedbackCategory, label: str) -> RatingBand:
    """Look up the registry entry for a label.

    Raises:
        KeyError: If the label is not a band of this category.
    """
    try:
        return RATING_REGISTRY[category][label]
    except KeyError:
        raise KeyError(
            f"Unknown {category.display_name} rating {label!r}. "
            f"Known ratings: {sorted(RATING_REGISTRY[category])}"
        ) from None


def priority_for(category: FeedbackCategory, label: str) -> int:
    """Priority of feedback statements for a rating label."""
    return get_band(category, label).priority


def tone_for(category: FeedbackCategory, label: str) -> RatingTone:
    """Presentation tone for a rating label."""
    return get_band(category, label).tone


def _rating(category: FeedbackCategory, label: str, penalty: int = 0) -> RatingResult:
    score = get_band(category, label).score - penalty
    return RatingResult(label=label, score=max(0, min(100, score)))


def _require_non_negative(name: str, value: float) -> None:
    if value is None or math.isnan(value) or value < 0:
        raise InvalidMetric(f"{name} must be a non-negative number, got {value}")


def _require_finite(name: str, value: float) -> None:
    _require_non_negative(name, value)
    if math.isinf(value):
        raise InvalidMetric(f"{name} must be finite, got {value}")


def _require_count(name: str, value: int) -> None:
    _require_finite(name, value)
    if not float(value).is_integer():
        raise InvalidMetric(f"{name} must be a whole number, got {value}")


def per_minute(count: float, duration_seconds: float) -> float:
    """Occurrences per minute; 0 for an empty recording."""
    if duration_seconds == 0:
        return 0.0
    return count / (duration_seconds / 60.0)


def evaluate_pace(words_per_minute: float) -> RatingResult:
    """
    Rate speaking pace.

    Bands: < 100 too slow, [100, 120) slightly slow, [120, 160] good,
    (160, 180] slightly fast, > 180 too fast.

    Raises:
        InvalidMetric: If words_per_minute is negative or not finite
    """
    _require_finite("words_per_minute", words_per_minute)

    if words_per_minute < 100:
        label = TOO_SLOW
    elif words_per_minute < 120:
        label = SLIGHTLY_SLOW
    elif words_per_minute <= 160:
        label = GOOD_PACE
    elif words_per_minute <= 180:
        label = SLIGHTLY_FAST
    else:
        label = TOO_FAST
    return _rating(FeedbackCategory.PACE, label)


# (max fillers per minute, max filler percentage, label), best first
FILLER_BANDS = (
    (1, 2, EXCELLENT),
    (2, 4, GOOD_FILLERS),
    (4, 7, AVERAGE),
    (6, 10, NEEDS_IMPROVEMENT),
)


def evaluate_fillers(
    filler_word_count: int,
    duration_seconds: float,
    total_word_count: int,
) -> RatingResult:
    """
    Rate filler-word usage by rate and share of words.

    A band applies only when both the per-minute rate and the percentage are
    strictly below its limits; bands are tried best first.

    Raises:
        InvalidMetric: If a count is negative or fractional, or the
            duration is negative
    """
    _require_count("filler_word_count", filler_word_count)
    _require_non_negative("duration_seconds", duration_seconds)
    _require_count("total_word_count", total_word_count)

    rate = per_minute(filler_word_count, duration_seconds)
    percentage = 100.0 * filler_word_count / total_word_count if total_word_count else 0.0

    for max_rate, max_percentage, label in FILLER_BANDS:
        if rate < max_rate and percentage < max_percentage:
            return _rating(FeedbackCategory.FILLER_WORDS, label)
    return _rating(FeedbackCategory.FILLER_WORDS, POOR)


def evaluate_voice_quality(voice: VoiceMetrics) -> RatingResult:
    """
    Rate vocal variety, penalising unstable voices.

    Missing variability, jitter or shimmer yields the neutral
    "No voice data" rating. Jitter above 2% and shimmer above 0.1 dB each
    cost 5 points; the label is never changed by a penalty.

    Raises:
        InvalidMetric: If a present value is out of range, even when
            other values are missing
    """
    if voice.pitch_variability is not None:
        _require_finite("pitch_variability", voice.pitch_variability)
    if voice.jitter is not None:
        _require_non_negative("jitter", voice.jitter)
        if voice.jitter > 1:
            raise InvalidMetric(f"jitter must be a fraction in [0, 1], got {voice.jitter}")
    if voice.shimmer is not None:
        _require_finite("shimmer", voice.shimmer)

    if not voice.is_complete:
        return _rating(FeedbackCategory.VOICE_QUALITY, NO_VOICE_DATA)

    variability = voice.pitch_variability
    if variability < 5:
        label = MONOTONE
    elif variability < 15:
        label = SOMEWHAT_VARIED
    elif variability < 25:
        label = WELL_VARIED
    else:
        label = HIGHLY_EXPRESSIVE

    penalty = 0
    if voice.jitter > JITTER_LIMIT:
        penalty += INSTABILITY_PENALTY
    if voice.shimmer > SHIMMER_LIMIT:
        penalty += INSTABILITY_PENALTY
    return _rating(FeedbackCategory.VOICE_QUALITY, label, penalty)


def evaluate_pauses(
    pauses: Sequence[PauseInterval],
    duration_seconds: float,
) -> RatingResult:
    """
    Rate pause behaviour from pause frequency and share of recording time.

    Raises:
        InvalidMetric: If duration_seconds is negative, or a pause starts
            before zero or is not longer than zero
    """
    _require_non_negative("duration_seconds", duration_seconds)
    for pause in pauses:
        _require_finite("pause start_time", pause.start_time)
        _require_finite("pause duration", pause.duration)
        if pause.duration == 0:
            raise InvalidMetric(f"pause duration must be > 0, got {pause.duration}")

    total_pause_time = sum(p.duration for p in pauses)
    if duration_seconds == 0:
        percentage = 0.0
    else:
        percentage = 100.0 * total_pause_time / duration_seconds
    rate = per_minute(len(pauses), duration_seconds)

    if rate < 0.5:
        label = FEW_PAUSES
    elif rate <= 2 and percentage <= 15:
        label = GOOD_PAUSES
    elif rate <= 3 and percentage <= 20:
        label = SLIGHTLY_TOO_MANY_PAUSES
    else:
        label = TOO_MANY_PAUSES
    return _rating(FeedbackCategory.PAUSES, label)

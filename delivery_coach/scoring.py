"""Overall score aggregation."""

from .types import RatingResult

# Sub-score weights in tenths: pace 0.3, fillers 0.3, voice 0.2, pauses 0.2
PACE_WEIGHT = 3
FILLER_WEIGHT = 3
VOICE_QUALITY_WEIGHT = 2
PAUSE_WEIGHT = 2


def round_half_up(value: float) -> int:
    """Round non-negative values to the nearest integer, halves upward."""
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def overall_score(
    pace_score: int,
    filler_score: int,
    voice_quality_score: int,
    pause_score: int,
) -> int:
    """
    Combine sub-scores into one 0-100 score.

    The weighted sum is kept in integer tenths and rounded half up, so
    e.g. 81.5 always becomes 82 regardless of float representation.
    """
    tenths = (
        PACE_WEIGHT * round_half_up(pace_score)
        + FILLER_WEIGHT * round_half_up(filler_score)
        + VOICE_QUALITY_WEIGHT * round_half_up(voice_quality_score)
        + PAUSE_WEIGHT * round_half_up(pause_score)
    )
    score = (tenths + 5) // 10 if tenths >= 0 else -((-tenths + 5) // 10)
    return max(0, min(100, score))


def score_ratings(
    pace: RatingResult,
    filler: RatingResult,
    voice_quality: RatingResult,
    pause: RatingResult,
) -> int:
    """Overall score for four category ratings."""
    return overall_score(pace.score, filler.score, voice_quality.score, pause.score)

"""Template-based feedback generation.

Turns metrics and ratings into categorised feedback statements and
improvement suggestions. Every rating label in the registry has a template,
so generation never fails on evaluator output.
"""

from collections.abc import Mapping

from . import ratings as r
from .scoring import round_half_up
from .types import FeedbackCategory, FeedbackPoint, RatingResult, SpeechMetrics

# Priority of every improvement suggestion
SUGGESTION_PRIORITY = 4

# Pitch range boundaries (Hz)
DEEP_PITCH = 110
HIGH_PITCH = 180

PACE_TEMPLATES = {
    r.TOO_SLOW: "Your speaking pace was slower than optimal at {wpm} words per minute.",
    r.SLIGHTLY_SLOW: "Your speaking pace was slightly slow at {wpm} words per minute.",
    r.GOOD_PACE: "Your speaking pace was good at {wpm} words per minute.",
    r.SLIGHTLY_FAST: "Your speaking pace was slightly fast at {wpm} words per minute.",
    r.TOO_FAST: "Your speaking pace was faster than optimal at {wpm} words per minute.",
}

PACE_SUGGESTIONS = {
    r.TOO_SLOW: (
        "Try to increase your speaking pace. Practice with a timer to develop "
        "a better sense of timing."
    ),
    r.SLIGHTLY_SLOW: (
        "Try to pick up your pace a little. Aim for 120 to 160 words per minute."
    ),
    r.SLIGHTLY_FAST: (
        "Try to slow down a little and let each key point land before moving on."
    ),
    r.TOO_FAST: (
        "Try to slow down. Taking brief pauses between thoughts can help "
        "regulate your pace."
    ),
}

NO_FILLERS = "Excellent job avoiding filler words!"
FILLER_PRACTICE_TIP = (
    "Practice being comfortable with silence instead of using filler words. "
    "Try pausing when you would typically say a filler word."
)
FILLER_AWARENESS_TIP = (
    "Listen back to your recording and note where filler words creep in. "
    "Noticing them is the first step to dropping them."
)

MONOTONE_CRITIQUE = (
    "Your voice pitch stayed very even, which can make your delivery sound monotone."
)
MONOTONE_SUGGESTION = (
    "Add vocal variety by raising or lowering your pitch on key words. "
    "Practice reading aloud with exaggerated inflection."
)
EXPRESSIVE_PRAISE = (
    "Excellent vocal variety! Your expressive pitch keeps listeners engaged."
)

TOO_MANY_PAUSES_SUGGESTION = (
    "Prepare transitions between your points so you can move on without long pauses."
)
FEW_PAUSES_CRITIQUE = (
    "You rarely paused. Strategic pauses give listeners time to absorb your points."
)
FEW_PAUSES_SUGGESTION = (
    "Pause briefly after important points to emphasise them and let them sink in."
)
GOOD_PAUSES_PRAISE = "You used pauses effectively to structure your speech."


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def format_filler_list(histogram: Mapping[str, int]) -> str:
    """
    Format a filler histogram as "'um' (2x), 'like' (1x)".

    Entries are ordered by descending count; ties keep the histogram's
    insertion (first-seen) order.
    """
    ordered = sorted(histogram.items(), key=lambda item: -item[1])
    return ", ".join(f"'{word}' ({count}x)" for word, count in ordered)


def pitch_range(pitch_hz: float) -> str:
    """Describe an average pitch as deeper, medium or higher."""
    if pitch_hz < DEEP_PITCH:
        return "deeper"
    if pitch_hz > HIGH_PITCH:
        return "higher"
    return "medium"


class _Collector:
    """Accumulates statements and suggestions for one category."""

    def __init__(self, category: FeedbackCategory, rating: RatingResult):
        self.category = category
        self.priority = r.priority_for(category, rating.label)
        self.points: list[FeedbackPoint] = []
        self.suggestions: list[FeedbackPoint] = []

    def say(self, text: str) -> None:
        self.points.append(FeedbackPoint(self.category, text, self.priority))

    def suggest(self, text: str, priority: int = SUGGESTION_PRIORITY) -> None:
        self.suggestions.append(
            FeedbackPoint(self.category, text, priority, is_suggestion=True)
        )


def format_wpm(words_per_minute: float) -> str:
    """
    Format a speaking rate for a pace statement.

    Whole numbers are used unless rounding would move the value into another
    pace band (160.4 reads "160.4", not "160"); decimals are then added until
    the shown value rates the same as the measured one.
    """
    label = r.evaluate_pace(words_per_minute).label
    text = str(round_half_up(words_per_minute))
    for digits in (1, 2, 3):
        if r.evaluate_pace(float(text)).label == label:
            return text
        text = f"{words_per_minute:.{digits}f}"
    return text if r.evaluate_pace(float(text)).label == label else repr(words_per_minute)


def _pace_feedback(metrics: SpeechMetrics, out: _Collector, label: str) -> None:
    out.say(PACE_TEMPLATES[label].format(wpm=format_wpm(metrics.words_per_minute)))
    if label in PACE_SUGGESTIONS:
        out.suggest(PACE_SUGGESTIONS[label])


def _filler_feedback(metrics: SpeechMetrics, out: _Collector, label: str) -> None:
    if metrics.filler_word_count == 0:
        out.say(NO_FILLERS)
        return

    fillers = format_filler_list(metrics.filler_histogram)
    out.say(f"You used {_plural(metrics.filler_word_count, 'filler word')}: {fillers}")
    if label in (r.NEEDS_IMPROVEMENT, r.POOR):
        out.suggest(FILLER_PRACTICE_TIP)
    elif label == r.AVERAGE:
        out.suggest(FILLER_AWARENESS_TIP)


def _voice_feedback(metrics: SpeechMetrics, out: _Collector, label: str) -> None:
    if metrics.pitch_hz is not None:
        pitch = round_half_up(metrics.pitch_hz)
        out.say(
            f"Your average voice pitch was {pitch} Hz, "
            f"which is in the {pitch_range(metrics.pitch_hz)} range."
        )
    if label == r.MONOTONE:
        out.say(MONOTONE_CRITIQUE)
        out.suggest(MONOTONE_SUGGESTION)
    elif label == r.HIGHLY_EXPRESSIVE:
        out.say(EXPRESSIVE_PRAISE)


def _pause_feedback(metrics: SpeechMetrics, out: _Collector, label: str) -> None:
    count = len(metrics.pauses)
    if label == r.TOO_MANY_PAUSES:
        out.say(
            f"You had {_plural(count, 'long pause')}, "
            "which may interrupt the flow of your speech."
        )
        out.suggest(TOO_MANY_PAUSES_SUGGESTION)
    elif label == r.FEW_PAUSES:
        out.say(FEW_PAUSES_CRITIQUE)
        out.suggest(FEW_PAUSES_SUGGESTION)
    elif label == r.SLIGHTLY_TOO_MANY_PAUSES:
        out.say(
            f"Your {_plural(count, 'pause')} mostly supported your delivery; "
            "a few could be shorter."
        )
    else:
        out.say(GOOD_PAUSES_PRAISE)


_GENERATORS = {
    FeedbackCategory.PACE: _pace_feedback,
    FeedbackCategory.FILLER_WORDS: _filler_feedback,
    FeedbackCategory.VOICE_QUALITY: _voice_feedback,
    FeedbackCategory.PAUSES: _pause_feedback,
}


def generate_feedback(
    metrics: SpeechMetrics,
    ratings: Mapping[FeedbackCategory, RatingResult],
) -> tuple[tuple[FeedbackPoint, ...], tuple[FeedbackPoint, ...]]:
    """
    Generate feedback statements and suggestions.

    Categories are processed in definition order (pace, filler words, voice
    quality, pauses); within a category, statements keep template order.

    Args:
        metrics: Metrics the ratings were computed from
        ratings: Rating for every category

    Returns:
        (feedback points, suggestions)

    Raises:
        KeyError: If a rating label is not in the registry
    """
    points: list[FeedbackPoint] = []
    suggestions: list[FeedbackPoint] = []

    for category in FeedbackCategory:
        rating = ratings[category]
        out = _Collector(category, rating)
        _GENERATORS[category](metrics, out, rating.label)
        points.extend(out.points)
        suggestions.extend(out.suggestions)

    return tuple(points), tuple(suggestions)

"""Coaching scripts built from analysis results.

These produce the text a speech synthesiser reads out; voice selection and
playback belong to the presentation layer.
"""

from collections.abc import Sequence

from .feedback import format_wpm
from .ratings import GOOD_PACE
from .session import FeedbackSession
from .types import AnalysisResult

SPOKEN_INTRO = "Thank you for your speech. Here's my feedback."
SPOKEN_CLOSING = "Keep practicing, and you'll continue to improve."

DIALOGUE_GREETING = "Hi there! I've analyzed your speech and I'm ready to share some insights."
DIALOGUE_CLOSING = "Would you like to hear more detail about any particular aspect of your speech?"

PACE_RHYTHM_ADVICE = (
    "I've noticed you consistently struggle with speaking pace. "
    "Try practicing with a metronome to develop a better rhythm."
)
FILLER_PROGRESS_PRAISE = (
    "Great job reducing your use of filler words! "
    "Keep practicing conscious pausing instead of using fillers."
)
GENERAL_ADVICE = (
    "Keep practicing regularly. The key to improvement is consistent practice "
    "with mindful attention to areas that need work."
)

# Sessions considered when looking for trends
TREND_WINDOW = 3


def build_spoken_feedback(result: AnalysisResult, top: int = 3) -> str:
    """Compose the full spoken feedback script for a result."""
    session = FeedbackSession(result)
    parts = [SPOKEN_INTRO]

    if result.overall_score >= 80:
        parts.append("Overall, you did very well.")
    elif result.overall_score >= 60:
        parts.append("You've done a good job, with some areas to improve.")
    else:
        parts.append("I've identified some areas where you can improve.")

    parts.extend(point.text for point in session.top_feedback(top))

    suggestions = session.prioritized_suggestions()
    if suggestions:
        parts.append(f"Here's a tip: {suggestions[0].text}")

    parts.append(SPOKEN_CLOSING)
    return " ".join(parts)


def build_brief_summary(result: AnalysisResult) -> str:
    """One-breath summary of score, pace and filler words."""
    metrics = result.metrics
    wpm = format_wpm(metrics.words_per_minute)
    return (
        f"Your speaking score is {result.overall_score} out of 100. "
        f"You spoke at {wpm} words per minute, which is {result.pace.label.lower()}. "
        f"I detected {metrics.filler_word_count} filler words."
    )


def build_coaching_dialogue(result: AnalysisResult) -> list[str]:
    """Sequence of statements for an interactive coaching conversation."""
    session = FeedbackSession(result)
    score = result.overall_score
    dialogue = [DIALOGUE_GREETING]

    if score >= 85:
        dialogue.append(
            "First, I want to say that your overall delivery was excellent! "
            f"You scored {score} out of 100."
        )
    elif score >= 70:
        dialogue.append(
            f"Overall, you did quite well in your delivery. You scored {score} out of 100."
        )
    else:
        dialogue.append(
            "I've identified some areas where you can improve. "
            f"Your overall score was {score} out of 100."
        )

    dialogue.extend(point.text for point in session.top_feedback(2))

    suggestions = session.prioritized_suggestions()
    if suggestions:
        dialogue.append(f"Here's something specific you could try: {suggestions[0].text}")

    dialogue.append(DIALOGUE_CLOSING)
    return dialogue


def personalized_advice(history: Sequence[AnalysisResult]) -> list[str]:
    """
    Advice based on trends across past sessions, oldest first.

    Looks at the most recent sessions for a recurring pace problem and for
    progress on filler words. Falls back to general advice.
    """
    advice = []

    if len(history) >= 2:
        recent = list(history)[-TREND_WINDOW:]

        pace_issues = sum(1 for result in recent if result.pace.label != GOOD_PACE)
        if pace_issues >= 2:
            advice.append(PACE_RHYTHM_ADVICE)

        if recent[-1].filler.score - recent[0].filler.score > 10:
            advice.append(FILLER_PROGRESS_PRAISE)

    if not advice:
        advice.append(GENERAL_ADVICE)
    return advice

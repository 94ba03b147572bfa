"""Output formatters for analysis results."""

import json
from datetime import datetime, timezone

from .ratings import tone_for
from .scoring import round_half_up
from .session import FeedbackSession
from .types import (
    AnalysisResult,
    FeedbackCategory,
    FeedbackPoint,
    PauseInterval,
    RatingResult,
    SpeechMetrics,
)

# Schema version for JSON output (for future compatibility)
JSON_SCHEMA_VERSION = "1.0"


def _format_timestamp_simple(seconds: float) -> str:
    """Format seconds as simple timestamp: MM:SS or HH:MM:SS for longer audio."""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def format_txt(result: AnalysisResult, top: int | None = None) -> str:
    """
    Format an analysis result as a plain-text report.

    Args:
        result: Analysis result
        top: Only list this many feedback statements (highest priority first).
            None lists every statement in generation order.

    Returns:
        Report with scores, ratings, pauses, feedback and suggestions
    """
    session = FeedbackSession(result)
    metrics = result.metrics
    lines = [f"Overall score: {result.overall_score}/100", ""]

    for category in FeedbackCategory:
        rating = result.rating_for(category)
        lines.append(f"{category.display_name + ':':<15} {rating.label} ({rating.score})")

    lines.append("")
    lines.append(
        f"{round_half_up(metrics.words_per_minute)} words per minute, "
        f"{metrics.word_count} words, "
        f"{metrics.filler_word_count} filler words, "
        f"{len(metrics.pauses)} significant pauses"
    )

    if metrics.pauses:
        lines.append("")
        lines.append("Pauses:")
        for pause in metrics.pauses:
            lines.append(
                f"  At {_format_timestamp_simple(pause.start_time)}  {pause.duration:.1f}s"
            )

    points = session.top_feedback(top) if top is not None else list(result.feedback_points)
    if points:
        lines.append("")
        lines.append("Feedback:")
        lines.extend(f"  - {point.text}" for point in points)

    if result.suggestions:
        lines.append("")
        lines.append("Suggestions:")
        lines.extend(f"  - {point.text}" for point in session.prioritized_suggestions())

    return "\n".join(lines) + "\n"


def _rating_to_dict(category: FeedbackCategory, rating: RatingResult) -> dict:
    return {
        "label": rating.label,
        "score": rating.score,
        "tone": str(tone_for(category, rating.label)),
    }


def _point_to_dict(point: FeedbackPoint) -> dict:
    return {
        "category": point.category.value,
        "text": point.text,
        "priority": point.priority,
        "is_suggestion": point.is_suggestion,
    }


def result_to_dict(result: AnalysisResult) -> dict:
    """Convert a result to JSON-compatible data."""
    metrics = result.metrics
    return {
        "overall_score": result.overall_score,
        "ratings": {
            category.value: _rating_to_dict(category, result.rating_for(category))
            for category in FeedbackCategory
        },
        "feedback_points": [_point_to_dict(p) for p in result.feedback_points],
        "suggestions": [_point_to_dict(p) for p in result.suggestions],
        "metrics": {
            "words_per_minute": metrics.words_per_minute,
            "word_count": metrics.word_count,
            "filler_word_count": metrics.filler_word_count,
            "filler_histogram": [
                {"word": word, "count": count}
                for word, count in metrics.filler_histogram.items()
            ],
            "duration_seconds": metrics.duration_seconds,
            "pauses": [
                {"start_time": p.start_time, "duration": p.duration}
                for p in metrics.pauses
            ],
            "pitch_hz": metrics.pitch_hz,
            "pitch_variability": metrics.pitch_variability,
            "jitter": metrics.jitter,
            "shimmer": metrics.shimmer,
        },
    }


def format_json(result: AnalysisResult) -> str:
    """
    Format an analysis result as structured JSON.

    Values are written unrounded so parse_json() restores the result exactly.
    """
    data = {
        "schema_version": JSON_SCHEMA_VERSION,
        "generated_at": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        **result_to_dict(result),
    }
    return json.dumps(data, indent=2, ensure_ascii=False)


def _point_from_dict(data: dict) -> FeedbackPoint:
    return FeedbackPoint(
        category=FeedbackCategory(data["category"]),
        text=data["text"],
        priority=int(data["priority"]),
        is_suggestion=bool(data["is_suggestion"]),
    )


def result_from_dict(data: dict) -> AnalysisResult:
    """Rebuild a result from result_to_dict() output."""
    m = data["metrics"]
    metrics = SpeechMetrics(
        words_per_minute=m["words_per_minute"],
        word_count=m["word_count"],
        filler_word_count=m["filler_word_count"],
        # a list keeps first-seen order explicit
        filler_histogram={e["word"]: e["count"] for e in m["filler_histogram"]},
        duration_seconds=m["duration_seconds"],
        pauses=tuple(PauseInterval(p["start_time"], p["duration"]) for p in m["pauses"]),
        pitch_hz=m.get("pitch_hz"),
        pitch_variability=m.get("pitch_variability"),
        jitter=m.get("jitter"),
        shimmer=m.get("shimmer"),
    )
    ratings = {
        category: RatingResult(
            label=data["ratings"][category.value]["label"],
            score=int(data["ratings"][category.value]["score"]),
        )
        for category in FeedbackCategory
    }
    return AnalysisResult(
        overall_score=int(data["overall_score"]),
        pace=ratings[FeedbackCategory.PACE],
        filler=ratings[FeedbackCategory.FILLER_WORDS],
        voice_quality=ratings[FeedbackCategory.VOICE_QUALITY],
        pause=ratings[FeedbackCategory.PAUSES],
        feedback_points=tuple(_point_from_dict(p) for p in data["feedback_points"]),
        suggestions=tuple(_point_from_dict(p) for p in data["suggestions"]),
        metrics=metrics,
    )


def parse_json(content: str) -> AnalysisResult:
    """
    Parse format_json() output back into an AnalysisResult.

    Raises:
        ValueError: If the schema version is not supported
    """
    data = json.loads(content)
    version = data.get("schema_version")
    if version != JSON_SCHEMA_VERSION:
        raise ValueError(
            f"Unsupported schema version {version!r}, expected {JSON_SCHEMA_VERSION!r}"
        )
    return result_from_dict(data)


# Mapping of format names to formatter functions
FORMATTERS = {
    "txt": format_txt,
    "json": format_json,
}

# File extensions for each format
EXTENSIONS = {
    "txt": ".coach.txt",
    "json": ".coach.json",
}

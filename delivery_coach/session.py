"""Feedback prioritisation and playback state.

FeedbackSession exposes ordered views over one AnalysisResult and tracks
which point a speech consumer is currently reading out. The consumer drives
the state machine:

    IDLE --play()--> SPEAKING --pause()--> PAUSED --resume()--> SPEAKING
    any  --stop()--> IDLE
    any  --select_point(p)--> SPEAKING(p)
    SPEAKING --finish()--> IDLE (the next play() continues after p)
"""

import threading
from enum import Enum

from .ratings import RatingTone, tone_for
from .types import AnalysisResult, FeedbackCategory, FeedbackPoint


class PlaybackState(str, Enum):
    """Playback state of a feedback session."""

    IDLE = "idle"
    SPEAKING = "speaking"
    PAUSED = "paused"

    def __str__(self) -> str:
        return self.value


def prioritize(points: "list[FeedbackPoint] | tuple[FeedbackPoint, ...]") -> list[FeedbackPoint]:
    """Sort by priority, highest first; ties keep generation order."""
    return sorted(points, key=lambda p: -p.priority)


def playback_order(result: AnalysisResult) -> list[FeedbackPoint]:
    """
    Order in which play() walks a result.

    Statements and suggestions are ordered together by priority (highest
    first), then category definition order, then generation order with
    statements ahead of suggestions.
    """
    points = result.feedback_points + result.suggestions
    return sorted(points, key=lambda p: (-p.priority, p.category.order))


class FeedbackSession:
    """Read-only views and playback state over one analysis result.

    Transitions are serialised with a lock so a single session can be shared
    between a UI thread and a speech-synthesis callback thread.
    """

    def __init__(self, result: AnalysisResult | None = None):
        self._lock = threading.RLock()
        self._result: AnalysisResult | None = None
        self._queue: list[FeedbackPoint] = []
        self._state = PlaybackState.IDLE
        self._current: FeedbackPoint | None = None
        self._cursor = -1
        self._completed = False
        if result is not None:
            self.load(result)

    # -- lifecycle --------------------------------------------------------

    def load(self, result: AnalysisResult) -> None:
        """Replace the result and reset all playback state."""
        with self._lock:
            self._result = result
            self._queue = playback_order(result)
            self._reset()

    def _reset(self) -> None:
        self._state = PlaybackState.IDLE
        self._current = None
        self._cursor = -1
        self._completed = False

    @property
    def result(self) -> AnalysisResult | None:
        return self._result

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def current(self) -> FeedbackPoint | None:
        """The highlighted point, if any."""
        return self._current

    @property
    def is_speaking(self) -> bool:
        return self._state == PlaybackState.SPEAKING

    @property
    def completed(self) -> bool:
        """True once play() has walked past the last point."""
        return self._completed

    @property
    def queue(self) -> list[FeedbackPoint]:
        return list(self._queue)

    # -- transitions ------------------------------------------------------

    def play(self) -> FeedbackPoint | None:
        """
        Start speaking the next point in playback order.

        From IDLE or PAUSED, moves to the point after the last one spoken.
        While SPEAKING this is a no-op that returns the current point.

        Returns:
            The point now being spoken, or None when nothing is left
        """
        with self._lock:
            if self._state == PlaybackState.SPEAKING:
                return self._current

            next_index = self._cursor + 1
            if next_index >= len(self._queue):
                self._state = PlaybackState.IDLE
                self._current = None
                self._completed = True
                return None

            self._cursor = next_index
            self._current = self._queue[next_index]
            self._state = PlaybackState.SPEAKING
            return self._current

    def pause(self) -> bool:
        """SPEAKING -> PAUSED. Returns False if nothing was speaking."""
        with self._lock:
            if self._state != PlaybackState.SPEAKING:
                return False
            self._state = PlaybackState.PAUSED
            return True

    def resume(self) -> bool:
        """PAUSED -> SPEAKING on the same point. Returns False if not paused."""
        with self._lock:
            if self._state != PlaybackState.PAUSED:
                return False
            self._state = PlaybackState.SPEAKING
            return True

    def stop(self) -> None:
        """Return to IDLE, clear the highlight and rewind the queue."""
        with self._lock:
            self._reset()

    def finish(self) -> bool:
        """
        Mark the current utterance as finished.

        SPEAKING -> IDLE; the highlight is cleared but the position is kept so
        the next play() continues with the following point.
        """
        with self._lock:
            if self._state != PlaybackState.SPEAKING:
                return False
            self._state = PlaybackState.IDLE
            self._current = None
            return True

    def select_point(self, point: FeedbackPoint) -> FeedbackPoint:
        """
        Jump to a specific point and start speaking it.

        Raises:
            ValueError: If the point does not belong to the loaded result
        """
        with self._lock:
            index = self._index_of(point)
            self._cursor = index
            self._current = self._queue[index]
            self._state = PlaybackState.SPEAKING
            self._completed = False
            return self._current

    def _index_of(self, point: FeedbackPoint) -> int:
        for i, candidate in enumerate(self._queue):
            if candidate is point:
                return i
        for i, candidate in enumerate(self._queue):
            if candidate == point:
                return i
        raise ValueError(f"Feedback point is not part of this session: {point.text!r}")

    # -- projections ------------------------------------------------------

    @property
    def feedback_points(self) -> tuple[FeedbackPoint, ...]:
        return self._result.feedback_points if self._result is not None else ()

    @property
    def suggestions(self) -> tuple[FeedbackPoint, ...]:
        return self._result.suggestions if self._result is not None else ()

    def prioritized_feedback(self) -> list[FeedbackPoint]:
        """All feedback statements, highest priority first."""
        return prioritize(self.feedback_points)

    def prioritized_suggestions(self) -> list[FeedbackPoint]:
        """All suggestions, highest priority first."""
        return prioritize(self.suggestions)

    def top_feedback(self, count: int = 3) -> list[FeedbackPoint]:
        """
        The first `count` feedback statements by priority.

        Raises:
            ValueError: If count is negative
        """
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        return self.prioritized_feedback()[:count]

    def feedback_for_category(self, category: FeedbackCategory) -> list[FeedbackPoint]:
        return [p for p in self.feedback_points if p.category == category]

    def suggestions_for_category(self, category: FeedbackCategory) -> list[FeedbackPoint]:
        return [p for p in self.suggestions if p.category == category]

    def has_feedback_for_category(self, category: FeedbackCategory) -> bool:
        return bool(
            self.feedback_for_category(category) or self.suggestions_for_category(category)
        )

    def tone_for_category(self, category: FeedbackCategory) -> RatingTone | None:
        """Presentation tone of the category's rating, or None without a result."""
        if self._result is None:
            return None
        return tone_for(category, self._result.rating_for(category).label)

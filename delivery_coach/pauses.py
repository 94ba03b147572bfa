"""Pause detection from raw PCM samples."""

import warnings
from collections.abc import Sequence

import numpy as np

from .config import DEFAULT_MINIMUM_PAUSE, DEFAULT_SILENCE_THRESHOLD
from .errors import InvalidAudioInput
from .types import PauseInterval, WordTiming

# Analysis windows are a tenth of a second long
WINDOWS_PER_SECOND = 10


def window_rms(samples: np.ndarray, window_size: int) -> np.ndarray:
    """
    Compute the RMS energy of consecutive windows.

    The final window may be shorter than window_size; its RMS is taken over
    the frames it actually holds.

    Returns:
        Array of shape [ceil(len(samples) / window_size)]
    """
    n_full = len(samples) // window_size
    full = samples[: n_full * window_size].reshape(n_full, window_size)
    rms = np.sqrt(np.mean(np.square(full, dtype=np.float64), axis=1))

    tail = samples[n_full * window_size:]
    if len(tail):
        tail_rms = np.sqrt(np.mean(np.square(tail, dtype=np.float64)))
        rms = np.append(rms, tail_rms)
    return rms


def _as_mono_buffer(samples: "Sequence[float] | np.ndarray") -> np.ndarray:
    try:
        buffer = np.asarray(samples, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidAudioInput(f"Samples are not numeric: {e}") from e

    if buffer.ndim != 1:
        raise InvalidAudioInput(
            f"Expected a one-dimensional mono buffer, got shape {buffer.shape}"
        )
    if not np.all(np.isfinite(buffer)):
        raise InvalidAudioInput("Samples contain NaN or infinite values")
    if len(buffer) and np.max(np.abs(buffer)) > 1.0:
        warnings.warn("Samples exceed [-1, 1]; silence threshold assumes normalised PCM")
    return buffer


def detect_pauses(
    samples: "Sequence[float] | np.ndarray",
    sample_rate: float,
    minimum_duration: float = DEFAULT_MINIMUM_PAUSE,
    silence_threshold: float = DEFAULT_SILENCE_THRESHOLD,
) -> list[PauseInterval]:
    """
    Detect pauses in a mono recording.

    Samples are split into 100 ms windows. A run of consecutive windows whose
    RMS is below silence_threshold becomes a pause when it lasts at least
    minimum_duration seconds. A silence running to the end of the recording
    is checked the same way.

    Args:
        samples: Mono PCM amplitudes in [-1, 1]
        sample_rate: Samples per second
        minimum_duration: Shortest silence reported, in seconds
        silence_threshold: RMS level below which a window is silent

    Returns:
        Pauses ordered by start time

    Raises:
        InvalidAudioInput: If sample_rate <= 0, the buffer is not a finite
            one-dimensional array, or a threshold is negative
    """
    if not sample_rate > 0:
        raise InvalidAudioInput(f"sample_rate must be > 0, got {sample_rate}")
    if minimum_duration < 0:
        raise InvalidAudioInput(f"minimum_duration must be >= 0, got {minimum_duration}")
    if silence_threshold < 0:
        raise InvalidAudioInput(f"silence_threshold must be >= 0, got {silence_threshold}")

    buffer = _as_mono_buffer(samples)
    if len(buffer) == 0:
        return []

    window_size = max(1, int(sample_rate / WINDOWS_PER_SECOND))
    silent = window_rms(buffer, window_size) < silence_threshold

    pauses: list[PauseInterval] = []
    in_pause = False
    pause_start = 0

    for index, is_silent in enumerate(silent):
        frame = index * window_size
        if is_silent and not in_pause:
            in_pause = True
            pause_start = frame
        elif not is_silent and in_pause:
            in_pause = False
            _emit(pauses, pause_start, frame, sample_rate, minimum_duration)

    # Silence running to the end of the recording
    if in_pause:
        _emit(pauses, pause_start, len(buffer), sample_rate, minimum_duration)

    return pauses


def _emit(
    pauses: list[PauseInterval],
    start_frame: int,
    end_frame: int,
    sample_rate: float,
    minimum_duration: float,
) -> None:
    duration = (end_frame - start_frame) / sample_rate
    if duration >= minimum_duration and duration > 0:
        pauses.append(PauseInterval(start_time=start_frame / sample_rate, duration=duration))


def pauses_from_word_gaps(
    words: list[WordTiming],
    minimum_duration: float = DEFAULT_MINIMUM_PAUSE,
) -> list[PauseInterval]:
    """
    Derive pauses from gaps between timed words.

    Used when no raw samples are available. Words without timestamps are
    skipped; a warning is emitted if any were found.

    Returns:
        Pauses ordered by start time
    """
    if minimum_duration < 0:
        raise InvalidAudioInput(f"minimum_duration must be >= 0, got {minimum_duration}")

    timed = [w for w in words if w.is_timed]
    if len(timed) != len(words):
        warnings.warn(
            f"{len(words) - len(timed)} word(s) have no timestamps; "
            "gaps around them are not measured"
        )

    pauses = []
    for prev, word in zip(timed, timed[1:]):
        gap = word.start - prev.end
        if gap > 0 and gap >= minimum_duration:
            pauses.append(PauseInterval(start_time=prev.end, duration=gap))
    return pauses

"""Audio file discovery and sample loading."""

from pathlib import Path

import numpy as np
import soundfile as sf

# Formats readable by libsndfile
SUPPORTED_EXTENSIONS = frozenset({
    ".wav", ".flac", ".ogg", ".aiff", ".aif",
})


def is_supported_audio(path: Path) -> bool:
    """Check if a file has a supported audio extension."""
    return path.suffix.lower() in SUPPORTED_EXTENSIONS


def discover_audio_files(paths: list[Path], recursive: bool = False) -> list[Path]:
    """
    Discover audio files from a list of paths.

    Args:
        paths: List of file or directory paths
        recursive: If True, search directories recursively

    Returns:
        List of audio file paths, sorted alphabetically
    """
    audio_files: list[Path] = []

    for path in paths:
        if path.is_file():
            if is_supported_audio(path):
                audio_files.append(path)
        elif path.is_dir():
            pattern = "**/*" if recursive else "*"
            for file_path in path.glob(pattern):
                if file_path.is_file() and is_supported_audio(file_path):
                    audio_files.append(file_path)

    return sorted(set(audio_files))


def to_mono(frames: np.ndarray) -> np.ndarray:
    """Average channels of a [frames, channels] array into one channel."""
    if frames.ndim == 1:
        return frames
    return frames.mean(axis=1)


def load_samples(path: Path) -> tuple[np.ndarray, int]:
    """
    Read an audio file as normalised mono float32 samples.

    Returns:
        (samples in [-1, 1], sample rate)
    """
    frames, sample_rate = sf.read(str(path), dtype="float32", always_2d=True)
    return to_mono(frames).astype(np.float32), int(sample_rate)


def get_audio_duration(path: Path) -> float | None:
    """
    Get audio duration in seconds from the file header.

    Returns None if the file cannot be read.
    """
    try:
        info = sf.info(str(path))
    except RuntimeError:
        return None
    return info.frames / info.samplerate if info.samplerate else None

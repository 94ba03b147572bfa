"""Errors raised by the analysis engine."""


class AnalysisError(Exception):
    """Base class for errors that abort an analysis run."""


class InvalidAudioInput(AnalysisError, ValueError):
    """Raw audio could not be analysed (bad sample rate or malformed buffer)."""


class InvalidMetric(AnalysisError, ValueError):
    """A metric was outside its valid domain (negative count, duration, ...)."""

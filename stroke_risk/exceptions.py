"""
Error types raised by the stroke risk pipeline.
"""


class StrokeRiskError(Exception):
    """Base class for pipeline errors."""


class DataLoadError(StrokeRiskError, ValueError):
    """Input file is missing, unreadable, or has malformed rows or columns."""


class FitError(StrokeRiskError, ValueError):
    """Training data cannot be fitted (mismatched lengths or a single class)."""


class InputParseError(StrokeRiskError, ValueError):
    """A value typed at the interactive prompt could not be parsed."""

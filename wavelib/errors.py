"""
Error types raised by waveform table operations.

All errors derive from ValueError so callers that already catch malformed
input keep working.
"""

from typing import Optional


class WaveformTableError(ValueError):
    """Base class for waveform table errors."""


class ConfigurationError(WaveformTableError):
    """A run's metadata record is missing a required field."""
    
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class SchemaMismatchError(WaveformTableError):
    """Rows of one table disagree on metadata fields or timepoint labels."""
    
    def __init__(self, message: str, row_index: Optional[int] = None):
        super().__init__(message)
        self.row_index = row_index


class MalformedLabelError(WaveformTableError):
    """A timepoint label has a suffix that is not a number."""
    
    def __init__(self, label: str):
        super().__init__(f"Malformed timepoint label: {label!r}")
        self.label = label


class AmbiguousGroupingError(WaveformTableError):
    """Two long rows of one group carry different values for the same label."""
    
    def __init__(self, label: str, key: tuple, first, second):
        super().__init__(
            f"Conflicting values for {label} in group {key}: {first!r} vs {second!r}"
        )
        self.label = label
        self.key = key

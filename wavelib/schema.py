"""
Column-name conventions for wide waveform tables.

Value columns are named ``t=<time>``; every other column is a metadata
field. The header is parsed once into a TableSchema that later operations
consume.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Union

from .errors import MalformedLabelError

Number = Union[int, float]

TIME_PREFIX = "t="

# Column names of the long form
LONG_COLUMNS = ("time", "value")


def _as_number(value: float) -> Number:
    """Return an int for integral values, else the float itself."""
    if value.is_integer():
        return int(value)
    return value


def is_timepoint_label(name: str) -> bool:
    """Return True if a column name follows the ``t=<time>`` convention."""
    return isinstance(name, str) and name.strip().startswith(TIME_PREFIX)


def parse_label(label: str) -> Number:
    """
    Decode the time encoded in a timepoint label.
    
    Args:
        label: Column name such as ``"t=10"``
    
    Returns:
        Time value, as int when integral
    
    Raises:
        MalformedLabelError: If the label lacks the prefix or the suffix
            is not a finite number
    """
    if not is_timepoint_label(label):
        raise MalformedLabelError(label)
    
    suffix = label.strip()[len(TIME_PREFIX):].strip()
    try:
        value = float(suffix)
    except ValueError:
        raise MalformedLabelError(label)
    
    if not math.isfinite(value):
        raise MalformedLabelError(label)
    
    return _as_number(value)


def make_label(time: Number) -> str:
    """Encode a time value as a ``t=<time>`` label."""
    value = float(time)
    if not math.isfinite(value):
        raise ValueError(f"Time must be finite, got {time!r}")
    return f"{TIME_PREFIX}{_as_number(value)}"


@dataclass(frozen=True)
class TableSchema:
    """
    Column layout shared by every row of a waveform table.
    
    Attributes:
        metadata_fields: Metadata column names in column order
        timepoints: Numeric times of the value columns in column order
    """
    metadata_fields: tuple[str, ...] = ()
    timepoints: tuple[Number, ...] = ()
    
    def __post_init__(self):
        object.__setattr__(self, "metadata_fields", tuple(self.metadata_fields))
        object.__setattr__(self, "timepoints", tuple(self.timepoints))
        
        if len(set(self.metadata_fields)) != len(self.metadata_fields):
            raise ValueError(f"Duplicate metadata fields: {self.metadata_fields}")
        if len(set(self.timepoints)) != len(self.timepoints):
            raise ValueError(f"Duplicate timepoints: {self.timepoints}")
        if list(self.timepoints) != sorted(self.timepoints):
            raise ValueError(f"Timepoints must be ascending: {self.timepoints}")
        
        clash = [f for f in self.metadata_fields if is_timepoint_label(f)]
        if clash:
            raise ValueError(f"Metadata fields may not use the time prefix: {clash}")
        
        reserved = [f for f in self.metadata_fields if f in LONG_COLUMNS]
        if reserved:
            raise ValueError(f"Metadata fields may not be named {reserved}")
    
    @property
    def labels(self) -> list[str]:
        """Return the value-column labels in column order."""
        return [make_label(t) for t in self.timepoints]
    
    @property
    def columns(self) -> list[str]:
        """Return the full header: metadata fields, then labels."""
        return list(self.metadata_fields) + self.labels


def infer_schema(columns: Iterable[str]) -> TableSchema:
    """
    Split a header into metadata fields and timepoints.
    
    Args:
        columns: Column names in header order
    
    Returns:
        TableSchema with order preserved on both sides
    
    Raises:
        MalformedLabelError: If a ``t=`` column has a non-numeric suffix
        ValueError: If a field or timepoint appears twice
    """
    metadata_fields = []
    timepoints = []
    for name in columns:
        if is_timepoint_label(name):
            timepoints.append(parse_label(name))
        else:
            metadata_fields.append(str(name).strip())
    
    return TableSchema(tuple(metadata_fields), tuple(timepoints))

"""
In-memory waveform tables.

A run's (time, value) series is flattened into one wide row; rows that share
a schema are assembled into a WaveformTable.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

import numpy as np
import pandas as pd

from .errors import ConfigurationError, SchemaMismatchError
from .schema import (
    Number, TableSchema, infer_schema, is_timepoint_label, make_label, parse_label
)


@dataclass
class WideRow:
    """
    One experimental run in wide form.
    
    Attributes:
        metadata: Ordered mapping of metadata field -> value
        values: Ordered mapping of timepoint label -> response value
    """
    metadata: dict = field(default_factory=dict)
    values: dict[str, float] = field(default_factory=dict)
    
    @property
    def labels(self) -> list[str]:
        """Return timepoint labels in row order."""
        return list(self.values.keys())


@dataclass
class LongRow:
    """One (run, timepoint) observation."""
    metadata: dict
    time: Number
    value: float


@dataclass
class WaveformTable:
    """
    Ordered wide rows sharing one schema.
    
    Attributes:
        schema: Metadata fields and timepoints common to all rows
        rows: Wide rows in insertion order
    """
    schema: TableSchema = field(default_factory=TableSchema)
    rows: list[WideRow] = field(default_factory=list)
    
    def __len__(self) -> int:
        return len(self.rows)
    
    def __iter__(self) -> Iterator[WideRow]:
        return iter(self.rows)
    
    @property
    def n_timepoints(self) -> int:
        """Return number of value columns."""
        return len(self.schema.timepoints)
    
    @property
    def metadata_fields(self) -> list[str]:
        """Return metadata field names in column order."""
        return list(self.schema.metadata_fields)
    
    def to_frame(self) -> pd.DataFrame:
        """Return the table as a wide DataFrame in schema column order."""
        records = [{**row.metadata, **row.values} for row in self.rows]
        return pd.DataFrame(records, columns=self.schema.columns)
    
    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "WaveformTable":
        """
        Build a table from a wide DataFrame.
        
        Columns named ``t=<time>`` become value columns; all others are
        metadata. Cells are converted to plain Python scalars.
        """
        schema = infer_schema(df.columns)
        labels = schema.labels
        
        value_columns = [c for c in df.columns if is_timepoint_label(c)]
        metadata_columns = [c for c in df.columns if not is_timepoint_label(c)]
        
        rows = []
        for record in df.to_dict("records"):
            metadata = {
                str(col).strip(): _to_python(record[col]) for col in metadata_columns
            }
            values = {
                label: float(record[col]) for label, col in zip(labels, value_columns)
            }
            rows.append(WideRow(metadata=metadata, values=values))
        
        if not rows:
            return cls(schema=schema, rows=[])
        return assemble_table(rows)


def _to_python(value):
    """Unwrap numpy scalars so metadata compares as plain values."""
    if isinstance(value, np.generic):
        return value.item()
    return value


def flatten_run(
    series: Iterable[tuple[Number, float]],
    metadata: dict,
    required_fields: Optional[Iterable[str]] = None,
) -> WideRow:
    """
    Flatten one run's time series into a wide row.
    
    Args:
        series: Ordered (time, value) pairs of a single run
        metadata: Run attributes, copied in their own order
        required_fields: Field names the metadata must contain
    
    Returns:
        WideRow keyed by ``t=<time>`` labels in series order
    
    Raises:
        ConfigurationError: If a required field is missing from metadata
        ValueError: If the series is empty or repeats a timepoint
    """
    for name in required_fields or ():
        if name not in metadata:
            raise ConfigurationError(
                f"Run metadata is missing required field '{name}'", field=name
            )
    
    values = {}
    for time, value in series:
        label = make_label(time)
        if label in values:
            raise ValueError(f"Duplicate timepoint {label} in run {metadata}")
        values[label] = float(value)
    
    if not values:
        raise ValueError(f"Run series is empty: {metadata}")
    
    return WideRow(metadata=dict(metadata), values=values)


def assemble_table(rows: Iterable[WideRow]) -> WaveformTable:
    """
    Concatenate wide rows into a table, checking they share one schema.
    
    The first row defines the metadata field order and the timepoint labels,
    which must be ascending in time. Later rows must carry the same metadata
    field set and the same labels in the same order. Row order is preserved.
    
    Args:
        rows: Wide rows in output order
    
    Returns:
        WaveformTable owning normalized copies of the rows
    
    Raises:
        SchemaMismatchError: Naming the first row that diverges
    """
    rows = list(rows)
    if not rows:
        return WaveformTable()
    
    first = rows[0]
    fields = tuple(first.metadata.keys())
    timepoints = tuple(parse_label(label) for label in first.values)
    try:
        schema = TableSchema(fields, timepoints)
    except ValueError as e:
        raise SchemaMismatchError(f"Row 0 defines an invalid schema: {e}", row_index=0)
    labels = schema.labels
    
    assembled = []
    for i, row in enumerate(rows):
        if set(row.metadata.keys()) != set(fields):
            raise SchemaMismatchError(
                f"Row {i} metadata fields {sorted(row.metadata)} "
                f"differ from {sorted(fields)}",
                row_index=i,
            )
        
        row_labels = [make_label(parse_label(label)) for label in row.values]
        if row_labels != labels:
            raise SchemaMismatchError(
                f"Row {i} timepoint labels {row_labels} differ from {labels}",
                row_index=i,
            )
        
        assembled.append(WideRow(
            metadata={name: row.metadata[name] for name in fields},
            values=dict(zip(labels, row.values.values())),
        ))
    
    return WaveformTable(schema=schema, rows=assembled)

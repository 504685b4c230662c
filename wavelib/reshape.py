"""
Wide/long reshaping for waveform tables.

Wide tables hold one row per run; long (tidy) form holds one row per
(run, timepoint) pair with metadata repeated, which is what the plotting
functions consume.
"""

import math
from typing import Iterable, Optional, Union

import pandas as pd

from .errors import AmbiguousGroupingError, SchemaMismatchError
from .schema import LONG_COLUMNS, Number, is_timepoint_label, make_label, parse_label
from .table import LongRow, WaveformTable, WideRow, assemble_table

TimeBound = Union[Number, str]


def _bound_value(bound: TimeBound) -> Number:
    """Accept either a number or a ``t=`` label as a range bound."""
    if isinstance(bound, str) and is_timepoint_label(bound):
        return parse_label(bound)
    return float(bound)


def resolve_time_range(
    time_range: Optional[tuple[TimeBound, TimeBound]],
) -> Optional[tuple[Number, Number]]:
    """
    Normalize an inclusive (start, end) range to numeric times.
    
    Raises:
        ValueError: If start is after end
    """
    if time_range is None:
        return None
    
    start, end = (_bound_value(b) for b in time_range)
    if start > end:
        raise ValueError(f"Time range start {start} is after end {end}")
    return start, end


def wide_to_long(
    table: WaveformTable,
    time_range: Optional[tuple[TimeBound, TimeBound]] = None,
) -> list[LongRow]:
    """
    Expand each wide row into one long row per timepoint.
    
    Output order is row order, then label order within each row.
    
    Args:
        table: Table to reshape
        time_range: Optional inclusive (start, end) restriction, given as
            numbers or ``t=`` labels and compared by numeric time
    
    Returns:
        List of LongRow with metadata copied from the parent row
    
    Raises:
        MalformedLabelError: If a label's suffix is not numeric
        ValueError: If the range start is after its end
    """
    bounds = resolve_time_range(time_range)
    
    long_rows = []
    for row in table.rows:
        for label, value in row.values.items():
            time = parse_label(label)
            if bounds is not None and not (bounds[0] <= time <= bounds[1]):
                continue
            long_rows.append(LongRow(metadata=dict(row.metadata), time=time, value=value))
    
    return long_rows


def _same_value(a: float, b: float) -> bool:
    """Compare response values, treating two NaNs as equal."""
    if isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
        return True
    return a == b


def long_to_wide(
    rows: Iterable[LongRow],
    metadata_fields: Optional[Iterable[str]] = None,
) -> WaveformTable:
    """
    Group long rows back into wide rows.
    
    Rows with equal values on every metadata field form one group. Groups are
    emitted in the order their first member appears; labels inside a group
    are sorted by time. Exact duplicates collapse, conflicting ones fail.
    
    Args:
        rows: Long rows to group
        metadata_fields: Grouping fields (default: the first row's fields)
    
    Returns:
        WaveformTable with one row per group
    
    Raises:
        AmbiguousGroupingError: If one group has two values for one label
        SchemaMismatchError: If rows or groups disagree on fields or timepoints
    """
    rows = list(rows)
    if not rows:
        return WaveformTable()
    
    if metadata_fields is None:
        fields = tuple(rows[0].metadata.keys())
    else:
        fields = tuple(metadata_fields)
    
    groups: dict[tuple, dict] = {}
    for i, row in enumerate(rows):
        if set(row.metadata.keys()) != set(fields):
            raise SchemaMismatchError(
                f"Long row {i} metadata fields {sorted(row.metadata)} "
                f"differ from {sorted(fields)}",
                row_index=i,
            )
        
        key = tuple(row.metadata[name] for name in fields)
        group = groups.setdefault(key, {})
        
        label = make_label(row.time)
        if label in group and not _same_value(group[label][1], row.value):
            raise AmbiguousGroupingError(label, key, group[label][1], row.value)
        group.setdefault(label, (row.time, float(row.value)))
    
    wide_rows = []
    for key, group in groups.items():
        ordered = sorted(group.items(), key=lambda item: item[1][0])
        wide_rows.append(WideRow(
            metadata=dict(zip(fields, key)),
            values={label: value for label, (_, value) in ordered},
        ))
    
    return assemble_table(wide_rows)


def long_frame(rows: Iterable[LongRow]) -> pd.DataFrame:
    """Return long rows as a tidy DataFrame: metadata, then time and value."""
    rows = list(rows)
    fields = list(rows[0].metadata.keys()) if rows else []
    
    reserved = [f for f in fields if f in LONG_COLUMNS]
    if reserved:
        raise ValueError(f"Metadata fields may not be named {reserved}")
    
    records = [{**row.metadata, "time": row.time, "value": row.value} for row in rows]
    return pd.DataFrame(records, columns=fields + list(LONG_COLUMNS))


def to_long_frame(
    table: WaveformTable,
    time_range: Optional[tuple[TimeBound, TimeBound]] = None,
) -> pd.DataFrame:
    """
    Reshape a table straight to a tidy DataFrame.
    
    Same rows, order and range semantics as wide_to_long, built with
    DataFrame.melt on the wide frame.
    """
    bounds = resolve_time_range(time_range)
    fields = table.metadata_fields
    
    long_df = table.to_frame().melt(
        id_vars=fields, var_name="time", value_name="value", ignore_index=False
    )
    # melt stacks column by column; restore run order, then label order
    long_df = long_df.sort_index(kind="stable").reset_index(drop=True)
    long_df["time"] = long_df["time"].map(parse_label)
    
    if bounds is not None:
        long_df = long_df[long_df["time"].between(*bounds)].reset_index(drop=True)
    
    return long_df[fields + list(LONG_COLUMNS)]

"""
Cosmetic display attributes derived from a numeric metadata field.

Maps a field such as the decay setting to line alpha, width and style so
plots can encode it without a legend per run.
"""

import numpy as np
import pandas as pd

from .schema import TableSchema
from .table import WaveformTable, WideRow

ALPHA_RANGE = (0.3, 1.0)
LINEWIDTH_RANGE = (0.75, 3.0)
LINESTYLES = ["-", "--", ":", "-."]

DISPLAY_COLUMNS = ("alpha", "linewidth", "linestyle")


def display_attributes(value: float, lo: float, hi: float, rank: int = 0) -> dict:
    """
    Derive display attributes for one value.
    
    Args:
        value: Field value for the row
        lo: Smallest value of the field across the data
        hi: Largest value of the field across the data
        rank: Position of value among the field's distinct sorted values
    
    Returns:
        Dict with 'alpha', 'linewidth' and 'linestyle'
    """
    frac = (value - lo) / (hi - lo) if hi > lo else 1.0
    return {
        "alpha": round(ALPHA_RANGE[0] + frac * (ALPHA_RANGE[1] - ALPHA_RANGE[0]), 3),
        "linewidth": round(
            LINEWIDTH_RANGE[0] + frac * (LINEWIDTH_RANGE[1] - LINEWIDTH_RANGE[0]), 3
        ),
        "linestyle": LINESTYLES[rank % len(LINESTYLES)],
    }


def _scale(values) -> tuple[float, float, list]:
    """Return (lo, hi, distinct sorted levels) of a numeric field."""
    levels = sorted(set(values))
    if not levels:
        return 0.0, 0.0, []
    return float(levels[0]), float(levels[-1]), levels


def add_display_columns(df: pd.DataFrame, field: str = "decay") -> pd.DataFrame:
    """
    Append display columns to a wide or long DataFrame.
    
    Args:
        df: Frame holding a numeric column named by field
        field: Column to derive the attributes from
    
    Returns:
        Copy of df with 'alpha', 'linewidth' and 'linestyle' columns
    """
    if field not in df.columns:
        raise KeyError(f"Column '{field}' not found")
    
    values = pd.to_numeric(df[field])
    lo, hi, levels = _scale(values.dropna().tolist())
    
    attrs = [
        display_attributes(v, lo, hi, levels.index(v))
        if not np.isnan(v) else {"alpha": np.nan, "linewidth": np.nan, "linestyle": None}
        for v in values
    ]
    
    result = df.copy()
    for name in DISPLAY_COLUMNS:
        result[name] = [a[name] for a in attrs]
    return result


def with_display_attributes(table: WaveformTable, field: str = "decay") -> WaveformTable:
    """
    Return a new table with display attributes appended as metadata fields.
    
    The value columns are left untouched.
    """
    if field not in table.metadata_fields:
        raise KeyError(f"Metadata field '{field}' not found")
    
    lo, hi, levels = _scale(row.metadata[field] for row in table.rows)
    
    rows = []
    for row in table.rows:
        value = row.metadata[field]
        metadata = dict(row.metadata)
        metadata.update(display_attributes(value, lo, hi, levels.index(value)))
        rows.append(WideRow(metadata=metadata, values=dict(row.values)))
    
    schema = TableSchema(
        tuple(table.metadata_fields) + DISPLAY_COLUMNS, table.schema.timepoints
    )
    return WaveformTable(schema=schema, rows=rows)

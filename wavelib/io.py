"""
Data I/O utilities for saving and loading wide waveform tables.

Tables are stored as CSV: metadata columns first, then ``t=<time>`` value
columns. Column types are re-inferred on load by pandas, one whole column
at a time.
"""

from pathlib import Path
from typing import Union

import numpy as np
import pandas as pd

from .schema import infer_schema, is_timepoint_label
from .table import WaveformTable

PathLike = Union[str, Path]


def write_table(table: WaveformTable, csv_path: PathLike) -> Path:
    """
    Write a table to CSV.
    
    A table without columns is written as an empty file.
    
    Args:
        table: Table to serialize
        csv_path: Destination file; parent directories are created
    
    Returns:
        Path of the written file
    """
    csv_path = Path(csv_path)
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    
    if not table.schema.columns:
        csv_path.write_text("")
        return csv_path
    
    table.to_frame().to_csv(csv_path, index=False)
    
    return csv_path


def read_table(csv_path: PathLike) -> WaveformTable:
    """
    Load a table from CSV.
    
    Metadata column types are inferred by pandas over the whole column:
    numeric only if every non-empty cell is a number, otherwise text.
    Value columns are read as floats; empty cells become NaN.
    
    Args:
        csv_path: Path to the table CSV file
    
    Returns:
        WaveformTable with schema recovered from the header; an empty
        file gives an empty table
    
    Raises:
        FileNotFoundError: If CSV file doesn't exist
        ValueError: If CSV is malformed or repeats a column name
        MalformedLabelError: If a ``t=`` column has a non-numeric suffix
        SchemaMismatchError: If rows disagree on the schema
    """
    csv_path = Path(csv_path)
    
    if not csv_path.exists():
        raise FileNotFoundError(f"Table file not found: {csv_path}")
    
    # Header is read as data so duplicate names are not silently renamed
    try:
        header = pd.read_csv(csv_path, header=None, nrows=1, dtype=str,
                             keep_default_na=False)
    except pd.errors.EmptyDataError:
        return WaveformTable()
    except Exception as e:
        raise ValueError(f"Failed to parse CSV {csv_path}: {e}")
    
    names = header.iloc[0].tolist()
    columns = [str(c).strip() for c in names]
    duplicates = sorted({c for c in columns if columns.count(c) > 1})
    if duplicates:
        raise ValueError(f"Duplicate columns {duplicates} in {csv_path}")
    
    # Fails early on malformed labels or out-of-order timepoints
    infer_schema(columns)
    
    value_dtypes = {name: float for name in names if is_timepoint_label(name)}
    try:
        frame = pd.read_csv(
            csv_path,
            dtype=value_dtypes,
            keep_default_na=False,
            na_values=[""],
            low_memory=False,  # one dtype per column, not per chunk
        )
    except Exception as e:
        raise ValueError(f"Failed to parse CSV {csv_path}: {e}")
    
    frame.columns = columns
    
    return WaveformTable.from_frame(frame)


def discover_tables(data_dir: PathLike) -> list[Path]:
    """
    Discover all table CSV files in a directory.
    
    Args:
        data_dir: Directory to search for table files
    
    Returns:
        List of paths to CSV files, sorted by name
    """
    data_dir = Path(data_dir)
    
    if not data_dir.exists():
        return []
    
    return sorted(data_dir.glob("*.csv"))


def load_tables(data_dir: PathLike) -> dict[str, WaveformTable]:
    """
    Load all tables from a directory.
    
    Files that fail to load are reported and skipped.
    
    Args:
        data_dir: Directory containing table files
    
    Returns:
        Dict mapping file stem -> WaveformTable, in name order
    """
    tables = {}
    for path in discover_tables(data_dir):
        try:
            tables[path.stem] = read_table(path)
        except (ValueError, FileNotFoundError) as e:
            print(f"Warning: Skipping {path}: {e}")
    
    return tables


def get_table_info(table: WaveformTable) -> dict:
    """
    Get summary information about a table.
    
    Args:
        table: Table to summarize
    
    Returns:
        Dictionary with table statistics
    """
    timepoints = table.schema.timepoints
    info = {
        "n_runs": len(table),
        "n_timepoints": table.n_timepoints,
        "metadata_fields": table.metadata_fields,
        "time_range": (min(timepoints), max(timepoints)) if timepoints else (None, None),
        "value_range": (None, None),
        "levels": {},
    }
    
    if not table.rows:
        return info
    
    values = np.array([list(row.values.values()) for row in table.rows], dtype=float)
    if np.any(~np.isnan(values)):
        info["value_range"] = (float(np.nanmin(values)), float(np.nanmax(values)))
    
    for name in table.metadata_fields:
        levels = []
        for row in table.rows:
            if row.metadata[name] not in levels:
                levels.append(row.metadata[name])
        info["levels"][name] = levels
    
    return info

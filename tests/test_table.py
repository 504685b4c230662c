"""
Tests for row flattening and table assembly.
"""

import math

import numpy as np
import pandas as pd
import pytest

from wavelib.errors import ConfigurationError, SchemaMismatchError
from wavelib.table import WaveformTable, WideRow, assemble_table, flatten_run


def make_row(day="Day 1", batch=1234, decay=20, times=(0, 10, 20)):
    series = [(t, math.exp(-t / decay)) for t in times]
    return flatten_run(series, {"day": day, "batch": batch, "decay": decay})


class TestFlattenRun:
    """Test flattening a run series into a wide row."""
    
    def test_labels_follow_series_order(self):
        row = flatten_run([(0, 1.0), (10, 0.5), (20, 0.25)], {"day": "Day 1"})
        assert row.labels == ["t=0", "t=10", "t=20"]
        assert row.values["t=10"] == 0.5
    
    def test_metadata_copied(self):
        metadata = {"day": "Day 1", "batch": 1234}
        row = flatten_run([(0, 1.0)], metadata)
        assert row.metadata == metadata
        metadata["day"] = "Day 9"
        assert row.metadata["day"] == "Day 1"
    
    def test_missing_required_field(self):
        """Missing required metadata raises ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc:
            flatten_run([(0, 1.0)], {"day": "Day 1"}, required_fields=["day", "decay"])
        assert exc.value.field == "decay"
    
    def test_empty_series(self):
        with pytest.raises(ValueError):
            flatten_run([], {"day": "Day 1"})
    
    def test_duplicate_timepoint(self):
        with pytest.raises(ValueError):
            flatten_run([(0, 1.0), (0, 0.9)], {"day": "Day 1"})
    
    def test_numpy_inputs(self):
        t = np.array([0.0, 10.0])
        v = np.array([1.0, 0.5])
        row = flatten_run(zip(t, v), {"day": "Day 1"})
        assert row.labels == ["t=0", "t=10"]
        assert isinstance(row.values["t=0"], float)


class TestAssembleTable:
    """Test table assembly and schema enforcement."""
    
    def test_preserves_row_order(self):
        rows = [make_row(batch=5678), make_row(batch=1234), make_row(batch=9012)]
        table = assemble_table(rows)
        assert [r.metadata["batch"] for r in table] == [5678, 1234, 9012]
        assert len(table) == 3
        assert table.n_timepoints == 3
    
    def test_schema_from_first_row(self):
        table = assemble_table([make_row()])
        assert table.metadata_fields == ["day", "batch", "decay"]
        assert table.schema.timepoints == (0, 10, 20)
    
    def test_mismatched_timepoints(self):
        """Mismatched label sets raise and name the divergent row."""
        rows = [make_row(), make_row(), make_row(times=(0, 10, 30))]
        with pytest.raises(SchemaMismatchError) as exc:
            assemble_table(rows)
        assert exc.value.row_index == 2
    
    def test_reordered_timepoints(self):
        rows = [make_row(), make_row(times=(10, 0, 20))]
        with pytest.raises(SchemaMismatchError):
            assemble_table(rows)
    
    def test_non_ascending_first_row(self):
        """Time order is enforced from the first row on."""
        rows = [make_row(times=(20, 0, 10)), make_row(times=(20, 0, 10))]
        with pytest.raises(SchemaMismatchError) as exc:
            assemble_table(rows)
        assert exc.value.row_index == 0
    
    def test_reserved_metadata_field(self):
        row = flatten_run([(0, 1.0), (10, 0.5)], {"day": "Day 1", "time": "am"})
        with pytest.raises(SchemaMismatchError):
            assemble_table([row])
    
    def test_mismatched_metadata(self):
        rows = [
            make_row(),
            WideRow(metadata={"day": "Day 1", "batch": 1}, values=make_row().values),
        ]
        with pytest.raises(SchemaMismatchError) as exc:
            assemble_table(rows)
        assert exc.value.row_index == 1
    
    def test_metadata_order_normalized(self):
        """Rows with the same fields in another order follow the first row."""
        other = WideRow(
            metadata={"decay": 10, "day": "Day 2", "batch": 1},
            values=make_row().values,
        )
        table = assemble_table([make_row(), other])
        assert list(table.rows[1].metadata) == ["day", "batch", "decay"]
    
    def test_empty(self):
        table = assemble_table([])
        assert len(table) == 0
        assert table.n_timepoints == 0


class TestFrameConversion:
    """Test DataFrame conversion of tables."""
    
    def test_to_frame_columns(self):
        table = assemble_table([make_row(), make_row(day="Day 2")])
        df = table.to_frame()
        assert list(df.columns) == ["day", "batch", "decay", "t=0", "t=10", "t=20"]
        assert len(df) == 2
    
    def test_from_frame_round_trip(self):
        table = assemble_table([make_row(), make_row(day="Day 2", decay=5)])
        restored = WaveformTable.from_frame(table.to_frame())
        assert restored == table
    
    def test_from_frame_plain_scalars(self):
        df = pd.DataFrame({"batch": [1234], "t=0": [1.0]})
        table = WaveformTable.from_frame(df)
        assert type(table.rows[0].metadata["batch"]) is int

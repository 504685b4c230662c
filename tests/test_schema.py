"""
Tests for timepoint label parsing and schema inference.
"""

import pytest

from wavelib.errors import MalformedLabelError
from wavelib.schema import (
    TableSchema,
    infer_schema,
    is_timepoint_label,
    make_label,
    parse_label,
)


class TestLabels:
    """Test timepoint label encoding and decoding."""
    
    def test_parse_integer_label(self):
        """Integral suffixes decode to int."""
        assert parse_label("t=10") == 10
        assert isinstance(parse_label("t=10"), int)
    
    def test_parse_fractional_label(self):
        assert parse_label("t=2.5") == 2.5
    
    def test_parse_integral_float_label(self):
        """A trailing .0 still decodes to an int."""
        assert parse_label("t=10.0") == 10
    
    def test_parse_non_numeric_suffix(self):
        """Non-numeric suffix raises MalformedLabelError."""
        with pytest.raises(MalformedLabelError) as exc:
            parse_label("t=abc")
        assert exc.value.label == "t=abc"
    
    def test_parse_empty_suffix(self):
        with pytest.raises(MalformedLabelError):
            parse_label("t=")
    
    def test_parse_non_finite_suffix(self):
        with pytest.raises(MalformedLabelError):
            parse_label("t=inf")
    
    def test_parse_without_prefix(self):
        with pytest.raises(MalformedLabelError):
            parse_label("10")
    
    def test_make_label(self):
        assert make_label(0) == "t=0"
        assert make_label(100.0) == "t=100"
        assert make_label(2.5) == "t=2.5"
    
    def test_is_timepoint_label(self):
        assert is_timepoint_label("t=10")
        assert not is_timepoint_label("day")
        assert not is_timepoint_label("time")


class TestTableSchema:
    """Test schema construction and header inference."""
    
    def test_columns_order(self):
        schema = TableSchema(("day", "batch"), (0, 10, 20))
        assert schema.labels == ["t=0", "t=10", "t=20"]
        assert schema.columns == ["day", "batch", "t=0", "t=10", "t=20"]
    
    def test_duplicate_timepoints(self):
        with pytest.raises(ValueError):
            TableSchema(("day",), (0, 10, 10))
    
    def test_duplicate_fields(self):
        with pytest.raises(ValueError):
            TableSchema(("day", "day"), (0,))
    
    def test_non_ascending_timepoints(self):
        with pytest.raises(ValueError):
            TableSchema(("day",), (20, 0, 10))
    
    def test_reserved_field_names(self):
        """Fields may not collide with the long-form columns."""
        for name in ["time", "value"]:
            with pytest.raises(ValueError):
                TableSchema((name, "day"), (0, 10))
    
    def test_infer_schema_splits_columns(self):
        """Metadata and value columns keep their header order."""
        schema = infer_schema(["day", "t=0", "batch", "t=10", "decay"])
        assert schema.metadata_fields == ("day", "batch", "decay")
        assert schema.timepoints == (0, 10)
    
    def test_infer_schema_malformed(self):
        with pytest.raises(MalformedLabelError):
            infer_schema(["day", "t=0", "t=ten"])
    
    def test_infer_schema_equivalent_labels(self):
        """t=10 and t=10.0 name the same timepoint."""
        with pytest.raises(ValueError):
            infer_schema(["day", "t=10", "t=10.0"])

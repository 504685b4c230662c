"""
Tests for synthetic decay data generation.
"""

import math

import numpy as np
import pytest

from wavelib.errors import ConfigurationError
from wavelib.io import read_table
from wavelib.synthetic import (
    DEFAULT_RUNS,
    DEFAULT_TIMES,
    decay_curve,
    generate_dataset,
    generate_run,
    generate_table,
    make_run_grid,
)


class TestDecayCurve:
    """Test the exponential decay model."""
    
    def test_starts_at_one(self):
        assert decay_curve(np.array([0.0]), 20)[0] == 1.0
    
    def test_values(self):
        t = np.array([0, 10, 100])
        assert np.allclose(decay_curve(t, 20), [1.0, math.exp(-0.5), math.exp(-5)])


class TestGenerateRun:
    """Test single-run generation."""
    
    def test_exact_series(self):
        series = generate_run({"decay": 10})
        assert [t for t, _ in series] == list(DEFAULT_TIMES)
        assert series[0][1] == 1.0
        assert np.isclose(series[-1][1], math.exp(-10))
    
    def test_noise_reproducible(self):
        a = generate_run({"decay": 10}, noise_sd=0.1, rng=np.random.default_rng(5))
        b = generate_run({"decay": 10}, noise_sd=0.1, rng=np.random.default_rng(5))
        assert a == b
        assert a != generate_run({"decay": 10})
    
    def test_non_positive_decay(self):
        with pytest.raises(ValueError):
            generate_run({"decay": 0})


class TestRunGrid:
    """Test random run grids."""
    
    def test_grid_shape(self):
        runs = make_run_grid(["Day 1", "Day 2", "Day 3"], [1, 2], np.random.default_rng(0))
        assert len(runs) == 6
        assert [(r["day"], r["batch"]) for r in runs[:2]] == [("Day 1", 1), ("Day 1", 2)]
        assert all(5 <= r["decay"] <= 25 for r in runs)
        assert all(isinstance(r["decay"], int) for r in runs)


class TestGenerateTable:
    """Test table generation."""
    
    def test_default_runs(self):
        table = generate_table()
        assert len(table) == 4
        assert table.n_timepoints == 11
        assert [r.metadata for r in table] == DEFAULT_RUNS
    
    def test_missing_required_field(self):
        with pytest.raises(ConfigurationError):
            generate_table(runs=[{"day": "Day 1", "decay": 10}])
    
    def test_seeded(self):
        assert generate_table(noise_sd=0.1, seed=4) == generate_table(noise_sd=0.1, seed=4)
    
    def test_generate_dataset(self, tmp_path, capsys):
        path = tmp_path / "tables" / "waveforms.csv"
        table = generate_dataset(path, seed=1)
        
        assert path.exists()
        assert read_table(path) == table
        assert "complete" in capsys.readouterr().out

"""
Synthetic decay-curve data generator.

Generates exponential decay waveforms sampled at fixed timepoints, one run
per (day, batch, decay setting), with optional measurement noise.
"""

from pathlib import Path
from typing import Iterable, Optional, Sequence

import numpy as np

from .io import write_table
from .table import WaveformTable, assemble_table, flatten_run


# Metadata every generated run carries, in column order
RUN_FIELDS = ("day", "batch", "decay")

# Reference runs: decay settings in ms
DEFAULT_RUNS = [
    {"day": "Day 1", "batch": 1234, "decay": 20},
    {"day": "Day 1", "batch": 5678, "decay": 10},
    {"day": "Day 2", "batch": 1234, "decay": 15},
    {"day": "Day 2", "batch": 5678, "decay": 5},
]

# Sample times in ms
DEFAULT_TIMES = tuple(range(0, 101, 10))


def decay_curve(t: np.ndarray, decay: float) -> np.ndarray:
    """Return exp(-t / decay)."""
    return np.exp(-np.asarray(t, dtype=float) / decay)


def generate_run(
    metadata: dict,
    times: Sequence[float] = DEFAULT_TIMES,
    noise_sd: float = 0.0,
    rng: Optional[np.random.Generator] = None,
) -> list[tuple[float, float]]:
    """
    Generate one run's (time, value) series.
    
    Args:
        metadata: Run metadata; must hold a positive 'decay'
        times: Sample times in ms
        noise_sd: Standard deviation of additive Gaussian noise
        rng: Random number generator, required when noise_sd > 0
    
    Returns:
        List of (time, value) pairs in time order
    """
    decay = metadata["decay"]
    if decay <= 0:
        raise ValueError(f"Decay setting must be positive, got {decay}")
    
    values = decay_curve(times, decay)
    
    if noise_sd > 0:
        if rng is None:
            rng = np.random.default_rng()
        values = values + rng.normal(0, noise_sd, len(values))
    
    return [(t, float(v)) for t, v in zip(times, values)]


def make_run_grid(
    days: Iterable[str],
    batches: Iterable[int],
    rng: np.random.Generator,
    decay_range: tuple[int, int] = (5, 25),
) -> list[dict]:
    """
    Build run metadata for every day x batch pair with a random decay.
    
    Args:
        days: Day labels
        batches: Batch identifiers
        rng: Random number generator
        decay_range: Inclusive range of integer decay settings in ms
    
    Returns:
        List of metadata dicts, days outermost
    """
    batches = list(batches)
    runs = []
    for day in days:
        for batch in batches:
            decay = int(rng.integers(decay_range[0], decay_range[1] + 1))
            runs.append({"day": day, "batch": batch, "decay": decay})
    return runs


def generate_table(
    runs: Optional[list[dict]] = None,
    times: Sequence[float] = DEFAULT_TIMES,
    noise_sd: float = 0.0,
    seed: Optional[int] = None,
) -> WaveformTable:
    """
    Generate a wide table with one row per run.
    
    Args:
        runs: Run metadata records (default: DEFAULT_RUNS)
        times: Sample times in ms shared by all runs
        noise_sd: Standard deviation of additive Gaussian noise
        seed: Random seed for reproducibility
    
    Returns:
        WaveformTable in run order
    """
    if runs is None:
        runs = DEFAULT_RUNS
    
    rng = np.random.default_rng(seed)
    
    rows = [
        flatten_run(
            generate_run(metadata, times, noise_sd=noise_sd, rng=rng),
            metadata,
            required_fields=RUN_FIELDS,
        )
        for metadata in runs
    ]
    
    return assemble_table(rows)


def generate_dataset(
    out_path: Path,
    runs: Optional[list[dict]] = None,
    times: Sequence[float] = DEFAULT_TIMES,
    noise_sd: float = 0.0,
    seed: Optional[int] = None,
) -> WaveformTable:
    """
    Generate a synthetic table and write it to CSV.
    
    Args:
        out_path: Output CSV path
        runs: Run metadata records (default: DEFAULT_RUNS)
        times: Sample times in ms
        noise_sd: Standard deviation of additive Gaussian noise
        seed: Random seed for reproducibility
    
    Returns:
        The generated table
    """
    out_path = Path(out_path)
    
    n_runs = len(runs) if runs is not None else len(DEFAULT_RUNS)
    print(f"Generating {n_runs} synthetic runs x {len(times)} timepoints")
    
    table = generate_table(runs=runs, times=times, noise_sd=noise_sd, seed=seed)
    write_table(table, out_path)
    
    print(f"Dataset generation complete: {out_path}")
    return table

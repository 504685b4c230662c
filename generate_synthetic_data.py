#!/usr/bin/env python3
"""
Synthetic decay-waveform table generator CLI.

Generates exponential decay curves sampled at 0, 10, ..., 100 ms, one wide
CSV row per run (day, batch, decay setting), with optional noise.

Usage:
    python generate_synthetic_data.py --out data/tables/waveforms.csv --seed 123
"""

import argparse
from pathlib import Path

import numpy as np

from wavelib.io import get_table_info
from wavelib.reshape import wide_to_long
from wavelib.synthetic import generate_dataset, make_run_grid


def main():
    parser = argparse.ArgumentParser(
        description="Generate a synthetic wide waveform table for testing and demonstration.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python generate_synthetic_data.py
    python generate_synthetic_data.py --noise_sd 0.02 --seed 42
    python generate_synthetic_data.py --n_days 3 --batches 1234 5678 9012 --seed 7

The generator creates:
    - One CSV file with metadata columns (day, batch, decay) followed by
      value columns t=0 ... t=100
    - By default the four reference runs; with --n_days a random decay
      setting for every day x batch pair
        """
    )
    
    parser.add_argument(
        "--out", "-o",
        type=str,
        default="data/tables/waveforms.csv",
        help="Output CSV path (default: data/tables/waveforms.csv)"
    )
    
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducibility (default: random)"
    )
    
    parser.add_argument(
        "--noise_sd",
        type=float,
        default=0.0,
        help="Standard deviation of additive noise (default: 0, exact curves)"
    )
    
    parser.add_argument(
        "--n_days", "-d",
        type=int,
        default=None,
        help="Generate a random run grid over this many days (default: reference runs)"
    )
    
    parser.add_argument(
        "--batches", "-b",
        type=int,
        nargs="+",
        default=[1234, 5678],
        help="Batch identifiers for the random run grid (default: 1234 5678)"
    )
    
    args = parser.parse_args()
    
    out_path = Path(args.out)
    
    runs = None
    if args.n_days is not None:
        rng = np.random.default_rng(args.seed)
        days = [f"Day {i}" for i in range(1, args.n_days + 1)]
        runs = make_run_grid(days, args.batches, rng)
    
    print(f"Generating synthetic waveform table...")
    print(f"  Output: {out_path.absolute()}")
    print(f"  Noise SD: {args.noise_sd}")
    print(f"  Seed: {args.seed if args.seed is not None else 'random'}")
    print()
    
    table = generate_dataset(
        out_path=out_path,
        runs=runs,
        noise_sd=args.noise_sd,
        seed=args.seed,
    )
    
    info = get_table_info(table)
    print()
    print(f"  Runs: {info['n_runs']}")
    print(f"  Timepoints: {info['n_timepoints']} ({info['time_range'][0]}-{info['time_range'][1]} ms)")
    print(f"  Long rows: {len(wide_to_long(table))}")
    print()
    print("Done! You can now run the dashboard:")
    print("    streamlit run app.py")


if __name__ == "__main__":
    main()

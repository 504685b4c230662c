"""
Waveform Table Library - Wide/long tables for multi-point waveform data.

This package provides tools for building, saving, loading, reshaping, and
visualizing per-run decay waveforms stored as wide CSV rows.
"""

__version__ = "0.1.0"

"""
Plotting utilities for waveform visualization.

Provides faceted line plots of long-form data and a heatmap of wide tables.
"""

from typing import Optional

import matplotlib.pyplot as plt
import matplotlib.colors as mcolors
import numpy as np
import pandas as pd

from .styling import DISPLAY_COLUMNS
from .table import WaveformTable


# Consistent color palette for runs
RUN_COLORS = list(mcolors.TABLEAU_COLORS.values())


def get_color(index: int) -> str:
    """Get consistent color by level index."""
    return RUN_COLORS[index % len(RUN_COLORS)]


def _levels(series: pd.Series) -> list:
    """Distinct values in first-appearance order."""
    return list(dict.fromkeys(series.tolist()))


def plot_waveforms(
    long_df: pd.DataFrame,
    color_by: Optional[str] = "batch",
    facet_by: Optional[str] = "day",
    use_display_columns: bool = True,
    show_points: bool = True,
    title: Optional[str] = None,
    xlabel: str = "Time (ms)",
    ylabel: str = "Response",
    figsize: Optional[tuple[float, float]] = None,
) -> plt.Figure:
    """
    Create faceted line plots of long-form waveforms.
    
    One line is drawn per run, where a run is a distinct combination of the
    metadata columns (every column except time, value and display columns).
    
    Args:
        long_df: Tidy frame with metadata columns, 'time' and 'value'
        color_by: Metadata column mapped to line color
        facet_by: Metadata column split into side-by-side panels
        use_display_columns: Apply 'alpha', 'linewidth' and 'linestyle'
            columns when present
        show_points: Draw markers at the samples
        title: Figure title
        xlabel: X-axis label
        ylabel: Y-axis label
        figsize: Figure size (default scales with facet count)
    
    Returns:
        matplotlib Figure
    """
    for col in ("time", "value"):
        if col not in long_df.columns:
            raise ValueError(f"Long frame must have '{col}' column")
    
    run_fields = [
        c for c in long_df.columns
        if c not in ("time", "value") and c not in DISPLAY_COLUMNS
    ]
    
    facets = _levels(long_df[facet_by]) if facet_by else [None]
    color_levels = _levels(long_df[color_by]) if color_by else []
    
    if figsize is None:
        figsize = (5 * len(facets), 4)
    
    fig, axes = plt.subplots(1, len(facets), figsize=figsize, sharey=True, squeeze=False)
    
    for ax, facet in zip(axes[0], facets):
        panel = long_df if facet is None else long_df[long_df[facet_by] == facet]
        
        # groupby sorts keys; keep first-appearance order of runs instead
        grouped = panel.groupby(run_fields, sort=False) if run_fields else [((), panel)]
        
        for key, run in grouped:
            run = run.sort_values("time")
            key = key if isinstance(key, tuple) else (key,)
            
            style = {"color": "steelblue", "alpha": 0.8, "linewidth": 1.5, "linestyle": "-"}
            if color_by:
                style["color"] = get_color(color_levels.index(run[color_by].iloc[0]))
            if use_display_columns:
                for col in DISPLAY_COLUMNS:
                    if col in run.columns and pd.notna(run[col].iloc[0]):
                        style[col] = run[col].iloc[0]
            
            label = ", ".join(
                f"{name}={val}" for name, val in zip(run_fields, key) if name != facet_by
            )
            
            ax.plot(run["time"], run["value"], label=label or None, **style)
            if show_points:
                ax.scatter(run["time"], run["value"], color=style["color"],
                           alpha=style["alpha"], s=15)
        
        ax.set_xlabel(xlabel)
        if facet is not None:
            ax.set_title(f"{facet_by} = {facet}")
        ax.grid(True, alpha=0.3)
        
        # Only show legend if reasonable number of entries
        if 0 < len(ax.get_legend_handles_labels()[1]) <= 10:
            ax.legend(loc='upper right', fontsize=8)
    
    axes[0][0].set_ylabel(ylabel)
    
    if title:
        fig.suptitle(title)
    
    fig.tight_layout()
    return fig


def plot_wide_table(
    table: WaveformTable,
    label_fields: Optional[list[str]] = None,
    title: str = "Wide Table",
    cmap: str = "viridis",
    ax: Optional[plt.Axes] = None,
    figsize: tuple[float, float] = (8, 4),
) -> plt.Figure:
    """
    Create a heatmap of a wide table: one row per run, one column per timepoint.
    
    Args:
        table: Table to draw
        label_fields: Metadata fields used for row labels (default: all)
        title: Plot title
        cmap: Colormap name
        ax: Existing axes
        figsize: Figure size if creating new figure
    
    Returns:
        matplotlib Figure
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure
    
    if label_fields is None:
        label_fields = table.metadata_fields
    
    matrix = np.array([list(row.values.values()) for row in table.rows], dtype=float)
    if matrix.size == 0:
        matrix = np.zeros((0, table.n_timepoints))
    
    image = ax.imshow(matrix, aspect="auto", cmap=cmap, interpolation="nearest")
    fig.colorbar(image, ax=ax, label="Response")
    
    ax.set_xticks(range(table.n_timepoints))
    ax.set_xticklabels(table.schema.labels, rotation=45, fontsize=8)
    ax.set_yticks(range(len(table)))
    ax.set_yticklabels(
        [" / ".join(str(row.metadata[f]) for f in label_fields) for row in table.rows],
        fontsize=8,
    )
    ax.set_title(title)
    
    fig.tight_layout()
    return fig


def save_figure(fig: plt.Figure, path: str, dpi: int = 150) -> None:
    """Save figure to file."""
    fig.savefig(path, dpi=dpi, bbox_inches='tight', facecolor='white')
    plt.close(fig)

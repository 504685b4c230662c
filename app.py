#!/usr/bin/env python3
"""
Waveform Table Explorer - Wide/Long Waveform Dashboard

A Streamlit-based mini-dashboard for viewing wide waveform tables, reshaping
them to long form, and plotting them with cosmetic encodings.
"""

import matplotlib
matplotlib.use('Agg')  # Set non-interactive backend before importing pyplot

import streamlit as st
import matplotlib.pyplot as plt
from pathlib import Path
from io import BytesIO

from wavelib.io import discover_tables, get_table_info, read_table
from wavelib.reshape import to_long_frame
from wavelib.styling import add_display_columns
from wavelib.plotting import plot_waveforms, plot_wide_table
from wavelib.table import WaveformTable

st.set_page_config(
    page_title="Waveform Table Explorer",
    layout="wide",
    initial_sidebar_state="expanded"
)


def show_fig(fig):
    """Convert matplotlib figure to PNG and display with st.image()."""
    buf = BytesIO()
    fig.savefig(buf, format='png', dpi=150, bbox_inches='tight', facecolor='white')
    buf.seek(0)
    st.image(buf, use_container_width=True)
    plt.close(fig)


@st.cache_data
def load_table_cached(csv_path: str):
    """Load and cache a table as a wide frame."""
    return read_table(Path(csv_path)).to_frame()


def main():
    st.title("Waveform Table Explorer")
    st.markdown("*Wide and long views of multi-point decay waveforms*")
    
    # Sidebar
    with st.sidebar:
        st.header("Data Selection")
        
        data_dir = st.text_input("Table folder", value="data/tables",
                                 help="Path to folder containing wide table CSV files")
        
        data_path = Path(data_dir)
        if not data_path.exists():
            data_path.mkdir(parents=True, exist_ok=True)
        
        # Auto-generate sample data if directory is empty
        if not discover_tables(data_path):
            st.info("No tables found. Generating sample table...")
            from wavelib.synthetic import generate_dataset
            generate_dataset(out_path=data_path / "waveforms.csv", seed=42)
            st.rerun()
        
        table_paths = discover_tables(data_path)
        selected_path = st.selectbox(
            "Table file",
            options=table_paths,
            format_func=lambda p: p.name,
        )
        
        try:
            table = WaveformTable.from_frame(load_table_cached(str(selected_path)))
        except Exception as e:
            st.error(f"Failed to load table: {e}")
            return
        
        info = get_table_info(table)
        st.success(f"Loaded {info['n_runs']} runs x {info['n_timepoints']} timepoints")
        
        if not table.rows:
            st.warning("Table has no rows")
            return
        
        st.divider()
        st.header("Time Range")
        
        timepoints = list(table.schema.timepoints)
        time_range = st.select_slider(
            "Timepoints (ms)",
            options=timepoints,
            value=(timepoints[0], timepoints[-1]),
        )
        
        st.divider()
        st.header("Plot Encoding")
        
        fields = table.metadata_fields
        color_by = st.selectbox("Color by", options=["None"] + fields,
                                index=fields.index("batch") + 1 if "batch" in fields else 0)
        facet_by = st.selectbox("Facet by", options=["None"] + fields,
                                index=fields.index("day") + 1 if "day" in fields else 0)
        
        numeric_fields = [
            f for f in fields
            if all(isinstance(v, (int, float)) for v in info["levels"][f])
        ]
        style_field = st.selectbox(
            "Alpha / line style / size by",
            options=["None"] + numeric_fields,
            index=numeric_fields.index("decay") + 1 if "decay" in numeric_fields else 0,
        )
        show_points = st.checkbox("Show sample points", value=True)
    
    color_by = None if color_by == "None" else color_by
    facet_by = None if facet_by == "None" else facet_by
    
    long_df = to_long_frame(table, time_range=time_range)
    if style_field != "None":
        long_df = add_display_columns(long_df, field=style_field)
    
    tab_wide, tab_long, tab_plot = st.tabs(["Wide Table", "Long Table", "Plot"])
    
    # --- Wide Table Tab ---
    with tab_wide:
        st.header("Wide Format")
        
        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Runs", info["n_runs"])
        with col2:
            st.metric("Timepoints", info["n_timepoints"])
        with col3:
            st.metric("Metadata Fields", len(fields))
        
        wide_df = table.to_frame()
        st.dataframe(wide_df, use_container_width=True)
        
        fig = plot_wide_table(table)
        show_fig(fig)
        
        st.download_button(
            "Download wide CSV",
            wide_df.to_csv(index=False),
            selected_path.name,
            "text/csv"
        )
    
    # --- Long Table Tab ---
    with tab_long:
        st.header("Long Format")
        st.caption(f"{len(long_df)} rows for t in [{time_range[0]}, {time_range[1]}] ms")
        
        st.dataframe(long_df, use_container_width=True)
        
        st.download_button(
            "Download long CSV",
            long_df.to_csv(index=False),
            f"{selected_path.stem}_long.csv",
            "text/csv"
        )
    
    # --- Plot Tab ---
    with tab_plot:
        st.header("Waveforms")
        
        fig = plot_waveforms(
            long_df,
            color_by=color_by,
            facet_by=facet_by,
            use_display_columns=style_field != "None",
            show_points=show_points,
        )
        show_fig(fig)


if __name__ == "__main__":
    main()

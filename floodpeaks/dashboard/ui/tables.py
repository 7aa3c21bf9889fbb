"""Peak event table."""

from __future__ import annotations

import pandas as pd
import streamlit as st
from streamlit import column_config as colcfg

_COL_LABELS = {"timestamp": "Time (UTC)", "value": "Level (ft)", "tier": "Tier"}

_COL_CONFIG = {
    "Time (UTC)": colcfg.DatetimeColumn("Time (UTC)", format="MMM DD, YYYY  HH:mm"),
    "Level (ft)": colcfg.NumberColumn("Level (ft)", format="%.3f"),
}


def render_peak_table(df: pd.DataFrame) -> None:
    """Sortable table of peaks, newest first."""
    if df.empty:
        st.info("No peaks to display.")
        return

    view = df[["timestamp", "value", "tier"]].sort_values("timestamp", ascending=False)
    view = view.rename(columns=_COL_LABELS)
    st.caption(f"Total peaks: {len(view)}")
    st.dataframe(
        view,
        hide_index=True,
        use_container_width=True,
        height=min(len(view) * 36 + 42, 600),
        column_config=_COL_CONFIG,
        key="tbl_peaks",
    )

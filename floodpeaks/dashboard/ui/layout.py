"""Page layout — header and sidebar filters."""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd
import streamlit as st

from floodpeaks.dashboard.data_access import TIER_ORDER


@dataclass
class SidebarState:
    """Values collected from sidebar controls."""
    tiers: list[str]
    year_range: tuple[int, int] | None


def render_header(store_path: str) -> None:
    st.markdown(
        '<h1 class="page-title">Flood Peak Cache</h1>'
        f'<p class="page-subtitle">Declustered water-level peaks from <code>{store_path}</code></p>',
        unsafe_allow_html=True,
    )


def render_sidebar(events: pd.DataFrame) -> SidebarState:
    """Draw sidebar controls and return current selections."""
    with st.sidebar:
        st.markdown("##### Tiers")
        tiers = st.multiselect(
            "Tiers",
            options=TIER_ORDER,
            default=[t for t in TIER_ORDER if t != "Below"],
            label_visibility="collapsed",
        )

        year_range: tuple[int, int] | None = None
        if not events.empty:
            lo, hi = int(events["year"].min()), int(events["year"].max())
            if lo < hi:
                st.markdown("##### Years")
                year_range = st.slider("Years", min_value=lo, max_value=hi, value=(lo, hi),
                                       label_visibility="collapsed")
    return SidebarState(tiers=tiers, year_range=year_range)

"""Streamlit dashboard for the flood peak cache."""

from __future__ import annotations

import streamlit as st

# ── page config (MUST be the first Streamlit call) ───────────────────────────

st.set_page_config(
    page_title="Flood Peak Cache",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ── local imports (after page config) ───────────────────────────────────────

from floodpeaks.dashboard.data_access import (  # noqa: E402
    STORE_PATH,
    TIER_ORDER,
    annual_maxima,
    annual_tier_counts,
    events_frame,
    filter_events,
    load_store_document,
    thresholds_of,
)
from floodpeaks.dashboard.ui.cards import tier_kpi_card, watermark_card  # noqa: E402
from floodpeaks.dashboard.ui.charts import (  # noqa: E402
    CHART_CONFIG,
    annual_tier_bar,
    peak_timeline,
)
from floodpeaks.dashboard.ui.layout import render_header, render_sidebar  # noqa: E402
from floodpeaks.dashboard.ui.tables import render_peak_table  # noqa: E402

doc = load_store_document(STORE_PATH)
render_header(str(STORE_PATH))

if doc is None:
    st.info(
        "No cache found. Run the updater first:\n\n"
        "`python -m floodpeaks.updater --create`"
    )
    st.stop()

events = events_frame(doc)
sidebar = render_sidebar(events)
view = filter_events(events, tiers=sidebar.tiers, year_range=sidebar.year_range)

# ── KPI CARDS ───────────────────────────────────────────────────────────────

cols = st.columns(len(TIER_ORDER) + 1)
with cols[0]:
    st.markdown(watermark_card(doc.get("watermark") or doc.get("lastProcessedISO"), len(events)),
                unsafe_allow_html=True)
for col, tier in zip(cols[1:], TIER_ORDER):
    sub = events[events["tier"] == tier]
    with col:
        st.markdown(
            tier_kpi_card(tier, len(sub), float(sub["value"].max()) if not sub.empty else None),
            unsafe_allow_html=True,
        )

# ── CHARTS ──────────────────────────────────────────────────────────────────

fig = peak_timeline(view, thresholds_of(doc))
if fig is not None:
    st.plotly_chart(fig, width="stretch", config=CHART_CONFIG, key="chart_peaks")
else:
    st.info("No peaks match the current filters.")

fig = annual_tier_bar(annual_tier_counts(view))
if fig is not None:
    st.plotly_chart(fig, width="stretch", config=CHART_CONFIG, key="chart_annual")

# ── TABLES ──────────────────────────────────────────────────────────────────

with st.expander("Annual maxima", expanded=False):
    st.dataframe(annual_maxima(view), hide_index=True, use_container_width=True)

render_peak_table(view)

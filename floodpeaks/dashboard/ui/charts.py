"""Plotly chart builders."""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go

from floodpeaks.dashboard.data_access import TIER_ORDER
from floodpeaks.dashboard.ui.cards import TIER_COLORS

# ── chart config (hide toolbar by default) ──────────────────────────────────

CHART_CONFIG: dict = {"displayModeBar": False}

# ── shared layout ───────────────────────────────────────────────────────────

_FONT = dict(family="-apple-system, Segoe UI, Roboto, sans-serif", size=13, color="#c9d1d9")

_LAYOUT: dict = dict(
    template="plotly_dark",
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    margin=dict(l=48, r=16, t=44, b=36),
    font=_FONT,
    title=dict(font=dict(size=14, color="#e6edf3"), x=0, xanchor="left", y=0.98, yanchor="top"),
    legend=dict(
        orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1, font=dict(size=11)
    ),
    height=380,
)

_GRID_COLOR = "rgba(128,128,128,0.10)"

_THRESHOLD_LABELS = {"minorLow": "Minor", "moderateLow": "Moderate", "majorLow": "Major"}


def _base(**overrides: object) -> dict:
    merged = {**_LAYOUT}
    for k, v in overrides.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = {**merged[k], **v}
        else:
            merged[k] = v
    return merged


# ── peak timeline ───────────────────────────────────────────────────────────


def peak_timeline(df: pd.DataFrame, thresholds: dict[str, float]) -> go.Figure | None:
    """Scatter of every peak coloured by tier, with dashed threshold lines.

    Returns *None* for an empty frame so the caller can show a placeholder.
    """
    if df is None or df.empty:
        return None

    fig = go.Figure()
    for tier in TIER_ORDER:
        sub = df[df["tier"] == tier]
        if sub.empty:
            continue
        fig.add_trace(
            go.Scatter(
                x=sub["timestamp"],
                y=sub["value"],
                mode="markers",
                name=tier,
                marker=dict(color=TIER_COLORS[tier], size=7),
                hovertemplate="%{x|%Y-%m-%d %H:%M} UTC<br>%{y:.2f} ft<extra>" + tier + "</extra>",
            )
        )
    for key, label in _THRESHOLD_LABELS.items():
        if key in thresholds:
            fig.add_hline(
                y=thresholds[key],
                line=dict(color=TIER_COLORS[label], width=1, dash="dash"),
                annotation_text=label,
                annotation_position="top left",
            )
    fig.update_layout(
        **_base(
            title=dict(text="Flood Peaks"),
            xaxis=dict(title="", gridcolor=_GRID_COLOR),
            yaxis=dict(title="ft", gridcolor=_GRID_COLOR, zeroline=False),
        )
    )
    return fig


# ── per-year tier counts ────────────────────────────────────────────────────


def annual_tier_bar(counts: pd.DataFrame) -> go.Figure | None:
    """Stacked bar of peaks per year, one segment per flood tier (Below hidden)."""
    if counts is None or counts.empty:
        return None

    fig = go.Figure()
    for tier in reversed(TIER_ORDER):
        if tier == "Below" or tier not in counts.columns:
            continue
        fig.add_trace(
            go.Bar(
                x=counts["year"],
                y=counts[tier],
                name=tier,
                marker_color=TIER_COLORS[tier],
                marker_line_width=0,
                hovertemplate="%{x}: %{y} " + tier + "<extra></extra>",
            )
        )
    fig.update_layout(
        **_base(
            title=dict(text="Flood Peaks per Year"),
            barmode="stack",
            bargap=0.25,
            xaxis=dict(title="", gridcolor=_GRID_COLOR, dtick=1),
            yaxis=dict(title="", gridcolor=_GRID_COLOR, zeroline=False),
        )
    )
    return fig

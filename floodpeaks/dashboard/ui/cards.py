"""HTML KPI card builders."""

from __future__ import annotations

# ── canonical tier colours ──────────────────────────────────────────────────

TIER_COLORS: dict[str, str] = {
    "Major": "#a855f7",
    "Moderate": "#ef4444",
    "Minor": "#f59e0b",
    "Below": "#64748b",
}


def tier_kpi_card(tier: str, count: int, highest: float | None) -> str:
    """One KPI card: number of events in *tier* and the highest peak."""
    color = TIER_COLORS.get(tier, "#888")
    top = f"{highest:.2f} ft" if highest is not None else "—"
    return (
        f'<div class="tier-card" style="border-top: 3px solid {color}">'
        f'  <div class="tier-card-header">{tier}</div>'
        f'  <div class="tier-metric-main">{count}</div>'
        f'  <div class="tier-metric-label">peaks</div>'
        f'  <div class="tier-metric-row">Highest: {top}</div>'
        f"</div>"
    )


def watermark_card(watermark: str | None, total: int) -> str:
    return (
        '<div class="tier-card">'
        '  <div class="tier-card-header">Cache</div>'
        f'  <div class="tier-metric-main">{total}</div>'
        '  <div class="tier-metric-label">events</div>'
        f'  <div class="tier-metric-row">Processed to: {watermark or "N/A"}</div>'
        "</div>"
    )

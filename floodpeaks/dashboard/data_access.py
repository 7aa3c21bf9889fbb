"""Data loading and filtering for the dashboard (pandas only, no Streamlit)."""

from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Any

import pandas as pd

from floodpeaks.contracts.enums import Tier

log = logging.getLogger(__name__)

STORE_PATH = Path(os.environ.get("FLOODPEAKS_STORE", "data/bivalve_peaks_navd88.json"))

TIER_ORDER: list[str] = [t.value for t in (Tier.MAJOR, Tier.MODERATE, Tier.MINOR, Tier.BELOW)]

_EVENT_COLUMNS = ["timestamp", "value", "tier", "year"]

# the updater replaces the file atomically, but a reader can still race a rename
_MAX_READ_RETRIES = 3
_READ_RETRY_DELAY_SEC = 0.15


def load_store_document(path: str | Path = STORE_PATH) -> dict[str, Any] | None:
    """Read the cache JSON; None if it is absent or unreadable."""
    p = Path(path)
    for attempt in range(1, _MAX_READ_RETRIES + 1):
        if not p.exists():
            return None
        try:
            with p.open(encoding="utf-8") as fh:
                doc = json.load(fh)
            return doc if isinstance(doc, dict) else None
        except (OSError, json.JSONDecodeError) as exc:
            log.debug("Store read attempt %d/%d for %s failed: %s",
                      attempt, _MAX_READ_RETRIES, p, exc)
            if attempt < _MAX_READ_RETRIES:
                time.sleep(_READ_RETRY_DELAY_SEC)
    return None


def events_frame(doc: dict[str, Any] | None) -> pd.DataFrame:
    """Cache events as a DataFrame (timestamp UTC, value, tier, year).

    Legacy ``{t, ft, type}`` rows are mapped to the current columns.  Rows
    without a tier are shown as Below; rows without a usable timestamp or
    value are skipped.
    """
    rows = (doc or {}).get("events") or []
    df = pd.DataFrame(rows)
    if df.empty:
        return pd.DataFrame(columns=_EVENT_COLUMNS)
    df = df.rename(columns={"t": "timestamp", "ft": "value", "type": "tier"})
    # hand-edited caches may lack whole columns
    df = df.reindex(columns=_EVENT_COLUMNS[:3])
    df["tier"] = df["tier"].fillna(Tier.BELOW.value)
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, errors="coerce")
    df["value"] = pd.to_numeric(df["value"], errors="coerce")
    df = df.dropna(subset=["timestamp", "value"])
    df["year"] = df["timestamp"].dt.year
    return df.sort_values("timestamp").reset_index(drop=True)


def thresholds_of(doc: dict[str, Any] | None) -> dict[str, float]:
    """Threshold bounds from the document ({} if absent)."""
    doc = doc or {}
    raw = doc.get("thresholds") or doc.get("thresholdsNAVD88") or {}
    out: dict[str, float] = {}
    for k in ("minorLow", "moderateLow", "majorLow"):
        try:
            out[k] = float(raw[k])
        except (KeyError, TypeError, ValueError):
            continue
    return out


def filter_events(
    df: pd.DataFrame,
    *,
    tiers: list[str] | None = None,
    year_range: tuple[int, int] | None = None,
) -> pd.DataFrame:
    """Apply the sidebar filters."""
    mask = pd.Series(True, index=df.index)
    if tiers:
        mask &= df["tier"].isin(tiers)
    if year_range is not None:
        lo, hi = year_range
        mask &= df["year"].between(lo, hi)
    return df.loc[mask].copy()


def annual_tier_counts(df: pd.DataFrame) -> pd.DataFrame:
    """Events per year and tier; one column per tier in TIER_ORDER."""
    if df.empty:
        return pd.DataFrame(columns=["year", *TIER_ORDER])
    counts = df.groupby(["year", "tier"]).size().unstack(fill_value=0)
    counts = counts.reindex(columns=TIER_ORDER, fill_value=0)
    return counts.reset_index().rename_axis(columns=None)


def annual_maxima(df: pd.DataFrame) -> pd.DataFrame:
    """Highest peak of each year (timestamp, value, tier)."""
    if df.empty:
        return pd.DataFrame(columns=_EVENT_COLUMNS)
    idx = df.groupby("year")["value"].idxmax()
    return df.loc[idx].sort_values("year").reset_index(drop=True)

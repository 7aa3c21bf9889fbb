"""Reporting: run summary text and CSV export of the cache."""

from __future__ import annotations

import logging
from pathlib import Path

from floodpeaks.contracts.enums import Tier
from floodpeaks.contracts.peak import PeakEvent
from floodpeaks.shared.atomic import atomic_write
from floodpeaks.shared.timeutil import to_iso
from floodpeaks.store.event_store import EventStore
from floodpeaks.updater.orchestrator import UpdateResult

log = logging.getLogger(__name__)


def format_summary(result: UpdateResult) -> str:
    """Human-readable summary of one pass."""
    lines = [
        f"Mode:          {result.mode}",
        f"Window:        {to_iso(result.window_start)} -> {to_iso(result.window_end)}",
    ]
    if result.noop:
        lines.append("No series points returned; nothing to do.")
        return "\n".join(lines)
    lines += [
        f"Fetched points: {result.samples_fetched}",
        f"Dropped points: {result.samples_dropped}",
        f"Peaks found:   {result.peaks_found}",
        f"Peaks added:   {result.peaks_added}",
        f"Total events:  {result.total_events}",
        f"New watermark: {to_iso(result.watermark) if result.watermark else 'none'}",
    ]
    return "\n".join(lines)


def tier_counts(events: list[PeakEvent]) -> dict[str, int]:
    """Count events per tier, every tier present (zero if unseen)."""
    counts = {t.value: 0 for t in Tier}
    for e in events:
        counts[e.tier.value] += 1
    return counts


def write_events_csv(store: EventStore, path: str | Path) -> None:
    """Export the cached events as ``timestamp,value,tier`` CSV."""
    events = store.events
    lines = [PeakEvent.csv_header()]
    lines.extend(e.to_csv_row() for e in events)
    atomic_write(path, "\n".join(lines) + "\n")
    log.info("Wrote events -> %s (%d rows)", path, len(events))

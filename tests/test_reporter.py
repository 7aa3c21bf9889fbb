"""Tests for floodpeaks.updater.reporter."""

from __future__ import annotations

from datetime import UTC, datetime

from floodpeaks.contracts.enums import Tier
from floodpeaks.store.event_store import EventStore
from floodpeaks.updater.orchestrator import UpdateResult
from floodpeaks.updater.reporter import format_summary, tier_counts, write_events_csv
from tests.conftest import make_peak

START = datetime(2024, 1, 1, tzinfo=UTC)
END = datetime(2024, 1, 2, tzinfo=UTC)


class TestFormatSummary:
    def test_normal_pass(self):
        result = UpdateResult(
            mode="incremental", window_start=START, window_end=END,
            samples_fetched=96, peaks_found=3, peaks_added=2, total_events=10,
            watermark=datetime(2024, 1, 1, 23, 45, tzinfo=UTC),
        )
        text = format_summary(result)
        assert "Fetched points: 96" in text
        assert "Peaks found:   3" in text
        assert "Peaks added:   2" in text
        assert "New watermark: 2024-01-01T23:45:00.000Z" in text

    def test_noop(self):
        result = UpdateResult(mode="backfill", window_start=START, window_end=END, noop=True)
        text = format_summary(result)
        assert "nothing to do" in text
        assert "Peaks found" not in text


def test_tier_counts_include_every_tier():
    events = [make_peak(0, 5.0, Tier.MAJOR), make_peak(600, 4.0, Tier.MAJOR),
              make_peak(1200, 2.0, Tier.MINOR)]
    assert tier_counts(events) == {"Below": 0, "Minor": 1, "Moderate": 0, "Major": 2}


def test_write_events_csv(tmp_path):
    store = EventStore([make_peak(600, 2.5, Tier.MINOR), make_peak(0, 4.25, Tier.MAJOR)])
    out = tmp_path / "events.csv"
    write_events_csv(store, out)
    assert out.read_text().splitlines() == [
        "timestamp,value,tier",
        "2024-01-01T00:00:00.000Z,4.25,Major",
        "2024-01-01T10:00:00.000Z,2.5,Minor",
    ]

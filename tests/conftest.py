"""Shared fixtures for floodpeaks tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from floodpeaks.contracts.enums import Tier
from floodpeaks.contracts.errors import SourceError
from floodpeaks.contracts.peak import PeakEvent
from floodpeaks.contracts.sample import Sample
from floodpeaks.contracts.thresholds import ThresholdSet
from floodpeaks.shared.settings import PeakSettings
from floodpeaks.sources.base import SeriesSource, in_window

BASE = datetime(2024, 1, 1, tzinfo=UTC)

# ── Timestamp helpers ────────────────────────────────────────────────────


def ts_offset(base: datetime = BASE, minutes: float = 0, hours: float = 0) -> datetime:
    """Return *base* shifted by *minutes* + *hours*."""
    return base + timedelta(minutes=minutes, hours=hours)


# ── Factories ────────────────────────────────────────────────────────────


def make_sample(minutes: float = 0, value: float = 1.0, *, base: datetime = BASE) -> Sample:
    return Sample(timestamp=ts_offset(base, minutes=minutes), value=value)


def make_series(values: list[float], step_minutes: float = 60, *, base: datetime = BASE) -> list[Sample]:
    """Evenly spaced samples starting at *base*."""
    return [make_sample(i * step_minutes, v, base=base) for i, v in enumerate(values)]


def make_peak(
    minutes: float = 0,
    value: float = 5.0,
    tier: Tier = Tier.MINOR,
    *,
    base: datetime = BASE,
) -> PeakEvent:
    return PeakEvent(timestamp=ts_offset(base, minutes=minutes), value=value, tier=tier)


class FakeSource(SeriesSource):
    """In-memory source that records every requested window."""

    name = "fake"

    def __init__(self, samples: list[Sample] | None = None, error: Exception | None = None) -> None:
        self.samples = list(samples or [])
        self.error = error
        self.calls: list[tuple[datetime, datetime]] = []

    def fetch(self, start: datetime, end: datetime) -> list[Sample]:
        self.calls.append((start, end))
        if self.error is not None:
            raise self.error
        return in_window(self.samples, start, end)


# ── Fixtures ─────────────────────────────────────────────────────────────


@pytest.fixture
def thresholds() -> ThresholdSet:
    """Bounds used by the reference scenarios."""
    return ThresholdSet(minor_low=2.0, moderate_low=3.0, major_low=3.9)


@pytest.fixture
def settings(thresholds) -> PeakSettings:
    return PeakSettings(thresholds=thresholds, min_separation_minutes=300, overlap_hours=12)


@pytest.fixture
def scenario_samples() -> list[Sample]:
    """[(t0,1.0),(t1,3.0),(t2,2.0),(t3,1.5),(t4,4.0),(t5,2.0)], one hour apart."""
    return make_series([1.0, 3.0, 2.0, 1.5, 4.0, 2.0], step_minutes=60)


@pytest.fixture
def failing_source() -> FakeSource:
    return FakeSource(error=SourceError("feed unreachable"))

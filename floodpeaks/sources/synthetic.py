"""Synthetic tide source — seeded semidiurnal tide with storm-surge pulses.

Every calendar day (UTC) gets its own RNG derived from the base seed, so a
given instant always has the same value no matter which window asks for
it.  Overlapping incremental windows therefore see identical data, just
like a real gauge archive.
"""

from __future__ import annotations

import logging
import math
import random as _random_mod
from datetime import UTC, datetime, timedelta

from floodpeaks.contracts.sample import Sample
from floodpeaks.shared.seed import init_seed
from floodpeaks.sources.base import SeriesSource, in_window

log = logging.getLogger(__name__)

_M2_PERIOD_H = 12.4206  # principal lunar semidiurnal
_K1_PERIOD_H = 23.9345  # lunisolar diurnal
_SURGE_WIDTH_H = 6.0


def _gauss(x: float, width: float) -> float:
    return math.exp(-0.5 * (x / width) ** 2)


class SyntheticTideSource(SeriesSource):
    """Deterministic water-level series for demos and tests."""

    name = "synthetic"

    def __init__(
        self,
        seed: int = 42,
        interval_minutes: int = 15,
        mean_level: float = 1.0,
        amplitude: float = 3.0,
        noise: float = 0.05,
        surge_chance: float = 0.15,
        surge_height: tuple[float, float] = (1.0, 3.5),
    ) -> None:
        self.seed = seed
        self.interval = timedelta(minutes=interval_minutes)
        self.mean_level = mean_level
        self.amplitude = amplitude
        self.noise = noise
        self.surge_chance = surge_chance
        self.surge_height = surge_height

    def describe(self) -> str:
        return f"synthetic seed={self.seed}"

    # ── per-day plan ──────────────────────────────────────────────────────

    def _day_rng(self, day: datetime) -> _random_mod.Random:
        return init_seed(self.seed * 1_000_003 + day.toordinal())

    def _surge(self, day: datetime) -> tuple[datetime, float] | None:
        rng = self._day_rng(day)
        if rng.random() >= self.surge_chance:
            return None
        center = day + timedelta(hours=rng.uniform(0, 24))
        return center, rng.uniform(*self.surge_height)

    # ── generation ────────────────────────────────────────────────────────

    def _level(self, t: datetime, surges: list[tuple[datetime, float]]) -> float:
        hours = t.timestamp() / 3600.0
        tide = self.amplitude * math.cos(2 * math.pi * hours / _M2_PERIOD_H)
        tide += 0.25 * self.amplitude * math.cos(2 * math.pi * hours / _K1_PERIOD_H)
        surge = sum(
            h * _gauss((t - c).total_seconds() / 3600.0, _SURGE_WIDTH_H) for c, h in surges
        )
        return self.mean_level + tide + surge

    def generate_day(self, day: datetime) -> list[Sample]:
        """All samples of one UTC day (day must be midnight UTC)."""
        neighbours = [day + timedelta(days=d) for d in (-1, 0, 1)]
        surges = [s for s in (self._surge(d) for d in neighbours) if s is not None]
        noise_rng = self._day_rng(day)
        noise_rng.random()  # first draw belongs to the surge plan

        samples: list[Sample] = []
        t = day
        end = day + timedelta(days=1)
        while t < end:
            value = self._level(t, surges) + noise_rng.gauss(0.0, self.noise)
            samples.append(Sample(timestamp=t, value=round(value, 3)))
            t += self.interval
        return samples

    def fetch(self, start: datetime, end: datetime) -> list[Sample]:
        day = datetime(start.year, start.month, start.day, tzinfo=UTC)
        samples: list[Sample] = []
        while day < end:
            samples.extend(self.generate_day(day))
            day += timedelta(days=1)
        samples = in_window(samples, start, end)
        log.info("Synthetic series: %d samples", len(samples))
        return samples

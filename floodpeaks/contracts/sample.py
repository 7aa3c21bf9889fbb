"""Sample — one raw water-level observation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class Sample:
    """A single observation; produced by a SeriesSource, never persisted."""

    timestamp: datetime  # aware UTC
    value: float         # water level, feed units (ft NAVD88 for the USGS gauge)

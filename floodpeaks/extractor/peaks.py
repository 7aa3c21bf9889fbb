"""PeakExtractor — series → ordered list of classified PeakEvents.

Pipeline
────────
  1. validate thresholds (ConfigError before any processing)
  2. sanitise + sort
  3. local-maxima candidates (plateaus excluded)
  4. decluster within min_separation
  5. classify each survivor, round its value to *precision*
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import timedelta

from floodpeaks.contracts.errors import ConfigError
from floodpeaks.contracts.peak import PeakEvent
from floodpeaks.contracts.sample import Sample
from floodpeaks.contracts.thresholds import ThresholdSet
from floodpeaks.extractor.classifier import classify
from floodpeaks.extractor.decluster import decluster, find_candidates
from floodpeaks.extractor.sanitize import sanitize

log = logging.getLogger(__name__)

DEFAULT_MIN_SEPARATION = timedelta(minutes=300)
DEFAULT_PRECISION = 3


def extract_peaks(
    samples: Iterable[Sample],
    thresholds: ThresholdSet,
    min_separation: timedelta = DEFAULT_MIN_SEPARATION,
    precision: int = DEFAULT_PRECISION,
) -> list[PeakEvent]:
    """Extract declustered, classified peaks from *samples*.

    Classification uses the unrounded value; only the stored value is
    rounded.  Fewer than three usable samples give no peaks.

    Raises:
        ConfigError: If *thresholds* is not a ThresholdSet or
            *min_separation* is negative.
    """
    if not isinstance(thresholds, ThresholdSet):
        raise ConfigError(f"thresholds must be a ThresholdSet, got {type(thresholds).__name__}")
    if min_separation < timedelta(0):
        raise ConfigError(f"min_separation must be >= 0, got {min_separation}")

    pts = sanitize(samples)
    if len(pts) < 3:
        return []

    candidates = find_candidates(pts)
    kept = decluster(candidates, min_separation)
    peaks = [
        PeakEvent(
            timestamp=p.timestamp,
            value=round(p.value, precision),
            tier=classify(p.value, thresholds),
        )
        for p in kept
    ]
    log.info(
        "Extracted %d peaks from %d samples (%d candidates)",
        len(peaks), len(pts), len(candidates),
    )
    return peaks


@dataclass(slots=True)
class PeakExtractor:
    """extract_peaks with its parameters bound."""

    thresholds: ThresholdSet
    min_separation: timedelta = field(default=DEFAULT_MIN_SEPARATION)
    precision: int = DEFAULT_PRECISION

    def __post_init__(self) -> None:
        if not isinstance(self.thresholds, ThresholdSet):
            raise ConfigError("PeakExtractor requires a ThresholdSet")
        if self.min_separation < timedelta(0):
            raise ConfigError(f"min_separation must be >= 0, got {self.min_separation}")

    def extract(self, samples: Iterable[Sample]) -> list[PeakEvent]:
        return extract_peaks(samples, self.thresholds, self.min_separation, self.precision)

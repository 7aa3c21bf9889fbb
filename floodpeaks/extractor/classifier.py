"""Classifier — map a peak value to a severity tier."""

from __future__ import annotations

from floodpeaks.contracts.enums import Tier
from floodpeaks.contracts.thresholds import ThresholdSet


def classify(value: float, thresholds: ThresholdSet) -> Tier:
    """Return the highest tier whose lower bound *value* meets.

    Bounds are lower-inclusive and checked Major → Moderate → Minor, so a
    value exactly on ``major_low`` is Major.
    """
    if value >= thresholds.major_low:
        return Tier.MAJOR
    if value >= thresholds.moderate_low:
        return Tier.MODERATE
    if value >= thresholds.minor_low:
        return Tier.MINOR
    return Tier.BELOW

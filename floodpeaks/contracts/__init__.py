"""Contracts — canonical data structures shared by all modules."""

from floodpeaks.contracts.enums import Tier
from floodpeaks.contracts.errors import (
    ConfigError,
    FloodPeaksError,
    SourceError,
    ValidationError,
)
from floodpeaks.contracts.peak import PeakEvent
from floodpeaks.contracts.sample import Sample
from floodpeaks.contracts.thresholds import ThresholdSet

__all__ = [
    "ConfigError",
    "FloodPeaksError",
    "PeakEvent",
    "Sample",
    "SourceError",
    "ThresholdSet",
    "Tier",
    "ValidationError",
]

"""Error taxonomy shared by all modules."""

from __future__ import annotations


class FloodPeaksError(Exception):
    """Base class for every error raised by floodpeaks."""


class ConfigError(FloodPeaksError):
    """Invalid or missing configuration (thresholds, settings, store document).

    Always raised before any data is fetched.
    """


class SourceError(FloodPeaksError):
    """The series feed is unreachable or returned a malformed payload."""


class ValidationError(FloodPeaksError):
    """A single raw observation is unusable (missing or non-finite).

    Non-fatal: the sanitiser drops the sample and carries on.
    """

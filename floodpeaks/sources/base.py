"""Base class for all series sources."""

from __future__ import annotations

import abc
from datetime import datetime

from floodpeaks.contracts.sample import Sample


class SeriesSource(abc.ABC):
    """Supplies water-level samples for a half-open window ``[start, end)``.

    Implementations return samples sorted by timestamp and raise
    :class:`~floodpeaks.contracts.errors.SourceError` when the feed is
    unreachable or malformed.  Retries, if any, belong to the implementation.

    Sources that sanitise while parsing set :attr:`dropped` to the number
    of unusable observations seen by the last :meth:`fetch`.
    """

    name: str = "base"
    dropped: int = 0

    @abc.abstractmethod
    def fetch(self, start: datetime, end: datetime) -> list[Sample]:
        ...

    def describe(self) -> str:
        return self.name


def in_window(samples: list[Sample], start: datetime, end: datetime) -> list[Sample]:
    """Keep samples with ``start <= timestamp < end``."""
    return [s for s in samples if start <= s.timestamp < end]

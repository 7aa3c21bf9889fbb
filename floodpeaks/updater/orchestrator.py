"""UpdateOrchestrator — one incremental or backfill pass over the cache.

State machine (per invocation)
──────────────────────────────
  Start → FetchWindow → Extract → Merge → AdvanceWatermark → Persist → Done

The store file is written exactly once, as the final atomic step.  Any
failure before that (bad thresholds, unreachable feed, malformed payload)
leaves the file on disk byte-for-byte unchanged.  Zero samples in the
window is a no-op: nothing is written.

Single-writer semantics are assumed; two concurrent passes against the
same file would race on read-modify-write.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from floodpeaks.contracts.errors import ConfigError
from floodpeaks.contracts.thresholds import ThresholdSet
from floodpeaks.extractor.peaks import PeakExtractor
from floodpeaks.extractor.sanitize import sanitize
from floodpeaks.shared.settings import PeakSettings
from floodpeaks.shared.timeutil import parse_ts, to_iso, utcnow
from floodpeaks.sources.base import SeriesSource
from floodpeaks.store.event_store import EventStore

log = logging.getLogger(__name__)

MIN_BACKFILL_YEAR = 1900
MAX_BACKFILL_YEAR = 3000


@dataclass(slots=True)
class UpdateResult:
    """Outcome of one pass; returned by every run_* method."""

    mode: str               # incremental | backfill | window
    window_start: datetime
    window_end: datetime
    samples_fetched: int = 0
    samples_dropped: int = 0
    peaks_found: int = 0
    peaks_added: int = 0
    total_events: int = 0
    watermark: datetime | None = None
    noop: bool = False


class UpdateOrchestrator:
    """Drives fetch → extract → merge → watermark → persist for one store file."""

    def __init__(
        self,
        source: SeriesSource,
        store_path: str | Path,
        settings: PeakSettings | None = None,
        thresholds: ThresholdSet | None = None,
        create: bool = False,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.source = source
        self.store_path = Path(store_path)
        self.settings = settings or PeakSettings()
        self.thresholds = thresholds if thresholds is not None else self.settings.thresholds
        self.create = create
        self.clock = clock

    # ═══════════════════════════════════════════════════════════════════════
    #  Public API
    # ═══════════════════════════════════════════════════════════════════════

    def run_incremental(self) -> UpdateResult:
        """Process ``[watermark − overlap, now)``.

        The overlap re-reads the boundary of the previous window because
        declustering has no memory across passes; merge idempotence makes
        re-extracted peaks harmless.
        """
        store = self._load_store()
        extractor = self._extractor(store)
        last = store.watermark or self.settings.default_watermark
        start = last - self.settings.overlap
        end = parse_ts(self.clock())
        log.info("Incremental: %s -> %s", to_iso(start), to_iso(end))
        return self._run(store, extractor, "incremental", start, end)

    def run_backfill(self, year: int) -> UpdateResult:
        """Process one calendar year ``[year-01-01, (year+1)-01-01)`` UTC."""
        if isinstance(year, bool) or not isinstance(year, int):
            raise ConfigError(f"Invalid backfill year: {year!r}")
        if not MIN_BACKFILL_YEAR <= year <= MAX_BACKFILL_YEAR:
            raise ConfigError(
                f"Backfill year must be in [{MIN_BACKFILL_YEAR}, {MAX_BACKFILL_YEAR}], got {year}"
            )
        start = datetime(year, 1, 1, tzinfo=UTC)
        end = datetime(year + 1, 1, 1, tzinfo=UTC)
        log.info("Backfill year %d: %s -> %s", year, to_iso(start), to_iso(end))
        return self.run_window(start, end, mode="backfill")

    def run_window(self, start: datetime, end: datetime, mode: str = "window") -> UpdateResult:
        """Process an explicit window; the watermark rule is the same as incremental."""
        start, end = parse_ts(start), parse_ts(end)
        if start >= end:
            raise ConfigError(f"Window start {to_iso(start)} is not before end {to_iso(end)}")
        store = self._load_store()
        extractor = self._extractor(store)
        return self._run(store, extractor, mode, start, end)

    # ═══════════════════════════════════════════════════════════════════════
    #  Steps
    # ═══════════════════════════════════════════════════════════════════════

    def _load_store(self) -> EventStore:
        return EventStore.load(self.store_path, create=self.create, precision=self.settings.precision)

    def _extractor(self, store: EventStore) -> PeakExtractor:
        """Resolve thresholds before any fetch; explicit ones win over stored ones."""
        if self.thresholds is not None:
            if not isinstance(self.thresholds, ThresholdSet):
                raise ConfigError("thresholds must be a ThresholdSet")
            store.set_thresholds(self.thresholds)
            thresholds = self.thresholds
        else:
            thresholds = store.resolve_thresholds()
        return PeakExtractor(
            thresholds=thresholds,
            min_separation=self.settings.min_separation,
            precision=store.precision,
        )

    def _run(
        self,
        store: EventStore,
        extractor: PeakExtractor,
        mode: str,
        start: datetime,
        end: datetime,
    ) -> UpdateResult:
        result = UpdateResult(mode=mode, window_start=start, window_end=end,
                              watermark=store.watermark, total_events=len(store))

        # FetchWindow — SourceError propagates, store untouched
        raw = self.source.fetch(start, end)
        samples = sanitize(raw)
        result.samples_fetched = len(samples)
        # sources that parse their own wire format report what they dropped
        result.samples_dropped = self.source.dropped + len(raw) - len(samples)
        if not samples:
            log.info("No series points returned; nothing to do.")
            result.noop = True
            return result

        # Extract
        peaks = extractor.extract(samples)
        result.peaks_found = len(peaks)

        # Merge
        result.peaks_added = store.merge(peaks)
        result.total_events = len(store)

        # AdvanceWatermark — newest sample, not newest peak
        result.watermark = store.advance_watermark(samples[-1].timestamp)

        # Persist
        store.save(self.store_path)

        log.info(
            "%s pass: fetched=%d peaks=%d added=%d watermark=%s",
            mode, result.samples_fetched, result.peaks_found, result.peaks_added,
            to_iso(result.watermark),
        )
        return result

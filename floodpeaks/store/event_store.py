"""EventStore — persisted, deduplicated, chronologically ordered peak cache.

Persisted document
──────────────────
  {
    "watermark":  "2024-03-10T18:45:00.000Z",   # latest fully processed instant
    "thresholds": {"minorLow": .., "moderateLow": .., "majorLow": ..},
    "precision":  3,
    "events": [{"timestamp": "...", "value": 6.123, "tier": "Minor"}, ...],
    ...                                          # any other keys: kept verbatim
  }

Merge is idempotent and commutative: events are keyed by
``(timestamp, round(value, precision))`` and the list is re-sorted after
every batch.  The watermark only moves forward.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Any

from floodpeaks.contracts.errors import ConfigError
from floodpeaks.contracts.peak import PeakEvent
from floodpeaks.contracts.thresholds import ThresholdSet
from floodpeaks.shared.atomic import atomic_write
from floodpeaks.shared.timeutil import parse_ts, to_iso

log = logging.getLogger(__name__)

EventKey = tuple[str, float]

# keys owned by the store; everything else in the document is metadata
_OWNED_KEYS = ("watermark", "thresholds", "precision", "events")

# keys used by older cache documents -> current names
_LEGACY_KEYS = {"lastProcessedISO": "watermark", "thresholdsNAVD88": "thresholds"}


class EventStore:
    """In-memory view of one cache document.

    Mutations (merge, advance_watermark, set_thresholds) only touch memory;
    nothing reaches disk until :meth:`save`.
    """

    def __init__(
        self,
        events: Iterable[PeakEvent] = (),
        watermark: datetime | None = None,
        thresholds: ThresholdSet | None = None,
        precision: int = 3,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        self.precision = precision
        self.thresholds = thresholds
        # thresholds as read from disk, validated lazily by resolve_thresholds
        self._raw_thresholds: Any = None
        self.metadata: dict[str, Any] = dict(metadata or {})
        self._watermark: datetime | None = parse_ts(watermark) if watermark is not None else None
        self._events: list[PeakEvent] = []
        self._keys: set[EventKey] = set()
        self.merge(events)

    # ═══════════════════════════════════════════════════════════════════════
    #  Events
    # ═══════════════════════════════════════════════════════════════════════

    @property
    def events(self) -> list[PeakEvent]:
        """Chronologically ordered copy of the cached events."""
        return list(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def key(self, event: PeakEvent) -> EventKey:
        """Dedup key; rounding absorbs float noise from the feed."""
        return (to_iso(event.timestamp), round(event.value, self.precision))

    def __contains__(self, event: object) -> bool:
        return isinstance(event, PeakEvent) and self.key(event) in self._keys

    def merge(self, new_events: Iterable[PeakEvent]) -> int:
        """Insert events whose key is not yet present; return how many were added.

        The full collection is re-sorted by ``(timestamp, value)`` afterwards,
        so the order never depends on which batch arrived first.
        """
        added = 0
        for ev in new_events:
            k = self.key(ev)
            if k in self._keys:
                continue
            self._keys.add(k)
            self._events.append(ev)
            added += 1
        if added:
            self._events.sort(key=lambda e: (e.timestamp, e.value))
        return added

    # ═══════════════════════════════════════════════════════════════════════
    #  Watermark
    # ═══════════════════════════════════════════════════════════════════════

    @property
    def watermark(self) -> datetime | None:
        return self._watermark

    def advance_watermark(self, candidate: datetime) -> datetime:
        """Set watermark = max(current, candidate) and return it.

        Callers pass the newest *sample* instant of the pass, not the
        newest peak, so that quiet windows still move the watermark.
        """
        candidate = parse_ts(candidate)
        if self._watermark is None or candidate > self._watermark:
            self._watermark = candidate
        elif candidate < self._watermark:
            log.debug(
                "Watermark kept at %s (candidate %s is older)",
                to_iso(self._watermark), to_iso(candidate),
            )
        return self._watermark

    # ═══════════════════════════════════════════════════════════════════════
    #  Thresholds
    # ═══════════════════════════════════════════════════════════════════════

    def set_thresholds(self, thresholds: ThresholdSet) -> None:
        if self.thresholds is not None and self.thresholds != thresholds:
            log.warning(
                "Replacing stored thresholds %s with %s; existing events keep their tiers",
                self.thresholds.to_dict(), thresholds.to_dict(),
            )
        self.thresholds = thresholds

    # ═══════════════════════════════════════════════════════════════════════
    #  Document (de)serialisation
    # ═══════════════════════════════════════════════════════════════════════

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = dict(self.metadata)
        doc["watermark"] = to_iso(self._watermark) if self._watermark is not None else None
        doc["thresholds"] = (
            self.thresholds.to_dict() if self.thresholds is not None else self._raw_thresholds
        )
        doc["precision"] = self.precision
        doc["events"] = [e.to_dict() for e in self._events]
        return doc

    @classmethod
    def from_document(cls, doc: dict[str, Any], precision: int = 3) -> EventStore:
        """Build a store from a parsed document.

        *precision* is the configured value.  It applies when the document
        declares none (legacy caches); a document that declares a different
        one keeps its own (its dedup keys depend on it) and a warning is
        logged.

        Legacy documents (``lastProcessedISO``, ``thresholdsNAVD88``, events
        as ``{t, ft, type}``) are migrated.  Threshold validity is *not*
        enforced here; the orchestrator does that before fetching.

        Raises:
            ConfigError: If the document or one of its events is malformed.
        """
        if not isinstance(doc, dict):
            raise ConfigError("store document must be a JSON object")
        doc = dict(doc)
        for old, new in _LEGACY_KEYS.items():
            if old in doc:
                legacy = doc.pop(old)
                doc.setdefault(new, legacy)
                log.info("Migrated legacy key '%s' -> '%s'", old, new)

        configured = precision
        precision = doc.get("precision", configured)
        if isinstance(precision, bool) or not isinstance(precision, int) or precision < 0:
            raise ConfigError(f"store precision must be a non-negative integer, got {precision!r}")
        if precision != configured:
            log.warning(
                "Cache precision %d differs from configured precision %d; keeping %d",
                precision, configured, precision,
            )

        watermark = None
        if doc.get("watermark"):
            try:
                watermark = parse_ts(doc["watermark"])
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"store watermark is not ISO-8601: {doc['watermark']!r}") from exc

        raw_events = doc.get("events") or []
        if not isinstance(raw_events, list):
            raise ConfigError("store 'events' must be a list")
        events: list[PeakEvent] = []
        for i, row in enumerate(raw_events):
            try:
                ev = PeakEvent.from_dict(row)
            except (KeyError, TypeError, ValueError) as exc:
                raise ConfigError(f"store event #{i} is malformed: {exc!r}") from exc
            events.append(
                PeakEvent(timestamp=ev.timestamp, value=round(ev.value, precision), tier=ev.tier)
            )

        store = cls(
            watermark=watermark,
            precision=precision,
            metadata={k: v for k, v in doc.items() if k not in _OWNED_KEYS},
        )
        store._raw_thresholds = doc.get("thresholds")
        dupes = len(events) - store.merge(events)
        if dupes:
            log.warning("Dropped %d duplicate events while loading the store", dupes)
        return store

    def resolve_thresholds(self) -> ThresholdSet:
        """Return the stored ThresholdSet, validating it on first use.

        Raises:
            ConfigError: If the document carries no (or an invalid) set.
        """
        if self.thresholds is None:
            raw = self._raw_thresholds
            if raw is None:
                raise ConfigError(
                    "Missing thresholds: add "
                    '"thresholds": {"minorLow": X, "moderateLow": Y, "majorLow": Z} '
                    "to the store document or to the settings file"
                )
            self.thresholds = ThresholdSet.from_mapping(raw)
        return self.thresholds

    # ═══════════════════════════════════════════════════════════════════════
    #  Persistence
    # ═══════════════════════════════════════════════════════════════════════

    @classmethod
    def load(cls, path: str | Path, create: bool = False, precision: int = 3) -> EventStore:
        """Read the store at *path*.

        *precision* is the configured value; see :meth:`from_document`.

        Raises:
            ConfigError: If the file is missing (and *create* is False) or
                is not valid JSON.
        """
        p = Path(path)
        if not p.exists():
            if not create:
                raise ConfigError(f"Missing cache file: {p}")
            log.info("No cache at %s — starting an empty store", p)
            return cls(precision=precision)
        try:
            with p.open("r", encoding="utf-8") as fh:
                doc = json.load(fh)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Cache file {p} is not valid JSON: {exc}") from exc
        store = cls.from_document(doc, precision=precision)
        log.info(
            "Loaded %d events from %s (watermark=%s)",
            len(store), p, to_iso(store.watermark) if store.watermark else "none",
        )
        return store

    def save(self, path: str | Path) -> None:
        """Write the whole document in one atomic replace."""
        text = json.dumps(self.to_document(), indent=2, ensure_ascii=False) + "\n"
        atomic_write(path, text)
        log.info("Saved %d events -> %s", len(self), path)

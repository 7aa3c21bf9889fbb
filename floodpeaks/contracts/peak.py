"""PeakEvent — one declustered, classified local maximum."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from floodpeaks.contracts.enums import Tier
from floodpeaks.shared.timeutil import parse_ts, to_iso

# CSV column order for exports
CSV_COLUMNS: list[str] = ["timestamp", "value", "tier"]


@dataclass(slots=True, frozen=True)
class PeakEvent:
    """Immutable once created; the cache only ever appends these."""

    timestamp: datetime  # aware UTC
    value: float         # rounded to the store precision
    tier: Tier

    # ── serialisation ─────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return {"timestamp": to_iso(self.timestamp), "value": self.value, "tier": self.tier.value}

    def to_json(self) -> str:
        """Return compact JSON string."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    def to_csv_row(self) -> str:
        return f"{to_iso(self.timestamp)},{self.value},{self.tier.value}"

    @staticmethod
    def csv_header() -> str:
        return ",".join(CSV_COLUMNS)

    @classmethod
    def from_dict(cls, row: dict[str, Any]) -> PeakEvent:
        """Build from a persisted row.

        Rows written by the legacy updater (``{"t", "ft", "type"}``) are
        accepted too.

        Raises:
            KeyError: If a required field is absent.
            ValueError: If a field cannot be parsed.
        """
        ts = row["timestamp"] if "timestamp" in row else row["t"]
        value = row["value"] if "value" in row else row["ft"]
        tier = row["tier"] if "tier" in row else row.get("type", Tier.BELOW.value)
        return cls(timestamp=parse_ts(ts), value=float(value), tier=Tier(tier))

"""ThresholdSet — lower bounds of the Minor / Moderate / Major flood tiers."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from floodpeaks.contracts.errors import ConfigError

# persisted key -> attribute name
_KEYS: dict[str, str] = {
    "minorLow": "minor_low",
    "moderateLow": "moderate_low",
    "majorLow": "major_low",
}


@dataclass(slots=True, frozen=True)
class ThresholdSet:
    """Three strictly ascending, finite tier bounds.

    Construction validates the ordering so that an invalid set can never
    reach the extractor.
    """

    minor_low: float
    moderate_low: float
    major_low: float

    def __post_init__(self) -> None:
        bounds = (self.minor_low, self.moderate_low, self.major_low)
        for name, v in zip(_KEYS, bounds):
            if isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v):
                raise ConfigError(f"threshold {name} must be a finite number, got {v!r}")
        if not (self.minor_low < self.moderate_low < self.major_low):
            raise ConfigError(
                "thresholds must be strictly ascending "
                f"(minorLow={self.minor_low}, moderateLow={self.moderate_low}, "
                f"majorLow={self.major_low})"
            )

    # ── serialisation ─────────────────────────────────────────────────────

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> ThresholdSet:
        """Build from ``{"minorLow": .., "moderateLow": .., "majorLow": ..}``.

        Snake-case keys (``minor_low`` …) are accepted as well.

        Raises:
            ConfigError: If the mapping is missing, incomplete or invalid.
        """
        if not isinstance(data, Mapping):
            raise ConfigError(f"thresholds must be a mapping, got {type(data).__name__}")
        values: dict[str, float] = {}
        for camel, snake in _KEYS.items():
            raw = data.get(camel, data.get(snake))
            if raw is None:
                raise ConfigError(f"thresholds missing '{camel}'")
            try:
                values[snake] = float(raw)
            except (TypeError, ValueError):
                raise ConfigError(f"threshold {camel} is not numeric: {raw!r}") from None
        return cls(**values)

    def to_dict(self) -> dict[str, float]:
        return {camel: getattr(self, snake) for camel, snake in _KEYS.items()}

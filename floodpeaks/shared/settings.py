"""PeakSettings — validated run configuration.

Reads ``config/peaks.yaml`` (see the shipped example) and turns it into an
explicit settings object that the CLI hands to the orchestrator.  Nothing
in the extractor or store reads configuration on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

from floodpeaks.contracts.errors import ConfigError
from floodpeaks.contracts.thresholds import ThresholdSet
from floodpeaks.shared.config_loader import load_yaml
from floodpeaks.shared.timeutil import parse_ts

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/peaks.yaml"
SOURCE_KINDS = ("usgs", "file", "synthetic")


@dataclass(slots=True)
class PeakSettings:
    """Everything one update pass needs besides the source and the store."""

    site: str = "01412150"
    parameter: str = "72279"
    store_path: str = "data/bivalve_peaks_navd88.json"
    min_separation_minutes: float = 300.0
    overlap_hours: float = 12.0
    precision: int = 3
    default_watermark: datetime = field(
        default_factory=lambda: datetime(2000, 1, 1, tzinfo=UTC)
    )
    thresholds: ThresholdSet | None = None

    # ── source ──
    source_kind: str = "usgs"
    timeout_sec: float = 60.0
    user_agent: str = "floodpeaks/0.1"
    input_path: str | None = None
    seed: int = 42

    @property
    def min_separation(self) -> timedelta:
        return timedelta(minutes=self.min_separation_minutes)

    @property
    def overlap(self) -> timedelta:
        return timedelta(hours=self.overlap_hours)

    # ── construction ──────────────────────────────────────────────────────

    @classmethod
    def from_dict(cls, cfg: dict[str, Any]) -> PeakSettings:
        """Validate a parsed YAML mapping.  Unknown keys are ignored.

        Raises:
            ConfigError: On wrong types or out-of-range values.
        """
        s = cls()
        if "site" in cfg:
            s.site = str(cfg["site"])
        if "parameter" in cfg:
            s.parameter = str(cfg["parameter"])
        if "store_path" in cfg:
            s.store_path = str(cfg["store_path"])

        s.min_separation_minutes = _non_negative(cfg, "min_separation_minutes", s.min_separation_minutes)
        s.overlap_hours = _non_negative(cfg, "overlap_hours", s.overlap_hours)

        precision = cfg.get("precision", s.precision)
        if isinstance(precision, bool) or not isinstance(precision, int) or not 0 <= precision <= 9:
            raise ConfigError(f"precision must be an integer in [0, 9], got {precision!r}")
        s.precision = precision

        if "default_watermark" in cfg:
            try:
                s.default_watermark = parse_ts(cfg["default_watermark"])
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"default_watermark is not ISO-8601: {exc}") from exc

        if cfg.get("thresholds") is not None:
            s.thresholds = ThresholdSet.from_mapping(cfg["thresholds"])

        src = cfg.get("source") or {}
        if not isinstance(src, dict):
            raise ConfigError("source must be a mapping")
        kind = src.get("kind", s.source_kind)
        if kind not in SOURCE_KINDS:
            raise ConfigError(f"source.kind must be one of {SOURCE_KINDS}, got {kind!r}")
        s.source_kind = kind
        s.timeout_sec = _non_negative(src, "timeout_sec", s.timeout_sec)
        s.user_agent = str(src.get("user_agent", s.user_agent))
        if src.get("input_path") is not None:
            s.input_path = str(src["input_path"])
        if "seed" in src:
            try:
                s.seed = int(src["seed"])
            except (TypeError, ValueError):
                raise ConfigError(f"source.seed must be an integer, got {src['seed']!r}") from None
        return s


def _non_negative(cfg: dict[str, Any], key: str, default: float) -> float:
    raw = cfg.get(key, default)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be a number, got {raw!r}") from None
    if value < 0:
        raise ConfigError(f"{key} must be >= 0, got {value}")
    return value


def load_settings(path: str | Path | None = DEFAULT_CONFIG_PATH) -> PeakSettings:
    """Load and validate settings; a missing file yields the defaults."""
    if path is None:
        return PeakSettings()
    try:
        cfg = load_yaml(path)
    except FileNotFoundError:
        log.warning("Config %s not found — using defaults", path)
        return PeakSettings()
    settings = PeakSettings.from_dict(cfg)
    log.info(
        "Settings: site=%s param=%s min_sep=%.0f min overlap=%.1f h precision=%d",
        settings.site,
        settings.parameter,
        settings.min_separation_minutes,
        settings.overlap_hours,
        settings.precision,
    )
    return settings

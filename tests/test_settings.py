"""Tests for floodpeaks.shared — settings, YAML loading, time helpers, seed, atomic writes."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path

import pytest

from floodpeaks.contracts.errors import ConfigError
from floodpeaks.contracts.thresholds import ThresholdSet
from floodpeaks.shared.atomic import atomic_write
from floodpeaks.shared.config_loader import load_yaml
from floodpeaks.shared.seed import init_seed
from floodpeaks.shared.settings import PeakSettings, load_settings
from floodpeaks.shared.timeutil import parse_ts, to_iso

SHIPPED_CONFIG = Path(__file__).resolve().parents[1] / "config" / "peaks.yaml"


class TestLoadYaml:
    def test_mapping(self, tmp_path):
        p = tmp_path / "c.yaml"
        p.write_text("site: '123'\noverlap_hours: 6\n")
        assert load_yaml(p) == {"site": "123", "overlap_hours": 6}

    def test_empty_file(self, tmp_path):
        p = tmp_path / "c.yaml"
        p.write_text("")
        assert load_yaml(p) == {}

    def test_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_yaml(tmp_path / "none.yaml")

    def test_not_a_mapping(self, tmp_path):
        p = tmp_path / "c.yaml"
        p.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_yaml(p)

    def test_invalid_yaml(self, tmp_path):
        p = tmp_path / "c.yaml"
        p.write_text("site: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_yaml(p)


class TestPeakSettings:
    def test_defaults(self):
        s = PeakSettings()
        assert s.min_separation == timedelta(minutes=300)
        assert s.overlap == timedelta(hours=12)
        assert s.precision == 3
        assert s.default_watermark == datetime(2000, 1, 1, tzinfo=UTC)
        assert s.thresholds is None
        assert s.source_kind == "usgs"

    def test_from_dict(self):
        s = PeakSettings.from_dict({
            "site": 1412150,
            "min_separation_minutes": 120,
            "overlap_hours": 6,
            "precision": 2,
            "default_watermark": "2010-01-01T00:00:00Z",
            "thresholds": {"minorLow": 1, "moderateLow": 2, "majorLow": 3},
            "source": {"kind": "synthetic", "seed": "7"},
        })
        assert s.site == "1412150"
        assert s.min_separation == timedelta(hours=2)
        assert s.overlap == timedelta(hours=6)
        assert s.precision == 2
        assert s.default_watermark == datetime(2010, 1, 1, tzinfo=UTC)
        assert s.thresholds == ThresholdSet(1, 2, 3)
        assert s.source_kind == "synthetic"
        assert s.seed == 7

    @pytest.mark.parametrize(
        "cfg",
        [
            {"min_separation_minutes": -1},
            {"overlap_hours": "soon"},
            {"precision": 1.5},
            {"precision": True},
            {"precision": 12},
            {"default_watermark": "yesterday"},
            {"thresholds": {"minorLow": 3, "moderateLow": 2, "majorLow": 1}},
            {"source": {"kind": "ftp"}},
            {"source": "usgs"},
            {"source": {"seed": "abc"}},
        ],
    )
    def test_invalid(self, cfg):
        with pytest.raises(ConfigError):
            PeakSettings.from_dict(cfg)

    def test_shipped_config_loads(self):
        s = load_settings(SHIPPED_CONFIG)
        assert s.site == "01412150"
        assert s.parameter == "72279"
        assert s.min_separation_minutes == 300

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_settings(tmp_path / "none.yaml") == PeakSettings()


class TestTimeutil:
    def test_z_suffix(self):
        assert parse_ts("2024-03-10T18:45:00Z") == datetime(2024, 3, 10, 18, 45, tzinfo=UTC)

    def test_offset_converted(self):
        est = timezone(timedelta(hours=-5))
        assert parse_ts("2024-03-10T13:45:00-05:00") == datetime(2024, 3, 10, 13, 45, tzinfo=est)
        assert parse_ts("2024-03-10T13:45:00-05:00").tzinfo == UTC

    def test_naive_is_utc(self):
        assert parse_ts(datetime(2024, 1, 1)) == datetime(2024, 1, 1, tzinfo=UTC)

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            parse_ts("  ")

    def test_to_iso_milliseconds(self):
        dt = datetime(2024, 3, 10, 18, 45, 7, 123456, tzinfo=UTC)
        assert to_iso(dt) == "2024-03-10T18:45:07.123Z"


class TestSeed:
    def test_dedicated_generator(self):
        assert init_seed(5).random() == init_seed(5).random()
        assert init_seed(5).random() != init_seed(6).random()


class TestAtomicWrite:
    def test_creates_parents_and_replaces(self, tmp_path):
        target = tmp_path / "a" / "b.json"
        atomic_write(target, "one")
        atomic_write(target, "two")
        assert target.read_text() == "two"
        assert [p.name for p in target.parent.iterdir()] == ["b.json"]

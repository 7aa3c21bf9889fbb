"""Tests for floodpeaks.sources — file, USGS IV, synthetic and the factory."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta

import pytest
import requests

from floodpeaks.contracts.errors import ConfigError, SourceError
from floodpeaks.shared.settings import PeakSettings
from floodpeaks.sources.factory import build_source
from floodpeaks.sources.file import FileSource, load_series
from floodpeaks.sources.synthetic import SyntheticTideSource
from floodpeaks.sources.usgs import UsgsIvSource, parse_iv_payload
from tests.conftest import BASE, ts_offset

DAY = timedelta(days=1)


# ═══════════════════════════════════════════════════════════════════════════
#  File source
# ═══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def series_csv(tmp_path):
    path = tmp_path / "series.csv"
    path.write_text(
        "timestamp,value\n"
        "2024-01-01T02:00:00Z,1.5\n"
        "2024-01-01T00:00:00Z,1.0\n"
        "2024-01-01T01:00:00Z,not-a-number\n"
        "2024-01-02T00:00:00Z,2.0\n",
        encoding="utf-8",
    )
    return path


class TestFileSource:
    def test_csv_sorted_and_sanitised(self, series_csv):
        samples = load_series(series_csv)
        assert [s.value for s in samples] == [1.0, 1.5, 2.0]
        assert samples[0].timestamp == BASE

    def test_jsonl_with_legacy_keys(self, tmp_path):
        path = tmp_path / "series.jsonl"
        path.write_text(
            json.dumps({"t": "2024-01-01T00:00:00Z", "ft": 1.25}) + "\n"
            "\n"
            "{broken\n"
            + json.dumps({"timestamp": "2024-01-01T01:00:00Z", "value": 2.5}) + "\n",
            encoding="utf-8",
        )
        samples = load_series(path)
        assert [s.value for s in samples] == [1.25, 2.5]

    def test_fetch_filters_half_open_window(self, series_csv):
        source = FileSource(series_csv)
        samples = source.fetch(BASE, ts_offset(hours=24))
        assert [s.value for s in samples] == [1.0, 1.5]

    def test_fetch_counts_unusable_rows(self, series_csv):
        source = FileSource(series_csv)
        source.fetch(BASE, BASE + DAY)
        assert source.dropped == 1

    def test_jsonl_broken_line_counted(self, tmp_path):
        path = tmp_path / "series.jsonl"
        path.write_text(
            json.dumps({"timestamp": "2024-01-01T00:00:00Z", "value": 1.0}) + "\n"
            "{broken\n"
            "[1, 2]\n",
            encoding="utf-8",
        )
        source = FileSource(path)
        assert len(source.fetch(BASE, BASE + DAY)) == 1
        assert source.dropped == 2

    def test_missing_file_is_source_error(self, tmp_path):
        with pytest.raises(SourceError, match="not found"):
            FileSource(tmp_path / "nope.csv").fetch(BASE, BASE + DAY)


# ═══════════════════════════════════════════════════════════════════════════
#  USGS IV
# ═══════════════════════════════════════════════════════════════════════════


def _iv_payload(points, no_data=-999999.0):
    return {
        "value": {
            "timeSeries": [
                {
                    "variable": {"noDataValue": no_data},
                    "values": [{"value": points}],
                }
            ]
        }
    }


class _FakeResponse:
    def __init__(self, status=200, payload=None, text_only=False):
        self.status_code = status
        self.ok = status < 400
        self.reason = "OK" if self.ok else "Service Unavailable"
        self._payload = payload
        self._text_only = text_only

    def json(self):
        if self._text_only:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class _FakeSession:
    def __init__(self, response=None, error=None):
        self.headers: dict[str, str] = {}
        self.response = response
        self.error = error
        self.requests: list[dict] = []

    def get(self, url, params=None, timeout=None):
        self.requests.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


class TestParseIvPayload:
    def test_points_parsed_and_sorted(self):
        samples = parse_iv_payload(_iv_payload([
            {"dateTime": "2024-01-01T01:00:00.000-05:00", "value": "3.10"},
            {"dateTime": "2024-01-01T00:45:00.000-05:00", "value": "2.95"},
        ]))
        assert [s.value for s in samples] == [2.95, 3.10]
        assert samples[0].timestamp == datetime(2024, 1, 1, 5, 45, tzinfo=UTC)

    def test_no_data_sentinel_dropped(self):
        samples = parse_iv_payload(_iv_payload([
            {"dateTime": "2024-01-01T00:00:00Z", "value": "-999999"},
            {"dateTime": "2024-01-01T00:15:00Z", "value": "1.2"},
        ]))
        assert [s.value for s in samples] == [1.2]

    def test_empty_time_series(self):
        assert parse_iv_payload({"value": {"timeSeries": []}}) == []

    @pytest.mark.parametrize("payload", [{}, {"value": {}}, [], None])
    def test_missing_structure(self, payload):
        with pytest.raises(SourceError):
            parse_iv_payload(payload)


class TestUsgsIvSource:
    START = BASE
    END = BASE + DAY

    def test_request_parameters(self):
        session = _FakeSession(_FakeResponse(payload=_iv_payload([
            {"dateTime": "2024-01-01T06:00:00Z", "value": "4.0"},
        ])))
        source = UsgsIvSource("01412150", "72279", timeout_sec=5, user_agent="ua/1", session=session)
        samples = source.fetch(self.START, self.END)
        assert len(samples) == 1
        sent = session.requests[0]
        assert sent["params"]["sites"] == "01412150"
        assert sent["params"]["parameterCd"] == "72279"
        assert sent["params"]["startDT"] == "2024-01-01T00:00:00.000Z"
        assert sent["params"]["endDT"] == "2024-01-02T00:00:00.000Z"
        assert sent["timeout"] == 5
        assert session.headers["User-Agent"] == "ua/1"

    def test_points_outside_window_dropped(self):
        session = _FakeSession(_FakeResponse(payload=_iv_payload([
            {"dateTime": "2024-01-02T00:00:00Z", "value": "4.0"},
            {"dateTime": "2024-01-01T23:45:00Z", "value": "3.0"},
        ])))
        samples = UsgsIvSource("1", "2", session=session).fetch(self.START, self.END)
        assert [s.value for s in samples] == [3.0]

    def test_http_error(self):
        session = _FakeSession(_FakeResponse(status=503))
        with pytest.raises(SourceError, match="503"):
            UsgsIvSource("1", "2", session=session).fetch(self.START, self.END)

    def test_transport_error(self):
        session = _FakeSession(error=requests.ConnectionError("connection refused"))
        with pytest.raises(SourceError, match="request failed"):
            UsgsIvSource("1", "2", session=session).fetch(self.START, self.END)

    def test_non_json_body(self):
        session = _FakeSession(_FakeResponse(text_only=True))
        with pytest.raises(SourceError, match="non-JSON"):
            UsgsIvSource("1", "2", session=session).fetch(self.START, self.END)

    def test_unusable_points_counted(self):
        session = _FakeSession(_FakeResponse(payload=_iv_payload([
            {"dateTime": "2024-01-01T00:00:00Z", "value": "-999999"},
            {"dateTime": "2024-01-01T00:15:00Z", "value": "1.2"},
            {"dateTime": "2024-01-01T00:30:00Z", "value": ""},
        ])))
        source = UsgsIvSource("1", "2", session=session)
        assert [s.value for s in source.fetch(self.START, self.END)] == [1.2]
        assert source.dropped == 2


# ═══════════════════════════════════════════════════════════════════════════
#  Synthetic
# ═══════════════════════════════════════════════════════════════════════════


class TestSyntheticTideSource:
    def test_day_has_fixed_cadence(self):
        day = SyntheticTideSource(interval_minutes=15).generate_day(BASE)
        assert len(day) == 96
        assert day[1].timestamp - day[0].timestamp == timedelta(minutes=15)

    def test_same_seed_same_series(self):
        a = SyntheticTideSource(seed=7).fetch(BASE, BASE + 2 * DAY)
        b = SyntheticTideSource(seed=7).fetch(BASE, BASE + 2 * DAY)
        assert a == b

    def test_overlapping_windows_agree(self):
        source = SyntheticTideSource(seed=3)
        whole = source.fetch(BASE, BASE + 3 * DAY)
        part = source.fetch(BASE + timedelta(hours=30), BASE + 2 * DAY)
        lookup = {s.timestamp: s.value for s in whole}
        assert part
        assert all(lookup[s.timestamp] == s.value for s in part)

    def test_different_seeds_differ(self):
        a = SyntheticTideSource(seed=1).fetch(BASE, BASE + DAY)
        b = SyntheticTideSource(seed=2).fetch(BASE, BASE + DAY)
        assert [s.value for s in a] != [s.value for s in b]

    def test_window_is_half_open(self):
        samples = SyntheticTideSource().fetch(BASE, BASE + timedelta(hours=1))
        assert samples[0].timestamp == BASE
        assert samples[-1].timestamp < BASE + timedelta(hours=1)


# ═══════════════════════════════════════════════════════════════════════════
#  Factory
# ═══════════════════════════════════════════════════════════════════════════


class TestBuildSource:
    def test_default_is_usgs(self):
        source = build_source(PeakSettings(site="123"), session=_FakeSession())
        assert isinstance(source, UsgsIvSource)
        assert source.site == "123"

    def test_file_needs_path(self):
        with pytest.raises(ConfigError, match="input path"):
            build_source(PeakSettings(), kind="file")

    def test_file_from_argument(self, series_csv):
        source = build_source(PeakSettings(), kind="file", input_path=str(series_csv))
        assert isinstance(source, FileSource)

    def test_synthetic_uses_seed(self):
        source = build_source(PeakSettings(seed=99), kind="synthetic")
        assert isinstance(source, SyntheticTideSource)
        assert source.seed == 99

    def test_unknown_kind(self):
        with pytest.raises(ConfigError, match="Unknown source"):
            build_source(PeakSettings(), kind="ftp")

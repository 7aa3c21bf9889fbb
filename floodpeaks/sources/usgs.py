"""USGS NWIS Instantaneous Values source.

One GET per window against the IV JSON service:

  https://waterservices.usgs.gov/nwis/iv/?format=json&sites=..&parameterCd=..
      &startDT=..&endDT=..&siteStatus=all

Only the first time series of the response is read.  Points equal to the
series' declared ``noDataValue`` are dropped; the remaining points go
through the regular sanitiser.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import requests

from floodpeaks.contracts.errors import SourceError
from floodpeaks.contracts.sample import Sample
from floodpeaks.extractor.sanitize import sanitize
from floodpeaks.shared.timeutil import to_iso
from floodpeaks.sources.base import SeriesSource, in_window

log = logging.getLogger(__name__)

USGS_IV_URL = "https://waterservices.usgs.gov/nwis/iv/"


class UsgsIvSource(SeriesSource):
    """Fetch one site/parameter from the USGS IV service (15-minute data)."""

    name = "usgs"

    def __init__(
        self,
        site: str,
        parameter: str,
        timeout_sec: float = 60.0,
        user_agent: str = "floodpeaks/0.1",
        session: requests.Session | None = None,
        base_url: str = USGS_IV_URL,
    ) -> None:
        self.site = site
        self.parameter = parameter
        self.timeout_sec = timeout_sec
        self.base_url = base_url
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    def describe(self) -> str:
        return f"usgs site={self.site} param={self.parameter}"

    def fetch(self, start: datetime, end: datetime) -> list[Sample]:
        params = {
            "format": "json",
            "sites": self.site,
            "parameterCd": self.parameter,
            "startDT": to_iso(start),
            "endDT": to_iso(end),
            "siteStatus": "all",
        }
        self.dropped = 0
        try:
            resp = self.session.get(self.base_url, params=params, timeout=self.timeout_sec)
        except requests.RequestException as exc:
            raise SourceError(f"USGS IV request failed: {exc}") from exc
        if not resp.ok:
            raise SourceError(f"USGS IV fetch failed: {resp.status_code} {resp.reason}")
        try:
            payload = resp.json()
        except ValueError as exc:
            raise SourceError(f"USGS IV returned non-JSON payload: {exc}") from exc

        rows = iv_rows(payload)
        parsed = sanitize(rows)
        self.dropped = len(rows) - len(parsed)
        samples = in_window(parsed, start, end)
        log.info(
            "USGS %s/%s: %d points in window (%d unusable)",
            self.site, self.parameter, len(samples), self.dropped,
        )
        return samples


def parse_iv_payload(payload: Any) -> list[Sample]:
    """Turn an IV JSON document into sorted Samples.

    An empty ``timeSeries`` list means the site reported nothing for the
    window and yields ``[]``.

    Raises:
        SourceError: If the document does not have the IV structure.
    """
    return sanitize(iv_rows(payload))


def iv_rows(payload: Any) -> list[tuple[Any, Any]]:
    """Raw ``(dateTime, value)`` pairs of the first time series.

    Points carrying the series' ``noDataValue`` come back with a ``None``
    value so the sanitiser drops and counts them.

    Raises:
        SourceError: If the document does not have the IV structure.
    """
    try:
        series_list = payload["value"]["timeSeries"]
    except (KeyError, TypeError) as exc:
        raise SourceError(f"USGS IV payload missing value.timeSeries: {exc!r}") from exc
    if not isinstance(series_list, list):
        raise SourceError("USGS IV value.timeSeries is not a list")
    if not series_list:
        return []

    ts = series_list[0]
    try:
        blocks = ts.get("values") or []
        points = (blocks[0].get("value") or []) if blocks else []
    except (AttributeError, IndexError, TypeError) as exc:
        raise SourceError(f"USGS IV time series has no values block: {exc!r}") from exc

    no_data = (ts.get("variable") or {}).get("noDataValue")
    rows: list[tuple[Any, Any]] = []
    for p in points:
        if not isinstance(p, dict):
            rows.append((None, None))
            continue
        value = p.get("value")
        if no_data is not None and _same_number(value, no_data):
            value = None
        rows.append((p.get("dateTime"), value))
    return rows


def _same_number(a: Any, b: Any) -> bool:
    try:
        return float(a) == float(b)
    except (TypeError, ValueError):
        return False

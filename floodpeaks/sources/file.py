"""Local file source — CSV or JSONL series on disk.

CSV needs a header with ``timestamp`` and ``value`` columns; JSONL needs
one object per line with the same keys.  The legacy ``{"t", "ft"}`` shape
is accepted in both.
"""

from __future__ import annotations

import csv
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from floodpeaks.contracts.errors import SourceError
from floodpeaks.contracts.sample import Sample
from floodpeaks.extractor.sanitize import sanitize
from floodpeaks.sources.base import SeriesSource, in_window

log = logging.getLogger(__name__)


def _row_pair(row: dict[str, Any]) -> tuple[Any, Any]:
    ts = row.get("timestamp", row.get("t"))
    value = row.get("value", row.get("ft"))
    return ts, value


def read_rows_csv(path: str | Path) -> list[tuple[Any, Any]]:
    """Raw ``(timestamp, value)`` pairs from a CSV file."""
    with open(path, encoding="utf-8", newline="") as fh:
        reader = csv.DictReader(fh)
        return [_row_pair(r) for r in reader]


def read_rows_jsonl(path: str | Path) -> list[tuple[Any, Any]]:
    """Raw ``(timestamp, value)`` pairs from a JSONL file.

    Undecodable or non-object lines become ``(None, None)`` so that the
    sanitiser counts them as dropped.
    """
    rows: list[tuple[Any, Any]] = []
    with open(path, encoding="utf-8") as fh:
        for line_no, line in enumerate(fh, 1):
            line = line.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError as exc:
                log.warning("Skipping JSONL line %d: %s", line_no, exc)
                rows.append((None, None))
                continue
            rows.append(_row_pair(obj) if isinstance(obj, dict) else (None, None))
    return rows


def read_rows(path: str | Path) -> list[tuple[Any, Any]]:
    """Auto-detect format by file extension and read raw pairs."""
    if Path(path).suffix in (".jsonl", ".ndjson"):
        return read_rows_jsonl(path)
    return read_rows_csv(path)


def load_series(path: str | Path) -> list[Sample]:
    """Load sanitised samples from a CSV or JSONL file."""
    samples = sanitize(read_rows(path))
    log.info("Loaded %d samples from %s", len(samples), path)
    return samples


class FileSource(SeriesSource):
    """Serves windows out of a single series file, re-read on every fetch."""

    name = "file"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def describe(self) -> str:
        return f"file {self.path}"

    def fetch(self, start: datetime, end: datetime) -> list[Sample]:
        self.dropped = 0
        if not self.path.is_file():
            raise SourceError(f"Series file not found: {self.path}")
        try:
            rows = read_rows(self.path)
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            raise SourceError(f"Cannot read series file {self.path}: {exc}") from exc
        samples = sanitize(rows)
        self.dropped = len(rows) - len(samples)
        log.info("Loaded %d samples from %s (%d unusable)", len(samples), self.path, self.dropped)
        return in_window(samples, start, end)

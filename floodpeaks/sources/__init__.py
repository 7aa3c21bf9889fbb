"""SeriesSource implementations.

The extraction core never depends on a wire format: every feed is hidden
behind ``SeriesSource.fetch(start, end) -> list[Sample]``.

Modules
───────
  base       — abstract SeriesSource
  usgs       — USGS NWIS Instantaneous Values (JSON) over requests
  file       — local CSV / JSONL series
  synthetic  — seeded tide + surge generator for demos and tests
  factory    — build_source(settings) dispatcher
"""

from floodpeaks.sources.base import SeriesSource
from floodpeaks.sources.factory import build_source

__all__ = ["SeriesSource", "build_source"]

"""floodpeaks — flood peak extraction and incremental event cache.

Packages
────────
  contracts  — Sample, ThresholdSet, PeakEvent, Tier, error taxonomy
  shared     — logging, YAML config, settings, timestamps, atomic writes
  extractor  — candidate detection, decluster, classification
  store      — persisted event cache with dedup and watermark
  sources    — SeriesSource implementations (USGS, file, synthetic)
  updater    — update orchestrator, reporter, CLI
  dashboard  — Streamlit viewer for the cache
"""

__version__ = "0.1.0"

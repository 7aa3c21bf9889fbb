"""Shared helpers: logging, YAML config, settings, timestamps, atomic writes."""

"""YAML configuration loading."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from floodpeaks.contracts.errors import ConfigError

log = logging.getLogger(__name__)


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Read a YAML file and return its top-level mapping.

    Args:
        path: Path to the file.

    Returns:
        File contents as a dict (empty dict for an empty file).

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    with p.open("r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {p}: {exc}") from exc
    if data is not None and not isinstance(data, dict):
        raise ConfigError(f"Config {p} must be a mapping at the top level")
    log.debug("Loaded config %s (%d top-level keys)", p.name, len(data or {}))
    return data or {}

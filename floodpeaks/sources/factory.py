"""build_source — pick a SeriesSource from settings."""

from __future__ import annotations

import logging

import requests

from floodpeaks.contracts.errors import ConfigError
from floodpeaks.shared.settings import PeakSettings
from floodpeaks.sources.base import SeriesSource
from floodpeaks.sources.file import FileSource
from floodpeaks.sources.synthetic import SyntheticTideSource
from floodpeaks.sources.usgs import UsgsIvSource

log = logging.getLogger(__name__)


def build_source(
    settings: PeakSettings,
    kind: str | None = None,
    input_path: str | None = None,
    session: requests.Session | None = None,
) -> SeriesSource:
    """Build the source named by *kind* (default: ``settings.source_kind``).

    Raises:
        ConfigError: For an unknown kind or a file source without a path.
    """
    kind = kind or settings.source_kind
    if kind == "usgs":
        source: SeriesSource = UsgsIvSource(
            site=settings.site,
            parameter=settings.parameter,
            timeout_sec=settings.timeout_sec,
            user_agent=settings.user_agent,
            session=session,
        )
    elif kind == "file":
        path = input_path or settings.input_path
        if not path:
            raise ConfigError("file source needs an input path (--input or source.input_path)")
        source = FileSource(path)
    elif kind == "synthetic":
        source = SyntheticTideSource(seed=settings.seed)
    else:
        raise ConfigError(f"Unknown source kind: {kind!r}")
    log.debug("Source: %s", source.describe())
    return source

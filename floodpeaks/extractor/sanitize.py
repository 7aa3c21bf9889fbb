"""Sample sanitising — per-observation validation before extraction.

Missing timestamps, missing values and non-finite values are dropped
here; extraction never sees them and they never abort a run.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from typing import Any

from floodpeaks.contracts.errors import ValidationError
from floodpeaks.contracts.sample import Sample
from floodpeaks.shared.timeutil import parse_ts

log = logging.getLogger(__name__)


def coerce_sample(timestamp: Any, value: Any) -> Sample:
    """Build a Sample from raw feed fields.

    Raises:
        ValidationError: If either field is missing or unusable.
    """
    if timestamp is None or timestamp == "":
        raise ValidationError("missing timestamp")
    try:
        ts = parse_ts(timestamp)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"bad timestamp {timestamp!r}: {exc}") from exc

    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"missing value at {timestamp}")
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"non-numeric value {value!r} at {timestamp}") from None
    if not math.isfinite(v):
        raise ValidationError(f"non-finite value {value!r} at {timestamp}")
    return Sample(timestamp=ts, value=v)


def sanitize(raw: Iterable[Sample | tuple[Any, Any]]) -> list[Sample]:
    """Coerce every observation, drop invalid ones, return sorted Samples.

    *raw* may hold Samples or ``(timestamp, value)`` pairs.
    """
    samples: list[Sample] = []
    dropped = 0
    for item in raw:
        ts, val = (item.timestamp, item.value) if isinstance(item, Sample) else item
        try:
            samples.append(coerce_sample(ts, val))
        except ValidationError as exc:
            dropped += 1
            log.debug("Dropping sample: %s", exc)

    samples.sort(key=lambda s: s.timestamp)
    if dropped:
        log.info("Dropped %d invalid samples (%d kept)", dropped, len(samples))
    return samples

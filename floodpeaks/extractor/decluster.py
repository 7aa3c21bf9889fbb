"""Local-maxima candidates and temporal declustering.

A storm surge produces one true crest amid minor tidal oscillation; the
decluster step keeps at most one representative per ``min_separation``
window so the crest is reported once.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from floodpeaks.contracts.errors import ConfigError
from floodpeaks.contracts.sample import Sample

log = logging.getLogger(__name__)


def find_candidates(samples: list[Sample]) -> list[Sample]:
    """Return interior samples that are >= both neighbours.

    A sample equal to both neighbours sits on a flat plateau and is not a
    distinguishable peak, so it is skipped.

    *samples* must be sorted by timestamp.
    """
    candidates: list[Sample] = []
    for i in range(1, len(samples) - 1):
        a, b, c = samples[i - 1].value, samples[i].value, samples[i + 1].value
        if b >= a and b >= c and not (b == a and b == c):
            candidates.append(samples[i])
    return candidates


def decluster(candidates: list[Sample], min_separation: timedelta) -> list[Sample]:
    """Collapse candidates closer than *min_separation* to one representative.

    Candidates are scanned in time order against the current cluster
    representative.  A candidate within *min_separation* of it (inclusive)
    replaces it only when strictly higher; on a tie the earlier one stays.
    A candidate further away closes the cluster and starts a new one.

    Raises:
        ConfigError: If *min_separation* is negative.
    """
    if min_separation < timedelta(0):
        raise ConfigError(f"min_separation must be >= 0, got {min_separation}")
    if not candidates:
        return []

    kept: list[Sample] = []
    cur = candidates[0]
    for cand in candidates[1:]:
        if cand.timestamp - cur.timestamp <= min_separation:
            if cand.value > cur.value:
                cur = cand
        else:
            kept.append(cur)
            cur = cand
    kept.append(cur)

    if len(kept) < len(candidates):
        log.debug("Decluster: %d candidates -> %d peaks", len(candidates), len(kept))
    return kept

"""Deterministic RNG initialisation for reproducible synthetic series."""

from __future__ import annotations

import logging
import random

log = logging.getLogger(__name__)


def init_seed(seed: int) -> random.Random:
    """Return a dedicated ``random.Random`` seeded with *seed*.

    The global ``random`` module is left alone; synthetic sources own
    their generator so that two sources never share state.
    """
    rng = random.Random(seed)
    log.debug("Random seed initialised: %d", seed)
    return rng

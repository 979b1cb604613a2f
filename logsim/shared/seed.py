"""Deterministic seed initialisation for reproducible runs."""

from __future__ import annotations

import logging
import random

log = logging.getLogger(__name__)


def init_rng(seed: int | None) -> random.Random:
    """Return a dedicated Random instance.

    With ``seed=None`` the generator is seeded from OS entropy, which is what
    the live simulator wants; a fixed seed makes a batch run reproducible.
    The global ``random`` module is never touched.
    """
    rng = random.Random(seed)
    if seed is None:
        log.debug("Random generator seeded from OS entropy")
    else:
        log.info("Random seed initialised: %d", seed)
    return rng

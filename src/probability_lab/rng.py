from __future__ import annotations

import logging
import random
from typing import Callable, Optional

LOG = logging.getLogger(__name__)

Rng = Callable[[], float]

_MASK32 = 0xFFFFFFFF

# FNV-1a 32-bit
_FNV_OFFSET = 0x811C9DC5
_FNV_PRIME = 0x01000193

# Shared stream for every blank / absent seed
DEFAULT_SEED = 0x6D2B79F5


def hash_string_to_uint32(text: str) -> int:
    """
    Deterministic str -> unsigned 32-bit hash (FNV-1a over UTF-8 bytes).

    The empty string hashes to the FNV offset basis.
    """
    h = _FNV_OFFSET
    for byte in text.encode("utf-8"):
        h ^= byte
        h = (h * _FNV_PRIME) & _MASK32
    return h


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


def mulberry32(seed: int) -> Rng:
    """
    Mulberry32 generator.

    Returns a zero-argument callable producing floats in [0, 1). The whole
    generator state is one unsigned 32-bit counter, so identical seeds give
    identical sequences on every platform.
    """
    state = seed & _MASK32

    def next_float() -> float:
        nonlocal state
        state = (state + 0x6D2B79F5) & _MASK32
        t = state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        t &= _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / 4294967296.0

    return next_float


def create_rng_from_seed(seed_text: Optional[str]) -> Rng:
    """
    Build a reproducible RNG from a seed string.

    None, "" and whitespace-only seeds all map to one shared default stream.
    Anything else is trimmed and hashed into the 32-bit generator state.
    """
    text = seed_text.strip() if isinstance(seed_text, str) else ""
    if not text:
        return mulberry32(DEFAULT_SEED)
    return mulberry32(hash_string_to_uint32(text))


def create_entropy_rng() -> Rng:
    """
    Non-reproducible RNG for runs with no configured seed.
    """
    seed = random.SystemRandom().getrandbits(32)
    LOG.debug("seeding rng from system entropy: %#010x", seed)
    return mulberry32(seed)

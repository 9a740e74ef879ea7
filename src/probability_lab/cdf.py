from __future__ import annotations

from typing import List, Sequence

from .rng import Rng


def build_cdf(probabilities: Sequence[float]) -> List[float]:
    """
    Prefix-sum the vector and divide by the total.

    A total <= 0 yields a same-length vector of zeros (degenerate marker).
    """
    cdf: List[float] = []
    total = 0.0
    for p in probabilities:
        total += p
        cdf.append(total)

    if not cdf:
        return cdf
    last = cdf[-1]
    if last <= 0:
        return [0.0] * len(cdf)
    return [v / last for v in cdf]


def sample_index(rng: Rng, cdf: Sequence[float]) -> int:
    """
    Inverse-transform sampling: first index i with r < cdf[i].

    Falls through to the last index, which also covers the degenerate
    all-zero cdf and r at the supremum.
    """
    r = rng()
    for i, threshold in enumerate(cdf):
        if r < threshold:
            return i
    return max(0, len(cdf) - 1)

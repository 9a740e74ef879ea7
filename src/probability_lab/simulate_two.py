from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

from .cdf import build_cdf, sample_index
from .devices import DeviceDefinition, DeviceKind
from .rng import Rng
from .relationships import INDEPENDENT, Complement, Copy, Dependent, Independent, check_relationship
from .state import TwoTrialState


def half_split(size: int) -> int:
    """
    First index of the "high" half: indices below ceil(size / 2) are low.
    """
    return math.ceil(size / 2)


def boosted_probabilities(
    probabilities: Sequence[float],
    a_is_high: bool,
    boost_factor: float,
) -> List[float]:
    """
    Multiply B's probabilities on the half matching A's half by
    `boost_factor`, then renormalize.
    """
    split = half_split(len(probabilities))
    weights = [
        p * boost_factor if (i >= split) == a_is_high else p
        for i, p in enumerate(probabilities)
    ]
    total = sum(weights)
    if total <= 0:
        return list(probabilities)
    return [w / total for w in weights]


def dependent_cdfs(definition_b: DeviceDefinition, boost_factor: float) -> Optional[Tuple[List[float], List[float]]]:
    """
    (cdf when A is low, cdf when A is high), or None if B carries no
    probability vector.
    """
    if not definition_b.probabilities:
        return None
    return (
        build_cdf(boosted_probabilities(definition_b.probabilities, False, boost_factor)),
        build_cdf(boosted_probabilities(definition_b.probabilities, True, boost_factor)),
    )


def simulate_two_trials(state: TwoTrialState, rng: Rng, n: int) -> None:
    """
    Run `n` two-event trials against `state`.

    A is always drawn first from its own cdf; how B is drawn depends on
    state.relationship. The two dependent cdfs only depend on A's half, so
    they are derived once per batch.
    """
    def_a = state.definition_a
    def_b = state.definition_b
    if def_a is None or def_b is None or n <= 0:
        return

    relationship = state.relationship
    cdf_a = def_a.cdf
    cdf_b = def_b.cdf
    size_b = def_b.size
    split_a = half_split(def_a.size)

    dep_cdfs = None
    match check_relationship(relationship):
        case Dependent(boost_factor=boost):
            dep_cdfs = dependent_cdfs(def_b, boost)
        case Complement() if def_a.kind is not DeviceKind.COIN:
            relationship = INDEPENDENT
        case Independent() | Copy() | Complement():
            pass

    counts_a = state.counts_a
    counts_b = state.counts_b
    joint = state.joint
    history = state.history

    for _ in range(n):
        a = sample_index(rng, cdf_a)

        match relationship:
            case Independent():
                b = sample_index(rng, cdf_b)
            case Copy():
                b = a if a < size_b else sample_index(rng, cdf_b)
            case Complement():
                b = 1 - a
            case Dependent():
                if dep_cdfs is None:
                    b = sample_index(rng, cdf_b)
                else:
                    b = sample_index(rng, dep_cdfs[1] if a >= split_a else dep_cdfs[0])

        counts_a[a] += 1
        counts_b[b] += 1
        joint[a][b] += 1
        state.trials += 1
        state.last_a = a
        state.last_b = b
        if history is not None:
            history.push_pair(a, b)

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

DEFAULT_BOOST = 3.5


@dataclass(frozen=True)
class Independent:
    """B is drawn from its own distribution."""


@dataclass(frozen=True)
class Copy:
    """B repeats A's outcome index. Both devices must share a domain."""


@dataclass(frozen=True)
class Complement:
    """B is the other face of a coin (1 - a)."""


@dataclass(frozen=True)
class Dependent:
    """
    B leans towards the half of its outcomes matching A's half.

    Every B probability whose half (low/high) matches A's half is multiplied
    by `boost_factor` before renormalizing.
    """
    boost_factor: float = DEFAULT_BOOST


Relationship = Union[Independent, Copy, Complement, Dependent]

INDEPENDENT = Independent()
COPY = Copy()
COMPLEMENT = Complement()


def check_relationship(value: Any) -> Relationship:
    """
    Return `value` unchanged if it is one of the relationship modes.

    Raises TypeError for anything else, including the bare string tags
    ("copy", "complement", ...).
    """
    if not isinstance(value, (Independent, Copy, Complement, Dependent)):
        raise TypeError(f"not a relationship: {value!r}")
    return value

# simulations/methods.py

from __future__ import annotations

from typing import Callable, Dict, Optional

from probability_lab.relationships import Complement, Copy, Dependent, Independent, Relationship


def _dependent(boost: Optional[float] = None) -> Relationship:
    return Dependent() if boost is None else Dependent(boost_factor=boost)


# --- Registry / dispatch -----------------------------------------------------

# RELATIONSHIPS maps CLI name -> factory.
# Only "dependent" reads the boost argument.
RELATIONSHIPS: Dict[str, Callable[..., Relationship]] = {
    "independent": lambda boost=None: Independent(),
    "copy": lambda boost=None: Copy(),
    "complement": lambda boost=None: Complement(),
    "dependent": _dependent,
}


def get_relationship(name: str, boost: Optional[float] = None) -> Relationship:
    name = name.strip().lower()
    if name not in RELATIONSHIPS:
        raise ValueError(f"unknown relationship '{name}'. Available: {sorted(RELATIONSHIPS.keys())}")
    return RELATIONSHIPS[name](boost)


def relationship_name(relationship: Relationship) -> str:
    match relationship:
        case Independent():
            return "independent"
        case Copy():
            return "copy"
        case Complement():
            return "complement"
        case Dependent(boost_factor=boost):
            return f"dependent(x{boost:g})"
    raise TypeError(f"not a relationship: {relationship!r}")

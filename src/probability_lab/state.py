from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .devices import DeviceDefinition
from .history import IndexHistory, PackedPairHistory
from .relationships import INDEPENDENT, Relationship, check_relationship


@dataclass(frozen=True)
class ConvergencePoint:
    trials: int
    relative: Tuple[float, ...]


@dataclass
class SingleTrialState:
    """
    Running totals for a single-event experiment.

    Mutated only by simulate_single_trials(); replaced wholesale via
    reset() when the device definition changes.
    """
    definition: Optional[DeviceDefinition] = None
    counts: List[int] = field(default_factory=list)
    trials: int = 0
    last_outcome: Optional[int] = None
    convergence: List[ConvergencePoint] = field(default_factory=list)
    history: Optional[IndexHistory] = None

    def __post_init__(self) -> None:
        if self.definition is not None and not self.counts:
            self.counts = [0] * self.definition.size

    def reset(self, definition: Optional[DeviceDefinition] = None) -> None:
        if definition is not None:
            self.definition = definition
        size = self.definition.size if self.definition is not None else 0
        self.counts = [0] * size
        self.trials = 0
        self.last_outcome = None
        self.convergence = []
        if self.history is not None:
            self.history.clear()


@dataclass
class TwoTrialState:
    """
    Running totals for a two-event experiment.

    joint[a][b] counts trials where A landed on a and B on b; its row sums
    equal counts_a and its column sums equal counts_b.
    """
    definition_a: Optional[DeviceDefinition] = None
    definition_b: Optional[DeviceDefinition] = None
    relationship: Relationship = INDEPENDENT
    counts_a: List[int] = field(default_factory=list)
    counts_b: List[int] = field(default_factory=list)
    joint: List[List[int]] = field(default_factory=list)
    trials: int = 0
    last_a: Optional[int] = None
    last_b: Optional[int] = None
    history: Optional[PackedPairHistory] = None

    def __post_init__(self) -> None:
        check_relationship(self.relationship)
        if not self.joint and self.definition_a is not None and self.definition_b is not None:
            self.reset()

    def reset(
        self,
        definition_a: Optional[DeviceDefinition] = None,
        definition_b: Optional[DeviceDefinition] = None,
        relationship: Optional[Relationship] = None,
    ) -> None:
        if definition_a is not None:
            self.definition_a = definition_a
        if definition_b is not None:
            self.definition_b = definition_b
        if relationship is not None:
            self.relationship = check_relationship(relationship)

        rows = self.definition_a.size if self.definition_a is not None else 0
        cols = self.definition_b.size if self.definition_b is not None else 0
        self.counts_a = [0] * rows
        self.counts_b = [0] * cols
        self.joint = [[0] * cols for _ in range(rows)]
        self.trials = 0
        self.last_a = None
        self.last_b = None
        if self.history is not None:
            self.history.clear()


def relative_frequencies(counts: List[int], trials: int) -> Tuple[float, ...]:
    if trials <= 0:
        return tuple(0.0 for _ in counts)
    return tuple(c / trials for c in counts)

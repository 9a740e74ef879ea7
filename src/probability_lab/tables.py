from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .devices import DeviceDefinition

MISSING = "—"


@dataclass(frozen=True)
class FrequencyRow:
    label: str
    probability: float
    count: int
    relative: Optional[float]
    difference: Optional[float]


@dataclass(frozen=True)
class TwoWayTable:
    row_labels: List[str]
    col_labels: List[str]
    cells: List[List[int]]
    row_totals: List[int]
    col_totals: List[int]
    total: int


def frequency_rows(definition: DeviceDefinition, counts: Sequence[int], trials: int) -> List[FrequencyRow]:
    """
    Theory vs. observation per outcome. `relative` and `difference` are
    None until at least one trial has run.
    """
    rows = []
    for i, label in enumerate(definition.labels):
        count = counts[i] if i < len(counts) else 0
        p = definition.probabilities[i] if i < len(definition.probabilities) else 0.0
        est = count / trials if trials > 0 else None
        rows.append(FrequencyRow(
            label=label,
            probability=p,
            count=count,
            relative=est,
            difference=None if est is None else est - p,
        ))
    return rows


def two_way_table(
    definition_a: DeviceDefinition,
    definition_b: DeviceDefinition,
    joint: Sequence[Sequence[int]],
    counts_a: Sequence[int],
    counts_b: Sequence[int],
    trials: int,
) -> TwoWayTable:
    cols = definition_b.size
    cells = []
    for r in range(definition_a.size):
        row = joint[r] if r < len(joint) else ()
        cells.append([row[c] if c < len(row) else 0 for c in range(cols)])
    return TwoWayTable(
        row_labels=list(definition_a.labels),
        col_labels=list(definition_b.labels),
        cells=cells,
        row_totals=[counts_a[r] if r < len(counts_a) else 0 for r in range(definition_a.size)],
        col_totals=[counts_b[c] if c < len(counts_b) else 0 for c in range(cols)],
        total=trials,
    )


def format_count(value: int) -> str:
    return f"{value:,}"


def format_probability(value: Optional[float], digits: int = 1) -> str:
    if value is None or not math.isfinite(value):
        return MISSING
    return f"{value * 100:.{digits}f}%"


def format_signed_probability(value: Optional[float], digits: int = 1) -> str:
    if value is None or not math.isfinite(value):
        return MISSING
    sign = "+" if value > 0 else ""
    return f"{sign}{value * 100:.{digits}f}%"

# simulations/common.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence
import math
import time

from probability_lab.devices import DeviceConfig, DeviceDefinition
from probability_lab.relationships import INDEPENDENT, Relationship
from probability_lab.tables import format_count, format_probability, format_signed_probability, frequency_rows


MODES = ("single", "two")


@dataclass(frozen=True)
class ExperimentSpec:
    """
    Parameters of one headless experiment.

    device_b and relationship are only read in "two" mode.
    """
    device_a: DeviceConfig = field(default_factory=DeviceConfig)
    trials: int = 1000
    seed: Optional[str] = None
    mode: str = "single"
    device_b: Optional[DeviceConfig] = None
    relationship: Relationship = INDEPENDENT

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            raise ValueError(f"mode must be one of {MODES}, got {self.mode!r}")
        if self.trials < 0:
            raise ValueError("trials must be >= 0")


@dataclass(frozen=True)
class SummaryStats:
    """
    Basic summary stats for final outcome counts.
    """
    min: int
    max: int
    mean: float
    std: float  # population stddev


def summarize_counts(counts: Sequence[int]) -> SummaryStats:
    """
    Compute min/max/mean/std over integer counts (population stddev).
    Stddev computed via a two-pass method for clarity.
    """
    if not counts:
        raise ValueError("counts must be non-empty")

    n = len(counts)
    mean = sum(counts) / n

    var_acc = 0.0
    for c in counts:
        d = c - mean
        var_acc += d * d
    std = math.sqrt(var_acc / n)

    return SummaryStats(min=min(counts), max=max(counts), mean=mean, std=std)


def chi_square(counts: Sequence[int], probabilities: Sequence[float]) -> float:
    """
    Pearson goodness-of-fit statistic of `counts` against `probabilities`.
    Outcomes with zero expected count are skipped.
    """
    total = sum(counts)
    stat = 0.0
    for c, p in zip(counts, probabilities):
        expected = total * p
        if expected > 0:
            d = c - expected
            stat += d * d / expected
    return stat


def same_half_share(joint: Sequence[Sequence[int]]) -> float:
    """
    Share of trials where A and B landed in the same half (low/high) of
    their outcome ranges.
    """
    rows = len(joint)
    cols = len(joint[0]) if rows else 0
    split_a = math.ceil(rows / 2)
    split_b = math.ceil(cols / 2)

    same = 0
    total = 0
    for a, row in enumerate(joint):
        for b, n in enumerate(row):
            total += n
            if (a >= split_a) == (b >= split_b):
                same += n
    return same / total if total else 0.0


@dataclass
class ExperimentResult:
    """
    Common return type for all experiments.
    """
    label: str
    spec: ExperimentSpec
    definition: DeviceDefinition
    counts: List[int]
    trials: int

    stats: SummaryStats = field(init=False)
    definition_b: Optional[DeviceDefinition] = None
    counts_b: Optional[List[int]] = None
    joint: Optional[List[List[int]]] = None
    history: Any = None
    runtime_s: Optional[float] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.stats = summarize_counts(self.counts)

        # Sanity: counts should sum to trials
        actual = sum(self.counts)
        if actual != self.trials:
            raise ValueError(
                f"counts sum mismatch: expected {self.trials}, got {actual}"
            )


class Timer:
    """
    Tiny timing helper for simulations.
    Usage:
        with Timer() as t:
            ...
        elapsed = t.elapsed_s
    """
    def __init__(self) -> None:
        self._start: Optional[float] = None
        self.elapsed_s: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._start is not None:
            self.elapsed_s = time.perf_counter() - self._start


def format_stats_line(r: ExperimentResult) -> str:
    """
    Human-friendly one-liner for printing in compare tools.
    """
    s = r.stats
    return (
        f"{r.label}: trials={format_count(r.trials)}, min={s.min}, max={s.max}, "
        f"mean={s.mean:.3f}, std={s.std:.3f}"
        + (f", runtime={r.runtime_s:.3f}s" if r.runtime_s is not None else "")
    )


def format_frequency_table(definition: DeviceDefinition, counts: Sequence[int], trials: int) -> str:
    """
    Plain-text frequency table: theory, count, relative frequency, delta.
    """
    rows = frequency_rows(definition, counts, trials)
    width = max([len("Outcome")] + [len(r.label) for r in rows])
    lines = [f"{'Outcome':<{width}}  {'P(theory)':>9}  {'Count':>12}  {'Rel. freq':>9}  {'Δ':>7}"]
    for r in rows:
        lines.append(
            f"{r.label:<{width}}  {format_probability(r.probability):>9}  {format_count(r.count):>12}  "
            f"{format_probability(r.relative):>9}  {format_signed_probability(r.difference):>7}"
        )
    return "\n".join(lines)

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple, Union

from .cdf import build_cdf

LOG = logging.getLogger(__name__)


class DeviceKind(str, Enum):
    COIN = "coin"
    DIE = "die"
    SPINNER = "spinner"
    CUSTOM = "custom"


DEVICE_META = {
    DeviceKind.COIN: ("Coin", "🪙"),
    DeviceKind.DIE: ("Die", "🎲"),
    DeviceKind.SPINNER: ("Spinner", "⭕"),
    DeviceKind.CUSTOM: ("Custom Device", ""),
}

COIN_LABELS = ("Heads", "Tails")
DIE_LABELS = ("1", "2", "3", "4", "5", "6")

# Per-device clamp range applied after normalization
COIN_BOUNDS = (0.01, 0.99)
DIE_BOUNDS = (0.01, 0.8)

SPINNER_MIN_SECTORS = 2
SPINNER_MAX_SECTORS = 12
SPINNER_DEFAULT_SECTORS = 8

MIN_CUSTOM_OUTCOMES = 2
MAX_CUSTOM_OUTCOMES = 50
CUSTOM_FALLBACK_LABELS = ("Outcome 1", "Outcome 2")


@dataclass(frozen=True)
class DeviceDefinition:
    """
    Validated description of one randomness source.

    Built by build_device_definition() and never mutated; a configuration
    change produces a new definition.
    """
    kind: DeviceKind
    labels: Tuple[str, ...]
    probabilities: Tuple[float, ...]
    cdf: Tuple[float, ...]
    name: str = ""
    icon: str = ""
    sectors: Optional[int] = None
    skew: Optional[float] = None

    @property
    def size(self) -> int:
        return len(self.labels)


@dataclass(frozen=True)
class DeviceConfig:
    """
    Device configuration as handed over by the settings layer.

    Only the fields relevant to `kind` are read. `kind` may be a DeviceKind
    or its string value.
    """
    kind: Union[DeviceKind, str] = DeviceKind.COIN
    coin_probabilities: Optional[Sequence[Any]] = None
    die_probabilities: Optional[Sequence[Any]] = None
    spinner_sectors: Optional[Any] = None
    spinner_skew: Optional[Any] = None
    name: Optional[str] = None
    icon: Optional[str] = None
    outcomes: Sequence[Any] = field(default_factory=tuple)
    probabilities: Optional[Sequence[Any]] = None


# ------------------------------------------------------------
# Numeric helpers
# ------------------------------------------------------------

def clamp(value: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, value))


def safe_number(value: Any, fallback: float) -> float:
    """
    float(value) if it is a finite number, otherwise `fallback`.
    """
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return fallback
    return parsed if math.isfinite(parsed) else fallback


def uniform(n: int) -> List[float]:
    if n <= 0:
        return []
    return [1.0 / n] * n


def normalize_bounded(
    probs: Optional[Sequence[Any]],
    size: int,
    lo: float,
    hi: float,
) -> List[float]:
    """
    Normalize a coin/die vector and keep every entry inside [lo, hi].

    Steps:
      1. Negative or non-numeric entries count as 0; divide by the sum.
         A wrong-length vector or a sum <= 0 falls back to uniform.
      2. Clamp each entry into [lo, hi].
      3. One corrective pass: a shortfall is spread over entries still
         below `hi`, weighted by their value (equal split if all weights
         are 0), re-capped at `hi`. A surplus is taken from entries above
         `lo`, weighted by their room above `lo`.
      4. Re-normalize and re-clamp once more.

    This is not iterated to a fixed point. When several entries hit `hi`
    at once the result can miss 1.0 by a small residual.
    """
    values: List[float] = []
    if probs is not None and len(probs) == size:
        values = [max(0.0, safe_number(p, 0.0)) for p in probs]

    total = sum(values)
    if not values or total <= 0:
        if probs is not None:
            LOG.warning("invalid probabilities %r, using uniform", probs)
        values = uniform(size)
    else:
        values = [v / total for v in values]

    values = [clamp(v, lo, hi) for v in values]
    total = sum(values)

    if total < 1.0:
        shortfall = 1.0 - total
        open_idx = [i for i, v in enumerate(values) if v < hi]
        weight_sum = sum(values[i] for i in open_idx)
        for i in open_idx:
            if weight_sum > 0:
                share = shortfall * values[i] / weight_sum
            else:
                share = shortfall / len(open_idx)
            values[i] = min(hi, values[i] + share)
    elif total > 1.0:
        surplus = total - 1.0
        room = [v - lo for v in values]
        room_sum = sum(r for r in room if r > 0)
        if room_sum > 0:
            for i, r in enumerate(room):
                if r > 0:
                    values[i] = max(lo, values[i] - surplus * r / room_sum)

    total = sum(values)
    if total > 0:
        values = [v / total for v in values]
    return [clamp(v, lo, hi) for v in values]


# ------------------------------------------------------------
# Builders
# ------------------------------------------------------------

def _coerce_kind(kind: Union[DeviceKind, str]) -> DeviceKind:
    if isinstance(kind, DeviceKind):
        return kind
    try:
        return DeviceKind(str(kind).strip().lower())
    except ValueError:
        LOG.warning("invalid device %r, defaulting to coin", kind)
        return DeviceKind.COIN


def _definition(kind: DeviceKind, labels: Sequence[str], probabilities: Sequence[float], **extra: Any) -> DeviceDefinition:
    name, icon = DEVICE_META[kind]
    extra.setdefault("name", name)
    extra.setdefault("icon", icon)
    return DeviceDefinition(
        kind=kind,
        labels=tuple(labels),
        probabilities=tuple(probabilities),
        cdf=tuple(build_cdf(probabilities)),
        **extra,
    )


def spinner_probabilities(sectors: int, skew: float) -> List[float]:
    """
    Sector i gets weight exp(skew * (i - center)), center = (sectors - 1) / 2.
    """
    center = (sectors - 1) / 2
    weights = [math.exp(skew * (i - center)) for i in range(sectors)]
    total = sum(weights)
    return [w / total for w in weights]


def _custom_settings(config: DeviceConfig) -> Tuple[str, str, List[str], List[float]]:
    name = config.name.strip() if isinstance(config.name, str) and config.name.strip() else DEVICE_META[DeviceKind.CUSTOM][0]
    icon = config.icon.strip() if isinstance(config.icon, str) else ""

    raw_probs = list(config.probabilities) if config.probabilities is not None else None
    labels: List[str] = []
    paired: Optional[List[Any]] = [] if raw_probs is not None else None
    seen = set()

    for i, raw in enumerate(config.outcomes or ()):
        label = str(raw if raw is not None else "").strip()
        if not label or label in seen:
            continue
        seen.add(label)
        labels.append(label)
        if paired is not None:
            paired.append(raw_probs[i] if i < len(raw_probs) else None)

    if len(labels) < MIN_CUSTOM_OUTCOMES:
        LOG.warning("custom device has fewer than %d outcomes, using defaults", MIN_CUSTOM_OUTCOMES)
        labels = list(CUSTOM_FALLBACK_LABELS)
        if paired is not None:
            paired = []

    if len(labels) > MAX_CUSTOM_OUTCOMES:
        LOG.warning("custom device exceeds %d outcomes, truncating", MAX_CUSTOM_OUTCOMES)
        labels = labels[:MAX_CUSTOM_OUTCOMES]
        if paired is not None:
            paired = paired[:MAX_CUSTOM_OUTCOMES]

    probabilities: Optional[List[float]] = None
    if paired is not None:
        if len(paired) != len(labels):
            LOG.warning("custom probabilities length mismatch, using uniform")
        else:
            numeric = [safe_number(p, -1.0) for p in paired]
            total = sum(numeric)
            if any(v < 0 for v in numeric) or total <= 0:
                LOG.warning("custom probabilities invalid, using uniform")
            else:
                probabilities = [v / total for v in numeric]

    if probabilities is None:
        probabilities = uniform(len(labels))

    return name, icon, labels, probabilities


def build_device_definition(config: Optional[DeviceConfig] = None) -> DeviceDefinition:
    """
    Turn a device configuration into a DeviceDefinition.

    Never raises for malformed parameters: anything unusable is replaced by
    the device's default and logged.
    """
    config = config or DeviceConfig()
    kind = _coerce_kind(config.kind)

    if kind is DeviceKind.COIN:
        probabilities = normalize_bounded(config.coin_probabilities, len(COIN_LABELS), *COIN_BOUNDS)
        return _definition(kind, COIN_LABELS, probabilities)

    if kind is DeviceKind.DIE:
        probabilities = normalize_bounded(config.die_probabilities, len(DIE_LABELS), *DIE_BOUNDS)
        return _definition(kind, DIE_LABELS, probabilities)

    if kind is DeviceKind.CUSTOM:
        name, icon, labels, probabilities = _custom_settings(config)
        return _definition(kind, labels, probabilities, name=name, icon=icon)

    sectors = int(round(clamp(
        safe_number(config.spinner_sectors, SPINNER_DEFAULT_SECTORS),
        SPINNER_MIN_SECTORS,
        SPINNER_MAX_SECTORS,
    )))
    skew = clamp(safe_number(config.spinner_skew, 0.0), -1.0, 1.0)
    labels = [str(i + 1) for i in range(sectors)]
    return _definition(kind, labels, spinner_probabilities(sectors, skew), sectors=sectors, skew=skew)

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EngineSettings:
    """
    Tunables shared by the simulators and the scheduler.

    The defaults are the values the lab ships with; tests shrink them to
    exercise chunk boundaries without running millions of trials.
    """
    chunk_size: int = 50_000
    convergence_cap: int = 2000
    min_speed: float = 1.0
    max_speed: float = 60.0
    # 0 => one trial per auto-run tick
    auto_chunk_per_speed: int = 0

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")
        if self.convergence_cap < 2:
            raise ValueError("convergence_cap must be >= 2")
        if not (0 < self.min_speed <= self.max_speed):
            raise ValueError("speed bounds must satisfy 0 < min_speed <= max_speed")
        if self.auto_chunk_per_speed < 0:
            raise ValueError("auto_chunk_per_speed must be >= 0")


DEFAULT_SETTINGS = EngineSettings()

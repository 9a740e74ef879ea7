from __future__ import annotations

import asyncio
import functools
import logging
import math
import numbers
from typing import Callable, Optional

from .rng import Rng
from .settings import DEFAULT_SETTINGS, EngineSettings
from .simulate_single import simulate_single_trials
from .simulate_two import simulate_two_trials
from .state import SingleTrialState, TwoTrialState

LOG = logging.getLogger(__name__)

StepFn = Callable[[int], None]
Callback = Callable[[], None]


def _positive_finite(value) -> bool:
    """True for a real, finite, strictly positive number (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value) and value > 0


class TrialScheduler:
    """
    Cooperative driver that feeds trial batches to a simulator without
    blocking the host event loop.

    Two modes:
      - run(total): bounded; `total` is split into chunks of at most
        settings.chunk_size trials, one chunk per loop iteration.
      - start_auto(speed): unbounded; a small batch every 1/speed seconds.

    Only one run may be active at a time; starting another while one is
    active is a silent no-op. A chunk always runs to completion. The
    cancellation flag set by stop_running() is honoured between chunks.

    Single-threaded. Not thread-safe: every method must be called from the
    loop's thread.
    """

    def __init__(
        self,
        step: StepFn,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        settings: EngineSettings = DEFAULT_SETTINGS,
        on_tick: Optional[Callback] = None,
        on_done: Optional[Callback] = None,
        on_stop: Optional[Callback] = None,
    ):
        self._step = step
        self._loop = loop
        self.settings = settings
        self.on_tick = on_tick
        self.on_done = on_done
        self.on_stop = on_stop

        self._handle: Optional[asyncio.Handle] = None
        self._active = False
        self._auto = False
        self._cancel = False
        self._remaining = 0
        self._finished: Optional[asyncio.Future] = None

    @classmethod
    def for_single(cls, state: SingleTrialState, rng: Rng, **kwargs) -> "TrialScheduler":
        settings = kwargs.get("settings", DEFAULT_SETTINGS)
        step = functools.partial(
            simulate_single_trials,
            state,
            rng,
            convergence_cap=settings.convergence_cap,
        )
        return cls(step, **kwargs)

    @classmethod
    def for_two(cls, state: TwoTrialState, rng: Rng, **kwargs) -> "TrialScheduler":
        return cls(functools.partial(simulate_two_trials, state, rng), **kwargs)

    # ------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._active

    @property
    def auto(self) -> bool:
        return self._auto

    # ------------------------------------------------------------
    # Core API
    # ------------------------------------------------------------

    def run(self, total: float) -> bool:
        """
        Start a bounded run of `total` trials.

        Returns False without touching any state if a run is already active
        or `total` is not a positive finite number.
        """
        if self._active:
            LOG.debug("run(%s) ignored: a run is already active", total)
            return False
        if not _positive_finite(total):
            return False

        self._begin()
        self._remaining = int(total)
        LOG.debug("bounded run started: %d trials", self._remaining)
        self._handle = self._get_loop().call_soon(self._run_tick)
        return True

    def start_auto(self, speed: Optional[float] = None) -> bool:
        """
        Start continuous running at `speed` ticks per second (clamped to
        the configured bounds; missing or invalid speed means max speed).
        """
        if self._active:
            LOG.debug("start_auto(%s) ignored: a run is already active", speed)
            return False

        s = self.settings
        if not _positive_finite(speed):
            speed = s.max_speed
        speed = min(s.max_speed, max(s.min_speed, speed))
        delay = 1.0 / speed
        chunk = max(1, int(s.auto_chunk_per_speed * speed)) if s.auto_chunk_per_speed else 1

        self._begin()
        self._auto = True
        LOG.debug("auto run started: %.1f ticks/s, %d trial(s) per tick", speed, chunk)
        self._handle = self._get_loop().call_later(delay, self._auto_tick, delay, chunk)
        return True

    def stop_running(self) -> None:
        """
        Cancel the active run, if any.

        No chunk runs after this returns. on_stop fires once for the run
        being stopped; calling this again, or while idle, does nothing more.
        """
        self._cancel = True
        self._auto = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._active:
            LOG.debug("run stopped")
            self._end(completed=False)
            if self.on_stop is not None:
                self.on_stop()

    async def join(self) -> bool:
        """
        Wait for the active run to end. True if it completed, False if it
        was stopped. Returns True immediately when nothing has run yet.
        """
        if self._finished is None:
            return True
        return await self._finished

    # ------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _begin(self) -> None:
        self._active = True
        self._cancel = False
        self._finished = self._get_loop().create_future()

    def _end(self, completed: bool) -> None:
        self._active = False
        self._auto = False
        self._remaining = 0
        if self._finished is not None and not self._finished.done():
            self._finished.set_result(completed)

    def _run_tick(self) -> None:
        self._handle = None
        if self._cancel or not self._active:
            return

        chunk = min(self.settings.chunk_size, self._remaining)
        self._step(chunk)
        self._remaining -= chunk
        if self.on_tick is not None:
            self.on_tick()

        # on_tick may have stopped the run
        if not self._active:
            return
        if self._remaining > 0 and not self._cancel:
            self._handle = self._get_loop().call_soon(self._run_tick)
            return

        LOG.debug("bounded run finished")
        self._end(completed=True)
        if self.on_done is not None:
            self.on_done()

    def _auto_tick(self, delay: float, chunk: int) -> None:
        self._handle = None
        if self._cancel or not self._active:
            return

        self._step(chunk)
        if self.on_tick is not None:
            self.on_tick()

        if self._active and not self._cancel:
            self._handle = self._get_loop().call_later(delay, self._auto_tick, delay, chunk)

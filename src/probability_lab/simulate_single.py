from __future__ import annotations

from .cdf import sample_index
from .rng import Rng
from .settings import DEFAULT_SETTINGS
from .state import ConvergencePoint, SingleTrialState, relative_frequencies


def simulate_single_trials(
    state: SingleTrialState,
    rng: Rng,
    n: int,
    record_convergence: bool = True,
    convergence_cap: int = DEFAULT_SETTINGS.convergence_cap,
) -> None:
    """
    Run `n` single-event trials against `state`.

    Counts, trial total, last outcome and the attached history advance
    together, one trial at a time. After the batch a relative-frequency
    snapshot is appended to the convergence log; once the log exceeds
    `convergence_cap` every other point is dropped.
    """
    definition = state.definition
    if definition is None or n <= 0:
        return

    cdf = definition.cdf
    counts = state.counts
    history = state.history

    for _ in range(n):
        idx = sample_index(rng, cdf)
        counts[idx] += 1
        state.trials += 1
        state.last_outcome = idx
        if history is not None:
            history.push(idx)

    if record_convergence and state.trials > 0:
        state.convergence.append(
            ConvergencePoint(trials=state.trials, relative=relative_frequencies(counts, state.trials))
        )
        if len(state.convergence) > convergence_cap:
            state.convergence = state.convergence[::2]

# simulations/run.py

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Sequence

from probability_lab.devices import DeviceConfig, DeviceKind, build_device_definition
from probability_lab.history import IndexHistory, PackedPairHistory
from probability_lab.rng import create_rng_from_seed
from probability_lab.scheduler import TrialScheduler
from probability_lab.settings import DEFAULT_SETTINGS, EngineSettings
from probability_lab.state import SingleTrialState, TwoTrialState

from .common import ExperimentResult, ExperimentSpec, Timer, format_frequency_table, format_stats_line
from .methods import relationship_name

LOG = logging.getLogger(__name__)


async def _drive(scheduler: TrialScheduler, trials: int) -> None:
    if scheduler.run(trials):
        await scheduler.join()


def run_experiment(
    spec: ExperimentSpec,
    settings: EngineSettings = DEFAULT_SETTINGS,
    label: Optional[str] = None,
) -> ExperimentResult:
    """
    Run a single experiment to completion and return an ExperimentResult.

    The scheduler is driven on a private asyncio loop, exactly as an
    interactive host would drive it, so results match interactive runs
    with the same seed.

    Parameters
    ----------
    spec:
        Devices, mode, relationship, trial count and seed.
    settings:
        Engine tunables (scheduler chunk size, convergence cap, ...).
    label:
        Name used in printed summaries; defaults to the device / relationship.

    Returns
    -------
    ExperimentResult
    """
    rng = create_rng_from_seed(spec.seed)
    def_a = build_device_definition(spec.device_a)

    loop = asyncio.new_event_loop()
    try:
        if spec.mode == "single":
            state = SingleTrialState(definition=def_a, history=IndexHistory())
            scheduler = TrialScheduler.for_single(state, rng, loop=loop, settings=settings)
            with Timer() as t:
                loop.run_until_complete(_drive(scheduler, spec.trials))
            return ExperimentResult(
                label=label or def_a.name,
                spec=spec,
                definition=def_a,
                counts=list(state.counts),
                trials=state.trials,
                history=state.history,
                runtime_s=t.elapsed_s,
                meta={"convergence_points": len(state.convergence)},
            )

        def_b = build_device_definition(spec.device_b or spec.device_a)
        two = TwoTrialState(
            definition_a=def_a,
            definition_b=def_b,
            relationship=spec.relationship,
            history=PackedPairHistory(),
        )
        scheduler = TrialScheduler.for_two(two, rng, loop=loop, settings=settings)
        with Timer() as t:
            loop.run_until_complete(_drive(scheduler, spec.trials))
        return ExperimentResult(
            label=label or relationship_name(spec.relationship),
            spec=spec,
            definition=def_a,
            counts=list(two.counts_a),
            trials=two.trials,
            definition_b=def_b,
            counts_b=list(two.counts_b),
            joint=[list(row) for row in two.joint],
            history=two.history,
            runtime_s=t.elapsed_s,
            meta={"relationship": relationship_name(spec.relationship)},
        )
    finally:
        loop.close()


def run_pair(
    spec_a: ExperimentSpec,
    spec_b: ExperimentSpec,
    settings: EngineSettings = DEFAULT_SETTINGS,
):
    """
    Convenience helper: run two experiments with the same settings.

    Returns (result_a, result_b).
    """
    return run_experiment(spec_a, settings), run_experiment(spec_b, settings)


# --- CLI ---------------------------------------------------------------------

def _floats(text: Optional[str]) -> Optional[List[float]]:
    if text is None:
        return None
    return [float(x) for x in text.split(",") if x.strip()]


def device_config_from_args(
    kind: str,
    probabilities: Optional[str] = None,
    sectors: Optional[int] = None,
    skew: Optional[float] = None,
    outcomes: Optional[str] = None,
) -> DeviceConfig:
    probs = _floats(probabilities)
    return DeviceConfig(
        kind=kind,
        coin_probabilities=probs if kind == DeviceKind.COIN.value else None,
        die_probabilities=probs if kind == DeviceKind.DIE.value else None,
        spinner_sectors=sectors,
        spinner_skew=skew,
        outcomes=tuple(outcomes.split(",")) if outcomes else (),
        probabilities=probs if kind == DeviceKind.CUSTOM.value else None,
    )


def add_device_args(parser: argparse.ArgumentParser, suffix: str = "") -> None:
    kinds = [k.value for k in DeviceKind]
    parser.add_argument(f"--device{suffix}", default="coin", choices=kinds, help="device kind")
    parser.add_argument(f"--probabilities{suffix}", default=None, help="comma-separated weights (coin/die/custom)")
    parser.add_argument(f"--sectors{suffix}", type=int, default=None, help="spinner sector count (2-12)")
    parser.add_argument(f"--skew{suffix}", type=float, default=None, help="spinner skew (-1..1)")
    parser.add_argument(f"--outcomes{suffix}", default=None, help="comma-separated custom outcome labels")


def device_from_namespace(args: argparse.Namespace, suffix: str = "") -> DeviceConfig:
    key = suffix.lstrip("-").replace("-", "_")
    key = f"_{key}" if key else ""
    return device_config_from_args(
        getattr(args, f"device{key}"),
        getattr(args, f"probabilities{key}"),
        getattr(args, f"sectors{key}"),
        getattr(args, f"skew{key}"),
        getattr(args, f"outcomes{key}"),
    )


def main(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(
        description="Run a probability lab experiment headless and print the frequency table."
    )
    add_device_args(parser)
    parser.add_argument("--trials", type=int, default=1000, help="number of trials")
    parser.add_argument("--seed", default=None, help="seed text (blank = shared default stream)")
    parser.add_argument("--log-level", default="WARNING", help="logging level")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    spec = ExperimentSpec(device_a=device_from_namespace(args), trials=args.trials, seed=args.seed)
    LOG.info("running %d trials (seed=%r)", spec.trials, spec.seed)
    result = run_experiment(spec)

    print(format_stats_line(result))
    print(format_frequency_table(result.definition, result.counts, result.trials))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))

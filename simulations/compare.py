# simulations/compare.py

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from probability_lab.tables import format_count, two_way_table

from .common import ExperimentResult, ExperimentSpec, format_stats_line, same_half_share
from .methods import RELATIONSHIPS, get_relationship
from .run import add_device_args, device_from_namespace, run_pair


# Keep the tool intentionally opinionated:
# - seed is fixed unless passed explicitly
# - both runs share devices, seed and trial count
DEFAULT_SEED = "compare"

CORNER = "A \\ B"


def format_two_way(r: ExperimentResult) -> str:
    table = two_way_table(r.definition, r.definition_b, r.joint, r.counts, r.counts_b, r.trials)
    width = max([len(CORNER), len("Total")] + [len(label) for label in table.row_labels])
    col_w = max([10] + [len(label) for label in table.col_labels])

    lines = [f"{CORNER:<{width}}" + "".join(f"  {c:>{col_w}}" for c in table.col_labels) + f"  {'Total':>{col_w}}"]
    for label, row, total in zip(table.row_labels, table.cells, table.row_totals):
        lines.append(
            f"{label:<{width}}" + "".join(f"  {format_count(n):>{col_w}}" for n in row) + f"  {format_count(total):>{col_w}}"
        )
    lines.append(
        f"{'Total':<{width}}" + "".join(f"  {format_count(n):>{col_w}}" for n in table.col_totals)
        + f"  {format_count(table.total):>{col_w}}"
    )
    return "\n".join(lines)


def main(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(
        description="Compare two relationship modes for a two-event experiment (same devices, same seed)."
    )
    names = "|".join(sorted(RELATIONSHIPS))
    parser.add_argument("--relationship-a", required=True, help=names)
    parser.add_argument("--relationship-b", required=True, help=names)
    parser.add_argument("--boost", type=float, default=None, help="boost factor for 'dependent'")
    add_device_args(parser)
    add_device_args(parser, "-b")
    parser.add_argument("--trials", type=int, required=True, help="number of trials")
    parser.add_argument("--seed", default=DEFAULT_SEED, help="seed text")
    parser.add_argument("--log-level", default="WARNING", help="logging level")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    device_a = device_from_namespace(args)
    device_b = device_from_namespace(args, "-b")

    specs = [
        ExperimentSpec(
            mode="two",
            device_a=device_a,
            device_b=device_b,
            relationship=get_relationship(name, args.boost),
            trials=args.trials,
            seed=args.seed,
        )
        for name in (args.relationship_a, args.relationship_b)
    ]
    ra, rb = run_pair(*specs)

    for r in (ra, rb):
        print(format_stats_line(r))
        print(f"same-half share: {same_half_share(r.joint):.4f}")
        print(format_two_way(r))
        print()

    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))

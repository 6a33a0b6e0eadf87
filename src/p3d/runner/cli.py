"""
Command line entry point.

Usage:
    p3d lsbox
    p3d lspiece 1
    p3d lspiece 1 1033
    p3d lspiece 1 0 --next-valid
    p3d -vvv lsconfigs 22
    p3d -c p3d.yaml -v ge-cube --generations 200 --population 100 --seed 7
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Sequence

from p3d import __version__
from p3d.config import ConfigError, FitnessMode, SolverConfig, Verbosity, load_config
from p3d.core.cube import Cube
from p3d.core.enumerator import iter_valid_combinations, next_valid
from p3d.core.piece import Piece, PieceError, decode_combination
from p3d.monitoring.console import ConsoleReporter
from p3d.runner.experiment import EvolutionRunner


def _combination(value: str) -> int:
    """Parse a combination index in decimal, hex (0x..) or binary (0b..)."""
    try:
        return int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid combination index: {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="p3d",
        description="Compute 3d packing of pieces into a 5x5x5 cube",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-c", "--config",
        metavar="FILE",
        default=None,
        help="YAML config file (default: built-in defaults)",
    )
    parser.add_argument(
        "-v",
        dest="verbosity",
        action="count",
        default=0,
        help="Sets the level of verbosity (-v sparse, -vv normal, -vvv verbose)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("lsbox", help="print an empty box")

    lspiece = sub.add_parser("lspiece", help="print a box holding one piece")
    lspiece.add_argument("piece_id", metavar="PIECE-ID", type=int, help="The id in range 0..24")
    lspiece.add_argument(
        "index",
        nargs="?",
        type=_combination,
        default=None,
        help="The combination index determining x, y, z and rotation",
    )
    lspiece.add_argument(
        "--next-valid",
        action="store_true",
        help="Move on to the next valid configuration after INDEX",
    )

    lsconfigs = sub.add_parser("lsconfigs", help="count the valid configurations of a piece")
    lsconfigs.add_argument("piece_id", metavar="PIECE-ID", type=int, help="The id in range 0..24")

    ge_cube = sub.add_parser("ge-cube", help="Genetic evolution: solve the cube packing problem")
    ge_cube.add_argument(
        "-g", "--generations", type=int, default=None,
        help="Maximum number of generations to run (default: 1000)",
    )
    ge_cube.add_argument(
        "-p", "--population", type=int, default=None,
        help="Number of individuals in the population (default: 1000)",
    )
    ge_cube.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    ge_cube.add_argument(
        "--fitness",
        choices=[m.value for m in FitnessMode],
        default=None,
        help="Cube measure to maximise (default: conflicts)",
    )
    ge_cube.add_argument("--results-dir", default=None, help="Directory to save results (default: results)")
    ge_cube.add_argument("--no-save", action="store_true", help="Do not write result files")
    ge_cube.add_argument("--notify", action="store_true", help="Send Telegram progress updates")

    return parser


# ─────────────────────────────────────────────────────────────────────────────
# Commands
# ─────────────────────────────────────────────────────────────────────────────

def cmd_lsbox(args: argparse.Namespace, config: SolverConfig, reporter: ConsoleReporter) -> int:
    print(f"Empty box... {Cube.create_empty()}")
    return 0


def cmd_lspiece(args: argparse.Namespace, config: SolverConfig, reporter: ConsoleReporter) -> int:
    piece = Piece(args.piece_id)
    if args.index is not None:
        reporter.sparse(f"Apply index: {args.index}")
        piece.assign_combination(args.index)

    if args.next_valid and not next_valid(piece):
        print(f"No valid configuration of piece {piece.label} after the given index")
        return 1

    piece.recompute_footprint()
    reporter.normal(repr(piece))
    reporter.verbose(f"Footprint: {list(piece.footprint)}")

    if not piece.fits_in_bounds():
        print("Piece does not fit into box")
        return 1

    if not piece.fits_anchor_constraint():
        reporter.sparse(f"Piece {piece.label} does not cover its anchor cell {piece.anchor}")

    cube = Cube.create_empty()
    piece.deposit_into(cube)
    print(f"Combination: {piece.encode_combination()}")
    print(f"Box... {cube}")
    return 0


def cmd_lsconfigs(args: argparse.Namespace, config: SolverConfig, reporter: ConsoleReporter) -> int:
    piece = Piece(args.piece_id)
    count = 0
    for combination in iter_valid_combinations(piece):
        count += 1
        if reporter.enabled(Verbosity.VERBOSE):
            x, y, z, rotation = decode_combination(combination)
            reporter.verbose(f"{combination:5d}: offset=({x}, {y}, {z}) rotation={rotation}")
    print(f"Piece {piece.label} ({args.piece_id}): {count} valid configurations")
    return 0


def cmd_ge_cube(args: argparse.Namespace, config: SolverConfig, reporter: ConsoleReporter) -> int:
    result, _ = asyncio.run(EvolutionRunner(config, reporter).run())
    print(f"Final Best: {result.best_cube()}")
    return 0


COMMANDS = {
    "lsbox": cmd_lsbox,
    "lspiece": cmd_lspiece,
    "lsconfigs": cmd_lsconfigs,
    "ge-cube": cmd_ge_cube,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, load configuration and dispatch the subcommand."""
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides = {}
    if args.verbosity:
        overrides["verbosity"] = Verbosity.from_count(args.verbosity)
    if args.command == "ge-cube":
        overrides.update(
            generations=args.generations,
            population=args.population,
            seed=args.seed,
            fitness=args.fitness,
            results_dir=args.results_dir,
        )
        if args.no_save:
            overrides["save_results"] = False
        if args.notify:
            overrides["notify"] = True

    try:
        config = load_config(args.config, **overrides)
        reporter = ConsoleReporter(config.verbosity)
        reporter.verbose(f"Config: {config.to_dict()}")
        return COMMANDS[args.command](args, config, reporter)
    except (ConfigError, PieceError) as exc:
        print(f"p3d: error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())

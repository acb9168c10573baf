"""CLI entry point for the regret-matching Rock-Paper-Scissors trainer."""

import argparse

from .engine import (
    build_players,
    train,
    DEFAULT_ITERATIONS,
    DEFAULT_P1_WEIGHTS,
    DEFAULT_P2_WEIGHTS,
)
from .export import export_json, export_csv
from .logging_config import setup_logging
from .moves import Move
from .stats import print_strategy, print_training_summary, print_convergence, print_round_regrets
from .tournament import run_many, summarize_runs


def cmd_train(args, parser):
    """Train two players against each other and report their strategies."""
    try:
        player_one, player_two = build_players(args.p1, args.p2)
    except ValueError as e:
        parser.error(str(e))

    print(f"\n🎯 Regret Matching Self-Play")
    print(f"  Running for {args.iterations} iterations..."
          + (f"  |  seed={args.seed}" if args.seed is not None else ""))
    print_strategy("start", player_one)
    print_strategy("start", player_two)

    result = train(
        player_one, player_two,
        iterations=args.iterations,
        seed=args.seed,
        snapshot_every=args.snapshot_every,
    )

    print_strategy("end", player_one)
    print_strategy("end", player_two)
    print()
    print_training_summary(result)
    print_convergence(result)

    if args.export and args.output:
        _export(args, [result])


def cmd_batch(args, parser):
    """Run many independent training games and summarize convergence."""
    try:
        build_players(args.p1, args.p2)
    except ValueError as e:
        parser.error(str(e))

    print(f"\n📊 Batch Training")
    print(f"  {args.runs} runs  |  {args.iterations} iterations each"
          + (f"  |  seed={args.seed}" if args.seed is not None else ""))
    print(f"  Running...", end="", flush=True)

    results = run_many(
        args.runs,
        iterations=args.iterations,
        p1_weights=args.p1,
        p2_weights=args.p2,
        seed=args.seed,
        parallel=not args.sequential,
    )
    print(f" done! ({len(results)} runs)")

    summary = summarize_runs(results)
    print("=" * 60)
    for side, label in (("p1", "Player one"), ("p2", "Player two")):
        if side not in summary:
            continue
        s = summary[side]
        strat = ", ".join(f"{k.capitalize()}: {v:.2f}%" for k, v in s["mean_strategy"].items())
        print(f"  ▸ {label}")
        print(f"    Mean average strategy: {strat}")
        print(f"    Exploitability: mean {s['exploitability_mean']:.4f}  "
              f"std {s['exploitability_std']:.4f}  max {s['exploitability_max']:.4f}")
    print("=" * 60)

    if args.export and args.output:
        _export(args, results)


def cmd_regret(args, parser):
    """Show the counterfactual regrets of one realized round."""
    try:
        own = Move.from_name(args.own)
        opponent = Move.from_name(args.opponent)
    except ValueError as e:
        parser.error(str(e))

    print()
    print_round_regrets(own, opponent)
    print()


def _export(args, results):
    """Handle export based on CLI args."""
    fmt = args.export.lower()
    if fmt == "json":
        export_json(results, args.output)
    elif fmt == "csv":
        export_csv(results, args.output)
    else:
        print(f"  ✗ Unknown export format: {fmt}. Use 'json' or 'csv'.")


def _add_common_arguments(sub):
    sub.add_argument("--iterations", type=int, default=DEFAULT_ITERATIONS,
                     help=f"Number of training rounds (default: {DEFAULT_ITERATIONS})")
    sub.add_argument("--seed", type=int, default=None, help="RNG seed for reproducibility")
    sub.add_argument("--p1", type=float, nargs=3, default=list(DEFAULT_P1_WEIGHTS),
                     metavar=("ROCK", "PAPER", "SCISSORS"),
                     help="Player one initial weights (default: 1 1 1)")
    sub.add_argument("--p2", type=float, nargs=3, default=list(DEFAULT_P2_WEIGHTS),
                     metavar=("ROCK", "PAPER", "SCISSORS"),
                     help="Player two initial weights (default: 4 3 3)")
    sub.add_argument("--export", choices=["json", "csv"], help="Export format")
    sub.add_argument("--output", help="Export file path")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="rps_regret",
        description="🎮 Regret-matching Rock-Paper-Scissors self-play trainer",
    )
    parser.add_argument("--log-level", default="WARNING",
                        help="Logging level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command")

    trn = subparsers.add_parser("train", help="Train two players by self-play")
    _add_common_arguments(trn)
    trn.add_argument("--snapshot-every", type=int, default=0,
                     help="Record average strategies every N rounds (default: off)")

    bat = subparsers.add_parser("batch", help="Run many independent training games")
    _add_common_arguments(bat)
    bat.add_argument("--runs", type=int, default=8, help="Number of runs (default: 8)")
    bat.add_argument("--sequential", action="store_true",
                     help="Run in this process instead of a process pool")

    rgt = subparsers.add_parser("regret", help="Show the regrets of a single round")
    rgt.add_argument("own", help="Move played (rock, paper, scissors or r/p/s)")
    rgt.add_argument("opponent", help="Opponent's move")

    args = parser.parse_args(argv)

    try:
        setup_logging(args.log_level, args.log_file)
    except ValueError as e:
        parser.error(str(e))

    if args.command == "train":
        cmd_train(args, parser)
    elif args.command == "regret":
        cmd_regret(args, parser)
    elif args.command == "batch":
        cmd_batch(args, parser)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()

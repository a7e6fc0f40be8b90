from __future__ import annotations

import argparse
import json
import sys

from . import __version__
from .autoplay import AutoPlayer
from .commands import Command, to_dict
from .config import load_config
from .errors import InvalidConfiguration
from .logging_config import configure_logging
from .loop import RunnerConfig, SessionRunner
from .session import Session
from .state import GameOutcome


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pairs",
        description="Play one headless game of Pairs with the auto player and print the command stream",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", default=None, help="Path to a YAML config file")
    parser.add_argument("--seed", default=None, help="Master seed for reproducible decks")
    parser.add_argument("--grid-size", type=int, default=None, help="Number of cards (even)")
    parser.add_argument("--duration", type=int, default=None, help="Countdown length in seconds")
    parser.add_argument("--tick-rate", type=float, default=30.0, help="Target loop rate (Hz)")
    parser.add_argument(
        "--fixed-dt",
        type=float,
        default=None,
        help="Advance this many simulated seconds per step instead of real time",
    )
    parser.add_argument("--max-steps", type=int, default=None, help="Stop after N loop steps")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = load_config(
            args.config,
            overrides={
                "seed": args.seed,
                "grid_size": args.grid_size,
                "timer_duration_seconds": args.duration,
            },
        )
        session = Session(config)
        session.new_game()
    except (InvalidConfiguration, FileNotFoundError) as exc:
        print(f"pairs: configuration error: {exc}", file=sys.stderr)
        return 2

    def emit(command: Command) -> None:
        print(json.dumps(to_dict(command), sort_keys=True))

    session.subscribe(emit)
    player = AutoPlayer(session)
    runner = SessionRunner(
        session,
        RunnerConfig(tick_rate=args.tick_rate, max_steps=args.max_steps, fixed_dt=args.fixed_dt),
        on_step=player.step,
    )
    outcome = runner.run()
    print(json.dumps({
        "kind": "summary",
        "outcome": outcome.value,
        "moves": player.moves,
        "steps": runner.step,
        "remaining_seconds": session.state.timer.remaining_seconds,
        "seed": session.rng.get_master_seed_hex(),
    }, sort_keys=True))
    return 0 if outcome is GameOutcome.WON else 1


if __name__ == "__main__":
    sys.exit(main())

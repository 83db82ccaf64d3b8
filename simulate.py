#!/usr/bin/env python3
"""
simulate.py — game runner for the X-1C round framework (manual confirmations)

Run:
    python simulate.py
    python simulate.py --seed 7 --rounds 3
    python simulate.py --preview --round 5 --panic orange --leftover 10
"""

# simulate.py

import argparse
import logging

from board import PANIC_LEVELS, parse_panic_level
from rounds import MAX_UFOS_LEFT, preview_round, run_game
from state import new_game_state
from timed_phase import CONFLICT_POLICIES

DEFAULT_SEED = 42


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(add_help=True)
    p.add_argument("--seed", type=int, default=DEFAULT_SEED, help="Seed the RNG for reproducible schedules")
    p.add_argument("--rounds", type=int, default=None, help="Stop after this many rounds even if the game has not ended")
    p.add_argument("--round", type=int, default=1, help="Starting round")
    p.add_argument("--panic", type=str, default="yellow", help=f"Starting panic level ({'/'.join(PANIC_LEVELS)})")
    p.add_argument("--leftover", type=int, default=0, help=f"UFOs left on the board at start (0-{MAX_UFOS_LEFT})")
    p.add_argument("--conflict", choices=sorted(CONFLICT_POLICIES), default="drop",
                   help="What the shuffle does with a prompt whose precedence window is empty")
    p.add_argument("--preview", action="store_true", help="Print one round's schedule then exit")
    p.add_argument("--log-level", type=str, default="WARNING", help="Python logging level")
    return p.parse_args(argv)


def main(argv=None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    panic = parse_panic_level(args.panic)
    if args.round < 0:
        raise ValueError(f"--round must be >= 0, got {args.round}")
    if not 0 <= args.leftover <= MAX_UFOS_LEFT:
        raise ValueError(f"--leftover must be between 0 and {MAX_UFOS_LEFT}, got {args.leftover}")
    if args.rounds is not None and args.rounds < 1:
        raise ValueError(f"--rounds must be >= 1, got {args.rounds}")

    if args.preview:
        titles = preview_round(args.round, panic, args.leftover, seed=args.seed, on_conflict=args.conflict)
        print(f"Round {args.round} (panic={panic}, leftover={args.leftover}, seed={args.seed}):")
        for i, title in enumerate(titles, start=1):
            print(f"  {i:2d}. {title}")
        return

    state = new_game_state(round_no=args.round, panic_level=panic, ufos_left=args.leftover)
    run_game(state, max_rounds=args.rounds, seed=args.seed, on_conflict=args.conflict)


if __name__ == "__main__":
    main()

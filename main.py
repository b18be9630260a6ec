#!/usr/bin/env python3
"""
Minefield - Main entry point.

Usage:
    python main.py play [--preset NAME | --width W --height H --mines M]
    python main.py simulate [--games N] [--seed S]
"""
import argparse
import logging
import random
from typing import List

import numpy as np

from src.minefield.board import (
    Board,
    BoardConfig,
    OutOfBoundsError,
    BEGINNER,
    INTERMEDIATE,
    EXPERT,
    GameState,
)
from src.minefield.outcomes import Outcome

PRESETS = {
    "beginner": BEGINNER,
    "intermediate": INTERMEDIATE,
    "expert": EXPERT,
}

HELP_TEXT = """Commands:
  c X Y   reveal the cell at column X, row Y
  f X Y   toggle a flag
  d X Y   clear around a satisfied number
  q       quit"""


def build_config(args: argparse.Namespace) -> BoardConfig:
    """Board configuration from a preset or explicit dimensions."""
    if args.preset:
        return PRESETS[args.preset]
    return BoardConfig(args.width, args.height, args.mines)


def report_end(outcomes: List[Outcome]) -> None:
    """Print the terminal record of an action, if it has one."""
    for outcome in outcomes:
        if outcome.is_terminal:
            print(f"\nYou {outcome.state.name.lower()}! Time: {outcome.time}s")


def play(args: argparse.Namespace) -> None:
    """Play an interactive game on the terminal."""
    board = Board(build_config(args), rng=random.Random(args.seed))
    actions = {
        "c": board.click,
        "f": board.toggle_flag,
        "d": board.clear_neighbors,
    }

    print(HELP_TEXT)
    print(board)

    while not board.over:
        try:
            line = input("> ").split()
        except EOFError:
            break
        if not line:
            continue
        if line[0] == "q":
            break
        if line[0] not in actions or len(line) != 3:
            print(HELP_TEXT)
            continue

        try:
            x, y = int(line[1]), int(line[2])
            outcomes = actions[line[0]](x, y)
        except ValueError:
            print("Coordinates must be integers")
            continue
        except OutOfBoundsError as error:
            print(error)
            continue

        if not outcomes:
            print("Nothing happened")
        print(board)
        report_end(outcomes)


def simulate(args: argparse.Namespace) -> None:
    """Play games by clicking random cells and summarize the results."""
    config = build_config(args)
    board = Board(config, rng=random.Random(args.seed))
    rng = np.random.default_rng(args.seed)

    wins = 0
    moves = []
    squares_left = []

    print(f"Simulating {args.games} random games on "
          f"{config.width}x{config.height} with {config.num_mines} mines...")

    for _ in range(args.games):
        board.reset()
        while not board.over:
            valid = board.get_valid_actions()
            x, y = valid[rng.integers(len(valid))]
            board.click(x, y)
        if board.game_state is GameState.WON:
            wins += 1
        moves.append(board.move_count)
        squares_left.append(board.squares_left)

    print(f"Win rate: {wins / args.games:.1%}")
    print(f"Avg moves: {np.mean(moves):.1f}")
    print(f"Avg squares left: {np.mean(squares_left):.1f}")


def add_board_arguments(parser: argparse.ArgumentParser) -> None:
    """Options shared by every command that builds a board."""
    parser.add_argument(
        "--preset", choices=sorted(PRESETS), default=None,
        help="Use a standard difficulty instead of explicit dimensions",
    )
    parser.add_argument("--width", type=int, default=9, help="Columns")
    parser.add_argument("--height", type=int, default=9, help="Rows")
    parser.add_argument("--mines", type=int, default=10, help="Number of mines")
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed for mine placement"
    )


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="Minefield - Minesweeper on the command line"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log engine events"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    play_parser = subparsers.add_parser("play", help="Play an interactive game")
    add_board_arguments(play_parser)

    simulate_parser = subparsers.add_parser(
        "simulate", help="Play random games and report statistics"
    )
    add_board_arguments(simulate_parser)
    simulate_parser.add_argument(
        "--games", type=int, default=100, help="Number of games to play"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        if args.command == "play":
            play(args)
        elif args.command == "simulate":
            simulate(args)
        else:
            parser.print_help()
    except ValueError as error:
        parser.error(str(error))


if __name__ == "__main__":
    main()

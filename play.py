#!/usr/bin/env python3
"""
Play Mahjongg solitaire in the terminal.

Usage:
    python play.py
    python play.py --layout tower --seed 7
    python play.py --layout flat --policy random --auto-shuffle
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from mahjongg.layout import LayoutError, Position, available_layouts
from mahjongg.board import OutOfBounds
from mahjongg.config import GameConfig, PRESETS, preset
from mahjongg.deal import DEAL_POLICIES
from mahjongg.session import GameSession, SelectionOutcome, SessionState

logger = logging.getLogger(__name__)


HELP = """Commands:
  <layer> <row> <col>   select the tile at that position
  h                     hint
  u                     undo last pair
  s                     shuffle remaining tiles
  r                     restart with a new deal
  q                     quit"""

MESSAGES = {
    SelectionOutcome.ONE_CHOSEN: "Tile selected.",
    SelectionOutcome.DESELECTED: "Selection cleared.",
    SelectionOutcome.MATCH_SUCCESS: "Pair removed!",
    SelectionOutcome.MATCH_FAILURE: "No match",
    SelectionOutcome.ILLEGAL_SELECTION: "Can't select that",
    SelectionOutcome.WON: "🎉 Board cleared, you win!",
    SelectionOutcome.STUCK: "No moves left. Shuffle (s) or restart (r).",
}


def show(session: GameSession) -> None:
    """Print the board and status line."""
    snapshot = session.current_state()
    print()
    print(session.board)
    print()
    status = f"{snapshot.state.name} | Tiles left: {snapshot.tiles_remaining} | Moves: {snapshot.moves}"
    if snapshot.selected is not None:
        status += f" | Selected: {snapshot.selected} {session.board.occupant(snapshot.selected)}"
    print(status)


def parse_position(text: str) -> Position:
    """Parse 'layer row col' (spaces or commas)."""
    parts = text.replace(",", " ").split()
    if len(parts) != 3:
        raise ValueError("expected three numbers: layer row col")
    return Position(*(int(part) for part in parts))


def play_game(config: GameConfig) -> None:
    """
    Interactive loop.

    Args:
        config: Game configuration
    """
    print("=" * 60)
    print("🀄 Mahjongg Solitaire")
    print("=" * 60)
    print(HELP)

    session = GameSession(config)
    show(session)

    while True:
        try:
            command = input("\n> ").strip().lower()
        except EOFError:
            break

        if command in ("q", "quit"):
            break
        elif command in ("r", "restart"):
            session.restart()
        elif command in ("h", "hint"):
            pair = session.hint()
            if pair is None:
                print("No pair available.")
            else:
                print(f"Try {pair[0]} and {pair[1]} ({session.board.occupant(pair[0])})")
            continue
        elif command in ("u", "undo"):
            if not session.undo():
                print("Nothing to undo.")
        elif command in ("s", "shuffle"):
            if session.state == SessionState.WON:
                print("The board is already clear.")
                continue
            session.shuffle()
            print(f"Shuffled ({session.shuffles_used} so far).")
        elif command in ("?", "help"):
            print(HELP)
            continue
        else:
            try:
                position = parse_position(command)
                result = session.select(position)
            except ValueError as e:
                print(f"Invalid input: {e}")
                continue
            except OutOfBounds as e:
                print(f"Invalid position: {e}")
                continue

            message = MESSAGES[result.outcome]
            if result.reason:
                message += f": {result.reason}"
            print(message)

        show(session)

    print("Thanks for playing!")


def main():
    parser = argparse.ArgumentParser(description="Play Mahjongg solitaire in the terminal")

    parser.add_argument("--preset", type=str, default="default",
                       choices=sorted(PRESETS),
                       help="Starting configuration; the flags below override it")
    parser.add_argument("--layout", type=str, default=None,
                       help=f"Board layout ({', '.join(available_layouts())})")
    parser.add_argument("--policy", type=str, default=None,
                       choices=list(DEAL_POLICIES),
                       help="Deal policy")
    parser.add_argument("--seed", type=int, default=None,
                       help="Random seed for reproducible deals")
    parser.add_argument("--auto-shuffle", action="store_true",
                       help="Reshuffle automatically when stuck")
    parser.add_argument("--log-level", type=str, default="WARNING",
                       choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        config = preset(
            args.preset,
            layout_name=args.layout,
            deal_policy=args.policy,
            seed=args.seed,
            auto_shuffle=args.auto_shuffle or None,
        )
    except LayoutError as e:
        logger.error(str(e))
        sys.exit(1)

    play_game(config)


if __name__ == "__main__":
    main()

"""Replay turn histories and validate every turn."""
from __future__ import annotations

import argparse
from typing import List, Optional, Tuple

from . import engine
from .errors import DecodeError
from .runner import format_board, format_units
from .state_format import decode_state, encode_state
from .turn_format import format_turn, parse_compact_history, parse_history
from .types import GameState, Player, Turn


def parse_any_history(text: str) -> List[Turn]:
    """Parse a history in verbose notation, falling back to compact notation."""

    text = text.strip()
    try:
        return parse_history(text)
    except DecodeError as verbose_error:
        try:
            return parse_compact_history(text)
        except DecodeError:
            raise verbose_error from None


def replay_turns(
    turns: List[Turn],
    state: Optional[GameState] = None,
    verbose: bool = False,
) -> Tuple[GameState, Optional[Player]]:
    """Apply ``turns`` from ``state`` (the initial position by default).

    Raises ``RejectedTurnError`` naming the first illegal turn.
    """

    if state is None:
        state = engine.initial_state()
    for index, turn in enumerate(turns, start=1):
        player = state.player
        try:
            state = engine.apply_turn(state, turn)
        except ValueError as exc:
            raise type(exc)(f"Turn {index}: {exc}") from exc
        if verbose:
            print(f"Turn {index}: {player.name} {format_turn(turn)}")
            print(format_board(state))
            print()
    return state, engine.winner(state)


def replay_file(path: str, start: Optional[str] = None, verbose: bool = False) -> Tuple[GameState, Optional[Player]]:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    state = decode_state(start) if start else None
    return replay_turns(parse_any_history(text), state=state, verbose=verbose)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Replay a Mytikas turn history")
    parser.add_argument("--file", required=True, help="Path to a verbose or compact history")
    parser.add_argument("--state", type=str, default=None, help="Encoded state the history starts from")
    parser.add_argument("--verbose", action="store_true", help="Print each board during replay")
    args = parser.parse_args(argv)

    try:
        state, winner = replay_file(args.file, start=args.state, verbose=args.verbose)
    except ValueError as exc:
        print(f"Replay failed: {exc}")
        raise SystemExit(1)
    if winner:
        print(f"Winner: {winner.name}")
    else:
        print("Winner: None (game not terminal)")
    print("Final board:")
    print(format_board(state))
    print(format_units(state, Player.LIGHT))
    print(format_units(state, Player.DARK))
    print(f"Final state: {encode_state(state)}")


if __name__ == "__main__":
    main()

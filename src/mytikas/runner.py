"""CLI runner for Mytikas.

Usage examples:
- Random vs search: ``python -m mytikas.runner --light minimax,max_depth=2 --dark random --seed 42``
- From a position: ``python -m mytikas.runner --state Aqqqqqqqqqqqqqqqqqqqqqqqq --verbose``
"""

from __future__ import annotations

import argparse
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from . import board, engine
from .agents import Agent, SearchStats, build_agent
from .catalog import PANTHEON
from .state_format import decode_state, encode_state
from .turn_format import format_compact_history, format_history, format_turn
from .types import Alive, GameState, Player, Turn

MAX_TURNS = 2000


@dataclass
class GameSummary:
    winner: Optional[Player]
    turns: int
    history: List[Turn]
    final_state: GameState
    move_times: Dict[Player, List[float]] = field(default_factory=dict)
    search_stats: Dict[Player, List[SearchStats]] = field(default_factory=dict)


def format_board(state: GameState) -> str:
    """Render the diamond with rank 9 on top; light units upper case, dark lower case."""

    lines: List[str] = []
    for r in range(board.BOARD_SIZE - 1, -1, -1):
        cells = []
        for c in range(board.BOARD_SIZE):
            cell = board.cell_at(r, c)
            if cell is None:
                continue
            occupant = state.occupant(cell)
            if occupant is None:
                cells.append(".")
            else:
                letter = PANTHEON[occupant[1]].letter
                cells.append(letter if occupant[0] is Player.LIGHT else letter.lower())
        indent = "  " * abs(r - board.CENTER)
        lines.append(f"{board.RANKS[r]} {indent}{' '.join(cells)}")
    lines.append("  " + " ".join(board.FILES))
    return "\n".join(lines)


def format_units(state: GameState, player: Player) -> str:
    """List the health of the player's units in play, e.g. ``LIGHT: Z10@e1``."""

    parts = []
    for cell, unit in state.alive_units(player):
        unit_state = state.unit(player, unit)
        assert isinstance(unit_state, Alive)
        chained = "*" if unit_state.chained else ""
        parts.append(f"{PANTHEON[unit].letter}{unit_state.health}{chained}@{board.cell_name(cell)}")
    return f"{player.name}: {' '.join(parts) or '-'}"


def play_game(
    light_agent: Agent,
    dark_agent: Agent,
    state: Optional[GameState] = None,
    max_turns: int = MAX_TURNS,
    emit_turns: bool = False,
    show_board: bool = False,
) -> GameSummary:
    """Play until somebody wins or ``max_turns`` turns have been played."""

    if state is None:
        state = engine.initial_state()
    agents = {Player.LIGHT: light_agent, Player.DARK: dark_agent}
    history: List[Turn] = []
    move_times: Dict[Player, List[float]] = {Player.LIGHT: [], Player.DARK: []}
    search_stats: Dict[Player, List[SearchStats]] = {Player.LIGHT: [], Player.DARK: []}

    while not engine.is_over(state) and len(history) < max_turns:
        player = state.player
        agent = agents[player]
        start = time.monotonic()
        turn = agent.choose_turn(state)
        move_times[player].append((time.monotonic() - start) * 1000.0)
        stats = getattr(agent, "last_stats", None)
        if stats is not None:
            search_stats[player].append(stats)

        state = engine.apply_turn(state, turn)
        history.append(turn)
        if emit_turns:
            print(f"Turn {len(history)}: {player.name} {format_turn(turn)}")
        if show_board:
            print(format_board(state))
            print(format_units(state, Player.LIGHT))
            print(format_units(state, Player.DARK))
            print()

    victor = engine.winner(state)
    if show_board:
        print(f"Winner: {victor.name if victor else 'None'}")
    return GameSummary(
        winner=victor,
        turns=len(history),
        history=history,
        final_state=state,
        move_times=move_times,
        search_stats=search_stats,
    )


def save_history(path: str, history: List[Turn], compact: bool = False) -> None:
    text = format_compact_history(history) if compact else format_history(history)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text + "\n")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Mytikas game runner")
    parser.add_argument("--light", default="minimax,max_depth=2", help="Strategy descriptor for light")
    parser.add_argument("--dark", default="random", help="Strategy descriptor for dark")
    parser.add_argument("--seed", type=int, default=None, help="Seed for random strategies without their own")
    parser.add_argument("--state", type=str, default=None, help="Encoded state to start from")
    parser.add_argument("--max-turns", type=int, default=MAX_TURNS)
    parser.add_argument("--verbose", action="store_true", help="Print the board after every turn")
    parser.add_argument("--save-history", type=str, default=None, help="Path to save the turn history")
    parser.add_argument("--compact", action="store_true", help="Save the history in compact notation")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)

    try:
        state = decode_state(args.state) if args.state else engine.initial_state()
        light_agent = build_agent(args.light, seed=args.seed)
        dark_agent = build_agent(args.dark, seed=None if args.seed is None else args.seed + 1)
    except ValueError as exc:
        print(f"Invalid input: {exc}")
        raise SystemExit(1)

    summary = play_game(
        light_agent,
        dark_agent,
        state=state,
        max_turns=args.max_turns,
        emit_turns=True,
        show_board=args.verbose,
    )
    if args.save_history:
        save_history(args.save_history, summary.history, compact=args.compact)

    if summary.winner is None:
        print(f"No winner after {summary.turns} turns")
    else:
        print(f"Winner: {summary.winner.name} after {summary.turns} turns")
    print(f"Final state: {encode_state(summary.final_state)}")


if __name__ == "__main__":
    main()

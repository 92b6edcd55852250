"""Verbose and compact notation for actions, turns and histories.

Verbose notation writes an action as unit letter, kind symbol and cell name,
e.g. ``Z@e1`` (summon Zeus), ``Z>e2`` (move), ``Z!e5`` (attack) or ``S+d4``
(special). Actions of a turn are joined by ``,``, a pass is ``x`` and turns
of a history are joined by ``;``.

Compact notation packs every action into two alphabet symbols, least
significant first. Non-final actions of a turn are offset by the action space
size so the decoder knows more follow; a pass is twice that size.
"""

from __future__ import annotations

from typing import Iterable, List

from . import board
from .catalog import PANTHEON, unit_by_letter
from .errors import DecodeError
from .state_format import ALPHABET, SYMBOL_VALUES
from .types import ACTION_SPACE, MAX_ACTIONS, Action, ActionKind, Turn

KIND_SYMBOLS = "@>!+"
PASS_SYMBOL = "x"
ACTION_SEPARATOR = ","
TURN_SEPARATOR = ";"

MORE_FOLLOWS = ACTION_SPACE
PASS_CODE = 2 * ACTION_SPACE


def format_action(action: Action) -> str:
    """Return the verbose form of ``action``."""

    return f"{PANTHEON[action.unit].letter}{KIND_SYMBOLS[action.kind]}{board.cell_name(action.cell)}"


def parse_action(text: str) -> Action:
    """Parse the verbose form of a single action."""

    if len(text) != 4:
        raise DecodeError(f"Malformed action '{text}'")
    unit = unit_by_letter(text[0])
    if unit is None:
        raise DecodeError(f"Unknown unit letter '{text[0]}' in '{text}'")
    kind = KIND_SYMBOLS.find(text[1])
    if kind < 0:
        raise DecodeError(f"Unknown action kind '{text[1]}' in '{text}'")
    return Action(ActionKind(kind), unit, board.parse_cell(text[2:]))


def format_turn(turn: Turn) -> str:
    if not turn:
        return PASS_SYMBOL
    return ACTION_SEPARATOR.join(format_action(action) for action in turn)


def parse_turn(text: str) -> Turn:
    """Parse a verbose turn; ``x`` is a pass."""

    if text == PASS_SYMBOL:
        return ()
    parts = text.split(ACTION_SEPARATOR)
    if len(parts) > MAX_ACTIONS:
        raise DecodeError(f"Turn has {len(parts)} actions; at most {MAX_ACTIONS} are allowed")
    return tuple(parse_action(part) for part in parts)


def format_history(turns: Iterable[Turn]) -> str:
    return TURN_SEPARATOR.join(format_turn(turn) for turn in turns)


def parse_history(text: str) -> List[Turn]:
    """Parse a verbose history. The empty string is the empty history."""

    text = text.strip()
    if not text:
        return []
    return [parse_turn(part) for part in text.split(TURN_SEPARATOR)]


def _pack(value: int) -> str:
    return ALPHABET[value & 63] + ALPHABET[value >> 6]


def format_compact_history(turns: Iterable[Turn]) -> str:
    """Return the compact form of a turn sequence."""

    symbols: List[str] = []
    for turn in turns:
        if not turn:
            symbols.append(_pack(PASS_CODE))
            continue
        last = len(turn) - 1
        for i, action in enumerate(turn):
            symbols.append(_pack(action.code() + (MORE_FOLLOWS if i < last else 0)))
    return "".join(symbols)


def parse_compact_history(text: str) -> List[Turn]:
    """Parse a compact history produced by :func:`format_compact_history`."""

    if len(text) % 2:
        raise DecodeError("Compact history has odd length")
    turns: List[Turn] = []
    pending: List[Action] = []
    for pos in range(0, len(text), 2):
        low = SYMBOL_VALUES.get(text[pos])
        high = SYMBOL_VALUES.get(text[pos + 1])
        if low is None or high is None:
            raise DecodeError(f"Invalid symbol in compact history at position {pos}")
        value = low | (high << 6)
        if value > PASS_CODE:
            raise DecodeError(f"Compact value {value} out of range at position {pos}")
        if value == PASS_CODE:
            if pending:
                raise DecodeError(f"Pass inside an unfinished turn at position {pos}")
            turns.append(())
            continue
        if value >= MORE_FOLLOWS:
            pending.append(Action.from_code(value - MORE_FOLLOWS))
        else:
            pending.append(Action.from_code(value))
        if len(pending) > MAX_ACTIONS:
            raise DecodeError(f"Turn longer than {MAX_ACTIONS} actions at position {pos}")
        if value < MORE_FOLLOWS:
            turns.append(tuple(pending))
            pending = []
    if pending:
        raise DecodeError("Compact history ends inside a turn")
    return turns

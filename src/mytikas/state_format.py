"""Text encoding of game states.

A state is written with a 64-symbol alphabet, one symbol per value:

- the player to move (0 light, 1 dark);
- for light then dark, for each unit in catalog order, either the cell of an
  alive unit followed by ``(health << 1) | chained``, or one of the markers
  41 (dead), 42 (available) and 43 (reserved).

The health symbol's range depends on the unit's maximum health, which keeps
the encoding as short as possible. The initial position is ``"A" + "q" * 24``.
"""

from __future__ import annotations

from typing import Dict, List

from .catalog import PANTHEON
from .errors import DecodeError
from .types import (
    AVAILABLE,
    DEAD,
    FIELD_COUNT,
    RESERVED,
    Alive,
    Available,
    Dead,
    Effect,
    GameState,
    Player,
    Reserved,
    Unit,
    UnitState,
)

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
SYMBOL_VALUES: Dict[str, int] = {symbol: value for value, symbol in enumerate(ALPHABET)}

DEAD_MARK = FIELD_COUNT
AVAILABLE_MARK = FIELD_COUNT + 1
RESERVED_MARK = FIELD_COUNT + 2


class _SymbolReader:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def read(self, limit: int, what: str) -> int:
        if self.pos >= len(self.text):
            raise DecodeError(f"State text ends early while reading {what}")
        symbol = self.text[self.pos]
        value = SYMBOL_VALUES.get(symbol)
        if value is None:
            raise DecodeError(f"Invalid symbol '{symbol}' at position {self.pos}")
        if value >= limit:
            raise DecodeError(f"Value {value} out of range for {what} at position {self.pos}")
        self.pos += 1
        return value

    def at_end(self) -> bool:
        return self.pos == len(self.text)


def _health_limit(unit: Unit) -> int:
    return (PANTHEON[unit].health + 1) * 2


def encode_state(state: GameState) -> str:
    """Return the canonical text for ``state``."""

    symbols: List[str] = [ALPHABET[state.player.value]]
    for player in Player:
        for unit in Unit:
            unit_state = state.unit(player, unit)
            if isinstance(unit_state, Alive):
                chained = 1 if unit_state.chained else 0
                symbols.append(ALPHABET[unit_state.cell])
                symbols.append(ALPHABET[(unit_state.health << 1) | chained])
            elif isinstance(unit_state, Dead):
                symbols.append(ALPHABET[DEAD_MARK])
            elif isinstance(unit_state, Available):
                symbols.append(ALPHABET[AVAILABLE_MARK])
            elif isinstance(unit_state, Reserved):
                symbols.append(ALPHABET[RESERVED_MARK])
            else:
                raise TypeError(f"not a unit state: {unit_state!r}")
    return "".join(symbols)


def decode_state(text: str) -> GameState:
    """Parse a state encoded by :func:`encode_state`."""

    if not text:
        raise DecodeError("State text is empty")
    reader = _SymbolReader(text)
    player = Player(reader.read(2, "player to move"))
    rows: List[List[UnitState]] = [[], []]
    occupied: Dict[int, str] = {}
    for owner in Player:
        for unit in Unit:
            name = PANTHEON[unit].name
            value = reader.read(RESERVED_MARK + 1, f"{name} cell")
            if value == DEAD_MARK:
                rows[owner.value].append(DEAD)
            elif value == AVAILABLE_MARK:
                rows[owner.value].append(AVAILABLE)
            elif value == RESERVED_MARK:
                rows[owner.value].append(RESERVED)
            else:
                packed = reader.read(_health_limit(unit), f"{name} health")
                health = packed >> 1
                if health == 0:
                    raise DecodeError(f"Alive {name} has zero health")
                if value in occupied:
                    raise DecodeError(f"{name} and {occupied[value]} share cell {value}")
                occupied[value] = name
                effects = Effect.CHAINED if packed & 1 else Effect.NONE
                rows[owner.value].append(Alive(value, health, effects))
    if not reader.at_end():
        raise DecodeError(f"Trailing data after position {reader.pos}")
    state = GameState(player, (tuple(rows[0]), tuple(rows[1])))
    if encode_state(state) != text:
        raise AssertionError(f"State round trip mismatch for '{text}'")
    return state

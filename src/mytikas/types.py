"""Core data structures for Mytikas.

Rule reminders:
- The board is a 41-cell diamond; cells are indexed 0..40 in row-major order.
- Each player owns the same twelve gods, tracked in catalog order.
- A unit is reserved, available for summoning, alive on a cell, or dead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum, IntFlag
from typing import Iterator, List, Optional, Tuple, Union

FIELD_COUNT = 41
UNIT_COUNT = 12
MAX_ACTIONS = 6


class Player(Enum):
    """Players in the game; light moves first and starts at cell 0."""

    LIGHT = 0
    DARK = 1

    def opponent(self) -> "Player":
        """Return the opposing player."""

        return Player.LIGHT if self is Player.DARK else Player.DARK


class Unit(IntEnum):
    """The twelve gods in catalog order."""

    ZEUS = 0
    HEPHAESTUS = 1
    HERA = 2
    POSEIDON = 3
    APOLLO = 4
    APHRODITE = 5
    ARES = 6
    HERMES = 7
    DIONYSOS = 8
    ARTEMIS = 9
    HADES = 10
    ATHENA = 11


class ActionKind(IntEnum):
    SUMMON = 0
    MOVE = 1
    ATTACK = 2
    SPECIAL = 3


class Effect(IntFlag):
    """Status flags. Only CHAINED is stored; the auras are derived from adjacency."""

    NONE = 0
    CHAINED = 1
    DAMAGE_BOOST = 2
    SPEED_BOOST = 4
    SHIELDED = 8


@dataclass(frozen=True)
class Reserved:
    """Not yet available to its owner."""


@dataclass(frozen=True)
class Available:
    """Waiting at home; may be summoned onto the gate."""


@dataclass(frozen=True)
class Alive:
    cell: int
    health: int
    effects: Effect = Effect.NONE

    @property
    def chained(self) -> bool:
        return bool(self.effects & Effect.CHAINED)


@dataclass(frozen=True)
class Dead:
    """Removed from play for good."""


UnitState = Union[Reserved, Available, Alive, Dead]

RESERVED = Reserved()
AVAILABLE = Available()
DEAD = Dead()

ACTION_SPACE = 4 * UNIT_COUNT * FIELD_COUNT


@dataclass(frozen=True, order=True)
class Action:
    """A single step of a turn.

    Actions compare in the order of their canonical integer code
    ``((kind * 12) + unit) * 41 + cell``.
    """

    kind: ActionKind
    unit: Unit
    cell: int

    def code(self) -> int:
        """Return the canonical integer in ``[0, ACTION_SPACE)``."""

        return (int(self.kind) * UNIT_COUNT + int(self.unit)) * FIELD_COUNT + self.cell

    @classmethod
    def from_code(cls, code: int) -> "Action":
        if not 0 <= code < ACTION_SPACE:
            raise ValueError(f"action code out of range: {code}")
        rest, cell = divmod(code, FIELD_COUNT)
        kind, unit = divmod(rest, UNIT_COUNT)
        return cls(ActionKind(kind), Unit(unit), cell)


Turn = Tuple[Action, ...]
PASS: Turn = ()

Occupant = Tuple[Player, Unit]


@dataclass(frozen=True)
class GameState:
    """Complete game state.

    ``units`` holds one tuple per player (light first), each with twelve unit
    states in catalog order. ``board`` is derived on construction and maps each
    cell to its occupant or ``None``.
    """

    player: Player
    units: Tuple[Tuple[UnitState, ...], Tuple[UnitState, ...]]
    board: Tuple[Optional[Occupant], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.units) != 2 or any(len(row) != UNIT_COUNT for row in self.units):
            raise ValueError("a state needs twelve unit states for each player")
        board: List[Optional[Occupant]] = [None] * FIELD_COUNT
        for player in Player:
            for unit, unit_state in zip(Unit, self.units[player.value]):
                if not isinstance(unit_state, Alive):
                    continue
                if not 0 <= unit_state.cell < FIELD_COUNT:
                    raise ValueError(f"cell out of range: {unit_state.cell}")
                if board[unit_state.cell] is not None:
                    raise ValueError(f"two units share cell {unit_state.cell}")
                board[unit_state.cell] = (player, unit)
        object.__setattr__(self, "board", tuple(board))

    def unit(self, player: Player, unit: Unit) -> UnitState:
        return self.units[player.value][unit]

    def occupant(self, cell: int) -> Optional[Occupant]:
        return self.board[cell]

    def player_at(self, cell: int) -> Optional[Player]:
        occupant = self.board[cell]
        return None if occupant is None else occupant[0]

    def is_empty(self, cell: int) -> bool:
        return self.board[cell] is None

    def alive_units(self, player: Player) -> Iterator[Tuple[int, Unit]]:
        """Yield ``(cell, unit)`` for the player's units in play, by cell."""

        for cell, occupant in enumerate(self.board):
            if occupant is not None and occupant[0] is player:
                yield cell, occupant[1]

    def with_unit(self, player: Player, unit: Unit, unit_state: UnitState) -> "GameState":
        """Return a copy with one unit state replaced."""

        rows = [list(row) for row in self.units]
        rows[player.value][unit] = unit_state
        return GameState(self.player, (tuple(rows[0]), tuple(rows[1])))

    def with_player(self, player: Player) -> "GameState":
        return GameState(player, self.units)

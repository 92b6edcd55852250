"""Board topology for Mytikas.

The board is the diamond of cells ``(r, c)`` inside a 9x9 grid with
``|r - 4| + |c - 4| < 5``. Cells are numbered 0..40 row by row, so cell 0 is
``e1`` (light's gate), cell 20 is ``e5`` and cell 40 is ``e9`` (dark's gate).
Light advances towards higher rows.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from .errors import DecodeError
from .types import FIELD_COUNT, Player

BOARD_SIZE = 9
CENTER = 4
FILES = "abcdefghi"
RANKS = "123456789"

Coord = Tuple[int, int]
Vector = Tuple[int, int]

ORTHOGONAL_VECTORS: Tuple[Vector, ...] = ((-1, 0), (0, 1), (0, -1), (1, 0))
DIAGONAL_VECTORS: Tuple[Vector, ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
KNIGHT_VECTORS: Tuple[Vector, ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)


def on_board(r: int, c: int) -> bool:
    """Return True when ``(r, c)`` is one of the 41 diamond cells."""

    return 0 <= r < BOARD_SIZE and 0 <= c < BOARD_SIZE and abs(r - CENTER) + abs(c - CENTER) <= CENTER


COORDS: Tuple[Coord, ...] = tuple(
    (r, c) for r in range(BOARD_SIZE) for c in range(BOARD_SIZE) if on_board(r, c)
)
assert len(COORDS) == FIELD_COUNT

_INDEX: Dict[Coord, int] = {coord: i for i, coord in enumerate(COORDS)}

CELL_NAMES: Tuple[str, ...] = tuple(f"{FILES[c]}{RANKS[r]}" for r, c in COORDS)
_BY_NAME: Dict[str, int] = {name: i for i, name in enumerate(CELL_NAMES)}

GATES: Tuple[int, int] = (_INDEX[(0, CENTER)], _INDEX[(BOARD_SIZE - 1, CENTER)])


def cell_at(r: int, c: int) -> Optional[int]:
    """Return the index of ``(r, c)`` or ``None`` when it is off the board."""

    return _INDEX.get((r, c))


def coords(cell: int) -> Coord:
    return COORDS[cell]


def cell_name(cell: int) -> str:
    return CELL_NAMES[cell]


def parse_cell(name: str) -> int:
    """Convert a cell name such as ``e5`` to its index."""

    try:
        return _BY_NAME[name]
    except KeyError as exc:
        raise DecodeError(f"Unknown cell '{name}'") from exc


def step(cell: int, dr: int, dc: int) -> Optional[int]:
    """Return the cell reached by one ``(dr, dc)`` step, or ``None``."""

    r, c = COORDS[cell]
    return _INDEX.get((r + dr, c + dc))


NEIGHBORS: Tuple[Tuple[int, ...], ...] = tuple(
    tuple(
        sorted(
            n
            for n in (step(cell, dr, dc) for dr, dc in ORTHOGONAL_VECTORS + DIAGONAL_VECTORS)
            if n is not None
        )
    )
    for cell in range(FIELD_COUNT)
)


def neighbors(cell: int) -> Tuple[int, ...]:
    """Return the up to eight adjacent cells in index order."""

    return NEIGHBORS[cell]


def gate(player: Player) -> int:
    return GATES[player.value]


def forward(player: Player) -> int:
    """Row direction in which ``player`` advances."""

    return 1 if player is Player.LIGHT else -1


def distance(a: int, b: int) -> int:
    """Manhattan distance between two cells."""

    ar, ac = COORDS[a]
    br, bc = COORDS[b]
    return abs(ar - br) + abs(ac - bc)

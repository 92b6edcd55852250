"""Static unit catalog.

Every rule that differs between gods is expressed as data on ``UnitDef``; the
engine only interprets these fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Dict, FrozenSet, Optional, Tuple

from .board import DIAGONAL_VECTORS, KNIGHT_VECTORS, ORTHOGONAL_VECTORS, Vector
from .types import ActionKind, Effect, Unit

LETTERS = "ZHEPOARMDTSN"


class Dirs(IntFlag):
    """Direction sets with qualifiers.

    DIRECT restricts a pattern to straight uninterrupted lines; PIERCE lets a
    direct attack line pass over pieces.
    """

    NONE = 0
    ORTHOGONAL = 1
    DIAGONAL = 2
    ALL8 = 3
    KNIGHT = 4
    DIRECT = 8
    PIERCE = 16


class Area(Enum):
    NONE = "none"
    FORWARD = "forward"
    RING = "ring"


class Trait(IntFlag):
    NONE = 0
    FLANKING = 1
    STRAIGHT_SHOT = 2
    KNOCKBACK = 4
    TRAMPLE = 8


class Special(Enum):
    NONE = "none"
    CHAIN = "chain"
    SECOND_STRIKE = "second_strike"
    WITHERING_MOON = "withering_moon"
    ALLURE = "allure"


@dataclass(frozen=True)
class UnitDef:
    """Immutable definition of one god.

    Units with an ``area`` attack the cells around them instead of a target;
    ``attack_range`` is then informational.
    ``special_after`` lists the action kinds of the same unit that the special
    may follow within a turn; ``special_standalone`` makes it usable wherever
    an attack is.
    """

    unit: Unit
    name: str
    letter: str
    health: int
    movement: int
    damage: int
    attack_range: int
    move_dirs: Dirs
    attack_dirs: Dirs
    aura: Effect = Effect.NONE
    area: Area = Area.NONE
    traits: Trait = Trait.NONE
    special: Special = Special.NONE
    special_range: int = 0
    special_after: FrozenSet[ActionKind] = frozenset()
    special_standalone: bool = False


def direction_vectors(dirs: Dirs) -> Tuple[Vector, ...]:
    """Expand a direction set into step vectors (orthogonal, diagonal, knight)."""

    vectors: Tuple[Vector, ...] = ()
    if dirs & Dirs.ORTHOGONAL:
        vectors += ORTHOGONAL_VECTORS
    if dirs & Dirs.DIAGONAL:
        vectors += DIAGONAL_VECTORS
    if dirs & Dirs.KNIGHT:
        vectors += KNIGHT_VECTORS
    return vectors


PANTHEON: Tuple[UnitDef, ...] = (
    UnitDef(Unit.ZEUS, "Zeus", "Z", 10, 1, 10, 3, Dirs.ALL8, Dirs.ORTHOGONAL | Dirs.DIRECT | Dirs.PIERCE),
    UnitDef(
        Unit.HEPHAESTUS,
        "Hephaestus",
        "H",
        9,
        2,
        7,
        2,
        Dirs.ORTHOGONAL,
        Dirs.ORTHOGONAL | Dirs.DIRECT,
        aura=Effect.DAMAGE_BOOST,
    ),
    UnitDef(Unit.HERA, "Hera", "E", 8, 2, 5, 2, Dirs.DIAGONAL, Dirs.DIAGONAL, traits=Trait.FLANKING),
    UnitDef(
        Unit.POSEIDON,
        "Poseidon",
        "P",
        7,
        3,
        4,
        0,
        Dirs.ORTHOGONAL,
        Dirs.NONE,
        area=Area.FORWARD,
        traits=Trait.KNOCKBACK,
    ),
    UnitDef(Unit.APOLLO, "Apollo", "O", 6, 2, 2, 3, Dirs.ALL8, Dirs.ALL8, traits=Trait.STRAIGHT_SHOT),
    UnitDef(
        Unit.APHRODITE,
        "Aphrodite",
        "A",
        6,
        3,
        6,
        1,
        Dirs.ALL8,
        Dirs.ALL8,
        special=Special.ALLURE,
        special_range=3,
        special_standalone=True,
    ),
    UnitDef(
        Unit.ARES,
        "Ares",
        "R",
        5,
        3,
        5,
        3,
        Dirs.ALL8 | Dirs.DIRECT,
        Dirs.ALL8 | Dirs.DIRECT,
        traits=Trait.TRAMPLE,
    ),
    UnitDef(
        Unit.HERMES,
        "Hermes",
        "M",
        5,
        3,
        3,
        2,
        Dirs.ALL8,
        Dirs.ALL8 | Dirs.DIRECT,
        aura=Effect.SPEED_BOOST,
        special=Special.SECOND_STRIKE,
        special_range=2,
        special_after=frozenset({ActionKind.ATTACK}),
    ),
    UnitDef(Unit.DIONYSOS, "Dionysos", "D", 4, 1, 4, 0, Dirs.KNIGHT, Dirs.NONE, area=Area.RING),
    UnitDef(
        Unit.ARTEMIS,
        "Artemis",
        "T",
        4,
        2,
        4,
        2,
        Dirs.ALL8,
        Dirs.DIAGONAL | Dirs.DIRECT,
        special=Special.WITHERING_MOON,
        special_range=2,
        special_standalone=True,
    ),
    UnitDef(
        Unit.HADES,
        "Hades",
        "S",
        3,
        3,
        3,
        1,
        Dirs.ALL8 | Dirs.DIRECT,
        Dirs.NONE,
        area=Area.RING,
        special=Special.CHAIN,
        special_range=1,
        special_after=frozenset({ActionKind.SUMMON, ActionKind.MOVE, ActionKind.ATTACK}),
        special_standalone=True,
    ),
    UnitDef(Unit.ATHENA, "Athena", "N", 3, 1, 3, 3, Dirs.ALL8, Dirs.ALL8 | Dirs.DIRECT, aura=Effect.SHIELDED),
)

_BY_LETTER: Dict[str, Unit] = {info.letter: info.unit for info in PANTHEON}

TRAMPLE_DAMAGE = 1


def unit_def(unit: Unit) -> UnitDef:
    return PANTHEON[unit]


def unit_by_letter(letter: str) -> Optional[Unit]:
    """Return the unit with the one-letter id, or ``None``."""

    return _BY_LETTER.get(letter)

from mytikas.catalog import LETTERS, PANTHEON, Area, Dirs, Special, direction_vectors, unit_by_letter
from mytikas.types import ActionKind, Effect, Unit


def test_catalog_order_and_letters():
    assert len(PANTHEON) == 12
    assert "".join(info.letter for info in PANTHEON) == LETTERS
    assert [info.unit for info in PANTHEON] == list(Unit)
    assert PANTHEON[Unit.ZEUS].name == "Zeus"
    assert PANTHEON[Unit.ATHENA].name == "Athena"


def test_catalog_values_are_within_bounds():
    for info in PANTHEON:
        assert 3 <= info.health <= 10
        assert 1 <= info.movement <= 3
        assert 2 <= info.damage <= 10
        assert 0 <= info.attack_range <= 3


def test_auras():
    auras = {info.unit: info.aura for info in PANTHEON if info.aura is not Effect.NONE}
    assert auras == {
        Unit.HEPHAESTUS: Effect.DAMAGE_BOOST,
        Unit.HERMES: Effect.SPEED_BOOST,
        Unit.ATHENA: Effect.SHIELDED,
    }


def test_area_units_have_no_attack_directions():
    area_units = [info.unit for info in PANTHEON if info.area is not Area.NONE]
    assert area_units == [Unit.POSEIDON, Unit.DIONYSOS, Unit.HADES]
    assert all(PANTHEON[unit].attack_dirs == Dirs.NONE for unit in area_units)


def test_specials():
    hades = PANTHEON[Unit.HADES]
    assert hades.special is Special.CHAIN
    assert hades.special_standalone
    assert ActionKind.MOVE in hades.special_after
    hermes = PANTHEON[Unit.HERMES]
    assert hermes.special is Special.SECOND_STRIKE
    assert not hermes.special_standalone
    assert hermes.special_after == frozenset({ActionKind.ATTACK})


def test_unit_by_letter():
    assert unit_by_letter("S") is Unit.HADES
    assert unit_by_letter("E") is Unit.HERA
    assert unit_by_letter("s") is None
    assert unit_by_letter("Q") is None


def test_direction_vectors():
    assert len(direction_vectors(Dirs.ORTHOGONAL)) == 4
    assert len(direction_vectors(Dirs.ALL8)) == 8
    assert direction_vectors(Dirs.ALL8 | Dirs.DIRECT) == direction_vectors(Dirs.ALL8)
    assert len(direction_vectors(Dirs.KNIGHT)) == 8
    assert direction_vectors(Dirs.NONE) == ()

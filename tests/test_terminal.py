from mytikas import engine
from mytikas.types import AVAILABLE, DEAD, RESERVED, Alive, GameState, Player


def build_state(light, dark, player=Player.LIGHT) -> GameState:
    """Build a state from two lists of twelve unit states."""

    return GameState(player, (tuple(light), tuple(dark)))


def test_initial_state_is_not_over():
    state = engine.initial_state()
    assert engine.winner(state) is None
    assert not engine.is_over(state)


def test_reaching_enemy_gate_wins():
    light = [Alive(40, 10)] + [AVAILABLE] * 11
    state = build_state(light, [AVAILABLE] * 12, player=Player.DARK)
    assert engine.winner(state) is Player.LIGHT
    assert engine.is_over(state)
    assert engine.generate_turns(state) == []


def test_dark_on_light_gate_wins():
    dark = [Alive(0, 10)] + [AVAILABLE] * 11
    state = build_state([AVAILABLE] * 12, dark)
    assert engine.winner(state) is Player.DARK


def test_elimination_wins():
    light = [Alive(20, 10)] + [DEAD] * 11
    state = build_state(light, [DEAD] * 12, player=Player.DARK)
    assert engine.winner(state) is Player.LIGHT
    assert engine.generate_turns(state) == []


def test_reserved_units_do_not_keep_a_side_alive():
    light = [Alive(20, 10)] + [DEAD] * 11
    state = build_state(light, [RESERVED] * 12)
    assert engine.winner(state) is Player.LIGHT


def test_available_units_keep_a_side_alive():
    light = [Alive(20, 10)] + [DEAD] * 11
    dark = [DEAD] * 11 + [AVAILABLE]
    state = build_state(light, dark, player=Player.DARK)
    assert engine.winner(state) is None
    assert engine.generate_turns(state)

import pytest

from mytikas.agents import RandomAgent
from mytikas import engine
from mytikas.errors import DecodeError
from mytikas.turn_format import (
    format_action,
    format_compact_history,
    format_history,
    format_turn,
    parse_action,
    parse_compact_history,
    parse_history,
    parse_turn,
)
from mytikas.types import Action, ActionKind, Unit

SUMMON_ZEUS = Action(ActionKind.SUMMON, Unit.ZEUS, 0)
MOVE_ZEUS = Action(ActionKind.MOVE, Unit.ZEUS, 2)
CHAIN = Action(ActionKind.SPECIAL, Unit.HADES, 11)


def test_verbose_actions():
    assert format_action(SUMMON_ZEUS) == "Z@e1"
    assert format_action(MOVE_ZEUS) == "Z>e2"
    assert format_action(Action(ActionKind.ATTACK, Unit.APOLLO, 20)) == "O!e5"
    assert format_action(CHAIN) == "S+d4"
    assert parse_action("S+d4") == CHAIN


def test_verbose_turns_and_history():
    assert format_turn(()) == "x"
    assert parse_turn("x") == ()
    assert format_turn((SUMMON_ZEUS, MOVE_ZEUS)) == "Z@e1,Z>e2"
    history = [(SUMMON_ZEUS,), (), (SUMMON_ZEUS, MOVE_ZEUS)]
    assert format_history(history) == "Z@e1;x;Z@e1,Z>e2"
    assert parse_history("Z@e1;x;Z@e1,Z>e2") == history
    assert parse_history("") == []
    assert format_history([]) == ""


@pytest.mark.parametrize("text", ["Q@e1", "Z?e1", "Z@j1", "Z@e", "Z@e1,", ",".join(["Z>e2"] * 7)])
def test_verbose_parse_errors(text):
    with pytest.raises(DecodeError):
        parse_turn(text)


def test_compact_values():
    assert format_compact_history([]) == ""
    assert parse_compact_history("") == []
    assert format_compact_history([(SUMMON_ZEUS,)]) == "AA"
    assert format_compact_history([()]) == "g9"
    # Non-final actions carry the "more follows" offset.
    assert format_compact_history([(SUMMON_ZEUS, MOVE_ZEUS)]) == "weuH"
    assert parse_compact_history("weuHg9AA") == [(SUMMON_ZEUS, MOVE_ZEUS), (), (SUMMON_ZEUS,)]


@pytest.mark.parametrize("text", ["A", "h9", "__", "weg9", "we", "*A", "we" * 6 + "AA"])
def test_compact_parse_errors(text):
    with pytest.raises(DecodeError):
        parse_compact_history(text)


def test_played_history_survives_both_notations():
    agent = RandomAgent(seed=11)
    state = engine.initial_state()
    history = []
    for _ in range(30):
        if engine.is_over(state):
            break
        turn = agent.choose_turn(state)
        state = engine.apply_turn(state, turn)
        history.append(turn)
    assert parse_history(format_history(history)) == history
    assert parse_compact_history(format_compact_history(history)) == history

import pytest

from mytikas import engine, runner
from mytikas.agents import MinimaxAgent, RandomAgent
from mytikas.replay import replay_file, replay_turns
from mytikas.state_format import encode_state
from mytikas.turn_format import parse_turn
from mytikas.types import Player


def test_play_game_history_replays_to_final_state():
    summary = runner.play_game(RandomAgent(seed=1), RandomAgent(seed=2), max_turns=20)

    assert summary.turns == len(summary.history) <= 20
    assert len(summary.move_times[Player.LIGHT]) + len(summary.move_times[Player.DARK]) == summary.turns
    state, winner = replay_turns(summary.history)
    assert state == summary.final_state
    assert winner == summary.winner


def test_play_game_collects_search_stats():
    summary = runner.play_game(MinimaxAgent(max_depth=1), RandomAgent(seed=3), max_turns=4)

    assert len(summary.search_stats[Player.LIGHT]) == 2
    assert summary.search_stats[Player.DARK] == []


def test_play_game_respects_max_turns():
    state = engine.apply_turn(engine.initial_state(), parse_turn("Z@e1"))
    summary = runner.play_game(RandomAgent(seed=1), RandomAgent(seed=1), state=state, max_turns=0)
    assert summary.turns == 0
    assert summary.final_state == state


def test_format_board():
    state = engine.apply_turn(engine.initial_state(), parse_turn("Z@e1"))
    state = engine.apply_turn(state, parse_turn("A@e9"))
    lines = runner.format_board(state).splitlines()

    assert len(lines) == 10
    assert lines[0] == "9 " + " " * 8 + "a"
    assert lines[4] == "5 . . . . . . . . ."
    assert lines[8] == "1 " + " " * 8 + "Z"
    assert lines[9] == "  a b c d e f g h i"


def test_format_units():
    state = engine.apply_turn(engine.initial_state(), parse_turn("Z@e1"))
    assert runner.format_units(state, Player.LIGHT) == "LIGHT: Z10@e1"
    assert runner.format_units(state, Player.DARK) == "DARK: -"


def test_main_plays_and_saves_history(tmp_path, capsys):
    path = tmp_path / "history.txt"
    runner.main(
        [
            "--light",
            "random",
            "--dark",
            "random",
            "--seed",
            "1",
            "--max-turns",
            "4",
            "--save-history",
            str(path),
            "--compact",
        ]
    )
    out = capsys.readouterr().out
    assert "Turn 1: LIGHT " in out
    assert "No winner after 4 turns" in out
    final = out.strip().splitlines()[-1]
    assert final.startswith("Final state: ")

    state, _ = replay_file(str(path))
    assert final == f"Final state: {encode_state(state)}"


@pytest.mark.parametrize("argv", [["--light", "minimax"], ["--dark", "greedy"], ["--state", "A"]])
def test_main_rejects_bad_input(argv, capsys):
    with pytest.raises(SystemExit) as exc:
        runner.main(argv)
    assert exc.value.code == 1
    assert "Invalid input" in capsys.readouterr().out

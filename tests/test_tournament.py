from mytikas import tournament
from mytikas.types import Player, Unit


def test_tournament_smoke():
    result = tournament.run_tournament("random", "random", games=2, seed=0, max_turns=10)

    assert result.games == 2
    assert result.light_wins + result.dark_wins + result.draws == 2
    assert result.avg_turns > 0
    assert Player.LIGHT in result.avg_move_time_ms and Player.DARK in result.avg_move_time_ms


def test_roster_strength_pairs_missing_gods():
    records = tournament.roster_strength("random", units=[Unit.HERA, Unit.ZEUS], max_turns=6)

    assert [record.unit for record in records] == [Unit.ZEUS, Unit.HERA]
    # Two mixed pairings plus one mirror pairing that counts for both sides.
    assert all(record.games == 4 for record in records)
    assert all(0.0 <= record.score <= 1.0 for record in records)


def test_roster_strength_score():
    record = tournament.RosterStrength(Unit.ZEUS, games=4, wins=1, draws=2)
    assert record.score == 0.5
    assert tournament.RosterStrength(Unit.ZEUS).score == 0.0


def test_main_reports_results(capsys):
    tournament.main(["--games", "1", "--light", "random", "--max-turns", "6"])
    out = capsys.readouterr().out
    assert "Light wins: " in out
    assert "Average turns: " in out

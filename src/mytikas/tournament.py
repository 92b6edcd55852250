"""Tournament/benchmark runner for Mytikas.

Usage examples:
- ``python -m mytikas.tournament --games 20 --light minimax,max_depth=2 --dark random --seed 1``
- ``python -m mytikas.tournament --roster --games 1 --light random``

Roster mode measures how much each god is worth: every game removes one god
from each side, and a god whose absence loses many games is a strong one.
"""

from __future__ import annotations

import argparse
import logging
import random
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from . import engine
from .agents import build_agent
from .catalog import PANTHEON
from .runner import MAX_TURNS, play_game
from .types import Player, Unit

logger = logging.getLogger(__name__)


@dataclass
class TournamentResult:
    games: int
    light_wins: int
    dark_wins: int
    draws: int
    avg_turns: float
    avg_move_time_ms: Dict[Player, float]


@dataclass
class RosterStrength:
    """Results of the games a side played without ``unit``."""

    unit: Unit
    games: int = 0
    wins: int = 0
    draws: int = 0

    @property
    def score(self) -> float:
        if not self.games:
            return 0.0
        return (self.wins + 0.5 * self.draws) / self.games


def _average(values):
    return 0.0 if not values else sum(values) / len(values)


def run_tournament(
    light: str,
    dark: str,
    games: int = 20,
    seed: int = 0,
    max_turns: int = MAX_TURNS,
    quiet: bool = True,
) -> TournamentResult:
    """Play ``games`` games between two strategy descriptors."""

    rng = random.Random(seed)
    wins = {Player.LIGHT: 0, Player.DARK: 0}
    draws = 0
    total_turns = 0
    move_times: Dict[Player, List[float]] = {Player.LIGHT: [], Player.DARK: []}

    for game_index in range(games):
        summary = play_game(
            build_agent(light, seed=rng.randint(0, 2**31 - 1)),
            build_agent(dark, seed=rng.randint(0, 2**31 - 1)),
            max_turns=max_turns,
            emit_turns=not quiet,
        )
        total_turns += summary.turns
        for player in Player:
            move_times[player].extend(summary.move_times[player])
        if summary.winner is None:
            draws += 1
        else:
            wins[summary.winner] += 1
        logger.info("game %d: winner=%s turns=%d", game_index + 1, summary.winner, summary.turns)

    return TournamentResult(
        games=games,
        light_wins=wins[Player.LIGHT],
        dark_wins=wins[Player.DARK],
        draws=draws,
        avg_turns=total_turns / games if games else 0.0,
        avg_move_time_ms={player: _average(move_times[player]) for player in Player},
    )


def roster_strength(
    light: str,
    dark: Optional[str] = None,
    units: Optional[Iterable[Unit]] = None,
    rounds: int = 1,
    seed: int = 0,
    max_turns: int = MAX_TURNS,
) -> List[RosterStrength]:
    """Play every pairing of one missing god per side among ``units``.

    Mirror pairings, with the same god missing on both sides, are played too;
    they show how much the side to move first is favoured.

    Returns one record per god, in catalog order; ``score`` is the share of
    points the side without that god collected.
    """

    dark = dark or light
    pool = list(Unit) if units is None else list(units)
    rng = random.Random(seed)
    tallies = {unit: RosterStrength(unit) for unit in pool}

    for _ in range(rounds):
        for missing_light in pool:
            for missing_dark in pool:
                rosters = (
                    [unit for unit in Unit if unit is not missing_light],
                    [unit for unit in Unit if unit is not missing_dark],
                )
                summary = play_game(
                    build_agent(light, seed=rng.randint(0, 2**31 - 1)),
                    build_agent(dark, seed=rng.randint(0, 2**31 - 1)),
                    state=engine.initial_state(rosters),
                    max_turns=max_turns,
                )
                tallies[missing_light].games += 1
                tallies[missing_dark].games += 1
                if summary.winner is Player.LIGHT:
                    tallies[missing_light].wins += 1
                elif summary.winner is Player.DARK:
                    tallies[missing_dark].wins += 1
                else:
                    tallies[missing_light].draws += 1
                    tallies[missing_dark].draws += 1
                logger.info(
                    "without %s vs without %s: winner=%s turns=%d",
                    PANTHEON[missing_light].name,
                    PANTHEON[missing_dark].name,
                    summary.winner,
                    summary.turns,
                )
    return [tallies[unit] for unit in sorted(pool)]


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Mytikas tournament/benchmark runner")
    parser.add_argument("--games", type=int, default=20, help="Games to play (rounds in roster mode)")
    parser.add_argument("--light", default="minimax,max_depth=2")
    parser.add_argument("--dark", default="random")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--max-turns", type=int, default=MAX_TURNS)
    parser.add_argument("--roster", action="store_true", help="Rank gods by playing with one removed per side")
    parser.add_argument("--quiet", dest="quiet", action="store_true", help="Suppress per-turn logs", default=True)
    parser.add_argument("--no-quiet", dest="quiet", action="store_false", help="Show per-turn logs")
    parser.add_argument("--log-level", default="WARNING", help="Logging level, e.g. INFO or DEBUG")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")

    try:
        build_agent(args.light)
        build_agent(args.dark)
    except ValueError as exc:
        print(f"Invalid strategy: {exc}")
        raise SystemExit(1)

    if args.roster:
        records = roster_strength(
            args.light,
            args.dark,
            rounds=args.games,
            seed=args.seed,
            max_turns=args.max_turns,
        )
        for record in sorted(records, key=lambda item: item.score):
            print(
                f"{PANTHEON[record.unit].name:<10} without: games={record.games} wins={record.wins} "
                f"draws={record.draws} score={record.score:.3f}"
            )
        return

    result = run_tournament(
        args.light,
        args.dark,
        games=args.games,
        seed=args.seed,
        max_turns=args.max_turns,
        quiet=args.quiet,
    )
    print(f"Light wins: {result.light_wins}, Dark wins: {result.dark_wins}, Draws: {result.draws}")
    if result.games:
        print(f"Win rate (Light): {result.light_wins / result.games:.3f}")
    print(f"Average turns: {result.avg_turns:.2f}")
    print(
        f"Average move time ms - Light: {result.avg_move_time_ms[Player.LIGHT]:.2f}, "
        f"Dark: {result.avg_move_time_ms[Player.DARK]:.2f}"
    )


if __name__ == "__main__":
    main()

"""Agents for playing Mytikas and the strategy descriptors that name them.

A descriptor is a comma-separated string: the strategy name followed by
``key=value`` parameters, e.g. ``random``, ``random,seed=7`` or
``minimax,max_depth=3`` or ``mcts,samples=50``.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from . import board, engine
from .catalog import PANTHEON
from .errors import SearchError
from .types import Alive, Available, GameState, Player, Turn, Unit

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 4
DEFAULT_SAMPLES = 100
PLAYOUT_TURNS = 200
WIN_SCORE = 100_000_000
INF = 999_999_999

STRATEGIES = ("random", "minimax", "mcts")


@dataclass
class SearchStats:
    """Statistics from a single search."""

    nodes: int
    depth: int
    value: int
    best_turns: int
    elapsed_ms: float


class Agent:
    """Base class for agents."""

    def choose_turn(self, state: GameState) -> Turn:
        """Return one of the legal turns for ``state``."""

        raise NotImplementedError


class RandomAgent(Agent):
    """Agent that selects a random legal turn with reproducible seeding."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def choose_turn(self, state: GameState) -> Turn:
        turns = engine.generate_turns(state)
        if not turns:
            raise SearchError("No legal turns available")
        return self._rng.choice(turns)


def evaluate(state: GameState) -> int:
    """Score ``state`` for the player to move.

    Each unit is worth 1000 per health point (available units at full health);
    units in play add 100 per step they are closer than ten steps to the enemy
    gate.
    """

    scores = {Player.LIGHT: 0, Player.DARK: 0}
    for player in Player:
        target = board.gate(player.opponent())
        for unit in Unit:
            unit_state = state.unit(player, unit)
            if isinstance(unit_state, Alive):
                scores[player] += 1000 * unit_state.health
                scores[player] += 100 * (10 - board.distance(unit_state.cell, target))
            elif isinstance(unit_state, Available):
                scores[player] += 1000 * PANTHEON[unit].health
    return scores[state.player] - scores[state.player.opponent()]


class MinimaxAgent(Agent):
    """Negamax with alpha-beta pruning.

    Below the root, turns are ordered by a search two plies shallower whenever
    more than two plies remain. Among equally scored root turns the first one
    in generation order is chosen, so the agent is deterministic.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        if max_depth < 1:
            raise SearchError("max_depth must be at least 1")
        self.max_depth = max_depth
        self.last_stats: Optional[SearchStats] = None
        self._nodes = 0

    def choose_turn(self, state: GameState) -> Turn:
        self.last_stats = None
        self._nodes = 0
        start_time = time.monotonic()

        turns = engine.generate_turns(state)
        if not turns:
            raise SearchError("No legal turns available")

        ordered = turns
        if self.max_depth > 2:
            ordered = self._order_turns(state, turns, self.max_depth - 2)

        best_value = -INF
        best_turns: List[Turn] = []
        for turn in ordered:
            child = engine.execute_turn(state, turn)
            # A window one wider than the best so far keeps ties exact.
            value = -self._search(child, self.max_depth - 1, -INF, -best_value + 1)
            if value > best_value:
                best_value, best_turns = value, [turn]
            elif value == best_value:
                best_turns.append(turn)

        position = {turn: i for i, turn in enumerate(turns)}
        best = min(best_turns, key=position.__getitem__)

        elapsed_ms = (time.monotonic() - start_time) * 1000.0
        self.last_stats = SearchStats(
            nodes=self._nodes,
            depth=self.max_depth,
            value=best_value,
            best_turns=len(best_turns),
            elapsed_ms=elapsed_ms,
        )
        logger.debug(
            "minimax depth=%d turns=%d nodes=%d value=%d ties=%d elapsed=%.1fms",
            self.max_depth,
            len(turns),
            self._nodes,
            best_value,
            len(best_turns),
            elapsed_ms,
        )
        return best

    def _order_turns(self, state: GameState, turns: List[Turn], depth: int) -> List[Turn]:
        scored = []
        for turn in turns:
            child = engine.execute_turn(state, turn)
            scored.append(-self._search(child, depth - 1, -INF, INF))
        order = sorted(range(len(turns)), key=lambda i: -scored[i])
        return [turns[i] for i in order]

    def _search(self, state: GameState, depth_left: int, alpha: int, beta: int) -> int:
        self._nodes += 1
        victor = engine.winner(state)
        if victor is not None:
            score = WIN_SCORE + depth_left
            return score if victor is state.player else -score
        if depth_left == 0:
            return evaluate(state)

        turns = engine.generate_turns(state)
        if depth_left > 2:
            turns = self._order_turns(state, turns, depth_left - 2)

        best_value = -INF
        for turn in turns:
            child = engine.execute_turn(state, turn)
            value = -self._search(child, depth_left - 1, -beta, -alpha)
            if value > best_value:
                best_value = value
                if value >= beta:
                    break
                if value > alpha:
                    alpha = value
        return best_value


class MonteCarloAgent(Agent):
    """Flat Monte Carlo: score each legal turn by random playouts.

    A playout scores 2 for a win of the player to move, 1 when it is cut off
    after ``playout_turns`` turns and 0 for a loss. The first turn with the
    best total is chosen.
    """

    def __init__(
        self,
        samples: int = DEFAULT_SAMPLES,
        seed: Optional[int] = None,
        playout_turns: int = PLAYOUT_TURNS,
    ):
        if samples < 1:
            raise SearchError("samples must be at least 1")
        self.samples = samples
        self.playout_turns = playout_turns
        self._playout_agent = RandomAgent(seed)
        self.last_stats: Optional[SearchStats] = None

    def _playout(self, state: GameState) -> Optional[Player]:
        for _ in range(self.playout_turns):
            if engine.is_over(state):
                break
            state = engine.execute_turn(state, self._playout_agent.choose_turn(state))
        return engine.winner(state)

    def choose_turn(self, state: GameState) -> Turn:
        self.last_stats = None
        start_time = time.monotonic()

        turns = engine.generate_turns(state)
        if not turns:
            raise SearchError("No legal turns available")

        player = state.player
        best_turn = turns[0]
        best_score = -1
        worst_score = 2 * self.samples + 1
        ties = 0
        for turn in turns:
            child = engine.execute_turn(state, turn)
            score = 0
            for _ in range(self.samples):
                victor = self._playout(child)
                score += 2 if victor is player else 1 if victor is None else 0
            worst_score = min(worst_score, score)
            if score > best_score:
                best_turn, best_score, ties = turn, score, 1
            elif score == best_score:
                ties += 1

        elapsed_ms = (time.monotonic() - start_time) * 1000.0
        self.last_stats = SearchStats(
            nodes=len(turns) * self.samples,
            depth=0,
            value=best_score,
            best_turns=ties,
            elapsed_ms=elapsed_ms,
        )
        logger.debug(
            "mcts samples=%d turns=%d min=%d max=%d elapsed=%.1fms",
            self.samples,
            len(turns),
            worst_score,
            best_score,
            elapsed_ms,
        )
        return best_turn


def parse_descriptor(descriptor: str) -> Tuple[str, Dict[str, str]]:
    """Split a descriptor into its strategy name and parameters."""

    name, *params = descriptor.split(",")
    name = name.strip()
    if not name:
        raise SearchError(f"Missing strategy name in '{descriptor}'")
    parsed: Dict[str, str] = {}
    for param in params:
        key, _, value = param.partition("=")
        key = key.strip()
        if not key:
            raise SearchError(f"Empty parameter name in '{descriptor}'")
        if key in parsed:
            raise SearchError(f"Duplicate parameter '{key}' in '{descriptor}'")
        parsed[key] = value.strip()
    return name, parsed


def _int_param(params: Dict[str, str], key: str) -> int:
    value = params[key]
    # Plain decimal digits only; no sign, underscores or spaces.
    if not (value.isascii() and value.isdigit()):
        raise SearchError(f"Parameter '{key}' must be a non-negative integer, got '{value}'")
    return int(value)


def build_agent(descriptor: str, seed: Optional[int] = None) -> Agent:
    """Create the agent a descriptor names.

    ``seed`` seeds a random or mcts agent whose descriptor does not carry its own.
    """

    name, params = parse_descriptor(descriptor)
    if name == "random":
        unknown = set(params) - {"seed"}
        if unknown:
            raise SearchError(f"Unknown parameter(s) for random: {', '.join(sorted(unknown))}")
        if "seed" in params:
            seed = _int_param(params, "seed")
        return RandomAgent(seed)
    if name == "minimax":
        unknown = set(params) - {"max_depth"}
        if unknown:
            raise SearchError(f"Unknown parameter(s) for minimax: {', '.join(sorted(unknown))}")
        if "max_depth" not in params:
            raise SearchError("minimax requires max_depth=<positive integer>")
        max_depth = _int_param(params, "max_depth")
        if max_depth < 1:
            raise SearchError(f"max_depth must be positive, got {max_depth}")
        return MinimaxAgent(max_depth)
    if name == "mcts":
        unknown = set(params) - {"samples", "seed"}
        if unknown:
            raise SearchError(f"Unknown parameter(s) for mcts: {', '.join(sorted(unknown))}")
        samples = _int_param(params, "samples") if "samples" in params else DEFAULT_SAMPLES
        if samples < 1:
            raise SearchError(f"samples must be positive, got {samples}")
        if "seed" in params:
            seed = _int_param(params, "seed")
        return MonteCarloAgent(samples, seed)
    raise SearchError(f"Unknown strategy '{name}'")


def choose_turn(state: GameState, descriptor: str) -> Turn:
    """Pick a turn for ``state`` with the strategy ``descriptor`` names."""

    return build_agent(descriptor).choose_turn(state)

"""Mytikas rules engine package."""

from .types import (
    AVAILABLE,
    DEAD,
    PASS,
    RESERVED,
    Action,
    ActionKind,
    Alive,
    Available,
    Dead,
    Effect,
    GameState,
    Player,
    Reserved,
    Turn,
    Unit,
)
from .errors import DecodeError, RejectedTurnError, SearchError
from .catalog import PANTHEON, UnitDef, unit_by_letter
from .state_format import decode_state, encode_state
from .turn_format import (
    format_compact_history,
    format_history,
    format_turn,
    parse_compact_history,
    parse_history,
    parse_turn,
)
from .engine import (
    apply_turn,
    default_action_at,
    generate_turns,
    initial_state,
    is_over,
    next_actions,
    winner,
)
from .agents import Agent, MinimaxAgent, MonteCarloAgent, RandomAgent, SearchStats, build_agent, choose_turn

__all__ = [
    "AVAILABLE",
    "Action",
    "ActionKind",
    "Agent",
    "Alive",
    "Available",
    "DEAD",
    "Dead",
    "DecodeError",
    "Effect",
    "GameState",
    "MinimaxAgent",
    "MonteCarloAgent",
    "PANTHEON",
    "PASS",
    "Player",
    "RESERVED",
    "RandomAgent",
    "RejectedTurnError",
    "Reserved",
    "SearchError",
    "SearchStats",
    "Turn",
    "Unit",
    "UnitDef",
    "apply_turn",
    "build_agent",
    "choose_turn",
    "decode_state",
    "default_action_at",
    "encode_state",
    "format_compact_history",
    "format_history",
    "format_turn",
    "generate_turns",
    "initial_state",
    "is_over",
    "next_actions",
    "parse_compact_history",
    "parse_history",
    "parse_turn",
    "unit_by_letter",
    "winner",
]

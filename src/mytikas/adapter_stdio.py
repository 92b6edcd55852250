"""Stdio adapter for front ends and match servers.

One command per line, one reply line per command:

- ``STATE <text>``: load an encoded state; replies ``STATE <text>``.
- ``TURNS``: list the legal turns; replies ``TURNS <t1> <t2> ...``.
- ``APPLY <turn>``: play a verbose turn; replies ``STATE <new text>``.
- ``GO [descriptor]``: pick and play a turn; replies ``TURN <turn>``.
- ``HISTORY``: replies ``HISTORY <compact history>`` of the turns played.

Any error replies ``ERROR <message>`` and ends the session with status 1.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from . import engine
from .agents import Agent, build_agent
from .state_format import decode_state, encode_state
from .turn_format import format_compact_history, format_turn, parse_turn
from .types import GameState, Turn


class AdapterInputError(Exception):
    """Raised when the adapter receives invalid input."""


@dataclass
class AdapterContext:
    state: Optional[GameState] = None
    history: List[Turn] = field(default_factory=list)


class StdioAdapter:
    """Line-oriented adapter that drives the engine via stdin/stdout."""

    def __init__(
        self,
        *,
        descriptor: str = "minimax,max_depth=2",
        stdin=None,
        stdout=None,
        stderr=None,
        quiet: bool = False,
        seed: Optional[int] = None,
    ) -> None:
        self.descriptor = descriptor
        self.seed = seed
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr
        self.ctx = AdapterContext(state=engine.initial_state())
        self.quiet = quiet
        self._agents = {}

    def _log(self, message: str, *, force: bool = False) -> None:
        if self.quiet and not force:
            return
        print(message, file=self.stderr)
        self.stderr.flush()

    def _reply(self, line: str) -> None:
        print(line, file=self.stdout)
        self.stdout.flush()

    def _emit_error_and_exit(self, message: str) -> int:
        self._log(f"ERROR {message}", force=True)
        self._reply(f"ERROR {message}")
        return 1

    def _agent(self, descriptor: str) -> Agent:
        # Agents are kept per descriptor so a seeded random agent keeps its sequence.
        agent = self._agents.get(descriptor)
        if agent is None:
            agent = build_agent(descriptor, seed=self.seed)
            self._agents[descriptor] = agent
        return agent

    def _play(self, turn: Turn) -> None:
        self.ctx.state = engine.apply_turn(self.ctx.state, turn)
        self.ctx.history.append(turn)

    def _handle_state(self, tokens: List[str]) -> None:
        if len(tokens) != 2:
            raise AdapterInputError("STATE requires one encoded state")
        self.ctx.state = decode_state(tokens[1])
        self.ctx.history = []
        self._reply(f"STATE {encode_state(self.ctx.state)}")

    def _handle_turns(self) -> None:
        turns = engine.generate_turns(self.ctx.state)
        self._reply(" ".join(["TURNS"] + [format_turn(turn) for turn in turns]))

    def _handle_apply(self, tokens: List[str]) -> None:
        if len(tokens) != 2:
            raise AdapterInputError("APPLY requires one turn")
        turn = parse_turn(tokens[1])
        self._play(turn)
        self._log(f"applied {format_turn(turn)}")
        self._reply(f"STATE {encode_state(self.ctx.state)}")

    def _handle_go(self, tokens: List[str]) -> None:
        if len(tokens) > 2:
            raise AdapterInputError("GO takes at most one strategy descriptor")
        descriptor = tokens[1] if len(tokens) == 2 else self.descriptor
        player = self.ctx.state.player
        turn = self._agent(descriptor).choose_turn(self.ctx.state)
        self._play(turn)
        self._log(f"player={player.name} strategy={descriptor} turn={format_turn(turn)}")
        self._reply(f"TURN {format_turn(turn)}")

    def _handle_history(self) -> None:
        self._reply(f"HISTORY {format_compact_history(self.ctx.history)}")

    def run(self) -> int:
        try:
            for raw_line in self.stdin:
                line = raw_line.strip()
                if not line:
                    continue
                tokens = line.split()
                cmd = tokens[0].upper()
                if cmd == "STATE":
                    self._handle_state(tokens)
                elif cmd == "TURNS":
                    self._handle_turns()
                elif cmd == "APPLY":
                    self._handle_apply(tokens)
                elif cmd == "GO":
                    self._handle_go(tokens)
                elif cmd == "HISTORY":
                    self._handle_history()
                else:
                    raise AdapterInputError(f"Unknown command '{cmd}'")
            return 0
        except (AdapterInputError, ValueError) as exc:
            return self._emit_error_and_exit(str(exc))


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Stdio adapter for Mytikas")
    parser.add_argument(
        "--strategy",
        default="minimax,max_depth=2",
        help="Descriptor used by GO commands that do not name one",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for random strategies")
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress verbose stderr logs (protocol still goes to stdout)",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)

    adapter = StdioAdapter(descriptor=args.strategy, seed=args.seed, quiet=args.quiet)
    sys.exit(adapter.run())


if __name__ == "__main__":
    main()

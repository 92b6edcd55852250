"""Game engine for Mytikas.

Rules:
- Units enter play by being summoned onto their owner's empty gate.
- A turn is a chain of at most six actions: a summon, a move or an attack,
  optionally followed by the continuations listed in ``generate_turns``.
- Chained units take no actions. The chain is dropped at the end of a turn
  when no enemy Hades stands next to the unit any more.
- Auras (damage boost, speed boost, shield) reach adjacent friendly units and
  are worked out from the board whenever they matter.
- Win: stand on the opponent's gate, or leave the opponent with no units in
  play and none to summon.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

from . import board
from .catalog import PANTHEON, TRAMPLE_DAMAGE, Area, Dirs, Special, Trait, direction_vectors
from .errors import RejectedTurnError
from .turn_format import format_turn
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
    Occupant,
    Player,
    Turn,
    Unit,
    UnitState,
)


def initial_state(
    rosters: Optional[Sequence[Sequence[Unit]]] = None,
    first: Player = Player.LIGHT,
) -> GameState:
    """Create the starting position.

    ``rosters`` optionally lists, per player (light first), the units that start
    available; the others are reserved. By default every unit is available.
    """

    rows = []
    for player in Player:
        if rosters is None:
            rows.append(tuple(AVAILABLE for _ in Unit))
        else:
            allowed = set(rosters[player.value])
            rows.append(tuple(AVAILABLE if unit in allowed else RESERVED for unit in Unit))
    return GameState(first, (rows[0], rows[1]))


def effects_of(state, player: Player, unit: Unit) -> Effect:
    """Return the stored and aura effects currently on a unit in play."""

    unit_state = state.unit(player, unit)
    if not isinstance(unit_state, Alive):
        return Effect.NONE
    effects = unit_state.effects & Effect.CHAINED
    for cell in board.neighbors(unit_state.cell):
        occupant = state.occupant(cell)
        if occupant is not None and occupant[0] is player:
            effects |= PANTHEON[occupant[1]].aura
    return effects


def move_destinations(state, cell: int) -> List[int]:
    """Return the empty cells the unit on ``cell`` can move to, in discovery order."""

    player, unit = state.occupant(cell)
    info = PANTHEON[unit]
    allowance = info.movement
    if effects_of(state, player, unit) & Effect.SPEED_BOOST:
        allowance += 1
    vectors = direction_vectors(info.move_dirs)
    destinations: List[int] = []
    if info.move_dirs & Dirs.DIRECT:
        for dr, dc in vectors:
            current = cell
            for _ in range(allowance):
                nxt = board.step(current, dr, dc)
                if nxt is None or not state.is_empty(nxt):
                    break
                destinations.append(nxt)
                current = nxt
        return destinations

    seen = {cell}
    frontier = [cell]
    for _ in range(allowance):
        reached = []
        for current in frontier:
            for dr, dc in vectors:
                nxt = board.step(current, dr, dc)
                if nxt is None or nxt in seen or not state.is_empty(nxt):
                    continue
                seen.add(nxt)
                destinations.append(nxt)
                reached.append(nxt)
        frontier = reached
    return destinations


def _enemies_in_reach(state, cell: int, enemy: Player, reach: int, dirs: Dirs) -> List[int]:
    vectors = direction_vectors(dirs)
    targets: List[int] = []
    if dirs & Dirs.DIRECT:
        for dr, dc in vectors:
            current = cell
            for _ in range(reach):
                current = board.step(current, dr, dc)
                if current is None:
                    break
                owner = state.player_at(current)
                if owner is enemy:
                    targets.append(current)
                if owner is not None and not dirs & Dirs.PIERCE:
                    break
        return targets

    seen = {cell}
    frontier = [cell]
    for _ in range(reach):
        reached = []
        for current in frontier:
            for dr, dc in vectors:
                nxt = board.step(current, dr, dc)
                if nxt is None or nxt in seen:
                    continue
                seen.add(nxt)
                owner = state.player_at(nxt)
                if owner is None:
                    reached.append(nxt)
                elif owner is enemy:
                    targets.append(nxt)
        frontier = reached
    return targets


def area_cells(player: Player, unit: Unit, cell: int) -> List[int]:
    """Return the cells hit by an area attack from ``cell``, in index order."""

    area = PANTHEON[unit].area
    if area is Area.RING:
        return list(board.neighbors(cell))
    if area is Area.FORWARD:
        r, c = board.coords(cell)
        rows = (r + 1, r + 2) if player is Player.LIGHT else (r - 2, r - 1)
        cells = []
        for row in rows:
            for col in (c - 1, c, c + 1):
                target = board.cell_at(row, col)
                if target is not None:
                    cells.append(target)
        return cells
    return []


def attack_targets(state, cell: int) -> List[int]:
    """Return the cells the unit on ``cell`` can attack.

    Area attackers report their own cell once when an enemy is inside the area.
    """

    player, unit = state.occupant(cell)
    enemy = player.opponent()
    info = PANTHEON[unit]
    if info.area is not Area.NONE:
        if any(state.player_at(target) is enemy for target in area_cells(player, unit, cell)):
            return [cell]
        return []
    return _enemies_in_reach(state, cell, enemy, info.attack_range, info.attack_dirs)


def special_targets(state, cell: int, exclude: Optional[int] = None) -> List[int]:
    """Return the target cells for the special of the unit on ``cell``."""

    player, unit = state.occupant(cell)
    enemy = player.opponent()
    info = PANTHEON[unit]
    if info.special is Special.CHAIN:
        targets = []
        for target in board.neighbors(cell):
            occupant = state.occupant(target)
            if occupant is None or occupant[0] is not enemy:
                continue
            if not state.unit(*occupant).chained:
                targets.append(target)
        return targets
    if info.special is Special.SECOND_STRIKE:
        reach = _enemies_in_reach(state, cell, enemy, info.special_range, info.attack_dirs)
        return [target for target in reach if target != exclude]
    if info.special is Special.WITHERING_MOON:
        return _enemies_in_reach(state, cell, enemy, info.special_range, Dirs.ALL8)
    if info.special is Special.ALLURE:
        targets = []
        for dr, dc in direction_vectors(Dirs.ALL8):
            current = cell
            for distance in range(1, info.special_range + 1):
                current = board.step(current, dr, dc)
                if current is None:
                    break
                owner = state.player_at(current)
                if owner is None:
                    continue
                if owner is enemy and distance >= 2:
                    targets.append(current)
                break
        return targets
    return []


def attack_damage(state, player: Player, unit: Unit, source: int, target: int) -> int:
    """Damage dealt by an attack from ``source`` to ``target`` before shields."""

    info = PANTHEON[unit]
    damage = info.damage
    sr, sc = board.coords(source)
    tr, tc = board.coords(target)
    dr, dc = tr - sr, tc - sc
    if info.traits & Trait.FLANKING and dr * board.forward(player) <= 0:
        damage *= 2
    if info.traits & Trait.STRAIGHT_SHOT and (dr == 0 or dc == 0 or abs(dr) == abs(dc)):
        damage += 1
    if effects_of(state, player, unit) & Effect.DAMAGE_BOOST:
        damage += 1
    return damage


class _Scratch:
    """Mutable working copy of a state while actions are resolved."""

    def __init__(self, state: GameState) -> None:
        self.player = state.player
        self.units: List[List[UnitState]] = [list(row) for row in state.units]
        self.cells: List[Optional[Occupant]] = list(state.board)

    def unit(self, player: Player, unit: Unit) -> UnitState:
        return self.units[player.value][unit]

    def occupant(self, cell: int) -> Optional[Occupant]:
        return self.cells[cell]

    def player_at(self, cell: int) -> Optional[Player]:
        occupant = self.cells[cell]
        return None if occupant is None else occupant[0]

    def is_empty(self, cell: int) -> bool:
        return self.cells[cell] is None

    def cell_of(self, player: Player, unit: Unit) -> int:
        unit_state = self.units[player.value][unit]
        if not isinstance(unit_state, Alive):
            raise ValueError(f"{PANTHEON[unit].name} is not in play")
        return unit_state.cell

    def place(self, player: Player, unit: Unit, cell: int) -> None:
        self.units[player.value][unit] = Alive(cell, PANTHEON[unit].health)
        self.cells[cell] = (player, unit)

    def relocate(self, player: Player, unit: Unit, cell: int) -> None:
        unit_state = self.units[player.value][unit]
        self.cells[unit_state.cell] = None
        self.units[player.value][unit] = Alive(cell, unit_state.health, unit_state.effects)
        self.cells[cell] = (player, unit)

    def set_effects(self, player: Player, unit: Unit, effects: Effect) -> None:
        unit_state = self.units[player.value][unit]
        self.units[player.value][unit] = Alive(unit_state.cell, unit_state.health, effects)

    def damage(self, cell: int, amount: int) -> None:
        player, unit = self.cells[cell]
        if effects_of(self, player, unit) & Effect.SHIELDED:
            return
        unit_state = self.units[player.value][unit]
        health = unit_state.health - amount
        if health <= 0:
            self.units[player.value][unit] = DEAD
            self.cells[cell] = None
        else:
            self.units[player.value][unit] = Alive(cell, health, unit_state.effects)

    def freeze(self) -> GameState:
        return GameState(self.player, (tuple(self.units[0]), tuple(self.units[1])))


def _damage_enemies(work: _Scratch, cells: List[int], enemy: Player, amount: Callable[[int], int]) -> None:
    """Damage every enemy on ``cells``; a shielding Athena is hit first."""

    hit = [cell for cell in cells if work.player_at(cell) is enemy]
    hit.sort(key=lambda cell: 0 if work.occupant(cell)[1] is Unit.ATHENA else 1)
    for cell in hit:
        if work.player_at(cell) is enemy:
            work.damage(cell, amount(cell))


def _knock_back(work: _Scratch, player: Player, cells: List[int]) -> None:
    push = board.forward(player)
    enemy = player.opponent()
    for cell in sorted(cells, key=lambda target: -board.coords(target)[0] * push):
        occupant = work.occupant(cell)
        if occupant is None or occupant[0] is not enemy:
            continue
        behind = board.step(cell, push, 0)
        if behind is not None and work.is_empty(behind):
            work.relocate(occupant[0], occupant[1], behind)


def _resolve(work: _Scratch, action: Action) -> None:
    player = work.player
    enemy = player.opponent()
    unit = action.unit
    info = PANTHEON[unit]
    if action.kind is ActionKind.SUMMON:
        work.place(player, unit, board.gate(player))
    elif action.kind is ActionKind.MOVE:
        work.relocate(player, unit, action.cell)
        if info.traits & Trait.TRAMPLE:
            _damage_enemies(work, list(board.neighbors(action.cell)), enemy, lambda _: TRAMPLE_DAMAGE)
    elif action.kind is ActionKind.ATTACK:
        source = work.cell_of(player, unit)
        if info.area is Area.NONE:
            work.damage(action.cell, attack_damage(work, player, unit, source, action.cell))
        else:
            cells = area_cells(player, unit, source)
            _damage_enemies(work, cells, enemy, lambda target: attack_damage(work, player, unit, source, target))
            if info.traits & Trait.KNOCKBACK:
                _knock_back(work, player, cells)
    elif info.special is Special.CHAIN:
        target_player, target_unit = work.occupant(action.cell)
        effects = work.unit(target_player, target_unit).effects
        work.set_effects(target_player, target_unit, effects | Effect.CHAINED)
    elif info.special is Special.SECOND_STRIKE:
        source = work.cell_of(player, unit)
        work.damage(action.cell, attack_damage(work, player, unit, source, action.cell))
    elif info.special is Special.WITHERING_MOON:
        damage = info.damage // 2
        if effects_of(work, player, unit) & Effect.DAMAGE_BOOST:
            damage += 1
        work.damage(action.cell, damage)
    elif info.special is Special.ALLURE:
        source = work.cell_of(player, unit)
        sr, sc = board.coords(source)
        tr, tc = board.coords(action.cell)
        landing = board.step(source, (tr > sr) - (tr < sr), (tc > sc) - (tc < sc))
        target_player, target_unit = work.occupant(action.cell)
        work.relocate(target_player, target_unit, landing)
    else:
        raise ValueError(f"{info.name} has no special action")


def _release_chains(work: _Scratch) -> None:
    for player in Player:
        for unit in Unit:
            unit_state = work.unit(player, unit)
            if not isinstance(unit_state, Alive) or not unit_state.chained:
                continue
            held = False
            for cell in board.neighbors(unit_state.cell):
                occupant = work.occupant(cell)
                if occupant is not None and occupant[0] is not player and PANTHEON[occupant[1]].special is Special.CHAIN:
                    held = True
                    break
            if not held:
                work.set_effects(player, unit, unit_state.effects & ~Effect.CHAINED)


def execute_action(state: GameState, action: Action) -> GameState:
    """Apply a single action without ending the turn or checking legality."""

    work = _Scratch(state)
    _resolve(work, action)
    return work.freeze()


def execute_turn(state: GameState, turn: Turn) -> GameState:
    """Apply a turn without checking legality and hand over to the opponent."""

    work = _Scratch(state)
    for action in turn:
        _resolve(work, action)
    _release_chains(work)
    work.player = work.player.opponent()
    return work.freeze()


def winner(state: GameState) -> Optional[Player]:
    """Return the winning player, or ``None`` while the game goes on."""

    for player in Player:
        if state.player_at(board.gate(player.opponent())) is player:
            return player
    for player in Player:
        enemy_units = state.units[player.opponent().value]
        if not any(isinstance(unit_state, (Alive, Available)) for unit_state in enemy_units):
            return player
    return None


def is_over(state: GameState) -> bool:
    return winner(state) is not None


def _ready_units(state: GameState) -> List[Tuple[int, Unit]]:
    return [(cell, unit) for cell, unit in state.alive_units(state.player) if not state.unit(state.player, unit).chained]


def _cleared_enemy_gate(before: GameState, after: GameState) -> bool:
    """True when the action killed the enemy unit standing on the enemy gate."""

    enemy = before.player.opponent()
    occupant = before.occupant(board.gate(enemy))
    if occupant is None or occupant[0] is not enemy:
        return False
    return isinstance(after.unit(enemy, occupant[1]), Dead)


class _TurnBuilder:
    """Depth-first enumeration of turns; continuations follow the turn they extend."""

    def __init__(self) -> None:
        self.turns: List[Turn] = []

    def _emit(self, state: GameState, prefix: Turn, action: Action) -> Tuple[GameState, Turn, bool]:
        child = execute_action(state, action)
        turn = prefix + (action,)
        self.turns.append(turn)
        return child, turn, winner(child) is None

    def summons(self, state: GameState, prefix: Turn, may_move_after: bool, extra_used: bool) -> None:
        gate = board.gate(state.player)
        if not state.is_empty(gate):
            return
        for unit in Unit:
            if not isinstance(state.unit(state.player, unit), Available):
                continue
            child, turn, going = self._emit(state, prefix, Action(ActionKind.SUMMON, unit, gate))
            if not going:
                continue
            self.follow_ups(child, turn, unit, ActionKind.SUMMON, extra_used, None)
            if may_move_after:
                self.moves_of(child, turn, gate, False, extra_used)
            standalone = ActionKind.SUMMON not in PANTHEON[unit].special_after
            self.attacks_of(child, turn, gate, extra_used, standalone)

    def moves(self, state: GameState, prefix: Turn, may_summon_after: bool, extra_used: bool) -> None:
        gate = board.gate(state.player)
        for cell, _ in _ready_units(state):
            self.moves_of(state, prefix, cell, may_summon_after and cell == gate, extra_used)

    def moves_of(self, state: GameState, prefix: Turn, cell: int, may_summon_after: bool, extra_used: bool) -> None:
        unit = state.occupant(cell)[1]
        for destination in move_destinations(state, cell):
            child, turn, going = self._emit(state, prefix, Action(ActionKind.MOVE, unit, destination))
            if not going:
                continue
            self.follow_ups(child, turn, unit, ActionKind.MOVE, extra_used, None)
            if may_summon_after:
                self.summons(child, turn, False, extra_used)
            if not extra_used and _cleared_enemy_gate(state, child):
                self.moves(child, turn, False, True)

    def attacks(self, state: GameState, prefix: Turn, extra_used: bool) -> None:
        for cell, _ in _ready_units(state):
            self.attacks_of(state, prefix, cell, extra_used)

    def attacks_of(
        self,
        state: GameState,
        prefix: Turn,
        cell: int,
        extra_used: bool,
        standalone: bool = True,
    ) -> None:
        unit = state.occupant(cell)[1]
        for target in attack_targets(state, cell):
            child, turn, going = self._emit(state, prefix, Action(ActionKind.ATTACK, unit, target))
            if not going:
                continue
            self.follow_ups(child, turn, unit, ActionKind.ATTACK, extra_used, target)
            if not extra_used and _cleared_enemy_gate(state, child):
                self.moves(child, turn, False, True)
        if standalone and PANTHEON[unit].special_standalone:
            self.specials(state, prefix, cell, extra_used, None)

    def follow_ups(
        self,
        state: GameState,
        prefix: Turn,
        unit: Unit,
        after: ActionKind,
        extra_used: bool,
        exclude: Optional[int],
    ) -> None:
        if after not in PANTHEON[unit].special_after:
            return
        unit_state = state.unit(state.player, unit)
        if isinstance(unit_state, Alive):
            self.specials(state, prefix, unit_state.cell, extra_used, exclude)

    def specials(self, state: GameState, prefix: Turn, cell: int, extra_used: bool, exclude: Optional[int]) -> None:
        unit = state.occupant(cell)[1]
        for target in special_targets(state, cell, exclude):
            child, turn, going = self._emit(state, prefix, Action(ActionKind.SPECIAL, unit, target))
            if going and not extra_used and _cleared_enemy_gate(state, child):
                self.moves(child, turn, False, True)


def generate_turns(state: GameState) -> List[Turn]:
    """Return every legal turn for the player to move.

    Order: summons in catalog order (each followed by its continuations), then
    moves and then attacks and standalone specials by the acting unit's cell.
    A pass is returned only when nothing else is possible, and the list is
    empty once the game is over.
    """

    if is_over(state):
        return []
    builder = _TurnBuilder()
    builder.summons(state, (), True, False)
    builder.moves(state, (), True, False)
    builder.attacks(state, (), False)
    if not builder.turns:
        return [PASS]
    return builder.turns


def apply_turn(state: GameState, turn: Sequence[Action]) -> GameState:
    """Validate ``turn`` against the legal turns and apply it."""

    turn = tuple(turn)
    if turn not in generate_turns(state):
        raise RejectedTurnError(f"Illegal turn '{format_turn(turn)}'")
    return execute_turn(state, turn)


def next_actions(partial: Sequence[Action], turns: Sequence[Turn]) -> Tuple[List[Action], bool]:
    """Return the actions that can extend ``partial`` and whether it is complete.

    Used by callers that assemble a turn one action at a time.
    """

    prefix = tuple(partial)
    size = len(prefix)
    actions: List[Action] = []
    seen = set()
    complete = False
    for turn in turns:
        if turn[:size] != prefix:
            continue
        if len(turn) == size:
            complete = True
        elif turn[size] not in seen:
            seen.add(turn[size])
            actions.append(turn[size])
    return actions, complete


def default_action_at(actions: Sequence[Action], cell: int) -> Optional[Action]:
    """Pick the action a click on ``cell`` means; the lowest kind wins."""

    candidates = [action for action in actions if action.cell == cell]
    if not candidates:
        return None
    return min(candidates, key=lambda action: action.kind)

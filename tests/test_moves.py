from mytikas import board, engine
from mytikas.catalog import PANTHEON, unit_by_letter
from mytikas.types import AVAILABLE, RESERVED, ActionKind, Alive, Effect, GameState, Player, Unit

EMPTY = [
    "        .        ",
    "      . . .      ",
    "    . . . . .    ",
    "  . . . . . . .  ",
    ". . . . . . . . .",
    "  . . . . . . .  ",
    "    . . . . .    ",
    "      . . .      ",
    "        .        ",
]


def build_state(rows, player=Player.LIGHT, health=None, chained=""):
    """Build a state from nine rows drawn with rank 9 on top.

    Upper-case letters are light units, lower-case letters dark ones. Units
    that are not drawn are reserved for the player to move and available for
    the other side, so nobody starts out eliminated.
    """

    health = health or {}
    units = {p: [RESERVED if p is player else AVAILABLE] * 12 for p in Player}
    for line, r in zip(rows, range(8, -1, -1)):
        symbols = line.replace(" ", "")
        cells = [board.cell_at(r, c) for c in range(9) if board.on_board(r, c)]
        assert len(symbols) == len(cells), line
        for symbol, cell in zip(symbols, cells):
            if symbol == ".":
                continue
            owner = Player.LIGHT if symbol.isupper() else Player.DARK
            unit = unit_by_letter(symbol.upper())
            effects = Effect.CHAINED if symbol in chained else Effect.NONE
            units[owner][unit] = Alive(cell, health.get(symbol, PANTHEON[unit].health), effects)
    return GameState(player, (tuple(units[Player.LIGHT]), tuple(units[Player.DARK])))


def place(**cells):
    """Return board rows with single units placed by cell name, e.g. ``place(Z="e5")``."""

    grid = [list(line.replace(" ", "")) for line in EMPTY]
    for symbol, name in cells.items():
        r, c = board.coords(board.parse_cell(name))
        row = grid[8 - r]
        columns = [col for col in range(9) if board.on_board(r, col)]
        row[columns.index(c)] = symbol
    return ["".join(row) for row in grid]


def test_builder_places_units():
    state = build_state(place(Z="e5", o="e4"))
    assert state.occupant(20) == (Player.LIGHT, Unit.ZEUS)
    assert state.occupant(12) == (Player.DARK, Unit.APOLLO)
    assert state.unit(Player.LIGHT, Unit.HERA) == RESERVED
    assert state.unit(Player.DARK, Unit.HERA) == AVAILABLE


def test_zeus_moves_from_gate():
    state = build_state(place(Z="e1"))
    assert engine.move_destinations(state, 0) == [2, 1, 3]
    moves = {a.cell for turn in engine.generate_turns(state) for a in turn if a.kind is ActionKind.MOVE}
    assert moves == {1, 2, 3}


def test_zeus_moves_one_step_anywhere():
    state = build_state(place(Z="e5"))
    assert sorted(engine.move_destinations(state, 20)) == list(board.neighbors(20))


def test_zeus_blocked_on_the_edge():
    rows = [
        "        .        ",
        "      . . .      ",
        "    . . . . .    ",
        "  . . . . . . .  ",
        "Z . . . . . . . .",
        "  o . . . . . .  ",
        "    . . . . .    ",
        "      . . .      ",
        "        .        ",
    ]
    state = build_state(rows)
    assert engine.move_destinations(state, 16) == [17, 25]


def test_hephaestus_moves_orthogonally_in_discovery_order():
    state = build_state(place(H="e1"))
    assert engine.move_destinations(state, 0) == [2, 3, 1, 6]


def test_hephaestus_cannot_pass_through_pieces():
    state = build_state(place(H="e5", o="e4"))
    assert sorted(engine.move_destinations(state, 20)) == [11, 13, 18, 19, 21, 22, 27, 28, 29, 34]


def test_ares_moves_in_straight_lines():
    state = build_state(place(R="e5"))
    assert len(engine.move_destinations(state, 20)) == 20
    blocked = build_state(place(R="e5", Z="e7"))
    destinations = engine.move_destinations(blocked, 20)
    assert len(destinations) == 18
    assert 28 in destinations
    assert 34 not in destinations and 38 not in destinations


def test_dionysos_leaps():
    state = build_state(place(D="e1"))
    assert engine.move_destinations(state, 0) == [5, 7]
    walled = build_state(place(D="e1", Z="d2", H="e2", E="f2"))
    assert engine.move_destinations(walled, 0) == [5, 7]


def test_hermes_speeds_up_neighbours():
    alone = build_state(place(N="e5"))
    assert len(engine.move_destinations(alone, 20)) == 8
    boosted = build_state(place(N="e5", M="e4"))
    assert len(engine.move_destinations(boosted, 20)) == 23


def test_zeus_attacks_orthogonal_lines():
    rows = [
        "        .        ",
        "      . . .      ",
        "    . . . m .    ",
        "  . . . . . . .  ",
        "a . . . Z . . p .",
        "  . . d o . . .  ",
        "    . . . . .    ",
        "      . . .      ",
        "        .        ",
    ]
    state = build_state(rows)
    assert engine.attack_targets(state, 20) == [12, 23]


def test_zeus_attacks_pass_over_pieces():
    rows = list(EMPTY)
    rows[4] = "a d o p Z A e n m"
    state = build_state(rows)
    assert engine.attack_targets(state, 20) == [22, 23, 19, 18, 17]


def test_hephaestus_attack_lines_stop_at_first_piece():
    rows = [
        "        .        ",
        "      . . .      ",
        "    . . e . .    ",
        "  . . . A . . .  ",
        ". a . . H . p . .",
        "  . . d o . . .  ",
        "    . . m . .    ",
        "      . . .      ",
        "        .        ",
    ]
    state = build_state(rows)
    assert engine.attack_targets(state, 20) == [12, 22]


def test_flood_attacks_need_an_open_path():
    walled = build_state(place(O="e1", Z="d2", H="e2", E="f2", z="e3"))
    assert engine.attack_targets(walled, 0) == []
    opened = build_state(place(O="e1", Z="d2", H="e2", z="e3"))
    assert engine.attack_targets(opened, 0) == [6]


def test_poseidon_wave_faces_forward():
    assert engine.area_cells(Player.LIGHT, Unit.POSEIDON, 20) == [27, 28, 29, 33, 34, 35]
    assert engine.area_cells(Player.DARK, Unit.POSEIDON, 20) == [5, 6, 7, 11, 12, 13]
    assert engine.area_cells(Player.LIGHT, Unit.DIONYSOS, 20) == list(board.neighbors(20))


def test_area_attack_targets_own_cell():
    quiet = build_state(place(P="e5", z="e4"))
    assert engine.attack_targets(quiet, 20) == []
    facing = build_state(place(P="e5", z="e7"))
    assert engine.attack_targets(facing, 20) == [20]

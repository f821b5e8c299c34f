import pytest

from skirmish import Board, BoardInvariantError, TerrainCatalog, TerrainType, UnitKind
from skirmish.map import IMPASSABLE
from skirmish.units import UnitCatalog, Domain

from tests.helpers import make_state, place


def test_layout_symbols_map_to_terrain():
    board = Board.from_layout([
        ".fcH",
        "~p..",
    ])
    assert (board.width, board.height) == (4, 2)
    assert board.get_tile(0, 0).terrain == TerrainType.PLAINS
    assert board.get_tile(1, 0).terrain == TerrainType.FOREST
    assert board.get_tile(2, 0).terrain == TerrainType.CITY
    assert board.get_tile(3, 0).terrain == TerrainType.HQ
    assert board.get_tile(0, 1).terrain == TerrainType.WATER
    assert board.get_tile(1, 1).terrain == TerrainType.SEAPORT


def test_layout_rejects_ragged_rows_and_unknown_symbols():
    with pytest.raises(ValueError):
        Board.from_layout(["...", ".."])
    with pytest.raises(ValueError):
        Board.from_layout([".x."])


def test_neighbors_are_orthogonal_and_clipped():
    board = Board(3, 3)
    assert [t.position for t in board.get_neighbors(1, 1)] == [(1, 0), (1, 2), (2, 1), (0, 1)]
    assert [t.position for t in board.get_neighbors(0, 0)] == [(0, 1), (1, 0)]
    assert board.get_tile(3, 0) is None


def test_catalog_values():
    catalog = TerrainCatalog()
    assert catalog.defense_bonus(TerrainType.HQ) == 3
    assert catalog.movement_cost(TerrainType.FOREST) == 2
    assert catalog.movement_cost(TerrainType.WATER) == IMPASSABLE
    assert catalog.is_capturable(TerrainType.SEAPORT)
    assert not catalog.is_capturable(TerrainType.PLAINS)


def test_catalogs_fall_back_to_defaults_without_data(tmp_path):
    terrain = TerrainCatalog(tmp_path)
    assert terrain.defense_bonus(TerrainType.CITY) == 2

    units = UnitCatalog(tmp_path)
    sub = units.get(UnitKind.SUBMARINE)
    assert sub.can_submerge and sub.domain == Domain.WATER
    assert units.get(UnitKind.TRANSPORT).transport_capacity == 4


def test_partial_schema_overrides_only_named_fields(tmp_path):
    schema = tmp_path / "schema"
    schema.mkdir()
    (schema / "terrain.yaml").write_text("terrain_types:\n  forest:\n    movement_cost: 3\n")
    catalog = TerrainCatalog(tmp_path)
    assert catalog.movement_cost(TerrainType.FOREST) == 3
    assert catalog.defense_bonus(TerrainType.FOREST) == 1


def test_placement_keeps_tile_and_unit_in_agreement():
    state = make_state(width=4, height=4)
    unit = place(state, "infantry", 1, 1, 1)
    assert state.board.get_tile(1, 1).unit is unit
    assert unit.position == (1, 1)

    state.board.move_unit(unit, 2, 1)
    assert state.board.get_tile(1, 1).unit is None
    assert state.board.get_tile(2, 1).unit is unit
    assert unit.position == (2, 1)


def test_double_placement_raises():
    state = make_state(width=4, height=4)
    place(state, "infantry", 1, 1, 1)
    other = state.units.create(UnitKind.TANK, 2)
    with pytest.raises(BoardInvariantError):
        state.board.place_unit(other, 1, 1)


def test_removing_a_unit_from_the_wrong_tile_raises():
    state = make_state(width=4, height=4)
    unit = place(state, "infantry", 1, 1, 1)
    unit.x = 3
    with pytest.raises(BoardInvariantError):
        state.board.remove_unit(unit)


def test_only_structures_can_be_owned():
    board = Board.from_layout(["c."])
    board.set_owner(0, 0, 1)
    assert board.get_tile(0, 0).owner == 1
    with pytest.raises(ValueError):
        board.set_owner(1, 0, 1)

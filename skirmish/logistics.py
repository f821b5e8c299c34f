"""
Transport logistics - loading land units onto transports and putting them
back ashore.

Carried units are off the board and out of the unit registry until they
are unloaded. They die with their transport.
"""

from typing import Optional, TYPE_CHECKING

from .errors import IllegalDestination, InvalidSelection, OccupiedTarget
from .map import TerrainType, Tile
from .units import Unit

if TYPE_CHECKING:
    from .turn import GameState

SHORE_EXCLUDED = (TerrainType.WATER, TerrainType.SEAPORT)


def is_transport(unit: Unit) -> bool:
    return unit.info.transport_capacity > 0


def find_loadable(state: "GameState", transport: Unit) -> Optional[Unit]:
    """First adjacent friendly land unit (N, S, E, W) that fits in the hold."""
    for tile in state.board.get_neighbors(transport.x, transport.y):
        unit = tile.unit
        if unit is not None and unit.faction == transport.faction and transport.can_carry(unit):
            return unit
    return None


def shore_tiles(state: "GameState", transport: Unit) -> list[Tile]:
    """Adjacent land tiles, excluding water and sea ports."""
    return [t for t in state.board.get_neighbors(transport.x, transport.y)
            if t.terrain not in SHORE_EXCLUDED]


def load_cargo(state: "GameState", transport: Unit) -> Unit:
    """Take the first fitting neighbour aboard. Returns the loaded unit."""
    if not is_transport(transport):
        raise InvalidSelection(f"{transport.kind.value} cannot carry units")

    unit = find_loadable(state, transport)
    if unit is None:
        raise IllegalDestination("No adjacent friendly land unit fits aboard")

    state.board.remove_unit(unit)
    state.units.remove(unit)
    unit.reset_capture()
    transport.cargo.append(unit)

    state.log(
        "load",
        f"{unit.kind.value} ({unit.id}) boarded transport ({transport.id}), "
        f"{transport.remaining_capacity()} space left",
        transport=transport.id, unit=unit.id,
    )
    return unit


def unload_cargo(state: "GameState", transport: Unit) -> Unit:
    """Put the first carried unit on the first empty adjacent land tile."""
    if not is_transport(transport):
        raise InvalidSelection(f"{transport.kind.value} cannot carry units")
    if not transport.cargo:
        raise InvalidSelection("Transport is empty")

    shore = shore_tiles(state, transport)
    if not shore:
        raise IllegalDestination("Transport must be next to land to unload")

    empty = [t for t in shore if t.unit is None]
    if not empty:
        raise OccupiedTarget("No empty land tile next to the transport")

    unit = transport.cargo.pop(0)
    landing = empty[0]
    state.board.place_unit(unit, landing.x, landing.y)
    state.units.add(unit)
    unit.has_moved = True

    state.log(
        "unload",
        f"{unit.kind.value} ({unit.id}) landed at {landing.position}",
        transport=transport.id, unit=unit.id, position=landing.position,
    )
    return unit

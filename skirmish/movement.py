"""
Movement and range computation.

reachable_tiles runs a cost-bounded Dijkstra search over the board. Which
tiles a unit may enter is decided by one predicate, can_enter, which the AI
planner shares.
"""

import heapq
from typing import Optional

from .map import Board, Tile, TerrainType, IMPASSABLE
from .units import Unit, UnitKind, Domain
from .fog_of_war import is_hidden_enemy

# Infantry wades through water at this cost per tile
WATER_FORD_COST = 2

WATER_TERRAIN = (TerrainType.WATER, TerrainType.SEAPORT)


class MovementEngine:
    """Range queries for units on one board."""

    def __init__(self, board: Board):
        self.board = board

    def step_cost(self, unit: Unit, tile: Tile) -> Optional[int]:
        """Cost for `unit` to enter `tile` on terrain alone, or None if barred."""
        if unit.domain == Domain.WATER:
            return 1 if tile.terrain in WATER_TERRAIN else None

        cost = self.board.catalog.movement_cost(tile.terrain)
        if cost >= IMPASSABLE:
            if unit.kind == UnitKind.INFANTRY:
                return WATER_FORD_COST
            return None
        return cost

    def can_enter(self, unit: Unit, tile: Tile) -> bool:
        """Terrain, domain and occupancy check for stepping onto `tile`.

        Friendly units can be passed through and hidden enemies look like
        open water; visible enemies block.
        """
        if self.step_cost(unit, tile) is None:
            return False
        occupant = tile.unit
        if occupant is None or occupant is unit or occupant.faction == unit.faction:
            return True
        return is_hidden_enemy(occupant, unit.faction)

    def explore(self, unit: Unit) -> dict[tuple[int, int], int]:
        """Cheapest cost to every enterable tile within the unit's budget.

        Tiles holding a hidden enemy are included but never expanded. The
        origin is excluded.
        """
        start = unit.position
        budget = unit.movement
        best: dict[tuple[int, int], int] = {start: 0}
        frontier = [(0, start)]

        while frontier:
            cost, pos = heapq.heappop(frontier)
            if cost > best.get(pos, budget + 1):
                continue

            tile = self.board.get_tile(*pos)
            if pos != start and is_hidden_enemy(tile.unit, unit.faction):
                continue

            for neighbor in self.board.get_neighbors(*pos):
                if not self.can_enter(unit, neighbor):
                    continue
                new_cost = cost + self.step_cost(unit, neighbor)
                if new_cost > budget:
                    continue
                if new_cost < best.get(neighbor.position, budget + 1):
                    best[neighbor.position] = new_cost
                    heapq.heappush(frontier, (new_cost, neighbor.position))

        best.pop(start)
        return best

    def reachable_tiles(self, unit: Unit) -> set[tuple[int, int]]:
        """Empty tiles the unit can end its move on this turn."""
        return {pos for pos in self.explore(unit)
                if self.board.get_tile(*pos).unit is None}

    def ambush_tiles(self, unit: Unit) -> set[tuple[int, int]]:
        """In-range tiles that hold a submarine hidden from the unit's faction."""
        return {pos for pos in self.explore(unit)
                if is_hidden_enemy(self.board.get_tile(*pos).unit, unit.faction)}

    def attackable_tiles(self, unit: Unit) -> set[tuple[int, int]]:
        """Orthogonal neighbours. The attack_range stat is not consulted."""
        return {t.position for t in self.board.get_neighbors(unit.x, unit.y)}

    def find_approach_for_attack(self, unit: Unit, tx: int, ty: int) -> Optional[tuple[int, int]]:
        """First reachable tile, row-major, adjacent to the target."""
        reachable = self.reachable_tiles(unit)
        for x, y in sorted(reachable, key=lambda p: (p[1], p[0])):
            if Board.manhattan(x, y, tx, ty) == 1:
                return (x, y)
        return None

    def closest_reachable(
        self,
        unit: Unit,
        tx: int,
        ty: int,
        exclude: Optional[set[tuple[int, int]]] = None,
    ) -> Optional[tuple[int, int]]:
        """Reachable tile nearest the target by Manhattan distance, row-major ties."""
        exclude = exclude or set()
        best = None
        best_distance = None
        for x, y in sorted(self.reachable_tiles(unit), key=lambda p: (p[1], p[0])):
            if (x, y) in exclude:
                continue
            distance = Board.manhattan(x, y, tx, ty)
            if best_distance is None or distance < best_distance:
                best, best_distance = (x, y), distance
        return best

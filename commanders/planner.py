"""
Turn planning for scripted commanders.

The planner looks at the game once at the start of a turn and produces a
queue of PlannedAction values. Actions are plain data; the executor turns
them into commands. Destinations are reserved as they are planned so two
units never aim for the same tile, and build tiles are never move targets.
"""

import logging
import random
from dataclasses import dataclass
from typing import Optional, Union

from skirmish.fog_of_war import is_visible_to
from skirmish.map import Board, TerrainType
from skirmish.movement import MovementEngine
from skirmish.turn import GameState
from skirmish.units import Unit, Domain

from .doctrine import DifficultyPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttackAction:
    unit_id: str
    target: tuple[int, int]

    @property
    def description(self) -> str:
        return f"{self.unit_id} attacks {self.target}"


@dataclass(frozen=True)
class CaptureAction:
    unit_id: str

    @property
    def description(self) -> str:
        return f"{self.unit_id} captures"


@dataclass(frozen=True)
class MoveAction:
    unit_id: str
    destination: tuple[int, int]
    purpose: str = "advance"  # "advance" or "capture"

    @property
    def description(self) -> str:
        return f"{self.unit_id} moves to {self.destination} ({self.purpose})"


@dataclass(frozen=True)
class BuildAction:
    position: tuple[int, int]
    kind: str

    @property
    def description(self) -> str:
        return f"builds {self.kind} at {self.position}"


PlannedAction = Union[AttackAction, CaptureAction, MoveAction, BuildAction]


class Planner:
    """Builds one turn's action queue for a faction."""

    def __init__(self, policy: DifficultyPolicy, rng: Optional[random.Random] = None):
        self.policy = policy
        self.rng = rng or random.Random()

    def plan(self, state: GameState, faction: int) -> list[PlannedAction]:
        board = state.board
        movement = MovementEngine(board)
        action_points = state.turn.action_points
        money = state.treasury.balance(faction)
        reserved: set[tuple[int, int]] = set()
        actions: list[PlannedAction] = []

        # Unit pass, in registry order
        for unit in state.units.get_units_by_faction(faction):
            if action_points <= 0:
                break
            if unit.has_moved:
                continue
            if self.policy.should_skip(self.rng):
                logger.debug(f"Faction {faction}: {unit.id} sits this turn out")
                continue

            action = (
                self._plan_attack(state, unit)
                or self._plan_capture(state, movement, unit, reserved)
                or self._plan_advance(state, movement, unit, reserved)
            )
            if action is None:
                continue
            if isinstance(action, MoveAction):
                reserved.add(action.destination)
            actions.append(action)
            action_points -= 1

        # Build pass
        catalog = state.units.catalog
        for tile in board.iter_tiles():
            if action_points <= 0:
                break
            if (tile.owner != faction or not board.is_capturable(tile)
                    or tile.unit is not None or tile.position in reserved):
                continue

            domain = Domain.WATER if tile.terrain == TerrainType.SEAPORT else Domain.LAND
            affordable = catalog.affordable(money, action_points, domain)
            kind = self.policy.choose_build(affordable, state, faction, self.rng)
            if kind is None:
                continue

            info = catalog.get(kind)
            actions.append(BuildAction(position=tile.position, kind=kind.value))
            reserved.add(tile.position)
            money -= info.cost
            action_points -= info.action_cost

        logger.info(f"Faction {faction} planned {len(actions)} actions")
        return actions

    def _plan_attack(self, state: GameState, unit: Unit) -> Optional[AttackAction]:
        """Adjacent visible enemy, N/S/E/W order."""
        if unit.attack_power <= 0:
            return None
        for tile in state.board.get_neighbors(unit.x, unit.y):
            enemy = tile.unit
            if enemy is not None and enemy.faction != unit.faction and is_visible_to(enemy, unit.faction):
                return AttackAction(unit_id=unit.id, target=tile.position)
        return None

    def _plan_capture(
        self,
        state: GameState,
        movement: MovementEngine,
        unit: Unit,
        reserved: set[tuple[int, int]],
    ) -> Optional[PlannedAction]:
        if not unit.can_capture:
            return None

        board = state.board
        here = board.get_tile(*unit.position)
        if board.is_capturable(here) and here.owner != unit.faction:
            return CaptureAction(unit_id=unit.id)

        targets = [t for t in board.capturable_tiles() if t.owner != unit.faction]
        if not targets:
            return None
        target = min(targets, key=lambda t: (Board.manhattan(unit.x, unit.y, t.x, t.y), t.y, t.x))
        destination = self._step_towards(movement, unit, target.position, reserved)
        if destination is None:
            return None
        return MoveAction(unit_id=unit.id, destination=destination, purpose="capture")

    def _plan_advance(
        self,
        state: GameState,
        movement: MovementEngine,
        unit: Unit,
        reserved: set[tuple[int, int]],
    ) -> Optional[MoveAction]:
        """Head for the nearest HQ not yet ours (neutral ones too), else the board centre."""
        board = state.board
        enemy_hqs = [t for t in board.tiles_of(TerrainType.HQ) if t.owner != unit.faction]
        if enemy_hqs:
            hq = min(enemy_hqs, key=lambda t: (Board.manhattan(unit.x, unit.y, t.x, t.y), t.y, t.x))
            goal = hq.position
        else:
            goal = board.center

        destination = self._step_towards(movement, unit, goal, reserved)
        if destination is None:
            return None
        return MoveAction(unit_id=unit.id, destination=destination)

    def _step_towards(
        self,
        movement: MovementEngine,
        unit: Unit,
        goal: tuple[int, int],
        reserved: set[tuple[int, int]],
    ) -> Optional[tuple[int, int]]:
        """Closest unreserved reachable tile to `goal`, if it gets the unit nearer."""
        destination = movement.closest_reachable(unit, *goal, exclude=reserved)
        if destination is None:
            return None
        if Board.manhattan(*destination, *goal) >= Board.manhattan(unit.x, unit.y, *goal):
            return None
        return destination

"""
Command surface for skirmish.

Every player action, human or AI, goes through CommandProcessor. Each
command names the acting faction, is fully validated before anything
changes, and returns a CommandResult instead of raising.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from .capture import validate_capture, advance_capture, on_unit_relocated
from .combat import DirectCombat, AmbushCombat
from .errors import (
    CommandError, InvalidSelection, InsufficientResources,
    IllegalDestination, OccupiedTarget,
)
from .fog_of_war import is_visible_to
from .logistics import load_cargo, unload_cargo
from .map import TerrainType
from .movement import MovementEngine
from .turn import GameState, TurnManager
from .units import Unit, UnitKind, Domain

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    success: bool
    message: str = ""
    error: Optional[str] = None  # exception class name on failure


class Commander(Protocol):
    """Anything that can play a whole turn through the command surface."""

    def take_turn(self, processor: "CommandProcessor") -> None:
        ...


class CommandProcessor:
    """Validates and applies commands against one GameState."""

    def __init__(self, state: GameState):
        self.state = state
        self.turns = TurnManager(state)
        self.movement = MovementEngine(state.board)

        # Combat resolvers share the game's random source
        self.direct_combat = DirectCombat(state.rng)
        self.ambush_combat = AmbushCombat(state.rng)

        self.commanders: dict[int, Commander] = {}
        self._ai_running = False

    # Commander registration
    def register_commander(self, faction: int, commander: Commander):
        if faction not in self.state.factions:
            raise ValueError(f"Faction {faction} is not in play")
        self.commanders[faction] = commander
        self.state.ai_factions.add(faction)

    def start(self):
        """Let AI factions play if one of them moves first."""
        self._run_ai_turns()

    # Plumbing
    def _execute(self, faction: int, name: str, handler: Callable[..., str], *args) -> CommandResult:
        try:
            self._check_actor(faction)
            message = handler(*args)
        except CommandError as exc:
            self.state.log(
                "rejected", f"{name} rejected: {exc}", faction=faction,
                command=name, error=type(exc).__name__,
            )
            return CommandResult(False, str(exc), type(exc).__name__)
        return CommandResult(True, message)

    def _check_actor(self, faction: int):
        if self.state.is_over:
            raise InvalidSelection("The game is over")
        if faction != self.state.current_faction:
            raise InvalidSelection(
                f"It is faction {self.state.current_faction}'s turn, not faction {faction}'s"
            )

    def _require_selected_unit(self) -> Unit:
        unit = self.state.selected_unit()
        if unit is None:
            raise InvalidSelection("No unit selected")
        if unit.has_moved:
            raise InvalidSelection(f"{unit.kind.value} ({unit.id}) has already acted")
        return unit

    def _require_actions(self, amount: int):
        available = self.state.turn.action_points
        if available < amount:
            raise InsufficientResources(f"Need {amount} action points, {available} left")

    def _spend_actions(self, amount: int):
        self.state.turn.action_points -= amount

    def _relocate(self, unit: Unit, x: int, y: int):
        origin = unit.position
        self.state.board.move_unit(unit, x, y)
        on_unit_relocated(self.state, unit)
        self.state.log(
            "move", f"{unit.kind.value} ({unit.id}) moved {origin} -> {(x, y)}",
            unit=unit.id, origin=origin, destination=(x, y),
        )

    # Selection
    def select_unit(self, faction: int, x: int, y: int) -> CommandResult:
        return self._execute(faction, "select_unit", self._select_unit, faction, x, y)

    def _select_unit(self, faction: int, x: int, y: int) -> str:
        tile = self.state.board.get_tile(x, y)
        if tile is None:
            raise InvalidSelection(f"({x}, {y}) is off the board")
        unit = tile.unit
        if unit is None or unit.faction != faction:
            raise InvalidSelection(f"No unit of yours at ({x}, {y})")
        if unit.has_moved:
            raise InvalidSelection(f"{unit.kind.value} ({unit.id}) has already acted")
        self.state.turn.selection.select_unit(unit.id)
        return f"Selected {unit.kind.value} ({unit.id})"

    def select_build_tile(self, faction: int, x: int, y: int) -> CommandResult:
        return self._execute(faction, "select_build_tile", self._select_build_tile, faction, x, y)

    def _select_build_tile(self, faction: int, x: int, y: int) -> str:
        board = self.state.board
        tile = board.get_tile(x, y)
        if tile is None or not board.is_capturable(tile) or tile.owner != faction:
            raise InvalidSelection(f"({x}, {y}) is not one of your structures")
        if tile.unit is not None:
            raise OccupiedTarget(f"({x}, {y}) is occupied")
        self.state.turn.selection.select_build_tile((x, y))
        return f"Selected {tile.terrain.value} at ({x}, {y}) for building"

    def cancel_selection(self, faction: int) -> CommandResult:
        return self._execute(faction, "cancel_selection", self._cancel_selection)

    def _cancel_selection(self) -> str:
        self.state.turn.selection.clear()
        return "Selection cleared"

    # Unit actions
    def move(self, faction: int, x: int, y: int) -> CommandResult:
        return self._execute(faction, "move", self._move, x, y)

    def _move(self, x: int, y: int) -> str:
        state = self.state
        unit = self._require_selected_unit()
        self._require_actions(1)

        if (x, y) in self.movement.ambush_tiles(unit):
            return self._spring_ambush(unit, x, y)

        if (x, y) not in self.movement.reachable_tiles(unit):
            tile = state.board.get_tile(x, y)
            if (tile is not None and tile.unit is not None and tile.unit is not unit
                    and is_visible_to(tile.unit, unit.faction)):
                raise OccupiedTarget(f"({x}, {y}) is occupied")
            raise IllegalDestination(f"{unit.kind.value} cannot reach ({x}, {y})")

        self._relocate(unit, x, y)
        unit.has_moved = True
        self._spend_actions(1)
        state.turn.selection.clear()
        return f"{unit.kind.value} moved to ({x}, {y})"

    def _spring_ambush(self, unit: Unit, x: int, y: int) -> str:
        submarine = self.state.board.get_tile(x, y).unit
        unit.has_moved = True
        self._spend_actions(1)
        self.state.turn.selection.clear()
        report = self.ambush_combat.resolve(self.state, submarine, unit)
        self.turns.check_victory()
        if report.defender_destroyed:
            return f"Ambushed by a submarine at ({x}, {y}); {unit.kind.value} lost"
        return f"Ambushed by a submarine at ({x}, {y}); took {report.damage} damage"

    def attack(self, faction: int, x: int, y: int) -> CommandResult:
        return self._execute(faction, "attack", self._attack, faction, x, y)

    def _attack(self, faction: int, x: int, y: int) -> str:
        state = self.state
        attacker = self._require_selected_unit()
        if attacker.attack_power <= 0:
            raise InvalidSelection(f"{attacker.kind.value} cannot attack")

        tile = state.board.get_tile(x, y)
        defender = tile.unit if tile else None
        if defender is None or defender.faction == faction or not is_visible_to(defender, faction):
            raise IllegalDestination(f"No visible enemy at ({x}, {y})")

        if (x, y) in self.movement.attackable_tiles(attacker):
            self._require_actions(1)
        else:
            approach = self.movement.find_approach_for_attack(attacker, x, y)
            if approach is None:
                raise IllegalDestination(f"{attacker.kind.value} cannot get next to ({x}, {y})")
            self._require_actions(2)
            self._relocate(attacker, *approach)
            self._spend_actions(1)

        attacker.has_moved = True
        self._spend_actions(1)
        state.turn.selection.clear()

        report = self.direct_combat.resolve(state, attacker, defender)
        self.turns.check_victory()

        message = f"{attacker.kind.value} dealt {report.damage} damage"
        if report.defender_destroyed:
            message += f", {defender.kind.value} destroyed"
        elif report.countered:
            message += f", took {report.counter_damage} in return"
            if report.attacker_destroyed:
                message += f", {attacker.kind.value} destroyed"
        return message

    def capture(self, faction: int) -> CommandResult:
        return self._execute(faction, "capture", self._capture)

    def _capture(self) -> str:
        unit = self._require_selected_unit()
        validate_capture(self.state, unit)
        self._require_actions(1)

        outcome = advance_capture(self.state, unit)
        unit.has_moved = True
        self._spend_actions(1)
        self.state.turn.selection.clear()

        if outcome.transferred:
            self.turns.check_victory()
            return f"Captured {outcome.position}"
        return f"Capture of {outcome.position} at {outcome.progress}/3"

    def wait(self, faction: int) -> CommandResult:
        return self._execute(faction, "wait", self._wait)

    def _wait(self) -> str:
        unit = self._require_selected_unit()
        self._require_actions(1)
        unit.has_moved = True
        self._spend_actions(1)
        self.state.turn.selection.clear()
        self.state.log("wait", f"{unit.kind.value} ({unit.id}) waits", unit=unit.id)
        return f"{unit.kind.value} waits"

    def toggle_submerge(self, faction: int) -> CommandResult:
        return self._execute(faction, "toggle_submerge", self._toggle_submerge)

    def _toggle_submerge(self) -> str:
        unit = self._require_selected_unit()
        if not unit.can_submerge:
            raise InvalidSelection(f"{unit.kind.value} cannot submerge")
        self._require_actions(1)

        unit.submerged = not unit.submerged
        unit.has_moved = True
        self._spend_actions(1)
        self.state.turn.selection.clear()

        action = "submerged" if unit.submerged else "surfaced"
        self.state.log("submerge", f"Submarine ({unit.id}) {action}", unit=unit.id, submerged=unit.submerged)
        return f"Submarine {action}"

    def load_cargo(self, faction: int) -> CommandResult:
        return self._execute(faction, "load_cargo", self._load_cargo)

    def _load_cargo(self) -> str:
        transport = self._require_selected_unit()
        self._require_actions(1)
        loaded = load_cargo(self.state, transport)
        self._spend_actions(1)
        return f"{loaded.kind.value} loaded"

    def unload_cargo(self, faction: int) -> CommandResult:
        return self._execute(faction, "unload_cargo", self._unload_cargo)

    def _unload_cargo(self) -> str:
        transport = self._require_selected_unit()
        self._require_actions(1)
        landed = unload_cargo(self.state, transport)
        self._spend_actions(1)
        return f"{landed.kind.value} unloaded at {landed.position}"

    # Economy
    def build(self, faction: int, kind: UnitKind | str) -> CommandResult:
        return self._execute(faction, "build", self._build, faction, kind)

    def _build(self, faction: int, kind: UnitKind | str) -> str:
        state = self.state
        if isinstance(kind, str):
            try:
                kind = UnitKind(kind)
            except ValueError:
                raise InvalidSelection(f"Unknown unit kind '{kind}'")

        position = state.turn.selection.build_tile
        if position is None:
            raise InvalidSelection("No build tile selected")

        tile = state.board.get_tile(*position)
        if tile.owner != faction:
            raise InvalidSelection(f"{position} is no longer yours")
        if tile.unit is not None:
            raise OccupiedTarget(f"{position} is occupied")

        info = state.units.catalog.get(kind)
        if info.domain == Domain.WATER and tile.terrain != TerrainType.SEAPORT:
            raise InvalidSelection(f"{kind.value} can only be built at a sea port")
        if info.domain == Domain.LAND and tile.terrain not in (TerrainType.CITY, TerrainType.HQ):
            raise InvalidSelection(f"{kind.value} can only be built at a city or headquarters")

        if not state.treasury.can_afford(faction, info.cost):
            raise InsufficientResources(
                f"{kind.value} costs ${info.cost}, you have ${state.treasury.balance(faction)}"
            )
        self._require_actions(info.action_cost)

        state.treasury.debit(faction, info.cost, kind.value)
        self._spend_actions(info.action_cost)
        unit = state.spawn_unit(kind, faction, *position)
        state.turn.selection.clear()

        state.log(
            "build", f"Faction {faction} built {kind.value} ({unit.id}) at {position}",
            unit=unit.id, unit_kind=kind.value, position=position, cost=info.cost,
        )
        return f"Built {kind.value} at {position}"

    def end_turn(self, faction: int) -> CommandResult:
        result = self._execute(faction, "end_turn", self._end_turn)
        if result.success:
            self._run_ai_turns()
        return result

    def _end_turn(self) -> str:
        turn = self.turns.end_turn()
        return f"Faction {turn.current_faction} to act"

    # AI dispatch
    def _run_ai_turns(self):
        """Play AI factions in a loop until a human is up or the game ends."""
        if self._ai_running:
            return
        self._ai_running = True
        try:
            while not self.state.is_over and self.state.current_faction in self.commanders:
                faction = self.state.current_faction
                marker = (self.state.turn.turn, faction)
                self.commanders[faction].take_turn(self)

                # A commander that returns without ending its turn forfeits the rest of it
                if (not self.state.is_over
                        and (self.state.turn.turn, self.state.current_faction) == marker):
                    logger.warning(f"Commander for faction {faction} did not end its turn")
                    self._execute(faction, "end_turn", self._end_turn)
        finally:
            self._ai_running = False

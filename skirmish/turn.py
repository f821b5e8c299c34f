"""
Turn sequencing, economy and victory for skirmish.

Factions act one after another in numeric order. A faction's turn ends on
request; the next faction is paid, gets a fresh pool of action points, and
the round counter advances each time play wraps back to faction 1.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Callable

from .capture import capture_state
from .config import GameConfig
from .costs import Treasury, compute_score
from .events import EventLog
from .fog_of_war import is_visible_to
from .map import Board, TerrainType
from .units import Unit, UnitRegistry

logger = logging.getLogger(__name__)

REASON_HQ = "all-headquarters-captured"
REASON_SCORE = "turn-limit-score"


class Phase(Enum):
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass
class Selection:
    """Selected unit XOR selected build tile."""
    unit_id: Optional[str] = None
    build_tile: Optional[tuple[int, int]] = None

    def select_unit(self, unit_id: str):
        self.unit_id = unit_id
        self.build_tile = None

    def select_build_tile(self, position: tuple[int, int]):
        self.build_tile = position
        self.unit_id = None

    def clear(self):
        self.unit_id = None
        self.build_tile = None

    @property
    def is_empty(self) -> bool:
        return self.unit_id is None and self.build_tile is None


@dataclass
class TurnState:
    """Control-flow state of the match."""
    current_faction: int = 1
    turn: int = 1
    action_points: int = 0
    phase: Phase = Phase.PLAYING
    selection: Selection = field(default_factory=Selection)


@dataclass
class VictoryResult:
    winning_faction: int
    reason: str
    scores: dict[int, int] = field(default_factory=dict)


@dataclass
class GameState:
    """Complete game state. Passed explicitly to every rules function."""
    config: GameConfig
    board: Board
    units: UnitRegistry
    turn: TurnState
    treasury: Treasury
    events: EventLog
    rng: random.Random
    ai_factions: set[int] = field(default_factory=set)
    winner: Optional[VictoryResult] = None

    @classmethod
    def new(
        cls,
        config: GameConfig,
        board: Board,
        units: Optional[UnitRegistry] = None,
        rng: Optional[random.Random] = None,
    ) -> "GameState":
        state = cls(
            config=config,
            board=board,
            units=units or UnitRegistry(),
            turn=TurnState(action_points=config.actions_per_turn),
            treasury=Treasury(config.factions, config.starting_money),
            events=EventLog(),
            rng=rng or random.Random(config.seed),
            ai_factions=set(config.bot_difficulties),
        )
        return state

    @property
    def factions(self) -> list[int]:
        return self.config.factions

    @property
    def current_faction(self) -> int:
        return self.turn.current_faction

    @property
    def is_over(self) -> bool:
        return self.turn.phase == Phase.GAME_OVER

    def log(self, kind: str, message: str, faction: Optional[int] = None, **data):
        """Emit an event stamped with the current turn and (by default) faction."""
        if faction is None:
            faction = self.turn.current_faction
        return self.events.emit(kind, message, self.turn.turn, faction, **data)

    def spawn_unit(self, kind, faction: int, x: int, y: int) -> Unit:
        """Create, register and place a unit."""
        unit = self.units.create(kind, faction)
        self.board.place_unit(unit, x, y)
        self.units.add(unit)
        return unit

    def destroy_unit(self, unit: Unit, by_faction: Optional[int] = None):
        """Remove a dead unit from board and registry, taking its cargo with it."""
        self.board.remove_unit(unit)
        self.units.remove(unit)
        self.treasury.record_unit_destroyed(unit, by_faction)

        lost_cargo = list(unit.cargo)
        unit.cargo.clear()
        for carried in lost_cargo:
            self.treasury.record_unit_destroyed(carried, by_faction)

        if self.turn.selection.unit_id == unit.id:
            self.turn.selection.clear()

        self.log(
            "destroyed",
            f"{unit.kind.value} ({unit.id}) of faction {unit.faction} destroyed"
            + (f" with {len(lost_cargo)} units aboard" if lost_cargo else ""),
            unit=unit.id, owner=unit.faction, cargo=[u.id for u in lost_cargo],
        )

    def selected_unit(self) -> Optional[Unit]:
        if self.turn.selection.unit_id is None:
            return None
        return self.units.get_unit(self.turn.selection.unit_id)


class TurnManager:
    """Manages turn rotation, income and victory checks."""

    def __init__(self, state: GameState):
        self.state = state

        # Callbacks for front ends
        self.on_turn_start: Optional[Callable[[TurnState], None]] = None
        self.on_turn_end: Optional[Callable[[TurnState], None]] = None
        self.on_victory: Optional[Callable[[VictoryResult], None]] = None

    def next_faction(self, faction: int) -> int:
        factions = self.state.factions
        return factions[(factions.index(faction) + 1) % len(factions)]

    def end_turn(self) -> TurnState:
        """Finish the current faction's turn and hand over to the next."""
        state = self.state
        turn = state.turn
        ending = turn.current_faction

        if self.on_turn_end:
            self.on_turn_end(turn)

        for unit in state.units.get_units_by_faction(ending):
            unit.has_moved = False

        income = state.config.income_per_turn
        state.treasury.credit(ending, income)
        state.log("income", f"Faction {ending} receives ${income}", faction=ending, amount=income)

        following = self.next_faction(ending)
        if following == state.factions[0]:
            turn.turn += 1
        turn.current_faction = following
        turn.action_points = state.config.actions_per_turn
        turn.selection.clear()

        logger.info(f"Turn {turn.turn}: faction {following} to act")
        state.log(
            "turn_start",
            f"Turn {turn.turn}, faction {following} to act "
            f"(${state.treasury.balance(following)}, {turn.action_points} actions)",
            faction=following,
        )

        self.check_victory()

        if self.on_turn_start and not state.is_over:
            self.on_turn_start(turn)

        return turn

    def scores(self) -> dict[int, int]:
        state = self.state
        return {f: compute_score(state.board, state.units, state.treasury, f)
                for f in state.factions}

    def check_victory(self) -> Optional[VictoryResult]:
        """Evaluate both victory conditions; end the game if one is met."""
        state = self.state
        if state.is_over:
            return state.winner

        result = None
        hq_tiles = state.board.tiles_of(TerrainType.HQ)
        if hq_tiles:
            owners = {t.owner for t in hq_tiles}
            if len(owners) == 1 and None not in owners:
                result = VictoryResult(winning_faction=owners.pop(), reason=REASON_HQ)

        limit = state.config.turn_limit
        if result is None and limit is not None and state.turn.turn > limit:
            scores = self.scores()
            best = max(scores.values())
            winner = min(f for f, s in scores.items() if s == best)
            result = VictoryResult(winning_faction=winner, reason=REASON_SCORE, scores=scores)

        if result is None:
            return None

        if not result.scores:
            result.scores = self.scores()
        state.winner = result
        state.turn.phase = Phase.GAME_OVER
        state.turn.selection.clear()
        logger.info(f"Faction {result.winning_faction} wins ({result.reason})")
        state.log(
            "victory",
            f"Faction {result.winning_faction} wins: {result.reason}",
            faction=result.winning_faction,
            winning_faction=result.winning_faction,
            reason=result.reason,
        )

        if self.on_victory:
            self.on_victory(result)

        return result

    def get_snapshot(self, viewer: Optional[int] = None) -> dict:
        """Game state as plain data. Units hidden from `viewer` are left out."""
        state = self.state
        turn = state.turn
        return {
            "turn": turn.turn,
            "current_faction": turn.current_faction,
            "action_points": turn.action_points,
            "phase": turn.phase.value,
            "selection": {
                "unit_id": turn.selection.unit_id,
                "build_tile": turn.selection.build_tile,
            },
            "board": state.board.to_dict(),
            "units": [
                {**u.to_dict(), "capture_state": capture_state(u).value}
                for u in state.units if is_visible_to(u, viewer)
            ],
            "money": dict(state.treasury.balances),
            "scores": self.scores(),
            "winner": (
                {"winning_faction": state.winner.winning_faction, "reason": state.winner.reason}
                if state.winner else None
            ),
        }

"""
Skirmish: rules engine for a turn-based tactical combat game.

Core modules:
- map: Square grid, terrain catalog, tile placement
- units: Unit catalog and live unit registry
- movement: Reachability and attack range
- combat/: Direct attacks and submarine ambushes
- capture: Structure capture state machine
- logistics: Transport loading and unloading
- turn: Turn rotation, economy and victory
- commands: The command surface for players and bots
"""

from .config import GameConfig
from .errors import (
    CommandError, InvalidSelection, InsufficientResources,
    IllegalDestination, OccupiedTarget, NotCapturable, BoardInvariantError,
)
from .events import EventLog, GameEvent
from .map import Board, Tile, TerrainType, TerrainInfo, TerrainCatalog
from .units import Unit, UnitKind, UnitInfo, UnitCatalog, UnitRegistry, Domain
from .movement import MovementEngine
from .turn import GameState, TurnManager, TurnState, Phase, Selection, VictoryResult
from .commands import CommandProcessor, CommandResult
from .scenario import Scenario

__all__ = [
    # Config
    "GameConfig",
    # Errors
    "CommandError", "InvalidSelection", "InsufficientResources",
    "IllegalDestination", "OccupiedTarget", "NotCapturable", "BoardInvariantError",
    # Events
    "EventLog", "GameEvent",
    # Map
    "Board", "Tile", "TerrainType", "TerrainInfo", "TerrainCatalog",
    # Units
    "Unit", "UnitKind", "UnitInfo", "UnitCatalog", "UnitRegistry", "Domain",
    # Movement
    "MovementEngine",
    # Turn Management
    "GameState", "TurnManager", "TurnState", "Phase", "Selection", "VictoryResult",
    # Commands
    "CommandProcessor", "CommandResult",
    # Scenarios
    "Scenario",
]

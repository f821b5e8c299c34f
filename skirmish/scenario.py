"""
Scenario loading.

A scenario file supplies the board layout, starting ownership of
structures, starting units and optional `game:` settings. It is the seam
through which externally made maps enter the engine.
"""

import logging
import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .config import DATA_PATH, GameConfig, MIN_PLAYERS, MAX_PLAYERS
from .map import Board, TerrainCatalog
from .turn import GameState
from .units import UnitCatalog, UnitKind, UnitRegistry

logger = logging.getLogger(__name__)


@dataclass
class Scenario:
    name: str
    players: int
    layout: list[str]
    description: str = ""
    owners: list[dict] = field(default_factory=list)
    units: list[dict] = field(default_factory=list)
    game: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "Scenario":
        meta = data.get("scenario", {}) or {}
        players = meta.get("players", 2)
        if not MIN_PLAYERS <= players <= MAX_PLAYERS:
            raise ValueError(f"Scenario player count must be {MIN_PLAYERS}-{MAX_PLAYERS}, got {players}")
        layout = data.get("layout") or []
        if not layout:
            raise ValueError("Scenario has no layout")
        return cls(
            name=meta.get("name", "Unnamed"),
            description=meta.get("description", ""),
            players=players,
            layout=[str(row) for row in layout],
            owners=data.get("owners", []) or [],
            units=data.get("units", []) or [],
            game=data.get("game", {}) or {},
        )

    @classmethod
    def load(cls, name: str, data_path: Path | str = DATA_PATH) -> "Scenario":
        """Load by name from data/scenarios/, or from an explicit .yaml path."""
        path = Path(name)
        if path.suffix not in (".yaml", ".yml"):
            path = Path(data_path) / "scenarios" / f"{name}.yaml"
        if not path.exists():
            raise ValueError(f"Scenario not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        scenario = cls.from_dict(data)
        logger.info(f"Scenario loaded: {scenario.name} ({scenario.players} players)")
        return scenario

    def build_config(self, **overrides) -> GameConfig:
        """GameConfig from the scenario's `game:` block plus keyword overrides."""
        settings = {"players": self.players, **self.game}
        settings.update({k: v for k, v in overrides.items() if v is not None})
        return GameConfig.from_dict(settings)

    def build_state(
        self,
        config: Optional[GameConfig] = None,
        terrain: Optional[TerrainCatalog] = None,
        catalog: Optional[UnitCatalog] = None,
    ) -> GameState:
        """Create a ready-to-play GameState. Factions beyond config.players are left out."""
        config = config or self.build_config()
        if config.players > self.players:
            raise ValueError(
                f"Scenario '{self.name}' supports {self.players} players, {config.players} requested"
            )

        board = Board.from_layout(self.layout, terrain)
        state = GameState.new(config, board, UnitRegistry(catalog))
        in_play = set(config.factions)

        for entry in self.owners:
            faction = int(entry["faction"])
            if faction in in_play:
                board.set_owner(int(entry["x"]), int(entry["y"]), faction)

        for entry in self.units:
            faction = int(entry["faction"])
            if faction not in in_play:
                continue
            try:
                kind = UnitKind(entry["kind"])
            except ValueError:
                raise ValueError(f"Unknown unit kind '{entry['kind']}' in scenario '{self.name}'")
            state.spawn_unit(kind, faction, int(entry["x"]), int(entry["y"]))

        state.log(
            "game_start",
            f"{self.name}: {config.players} factions on a {board.width}x{board.height} board",
            faction=state.current_faction,
            scenario=self.name,
        )
        return state


def list_scenarios(data_path: Path | str = DATA_PATH) -> list[str]:
    return sorted(p.stem for p in (Path(data_path) / "scenarios").glob("*.yaml"))

"""
Square grid map and terrain catalog for skirmish.

Tiles are addressed by (x, y) with the origin at the top-left corner.
Adjacency is orthogonal only (north, south, east, west).
"""

import logging
import yaml
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Iterator, TYPE_CHECKING
from pathlib import Path

from .config import DATA_PATH
from .errors import BoardInvariantError

if TYPE_CHECKING:
    from .units import Unit

logger = logging.getLogger(__name__)

# Movement cost marking terrain that land units cannot cross
IMPASSABLE = 999


class TerrainType(Enum):
    PLAINS = "plains"
    FOREST = "forest"
    CITY = "city"
    HQ = "hq"
    WATER = "water"
    SEAPORT = "seaport"


@dataclass
class TerrainInfo:
    """Terrain properties loaded from schema."""
    id: str
    name: str
    defense_bonus: int
    movement_cost: int
    capturable: bool


class TerrainCatalog:
    """Terrain kind -> TerrainInfo lookup."""

    def __init__(self, data_path: Path | str = DATA_PATH):
        self.data_path = Path(data_path)
        self.terrain_info: dict[TerrainType, TerrainInfo] = {}
        self._load_terrain_schema()

    def _load_terrain_schema(self):
        """Load terrain definitions from schema."""
        schema_path = self.data_path / "schema" / "terrain.yaml"
        if not schema_path.exists():
            logger.warning(f"Terrain schema not found: {schema_path}, using defaults")
            self._create_default_terrain_info()
            return

        with open(schema_path) as f:
            schema = yaml.safe_load(f) or {}

        self._create_default_terrain_info()
        for terrain_id, info in schema.get("terrain_types", {}).items():
            terrain = TerrainType(terrain_id)
            default = self.terrain_info[terrain]
            self.terrain_info[terrain] = TerrainInfo(
                id=terrain_id,
                name=info.get("name", default.name),
                defense_bonus=info.get("defense_bonus", default.defense_bonus),
                movement_cost=info.get("movement_cost", default.movement_cost),
                capturable=info.get("capturable", default.capturable),
            )

    def _create_default_terrain_info(self):
        """Built-in terrain table."""
        defaults = {
            # defense, movement, capturable
            "plains": (0, 1, False),
            "forest": (1, 2, False),
            "city": (2, 1, True),
            "hq": (3, 1, True),
            "water": (0, IMPASSABLE, False),
            "seaport": (1, 1, True),
        }
        for tid, (defense, move, capturable) in defaults.items():
            self.terrain_info[TerrainType(tid)] = TerrainInfo(
                id=tid,
                name="Headquarters" if tid == "hq" else tid.title(),
                defense_bonus=defense,
                movement_cost=move,
                capturable=capturable,
            )

    def get(self, terrain: TerrainType) -> TerrainInfo:
        return self.terrain_info[terrain]

    def movement_cost(self, terrain: TerrainType) -> int:
        return self.terrain_info[terrain].movement_cost

    def defense_bonus(self, terrain: TerrainType) -> int:
        return self.terrain_info[terrain].defense_bonus

    def is_capturable(self, terrain: TerrainType) -> bool:
        return self.terrain_info[terrain].capturable


@dataclass
class Tile:
    """Individual grid tile."""
    x: int
    y: int
    terrain: TerrainType
    owner: Optional[int] = None  # faction number, capturable terrain only
    unit: Optional["Unit"] = None  # non-owning reference to the occupant

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "terrain": self.terrain.value,
            "owner": self.owner,
        }


class Board:
    """
    Rectangular grid of tiles.

    The board owns tile/unit placement: every write to a tile's occupant goes
    through place_unit, remove_unit or move_unit, which keep the tile's
    reference and the unit's coordinates in agreement.
    """

    # N, S, E, W
    DIRECTIONS = [(0, -1), (0, 1), (1, 0), (-1, 0)]

    LEGEND = {
        ".": TerrainType.PLAINS,
        "f": TerrainType.FOREST,
        "c": TerrainType.CITY,
        "H": TerrainType.HQ,
        "~": TerrainType.WATER,
        "p": TerrainType.SEAPORT,
    }

    def __init__(
        self,
        width: int,
        height: int,
        catalog: Optional[TerrainCatalog] = None,
        fill: TerrainType = TerrainType.PLAINS,
    ):
        if width < 1 or height < 1:
            raise ValueError(f"Board must be at least 1x1, got {width}x{height}")
        self.width = width
        self.height = height
        self.catalog = catalog or TerrainCatalog()
        self.tiles: dict[tuple[int, int], Tile] = {}

        for y in range(height):
            for x in range(width):
                self.tiles[(x, y)] = Tile(x=x, y=y, terrain=fill)

    @classmethod
    def from_layout(
        cls,
        rows: list[str],
        catalog: Optional[TerrainCatalog] = None,
        legend: Optional[dict[str, TerrainType]] = None,
    ) -> "Board":
        """Build a board from text rows, one character per tile."""
        legend = legend or cls.LEGEND
        rows = [row.strip() for row in rows if row.strip()]
        if not rows:
            raise ValueError("Layout has no rows")

        width = len(rows[0])
        board = cls(width, len(rows), catalog)
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"Layout row {y} has {len(row)} tiles, expected {width}")
            for x, symbol in enumerate(row):
                if symbol not in legend:
                    raise ValueError(f"Unknown terrain symbol '{symbol}' at ({x}, {y})")
                board.tiles[(x, y)].terrain = legend[symbol]
        return board

    # Lookup
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_tile(self, x: int, y: int) -> Optional[Tile]:
        return self.tiles.get((x, y))

    def get_neighbors(self, x: int, y: int) -> list[Tile]:
        """Orthogonally adjacent tiles in N, S, E, W order."""
        neighbors = []
        for dx, dy in self.DIRECTIONS:
            tile = self.get_tile(x + dx, y + dy)
            if tile:
                neighbors.append(tile)
        return neighbors

    @staticmethod
    def manhattan(x1: int, y1: int, x2: int, y2: int) -> int:
        return abs(x1 - x2) + abs(y1 - y2)

    def iter_tiles(self) -> Iterator[Tile]:
        """Tiles in row-major order (y, then x)."""
        for y in range(self.height):
            for x in range(self.width):
                yield self.tiles[(x, y)]

    @property
    def center(self) -> tuple[int, int]:
        return (self.width // 2, self.height // 2)

    # Terrain queries
    def terrain_info(self, tile: Tile) -> TerrainInfo:
        return self.catalog.get(tile.terrain)

    def is_capturable(self, tile: Tile) -> bool:
        return self.catalog.is_capturable(tile.terrain)

    def defense_bonus(self, tile: Tile) -> int:
        return self.catalog.defense_bonus(tile.terrain)

    def capturable_tiles(self) -> list[Tile]:
        return [t for t in self.iter_tiles() if self.is_capturable(t)]

    def tiles_of(self, terrain: TerrainType) -> list[Tile]:
        return [t for t in self.iter_tiles() if t.terrain == terrain]

    def set_owner(self, x: int, y: int, faction: Optional[int]):
        tile = self._require_tile(x, y)
        if faction is not None and not self.is_capturable(tile):
            raise ValueError(f"{tile.terrain.value} at ({x}, {y}) cannot be owned")
        tile.owner = faction

    # Placement
    def _require_tile(self, x: int, y: int) -> Tile:
        tile = self.get_tile(x, y)
        if tile is None:
            raise BoardInvariantError(f"({x}, {y}) is off the board")
        return tile

    def place_unit(self, unit: "Unit", x: int, y: int):
        """Put a unit that is not on the board onto an empty tile."""
        tile = self._require_tile(x, y)
        if tile.unit is not None:
            raise BoardInvariantError(
                f"Cannot place {unit.id} at ({x}, {y}): occupied by {tile.unit.id}"
            )
        tile.unit = unit
        unit.x, unit.y = x, y

    def remove_unit(self, unit: "Unit"):
        tile = self._require_tile(unit.x, unit.y)
        if tile.unit is not unit:
            raise BoardInvariantError(f"{unit.id} is not on its tile ({unit.x}, {unit.y})")
        tile.unit = None

    def move_unit(self, unit: "Unit", x: int, y: int):
        target = self._require_tile(x, y)
        if target.unit is not None:
            raise BoardInvariantError(
                f"Cannot move {unit.id} to ({x}, {y}): occupied by {target.unit.id}"
            )
        self.remove_unit(unit)
        target.unit = unit
        unit.x, unit.y = x, y

    def get_stats(self) -> dict:
        """Get map statistics."""
        terrain_counts = {}
        owner_counts = {}

        for tile in self.iter_tiles():
            terrain = tile.terrain.value
            terrain_counts[terrain] = terrain_counts.get(terrain, 0) + 1
            if tile.owner is not None:
                owner_counts[tile.owner] = owner_counts.get(tile.owner, 0) + 1

        return {
            "width": self.width,
            "height": self.height,
            "terrain_distribution": terrain_counts,
            "ownership": owner_counts,
        }

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "tiles": [t.to_dict() for t in self.iter_tiles()],
        }

"""
Unit catalog and unit state management for skirmish.

Six unit kinds across two domains: land (infantry, tank, artillery) and
water (transport, battleship, submarine).
"""

import logging
import yaml
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Iterator
from pathlib import Path

from .config import DATA_PATH

logger = logging.getLogger(__name__)


class Domain(Enum):
    LAND = "land"
    WATER = "water"


class UnitKind(Enum):
    INFANTRY = "infantry"
    TANK = "tank"
    ARTILLERY = "artillery"
    TRANSPORT = "transport"
    BATTLESHIP = "battleship"
    SUBMARINE = "submarine"


@dataclass
class UnitInfo:
    """Static stats for a unit kind."""
    kind: UnitKind
    name: str
    health: int
    movement: int
    attack_range: int
    attack_power: int
    defense: int
    cost: int
    action_cost: int
    can_capture: bool
    domain: Domain
    transport_size: int = 1
    transport_capacity: int = 0
    can_submerge: bool = False


class UnitCatalog:
    """Unit kind -> UnitInfo lookup, loaded from data/schema/units.yaml."""

    def __init__(self, data_path: Path | str = DATA_PATH):
        self.data_path = Path(data_path)
        self.unit_info: dict[UnitKind, UnitInfo] = {}
        self._load_unit_schema()

    def _load_unit_schema(self):
        schema_path = self.data_path / "schema" / "units.yaml"
        self._create_default_unit_info()
        if not schema_path.exists():
            logger.warning(f"Unit schema not found: {schema_path}, using defaults")
            return

        with open(schema_path) as f:
            schema = yaml.safe_load(f) or {}

        for kind_id, info in schema.get("unit_types", {}).items():
            kind = UnitKind(kind_id)
            default = self.unit_info[kind]
            self.unit_info[kind] = UnitInfo(
                kind=kind,
                name=info.get("name", default.name),
                health=info.get("health", default.health),
                movement=info.get("movement", default.movement),
                attack_range=info.get("attack_range", default.attack_range),
                attack_power=info.get("attack_power", default.attack_power),
                defense=info.get("defense", default.defense),
                cost=info.get("cost", default.cost),
                action_cost=info.get("action_cost", default.action_cost),
                can_capture=info.get("can_capture", default.can_capture),
                domain=Domain(info.get("domain", default.domain.value)),
                transport_size=info.get("transport_size", default.transport_size),
                transport_capacity=info.get("transport_capacity", default.transport_capacity),
                can_submerge=info.get("can_submerge", default.can_submerge),
            )

        logger.info(f"Loaded stats for {len(self.unit_info)} unit types")

    def _create_default_unit_info(self):
        """Built-in unit table."""
        defaults = {
            # health, move, range, attack, defense, cost, actions, capture, domain, size, capacity, submerge
            "infantry": (100, 3, 1, 55, 60, 800, 1, True, "land", 1, 0, False),
            "tank": (100, 4, 1, 85, 70, 2500, 1, False, "land", 2, 0, False),
            "artillery": (100, 1, 3, 90, 50, 2000, 1, False, "land", 2, 0, False),
            "transport": (100, 5, 0, 0, 40, 3000, 2, False, "water", 1, 4, False),
            "battleship": (100, 3, 4, 95, 80, 4500, 3, False, "water", 1, 0, False),
            "submarine": (100, 4, 1, 75, 60, 3500, 2, False, "water", 1, 0, True),
        }
        for kid, stats in defaults.items():
            (health, move, rng, attack, defense, cost, actions,
             capture, domain, size, capacity, submerge) = stats
            kind = UnitKind(kid)
            self.unit_info[kind] = UnitInfo(
                kind=kind, name=kid.title(),
                health=health, movement=move, attack_range=rng,
                attack_power=attack, defense=defense, cost=cost,
                action_cost=actions, can_capture=capture, domain=Domain(domain),
                transport_size=size, transport_capacity=capacity, can_submerge=submerge,
            )

    def get(self, kind: UnitKind) -> UnitInfo:
        return self.unit_info[kind]

    def kinds(self, domain: Optional[Domain] = None) -> list[UnitKind]:
        """Unit kinds in catalog order, optionally limited to one domain."""
        return [k for k, info in self.unit_info.items()
                if domain is None or info.domain == domain]

    def affordable(
        self,
        money: int,
        action_points: int,
        domain: Optional[Domain] = None,
    ) -> list[UnitKind]:
        return [k for k in self.kinds(domain)
                if self.unit_info[k].cost <= money
                and self.unit_info[k].action_cost <= action_points]


@dataclass
class Unit:
    """A live unit on the board (or carried in a transport)."""
    id: str
    kind: UnitKind
    faction: int
    info: UnitInfo
    x: int = -1
    y: int = -1
    health: int = 0
    has_moved: bool = False
    capture_progress: int = 0  # 0-3
    capture_target: Optional[tuple[int, int]] = None
    cargo: list["Unit"] = field(default_factory=list)
    submerged: bool = False

    def __post_init__(self):
        if self.health <= 0:
            self.health = self.info.health

    # Stats
    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)

    @property
    def max_health(self) -> int:
        return self.info.health

    @property
    def movement(self) -> int:
        return self.info.movement

    @property
    def attack_power(self) -> int:
        return self.info.attack_power

    @property
    def attack_range(self) -> int:
        return self.info.attack_range

    @property
    def defense(self) -> int:
        return self.info.defense

    @property
    def domain(self) -> Domain:
        return self.info.domain

    @property
    def can_capture(self) -> bool:
        return self.info.can_capture

    @property
    def can_submerge(self) -> bool:
        return self.info.can_submerge

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    # Cargo
    def cargo_load(self) -> int:
        return sum(u.info.transport_size for u in self.cargo)

    def remaining_capacity(self) -> int:
        return self.info.transport_capacity - self.cargo_load()

    def can_carry(self, other: "Unit") -> bool:
        return (self.info.transport_capacity > 0
                and other.domain == Domain.LAND
                and other.info.transport_size <= self.remaining_capacity())

    # State changes
    def take_damage(self, amount: int) -> int:
        """Apply damage and return how much was actually taken."""
        dealt = min(self.health, max(0, amount))
        self.health -= dealt
        return dealt

    def reset_capture(self):
        self.capture_progress = 0
        self.capture_target = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "faction": self.faction,
            "x": self.x,
            "y": self.y,
            "health": self.health,
            "max_health": self.max_health,
            "has_moved": self.has_moved,
            "capture_progress": self.capture_progress,
            "capture_target": self.capture_target,
            "cargo": [u.to_dict() for u in self.cargo],
            "submerged": self.submerged,
        }


class UnitRegistry:
    """Owns every live unit that is on the board, keyed by id."""

    def __init__(self, catalog: Optional[UnitCatalog] = None):
        self.catalog = catalog or UnitCatalog()
        self.units: dict[str, Unit] = {}
        self._next_serial = 1

    def create(self, kind: UnitKind, faction: int) -> Unit:
        """Make a new unit at full health. It is not registered or placed."""
        unit_id = f"p{faction}-{kind.value}-{self._next_serial}"
        self._next_serial += 1
        return Unit(id=unit_id, kind=kind, faction=faction, info=self.catalog.get(kind))

    def add(self, unit: Unit):
        if unit.id in self.units:
            raise ValueError(f"Unit {unit.id} is already registered")
        self.units[unit.id] = unit

    def remove(self, unit: Unit):
        self.units.pop(unit.id, None)

    # Query methods
    def get_unit(self, unit_id: str) -> Optional[Unit]:
        return self.units.get(unit_id)

    def get_units_by_faction(self, faction: int) -> list[Unit]:
        return [u for u in self.units.values() if u.faction == faction]

    def __iter__(self) -> Iterator[Unit]:
        return iter(list(self.units.values()))

    def __len__(self) -> int:
        return len(self.units)

    def __contains__(self, unit: Unit) -> bool:
        return unit.id in self.units

    def get_stats(self) -> dict:
        """Get unit statistics."""
        stats = {
            "total_units": len(self.units),
            "by_faction": {},
            "by_kind": {},
        }

        for unit in self.units.values():
            stats["by_faction"][unit.faction] = stats["by_faction"].get(unit.faction, 0) + 1
            kind = unit.kind.value
            stats["by_kind"][kind] = stats["by_kind"].get(kind, 0) + 1

        return stats

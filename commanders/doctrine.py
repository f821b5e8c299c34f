"""
Bot difficulty doctrine.

A DifficultyPolicy bundles how long a bot pauses between actions, how often
it lets a unit sit idle, and how it picks what to build. Presets come from
data/schema/difficulty.yaml, falling back to built-in values.
"""

import logging
import random
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from skirmish.config import DATA_PATH, DIFFICULTIES
from skirmish.fog_of_war import visible_units
from skirmish.turn import GameState
from skirmish.units import UnitKind, Domain

logger = logging.getLogger(__name__)

# (affordable kinds, state, faction, rng) -> chosen kind
BuildPreference = Callable[[list[UnitKind], GameState, int, random.Random], Optional[UnitKind]]


def _cheapest(affordable: list[UnitKind], state: GameState) -> Optional[UnitKind]:
    if not affordable:
        return None
    catalog = state.units.catalog
    return min(affordable, key=lambda k: catalog.get(k).cost)


def _is_naval(affordable: list[UnitKind], state: GameState) -> bool:
    catalog = state.units.catalog
    return bool(affordable) and all(catalog.get(k).domain == Domain.WATER for k in affordable)


def cheapest_first(affordable, state, faction, rng) -> Optional[UnitKind]:
    """Mostly the cheapest unit, now and then a tank."""
    if not affordable:
        return None
    if UnitKind.TANK in affordable and rng.random() > 0.7:
        return UnitKind.TANK
    return _cheapest(affordable, state)


def balanced(affordable, state, faction, rng) -> Optional[UnitKind]:
    """Infantry backbone with a fair share of heavier units."""
    if not affordable:
        return None
    if _is_naval(affordable, state):
        if UnitKind.SUBMARINE in affordable and rng.random() > 0.4:
            return UnitKind.SUBMARINE
        return _cheapest(affordable, state)

    if UnitKind.TANK in affordable and rng.random() > 0.4:
        return UnitKind.TANK
    if UnitKind.INFANTRY in affordable:
        return UnitKind.INFANTRY
    return affordable[0]


LAND_ORDER = [UnitKind.TANK, UnitKind.ARTILLERY, UnitKind.INFANTRY]
NAVAL_ORDER = [UnitKind.BATTLESHIP, UnitKind.SUBMARINE, UnitKind.TRANSPORT]


def composition_aware(affordable, state, faction, rng) -> Optional[UnitKind]:
    """Match the enemy's numbers, keep enough capturers, else build the strongest."""
    if not affordable:
        return None

    own = state.units.get_units_by_faction(faction)
    enemies = [u for u in visible_units(state.units, faction) if u.faction != faction]

    if _is_naval(affordable, state):
        own_ships = [u for u in own if u.domain == Domain.WATER]
        enemy_ships = [u for u in enemies if u.domain == Domain.WATER]
        if len(enemy_ships) > len(own_ships) and UnitKind.BATTLESHIP in affordable:
            return UnitKind.BATTLESHIP
        order = NAVAL_ORDER
    else:
        if len(enemies) > len(own) and UnitKind.TANK in affordable:
            return UnitKind.TANK
        infantry = [u for u in own if u.kind == UnitKind.INFANTRY]
        if len(infantry) < 2 and UnitKind.INFANTRY in affordable:
            return UnitKind.INFANTRY
        order = LAND_ORDER

    for kind in order:
        if kind in affordable:
            return kind
    return affordable[0]


BUILD_PREFERENCES: dict[str, BuildPreference] = {
    "cheapest": cheapest_first,
    "balanced": balanced,
    "composition": composition_aware,
}


@dataclass
class DifficultyPolicy:
    """How one bot plays."""
    name: str
    latency: float  # seconds between actions when pacing is on
    skip_probability: float
    build_preference: BuildPreference

    def should_skip(self, rng: random.Random) -> bool:
        return rng.random() < self.skip_probability

    def choose_build(
        self,
        affordable: list[UnitKind],
        state: GameState,
        faction: int,
        rng: random.Random,
    ) -> Optional[UnitKind]:
        return self.build_preference(affordable, state, faction, rng)


DEFAULT_PRESETS = {
    "easy": (0.5, 0.12, "cheapest"),
    "medium": (1.0, 0.06, "balanced"),
    "hard": (1.5, 0.015, "composition"),
}


def load_policies(data_path: Path | str = DATA_PATH) -> dict[str, DifficultyPolicy]:
    """Difficulty presets keyed by name."""
    presets = dict(DEFAULT_PRESETS)

    schema_path = Path(data_path) / "schema" / "difficulty.yaml"
    if schema_path.exists():
        with open(schema_path) as f:
            schema = yaml.safe_load(f) or {}
        for name, info in schema.get("difficulties", {}).items():
            latency, skip, preference = presets.get(name, DEFAULT_PRESETS["medium"])
            presets[name] = (
                float(info.get("latency", latency)),
                float(info.get("skip_probability", skip)),
                info.get("build_preference", preference),
            )
    else:
        logger.warning(f"Difficulty schema not found: {schema_path}, using defaults")

    policies = {}
    for name, (latency, skip, preference) in presets.items():
        if preference not in BUILD_PREFERENCES:
            raise ValueError(f"Unknown build preference '{preference}' for difficulty '{name}'")
        policies[name] = DifficultyPolicy(
            name=name,
            latency=latency,
            skip_probability=skip,
            build_preference=BUILD_PREFERENCES[preference],
        )
    return policies


def get_policy(name: str, data_path: Path | str = DATA_PATH) -> DifficultyPolicy:
    policies = load_policies(data_path)
    if name not in policies:
        raise ValueError(f"Unknown difficulty '{name}' (expected one of {DIFFICULTIES})")
    return policies[name]

"""
Base combat resolution with the shared damage formula.
"""

import math
import random
from dataclasses import dataclass, field
from typing import Optional

from ..units import Unit


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@dataclass
class CombatReport:
    """Report of one engagement."""
    attacker_id: str
    defender_id: str
    turn: int
    kind: str  # "direct" or "ambush"
    damage: int = 0
    counter_damage: int = 0
    defender_destroyed: bool = False
    attacker_destroyed: bool = False
    countered: bool = False
    location: Optional[tuple[int, int]] = None
    notes: list[str] = field(default_factory=list)


class CombatResolver:
    """Base class for combat resolution."""

    # Upper bound of the uniform damage roll
    ROLL_MAX = 10.0
    # Each point of terrain defense is worth this much unit defense
    TERRAIN_WEIGHT = 10

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def roll(self) -> float:
        return self.rng.uniform(0, self.ROLL_MAX)

    def calculate_damage(self, attacker: Unit, defender: Unit, terrain_bonus: int) -> int:
        """Damage `attacker` deals to `defender` standing on terrain with `terrain_bonus`.

        Attack scales with the attacker's remaining health. At least 1 damage
        is dealt and never more than the defender has left.
        """
        strength = attacker.attack_power * (attacker.health / attacker.max_health)
        protection = defender.defense + terrain_bonus * self.TERRAIN_WEIGHT
        raw = (strength - protection) / 10 + self.roll()
        return min(defender.health, max(1, round_half_up(raw)))

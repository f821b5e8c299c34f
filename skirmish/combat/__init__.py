"""
Combat resolution: direct attacks with counter-attack, and submarine ambushes.
"""

from .base import CombatResolver, CombatReport, round_half_up
from .direct import DirectCombat
from .ambush import AmbushCombat

__all__ = [
    "CombatResolver",
    "CombatReport",
    "round_half_up",
    "DirectCombat",
    "AmbushCombat",
]

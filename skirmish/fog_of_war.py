"""
Visibility rules.

The only hidden information in skirmish is a submerged submarine: its owner
sees it, every other faction does not. Hidden units are left out of enemy
snapshots and cannot be targeted, but they still block the tile they sit on
(moving into one springs an ambush).
"""

from typing import Iterable, Optional

from .units import Unit


def is_visible_to(unit: Unit, viewer: Optional[int]) -> bool:
    """True if `viewer` can see `unit`. A viewer of None sees everything."""
    if viewer is None or unit.faction == viewer:
        return True
    return not unit.submerged


def is_hidden_enemy(unit: Optional[Unit], viewer: int) -> bool:
    return unit is not None and unit.faction != viewer and not is_visible_to(unit, viewer)


def visible_units(units: Iterable[Unit], viewer: Optional[int]) -> list[Unit]:
    return [u for u in units if is_visible_to(u, viewer)]

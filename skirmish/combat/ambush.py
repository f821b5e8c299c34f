"""
Submarine ambush - a unit blunders into a hidden submarine, which surfaces
and fires first. There is no counter-attack.
"""

from typing import TYPE_CHECKING

from .base import CombatResolver, CombatReport
from ..units import Unit

if TYPE_CHECKING:
    from ..turn import GameState


class AmbushCombat(CombatResolver):

    def resolve(self, state: "GameState", submarine: Unit, victim: Unit) -> CombatReport:
        board = state.board
        submarine.submerged = False

        report = CombatReport(
            attacker_id=submarine.id,
            defender_id=victim.id,
            turn=state.turn.turn,
            kind="ambush",
            location=victim.position,
        )
        victim_tile = board.get_tile(*victim.position)
        report.damage = victim.take_damage(
            self.calculate_damage(submarine, victim, board.defense_bonus(victim_tile))
        )
        state.log(
            "ambush",
            f"Hidden submarine ({submarine.id}) surfaces at {submarine.position} and "
            f"hits {victim.kind.value} ({victim.id}) for {report.damage}, {victim.health} left",
            attacker=submarine.id, defender=victim.id, damage=report.damage,
        )

        if not victim.is_alive:
            report.defender_destroyed = True
            state.destroy_unit(victim, by_faction=submarine.faction)

        return report

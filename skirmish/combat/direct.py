"""
Direct combat - one unit attacks an adjacent enemy, which strikes back if
it survives and can reach the attacker.
"""

from typing import TYPE_CHECKING

from .base import CombatResolver, CombatReport
from ..movement import MovementEngine
from ..units import Unit

if TYPE_CHECKING:
    from ..turn import GameState


class DirectCombat(CombatResolver):
    """Resolves attack + counter-attack exchanges."""

    def resolve(self, state: "GameState", attacker: Unit, defender: Unit) -> CombatReport:
        """Apply an attack and any counter-attack to the game state."""
        board = state.board
        report = CombatReport(
            attacker_id=attacker.id,
            defender_id=defender.id,
            turn=state.turn.turn,
            kind="direct",
            location=defender.position,
        )

        defender_tile = board.get_tile(*defender.position)
        report.damage = defender.take_damage(
            self.calculate_damage(attacker, defender, board.defense_bonus(defender_tile))
        )
        state.log(
            "attack",
            f"{attacker.kind.value} ({attacker.id}) hits {defender.kind.value} "
            f"({defender.id}) for {report.damage}, {defender.health} left",
            attacker=attacker.id, defender=defender.id, damage=report.damage,
        )

        if not defender.is_alive:
            report.defender_destroyed = True
            state.destroy_unit(defender, by_faction=attacker.faction)
            return report

        if defender.attack_power <= 0:
            report.notes.append("defender cannot strike back")
            return report

        engine = MovementEngine(board)
        if attacker.position not in engine.attackable_tiles(defender):
            return report

        attacker_tile = board.get_tile(*attacker.position)
        report.countered = True
        report.counter_damage = attacker.take_damage(
            self.calculate_damage(defender, attacker, board.defense_bonus(attacker_tile))
        )
        state.log(
            "counter_attack",
            f"{defender.kind.value} ({defender.id}) strikes back for "
            f"{report.counter_damage}, {attacker.health} left",
            attacker=defender.id, defender=attacker.id, damage=report.counter_damage,
        )

        if not attacker.is_alive:
            report.attacker_destroyed = True
            state.destroy_unit(attacker, by_faction=defender.faction)

        return report

"""
Money and scoring.

Tracks each faction's balance plus a running ledger of income, spending and
the value of units lost and destroyed. Also computes the end-of-game score.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .errors import InsufficientResources
from .map import TerrainType

if TYPE_CHECKING:
    from .map import Board
    from .units import Unit, UnitRegistry

logger = logging.getLogger(__name__)

# Score weights
SCORE_PER_HQ = 100
SCORE_PER_CITY = 20
SCORE_PER_UNIT = 10
MONEY_PER_POINT = 100


@dataclass
class CostLedger:
    """Running economic ledger for one faction."""
    income_total: int = 0
    spent_total: int = 0
    assets_lost: int = 0      # build cost of own units destroyed
    assets_killed: int = 0    # build cost of enemy units destroyed
    spent_by_kind: dict = field(default_factory=dict)
    killed_by_kind: dict = field(default_factory=dict)


class Treasury:
    """Per-faction balances. Balances never go below zero."""

    def __init__(self, factions: list[int], starting_money: int = 0):
        self.balances: dict[int, int] = {f: starting_money for f in factions}
        self.ledgers: dict[int, CostLedger] = {f: CostLedger() for f in factions}

    def balance(self, faction: int) -> int:
        return self.balances[faction]

    def can_afford(self, faction: int, amount: int) -> bool:
        return self.balances[faction] >= amount

    def credit(self, faction: int, amount: int):
        self.balances[faction] += amount
        self.ledgers[faction].income_total += amount

    def debit(self, faction: int, amount: int, kind: str = ""):
        if not self.can_afford(faction, amount):
            raise InsufficientResources(
                f"Need ${amount}, faction {faction} has ${self.balances[faction]}"
            )
        self.balances[faction] -= amount
        ledger = self.ledgers[faction]
        ledger.spent_total += amount
        if kind:
            ledger.spent_by_kind[kind] = ledger.spent_by_kind.get(kind, 0) + amount

    def record_unit_destroyed(self, unit: "Unit", destroyed_by: int | None):
        """Book the loss for the owner and the kill for the destroyer."""
        cost = unit.info.cost
        self.ledgers[unit.faction].assets_lost += cost
        if destroyed_by is not None and destroyed_by != unit.faction:
            ledger = self.ledgers[destroyed_by]
            ledger.assets_killed += cost
            kind = unit.kind.value
            ledger.killed_by_kind[kind] = ledger.killed_by_kind.get(kind, 0) + cost

    def exchange_ratio(self, faction: int) -> float:
        """Enemy value destroyed per unit of own value lost."""
        ledger = self.ledgers[faction]
        return ledger.assets_killed / max(1, ledger.assets_lost)

    def get_summary(self) -> dict:
        return {
            faction: {
                "balance": self.balances[faction],
                "income_total": ledger.income_total,
                "spent_total": ledger.spent_total,
                "assets_lost": ledger.assets_lost,
                "assets_killed": ledger.assets_killed,
                "exchange_ratio": round(self.exchange_ratio(faction), 2),
            }
            for faction, ledger in self.ledgers.items()
        }


def compute_score(board: "Board", units: "UnitRegistry", treasury: Treasury, faction: int) -> int:
    """100 per HQ, 20 per city, 10 per unit on the board, 1 per $100."""
    hqs = sum(1 for t in board.tiles_of(TerrainType.HQ) if t.owner == faction)
    cities = sum(1 for t in board.tiles_of(TerrainType.CITY) if t.owner == faction)
    unit_count = len(units.get_units_by_faction(faction))
    return (SCORE_PER_HQ * hqs
            + SCORE_PER_CITY * cities
            + SCORE_PER_UNIT * unit_count
            + treasury.balance(faction) // MONEY_PER_POINT)

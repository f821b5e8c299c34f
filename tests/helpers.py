import random
from typing import Optional

from skirmish import Board, CommandProcessor, GameConfig, GameState, UnitKind


class FixedRandom(random.Random):
    """Random source with fixed damage rolls and chance draws."""

    def __init__(self, roll: float = 5.0, chance: float = 0.99):
        super().__init__(0)
        self.roll = roll
        self.chance = chance

    def uniform(self, a, b):
        return self.roll

    def random(self):
        return self.chance


def make_state(
    rows: Optional[list[str]] = None,
    width: int = 8,
    height: int = 8,
    rng: Optional[random.Random] = None,
    **config,
) -> GameState:
    board = Board.from_layout(rows) if rows else Board(width, height)
    return GameState.new(GameConfig(**config), board, rng=rng or FixedRandom())


def make_game(rows=None, **kwargs) -> tuple[GameState, CommandProcessor]:
    state = make_state(rows, **kwargs)
    return state, CommandProcessor(state)


def place(state: GameState, kind: UnitKind | str, faction: int, x: int, y: int):
    if isinstance(kind, str):
        kind = UnitKind(kind)
    return state.spawn_unit(kind, faction, x, y)


def pass_round(processor: CommandProcessor):
    """End every faction's turn once, returning to the same faction."""
    for _ in processor.state.factions:
        processor.end_turn(processor.state.current_faction)

"""
Base commander: a bot that plays whole turns through the command surface.
"""

import logging
import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, TYPE_CHECKING

from skirmish.config import DATA_PATH
from skirmish.turn import GameState

from .doctrine import DifficultyPolicy, get_policy
from .executor import Executor
from .planner import Planner, PlannedAction

if TYPE_CHECKING:
    from skirmish.commands import CommandProcessor

logger = logging.getLogger(__name__)


@dataclass
class CommanderConfig:
    """Configuration for a bot commander."""
    faction: int
    difficulty: str = "medium"
    pacing: bool = False
    data_path: Path | str = DATA_PATH


class Commander(ABC):
    """Base class for bots. Subclasses decide what to do; this class does it."""

    def __init__(
        self,
        config: CommanderConfig,
        policy: Optional[DifficultyPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.faction = config.faction
        self.policy = policy or get_policy(config.difficulty, config.data_path)
        self.executor = Executor(self.policy, pacing=config.pacing, sleep=sleep)
        self.turn_count = 0

    @abstractmethod
    def plan_turn(self, state: GameState) -> list[PlannedAction]:
        """Decide this turn's actions from the current state."""
        pass

    def take_turn(self, processor: "CommandProcessor"):
        """Plan, execute and end one turn."""
        self.turn_count += 1
        state = processor.state
        state.log("thinking", f"Bot {self.faction} ({self.policy.name}) is thinking...", faction=self.faction)

        actions = self.plan_turn(state)
        self.executor.execute(processor, self.faction, actions)


class ScriptedCommander(Commander):
    """Rule-based bot: attack what is adjacent, capture, advance, then build."""

    def __init__(
        self,
        config: CommanderConfig,
        policy: Optional[DifficultyPolicy] = None,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        super().__init__(config, policy, sleep)
        self.planner = Planner(self.policy, rng)

    def plan_turn(self, state: GameState) -> list[PlannedAction]:
        return self.planner.plan(state, self.faction)

    @classmethod
    def create_default(
        cls,
        faction: int,
        difficulty: str = "medium",
        pacing: bool = False,
        rng: Optional[random.Random] = None,
    ) -> "ScriptedCommander":
        """Create a bot with the named difficulty preset."""
        config = CommanderConfig(faction=faction, difficulty=difficulty, pacing=pacing)
        return cls(config, rng=rng)

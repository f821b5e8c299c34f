"""
Plays a planned action queue through the command surface.
"""

import logging
import time
from typing import Callable, TYPE_CHECKING

from skirmish.commands import CommandResult

from .doctrine import DifficultyPolicy
from .planner import PlannedAction, AttackAction, CaptureAction, MoveAction, BuildAction

if TYPE_CHECKING:
    from skirmish.commands import CommandProcessor

logger = logging.getLogger(__name__)


class Executor:
    """Runs actions one by one, then ends the turn."""

    def __init__(
        self,
        policy: DifficultyPolicy,
        pacing: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.policy = policy
        self.pacing = pacing
        self.sleep = sleep

    def execute(
        self,
        processor: "CommandProcessor",
        faction: int,
        actions: list[PlannedAction],
    ) -> list[CommandResult]:
        state = processor.state
        turn_marker = (state.turn.turn, faction)
        results = []

        for action in actions:
            if state.is_over:
                break
            if self.pacing:
                self.sleep(self.policy.latency)

            result = self.dispatch(processor, faction, action)
            results.append(result)
            if result.success:
                logger.debug(f"Faction {faction} {action.description}: {result.message}")
            else:
                logger.info(f"Faction {faction} skipped '{action.description}': {result.message}")

        if not state.is_over and (state.turn.turn, state.current_faction) == turn_marker:
            processor.end_turn(faction)

        return results

    def dispatch(
        self,
        processor: "CommandProcessor",
        faction: int,
        action: PlannedAction,
    ) -> CommandResult:
        """Turn one PlannedAction into commands."""
        if isinstance(action, BuildAction):
            selected = processor.select_build_tile(faction, *action.position)
            if not selected.success:
                return selected
            return processor.build(faction, action.kind)

        unit = processor.state.units.get_unit(action.unit_id)
        if unit is None:
            return CommandResult(False, f"{action.unit_id} is gone", "InvalidSelection")

        selected = processor.select_unit(faction, unit.x, unit.y)
        if not selected.success:
            return selected

        if isinstance(action, AttackAction):
            result = processor.attack(faction, *action.target)
        elif isinstance(action, CaptureAction):
            result = processor.capture(faction)
        elif isinstance(action, MoveAction):
            result = processor.move(faction, *action.destination)
        else:
            raise TypeError(f"Unknown planned action {action!r}")

        if not result.success:
            processor.cancel_selection(faction)
        return result

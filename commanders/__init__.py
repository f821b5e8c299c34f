"""
Scripted bot commanders for skirmish.

Bots plan a turn from the game state, then play it through the same
command surface a human uses.
"""

from .base import Commander, CommanderConfig, ScriptedCommander
from .doctrine import DifficultyPolicy, get_policy, load_policies
from .executor import Executor
from .planner import (
    Planner, PlannedAction, AttackAction, CaptureAction, MoveAction, BuildAction,
)

__all__ = [
    "Commander", "CommanderConfig", "ScriptedCommander",
    "DifficultyPolicy", "get_policy", "load_policies",
    "Executor",
    "Planner", "PlannedAction", "AttackAction", "CaptureAction", "MoveAction", "BuildAction",
]

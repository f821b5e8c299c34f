"""
Exceptions raised by the rules engine.

Rule violations are CommandError subclasses; the command surface turns them
into failed results. BoardInvariantError signals a bug and is never caught.
"""


class CommandError(Exception):
    """A command was rejected. State is unchanged."""


class InvalidSelection(CommandError):
    """Nothing usable is selected, or the actor may not act right now."""


class InsufficientResources(CommandError):
    """Not enough action points or money."""


class IllegalDestination(CommandError):
    """Target tile is out of reach or not a legal target."""


class OccupiedTarget(CommandError):
    """Target tile already holds a unit."""


class NotCapturable(CommandError):
    """The unit or the tile cannot take part in a capture."""


class BoardInvariantError(RuntimeError):
    """Board and unit positions disagree, or a tile would hold two units."""

"""
Capture state machine.

A capture-capable unit standing on an enemy or neutral structure advances
its capture by one step per command. Three steps transfer ownership.
Walking off the structure, or boarding a transport, abandons the capture.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, TYPE_CHECKING

from .errors import NotCapturable
from .units import Unit

if TYPE_CHECKING:
    from .turn import GameState

CAPTURE_STEPS = 3


class CaptureState(Enum):
    IDLE = "idle"
    CAPTURING = "capturing"


@dataclass
class CaptureOutcome:
    position: tuple[int, int]
    progress: int
    transferred: bool
    previous_owner: Optional[int] = None


def capture_state(unit: Unit) -> CaptureState:
    if unit.capture_target is not None and unit.capture_progress > 0:
        return CaptureState.CAPTURING
    return CaptureState.IDLE


def validate_capture(state: "GameState", unit: Unit):
    """Raise NotCapturable unless `unit` may start or continue a capture here."""
    if not unit.can_capture:
        raise NotCapturable(f"{unit.kind.value} cannot capture")

    tile = state.board.get_tile(*unit.position)
    if not state.board.is_capturable(tile):
        raise NotCapturable(f"{tile.terrain.value} at {tile.position} is not capturable")
    if tile.owner == unit.faction:
        raise NotCapturable(f"{tile.terrain.value} at {tile.position} is already yours")


def advance_capture(state: "GameState", unit: Unit) -> CaptureOutcome:
    """Apply one capture step. Call validate_capture first."""
    tile = state.board.get_tile(*unit.position)

    if unit.capture_target != tile.position:
        unit.reset_capture()
        unit.capture_target = tile.position

    unit.capture_progress += 1
    outcome = CaptureOutcome(position=tile.position, progress=unit.capture_progress, transferred=False)

    if unit.capture_progress >= CAPTURE_STEPS:
        outcome.previous_owner = tile.owner
        outcome.transferred = True
        state.board.set_owner(tile.x, tile.y, unit.faction)
        unit.reset_capture()
        state.log(
            "capture",
            f"{unit.kind.value} ({unit.id}) captured the {tile.terrain.value} at {tile.position}",
            unit=unit.id, position=tile.position, previous_owner=outcome.previous_owner,
        )
    else:
        state.log(
            "capture_progress",
            f"{unit.kind.value} ({unit.id}) capturing {tile.terrain.value} at "
            f"{tile.position}: {unit.capture_progress}/{CAPTURE_STEPS}",
            unit=unit.id, position=tile.position, progress=unit.capture_progress,
        )

    return outcome


def on_unit_relocated(state: "GameState", unit: Unit):
    """Abandon a capture in progress if the unit is no longer on its target."""
    if unit.capture_target is None or unit.capture_target == unit.position:
        return
    target = unit.capture_target
    unit.reset_capture()
    state.log(
        "capture_abandoned",
        f"{unit.kind.value} ({unit.id}) stopped capturing {target}",
        unit=unit.id, position=target,
    )

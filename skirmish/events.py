"""
Game event stream.

Every state change worth showing to a player is appended here as a
GameEvent. Renderers, the CLI runner and tests subscribe to the log.
"""

import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class GameEvent:
    """One entry in the game log."""
    kind: str  # "move", "attack", "capture", "build", "turn_start", "victory", ...
    message: str
    turn: int
    faction: Optional[int] = None
    data: dict = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> dict:
        return asdict(self)


class EventLog:
    """Append-only event list with subscriber callbacks."""

    def __init__(self):
        self.events: list[GameEvent] = []
        self._subscribers: list[Callable[[GameEvent], None]] = []

    def subscribe(self, callback: Callable[[GameEvent], None]):
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[GameEvent], None]):
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def emit(
        self,
        kind: str,
        message: str,
        turn: int,
        faction: Optional[int] = None,
        **data,
    ) -> GameEvent:
        """Record an event and notify subscribers."""
        event = GameEvent(kind=kind, message=message, turn=turn, faction=faction, data=data)
        self.events.append(event)
        logger.debug(f"[turn {turn}] {message}")

        for callback in list(self._subscribers):
            callback(event)

        return event

    def of_kind(self, kind: str) -> list[GameEvent]:
        return [e for e in self.events if e.kind == kind]

    def last(self, kind: Optional[str] = None) -> Optional[GameEvent]:
        for event in reversed(self.events):
            if kind is None or event.kind == kind:
                return event
        return None

    def messages(self) -> list[str]:
        return [e.message for e in self.events]

    def to_list(self) -> list[dict]:
        return [e.to_dict() for e in self.events]

    def __len__(self) -> int:
        return len(self.events)

"""Change notifications for store and study-session mutations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable


class EventKind(str, Enum):
    DECK_CREATED = "deck_created"
    DECK_UPDATED = "deck_updated"
    DECK_DELETED = "deck_deleted"
    CARD_CREATED = "card_created"
    CARD_UPDATED = "card_updated"
    CARD_DELETED = "card_deleted"
    CARD_REVIEWED = "card_reviewed"
    SESSIONS_INCREMENTED = "sessions_incremented"
    SELECTION_CHANGED = "selection_changed"

    SESSION_STARTED = "session_started"
    CARD_FLIPPED = "card_flipped"
    CARD_RATED = "card_rated"
    SESSION_COMPLETE = "session_complete"
    SESSION_RESTARTED = "session_restarted"
    SESSION_EXITED = "session_exited"

    @property
    def persistent(self) -> bool:
        """Whether this change alters data that is saved to disk."""
        return self in PERSISTENT_EVENTS


PERSISTENT_EVENTS = frozenset({
    EventKind.DECK_CREATED,
    EventKind.DECK_UPDATED,
    EventKind.DECK_DELETED,
    EventKind.CARD_CREATED,
    EventKind.CARD_UPDATED,
    EventKind.CARD_DELETED,
    EventKind.CARD_REVIEWED,
    EventKind.SESSIONS_INCREMENTED,
})


@dataclass(frozen=True)
class ChangeEvent:
    """A single mutation notification."""

    kind: EventKind
    entity_id: str | None = None


Listener = Callable[[ChangeEvent], None]


class EventBus:
    """Synchronous publish/subscribe hub.

    Usage:
        bus = EventBus()
        unsubscribe = bus.subscribe(lambda event: print(event.kind))
        bus.emit(ChangeEvent(EventKind.DECK_CREATED, "abc"))
        unsubscribe()
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener and return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event: ChangeEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    def __len__(self) -> int:
        return len(self._listeners)

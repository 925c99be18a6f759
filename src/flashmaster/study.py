"""Study mode: a shuffled queue of cards that are flipped and rated."""

from __future__ import annotations

import random
from enum import Enum

from loguru import logger

from .events import ChangeEvent, EventBus, EventKind
from .models import Card, Difficulty
from .store import FlashcardError, FlashcardStore, round_percent


class SessionState(str, Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class SessionStateError(FlashcardError):
    """A study action was requested in a state that does not allow it."""


# Digit keys accepted while a card is flipped
KEY_RATINGS = {
    "1": Difficulty.HARD,
    "2": Difficulty.MEDIUM,
    "3": Difficulty.EASY,
}
FLIP_KEY = " "


def shuffle_cards(cards: list[Card], rng: random.Random) -> list[Card]:
    """Uniformly shuffle into a new list."""
    a = list(cards)
    rng.shuffle(a)
    return a


def prioritize(cards: list[Card]) -> list[Card]:
    """Stable sort: hard, then new (or unknown), then medium, then easy."""
    return sorted(cards, key=lambda c: Difficulty.parse(c.difficulty).priority)


class StudySession:
    """Tracks state for one study run.

    The queue is built by prioritizing then fully shuffling the source
    cards, so the final order is a uniform permutation. Ratings are written
    back to the store as they happen.

    Usage:
        session = StudySession(store)
        if session.start(store.cards):
            session.flip()
            session.rate(Difficulty.EASY)
    """

    def __init__(
        self,
        store: FlashcardStore,
        rng: random.Random | None = None,
        events: EventBus | None = None,
    ):
        self.store = store
        self.rng = rng or random.Random()
        self.events = events if events is not None else store.events
        self.queue: list[Card] = []
        self.index: int = 0
        self.flipped: bool = False
        self.correct: int = 0
        self.wrong: int = 0
        self.state: SessionState = SessionState.IDLE

    def _emit(self, kind: EventKind, entity_id: str | None = None) -> None:
        self.events.emit(ChangeEvent(kind, entity_id))

    def _reset_progress(self) -> None:
        self.index = 0
        self.flipped = False
        self.correct = 0
        self.wrong = 0

    def _require_card(self, action: str) -> Card:
        card = self.current_card
        if self.state != SessionState.IN_PROGRESS or card is None:
            raise SessionStateError(f"Cannot {action}: no card is being studied")
        return card

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self, source_cards: list[Card]) -> bool:
        """Begin a session over ``source_cards``.

        Returns False, leaving the session untouched, if there is nothing
        to study.
        """
        if not source_cards:
            return False

        self.queue = shuffle_cards(prioritize(source_cards), self.rng)
        self._reset_progress()
        self.state = SessionState.IN_PROGRESS
        logger.debug(f"Study session started with {len(self.queue)} card(s)")
        self._emit(EventKind.SESSION_STARTED)
        return True

    def flip(self) -> bool:
        """Toggle between front and back. Returns the new flip state."""
        card = self._require_card("flip")
        self.flipped = not self.flipped
        self._emit(EventKind.CARD_FLIPPED, card.id)
        return self.flipped

    def rate(self, rating: Difficulty | str) -> None:
        """Rate the current card and move on to the next one.

        Anything other than hard counts as correct for accuracy.
        """
        card = self._require_card("rate")
        rating = Difficulty.parse(rating)

        self.store.record_review(card.id, rating)
        if rating == Difficulty.HARD:
            self.wrong += 1
        else:
            self.correct += 1

        self.index += 1
        self.flipped = False
        self._emit(EventKind.CARD_RATED, card.id)

        if self.index == len(self.queue):
            self.state = SessionState.COMPLETE
            self.store.record_session_complete()
            logger.debug(
                f"Study session complete: {self.correct} correct, {self.wrong} wrong"
            )
            self._emit(EventKind.SESSION_COMPLETE)

    def restart(self) -> None:
        """Reshuffle the current queue and study it again from the top."""
        if self.state == SessionState.IDLE:
            raise SessionStateError("Cannot restart: no session has been started")

        self.queue = shuffle_cards(self.queue, self.rng)
        self._reset_progress()
        self.state = SessionState.IN_PROGRESS
        self._emit(EventKind.SESSION_RESTARTED)

    def exit(self) -> None:
        """Discard the session."""
        self.queue = []
        self._reset_progress()
        self.state = SessionState.IDLE
        self._emit(EventKind.SESSION_EXITED)

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def total(self) -> int:
        return len(self.queue)

    @property
    def current_card(self) -> Card | None:
        if self.index < len(self.queue):
            return self.queue[self.index]
        return None

    @property
    def remaining(self) -> int:
        return len(self.queue) - self.index

    @property
    def is_complete(self) -> bool:
        return self.state == SessionState.COMPLETE

    @property
    def progress_percent(self) -> int:
        return round_percent(self.index, len(self.queue))

    @property
    def accuracy(self) -> int:
        return round_percent(self.correct, self.correct + self.wrong)

    def summary(self) -> dict:
        """Return a summary dict for display."""
        return {
            "state": self.state.value,
            "total": self.total,
            "studied": self.index,
            "correct": self.correct,
            "wrong": self.wrong,
            "accuracy": self.accuracy,
            "progress_percent": self.progress_percent,
        }


def handle_key(session: StudySession, key: str) -> bool:
    """Apply a study shortcut. Returns True if the key did something.

    Space flips the current card; 1/2/3 rate it hard/medium/easy, but only
    once it has been flipped.
    """
    if session.state != SessionState.IN_PROGRESS or session.current_card is None:
        return False

    if key == FLIP_KEY:
        session.flip()
        return True

    rating = KEY_RATINGS.get(key)
    if rating is not None and session.flipped:
        session.rate(rating)
        return True

    return False

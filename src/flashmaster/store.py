"""In-memory deck and card store with derived queries."""

from __future__ import annotations

import math

from loguru import logger

from .events import ChangeEvent, EventBus, EventKind
from .models import Card, Deck, Difficulty, Snapshot, generate_id, now_iso

DECK_FIELDS = ("name", "emoji", "color")


class FlashcardError(Exception):
    """Base error for flashmaster operations."""


class ValidationError(FlashcardError):
    """A submitted deck or card is missing required text."""


def round_percent(part: int, total: int) -> int:
    """Percentage rounded half-up, 0 when total is 0."""
    if total <= 0:
        return 0
    return math.floor(100 * part / total + 0.5)


def _matches(card: Card, q: str) -> bool:
    return q in card.front.lower() or q in card.back.lower()


class FlashcardStore:
    """Holds decks and cards for one user and notifies listeners on change.

    Validation failures raise ValidationError before anything is touched.
    Updates and deletes of unknown ids are no-ops.
    """

    def __init__(self, snapshot: Snapshot | None = None, events: EventBus | None = None):
        snapshot = snapshot or Snapshot()
        self.decks: list[Deck] = list(snapshot.decks)
        self.cards: list[Card] = list(snapshot.cards)
        self.total_sessions: int = snapshot.total_sessions
        self.selected_deck_id: str | None = None
        self.events = events if events is not None else EventBus()

    def _emit(self, kind: EventKind, entity_id: str | None = None) -> None:
        logger.debug(f"{kind.value} {entity_id or ''}".rstrip())
        self.events.emit(ChangeEvent(kind, entity_id))

    def snapshot(self) -> Snapshot:
        return Snapshot(
            decks=list(self.decks),
            cards=list(self.cards),
            total_sessions=self.total_sessions,
        )

    # ------------------------------------------------------------------
    # Decks
    # ------------------------------------------------------------------

    def get_deck(self, deck_id: str) -> Deck | None:
        for deck in self.decks:
            if deck.id == deck_id:
                return deck
        return None

    def find_deck(self, ref: str) -> Deck | None:
        """Look up a deck by id, then by case-insensitive name."""
        deck = self.get_deck(ref)
        if deck is not None:
            return deck
        wanted = ref.strip().lower()
        for deck in self.decks:
            if deck.name.lower() == wanted:
                return deck
        return None

    @property
    def selected_deck(self) -> Deck | None:
        if self.selected_deck_id is None:
            return None
        return self.get_deck(self.selected_deck_id)

    def select_deck(self, deck_id: str | None) -> None:
        self.selected_deck_id = deck_id
        self._emit(EventKind.SELECTION_CHANGED, deck_id)

    def create_deck(self, name: str, emoji: str | None = None, color: str | None = None) -> Deck:
        """Create a deck.

        Raises:
            ValidationError: if the name is blank.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Deck name is required")

        deck = Deck(id=generate_id(), name=name, created_at=now_iso())
        if emoji:
            deck.emoji = emoji
        if color:
            deck.color = color
        self.decks.append(deck)
        self._emit(EventKind.DECK_CREATED, deck.id)
        return deck

    def update_deck(self, deck_id: str, **fields) -> Deck | None:
        """Merge ``name``, ``emoji`` and/or ``color`` into an existing deck.

        Fields passed as None are left unchanged. Returns None if the deck
        does not exist.

        Raises:
            ValidationError: on unknown fields or a blank name.
        """
        unknown = set(fields) - set(DECK_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown deck field(s): {', '.join(sorted(unknown))}")
        fields = {k: v for k, v in fields.items() if v is not None}
        if "name" in fields:
            fields["name"] = str(fields["name"]).strip()
            if not fields["name"]:
                raise ValidationError("Deck name is required")

        deck = self.get_deck(deck_id)
        if deck is None:
            return None

        for key, value in fields.items():
            setattr(deck, key, value)
        self._emit(EventKind.DECK_UPDATED, deck.id)
        return deck

    def delete_deck(self, deck_id: str) -> bool:
        """Delete a deck and every card in it. Returns False if not found."""
        if self.get_deck(deck_id) is None:
            return False

        self.cards = [c for c in self.cards if c.deck_id != deck_id]
        self.decks = [d for d in self.decks if d.id != deck_id]
        if self.selected_deck_id == deck_id:
            self.selected_deck_id = None
        self._emit(EventKind.DECK_DELETED, deck_id)
        return True

    # ------------------------------------------------------------------
    # Cards
    # ------------------------------------------------------------------

    def get_card(self, card_id: str) -> Card | None:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    def cards_in_deck(self, deck_id: str) -> list[Card]:
        return [c for c in self.cards if c.deck_id == deck_id]

    def create_card(self, deck_id: str, front: str, back: str) -> Card:
        """Create a card in an existing deck.

        Raises:
            ValidationError: if either side is blank or the deck is unknown.
        """
        front = (front or "").strip()
        back = (back or "").strip()
        if not front or not back:
            raise ValidationError("Both front and back are required")
        if self.get_deck(deck_id) is None:
            raise ValidationError(f"Deck '{deck_id}' does not exist")

        card = Card(
            id=generate_id(),
            deck_id=deck_id,
            front=front,
            back=back,
            created_at=now_iso(),
        )
        self.cards.append(card)
        self._emit(EventKind.CARD_CREATED, card.id)
        return card

    def update_card(self, card_id: str, front: str, back: str) -> Card | None:
        """Replace the text of a card. Returns None if the card does not exist.

        Raises:
            ValidationError: if either side is blank.
        """
        front = (front or "").strip()
        back = (back or "").strip()
        if not front or not back:
            raise ValidationError("Both front and back are required")

        card = self.get_card(card_id)
        if card is None:
            return None

        card.front = front
        card.back = back
        self._emit(EventKind.CARD_UPDATED, card.id)
        return card

    def delete_card(self, card_id: str) -> bool:
        if self.get_card(card_id) is None:
            return False
        self.cards = [c for c in self.cards if c.id != card_id]
        self._emit(EventKind.CARD_DELETED, card_id)
        return True

    def record_review(self, card_id: str, rating: Difficulty | str) -> Card | None:
        """Store a study rating on a card."""
        card = self.get_card(card_id)
        if card is None:
            return None

        card.difficulty = Difficulty.parse(rating)
        card.review_count += 1
        card.last_reviewed = now_iso()
        self._emit(EventKind.CARD_REVIEWED, card.id)
        return card

    def record_session_complete(self) -> int:
        self.total_sessions += 1
        self._emit(EventKind.SESSIONS_INCREMENTED)
        return self.total_sessions

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def count_cards_in_deck(self, deck_id: str) -> int:
        return len(self.cards_in_deck(deck_id))

    def mastery_percent(self, deck_id: str) -> int:
        """Share of a deck's cards rated easy, 0 for an empty deck."""
        deck_cards = self.cards_in_deck(deck_id)
        mastered = sum(1 for c in deck_cards if c.difficulty == Difficulty.EASY)
        return round_percent(mastered, len(deck_cards))

    def mastered_count(self) -> int:
        return self.difficulty_count(Difficulty.EASY)

    def search(self, query: str) -> list[Deck]:
        """Decks whose name, or any of whose cards, contains ``query``."""
        if not (query or "").strip():
            return list(self.decks)
        q = query.lower()

        matching_decks = {c.deck_id for c in self.cards if _matches(c, q)}
        return [
            d for d in self.decks
            if q in d.name.lower() or d.id in matching_decks
        ]

    def deck_cards(self, deck_id: str, query: str = "") -> list[Card]:
        """Cards of a deck, narrowed to those whose front or back contains ``query``."""
        deck_cards = self.cards_in_deck(deck_id)
        q = (query or "").lower()
        if q:
            deck_cards = [c for c in deck_cards if _matches(c, q)]
        return deck_cards

    def difficulty_count(self, kind: Difficulty | str) -> int:
        kind = Difficulty.parse(kind)
        # Cards loaded with an unknown difficulty are normalized to NEW
        return sum(1 for c in self.cards if Difficulty.parse(c.difficulty) == kind)

    def difficulty_percent(self, kind: Difficulty | str) -> int:
        return round_percent(self.difficulty_count(kind), len(self.cards))

    def stats(self) -> dict:
        """Summary numbers for the stats view."""
        return {
            "total_decks": len(self.decks),
            "total_cards": len(self.cards),
            "mastered": self.mastered_count(),
            "total_sessions": self.total_sessions,
            "difficulty": {
                d.value: {
                    "count": self.difficulty_count(d),
                    "percent": self.difficulty_percent(d),
                }
                for d in Difficulty
            },
        }

"""Data models for flashmaster."""

from __future__ import annotations

import random
import string
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

_BASE36 = string.digits + string.ascii_lowercase


class Difficulty(str, Enum):
    """Self-reported difficulty of a card, also used as a study rating."""

    NEW = "new"
    HARD = "hard"
    MEDIUM = "medium"
    EASY = "easy"

    @classmethod
    def parse(cls, value) -> Difficulty:
        """Normalize a stored or typed value, falling back to NEW."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.NEW

    @property
    def priority(self) -> int:
        """Study order: hard cards first, easy cards last."""
        return STUDY_PRIORITY[self]


STUDY_PRIORITY = {
    Difficulty.HARD: 0,
    Difficulty.NEW: 1,
    Difficulty.MEDIUM: 2,
    Difficulty.EASY: 3,
}


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    digits = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_id() -> str:
    """Millisecond timestamp in base 36 plus six random base-36 characters."""
    suffix = "".join(random.choices(_BASE36, k=6))
    return _to_base36(int(time.time() * 1000)) + suffix


def now_iso() -> str:
    return datetime.now().isoformat()


def _text(value, default: str = "") -> str:
    """Stored text as a string; null or missing becomes ``default``."""
    return default if value is None else str(value)


@dataclass
class Deck:
    """A named collection of cards."""

    id: str
    name: str
    emoji: str = "📚"
    color: str = "#6c5ce7"
    created_at: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "emoji": self.emoji,
            "color": self.color,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Deck:
        return cls(
            id=str(data["id"]),
            name=_text(data.get("name")),
            emoji=_text(data.get("emoji"), "📚"),
            color=_text(data.get("color"), "#6c5ce7"),
            created_at=_text(data.get("createdAt")),
        )


@dataclass
class Card:
    """A two-sided flashcard bound to a deck."""

    id: str
    deck_id: str
    front: str
    back: str
    difficulty: Difficulty = Difficulty.NEW
    review_count: int = 0
    last_reviewed: str | None = None
    created_at: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "deckId": self.deck_id,
            "front": self.front,
            "back": self.back,
            "difficulty": self.difficulty.value,
            "reviewCount": self.review_count,
            "lastReviewed": self.last_reviewed,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Card:
        return cls(
            id=str(data["id"]),
            deck_id=_text(data.get("deckId")),
            front=_text(data.get("front")),
            back=_text(data.get("back")),
            difficulty=Difficulty.parse(data.get("difficulty")),
            review_count=max(int(data.get("reviewCount") or 0), 0),
            last_reviewed=None if data.get("lastReviewed") is None else str(data["lastReviewed"]),
            created_at=_text(data.get("createdAt")),
        )


@dataclass
class Snapshot:
    """Everything that is persisted between runs."""

    decks: list[Deck] = field(default_factory=list)
    cards: list[Card] = field(default_factory=list)
    total_sessions: int = 0

    def to_dict(self) -> dict:
        return {
            "decks": [d.to_dict() for d in self.decks],
            "cards": [c.to_dict() for c in self.cards],
            "totalSessions": self.total_sessions,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Snapshot:
        return cls(
            decks=[Deck.from_dict(d) for d in data.get("decks") or []],
            cards=[Card.from_dict(c) for c in data.get("cards") or []],
            total_sessions=int(data.get("totalSessions") or 0),
        )

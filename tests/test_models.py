"""Tests for data models."""

import re

from flashmaster.models import (
    Card,
    Deck,
    Difficulty,
    Snapshot,
    generate_id,
)


class TestDifficulty:
    """Tests for the Difficulty enum."""

    def test_values(self):
        assert Difficulty.NEW == "new"
        assert Difficulty.HARD == "hard"
        assert Difficulty.MEDIUM == "medium"
        assert Difficulty.EASY == "easy"

    def test_exactly_four_variants(self):
        assert len(list(Difficulty)) == 4

    def test_parse_known(self):
        assert Difficulty.parse("easy") is Difficulty.EASY
        assert Difficulty.parse(" Hard ") is Difficulty.HARD
        assert Difficulty.parse(Difficulty.MEDIUM) is Difficulty.MEDIUM

    def test_parse_unknown_falls_back_to_new(self):
        assert Difficulty.parse("impossible") is Difficulty.NEW
        assert Difficulty.parse(None) is Difficulty.NEW
        assert Difficulty.parse("") is Difficulty.NEW

    def test_priority_order(self):
        ordered = sorted(Difficulty, key=lambda d: d.priority)
        assert ordered == [Difficulty.HARD, Difficulty.NEW, Difficulty.MEDIUM, Difficulty.EASY]


class TestGenerateId:
    def test_format(self):
        assert re.fullmatch(r"[0-9a-z]{7,}", generate_id())

    def test_unique(self):
        ids = {generate_id() for _ in range(200)}
        assert len(ids) == 200


class TestDeck:
    def test_defaults(self):
        deck = Deck(id="d1", name="Spanish")
        assert deck.emoji == "📚"
        assert deck.color == "#6c5ce7"
        assert deck.created_at == ""

    def test_to_dict_uses_stored_keys(self):
        deck = Deck(id="d1", name="Spanish", emoji="🌍", color="#00b894", created_at="2025-01-01T10:00:00")
        assert deck.to_dict() == {
            "id": "d1",
            "name": "Spanish",
            "emoji": "🌍",
            "color": "#00b894",
            "createdAt": "2025-01-01T10:00:00",
        }

    def test_from_dict_missing_fields(self):
        deck = Deck.from_dict({"id": "d1"})
        assert deck.name == ""
        assert deck.emoji == "📚"


class TestCard:
    def test_defaults(self):
        card = Card(id="c1", deck_id="d1", front="hola", back="hello")
        assert card.difficulty is Difficulty.NEW
        assert card.review_count == 0
        assert card.last_reviewed is None

    def test_from_dict(self):
        card = Card.from_dict({
            "id": "c1",
            "deckId": "d1",
            "front": "hola",
            "back": "hello",
            "difficulty": "hard",
            "reviewCount": 3,
            "lastReviewed": "2025-01-02T09:00:00",
            "createdAt": "2025-01-01T09:00:00",
        })
        assert card.deck_id == "d1"
        assert card.difficulty is Difficulty.HARD
        assert card.review_count == 3
        assert card.last_reviewed == "2025-01-02T09:00:00"

    def test_from_dict_normalizes_difficulty(self):
        card = Card.from_dict({"id": "c1", "deckId": "d1", "front": "a", "back": "b", "difficulty": "weird"})
        assert card.difficulty is Difficulty.NEW

    def test_from_dict_missing_counts(self):
        card = Card.from_dict({"id": "c1", "deckId": "d1", "front": "a", "back": "b", "reviewCount": None})
        assert card.review_count == 0

    def test_to_dict_difficulty_is_plain_string(self):
        card = Card(id="c1", deck_id="d1", front="a", back="b", difficulty=Difficulty.EASY)
        d = card.to_dict()
        assert d["difficulty"] == "easy"
        assert d["deckId"] == "d1"
        assert d["lastReviewed"] is None


class TestSnapshot:
    def test_empty(self):
        snapshot = Snapshot()
        assert snapshot.to_dict() == {"decks": [], "cards": [], "totalSessions": 0}

    def test_from_dict_partial(self):
        snapshot = Snapshot.from_dict({"decks": [{"id": "d1", "name": "A"}]})
        assert len(snapshot.decks) == 1
        assert snapshot.cards == []
        assert snapshot.total_sessions == 0

    def test_roundtrip(self):
        original = Snapshot(
            decks=[Deck(id="d1", name="Spanish")],
            cards=[Card(id="c1", deck_id="d1", front="hola", back="hello", review_count=2)],
            total_sessions=4,
        )
        assert Snapshot.from_dict(original.to_dict()) == original

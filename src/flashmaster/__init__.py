"""FlashMaster - flashcard decks and study sessions from the terminal."""

__version__ = "0.1.0"

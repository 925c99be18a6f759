"""Application state shared by the CLI and the study loop."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from . import paths
from .config import Config
from .events import ChangeEvent, EventBus
from .storage import load_snapshot, save_snapshot
from .store import FlashcardStore
from .study import StudySession


@dataclass
class AppState:
    """Everything one run of the application works on."""

    store: FlashcardStore
    session: StudySession
    events: EventBus
    data_file: Path
    config: Config = field(default_factory=Config)
    def save(self) -> None:
        save_snapshot(self.store.snapshot(), self.data_file)

    def _autosave(self, event: ChangeEvent) -> None:
        if event.kind.persistent:
            self.save()


def open_app(
    data_file: Path | None = None,
    config: Config | None = None,
    rng: random.Random | None = None,
) -> AppState:
    """Load saved data and wire up the store, session and autosave."""
    data_file = Path(data_file) if data_file is not None else paths.DATA_FILE
    events = EventBus()
    store = FlashcardStore(load_snapshot(data_file), events=events)
    session = StudySession(store, rng=rng, events=events)

    app = AppState(
        store=store,
        session=session,
        events=events,
        data_file=data_file,
        config=config or Config(),
    )
    events.subscribe(app._autosave)
    logger.debug(
        f"Loaded {len(store.decks)} deck(s) and {len(store.cards)} card(s) from {data_file}"
    )
    return app


def start_study_all(app: AppState) -> bool:
    """Study every card in every deck. Returns False if there are none."""
    return app.session.start(list(app.store.cards))


def start_study_deck(app: AppState, deck_id: str) -> bool:
    """Study one deck. Returns False if it has no cards."""
    return app.session.start(app.store.cards_in_deck(deck_id))

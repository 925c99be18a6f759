"""Persistent snapshot storage."""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger

from . import paths
from .models import Snapshot


def _resolve(path: Path | None) -> Path:
    return Path(path) if path is not None else paths.DATA_FILE


def save_snapshot(snapshot: Snapshot, path: Path | None = None) -> None:
    """Save decks, cards and the session counter to disk."""
    target = _resolve(path)
    paths.atomic_json_write(target, snapshot.to_dict())
    logger.debug(
        f"Saved {len(snapshot.decks)} deck(s), {len(snapshot.cards)} card(s) to {target}"
    )


def load_snapshot(path: Path | None = None) -> Snapshot:
    """
    Load the saved snapshot from disk.

    A missing or unreadable file yields an empty Snapshot; the problem is
    logged and never raised.
    """
    target = _resolve(path)

    if not target.exists():
        return Snapshot()

    try:
        with open(target, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")
        return Snapshot.from_dict(data)
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.warning(f"Failed to load data from {target}: {e}")
        return Snapshot()


def clear_snapshot(path: Path | None = None) -> bool:
    """Delete saved data. Returns True if a file was removed."""
    target = _resolve(path)
    if target.exists():
        target.unlink()
        return True
    return False

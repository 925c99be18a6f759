"""Centralized storage paths for flashmaster."""

import json
import os
import tempfile
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Base data directory for all persistent storage
DATA_DIR = Path(
    os.environ.get("FLASHMASTER_HOME")
    or Path(__file__).parent.parent.parent / ".flashmaster"
)

# Configuration
CONFIG_FILE = DATA_DIR / "config.json"

# Decks, cards and session counter
DATA_FILE = DATA_DIR / "flashmaster_data.json"



def ensure_data_dir() -> None:
    """Ensure the data directory exists."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def atomic_json_write(path: Path, data, *, indent: int = 2, ensure_ascii: bool = False) -> None:
    """Write JSON data to a file atomically.

    Writes to a temporary file in the same directory, then renames it
    to the target path so a crash mid-write never leaves a truncated file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=ensure_ascii)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise

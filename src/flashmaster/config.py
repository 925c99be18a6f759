"""Configuration management for flashmaster."""

import json
import shutil
from dataclasses import dataclass, field, asdict

from loguru import logger

from .paths import DATA_DIR, CONFIG_FILE, atomic_json_write

# Picker options offered when creating or editing a deck
DECK_EMOJIS: list[str] = [
    "📚", "🧠", "💻", "🌍", "🔬", "🎨", "🎵", "📐",
    "🏛️", "💡", "🧪", "📖", "🚀", "⚡", "🎯", "🏆",
]
DECK_COLORS: list[str] = [
    "#6c5ce7", "#00b894", "#e17055", "#fdcb6e",
    "#0984e3", "#e84393", "#00cec9", "#a29bfe",
]


@dataclass
class Config:
    """Application configuration."""

    default_emoji: str = "📚"
    default_color: str = "#6c5ce7"
    emojis: list[str] = field(default_factory=lambda: list(DECK_EMOJIS))
    colors: list[str] = field(default_factory=lambda: list(DECK_COLORS))
    confirm_deletes: bool = True


def load_config() -> Config:
    """Load config from disk, creating defaults if needed."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)

    if CONFIG_FILE.exists():
        try:
            with open(CONFIG_FILE, encoding="utf-8") as f:
                data = json.load(f)
            return Config(
                **{k: v for k, v in data.items() if k in Config.__dataclass_fields__}
            )
        except (json.JSONDecodeError, TypeError, AttributeError) as e:
            logger.warning(f"Config file {CONFIG_FILE} is unreadable, using defaults: {e}")
            # Back up corrupted config before overwriting with defaults
            backup_path = CONFIG_FILE.with_suffix(".json.bak")
            try:
                shutil.copy2(CONFIG_FILE, backup_path)
            except OSError:
                pass

    # Return defaults and save them
    config = Config()
    save_config(config)
    return config


def save_config(config: Config) -> None:
    """Save config to disk."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    atomic_json_write(CONFIG_FILE, asdict(config))


def set_config_value(config: Config, key: str, value: str) -> None:
    """Set a scalar config value from its string form and save config.

    Raises:
        KeyError: if ``key`` is not a settable option.
    """
    if key in ("default_emoji", "default_color"):
        setattr(config, key, value)
    elif key == "confirm_deletes":
        config.confirm_deletes = value.strip().lower() in ("1", "true", "yes", "on")
    else:
        raise KeyError(key)
    save_config(config)


def format_config_display(config: Config) -> str:
    """Format config for display."""
    lines = []
    lines.append("FlashMaster Settings")
    lines.append("=" * 50)
    lines.append(f"  default_emoji:   {config.default_emoji}")
    lines.append(f"  default_color:   {config.default_color}")
    lines.append(f"  confirm_deletes: {'yes' if config.confirm_deletes else 'no'}")
    lines.append(f"  emojis:          {' '.join(config.emojis)}")
    lines.append(f"  colors:          {' '.join(config.colors)}")
    lines.append("=" * 50)
    return "\n".join(lines)

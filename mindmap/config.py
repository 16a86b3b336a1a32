"""
Configuration management for the mind-map board.

Handles persistent configuration including:
- Palette override file location
- Random seed for child placement
- Log level

Config is stored in config.json next to the executable/project root.
Environment variables always win over the file.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from mindmap.paths import get_config_path, get_default_palette_path

logger = logging.getLogger(__name__)

PALETTE_ENV = "MINDMAP_PALETTE_FILE"
SEED_ENV = "MINDMAP_SEED"
LOG_LEVEL_ENV = "MINDMAP_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "INFO"


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration from config.json."""
    config_path = config_path or get_config_path()
    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Ignoring unreadable config {config_path}: {e}")
            return {}
    return {}


def save_config(config: dict, config_path: Optional[Path] = None) -> None:
    """Save configuration to config.json."""
    config_path = config_path or get_config_path()
    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config, f, indent=2)


def get_palette_path(config_path: Optional[Path] = None) -> Path:
    """
    Get the palette override file.

    Priority:
    1. Environment variable MINDMAP_PALETTE_FILE
    2. 'palette_file' in config.json
    3. palette.yaml next to the project root
    """
    env_path = os.environ.get(PALETTE_ENV)
    if env_path:
        return Path(env_path)

    config = load_config(config_path)
    if config.get("palette_file"):
        return Path(config["palette_file"])
    return get_default_palette_path()


def get_random_seed(config_path: Optional[Path] = None) -> Optional[int]:
    """
    Get the seed for child placement, or None for an unseeded generator.

    Priority:
    1. Environment variable MINDMAP_SEED
    2. 'random_seed' in config.json
    """
    raw = os.environ.get(SEED_ENV)
    if raw is None:
        raw = load_config(config_path).get("random_seed")
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-integer random seed: {raw!r}")
        return None


def get_log_level(config_path: Optional[Path] = None) -> str:
    """Return the configured log level name (env first, then config.json)."""
    level = os.environ.get(LOG_LEVEL_ENV) or load_config(config_path).get("log_level")
    level = str(level or DEFAULT_LOG_LEVEL).upper()
    if not isinstance(logging.getLevelName(level), int):
        return DEFAULT_LOG_LEVEL
    return level

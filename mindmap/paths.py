"""
Path utilities for the mind-map board.

Handles path resolution for both development mode and frozen (PyInstaller) executables.
- In development: paths are relative to the project root
- When frozen: paths are relative to the executable location

External files (config.json, palette.yaml) live NEXT TO the executable, not bundled inside.
"""

import sys
from pathlib import Path


def get_app_dir() -> Path:
    """
    Get the application directory.

    - In development: the project root (parent of mindmap/)
    - When frozen: the directory containing the executable
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    else:
        return Path(__file__).parent.parent


def get_config_path() -> Path:
    """Get the path to the config file (palette override, seed, log level)."""
    return get_app_dir() / "config.json"


def get_default_palette_path() -> Path:
    """Get the path of the optional palette override file."""
    return get_app_dir() / "palette.yaml"

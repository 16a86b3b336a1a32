"""
Glyph and color palettes for mind-map nodes.

The model never hardcodes these lists; hosts inject a Palette. The defaults
below can be replaced by a YAML file with `glyphs:` and `colors:` lists:

    glyphs: ["💡", "🚀"]
    colors: ["#3b82f6", "#ef4444"]
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_GLYPHS: List[str] = [
    "💡", "🚀", "📝", "🎯", "⚡", "🌈",
    "🔥", "⚙️", "🧩", "📚", "🧠", "🔍",
]

DEFAULT_COLORS: List[str] = [
    "#3b82f6",  # blue (root)
    "#ef4444",
    "#10b981",
    "#f59e0b",
    "#8b5cf6",
    "#ec4899",
    "#2dd4bf",
    "#64748b",
]

# Node toolbar only offers the head of each palette
QUICK_COLOR_COUNT = 4
QUICK_GLYPH_COUNT = 5

_HEX_COLOR = re.compile(r'^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')


@dataclass
class Palette:
    """Ordered glyph and color tokens offered to the user."""
    glyphs: List[str] = field(default_factory=lambda: list(DEFAULT_GLYPHS))
    colors: List[str] = field(default_factory=lambda: list(DEFAULT_COLORS))

    def __post_init__(self):
        if not self.glyphs:
            raise ValueError("Glyph palette must not be empty")
        if not self.colors:
            raise ValueError("Color palette must not be empty")

    @property
    def quick_colors(self) -> List[str]:
        return self.colors[:QUICK_COLOR_COUNT]

    @property
    def quick_glyphs(self) -> List[str]:
        return self.glyphs[:QUICK_GLYPH_COUNT]


def _clean_glyphs(raw, path: Path) -> Optional[List[str]]:
    if not isinstance(raw, list):
        return None
    glyphs = [g.strip() for g in raw if isinstance(g, str) and g.strip()]
    if len(glyphs) != len(raw):
        logger.warning(f"Dropped {len(raw) - len(glyphs)} invalid glyph entries in {path}")
    return glyphs or None


def _clean_colors(raw, path: Path) -> Optional[List[str]]:
    if not isinstance(raw, list):
        return None
    colors = [c.lower() for c in raw if isinstance(c, str) and _HEX_COLOR.match(c)]
    if len(colors) != len(raw):
        logger.warning(f"Dropped {len(raw) - len(colors)} invalid color entries in {path}")
    return colors or None


def load_palette(path: Optional[Path] = None) -> Palette:
    """
    Load a palette override file, falling back to the defaults.

    Each list is taken independently: a file that only defines `colors`
    keeps the default glyphs. Missing or broken files yield the defaults.
    """
    if path is None or not Path(path).exists():
        return Palette()

    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError) as e:
        logger.warning(f"Invalid palette file {path}: {e}")
        return Palette()

    if not isinstance(data, dict):
        logger.warning(f"Palette file {path} must contain a mapping")
        return Palette()

    glyphs = _clean_glyphs(data.get("glyphs"), path) or list(DEFAULT_GLYPHS)
    colors = _clean_colors(data.get("colors"), path) or list(DEFAULT_COLORS)
    logger.info(f"Loaded palette from {path}: {len(glyphs)} glyphs, {len(colors)} colors")
    return Palette(glyphs=glyphs, colors=colors)

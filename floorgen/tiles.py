"""Tile kinds and the tile catalog.

Tiles are immutable values; the grid stores them by position and replaces
them wholesale rather than mutating in place, so the catalog instances below
can be shared freely.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

RGB = Tuple[int, int, int]


class TileKind(Enum):
    WALL = "wall"
    FLOOR = "floor"
    STAIRS = "stairs"
    WATER = "water"
    LAVA = "lava"
    PILLAR = "pillar"
    DOOR = "door"
    SPECIAL_FLOOR = "special_floor"


@dataclass(frozen=True)
class Tile:
    kind: TileKind
    walkable: bool
    opaque: bool
    color: RGB
    glyph: str
    theme: Optional[str] = None

    @property
    def special(self) -> Optional[str]:
        """Gameplay/render tag; ``None`` for plain wall and floor."""
        if self.kind in (TileKind.WALL, TileKind.FLOOR):
            return None
        if self.kind is TileKind.SPECIAL_FLOOR:
            return self.theme
        return self.kind.value

    def to_dict(self):
        return {
            "kind": self.kind.value,
            "walkable": self.walkable,
            "opaque": self.opaque,
            "color": list(self.color),
            "glyph": self.glyph,
            "special": self.special,
        }


WALL = Tile(TileKind.WALL, walkable=False, opaque=True, color=(100, 100, 100), glyph="#")
FLOOR = Tile(TileKind.FLOOR, walkable=True, opaque=False, color=(50, 50, 50), glyph=".")
STAIRS = Tile(TileKind.STAIRS, walkable=True, opaque=False, color=(255, 215, 0), glyph=">")
WATER = Tile(TileKind.WATER, walkable=False, opaque=False, color=(40, 90, 200), glyph="~")
LAVA = Tile(TileKind.LAVA, walkable=False, opaque=False, color=(220, 70, 20), glyph="~")
PILLAR = Tile(TileKind.PILLAR, walkable=False, opaque=True, color=(140, 140, 130), glyph="O")
DOOR = Tile(TileKind.DOOR, walkable=True, opaque=True, color=(139, 69, 19), glyph="+")

# theme -> (color, glyph) for SPECIAL_FLOOR tiles
FLOOR_THEMES: Dict[str, Tuple[RGB, str]] = {
    "treasure": ((120, 100, 30), "."),
    "danger": ((90, 30, 30), "."),
    "shrine": ((80, 60, 120), "."),
    "lava-chamber": ((110, 45, 20), "."),
    "ice-chamber": ((150, 200, 230), "."),
    "heated": ((160, 80, 40), ","),
    "secret": ((70, 70, 90), "."),
}

_SPECIAL_FLOORS: Dict[str, Tile] = {
    theme: Tile(TileKind.SPECIAL_FLOOR, walkable=True, opaque=False, color=color, glyph=glyph, theme=theme)
    for theme, (color, glyph) in FLOOR_THEMES.items()
}


def special_floor(theme: str) -> Tile:
    try:
        return _SPECIAL_FLOORS[theme]
    except KeyError:
        raise ValueError(f"Unknown floor theme {theme!r}") from None


__all__ = [
    "TileKind",
    "Tile",
    "WALL",
    "FLOOR",
    "STAIRS",
    "WATER",
    "LAVA",
    "PILLAR",
    "DOOR",
    "FLOOR_THEMES",
    "special_floor",
]

"""Fixed-size tile grid for one floor."""
from __future__ import annotations

from typing import Iterator, List, Tuple

from .tiles import FLOOR, WALL, Tile, TileKind

Coord2D = Tuple[int, int]

DIRS4: Tuple[Coord2D, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))
DIRS8: Tuple[Coord2D, ...] = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0), (1, 0),
    (-1, 1), (0, 1), (1, 1),
)


class Grid:
    """Column-major tile array (``tiles[x][y]``), every cell starts as WALL."""

    __slots__ = ("width", "height", "tiles")

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.tiles: List[List[Tile]] = [[WALL for _ in range(height)] for _ in range(width)]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def __getitem__(self, pos: Coord2D) -> Tile:
        x, y = pos
        if not self.in_bounds(x, y):
            raise IndexError(f"({x},{y}) outside {self.width}x{self.height} grid")
        return self.tiles[x][y]

    def __setitem__(self, pos: Coord2D, tile: Tile) -> None:
        x, y = pos
        if not self.in_bounds(x, y):
            raise IndexError(f"({x},{y}) outside {self.width}x{self.height} grid")
        self.tiles[x][y] = tile

    def __eq__(self, other) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (self.width, self.height, self.tiles) == (other.width, other.height, other.tiles)

    def is_walkable(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self.tiles[x][y].walkable

    def carve(self, x: int, y: int) -> bool:
        """Turn a non-walkable in-bounds cell into FLOOR. Returns True if it changed."""
        if not self.in_bounds(x, y) or self.tiles[x][y].walkable:
            return False
        self.tiles[x][y] = FLOOR
        return True

    def coords(self) -> Iterator[Coord2D]:
        for x in range(self.width):
            for y in range(self.height):
                yield x, y

    def walkable_coords(self) -> List[Coord2D]:
        return [(x, y) for x, y in self.coords() if self.tiles[x][y].walkable]

    def count(self, kind: TileKind) -> int:
        return sum(1 for col in self.tiles for t in col if t.kind is kind)

    def neighbors4(self, x: int, y: int) -> Iterator[Coord2D]:
        for dx, dy in DIRS4:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                yield nx, ny

    def to_ascii(self) -> str:
        rows = []
        for y in range(self.height):
            rows.append("".join(self.tiles[x][y].glyph for x in range(self.width)))
        return "\n".join(rows)


__all__ = ["Grid", "Coord2D", "DIRS4", "DIRS8"]

"""Cellular-automata cave pass."""
from __future__ import annotations

import random
from typing import List

from .connectivity import extract_regions
from .grid import DIRS8, Grid
from .rooms import Room, RoomShape
from .tiles import FLOOR, WALL

CaveMask = List[List[bool]]  # mask[x][y] is True for floor


def _is_border(x: int, y: int, width: int, height: int) -> bool:
    return x == 0 or y == 0 or x == width - 1 or y == height - 1


def seed_mask(rng: random.Random, width: int, height: int, fill: float) -> CaveMask:
    mask = [[rng.random() < fill for _ in range(height)] for _ in range(width)]
    for x in range(width):
        for y in range(height):
            if _is_border(x, y, width, height):
                mask[x][y] = False
    return mask


def _wall_neighbors(mask: CaveMask, x: int, y: int, width: int, height: int) -> int:
    walls = 0
    for dx, dy in DIRS8:
        nx, ny = x + dx, y + dy
        if not (0 <= nx < width and 0 <= ny < height) or not mask[nx][ny]:
            walls += 1
    return walls


def step(mask: CaveMask, width: int, height: int) -> CaveMask:
    """One synchronous automaton generation.

    >= 5 wall neighbours (out of bounds counts as wall) -> wall, <= 3 -> floor,
    exactly 4 keeps the previous state. Border cells are always wall.
    """
    out = [[False] * height for _ in range(width)]
    for x in range(width):
        for y in range(height):
            if _is_border(x, y, width, height):
                continue
            walls = _wall_neighbors(mask, x, y, width, height)
            if walls >= 5:
                out[x][y] = False
            elif walls <= 3:
                out[x][y] = True
            else:
                out[x][y] = mask[x][y]
    return out


def generate_mask(rng: random.Random, width: int, height: int, fill: float = 0.45, iterations: int = 5) -> CaveMask:
    mask = seed_mask(rng, width, height, fill)
    for _ in range(iterations):
        mask = step(mask, width, height)
    return mask


def apply_mask(grid: Grid, mask: CaveMask, overwrite: bool = True) -> None:
    """Write the mask to the grid.

    With ``overwrite`` every cell becomes FLOOR or WALL; without it only
    floor cells are carved and existing floors are left alone.
    """
    for x in range(grid.width):
        for y in range(grid.height):
            if mask[x][y]:
                grid.tiles[x][y] = FLOOR
            elif overwrite:
                grid.tiles[x][y] = WALL


def cave_rooms(mask: CaveMask, width: int, height: int, min_region: int = 16) -> List[Room]:
    """Synthetic rooms (bounding boxes) for every floor region of at least ``min_region`` cells."""
    regions = extract_regions(lambda x, y: mask[x][y], width, height, min_region)
    return [
        Room(r.bbox.x, r.bbox.y, r.bbox.w, r.bbox.h, shape=RoomShape.CAVE, region=frozenset(r.cells))
        for r in regions
    ]


__all__ = ["CaveMask", "seed_mask", "step", "generate_mask", "apply_mask", "cave_rooms"]

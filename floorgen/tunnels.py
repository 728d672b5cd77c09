"""Corridor carving primitives.

All corridors are 4-connected so that orthogonal movement can follow them:
L-shaped corridors are two axis-aligned runs sharing a corner, and straight
Bresenham lines get an extra orthogonal cell on every diagonal step.
"""
from __future__ import annotations

import random
from typing import Iterable, List

from .grid import Coord2D, Grid


def straight_run(a: Coord2D, b: Coord2D) -> List[Coord2D]:
    """Axis-aligned run from ``a`` to ``b`` inclusive (``a`` and ``b`` share x or y)."""
    (x1, y1), (x2, y2) = a, b
    if x1 == x2:
        dy = 1 if y2 >= y1 else -1
        return [(x1, yy) for yy in range(y1, y2 + dy, dy)]
    if y1 == y2:
        dx = 1 if x2 >= x1 else -1
        return [(xx, y1) for xx in range(x1, x2 + dx, dx)]
    raise ValueError(f"{a} and {b} are not axis aligned")


def l_path(a: Coord2D, b: Coord2D, horizontal_first: bool) -> List[Coord2D]:
    corner = (b[0], a[1]) if horizontal_first else (a[0], b[1])
    return straight_run(a, corner) + straight_run(corner, b)[1:]


def bresenham(a: Coord2D, b: Coord2D) -> List[Coord2D]:
    x0, y0 = a
    x1, y1 = b
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    cells = [(x0, y0)]
    while (x0, y0) != (x1, y1):
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
            cells.append((x0, y0))
        if e2 <= dx:
            err += dx
            y0 += sy
            cells.append((x0, y0))
    return cells


def carve_path(grid: Grid, cells: Iterable[Coord2D]) -> int:
    """Carve FLOOR along ``cells``; out-of-bounds cells are skipped. Returns cells changed."""
    return sum(1 for x, y in cells if grid.carve(x, y))


def carve_l_corridor(grid: Grid, a: Coord2D, b: Coord2D, rng: random.Random) -> int:
    return carve_path(grid, l_path(a, b, horizontal_first=rng.random() < 0.5))


def carve_corridor(grid: Grid, a: Coord2D, b: Coord2D, rng: random.Random, l_chance: float = 0.7) -> int:
    """One room-to-room edge: L-shaped with probability ``l_chance``, else a straight line."""
    if rng.random() < l_chance:
        return carve_l_corridor(grid, a, b, rng)
    return carve_path(grid, bresenham(a, b))


__all__ = [
    "straight_run",
    "l_path",
    "bresenham",
    "carve_path",
    "carve_l_corridor",
    "carve_corridor",
]

"""Flood fill, room spanning tree and reachability repair.

All traversals are iterative (deque based) so large floors never hit the
recursion limit.
"""
from __future__ import annotations

import random
from collections import deque
from typing import Callable, List, NamedTuple, Optional, Set, Tuple

from .config import GenerationConfig
from .grid import DIRS4, Coord2D, Grid
from .logging_utils import get_logger
from .rooms import Rect, Room
from .tunnels import carve_corridor, carve_l_corridor

log = get_logger("connectivity")

Edge = Tuple[int, int]


class Region(NamedTuple):
    cells: Set[Coord2D]
    bbox: Rect


class RepairReport(NamedTuple):
    coverage_before: float
    coverage: float
    repairs: int
    tiles_carved: int


def flood_region(
    start: Coord2D,
    passable: Callable[[int, int], bool],
    width: int,
    height: int,
    seen: Optional[Set[Coord2D]] = None,
) -> Set[Coord2D]:
    """4-directional fill from ``start`` over ``passable`` cells.

    When ``seen`` is given it is extended in place and cells already in it act
    as a boundary; the return value is only the newly reached cells.
    """
    if seen is None:
        seen = set()
    if not passable(*start) or start in seen:
        return set()
    q = deque([start])
    seen.add(start)
    found = {start}
    while q:
        cx, cy = q.popleft()
        for dx, dy in DIRS4:
            nx, ny = cx + dx, cy + dy
            if 0 <= nx < width and 0 <= ny < height and (nx, ny) not in seen and passable(nx, ny):
                seen.add((nx, ny))
                found.add((nx, ny))
                q.append((nx, ny))
    return found


def flood_fill(grid: Grid, start: Coord2D, seen: Optional[Set[Coord2D]] = None) -> Set[Coord2D]:
    return flood_region(start, grid.is_walkable, grid.width, grid.height, seen)


def extract_regions(
    passable: Callable[[int, int], bool],
    width: int,
    height: int,
    min_size: int = 1,
) -> List[Region]:
    """All connected regions of at least ``min_size`` cells, in scan order."""
    seen: Set[Coord2D] = set()
    regions: List[Region] = []
    for x in range(width):
        for y in range(height):
            if (x, y) in seen or not passable(x, y):
                continue
            cells = flood_region((x, y), passable, width, height, seen)
            if len(cells) < min_size:
                continue
            xs = [c[0] for c in cells]
            ys = [c[1] for c in cells]
            bbox = Rect(min(xs), min(ys), max(xs) - min(xs) + 1, max(ys) - min(ys) + 1)
            regions.append(Region(cells, bbox))
    return regions


def coverage(grid: Grid, start: Coord2D) -> float:
    total = len(grid.walkable_coords())
    if total == 0:
        return 1.0
    return len(flood_fill(grid, start)) / total


def _distance2(a: Coord2D, b: Coord2D) -> int:
    return (a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2


def connect_rooms(
    grid: Grid,
    rooms: List[Room],
    rng: random.Random,
    config: GenerationConfig,
) -> List[Edge]:
    """Carve a minimum spanning tree over room centers plus a few loop edges.

    The tree grows greedily from room 0, always adding the closest
    (in-tree, out-of-tree) pair by Euclidean center distance; ties go to the
    first pair in insertion order. Returns the carved edges as index pairs.
    """
    n = len(rooms)
    if n < 2:
        return []
    centers = [r.center for r in rooms]
    edges: List[Edge] = []

    def link(i: int, j: int) -> None:
        carve_corridor(grid, centers[i], centers[j], rng, config.l_corridor_chance)
        rooms[i].connected = True
        rooms[j].connected = True
        edges.append((i, j))

    in_tree = [0]
    remaining = list(range(1, n))
    while remaining:
        best = None
        for i in in_tree:
            for j in remaining:
                d = _distance2(centers[i], centers[j])
                if best is None or d < best[0]:
                    best = (d, i, j)
        _, i, j = best
        link(i, j)
        in_tree.append(j)
        remaining.remove(j)

    for _ in range(int(n * config.extra_edge_ratio)):
        i = rng.randrange(n)
        j = rng.randrange(n - 1)
        if j >= i:
            j += 1
        if rng.random() < config.extra_edge_chance:
            link(i, j)
    return edges


def validate_and_repair(
    grid: Grid,
    start: Coord2D,
    rng: random.Random,
    config: GenerationConfig,
) -> RepairReport:
    """Make every walkable tile reachable from ``start``.

    Each unreached walkable tile (scan order) gets an L corridor to the
    Manhattan-nearest reached tile, after which the reached set grows by a
    fill from that tile. Coverage is 1.0 on return.
    """
    grid.carve(*start)
    visited = flood_fill(grid, start)
    total = len(grid.walkable_coords())
    before = len(visited) / total
    if before < config.coverage_warn_threshold:
        log.warn(event="low_coverage", coverage=round(before, 3), reached=len(visited), walkable=total)
    repairs = 0
    carved = 0
    for x, y in grid.coords():
        if (x, y) in visited or not grid.tiles[x][y].walkable:
            continue
        nearest = min(visited, key=lambda p: (abs(p[0] - x) + abs(p[1] - y), p))
        carved += carve_l_corridor(grid, (x, y), nearest, rng)
        flood_fill(grid, (x, y), visited)
        repairs += 1
    total = len(grid.walkable_coords())
    after = len(visited) / total
    if repairs:
        log.debug(event="reachability_repair", repairs=repairs, carved=carved, before=round(before, 3), after=after)
    return RepairReport(before, after, repairs, carved)


__all__ = [
    "Region",
    "RepairReport",
    "flood_region",
    "flood_fill",
    "extract_regions",
    "coverage",
    "connect_rooms",
    "validate_and_repair",
]

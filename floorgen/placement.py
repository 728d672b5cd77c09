"""Entry stitching, exit placement and spawn-point selection."""
from __future__ import annotations

import random
from collections import deque
from typing import Dict, Iterable, List, Optional, Tuple

from .grid import DIRS4, Coord2D, Grid
from .rooms import Room
from .tiles import STAIRS, TileKind
from .tunnels import carve_l_corridor


def clamp_start(pos: Coord2D, width: int, height: int) -> Coord2D:
    """Pull a coordinate from a previous floor into ``[0,width) x [0,height)``."""
    x, y = pos
    return (min(max(x, 0), width - 1), min(max(y, 0), height - 1))


def nearest_room_center(rooms: List[Room], pos: Coord2D) -> Optional[Coord2D]:
    if not rooms:
        return None
    px, py = pos
    return min((r.center for r in rooms), key=lambda c: abs(px - c[0]) + abs(py - c[1]))


def connect_entry(grid: Grid, rooms: List[Room], start: Coord2D, rng: random.Random) -> Optional[Coord2D]:
    """Force ``start`` to floor and carve an L corridor to the nearest room center.

    Returns the room center that was joined, or ``None`` when there are no rooms.
    """
    grid.carve(*start)
    target = nearest_room_center(rooms, start)
    if target is not None:
        carve_l_corridor(grid, start, target, rng)
    return target


def farthest_reachable(grid: Grid, start: Coord2D) -> Tuple[Coord2D, int]:
    """Breadth-first search; the first tile discovered at the maximum depth wins."""
    if not grid.is_walkable(*start):
        return start, 0
    dist: Dict[Coord2D, int] = {start: 0}
    q = deque([start])
    best, best_d = start, 0
    while q:
        cx, cy = q.popleft()
        cd = dist[(cx, cy)]
        if cd > best_d:
            best, best_d = (cx, cy), cd
        for dx, dy in DIRS4:
            nx, ny = cx + dx, cy + dy
            if (nx, ny) not in dist and grid.is_walkable(nx, ny):
                dist[(nx, ny)] = cd + 1
                q.append((nx, ny))
    return best, best_d


def place_exit(grid: Grid, start: Coord2D) -> Coord2D:
    """Stamp the single STAIRS tile as far from ``start`` as the floor allows.

    A start with no reachable neighbours at all (1x1 floors) gets the stairs on
    the start tile itself.
    """
    far, _ = farthest_reachable(grid, start)
    if far == start:
        for nx, ny in grid.neighbors4(*start):
            if grid.is_walkable(nx, ny):
                far = (nx, ny)
                break
    grid[far] = STAIRS
    return far


def spawn_points(
    grid: Grid,
    rooms: List[Room],
    rng: random.Random,
    count: int,
    avoid: Iterable[Coord2D] = (),
    attempts_per_point: int = 20,
) -> List[Coord2D]:
    """Distinct walkable points inside room boxes, never on ``avoid`` or the stairs.

    May return fewer than ``count`` points on cramped floors.
    """
    blocked = set(avoid)
    points: List[Coord2D] = []
    if not rooms:
        return points
    attempts = count * attempts_per_point
    while len(points) < count and attempts > 0:
        attempts -= 1
        room = rng.choice(rooms)
        x = rng.randint(room.x, room.x + room.width - 1)
        y = rng.randint(room.y, room.y + room.height - 1)
        if (x, y) in blocked or not grid.is_walkable(x, y):
            continue
        if grid.tiles[x][y].kind is TileKind.STAIRS:
            continue
        blocked.add((x, y))
        points.append((x, y))
    return points


__all__ = [
    "clamp_start",
    "nearest_room_center",
    "connect_entry",
    "farthest_reachable",
    "place_exit",
    "spawn_points",
]

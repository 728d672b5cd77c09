"""Hazard and decoration pass run on a finished, fully connected grid.

Everything here is additive. Obstacles (water, lava, pillars) are only
dropped on interior tiles: tiles whose eight neighbours are all walkable.
Those neighbours form a 4-connected ring, so any path through the tile can
step around it and blocking one such tile at a time never disconnects the
floor.
"""
from __future__ import annotations

import random
from typing import Dict, List, NamedTuple, Optional, Tuple

from .config import GenerationConfig
from .grid import DIRS4, DIRS8, Coord2D, Grid
from .logging_utils import get_logger
from .rooms import Rect, Room
from .tiles import DOOR, LAVA, PILLAR, WATER, Tile, TileKind, special_floor

log = get_logger("features")

SPECIAL_ROOM_TYPES = ["treasure", "danger", "shrine", "lava-chamber", "ice-chamber"]
SECRET_ROOM_SIZE = 3


class DecorationReport(NamedTuple):
    water: int
    lava: int
    heated: int
    pillars: int
    special_rooms: Dict[int, str]
    secret_room: Optional[Rect]


def is_interior(grid: Grid, x: int, y: int) -> bool:
    for dx, dy in DIRS8:
        if not grid.is_walkable(x + dx, y + dy):
            return False
    return True


def _obstacle_ok(grid: Grid, x: int, y: int, start: Coord2D, kinds: Tuple[TileKind, ...]) -> bool:
    if (x, y) == start or not grid.in_bounds(x, y):
        return False
    return grid.tiles[x][y].kind in kinds and is_interior(grid, x, y)


def _candidates(grid: Grid, cells, start: Coord2D, kinds: Tuple[TileKind, ...]) -> List[Coord2D]:
    return [(x, y) for x, y in cells if _obstacle_ok(grid, x, y, start, kinds)]


def _pool_ok(grid: Grid, pool: List[Coord2D], start: Coord2D) -> bool:
    """Every pool cell is plain floor and every cell bordering the pool is walkable.

    A pool is a seed plus some of its 4-neighbours, so its border ring is
    4-connected and flooding the pool cannot cut the floor.
    """
    cells = set(pool)
    if start in cells:
        return False
    for x, y in pool:
        if not grid.in_bounds(x, y) or grid.tiles[x][y].kind is not TileKind.FLOOR:
            return False
        for dx, dy in DIRS8:
            n = (x + dx, y + dy)
            if n not in cells and not grid.is_walkable(*n):
                return False
    return True


def place_pool(grid: Grid, rng: random.Random, start: Coord2D, tile: Tile, spread: float = 0.5) -> List[Coord2D]:
    """Drop ``tile`` on a random interior floor tile and maybe its 4-neighbours."""
    options = _candidates(grid, grid.coords(), start, (TileKind.FLOOR,))
    if not options:
        return []
    sx, sy = rng.choice(options)
    pool = [(sx, sy)]
    for dx, dy in DIRS4:
        grown = pool + [(sx + dx, sy + dy)]
        if rng.random() < spread and _pool_ok(grid, grown, start):
            pool = grown
    for x, y in pool:
        grid.tiles[x][y] = tile
    return pool


def heat_halo(grid: Grid, rng: random.Random, cell: Coord2D, chance: float) -> int:
    heated = 0
    x, y = cell
    for dx, dy in DIRS8:
        nx, ny = x + dx, y + dy
        if grid.in_bounds(nx, ny) and grid.tiles[nx][ny].kind is TileKind.FLOOR and rng.random() < chance:
            grid.tiles[nx][ny] = special_floor("heated")
            heated += 1
    return heated


def _secret_site(grid: Grid, room: Room, side: Coord2D) -> Optional[Tuple[Coord2D, Coord2D, Rect]]:
    cx, cy = room.center
    size = SECRET_ROOM_SIZE
    if side == (1, 0):
        inner, door = (room.x + room.width - 1, cy), (room.x + room.width, cy)
        box = Rect(door[0] + 1, cy - 1, size, size)
    elif side == (-1, 0):
        inner, door = (room.x, cy), (room.x - 1, cy)
        box = Rect(door[0] - size, cy - 1, size, size)
    elif side == (0, 1):
        inner, door = (cx, room.y + room.height - 1), (cx, room.y + room.height)
        box = Rect(cx - 1, door[1] + 1, size, size)
    else:
        inner, door = (cx, room.y), (cx, room.y - 1)
        box = Rect(cx - 1, door[1] - size, size, size)
    if not grid.is_walkable(*inner):
        return None
    # box plus a one-tile ring (which holds the door) must be in bounds and solid
    for x in range(box.x - 1, box.x + box.w + 1):
        for y in range(box.y - 1, box.y + box.h + 1):
            if not grid.in_bounds(x, y) or grid.is_walkable(x, y):
                return None
    return inner, door, box


def place_secret_room(grid: Grid, rooms: List[Room], rng: random.Random) -> Optional[Rect]:
    order = list(rooms)
    rng.shuffle(order)
    for room in order:
        sides = list(DIRS4)
        rng.shuffle(sides)
        for side in sides:
            site = _secret_site(grid, room, side)
            if site is None:
                continue
            _, door, box = site
            for x in range(box.x, box.x + box.w):
                for y in range(box.y, box.y + box.h):
                    grid.tiles[x][y] = special_floor("secret")
            grid.tiles[door[0]][door[1]] = DOOR
            return box
    return None


def theme_room(grid: Grid, room: Room, theme: str) -> None:
    tile = special_floor(theme)
    for x, y in room.cells():
        if grid.in_bounds(x, y) and grid.tiles[x][y].kind is TileKind.FLOOR:
            grid.tiles[x][y] = tile


def place_pillars(grid: Grid, room: Room, rng: random.Random, start: Coord2D, count: int) -> int:
    placed = 0
    for _ in range(count):
        options = _candidates(grid, room.cells(), start, (TileKind.FLOOR, TileKind.SPECIAL_FLOOR))
        if not options:
            break
        x, y = rng.choice(options)
        grid.tiles[x][y] = PILLAR
        placed += 1
    return placed


def decorate(
    grid: Grid,
    rooms: List[Room],
    depth: int,
    start: Coord2D,
    rng: random.Random,
    config: GenerationConfig,
) -> DecorationReport:
    level = abs(depth)
    special: Dict[int, str] = {}
    pillars = 0
    for idx, room in enumerate(rooms):
        if rng.random() >= config.special_room_chance:
            continue
        theme = rng.choice(SPECIAL_ROOM_TYPES)
        special[idx] = theme
        theme_room(grid, room, theme)
        if theme == "danger":
            pillars += place_pillars(grid, room, rng, start, rng.randint(2, 4))

    secret = None
    if rooms and rng.random() < config.secret_room_chance:
        secret = place_secret_room(grid, rooms, rng)

    water = 0
    if level >= config.water_depth:
        for _ in range(rng.randint(1, 3)):
            water += len(place_pool(grid, rng, start, WATER))

    lava = heated = 0
    if level >= config.lava_depth:
        for _ in range(rng.randint(1, 2)):
            cells = place_pool(grid, rng, start, LAVA, spread=0.0)
            lava += len(cells)
            for cell in cells:
                heated += heat_halo(grid, rng, cell, config.heated_halo_chance)

    log.debug(
        event="decorated",
        depth=depth,
        special_rooms=len(special),
        secret=secret is not None,
        water=water,
        lava=lava,
        pillars=pillars,
    )
    return DecorationReport(water, lava, heated, pillars, special, secret)


__all__ = [
    "SPECIAL_ROOM_TYPES",
    "DecorationReport",
    "is_interior",
    "place_pool",
    "heat_halo",
    "place_secret_room",
    "theme_room",
    "place_pillars",
    "decorate",
]

"""Layout strategies and the depth-keyed policy that picks one per floor."""
from __future__ import annotations

import random
from enum import Enum
from typing import Callable, Dict, List, NamedTuple, Optional, Set, Tuple

from .caves import apply_mask, cave_rooms, generate_mask
from .config import GenerationConfig
from .connectivity import Edge, connect_rooms
from .grid import Coord2D, Grid
from .logging_utils import get_logger
from .rooms import Room, RoomShape, ensure_rooms, place_rooms, room_overlaps
from .tunnels import carve_l_corridor

log = get_logger("layouts")


class Strategy(Enum):
    ROOMS = "rooms"
    CAVES = "caves"
    MAZE = "maze"
    HYBRID = "hybrid"


class LayoutResult(NamedTuple):
    rooms: List[Room]
    corridors: List[Edge]


# (max abs depth inclusive, weights); the last row catches everything deeper.
STRATEGY_POLICY: List[Tuple[Optional[int], Dict[Strategy, float]]] = [
    (2, {Strategy.ROOMS: 0.60, Strategy.MAZE: 0.30, Strategy.CAVES: 0.05, Strategy.HYBRID: 0.05}),
    (5, {Strategy.ROOMS: 0.40, Strategy.MAZE: 0.20, Strategy.CAVES: 0.20, Strategy.HYBRID: 0.20}),
    (None, {Strategy.ROOMS: 0.20, Strategy.MAZE: 0.10, Strategy.CAVES: 0.35, Strategy.HYBRID: 0.35}),
]


def strategy_weights(depth: int) -> Dict[Strategy, float]:
    level = abs(depth)
    for limit, weights in STRATEGY_POLICY:
        if limit is None or level <= limit:
            return weights
    return STRATEGY_POLICY[-1][1]


def choose_strategy(depth: int, rng: random.Random) -> Strategy:
    weights = strategy_weights(depth)
    options = list(weights)
    return rng.choices(options, weights=[weights[s] for s in options])[0]


def _room_cap(grid: Grid) -> int:
    # keeps small grids from being packed wall to wall
    return max(1, grid.width * grid.height // 50)


def stamp_lattice(grid: Grid, rng: random.Random, stride: int, chance: float) -> int:
    """Sparse corridors along every ``stride``-th interior row and column."""
    carved = 0
    for y in range(stride, grid.height - 1, stride):
        for x in range(1, grid.width - 1):
            if rng.random() < chance and grid.carve(x, y):
                carved += 1
    for x in range(stride, grid.width - 1, stride):
        for y in range(1, grid.height - 1):
            if rng.random() < chance and grid.carve(x, y):
                carved += 1
    return carved


def rooms_layout(grid: Grid, rng: random.Random, config: GenerationConfig) -> LayoutResult:
    target = min(rng.randint(config.min_rooms, config.max_rooms), _room_cap(grid))
    rooms = place_rooms(
        grid,
        rng,
        target,
        config.max_room_attempts,
        config.room_buffer,
        (config.room_min_size, config.room_max_size),
        config.shaped_room_chance,
    )
    return LayoutResult(rooms, connect_rooms(grid, rooms, rng, config))


def caves_layout(grid: Grid, rng: random.Random, config: GenerationConfig) -> LayoutResult:
    mask = generate_mask(rng, grid.width, grid.height, config.cave_fill_probability, config.cave_iterations)
    apply_mask(grid, mask)
    rooms = cave_rooms(mask, grid.width, grid.height, config.cave_min_region)
    ensure_rooms(grid, rooms)
    return LayoutResult(rooms, connect_rooms(grid, rooms, rng, config))


def maze_layout(grid: Grid, rng: random.Random, config: GenerationConfig) -> LayoutResult:
    target = min(rng.randint(config.maze_min_rooms, config.maze_max_rooms), _room_cap(grid))
    rooms = place_rooms(
        grid,
        rng,
        target,
        config.maze_room_attempts,
        config.maze_room_buffer,
        (config.maze_room_min_size, config.maze_room_max_size),
        shape=RoomShape.MAZE,
    )
    stamp_lattice(grid, rng, config.maze_stride, config.maze_carve_chance)
    room_cells: Set[Coord2D] = {c for r in rooms for c in r.cells()}
    lattice = [c for c in grid.walkable_coords() if c not in room_cells]
    corridors: List[Edge] = []
    for idx, room in enumerate(rooms):
        cx, cy = room.center
        if lattice:
            target_cell = min(lattice, key=lambda p: (abs(p[0] - cx) + abs(p[1] - cy), p))
        elif idx > 0:
            target_cell = rooms[idx - 1].center
            rooms[idx - 1].connected = True
            corridors.append((idx - 1, idx))
        else:
            continue
        carve_l_corridor(grid, room.center, target_cell, rng)
        room.connected = True
    return LayoutResult(rooms, corridors)


def hybrid_layout(grid: Grid, rng: random.Random, config: GenerationConfig) -> LayoutResult:
    """Rooms first, then a floor-only cave overlay, optional lattice, then the spanning tree.

    The overlay never reverts room floor to wall; cave regions that clear the
    placed rooms are folded into the room list.
    """
    target = min(rng.randint(config.hybrid_min_rooms, config.hybrid_max_rooms), _room_cap(grid))
    rooms = place_rooms(
        grid,
        rng,
        target,
        config.max_room_attempts,
        config.room_buffer,
        (config.room_min_size, config.room_max_size),
        config.shaped_room_chance,
    )
    mask = generate_mask(rng, grid.width, grid.height, config.cave_fill_probability, config.cave_iterations)
    apply_mask(grid, mask, overwrite=False)
    folded = 0
    for cave in cave_rooms(mask, grid.width, grid.height, config.cave_min_region):
        if folded >= config.hybrid_max_cave_rooms:
            break
        if room_overlaps(cave, rooms, config.room_buffer):
            continue
        rooms.append(cave)
        folded += 1
    if rng.random() < config.hybrid_maze_chance:
        stamp_lattice(grid, rng, config.maze_stride, config.maze_carve_chance)
    return LayoutResult(rooms, connect_rooms(grid, rooms, rng, config))


LAYOUTS: Dict[Strategy, Callable[[Grid, random.Random, GenerationConfig], LayoutResult]] = {
    Strategy.ROOMS: rooms_layout,
    Strategy.CAVES: caves_layout,
    Strategy.MAZE: maze_layout,
    Strategy.HYBRID: hybrid_layout,
}


def run_layout(strategy: Strategy, grid: Grid, rng: random.Random, config: GenerationConfig) -> LayoutResult:
    log.debug(event="strategy_selected", strategy=strategy.value, width=grid.width, height=grid.height)
    return LAYOUTS[strategy](grid, rng, config)


__all__ = [
    "Strategy",
    "LayoutResult",
    "STRATEGY_POLICY",
    "strategy_weights",
    "choose_strategy",
    "stamp_lattice",
    "rooms_layout",
    "caves_layout",
    "maze_layout",
    "hybrid_layout",
    "run_layout",
]

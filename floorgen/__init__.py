"""
project: floorgen
module: __init__.py
License: MIT

Procedural dungeon floor generation: layouts, connectivity, decoration and
entry/exit placement.

Public contract consumed elsewhere:
    generate_floor(width, height, depth=0, seed=None, start=None) -> GenerationResult
    FloorGenerator(config, seed=...).generate(...) / .descend(previous, player_pos)
    GenerationResult: grid[x, y] -> Tile, rooms, start, exit, strategy, metrics
"""

from .config import GenerationConfig, load_config
from .grid import Grid
from .layouts import Strategy
from .pipeline import FloorGenerator, FloorInvariantError, GenerationResult, generate_floor
from .placement import spawn_points
from .rooms import Feature, Rect, Room, RoomShape
from .tiles import (
    DOOR,
    FLOOR,
    LAVA,
    PILLAR,
    STAIRS,
    WALL,
    WATER,
    Tile,
    TileKind,
    special_floor,
)  # noqa: F401

__all__ = [
    "GenerationConfig",
    "load_config",
    "Grid",
    "Strategy",
    "FloorGenerator",
    "FloorInvariantError",
    "GenerationResult",
    "generate_floor",
    "spawn_points",
    "Feature",
    "Rect",
    "Room",
    "RoomShape",
    "Tile",
    "TileKind",
    "special_floor",
    "WALL",
    "FLOOR",
    "STAIRS",
    "WATER",
    "LAVA",
    "PILLAR",
    "DOOR",
]

"""Generation tunables and their override sources.

Precedence when using :func:`load_config` (lowest to highest):
    dataclass defaults < ``.env`` / environment ``FLOORGEN_*`` < Flask app config < keyword overrides
"""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from flask import current_app, has_app_context


@dataclass
class GenerationConfig:
    width: int = 25
    height: int = 17
    seed: Optional[int] = None
    # Rooms strategy
    min_rooms: int = 6
    max_rooms: int = 12
    room_min_size: int = 4
    room_max_size: int = 10
    room_buffer: int = 1
    max_room_attempts: int = 150
    shaped_room_chance: float = 0.2
    # Maze strategy
    maze_min_rooms: int = 4
    maze_max_rooms: int = 8
    maze_room_min_size: int = 4
    maze_room_max_size: int = 8
    maze_room_buffer: int = 4
    maze_room_attempts: int = 120
    maze_stride: int = 4
    maze_carve_chance: float = 0.7
    # Caves strategy
    cave_fill_probability: float = 0.45
    cave_iterations: int = 5
    cave_min_region: int = 16
    # Hybrid strategy
    hybrid_min_rooms: int = 3
    hybrid_max_rooms: int = 6
    hybrid_max_cave_rooms: int = 3
    hybrid_maze_chance: float = 0.5
    # Connectivity
    extra_edge_ratio: float = 0.3
    extra_edge_chance: float = 0.5
    l_corridor_chance: float = 0.7
    coverage_warn_threshold: float = 0.8
    # Decoration
    water_depth: int = 5
    lava_depth: int = 8
    secret_room_chance: float = 0.1
    special_room_chance: float = 0.15
    heated_halo_chance: float = 0.3
    # Behaviour flags
    strict_validation: bool = False
    enable_metrics: bool = True

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"width/height must be positive, got {self.width}x{self.height}")
        if self.min_rooms > self.max_rooms:
            raise ValueError("min_rooms must not exceed max_rooms")
        if self.room_min_size > self.room_max_size:
            raise ValueError("room_min_size must not exceed room_max_size")


ENV_PREFIX = "FLOORGEN_"


def _coerce(name: str, raw: Any, current: Any) -> Any:
    if isinstance(current, bool):
        if isinstance(raw, str):
            return raw.lower() not in {"0", "false", "no", ""}
        return bool(raw)
    if isinstance(current, int) or name == "seed":
        return int(raw)
    if isinstance(current, float):
        return float(raw)
    return raw


def _coerce_named(key: str, name: str, raw: Any, current: Any) -> Any:
    try:
        return _coerce(name, raw, current)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid value for {key}: {raw!r}") from None


def load_config(**overrides) -> GenerationConfig:
    """Build a config from defaults, ``FLOORGEN_*`` env vars, Flask config and overrides.

    Unknown override names raise ``TypeError`` (same as the dataclass constructor).
    Malformed environment or app config values raise ``ValueError`` naming the key.
    """
    load_dotenv()
    base = GenerationConfig()
    values: Dict[str, Any] = {}
    for f in fields(GenerationConfig):
        key = ENV_PREFIX + f.name.upper()
        current = getattr(base, f.name)
        if key in os.environ:
            values[f.name] = _coerce_named(key, f.name, os.environ[key], current)
        if has_app_context() and key in current_app.config:
            values[f.name] = _coerce_named(key, f.name, current_app.config[key], current)
    values.update(overrides)
    return GenerationConfig(**values)


__all__ = ["GenerationConfig", "load_config", "ENV_PREFIX"]

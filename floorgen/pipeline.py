"""Pipeline orchestration for floor generation.

``FloorGenerator`` owns the single random stream shared by every floor it
builds; each call returns a fresh :class:`GenerationResult` and keeps no
reference to it. Phase order:

    grid init -> layout strategy -> entry stitching -> reachability repair
    -> decoration -> re-validation -> exit placement
"""
from __future__ import annotations

import random
import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional, Union

from .config import GenerationConfig
from .connectivity import Edge, flood_fill, validate_and_repair
from .features import decorate
from .grid import Coord2D, Grid
from .layouts import Strategy, choose_strategy, run_layout
from .logging_utils import get_logger
from .metrics import init_metrics
from .placement import clamp_start, connect_entry, place_exit, spawn_points
from .rooms import Rect, Room, RoomShape
from .tiles import TileKind

log = get_logger("pipeline")


class FloorInvariantError(RuntimeError):
    """A finished floor broke reachability or the single-exit rule."""


@dataclass
class GenerationResult:
    grid: Grid
    rooms: List[Room]
    exit: Coord2D
    start: Coord2D
    depth: int
    seed: int
    strategy: Strategy
    corridors: List[Edge] = field(default_factory=list)
    special_rooms: Dict[int, str] = field(default_factory=dict)
    secret_room: Optional[Rect] = None
    coverage: float = 1.0
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def stairs_tiles(self) -> List[Coord2D]:
        return [(x, y) for x, y in self.grid.coords() if self.grid.tiles[x][y].kind is TileKind.STAIRS]

    def spawn_points(self, count: int, rng: random.Random, avoid: Iterable[Coord2D] = ()) -> List[Coord2D]:
        """Monster/item spawn spots inside rooms, never on the start tile or the stairs."""
        return spawn_points(self.grid, self.rooms, rng, count, avoid=[self.start, *avoid])

    def to_ascii(self) -> str:
        rows = self.grid.to_ascii().split("\n")
        sx, sy = self.start
        rows[sy] = rows[sy][:sx] + "@" + rows[sy][sx + 1:]
        return "\n".join(rows)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "depth": self.depth,
            "seed": self.seed,
            "strategy": self.strategy.value,
            "start": list(self.start),
            "exit": list(self.exit),
            "rooms": [r.to_dict() for r in self.rooms],
            "corridors": [list(e) for e in self.corridors],
            "special_rooms": {str(k): v for k, v in self.special_rooms.items()},
            "secret_room": list(self.secret_room) if self.secret_room else None,
            "coverage": self.coverage,
            "tiles": [[self.grid.tiles[x][y].to_dict() for x in range(self.width)] for y in range(self.height)],
        }


class FloorGenerator:
    def __init__(self, config: GenerationConfig | None = None, *, seed: int | None = None):
        config = config or GenerationConfig()
        if seed is not None:
            config = replace(config, seed=seed)
        if config.seed is None:
            config = replace(config, seed=random.randint(0, 2**31 - 1))
        self.config = config
        self.seed = config.seed
        self._rng = random.Random(self.seed)

    def generate(
        self,
        width: int | None = None,
        height: int | None = None,
        depth: int = 0,
        start: Coord2D | None = None,
        strategy: Union[Strategy, str, None] = None,
    ) -> GenerationResult:
        cfg = self.config
        rng = self._rng
        width = cfg.width if width is None else width
        height = cfg.height if height is None else height
        metrics: Dict[str, Any] = init_metrics() if cfg.enable_metrics else {}
        phase_times: Dict[str, int] = {}
        t0 = time.perf_counter()

        def _phase(label, fn, *a, **k):
            ps = time.perf_counter()
            r = fn(*a, **k)
            phase_times[label] = int((time.perf_counter() - ps) * 1000)
            return r

        grid = _phase("init_grid", Grid, width, height)
        if strategy is None:
            strategy = choose_strategy(depth, rng)
        strategy = Strategy(strategy)
        layout = _phase("layout", run_layout, strategy, grid, rng, cfg)
        rooms = layout.rooms
        start = clamp_start(start, width, height) if start is not None else rooms[0].center
        _phase("connect_entry", connect_entry, grid, rooms, start, rng)
        repair = _phase("validate", validate_and_repair, grid, start, rng, cfg)
        deco = _phase("decorate", decorate, grid, rooms, depth, start, rng, cfg)
        final = _phase("revalidate", validate_and_repair, grid, start, rng, cfg)
        exit_pos = _phase("place_exit", place_exit, grid, start)

        result = GenerationResult(
            grid=grid,
            rooms=rooms,
            exit=exit_pos,
            start=start,
            depth=depth,
            seed=self.seed,
            strategy=strategy,
            corridors=list(layout.corridors),
            special_rooms=deco.special_rooms,
            secret_room=deco.secret_room,
            coverage=final.coverage,
            metrics=metrics,
        )
        self._check_invariants(result)

        if cfg.enable_metrics:
            metrics.update(
                strategy=strategy.value,
                rooms=len(rooms),
                corridors=len(layout.corridors),
                fallback_used=any(r.shape is RoomShape.FALLBACK for r in rooms),
                coverage_before_repair=repair.coverage_before,
                repairs_performed=repair.repairs + final.repairs,
                repair_tiles_carved=repair.tiles_carved + final.tiles_carved,
                special_rooms=len(deco.special_rooms),
                secret_rooms=1 if deco.secret_room else 0,
                water_tiles=deco.water,
                lava_tiles=deco.lava,
                heated_tiles=deco.heated,
                pillars=deco.pillars,
                tiles_walkable=len(grid.walkable_coords()),
                runtime_ms=int((time.perf_counter() - t0) * 1000),
                phase_ms=phase_times,
            )
        log.info(
            event="floor_generated",
            seed=self.seed,
            depth=depth,
            strategy=strategy.value,
            rooms=len(rooms),
            exit=f"{exit_pos[0]},{exit_pos[1]}",
        )
        return result

    def descend(self, previous: GenerationResult, player_pos: Coord2D | None = None, **kwargs) -> GenerationResult:
        """Build the next floor down, carrying the player's position across."""
        pos = previous.start if player_pos is None else player_pos
        kwargs.setdefault("width", previous.width)
        kwargs.setdefault("height", previous.height)
        return self.generate(depth=previous.depth - 1, start=pos, **kwargs)

    def _check_invariants(self, result: GenerationResult) -> None:
        grid = result.grid
        reached = len(flood_fill(grid, result.start))
        walkable = len(grid.walkable_coords())
        stairs = len(result.stairs_tiles())
        if reached == walkable and stairs == 1:
            return
        log.error(
            event="floor_invariant_violation",
            seed=self.seed,
            depth=result.depth,
            reached=reached,
            walkable=walkable,
            stairs=stairs,
        )
        if self.config.strict_validation:
            raise FloorInvariantError(
                f"seed={self.seed} depth={result.depth}: reached {reached}/{walkable} walkable tiles, {stairs} stairs"
            )


def generate_floor(
    width: int | None = None,
    height: int | None = None,
    depth: int = 0,
    seed: int | None = None,
    start: Coord2D | None = None,
    config: GenerationConfig | None = None,
    strategy: Union[Strategy, str, None] = None,
) -> GenerationResult:
    """Generate one floor with a fresh random stream seeded from ``seed``."""
    return FloorGenerator(config, seed=seed).generate(width, height, depth, start, strategy)


__all__ = ["FloorGenerator", "FloorInvariantError", "GenerationResult", "generate_floor"]

"""Room records, shape generators and attempt-budgeted placement.

Every room is described by its full bounding box. Composite shapes (L, T,
plus, circle) list their sub-shapes in ``features`` with offsets relative to
the box; the footprint is the union of those sub-shapes. Each shape's
footprint contains the box center, which is what corridors aim for.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, FrozenSet, Iterator, List, NamedTuple, Optional, Tuple

from .grid import Coord2D, Grid
from .logging_utils import get_logger

log = get_logger("rooms")


class RoomShape(Enum):
    RECT = "rect"
    L = "L"
    T = "T"
    PLUS = "plus"
    CIRCLE = "circle"
    CAVE = "cave"
    MAZE = "maze"
    FALLBACK = "fallback"


class Feature(NamedTuple):
    kind: str  # stem / arm / bar / circle
    dx: int
    dy: int
    w: int
    h: int
    radius: int = 0


class Rect(NamedTuple):
    x: int
    y: int
    w: int
    h: int


@dataclass
class Room:
    x: int
    y: int
    width: int
    height: int
    shape: RoomShape = RoomShape.RECT
    connected: bool = False
    features: List[Feature] = field(default_factory=list)
    region: FrozenSet[Coord2D] = frozenset()  # cave regions only

    @property
    def size(self) -> int:
        return len(self.region)

    @property
    def center(self) -> Coord2D:
        return (self.x + self.width // 2, self.y + self.height // 2)

    def intersects(self, other: "Room", buffer: int = 0) -> bool:
        """True if this box overlaps ``other``'s box grown by ``buffer`` on every side."""
        return not (
            self.x + self.width <= other.x - buffer
            or other.x + other.width + buffer <= self.x
            or self.y + self.height <= other.y - buffer
            or other.y + other.height + buffer <= self.y
        )

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height

    def box_cells(self) -> Iterator[Coord2D]:
        for ix in range(self.x, self.x + self.width):
            for iy in range(self.y, self.y + self.height):
                yield ix, iy

    def cells(self) -> Iterator[Coord2D]:
        """Footprint cells; the whole box for shapes without sub-shapes or a region."""
        if self.region:
            yield from sorted(self.region)
            return
        if not self.features:
            yield from self.box_cells()
            return
        seen = set()
        for feat in self.features:
            for cell in _feature_cells(self, feat):
                if cell not in seen:
                    seen.add(cell)
                    yield cell

    def to_dict(self):
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "shape": self.shape.value,
            "connected": self.connected,
            "features": [f._asdict() for f in self.features],
        }


def _feature_cells(room: Room, feat: Feature) -> Iterator[Coord2D]:
    if feat.kind == "circle":
        cx, cy = room.x + feat.dx + feat.radius, room.y + feat.dy + feat.radius
        r2 = feat.radius * feat.radius
        for dx in range(-feat.radius, feat.radius + 1):
            for dy in range(-feat.radius, feat.radius + 1):
                if dx * dx + dy * dy <= r2:
                    yield cx + dx, cy + dy
        return
    for ix in range(room.x + feat.dx, room.x + feat.dx + feat.w):
        for iy in range(room.y + feat.dy, room.y + feat.dy + feat.h):
            yield ix, iy


# ---------------------------------------------------------------------------
# Shape generators
# ---------------------------------------------------------------------------
L_SIZE = (5, 10)
T_SIZE = (5, 10)
PLUS_SIZE = (5, 9)
CIRCLE_RADIUS = (2, 4)

FALLBACK_SIZE = (8, 6)


def _position(rng: random.Random, w: int, h: int, width: int, height: int) -> Optional[Coord2D]:
    """Random top-left keeping a wall margin; ``None`` when the box cannot fit."""
    hi_x = width - w - 2
    hi_y = height - h - 2
    if hi_x < 1 or hi_y < 1:
        return None
    return rng.randint(1, hi_x), rng.randint(1, hi_y)


def make_rect(
    rng: random.Random,
    width: int,
    height: int,
    size_range: Tuple[int, int] = (4, 10),
    shape: RoomShape = RoomShape.RECT,
) -> Optional[Room]:
    w = rng.randint(*size_range)
    h = rng.randint(*size_range)
    pos = _position(rng, w, h, width, height)
    if pos is None:
        return None
    return Room(pos[0], pos[1], w, h, shape=shape)


def make_l(rng: random.Random, width: int, height: int) -> Optional[Room]:
    w = rng.randint(*L_SIZE)
    h = rng.randint(*L_SIZE)
    cx, cy = w // 2, h // 2
    # stem and arm both run through the center row/column; the quadrant
    # opposite their shared corner stays solid
    if rng.random() < 0.5:
        stem = Feature("stem", 0, 0, cx + 1, h)
    else:
        stem = Feature("stem", cx, 0, w - cx, h)
    if rng.random() < 0.5:
        arm = Feature("arm", 0, 0, w, cy + 1)
    else:
        arm = Feature("arm", 0, cy, w, h - cy)
    pos = _position(rng, w, h, width, height)
    if pos is None:
        return None
    return Room(pos[0], pos[1], w, h, shape=RoomShape.L, features=[stem, arm])


def make_t(rng: random.Random, width: int, height: int) -> Optional[Room]:
    w = rng.randint(*T_SIZE)
    h = rng.randint(*T_SIZE)
    cx, cy = w // 2, h // 2
    far_side = rng.random() < 0.5
    if rng.random() < 0.5:
        # horizontal bar, vertical stem
        t = max(2, h // 3)
        s = max(1, w // 5)
        bar = Feature("bar", 0, h - t if far_side else 0, w, t)
        stem = Feature("stem", cx - s // 2, 0, s, h)
    else:
        t = max(2, w // 3)
        s = max(1, h // 5)
        bar = Feature("bar", w - t if far_side else 0, 0, t, h)
        stem = Feature("stem", 0, cy - s // 2, w, s)
    pos = _position(rng, w, h, width, height)
    if pos is None:
        return None
    return Room(pos[0], pos[1], w, h, shape=RoomShape.T, features=[bar, stem])


def make_plus(rng: random.Random, width: int, height: int) -> Optional[Room]:
    w = rng.randint(*PLUS_SIZE)
    h = rng.randint(*PLUS_SIZE)
    cx, cy = w // 2, h // 2
    s = max(0, min(w, h) // 6)
    horizontal = Feature("arm", 0, cy - s, w, 2 * s + 1)
    vertical = Feature("arm", cx - s, 0, 2 * s + 1, h)
    pos = _position(rng, w, h, width, height)
    if pos is None:
        return None
    return Room(pos[0], pos[1], w, h, shape=RoomShape.PLUS, features=[horizontal, vertical])


def make_circle(rng: random.Random, width: int, height: int) -> Optional[Room]:
    r = rng.randint(*CIRCLE_RADIUS)
    size = 2 * r + 1
    pos = _position(rng, size, size, width, height)
    if pos is None:
        return None
    return Room(pos[0], pos[1], size, size, shape=RoomShape.CIRCLE, features=[Feature("circle", 0, 0, size, size, r)])


SHAPE_GENERATORS: List[Callable[[random.Random, int, int], Optional[Room]]] = [
    make_l,
    make_t,
    make_plus,
    make_circle,
]


def fallback_room(width: int, height: int) -> Room:
    """Centered rectangle clamped so it always fits inside the grid."""
    fw = max(1, min(FALLBACK_SIZE[0], width - 2))
    fh = max(1, min(FALLBACK_SIZE[1], height - 2))
    fx = max(0, min(max(1, width // 2 - fw // 2), width - fw))
    fy = max(0, min(max(1, height // 2 - fh // 2), height - fh))
    return Room(fx, fy, fw, fh, shape=RoomShape.FALLBACK)


# ---------------------------------------------------------------------------
# Placement & carving
# ---------------------------------------------------------------------------
def room_overlaps(room: Room, existing: List[Room], buffer: int) -> bool:
    return any(room.intersects(r, buffer) for r in existing)


def carve_room(grid: Grid, room: Room) -> int:
    carved = 0
    for x, y in room.cells():
        if grid.carve(x, y):
            carved += 1
    return carved


def ensure_rooms(grid: Grid, rooms: List[Room]) -> bool:
    """Insert and carve the fallback room when ``rooms`` is empty. Returns True if used."""
    if rooms:
        return False
    room = fallback_room(grid.width, grid.height)
    carve_room(grid, room)
    rooms.append(room)
    log.debug(event="fallback_room", x=room.x, y=room.y, w=room.width, h=room.height)
    return True


def place_rooms(
    grid: Grid,
    rng: random.Random,
    target: int,
    attempts: int,
    buffer: int,
    size_range: Tuple[int, int],
    shaped_chance: float = 0.0,
    shape: RoomShape = RoomShape.RECT,
) -> List[Room]:
    """Place up to ``target`` non-overlapping rooms, then carve them.

    Shaped rooms (L/T/plus/circle) are only proposed once three rooms exist.
    When the attempt budget runs out with nothing placed the fallback room
    is inserted, so the result is never empty.
    """
    rooms: List[Room] = []
    while len(rooms) < target and attempts > 0:
        attempts -= 1
        if shaped_chance and len(rooms) >= 3 and rng.random() < shaped_chance:
            candidate = rng.choice(SHAPE_GENERATORS)(rng, grid.width, grid.height)
        else:
            candidate = make_rect(rng, grid.width, grid.height, size_range, shape)
        if candidate is None or room_overlaps(candidate, rooms, buffer):
            continue
        rooms.append(candidate)
    for room in rooms:
        carve_room(grid, room)
    ensure_rooms(grid, rooms)
    return rooms


__all__ = [
    "Room",
    "RoomShape",
    "Feature",
    "Rect",
    "make_rect",
    "make_l",
    "make_t",
    "make_plus",
    "make_circle",
    "SHAPE_GENERATORS",
    "fallback_room",
    "room_overlaps",
    "carve_room",
    "ensure_rooms",
    "place_rooms",
]

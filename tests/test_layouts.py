import random

import pytest

from floorgen import GenerationConfig, Grid, RoomShape, Strategy
from floorgen.layouts import (
    choose_strategy,
    hybrid_layout,
    maze_layout,
    stamp_lattice,
    strategy_weights,
)
from tests.floor_test_utils import bfs_reachable


@pytest.mark.parametrize("depth", [0, 1, 2, 3, 5, 6, 12, -4, -20])
def test_strategy_weights_sum_to_one(depth):
    weights = strategy_weights(depth)
    assert set(weights) == set(Strategy)
    assert sum(weights.values()) == pytest.approx(1.0)


def test_deeper_floors_favour_caves():
    assert strategy_weights(0)[Strategy.ROOMS] == 0.6
    assert strategy_weights(-4)[Strategy.CAVES] == 0.2
    assert strategy_weights(-7) == strategy_weights(7)
    assert strategy_weights(-7)[Strategy.CAVES] == 0.35


def test_choose_strategy_is_seeded():
    a = [choose_strategy(-6, random.Random(s)) for s in range(30)]
    b = [choose_strategy(-6, random.Random(s)) for s in range(30)]
    assert a == b
    assert len(set(a)) > 1


def test_lattice_stays_inside_border():
    g = Grid(21, 13)
    stamp_lattice(g, random.Random(0), 4, 1.0)
    for x, y in g.walkable_coords():
        assert 0 < x < 20 and 0 < y < 12
        assert x % 4 == 0 or y % 4 == 0
    assert g.is_walkable(4, 1) and g.is_walkable(1, 4)


def test_maze_rooms_join_the_lattice():
    cfg = GenerationConfig()
    for seed in range(8):
        g = Grid(50, 35)
        layout = maze_layout(g, random.Random(seed), cfg)
        assert layout.rooms
        assert all(r.shape in (RoomShape.MAZE, RoomShape.FALLBACK) for r in layout.rooms)
        if len(layout.rooms) > 1:
            assert all(r.connected for r in layout.rooms)


def test_hybrid_rooms_survive_cave_overlay():
    cfg = GenerationConfig(hybrid_maze_chance=0.0)
    for seed in range(8):
        g = Grid(60, 40)
        layout = hybrid_layout(g, random.Random(seed), cfg)
        built = [r for r in layout.rooms if r.shape is not RoomShape.CAVE]
        caves = [r for r in layout.rooms if r.shape is RoomShape.CAVE]
        assert built
        assert len(caves) <= cfg.hybrid_max_cave_rooms
        for room in built:
            assert all(g.is_walkable(x, y) for x, y in room.cells())
        reach = bfs_reachable(g, layout.rooms[0].center)
        assert all(r.center in reach for r in built)

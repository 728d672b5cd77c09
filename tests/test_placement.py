import random

from floorgen import STAIRS, Grid, Room, TileKind, spawn_points
from floorgen.placement import clamp_start, connect_entry, farthest_reachable, place_exit
from tests.floor_test_utils import bfs_reachable, carve_rect, stairs_count


def test_exit_lands_at_far_end_of_corridor():
    g = Grid(10, 3)
    carve_rect(g, 1, 1, 8, 1)
    assert farthest_reachable(g, (1, 1)) == ((8, 1), 7)
    assert place_exit(g, (1, 1)) == (8, 1)
    assert g[8, 1] == STAIRS
    assert stairs_count(g) == 1


def test_exit_ties_go_to_first_discovered():
    g = Grid(5, 3)
    carve_rect(g, 0, 1, 5, 1)
    # (0,1) and (4,1) are both two steps from the middle
    far, dist = farthest_reachable(g, (2, 1))
    assert dist == 2
    assert far == (4, 1)


def test_exit_on_single_tile_floor():
    g = Grid(1, 1)
    g.carve(0, 0)
    assert place_exit(g, (0, 0)) == (0, 0)
    assert g[0, 0].kind is TileKind.STAIRS


def test_entry_is_stitched_from_solid_rock():
    g = Grid(20, 10)
    room = Room(12, 3, 4, 4)
    carve_rect(g, 12, 3, 4, 4)
    target = connect_entry(g, [room], (2, 2), random.Random(1))
    assert target == room.center
    assert g.is_walkable(2, 2)
    assert room.center in bfs_reachable(g, (2, 2))


def test_entry_without_rooms_just_carves_start():
    g = Grid(5, 5)
    assert connect_entry(g, [], (1, 1), random.Random(0)) is None
    assert g.is_walkable(1, 1)


def test_clamp_start():
    assert clamp_start((40, -3), 25, 17) == (24, 0)
    assert clamp_start((5, 5), 25, 17) == (5, 5)


def test_spawn_points_avoid_start_and_stairs():
    g = Grid(20, 12)
    room = Room(2, 2, 6, 5)
    carve_rect(g, 2, 2, 6, 5)
    g[7, 6] = STAIRS
    pts = spawn_points(g, [room], random.Random(8), 10, avoid=[(2, 2)])
    assert len(pts) == len(set(pts))
    assert (2, 2) not in pts and (7, 6) not in pts
    assert all(g.is_walkable(*p) for p in pts)
    assert spawn_points(g, [], random.Random(8), 3) == []

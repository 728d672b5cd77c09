from floorgen import GenerationConfig, generate_floor
from floorgen.metrics import init_metrics

PHASES = {"init_grid", "layout", "connect_entry", "validate", "decorate", "revalidate", "place_exit"}


def test_metrics_populated():
    r = generate_floor(40, 30, depth=-9, seed=21)
    m = r.metrics
    assert set(init_metrics()) <= set(m)
    assert m["strategy"] == r.strategy.value
    assert m["rooms"] == len(r.rooms)
    assert m["corridors"] == len(r.corridors)
    assert m["tiles_walkable"] == len(r.grid.walkable_coords())
    assert 0.0 < m["coverage_before_repair"] <= 1.0
    assert m["runtime_ms"] >= 0
    assert set(m["phase_ms"]) == PHASES


def test_metrics_track_decoration():
    for seed in range(10):
        r = generate_floor(40, 30, depth=-9, seed=seed)
        m = r.metrics
        assert m["lava_tiles"] == sum(1 for c in r.grid.coords() if r.grid[c].kind.value == "lava")
        assert m["secret_rooms"] == (1 if r.secret_room else 0)
        assert m["special_rooms"] == len(r.special_rooms)


def test_metrics_can_be_disabled():
    r = generate_floor(25, 17, seed=1, config=GenerationConfig(enable_metrics=False))
    assert r.metrics == {}

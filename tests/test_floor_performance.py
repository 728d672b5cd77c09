import time

import pytest

from floorgen import Strategy, generate_floor

# Guardrail against large regressions, not a micro-benchmark.


@pytest.mark.performance
@pytest.mark.parametrize("strategy", list(Strategy), ids=lambda s: s.value)
def test_large_floor_generation(strategy):
    max_seconds = 2.0
    for seed in (101, 202):
        start = time.perf_counter()
        r = generate_floor(120, 80, depth=-8, seed=seed, strategy=strategy)
        elapsed = time.perf_counter() - start
        assert r.exit is not None
        assert elapsed < max_seconds, f"{strategy.value} seed {seed} took {elapsed:.3f}s"

import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from floorgen import GenerationConfig  # noqa: E402


@pytest.fixture(autouse=True)
def _quiet_logs(monkeypatch):
    # Tests that assert on log output raise the level themselves.
    monkeypatch.setenv("FLOORGEN_LOG_LEVEL", "error")
    monkeypatch.delenv("FLOORGEN_LOG_JSON", raising=False)


@pytest.fixture
def strict_config():
    return GenerationConfig(strict_validation=True)

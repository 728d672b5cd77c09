import json

import pytest
from flask import Flask

from floorgen import GenerationConfig, generate_floor, load_config
from floorgen.logging_utils import get_logger


def test_defaults():
    cfg = load_config()
    assert (cfg.width, cfg.height) == (25, 17)
    assert cfg.seed is None
    assert cfg.strict_validation is False


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("FLOORGEN_MIN_ROOMS", "3")
    monkeypatch.setenv("FLOORGEN_SEED", "42")
    monkeypatch.setenv("FLOORGEN_STRICT_VALIDATION", "1")
    monkeypatch.setenv("FLOORGEN_CAVE_FILL_PROBABILITY", "0.5")
    cfg = load_config()
    assert cfg.min_rooms == 3
    assert cfg.seed == 42
    assert cfg.strict_validation is True
    assert cfg.cave_fill_probability == 0.5

    monkeypatch.setenv("FLOORGEN_STRICT_VALIDATION", "false")
    assert load_config().strict_validation is False


def test_flask_config_beats_env_and_kwargs_beat_both(monkeypatch):
    monkeypatch.setenv("FLOORGEN_MIN_ROOMS", "3")
    app = Flask(__name__)
    app.config.update(FLOORGEN_MIN_ROOMS=2, FLOORGEN_STRICT_VALIDATION=True)
    with app.app_context():
        cfg = load_config()
        assert cfg.min_rooms == 2
        assert cfg.strict_validation is True
        assert load_config(min_rooms=1).min_rooms == 1
    assert load_config().min_rooms == 3


def test_bad_env_value_names_variable(monkeypatch):
    monkeypatch.setenv("FLOORGEN_WIDTH", "wide")
    with pytest.raises(ValueError, match="FLOORGEN_WIDTH"):
        load_config()


@pytest.mark.parametrize(
    "kwargs",
    [dict(width=0), dict(height=-1), dict(min_rooms=9, max_rooms=3), dict(room_min_size=8, room_max_size=4)],
)
def test_invalid_config_rejected(kwargs):
    with pytest.raises(ValueError):
        GenerationConfig(**kwargs)


def test_unknown_override_rejected():
    with pytest.raises(TypeError):
        load_config(not_a_field=1)


def test_info_log_line(monkeypatch, capsys):
    monkeypatch.setenv("FLOORGEN_LOG_LEVEL", "info")
    r = generate_floor(25, 17, seed=12)
    out = capsys.readouterr().out
    line = next(ln for ln in out.splitlines() if "event=floor_generated" in ln)
    assert "level=info" in line
    assert f"seed={r.seed}" in line
    assert "logger=floorgen.pipeline" in line


def test_json_log_line(monkeypatch, capsys):
    monkeypatch.setenv("FLOORGEN_LOG_LEVEL", "info")
    monkeypatch.setenv("FLOORGEN_LOG_JSON", "1")
    r = generate_floor(25, 17, seed=12, strategy="caves")
    records = [json.loads(ln) for ln in capsys.readouterr().out.splitlines() if ln.startswith("{")]
    rec = next(x for x in records if x.get("event") == "floor_generated")
    assert rec["level"] == "info"
    assert rec["seed"] == r.seed
    assert rec["strategy"] == "caves"


def test_below_threshold_is_silent(monkeypatch, capsys):
    monkeypatch.setenv("FLOORGEN_LOG_LEVEL", "warn")
    log = get_logger("probe")
    log.debug(event="hidden")
    log.info(event="hidden")
    log.warn(event="shown", note="two words")
    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "event=shown" in out and "note=two_words" in out


def test_bad_flask_config_value_names_key():
    app = Flask(__name__)
    app.config["FLOORGEN_MAX_ROOMS"] = "plenty"
    with app.app_context():
        with pytest.raises(ValueError, match="FLOORGEN_MAX_ROOMS"):
            load_config()
    app.config["FLOORGEN_MAX_ROOMS"] = None
    with app.app_context():
        with pytest.raises(ValueError, match="FLOORGEN_MAX_ROOMS"):
            load_config()

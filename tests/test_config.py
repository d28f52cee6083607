from fractions import Fraction

import pytest
import yaml

from midinotes.config import (
    DEFAULT_CFG_PATH, ConfigError, load_config, note_options, parse_upbeat, timesig_options,
)


def test_defaults_ship_with_the_package(tmp_path):
    assert DEFAULT_CFG_PATH.exists()
    cfg = load_config(user_path=tmp_path / "missing.yaml")
    assert note_options(cfg) == {"overlaps": "queue", "orphans": "skip", "warnings": False}
    assert timesig_options(cfg) == {"unit": "wholes", "upbeat": Fraction(0)}


def test_user_file_overrides_defaults(tmp_path):
    user = tmp_path / "user.yaml"
    user.write_text(yaml.safe_dump({"notes": {"overlaps": "stack"}, "timesigs": {"unit": "ticks", "upbeat": 120}}))
    cfg = load_config(user_path=user)
    assert note_options(cfg)["overlaps"] == "stack"
    assert note_options(cfg)["orphans"] == "skip"   # kept from defaults
    assert timesig_options(cfg) == {"unit": "ticks", "upbeat": 120}


def test_missing_files_give_builtin_defaults(tmp_path):
    cfg = load_config(user_path=tmp_path / "a.yaml", default_path=tmp_path / "b.yaml")
    assert cfg == {"notes": {}, "timesigs": {}}
    assert note_options(cfg)["overlaps"] == "queue"


@pytest.mark.parametrize("cfg", [
    {"notes": {"overlaps": "lifo"}},
    {"notes": {"orphans": "warn"}},
])
def test_invalid_note_options(cfg):
    with pytest.raises(ConfigError):
        note_options(cfg)


def test_invalid_timesig_options():
    with pytest.raises(ConfigError):
        timesig_options({"timesigs": {"unit": "bars"}})
    with pytest.raises(ConfigError):
        timesig_options({"timesigs": {"unit": "ticks", "upbeat": "x"}})


def test_parse_upbeat_types():
    assert parse_upbeat("3/8", "wholes") == Fraction(3, 8)
    assert parse_upbeat(0.25, "wholes") == Fraction(1, 4)
    assert parse_upbeat("0.5", "seconds") == 0.5
    assert parse_upbeat(None, "ticks") == 0
    with pytest.raises(ConfigError):
        parse_upbeat(-1, "ticks")
    assert issubclass(ConfigError, ValueError)


@pytest.mark.parametrize("value", [1.5, "1/2", "240.5"])
def test_tick_upbeat_must_be_whole(value):
    with pytest.raises(ConfigError):
        parse_upbeat(value, "ticks")
    assert parse_upbeat("240", "ticks") == 240
    assert parse_upbeat(240.0, "ticks") == 240

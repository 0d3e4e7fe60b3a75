"""
Tests for YAML configuration loading.
"""

import os

import pytest
import yaml

from flappy.engine import config_loader
from flappy.engine.config_loader import get_config, load_config


DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(config_loader.__file__), "..", "game_config.yaml")


def write_config(tmp_path, section, key, value):
    with open(DEFAULT_CONFIG_PATH, "r") as f:
        raw = yaml.safe_load(f)
    raw[section][key] = value

    path = tmp_path / "game_config.yaml"
    with open(path, "w") as f:
        yaml.safe_dump(raw, f)
    return str(path)


class TestLoadConfig:
    """Test config loading and validation."""

    def test_default_values(self):
        config = load_config()

        assert config.physics.gravity == 0.5
        assert config.physics.jump_impulse == -8.0
        assert config.physics.max_velocity == 10.0
        assert config.physics.damping == 0.96
        assert config.physics.min_jump_interval_ms == 100.0
        assert config.obstacles.base_speed == 3.0
        assert config.session.restart_lock_ms == 750
        assert config.viewport.gap_min == 120
        assert config.viewport.gap_max == 180

    def test_config_is_frozen(self):
        config = load_config()
        with pytest.raises(AttributeError):
            config.physics.gravity = 1.0

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_explicit_path(self, tmp_path):
        path = write_config(tmp_path, "session", "restart_lock_ms", 300)
        assert load_config(path).session.restart_lock_ms == 300

    @pytest.mark.parametrize("section,key,value", [
        ("physics", "damping", 1.5),
        ("physics", "jump_impulse", 8.0),
        ("physics", "tick_budget_ms", 0),
        ("viewport", "gap_min", 500),
        ("viewport", "spawn_interval_min_ms", 9000),
        ("session", "restart_lock_ms", -1),
        ("observation", "max_obstacles", 0),
    ])
    def test_invalid_values_rejected(self, tmp_path, section, key, value):
        path = write_config(tmp_path, section, key, value)
        with pytest.raises(ValueError):
            load_config(path)

    def test_reload_config_replaces_cache(self, tmp_path):
        path = write_config(tmp_path, "physics", "gravity", 0.75)
        try:
            assert config_loader.reload_config(path).physics.gravity == 0.75
            assert get_config().physics.gravity == 0.75
        finally:
            config_loader.reload_config()
        assert get_config().physics.gravity == 0.5

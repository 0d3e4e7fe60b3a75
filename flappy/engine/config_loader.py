"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml


@dataclass(frozen=True)
class ViewportConfig:
    """Ratios and caps used to derive sizes from the playfield."""
    obstacle_width_max: float
    obstacle_width_ratio: float
    gap_ratio: float
    gap_min: float
    gap_max: float
    gap_max_height_ratio: float  # Gap never exceeds this share of the height
    spawn_interval_min_ms: float
    spawn_interval_max_ms: float
    flyer_width_max: float
    flyer_width_ratio: float
    flyer_aspect: float          # Flyer height / width
    flyer_origin_x_ratio: float
    flyer_origin_y_ratio: float
    default_width: int
    default_height: int


@dataclass(frozen=True)
class PhysicsConfig:
    """Flyer integration parameters (per tick)."""
    gravity: float
    jump_impulse: float
    max_velocity: float
    damping: float
    tick_budget_ms: float
    min_jump_interval_ms: float
    delta_time_cooldown: bool


@dataclass(frozen=True)
class ObstacleConfig:
    """Obstacle scroll speed and spawn height parameters."""
    base_speed: float
    max_speed_adjustment: float
    reference_width: float
    min_height_max: float
    min_height_ratio: float


@dataclass(frozen=True)
class SessionConfig:
    """Session lifecycle parameters."""
    restart_lock_ms: float
    max_notices: int


@dataclass(frozen=True)
class ServicesConfig:
    """External collaborator settings."""
    default_player_name: str
    display_name_max_length: int
    leaderboard_top_n: int
    leaderboard_path: str
    storage_path: str


@dataclass(frozen=True)
class ObservationConfig:
    """Observation space parameters."""
    max_obstacles: int
    max_ticks: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    viewport: ViewportConfig
    physics: PhysicsConfig
    obstacles: ObstacleConfig
    session: SessionConfig
    services: ServicesConfig
    observation: ObservationConfig


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    vp = config.viewport
    if vp.gap_min > vp.gap_max:
        raise ValueError(f"gap_min ({vp.gap_min}) exceeds gap_max ({vp.gap_max})")

    if vp.spawn_interval_min_ms > vp.spawn_interval_max_ms:
        raise ValueError(
            f"spawn_interval_min_ms ({vp.spawn_interval_min_ms}) exceeds "
            f"spawn_interval_max_ms ({vp.spawn_interval_max_ms})"
        )

    if not 0.0 < vp.gap_max_height_ratio <= 1.0:
        raise ValueError(f"gap_max_height_ratio must be in (0, 1], got {vp.gap_max_height_ratio}")

    # Damping only softens the ascent, it must never reverse or amplify it
    if not 0.0 < config.physics.damping < 1.0:
        raise ValueError(f"damping must be in (0, 1), got {config.physics.damping}")

    if config.physics.jump_impulse >= 0:
        raise ValueError(f"jump_impulse must be negative (upward), got {config.physics.jump_impulse}")

    if config.physics.tick_budget_ms <= 0:
        raise ValueError(f"tick_budget_ms must be positive, got {config.physics.tick_budget_ms}")

    if config.session.restart_lock_ms < 0:
        raise ValueError(f"restart_lock_ms must be >= 0, got {config.session.restart_lock_ms}")

    if config.observation.max_obstacles < 1:
        raise ValueError(f"max_obstacles must be >= 1, got {config.observation.max_obstacles}")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    vp_data = raw["viewport"]
    viewport = ViewportConfig(
        obstacle_width_max=float(vp_data["obstacle_width_max"]),
        obstacle_width_ratio=float(vp_data["obstacle_width_ratio"]),
        gap_ratio=float(vp_data["gap_ratio"]),
        gap_min=float(vp_data["gap_min"]),
        gap_max=float(vp_data["gap_max"]),
        gap_max_height_ratio=float(vp_data.get("gap_max_height_ratio", 0.5)),
        spawn_interval_min_ms=float(vp_data["spawn_interval_min_ms"]),
        spawn_interval_max_ms=float(vp_data["spawn_interval_max_ms"]),
        flyer_width_max=float(vp_data["flyer_width_max"]),
        flyer_width_ratio=float(vp_data["flyer_width_ratio"]),
        flyer_aspect=float(vp_data.get("flyer_aspect", 50.0 / 35.0)),
        flyer_origin_x_ratio=float(vp_data.get("flyer_origin_x_ratio", 0.10)),
        flyer_origin_y_ratio=float(vp_data.get("flyer_origin_y_ratio", 0.5)),
        default_width=int(vp_data.get("default_width", 800)),
        default_height=int(vp_data.get("default_height", 600))
    )

    physics_data = raw["physics"]
    physics = PhysicsConfig(
        gravity=float(physics_data["gravity"]),
        jump_impulse=float(physics_data["jump_impulse"]),
        max_velocity=float(physics_data["max_velocity"]),
        damping=float(physics_data["damping"]),
        tick_budget_ms=float(physics_data.get("tick_budget_ms", 16.0)),
        min_jump_interval_ms=float(physics_data["min_jump_interval_ms"]),
        delta_time_cooldown=bool(physics_data.get("delta_time_cooldown", False))
    )

    obs_data = raw["obstacles"]
    obstacles = ObstacleConfig(
        base_speed=float(obs_data["base_speed"]),
        max_speed_adjustment=float(obs_data.get("max_speed_adjustment", 1.0)),
        reference_width=float(obs_data.get("reference_width", 1920)),
        min_height_max=float(obs_data["min_height_max"]),
        min_height_ratio=float(obs_data["min_height_ratio"])
    )

    session_data = raw["session"]
    session = SessionConfig(
        restart_lock_ms=float(session_data["restart_lock_ms"]),
        max_notices=int(session_data.get("max_notices", 5))
    )

    services_data = raw.get("services", {})
    services = ServicesConfig(
        default_player_name=str(services_data.get("default_player_name", "Player")),
        display_name_max_length=int(services_data.get("display_name_max_length", 20)),
        leaderboard_top_n=int(services_data.get("leaderboard_top_n", 10)),
        leaderboard_path=str(services_data.get("leaderboard_path", "flappy_leaderboard.db")),
        storage_path=str(services_data.get("storage_path", "flappy_local.json"))
    )

    observation_data = raw.get("observation", {})
    observation = ObservationConfig(
        max_obstacles=int(observation_data.get("max_obstacles", 6)),
        max_ticks=int(observation_data.get("max_ticks", 20000))
    )

    config = GameConfig(
        viewport=viewport,
        physics=physics,
        obstacles=obstacles,
        session=session,
        services=services,
        observation=observation
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config

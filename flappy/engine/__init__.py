"""
Flappy Engine - The real-time simulation core.

This module provides the per-frame simulation, the session lifecycle and a
Gymnasium environment wrapper.

Main exports:
- CoreGame: Frame driver (viewport, physics, obstacles, collision, scoring)
- SessionStateMachine: NotStarted -> Playing -> Ended lifecycle
- FlappyEnv: Gymnasium environment for agent training
- GameConfig: Configuration loaded from game_config.yaml
"""

from flappy.engine.config_loader import GameConfig, load_config
from flappy.engine.viewport import ViewportParams, compute_viewport
from flappy.engine.flyer import Flyer, FlyerPhysics
from flappy.engine.obstacles import Obstacle, ObstacleStream
from flappy.engine.rules import CollisionRules, TerminationResult
from flappy.engine.scoring import ScoreTracker
from flappy.engine.session import (
    InputEvent,
    RestartLock,
    Session,
    SessionState,
    SessionStateMachine,
)
from flappy.engine.state_snapshot import GameSnapshot
from flappy.engine.game import CoreGame, TickResult
from flappy.engine.env_gym import FlappyEnv

__all__ = [
    "GameConfig",
    "load_config",
    "ViewportParams",
    "compute_viewport",
    "Flyer",
    "FlyerPhysics",
    "Obstacle",
    "ObstacleStream",
    "CollisionRules",
    "TerminationResult",
    "ScoreTracker",
    "InputEvent",
    "RestartLock",
    "Session",
    "SessionState",
    "SessionStateMachine",
    "GameSnapshot",
    "CoreGame",
    "TickResult",
    "FlappyEnv",
]

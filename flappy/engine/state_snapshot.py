"""
State Snapshot
==============

Read-only view of the simulation for renderers, plus packing into
fixed-size numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, TYPE_CHECKING
import numpy as np

from flappy.engine.config_loader import GameConfig, get_config

if TYPE_CHECKING:
    from flappy.engine.session import Session
    from flappy.engine.viewport import ViewportParams


@dataclass(frozen=True)
class FlyerView:
    x: float
    y: float
    velocity: float
    width: float
    height: float
    jump_cooldown_ms: float


@dataclass(frozen=True)
class ObstacleView:
    x: float
    top_height: float
    gap: float
    width: float
    passed: bool

    @property
    def bottom_start(self) -> float:
        return self.top_height + self.gap


@dataclass(frozen=True)
class GameSnapshot:
    """
    Complete, immutable state of one tick.

    Obstacles are ordered oldest first, exactly as the simulation holds them.
    """
    state: str
    score: int
    best_score: int
    restart_locked: bool
    end_reason: str
    ticks: int
    flyer: FlyerView
    obstacles: Tuple[ObstacleView, ...]
    viewport: "ViewportParams"
    notices: Tuple[str, ...]
    max_obstacles: int

    def next_obstacle(self) -> Optional[ObstacleView]:
        """First obstacle whose right edge is still ahead of the flyer."""
        for obstacle in self.obstacles:
            if obstacle.x + obstacle.width >= self.flyer.x:
                return obstacle
        return None

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        n = self.max_obstacles
        obstacle_x = np.zeros(n, dtype=np.float32)
        obstacle_top = np.zeros(n, dtype=np.float32)
        obstacle_bottom = np.zeros(n, dtype=np.float32)
        obstacle_width = np.zeros(n, dtype=np.float32)
        obstacle_mask = np.zeros(n, dtype=np.int8)

        for i, obstacle in enumerate(self.obstacles[:n]):
            obstacle_x[i] = obstacle.x
            obstacle_top[i] = obstacle.top_height
            obstacle_bottom[i] = obstacle.bottom_start
            obstacle_width[i] = obstacle.width
            obstacle_mask[i] = 1

        upcoming = self.next_obstacle()
        if upcoming is not None:
            next_dx = upcoming.x - self.flyer.x
            next_top = upcoming.top_height
            next_bottom = upcoming.bottom_start
        else:
            # No obstacle ahead: report the whole playfield as open
            next_dx = self.viewport.width - self.flyer.x
            next_top = 0.0
            next_bottom = self.viewport.height

        return {
            "flyer_y": np.array(self.flyer.y, dtype=np.float32),
            "flyer_velocity": np.array(self.flyer.velocity, dtype=np.float32),
            "jump_cooldown": np.array(self.flyer.jump_cooldown_ms, dtype=np.float32),
            "score": np.array(self.score, dtype=np.int64),
            "board_width": np.array(self.viewport.width, dtype=np.float32),
            "board_height": np.array(self.viewport.height, dtype=np.float32),
            "next_obstacle_dx": np.array(next_dx, dtype=np.float32),
            "next_gap_top": np.array(next_top, dtype=np.float32),
            "next_gap_bottom": np.array(next_bottom, dtype=np.float32),
            "obstacle_x": obstacle_x,
            "obstacle_top": obstacle_top,
            "obstacle_bottom": obstacle_bottom,
            "obstacle_width": obstacle_width,
            "obstacle_mask": obstacle_mask,
        }


class SnapshotBuilder:
    """Builds game state snapshots."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_obstacles = config.observation.max_obstacles

    @property
    def max_obstacles(self) -> int:
        return self._max_obstacles

    def build(
        self,
        session: "Session",
        viewport: "ViewportParams",
        restart_locked: bool
    ) -> GameSnapshot:
        """Build a snapshot from current session state."""
        flyer = session.flyer
        return GameSnapshot(
            state=session.state.value,
            score=session.score,
            best_score=session.best_score,
            restart_locked=restart_locked,
            end_reason=session.end_reason,
            ticks=session.ticks,
            flyer=FlyerView(
                x=flyer.x,
                y=flyer.y,
                velocity=flyer.velocity,
                width=flyer.width,
                height=flyer.height,
                jump_cooldown_ms=flyer.jump_cooldown_ms
            ),
            obstacles=tuple(
                ObstacleView(o.x, o.top_height, o.gap, o.width, o.passed)
                for o in session.obstacles
            ),
            viewport=viewport,
            notices=tuple(session.notices),
            max_obstacles=self._max_obstacles
        )

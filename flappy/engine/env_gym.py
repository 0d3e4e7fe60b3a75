"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the flappy game.
One step is one frame tick on a synthetic clock advancing by the tick budget.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from flappy.engine.config_loader import GameConfig, load_config
from flappy.engine.game import CoreGame
from flappy.engine.session import InputEvent, SessionState

FLYER_COLOR = (255, 220, 80)
OBSTACLE_COLOR = (40, 170, 90)
BACKGROUND_COLOR = (26, 26, 62)


class FlappyEnv(gym.Env):
    """
    Flappy game as a Gymnasium environment.

    Action Space:
        Discrete(2): 0 = do nothing, 1 = jump.

    Observation Space:
        Dict of flyer state, next-gap features and padded obstacle arrays.

    Reward:
        Points scored during the step (1.0 per obstacle passed).

    Termination:
        Collision with an obstacle or the playfield bounds.
        Truncated after observation.max_ticks steps.
    """

    metadata = {
        "render_modes": ["rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        width: Optional[float] = None,
        height: Optional[float] = None,
        render_mode: Optional[str] = None,
        debug: bool = False,
    ):
        """
        Initialize flappy environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            width: Playfield width. Config default if None.
            height: Playfield height. Config default if None.
            render_mode: "rgb_array" for numpy frames, None for headless.
            debug: If True, enables verbose debug output.
        """
        super().__init__()

        self._config = load_config(config_path)
        self.render_mode = render_mode
        self._debug = debug

        self._game = CoreGame(config=self._config, width=width, height=height)
        self._tick_ms = self._config.physics.tick_budget_ms
        self._now_ms = 0.0
        self._max_ticks = self._config.observation.max_ticks

        self.action_space = spaces.Discrete(2)
        self.observation_space = self._build_observation_space()

        if self._debug:
            vp = self._game.viewport
            print(f"[DEBUG] FlappyEnv initialized")
            print(f"[DEBUG]   Board: {vp.width:.0f}x{vp.height:.0f}")
            print(f"[DEBUG]   Gap: {vp.gap:.1f}, pipe speed: {vp.pipe_speed:.2f}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        n = self._config.observation.max_obstacles
        vp = self._game.viewport

        return spaces.Dict({
            "flyer_y": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "flyer_velocity": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "jump_cooldown": spaces.Box(
                low=0, high=self._config.physics.min_jump_interval_ms, shape=(), dtype=np.float32
            ),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "board_width": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "board_height": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "next_obstacle_dx": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "next_gap_top": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "next_gap_bottom": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "obstacle_x": spaces.Box(low=-np.inf, high=np.inf, shape=(n,), dtype=np.float32),
            "obstacle_top": spaces.Box(low=0, high=np.inf, shape=(n,), dtype=np.float32),
            "obstacle_bottom": spaces.Box(low=0, high=np.inf, shape=(n,), dtype=np.float32),
            "obstacle_width": spaces.Box(low=0, high=vp.width, shape=(n,), dtype=np.float32),
            "obstacle_mask": spaces.MultiBinary(n),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        if self._game.is_playing:
            self._game.machine.end(self._now_ms, "reset")

        # Skip past any restart lock; the synthetic clock is ours to move
        self._now_ms += self._config.session.restart_lock_ms + self._tick_ms
        self._game.start(self._now_ms, seed=seed)

        info = self._game.get_info()
        info["delta_score"] = 0
        return self._game.snapshot(self._now_ms).to_obs_dict(), info

    def step(
        self,
        action: Union[int, np.integer, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one frame.

        Args:
            action: 1 to request a jump, 0 otherwise.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item() if action.ndim == 0 else action[0])

        if int(action) == 1:
            self._game.handle_input(InputEvent.JUMP_OR_START, self._now_ms)

        self._now_ms += self._tick_ms
        result = self._game.tick(self._now_ms)

        terminated = self._game.state == SessionState.ENDED
        truncated = not terminated and self._game.session.ticks >= self._max_ticks

        info = self._game.get_info()
        info["delta_score"] = result.delta_score

        if self._debug:
            print(f"[DEBUG] Step: action={int(action)}, delta_score={result.delta_score}, "
                  f"y={self._game.session.flyer.y:.1f}")
            if terminated:
                print(f"[DEBUG] TERMINATED: {info.get('terminated_reason', 'unknown')}")

        obs = self._game.snapshot(self._now_ms).to_obs_dict()
        return obs, float(result.delta_score), terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode != "rgb_array":
            return None

        snapshot = self._game.snapshot(self._now_ms)
        vp = snapshot.viewport
        height, width = int(vp.height), int(vp.width)
        frame = np.empty((height, width, 3), dtype=np.uint8)
        frame[:, :] = BACKGROUND_COLOR

        def fill(x0: float, y0: float, x1: float, y1: float, color) -> None:
            c0, c1 = max(0, int(x0)), min(width, int(x1))
            r0, r1 = max(0, int(y0)), min(height, int(y1))
            if c0 < c1 and r0 < r1:
                frame[r0:r1, c0:c1] = color

        for obstacle in snapshot.obstacles:
            right = obstacle.x + obstacle.width
            fill(obstacle.x, 0, right, obstacle.top_height, OBSTACLE_COLOR)
            fill(obstacle.x, obstacle.bottom_start, right, height, OBSTACLE_COLOR)

        flyer = snapshot.flyer
        fill(flyer.x, flyer.y, flyer.x + flyer.width, flyer.y + flyer.height, FLYER_COLOR)
        return frame

    def close(self) -> None:
        """Clean up resources."""

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

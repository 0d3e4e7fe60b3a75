"""
Flyer Physics
=============

Per-tick vertical integration for the player-controlled flyer, plus the
input-driven jump request with its cooldown.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flappy.engine.config_loader import GameConfig, get_config
from flappy.engine.viewport import ViewportParams


@dataclass
class Flyer:
    """Mutable flyer state. x is fixed after layout, y moves every tick."""
    x: float = 0.0
    y: float = 0.0
    velocity: float = 0.0
    width: float = 35.0
    height: float = 50.0
    jump_cooldown_ms: float = 0.0

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def right(self) -> float:
        return self.x + self.width


class FlyerPhysics:
    """
    Integrates flyer motion one tick at a time.

    Velocities are in pixels per tick. While ascending the velocity is damped
    to soften the jump arc without a separate ascent state. Cooldown decays by
    the nominal tick budget unless delta-time cooldown is enabled in config.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize flyer physics.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        physics = config.physics
        self._gravity = physics.gravity
        self._jump_impulse = physics.jump_impulse
        self._max_velocity = physics.max_velocity
        self._damping = physics.damping
        self._tick_budget_ms = physics.tick_budget_ms
        self._min_jump_interval_ms = physics.min_jump_interval_ms
        self._delta_time_cooldown = physics.delta_time_cooldown

    @property
    def max_velocity(self) -> float:
        return self._max_velocity

    @property
    def jump_impulse(self) -> float:
        return self._jump_impulse

    @property
    def min_jump_interval_ms(self) -> float:
        return self._min_jump_interval_ms

    def place(self, flyer: Flyer, viewport: ViewportParams) -> None:
        """Reset flyer pose and size to the viewport origin."""
        flyer.x, flyer.y = viewport.flyer_origin
        flyer.width = viewport.flyer_width
        flyer.height = viewport.flyer_height
        flyer.velocity = 0.0
        flyer.jump_cooldown_ms = 0.0

    def relayout(self, flyer: Flyer, viewport: ViewportParams) -> None:
        """Recenter and resize the flyer for a new viewport, keeping its motion."""
        flyer.x, flyer.y = viewport.flyer_origin
        flyer.width = viewport.flyer_width
        flyer.height = viewport.flyer_height

    def step(self, flyer: Flyer, elapsed_ms: Optional[float] = None) -> None:
        """
        Advance the flyer by one tick.

        Args:
            flyer: Flyer to mutate.
            elapsed_ms: Real time since the previous tick. Only used for
                cooldown decay when delta-time cooldown is enabled.
        """
        velocity = min(flyer.velocity + self._gravity, self._max_velocity)
        if velocity < 0:
            velocity *= self._damping
        flyer.velocity = velocity
        flyer.y += velocity

        budget = self._tick_budget_ms
        if self._delta_time_cooldown and elapsed_ms is not None:
            budget = max(0.0, elapsed_ms)
        flyer.jump_cooldown_ms = max(0.0, flyer.jump_cooldown_ms - budget)

    def request_jump(self, flyer: Flyer) -> bool:
        """
        Apply a jump impulse if the cooldown has expired.

        Returns:
            True if the jump was accepted. Rejected requests change nothing.
        """
        if flyer.jump_cooldown_ms > 0:
            return False
        flyer.velocity = self._jump_impulse
        flyer.jump_cooldown_ms = self._min_jump_interval_ms
        return True

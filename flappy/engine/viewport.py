"""
Viewport Parameters
===================

Derives every size-dependent constant from the current playfield dimensions.
Parameters are recomputed wholesale on resize, never patched field by field.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from flappy.engine.config_loader import GameConfig, get_config


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


@dataclass(frozen=True)
class ViewportParams:
    """Playfield size and all constants derived from it."""
    width: float
    height: float
    obstacle_width: float
    gap: float
    spawn_interval_ms: float
    flyer_width: float
    flyer_height: float
    flyer_origin: Tuple[float, float]
    obstacle_min_height: float
    pipe_speed: float

    @property
    def size(self) -> Tuple[float, float]:
        return (self.width, self.height)

    @property
    def spawn_top_range(self) -> Tuple[float, float]:
        """
        Range of valid top-segment heights for a newly spawned obstacle.

        The upper bound is clamped to at least the lower bound so a tiny
        playfield yields a single valid height instead of an inverted range.
        """
        low = self.obstacle_min_height
        high = self.height - self.gap - self.obstacle_min_height
        return (low, max(low, high))


def compute_viewport(
    width: float,
    height: float,
    config: Optional[GameConfig] = None
) -> ViewportParams:
    """
    Compute viewport parameters for a playfield.

    Args:
        width: Playfield width in pixels.
        height: Playfield height in pixels.
        config: Game configuration. Uses default if None.

    Returns:
        Frozen ViewportParams. Never raises; degenerate sizes are clamped.
    """
    if config is None:
        config = get_config()

    vp = config.viewport
    obs = config.obstacles

    width = max(1.0, float(width))
    height = max(1.0, float(height))

    gap = _clamp(height * vp.gap_ratio, vp.gap_min, vp.gap_max)
    gap = min(gap, height * vp.gap_max_height_ratio)

    flyer_width = min(vp.flyer_width_max, width * vp.flyer_width_ratio)

    speed_adjustment = min(width / obs.reference_width, 1.0) * obs.max_speed_adjustment

    return ViewportParams(
        width=width,
        height=height,
        obstacle_width=min(vp.obstacle_width_max, width * vp.obstacle_width_ratio),
        gap=gap,
        spawn_interval_ms=_clamp(width, vp.spawn_interval_min_ms, vp.spawn_interval_max_ms),
        flyer_width=flyer_width,
        flyer_height=flyer_width * vp.flyer_aspect,
        flyer_origin=(width * vp.flyer_origin_x_ratio, height * vp.flyer_origin_y_ratio),
        obstacle_min_height=min(obs.min_height_max, height * obs.min_height_ratio),
        pipe_speed=obs.base_speed + speed_adjustment
    )

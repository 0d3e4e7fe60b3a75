"""
Obstacle Stream
===============

Generates, advances, and retires gapped obstacles.

Obstacles live in a deque ordered oldest-first. They all scroll at the same
speed and a new obstacle never spawns left of the newest one, even after the
playfield shrinks, so x never decreases from front to back and eviction only
has to look at the front.
"""

from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, List, Optional

from flappy.engine.viewport import ViewportParams


@dataclass
class Obstacle:
    """
    A top/bottom barrier pair.

    gap and width are captured at spawn time so a resize never moves the gap
    of an obstacle already in flight.
    """
    x: float
    top_height: float
    gap: float
    width: float
    passed: bool = False

    @property
    def bottom_start(self) -> float:
        """Y coordinate where the bottom segment begins."""
        return self.top_height + self.gap

    @property
    def right(self) -> float:
        return self.x + self.width


class ObstacleStream:
    """Spawn timer plus the ordered collection of live obstacles."""

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize obstacle stream.

        Args:
            seed: Random seed for gap placement. Random if None.
        """
        self._rng = random.Random(seed)
        self._obstacles: Deque[Obstacle] = deque()
        self._last_spawn_ms: Optional[float] = None

    def __iter__(self) -> Iterator[Obstacle]:
        return iter(self._obstacles)

    def __len__(self) -> int:
        return len(self._obstacles)

    @property
    def obstacles(self) -> List[Obstacle]:
        """Live obstacles, oldest first."""
        return list(self._obstacles)

    @property
    def last_spawn_ms(self) -> Optional[float]:
        return self._last_spawn_ms

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Clear all obstacles and the spawn timer.

        Args:
            seed: New random seed. Keeps current generator if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)
        self._obstacles.clear()
        self._last_spawn_ms = None

    def spawn(self, viewport: ViewportParams) -> Obstacle:
        """
        Append one obstacle at the right edge of the playfield.

        Never places it left of the newest obstacle, so order holds even when
        called directly after a shrink.
        """
        x = viewport.width
        if self._obstacles:
            x = max(x, self._obstacles[-1].x)

        low, high = viewport.spawn_top_range
        obstacle = Obstacle(
            x=x,
            top_height=self._rng.uniform(low, high),
            gap=viewport.gap,
            width=viewport.obstacle_width
        )
        self._obstacles.append(obstacle)
        return obstacle

    def maybe_spawn(self, now_ms: float, viewport: ViewportParams) -> Optional[Obstacle]:
        """
        Spawn if the spawn interval has elapsed.

        The first call after a reset always spawns. After a shrink the timer
        is held while the newest obstacle is still right of the playfield, so
        the interval counts from when it scrolls back into view.

        Returns:
            The new obstacle, or None.
        """
        if self._obstacles and self._obstacles[-1].x > viewport.width:
            self._last_spawn_ms = now_ms
            return None
        if (self._last_spawn_ms is not None
                and now_ms - self._last_spawn_ms <= viewport.spawn_interval_ms):
            return None
        self._last_spawn_ms = now_ms
        return self.spawn(viewport)

    def advance(self, viewport: ViewportParams) -> None:
        """Scroll every obstacle left by the current pipe speed."""
        speed = viewport.pipe_speed
        for obstacle in self._obstacles:
            obstacle.x -= speed

    def evict(self) -> Optional[Obstacle]:
        """
        Remove the oldest obstacle once it is fully off the left edge.

        Returns:
            The evicted obstacle, or None.
        """
        if self._obstacles and self._obstacles[0].x < -self._obstacles[0].width:
            return self._obstacles.popleft()
        return None

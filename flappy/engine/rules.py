"""
Game Rules
==========

Collision and boundary checks that end a session.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from flappy.engine.flyer import Flyer
from flappy.engine.obstacles import Obstacle
from flappy.engine.viewport import ViewportParams


@dataclass
class TerminationResult:
    """Result of termination check."""
    terminated: bool
    reason: str

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, "")

    @staticmethod
    def game_over(reason: str) -> "TerminationResult":
        return TerminationResult(True, reason)


class CollisionRules:
    """
    Axis-aligned checks between the flyer, obstacles and the playfield.

    - Obstacle: horizontal overlap while outside the gap
    - Bounds: flyer above the top edge or below the bottom edge

    Both produce the same transition, so the first violation found wins.
    """

    @staticmethod
    def hits_obstacle(flyer: Flyer, obstacle: Obstacle) -> bool:
        """True if the flyer overlaps a solid segment of the obstacle."""
        overlaps_x = flyer.right > obstacle.x and flyer.x < obstacle.right
        outside_gap = flyer.y < obstacle.top_height or flyer.bottom > obstacle.bottom_start
        return overlaps_x and outside_gap

    @staticmethod
    def out_of_bounds(flyer: Flyer, viewport: ViewportParams) -> bool:
        """True if any part of the flyer has left the playfield vertically."""
        return flyer.y < 0 or flyer.bottom > viewport.height

    def check(
        self,
        flyer: Flyer,
        obstacles: Iterable[Obstacle],
        viewport: ViewportParams
    ) -> TerminationResult:
        """
        Check all termination conditions for this tick.

        Args:
            flyer: Current flyer state.
            obstacles: Live obstacles.
            viewport: Current viewport parameters.

        Returns:
            TerminationResult indicating whether the session ends.
        """
        for obstacle in obstacles:
            if self.hits_obstacle(flyer, obstacle):
                return TerminationResult.game_over("obstacle")

        if self.out_of_bounds(flyer, viewport):
            return TerminationResult.game_over("out_of_bounds")

        return TerminationResult.none()

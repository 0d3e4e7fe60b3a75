"""
Scoring System
==============

Awards one point per obstacle the flyer has fully passed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from flappy.engine.flyer import Flyer
from flappy.engine.obstacles import Obstacle


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    points: int
    obstacle_x: float

    def __repr__(self) -> str:
        return f"ScoreEvent(+{self.points} at x={self.obstacle_x:.1f})"


class ScoreTracker:
    """
    Tracks session score and the best score seen so far.

    The passed flag on each obstacle makes scoring idempotent: an obstacle
    contributes at most one point for its whole lifetime.
    """

    POINTS_PER_OBSTACLE = 1

    def __init__(self, best_score: int = 0):
        """
        Initialize score tracker.

        Args:
            best_score: Previously persisted best score.
        """
        self._score: int = 0
        self._best_score: int = max(0, int(best_score))

    @property
    def score(self) -> int:
        """Current session score."""
        return self._score

    @property
    def best_score(self) -> int:
        """Best score across sessions."""
        return self._best_score

    @best_score.setter
    def best_score(self, value: int) -> None:
        self._best_score = max(0, int(value))

    def update(self, flyer: Flyer, obstacles: Iterable[Obstacle]) -> List[ScoreEvent]:
        """
        Mark newly passed obstacles and award points.

        Args:
            flyer: Current flyer state.
            obstacles: Live obstacles.

        Returns:
            Score events produced this tick.
        """
        events = []
        for obstacle in obstacles:
            if not obstacle.passed and flyer.x > obstacle.right:
                obstacle.passed = True
                self._score += self.POINTS_PER_OBSTACLE
                events.append(ScoreEvent(self.POINTS_PER_OBSTACLE, obstacle.x))
        return events

    def commit_best(self) -> bool:
        """
        Promote the session score to best score if it beats it.

        Returns:
            True if a new best was recorded.
        """
        if self._score > self._best_score:
            self._best_score = self._score
            return True
        return False

    def reset(self) -> None:
        """Reset session score to zero. Best score is kept."""
        self._score = 0

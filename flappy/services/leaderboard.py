"""
Leaderboard
===========

SQLite-backed high-score table. One row per player name; submitting keeps the
maximum score for that name.
"""

from __future__ import annotations

import sqlite3
from typing import List, Protocol, Tuple

from flappy.services.names import sanitize_display_name


class LeaderboardClient(Protocol):
    """What the session needs from a leaderboard."""

    def submit(self, name: str, score: int) -> None: ...

    def fetch_top(self, n: int) -> List[Tuple[str, int]]: ...


class Leaderboard:
    """Handles all interaction with the leaderboard database."""

    def __init__(self, db_file: str = ":memory:", max_name_length: int = 20):
        self.conn = sqlite3.connect(db_file)
        self._max_name_length = max_name_length
        self.setup()

    def setup(self) -> None:
        """Creates tables if they don't exist."""
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS Scores (
                name TEXT PRIMARY KEY,
                best INTEGER NOT NULL DEFAULT 0
            )
        """)
        self.conn.commit()

    def submit(self, name: str, score: int) -> None:
        """
        Record a score for a player, keeping their best.

        Raises:
            ValueError: If the name is empty after sanitization.
        """
        safe_name = sanitize_display_name(name, self._max_name_length)
        if not safe_name:
            raise ValueError("Display name is empty after sanitization")

        self.conn.execute(
            """
            INSERT INTO Scores (name, best) VALUES (?, ?)
            ON CONFLICT(name) DO UPDATE SET best = MAX(best, excluded.best)
            """,
            (safe_name, max(0, int(score)))
        )
        self.conn.commit()

    def fetch_top(self, n: int = 10) -> List[Tuple[str, int]]:
        """Fetches the top scores (name, best_score)."""
        cur = self.conn.execute(
            "SELECT name, best FROM Scores ORDER BY best DESC, name ASC LIMIT ?",
            (max(0, int(n)),)
        )
        return [(name, int(best)) for name, best in cur.fetchall()]

    def close(self) -> None:
        self.conn.close()

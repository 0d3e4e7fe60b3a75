"""
Local Storage
=============

Persists the player's best score and display name in a small JSON file.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional, Union

from flappy.services.names import sanitize_display_name

logger = logging.getLogger(__name__)


@dataclass
class StoredProfile:
    """Everything kept between sessions."""
    best_score: int = 0
    player_name: str = ""


class LocalStore:
    """
    JSON-file backed profile store.

    A missing or unreadable file reads as an empty profile; the session keeps
    running either way.
    """

    def __init__(self, path: Union[str, Path], max_name_length: int = 20):
        """
        Initialize store.

        Args:
            path: JSON file location.
            max_name_length: Cap applied when sanitizing the stored name.
        """
        self._path = Path(path)
        self._max_name_length = max_name_length

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> StoredProfile:
        """Read the stored profile, falling back to defaults."""
        if not self._path.exists():
            return StoredProfile()

        try:
            with open(self._path, "r") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read %s: %s", self._path, e)
            return StoredProfile()

        if not isinstance(raw, dict):
            logger.warning("Ignoring malformed profile in %s", self._path)
            return StoredProfile()

        try:
            best_score = max(0, int(raw.get("best_score", 0)))
        except (TypeError, ValueError):
            best_score = 0

        return StoredProfile(
            best_score=best_score,
            player_name=sanitize_display_name(raw.get("player_name"), self._max_name_length)
        )

    def save(self, profile: StoredProfile) -> None:
        """
        Write the profile.

        Raises:
            OSError: If the file cannot be written.
        """
        profile = StoredProfile(
            best_score=max(0, int(profile.best_score)),
            player_name=sanitize_display_name(profile.player_name, self._max_name_length)
        )
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w") as f:
            json.dump(asdict(profile), f, indent=2)

    def save_best_score(self, best_score: int) -> None:
        """Update only the best score."""
        profile = self.load()
        profile.best_score = best_score
        self.save(profile)

    def save_player_name(self, name: Optional[str]) -> str:
        """
        Update only the player name.

        Returns:
            The sanitized name that was stored.
        """
        profile = self.load()
        profile.player_name = sanitize_display_name(name, self._max_name_length)
        self.save(profile)
        return profile.player_name

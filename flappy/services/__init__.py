"""
Flappy Services
===============

Collaborators the session talks to at its boundary: audio, local storage,
the leaderboard, and display-name sanitization.
"""

from flappy.services.audio import AudioHandle, NullAudio
from flappy.services.leaderboard import Leaderboard, LeaderboardClient
from flappy.services.names import sanitize_display_name
from flappy.services.storage import LocalStore, StoredProfile

__all__ = [
    "AudioHandle",
    "NullAudio",
    "Leaderboard",
    "LeaderboardClient",
    "sanitize_display_name",
    "LocalStore",
    "StoredProfile",
]

"""
Session State Machine
=====================

Owns the session context (flyer, obstacles, score) and drives the
NotStarted -> Playing -> Ended -> Playing lifecycle.

This is the only module that talks to external collaborators (audio, local
storage, leaderboard). Collaborator failures are logged and never end or
crash the running session.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, List, Optional, Tuple

from flappy.engine.config_loader import GameConfig, get_config
from flappy.engine.flyer import Flyer, FlyerPhysics
from flappy.engine.obstacles import ObstacleStream
from flappy.engine.scoring import ScoreTracker
from flappy.engine.viewport import ViewportParams, compute_viewport
from flappy.services.audio import AudioHandle
from flappy.services.leaderboard import LeaderboardClient
from flappy.services.names import sanitize_display_name
from flappy.services.storage import LocalStore

logger = logging.getLogger(__name__)


class SessionState(Enum):
    NOT_STARTED = "not_started"
    PLAYING = "playing"
    ENDED = "ended"


class InputEvent(Enum):
    """Semantic input events. Keys and touches both map onto these."""
    JUMP_OR_START = "jump_or_start"
    RESTART = "restart"


@dataclass(frozen=True)
class RestartLock:
    """
    Expiring token that blocks restart input until its deadline.

    Every end of a session arms a fresh token, so an earlier session's lock
    can never release or extend a later one.
    """
    deadline_ms: float

    def is_active(self, now_ms: float) -> bool:
        return now_ms < self.deadline_ms


@dataclass
class Session:
    """Mutable per-session context handed to the simulation each tick."""
    flyer: Flyer
    obstacles: ObstacleStream
    scorer: ScoreTracker
    state: SessionState = SessionState.NOT_STARTED
    restart_lock: Optional[RestartLock] = None
    end_reason: str = ""
    started_at_ms: Optional[float] = None
    last_tick_ms: Optional[float] = None
    ticks: int = 0
    notices: Deque[str] = field(default_factory=lambda: deque(maxlen=5))

    @property
    def score(self) -> int:
        return self.scorer.score

    @property
    def best_score(self) -> int:
        return self.scorer.best_score


class SessionStateMachine:
    """
    Lifecycle controller for one player's sessions.

    Transitions:
        NOT_STARTED --start()--> PLAYING
        PLAYING     --end()-->   ENDED (restart lock armed)
        ENDED       --start()--> PLAYING (only once the lock expired)
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        physics: Optional[FlyerPhysics] = None,
        viewport: Optional[ViewportParams] = None,
        audio: Optional[AudioHandle] = None,
        store: Optional[LocalStore] = None,
        leaderboard: Optional[LeaderboardClient] = None,
        player_name: Optional[str] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize the state machine.

        Args:
            config: Game configuration. Uses default if None.
            physics: Flyer physics used for placement and jumps.
            viewport: Initial viewport. Derived from config defaults if None.
            audio: Background music handle, or None for silence.
            store: Local profile store, or None to keep nothing on disk.
            leaderboard: Leaderboard collaborator, or None to skip submission.
            player_name: Replaces and persists the stored player name when given.
            seed: Random seed for obstacle placement.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._physics = physics or FlyerPhysics(config)
        self._viewport = viewport or compute_viewport(
            config.viewport.default_width,
            config.viewport.default_height,
            config
        )
        self._audio = audio
        self._store = store
        self._leaderboard = leaderboard
        self._lock_ms = config.session.restart_lock_ms
        self._name_max = config.services.display_name_max_length

        profile_best, profile_name = self._load_profile()

        self._player_name = profile_name

        self._session = Session(
            flyer=Flyer(),
            obstacles=ObstacleStream(seed),
            scorer=ScoreTracker(best_score=profile_best),
            notices=deque(maxlen=config.session.max_notices)
        )
        self._physics.place(self._session.flyer, self._viewport)

        if player_name is not None:
            self.set_player_name(player_name)

    @property
    def session(self) -> Session:
        return self._session

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def physics(self) -> FlyerPhysics:
        return self._physics

    @property
    def viewport(self) -> ViewportParams:
        return self._viewport

    @viewport.setter
    def viewport(self, viewport: ViewportParams) -> None:
        self._viewport = viewport
        # Every resize recenters the flyer; only an idle flyer also loses its motion
        if self._session.state == SessionState.NOT_STARTED:
            self._physics.place(self._session.flyer, viewport)
        else:
            self._physics.relayout(self._session.flyer, viewport)

    @property
    def player_name(self) -> str:
        """Sanitized display name, falling back to the configured default."""
        return self._player_name or self._config.services.default_player_name

    def set_player_name(self, raw: Optional[str]) -> str:
        """
        Sanitize and store a new display name.

        Returns:
            The sanitized name now in use.
        """
        self._player_name = sanitize_display_name(raw, self._name_max)
        if self._store is not None:
            try:
                self._store.save_player_name(self._player_name)
            except OSError as e:
                logger.warning("Could not persist player name: %s", e)
        return self.player_name

    def is_restart_locked(self, now_ms: float) -> bool:
        lock = self._session.restart_lock
        return lock is not None and lock.is_active(now_ms)

    def start(self, now_ms: float, seed: Optional[int] = None) -> bool:
        """
        Begin a new session.

        Valid from NOT_STARTED, or from ENDED once the restart lock expired.

        Returns:
            True if the session entered PLAYING.
        """
        session = self._session
        if session.state == SessionState.PLAYING:
            return False
        if session.state == SessionState.ENDED and self.is_restart_locked(now_ms):
            return False

        session.scorer.reset()
        session.obstacles.reset(seed)
        self._physics.place(session.flyer, self._viewport)
        session.restart_lock = None
        session.end_reason = ""
        session.started_at_ms = now_ms
        session.last_tick_ms = None
        session.ticks = 0
        session.state = SessionState.PLAYING

        self._start_audio()
        logger.debug("Session started at %.1f ms", now_ms)
        return True

    def end(self, now_ms: float, reason: str = "") -> bool:
        """
        Finish the running session.

        Arms a fresh restart lock, stops the music and records a new best
        score (persisted and submitted once).

        Returns:
            True if the session moved to ENDED.
        """
        session = self._session
        if session.state != SessionState.PLAYING:
            return False

        session.state = SessionState.ENDED
        session.end_reason = reason
        session.restart_lock = RestartLock(deadline_ms=now_ms + self._lock_ms)

        self._stop_audio()

        if session.scorer.commit_best():
            self._persist_best(session.best_score)
            self._submit_score(session.best_score)

        logger.debug("Session ended (%s) with score %d", reason or "unknown", session.score)
        return True

    def handle_input(self, event: InputEvent, now_ms: float) -> bool:
        """
        Route a semantic input event for the current state.

        Returns:
            True if the event had an effect. Events that are invalid in the
            current state are ignored.
        """
        state = self._session.state

        if state == SessionState.NOT_STARTED:
            return self.start(now_ms)

        if state == SessionState.PLAYING:
            if event == InputEvent.JUMP_OR_START:
                return self._physics.request_jump(self._session.flyer)
            return False

        # ENDED: start() rejects while the lock is active
        return self.start(now_ms)

    def top_scores(self, n: Optional[int] = None) -> List[Tuple[str, int]]:
        """Fetch the leaderboard, or an empty list if unavailable."""
        if self._leaderboard is None:
            return []
        if n is None:
            n = self._config.services.leaderboard_top_n
        try:
            return self._leaderboard.fetch_top(n)
        except Exception as e:
            logger.warning("Leaderboard fetch failed: %s", e)
            return []

    def _load_profile(self) -> Tuple[int, str]:
        if self._store is None:
            return 0, ""
        profile = self._store.load()
        return profile.best_score, profile.player_name

    def _start_audio(self) -> None:
        if self._audio is None or self._audio.is_playing:
            return
        try:
            self._audio.rewind()
            self._audio.play()
        except Exception as e:
            logger.warning("Audio playback failed: %s", e)

    def _stop_audio(self) -> None:
        if self._audio is None:
            return
        try:
            self._audio.pause()
            self._audio.rewind()
        except Exception as e:
            logger.warning("Audio stop failed: %s", e)

    def _persist_best(self, best_score: int) -> None:
        if self._store is None:
            return
        try:
            self._store.save_best_score(best_score)
        except OSError as e:
            logger.warning("Could not persist best score: %s", e)

    def _submit_score(self, score: int) -> None:
        if self._leaderboard is None:
            return
        try:
            self._leaderboard.submit(self.player_name, score)
        except Exception as e:
            logger.warning("Leaderboard submission failed: %s", e)
            self._session.notices.append("Score could not be submitted to the leaderboard")

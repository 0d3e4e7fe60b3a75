"""
Core Game
=========

Frame driver combining viewport, flyer physics, obstacles, collision,
scoring and the session lifecycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

from flappy.engine.config_loader import GameConfig, get_config
from flappy.engine.flyer import FlyerPhysics
from flappy.engine.rules import CollisionRules
from flappy.engine.session import InputEvent, Session, SessionState, SessionStateMachine
from flappy.engine.state_snapshot import GameSnapshot, SnapshotBuilder
from flappy.engine.viewport import ViewportParams, compute_viewport
from flappy.services.audio import AudioHandle
from flappy.services.leaderboard import LeaderboardClient
from flappy.services.storage import LocalStore


@dataclass
class TickResult:
    """Result of a single frame tick."""
    state: SessionState
    simulated: bool
    ended: bool
    reason: str
    delta_score: int
    spawned: bool
    evicted: bool


class CoreGame:
    """
    Main game simulation class.

    One tick, in order:
    - Viewport recompute (only if a resize is pending)
    - Flyer physics
    - Obstacle spawn, advance, eviction
    - Collision and scoring
    - End transition

    Simulation only advances while the session is PLAYING; ticks in any other
    state only apply pending resizes. Timestamps are monotonically increasing
    milliseconds supplied by the caller.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        width: Optional[float] = None,
        height: Optional[float] = None,
        audio: Optional[AudioHandle] = None,
        store: Optional[LocalStore] = None,
        leaderboard: Optional[LeaderboardClient] = None,
        player_name: Optional[str] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            width: Playfield width. Config default if None.
            height: Playfield height. Config default if None.
            audio: Background music handle.
            store: Local profile store.
            leaderboard: Leaderboard collaborator.
            player_name: Display name (sanitized before use).
            seed: Random seed for obstacle placement.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed

        if width is None:
            width = config.viewport.default_width
        if height is None:
            height = config.viewport.default_height

        self._viewport = compute_viewport(width, height, config)
        self._pending_resize: Optional[Tuple[float, float]] = None
        self._clock_ms = 0.0

        self._physics = FlyerPhysics(config)
        self._rules = CollisionRules()
        self._machine = SessionStateMachine(
            config=config,
            physics=self._physics,
            viewport=self._viewport,
            audio=audio,
            store=store,
            leaderboard=leaderboard,
            player_name=player_name,
            seed=seed
        )
        self._snapshot_builder = SnapshotBuilder(config)

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def viewport(self) -> ViewportParams:
        """Current viewport parameters."""
        return self._viewport

    @property
    def machine(self) -> SessionStateMachine:
        """Session state machine."""
        return self._machine

    @property
    def session(self) -> Session:
        """Current session context."""
        return self._machine.session

    @property
    def state(self) -> SessionState:
        return self._machine.state

    @property
    def score(self) -> int:
        """Current score."""
        return self._machine.session.score

    @property
    def best_score(self) -> int:
        return self._machine.session.best_score

    @property
    def is_playing(self) -> bool:
        return self._machine.state == SessionState.PLAYING

    def resize(self, width: float, height: float) -> None:
        """Record a playfield resize, applied at the start of the next tick."""
        self._pending_resize = (width, height)

    def _apply_pending_resize(self) -> None:
        if self._pending_resize is None:
            return
        width, height = self._pending_resize
        self._pending_resize = None
        self._viewport = compute_viewport(width, height, self._config)
        self._machine.viewport = self._viewport

    def handle_input(self, event: InputEvent, now_ms: float) -> bool:
        """Forward a semantic input event to the session."""
        self._clock_ms = max(self._clock_ms, now_ms)
        return self._machine.handle_input(event, now_ms)

    def start(self, now_ms: float, seed: Optional[int] = None) -> bool:
        """Start a session directly, bypassing input routing."""
        self._clock_ms = max(self._clock_ms, now_ms)
        self._apply_pending_resize()
        return self._machine.start(now_ms, seed)

    def tick(self, now_ms: float) -> TickResult:
        """
        Execute one frame.

        Args:
            now_ms: Timestamp of this frame in milliseconds.

        Returns:
            TickResult describing what happened.
        """
        self._clock_ms = max(self._clock_ms, now_ms)
        self._apply_pending_resize()

        session = self._machine.session
        if session.state != SessionState.PLAYING:
            return TickResult(
                state=session.state,
                simulated=False,
                ended=False,
                reason=session.end_reason,
                delta_score=0,
                spawned=False,
                evicted=False
            )

        viewport = self._viewport
        flyer = session.flyer
        obstacles = session.obstacles

        elapsed_ms = None
        if session.last_tick_ms is not None:
            elapsed_ms = now_ms - session.last_tick_ms
        session.last_tick_ms = now_ms
        session.ticks += 1

        score_before = session.score

        self._physics.step(flyer, elapsed_ms)

        spawned = obstacles.maybe_spawn(now_ms, viewport) is not None
        obstacles.advance(viewport)
        evicted = obstacles.evict() is not None

        termination = self._rules.check(flyer, obstacles, viewport)
        session.scorer.update(flyer, obstacles)

        if termination.terminated:
            self._machine.end(now_ms, termination.reason)

        return TickResult(
            state=session.state,
            simulated=True,
            ended=termination.terminated,
            reason=termination.reason,
            delta_score=session.score - score_before,
            spawned=spawned,
            evicted=evicted
        )

    def run(self, timestamps: Iterable[float]) -> int:
        """
        Tick once per timestamp until the session leaves PLAYING.

        Args:
            timestamps: Frame timestamps in milliseconds.

        Returns:
            Number of frames simulated.
        """
        frames = 0
        for now_ms in timestamps:
            if self._machine.state != SessionState.PLAYING:
                break
            self.tick(now_ms)
            frames += 1
        return frames

    def snapshot(self, now_ms: Optional[float] = None) -> GameSnapshot:
        """
        Build a read-only snapshot for rendering.

        Args:
            now_ms: Current time, used to report whether restart is locked.
                Defaults to the latest timestamp passed to tick, start or
                handle_input.
        """
        session = self._machine.session
        if now_ms is None:
            now_ms = self._clock_ms
        restart_locked = self._machine.is_restart_locked(now_ms)
        return self._snapshot_builder.build(session, self._viewport, restart_locked)

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        session = self._machine.session
        return {
            "score": session.score,
            "best_score": session.best_score,
            "state": session.state.value,
            "ticks": session.ticks,
            "obstacle_count": len(session.obstacles),
            "terminated_reason": session.end_reason,
        }

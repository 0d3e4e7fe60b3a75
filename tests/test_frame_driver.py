"""
Tests for the per-frame driver (CoreGame).
"""

import pytest

from flappy.engine.config_loader import load_config
from flappy.engine.game import CoreGame
from flappy.engine.session import InputEvent, SessionState


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def game(config):
    return CoreGame(config=config, width=800, height=600, seed=42)


def frame_times(start_ms, count, step_ms=16.0):
    return [start_ms + i * step_ms for i in range(count)]


def hover_in_next_gap(game):
    """Park the flyer in the centre of the upcoming gap with zero net velocity."""
    flyer = game.session.flyer
    target = game.snapshot().next_obstacle()
    if target is not None:
        flyer.y = target.top_height + (target.gap - flyer.height) / 2
    flyer.velocity = -game.config.physics.gravity


class TestTickSequencing:
    """Test what a tick does in each state."""

    def test_no_simulation_before_start(self, game):
        """Ticks before the first start leave the world untouched."""
        y0 = game.session.flyer.y
        result = game.tick(0.0)

        assert not result.simulated
        assert result.state == SessionState.NOT_STARTED
        assert game.session.flyer.y == y0
        assert len(game.session.obstacles) == 0

    def test_first_tick_spawns_and_falls(self, game, config):
        """The first playing tick spawns an obstacle and applies gravity."""
        game.start(0.0)
        y0 = game.session.flyer.y
        result = game.tick(16.0)

        assert result.simulated
        assert result.spawned
        assert game.session.flyer.y == pytest.approx(y0 + config.physics.gravity)

        obstacle = game.session.obstacles.obstacles[0]
        assert obstacle.x == pytest.approx(game.viewport.width - game.viewport.pipe_speed)

    def test_boundary_scenario(self, game, config):
        """Falling past the floor ends the session on that tick and locks restart."""
        game.start(0.0)
        game.session.flyer.y = 560
        result = game.tick(16.0)

        assert result.ended
        assert result.reason == "out_of_bounds"
        assert game.state == SessionState.ENDED

        lock_ms = config.session.restart_lock_ms
        assert game.snapshot(16.0).restart_locked
        assert game.snapshot(16.0 + lock_ms - 1).restart_locked
        assert not game.snapshot(16.0 + lock_ms).restart_locked

    def test_no_simulation_after_end(self, game):
        """Once ended, further ticks do no physics or obstacle work."""
        game.start(0.0)
        game.session.flyer.y = 580
        game.tick(16.0)

        y = game.session.flyer.y
        xs = [o.x for o in game.session.obstacles]
        result = game.tick(32.0)

        assert not result.simulated
        assert game.session.flyer.y == y
        assert [o.x for o in game.session.obstacles] == xs

    def test_run_stops_when_session_ends(self, game):
        """run() exits as soon as the session leaves PLAYING."""
        game.start(0.0)
        frames = game.run(frame_times(16.0, 10000))

        assert game.state == SessionState.ENDED
        assert 0 < frames < 10000
        assert game.session.ticks == frames

    def test_jump_input_reaches_flyer(self, game, config):
        game.handle_input(InputEvent.JUMP_OR_START, 0.0)
        assert game.is_playing
        assert game.handle_input(InputEvent.JUMP_OR_START, 16.0)
        assert game.session.flyer.velocity == config.physics.jump_impulse


class TestScoringInPlay:
    """Test scoring through the full tick pipeline."""

    def test_hovering_through_gaps_scores(self, game):
        """A flyer kept in each gap passes obstacles and scores once per obstacle."""
        game.start(0.0)
        total_delta = 0

        for now in frame_times(16.0, 1500):
            hover_in_next_gap(game)
            result = game.tick(now)
            total_delta += result.delta_score
            assert not result.ended

        assert game.state == SessionState.PLAYING
        assert game.score >= 3
        assert game.score == total_delta


class TestResize:
    """Test resize handling."""

    def test_resize_applies_on_next_tick(self, game):
        """Viewport changes only when the next tick runs."""
        game.resize(1920, 1080)
        assert game.viewport.width == 800

        game.tick(0.0)
        assert game.viewport.width == 1920
        assert game.viewport.gap == 180

    def test_resize_mid_flight_keeps_live_gaps(self, game):
        """Obstacles already spawned keep the gap they spawned with."""
        game.start(0.0)
        game.tick(16.0)
        old_gap = game.session.obstacles.obstacles[0].gap

        game.resize(800, 900)
        game.tick(32.0)

        assert game.viewport.gap != old_gap
        assert game.session.obstacles.obstacles[0].gap == old_gap

    def test_resize_while_idle_recenters_flyer(self, game):
        game.resize(1000, 1000)
        game.tick(0.0)
        assert (game.session.flyer.x, game.session.flyer.y) == game.viewport.flyer_origin

    def test_shrink_mid_flight_keeps_obstacle_order(self, config):
        """Obstacles stay ordered oldest-left after the playfield narrows."""
        game = CoreGame(config=config, width=3000, height=600, seed=3)
        game.start(0.0)
        game.tick(16.0)
        game.resize(800, 600)

        for now in frame_times(32.0, 2000):
            hover_in_next_gap(game)
            game.tick(now)
            xs = [o.x for o in game.session.obstacles]
            assert xs == sorted(xs)

        assert game.state == SessionState.PLAYING
        assert game.score >= 2

    def test_resize_mid_flight_recenters_and_keeps_motion(self, game):
        game.start(0.0)
        game.tick(16.0)
        game.handle_input(InputEvent.JUMP_OR_START, 20.0)
        velocity = game.session.flyer.velocity

        game.resize(1000, 900)
        game.tick(32.0)

        flyer = game.session.flyer
        assert flyer.x == game.viewport.flyer_origin[0]
        assert flyer.y == pytest.approx(game.viewport.flyer_origin[1] + flyer.velocity)
        assert flyer.velocity != 0
        assert velocity < 0

    def test_resize_after_game_over_recenters_flyer(self, game):
        game.start(0.0)
        game.session.flyer.y = 580
        game.tick(16.0)
        assert game.state == SessionState.ENDED

        game.resize(1000, 1000)
        game.tick(32.0)

        assert (game.session.flyer.x, game.session.flyer.y) == game.viewport.flyer_origin
        assert game.state == SessionState.ENDED


class TestSnapshot:
    """Test the read-only snapshot."""

    def test_snapshot_reflects_state(self, game):
        game.start(0.0)
        game.tick(16.0)
        snap = game.snapshot(16.0)

        assert snap.state == "playing"
        assert snap.score == 0
        assert len(snap.obstacles) == 1
        assert snap.flyer.y == game.session.flyer.y
        assert not snap.restart_locked

    def test_snapshot_lock_follows_latest_timestamp(self, game, config):
        """Without an explicit time the lock is judged at the latest frame seen."""
        game.start(0.0)
        game.session.flyer.y = 580
        game.tick(16.0)
        assert game.snapshot().restart_locked

        game.tick(16.0 + config.session.restart_lock_ms)
        assert not game.snapshot().restart_locked

    def test_snapshot_is_detached(self, game):
        """Mutating the game afterwards does not change an old snapshot."""
        game.start(0.0)
        game.tick(16.0)
        snap = game.snapshot()
        x = snap.obstacles[0].x

        game.tick(32.0)
        assert snap.obstacles[0].x == x

    def test_info_dict(self, game):
        info = game.get_info()
        assert info["state"] == "not_started"
        assert info["score"] == 0

"""
Tests for viewport-derived parameters.
"""

import pytest

from flappy.engine.config_loader import load_config
from flappy.engine.viewport import compute_viewport


@pytest.fixture
def config():
    return load_config()


class TestViewportDerivation:
    """Test size-dependent constants."""

    def test_standard_desktop(self, config):
        """800x600 yields the capped widths and minimum gap."""
        vp = compute_viewport(800, 600, config)

        assert vp.obstacle_width == 50
        assert vp.gap == 120
        assert vp.spawn_interval_ms == 2000
        assert vp.flyer_width == 35
        assert vp.flyer_height == pytest.approx(50)
        assert vp.flyer_origin == (80, 300)
        assert vp.obstacle_min_height == 50

    def test_gap_clamped_to_max(self, config):
        """Tall playfields never exceed the maximum gap."""
        vp = compute_viewport(1920, 1080, config)
        assert vp.gap == 180

    def test_gap_scales_between_bounds(self, config):
        """Gap follows 20% of height between its bounds."""
        vp = compute_viewport(800, 750, config)
        assert vp.gap == pytest.approx(150)

    def test_spawn_interval_tracks_width(self, config):
        """Spawn interval is the width clamped to [2000, 3000] ms."""
        assert compute_viewport(1000, 600, config).spawn_interval_ms == 2000
        assert compute_viewport(2500, 600, config).spawn_interval_ms == 2500
        assert compute_viewport(4000, 600, config).spawn_interval_ms == 3000

    def test_narrow_screen_scales_sizes(self, config):
        """Phone-width playfields shrink obstacles and flyer proportionally."""
        vp = compute_viewport(375, 667, config)

        assert vp.obstacle_width == pytest.approx(37.5)
        assert vp.flyer_width == pytest.approx(30)
        assert vp.flyer_height == pytest.approx(30 * 50 / 35)
        assert vp.flyer_origin[0] == pytest.approx(37.5)

    def test_pipe_speed_scales_with_width(self, config):
        """Scroll speed grows with width and is capped at reference width."""
        assert compute_viewport(1920, 1080, config).pipe_speed == pytest.approx(4.0)
        assert compute_viewport(3840, 2160, config).pipe_speed == pytest.approx(4.0)
        assert compute_viewport(960, 600, config).pipe_speed == pytest.approx(3.5)

    def test_recompute_is_idempotent(self, config):
        """Same inputs give equal parameters."""
        assert compute_viewport(1024, 768, config) == compute_viewport(1024, 768, config)


class TestDegenerateViewport:
    """Tiny playfields must never crash or invert the spawn range."""

    def test_gap_capped_to_half_height(self, config):
        """Gap cannot exceed half the height."""
        vp = compute_viewport(200, 100, config)
        assert vp.gap == pytest.approx(50)

    @pytest.mark.parametrize("width,height", [(200, 100), (100, 60), (10, 10), (0, 0), (-5, 3)])
    def test_spawn_range_not_inverted(self, config, width, height):
        """Lower bound of the spawn range never exceeds the upper bound."""
        vp = compute_viewport(width, height, config)
        low, high = vp.spawn_top_range

        assert low <= high
        assert vp.width >= 1
        assert vp.height >= 1

"""Tests for the leveling curve."""

import pytest

from questline.core.config import Constants
from questline.services.leveling import calculate_level, get_level_progress, get_xp_requirement, xp_for_level


class TestXPRequirement:
    """Tests for the tiered per-level XP requirement."""

    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            (0, 50),
            (1, 100),
            (4, 100),
            (5, 200),
            (9, 200),
            (10, 350),
            (15, 600),
            (20, 900),
            (30, 1300),
            (40, 2000),
            (50, 2500),
            (59, 2500),
            (60, 3000),
            (999, 3000),
        ],
    )
    def test_requirement_tiers(self, level, expected):
        assert get_xp_requirement(level) == expected

    def test_cumulative_thresholds(self):
        """Test cumulative XP needed for the first few levels."""
        assert xp_for_level(0) == 0
        assert xp_for_level(1) == 50
        assert xp_for_level(2) == 150
        assert xp_for_level(5) == 450
        assert xp_for_level(6) == 650


class TestCalculateLevel:
    """Tests for deriving level from cumulative XP."""

    @pytest.mark.parametrize(
        ("total_xp", "expected"),
        [(0, 0), (49, 0), (50, 1), (149, 1), (150, 2), (449, 4), (450, 5), (650, 6)],
    )
    def test_level_boundaries(self, total_xp, expected):
        assert calculate_level(total_xp) == expected

    def test_level_is_monotonic(self):
        """Test more XP never yields a lower level."""
        levels = [calculate_level(xp) for xp in range(0, 20000, 37)]
        assert levels == sorted(levels)

    def test_level_is_capped(self):
        assert calculate_level(10**12) == Constants.MAX_LEVEL


class TestLevelProgress:
    """Tests for in-level progress bar data."""

    def test_progress_mid_level(self):
        progress = get_level_progress(100, 1)

        assert progress.current == 50
        assert progress.max == 100
        assert progress.percentage == pytest.approx(50.0)

    def test_progress_at_level_start(self):
        progress = get_level_progress(0, 0)

        assert progress.current == 0
        assert progress.max == 50
        assert progress.percentage == 0.0

    def test_percentage_is_clamped(self):
        """Test an inconsistent level/xp pair stays within 0-100."""
        assert get_level_progress(10, 3).percentage == 0.0
        assert get_level_progress(5000, 1).percentage == 100.0

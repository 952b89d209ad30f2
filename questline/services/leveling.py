"""Leveling curve: cumulative XP -> level and in-level progress."""

from questline.core.config import Constants
from questline.models.service_models import LevelProgress


# (exclusive upper level bound, XP required to finish each level below it)
_REQUIREMENT_TIERS: tuple[tuple[int, int], ...] = (
    (1, 50),
    (5, 100),
    (10, 200),
    (15, 350),
    (20, 600),
    (30, 900),
    (40, 1300),
    (50, 2000),
    (60, 2500),
)
_FINAL_REQUIREMENT = 3000


def get_xp_requirement(level: int) -> int:
    """XP needed to finish ``level`` and reach the next one."""
    for upper_bound, requirement in _REQUIREMENT_TIERS:
        if level < upper_bound:
            return requirement
    return _FINAL_REQUIREMENT


def xp_for_level(target_level: int) -> int:
    """Cumulative XP required to reach ``target_level``."""
    return sum(get_xp_requirement(level) for level in range(max(0, target_level)))


def calculate_level(total_xp: int) -> int:
    """Level reached with ``total_xp``. Monotonic; starts at 0."""
    level = 0
    threshold = get_xp_requirement(0)
    while total_xp >= threshold and level < Constants.MAX_LEVEL:
        level += 1
        threshold += get_xp_requirement(level)
    return level


def get_level_progress(total_xp: int, level: int) -> LevelProgress:
    """XP earned inside the current level band and the band width.

    Args:
        total_xp: Cumulative XP
        level: Current level (normally ``calculate_level(total_xp)``)

    Returns:
        LevelProgress with percentage clamped to [0, 100]
    """
    band_start = xp_for_level(level)
    band_width = get_xp_requirement(level)
    xp_into_level = total_xp - band_start
    percentage = min(100.0, max(0.0, xp_into_level / band_width * 100))

    return LevelProgress(current=max(0, xp_into_level), max=band_width, percentage=percentage)

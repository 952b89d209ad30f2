"""User ledger bookkeeping: XP totals, skill XP, level and history.

Every XP change in the engine goes through ``apply_xp_change``. Functions here
mutate the profile they are given; reducers pass in their own deep copy.
"""

import logging
from datetime import datetime

from questline.domain.task import SkillCategory
from questline.domain.user import HistoryEntry, SkillProgress, UserProfile
from questline.services.leveling import calculate_level


logger = logging.getLogger(__name__)


def _clamp(value: int, *, field: str) -> int:
    if value < 0:
        logger.warning("XP balance clamped to zero", extra={"field": field, "unclamped": value})
        return 0
    return value


def apply_xp_change(
    profile: UserProfile,
    *,
    amount: int,
    history_id: str,
    now: datetime,
    skill_category: SkillCategory | None = None,
    skill_amount: int | None = None,
    record_history: bool = True,
) -> int | None:
    """Apply a signed XP delta to the ledger.

    Args:
        profile: Profile to update in place
        amount: Signed change to total XP
        history_id: Task ID or bonus key recorded in history
        now: Timestamp for the history entry
        skill_category: Skill to credit; DEFAULT or None leaves skills untouched
        skill_amount: Skill delta when it differs from ``amount`` (bonuses never reach skills)
        record_history: Append a history entry (False when undoing a completion)

    Returns:
        The new level if a positive change crossed a level boundary, else None
    """
    previous_level = profile.level
    profile.total_xp = _clamp(profile.total_xp + amount, field="total_xp")
    profile.level = calculate_level(profile.total_xp)

    if skill_category is not None and skill_category != SkillCategory.DEFAULT:
        skill_delta = amount if skill_amount is None else skill_amount
        skill = profile.skills.setdefault(skill_category, SkillProgress())
        skill.xp = _clamp(skill.xp + skill_delta, field=f"skills.{skill_category}")
        skill.level = calculate_level(skill.xp)

    if record_history:
        profile.history.insert(0, HistoryEntry(date=now, xp_gained=amount, task_id=history_id))

    if amount > 0 and profile.level > previous_level:
        logger.info("Level up: %d -> %d", previous_level, profile.level)
        return profile.level
    return None


def remove_latest_history_entry(profile: UserProfile, task_id: str) -> HistoryEntry | None:
    """Remove the most recent history entry for ``task_id`` (only one).

    Returns:
        The removed entry, or None if the task had no entry
    """
    for index, entry in enumerate(profile.history):
        if entry.task_id == task_id:
            return profile.history.pop(index)
    logger.debug("No history entry to remove for %s", task_id)
    return None


def count_history_entries(profile: UserProfile, task_id: str) -> int:
    """Number of history entries recorded for ``task_id``."""
    return sum(1 for entry in profile.history if entry.task_id == task_id)

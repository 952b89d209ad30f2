"""Tests for XP ledger bookkeeping."""

from datetime import datetime

import pytest

from questline.domain import SkillCategory, UserProfile
from questline.services.ledger_service import apply_xp_change, count_history_entries, remove_latest_history_entry


NOW = datetime(2026, 1, 20, 9, 30)


@pytest.mark.unit
def test_positive_change_updates_total_skill_and_history() -> None:
    """Test a completion-style change touches every ledger field."""
    profile = UserProfile()

    apply_xp_change(profile, amount=30, history_id="t1", now=NOW, skill_category=SkillCategory.PHYSICAL)

    assert profile.total_xp == 30
    assert profile.skills[SkillCategory.PHYSICAL].xp == 30
    assert profile.history[0].task_id == "t1"
    assert profile.history[0].xp_gained == 30
    assert profile.history[0].date == NOW


@pytest.mark.unit
def test_skill_amount_can_differ_from_total() -> None:
    """Test bonuses reach the total but not the skill."""
    profile = UserProfile()

    apply_xp_change(
        profile, amount=30, history_id="t1", now=NOW, skill_category=SkillCategory.MENTAL, skill_amount=10
    )

    assert profile.total_xp == 30
    assert profile.skills[SkillCategory.MENTAL].xp == 10


@pytest.mark.unit
def test_default_skill_is_ignored() -> None:
    profile = UserProfile()

    apply_xp_change(profile, amount=10, history_id="t1", now=NOW, skill_category=SkillCategory.DEFAULT)

    assert profile.total_xp == 10
    assert SkillCategory.DEFAULT not in profile.skills


@pytest.mark.unit
def test_negative_change_clamps_at_zero() -> None:
    """Test balances never go negative."""
    profile = UserProfile(total_xp=5)
    profile.skills[SkillCategory.SOCIAL].xp = 3

    apply_xp_change(
        profile, amount=-20, history_id="t1", now=NOW, skill_category=SkillCategory.SOCIAL, record_history=False
    )

    assert profile.total_xp == 0
    assert profile.skills[SkillCategory.SOCIAL].xp == 0
    assert profile.history == []


@pytest.mark.unit
def test_level_up_is_reported() -> None:
    profile = UserProfile(total_xp=45)

    assert apply_xp_change(profile, amount=10, history_id="t1", now=NOW) == 1
    assert profile.level == 1
    assert apply_xp_change(profile, amount=10, history_id="t2", now=NOW) is None


@pytest.mark.unit
def test_level_down_is_not_reported() -> None:
    profile = UserProfile(total_xp=60, level=1)

    assert apply_xp_change(profile, amount=-20, history_id="t1", now=NOW, record_history=False) is None
    assert profile.level == 0


@pytest.mark.unit
def test_history_is_newest_first() -> None:
    profile = UserProfile()

    apply_xp_change(profile, amount=10, history_id="first", now=NOW)
    apply_xp_change(profile, amount=10, history_id="second", now=NOW)

    assert [entry.task_id for entry in profile.history] == ["second", "first"]


@pytest.mark.unit
def test_remove_latest_history_entry_removes_one() -> None:
    """Test only the most recent entry for a task is removed."""
    profile = UserProfile()
    apply_xp_change(profile, amount=10, history_id="t1", now=datetime(2026, 1, 1))
    apply_xp_change(profile, amount=15, history_id="t1", now=datetime(2026, 1, 2))

    removed = remove_latest_history_entry(profile, "t1")

    assert removed is not None
    assert removed.xp_gained == 15
    assert count_history_entries(profile, "t1") == 1


@pytest.mark.unit
def test_remove_latest_history_entry_missing() -> None:
    assert remove_latest_history_entry(UserProfile(), "nope") is None

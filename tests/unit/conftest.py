"""Pytest configuration and fixtures for unit tests."""

from collections.abc import Callable
from datetime import datetime

import pytest

from questline.core.state_store import InMemoryStateStore
from questline.domain import (
    Difficulty,
    GameState,
    MainQuest,
    QuestCategory,
    QuestTask,
    QuestTaskStatus,
    SkillCategory,
    Task,
    UserProfile,
)
from questline.services.leveling import calculate_level


QuestFactory = Callable[..., MainQuest]


def build_quest(
    *categories: list[bool],
    quest_id: str = "q1",
    difficulty: Difficulty = Difficulty.EASY,
    skill_category: SkillCategory = SkillCategory.MENTAL,
) -> MainQuest:
    """Build a quest from per-category lists of completion flags.

    Category ids are ``c0, c1, ...`` and task ids ``c0-t0, c0-t1, ...``.
    """
    return MainQuest(
        id=quest_id,
        title=f"Quest {quest_id}",
        categories=[
            QuestCategory(
                id=f"c{ci}",
                title=f"Phase {ci}",
                tasks=[
                    QuestTask(
                        id=f"c{ci}-t{ti}",
                        name=f"Step {ti}",
                        status=QuestTaskStatus.COMPLETED if done else QuestTaskStatus.PENDING,
                        difficulty=difficulty,
                        skill_category=skill_category,
                    )
                    for ti, done in enumerate(flags)
                ],
            )
            for ci, flags in enumerate(categories)
        ],
    )


@pytest.fixture
def fixed_now() -> datetime:
    """Deterministic 'now' used across tests."""
    return datetime(2026, 1, 20, 12, 0, 0)


@pytest.fixture
def quest_factory() -> QuestFactory:
    return build_quest


@pytest.fixture
def state_factory() -> Callable[..., GameState]:
    """Build a GameState with optional starting XP, quests and tasks."""

    def _build(*, total_xp: int = 0, quests: list[MainQuest] | None = None, tasks: list[Task] | None = None):
        profile = UserProfile(total_xp=total_xp, level=calculate_level(total_xp))
        return GameState(profile=profile, quests=quests or [], tasks=tasks or [])

    return _build


@pytest.fixture
def in_memory_store() -> InMemoryStateStore:
    """Provides a fresh InMemoryStateStore for each test."""
    return InMemoryStateStore()

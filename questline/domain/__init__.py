"""Domain models and DTOs."""

from questline.domain.breakdown import CategoryDescriptor, TaskDescriptor, parse_breakdown
from questline.domain.quest import MainQuest, QuestCategory, QuestTask, QuestTaskStatus
from questline.domain.state import GameState, NoPendingBonus, PendingBonus, PendingQuestBonus
from questline.domain.task import Difficulty, SkillCategory, Task, new_id
from questline.domain.user import (
    Goal,
    HistoryEntry,
    ProfileLayout,
    SkillProgress,
    TaskTemplate,
    UserProfile,
    WidgetConfig,
)


__all__ = [
    "CategoryDescriptor",
    "Difficulty",
    "GameState",
    "Goal",
    "HistoryEntry",
    "MainQuest",
    "NoPendingBonus",
    "PendingBonus",
    "PendingQuestBonus",
    "ProfileLayout",
    "QuestCategory",
    "QuestTask",
    "QuestTaskStatus",
    "SkillCategory",
    "SkillProgress",
    "Task",
    "TaskDescriptor",
    "TaskTemplate",
    "UserProfile",
    "WidgetConfig",
    "new_id",
    "parse_breakdown",
]

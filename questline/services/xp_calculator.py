"""XP calculation for flat tasks and quest tasks."""

from questline.core.config import Constants
from questline.domain.quest import QuestTask
from questline.domain.task import Difficulty, Task
from questline.models.service_models import XPBreakdown, XPResult


DIFFICULTY_MULTIPLIERS: dict[Difficulty, float] = {
    Difficulty.EASY: 1.0,
    Difficulty.MEDIUM: 1.5,
    Difficulty.HARD: 2.0,
    Difficulty.EPIC: 3.0,
}


def streak_multiplier_percent(*, streak: int, is_habit: bool) -> int:
    """Streak multiplier in percent: +10% per day for habits, capped at 200%."""
    if not is_habit or streak <= 0:
        return 100
    return min(100 + Constants.STREAK_STEP_PERCENT * streak, Constants.STREAK_MAX_PERCENT)


def calculate_xp(task: Task) -> XPResult:
    """Calculate the XP award for completing a task.

    Pure and deterministic. Easy=10, Medium=15, Hard=20, Epic=30 before the
    habit streak multiplier. Integer arithmetic keeps the result exact so the
    same magnitude can be added on completion and subtracted on undo.
    """
    difficulty_mult = DIFFICULTY_MULTIPLIERS[task.difficulty]
    difficulty_xp = int(Constants.BASE_XP * difficulty_mult)
    streak_pct = streak_multiplier_percent(streak=task.streak, is_habit=task.is_habit)

    total = difficulty_xp * streak_pct // 100

    return XPResult(
        total=total,
        breakdown=XPBreakdown(
            base=Constants.BASE_XP,
            difficulty_mult=difficulty_mult,
            streak_mult=streak_pct / 100,
            bonus=0,
        ),
    )


def quest_task_as_task(quest_task: QuestTask) -> Task:
    """Map a quest task into the flat task shape (no habit, no streak)."""
    return Task(
        id=quest_task.id,
        title=quest_task.name,
        description=quest_task.description,
        difficulty=quest_task.difficulty,
        skill_category=quest_task.skill_category,
        is_habit=False,
        streak=0,
    )


def calculate_quest_task_xp(quest_task: QuestTask) -> XPResult:
    """Calculate XP for a quest task."""
    return calculate_xp(quest_task_as_task(quest_task))

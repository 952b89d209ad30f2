"""Pydantic models for service layer return types.

These models give engine reducers and queries typed results at their
boundaries instead of loose dictionaries.
"""

from pydantic import BaseModel, Field

from questline.domain.state import GameState
from questline.domain.task import SkillCategory


class XPBreakdown(BaseModel):
    """Components of an XP award."""

    base: int
    difficulty_mult: float
    streak_mult: float
    bonus: int = 0


class XPResult(BaseModel):
    """XP award for completing a task."""

    total: int
    breakdown: XPBreakdown


class LevelProgress(BaseModel):
    """Progress within the current level band, for progress bars."""

    current: int
    max: int
    percentage: float


class QuestIndex(BaseModel):
    """Computed summary fields for a quest."""

    total_tasks: int
    completed_tasks: int
    skill_categories: list[SkillCategory]
    is_complete: bool


class DailyActivity(BaseModel):
    """History aggregated to one local calendar day."""

    date: str  # YYYY-MM-DD
    total_xp: int
    task_count: int
    task_ids: list[str]


class Outcome(BaseModel):
    """Result of a single engine reducer.

    The input state is never mutated; ``state`` is always a fresh snapshot
    (or the untouched input when ``applied`` is False).
    """

    state: GameState
    applied: bool = True
    reason: str | None = Field(default=None, description="Error code explaining a no-op")
    xp_delta: int = Field(default=0, description="Net XP change applied to the ledger")
    popups: dict[str, int] = Field(default_factory=dict, description="Transient per-entity XP feedback")
    level_up: int | None = Field(default=None, description="New level if this action crossed a level boundary")

"""User profile domain models: the XP ledger and its companions."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from questline.domain.task import Difficulty, SkillCategory, new_id


WidgetId = Literal["identity", "skillMatrix", "evolution", "tasks", "calendar", "friends"]

DEFAULT_WIDGET_ORDER: tuple[WidgetId, ...] = ("identity", "skillMatrix", "evolution", "calendar", "friends", "tasks")


class SkillProgress(BaseModel):
    """XP and derived level for one skill."""

    xp: int = Field(default=0, ge=0, description="Skill XP (clamped at zero)")
    level: int = Field(default=0, ge=0, description="Level derived from skill XP")


class HistoryEntry(BaseModel):
    """Append-only record of an XP-granting event."""

    date: datetime = Field(..., description="When the XP change happened")
    xp_gained: int = Field(..., description="Signed XP delta recorded for the event")
    task_id: str = Field(..., description="Task ID or bonus key the event belongs to")


class TaskTemplate(BaseModel):
    """Reusable blueprint for creating flat tasks."""

    id: str = Field(default_factory=new_id)
    title: str
    description: str = ""
    difficulty: Difficulty = Difficulty.EASY
    skill_category: SkillCategory = SkillCategory.DEFAULT
    is_habit: bool = False
    tags: list[str] = Field(default_factory=list)


class Goal(BaseModel):
    """Personal goal checklist item."""

    id: str = Field(default_factory=new_id)
    title: str
    completed: bool = False


class WidgetConfig(BaseModel):
    """Profile dashboard widget placement."""

    id: WidgetId
    enabled: bool = True
    order: int


class ProfileLayout(BaseModel):
    """UI layout preference (opaque to the engine)."""

    widgets: list[WidgetConfig] = Field(default_factory=list)


def default_layout() -> ProfileLayout:
    return ProfileLayout(widgets=[WidgetConfig(id=w, order=i) for i, w in enumerate(DEFAULT_WIDGET_ORDER)])


def default_skills() -> dict[SkillCategory, SkillProgress]:
    """Skill map covering every category except the neutral default."""
    return {category: SkillProgress() for category in SkillCategory if category != SkillCategory.DEFAULT}


class UserProfile(BaseModel):
    """Aggregate XP ledger for a single user."""

    name: str = Field(default="Protocol-01", description="Display name")
    identity: str = Field(default="", description="Free-form identity statement")
    total_xp: int = Field(default=0, ge=0, description="Cumulative XP (clamped at zero)")
    level: int = Field(default=0, ge=0, description="Level derived from total_xp")
    skills: dict[SkillCategory, SkillProgress] = Field(default_factory=default_skills)
    history: list[HistoryEntry] = Field(default_factory=list, description="XP events, newest first")
    templates: list[TaskTemplate] = Field(default_factory=list)
    goals: list[Goal] = Field(default_factory=list)
    layout: ProfileLayout = Field(default_factory=default_layout)

"""Flat task domain models and enums."""

import uuid
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


def new_id() -> str:
    """Generate a fresh entity identifier."""
    return str(uuid.uuid4())


class Difficulty(StrEnum):
    """Difficulty tier of a task; drives the base XP award."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    EPIC = "Epic"


class SkillCategory(StrEnum):
    """Skill a task trains. DEFAULT is neutral and never earns skill XP."""

    PHYSICAL = "Physical"
    MENTAL = "Mental"
    PROFESSIONAL = "Professional"
    SOCIAL = "Social"
    CREATIVE = "Creative"
    DEFAULT = "Default"


class Task(BaseModel):
    """Standalone task owned by the user."""

    id: str = Field(default_factory=new_id, description="Unique task ID")
    title: str = Field(..., description="Task title")
    description: str = Field(default="", description="Detailed task description")
    difficulty: Difficulty = Field(default=Difficulty.EASY, description="Difficulty tier")
    skill_category: SkillCategory = Field(default=SkillCategory.DEFAULT, description="Skill trained by this task")
    is_habit: bool = Field(default=False, description="Recurring daily habit with a streak")
    completed: bool = Field(default=False, description="Completion flag")
    streak: int = Field(default=0, ge=0, description="Consecutive days completed (habits only)")
    last_completed_date: datetime | None = Field(default=None, description="When the task was last completed")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")

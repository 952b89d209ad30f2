"""Quest tree domain models: quest -> categories -> quest tasks.

Completion of categories and quests is derived on every read and never stored.
"""

from enum import StrEnum

from pydantic import BaseModel, Field

from questline.domain.task import Difficulty, SkillCategory, new_id


class QuestTaskStatus(StrEnum):
    """Quest task status."""

    PENDING = "pending"
    COMPLETED = "completed"
    IN_PROGRESS = "in-progress"  # Reserved; treated as not completed


class QuestTask(BaseModel):
    """Single actionable step inside a quest category."""

    id: str = Field(default_factory=new_id, description="Unique quest task ID")
    name: str = Field(..., description="Display name")
    status: QuestTaskStatus = Field(default=QuestTaskStatus.PENDING, description="Current status")
    difficulty: Difficulty = Field(default=Difficulty.EASY, description="Difficulty tier")
    skill_category: SkillCategory = Field(default=SkillCategory.DEFAULT, description="Skill trained by this task")
    description: str = Field(default="", description="Optional longer description")

    @property
    def is_completed(self) -> bool:
        return self.status == QuestTaskStatus.COMPLETED


class QuestCategory(BaseModel):
    """Named phase/section of a quest."""

    id: str = Field(default_factory=new_id, description="Unique category ID")
    title: str = Field(..., description="Category title")
    tasks: list[QuestTask] = Field(default_factory=list, description="Ordered quest tasks")

    def find_task(self, task_id: str) -> QuestTask | None:
        return next((t for t in self.tasks if t.id == task_id), None)


class MainQuest(BaseModel):
    """Top-level multi-phase goal."""

    id: str = Field(default_factory=new_id, description="Unique quest ID")
    title: str = Field(..., description="Quest title")
    categories: list[QuestCategory] = Field(default_factory=list, description="Ordered categories")

    def find_category(self, category_id: str) -> QuestCategory | None:
        return next((c for c in self.categories if c.id == category_id), None)

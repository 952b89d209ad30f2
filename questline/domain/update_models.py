"""Update payloads for editable entities."""

from pydantic import BaseModel, Field

from questline.domain.task import Difficulty, SkillCategory


class TaskUpdate(BaseModel):
    """Partial update for a flat task. Completion fields are not editable here."""

    title: str | None = None
    description: str | None = None
    difficulty: Difficulty | None = None
    skill_category: SkillCategory | None = None
    is_habit: bool | None = None
    tags: list[str] | None = Field(default=None)

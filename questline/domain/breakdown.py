"""Structured descriptors produced by the quest breakdown collaborator.

Input is untrusted: the whole batch validates or the whole batch is rejected.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from questline.core.errors import BreakdownValidationError
from questline.domain.quest import QuestCategory, QuestTask
from questline.domain.task import Difficulty, SkillCategory


class TaskDescriptor(BaseModel):
    """Quest task as described by the breakdown generator."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    difficulty: Difficulty
    skill_category: SkillCategory = Field(..., alias="skillCategory")
    description: str | None = None

    def to_quest_task(self) -> QuestTask:
        return QuestTask(
            name=self.name,
            difficulty=self.difficulty,
            skill_category=self.skill_category,
            description=self.description or "",
        )


class CategoryDescriptor(BaseModel):
    """Quest category as described by the breakdown generator."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1)
    tasks: list[TaskDescriptor] = Field(default_factory=list)

    def to_category(self) -> QuestCategory:
        return QuestCategory(title=self.title, tasks=[t.to_quest_task() for t in self.tasks])


_breakdown_adapter = TypeAdapter(list[CategoryDescriptor])


def _fill_task_defaults(raw: Any) -> Any:
    """Apply direct-creation defaults (Easy / Default) to task dicts missing them."""
    if not isinstance(raw, list):
        return raw
    filled = []
    for category in raw:
        if isinstance(category, dict) and isinstance(category.get("tasks"), list):
            tasks = []
            for task in category["tasks"]:
                if isinstance(task, dict):
                    task = {**task}
                    if task.get("difficulty") is None:
                        task["difficulty"] = Difficulty.EASY
                    if task.get("skillCategory") is None and task.get("skill_category") is None:
                        task["skill_category"] = SkillCategory.DEFAULT
                tasks.append(task)
            category = {**category, "tasks": tasks}
        filled.append(category)
    return filled


def parse_breakdown(raw: Any, *, apply_defaults: bool = False) -> list[CategoryDescriptor]:
    """Validate a breakdown payload.

    Args:
        raw: List of ``{title, tasks: [{name, difficulty, skillCategory, description?}]}`` dicts
        apply_defaults: Fill missing difficulty/skill with Easy/Default (direct quest creation)

    Returns:
        Validated category descriptors (possibly empty)

    Raises:
        BreakdownValidationError: If any descriptor is malformed
    """
    if raw is None:
        return []
    if apply_defaults:
        raw = _fill_task_defaults(raw)
    try:
        return _breakdown_adapter.validate_python(raw)
    except ValidationError as e:
        msg = f"Invalid quest breakdown: {e.error_count()} error(s)"
        raise BreakdownValidationError(msg, validation_error=e) from e

"""Flat task service: lifecycle and completion toggles."""

import logging
from datetime import datetime

from questline.core.errors import ErrorCode
from questline.core.logging import span
from questline.domain.state import GameState
from questline.domain.task import Difficulty, SkillCategory, Task
from questline.domain.update_models import TaskUpdate
from questline.domain.user import TaskTemplate
from questline.domain.validation import sanitize_text_input
from questline.models.service_models import Outcome
from questline.services.ledger_service import apply_xp_change, remove_latest_history_entry
from questline.services.xp_calculator import calculate_xp


logger = logging.getLogger(__name__)

DEFAULT_TASK_TITLE = "New Task"


def _noop(state: GameState, reason: str, task_id: str | None = None) -> Outcome:
    logger.debug("Task operation skipped: %s", reason, extra={"task_id": task_id})
    return Outcome(state=state, applied=False, reason=reason)


def create_task(
    state: GameState,
    *,
    title: str | None = None,
    description: str = "",
    difficulty: Difficulty = Difficulty.EASY,
    skill_category: SkillCategory = SkillCategory.DEFAULT,
    is_habit: bool = False,
    tags: list[str] | None = None,
    now: datetime | None = None,
) -> Outcome:
    """Create a pending task at the top of the list."""
    new_state = state.model_copy(deep=True)
    task = Task(
        title=sanitize_text_input(title) or DEFAULT_TASK_TITLE,
        description=sanitize_text_input(description),
        difficulty=difficulty,
        skill_category=skill_category,
        is_habit=is_habit,
        tags=tags or [],
        created_at=now or datetime.now(),
    )
    new_state.tasks.insert(0, task)
    logger.info("Created task %s", task.id, extra={"is_habit": is_habit})
    return Outcome(state=new_state)


def create_task_from_template(state: GameState, *, template_id: str, now: datetime | None = None) -> Outcome:
    """Create a task from one of the profile's saved templates."""
    template = next((t for t in state.profile.templates if t.id == template_id), None)
    if template is None:
        return _noop(state, ErrorCode.ERR_TEMPLATE_NOT_FOUND, template_id)
    return create_task(
        state,
        title=template.title,
        description=template.description,
        difficulty=template.difficulty,
        skill_category=template.skill_category,
        is_habit=template.is_habit,
        tags=list(template.tags),
        now=now,
    )


def update_task(state: GameState, *, task_id: str, update: TaskUpdate) -> Outcome:
    """Apply a partial edit to a task's details."""
    new_state = state.model_copy(deep=True)
    task = new_state.find_task(task_id)
    if task is None:
        return _noop(state, ErrorCode.ERR_TASK_NOT_FOUND, task_id)

    changes = update.model_dump(exclude_unset=True, exclude_none=True)
    for field in ("title", "description"):
        if field in changes:
            changes[field] = sanitize_text_input(changes[field])
    if changes.get("title") == "":
        changes.pop("title")

    for field, value in changes.items():
        setattr(task, field, value)
    return Outcome(state=new_state)


def delete_task(state: GameState, *, task_id: str) -> Outcome:
    """Delete a task. XP and history already recorded are kept."""
    if state.find_task(task_id) is None:
        return _noop(state, ErrorCode.ERR_TASK_NOT_FOUND, task_id)
    new_state = state.model_copy(deep=True)
    new_state.tasks = [t for t in new_state.tasks if t.id != task_id]
    logger.info("Deleted task %s", task_id)
    return Outcome(state=new_state)


def complete_task(state: GameState, *, task_id: str, now: datetime | None = None) -> Outcome:
    """Mark a task complete and award its XP.

    XP uses the streak before this completion; habits then extend the streak.
    Completing an already completed task is a no-op.
    """
    with span("task_service.complete_task"):
        new_state = state.model_copy(deep=True)
        task = new_state.find_task(task_id)
        if task is None:
            return _noop(state, ErrorCode.ERR_TASK_NOT_FOUND, task_id)
        if task.completed:
            return _noop(state, ErrorCode.ERR_NO_STATE_CHANGE, task_id)

        now = now or datetime.now()
        amount = calculate_xp(task).total

        task.completed = True
        task.last_completed_date = now
        task.streak = task.streak + 1 if task.is_habit else 0

        level_up = apply_xp_change(
            new_state.profile,
            amount=amount,
            history_id=task_id,
            now=now,
            skill_category=task.skill_category,
        )

        logger.info("Completed task %s (+%d XP, streak %d)", task_id, amount, task.streak)
        return Outcome(state=new_state, xp_delta=amount, popups={task_id: amount}, level_up=level_up)


def uncomplete_task(state: GameState, *, task_id: str, now: datetime | None = None) -> Outcome:
    """Undo a completion, removing exactly the XP it awarded.

    The habit streak steps back first so XP is computed on the same streak the
    completion used. The most recent history entry for the task is removed.
    """
    with span("task_service.uncomplete_task"):
        new_state = state.model_copy(deep=True)
        task = new_state.find_task(task_id)
        if task is None:
            return _noop(state, ErrorCode.ERR_TASK_NOT_FOUND, task_id)
        if not task.completed:
            return _noop(state, ErrorCode.ERR_NO_STATE_CHANGE, task_id)

        task.streak = max(0, task.streak - 1) if task.is_habit else 0
        task.completed = False
        task.last_completed_date = None
        amount = -calculate_xp(task).total

        apply_xp_change(
            new_state.profile,
            amount=amount,
            history_id=task_id,
            now=now or datetime.now(),
            skill_category=task.skill_category,
            record_history=False,
        )
        remove_latest_history_entry(new_state.profile, task_id)

        logger.info("Uncompleted task %s (%d XP)", task_id, amount)
        return Outcome(state=new_state, xp_delta=amount, popups={task_id: amount})


def save_task_as_template(state: GameState, *, task_id: str) -> Outcome:
    """Store a reusable template built from an existing task."""
    new_state = state.model_copy(deep=True)
    task = new_state.find_task(task_id)
    if task is None:
        return _noop(state, ErrorCode.ERR_TASK_NOT_FOUND, task_id)

    template = TaskTemplate(
        title=task.title,
        description=task.description,
        difficulty=task.difficulty,
        skill_category=task.skill_category,
        is_habit=task.is_habit,
        tags=list(task.tags),
    )
    new_state.profile.templates.insert(0, template)
    return Outcome(state=new_state)

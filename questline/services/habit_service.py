"""Habit streak clock: daily reset of habit completion and streak decay."""

import logging
from datetime import date, datetime, timedelta

from questline.core.errors import ErrorCode
from questline.core.logging import log_user_event, span
from questline.core.state_store import StateStore
from questline.domain.state import GameState
from questline.domain.task import Task
from questline.models.service_models import Outcome


logger = logging.getLogger(__name__)


def local_date(moment: datetime) -> date:
    """Calendar date of ``moment`` in local time (naive datetimes are local)."""
    if moment.tzinfo is not None:
        return moment.astimezone().date()
    return moment.date()


def normalize_habit(task: Task, *, today: date) -> Task:
    """Return the task with daily reset and streak decay applied.

    - Completed before today: clear ``completed`` (streak untouched).
    - Last completion before yesterday: reset a nonzero streak to 0.

    Both checks are idempotent; an already normalized task is returned as is.
    """
    if not task.is_habit:
        return task

    yesterday = today - timedelta(days=1)
    last = local_date(task.last_completed_date) if task.last_completed_date else None

    completed = task.completed
    streak = task.streak
    if completed and (last is None or last < today):
        completed = False
    if streak > 0 and (last is None or last < yesterday):
        streak = 0

    if completed == task.completed and streak == task.streak:
        return task
    return task.model_copy(update={"completed": completed, "streak": streak})


def normalize_habits(tasks: list[Task], *, now: datetime) -> tuple[list[Task], int]:
    """Normalize every habit in ``tasks``.

    Returns:
        Tuple of (normalized task list, number of tasks changed)
    """
    today = local_date(now)
    normalized = [normalize_habit(task, today=today) for task in tasks]
    changed = sum(1 for before, after in zip(tasks, normalized, strict=True) if before is not after)
    return normalized, changed


def sync_habits(state: GameState, *, now: datetime | None = None) -> Outcome:
    """Apply habit normalization to a state snapshot; no-op when nothing changes."""
    tasks, changed = normalize_habits(state.tasks, now=now or datetime.now())
    if changed == 0:
        return Outcome(state=state, applied=False, reason=ErrorCode.ERR_NO_STATE_CHANGE)

    new_state = state.model_copy(deep=True)
    new_state.tasks = [task.model_copy(deep=True) for task in tasks]
    return Outcome(state=new_state)


async def run_habit_sync(store: StateStore, *, now: datetime | None = None) -> int:
    """Normalize habits for every stored user, saving only changed snapshots.

    Runs on every scheduler tick.

    Returns:
        Number of users whose state changed
    """
    with span("habit_service.run_habit_sync"):
        now = now or datetime.now()
        updated_users = 0
        for user_id in await store.list_user_ids():
            try:
                state = await store.load(user_id)
            except KeyError:
                logger.warning("State for user %s disappeared during habit sync", user_id)
                continue

            outcome = sync_habits(state, now=now)
            if not outcome.applied:
                continue

            await store.save(user_id, outcome.state)
            updated_users += 1
            log_user_event(logger, "Habits normalized", user_id=user_id)

        logger.debug("Habit sync pass complete: %d user(s) updated", updated_users)
        return updated_users

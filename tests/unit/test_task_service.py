"""Tests for flat task lifecycle and completion."""

from datetime import datetime

import pytest

from questline.core.errors import ErrorCode
from questline.domain import Difficulty, SkillCategory, Task
from questline.domain.update_models import TaskUpdate
from questline.domain.user import TaskTemplate
from questline.services import task_service
from questline.services.ledger_service import count_history_entries


@pytest.fixture
def habit() -> Task:
    return Task(id="h1", title="Run", difficulty=Difficulty.MEDIUM, skill_category=SkillCategory.PHYSICAL, is_habit=True)


class TestCreateTask:
    """Tests for task creation."""

    def test_create_prepends_with_default_title(self, state_factory, fixed_now):
        state = state_factory(tasks=[Task(id="old", title="Existing")])

        outcome = task_service.create_task(state, title="   ", now=fixed_now)

        assert outcome.state.tasks[0].title == "New Task"
        assert outcome.state.tasks[0].completed is False
        assert outcome.state.tasks[0].created_at == fixed_now
        assert outcome.state.tasks[1].id == "old"

    def test_create_from_template(self, state_factory):
        state = state_factory()
        state.profile.templates.append(
            TaskTemplate(id="tpl", title="Stretch", difficulty=Difficulty.HARD, is_habit=True, tags=["am"])
        )

        outcome = task_service.create_task_from_template(state, template_id="tpl")

        task = outcome.state.tasks[0]
        assert (task.title, task.difficulty, task.is_habit, task.tags) == ("Stretch", Difficulty.HARD, True, ["am"])

    def test_create_from_missing_template(self, state_factory):
        state = state_factory()

        outcome = task_service.create_task_from_template(state, template_id="nope")

        assert outcome.applied is False
        assert outcome.reason == ErrorCode.ERR_TEMPLATE_NOT_FOUND

    def test_save_task_as_template(self, state_factory, habit):
        state = state_factory(tasks=[habit])

        outcome = task_service.save_task_as_template(state, task_id="h1")

        template = outcome.state.profile.templates[0]
        assert template.title == "Run"
        assert template.is_habit is True
        assert template.id != "h1"


class TestCompleteTask:
    """Tests for completing and un-completing flat tasks."""

    def test_complete_awards_xp_and_extends_streak(self, state_factory, habit, fixed_now):
        habit.streak = 3
        state = state_factory(tasks=[habit])

        outcome = task_service.complete_task(state, task_id="h1", now=fixed_now)

        task = outcome.state.tasks[0]
        assert outcome.xp_delta == 19  # 15 * 130%
        assert task.completed is True
        assert task.streak == 4
        assert task.last_completed_date == fixed_now
        assert outcome.state.profile.skills[SkillCategory.PHYSICAL].xp == 19
        assert count_history_entries(outcome.state.profile, "h1") == 1

    def test_complete_non_habit_keeps_zero_streak(self, state_factory, fixed_now):
        state = state_factory(tasks=[Task(id="t1", title="Taxes", difficulty=Difficulty.EPIC)])

        outcome = task_service.complete_task(state, task_id="t1", now=fixed_now)

        assert outcome.xp_delta == 30
        assert outcome.state.tasks[0].streak == 0

    def test_complete_twice_is_noop(self, state_factory, habit, fixed_now):
        state = task_service.complete_task(state_factory(tasks=[habit]), task_id="h1", now=fixed_now).state

        outcome = task_service.complete_task(state, task_id="h1", now=fixed_now)

        assert outcome.applied is False
        assert outcome.reason == ErrorCode.ERR_NO_STATE_CHANGE
        assert outcome.state.profile.total_xp == 15

    def test_uncomplete_reverses_exactly(self, state_factory, habit, fixed_now):
        """Test undo subtracts the same XP and restores the streak."""
        habit.streak = 5
        state = state_factory(total_xp=200, tasks=[habit])

        done = task_service.complete_task(state, task_id="h1", now=fixed_now)
        undone = task_service.uncomplete_task(done.state, task_id="h1", now=fixed_now)

        assert undone.xp_delta == -done.xp_delta
        assert undone.state.profile.total_xp == 200
        assert undone.state.tasks[0].streak == 5
        assert undone.state.tasks[0].completed is False
        assert count_history_entries(undone.state.profile, "h1") == 0

    def test_uncomplete_pending_task_is_noop(self, state_factory, habit):
        outcome = task_service.uncomplete_task(state_factory(tasks=[habit]), task_id="h1")

        assert outcome.applied is False

    def test_missing_task(self, state_factory):
        state = state_factory()

        for op in (task_service.complete_task, task_service.uncomplete_task):
            outcome = op(state, task_id="nope")
            assert outcome.applied is False
            assert outcome.reason == ErrorCode.ERR_TASK_NOT_FOUND
            assert outcome.state is state

    def test_level_up_reported(self, state_factory, fixed_now):
        state = state_factory(total_xp=45, tasks=[Task(id="t1", title="x")])

        outcome = task_service.complete_task(state, task_id="t1", now=fixed_now)

        assert outcome.level_up == 1


class TestEditTask:
    """Tests for updating and deleting tasks."""

    def test_partial_update(self, state_factory, habit):
        state = state_factory(tasks=[habit])

        outcome = task_service.update_task(
            state, task_id="h1", update=TaskUpdate(title="  Sprint ", difficulty=Difficulty.EPIC)
        )

        task = outcome.state.tasks[0]
        assert task.title == "Sprint"
        assert task.difficulty == Difficulty.EPIC
        assert task.skill_category == SkillCategory.PHYSICAL
        assert task.is_habit is True

    def test_blank_title_is_ignored(self, state_factory, habit):
        outcome = task_service.update_task(state_factory(tasks=[habit]), task_id="h1", update=TaskUpdate(title=""))

        assert outcome.state.tasks[0].title == "Run"

    def test_delete_keeps_earned_xp(self, state_factory, habit, fixed_now):
        state = task_service.complete_task(state_factory(tasks=[habit]), task_id="h1", now=fixed_now).state

        outcome = task_service.delete_task(state, task_id="h1")

        assert outcome.state.tasks == []
        assert outcome.state.profile.total_xp == 15
        assert count_history_entries(outcome.state.profile, "h1") == 1

    def test_delete_missing(self, state_factory):
        outcome = task_service.delete_task(state_factory(), task_id="nope")

        assert outcome.reason == ErrorCode.ERR_TASK_NOT_FOUND


@pytest.mark.unit
def test_completion_records_given_timestamp(state_factory) -> None:
    """Test the completion timestamp is stored as given."""
    moment = datetime(2026, 3, 1, 23, 59)
    state = state_factory(tasks=[Task(id="t1", title="x")])

    outcome = task_service.complete_task(state, task_id="t1", now=moment)

    assert outcome.state.profile.history[0].date == moment

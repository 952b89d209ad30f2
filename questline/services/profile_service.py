"""Profile service: identity, goals, templates and layout."""

import logging

from questline.core.errors import ErrorCode
from questline.domain.state import GameState
from questline.domain.user import Goal, ProfileLayout, TaskTemplate, UserProfile
from questline.domain.validation import sanitize_text_input
from questline.models.service_models import LevelProgress, Outcome
from questline.services.leveling import get_level_progress


logger = logging.getLogger(__name__)


def level_progress(profile: UserProfile) -> LevelProgress:
    """Progress-bar data for the profile's current level."""
    return get_level_progress(profile.total_xp, profile.level)


def update_identity(state: GameState, *, identity: str) -> Outcome:
    new_state = state.model_copy(deep=True)
    new_state.profile.identity = sanitize_text_input(identity)
    return Outcome(state=new_state)


def add_goal(state: GameState, *, title: str) -> Outcome:
    """Add a goal at the top of the list."""
    new_state = state.model_copy(deep=True)
    new_state.profile.goals.insert(0, Goal(title=sanitize_text_input(title)))
    return Outcome(state=new_state)


def toggle_goal(state: GameState, *, goal_id: str) -> Outcome:
    new_state = state.model_copy(deep=True)
    goal = next((g for g in new_state.profile.goals if g.id == goal_id), None)
    if goal is None:
        return Outcome(state=state, applied=False, reason=ErrorCode.ERR_GOAL_NOT_FOUND)
    goal.completed = not goal.completed
    return Outcome(state=new_state)


def delete_goal(state: GameState, *, goal_id: str) -> Outcome:
    if not any(g.id == goal_id for g in state.profile.goals):
        return Outcome(state=state, applied=False, reason=ErrorCode.ERR_GOAL_NOT_FOUND)
    new_state = state.model_copy(deep=True)
    new_state.profile.goals = [g for g in new_state.profile.goals if g.id != goal_id]
    return Outcome(state=new_state)


def save_template(state: GameState, *, template: TaskTemplate) -> Outcome:
    new_state = state.model_copy(deep=True)
    new_state.profile.templates.insert(0, template.model_copy(deep=True))
    return Outcome(state=new_state)


def delete_template(state: GameState, *, template_id: str) -> Outcome:
    if not any(t.id == template_id for t in state.profile.templates):
        return Outcome(state=state, applied=False, reason=ErrorCode.ERR_TEMPLATE_NOT_FOUND)
    new_state = state.model_copy(deep=True)
    new_state.profile.templates = [t for t in new_state.profile.templates if t.id != template_id]
    return Outcome(state=new_state)


def update_layout(state: GameState, *, layout: ProfileLayout) -> Outcome:
    new_state = state.model_copy(deep=True)
    new_state.profile.layout = layout.model_copy(deep=True)
    return Outcome(state=new_state)

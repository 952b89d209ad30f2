"""Completion-bonus cascade engine for the quest tree.

Every operation is a reducer: it takes a ``GameState`` and returns an
``Outcome`` holding a fresh state plus the net XP delta. Category and quest
completion are derived by scanning on every call and are never cached.

Bonus rules:
- Section bonus (20 XP) when a category becomes complete; revoked when it breaks.
- Quest bonus (80/120/180 by category count) when a quest becomes complete.
  Completion by toggle defers the quest bonus behind explicit confirmation;
  completion caused by a deletion pays it immediately.
- Any edit that breaks a previously satisfied predicate reverses the bonus it paid.
"""

import logging
from datetime import datetime
from typing import Any

from questline.core.config import Constants
from questline.core.errors import BreakdownValidationError, ErrorCode
from questline.core.logging import span
from questline.domain.breakdown import parse_breakdown
from questline.domain.quest import MainQuest, QuestCategory, QuestTask, QuestTaskStatus
from questline.domain.state import GameState, NoPendingBonus, PendingQuestBonus
from questline.domain.task import Difficulty, SkillCategory
from questline.domain.validation import sanitize_text_input
from questline.models.service_models import Outcome, QuestIndex
from questline.services.ledger_service import apply_xp_change, remove_latest_history_entry
from questline.services.xp_calculator import calculate_quest_task_xp


logger = logging.getLogger(__name__)


# Derived predicates and queries


def is_category_complete(category: QuestCategory) -> bool:
    """A category is complete iff it has at least one task and all are completed."""
    return len(category.tasks) > 0 and all(task.is_completed for task in category.tasks)


def is_quest_complete(quest: MainQuest) -> bool:
    """A quest is complete iff it has at least one category and all are complete."""
    return len(quest.categories) > 0 and all(is_category_complete(category) for category in quest.categories)


def get_quest_bonus_amount(category_count: int) -> int:
    """Quest-completion bonus scaled by category count."""
    if category_count < 1:
        return 0
    if category_count < Constants.QUEST_BONUS_MEDIUM_MIN_CATEGORIES:
        return Constants.QUEST_BONUS_SMALL
    if category_count < Constants.QUEST_BONUS_LARGE_MIN_CATEGORIES:
        return Constants.QUEST_BONUS_MEDIUM
    return Constants.QUEST_BONUS_LARGE


def compute_quest_indexes(quest: MainQuest) -> QuestIndex:
    """Summarize task counts, skills used and completion for a quest."""
    total_tasks = 0
    completed_tasks = 0
    skills: list[SkillCategory] = []
    for category in quest.categories:
        for task in category.tasks:
            total_tasks += 1
            if task.is_completed:
                completed_tasks += 1
            if task.skill_category not in skills:
                skills.append(task.skill_category)

    return QuestIndex(
        total_tasks=total_tasks,
        completed_tasks=completed_tasks,
        skill_categories=skills,
        is_complete=total_tasks > 0 and completed_tasks == total_tasks,
    )


def get_quest_completion_percent(quest: MainQuest) -> int:
    """Completed share of all quest tasks as a rounded 0-100 percentage."""
    index = compute_quest_indexes(quest)
    if index.total_tasks == 0:
        return 0
    return round(index.completed_tasks / index.total_tasks * 100)


def section_bonus_key(category_id: str) -> str:
    return f"section-bonus-{category_id}"


def quest_bonus_key(quest_id: str) -> str:
    return f"quest-bonus-{quest_id}"


def confirmed_bonus_key(quest_id: str) -> str:
    return f"bonus-{quest_id}"


# Internal helpers


def _noop(state: GameState, reason: str, **context: object) -> Outcome:
    logger.debug("Quest operation skipped: %s", reason, extra=context)
    return Outcome(state=state, applied=False, reason=reason)


def _locate(
    state: GameState, quest_id: str, category_id: str | None = None
) -> tuple[MainQuest | None, QuestCategory | None, str | None]:
    """Find quest (and category) in ``state``; return an error code if missing."""
    quest = state.find_quest(quest_id)
    if quest is None:
        return None, None, ErrorCode.ERR_QUEST_NOT_FOUND
    if category_id is None:
        return quest, None, None
    category = quest.find_category(category_id)
    if category is None:
        return quest, None, ErrorCode.ERR_CATEGORY_NOT_FOUND
    return quest, category, None


class _BonusLedger:
    """Accumulates structural bonus awards/revocations for one reducer call."""

    def __init__(self, state: GameState, now: datetime) -> None:
        self._state = state
        self._now = now
        self.xp_delta = 0
        self.popups: dict[str, int] = {}
        self.level_up: int | None = None

    def apply(self, key: str, amount: int) -> None:
        if amount == 0:
            return
        level = apply_xp_change(self._state.profile, amount=amount, history_id=key, now=self._now)
        self.xp_delta += amount
        self.popups[key] = self.popups.get(key, 0) + amount
        if level is not None:
            self.level_up = level
        logger.info("Applied structural bonus %s: %+d XP", key, amount)

    def revoke_quest_bonus(self, quest: MainQuest, category_count: int | None = None) -> None:
        """Reverse the quest bonus, or drop it if it was still awaiting confirmation.

        ``category_count`` is the count the bonus was paid for when the edit
        already changed it.
        """
        if self._state.pending_for(quest.id) is not None:
            self._state.pending_bonus = NoPendingBonus()
            logger.info("Cleared unconfirmed quest bonus for %s", quest.id)
            return
        if category_count is None:
            category_count = len(quest.categories)
        self.apply(quest_bonus_key(quest.id), -get_quest_bonus_amount(category_count))

    def outcome(self) -> Outcome:
        return Outcome(state=self._state, xp_delta=self.xp_delta, popups=self.popups, level_up=self.level_up)


# Completion toggles


def toggle_quest_task(
    state: GameState,
    *,
    quest_id: str,
    category_id: str,
    task_id: str,
    now: datetime | None = None,
) -> Outcome:
    """Complete or un-complete a quest task and cascade bonuses.

    Completing the last pending task of a category adds the section bonus.
    Completing the last pending task of the quest parks the quest bonus in a
    pending-confirmation state instead of paying it. Un-completing reverses
    the section bonus and the quest bonus (or clears it if still pending).
    History gains one entry keyed by the task on completion and loses the most
    recent such entry on un-completion.
    """
    with span("quest_service.toggle_quest_task"):
        new_state = state.model_copy(deep=True)
        quest, category, error = _locate(new_state, quest_id, category_id)
        if error is not None:
            return _noop(state, error, quest_id=quest_id, category_id=category_id)
        task = category.find_task(task_id)
        if task is None:
            return _noop(state, ErrorCode.ERR_TASK_NOT_FOUND, quest_id=quest_id, task_id=task_id)

        now = now or datetime.now()
        was_category_complete = is_category_complete(category)
        was_quest_complete = is_quest_complete(quest)

        is_completing = not task.is_completed
        xp = calculate_quest_task_xp(task).total
        base_amount = xp if is_completing else -xp
        task.status = QuestTaskStatus.COMPLETED if is_completing else QuestTaskStatus.PENDING

        bonus_amount = 0
        popups = {task_id: base_amount}

        category_now_complete = is_category_complete(category)
        if category_now_complete and not was_category_complete:
            bonus_amount += Constants.SECTION_BONUS_XP
            popups[section_bonus_key(category_id)] = Constants.SECTION_BONUS_XP
        elif was_category_complete and not category_now_complete:
            bonus_amount -= Constants.SECTION_BONUS_XP
            popups[section_bonus_key(category_id)] = -Constants.SECTION_BONUS_XP

        quest_bonus = get_quest_bonus_amount(len(quest.categories))
        quest_now_complete = is_quest_complete(quest)
        if quest_now_complete and not was_quest_complete:
            new_state.pending_bonus = PendingQuestBonus(
                quest_id=quest_id,
                quest_title=quest.title,
                amount=quest_bonus,
                triggering_task_id=task_id,
            )
            logger.info("Quest %s complete; bonus of %d awaiting confirmation", quest_id, quest_bonus)
        elif was_quest_complete and not quest_now_complete:
            if new_state.pending_for(quest_id) is not None:
                new_state.pending_bonus = NoPendingBonus()
                logger.info("Cleared unconfirmed quest bonus for %s", quest_id)
            else:
                bonus_amount -= quest_bonus
                popups[quest_bonus_key(quest_id)] = -quest_bonus

        total = base_amount + bonus_amount
        level_up = apply_xp_change(
            new_state.profile,
            amount=total,
            history_id=task_id,
            now=now,
            skill_category=task.skill_category,
            skill_amount=base_amount,
            record_history=is_completing,
        )
        if not is_completing:
            remove_latest_history_entry(new_state.profile, task_id)

        logger.info(
            "Toggled quest task %s to %s (%+d XP)",
            task_id,
            task.status,
            total,
            extra={"quest_id": quest_id, "category_id": category_id},
        )
        return Outcome(state=new_state, xp_delta=total, popups=popups, level_up=level_up)


def confirm_quest_bonus(state: GameState, *, now: datetime | None = None) -> Outcome:
    """Apply the deferred quest bonus and clear the pending state.

    The bonus is only paid if the quest still exists and is still complete.
    """
    with span("quest_service.confirm_quest_bonus"):
        pending = state.pending_bonus
        if not isinstance(pending, PendingQuestBonus):
            return _noop(state, ErrorCode.ERR_NO_PENDING_BONUS)

        new_state = state.model_copy(deep=True)
        new_state.pending_bonus = NoPendingBonus()
        quest = new_state.find_quest(pending.quest_id)
        if quest is None or not is_quest_complete(quest):
            logger.info("Discarded stale quest bonus for %s", pending.quest_id)
            return Outcome(state=new_state, applied=False, reason=ErrorCode.ERR_NO_STATE_CHANGE)

        key = confirmed_bonus_key(pending.quest_id)
        level_up = apply_xp_change(new_state.profile, amount=pending.amount, history_id=key, now=now or datetime.now())
        logger.info("Confirmed quest bonus for %s: +%d XP", pending.quest_id, pending.amount)
        return Outcome(
            state=new_state,
            xp_delta=pending.amount,
            popups={quest_bonus_key(pending.quest_id): pending.amount},
            level_up=level_up,
        )


def decline_quest_bonus(state: GameState) -> Outcome:
    """Dismiss the pending quest bonus without XP change."""
    if not isinstance(state.pending_bonus, PendingQuestBonus):
        return _noop(state, ErrorCode.ERR_NO_PENDING_BONUS)
    new_state = state.model_copy(deep=True)
    new_state.pending_bonus = NoPendingBonus()
    logger.info("Quest bonus for %s declined", state.pending_bonus.quest_id)
    return Outcome(state=new_state)


# Structural edits


def delete_quest_task(
    state: GameState,
    *,
    quest_id: str,
    category_id: str,
    task_id: str,
    now: datetime | None = None,
) -> Outcome:
    """Delete a quest task and settle the bonuses the deletion changes.

    Removing the last pending task can complete the category (section bonus)
    and the quest (quest bonus, paid immediately with no confirmation gate).
    Removing the only task of a complete category empties it, which revokes
    its section bonus and the quest bonus.
    """
    with span("quest_service.delete_quest_task"):
        new_state = state.model_copy(deep=True)
        quest, category, error = _locate(new_state, quest_id, category_id)
        if error is not None:
            return _noop(state, error, quest_id=quest_id, category_id=category_id)
        if category.find_task(task_id) is None:
            return _noop(state, ErrorCode.ERR_TASK_NOT_FOUND, quest_id=quest_id, task_id=task_id)

        was_category_complete = is_category_complete(category)
        was_quest_complete = is_quest_complete(quest)

        category.tasks = [task for task in category.tasks if task.id != task_id]

        bonuses = _BonusLedger(new_state, now or datetime.now())
        category_now_complete = is_category_complete(category)
        if category_now_complete and not was_category_complete:
            bonuses.apply(section_bonus_key(category_id), Constants.SECTION_BONUS_XP)
        elif was_category_complete and not category_now_complete:
            # Removing the only task of a complete category empties it
            bonuses.apply(section_bonus_key(category_id), -Constants.SECTION_BONUS_XP)

        quest_now_complete = is_quest_complete(quest)
        if quest_now_complete and not was_quest_complete:
            bonuses.apply(quest_bonus_key(quest_id), get_quest_bonus_amount(len(quest.categories)))
        elif was_quest_complete and not quest_now_complete:
            bonuses.revoke_quest_bonus(quest)

        logger.info("Deleted quest task %s from %s", task_id, category_id, extra={"quest_id": quest_id})
        return bonuses.outcome()


def delete_category(
    state: GameState,
    *,
    quest_id: str,
    category_id: str,
    now: datetime | None = None,
) -> Outcome:
    """Delete a category and settle the bonuses the deletion changes.

    A complete category takes its section bonus with it. The quest bonus is
    paid if the deletion completes the quest, revoked if it breaks it, and
    moved to the new tier if the quest stays complete with fewer categories.
    """
    with span("quest_service.delete_category"):
        new_state = state.model_copy(deep=True)
        quest, category, error = _locate(new_state, quest_id, category_id)
        if error is not None:
            return _noop(state, error, quest_id=quest_id, category_id=category_id)

        was_category_complete = is_category_complete(category)
        was_quest_complete = is_quest_complete(quest)
        previous_count = len(quest.categories)
        quest.categories = [c for c in quest.categories if c.id != category_id]
        quest_now_complete = is_quest_complete(quest)
        new_amount = get_quest_bonus_amount(len(quest.categories))

        bonuses = _BonusLedger(new_state, now or datetime.now())
        if was_category_complete:
            bonuses.apply(section_bonus_key(category_id), -Constants.SECTION_BONUS_XP)

        pending = new_state.pending_for(quest_id)
        if quest_now_complete and not was_quest_complete:
            bonuses.apply(quest_bonus_key(quest_id), new_amount)
        elif was_quest_complete and not quest_now_complete:
            bonuses.revoke_quest_bonus(quest, category_count=previous_count)
        elif quest_now_complete and pending is not None:
            pending.amount = new_amount
        elif quest_now_complete:
            # Paid bonus follows the tier of the remaining category count
            bonuses.apply(quest_bonus_key(quest_id), new_amount - get_quest_bonus_amount(previous_count))
        elif pending is not None:
            new_state.pending_bonus = NoPendingBonus()

        logger.info("Deleted category %s", category_id, extra={"quest_id": quest_id})
        return bonuses.outcome()


def add_quest_task(
    state: GameState,
    *,
    quest_id: str,
    category_id: str,
    name: str,
    difficulty: Difficulty = Difficulty.EASY,
    skill_category: SkillCategory = SkillCategory.DEFAULT,
    description: str = "",
    now: datetime | None = None,
) -> Outcome:
    """Insert a pending task, revoking bonuses whose predicates it breaks."""
    with span("quest_service.add_quest_task"):
        new_state = state.model_copy(deep=True)
        quest, category, error = _locate(new_state, quest_id, category_id)
        if error is not None:
            return _noop(state, error, quest_id=quest_id, category_id=category_id)

        bonuses = _BonusLedger(new_state, now or datetime.now())
        if is_category_complete(category):
            bonuses.apply(section_bonus_key(category_id), -Constants.SECTION_BONUS_XP)
        if is_quest_complete(quest):
            bonuses.revoke_quest_bonus(quest)

        category.tasks.append(
            QuestTask(
                name=sanitize_text_input(name),
                difficulty=difficulty,
                skill_category=skill_category,
                description=sanitize_text_input(description),
            )
        )

        logger.info("Added quest task to %s", category_id, extra={"quest_id": quest_id})
        return bonuses.outcome()


def add_category(
    state: GameState,
    *,
    quest_id: str,
    title: str,
    now: datetime | None = None,
) -> Outcome:
    """Append an empty category, revoking the quest bonus if the quest was complete."""
    with span("quest_service.add_category"):
        new_state = state.model_copy(deep=True)
        quest, _category, error = _locate(new_state, quest_id)
        if error is not None:
            return _noop(state, error, quest_id=quest_id)

        bonuses = _BonusLedger(new_state, now or datetime.now())
        if is_quest_complete(quest):
            bonuses.revoke_quest_bonus(quest)

        quest.categories.append(QuestCategory(title=sanitize_text_input(title)))

        logger.info("Added category to quest %s", quest_id)
        return bonuses.outcome()


def replace_categories(state: GameState, *, quest_id: str, breakdown: Any) -> Outcome:
    """Replace a quest's categories wholesale from breakdown descriptors.

    No bonus recomputation is attempted against the previous structure; prior
    completion state is discarded and history entries for the discarded tasks
    are left in place. Malformed input rejects the whole batch.
    """
    with span("quest_service.replace_categories"):
        if state.find_quest(quest_id) is None:
            return _noop(state, ErrorCode.ERR_QUEST_NOT_FOUND, quest_id=quest_id)
        try:
            descriptors = parse_breakdown(breakdown)
        except BreakdownValidationError as e:
            logger.warning("Rejected quest breakdown for %s: %s", quest_id, e)
            return _noop(state, e.code, quest_id=quest_id)

        new_state = state.model_copy(deep=True)
        quest = new_state.find_quest(quest_id)
        quest.categories = [descriptor.to_category() for descriptor in descriptors]
        if new_state.pending_for(quest_id) is not None:
            new_state.pending_bonus = NoPendingBonus()

        logger.info("Replaced categories of quest %s (%d categories)", quest_id, len(quest.categories))
        return Outcome(state=new_state)


# Quest lifecycle


def create_quest(state: GameState, *, title: str, breakdown: Any = None) -> Outcome:
    """Create a quest (prepended), optionally populated from descriptors.

    Tasks missing difficulty or skill default to Easy / Default.
    """
    with span("quest_service.create_quest"):
        try:
            descriptors = parse_breakdown(breakdown, apply_defaults=True)
        except BreakdownValidationError as e:
            logger.warning("Rejected quest creation payload: %s", e)
            return _noop(state, e.code)

        new_state = state.model_copy(deep=True)
        quest = MainQuest(
            title=sanitize_text_input(title),
            categories=[descriptor.to_category() for descriptor in descriptors],
        )
        new_state.quests.insert(0, quest)

        logger.info("Created quest %s with %d categories", quest.id, len(quest.categories))
        return Outcome(state=new_state)


def delete_quest(state: GameState, *, quest_id: str) -> Outcome:
    """Remove a quest; XP already earned is kept."""
    if state.find_quest(quest_id) is None:
        return _noop(state, ErrorCode.ERR_QUEST_NOT_FOUND, quest_id=quest_id)

    new_state = state.model_copy(deep=True)
    new_state.quests = [q for q in new_state.quests if q.id != quest_id]
    if new_state.pending_for(quest_id) is not None:
        new_state.pending_bonus = NoPendingBonus()

    logger.info("Deleted quest %s", quest_id)
    return Outcome(state=new_state)


def rename_quest(state: GameState, *, quest_id: str, title: str) -> Outcome:
    new_state = state.model_copy(deep=True)
    quest, _category, error = _locate(new_state, quest_id)
    if error is not None:
        return _noop(state, error, quest_id=quest_id)
    quest.title = sanitize_text_input(title)
    return Outcome(state=new_state)


def rename_category(state: GameState, *, quest_id: str, category_id: str, title: str) -> Outcome:
    new_state = state.model_copy(deep=True)
    _quest, category, error = _locate(new_state, quest_id, category_id)
    if error is not None:
        return _noop(state, error, quest_id=quest_id, category_id=category_id)
    category.title = sanitize_text_input(title)
    return Outcome(state=new_state)


def update_quest_task(
    state: GameState,
    *,
    quest_id: str,
    category_id: str,
    task_id: str,
    name: str,
    difficulty: Difficulty,
    skill_category: SkillCategory,
    description: str = "",
) -> Outcome:
    """Edit a quest task's details. Status, XP and history are untouched."""
    new_state = state.model_copy(deep=True)
    _quest, category, error = _locate(new_state, quest_id, category_id)
    if error is not None:
        return _noop(state, error, quest_id=quest_id, category_id=category_id)
    task = category.find_task(task_id)
    if task is None:
        return _noop(state, ErrorCode.ERR_TASK_NOT_FOUND, quest_id=quest_id, task_id=task_id)

    task.name = sanitize_text_input(name)
    task.difficulty = difficulty
    task.skill_category = skill_category
    task.description = sanitize_text_input(description)
    return Outcome(state=new_state)

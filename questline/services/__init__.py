"""Engine services: XP, leveling, ledger, quests, tasks and habits."""

from questline.services import (
    habit_service,
    history_service,
    ledger_service,
    profile_service,
    quest_service,
    task_service,
)


__all__ = [
    "habit_service",
    "history_service",
    "ledger_service",
    "profile_service",
    "quest_service",
    "task_service",
]

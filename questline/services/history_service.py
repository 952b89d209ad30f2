"""History aggregation for calendar and activity views."""

from questline.core.config import Constants
from questline.domain.user import HistoryEntry
from questline.models.service_models import DailyActivity
from questline.services.habit_service import local_date


def aggregate_history_by_day(
    history: list[HistoryEntry],
    max_days: int = Constants.MAX_ACTIVE_HISTORY_DAYS,
) -> list[DailyActivity]:
    """Group history entries into per-day summaries, newest day first.

    Args:
        history: Ledger history entries in any order
        max_days: Number of most recent days to keep

    Returns:
        One DailyActivity per local calendar day with activity
    """
    totals: dict[str, int] = {}
    task_ids: dict[str, list[str]] = {}
    for entry in history:
        day = local_date(entry.date).isoformat()
        totals[day] = totals.get(day, 0) + entry.xp_gained
        ids = task_ids.setdefault(day, [])
        if entry.task_id not in ids:
            ids.append(entry.task_id)

    days = sorted(totals, reverse=True)[:max_days]
    return [
        DailyActivity(date=day, total_xp=totals[day], task_count=len(task_ids[day]), task_ids=task_ids[day])
        for day in days
    ]

"""Scheduler for the habit streak clock."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from questline.core.config import settings
from questline.core.scheduler_tracker import retry_job_with_backoff
from questline.core.state_store import StateStore
from questline.services.habit_service import run_habit_sync


logger = logging.getLogger(__name__)

HABIT_SYNC_JOB_ID = "habit_sync"

# Global scheduler instance
scheduler = AsyncIOScheduler()


async def habit_sync_job(store: StateStore) -> None:
    """Scheduled entry point: normalize habits for all users with retry."""
    await retry_job_with_backoff(
        lambda: run_habit_sync(store),
        HABIT_SYNC_JOB_ID,
        max_retries=settings.job_max_retries,
    )


def register_jobs(store: StateStore, target: AsyncIOScheduler | None = None) -> None:
    """Register the habit sync job without starting the scheduler."""
    target = target or scheduler
    target.add_job(
        habit_sync_job,
        trigger=IntervalTrigger(seconds=settings.habit_sync_interval_seconds),
        args=[store],
        id=HABIT_SYNC_JOB_ID,
        name="Normalize Habit Streaks",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    logger.info(f"Scheduled habit sync job: every {settings.habit_sync_interval_seconds}s")


def start_scheduler(store: StateStore) -> None:
    """Start the scheduler and register all jobs.

    Must be called from within a running asyncio event loop.
    """
    if not settings.enable_habit_clock:
        logger.info("Habit clock disabled; scheduler not started")
        return

    logger.info("Starting scheduler")
    register_jobs(store)
    scheduler.start()
    logger.info("Scheduler started successfully")


def stop_scheduler() -> None:
    """Stop the scheduler if it is running."""
    if not scheduler.running:
        return
    logger.info("Stopping scheduler")
    scheduler.shutdown(wait=True)
    logger.info("Scheduler stopped")

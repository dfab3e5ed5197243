"""
Scheduled Task Module

Uses APScheduler to run the unused key cleanup on a fixed interval.
"""

import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from kvdb.common.time import utc_now
from kvdb.config import Settings, get_settings
from kvdb.db.session import AsyncSessionLocal
from kvdb.services.expiration_service import ExpirationSweeper

logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "cleanup_unused_keys"

# Global Scheduler Instance
_scheduler: Optional[AsyncIOScheduler] = None


def start_scheduler(settings: Optional[Settings] = None, session_factory=None) -> None:
    """
    Start Scheduled Task Scheduler

    Does nothing when either the retention window or the cleanup interval is
    unset. The first sweep runs immediately, then every KEY_CLEANUP_EVERY_S.
    """
    global _scheduler

    if _scheduler is not None:
        logger.warning("Scheduler already started")
        return

    settings = settings or get_settings()

    if not settings.sweeper_enabled:
        logger.info("Key cleanup disabled: KEY_CLEANUP_EVERY_S or DELETE_UNUSED_KEYS_AFTER not set")
        return

    sweeper = ExpirationSweeper(
        session_factory or AsyncSessionLocal,
        settings.retention_window,
    )

    _scheduler = AsyncIOScheduler()
    _scheduler.add_job(
        sweeper.run,
        trigger=IntervalTrigger(seconds=settings.KEY_CLEANUP_EVERY_S),
        id=SWEEP_JOB_ID,
        name="Clean up unused keys",
        next_run_time=utc_now(),
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    _scheduler.start()

    logger.info(
        "Scheduler started: unused key cleanup every "
        f"{settings.KEY_CLEANUP_EVERY_S} seconds, "
        f"deleting keys inactive for {settings.DELETE_UNUSED_KEYS_AFTER}"
    )


def shutdown_scheduler() -> None:
    """
    Shutdown Scheduled Task Scheduler

    Stops the cleanup job; a sweep already in progress finishes its transaction.
    """
    global _scheduler

    if _scheduler is None:
        return

    _scheduler.shutdown(wait=True)
    _scheduler = None
    logger.info("Scheduler shutdown completed")


def get_scheduler() -> Optional[AsyncIOScheduler]:
    """
    Get Scheduler Instance

    Returns:
        Optional[AsyncIOScheduler]: Scheduler instance or None
    """
    return _scheduler

import logging
from typing import Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()
_session_factory: Any = None


async def _mark_overdue_payments() -> None:
    """Job: flag planned payments whose date has passed, for every company."""
    try:
        async with _session_factory() as db:
            from app.payments.service import mark_overdue_payments

            count = await mark_overdue_payments(db)
            if count > 0:
                logger.info("Marked %d payments as overdue", count)
    except Exception:
        logger.exception("Error marking overdue payments")


def setup_scheduler(session_factory: Any) -> None:
    """Register all periodic jobs and start the scheduler."""
    global _session_factory
    _session_factory = session_factory

    scheduler.add_job(
        _mark_overdue_payments,
        CronTrigger(hour=0, minute=15),
        id="mark_overdue_payments",
        replace_existing=True,
    )

    scheduler.start()
    logger.info("Background scheduler started with %d jobs", len(scheduler.get_jobs()))


def shutdown_scheduler() -> None:
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Background scheduler stopped")

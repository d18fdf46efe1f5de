"""
services/scheduler.py
---------------------
Daily reminder job on APScheduler.

The job runs once per calendar day at REMINDER_HOUR:REMINDER_MINUTE in the
operating timezone, either on a BackgroundScheduler inside the web process
or on a BlockingScheduler as its own daemon (see main.py).
"""

from typing import Callable

import pytz
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from utils.logger import get_logger

logger = get_logger(__name__)

JOB_ID = "daily_reminders"

# A host that was asleep at the run time still gets that day's run on wake-up
MISFIRE_GRACE_SECONDS = 3600


def daily_trigger(hour: int, minute: int, tz: pytz.BaseTzInfo) -> CronTrigger:
    return CronTrigger(hour=hour, minute=minute, timezone=tz)


def run_logged(job: Callable[[], object], name: str = JOB_ID):
    """Invoke the job, logging instead of propagating failures."""
    try:
        return job()
    except Exception as e:
        logger.error(f"Scheduled job '{name}' failed: {e}", exc_info=True)
        return None


def schedule_daily(
    scheduler: BaseScheduler,
    job: Callable[[], object],
    hour: int,
    minute: int,
    tz: pytz.BaseTzInfo,
):
    """
    Register ``job`` to fire every day at ``hour:minute`` in ``tz``.

    Missed runs are coalesced into one and a run never overlaps the previous
    one, so each calendar day triggers the job at most once.

    Returns:
        The APScheduler Job.
    """
    scheduled = scheduler.add_job(
        run_logged,
        trigger=daily_trigger(hour, minute, tz),
        args=(job, JOB_ID),
        id=JOB_ID,
        name=JOB_ID,
        coalesce=True,
        max_instances=1,
        misfire_grace_time=MISFIRE_GRACE_SECONDS,
        replace_existing=True,
    )
    logger.info(f"Scheduled '{JOB_ID}' daily at {hour:02d}:{minute:02d} {tz.zone}")
    return scheduled


def build_background_scheduler(job, hour: int, minute: int, tz: pytz.BaseTzInfo) -> BackgroundScheduler:
    """Scheduler for running alongside the web server. Call ``start()``."""
    scheduler = BackgroundScheduler(timezone=tz, daemon=True)
    schedule_daily(scheduler, job, hour, minute, tz)
    return scheduler


def build_blocking_scheduler(job, hour: int, minute: int, tz: pytz.BaseTzInfo) -> BlockingScheduler:
    """Scheduler for the standalone reminder daemon; ``start()`` blocks until shutdown."""
    scheduler = BlockingScheduler(timezone=tz)
    schedule_daily(scheduler, job, hour, minute, tz)
    return scheduler

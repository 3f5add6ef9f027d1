"""APScheduler integration for timed-action instance rollover.

Every active timed action gets one instance per schedule window. The job
creates the instance for the current window when it is missing. No-ops
gracefully if no rollover interval is configured.
"""

import asyncio
import contextlib
import logging
import sqlite3
from datetime import datetime, timedelta

from apscheduler.schedulers.asyncio import AsyncIOScheduler  # type: ignore[import-untyped]
from apscheduler.triggers.interval import IntervalTrigger  # type: ignore[import-untyped]

from statuspage.config import get_settings
from statuspage.dates import parse_db, to_db, utc_now
from statuspage.observability.metrics import ACTION_INSTANCES_CREATED, ROLLOVER_RUNS_TOTAL
from statuspage.store.actions import get_latest_action_instance, list_active_timed_actions, save_action_instance
from statuspage.store.db import get_initialized_connection
from statuspage.store.models import TimedActionRecord

logger = logging.getLogger(__name__)

_scheduler: AsyncIOScheduler | None = None


def current_window(action: TimedActionRecord, now: datetime) -> tuple[datetime, datetime] | None:
    """The ``[start, end)`` schedule window containing ``now``, None before the first one."""
    start_at = parse_db(action["start_at"])
    frequency = timedelta(seconds=action["schedule_frequency"])
    if now < start_at or frequency <= timedelta(0):
        return None
    elapsed = (now - start_at) // frequency
    start = start_at + frequency * elapsed
    return start, start + frequency


def ensure_current_instance(conn: sqlite3.Connection, action: TimedActionRecord, now: datetime) -> int | None:
    """Create the instance for the current window if it doesn't exist yet.

    Returns the new instance ID, or None when nothing was created.
    """
    window = current_window(action, now)
    if window is None:
        return None
    start, end = window

    latest = get_latest_action_instance(conn, action["id"])
    if latest is not None and latest["started_at"] >= to_db(start):
        return None

    instance_id = save_action_instance(
        conn,
        action["id"],
        started_at=start,
        ended_at=end,
        target_completed_at=start + timedelta(seconds=action["completion_latency"]),
        created_at=now,
    )
    ACTION_INSTANCES_CREATED.inc()
    logger.info("Opened instance %d for timed action '%s' at %s", instance_id, action["name"], to_db(start))
    return instance_id


def rollover_actions(conn: sqlite3.Connection, now: datetime) -> int:
    """Roll every active action forward. Returns the number of instances created."""
    created = 0
    for action in list_active_timed_actions(conn):
        if ensure_current_instance(conn, action, now) is not None:
            created += 1
    return created


def _rollover_with_new_connection() -> int:
    conn = get_initialized_connection()
    try:
        return rollover_actions(conn, utc_now())
    finally:
        conn.close()


async def _scheduled_rollover_job() -> None:
    """Async job executed by the scheduler."""
    try:
        created = await asyncio.to_thread(_rollover_with_new_connection)
        ROLLOVER_RUNS_TOTAL.labels(status="success").inc()
        if created:
            logger.info("Timed-action rollover created %d instance(s)", created)
    except Exception:
        ROLLOVER_RUNS_TOTAL.labels(status="error").inc()
        logger.exception("Timed-action rollover failed")


def start_scheduler() -> None:
    """Start the APScheduler if a rollover interval is configured."""
    global _scheduler  # noqa: PLW0603

    settings = get_settings()
    if settings.action_rollover_seconds <= 0:
        logger.info("Timed-action scheduler disabled (ACTION_ROLLOVER_SECONDS not set)")
        return

    _scheduler = AsyncIOScheduler()
    _scheduler.add_job(
        _scheduled_rollover_job,
        trigger=IntervalTrigger(seconds=settings.action_rollover_seconds),
        id="timed_action_rollover",
        name="Timed Action Rollover",
        replace_existing=True,
    )
    _scheduler.start()
    logger.info("Timed-action scheduler started every %ds", settings.action_rollover_seconds)


def stop_scheduler() -> None:
    """Gracefully shut down the scheduler if it is running."""
    global _scheduler  # noqa: PLW0603

    if _scheduler is not None:
        with contextlib.suppress(Exception):
            _scheduler.shutdown(wait=False)
        logger.info("Timed-action scheduler stopped")
        _scheduler = None

"""Run history for timed actions over the last 30 days."""

import sqlite3
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from statuspage.dates import format_minute, from_db, parse_db
from statuspage.presenters import ActionView, present_action
from statuspage.store.actions import list_action_instances
from statuspage.store.models import TimedActionInstanceRecord, TimedActionRecord

HISTORY_DAYS = 30
HISTORY_LIMIT = 30


class InstanceSummary(BaseModel):
    """One run of a timed action. Timestamps are minute-precision local time."""

    id: int
    is_completed: bool
    time_taken: int  # seconds, 0 when not completed
    started_at: str
    ended_at: str
    target_completed_at: str
    completed_at: str | None


class ActionHistory(BaseModel):
    action: ActionView
    items: list[InstanceSummary]


def time_taken(instance: TimedActionInstanceRecord) -> int:
    """Seconds between start and completion, 0 for runs still open."""
    completed_at = from_db(instance["completed_at"])
    if completed_at is None:
        return 0
    return int(abs((completed_at - parse_db(instance["started_at"])).total_seconds()))


def summarize_instance(instance: TimedActionInstanceRecord, tz: ZoneInfo) -> InstanceSummary:
    completed_at = from_db(instance["completed_at"])
    return InstanceSummary(
        id=instance["id"],
        is_completed=completed_at is not None,
        time_taken=time_taken(instance),
        started_at=format_minute(parse_db(instance["started_at"]), tz),
        ended_at=format_minute(parse_db(instance["ended_at"]), tz),
        target_completed_at=format_minute(parse_db(instance["target_completed_at"]), tz),
        completed_at=format_minute(completed_at, tz) if completed_at is not None else None,
    )


def get_action_history(
    conn: sqlite3.Connection,
    action: TimedActionRecord,
    *,
    now: datetime,
    tz: ZoneInfo,
) -> ActionHistory:
    """The action's most recent runs, oldest first.

    Every run is kept, including runs that start within the same minute.
    """
    instances = list_action_instances(
        conn,
        action["id"],
        since=now - timedelta(days=HISTORY_DAYS),
        limit=HISTORY_LIMIT,
    )
    return ActionHistory(
        action=present_action(action),
        items=[summarize_instance(i, tz) for i in reversed(instances)],
    )

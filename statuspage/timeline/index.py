"""Assemble the status page index view-model."""

import logging
import sqlite3
from datetime import date, datetime
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from statuspage.presenters import ActionView, IncidentView, present_action, present_incident
from statuspage.store.actions import list_active_timed_actions
from statuspage.timeline.buckets import fetch_day_buckets
from statuspage.timeline.pagination import evaluate_pagination
from statuspage.timeline.window import resolve_window

logger = logging.getLogger(__name__)


class IndexPage(BaseModel):
    actions: list[ActionView]
    days_to_show: int
    all_incidents: dict[str, list[IncidentView]]
    can_page_forward: bool
    can_page_backward: bool
    previous_date: date
    next_date: date


def build_index(
    conn: sqlite3.Connection,
    *,
    now: datetime,
    tz: ZoneInfo,
    configured_days: int,
    authenticated: bool,
    requested_start_date: str | None = None,
) -> IndexPage:
    """Resolve the window, bucket its incidents and evaluate pagination."""
    window = resolve_window(
        now=now,
        tz=tz,
        requested_start_date=requested_start_date,
        configured_days=configured_days,
        authenticated=authenticated,
    )
    buckets = fetch_day_buckets(conn, window, now=now, tz=tz)
    pagination = evaluate_pagination(conn, window, now=now, tz=tz)

    logger.debug(
        "Timeline anchored on %s over %d day(s): %d bucket(s)",
        window.anchor_date,
        window.days_to_show,
        len(buckets),
    )

    return IndexPage(
        actions=[present_action(a) for a in list_active_timed_actions(conn)],
        days_to_show=window.days_to_show,
        all_incidents={day: [present_incident(i) for i in incidents] for day, incidents in buckets.items()},
        can_page_forward=pagination.can_page_forward,
        can_page_backward=pagination.can_page_backward,
        previous_date=pagination.previous_date,
        next_date=pagination.next_date,
    )

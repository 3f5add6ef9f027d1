"""Work out whether the timeline can page forwards or backwards."""

import sqlite3
from datetime import date, datetime
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from statuspage.dates import day_start, local_today, shift_days
from statuspage.store.incidents import count_incidents_before
from statuspage.timeline.window import TimelineWindow


class PaginationState(BaseModel):
    can_page_forward: bool
    can_page_backward: bool
    previous_date: date
    next_date: date


def pagination_state(window: TimelineWindow, *, today: date, has_older: bool) -> PaginationState:
    return PaginationState(
        can_page_forward=window.anchor_date < today,
        can_page_backward=has_older,
        previous_date=shift_days(window.anchor_date, -window.days_to_show),
        next_date=shift_days(window.anchor_date, window.days_to_show),
    )


def evaluate_pagination(
    conn: sqlite3.Connection,
    window: TimelineWindow,
    *,
    now: datetime,
    tz: ZoneInfo,
) -> PaginationState:
    """Pagination for ``window``; backward paging needs an incident older than the anchor day."""
    older = count_incidents_before(
        conn,
        before=day_start(window.anchor_date, tz),
        visibility=window.visibility_threshold,
        now=now,
    )
    return pagination_state(window, today=local_today(now, tz), has_older=older > 0)

"""Group timeline incidents into calendar-day buckets."""

import sqlite3
from datetime import datetime
from zoneinfo import ZoneInfo

from statuspage.dates import day_end, day_start, to_local
from statuspage.presenters import effective_timestamp
from statuspage.store.incidents import list_incidents
from statuspage.store.models import IncidentRecord
from statuspage.timeline.window import TimelineWindow

DayBuckets = dict[str, list[IncidentRecord]]


def group_incidents(incidents: list[IncidentRecord], window: TimelineWindow, tz: ZoneInfo) -> DayBuckets:
    """Bucket incidents by local date and fill every window day.

    Incidents keep their input order inside a bucket. Buckets come back keyed
    ``YYYY-MM-DD``, most recent date first.
    """
    buckets: DayBuckets = {}
    for incident in incidents:
        key = to_local(effective_timestamp(incident), tz).date().isoformat()
        buckets.setdefault(key, []).append(incident)

    for day in window.days():
        buckets.setdefault(day.isoformat(), [])

    return dict(sorted(buckets.items(), key=lambda item: item[0], reverse=True))


def fetch_day_buckets(
    conn: sqlite3.Connection,
    window: TimelineWindow,
    *,
    now: datetime,
    tz: ZoneInfo,
) -> DayBuckets:
    """Load the window's incidents and bucket them by day."""
    incidents = list_incidents(
        conn,
        visibility=window.visibility_threshold,
        start=day_start(window.start_date, tz),
        end=day_end(window.anchor_date, tz),
        now=now,
    )
    return group_incidents(incidents, window, tz)

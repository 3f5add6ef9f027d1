"""Bucketed metric series for the status page charts.

Each series is a run of fixed-width buckets ending at "now". A bucket's value
is the metric's sum or average of ``value * counter`` over the points in it;
empty buckets take the metric's default value.
"""

import calendar
import sqlite3
from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from statuspage.dates import day_start, local_today, shift_days, to_local
from statuspage.store.metrics import aggregate_points
from statuspage.store.models import MetricRecord

LAST_HOUR_MINUTES = 60
TODAY_HOURS = 12
WEEK_DAYS = 7


class MetricPoint(BaseModel):
    timestamp: datetime  # bucket start
    label: str
    value: float


def _bucket_value(
    conn: sqlite3.Connection,
    metric: MetricRecord,
    start: datetime,
    end: datetime,
) -> float:
    value = aggregate_points(conn, metric, start=start, end=end)
    if value is None:
        value = metric["default_value"]
    return round(value, metric["places"])


def _fixed_width_series(
    conn: sqlite3.Connection,
    metric: MetricRecord,
    *,
    anchor: datetime,
    step: timedelta,
    count: int,
    label_format: str,
    tz: ZoneInfo,
) -> list[MetricPoint]:
    """``count + 1`` buckets of width ``step``, the last one starting at ``anchor``."""
    points: list[MetricPoint] = []
    for i in range(count, -1, -1):
        start = anchor - step * i
        points.append(
            MetricPoint(
                timestamp=start,
                label=to_local(start, tz).strftime(label_format),
                value=_bucket_value(conn, metric, start, start + step),
            )
        )
    return points


def _daily_series(
    conn: sqlite3.Connection,
    metric: MetricRecord,
    *,
    now: datetime,
    tz: ZoneInfo,
    days: int,
) -> list[MetricPoint]:
    """``days + 1`` calendar-day buckets ending today, using local midnights."""
    today = local_today(now, tz)
    points: list[MetricPoint] = []
    for i in range(days, -1, -1):
        day = shift_days(today, -i)
        start = day_start(day, tz)
        points.append(
            MetricPoint(
                timestamp=start,
                label=day.isoformat(),
                value=_bucket_value(conn, metric, start, day_start(shift_days(day, 1), tz)),
            )
        )
    return points


def points_last_hour(conn: sqlite3.Connection, metric: MetricRecord, *, now: datetime, tz: ZoneInfo) -> list[MetricPoint]:
    anchor = to_local(now, tz).replace(second=0, microsecond=0).astimezone(UTC)
    return _fixed_width_series(
        conn,
        metric,
        anchor=anchor,
        step=timedelta(minutes=1),
        count=LAST_HOUR_MINUTES,
        label_format="%H:%M",
        tz=tz,
    )


def points_today(conn: sqlite3.Connection, metric: MetricRecord, *, now: datetime, tz: ZoneInfo) -> list[MetricPoint]:
    anchor = to_local(now, tz).replace(minute=0, second=0, microsecond=0).astimezone(UTC)
    return _fixed_width_series(
        conn,
        metric,
        anchor=anchor,
        step=timedelta(hours=1),
        count=TODAY_HOURS,
        label_format="%H:00",
        tz=tz,
    )


def points_for_week(conn: sqlite3.Connection, metric: MetricRecord, *, now: datetime, tz: ZoneInfo) -> list[MetricPoint]:
    return _daily_series(conn, metric, now=now, tz=tz, days=WEEK_DAYS)


def points_for_month(conn: sqlite3.Connection, metric: MetricRecord, *, now: datetime, tz: ZoneInfo) -> list[MetricPoint]:
    today = local_today(now, tz)
    days_in_month = calendar.monthrange(today.year, today.month)[1]
    return _daily_series(conn, metric, now=now, tz=tz, days=days_in_month)

"""Select a metric series by named window."""

import logging
import sqlite3
from datetime import datetime
from enum import StrEnum
from typing import assert_never
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from statuspage.metrics.points import (
    MetricPoint,
    points_for_month,
    points_for_week,
    points_last_hour,
    points_today,
)
from statuspage.presenters import MetricView, present_metric
from statuspage.store.models import MetricRecord

logger = logging.getLogger(__name__)


class MetricWindow(StrEnum):
    LAST_HOUR = "last_hour"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"

    @classmethod
    def parse(cls, name: str | None) -> "MetricWindow | None":
        """Look up a window by name, None for anything unrecognized."""
        try:
            return cls(name)
        except ValueError:
            return None


DEFAULT_WINDOW = MetricWindow.LAST_HOUR


class MetricSeries(BaseModel):
    metric: MetricView
    items: list[MetricPoint]


def select_points(
    conn: sqlite3.Connection,
    metric: MetricRecord,
    window: MetricWindow,
    *,
    now: datetime,
    tz: ZoneInfo,
) -> list[MetricPoint]:
    match window:
        case MetricWindow.LAST_HOUR:
            return points_last_hour(conn, metric, now=now, tz=tz)
        case MetricWindow.TODAY:
            return points_today(conn, metric, now=now, tz=tz)
        case MetricWindow.WEEK:
            return points_for_week(conn, metric, now=now, tz=tz)
        case MetricWindow.MONTH:
            return points_for_month(conn, metric, now=now, tz=tz)
        case _:
            assert_never(window)


def get_metric_series(
    conn: sqlite3.Connection,
    metric: MetricRecord,
    filter_name: str | None,
    *,
    now: datetime,
    tz: ZoneInfo,
) -> MetricSeries:
    """Series for a metric. An unrecognized filter name yields no points."""
    window = MetricWindow.parse(DEFAULT_WINDOW if filter_name is None else filter_name)
    if window is None:
        logger.debug("Unknown metric filter %r for metric %d", filter_name, metric["id"])
        items: list[MetricPoint] = []
    else:
        items = select_points(conn, metric, window, now=now, tz=tz)
    return MetricSeries(metric=present_metric(metric), items=items)

"""Unit tests for metric series windows."""

import sqlite3
from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from statuspage.metrics.points import points_for_month, points_for_week, points_last_hour, points_today
from statuspage.metrics.windows import MetricWindow, get_metric_series, select_points
from statuspage.store.metrics import CALC_AVG, CALC_SUM, get_metric, save_metric, save_metric_point
from statuspage.store.models import MetricRecord

UTC_ZONE = ZoneInfo("UTC")
NOW = datetime(2024, 6, 10, 12, 30, 45, tzinfo=UTC)


def _metric(
    conn: sqlite3.Connection,
    *,
    calc_type: int = CALC_SUM,
    default_value: float = 0.0,
    places: int = 2,
) -> MetricRecord:
    metric_id = save_metric(
        conn,
        name="Requests",
        suffix="req",
        calc_type=calc_type,
        default_value=default_value,
        places=places,
        created_at=NOW - timedelta(days=60),
    )
    metric = get_metric(conn, metric_id)
    assert metric is not None
    return metric


class TestMetricWindowParse:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("last_hour", MetricWindow.LAST_HOUR),
            ("today", MetricWindow.TODAY),
            ("week", MetricWindow.WEEK),
            ("month", MetricWindow.MONTH),
            ("weekly", None),
            ("", None),
            (None, None),
        ],
    )
    def test_parse(self, name: str | None, expected: MetricWindow | None) -> None:
        assert MetricWindow.parse(name) is expected


class TestLastHour:
    def test_sixty_one_minute_buckets_oldest_first(self, conn: sqlite3.Connection) -> None:
        points = points_last_hour(conn, _metric(conn), now=NOW, tz=UTC_ZONE)

        assert len(points) == 61
        assert points[0].label == "11:30"
        assert points[-1].label == "12:30"
        assert points[-1].timestamp == datetime(2024, 6, 10, 12, 30, tzinfo=UTC)

    def test_sums_points_in_current_minute(self, conn: sqlite3.Connection) -> None:
        metric = _metric(conn)
        save_metric_point(conn, metric["id"], value=2, created_at=datetime(2024, 6, 10, 12, 30, 5, tzinfo=UTC))
        save_metric_point(conn, metric["id"], value=3, created_at=datetime(2024, 6, 10, 12, 30, 20, tzinfo=UTC))
        save_metric_point(conn, metric["id"], value=4, counter=2, created_at=datetime(2024, 6, 10, 12, 0, tzinfo=UTC))

        points = points_last_hour(conn, metric, now=NOW, tz=UTC_ZONE)
        by_label = {p.label: p.value for p in points}

        assert by_label["12:30"] == 5.0
        assert by_label["12:00"] == 8.0
        assert by_label["12:15"] == 0.0

    def test_empty_buckets_take_default_value(self, conn: sqlite3.Connection) -> None:
        points = points_last_hour(conn, _metric(conn, default_value=1.5), now=NOW, tz=UTC_ZONE)
        assert {p.value for p in points} == {1.5}

    def test_average_metric(self, conn: sqlite3.Connection) -> None:
        metric = _metric(conn, calc_type=CALC_AVG)
        save_metric_point(conn, metric["id"], value=2, created_at=datetime(2024, 6, 10, 12, 29, 1, tzinfo=UTC))
        save_metric_point(conn, metric["id"], value=5, created_at=datetime(2024, 6, 10, 12, 29, 2, tzinfo=UTC))

        points = points_last_hour(conn, metric, now=NOW, tz=UTC_ZONE)
        assert {p.label: p.value for p in points}["12:29"] == 3.5

    def test_rounds_to_metric_places(self, conn: sqlite3.Connection) -> None:
        metric = _metric(conn, places=1)
        save_metric_point(conn, metric["id"], value=1.27, created_at=datetime(2024, 6, 10, 12, 30, tzinfo=UTC))

        points = points_last_hour(conn, metric, now=NOW, tz=UTC_ZONE)
        assert points[-1].value == 1.3


class TestLongerWindows:
    def test_today_is_thirteen_hourly_buckets(self, conn: sqlite3.Connection) -> None:
        points = points_today(conn, _metric(conn), now=NOW, tz=UTC_ZONE)

        assert len(points) == 13
        assert points[0].label == "00:00"
        assert points[-1].label == "12:00"

    def test_week_is_eight_daily_buckets(self, conn: sqlite3.Connection) -> None:
        metric = _metric(conn)
        save_metric_point(conn, metric["id"], value=10, created_at=datetime(2024, 6, 5, 23, 59, 59, tzinfo=UTC))

        points = points_for_week(conn, metric, now=NOW, tz=UTC_ZONE)

        assert [p.label for p in points] == [f"2024-06-{d:02d}" for d in range(3, 11)]
        assert {p.label: p.value for p in points}["2024-06-05"] == 10.0

    def test_month_spans_days_in_current_month(self, conn: sqlite3.Connection) -> None:
        points = points_for_month(conn, _metric(conn), now=NOW, tz=UTC_ZONE)

        # June has 30 days: 30 days back plus today
        assert len(points) == 31
        assert points[0].label == "2024-05-11"
        assert points[-1].label == "2024-06-10"

    def test_daily_buckets_follow_application_timezone(self, conn: sqlite3.Connection) -> None:
        metric = _metric(conn)
        # 2024-06-09 20:00 in New York
        save_metric_point(conn, metric["id"], value=7, created_at=datetime(2024, 6, 10, 0, 0, tzinfo=UTC))

        points = points_for_week(conn, metric, now=NOW, tz=ZoneInfo("America/New_York"))
        by_label = {p.label: p.value for p in points}

        assert by_label["2024-06-09"] == 7.0
        assert by_label["2024-06-10"] == 0.0


class TestMetricSeries:
    def test_select_points_dispatches_every_window(self, conn: sqlite3.Connection) -> None:
        metric = _metric(conn)
        lengths = {window: len(select_points(conn, metric, window, now=NOW, tz=UTC_ZONE)) for window in MetricWindow}
        assert lengths == {
            MetricWindow.LAST_HOUR: 61,
            MetricWindow.TODAY: 13,
            MetricWindow.WEEK: 8,
            MetricWindow.MONTH: 31,
        }

    def test_unknown_filter_yields_empty_series(self, conn: sqlite3.Connection) -> None:
        series = get_metric_series(conn, _metric(conn), "fortnight", now=NOW, tz=UTC_ZONE)
        assert series.items == []
        assert series.metric.name == "Requests"

    def test_empty_filter_yields_empty_series(self, conn: sqlite3.Connection) -> None:
        series = get_metric_series(conn, _metric(conn), "", now=NOW, tz=UTC_ZONE)
        assert series.items == []

    def test_missing_filter_defaults_to_last_hour(self, conn: sqlite3.Connection) -> None:
        series = get_metric_series(conn, _metric(conn), None, now=NOW, tz=UTC_ZONE)
        assert len(series.items) == 61

    def test_series_carries_metric_attributes(self, conn: sqlite3.Connection) -> None:
        series = get_metric_series(conn, _metric(conn), "week", now=NOW, tz=UTC_ZONE)
        assert series.metric.suffix == "req"
        assert series.metric.calc_type == CALC_SUM

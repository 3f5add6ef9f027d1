"""Unit tests for timed-action history and instance rollover."""

import sqlite3
from datetime import UTC, datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from statuspage.actions import scheduler
from statuspage.actions.history import HISTORY_LIMIT, get_action_history, summarize_instance, time_taken
from statuspage.actions.scheduler import current_window, ensure_current_instance, rollover_actions
from statuspage.store.actions import (
    get_timed_action,
    list_action_instances,
    save_action_instance,
    save_timed_action,
)
from statuspage.store.models import TimedActionInstanceRecord, TimedActionRecord

UTC_ZONE = ZoneInfo("UTC")
NOW = datetime(2024, 6, 10, 12, 0, 0, tzinfo=UTC)


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=UTC)


def _instance(started_at: str, completed_at: str | None) -> TimedActionInstanceRecord:
    return TimedActionInstanceRecord(
        id=1,
        timed_action_id=1,
        message="",
        started_at=started_at,
        ended_at="2024-06-10T11:00:00+00:00",
        target_completed_at="2024-06-10T10:15:00+00:00",
        completed_at=completed_at,
        created_at=started_at,
    )


def _action(conn: sqlite3.Connection, *, active: bool = True, start_at: datetime | None = None) -> TimedActionRecord:
    action_id = save_timed_action(
        conn,
        name="Nightly backup",
        start_at=start_at or _utc(2024, 6, 1),
        schedule_frequency=3600,
        completion_latency=900,
        created_at=_utc(2024, 6, 1),
        active=active,
    )
    action = get_timed_action(conn, action_id)
    assert action is not None
    return action


def _run(conn: sqlite3.Connection, action_id: int, started_at: datetime, completed_after: int | None = None) -> int:
    return save_action_instance(
        conn,
        action_id,
        started_at=started_at,
        ended_at=started_at + timedelta(hours=1),
        target_completed_at=started_at + timedelta(minutes=15),
        completed_at=started_at + timedelta(seconds=completed_after) if completed_after is not None else None,
        created_at=started_at,
    )


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


class TestTimeTaken:
    def test_completed_instance(self) -> None:
        instance = _instance("2024-06-10T10:00:00+00:00", "2024-06-10T10:05:30+00:00")
        assert time_taken(instance) == 330

    def test_incomplete_instance(self) -> None:
        assert time_taken(_instance("2024-06-10T10:00:00+00:00", None)) == 0


class TestSummarizeInstance:
    def test_formats_minute_precision(self) -> None:
        summary = summarize_instance(
            _instance("2024-06-10T10:00:42+00:00", "2024-06-10T10:05:30+00:00"),
            UTC_ZONE,
        )
        assert summary.started_at == "2024-06-10 10:00"
        assert summary.completed_at == "2024-06-10 10:05"
        assert summary.ended_at == "2024-06-10 11:00"
        assert summary.target_completed_at == "2024-06-10 10:15"
        assert summary.is_completed is True

    def test_incomplete_passes_null_completion(self) -> None:
        summary = summarize_instance(_instance("2024-06-10T10:00:00+00:00", None), UTC_ZONE)
        assert summary.completed_at is None
        assert summary.time_taken == 0
        assert summary.is_completed is False

    def test_formats_in_application_timezone(self) -> None:
        summary = summarize_instance(_instance("2024-06-10T10:00:00+00:00", None), ZoneInfo("Europe/Amsterdam"))
        assert summary.started_at == "2024-06-10 12:00"


class TestActionHistory:
    def test_oldest_first(self, conn: sqlite3.Connection) -> None:
        action = _action(conn)
        for hour in (8, 9, 10):
            _run(conn, action["id"], _utc(2024, 6, 10, hour), completed_after=60)

        history = get_action_history(conn, action, now=NOW, tz=UTC_ZONE)

        assert [i.started_at for i in history.items] == [
            "2024-06-10 08:00",
            "2024-06-10 09:00",
            "2024-06-10 10:00",
        ]
        assert all(i.time_taken == 60 for i in history.items)

    def test_capped_to_most_recent(self, conn: sqlite3.Connection) -> None:
        action = _action(conn)
        for i in range(HISTORY_LIMIT + 5):
            _run(conn, action["id"], NOW - timedelta(hours=i + 1))

        history = get_action_history(conn, action, now=NOW, tz=UTC_ZONE)

        assert len(history.items) == HISTORY_LIMIT
        assert history.items[-1].started_at == "2024-06-10 11:00"

    def test_excludes_runs_older_than_thirty_days(self, conn: sqlite3.Connection) -> None:
        action = _action(conn, start_at=_utc(2024, 4, 1))
        _run(conn, action["id"], NOW - timedelta(days=31))
        _run(conn, action["id"], NOW - timedelta(days=29))

        history = get_action_history(conn, action, now=NOW, tz=UTC_ZONE)
        assert [i.started_at for i in history.items] == ["2024-05-12 12:00"]

    def test_runs_in_same_minute_are_all_kept(self, conn: sqlite3.Connection) -> None:
        action = _action(conn)
        _run(conn, action["id"], _utc(2024, 6, 10, 9, 0, 5))
        _run(conn, action["id"], _utc(2024, 6, 10, 9, 0, 40))

        history = get_action_history(conn, action, now=NOW, tz=UTC_ZONE)

        assert [i.started_at for i in history.items] == ["2024-06-10 09:00", "2024-06-10 09:00"]
        assert len({i.id for i in history.items}) == 2

    def test_action_view_has_no_instances(self, conn: sqlite3.Connection) -> None:
        action = _action(conn)
        history = get_action_history(conn, action, now=NOW, tz=UTC_ZONE)

        dumped = history.model_dump()
        assert dumped["action"]["name"] == "Nightly backup"
        assert "instances" not in dumped["action"]


# ---------------------------------------------------------------------------
# Rollover
# ---------------------------------------------------------------------------


class TestCurrentWindow:
    def test_aligned_to_start(self, conn: sqlite3.Connection) -> None:
        action = _action(conn, start_at=_utc(2024, 6, 1, 0, 30))
        window = current_window(action, _utc(2024, 6, 10, 12, 45))
        assert window == (_utc(2024, 6, 10, 12, 30), _utc(2024, 6, 10, 13, 30))

    def test_before_first_run(self, conn: sqlite3.Connection) -> None:
        action = _action(conn, start_at=_utc(2024, 7, 1))
        assert current_window(action, NOW) is None


class TestEnsureCurrentInstance:
    def test_creates_once_per_window(self, conn: sqlite3.Connection) -> None:
        action = _action(conn)

        first = ensure_current_instance(conn, action, NOW + timedelta(minutes=5))
        second = ensure_current_instance(conn, action, NOW + timedelta(minutes=50))

        assert first is not None
        assert second is None
        instances = list_action_instances(conn, action["id"], since=_utc(2024, 6, 1), limit=10)
        assert len(instances) == 1
        assert instances[0]["started_at"] == "2024-06-10T12:00:00+00:00"
        assert instances[0]["target_completed_at"] == "2024-06-10T12:15:00+00:00"
        assert instances[0]["ended_at"] == "2024-06-10T13:00:00+00:00"

    def test_next_window_opens_new_instance(self, conn: sqlite3.Connection) -> None:
        action = _action(conn)
        ensure_current_instance(conn, action, NOW)
        assert ensure_current_instance(conn, action, NOW + timedelta(hours=1)) is not None

    def test_rollover_skips_inactive_actions(self, conn: sqlite3.Connection) -> None:
        _action(conn)
        _action(conn, active=False)
        assert rollover_actions(conn, NOW) == 1
        assert rollover_actions(conn, NOW) == 0


class TestScheduler:
    def test_disabled_without_interval(self, mock_settings: Any) -> None:
        mock_settings.action_rollover_seconds = 0
        scheduler.start_scheduler()
        assert scheduler._scheduler is None  # pyright: ignore[reportPrivateUsage]

    def test_stop_is_noop_when_not_started(self, mock_settings: Any) -> None:  # noqa: ARG002
        scheduler.stop_scheduler()
        assert scheduler._scheduler is None  # pyright: ignore[reportPrivateUsage]

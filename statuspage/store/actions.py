"""Timed action and timed action instance CRUD."""

import sqlite3
from datetime import datetime

from statuspage.dates import to_db
from statuspage.store.models import TimedActionInstanceRecord, TimedActionRecord


def save_timed_action(
    conn: sqlite3.Connection,
    *,
    name: str,
    start_at: datetime,
    schedule_frequency: int,
    completion_latency: int,
    created_at: datetime,
    description: str = "",
    active: bool = True,
) -> int:
    """Save a timed action. Returns the new row ID."""
    cursor = conn.execute(
        """INSERT INTO timed_actions
           (name, description, active, start_at, schedule_frequency, completion_latency, created_at)
           VALUES (?, ?, ?, ?, ?, ?, ?)""",
        (
            name,
            description,
            int(active),
            to_db(start_at),
            schedule_frequency,
            completion_latency,
            to_db(created_at),
        ),
    )
    conn.commit()
    return cursor.lastrowid or 0


def get_timed_action(conn: sqlite3.Connection, action_id: int) -> TimedActionRecord | None:
    row = conn.execute("SELECT * FROM timed_actions WHERE id = ?", (action_id,)).fetchone()
    if row is None:
        return None
    return _row_to_action(row)


def list_active_timed_actions(conn: sqlite3.Connection) -> list[TimedActionRecord]:
    rows = conn.execute("SELECT * FROM timed_actions WHERE active = 1 ORDER BY id").fetchall()
    return [_row_to_action(r) for r in rows]


def save_action_instance(
    conn: sqlite3.Connection,
    action_id: int,
    *,
    started_at: datetime,
    ended_at: datetime,
    target_completed_at: datetime,
    created_at: datetime,
    completed_at: datetime | None = None,
    message: str = "",
) -> int:
    """Record a run instance for a timed action. Returns the new row ID."""
    cursor = conn.execute(
        """INSERT INTO timed_action_instances
           (timed_action_id, message, started_at, ended_at, target_completed_at, completed_at, created_at)
           VALUES (?, ?, ?, ?, ?, ?, ?)""",
        (
            action_id,
            message,
            to_db(started_at),
            to_db(ended_at),
            to_db(target_completed_at),
            to_db(completed_at) if completed_at is not None else None,
            to_db(created_at),
        ),
    )
    conn.commit()
    return cursor.lastrowid or 0


def complete_action_instance(conn: sqlite3.Connection, instance_id: int, completed_at: datetime) -> None:
    """Mark a run instance as completed."""
    conn.execute(
        "UPDATE timed_action_instances SET completed_at = ? WHERE id = ?",
        (to_db(completed_at), instance_id),
    )
    conn.commit()


def list_action_instances(
    conn: sqlite3.Connection,
    action_id: int,
    *,
    since: datetime,
    limit: int,
) -> list[TimedActionInstanceRecord]:
    """Instances started at or after ``since``, newest created first."""
    rows = conn.execute(
        """SELECT * FROM timed_action_instances
           WHERE timed_action_id = ? AND started_at >= ?
           ORDER BY created_at DESC, id DESC
           LIMIT ?""",
        (action_id, to_db(since), limit),
    ).fetchall()
    return [_row_to_instance(r) for r in rows]


def get_latest_action_instance(conn: sqlite3.Connection, action_id: int) -> TimedActionInstanceRecord | None:
    row = conn.execute(
        """SELECT * FROM timed_action_instances
           WHERE timed_action_id = ?
           ORDER BY started_at DESC, id DESC LIMIT 1""",
        (action_id,),
    ).fetchone()
    if row is None:
        return None
    return _row_to_instance(row)


def _row_to_action(row: sqlite3.Row) -> TimedActionRecord:
    return TimedActionRecord(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        active=bool(row["active"]),
        start_at=row["start_at"],
        schedule_frequency=row["schedule_frequency"],
        completion_latency=row["completion_latency"],
        created_at=row["created_at"],
    )


def _row_to_instance(row: sqlite3.Row) -> TimedActionInstanceRecord:
    return TimedActionInstanceRecord(
        id=row["id"],
        timed_action_id=row["timed_action_id"],
        message=row["message"],
        started_at=row["started_at"],
        ended_at=row["ended_at"],
        target_completed_at=row["target_completed_at"],
        completed_at=row["completed_at"],
        created_at=row["created_at"],
    )

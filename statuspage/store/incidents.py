"""Incident queries for the timeline and single-incident views."""

import sqlite3
from datetime import datetime

from statuspage.dates import to_db
from statuspage.store.models import IncidentRecord

STATUS_SCHEDULED = 0

# Everything except maintenance that is still upcoming.
_NOT_SCHEDULED_SQL = "NOT (status = 0 AND scheduled_at IS NOT NULL AND scheduled_at > ?)"


def save_incident(
    conn: sqlite3.Connection,
    *,
    name: str,
    created_at: datetime,
    message: str = "",
    status: int = 1,
    visible: int = 1,
    scheduled_at: datetime | None = None,
    component_id: int | None = None,
) -> int:
    """Record a new incident. Returns the new row ID."""
    cursor = conn.execute(
        """INSERT INTO incidents
           (component_id, name, message, status, visible, scheduled_at, created_at)
           VALUES (?, ?, ?, ?, ?, ?, ?)""",
        (
            component_id,
            name,
            message,
            status,
            visible,
            to_db(scheduled_at) if scheduled_at is not None else None,
            to_db(created_at),
        ),
    )
    conn.commit()
    return cursor.lastrowid or 0


def get_incident(conn: sqlite3.Connection, incident_id: int) -> IncidentRecord | None:
    row = conn.execute("SELECT * FROM incidents WHERE id = ?", (incident_id,)).fetchone()
    if row is None:
        return None
    return _row_to_incident(row)


def list_incidents(
    conn: sqlite3.Connection,
    *,
    visibility: int,
    start: datetime,
    end: datetime,
    now: datetime,
) -> list[IncidentRecord]:
    """List non-upcoming incidents created within ``[start, end]``.

    Only incidents with ``visible >= visibility`` are returned, ordered by
    ``scheduled_at`` then ``created_at``, both descending.
    """
    rows = conn.execute(
        f"""SELECT * FROM incidents
            WHERE {_NOT_SCHEDULED_SQL}
              AND visible >= ?
              AND created_at BETWEEN ? AND ?
            ORDER BY scheduled_at DESC, created_at DESC""",
        (to_db(now), visibility, to_db(start), to_db(end)),
    ).fetchall()
    return [_row_to_incident(r) for r in rows]


def count_incidents_before(
    conn: sqlite3.Connection,
    *,
    before: datetime,
    visibility: int,
    now: datetime,
) -> int:
    """Count non-upcoming visible incidents created strictly before ``before``."""
    row = conn.execute(
        f"""SELECT COUNT(*) AS n FROM incidents
            WHERE {_NOT_SCHEDULED_SQL}
              AND visible >= ?
              AND created_at < ?""",
        (to_db(now), visibility, to_db(before)),
    ).fetchone()
    return int(row["n"])


def _row_to_incident(row: sqlite3.Row) -> IncidentRecord:
    return IncidentRecord(
        id=row["id"],
        component_id=row["component_id"],
        name=row["name"],
        message=row["message"],
        status=row["status"],
        visible=row["visible"],
        scheduled_at=row["scheduled_at"],
        created_at=row["created_at"],
    )

"""Component CRUD."""

import sqlite3
from datetime import datetime

from statuspage.dates import to_db
from statuspage.store.models import ComponentRecord


def save_component(
    conn: sqlite3.Connection,
    *,
    name: str,
    created_at: datetime,
    status: int = 1,
    description: str = "",
    link: str = "",
    order: int = 0,
) -> int:
    """Save a component. Returns the new row ID."""
    cursor = conn.execute(
        """INSERT INTO components (name, description, link, status, "order", created_at)
           VALUES (?, ?, ?, ?, ?, ?)""",
        (name, description, link, status, order, to_db(created_at)),
    )
    conn.commit()
    return cursor.lastrowid or 0


def update_component_status(conn: sqlite3.Connection, component_id: int, status: int) -> None:
    conn.execute("UPDATE components SET status = ? WHERE id = ?", (status, component_id))
    conn.commit()


def get_component(conn: sqlite3.Connection, component_id: int) -> ComponentRecord | None:
    row = conn.execute("SELECT * FROM components WHERE id = ?", (component_id,)).fetchone()
    if row is None:
        return None
    return _row_to_component(row)


def list_components(conn: sqlite3.Connection) -> list[ComponentRecord]:
    rows = conn.execute('SELECT * FROM components ORDER BY "order", id').fetchall()
    return [_row_to_component(r) for r in rows]


def _row_to_component(row: sqlite3.Row) -> ComponentRecord:
    return ComponentRecord(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        link=row["link"],
        status=row["status"],
        order=row["order"],
        created_at=row["created_at"],
    )

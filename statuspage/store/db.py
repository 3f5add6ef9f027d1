"""SQLite connection management and schema for the status page store.

All database operations use parameterized queries. Connections are created
per-operation with check_same_thread=False so request handlers can hand work
to a thread. The schema is auto-created via CREATE TABLE IF NOT EXISTS.
"""

import logging
import sqlite3

from statuspage.config import get_settings

logger = logging.getLogger(__name__)

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS components (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT NOT NULL,
    description TEXT DEFAULT '',
    link        TEXT DEFAULT '',
    status      INTEGER NOT NULL DEFAULT 1,
    "order"     INTEGER NOT NULL DEFAULT 0,
    created_at  TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS incidents (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    component_id  INTEGER REFERENCES components(id) ON DELETE SET NULL,
    name          TEXT NOT NULL,
    message       TEXT DEFAULT '',
    status        INTEGER NOT NULL DEFAULT 1,
    visible       INTEGER NOT NULL DEFAULT 1,
    scheduled_at  TEXT,
    created_at    TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_incidents_created ON incidents(created_at);
CREATE INDEX IF NOT EXISTS idx_incidents_visible ON incidents(visible);

CREATE TABLE IF NOT EXISTS metrics (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    name          TEXT NOT NULL,
    suffix        TEXT DEFAULT '',
    description   TEXT DEFAULT '',
    default_value REAL NOT NULL DEFAULT 0,
    calc_type     INTEGER NOT NULL DEFAULT 0,
    display_chart INTEGER NOT NULL DEFAULT 1,
    places        INTEGER NOT NULL DEFAULT 2,
    created_at    TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS metric_points (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    metric_id  INTEGER NOT NULL REFERENCES metrics(id) ON DELETE CASCADE,
    value      REAL NOT NULL,
    counter    INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_points_lookup ON metric_points(metric_id, created_at);

CREATE TABLE IF NOT EXISTS timed_actions (
    id                 INTEGER PRIMARY KEY AUTOINCREMENT,
    name               TEXT NOT NULL,
    description        TEXT DEFAULT '',
    active             INTEGER NOT NULL DEFAULT 1,
    start_at           TEXT NOT NULL,
    schedule_frequency INTEGER NOT NULL,
    completion_latency INTEGER NOT NULL,
    created_at         TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS timed_action_instances (
    id                  INTEGER PRIMARY KEY AUTOINCREMENT,
    timed_action_id     INTEGER NOT NULL REFERENCES timed_actions(id) ON DELETE CASCADE,
    message             TEXT DEFAULT '',
    started_at          TEXT NOT NULL,
    ended_at            TEXT NOT NULL,
    target_completed_at TEXT NOT NULL,
    completed_at        TEXT,
    created_at          TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_instances_started ON timed_action_instances(timed_action_id, started_at);
"""


def get_connection(db_path: str | None = None) -> sqlite3.Connection:
    """Open a SQLite connection with WAL mode for concurrent reads.

    Args:
        db_path: Explicit path to the database file. If None, reads from settings.
                 Pass ":memory:" for in-memory databases (tests).

    Returns:
        A new sqlite3.Connection with row_factory set to sqlite3.Row.

    Raises:
        ValueError: If the store is not configured (empty db path).
    """
    if db_path is None:
        db_path = get_settings().db_path
    if not db_path:
        msg = "Status store not configured (DB_PATH is empty)"
        raise ValueError(msg)

    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def init_schema(conn: sqlite3.Connection) -> None:
    """Create tables and indexes if they don't exist (idempotent)."""
    conn.executescript(_SCHEMA_SQL)
    logger.debug("Store schema initialized")


def get_initialized_connection(db_path: str | None = None) -> sqlite3.Connection:
    """Get a connection with schema already initialized. Convenience wrapper."""
    conn = get_connection(db_path)
    init_schema(conn)
    return conn

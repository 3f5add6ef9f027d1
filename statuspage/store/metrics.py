"""Metric and metric point CRUD, plus the per-bucket aggregate query."""

import sqlite3
from datetime import datetime

from statuspage.dates import to_db
from statuspage.store.models import MetricPointRecord, MetricRecord

CALC_SUM = 0
CALC_AVG = 1


def save_metric(
    conn: sqlite3.Connection,
    *,
    name: str,
    created_at: datetime,
    suffix: str = "",
    description: str = "",
    default_value: float = 0.0,
    calc_type: int = CALC_SUM,
    display_chart: bool = True,
    places: int = 2,
) -> int:
    """Save a metric definition. Returns the new row ID."""
    cursor = conn.execute(
        """INSERT INTO metrics
           (name, suffix, description, default_value, calc_type, display_chart, places, created_at)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
        (name, suffix, description, default_value, calc_type, int(display_chart), places, to_db(created_at)),
    )
    conn.commit()
    return cursor.lastrowid or 0


def get_metric(conn: sqlite3.Connection, metric_id: int) -> MetricRecord | None:
    row = conn.execute("SELECT * FROM metrics WHERE id = ?", (metric_id,)).fetchone()
    if row is None:
        return None
    return MetricRecord(
        id=row["id"],
        name=row["name"],
        suffix=row["suffix"],
        description=row["description"],
        default_value=row["default_value"],
        calc_type=row["calc_type"],
        display_chart=bool(row["display_chart"]),
        places=row["places"],
        created_at=row["created_at"],
    )


def save_metric_point(
    conn: sqlite3.Connection,
    metric_id: int,
    *,
    value: float,
    created_at: datetime,
    counter: int = 1,
) -> int:
    """Record a metric point. Returns the new row ID."""
    cursor = conn.execute(
        "INSERT INTO metric_points (metric_id, value, counter, created_at) VALUES (?, ?, ?, ?)",
        (metric_id, value, counter, to_db(created_at)),
    )
    conn.commit()
    return cursor.lastrowid or 0


def list_metric_points(conn: sqlite3.Connection, metric_id: int) -> list[MetricPointRecord]:
    rows = conn.execute(
        "SELECT * FROM metric_points WHERE metric_id = ? ORDER BY created_at",
        (metric_id,),
    ).fetchall()
    return [
        MetricPointRecord(
            id=r["id"],
            metric_id=r["metric_id"],
            value=r["value"],
            counter=r["counter"],
            created_at=r["created_at"],
        )
        for r in rows
    ]


def aggregate_points(
    conn: sqlite3.Connection,
    metric: MetricRecord,
    *,
    start: datetime,
    end: datetime,
) -> float | None:
    """Aggregate ``value * counter`` over points created in ``[start, end)``.

    Sums for sum metrics, averages for average metrics. Returns None when the
    range holds no points.
    """
    func = "AVG" if metric["calc_type"] == CALC_AVG else "SUM"
    row = conn.execute(
        f"""SELECT {func}(value * counter) AS agg FROM metric_points
            WHERE metric_id = ? AND created_at >= ? AND created_at < ?""",
        (metric["id"], to_db(start), to_db(end)),
    ).fetchone()
    if row is None or row["agg"] is None:
        return None
    return float(row["agg"])

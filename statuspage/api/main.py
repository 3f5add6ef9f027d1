"""FastAPI backend for the public status page.

Serves the incident timeline, single incidents, metric series, timed-action
history and component badges. Every request opens its own store connection.
"""

import logging
import sqlite3
import time
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from typing import Annotated
from zoneinfo import ZoneInfo

from fastapi import Depends, FastAPI, HTTPException, Query, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel

from statuspage.actions.history import ActionHistory, get_action_history
from statuspage.actions.scheduler import start_scheduler, stop_scheduler
from statuspage.api.auth import is_authenticated
from statuspage.badges.component import component_badge
from statuspage.badges.render import DEFAULT_STYLE
from statuspage.config import get_settings
from statuspage.dates import Clock, utc_now
from statuspage.metrics.windows import DEFAULT_WINDOW, MetricSeries, get_metric_series
from statuspage.observability.metrics import (
    APP_INFO,
    COMPONENT_HEALTHY,
    REQUEST_DURATION,
    REQUESTS_IN_PROGRESS,
    REQUESTS_TOTAL,
)
from statuspage.presenters import IncidentView, present_incident
from statuspage.store.actions import get_timed_action
from statuspage.store.components import get_component
from statuspage.store.db import get_connection, get_initialized_connection
from statuspage.store.incidents import get_incident
from statuspage.store.metrics import get_metric
from statuspage.timeline.index import IndexPage, build_index
from statuspage.timeline.window import ANONYMOUS_VISIBILITY, AUTHENTICATED_VISIBILITY

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class ComponentHealth(BaseModel):
    """Health status of a single dependency."""

    name: str
    status: str
    detail: str | None = None


class HealthResponse(BaseModel):
    """Response body for GET /health."""

    status: str
    components: list[ComponentHealth]


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_clock() -> Clock:
    """Time source for request handling. Overridden in tests."""
    return utc_now


def get_db() -> Iterator[sqlite3.Connection]:
    """Open a store connection for the duration of a request."""
    try:
        conn = get_connection()
    except ValueError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    try:
        yield conn
    finally:
        conn.close()


def _timezone() -> ZoneInfo:
    return ZoneInfo(get_settings().app_timezone)


@contextmanager
def _track(endpoint: str) -> Iterator[None]:
    """Record request metrics; unexpected errors become HTTP 500."""
    REQUESTS_IN_PROGRESS.labels(endpoint=endpoint).inc()
    start = time.monotonic()
    status = "success"
    try:
        yield
    except HTTPException:
        status = "rejected"
        raise
    except Exception as exc:
        status = "error"
        logger.exception("Request to %s failed", endpoint)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    finally:
        REQUESTS_IN_PROGRESS.labels(endpoint=endpoint).dec()
        REQUEST_DURATION.labels(endpoint=endpoint).observe(time.monotonic() - start)
        REQUESTS_TOTAL.labels(endpoint=endpoint, status=status).inc()


DbDep = Annotated[sqlite3.Connection, Depends(get_db)]
ClockDep = Annotated[Clock, Depends(get_clock)]
AuthDep = Annotated[bool, Depends(is_authenticated)]


# ---------------------------------------------------------------------------
# Application lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:  # noqa: ARG001
    """Initialize the store schema and scheduler at startup, tear down on shutdown."""
    settings = get_settings()
    APP_INFO.info({"version": "0.1.0", "app_name": settings.app_name})

    if settings.db_path:
        conn = get_initialized_connection(settings.db_path)
        conn.close()
        logger.info("Status store ready at %s", settings.db_path)
    else:
        logger.warning("DB_PATH not set; requests will fail until it is configured")

    start_scheduler()
    yield
    stop_scheduler()
    logger.info("Shutting down status page")


app = FastAPI(title="Status Page", lifespan=lifespan)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/metrics")
async def prometheus_metrics() -> Response:
    """Expose Prometheus metrics in exposition format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/", response_model=IndexPage)
def index(
    conn: DbDep,
    clock: ClockDep,
    authenticated: AuthDep,
    start_date: str | None = None,
) -> IndexPage:
    """The incident timeline, grouped by day, with pagination hints."""
    with _track("/"):
        return build_index(
            conn,
            now=clock(),
            tz=_timezone(),
            configured_days=get_settings().app_incident_days,
            authenticated=authenticated,
            requested_start_date=start_date,
        )


@app.get("/incidents/{incident_id}", response_model=IncidentView)
def show_incident(incident_id: int, conn: DbDep, authenticated: AuthDep) -> IncidentView:
    """A single incident, hidden from callers below its visibility level."""
    with _track("/incidents/{incident_id}"):
        incident = get_incident(conn, incident_id)
        threshold = AUTHENTICATED_VISIBILITY if authenticated else ANONYMOUS_VISIBILITY
        if incident is None or incident["visible"] < threshold:
            raise HTTPException(status_code=404, detail=f"Incident {incident_id} not found")
        return present_incident(incident)


@app.get("/metrics/{metric_id}", response_model=MetricSeries)
def metric_points(
    metric_id: int,
    conn: DbDep,
    clock: ClockDep,
    filter_name: Annotated[str, Query(alias="filter")] = DEFAULT_WINDOW.value,
) -> MetricSeries:
    """Points for a metric over the ``last_hour``, ``today``, ``week`` or ``month`` window."""
    with _track("/metrics/{metric_id}"):
        metric = get_metric(conn, metric_id)
        if metric is None:
            raise HTTPException(status_code=404, detail=f"Metric {metric_id} not found")
        return get_metric_series(conn, metric, filter_name, now=clock(), tz=_timezone())


@app.get("/actions/{action_id}", response_model=ActionHistory)
def action_history(action_id: int, conn: DbDep, clock: ClockDep) -> ActionHistory:
    """Run history of a timed action over the last 30 days."""
    with _track("/actions/{action_id}"):
        action = get_timed_action(conn, action_id)
        if action is None:
            raise HTTPException(status_code=404, detail=f"Timed action {action_id} not found")
        return get_action_history(conn, action, now=clock(), tz=_timezone())


@app.get("/badges/components/{component_id}")
def component_badge_svg(component_id: int, conn: DbDep, style: str = DEFAULT_STYLE) -> Response:
    """SVG status badge for a component."""
    with _track("/badges/components/{component_id}"):
        component = get_component(conn, component_id)
        if component is None:
            raise HTTPException(status_code=404, detail=f"Component {component_id} not found")
        try:
            badge = component_badge(component, get_settings(), style=style)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return Response(content=badge.content, status_code=200, media_type=badge.media_type)


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Check health of the status page and its store."""
    components: list[ComponentHealth] = []

    try:
        conn = get_connection()
        try:
            conn.execute("SELECT 1").fetchone()
        finally:
            conn.close()
        components.append(ComponentHealth(name="store", status="healthy"))
    except (ValueError, sqlite3.Error) as exc:
        components.append(ComponentHealth(name="store", status="unhealthy", detail=str(exc)))

    for comp in components:
        COMPONENT_HEALTHY.labels(component=comp.name).set(1.0 if comp.status == "healthy" else 0.0)

    overall = "healthy" if all(c.status == "healthy" for c in components) else "unhealthy"
    return HealthResponse(status=overall, components=components)

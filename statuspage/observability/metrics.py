"""Prometheus metric definitions for status page self-instrumentation.

All metrics are module-level singletons registered with the default
prometheus_client registry.  Import them wherever instrumentation is needed.
"""

from prometheus_client import Counter, Gauge, Histogram, Info

# ---------------------------------------------------------------------------
# Histogram bucket definitions
# ---------------------------------------------------------------------------

REQUEST_DURATION_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5)

# ---------------------------------------------------------------------------
# Request-level metrics
# ---------------------------------------------------------------------------

REQUEST_DURATION = Histogram(
    "statuspage_request_duration_seconds",
    "End-to-end request duration in seconds",
    labelnames=["endpoint"],
    buckets=REQUEST_DURATION_BUCKETS,
)

REQUESTS_TOTAL = Counter(
    "statuspage_requests_total",
    "Total number of requests",
    labelnames=["endpoint", "status"],
)

REQUESTS_IN_PROGRESS = Gauge(
    "statuspage_requests_in_progress",
    "Number of requests currently being processed",
    labelnames=["endpoint"],
)

# ---------------------------------------------------------------------------
# Badge metrics
# ---------------------------------------------------------------------------

BADGES_RENDERED = Counter(
    "statuspage_badges_rendered_total",
    "Total number of component badges rendered",
    labelnames=["color"],
)

# ---------------------------------------------------------------------------
# Timed-action rollover metrics
# ---------------------------------------------------------------------------

ROLLOVER_RUNS_TOTAL = Counter(
    "statuspage_action_rollover_runs_total",
    "Total number of timed-action rollover job runs",
    labelnames=["status"],
)

ACTION_INSTANCES_CREATED = Counter(
    "statuspage_action_instances_created_total",
    "Total number of timed-action instances opened by the rollover job",
)

# ---------------------------------------------------------------------------
# Health / info metrics
# ---------------------------------------------------------------------------

COMPONENT_HEALTHY = Gauge(
    "statuspage_component_healthy",
    "Whether a dependency component is healthy (1=healthy, 0=unhealthy)",
    labelnames=["component"],
)

APP_INFO = Info(
    "statuspage",
    "Status page build information",
)

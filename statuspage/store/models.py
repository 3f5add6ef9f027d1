"""TypedDict models for store records. Timestamps are UTC ISO 8601 strings."""

from typing import TypedDict


class ComponentRecord(TypedDict):
    id: int
    name: str
    description: str
    link: str
    status: int  # 1 operational .. 4 major outage
    order: int
    created_at: str


class IncidentRecord(TypedDict):
    id: int
    component_id: int | None
    name: str
    message: str
    status: int  # 0 scheduled, 1 investigating, 2 identified, 3 watching, 4 fixed
    visible: int  # higher = shown to more callers
    scheduled_at: str | None
    created_at: str


class MetricRecord(TypedDict):
    id: int
    name: str
    suffix: str
    description: str
    default_value: float
    calc_type: int  # 0 sum, 1 average
    display_chart: bool
    places: int
    created_at: str


class MetricPointRecord(TypedDict):
    id: int
    metric_id: int
    value: float
    counter: int
    created_at: str


class TimedActionRecord(TypedDict):
    id: int
    name: str
    description: str
    active: bool
    start_at: str
    schedule_frequency: int  # seconds between runs
    completion_latency: int  # seconds allowed to complete a run
    created_at: str


class TimedActionInstanceRecord(TypedDict):
    id: int
    timed_action_id: int
    message: str
    started_at: str
    ended_at: str
    target_completed_at: str
    completed_at: str | None
    created_at: str

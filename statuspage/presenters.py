"""Map store records to presentation view-models.

Derived display fields (human readable statuses, colour categories, the
effective incident timestamp) are computed here and never stored.
"""

from datetime import datetime

from pydantic import BaseModel

from statuspage.dates import from_db, parse_db
from statuspage.store.models import ComponentRecord, IncidentRecord, MetricRecord, TimedActionRecord

COMPONENT_STATUSES: dict[int, tuple[str, str]] = {
    1: ("Operational", "greens"),
    2: ("Performance Issues", "blues"),
    3: ("Partial Outage", "yellows"),
    4: ("Major Outage", "reds"),
}

INCIDENT_STATUSES: dict[int, str] = {
    0: "Scheduled",
    1: "Investigating",
    2: "Identified",
    3: "Watching",
    4: "Fixed",
}


class ComponentView(BaseModel):
    id: int
    name: str
    description: str
    link: str
    status: int
    human_status: str
    status_color: str | None


class IncidentView(BaseModel):
    id: int
    component_id: int | None
    name: str
    message: str
    status: int
    human_status: str
    visible: int
    is_scheduled: bool
    scheduled_at: datetime | None
    created_at: datetime
    timestamp: datetime


class MetricView(BaseModel):
    id: int
    name: str
    suffix: str
    description: str
    default_value: float
    calc_type: int
    display_chart: bool
    places: int


class ActionView(BaseModel):
    """A timed action without its instance history."""

    id: int
    name: str
    description: str
    active: bool
    start_at: datetime
    schedule_frequency: int
    completion_latency: int


def is_scheduled(incident: IncidentRecord) -> bool:
    return incident["scheduled_at"] is not None


def effective_timestamp(incident: IncidentRecord) -> datetime:
    """The timestamp an incident is ordered and grouped by."""
    scheduled_at = incident["scheduled_at"]
    if scheduled_at is not None:
        return parse_db(scheduled_at)
    return parse_db(incident["created_at"])


def present_component(component: ComponentRecord) -> ComponentView:
    human_status: str = "Unknown"
    color: str | None = None
    if component["status"] in COMPONENT_STATUSES:
        human_status, color = COMPONENT_STATUSES[component["status"]]
    return ComponentView(
        id=component["id"],
        name=component["name"],
        description=component["description"],
        link=component["link"],
        status=component["status"],
        human_status=human_status,
        status_color=color,
    )


def present_incident(incident: IncidentRecord) -> IncidentView:
    return IncidentView(
        id=incident["id"],
        component_id=incident["component_id"],
        name=incident["name"],
        message=incident["message"],
        status=incident["status"],
        human_status=INCIDENT_STATUSES.get(incident["status"], "Unknown"),
        visible=incident["visible"],
        is_scheduled=is_scheduled(incident),
        scheduled_at=from_db(incident["scheduled_at"]),
        created_at=parse_db(incident["created_at"]),
        timestamp=effective_timestamp(incident),
    )


def present_metric(metric: MetricRecord) -> MetricView:
    return MetricView(
        id=metric["id"],
        name=metric["name"],
        suffix=metric["suffix"],
        description=metric["description"],
        default_value=metric["default_value"],
        calc_type=metric["calc_type"],
        display_chart=metric["display_chart"],
        places=metric["places"],
    )


def present_action(action: TimedActionRecord) -> ActionView:
    return ActionView(
        id=action["id"],
        name=action["name"],
        description=action["description"],
        active=action["active"],
        start_at=parse_db(action["start_at"]),
        schedule_frequency=action["schedule_frequency"],
        completion_latency=action["completion_latency"],
    )

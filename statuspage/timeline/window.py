"""Resolve the day window shown on the incident timeline."""

import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from statuspage.dates import local_today, parse_start_date, shift_days

logger = logging.getLogger(__name__)

# Anonymous callers only see incidents with visible >= 1.
AUTHENTICATED_VISIBILITY = 0
ANONYMOUS_VISIBILITY = 1


class TimelineWindow(BaseModel):
    """A span of calendar days ending on ``anchor_date``, both ends included."""

    anchor_date: date
    days_to_show: int
    visibility_threshold: int

    @property
    def start_date(self) -> date:
        return shift_days(self.anchor_date, -self.days_to_show)

    def days(self) -> list[date]:
        """Every date in the window, most recent first."""
        return [shift_days(self.anchor_date, -i) for i in range(self.days_to_show + 1)]


def resolve_anchor_date(today: date, requested_start_date: str | None, days_to_show: int = 0) -> date:
    """Pick the anchor date.

    Unparseable or non-past requests fall back to today, as do dates whose
    window would start before the second day of the calendar.
    """
    parsed = parse_start_date(requested_start_date)
    if parsed is None:
        if requested_start_date:
            logger.debug("Ignoring malformed start_date %r", requested_start_date)
        return today
    if parsed >= today:
        logger.debug("Ignoring start_date %s, not before %s", parsed, today)
        return today
    # Day boundaries are converted to UTC, so keep a spare day above date.min.
    if parsed.toordinal() - days_to_show <= 1:
        logger.debug("Ignoring start_date %s, window would start before %s", parsed, date.min)
        return today
    return parsed


def resolve_window(
    *,
    now: datetime,
    tz: ZoneInfo,
    requested_start_date: str | None,
    configured_days: int,
    authenticated: bool,
) -> TimelineWindow:
    """Build the timeline window for a request.

    Args:
        now: Current instant (aware).
        tz: Application timezone that defines "today".
        requested_start_date: Optional ``YYYY-MM-DD`` anchor from the caller.
        configured_days: Days to show, anchor day included.
        authenticated: Whether the caller is authenticated.
    """
    days_to_show = max(configured_days - 1, 0)
    return TimelineWindow(
        anchor_date=resolve_anchor_date(local_today(now, tz), requested_start_date, days_to_show),
        days_to_show=days_to_show,
        visibility_threshold=AUTHENTICATED_VISIBILITY if authenticated else ANONYMOUS_VISIBILITY,
    )

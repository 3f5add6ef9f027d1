"""Status badges for individual components."""

from pydantic import BaseModel

from statuspage.badges.colors import ColorSettings, resolve_badge_color
from statuspage.badges.render import DEFAULT_STYLE, SVG_MEDIA_TYPE, BadgeRenderer, render_badge
from statuspage.observability.metrics import BADGES_RENDERED
from statuspage.presenters import present_component
from statuspage.store.models import ComponentRecord


class Badge(BaseModel):
    content: str
    media_type: str = SVG_MEDIA_TYPE


def component_badge(
    component: ComponentRecord,
    settings: ColorSettings,
    *,
    style: str = DEFAULT_STYLE,
    renderer: BadgeRenderer = render_badge,
) -> Badge:
    """Render the badge for a component's current status.

    Raises:
        ValueError: If the renderer rejects the style.
    """
    view = present_component(component)
    color = resolve_badge_color(view.status_color, settings)
    content = renderer(view.name, view.human_status, color, style)
    BADGES_RENDERED.labels(color=view.status_color or "none").inc()
    return Badge(content=content)

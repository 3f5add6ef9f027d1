"""Badge colour table: status colour category -> configured hex colour."""

import logging
from typing import NamedTuple, Protocol

logger = logging.getLogger(__name__)


class ColorEntry(NamedTuple):
    default: str
    setting: str  # Settings attribute that overrides the default


BADGE_COLORS: dict[str, ColorEntry] = {
    "reds": ColorEntry("#ff6f6f", "style_reds"),
    "blues": ColorEntry("#3498db", "style_blues"),
    "greens": ColorEntry("#7ED321", "style_greens"),
    "yellows": ColorEntry("#F7CA18", "style_yellows"),
}


class ColorSettings(Protocol):
    style_reds: str
    style_blues: str
    style_greens: str
    style_yellows: str


def resolve_badge_color(category: str | None, settings: ColorSettings) -> str | None:
    """Hex colour (no leading ``#``) for a category, None for unknown categories."""
    entry = BADGE_COLORS.get(category or "")
    if entry is None:
        logger.debug("No badge colour for status category %r", category)
        return None
    configured: str = getattr(settings, entry.setting, "") or entry.default
    return configured.removeprefix("#")

"""Shields-style SVG badge rendering.

Draws a two-panel badge: grey label on the left, coloured status on the right.
Text widths are estimated from average Verdana 11px glyph widths.
"""

from collections.abc import Callable
from xml.sax.saxutils import escape

BadgeRenderer = Callable[[str, str, str | None, str], str]

SVG_MEDIA_TYPE = "image/svg+xml"
DEFAULT_STYLE = "flat-square"
FALLBACK_COLOR = "9F9F9F"
LABEL_COLOR = "555"

_CHAR_WIDTH = 7.0
_NARROW_CHARS = frozenset("fijlrtI.,:;!|' ")
_NARROW_WIDTH = 3.5
_PADDING = 10
_HEIGHT = 20

_STYLE_RADIUS = {
    "flat": 3,
    "flat-square": 0,
    "plastic": 4,
}


def text_width(text: str) -> int:
    width = sum(_NARROW_WIDTH if ch in _NARROW_CHARS else _CHAR_WIDTH for ch in text)
    return int(round(width)) + _PADDING


def _attr(text: str) -> str:
    return escape(text, {'"': "&quot;"})


def _gradient(style: str) -> tuple[str, str]:
    """Gradient definition and fill reference for glossy styles."""
    if style == "plastic":
        defs = (
            '<linearGradient id="s" x2="0" y2="100%">'
            '<stop offset="0" stop-color="#fff" stop-opacity=".7"/>'
            '<stop offset=".1" stop-color="#aaa" stop-opacity=".1"/>'
            '<stop offset=".9" stop-opacity=".3"/>'
            '<stop offset="1" stop-opacity=".5"/>'
            "</linearGradient>"
        )
    elif style == "flat":
        defs = (
            '<linearGradient id="s" x2="0" y2="100%">'
            '<stop offset="0" stop-color="#bbb" stop-opacity=".1"/>'
            '<stop offset="1" stop-opacity=".1"/>'
            "</linearGradient>"
        )
    else:
        return "", ""
    return defs, f'<rect width="100%" height="{_HEIGHT}" fill="url(#s)"/>'


def render_badge(label: str, status: str, color: str | None, style: str = DEFAULT_STYLE) -> str:
    """Render a badge as an SVG document.

    Args:
        label: Left-hand text, usually the component name.
        status: Right-hand text, usually the human readable status.
        color: Hex colour without ``#`` for the status panel. None renders grey.
        style: One of ``flat``, ``flat-square`` or ``plastic``.

    Raises:
        ValueError: If the style is not supported.
    """
    if style not in _STYLE_RADIUS:
        msg = f"Unsupported badge style '{style}' (expected one of: {', '.join(sorted(_STYLE_RADIUS))})"
        raise ValueError(msg)

    fill = color or FALLBACK_COLOR
    label_width = text_width(label)
    status_width = text_width(status)
    total = label_width + status_width
    radius = _STYLE_RADIUS[style]
    defs, overlay = _gradient(style)
    safe_label = escape(label)
    safe_status = escape(status)

    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{total}" height="{_HEIGHT}" '
        f'role="img" aria-label="{_attr(label)}: {_attr(status)}">'
        f"<title>{safe_label}: {safe_status}</title>"
        f"{defs}"
        f'<clipPath id="r"><rect width="{total}" height="{_HEIGHT}" rx="{radius}" fill="#fff"/></clipPath>'
        f'<g clip-path="url(#r)">'
        f'<rect width="{label_width}" height="{_HEIGHT}" fill="#{LABEL_COLOR}"/>'
        f'<rect x="{label_width}" width="{status_width}" height="{_HEIGHT}" fill="#{fill}"/>'
        f"{overlay}"
        f"</g>"
        f'<g fill="#fff" text-anchor="middle" font-family="Verdana,Geneva,DejaVu Sans,sans-serif" font-size="11">'
        f'<text x="{label_width / 2:.1f}" y="14">{safe_label}</text>'
        f'<text x="{label_width + status_width / 2:.1f}" y="14">{safe_status}</text>'
        f"</g>"
        f"</svg>"
    )

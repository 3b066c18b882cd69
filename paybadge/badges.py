"""SVG badge generation.

Generates shields.io-style two-segment SVG badges:
- Standard badges from request parameters
- Enhanced badges, pre-seeded with a crypto icon and accent color

Output is deterministic for a given input, so callers can derive cache
validators (ETags) from the returned markup.
"""

import html
from typing import Any, Mapping, Optional

from paybadge.layout import compute_layout
from paybadge.models import (
    DEFAULT_BADGE_CONFIG,
    BadgeDefaults,
    BadgeIcon,
    BadgeParameters,
    BadgeStyle,
    LayoutResult,
)
from paybadge.validator import validate_badge_params

ENHANCED_ICON = BadgeIcon.CRYPTO.value
ENHANCED_RIGHT_COLOR = "#f7931a"

_COIN_GLYPH = (
    '<circle cx="6" cy="6" r="6" fill="#f7931a"/>\n'
    '    <path d="M8.5 4.5c.1-.8-.5-1.2-1.3-1.5l.3-1.1-.7-.2-.3 1.1c-.2 0-.3-.1-.5-.1l.3-1.1-.7-.2'
    "-.3 1.1c-.1 0-.3-.1-.4-.1l-.9-.2-.2.7s.5.1.5.1c.3.1.3.2.3.4l-.3 1.3c0 0 0 0 .1 0l-.1 0"
    "-.7 1.7c-.1.1-.2.3-.5.2 0 0-.5-.1-.5-.1l-.3.8.9.2.5.1-.3 1.1.7.2.3-1.1c.2 0 .4.1.5.1"
    "l-.3 1.1.7.2.3-1.1c1.1.2 2-.1 2.3-.9.3-.8 0-1.3-.6-1.6.4-.1.8-.4.8-1zm-1.5 2.1c-.2.8"
    "-1.6.4-2 .3l.4-1.5c.4.1 1.9.3 1.6 1.2zm.2-2.2c-.2.7-1.3.4-1.7.3l.3-1.3c.4.1 1.6.3 1.4 1z"
    '" fill="white"/>'
)

# Both variants currently draw the same coin glyph
ICON_GLYPHS = {
    BadgeIcon.NONE: "",
    BadgeIcon.CRYPTO: _COIN_GLYPH,
    BadgeIcon.BITCOIN: _COIN_GLYPH,
}

# Horizontal offset of the icon inside the right segment
ICON_OFFSET_X = 2
ICON_OFFSET_Y = 4


def _fmt(value: float) -> str:
    """Format a coordinate without float noise (64.80000000000001 -> 64.8)."""
    return f"{value:g}"


def generate_icon(icon: BadgeIcon, layout: LayoutResult) -> str:
    """Generate the icon fragment positioned in the right segment.

    Returns:
        SVG ``<g>`` element, or an empty string for BadgeIcon.NONE.
    """
    glyph = ICON_GLYPHS.get(icon, "")
    if not glyph:
        return ""

    x = _fmt(layout.left_width + ICON_OFFSET_X)
    return f'''<g transform="translate({x}, {ICON_OFFSET_Y})">
    {glyph}
  </g>'''


def render_badge_svg(
    params: BadgeParameters,
    layout: LayoutResult,
    defaults: BadgeDefaults = DEFAULT_BADGE_CONFIG,
) -> str:
    """Render the SVG markup for a badge.

    Args:
        params: Validated badge parameters
        layout: Layout computed for ``params``
        defaults: Source of the font family and size

    Returns:
        SVG string for the badge
    """
    # Sanitized text has nothing left to escape; this keeps the markup
    # well-formed for any caller passing hand-built parameters.
    left_text = html.escape(params.left_text)
    right_text = html.escape(params.right_text)
    label = f"{left_text}: {right_text}"

    total_width = _fmt(layout.total_width)
    left_width = _fmt(layout.left_width)
    right_width = _fmt(layout.right_width)
    height = layout.height
    left_x = _fmt(layout.left_text_x)
    right_x = _fmt(layout.right_text_x)
    shadow_y = layout.text_baseline_y
    text_y = layout.text_baseline_y - 1

    svg = f'''<svg xmlns="http://www.w3.org/2000/svg" width="{total_width}" height="{height}" role="img" aria-label="{label}">
  <title>{label}</title>
  <linearGradient id="gradient" x2="0" y2="100%">
    <stop offset="0" stop-color="#bbb" stop-opacity="0.1"/>
    <stop offset="1" stop-opacity="0.1"/>
  </linearGradient>
  <clipPath id="round">
    <rect width="{total_width}" height="{height}" rx="3" fill="#fff"/>
  </clipPath>
  <g clip-path="url(#round)">
    <rect width="{left_width}" height="{height}" fill="{html.escape(params.left_color)}"/>
    <rect x="{left_width}" width="{right_width}" height="{height}" fill="{html.escape(params.right_color)}"/>
    <rect width="{total_width}" height="{height}" fill="url(#gradient)"/>
  </g>
  <g fill="#fff" text-anchor="middle" font-family="{defaults.font_family}" font-size="{defaults.font_size}">
    <text x="{left_x}" y="{shadow_y}" fill="#010101" fill-opacity=".3">{left_text}</text>
    <text x="{left_x}" y="{text_y}">{left_text}</text>
    <text x="{right_x}" y="{shadow_y}" fill="#010101" fill-opacity=".3">{right_text}</text>
    <text x="{right_x}" y="{text_y}">{right_text}</text>
  </g>'''

    icon_svg = generate_icon(params.icon, layout)
    if icon_svg:
        svg += f"\n  {icon_svg}"

    return svg + "\n</svg>"


def generate_badge_svg(options: Optional[Mapping[str, Any]] = None) -> str:
    """Generate a standard badge from raw request parameters.

    The legacy ``text`` key overrides ``rightText`` when present.

    Args:
        options: Raw query parameters

    Returns:
        SVG string for the badge

    Raises:
        ValidationError: If the parameters are rejected
    """
    raw = dict(options or {})
    if raw.get("text"):
        raw["rightText"] = raw["text"]

    params = validate_badge_params(raw)
    return render_badge_svg(params, compute_layout(params))


def generate_enhanced_badge(options: Optional[Mapping[str, Any]] = None) -> str:
    """Generate an enhanced badge from raw request parameters.

    Forces the enhanced style and defaults the icon and right color
    before running the standard pipeline.

    Raises:
        ValidationError: If the parameters are rejected
    """
    raw = dict(options or {})
    raw["style"] = BadgeStyle.ENHANCED.value
    raw["icon"] = raw.get("icon") or ENHANCED_ICON
    raw["rightColor"] = raw.get("rightColor") or ENHANCED_RIGHT_COLOR
    return generate_badge_svg(raw)

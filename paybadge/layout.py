"""Badge layout computation.

Text width is estimated from character count at a fixed average glyph
width rather than measured from font metrics.
"""

from paybadge.models import DEFAULT_BADGE_CONFIG, BadgeDefaults, BadgeParameters, LayoutResult

AVG_CHAR_WIDTH_RATIO = 0.6
TEXT_PADDING = 12
ICON_WIDTH = 16
MIN_SEGMENT_WIDTH = 55
TEXT_BASELINE_Y = 14


def text_width(text: str, font_size: int = DEFAULT_BADGE_CONFIG.font_size) -> float:
    """Estimate rendered text width in pixels."""
    return len(text) * font_size * AVG_CHAR_WIDTH_RATIO


def compute_layout(
    params: BadgeParameters,
    defaults: BadgeDefaults = DEFAULT_BADGE_CONFIG,
) -> LayoutResult:
    """Compute segment widths and text anchors for a badge.

    Args:
        params: Validated badge parameters.
        defaults: Source of the fixed font size and badge height.

    Returns:
        LayoutResult with both segments at least MIN_SEGMENT_WIDTH wide
        and text anchored at each segment's horizontal midpoint.
    """
    icon_width = ICON_WIDTH if params.has_icon else 0

    left_width = max(text_width(params.left_text, defaults.font_size) + TEXT_PADDING, MIN_SEGMENT_WIDTH)
    right_width = max(
        text_width(params.right_text, defaults.font_size) + TEXT_PADDING + icon_width,
        MIN_SEGMENT_WIDTH,
    )

    return LayoutResult(
        left_width=left_width,
        right_width=right_width,
        total_width=left_width + right_width,
        height=defaults.height,
        text_baseline_y=TEXT_BASELINE_Y,
        left_text_x=left_width / 2,
        right_text_x=left_width + right_width / 2,
    )

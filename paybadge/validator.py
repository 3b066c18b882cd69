"""Validation of raw badge parameters.

Merges request input with the badge defaults, sanitizes every field and
enforces the hex-color format. The only hard failure is the text length
check, which runs on the raw input before any decoding or sanitization
so encoded input can't shrink its way under the limit.
"""

import re
from typing import Any, Mapping, Optional

from paybadge.models import (
    DEFAULT_BADGE_CONFIG,
    BadgeDefaults,
    BadgeIcon,
    BadgeParameters,
    BadgeStyle,
)
from paybadge.sanitizer import sanitize

COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{3,6}$")


class ValidationError(Exception):
    """Raised when badge parameters are rejected."""

    pass


class TextTooLongError(ValidationError):
    """Raised when raw left or right text exceeds the length limit."""

    def __init__(self, limit: int):
        super().__init__(f"Text too long. Maximum {limit} characters allowed.")
        self.limit = limit


def is_valid_color(value: str) -> bool:
    """Check a value against the ``#rgb`` .. ``#rrggbb`` hex pattern."""
    return COLOR_PATTERN.match(value) is not None


def _raw_length(value: Any) -> int:
    """Length in UTF-16 code units; characters outside the BMP count twice."""
    if isinstance(value, str):
        return len(value.encode("utf-16-le", "surrogatepass")) // 2
    return 0


def validate_badge_params(
    raw_params: Optional[Mapping[str, Any]] = None,
    defaults: BadgeDefaults = DEFAULT_BADGE_CONFIG,
) -> BadgeParameters:
    """Validate and sanitize raw badge parameters.

    Args:
        raw_params: Mapping of query keys (``leftText``, ``rightText``,
                    ``leftColor``, ``rightColor``, ``style``, ``icon``)
                    to raw values. Unknown keys are ignored.
        defaults: Fallback values for empty or invalid fields.

    Returns:
        Fully populated BadgeParameters.

    Raises:
        TextTooLongError: If raw leftText or rightText is longer than
                          the configured maximum.
    """
    params = raw_params or {}
    limit = defaults.max_text_length

    if (
        _raw_length(params.get("leftText")) > limit
        or _raw_length(params.get("rightText")) > limit
    ):
        raise TextTooLongError(limit)

    left_color = sanitize(params.get("leftColor")) or defaults.left_color
    right_color = sanitize(params.get("rightColor")) or defaults.right_color

    # Either color failing resets both
    if not is_valid_color(left_color) or not is_valid_color(right_color):
        left_color = defaults.left_color
        right_color = defaults.right_color

    style_value = sanitize(params.get("style"))
    icon_value = sanitize(params.get("icon"))

    return BadgeParameters(
        left_text=sanitize(params.get("leftText")) or defaults.left_text,
        right_text=sanitize(params.get("rightText")) or defaults.right_text,
        left_color=left_color,
        right_color=right_color,
        style=BadgeStyle.parse(style_value) if style_value else defaults.style,
        icon=BadgeIcon.parse(icon_value) if icon_value else defaults.icon,
    )

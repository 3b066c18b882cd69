"""Data models for the paybadge service."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class BadgeStyle(Enum):
    """Rendering style of a badge."""

    STANDARD = "standard"
    ENHANCED = "enhanced"

    @classmethod
    def parse(cls, value: Optional[str]) -> "BadgeStyle":
        """Map a raw style keyword to a style, defaulting to STANDARD."""
        for style in cls:
            if style.value == value:
                return style
        return cls.STANDARD


class BadgeIcon(Enum):
    """Glyph drawn in the right segment of a badge."""

    NONE = "none"
    CRYPTO = "crypto"
    BITCOIN = "bitcoin"

    @classmethod
    def parse(cls, value: Optional[str]) -> "BadgeIcon":
        """Map a raw icon identifier to an icon, defaulting to NONE."""
        if not value:
            return cls.NONE
        for icon in cls:
            if icon is not cls.NONE and icon.value == value:
                return icon
        return cls.NONE


@dataclass(frozen=True)
class BadgeDefaults:
    """Fallback values and fixed styling constants for badges."""

    left_text: str = "paybadge"
    right_text: str = "crypto"
    left_color: str = "#555"
    right_color: str = "#4c1"
    style: BadgeStyle = BadgeStyle.STANDARD
    icon: BadgeIcon = BadgeIcon.NONE
    height: int = 20
    font_size: int = 11
    font_family: str = "Verdana,Geneva,DejaVu Sans,sans-serif"
    max_text_length: int = 50


DEFAULT_BADGE_CONFIG = BadgeDefaults()


@dataclass(frozen=True)
class BadgeParameters:
    """Validated and sanitized badge parameters."""

    left_text: str
    right_text: str
    left_color: str
    right_color: str
    style: BadgeStyle = BadgeStyle.STANDARD
    icon: BadgeIcon = BadgeIcon.NONE

    @property
    def has_icon(self) -> bool:
        """Whether an icon glyph is drawn."""
        return self.icon is not BadgeIcon.NONE


@dataclass(frozen=True)
class LayoutResult:
    """Computed badge dimensions and text anchor positions."""

    left_width: float
    right_width: float
    total_width: float
    height: int
    text_baseline_y: int
    left_text_x: float
    right_text_x: float


@dataclass
class ServerConfig:
    """Runtime configuration for the HTTP service and rate client."""

    host: str = "0.0.0.0"
    port: int = 3000
    exchange_rate_url: str = "https://exchange-rate.profullstack.com"
    request_timeout: float = 10.0
    cache_max_age: int = 3600

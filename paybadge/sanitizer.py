"""Destructive sanitization of free-text badge fields.

Sanitization removes unsafe content rather than escaping it. Each step is
a pure ``str -> str`` function. ``sanitize`` decodes once, applies
``REMOVAL_STEPS`` in order until the text stops changing, then trims and
truncates. Repeating the removal pass means a removal can't reassemble a
forbidden substring (``scrscriptipt``, ``javas&cript:``).

Steps:
- URL-decode (falls back to the raw value on malformed escapes)
- Remove HTML tags
- Remove ``javascript:`` / ``vbscript:`` protocols
- Remove ``on<word>=`` event handlers
- Remove script keywords (``script``, ``alert``, ``eval``, ``prompt``, ``confirm``)
- Remove ``< > & " '``
- Trim, then truncate to the maximum text length
"""

import re
from typing import Any, Callable, Sequence
from urllib.parse import unquote

from paybadge.models import DEFAULT_BADGE_CONFIG

MAX_TEXT_LENGTH = DEFAULT_BADGE_CONFIG.max_text_length

_TAG_PATTERN = re.compile(r"<[^>]*>")
_PROTOCOL_PATTERN = re.compile(r"javascript:|vbscript:", re.IGNORECASE)
_EVENT_HANDLER_PATTERN = re.compile(r"on\w+\s*=", re.IGNORECASE | re.ASCII)
_KEYWORD_PATTERN = re.compile(r"script|alert|eval|prompt|confirm", re.IGNORECASE)
_UNSAFE_CHARS_PATTERN = re.compile(r"[<>&\"']")
_PERCENT_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def url_decode(text: str) -> str:
    """Percent-decode text, returning it unchanged if any escape is malformed."""
    if _PERCENT_ESCAPE.search(text):
        return text
    try:
        return unquote(text, errors="strict")
    except UnicodeDecodeError:
        return text


def strip_tags(text: str) -> str:
    return _TAG_PATTERN.sub("", text)


def strip_protocols(text: str) -> str:
    return _PROTOCOL_PATTERN.sub("", text)


def strip_event_handlers(text: str) -> str:
    return _EVENT_HANDLER_PATTERN.sub("", text)


def strip_keywords(text: str) -> str:
    # Also strips these words from benign text, e.g. "evaluate" -> "uate".
    return _KEYWORD_PATTERN.sub("", text)


def strip_unsafe_chars(text: str) -> str:
    return _UNSAFE_CHARS_PATTERN.sub("", text)


def truncate(text: str) -> str:
    return text.strip()[:MAX_TEXT_LENGTH]


# Order matters: keyword removal runs before the bare-character strip
REMOVAL_STEPS: Sequence[Callable[[str], str]] = (
    strip_tags,
    strip_protocols,
    strip_event_handlers,
    strip_keywords,
    strip_unsafe_chars,
)


def strip_unsafe(text: str) -> str:
    """Apply the removal steps until none of them changes the text."""
    while True:
        previous = text
        for step in REMOVAL_STEPS:
            text = step(text)
        if text == previous:
            return text


def sanitize(raw: Any) -> str:
    """Sanitize a raw field value.

    Args:
        raw: Value taken from the request. Anything that isn't a string
             sanitizes to an empty string.

    Returns:
        The sanitized text, possibly empty. Callers substitute defaults
        for empty results.
    """
    if not isinstance(raw, str):
        return ""

    return truncate(strip_unsafe(url_decode(raw)))

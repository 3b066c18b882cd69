"""Markdown and HTML embed code for badges.

Builds badge URLs against a deployed badge service and wraps them in
README-ready snippets:
- Markdown: ``[![alt](badge)](link)``
- HTML: ``<a><img/></a>`` with an escaped alt attribute
- Presets for common cryptocurrencies and donation badges
"""

import html
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence
from urllib.parse import urlencode, urlsplit

STANDARD_ENDPOINT = "/badge.svg"
ENHANCED_ENDPOINT = "/badge-crypto.svg"
DEFAULT_ALT_TEXT = "Crypto Payment"
SUPPORTED_FORMATS = ("markdown", "html")


class UnknownPresetError(Exception):
    """Raised when a preset name isn't in BADGE_PRESETS."""

    pass


@dataclass
class BadgeCode:
    """Embed code generated for one badge in one format."""

    format: str
    code: str
    badge_url: str
    link_url: str
    alt_text: str

    def to_dict(self) -> dict[str, str]:
        """Convert to the JSON shape returned by the HTTP API."""
        return {
            "format": self.format,
            "code": self.code,
            "badgeUrl": self.badge_url,
            "linkUrl": self.link_url,
            "altText": self.alt_text,
        }


# Preset badge configurations for common use cases
BADGE_PRESETS: dict[str, dict[str, Any]] = {
    "bitcoin": {
        "badgeParams": {"ticker": "btc", "rightText": "bitcoin", "rightColor": "#f7931a"},
        "altText": "Bitcoin Payment",
    },
    "ethereum": {
        "badgeParams": {"ticker": "eth", "rightText": "ethereum", "rightColor": "#627eea"},
        "altText": "Ethereum Payment",
    },
    "solana": {
        "badgeParams": {"ticker": "sol", "rightText": "solana", "rightColor": "#00ffa3"},
        "altText": "Solana Payment",
    },
    "usdc": {
        "badgeParams": {"ticker": "usdc", "rightText": "USDC", "rightColor": "#2775ca"},
        "altText": "USDC Payment",
    },
    "multiCrypto": {
        "badgeParams": {"tickers": "btc,eth,sol,usdc", "style": "enhanced"},
        "altText": "Crypto Payment",
    },
    "donation": {
        "badgeParams": {"leftText": "donate", "rightText": "crypto", "rightColor": "#28a745"},
        "altText": "Donate with Crypto",
    },
    "support": {
        "badgeParams": {"leftText": "support", "rightText": "project", "rightColor": "#17a2b8"},
        "altText": "Support this Project",
    },
}


def build_query_string(params: Mapping[str, Any]) -> str:
    """Build a ``?key=value`` query string, skipping empty values."""
    pairs = [(key, value) for key, value in params.items() if value not in (None, "")]
    if not pairs:
        return ""
    return f"?{urlencode(pairs)}"


def build_badge_url(base_url: str, badge_params: Optional[Mapping[str, Any]] = None) -> str:
    """Build the full badge URL for the given parameters.

    The ``style`` key selects the endpoint and is not sent as a query
    parameter.
    """
    query_params = dict(badge_params or {})
    style = query_params.pop("style", None)
    endpoint = ENHANCED_ENDPOINT if style == "enhanced" else STANDARD_ENDPOINT
    return f"{base_url}{endpoint}{build_query_string(query_params)}"


def _resolve_badge_url(base_url: str, badge_path: str) -> str:
    if badge_path.startswith("http"):
        return badge_path
    return f"{base_url}{badge_path}"


def generate_markdown_badge(base_url: str, badge_path: str, link_url: str, alt_text: str) -> str:
    """Generate Markdown badge code."""
    badge_url = _resolve_badge_url(base_url, badge_path)
    return f"[![{alt_text}]({badge_url})]({link_url})"


def generate_html_badge(base_url: str, badge_path: str, link_url: str, alt_text: str) -> str:
    """Generate HTML badge code with an escaped alt attribute."""
    badge_url = _resolve_badge_url(base_url, badge_path)
    escaped_alt_text = html.escape(alt_text if isinstance(alt_text, str) else "")

    return f'''<a href="{link_url}" target="_blank" rel="noopener noreferrer">
  <img src="{badge_url}" alt="{escaped_alt_text}" />
</a>'''


def generate_badge_code(
    base_url: str,
    link_url: str,
    badge_params: Optional[Mapping[str, Any]] = None,
    alt_text: str = DEFAULT_ALT_TEXT,
    output_format: str = "markdown",
) -> BadgeCode:
    """Generate badge code in the requested format.

    Args:
        base_url: Base URL of the badge service
        link_url: URL opened when the badge is clicked
        badge_params: Badge customization parameters
        alt_text: Alt text for the badge image
        output_format: 'markdown' or 'html' (case-insensitive, anything else
                       falls back to markdown)

    Returns:
        BadgeCode with the snippet and the URLs it references
    """
    badge_url = build_badge_url(base_url, badge_params)

    parts = urlsplit(badge_url)
    badge_path = f"{parts.path}?{parts.query}" if parts.query else parts.path

    normalized = output_format.lower()
    if normalized not in SUPPORTED_FORMATS:
        normalized = "markdown"

    if normalized == "html":
        code = generate_html_badge(base_url, badge_path, link_url, alt_text)
    else:
        code = generate_markdown_badge(base_url, badge_path, link_url, alt_text)

    return BadgeCode(
        format=normalized,
        code=code,
        badge_url=badge_url,
        link_url=link_url,
        alt_text=alt_text,
    )


def generate_all_badge_formats(
    base_url: str,
    link_url: str,
    badge_params: Optional[Mapping[str, Any]] = None,
    alt_text: str = DEFAULT_ALT_TEXT,
) -> dict[str, Any]:
    """Generate both Markdown and HTML code for a badge."""
    markdown = generate_badge_code(base_url, link_url, badge_params, alt_text, "markdown")
    html_code = generate_badge_code(base_url, link_url, badge_params, alt_text, "html")

    return {
        "markdown": markdown.to_dict(),
        "html": html_code.to_dict(),
        "badgeUrl": markdown.badge_url,
        "linkUrl": link_url,
        "altText": alt_text,
    }


def generate_crypto_badge(
    base_url: str,
    cryptos: Sequence[str] = ("btc", "eth"),
    addresses: Optional[Mapping[str, str]] = None,
    output_format: str = "markdown",
) -> BadgeCode:
    """Generate badge code linking to a payment page for the given coins.

    Args:
        base_url: Base URL of the badge service
        cryptos: Ticker codes; one ticker uses ``ticker``, several use
                 a comma-joined ``tickers``
        addresses: Optional ticker -> recipient address mapping
        output_format: 'markdown' or 'html'
    """
    addresses = addresses or {}
    badge_params: dict[str, str] = {}

    if len(cryptos) == 1:
        ticker = cryptos[0]
        badge_params["ticker"] = ticker
        if addresses.get(ticker):
            badge_params["recipient_address"] = addresses[ticker]
    else:
        badge_params["tickers"] = ",".join(cryptos)
        address_pairs = [f"{code}:{addresses[code]}" for code in cryptos if addresses.get(code)]
        if address_pairs:
            badge_params["recipient_addresses"] = ",".join(address_pairs)

    payment_url = f"{base_url}/{build_query_string(badge_params)}"

    return generate_badge_code(
        base_url,
        payment_url,
        badge_params,
        DEFAULT_ALT_TEXT,
        output_format,
    )


def generate_preset_badge(
    base_url: str,
    preset_name: str,
    link_url: str,
    output_format: str = "markdown",
    overrides: Optional[Mapping[str, Any]] = None,
) -> BadgeCode:
    """Generate badge code from a preset configuration.

    Raises:
        UnknownPresetError: If ``preset_name`` isn't a known preset
    """
    preset = BADGE_PRESETS.get(preset_name)
    if preset is None:
        raise UnknownPresetError(
            f"Unknown preset: {preset_name}. "
            f"Available presets: {', '.join(BADGE_PRESETS)}"
        )

    overrides = dict(overrides or {})
    alt_text = overrides.pop("altText", None) or preset["altText"]
    badge_params = {**preset["badgeParams"], **overrides}

    return generate_badge_code(base_url, link_url, badge_params, alt_text, output_format)

"""
PayBadge: dynamic SVG payment badges for README files.

Generates two-tone SVG badges and Markdown/HTML embed code for
cryptocurrency payment links, with a small exchange rate client.
"""

__version__ = "1.0.0"

from paybadge.cli import main

__all__ = ["main", "__version__"]

#!/usr/bin/env python3
"""
PayBadge - dynamic SVG payment badges

Run this script to serve badges or generate them from the command line.

Usage:
    python run.py serve                          # Start the HTTP service
    python run.py serve -c config.json           # Use a JSON config file
    python run.py badge --right-text bitcoin     # Print a badge SVG
    python run.py badge --enhanced -o badge.svg  # Write an enhanced badge
    python run.py code -l https://example.com    # Markdown embed code
    python run.py presets                        # List presets
    python run.py rates BTC ETH --base EUR       # Exchange rates
"""

import sys
from paybadge.cli import main

if __name__ == "__main__":
    sys.exit(main())

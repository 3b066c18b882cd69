"""Command-line interface for paybadge.

Provides argument parsing and the main entry point for serving badges,
rendering badges to files, generating embed code and looking up
exchange rates from the command line.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

import uvicorn

from paybadge.badges import generate_badge_svg, generate_enhanced_badge
from paybadge.code_generator import (
    BADGE_PRESETS,
    DEFAULT_ALT_TEXT,
    SUPPORTED_FORMATS,
    UnknownPresetError,
    generate_badge_code,
    generate_preset_badge,
)
from paybadge.config import ConfigError, load_config
from paybadge.display import ConsoleDisplay
from paybadge.exchange_rates import ExchangeRateClient, ExchangeRateError
from paybadge.logging_utils import configure_logging
from paybadge.server import create_app
from paybadge.validator import ValidationError

DEFAULT_BASE_URL = "http://localhost:3000"

# Exit codes
EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG_ERROR = 2


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="paybadge",
        description="Dynamic SVG payment badges and embed code for README files",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the badge HTTP service")
    serve.add_argument(
        "-c", "--config",
        metavar="PATH",
        help="Path to a JSON configuration file",
    )
    serve.add_argument("--host", help="Bind address (overrides config)")
    serve.add_argument("--port", type=int, help="Listen port (overrides config)")

    badge = subparsers.add_parser("badge", help="Render a badge SVG")
    badge.add_argument("--left-text", help="Left side text (default: paybadge)")
    badge.add_argument("--right-text", help="Right side text (default: crypto)")
    badge.add_argument("--left-color", help="Left side color (default: #555)")
    badge.add_argument("--right-color", help="Right side color (default: #4c1)")
    badge.add_argument("--icon", help="Icon in the right segment (crypto, bitcoin)")
    badge.add_argument(
        "--enhanced",
        action="store_true",
        help="Render the enhanced crypto badge",
    )
    badge.add_argument(
        "-o", "--output",
        metavar="PATH",
        help="Write SVG to file instead of stdout",
    )

    code = subparsers.add_parser("code", help="Generate Markdown/HTML embed code")
    code.add_argument(
        "-l", "--link-url",
        required=True,
        metavar="URL",
        help="URL to open when the badge is clicked",
    )
    code.add_argument(
        "-b", "--base-url",
        default=DEFAULT_BASE_URL,
        metavar="URL",
        help=f"Base URL of the badge service (default: {DEFAULT_BASE_URL})",
    )
    code.add_argument(
        "-f", "--format",
        choices=[*SUPPORTED_FORMATS, "all"],
        default="markdown",
        help="Output format (default: markdown)",
    )
    code.add_argument("-p", "--preset", help="Use a preset configuration")
    code.add_argument("--alt-text", help=f"Alt text (default: {DEFAULT_ALT_TEXT})")
    code.add_argument("--left-text", help="Left side text")
    code.add_argument("--right-text", help="Right side text")
    code.add_argument("--left-color", help="Left side color")
    code.add_argument("--right-color", help="Right side color")
    code.add_argument(
        "--enhanced",
        action="store_true",
        help="Link the enhanced crypto badge",
    )
    code.add_argument(
        "--plain",
        action="store_true",
        help="Print only the code, without decoration",
    )

    subparsers.add_parser("presets", help="List badge presets")

    rates = subparsers.add_parser("rates", help="Show cryptocurrency exchange rates")
    rates.add_argument(
        "currencies",
        nargs="+",
        metavar="CODE",
        help="Currency codes to look up (e.g. BTC ETH)",
    )
    rates.add_argument(
        "--base",
        default="USD",
        help="Currency to quote rates in (default: USD)",
    )
    rates.add_argument(
        "-c", "--config",
        metavar="PATH",
        help="Path to a JSON configuration file",
    )

    return parser.parse_args(argv)


def _badge_params(args: argparse.Namespace) -> dict[str, str]:
    """Collect badge query parameters from parsed arguments."""
    candidates = {
        "leftText": args.left_text,
        "rightText": args.right_text,
        "leftColor": args.left_color,
        "rightColor": args.right_color,
        "icon": getattr(args, "icon", None),
    }
    params = {key: value for key, value in candidates.items() if value}
    if args.enhanced:
        params["style"] = "enhanced"
    return params


def run_serve(args: argparse.Namespace) -> int:
    """Run the HTTP service under uvicorn."""
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port

    print(f"PayBadge server starting on http://{config.host}:{config.port}")
    print(f"Badge endpoint: http://{config.host}:{config.port}/badge.svg")
    uvicorn.run(create_app(config), host=config.host, port=config.port, log_level="info")
    return EXIT_OK


def run_badge(args: argparse.Namespace) -> int:
    """Render a badge to stdout or a file."""
    params = _badge_params(args)
    generator = generate_enhanced_badge if args.enhanced else generate_badge_svg

    try:
        svg = generator(params)
    except ValidationError as e:
        print(f"Invalid badge parameters: {e}", file=sys.stderr)
        return EXIT_FAILED

    if args.output:
        path = Path(args.output)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(svg)
        print(f"Badge written to: {args.output}")
    else:
        sys.stdout.write(svg + "\n")

    return EXIT_OK


def run_code(args: argparse.Namespace, display: ConsoleDisplay) -> int:
    """Generate embed code in one or all formats."""
    params = _badge_params(args)
    formats = SUPPORTED_FORMATS if args.format == "all" else (args.format,)

    results = []
    for output_format in formats:
        if args.preset:
            overrides = dict(params)
            if args.alt_text:
                overrides["altText"] = args.alt_text
            try:
                result = generate_preset_badge(
                    args.base_url, args.preset, args.link_url, output_format, overrides
                )
            except UnknownPresetError as e:
                print(str(e), file=sys.stderr)
                return EXIT_FAILED
        else:
            result = generate_badge_code(
                args.base_url,
                args.link_url,
                params,
                args.alt_text or DEFAULT_ALT_TEXT,
                output_format,
            )
        results.append(result)

    for result in results:
        if args.plain:
            print(result.code)
        else:
            display.show_code(result)

    return EXIT_OK


def run_rates(args: argparse.Namespace, display: ConsoleDisplay) -> int:
    """Look up exchange rates and print them as a table."""
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    with ExchangeRateClient(config.exchange_rate_url, timeout=config.request_timeout) as client:
        if len(args.currencies) == 1:
            try:
                rates = {args.currencies[0]: client.get_current_rate(args.currencies[0], args.base)}
            except ExchangeRateError as e:
                print(str(e), file=sys.stderr)
                return EXIT_FAILED
        else:
            rates = client.get_multiple_rates(args.currencies, args.base)

    display.show_rates(rates, args.base)

    # Fail only when nothing could be fetched
    return EXIT_OK if any(rate is not None for rate in rates.values()) else EXIT_FAILED


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code: 0 for success, 1 for rejected input or failed
        lookups, 2 for configuration errors
    """
    args = parse_args(argv)
    configure_logging(verbose=args.verbose)
    display = ConsoleDisplay()

    if args.command == "serve":
        return run_serve(args)
    if args.command == "badge":
        return run_badge(args)
    if args.command == "code":
        return run_code(args, display)
    if args.command == "presets":
        display.show_presets(BADGE_PRESETS)
        return EXIT_OK
    return run_rates(args, display)


if __name__ == "__main__":
    sys.exit(main())

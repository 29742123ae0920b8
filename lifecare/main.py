"""
CLI entry point for the Life Care booking API.

Quote prices from the command line, print the price table, or run the
HTTP server.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import pandas as pd

from lifecare.pricing.catalog import CATALOG_VERSION, pricing_contract
from lifecare.pricing.exceptions import PricingError
from lifecare.pricing.pricing_engine import get_pricing_engine
from lifecare.utils.config_loader import load_config, load_env
from lifecare.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        argparse.Namespace: Parsed command line arguments.
    """
    parser = argparse.ArgumentParser(
        description="Life Care Home Nursing booking tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m lifecare.main quote --service post_op --duration 8 --days 10
    python -m lifecare.main catalog --days 30
    python -m lifecare.main catalog --json
    python -m lifecare.main serve --port 5001
        """,
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: config/config.yaml)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    quote = subparsers.add_parser("quote", help="Calculate a booking price")
    quote.add_argument("--service", "-s", required=True, help="Service identifier")
    quote.add_argument("--duration", "-d", required=True, help="Hours of care per day")
    quote.add_argument("--days", "-n", type=int, required=True, help="Number of days")

    catalog = subparsers.add_parser("catalog", help="Print the price table")
    catalog.add_argument("--days", "-n", type=int, default=1, help="Day count to price")
    catalog.add_argument("--json", action="store_true", help="Print the pricing contract as JSON")

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None, help="Bind host (default: from config)")
    serve.add_argument("--port", type=int, default=None, help="Bind port (default: from config)")
    serve.add_argument("--reload", action="store_true", help="Auto-reload on code changes")

    return parser.parse_args(argv)


def run_quote(service: str, duration: str, days: int) -> int:
    """Print a price breakdown. Returns the process exit code."""
    if days < 1:
        print("Error: --days must be at least 1", file=sys.stderr)
        return 2

    engine = get_pricing_engine()
    try:
        summary = engine.get_pricing_summary(service, duration, days)
    except PricingError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(f"Valid services: {', '.join(engine.services)}", file=sys.stderr)
        print(f"Valid durations: {', '.join(engine.durations)}", file=sys.stderr)
        return 1

    print(summary)
    return 0


def run_catalog(days: int, as_json: bool = False) -> int:
    """Print the price table or the JSON pricing contract."""
    if as_json:
        print(json.dumps(pricing_contract(), indent=2))
        return 0

    if days < 1:
        print("Error: --days must be at least 1", file=sys.stderr)
        return 2

    engine = get_pricing_engine()
    df = engine.build_price_table(days)
    factor = engine.get_discount_factor(days)

    print(f"Catalog version {CATALOG_VERSION} - prices for {days} day(s), discount ×{factor}")
    with pd.option_context("display.width", 120):
        print(df.to_string())
    return 0


def run_server(host: str, port: int, reload: bool) -> int:
    import uvicorn

    uvicorn.run("lifecare.webapp.main:app", host=host, port=port, reload=reload)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)

    load_env()
    config = load_config(args.config)
    level = "DEBUG" if args.verbose else config.logging.level
    setup_logging(level=level, log_format=config.logging.format)

    if args.command == "quote":
        return run_quote(args.service, args.duration, args.days)
    if args.command == "catalog":
        return run_catalog(args.days, as_json=args.json)
    if args.command == "serve":
        host = args.host or config.server.host
        port = args.port or config.server.port
        logger.info(f"Starting server on {host}:{port}")
        return run_server(host, port, args.reload)

    return 2


if __name__ == "__main__":
    sys.exit(main())

"""
Command-line entry point.

Runs a single Mantle API call using credentials from the environment and
prints the JSON response. Handy for checking an app id and key before
wiring the client into an application.

Environment:
    MANTLE_APP_ID, MANTLE_API_KEY, MANTLE_CUSTOMER_API_TOKEN, MANTLE_API_URL
"""

import argparse
import json
import logging
import os
import sys
from typing import Dict, List, Optional

from .api import MantleClient
from .config import config
from .exceptions import ConfigError, MantleError, ValidationError


def setup_logging(log_level: str = config.log.log_level) -> logging.Logger:
    """Set up console logging for the command-line tool."""
    logger = logging.getLogger("mantle_client")
    level = getattr(logging, log_level.upper())
    logger.setLevel(level)

    # Replace the handler from any earlier call
    for handler in list(logger.handlers):
        if handler.get_name() == "console":
            logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.set_name("console")
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(
        config.log.log_format,
        datefmt=config.log.date_format
    ))

    logger.addHandler(console_handler)
    return logger


def client_from_env(environ=None) -> MantleClient:
    """Build a client from MANTLE_* environment variables."""
    environ = os.environ if environ is None else environ
    return MantleClient(
        app_id=environ.get("MANTLE_APP_ID"),
        api_key=environ.get("MANTLE_API_KEY"),
        customer_api_token=environ.get("MANTLE_CUSTOMER_API_TOKEN"),
        api_url=environ.get("MANTLE_API_URL"),
    )


def parse_properties(pairs: List[str]) -> Dict[str, str]:
    """Turn ``KEY=VALUE`` arguments into a mapping."""
    properties = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValidationError(f"property must be KEY=VALUE, got {pair!r}")
        properties[key] = value
    return properties


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mantle-client", description="Call the Mantle app API.")
    parser.add_argument(
        "--log-level",
        default=config.log.log_level,
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("customer", help="show the current customer")

    invoices = commands.add_parser("invoices", help="list invoices")
    invoices.add_argument("--page", type=int, default=0)
    invoices.add_argument("--limit", type=int, default=10)
    invoices.add_argument("--customer-id")

    report = commands.add_parser("usage-report", help="show a usage metric report")
    report.add_argument("id")
    report.add_argument("--period", default="daily")
    report.add_argument("--start-date")
    report.add_argument("--end-date")
    report.add_argument("--customer-id")

    event = commands.add_parser("send-event", help="send one usage event")
    event.add_argument("event_name")
    event.add_argument("--customer-id")
    event.add_argument("--event-id")
    event.add_argument("--property", action="append", default=[], metavar="KEY=VALUE")

    return parser


def run_command(client: MantleClient, args: argparse.Namespace):
    """Dispatch parsed arguments to the matching client call."""
    if args.command == "customer":
        return client.get_customer()
    if args.command == "invoices":
        return client.get_invoices(page=args.page, limit=args.limit, customer_id=args.customer_id)
    if args.command == "usage-report":
        return client.usage_metric_report(
            id=args.id,
            customer_id=args.customer_id,
            period=args.period,
            start_date=args.start_date,
            end_date=args.end_date,
        )
    return client.send_usage_event(
        event_name=args.event_name,
        customer_id=args.customer_id,
        event_id=args.event_id,
        properties=parse_properties(args.property),
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command-line tool."""
    args = build_parser().parse_args(argv)
    logger = setup_logging(args.log_level)

    try:
        result = run_command(client_from_env(), args)
        print(json.dumps(result, indent=2))
        return 0

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    except (ConfigError, ValidationError) as e:
        logger.error(str(e))
        return 2

    except MantleError as e:
        logger.error(f"Request failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

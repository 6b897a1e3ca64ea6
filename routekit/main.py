"""Command-line entry point for RouteKit DoH.

Plays the role of the dashboard's route actions: takes a raw domain and an
optional type list, runs a lookup or propagation check, and prints the
result.
"""

import argparse
import logging
import sys
from typing import List, Optional

from routekit.config import Config
from routekit.exceptions import InvalidDomainError, RecordsNotFoundError
from routekit.services.dns_aggregator import lookup_records
from routekit.services.logger import setup_logging
from routekit.services.propagation import check_propagation
from routekit.services.report_formatter import ReportFormatter
from routekit.utils.domain_utils import clean_domain, parse_record_types, validate_domain


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_INVALID_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    Returns:
        argparse.ArgumentParser: Parser with ``lookup`` and ``propagation`` commands.
    """
    parser = argparse.ArgumentParser(
        prog="routekit",
        description="DNS lookups and propagation checks over DNS-over-HTTPS.",
    )
    parser.add_argument(
        "--format",
        choices=("json", "yaml"),
        default="json",
        help="Output format (default: json)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    lookup = subparsers.add_parser("lookup", help="Look up DNS records for a domain")
    lookup.add_argument("domain", help="Domain or URL to look up")
    lookup.add_argument(
        "--types",
        default="",
        help="Comma-separated record types (default: all, e.g. A,MX,TXT,SPF,DMARC,DKIM)",
    )

    propagation = subparsers.add_parser(
        "propagation", help="Compare answers across public DoH providers"
    )
    propagation.add_argument("domain", help="Domain or URL to check")
    propagation.add_argument(
        "--type", dest="record_type", default="A", help="Record type (default: A)"
    )

    return parser


def render(report, output_format: str) -> str:
    """Format a result model for printing."""
    if output_format == "yaml":
        return ReportFormatter.generate_yaml_report(report)
    return ReportFormatter.generate_json_report(report)


def run_lookup(domain: str, record_types: str, config: Config, output_format: str) -> int:
    """Run a multi-type lookup and print the result.

    Returns:
        int: Exit code.
    """
    cleaned = validate_domain(clean_domain(domain))
    result = lookup_records(
        cleaned,
        parse_record_types(record_types),
        providers=config.fallback_providers,
        timeout_ms=config.doh_timeout_ms,
    )
    print(render(result, output_format))
    return EXIT_OK


def run_propagation(domain: str, record_type: str, config: Config, output_format: str) -> int:
    """Run a propagation check and print the report.

    Returns:
        int: Exit code.
    """
    cleaned = validate_domain(clean_domain(domain))
    report = check_propagation(
        cleaned,
        record_type.strip().upper() or "A",
        providers=config.propagation_providers,
        timeout_ms=config.propagation_timeout_ms,
        concurrency=config.propagation_concurrency,
    )
    print(render(report, output_format))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function.

    Args:
        argv: Arguments (default: sys.argv[1:]).

    Returns:
        int: Exit code (0 success, 1 no records found, 2 invalid input or config).
    """
    args = build_parser().parse_args(argv)

    try:
        config = Config.from_env()
    except ValueError as e:
        setup_logging()
        logger.error(f"Configuration error: {e}")
        return EXIT_INVALID_INPUT

    setup_logging(config.verbose)

    try:
        if args.command == "lookup":
            return run_lookup(args.domain, args.types, config, args.format)
        return run_propagation(args.domain, args.record_type, config, args.format)
    except InvalidDomainError as e:
        logger.error(f"Invalid input: {e}")
        return EXIT_INVALID_INPUT
    except RecordsNotFoundError as e:
        logger.warning(str(e))
        return EXIT_NOT_FOUND


if __name__ == "__main__":
    sys.exit(main())

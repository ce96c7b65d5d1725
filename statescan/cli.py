"""Command line interface.

Commands:
    scan PATH    Scan a project and print its state as JSON

Usage:
    statescan scan ./my-project
    statescan scan ./my-project --enhanced --timeout 10
    python -m statescan scan . --registry extra-registries.yml --json-logs
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from statescan.config import get_settings, validate_settings
from statescan.exceptions import RegistryError, ScanTimeoutError
from statescan.logging_config import setup_logging
from statescan.registries import DEFAULT_REGISTRIES
from statescan.registries.loader import load_registries
from statescan.scanner import scan_project

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_TIMEOUT = 1
EXIT_BAD_REGISTRY = 2


async def cmd_scan(args: argparse.Namespace) -> int:
    """Scan one project and print the JSON export to stdout."""
    settings = get_settings()

    registry_file = args.registry or settings.registry_file
    registries = DEFAULT_REGISTRIES
    if registry_file is not None:
        try:
            registries = load_registries(registry_file)
        except RegistryError as e:
            logger.error(str(e))
            return EXIT_BAD_REGISTRY

    try:
        state = await scan_project(
            args.path,
            timeout=args.timeout,
            enhanced=args.enhanced,
            registries=registries,
            settings=settings,
        )
    except ScanTimeoutError as e:
        logger.error(str(e))
        return EXIT_TIMEOUT

    print(json.dumps(state.to_dict(), indent=2))
    return EXIT_OK


def _positive_float(value: str) -> float:
    seconds = float(value)
    if seconds <= 0:
        raise argparse.ArgumentTypeError("timeout must be greater than 0")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="statescan",
        description="Detect the technology stack and structure of a project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    scan_parser = subparsers.add_parser("scan", help="Scan a project directory")
    scan_parser.add_argument("path", type=Path, help="Project root")
    scan_parser.add_argument(
        "--enhanced",
        action="store_true",
        help="Only run the enhanced detectors (identity, capabilities, guidance...)",
    )
    scan_parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=None,
        help="Whole-scan budget in seconds (default: STATESCAN_SCAN_TIMEOUT)",
    )
    scan_parser.add_argument("--debug", action="store_true", help="Log at DEBUG, including parser errors")
    scan_parser.add_argument("--json-logs", action="store_true", help="Write logs as JSON lines to stderr")
    scan_parser.add_argument(
        "--registry",
        type=Path,
        default=None,
        help="YAML file with extra registry rows",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    settings = get_settings()
    setup_logging(debug=args.debug or settings.debug, json_logs=args.json_logs or settings.json_logs)
    validate_settings(settings)

    if args.command == "scan":
        return asyncio.run(cmd_scan(args))

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())

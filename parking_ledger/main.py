# File: parking_ledger/main.py
"""
Main entry point for the Parking Ledger
Replays billing scenarios and prints the resulting bills as JSON
"""

from typing import List, Optional
import argparse
import json
import logging
import sys

from .application.scenario import ScenarioRunner, load_scenario
from .infrastructure.config import ConfigurationError, LedgerSettings, load_settings


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Setup application logging configuration"""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )
    return logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parking-ledger",
        description="Per-second parking billing ledger"
    )
    parser.add_argument("--config", help="YAML settings file")
    parser.add_argument("--rate", type=int, help="Override the rate per second")
    parser.add_argument("--log-level", help="Override the logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    scenario = subparsers.add_parser("scenario", help="Replay a YAML scenario on a manual clock")
    scenario.add_argument("path", help="Scenario file")
    scenario.add_argument(
        "--keep-going", action="store_true",
        help="Continue after a failed step instead of stopping"
    )

    subparsers.add_parser("show-config", help="Print the effective settings")
    return parser


def _effective_settings(args: argparse.Namespace) -> LedgerSettings:
    settings = load_settings(args.config)
    overrides = {}
    if args.rate is not None:
        overrides["rate_per_second"] = args.rate
    if args.log_level:
        overrides["log_level"] = args.log_level
    if overrides:
        settings = LedgerSettings.model_validate({**settings.model_dump(), **overrides})
    return settings


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application"""
    args = build_parser().parse_args(argv)

    try:
        settings = _effective_settings(args)
    except (ConfigurationError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    logger = setup_logging(settings.log_level, settings.log_file)

    if args.command == "show-config":
        print(settings.model_dump_json(indent=2))
        return 0

    try:
        scenario = load_scenario(args.path)
    except ValueError as e:
        logger.error(f"Cannot load scenario: {e}")
        return 1

    rate = scenario.rate if scenario.rate is not None else settings.rate_per_second
    runner = ScenarioRunner.for_rate(rate)
    outcomes = runner.run(scenario, stop_on_error=not args.keep_going)

    print(json.dumps({"rate_per_second": rate, "steps": outcomes}, indent=2, default=str))
    return 0 if all(outcome["success"] for outcome in outcomes) else 1


if __name__ == "__main__":
    sys.exit(main())

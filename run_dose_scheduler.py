#!/usr/bin/env python3
"""
Dose Scheduler Driver Script
============================

Expands a file of medication orders into scheduled dose events over a
fixed horizon and writes them to CSV or JSON.

Usage:
    # Seven-day schedule from a CSV of orders
    python run_dose_scheduler.py \\
        --start 2026-01-15 \\
        --days 7 \\
        --orders ./orders.csv \\
        --output ./output/events.csv

    # Override scheduling constants from a JSON file
    python run_dose_scheduler.py \\
        --start 2026-01-15 \\
        --days 7 \\
        --orders ./orders.json \\
        --output ./output/events.json \\
        --config config.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from dosescheduler.config import DoseSchedulerConfig
from dosescheduler.errors import DoseSchedulerError
from dosescheduler.pipeline import DoseScheduleResult, build_dose_schedule
from dosescheduler.utils.io import load_orders, write_events


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Generate scheduled dose events from medication orders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    # Required arguments
    parser.add_argument(
        "--start",
        type=str,
        required=True,
        help="Horizon start date (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--days",
        type=int,
        required=True,
        help="Horizon length in whole days (1-30 by default)",
    )
    parser.add_argument(
        "--orders",
        type=Path,
        required=True,
        help="CSV or JSON file with one record per order",
    )
    parser.add_argument(
        "--output",
        type=Path,
        required=True,
        help="Destination file for events (.csv or .json)",
    )

    # Optional configuration
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to JSON configuration file (overrides defaults)",
    )
    parser.add_argument(
        "--overlap-window",
        type=int,
        help="Minimum spacing in minutes between doses of one exclusion group",
    )

    # Flags
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--show-progress",
        action="store_true",
        help="Show a progress bar while generating doses",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> DoseSchedulerConfig:
    """Merge JSON configuration with CLI overrides (CLI wins)."""
    json_config: Dict[str, Any] = {}
    if args.config:
        with open(args.config, "r") as f:
            json_config = json.load(f)

    if args.overlap_window is not None:
        json_config["overlap_window_minutes"] = args.overlap_window
    if args.show_progress:
        json_config["show_progress"] = True

    return DoseSchedulerConfig.from_mapping(json_config)


def print_summary(result: DoseScheduleResult, output: Path) -> None:
    """Print a summary of the scheduling run."""
    print()
    print("=" * 60)
    print("DOSE SCHEDULE SUMMARY")
    print("=" * 60)
    print(f"Orders:              {result.order_count}")
    print(f"Candidate doses:     {result.candidate_count}")
    print(f"Rejected (overlap):  {result.rejected_count}")
    print(f"Scheduled events:    {result.event_count}")
    print(f"Output:              {output}")
    print("=" * 60)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main execution function."""
    args = parse_args(argv)
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        logger.info(f"Horizon: {args.days} day(s) from {args.start}")
        config = build_config(args)
        orders = load_orders(args.orders)
        result = build_dose_schedule(args.start, args.days, orders, config)
        write_events(result.events, args.output)
        print_summary(result, args.output)
        return 0

    except KeyboardInterrupt:
        logger.error("\nInterrupted by user")
        return 130
    except (DoseSchedulerError, OSError, ValueError) as e:
        logger.error(f"Scheduling failed: {e}", exc_info=args.verbose)
        return 1


if __name__ == "__main__":
    sys.exit(main())

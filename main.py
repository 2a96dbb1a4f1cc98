#!/usr/bin/env python3
# greencart-kpi/main.py
"""
Command-Line Interface for the GreenCart delivery KPI engine.

Runs one simulation over the CSV data in a directory and prints the KPIs.

Usage:
    python main.py                              # 5 drivers over data/
    python main.py --drivers 3 --start-time 08:30
    python main.py --output reports             # Also write orders.csv + summary.json
    python main.py --stats                      # Show fleet statistics first
    python main.py --verbose                    # Debug logging

Exit Codes:
    0: Success
    1: Data loading or request validation error
    2: Simulation error (no drivers, routes or pending orders)
"""

from __future__ import annotations

import argparse
import copy
import logging
import os
import sys
from typing import Dict, List, Optional

# Ensure the greencart package is importable when run from a checkout
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from greencart import config
from greencart.allocation import STRATEGIES
from greencart.errors import InvalidRunRequest, SimulationError
from greencart.models import RunRequest, SimulationResult
from greencart.report import driver_breakdown, write_report
from greencart.simulation import Simulation

DEFAULT_DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")

KPI_ROWS = [
    ("Total Deliveries", "total_deliveries", "{}"),
    ("On-Time Deliveries", "on_time_deliveries", "{}"),
    ("Late Deliveries", "late_deliveries", "{}"),
    ("Efficiency Score", "efficiency_score", "{:.2f}%"),
    ("Total Profit", "total_profit", "Rs {:,.2f}"),
    ("Total Fuel Cost", "total_fuel_cost", "Rs {:,.2f}"),
    ("  Base Fuel Cost", "base_fuel_cost", "Rs {:,.2f}"),
    ("  Traffic Surcharge", "traffic_surcharge", "Rs {:,.2f}"),
    ("Total Penalties", "total_penalties", "Rs {:,.2f}"),
    ("Total Bonuses", "total_bonuses", "Rs {:,.2f}"),
    ("Avg Delivery Time", "average_delivery_time", "{:.2f} min"),
    ("Fuel Efficiency", "fuel_efficiency", "{:.2f} /Rs"),
]


def print_header() -> None:
    """Print the CLI header."""
    print("\n" + "=" * 60)
    print("  GREENCART LOGISTICS - Delivery KPI Simulation")
    print("=" * 60 + "\n")


def print_kpi_table(result: SimulationResult) -> None:
    """
    Print a formatted table of a run's KPIs.

    Args:
        result: The completed simulation run
    """
    print("\n" + "=" * 60)
    print("  SIMULATION RESULTS")
    print("=" * 60 + "\n")

    print(f"| {'Metric':<25} | {'Value':>28} |")
    print("|" + "-" * 27 + "|" + "-" * 30 + "|")
    for label, attr, fmt in KPI_ROWS:
        value = fmt.format(getattr(result.kpis, attr))
        print(f"| {label:<25} | {value:>28} |")

    meta = result.metadata
    print(f"\n  Drivers used: {meta.drivers_used}, "
          f"orders processed: {meta.orders_processed}, "
          f"routes available: {meta.routes_used}")

    if result.warnings:
        print(f"\n  WARN: {len(result.warnings)} order(s) skipped:")
        for warning in result.warnings:
            print(f"    - {warning}")

    print("=" * 60 + "\n")


def print_driver_breakdown(result: SimulationResult) -> None:
    """Print per-driver totals for the run."""
    breakdown = driver_breakdown(result.orders)
    if breakdown.empty:
        return
    print("  Per-driver breakdown:")
    print(breakdown.to_string())
    print()


def print_fleet_stats(stats: Dict[str, Dict[str, int]]) -> None:
    """Print driver, route and order counts."""
    print("Fleet statistics:")
    print("-" * 40)
    for section, counts in stats.items():
        details = ", ".join(f"{name.replace('_', ' ')}={count}" for name, count in counts.items())
        print(f"  {section.title():8} {details}")
    print()


def load_simulation_safe(data_dir: str) -> Optional[Simulation]:
    """
    Load data with graceful error handling.

    Args:
        data_dir: Directory holding drivers.csv, routes.csv and orders.csv

    Returns:
        Simulation or None if error
    """
    if not os.path.isdir(data_dir):
        print(f"ERROR: Data directory not found: {data_dir}")
        return None

    try:
        sim = Simulation.from_directory(data_dir)
    except (FileNotFoundError, ValueError) as e:
        print(f"ERROR: Failed to load data: {e}")
        return None

    print(f"Loaded {len(sim.drivers)} drivers, {len(sim.routes)} routes "
          f"and {len(sim.orders)} orders from '{data_dir}'")
    return sim


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="GreenCart Delivery KPI Simulation CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                 # Default: 5 drivers over data/
  python main.py --drivers 2 --max-hours 10      # Smaller fleet
  python main.py --output reports --by-driver    # Write reports, show per-driver totals
        """
    )

    parser.add_argument(
        "--data-dir", "-d",
        type=str,
        default=DEFAULT_DATA_DIR,
        help="Directory with drivers.csv, routes.csv and orders.csv (default: data/)"
    )

    parser.add_argument(
        "--drivers", "-n",
        type=int,
        default=5,
        help=f"Available drivers for the run ({config.MIN_AVAILABLE_DRIVERS}-{config.MAX_AVAILABLE_DRIVERS})"
    )

    parser.add_argument(
        "--start-time",
        type=str,
        default=config.DEFAULT_ROUTE_START_TIME,
        help="Route start time, 24-hour HH:MM (default: %(default)s)"
    )

    parser.add_argument(
        "--max-hours",
        type=float,
        default=config.DEFAULT_MAX_HOURS_PER_DAY,
        help="Max working hours per driver per day (default: %(default)s)"
    )

    parser.add_argument(
        "--strategy", "-s",
        type=str,
        default=config.DEFAULT_STRATEGY,
        help=f"Assignment strategy. Options: {', '.join(STRATEGIES)}"
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Write orders.csv and summary.json to this directory"
    )

    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print fleet statistics before running"
    )

    parser.add_argument(
        "--by-driver",
        action="store_true",
        help="Print per-driver totals after the run"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed simulation progress"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print_header()

    if args.strategy not in STRATEGIES:
        print(f"ERROR: Unknown strategy '{args.strategy}'")
        print(f"Available strategies: {', '.join(STRATEGIES)}")
        return 1

    try:
        request = RunRequest(
            available_drivers=args.drivers,
            route_start_time=args.start_time,
            max_hours_per_day=args.max_hours,
        )
    except InvalidRunRequest as e:
        print(f"ERROR: Invalid {e.field or 'request'}: {e}")
        return 1

    sim = load_simulation_safe(args.data_dir)
    if sim is None:
        return 1

    if args.stats:
        print_fleet_stats(sim.stats())

    try:
        # Work on copies so the loaded records stay pristine
        drivers, routes, orders = copy.deepcopy((sim.drivers, sim.routes, sim.orders))
        run_sim = Simulation(drivers, routes, orders)
        result = run_sim.run(request, strategy=args.strategy)
    except SimulationError as e:
        print(f"ERROR: Simulation failed: {e}")
        return 2

    print_kpi_table(result)

    if args.by_driver:
        print_driver_breakdown(result)

    if args.output:
        paths = write_report(result, args.output)
        print("Wrote:")
        for path in paths.values():
            print(f"- {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())

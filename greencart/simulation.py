# greencart-kpi/greencart/simulation.py
"""
Simulation runner for the GreenCart delivery KPI engine.

A simulation run is a single synchronous pass over materialized records:
1. Filter active drivers, active routes and pending orders
2. Fail fast if any of them is missing (before anything is mutated)
3. Refresh driver fatigue from current shift hours
4. Allocate drivers to orders with the selected strategy
5. Apply the company rules and aggregate the run KPIs

The runner performs no I/O during a run. Records are loaded up front
(see `Simulation.load_data`), and the caller owns persisting the mutated
orders and the returned run record. Runs sharing the same order objects
must be serialized by the caller.
"""

from __future__ import annotations

import csv
import logging
import os
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence, Tuple, TypeVar, Union

from . import config, rules
from .allocation import AssignmentStrategy, allocate, select_drivers
from .errors import NoActiveDrivers, NoActiveRoutes, NoPendingOrders
from .kpi import calculate_kpis, fleet_stats
from .models import (
    Driver,
    Order,
    OrderStatus,
    Route,
    RunMetadata,
    RunRequest,
    SimulationResult,
)
from .utils import parse_bool

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _read_csv(path: str, label: str, parse_row: Callable[[Dict[str, str]], T]) -> List[T]:
    """
    Read a CSV file into records, one per row.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If a row is missing a column or holds an invalid value
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"{label.title()} file not found: {path}")

    records: List[T] = []
    with open(path, "r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for line_no, row in enumerate(reader, start=2):
            try:
                records.append(parse_row(row))
            except (KeyError, ValueError) as e:
                raise ValueError(f"Invalid {label} data in {path} (line {line_no}): {e}")
    return records


def _parse_driver(row: Dict[str, str]) -> Driver:
    return Driver(
        driver_id=row["driver_id"].strip(),
        name=row["name"].strip(),
        current_shift_hours=float(row.get("current_shift_hours") or 0),
        past_7_day_work_hours=float(row.get("past_7_day_work_hours") or 0),
        is_active=parse_bool(row.get("is_active") or True),
    )


def _parse_route(row: Dict[str, str]) -> Route:
    return Route(
        route_id=row["route_id"].strip(),
        distance_km=float(row["distance_km"]),
        traffic_level=row["traffic_level"].strip(),
        base_time_minutes=float(row["base_time_minutes"]),
        start_location=(row.get("start_location") or "").strip(),
        end_location=(row.get("end_location") or "").strip(),
        is_active=parse_bool(row.get("is_active") or True),
    )


def _parse_order(row: Dict[str, str]) -> Order:
    return Order(
        order_id=row["order_id"].strip(),
        value_rs=float(row["value_rs"]),
        route_id=row["route_id"].strip(),
        status=(row.get("status") or OrderStatus.PENDING.value).strip(),
    )


def _check_unique(records: Sequence[T], key: Callable[[T], str], label: str) -> None:
    seen = set()
    for record in records:
        record_id = key(record)
        if record_id in seen:
            raise ValueError(f"Duplicate {label} id: {record_id}")
        seen.add(record_id)


class Simulation:
    """
    Runs the delivery KPI simulation over a fleet, its routes and its orders.

    Attributes:
        drivers: All drivers (active and inactive)
        routes: All routes (active and inactive)
        orders: All orders; pending ones are processed by `run`
    """

    def __init__(self, drivers: List[Driver], routes: List[Route], orders: List[Order]) -> None:
        self.drivers: List[Driver] = drivers
        self.routes: List[Route] = routes
        self.orders: List[Order] = orders

    @staticmethod
    def load_data(
        drivers_file: str,
        routes_file: str,
        orders_file: str,
    ) -> Tuple[List[Driver], List[Route], List[Order]]:
        """
        Load fleet data from CSV files.

        Orders get their route pre-joined when the route id is known; an
        unknown route id is kept as-is and surfaces as a warning at run time.

        Args:
            drivers_file: Path to drivers CSV
            routes_file: Path to routes CSV
            orders_file: Path to orders CSV

        Returns:
            Tuple of (drivers, routes, orders) lists

        Raises:
            FileNotFoundError: If a file doesn't exist
            ValueError: If a file's format or values are invalid
        """
        drivers = _read_csv(drivers_file, "driver", _parse_driver)
        routes = _read_csv(routes_file, "route", _parse_route)
        orders = _read_csv(orders_file, "order", _parse_order)

        _check_unique(drivers, lambda d: d.driver_id, "driver")
        _check_unique(routes, lambda r: r.route_id, "route")
        _check_unique(orders, lambda o: o.order_id, "order")

        routes_by_id = {r.route_id: r for r in routes}
        for order in orders:
            order.assigned_route = routes_by_id.get(order.route_id)

        logger.info(
            f"Loaded {len(drivers)} drivers, {len(routes)} routes and {len(orders)} orders"
        )
        return drivers, routes, orders

    @classmethod
    def from_directory(cls, data_dir: str) -> "Simulation":
        """Build a simulation from drivers.csv, routes.csv and orders.csv in a directory."""
        drivers, routes, orders = cls.load_data(
            os.path.join(data_dir, "drivers.csv"),
            os.path.join(data_dir, "routes.csv"),
            os.path.join(data_dir, "orders.csv"),
        )
        return cls(drivers, routes, orders)

    @property
    def active_drivers(self) -> List[Driver]:
        return [d for d in self.drivers if d.is_active]

    @property
    def active_routes(self) -> List[Route]:
        return [r for r in self.routes if r.is_active]

    @property
    def pending_orders(self) -> List[Order]:
        return [o for o in self.orders if o.status is OrderStatus.PENDING]

    def run(
        self,
        request: RunRequest,
        strategy: Union[str, AssignmentStrategy] = config.DEFAULT_STRATEGY,
        now: Optional[datetime] = None,
    ) -> SimulationResult:
        """
        Run the simulation once.

        Args:
            request: Validated run parameters
            strategy: Assignment strategy name or callable
            now: Timestamp for the run record (defaults to current UTC time)

        Returns:
            SimulationResult with KPIs, run metadata, processed orders and
            warnings for skipped orders

        Raises:
            NoActiveDrivers: If no driver is active
            NoActiveRoutes: If no route is active
            NoPendingOrders: If no order is pending
            RequestedDriversExceedAvailable: If more drivers are requested than active
        """
        active_drivers = self.active_drivers
        active_routes = self.active_routes
        pending = self.pending_orders

        logger.info(
            f"Starting run: {request.available_drivers} drivers requested, "
            f"{len(active_drivers)} active drivers, {len(active_routes)} active routes, "
            f"{len(pending)} pending orders"
        )

        # Preconditions, all checked before any state changes
        if not active_drivers:
            raise NoActiveDrivers()
        if not active_routes:
            raise NoActiveRoutes()
        if not pending:
            raise NoPendingOrders()
        drivers = select_drivers(active_drivers, request.available_drivers)

        drivers = [rules.refresh_fatigue(d) for d in drivers]

        allocate(pending, drivers, strategy)
        kpis, warnings = calculate_kpis(pending, drivers, active_routes)

        metadata = RunMetadata(
            drivers_used=len(drivers),
            orders_processed=len(pending),
            routes_used=len(active_routes),
            timestamp=now or datetime.now(timezone.utc),
            input_parameters=request,
        )

        logger.info(
            f"Run complete: {kpis.total_deliveries}/{len(pending)} orders processed, "
            f"{len(warnings)} skipped"
        )
        return SimulationResult(kpis=kpis, metadata=metadata, orders=pending, warnings=warnings)

    def stats(self) -> Dict[str, Dict[str, int]]:
        """Fleet statistics over every driver, route and order."""
        return fleet_stats(self.drivers, self.routes, self.orders)

# greencart-kpi/greencart/models.py
"""
Core domain models for the GreenCart delivery KPI engine.

This module defines the data structures the engine consumes and produces:
- Driver: A driver with shift hours and derived fatigue state
- Route: A delivery route with distance, traffic and base time
- Order: A delivery request plus the fields written by the KPI calculator
- RunRequest: The parameters of one simulation run
- KpiSummary / RunMetadata / SimulationResult: The output of a run
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from . import config
from .errors import InvalidRunRequest
from .utils import parse_clock_time, round_half_up


class TrafficLevel(Enum):
    """Traffic conditions on a route."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class OrderStatus(Enum):
    """
    Lifecycle states for an order.

    A simulation run moves every pending order to DELIVERED or LATE exactly
    once. IN_PROGRESS is only ever set by manual edits outside the engine.
    """
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    DELIVERED = "delivered"
    LATE = "late"


class DriverStatus(Enum):
    """Display status of a driver, in order of precedence."""
    INACTIVE = "Inactive"
    FATIGUED = "Fatigued"
    OVERTIME = "Overtime"
    ACTIVE = "Active"


class EfficiencyRating(Enum):
    HIGH = "High"
    NORMAL = "Normal"
    REDUCED = "Reduced"


@dataclass
class Driver:
    """
    Represents a driver in the delivery fleet.

    Attributes:
        driver_id: Unique identifier
        name: Display name
        current_shift_hours: Hours worked in the current shift (0 - 24)
        past_7_day_work_hours: Hours worked over the last seven days
        is_active: Whether the driver can be assigned orders

    Derived State (see rules.refresh_fatigue):
        is_fatigued: current_shift_hours > 8
        overtime_hours: max(0, current_shift_hours - 8)
    """
    driver_id: str
    name: str
    current_shift_hours: float = 0.0
    past_7_day_work_hours: float = 0.0
    is_active: bool = True
    is_fatigued: bool = False
    overtime_hours: float = 0.0

    def __post_init__(self) -> None:
        """Validate shift hours against the fleet's limits."""
        if not str(self.name).strip():
            raise InvalidRunRequest("Driver name is required", field="name")
        if not 0 <= self.current_shift_hours <= config.MAX_SHIFT_HOURS:
            raise InvalidRunRequest(
                f"Current shift hours must be between 0 and {config.MAX_SHIFT_HOURS:g}, "
                f"got {self.current_shift_hours}",
                field="current_shift_hours",
            )
        if self.past_7_day_work_hours < 0:
            raise InvalidRunRequest(
                "Past 7-day work hours cannot be negative",
                field="past_7_day_work_hours",
            )

    @property
    def status(self) -> DriverStatus:
        if not self.is_active:
            return DriverStatus.INACTIVE
        if self.is_fatigued:
            return DriverStatus.FATIGUED
        if self.current_shift_hours > config.FATIGUE_SHIFT_HOURS:
            return DriverStatus.OVERTIME
        return DriverStatus.ACTIVE

    @property
    def efficiency_rating(self) -> EfficiencyRating:
        if self.current_shift_hours > config.FATIGUE_SHIFT_HOURS:
            return EfficiencyRating.REDUCED
        if self.current_shift_hours >= config.NORMAL_EFFICIENCY_SHIFT_HOURS:
            return EfficiencyRating.NORMAL
        return EfficiencyRating.HIGH

    def __repr__(self) -> str:
        return f"Driver({self.driver_id}, {self.status.value}, shift={self.current_shift_hours:g}h)"


@dataclass
class Route:
    """
    Represents a delivery route.

    Attributes:
        route_id: Unique identifier (e.g. 'RT001')
        distance_km: Route length in km (>= 0)
        traffic_level: Low, Medium or High
        base_time_minutes: Expected drive time without fatigue (>= 1)
        start_location/end_location: Human readable endpoints
        is_active: Whether orders on this route can be simulated
    """
    route_id: str
    distance_km: float
    traffic_level: TrafficLevel
    base_time_minutes: float
    start_location: str = ""
    end_location: str = ""
    is_active: bool = True

    def __post_init__(self) -> None:
        """Coerce traffic level strings and validate numeric ranges."""
        if not isinstance(self.traffic_level, TrafficLevel):
            try:
                self.traffic_level = TrafficLevel(self.traffic_level)
            except ValueError:
                raise InvalidRunRequest(
                    f"Traffic level must be Low, Medium, or High, got {self.traffic_level!r}",
                    field="traffic_level",
                )
        for name in ("distance_km", "base_time_minutes"):
            if not math.isfinite(getattr(self, name)):
                raise InvalidRunRequest(f"{name} must be a finite number", field=name)
        if self.distance_km < 0:
            raise InvalidRunRequest("Distance cannot be negative", field="distance_km")
        if self.base_time_minutes < 1:
            raise InvalidRunRequest("Base time must be at least 1 minute", field="base_time_minutes")

    @property
    def is_high_traffic(self) -> bool:
        return self.traffic_level is TrafficLevel.HIGH

    @property
    def traffic_multiplier(self) -> float:
        """Travel time multiplier for the route's traffic level."""
        return config.TRAFFIC_MULTIPLIERS.get(self.traffic_level.value, 1.0)

    @property
    def fuel_surcharge_per_km(self) -> float:
        return config.HIGH_TRAFFIC_SURCHARGE_PER_KM if self.is_high_traffic else 0.0

    @property
    def fuel_surcharge(self) -> float:
        """Total traffic surcharge (Rs) for driving this route once."""
        return self.distance_km * self.fuel_surcharge_per_km

    def __repr__(self) -> str:
        return f"Route({self.route_id}, {self.distance_km:g}km, {self.traffic_level.value})"


@dataclass
class Order:
    """
    Represents a delivery order on a route.

    Attributes:
        order_id: Unique identifier
        value_rs: Order value in Rs (>= 0)
        route_id: Reference to the route the order travels on
        status: Current lifecycle state
        assigned_route: The route, when pre-joined by the data source
        assigned_driver_id: Driver chosen by the allocator

    Computed Fields (written only by the KPI calculator):
        actual_delivery_time_minutes, expected_delivery_time, is_on_time,
        profit, fuel_cost, base_fuel_cost, traffic_surcharge, penalty, bonus
    """
    order_id: str
    value_rs: float
    route_id: str
    status: OrderStatus = OrderStatus.PENDING
    assigned_route: Optional[Route] = None
    assigned_driver_id: Optional[str] = None

    # Computed by kpi.calculate_order
    actual_delivery_time_minutes: Optional[int] = None
    expected_delivery_time: Optional[float] = None
    is_on_time: Optional[bool] = None
    profit: float = 0.0
    fuel_cost: float = 0.0
    base_fuel_cost: float = 0.0
    traffic_surcharge: float = 0.0
    penalty: float = 0.0
    bonus: float = 0.0

    def __post_init__(self) -> None:
        if not isinstance(self.status, OrderStatus):
            try:
                self.status = OrderStatus(self.status)
            except ValueError:
                raise InvalidRunRequest(
                    f"Order status must be one of pending, in-progress, delivered, late, "
                    f"got {self.status!r}",
                    field="status",
                )
        if not math.isfinite(self.value_rs):
            raise InvalidRunRequest("Order value must be a finite number", field="value_rs")
        if self.value_rs < 0:
            raise InvalidRunRequest("Order value cannot be negative", field="value_rs")
        if not self.route_id:
            raise InvalidRunRequest("Assigned route is required", field="route_id")

    @property
    def profit_margin(self) -> float:
        """Profit as a percentage of order value (0 for zero-value orders)."""
        if self.value_rs == 0:
            return 0.0
        return round_half_up(self.profit / self.value_rs * 100, 2)

    @property
    def delivery_status(self) -> str:
        if self.status is OrderStatus.LATE:
            return "Late"
        if self.is_on_time is True:
            return "On Time"
        if self.status is OrderStatus.DELIVERED:
            return "Delivered"
        return "Pending"

    def to_dict(self) -> Dict[str, Any]:
        """Flatten the order for reporting (one row per order)."""
        return {
            "order_id": self.order_id,
            "route_id": self.route_id,
            "assigned_driver_id": self.assigned_driver_id,
            "value_rs": self.value_rs,
            "status": self.status.value,
            "is_on_time": self.is_on_time,
            "actual_delivery_time_minutes": self.actual_delivery_time_minutes,
            "expected_delivery_time": self.expected_delivery_time,
            "base_fuel_cost": self.base_fuel_cost,
            "traffic_surcharge": self.traffic_surcharge,
            "fuel_cost": self.fuel_cost,
            "penalty": self.penalty,
            "bonus": self.bonus,
            "profit": self.profit,
            "profit_margin_pct": self.profit_margin,
        }

    def __repr__(self) -> str:
        return f"Order({self.order_id}, {self.status.value})"


@dataclass(frozen=True)
class RunRequest:
    """
    Parameters of one simulation run.

    Attributes:
        available_drivers: Drivers to use, 1 - 100
        route_start_time: 24-hour 'HH:MM'
        max_hours_per_day: Working hours per driver, 1 - 24
    """
    available_drivers: int
    route_start_time: str = config.DEFAULT_ROUTE_START_TIME
    max_hours_per_day: float = config.DEFAULT_MAX_HOURS_PER_DAY

    def __post_init__(self) -> None:
        if isinstance(self.available_drivers, bool) or not isinstance(self.available_drivers, int):
            raise InvalidRunRequest(
                "Number of available drivers must be an integer",
                field="available_drivers",
            )
        if self.available_drivers < config.MIN_AVAILABLE_DRIVERS:
            raise InvalidRunRequest("At least 1 driver is required", field="available_drivers")
        if self.available_drivers > config.MAX_AVAILABLE_DRIVERS:
            raise InvalidRunRequest(
                f"Cannot exceed {config.MAX_AVAILABLE_DRIVERS} drivers",
                field="available_drivers",
            )
        try:
            parse_clock_time(self.route_start_time)
        except ValueError as e:
            raise InvalidRunRequest(str(e), field="route_start_time")
        if not config.MIN_HOURS_PER_DAY <= self.max_hours_per_day <= config.MAX_HOURS_PER_DAY:
            raise InvalidRunRequest(
                f"Max hours per day must be between {config.MIN_HOURS_PER_DAY} "
                f"and {config.MAX_HOURS_PER_DAY}",
                field="max_hours_per_day",
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "availableDrivers": self.available_drivers,
            "routeStartTime": self.route_start_time,
            "maxHoursPerDay": self.max_hours_per_day,
        }


@dataclass(frozen=True)
class UnresolvedReference:
    """
    An order skipped by the KPI calculator.

    Attributes:
        order_id: The skipped order
        missing: 'route' or 'driver'
        reference: The id that could not be resolved (None if never set)
    """
    order_id: str
    missing: str
    reference: Optional[str]

    def __str__(self) -> str:
        return f"Order {self.order_id}: unresolved {self.missing} {self.reference!r}"


@dataclass(frozen=True)
class KpiSummary:
    """
    Aggregate KPIs of one simulation run.

    Currency totals and ratios are rounded to 2 decimals. Ratios whose
    denominator is zero are reported as 0.0.
    """
    total_profit: float = 0.0
    efficiency_score: float = 0.0
    on_time_deliveries: int = 0
    late_deliveries: int = 0
    total_deliveries: int = 0
    total_fuel_cost: float = 0.0
    base_fuel_cost: float = 0.0
    traffic_surcharge: float = 0.0
    total_penalties: float = 0.0
    total_bonuses: float = 0.0
    average_delivery_time: float = 0.0
    fuel_efficiency: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire format consumed by dashboards and history records."""
        return {
            "totalProfit": self.total_profit,
            "efficiencyScore": self.efficiency_score,
            "onTimeDeliveries": self.on_time_deliveries,
            "lateDeliveries": self.late_deliveries,
            "totalDeliveries": self.total_deliveries,
            "totalFuelCost": self.total_fuel_cost,
            "baseFuelCost": self.base_fuel_cost,
            "trafficSurcharge": self.traffic_surcharge,
            "totalPenalties": self.total_penalties,
            "totalBonuses": self.total_bonuses,
            "averageDeliveryTime": self.average_delivery_time,
            "fuelEfficiency": self.fuel_efficiency,
        }


@dataclass(frozen=True)
class RunMetadata:
    drivers_used: int
    orders_processed: int
    routes_used: int
    timestamp: datetime
    input_parameters: RunRequest

    def to_dict(self) -> Dict[str, Any]:
        return {
            "driversUsed": self.drivers_used,
            "ordersProcessed": self.orders_processed,
            "routesUsed": self.routes_used,
            "timestamp": self.timestamp.isoformat(),
            "inputParameters": self.input_parameters.to_dict(),
        }


@dataclass
class SimulationResult:
    """
    Container for the outcome of one simulation run.

    The caller owns persistence: `orders` holds the mutated order objects
    to save, `kpis` + `metadata` form the historical run record.
    """
    kpis: KpiSummary
    metadata: RunMetadata
    orders: List[Order] = field(default_factory=list)
    warnings: List[UnresolvedReference] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary."""
        return {
            "kpis": self.kpis.to_dict(),
            "simulationData": self.metadata.to_dict(),
            "warnings": [str(w) for w in self.warnings],
        }

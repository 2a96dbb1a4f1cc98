# greencart-kpi/greencart/__init__.py

from .models import (
    Driver,
    Route,
    Order,
    RunRequest,
    KpiSummary,
    RunMetadata,
    SimulationResult,
    UnresolvedReference,
    TrafficLevel,
    OrderStatus,
    DriverStatus,
    EfficiencyRating,
)
from .errors import (
    SimulationError,
    InsufficientDrivers,
    InsufficientRoutes,
    NoActiveDrivers,
    NoActiveRoutes,
    NoPendingOrders,
    RequestedDriversExceedAvailable,
    InvalidRunRequest,
)
from .allocation import STRATEGIES, allocate, round_robin, select_drivers
from .kpi import aggregate, calculate_kpis, calculate_order, fleet_stats, summarize_orders
from .simulation import Simulation

__version__ = "1.0.0"
__author__ = "GreenCart Logistics Team"

__all__ = [
    # Models
    "Driver",
    "Route",
    "Order",
    "RunRequest",
    "KpiSummary",
    "RunMetadata",
    "SimulationResult",
    "UnresolvedReference",
    "TrafficLevel",
    "OrderStatus",
    "DriverStatus",
    "EfficiencyRating",
    # Errors
    "SimulationError",
    "InsufficientDrivers",
    "InsufficientRoutes",
    "NoActiveDrivers",
    "NoActiveRoutes",
    "NoPendingOrders",
    "RequestedDriversExceedAvailable",
    "InvalidRunRequest",
    # Core
    "Simulation",
    "STRATEGIES",
    # Functions
    "allocate",
    "round_robin",
    "select_drivers",
    "aggregate",
    "calculate_kpis",
    "calculate_order",
    "fleet_stats",
    "summarize_orders",
]

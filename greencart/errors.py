# greencart-kpi/greencart/errors.py
"""
Error kinds raised by a simulation run.

All precondition errors are raised before any order or driver is touched,
so a failed run never leaves partial state behind.
"""

from __future__ import annotations

from typing import Optional


class SimulationError(Exception):
    """Base class for every error a simulation run can raise."""


class InsufficientDrivers(SimulationError):
    """The active driver pool cannot cover the run."""


class NoActiveDrivers(InsufficientDrivers):
    def __init__(self) -> None:
        super().__init__("No available drivers found")


class RequestedDriversExceedAvailable(InsufficientDrivers):
    def __init__(self, requested: int, available: int) -> None:
        self.requested = requested
        self.available = available
        super().__init__(
            f"Only {available} drivers available, but {requested} requested"
        )


class InsufficientRoutes(SimulationError):
    """No route can carry the run's orders."""


class NoActiveRoutes(InsufficientRoutes):
    def __init__(self) -> None:
        super().__init__("No available routes found")


class NoPendingOrders(SimulationError):
    def __init__(self) -> None:
        super().__init__("No pending orders found to process")


class InvalidRunRequest(SimulationError, ValueError):
    """A run request or input record failed validation."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message)

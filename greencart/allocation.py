# greencart-kpi/greencart/allocation.py
"""
Order-to-driver allocation for the GreenCart delivery KPI engine.

An assignment strategy is any callable taking the orders and the selected
drivers and returning one driver per order, in order position. Strategies
are looked up by name from STRATEGIES, so a fairness or distance aware
allocator can be registered without touching the KPI calculator.

Available strategies:

1. **round_robin**: order i goes to drivers[i % len(drivers)].
   Deterministic and stable under re-runs with identical inputs.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Sequence, Union

from . import config
from .errors import NoActiveDrivers, RequestedDriversExceedAvailable
from .models import Driver, Order

logger = logging.getLogger(__name__)

AssignmentStrategy = Callable[[Sequence[Order], Sequence[Driver]], List[Driver]]


def round_robin(orders: Sequence[Order], drivers: Sequence[Driver]) -> List[Driver]:
    """
    Spread orders across drivers in turn.

    Args:
        orders: Orders in the sequence they should be assigned
        drivers: Drivers in rotation order

    Returns:
        List of drivers, one per order
    """
    if not drivers:
        raise NoActiveDrivers()
    return [drivers[i % len(drivers)] for i in range(len(orders))]


STRATEGIES: Dict[str, AssignmentStrategy] = {
    "round_robin": round_robin,
}


def get_strategy(strategy: Union[str, AssignmentStrategy]) -> AssignmentStrategy:
    """
    Resolve a strategy name or pass a callable through.

    Raises:
        ValueError: If the name is not registered
    """
    if callable(strategy):
        return strategy
    try:
        return STRATEGIES[strategy]
    except KeyError:
        raise ValueError(
            f"Unknown assignment strategy '{strategy}'. "
            f"Available strategies: {', '.join(STRATEGIES)}"
        )


def select_drivers(active_drivers: Sequence[Driver], available_drivers: int) -> List[Driver]:
    """
    Pick the drivers a run will use.

    The pool is truncated to the requested count, never expanded.

    Raises:
        NoActiveDrivers: If the pool is empty
        RequestedDriversExceedAvailable: If more drivers are requested than exist
    """
    if not active_drivers:
        raise NoActiveDrivers()
    if available_drivers > len(active_drivers):
        raise RequestedDriversExceedAvailable(available_drivers, len(active_drivers))
    return list(active_drivers[:available_drivers])


def allocate(
    orders: Sequence[Order],
    drivers: Sequence[Driver],
    strategy: Union[str, AssignmentStrategy] = config.DEFAULT_STRATEGY,
) -> List[Order]:
    """
    Assign a driver to every order.

    Sets `order.assigned_driver_id` on each order; drivers are not modified.

    Args:
        orders: Pending orders with their routes resolved
        drivers: Drivers selected for the run
        strategy: Strategy name from STRATEGIES or an AssignmentStrategy callable

    Returns:
        The same orders, now carrying a driver id

    Raises:
        ValueError: If the strategy does not return one driver per order
    """
    assign = get_strategy(strategy)
    assignment = assign(orders, drivers)
    if len(assignment) != len(orders):
        raise ValueError(
            f"Assignment strategy returned {len(assignment)} drivers for {len(orders)} orders"
        )

    for order, driver in zip(orders, assignment):
        order.assigned_driver_id = driver.driver_id
        logger.debug(f"Assigned {order.order_id} to {driver.driver_id}")

    logger.info(f"Allocated {len(orders)} orders across {len(drivers)} drivers")
    return list(orders)

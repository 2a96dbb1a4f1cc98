# greencart-kpi/greencart/rules.py
"""
Company rules applied to a single delivery.

Each rule is a pure function over driver/route snapshots so the KPI
calculator can compose them in a fixed order:

1. Fuel cost (Rule 4): base cost per km plus a High traffic surcharge
2. Delivery time (Rule 2): fatigued drivers are 30% slower
3. On-time check (Rule 1): within base time + 10 minutes
4. Penalty (Rule 1): flat charge for late deliveries
5. Bonus (Rule 3): 10% of value for on-time orders above Rs 1000
6. Profit (Rule 5): value - penalty + bonus - fuel cost

Nothing in this module rounds; rounding is applied once, when the
calculator writes results back to the order.
"""

from __future__ import annotations

import dataclasses
from typing import NamedTuple

from . import config
from .models import Driver, Route


class FuelCost(NamedTuple):
    """Fuel cost breakdown for one trip over a route, in Rs."""
    base: float
    surcharge: float
    total: float


# =============================================================================
# DRIVER FATIGUE (RULE 2)
# =============================================================================

def is_fatigued(driver: Driver) -> bool:
    """A driver is fatigued once the current shift exceeds FATIGUE_SHIFT_HOURS."""
    return driver.current_shift_hours > config.FATIGUE_SHIFT_HOURS


def overtime_hours(driver: Driver) -> float:
    return max(0.0, driver.current_shift_hours - config.FATIGUE_SHIFT_HOURS)


def refresh_fatigue(driver: Driver) -> Driver:
    """
    Return a copy of the driver with fatigue fields recomputed.

    The input driver is left untouched, so a run can derive fatigue from
    the latest shift hours without mutating the caller's records.
    """
    return dataclasses.replace(
        driver,
        is_fatigued=is_fatigued(driver),
        overtime_hours=overtime_hours(driver),
    )


def fatigue_speed_reduction(driver: Driver) -> float:
    """
    Get the speed reduction for a driver.

    The stored flag and the live shift hours are both checked, so a driver
    whose fatigue fields were never refreshed is still slowed down.

    Returns:
        FATIGUE_SPEED_REDUCTION (0.3) if fatigued, else 0.0
    """
    if driver.is_fatigued or is_fatigued(driver):
        return config.FATIGUE_SPEED_REDUCTION
    return 0.0


# =============================================================================
# FUEL (RULE 4)
# =============================================================================

def fuel_cost(route: Route) -> FuelCost:
    """
    Calculate fuel cost for a route.

    Args:
        route: The route being driven

    Returns:
        FuelCost(base, surcharge, total) where base = 5/km and
        surcharge = 2/km on High traffic routes only
    """
    base = route.distance_km * config.BASE_FUEL_COST_PER_KM
    surcharge = route.fuel_surcharge
    return FuelCost(base=base, surcharge=surcharge, total=base + surcharge)


# =============================================================================
# TIMING (RULES 1 AND 2)
# =============================================================================

def delivery_time(route: Route, driver: Driver) -> float:
    """Route base time, stretched by the driver's fatigue speed reduction."""
    minutes = route.base_time_minutes
    reduction = fatigue_speed_reduction(driver)
    if reduction > 0:
        minutes *= 1 + reduction
    return minutes


def expected_delivery_time(route: Route) -> float:
    return route.base_time_minutes + config.ON_TIME_GRACE_MINUTES


def is_on_time(actual_minutes: float, expected_minutes: float) -> bool:
    return actual_minutes <= expected_minutes


# =============================================================================
# MONEY (RULES 1, 3 AND 5)
# =============================================================================

def late_penalty(on_time: bool) -> float:
    return 0.0 if on_time else config.LATE_DELIVERY_PENALTY


def high_value_bonus(value_rs: float, on_time: bool) -> float:
    """10% of order value, only for on-time orders strictly above the threshold."""
    if on_time and value_rs > config.HIGH_VALUE_THRESHOLD:
        return value_rs * config.HIGH_VALUE_BONUS_RATE
    return 0.0


def order_profit(value_rs: float, penalty: float, bonus: float, fuel: float) -> float:
    return value_rs - penalty + bonus - fuel

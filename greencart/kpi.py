# greencart-kpi/greencart/kpi.py
"""
KPI Calculator for the GreenCart delivery KPI engine.

This module turns driver-assigned orders into per-order results and a
run-level KpiSummary. It is the single source of truth for KPI numbers:
dashboards re-aggregate stored order results through `summarize_orders`
instead of re-deriving profit on their own.

Per-order pipeline (order matters for reproducibility):
fuel cost -> delivery time -> on-time check -> penalty -> bonus -> profit
-> rounding -> write back to the order.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from . import rules
from .models import (
    Driver,
    KpiSummary,
    Order,
    OrderStatus,
    Route,
    UnresolvedReference,
)
from .utils import round_currency, round_half_up, safe_ratio

logger = logging.getLogger(__name__)


class OrderOutcome(NamedTuple):
    """
    Unrounded results for one processed order.

    Totals are summed from these raw values and rounded once, so
    per-order rounding never accumulates into the run totals.
    """
    order_id: str
    is_on_time: bool
    delivery_time_minutes: int
    base_fuel_cost: float
    traffic_surcharge: float
    fuel_cost: float
    penalty: float
    bonus: float
    profit: float


def calculate_order(order: Order, route: Route, driver: Driver) -> OrderOutcome:
    """
    Apply the company rules to one order and write the results back.

    Args:
        order: The order to process (mutated in place)
        route: The order's resolved route
        driver: The driver assigned to the order

    Returns:
        The unrounded outcome for aggregation
    """
    fuel = rules.fuel_cost(route)

    minutes = rules.delivery_time(route, driver)
    expected = rules.expected_delivery_time(route)
    on_time = rules.is_on_time(minutes, expected)

    penalty = rules.late_penalty(on_time)
    bonus = rules.high_value_bonus(order.value_rs, on_time)
    profit = rules.order_profit(order.value_rs, penalty, bonus, fuel.total)

    outcome = OrderOutcome(
        order_id=order.order_id,
        is_on_time=on_time,
        delivery_time_minutes=int(round_half_up(minutes)),
        base_fuel_cost=fuel.base,
        traffic_surcharge=fuel.surcharge,
        fuel_cost=fuel.total,
        penalty=penalty,
        bonus=bonus,
        profit=profit,
    )

    order.is_on_time = on_time
    order.actual_delivery_time_minutes = outcome.delivery_time_minutes
    order.expected_delivery_time = expected
    order.profit = round_currency(profit)
    order.fuel_cost = round_currency(fuel.total)
    order.base_fuel_cost = round_currency(fuel.base)
    order.traffic_surcharge = round_currency(fuel.surcharge)
    order.penalty = round_currency(penalty)
    order.bonus = round_currency(bonus)
    order.status = OrderStatus.DELIVERED if on_time else OrderStatus.LATE

    logger.debug(
        f"{order.order_id} on {route.route_id} by {driver.driver_id}: "
        f"{outcome.delivery_time_minutes}/{expected:g} min, profit {order.profit:.2f}"
    )
    return outcome


def aggregate(outcomes: Sequence[OrderOutcome]) -> KpiSummary:
    """
    Aggregate per-order outcomes into run KPIs.

    Zero guards: efficiency score, average delivery time and fuel
    efficiency are 0.0 when there is nothing to divide by.

    Args:
        outcomes: One entry per processed order

    Returns:
        KpiSummary with currency totals and ratios rounded to 2 decimals
    """
    total_deliveries = len(outcomes)
    on_time_deliveries = sum(1 for o in outcomes if o.is_on_time)
    late_deliveries = total_deliveries - on_time_deliveries

    total_fuel_cost = sum(o.fuel_cost for o in outcomes)
    total_minutes = sum(o.delivery_time_minutes for o in outcomes)

    return KpiSummary(
        total_profit=round_currency(sum(o.profit for o in outcomes)),
        efficiency_score=round_currency(safe_ratio(on_time_deliveries, total_deliveries) * 100),
        on_time_deliveries=on_time_deliveries,
        late_deliveries=late_deliveries,
        total_deliveries=total_deliveries,
        total_fuel_cost=round_currency(total_fuel_cost),
        base_fuel_cost=round_currency(sum(o.base_fuel_cost for o in outcomes)),
        traffic_surcharge=round_currency(sum(o.traffic_surcharge for o in outcomes)),
        total_penalties=round_currency(sum(o.penalty for o in outcomes)),
        total_bonuses=round_currency(sum(o.bonus for o in outcomes)),
        average_delivery_time=round_currency(safe_ratio(total_minutes, total_deliveries)),
        # deliveries per rupee of fuel
        fuel_efficiency=round_currency(safe_ratio(total_deliveries, total_fuel_cost)),
    )


def _resolve(
    order: Order,
    routes_by_id: Dict[str, Route],
    drivers_by_id: Dict[str, Driver],
) -> Tuple[Optional[Route], Optional[Driver], Optional[UnresolvedReference]]:
    route = routes_by_id.get(order.route_id) or order.assigned_route
    if route is None:
        return None, None, UnresolvedReference(order.order_id, "route", order.route_id)

    driver = drivers_by_id.get(order.assigned_driver_id) if order.assigned_driver_id else None
    if driver is None:
        return route, None, UnresolvedReference(order.order_id, "driver", order.assigned_driver_id)

    return route, driver, None


def calculate_kpis(
    orders: Iterable[Order],
    drivers: Sequence[Driver],
    routes: Sequence[Route],
) -> Tuple[KpiSummary, List[UnresolvedReference]]:
    """
    Calculate per-order results and the run summary.

    Routes are looked up in the run's route list first and fall back to the
    route pre-joined onto the order. Orders whose route or driver cannot be
    resolved are left untouched, excluded from every aggregate and reported
    as warnings.

    Args:
        orders: Driver-assigned orders (mutated in place)
        drivers: Drivers used by the run
        routes: Routes available to the run

    Returns:
        Tuple of (KpiSummary, list of UnresolvedReference warnings)
    """
    routes_by_id = {r.route_id: r for r in routes}
    drivers_by_id = {d.driver_id: d for d in drivers}

    outcomes: List[OrderOutcome] = []
    warnings: List[UnresolvedReference] = []

    for order in orders:
        route, driver, unresolved = _resolve(order, routes_by_id, drivers_by_id)
        if unresolved is not None:
            logger.warning(f"Skipping order: {unresolved}")
            warnings.append(unresolved)
            continue
        outcomes.append(calculate_order(order, route, driver))

    summary = aggregate(outcomes)
    logger.info(
        f"KPIs: {summary.total_deliveries} deliveries, "
        f"{summary.efficiency_score:.2f}% on time, profit {summary.total_profit:.2f}"
    )
    return summary, warnings


def summarize_orders(orders: Iterable[Order]) -> KpiSummary:
    """
    Re-aggregate KPIs from orders a previous run already processed.

    Uses the stored per-order results, so the numbers match the run that
    produced them up to per-order rounding. Orders never processed (still
    pending, or with no on-time flag) are ignored.
    """
    outcomes = [
        OrderOutcome(
            order_id=o.order_id,
            is_on_time=bool(o.is_on_time),
            delivery_time_minutes=o.actual_delivery_time_minutes or 0,
            base_fuel_cost=o.base_fuel_cost,
            traffic_surcharge=o.traffic_surcharge,
            fuel_cost=o.fuel_cost,
            penalty=o.penalty,
            bonus=o.bonus,
            profit=o.profit,
        )
        for o in orders
        if o.status in (OrderStatus.DELIVERED, OrderStatus.LATE) and o.is_on_time is not None
    ]
    return aggregate(outcomes)


def fleet_stats(
    drivers: Sequence[Driver],
    routes: Sequence[Route],
    orders: Sequence[Order],
) -> Dict[str, Dict[str, int]]:
    """
    Count drivers, routes and orders by state for the dashboard.

    Returns:
        Nested dictionary with 'drivers', 'routes' and 'orders' sections
    """
    total_drivers = len(drivers)
    active_drivers = sum(1 for d in drivers if d.is_active)
    total_orders = len(orders)
    pending_orders = sum(1 for o in orders if o.status is OrderStatus.PENDING)

    return {
        "drivers": {
            "total": total_drivers,
            "active": active_drivers,
            "inactive": total_drivers - active_drivers,
            "fatigued": sum(1 for d in drivers if rules.is_fatigued(d)),
            "overtime": sum(1 for d in drivers if rules.overtime_hours(d) > 0),
        },
        "routes": {
            "total": len(routes),
            "active": sum(1 for r in routes if r.is_active),
            "high_traffic": sum(1 for r in routes if r.is_high_traffic),
        },
        "orders": {
            "total": total_orders,
            "pending": pending_orders,
            "completed": total_orders - pending_orders,
            "late": sum(1 for o in orders if o.status is OrderStatus.LATE),
            "on_time": sum(1 for o in orders if o.is_on_time is True),
        },
    }

import pytest

from greencart.errors import InvalidRunRequest
from greencart.models import (
    DriverStatus,
    EfficiencyRating,
    KpiSummary,
    OrderStatus,
    RunRequest,
    TrafficLevel,
)


def test_driver_status_precedence(make_driver):
    assert make_driver(shift=12, is_active=False).status is DriverStatus.INACTIVE
    assert make_driver(shift=12, is_fatigued=True).status is DriverStatus.FATIGUED
    assert make_driver(shift=9).status is DriverStatus.OVERTIME
    assert make_driver(shift=8).status is DriverStatus.ACTIVE


@pytest.mark.parametrize("shift, rating", [
    (0, EfficiencyRating.HIGH),
    (5.9, EfficiencyRating.HIGH),
    (6, EfficiencyRating.NORMAL),
    (8, EfficiencyRating.NORMAL),
    (8.5, EfficiencyRating.REDUCED),
])
def test_driver_efficiency_rating(make_driver, shift, rating):
    assert make_driver(shift=shift).efficiency_rating is rating


@pytest.mark.parametrize("kwargs", [
    {"shift": -1},
    {"shift": 24.5},
    {"past_7_day_work_hours": -3},
    {"name": "  "},
])
def test_driver_validation(make_driver, kwargs):
    with pytest.raises(InvalidRunRequest):
        make_driver(**kwargs)


def test_route_coerces_traffic_level(make_route):
    route = make_route(traffic="Medium")
    assert route.traffic_level is TrafficLevel.MEDIUM
    assert route.traffic_multiplier == 1.2


@pytest.mark.parametrize("traffic, multiplier, surcharge", [
    ("Low", 1.0, 0),
    ("Medium", 1.2, 0),
    ("High", 1.5, 40),
])
def test_route_traffic_properties(make_route, traffic, multiplier, surcharge):
    route = make_route(distance=20, traffic=traffic)
    assert route.traffic_multiplier == multiplier
    assert route.fuel_surcharge == surcharge


@pytest.mark.parametrize("kwargs, field", [
    ({"traffic": "Gridlock"}, "traffic_level"),
    ({"distance": -1}, "distance_km"),
    ({"base_time": 0.5}, "base_time_minutes"),
])
def test_route_validation(make_route, kwargs, field):
    with pytest.raises(InvalidRunRequest) as exc:
        make_route(**kwargs)
    assert exc.value.field == field


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
@pytest.mark.parametrize("kwarg, field", [
    ("distance", "distance_km"),
    ("base_time", "base_time_minutes"),
])
def test_route_rejects_non_finite_numbers(make_route, kwarg, field, bad):
    with pytest.raises(InvalidRunRequest) as exc:
        make_route(**{kwarg: bad})
    assert exc.value.field == field


@pytest.mark.parametrize("bad", [float("nan"), float("inf")])
def test_order_rejects_non_finite_value(make_order, bad):
    with pytest.raises(InvalidRunRequest) as exc:
        make_order(value=bad)
    assert exc.value.field == "value_rs"


def test_order_rejects_unknown_status(make_order):
    with pytest.raises(InvalidRunRequest) as exc:
        make_order(status="bogus")
    assert exc.value.field == "status"


def test_order_defaults(make_order):
    order = make_order()
    assert order.status is OrderStatus.PENDING
    assert order.delivery_status == "Pending"
    assert order.profit_margin == 0


def test_order_status_from_string(make_order):
    assert make_order(status="in-progress").status is OrderStatus.IN_PROGRESS


def test_order_validation(make_order):
    with pytest.raises(ValueError):
        make_order(value=-5)


def test_order_profit_margin(make_order):
    assert make_order(value=1500, profit=600).profit_margin == 40.0
    assert make_order(value=0, profit=-20).profit_margin == 0


@pytest.mark.parametrize("status, is_on_time, label", [
    (OrderStatus.LATE, False, "Late"),
    (OrderStatus.DELIVERED, True, "On Time"),
    (OrderStatus.DELIVERED, None, "Delivered"),
    (OrderStatus.IN_PROGRESS, None, "Pending"),
])
def test_order_delivery_status(make_order, status, is_on_time, label):
    assert make_order(status=status, is_on_time=is_on_time).delivery_status == label


def test_run_request_accepts_single_digit_hour():
    request = RunRequest(available_drivers=3, route_start_time="9:30", max_hours_per_day=8)
    assert request.to_dict() == {
        "availableDrivers": 3,
        "routeStartTime": "9:30",
        "maxHoursPerDay": 8,
    }


@pytest.mark.parametrize("kwargs, field", [
    ({"available_drivers": 0}, "available_drivers"),
    ({"available_drivers": 101}, "available_drivers"),
    ({"available_drivers": 2.5}, "available_drivers"),
    ({"available_drivers": True}, "available_drivers"),
    ({"available_drivers": 2, "route_start_time": "24:00"}, "route_start_time"),
    ({"available_drivers": 2, "route_start_time": "9am"}, "route_start_time"),
    ({"available_drivers": 2, "max_hours_per_day": 0}, "max_hours_per_day"),
    ({"available_drivers": 2, "max_hours_per_day": 25}, "max_hours_per_day"),
])
def test_run_request_validation(kwargs, field):
    with pytest.raises(InvalidRunRequest) as exc:
        RunRequest(**kwargs)
    assert exc.value.field == field


def test_kpi_summary_wire_names():
    assert list(KpiSummary().to_dict()) == [
        "totalProfit",
        "efficiencyScore",
        "onTimeDeliveries",
        "lateDeliveries",
        "totalDeliveries",
        "totalFuelCost",
        "baseFuelCost",
        "trafficSurcharge",
        "totalPenalties",
        "totalBonuses",
        "averageDeliveryTime",
        "fuelEfficiency",
    ]

import os

import pytest

from greencart.models import Driver, Order, Route

DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "data")


@pytest.fixture
def data_dir():
    return DATA_DIR


@pytest.fixture
def make_driver():
    def _make(driver_id="D1", shift=6.0, **kwargs):
        kwargs.setdefault("name", f"Driver {driver_id}")
        return Driver(driver_id=driver_id, current_shift_hours=shift, **kwargs)
    return _make


@pytest.fixture
def make_route():
    def _make(route_id="RT001", distance=150.0, traffic="High", base_time=180.0, **kwargs):
        return Route(
            route_id=route_id,
            distance_km=distance,
            traffic_level=traffic,
            base_time_minutes=base_time,
            **kwargs,
        )
    return _make


@pytest.fixture
def make_order():
    def _make(order_id="ORD001", value=1500.0, route=None, route_id=None, **kwargs):
        return Order(
            order_id=order_id,
            value_rs=value,
            route_id=route_id or (route.route_id if route else "RT001"),
            assigned_route=route,
            **kwargs,
        )
    return _make


@pytest.fixture
def highway(make_route):
    """150 km High traffic route, 180 minutes base time."""
    return make_route("RT001", 150, "High", 180)


@pytest.fixture
def city_route(make_route):
    """30 km Low traffic route, 45 minutes base time."""
    return make_route("RT002", 30, "Low", 45)


@pytest.fixture
def rested_driver(make_driver):
    return make_driver("D1", shift=6)


@pytest.fixture
def tired_driver(make_driver):
    return make_driver("D2", shift=10)

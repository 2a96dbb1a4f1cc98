import inspect

import pytest

from greencart import config
from greencart.allocation import allocate, get_strategy, round_robin, select_drivers
from greencart.errors import (
    InsufficientDrivers,
    NoActiveDrivers,
    RequestedDriversExceedAvailable,
)
from greencart.simulation import Simulation


@pytest.fixture
def drivers(make_driver):
    return [make_driver(f"D{i}") for i in range(1, 4)]


@pytest.fixture
def orders(make_order):
    return [make_order(f"ORD00{i}") for i in range(1, 6)]


def test_round_robin_wraps(drivers, orders):
    assigned = round_robin(orders, drivers)
    assert [d.driver_id for d in assigned] == ["D1", "D2", "D3", "D1", "D2"]


def test_round_robin_requires_drivers(orders):
    with pytest.raises(NoActiveDrivers):
        round_robin(orders, [])


def test_allocate_sets_driver_ids(drivers, orders):
    allocate(orders, drivers)
    assert [o.assigned_driver_id for o in orders] == ["D1", "D2", "D3", "D1", "D2"]


def test_allocate_is_deterministic(drivers, make_order):
    first = [make_order(f"ORD{i}") for i in range(7)]
    second = [make_order(f"ORD{i}") for i in range(7)]

    allocate(first, drivers)
    allocate(second, drivers)

    assert [o.assigned_driver_id for o in first] == [o.assigned_driver_id for o in second]


def test_allocate_leaves_drivers_untouched(drivers, orders):
    before = [(d.driver_id, d.current_shift_hours, d.is_fatigued) for d in drivers]
    allocate(orders, drivers)
    assert [(d.driver_id, d.current_shift_hours, d.is_fatigued) for d in drivers] == before


def test_allocate_accepts_custom_strategy(drivers, orders):
    def last_driver_only(orders, drivers):
        return [drivers[-1]] * len(orders)

    allocate(orders, drivers, strategy=last_driver_only)
    assert {o.assigned_driver_id for o in orders} == {"D3"}


def test_allocate_rejects_short_assignment(drivers, orders):
    with pytest.raises(ValueError, match="returned 1 drivers for 5 orders"):
        allocate(orders, drivers, strategy=lambda o, d: d[:1])


def test_unknown_strategy():
    with pytest.raises(ValueError, match="Unknown assignment strategy"):
        get_strategy("nearest_first")


def test_select_drivers_truncates(make_driver):
    pool = [make_driver(f"D{i}") for i in range(5)]
    selected = select_drivers(pool, 2)
    assert [d.driver_id for d in selected] == ["D0", "D1"]


def test_select_drivers_empty_pool():
    with pytest.raises(NoActiveDrivers):
        select_drivers([], 1)


def test_select_drivers_request_exceeds_pool(drivers):
    with pytest.raises(RequestedDriversExceedAvailable) as exc:
        select_drivers(drivers, 4)
    assert isinstance(exc.value, InsufficientDrivers)
    assert str(exc.value) == "Only 3 drivers available, but 4 requested"


def test_default_strategy_comes_from_config():
    assert inspect.signature(allocate).parameters["strategy"].default == config.DEFAULT_STRATEGY
    assert inspect.signature(Simulation.run).parameters["strategy"].default == config.DEFAULT_STRATEGY
    assert get_strategy(config.DEFAULT_STRATEGY) is round_robin

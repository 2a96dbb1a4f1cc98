import json

import pandas as pd
import pytest

from greencart.models import RunRequest
from greencart.report import ORDER_COLUMNS, driver_breakdown, orders_frame, write_report
from greencart.simulation import Simulation


@pytest.fixture
def result(data_dir):
    sim = Simulation.from_directory(data_dir)
    return sim.run(RunRequest(available_drivers=5))


def test_orders_frame(result):
    df = orders_frame(result.orders)
    assert list(df.columns) == ORDER_COLUMNS
    assert len(df) == 12
    first = df.iloc[0]
    assert first["order_id"] == "ORD001"
    assert first["assigned_driver_id"] == "DRV001"
    assert first["profit"] == 1257.5


def test_driver_breakdown(result):
    breakdown = driver_breakdown(result.orders)

    assert list(breakdown.index) == ["DRV001", "DRV002", "DRV003", "DRV004", "DRV005"]
    assert breakdown.loc["DRV001", "deliveries"] == 3
    assert breakdown.loc["DRV002", "late"] == 2
    assert breakdown.loc["DRV002", "on_time"] == 1
    assert breakdown["deliveries"].sum() == 12


def test_driver_breakdown_without_processed_orders(make_order):
    assert driver_breakdown([make_order()]).empty


def test_write_report(result, tmp_path):
    paths = write_report(result, tmp_path / "reports")

    orders = pd.read_csv(paths["orders"])
    assert len(orders) == 12
    assert set(orders["status"]) == {"delivered", "late"}

    with open(paths["summary"], encoding="utf-8") as f:
        summary = json.load(f)
    assert summary["kpis"]["totalDeliveries"] == 12
    assert summary["kpis"]["efficiencyScore"] == 75.0
    assert summary["simulationData"]["driversUsed"] == 5

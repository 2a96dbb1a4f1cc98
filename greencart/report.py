# greencart-kpi/greencart/report.py
"""
Report output for simulation runs.

Writes the per-order results as CSV and the run record as strict JSON
(NaN/Inf become null).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Sequence, Union

import pandas as pd

from .models import Order, SimulationResult
from .utils import sanitize_for_json

ORDER_COLUMNS: List[str] = [
    "order_id",
    "route_id",
    "assigned_driver_id",
    "value_rs",
    "status",
    "is_on_time",
    "actual_delivery_time_minutes",
    "expected_delivery_time",
    "base_fuel_cost",
    "traffic_surcharge",
    "fuel_cost",
    "penalty",
    "bonus",
    "profit",
    "profit_margin_pct",
]


def orders_frame(orders: Sequence[Order]) -> pd.DataFrame:
    """One row per order, columns in ORDER_COLUMNS order."""
    return pd.DataFrame([o.to_dict() for o in orders], columns=ORDER_COLUMNS)


def driver_breakdown(orders: Sequence[Order]) -> pd.DataFrame:
    """
    Per-driver totals over processed orders.

    Returns:
        DataFrame indexed by driver id with deliveries, on_time, late,
        profit and fuel_cost columns
    """
    df = orders_frame(orders)
    df = df[df["assigned_driver_id"].notna() & df["is_on_time"].notna()]
    if df.empty:
        return pd.DataFrame(columns=["deliveries", "on_time", "late", "profit", "fuel_cost"])

    df = df.assign(on_time=df["is_on_time"].astype(bool))
    grouped = df.groupby("assigned_driver_id")
    out = pd.DataFrame({
        "deliveries": grouped["order_id"].count(),
        "on_time": grouped["on_time"].sum().astype(int),
        "profit": grouped["profit"].sum().round(2),
        "fuel_cost": grouped["fuel_cost"].sum().round(2),
    })
    out["late"] = out["deliveries"] - out["on_time"]
    return out[["deliveries", "on_time", "late", "profit", "fuel_cost"]]


def write_report(result: SimulationResult, out_dir: Union[str, Path]) -> Dict[str, Path]:
    """
    Write a run's orders CSV and summary JSON.

    Args:
        result: The run to report
        out_dir: Directory to write into (created if missing)

    Returns:
        Mapping of report name to written path
    """
    out_path = Path(out_dir)
    out_path.mkdir(parents=True, exist_ok=True)

    orders_csv = out_path / "orders.csv"
    orders_frame(result.orders).to_csv(orders_csv, index=False)

    summary_json = out_path / "summary.json"
    with open(summary_json, "w", encoding="utf-8") as f:
        json.dump(sanitize_for_json(result.to_dict()), f, indent=2)

    return {"orders": orders_csv, "summary": summary_json}

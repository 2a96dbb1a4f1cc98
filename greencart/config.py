# greencart-kpi/greencart/config.py
"""
Company rules and tunable parameters for the GreenCart delivery KPI engine.

Every rule the KPI calculator applies lives here as a named constant so that:
- Rule changes are a one-line edit
- Tests can reference the same numbers the engine uses
- The CLI and the engine never disagree on a threshold

All parameters are documented with their purpose and the company rule they
implement.
"""

from typing import Dict, Final

# =============================================================================
# COMPANY RULE 1: LATE DELIVERY PENALTY
# =============================================================================

ON_TIME_GRACE_MINUTES: Final[int] = 10
"""
Grace window added to a route's base time.
A delivery is on time when its (fatigue adjusted) time is within
base_time_minutes + ON_TIME_GRACE_MINUTES.
"""

LATE_DELIVERY_PENALTY: Final[float] = 50.0
"""Flat penalty (Rs) charged against profit for every late delivery."""

# =============================================================================
# COMPANY RULE 2: DRIVER FATIGUE
# =============================================================================

FATIGUE_SHIFT_HOURS: Final[float] = 8.0
"""Shift length (hours) after which a driver counts as fatigued and on overtime."""

FATIGUE_SPEED_REDUCTION: Final[float] = 0.3
"""
Speed reduction applied to fatigued drivers (0.0 - 1.0).
0.3 means deliveries take 30% longer than the route's base time.
"""

NORMAL_EFFICIENCY_SHIFT_HOURS: Final[float] = 6.0
"""Shift length from which a driver's efficiency rating drops from High to Normal."""

# =============================================================================
# COMPANY RULE 3: HIGH-VALUE BONUS
# =============================================================================

HIGH_VALUE_THRESHOLD: Final[float] = 1000.0
"""Order value (Rs) that must be strictly exceeded to earn the bonus."""

HIGH_VALUE_BONUS_RATE: Final[float] = 0.10
"""Bonus as a fraction of order value, paid only for on-time deliveries."""

# =============================================================================
# COMPANY RULE 4: FUEL COST
# =============================================================================

BASE_FUEL_COST_PER_KM: Final[float] = 5.0
"""Base fuel cost in Rs per km, charged on every route."""

HIGH_TRAFFIC_SURCHARGE_PER_KM: Final[float] = 2.0
"""Extra fuel cost in Rs per km on High traffic routes."""

# =============================================================================
# TRAFFIC
# =============================================================================

TRAFFIC_MULTIPLIERS: Final[Dict[str, float]] = {
    "High": 1.5,
    "Medium": 1.2,
    "Low": 1.0,
}
"""
Travel time multiplier per traffic level.
Reported on routes for planning; the KPI rules themselves do not apply it.
"""

# =============================================================================
# RUN REQUEST BOUNDS
# =============================================================================

MIN_AVAILABLE_DRIVERS: Final[int] = 1
MAX_AVAILABLE_DRIVERS: Final[int] = 100
"""Bounds on the number of drivers a single simulation run may request."""

MIN_HOURS_PER_DAY: Final[int] = 1
MAX_HOURS_PER_DAY: Final[int] = 24
"""Bounds on the per-driver working hours a run may configure."""

MAX_SHIFT_HOURS: Final[float] = 24.0
"""Upper bound for a driver's current shift hours."""

DEFAULT_ROUTE_START_TIME: str = "09:00"
"""Route start time used by the CLI when none is given (24-hour HH:MM)."""

DEFAULT_MAX_HOURS_PER_DAY: int = 8
"""Max hours per day used by the CLI when none is given."""

# =============================================================================
# OUTPUT
# =============================================================================

CURRENCY_DECIMALS: Final[int] = 2
"""Decimal places for every currency value and derived ratio (half-up rounding)."""

DEFAULT_STRATEGY: str = "round_robin"
"""Assignment strategy used when the caller does not pick one."""

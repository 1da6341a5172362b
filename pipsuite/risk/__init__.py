"""Position sizing and risk engine."""

from pipsuite.risk.calculator import (
    RISK_RECONCILIATION_TOLERANCE,
    apply_price_refresh,
    apply_quantity,
    apply_risk_percentage,
    classify_direction,
    classify_order_type,
    compute_derived_metrics,
    distance,
    is_calculator_active,
    reconcile_risk,
    solve_lots_from_risk,
    solve_risk_from_lots,
)

__all__ = [
    "RISK_RECONCILIATION_TOLERANCE",
    "apply_price_refresh",
    "apply_quantity",
    "apply_risk_percentage",
    "classify_direction",
    "classify_order_type",
    "compute_derived_metrics",
    "distance",
    "is_calculator_active",
    "reconcile_risk",
    "solve_lots_from_risk",
    "solve_risk_from_lots",
]

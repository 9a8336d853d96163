"""
services/subsidy.py
-------------------
Subsidised price calculation.

Precedence: a fixed subsidy amount > 0 always wins over the percentage.
Malformed configuration (percentage outside [0, 100], negative prices) is
clamped, never raised: `payable` is floored at zero and `covered` stays in
[0, base_price].

The same function prices the employee's preview and the revenue attributed
to the order later, so both always agree for a given lunch-option price.
"""

from typing import Optional

from mealstats.schemas.orders import SubsidyConfig
from mealstats.schemas.pricing import PriceBreakdown


def compute_price(base_price: float, subsidy: Optional[SubsidyConfig]) -> PriceBreakdown:
    base = max(0.0, float(base_price or 0))
    if subsidy is None:
        return PriceBreakdown(payable=base, covered=0.0)

    fixed = float(subsidy.fixed_amount or 0)
    if fixed > 0:
        covered = min(base, fixed)
        return PriceBreakdown(payable=base - covered, covered=covered)

    percentage = float(subsidy.percentage or 0)
    covered = base * (percentage / 100)
    payable = base * (1 - percentage / 100)
    return PriceBreakdown(
        payable=max(0.0, payable),
        covered=min(base, max(0.0, covered)),
    )

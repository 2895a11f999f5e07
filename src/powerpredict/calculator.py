"""Bill aggregation engine.

Turns an appliance list and :class:`BillSettings` into a
:class:`BillCalculation`. Everything here is a pure function: the same
inputs always produce an identical result, and nothing is cached between
calls.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from .exceptions import InvalidApplianceError, NoDataError
from .models import (
    Appliance,
    ApplianceUsage,
    BillCalculation,
    BillSettings,
    CategoryUsage,
)
from .rates import effective_rate

__author__ = "PowerPredict Developers"
__copyright__ = "PowerPredict Developers"
__license__ = "MIT"

_logger = logging.getLogger(__name__)

__all__ = [
    "BILLING_DAYS",
    "MONTHS_PER_YEAR",
    "CATEGORY_COLORS",
    "appliance_monthly_kwh",
    "category_color",
    "compute_bill",
    "require_bill",
    "validate_appliance",
]

BILLING_DAYS = 30
MONTHS_PER_YEAR = 12

CATEGORY_COLORS: Mapping[str, str] = MappingProxyType(
    {
        "Heating & Cooling": "#EF4444",
        "Kitchen": "#F59E0B",
        "Lighting": "#EAB308",
        "Electronics": "#3B82F6",
        "Laundry": "#8B5CF6",
        "Water Heating": "#06B6D4",
        "Other": "#6B7280",
    }
)

# Assigned in order to categories missing from CATEGORY_COLORS
_FALLBACK_PALETTE = (
    "#10B981",
    "#EC4899",
    "#14B8A6",
    "#F97316",
    "#6366F1",
    "#84CC16",
)

# (field, lower bound, upper bound or None)
_NUMERIC_BOUNDS: tuple[tuple[str, float, float | None], ...] = (
    ("wattage", 0.0, None),
    ("hours_per_day", 0.0, 24.0),
    ("days_per_month", 0.0, 31.0),
)


def _check_number(
    appliance: Appliance,
    field: str,
    value: Any,
    low: float,
    high: float | None,
) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidApplianceError(
            field,
            value,
            f"{field} must be a number",
            appliance_name=appliance.name,
        )
    if not math.isfinite(value):
        raise InvalidApplianceError(
            field,
            value,
            f"{field} must be finite, got {value}",
            appliance_name=appliance.name,
        )
    if value < low or (high is not None and value > high):
        bounds = f">= {low:g}" if high is None else f"{low:g}-{high:g}"
        raise InvalidApplianceError(
            field,
            value,
            f"{field} must be {bounds}, got {value}",
            appliance_name=appliance.name,
        )


def validate_appliance(appliance: Appliance) -> None:
    """Reject an appliance with negative, non-finite or out-of-range numbers.

    Pydantic already enforces these bounds on construction. This check
    also catches records built with ``model_construct`` or loaded from
    elsewhere without validation.

    Raises:
        InvalidApplianceError: On the first offending field
    """
    for field, low, high in _NUMERIC_BOUNDS:
        _check_number(appliance, field, getattr(appliance, field), low, high)
    if appliance.cost_per_kwh is not None:
        _check_number(
            appliance, "cost_per_kwh", appliance.cost_per_kwh, 0.0, None
        )


def appliance_monthly_kwh(appliance: Appliance) -> float:
    """Monthly energy use in kWh: W / 1000 × hours/day × days/month."""
    return (
        appliance.wattage
        / 1000
        * appliance.hours_per_day
        * appliance.days_per_month
    )


def _percentage(cost: float, monthly_bill: float) -> float:
    if monthly_bill == 0:
        return 0.0
    return cost / monthly_bill * 100


def category_color(category: str, fallback_index: int = 0) -> str:
    """Chart color for a category.

    Categories without a fixed color take the ``fallback_index``-th entry
    of the fallback palette, wrapping around.
    """
    color = CATEGORY_COLORS.get(category)
    if color is not None:
        return color
    return _FALLBACK_PALETTE[fallback_index % len(_FALLBACK_PALETTE)]


def _category_breakdown(
    usages: list[ApplianceUsage], monthly_bill: float
) -> list[CategoryUsage]:
    totals: dict[str, list[float]] = {}
    for usage in usages:
        kwh_cost = totals.setdefault(usage.appliance.category, [0.0, 0.0])
        kwh_cost[0] += usage.monthly_kwh
        kwh_cost[1] += usage.monthly_cost

    breakdown: list[CategoryUsage] = []
    unmapped = 0
    for category, (kwh, cost) in totals.items():
        if category in CATEGORY_COLORS:
            color = category_color(category)
        else:
            color = category_color(category, unmapped)
            unmapped += 1
        breakdown.append(
            CategoryUsage(
                category=category,
                monthly_kwh=kwh,
                monthly_cost=cost,
                percentage=_percentage(cost, monthly_bill),
                color=color,
            )
        )
    return breakdown


def compute_bill(
    appliances: Iterable[Appliance],
    settings: BillSettings | None = None,
) -> BillCalculation | None:
    """Estimate the monthly bill for a list of appliances.

    Args:
        appliances: Appliances to bill, in display order
        settings: Household settings; defaults to ``BillSettings()``

    Returns:
        The full calculation, or ``None`` when ``appliances`` is empty.
        ``None`` means "no data yet" and is distinct from a zero bill.

    Raises:
        InvalidApplianceError: If any appliance has a malformed numeric
            field. Nothing is aggregated in that case.

    Example:
        >>> fridge = Appliance(
        ...     name="Refrigerator", category="Kitchen",
        ...     wattage=150, hours_per_day=24, days_per_month=30,
        ... )
        >>> compute_bill([fridge]).total_kwh
        108.0
    """
    items = list(appliances)
    if not items:
        return None

    if settings is None:
        settings = BillSettings()

    for appliance in items:
        validate_appliance(appliance)

    priced: list[tuple[Appliance, float, float]] = []
    for appliance in items:
        kwh = appliance_monthly_kwh(appliance)
        cost = kwh * effective_rate(appliance, settings)
        priced.append((appliance, kwh, cost))

    total_kwh = sum(kwh for _, kwh, _ in priced)
    monthly_bill = sum(cost for _, _, cost in priced)

    appliance_breakdown = [
        ApplianceUsage(
            appliance=appliance,
            monthly_kwh=kwh,
            monthly_cost=cost,
            percentage=_percentage(cost, monthly_bill),
        )
        for appliance, kwh, cost in priced
    ]

    bill = BillCalculation(
        total_kwh=total_kwh,
        monthly_bill=monthly_bill,
        yearly_bill=monthly_bill * MONTHS_PER_YEAR,
        daily_average=monthly_bill / BILLING_DAYS,
        appliance_breakdown=appliance_breakdown,
        category_breakdown=_category_breakdown(
            appliance_breakdown, monthly_bill
        ),
    )
    _logger.debug(
        "Computed bill for %d appliances: %.2f kWh, $%.2f/month",
        len(items),
        total_kwh,
        monthly_bill,
    )
    return bill


def require_bill(bill: BillCalculation | None) -> BillCalculation:
    """Return ``bill`` or raise :class:`NoDataError` if there is none."""
    if bill is None:
        raise NoDataError()
    return bill

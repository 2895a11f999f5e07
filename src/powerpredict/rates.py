"""Electricity rate tables and effective-rate resolution.

The effective $/kWh rate for an appliance is the regional base rate scaled
by a multiplier for each :class:`~powerpredict.models.BillSettings` option::

    rate = region_rate(region)
         × SEASON_MULTIPLIERS[season]
         × HOME_SIZE_MULTIPLIERS[home_size]
         × EFFICIENCY_MULTIPLIERS[efficiency_rating]
         × TIME_OF_USE_MULTIPLIERS[category]   (only with time-of-use billing)

An appliance with its own ``cost_per_kwh`` is billed at exactly that rate.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType

from .enums import EfficiencyRating, HomeSize, Season
from .models import Appliance, BillSettings

__author__ = "PowerPredict Developers"
__copyright__ = "PowerPredict Developers"
__license__ = "MIT"

_logger = logging.getLogger(__name__)

__all__ = [
    "BASELINE_RATE",
    "REGION_RATES",
    "SEASON_MULTIPLIERS",
    "HOME_SIZE_MULTIPLIERS",
    "EFFICIENCY_MULTIPLIERS",
    "TIME_OF_USE_MULTIPLIERS",
    "region_rate",
    "settings_multiplier",
    "time_of_use_multiplier",
    "effective_rate",
]

# US residential average, $/kWh
BASELINE_RATE = 0.16

REGION_RATES: Mapping[str, float] = MappingProxyType(
    {
        "National Average": BASELINE_RATE,
        "Northeast": 0.23,
        "Midwest": 0.15,
        "South": 0.14,
        "West": 0.19,
        "Pacific": 0.29,
        "Hawaii": 0.41,
    }
)

SEASON_MULTIPLIERS: Mapping[Season, float] = MappingProxyType(
    {
        Season.SPRING: 0.95,
        Season.SUMMER: 1.15,  # Peak cooling demand
        Season.FALL: 0.95,
        Season.WINTER: 1.10,
    }
)

HOME_SIZE_MULTIPLIERS: Mapping[HomeSize, float] = MappingProxyType(
    {
        HomeSize.SMALL: 0.90,
        HomeSize.MEDIUM: 1.00,
        HomeSize.LARGE: 1.15,
    }
)

EFFICIENCY_MULTIPLIERS: Mapping[EfficiencyRating, float] = MappingProxyType(
    {
        EfficiencyRating.POOR: 1.20,
        EfficiencyRating.AVERAGE: 1.00,
        EfficiencyRating.GOOD: 0.92,
        EfficiencyRating.EXCELLENT: 0.85,
    }
)

# Share of each category's load that lands in peak hours, expressed as a
# multiplier on the flat rate. Unlisted categories bill at the flat rate.
TIME_OF_USE_MULTIPLIERS: Mapping[str, float] = MappingProxyType(
    {
        "Heating & Cooling": 1.25,
        "Lighting": 1.10,
        "Kitchen": 1.05,
        "Electronics": 1.00,
        "Laundry": 0.85,
        "Water Heating": 0.90,
    }
)


def region_rate(region: str) -> float:
    """Return the base $/kWh rate for a region.

    Unknown regions fall back to :data:`BASELINE_RATE`.
    """
    rate = REGION_RATES.get(region)
    if rate is None:
        _logger.warning(
            "Unknown region %r, using baseline rate %.2f",
            region,
            BASELINE_RATE,
        )
        return BASELINE_RATE
    return rate


def settings_multiplier(settings: BillSettings) -> float:
    """Combined season, home size and efficiency multiplier."""
    return (
        SEASON_MULTIPLIERS[settings.season]
        * HOME_SIZE_MULTIPLIERS[settings.home_size]
        * EFFICIENCY_MULTIPLIERS[settings.efficiency_rating]
    )


def time_of_use_multiplier(category: str, settings: BillSettings) -> float:
    """Peak-hour multiplier for a category, or 1.0 on flat billing."""
    if not settings.use_time_of_use:
        return 1.0
    return TIME_OF_USE_MULTIPLIERS.get(category, 1.0)


def effective_rate(appliance: Appliance, settings: BillSettings) -> float:
    """Resolve the $/kWh rate used to bill one appliance.

    Args:
        appliance: Appliance being billed
        settings: Household bill settings

    Returns:
        Rate in dollars per kWh
    """
    if appliance.cost_per_kwh is not None:
        return appliance.cost_per_kwh

    rate = (
        region_rate(settings.region)
        * settings_multiplier(settings)
        * time_of_use_multiplier(appliance.category, settings)
    )
    _logger.debug(
        "Rate for %s (%s): %.5f", appliance.name, appliance.category, rate
    )
    return rate

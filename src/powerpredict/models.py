"""Data models for bill estimation and the energy assistant.

All models accept both the camelCase keys used by the web front end
(``hoursPerDay``, ``costPerKwh``) and the Python attribute names
(``hours_per_day``, ``cost_per_kwh``). Every model is frozen: an appliance
is changed by building a new record, never by mutating one in place.
"""

import logging
import uuid
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .enums import EfficiencyRating, HomeSize, ResponseSource, Season
from .exceptions import InvalidApplianceError

__author__ = "PowerPredict Developers"
__copyright__ = "PowerPredict Developers"
__license__ = "MIT"

_logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex


class PowerPredictBaseModel(BaseModel):
    """Base model for all powerpredict models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",  # Front end payloads carry UI-only fields
        frozen=True,
        allow_inf_nan=False,
    )


# ============================================================================
# Inputs
# ============================================================================


class Appliance(PowerPredictBaseModel):
    """A single appliance entered by the user."""

    id: str = Field(default_factory=_new_id)
    name: str = Field(min_length=1)
    category: str = "Other"
    wattage: float = Field(ge=0, description="Rated power draw in watts")
    hours_per_day: float = Field(ge=0, le=24)
    days_per_month: float = Field(ge=0, le=31)
    cost_per_kwh: Optional[float] = Field(
        default=None,
        ge=0,
        description="Appliance-specific rate; overrides the settings rate",
    )


class BillSettings(PowerPredictBaseModel):
    """Household-wide options that scale the per-kWh rate."""

    region: str = "National Average"
    use_time_of_use: bool = False
    season: Season = Season.SUMMER
    home_size: HomeSize = HomeSize.MEDIUM
    efficiency_rating: EfficiencyRating = EfficiencyRating.AVERAGE


# ============================================================================
# Derived bill data
# ============================================================================


class ApplianceUsage(PowerPredictBaseModel):
    """Usage and cost share of one appliance."""

    appliance: Appliance
    monthly_kwh: float
    monthly_cost: float
    percentage: float


class CategoryUsage(PowerPredictBaseModel):
    """Usage and cost share aggregated over one category."""

    category: str
    monthly_kwh: float
    monthly_cost: float
    percentage: float
    color: str


class BillCalculation(PowerPredictBaseModel):
    """Complete bill estimate for the current appliance list.

    Rebuilt as a whole whenever the appliances or settings change.
    """

    total_kwh: float
    monthly_bill: float
    yearly_bill: float
    daily_average: float
    appliance_breakdown: list[ApplianceUsage] = Field(default_factory=list)
    category_breakdown: list[CategoryUsage] = Field(default_factory=list)


# ============================================================================
# Assistant
# ============================================================================


class KnowledgeTopic(PowerPredictBaseModel):
    """A canned advice topic selected by keyword."""

    name: str
    keywords: tuple[str, ...]
    responses: tuple[str, ...]
    suggestions: tuple[str, ...]


class AdvisoryResponse(PowerPredictBaseModel):
    """Text and follow-up chips produced for one query."""

    text: str
    suggestions: list[str] = Field(default_factory=list)
    source: ResponseSource = ResponseSource.DEFAULT


class ChatMessage(PowerPredictBaseModel):
    """One entry in the chat transcript."""

    id: str = Field(default_factory=_new_id)
    text: str
    is_bot: bool
    timestamp: datetime = Field(default_factory=datetime.now)
    suggestions: Optional[list[str]] = None


# ============================================================================
# Parsing helpers
# ============================================================================


def parse_appliance(data: Union[Appliance, Mapping[str, Any]]) -> Appliance:
    """Build an :class:`Appliance` from user input.

    Args:
        data: An existing appliance or a mapping of its fields (camelCase or
            snake_case keys)

    Returns:
        Validated appliance

    Raises:
        InvalidApplianceError: If any field fails validation. The first
            failing field is reported.
    """
    if isinstance(data, Appliance):
        return data
    try:
        return Appliance.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "?"
        name = data.get("name") if isinstance(data, Mapping) else None
        raise InvalidApplianceError(
            field,
            first.get("input"),
            first.get("msg"),
            appliance_name=name if isinstance(name, str) else None,
        ) from e


def parse_appliances(
    items: Iterable[Union[Appliance, Mapping[str, Any]]],
) -> list[Appliance]:
    """Parse a sequence of appliance records, stopping at the first error."""
    appliances = [parse_appliance(item) for item in items]
    _logger.debug("Parsed %d appliances", len(appliances))
    return appliances

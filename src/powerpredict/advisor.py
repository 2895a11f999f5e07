"""Advisory response engine.

Maps a free-text query, plus the current bill when there is one, to a
canned answer and a set of follow-up suggestions. Branches are tried in
priority order:

1. Bill-specific answer, when a bill exists and the query mentions the
   bill, costs or reducing them.
2. Knowledge base topic matched by keyword.
3. A default prompt listing common focus areas.

:func:`respond` keeps no state between calls. The only randomness is the
response variant picked from a topic, and it comes from the ``rng``
argument.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Mapping, Sequence
from types import MappingProxyType

from .enums import ResponseSource
from .exceptions import AdvisoryInputError
from .knowledge_base import find_topic, pick_response, pick_suggestions
from .models import AdvisoryResponse, Appliance, ApplianceUsage, BillCalculation

__author__ = "PowerPredict Developers"
__copyright__ = "PowerPredict Developers"
__license__ = "MIT"

_logger = logging.getLogger(__name__)

__all__ = [
    "SAVINGS_RATE",
    "BILL_KEYWORDS",
    "CATEGORY_TIPS",
    "GENERIC_TIPS",
    "DEFAULT_SUGGESTIONS",
    "GREETINGS",
    "QUICK_SUGGESTIONS",
    "category_tips",
    "estimate_potential_savings",
    "get_greeting",
    "respond",
    "top_appliance",
]

# Conservative share of the monthly bill that targeted changes can save
SAVINGS_RATE = 0.20

BILL_KEYWORDS = ("bill", "cost", "reduce")

CATEGORY_TIPS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "Heating & Cooling": (
            "Adjust thermostat settings",
            "Improve insulation",
            "Use ceiling fans",
        ),
        "Lighting": (
            "Switch to LED bulbs",
            "Use natural light",
            "Install motion sensors",
        ),
        "Kitchen": (
            "Use energy-efficient settings",
            "Keep refrigerator optimal temp",
            "Run full dishwasher loads",
        ),
        "Electronics": (
            "Unplug when not in use",
            "Use power strips",
            "Enable power management",
        ),
        "Laundry": (
            "Wash in cold water",
            "Clean dryer lint filter",
            "Air dry when possible",
        ),
        "Water Heating": (
            "Lower water heater temp",
            "Fix leaks promptly",
            "Take shorter showers",
        ),
    }
)

GENERIC_TIPS = (
    "Use energy-efficient settings",
    "Unplug when not in use",
    "Consider ENERGY STAR upgrade",
)

DEFAULT_LEAD_IN = "I'm here to help you save energy and money!"
DEFAULT_CLOSING = "What would you like to focus on?"
DEFAULT_SUGGESTIONS = (
    "Reduce heating/cooling costs",
    "Lower lighting bills",
    "Appliance efficiency tips",
    "Eliminate phantom loads",
)

NO_APPLIANCES_TEXT = (
    "I'd love to help you reduce your bill! Add some appliances to get "
    "personalized recommendations."
)
NO_APPLIANCES_SUGGESTIONS = (
    "How to add appliances?",
    "Common household appliances",
    "Energy saving tips",
)

GREETINGS = (
    "Hello! I'm your Energy Assistant. I can help you reduce your "
    "electricity bill and optimize your energy usage. What would you like "
    "to know?",
    "Hi there! I'm here to help you save energy and money. Ask me anything "
    "about your electricity usage!",
    "Welcome! I'm your personal energy advisor. How can I help you lower "
    "your power bill today?",
)

QUICK_SUGGESTIONS = (
    "How to reduce my bill?",
    "LED vs incandescent bulbs",
    "Best AC temperature?",
    "Phantom load devices",
    "Energy efficient appliances",
    "Solar panel benefits",
)


def estimate_potential_savings(bill: BillCalculation) -> float:
    """Monthly dollars that targeted improvements could save."""
    return bill.monthly_bill * SAVINGS_RATE


def top_appliance(bill: BillCalculation) -> ApplianceUsage | None:
    """Highest-cost appliance; ties go to the first in breakdown order.

    The bill's breakdown is left untouched.
    """
    top: ApplianceUsage | None = None
    for usage in bill.appliance_breakdown:
        if top is None or usage.monthly_cost > top.monthly_cost:
            top = usage
    return top


def category_tips(category: str) -> list[str]:
    """Tips for an appliance category, or generic tips if unmapped."""
    return list(CATEGORY_TIPS.get(category, GENERIC_TIPS))


def get_greeting(rng: random.Random | None = None) -> str:
    """Pick an opening greeting uniformly at random."""
    return (rng or random).choice(GREETINGS)


def _bill_response(
    bill: BillCalculation, appliances: Sequence[Appliance]
) -> AdvisoryResponse:
    top = top_appliance(bill)
    if top is None:
        return AdvisoryResponse(
            text=NO_APPLIANCES_TEXT,
            suggestions=list(NO_APPLIANCES_SUGGESTIONS),
            source=ResponseSource.BILL,
        )

    count = len(appliances) or len(bill.appliance_breakdown)
    noun = "appliance" if count == 1 else "appliances"
    savings = estimate_potential_savings(bill)
    text = (
        f"Your monthly bill is ${bill.monthly_bill:.2f} with "
        f"{bill.total_kwh:.0f} kWh usage across {count} {noun}. "
        f'Your top energy consumer is "{top.appliance.name}" at '
        f"${top.monthly_cost:.2f}/month. You could potentially save "
        f"${savings:.2f}/month with targeted improvements!"
    )
    return AdvisoryResponse(
        text=text,
        suggestions=category_tips(top.appliance.category),
        source=ResponseSource.BILL,
    )


def _default_response(bill: BillCalculation | None) -> AdvisoryResponse:
    parts = [DEFAULT_LEAD_IN]
    if bill is not None:
        parts.append(
            f"With your current usage of {bill.total_kwh:.0f} kWh/month, "
            "there are several optimization opportunities."
        )
    parts.append(DEFAULT_CLOSING)
    return AdvisoryResponse(
        text=" ".join(parts),
        suggestions=list(DEFAULT_SUGGESTIONS),
        source=ResponseSource.DEFAULT,
    )


def respond(
    query: str,
    bill: BillCalculation | None = None,
    appliances: Sequence[Appliance] = (),
    *,
    rng: random.Random | None = None,
) -> AdvisoryResponse:
    """Produce an answer for one user query.

    Args:
        query: Free text typed or clicked by the user
        bill: Current bill, or ``None`` if no appliances are entered
        appliances: Current appliance list
        rng: Random source for picking a topic response variant

    Returns:
        Response text, follow-up suggestions and the branch that answered

    Raises:
        AdvisoryInputError: If ``query`` is empty or whitespace-only
    """
    if not query or not query.strip():
        raise AdvisoryInputError("Query must not be empty")

    lowered = query.lower()

    if bill is not None and any(k in lowered for k in BILL_KEYWORDS):
        _logger.debug("Answering with bill-specific response")
        return _bill_response(bill, appliances)

    topic = find_topic(query)
    if topic is not None:
        return AdvisoryResponse(
            text=pick_response(topic, rng),
            suggestions=pick_suggestions(topic),
            source=ResponseSource.TOPIC,
        )

    _logger.debug("No topic matched, answering with default response")
    return _default_response(bill)

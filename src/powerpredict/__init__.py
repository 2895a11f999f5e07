"""Household electricity bill estimation and energy-saving assistant."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("powerpredict")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "unknown"

from .advisor import (
    QUICK_SUGGESTIONS,
    SAVINGS_RATE,
    estimate_potential_savings,
    get_greeting,
    respond,
)
from .assistant import AssistantClient
from .calculator import (
    BILLING_DAYS,
    appliance_monthly_kwh,
    compute_bill,
    require_bill,
    validate_appliance,
)
from .chat import ChatSession, SessionState
from .enums import EfficiencyRating, HomeSize, ResponseSource, Season
from .exceptions import (
    AdvisoryInputError,
    AssistantUnavailableError,
    InvalidApplianceError,
    NoDataError,
    PowerPredictError,
    RegistryError,
    ValidationError,
)
from .knowledge_base import (
    TOPICS,
    find_topic,
    get_topic,
    pick_response,
    pick_suggestions,
)
from .models import (
    AdvisoryResponse,
    Appliance,
    ApplianceUsage,
    BillCalculation,
    BillSettings,
    CategoryUsage,
    ChatMessage,
    KnowledgeTopic,
    parse_appliance,
    parse_appliances,
)
from .rates import effective_rate
from .registry import ApplianceRegistry

__all__ = [
    "__version__",
    # Models
    "AdvisoryResponse",
    "Appliance",
    "ApplianceUsage",
    "BillCalculation",
    "BillSettings",
    "CategoryUsage",
    "ChatMessage",
    "KnowledgeTopic",
    "parse_appliance",
    "parse_appliances",
    # Enums
    "EfficiencyRating",
    "HomeSize",
    "ResponseSource",
    "Season",
    # Exceptions
    "AdvisoryInputError",
    "AssistantUnavailableError",
    "InvalidApplianceError",
    "NoDataError",
    "PowerPredictError",
    "RegistryError",
    "ValidationError",
    # Bill aggregation
    "BILLING_DAYS",
    "appliance_monthly_kwh",
    "compute_bill",
    "effective_rate",
    "require_bill",
    "validate_appliance",
    "ApplianceRegistry",
    # Advisory
    "QUICK_SUGGESTIONS",
    "SAVINGS_RATE",
    "TOPICS",
    "estimate_potential_savings",
    "find_topic",
    "get_greeting",
    "get_topic",
    "pick_response",
    "pick_suggestions",
    "respond",
    # Chat
    "AssistantClient",
    "ChatSession",
    "SessionState",
]

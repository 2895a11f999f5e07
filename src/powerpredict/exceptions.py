"""Exception hierarchy for powerpredict.

All library errors derive from :class:`PowerPredictError`, so callers can
catch the whole family with one ``except`` clause::

    PowerPredictError
    ├── ValidationError
    │   ├── InvalidApplianceError
    │   └── AdvisoryInputError
    ├── NoDataError
    ├── RegistryError
    └── AssistantUnavailableError

None of these are fatal to the process. The CLI catches them at the top
level and renders an error panel.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "PowerPredictError",
    "ValidationError",
    "InvalidApplianceError",
    "AdvisoryInputError",
    "NoDataError",
    "RegistryError",
    "AssistantUnavailableError",
]


class PowerPredictError(Exception):
    """Base exception for all powerpredict errors."""


class ValidationError(PowerPredictError):
    """Raised when user-supplied input fails validation."""


class InvalidApplianceError(ValidationError):
    """Raised when an appliance carries a malformed numeric field.

    Attributes:
        field: Name of the offending field (e.g. ``"wattage"``)
        value: The rejected value
        appliance_name: Name of the appliance, when known
    """

    def __init__(
        self,
        field: str,
        value: Any,
        message: str | None = None,
        *,
        appliance_name: str | None = None,
    ) -> None:
        self.field = field
        self.value = value
        self.appliance_name = appliance_name
        if message is None:
            message = f"Invalid value for {field}: {value!r}"
        if appliance_name:
            message = f"{appliance_name}: {message}"
        super().__init__(message)


class AdvisoryInputError(ValidationError):
    """Raised when a query is empty or whitespace-only."""


class NoDataError(PowerPredictError):
    """Raised when a bill is required but no appliances have been entered."""

    def __init__(self, message: str = "No appliances entered yet") -> None:
        super().__init__(message)


class RegistryError(PowerPredictError):
    """Raised when a registry operation references an unknown appliance."""


class AssistantUnavailableError(PowerPredictError):
    """Raised when the assistant proxy cannot produce a reply.

    Wraps network errors, timeouts, non-2xx responses and malformed
    response bodies.
    """

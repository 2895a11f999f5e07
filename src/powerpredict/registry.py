"""In-memory appliance registry.

Holds the user's appliance list and bill settings for one session. Every
mutation rebuilds the :class:`BillCalculation` as a whole, so :attr:`bill`
always matches the current inputs.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from .calculator import compute_bill, require_bill
from .exceptions import RegistryError
from .models import Appliance, BillCalculation, BillSettings, parse_appliance

__author__ = "PowerPredict Developers"
__copyright__ = "PowerPredict Developers"
__license__ = "MIT"

_logger = logging.getLogger(__name__)

__all__ = ["ApplianceRegistry"]


def _merged(record: BaseModel, changes: Mapping[str, Any]) -> dict[str, Any]:
    """Field dict of `record` with `changes` applied, keyed by alias."""
    data = record.model_dump(by_alias=True)
    data.update(
        {
            key if key in data else to_camel(key): value
            for key, value in changes.items()
        }
    )
    return data


class ApplianceRegistry:
    """Session-lifetime appliance list with an always-current bill.

    Example:
        >>> registry = ApplianceRegistry()
        >>> registry.bill is None
        True
        >>> fridge = registry.add(
        ...     {"name": "Refrigerator", "category": "Kitchen",
        ...      "wattage": 150, "hoursPerDay": 24, "daysPerMonth": 30}
        ... )
        >>> round(registry.bill.total_kwh, 1)
        108.0
    """

    def __init__(
        self,
        appliances: Iterable[Appliance | Mapping[str, Any]] = (),
        settings: BillSettings | None = None,
    ) -> None:
        self._appliances: list[Appliance] = [
            parse_appliance(a) for a in appliances
        ]
        self._settings = settings or BillSettings()
        self._bill: BillCalculation | None = None
        self._recompute()

    @property
    def appliances(self) -> list[Appliance]:
        """Copy of the current appliance list."""
        return list(self._appliances)

    @property
    def settings(self) -> BillSettings:
        return self._settings

    @property
    def bill(self) -> BillCalculation | None:
        """Current bill, or ``None`` while the registry is empty."""
        return self._bill

    def __len__(self) -> int:
        return len(self._appliances)

    def require_bill(self) -> BillCalculation:
        """Current bill; raises :class:`NoDataError` if there is none."""
        return require_bill(self._bill)

    def _recompute(self) -> None:
        self._bill = compute_bill(self._appliances, self._settings)

    def _index_of(self, appliance_id: str) -> int:
        for i, appliance in enumerate(self._appliances):
            if appliance.id == appliance_id:
                return i
        raise RegistryError(f"No appliance with id {appliance_id!r}")

    def get(self, appliance_id: str) -> Appliance:
        return self._appliances[self._index_of(appliance_id)]

    def add(self, appliance: Appliance | Mapping[str, Any]) -> Appliance:
        """Validate and append an appliance.

        Raises:
            InvalidApplianceError: If the appliance fails validation
            RegistryError: If an appliance with the same id already exists
        """
        new = parse_appliance(appliance)
        if any(a.id == new.id for a in self._appliances):
            raise RegistryError(f"Duplicate appliance id {new.id!r}")
        candidate = [*self._appliances, new]
        self._bill = compute_bill(candidate, self._settings)
        self._appliances = candidate
        _logger.info("Added appliance %s (%s)", new.name, new.id)
        return new

    def update(self, appliance_id: str, **changes: Any) -> Appliance:
        """Replace fields of an existing appliance.

        Field names may be given in snake_case or camelCase. The appliance
        id cannot be changed.

        Raises:
            RegistryError: If no appliance has ``appliance_id``
            InvalidApplianceError: If the updated record fails validation
        """
        index = self._index_of(appliance_id)
        current = self._appliances[index]
        changes.pop("id", None)
        updated = parse_appliance(_merged(current, changes))

        candidate = list(self._appliances)
        candidate[index] = updated
        self._bill = compute_bill(candidate, self._settings)
        self._appliances = candidate
        _logger.info("Updated appliance %s (%s)", updated.name, updated.id)
        return updated

    def remove(self, appliance_id: str) -> Appliance:
        """Remove an appliance and return it.

        Raises:
            RegistryError: If no appliance has ``appliance_id``
        """
        index = self._index_of(appliance_id)
        removed = self._appliances.pop(index)
        self._recompute()
        _logger.info("Removed appliance %s (%s)", removed.name, removed.id)
        return removed

    def clear(self) -> None:
        self._appliances = []
        self._recompute()

    def update_settings(
        self, settings: BillSettings | None = None, **changes: Any
    ) -> BillSettings:
        """Replace the bill settings, or change individual options.

        Example:
            >>> registry = ApplianceRegistry()
            >>> registry.update_settings(season="winter").season.value
            'winter'
        """
        base = settings or self._settings
        if changes:
            base = BillSettings.model_validate(_merged(base, changes))
        self._bill = compute_bill(self._appliances, base)
        self._settings = base
        _logger.info(
            "Bill settings changed: %s", base.model_dump(mode="json")
        )
        return base

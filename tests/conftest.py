"""Shared fixtures for powerpredict tests."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from powerpredict.models import (
    Appliance,
    ApplianceUsage,
    BillCalculation,
    BillSettings,
)


def make_appliance(**overrides: Any) -> Appliance:
    """Build an appliance with sensible defaults."""
    data: dict[str, Any] = {
        "name": "Refrigerator",
        "category": "Kitchen",
        "wattage": 150,
        "hours_per_day": 24,
        "days_per_month": 30,
    }
    data.update(overrides)
    return Appliance(**data)


def make_bill(costs: list[tuple[str, str, float]]) -> BillCalculation:
    """Build a bill directly from (name, category, monthly cost) triples.

    Each appliance is given 1 kWh per dollar so the figures are easy to
    check by hand.
    """
    total = sum(cost for _, _, cost in costs)
    breakdown = [
        ApplianceUsage(
            appliance=make_appliance(name=name, category=category),
            monthly_kwh=cost,
            monthly_cost=cost,
            percentage=cost / total * 100 if total else 0.0,
        )
        for name, category, cost in costs
    ]
    return BillCalculation(
        total_kwh=total,
        monthly_bill=total,
        yearly_bill=total * 12,
        daily_average=total / 30,
        appliance_breakdown=breakdown,
        category_breakdown=[],
    )


@pytest.fixture
def household() -> list[Appliance]:
    """A small, realistic appliance list."""
    return [
        make_appliance(),
        make_appliance(
            name="Central AC",
            category="Heating & Cooling",
            wattage=3500,
            hours_per_day=8,
            days_per_month=30,
        ),
        make_appliance(
            name="LED Bulbs",
            category="Lighting",
            wattage=60,
            hours_per_day=5,
            days_per_month=30,
        ),
        make_appliance(
            name="Television",
            category="Electronics",
            wattage=120,
            hours_per_day=4,
            days_per_month=30,
        ),
        make_appliance(
            name="Dishwasher",
            category="Kitchen",
            wattage=1800,
            hours_per_day=1,
            days_per_month=20,
        ),
    ]


@pytest.fixture
def default_settings() -> BillSettings:
    return BillSettings()


class FakeSleep:
    """Records requested delays and optionally blocks until released."""

    def __init__(self) -> None:
        self.delays: list[float] = []
        self.gate = asyncio.Event()
        self.gate.set()

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await self.gate.wait()


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()

#!/usr/bin/env python3
"""
Example: Estimate a household bill and compare billing options.

Loads the sample appliance list, prints the monthly estimate at default
settings, then shows how the season, home efficiency and time-of-use
billing change the result.
"""

import logging
from pathlib import Path

from powerpredict import (
    ApplianceRegistry,
    EfficiencyRating,
    Season,
    respond,
)
from powerpredict.cli.commands import load_appliances

APPLIANCES = Path(__file__).with_name("appliances.json")


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    registry = ApplianceRegistry(load_appliances(APPLIANCES))
    bill = registry.require_bill()

    print(f"Monthly bill:  ${bill.monthly_bill:,.2f}")
    print(f"Yearly bill:   ${bill.yearly_bill:,.2f}")
    print(f"Monthly usage: {bill.total_kwh:,.0f} kWh\n")

    for cat in bill.category_breakdown:
        print(
            f"  {cat.category:<20} ${cat.monthly_cost:>8,.2f} "
            f"({cat.percentage:.1f}%)"
        )

    # Same appliances under different billing options
    print("\nWhat if...")
    for label, changes in [
        ("it were spring", {"season": Season.SPRING}),
        (
            "the home were well insulated",
            {"efficiency_rating": EfficiencyRating.EXCELLENT},
        ),
        ("billing were time-of-use", {"use_time_of_use": True}),
    ]:
        base = registry.settings
        registry.update_settings(**changes)
        print(f"  ...{label}: ${registry.require_bill().monthly_bill:,.2f}")
        registry.update_settings(base)

    print()
    print(respond("How can I reduce my bill?", bill, registry.appliances).text)


if __name__ == "__main__":
    main()

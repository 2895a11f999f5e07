"""Plain-text and JSON formatting for CLI output."""

from typing import Any

from powerpredict.models import BillCalculation, BillSettings

_WIDTH = 72


def format_money(value: float) -> str:
    """Format dollars with thousands separators, e.g. ``$1,234.50``."""
    return f"${value:,.2f}"


def format_bill_report(bill: BillCalculation, settings: BillSettings) -> str:
    """
    Format a bill as a human-readable plain-text report.

    Args:
        bill: Computed bill
        settings: Settings the bill was computed with

    Returns:
        Multi-line report with summary, appliance and category sections
    """
    lines = []
    lines.append("=" * _WIDTH)
    lines.append("ESTIMATED ELECTRICITY BILL")
    lines.append("=" * _WIDTH)
    lines.append(f"Monthly Bill:   {format_money(bill.monthly_bill)}")
    lines.append(f"Yearly Bill:    {format_money(bill.yearly_bill)}")
    lines.append(f"Daily Average:  {format_money(bill.daily_average)}")
    lines.append(f"Monthly Usage:  {bill.total_kwh:,.1f} kWh")
    tou = "time-of-use" if settings.use_time_of_use else "flat rate"
    lines.append(
        f"Settings:       {settings.region}, {settings.season.value}, "
        f"{settings.home_size.value} home, "
        f"{settings.efficiency_rating.value} efficiency, {tou}"
    )

    lines.append("")
    lines.append("APPLIANCES")
    lines.append("-" * _WIDTH)
    lines.append(
        f"  {'Name':<24} {'Category':<18} {'kWh':>8} {'Cost':>10} {'%':>6}"
    )
    for usage in bill.appliance_breakdown:
        lines.append(
            f"  {usage.appliance.name[:24]:<24} "
            f"{usage.appliance.category[:18]:<18} "
            f"{usage.monthly_kwh:>8.1f} "
            f"{format_money(usage.monthly_cost):>10} "
            f"{usage.percentage:>5.1f}%"
        )

    lines.append("")
    lines.append("CATEGORIES")
    lines.append("-" * _WIDTH)
    for cat in bill.category_breakdown:
        lines.append(
            f"  {cat.category[:43]:<43} "
            f"{cat.monthly_kwh:>8.1f} "
            f"{format_money(cat.monthly_cost):>10} "
            f"{cat.percentage:>5.1f}%"
        )
    lines.append("=" * _WIDTH)
    return "\n".join(lines)


def bill_to_json(bill: BillCalculation) -> dict[str, Any]:
    """Serialize a bill with the camelCase keys the web front end uses."""
    return bill.model_dump(mode="json", by_alias=True)

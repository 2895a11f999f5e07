"""Rich-enhanced output formatting with a plain-text mode."""

import json
import logging
import os
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from powerpredict.config import NO_RICH_ENV
from powerpredict.models import (
    BillCalculation,
    BillSettings,
    ChatMessage,
    KnowledgeTopic,
)

from .output_formatters import format_bill_report, format_money

_logger = logging.getLogger(__name__)


def _should_use_rich() -> bool:
    """Check if Rich rendering is enabled.

    Returns:
        False when ``POWERPREDICT_NO_RICH=1``, True otherwise.
    """
    return os.getenv(NO_RICH_ENV, "0") != "1"


class OutputFormatter:
    """Unified output formatter.

    Renders tables and panels with Rich, or falls back to plain text when
    Rich output is disabled through the environment.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.use_rich = console is not None or _should_use_rich()
        self.console = console or (Console() if self.use_rich else None)

    # Bill output

    def print_bill(
        self, bill: BillCalculation, settings: BillSettings
    ) -> None:
        """Print the bill summary with appliance and category tables.

        Args:
            bill: Computed bill
            settings: Settings the bill was computed with
        """
        if not self.use_rich:
            print(format_bill_report(bill, settings))
        else:
            self._print_bill_rich(bill, settings)

    def _print_bill_rich(
        self, bill: BillCalculation, settings: BillSettings
    ) -> None:
        assert self.console is not None

        tou = "time-of-use" if settings.use_time_of_use else "flat rate"
        summary = (
            f"[bold green]{format_money(bill.monthly_bill)}[/bold green]"
            f" / month   [bold]{bill.total_kwh:.1f}[/bold] kWh\n"
            f"[dim]{format_money(bill.yearly_bill)} / year  •  "
            f"{format_money(bill.daily_average)} / day[/dim]\n"
            f"[dim]{settings.region}  •  {settings.season.value}  •  "
            f"{settings.home_size.value} home  •  "
            f"{settings.efficiency_rating.value} efficiency  •  {tou}[/dim]"
        )
        self.console.print(
            Panel(summary, title="⚡ Estimated Bill", border_style="cyan")
        )

        table = Table(title="Appliances", show_header=True)
        table.add_column("Appliance", style="cyan")
        table.add_column("Category", style="dim")
        table.add_column("kWh/mo", justify="right", style="magenta")
        table.add_column("Cost/mo", justify="right", style="green")
        table.add_column("Share", width=18)
        for usage in bill.appliance_breakdown:
            table.add_row(
                usage.appliance.name,
                usage.appliance.category,
                f"{usage.monthly_kwh:.1f}",
                format_money(usage.monthly_cost),
                f"{usage.percentage:5.1f}% "
                f"{self._create_progress_bar(usage.percentage)}",
            )
        self.console.print(table)

        categories = Table(title="Categories", show_header=True)
        categories.add_column("Category")
        categories.add_column("kWh/mo", justify="right", style="magenta")
        categories.add_column("Cost/mo", justify="right", style="green")
        categories.add_column("Share", justify="right")
        for cat in bill.category_breakdown:
            categories.add_row(
                Text(f"■ {cat.category}", style=cat.color),
                f"{cat.monthly_kwh:.1f}",
                format_money(cat.monthly_cost),
                f"{cat.percentage:.1f}%",
            )
        self.console.print(categories)

    def _create_progress_bar(self, percentage: float, width: int = 10) -> str:
        """Create a simple progress bar string.

        Args:
            percentage: Percentage value (0-100)
            width: Width of the bar in characters

        Returns:
            Progress bar string
        """
        filled = int((percentage / 100) * width)
        bar = "█" * filled + "░" * (width - filled)
        return f"[{bar}]"

    # Chat output

    def print_chat_message(self, message: ChatMessage) -> None:
        """Print one transcript entry with its suggestion chips."""
        if not self.use_rich:
            self._print_chat_message_plain(message)
        else:
            self._print_chat_message_rich(message)

    def _print_chat_message_plain(self, message: ChatMessage) -> None:
        speaker = "Assistant" if message.is_bot else "You"
        stamp = message.timestamp.strftime("%H:%M")
        print(f"[{stamp}] {speaker}: {message.text}")
        if message.suggestions:
            for i, suggestion in enumerate(message.suggestions, start=1):
                print(f"    {i}. {suggestion}")

    def _print_chat_message_rich(self, message: ChatMessage) -> None:
        assert self.console is not None
        stamp = message.timestamp.strftime("%H:%M")
        if not message.is_bot:
            self.console.print(f"[dim]{stamp}[/dim] [bold]You:[/bold] ", end="")
            self.console.print(Text(message.text))
            return

        body = Text(message.text)
        if message.suggestions:
            body.append("\n")
            for i, suggestion in enumerate(message.suggestions, start=1):
                body.append(f"\n {i}. ", style="dim")
                body.append(suggestion, style="cyan")
        self.console.print(
            Panel(
                body,
                title="🤖 Energy Assistant",
                subtitle=stamp,
                border_style="blue",
            )
        )

    def print_topics(self, topics: tuple[KnowledgeTopic, ...]) -> None:
        """Print the knowledge base topics and their keywords."""
        if not self.use_rich:
            for topic in topics:
                print(f"{topic.name:<12} {', '.join(topic.keywords)}")
            return

        assert self.console is not None
        table = Table(title="Knowledge Base", show_header=True)
        table.add_column("Topic", style="cyan")
        table.add_column("Keywords")
        table.add_column("Suggestions", style="dim")
        for topic in topics:
            table.add_row(
                topic.name,
                ", ".join(topic.keywords),
                "\n".join(topic.suggestions),
            )
        self.console.print(table)

    # Status messages

    def print_error(
        self,
        message: str,
        title: str = "Error",
        details: list[str] | None = None,
    ) -> None:
        """Print an error message.

        Args:
            message: Main error message
            title: Panel title
            details: Optional list of detail lines
        """
        if not self.use_rich:
            print(f"{title}: {message}")
            for detail in details or []:
                print(f"  • {detail}")
            return

        assert self.console is not None
        content = f"❌ {title}\n\n{message}"
        if details:
            content += "\n\nDetails:"
            for detail in details:
                content += f"\n  • {detail}"
        self.console.print(Panel(content, border_style="red", padding=(1, 2)))

    def print_info(self, message: str) -> None:
        if not self.use_rich:
            print(f"ℹ {message}")
        else:
            assert self.console is not None
            self.console.print(
                Panel(f"[blue]ℹ {message}[/blue]", border_style="blue")
            )

    def print_json(self, data: Any) -> None:
        """Print JSON, syntax-highlighted when Rich is enabled."""
        json_str = json.dumps(data, indent=2, default=str)
        if not self.use_rich:
            print(json_str)
        else:
            assert self.console is not None
            self.console.print(
                Syntax(json_str, "json", theme="monokai", line_numbers=False)
            )


# Global formatter instance
_formatter: OutputFormatter | None = None


def get_formatter() -> OutputFormatter:
    """Get the global formatter instance."""
    global _formatter
    if _formatter is None:
        _formatter = OutputFormatter()
    return _formatter

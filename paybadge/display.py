"""Console output using Rich for the paybadge CLI.

Renders:
- Exchange rate tables
- The preset catalogue
- Generated embed code
"""

from typing import Any, Mapping, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from paybadge.code_generator import BadgeCode


class ConsoleDisplay:
    """Rich-based console output for CLI commands.

    Args:
        console: Console to print to (defaults to stdout)
    """

    def __init__(self, console: Optional[Console] = None):
        # Use legacy_windows=True for ASCII-safe output on Windows consoles
        self.console = console or Console(legacy_windows=True)

    def show_rates(self, rates: Mapping[str, Optional[float]], base_currency: str) -> None:
        """Display a table of exchange rates against one base currency.

        Missing rates (failed lookups) are shown as an error marker.
        """
        if not rates:
            self.console.print("[yellow]No rates to display.[/yellow]")
            return

        table = Table(
            title=f"Exchange Rates ({base_currency.upper()})",
            show_header=True,
            header_style="bold magenta",
            border_style="dim",
            box=box.ASCII,
        )
        table.add_column("Currency", style="cyan", no_wrap=True)
        table.add_column("Rate", justify="right", no_wrap=True)

        for currency, rate in rates.items():
            if rate is None:
                value = "[red]unavailable[/red]"
            else:
                value = f"[green]{rate:,.8g}[/green]"
            table.add_row(currency.upper(), value)

        self.console.print(table)

    def show_presets(self, presets: Mapping[str, Mapping[str, Any]]) -> None:
        """Display the available badge presets."""
        table = Table(
            show_header=True,
            header_style="bold magenta",
            border_style="dim",
            box=box.ASCII,
        )
        table.add_column("Preset", style="cyan", no_wrap=True)
        table.add_column("Alt Text")
        table.add_column("Badge Parameters")

        for name, preset in presets.items():
            params = ", ".join(f"{key}={value}" for key, value in preset["badgeParams"].items())
            table.add_row(name, preset["altText"], params)

        self.console.print(Rule("[bold]Badge Presets[/bold]", style="magenta", characters="-"))
        self.console.print(table)

    def show_code(self, result: BadgeCode) -> None:
        """Display generated embed code in a panel with its badge URL."""
        self.console.print(
            Panel(
                Text(result.code),
                title=f"[bold cyan]{result.format}[/bold cyan]",
                box=box.ASCII,
                expand=False,
            )
        )
        self.console.print(Text(f"Badge URL: {result.badge_url}", style="dim"))

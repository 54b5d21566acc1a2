"""Terminal output for the science-rewards commands.

JSON summaries go to stdout and anything meant for a person goes to
stderr, so a run summary can be piped to other tools while the
notifications stay visible in the terminal.
"""

import json
from collections.abc import Sequence
from typing import Any, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from science_rewards.protocols import MessageColor, Notification
from science_rewards.reports import ReportRecord

console = Console(stderr=True)

_PANEL_STYLES = {
    MessageColor.BLUE: "blue",
    MessageColor.GREEN: "green",
    MessageColor.RED: "red",
    MessageColor.YELLOW: "yellow",
}


def output_json(data: Any, indent: Optional[int] = 2):
    """Print a run summary, backlog or notification as JSON on stdout."""
    print(json.dumps(data, indent=indent), flush=True)


def _status(marker: str, message: str, style: Optional[str] = None):
    console.print(f"{marker} {message}", style=style)


def log_info(message: str, quiet: bool = False):
    if not quiet:
        _status("[blue]ℹ[/blue]", message)


def log_success(message: str, quiet: bool = False):
    """Report a completed save or flush; skipped when quiet."""
    if not quiet:
        _status("[green]✓[/green]", message)


def log_error(message: str):
    """Report a failure. Errors ignore --quiet and --json."""
    _status("[red]✗[/red]", message, style="bold red")


# ============================================================================
# Reward Display
# ============================================================================


def display_notification(notification: Notification, tick: Optional[int] = None):
    """Show a posted notification as a panel.

    Args:
        notification: Notification handed to the surface
        tick: Tick at which it was posted, if known
    """
    subtitle = f"tick {tick}" if tick is not None else None
    console.print(
        Panel(
            Text(notification.body),
            title=Text(notification.title, style="bold"),
            subtitle=subtitle,
            border_style=_PANEL_STYLES.get(notification.color, "white"),
            expand=False,
        )
    )


def display_backlog(records: Sequence[ReportRecord], title: str = "Pending Reports"):
    """Show backlog records as a table."""
    table = Table(title=f"{title} ({len(records)})")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Subject", style="blue")
    table.add_column("Funds", justify="right", style="green")
    table.add_column("Rep", justify="right", style="magenta")

    for index, record in enumerate(records, start=1):
        table.add_row(str(index), Text(record.subject), f"{record.funds:.1f}", f"{record.reputation:.1f}")

    console.print(table)


def notification_to_dict(notification: Notification) -> dict[str, Any]:
    return {
        "title": notification.title,
        "body": notification.body,
        "color": notification.color.value,
        "icon": notification.icon.value,
    }

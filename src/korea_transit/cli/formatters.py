"""Output formatters for CLI display."""

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from ..core.models import RenderedResponse, ResponseFormat

console = Console()


def print_response(response: RenderedResponse) -> None:
    """Display a rendered tool response.

    JSON bodies are echoed untouched so they can be piped; markdown is
    rendered through rich.
    """
    if response.format is ResponseFormat.JSON:
        click.echo(response.body)
        return

    console.print(Markdown(response.body))
    if response.truncated:
        console.print("[yellow]Output was truncated to the character limit.[/yellow]")


def format_settings_table(settings: dict[str, object]) -> Table:
    """Build a table of configuration values."""
    table = Table(
        title="Current Configuration", show_header=True, header_style="bold magenta"
    )
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    for key, value in settings.items():
        table.add_row(key, str(value))
    return table

"""CLI main entry point for Korea transit queries."""

import asyncio
import logging
import sys
from collections.abc import Callable
from typing import Any

import click
from rich.console import Console

from ..core import (
    ConfigurationError,
    InvalidArgumentError,
    ToolName,
    TransitSettings,
    TransitToolService,
)
from .formatters import format_settings_table, print_response

console = Console()
error_console = Console(stderr=True)


def _query_options(with_limit: bool = True) -> Callable[[Callable[..., Any]], Any]:
    """Options shared by the query commands."""

    def decorator(func: Callable[..., Any]) -> Any:
        func = click.option(
            "--format",
            "-f",
            "output_format",
            type=click.Choice(["markdown", "json"]),
            default="markdown",
            help="Output format",
        )(func)
        func = click.option(
            "--timeout", "-t", type=float, default=None, help="Request timeout in seconds"
        )(func)
        if with_limit:
            func = click.option(
                "--limit", "-l", type=int, default=10, help="Maximum results (1-20)"
            )(func)
        return func

    return decorator


def _load_settings(timeout: float | None) -> TransitSettings:
    try:
        settings = TransitSettings.from_env()
    except ConfigurationError as e:
        error_console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)
    if timeout is not None:
        settings = settings.model_copy(update={"timeout": timeout})
    return settings


def _run_tool(tool: ToolName, arguments: dict[str, Any], timeout: float | None) -> None:
    service = TransitToolService(settings=_load_settings(timeout))
    try:
        with console.status(f"[bold green]Running {tool.value}..."):
            response = asyncio.run(service.run(tool, arguments))
    except InvalidArgumentError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    finally:
        service.close()
    print_response(response)


@click.group()
@click.version_option(version="1.0.0")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logs")
def cli(verbose: bool) -> None:
    """Korea Transit - Seoul subway, bus and bike-share information."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


@cli.command()
@click.argument("station_name")
@_query_options()
def subway(station_name: str, output_format: str, timeout: float | None, limit: int) -> None:
    """Show realtime arrivals at a subway station.

    Examples:
        korea-transit subway 강남
        korea-transit subway 서울역 --format json
    """
    _run_tool(
        ToolName.SUBWAY_ARRIVAL,
        {"station_name": station_name, "limit": limit, "response_format": output_format},
        timeout,
    )


@cli.command()
@click.option("--line", help="Line number (1-9); all lines when omitted")
@_query_options(with_limit=False)
def status(line: str | None, output_format: str, timeout: float | None) -> None:
    """Show subway operating status."""
    _run_tool(
        ToolName.SUBWAY_STATUS,
        {"line": line, "response_format": output_format},
        timeout,
    )


@cli.command()
@click.argument("ars_id")
@_query_options()
def bus(ars_id: str, output_format: str, timeout: float | None, limit: int) -> None:
    """Show bus arrivals at a stop, by 5-digit stop number.

    Examples:
        korea-transit bus 22009
    """
    _run_tool(
        ToolName.BUS_ARRIVAL,
        {"ars_id": ars_id, "limit": limit, "response_format": output_format},
        timeout,
    )


@cli.command()
@click.argument("query")
@_query_options()
def stops(query: str, output_format: str, timeout: float | None, limit: int) -> None:
    """Search bus stops by name or stop number."""
    _run_tool(
        ToolName.SEARCH_BUS_STATION,
        {"query": query, "limit": limit, "response_format": output_format},
        timeout,
    )


@cli.command()
@click.argument("query")
@_query_options()
def bike(query: str, output_format: str, timeout: float | None, limit: int) -> None:
    """Search bike-share stations and their availability."""
    _run_tool(
        ToolName.BIKE_STATION,
        {"query": query, "limit": limit, "response_format": output_format},
        timeout,
    )


@cli.command()
@click.argument("location")
@_query_options(with_limit=False)
def around(location: str, output_format: str, timeout: float | None) -> None:
    """Show subway, bus and bike-share information around a location.

    Examples:
        korea-transit around 강남역
    """
    _run_tool(
        ToolName.COMBINED_INFO,
        {"location": location, "response_format": output_format},
        timeout,
    )


@cli.command()
def serve() -> None:
    """Run the MCP server over stdio."""
    from ..mcp.server import main_sync

    main_sync()


@cli.group()
def config() -> None:
    """Configuration management."""
    pass


@config.command("show")
def show_config() -> None:
    """Show current configuration."""
    settings = _load_settings(None)
    console.print(format_settings_table(settings.masked()))


if __name__ == "__main__":
    cli()

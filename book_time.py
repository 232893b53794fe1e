#!/usr/bin/env python3
"""
Troi Time Booking CLI

List calculation positions, book, change and remove hours and look at the
calendar of a troi instance from the command line.
"""

import os
import re
import logging
from pathlib import Path
from typing import Optional, Dict, Any, Iterator, List
from contextlib import contextmanager
from datetime import date

import typer
import yaml
from rich.console import Console
from rich.table import Table
from rich import box
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from troi_client import (
    TroiClient,
    TroiConfig,
    TroiClientError,
    AuthenticationFailed,
    NoMatchingElement,
    CalendarEventType
)

# Typer App & Rich Console
app = typer.Typer(help="Book and inspect troi time entries")
console = Console()

DEFAULT_CONFIG_PATH = Path("config.yaml")


# ============================================================================
# Pydantic models for config validation
# ============================================================================

class TroiConfigModel(BaseModel):
    """Troi API configuration"""
    base_url: str = Field(..., min_length=1, description="Troi API base URL")
    client_name: str = Field(..., min_length=1, description="Name of the troi client (company)")
    username: str = Field(..., min_length=1, description="Troi login name")
    password: str = Field(..., min_length=1, description="Troi password")
    proxy_url: Optional[str] = Field(default=None, description="Origin of the server-side proxy")

    @field_validator('base_url', 'proxy_url')
    @classmethod
    def validate_url(cls, v):
        if v is None:
            return v
        if not v.startswith(('http://', 'https://')):
            raise ValueError("must start with http:// or https://")
        # paths are appended as '/clients', '/billings/hours', ...
        return v.rstrip('/')


class LoggingConfig(BaseModel):
    """Logging configuration"""
    level: str = Field(default="INFO")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v):
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level '{v}'")
        return level


class Config(BaseModel):
    """Complete configuration"""
    troi: TroiConfigModel
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# ============================================================================
# Config management
# ============================================================================

ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')


def substitute_env_vars(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Replaces ${VAR_NAME} in config values with os.getenv('VAR_NAME').

    Credentials usually live in .env as TROI_USERNAME / TROI_PASSWORD and are
    referenced from config.yaml this way.
    """
    def substitute_value(value, key_path):
        if isinstance(value, str):
            for var_name in ENV_VAR_PATTERN.findall(value):
                env_value = os.getenv(var_name)
                if env_value is None:
                    raise ValueError(
                        f"'{key_path}' references environment variable '{var_name}', which is not set"
                    )
                value = value.replace(f'${{{var_name}}}', env_value)
            return value
        if isinstance(value, dict):
            return {k: substitute_value(v, f"{key_path}.{k}" if key_path else k) for k, v in value.items()}
        if isinstance(value, list):
            return [substitute_value(item, f"{key_path}[{i}]") for i, item in enumerate(value)]
        return value

    return substitute_value(config_dict, "")


def load_config(config_path: Path) -> Config:
    """
    Loads and validates the YAML configuration.

    Raises:
        FileNotFoundError: If the config file does not exist
        ValueError: If the troi section is missing or invalid, or an env var is unset
    """
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            f"Copy config_example.yaml to config.yaml or set the TROI_* environment variables."
        )

    with open(config_path) as f:
        config_dict = yaml.safe_load(f) or {}

    if 'troi' not in config_dict:
        raise ValueError(f"{config_path} has no 'troi' section (base_url, client_name, username, password)")

    config_dict = substitute_env_vars(config_dict)

    try:
        return Config(**config_dict)
    except ValidationError as e:
        error_msg = f"Invalid troi configuration in {config_path}:\n"
        for error in e.errors():
            field = ' -> '.join(str(x) for x in error['loc'])
            error_msg += f"  - {field}: {error['msg']}\n"
        raise ValueError(error_msg)


def create_troi_config(config: Config) -> TroiConfig:
    troi = config.troi
    return TroiConfig(
        base_url=troi.base_url,
        client_name=troi.client_name,
        username=troi.username,
        password=troi.password,
        proxy_url=troi.proxy_url
    )


def setup_logging(verbose: bool, level: str = "INFO"):
    log_level = logging.DEBUG if verbose else getattr(logging, level, logging.INFO)
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@contextmanager
def connect(config_path: Path, verbose: bool, initialize: bool = True) -> Iterator[TroiClient]:
    """
    Yields an (initialized) client built from config.yaml, or from the TROI_*
    environment variables when there is no config file.

    Troi errors raised inside the block end the command with exit code 1.
    """
    client = build_client(config_path, verbose)
    try:
        if initialize:
            client.initialize()
        yield client
    except AuthenticationFailed:
        console.print("[red]✗ Authentication failed.[/red] Check username and password.")
        raise typer.Exit(code=1)
    except NoMatchingElement:
        console.print(f"[red]✗ Unknown client:[/red] '{client.config.client_name}' does not exist in troi.")
        raise typer.Exit(code=1)
    except TroiClientError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)
    finally:
        client.close()


def build_client(config_path: Path, verbose: bool) -> TroiClient:
    load_dotenv()

    if config_path.exists():
        try:
            config = load_config(config_path)
        except ValueError as e:
            console.print(f"[red]✗ Configuration error:[/red]\n{e}")
            raise typer.Exit(code=1)
        setup_logging(verbose, config.logging.level)
        troi_config = create_troi_config(config)
    else:
        setup_logging(verbose)
        troi_config = TroiConfig.from_env()

    try:
        return TroiClient(troi_config)
    except TroiClientError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)


def parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        console.print(f"[red]✗ Invalid date:[/red] {value}")
        console.print("Please use YYYY-MM-DD format (e.g., 2024-12-01)")
        raise typer.Exit(code=1)


# ============================================================================
# Display helpers
# ============================================================================

def display_calculation_positions(positions: List):
    table = Table(title="Calculation Positions", box=box.ROUNDED)
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Name", style="white")

    for position in sorted(positions, key=lambda p: (p.name or '').lower()):
        table.add_row(str(position.id), position.name or '')

    console.print(table)


def display_time_entries(time_entries: List):
    table = Table(title="Time Entries", box=box.ROUNDED)
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Date", style="white")
    table.add_column("Hours", style="green", justify="right")
    table.add_column("Description", style="white")

    total_hours = 0.0
    for entry in time_entries:
        hours = float(entry.hours or 0)
        total_hours += hours
        table.add_row(str(entry.id), entry.date, f"{hours:.2f}", entry.description or '')

    table.add_section()
    table.add_row("", "Total", f"{total_hours:.2f}", "")
    console.print(table)


def display_calendar_events(events: List):
    table = Table(title="Calendar Events", box=box.ROUNDED)
    table.add_column("Start", style="white")
    table.add_column("End", style="white")
    table.add_column("Type", style="cyan", justify="center")
    table.add_column("Subject", style="white")

    for event in events:
        table.add_row(event.start_date, event.end_date, event.type or '', event.subject or '')

    console.print(table)


# ============================================================================
# Commands
# ============================================================================

CONFIG_OPTION = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c", help="Path to config.yaml")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable debug logging")


@app.command()
def positions(
    show_all: bool = typer.Option(False, "--all", "-a", help="Include non-favourite positions"),
    config_path: Path = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """List the calculation positions time can be booked on."""
    with connect(config_path, verbose) as client:
        calculation_positions = client.list_calculation_positions(favourites_only=not show_all)

    if not calculation_positions:
        console.print("[yellow]⚠ No calculation positions found[/yellow]")
        raise typer.Exit(code=0)

    display_calculation_positions(calculation_positions)


@app.command()
def entries(
    position_id: int = typer.Option(..., "--position", "-p", help="Calculation position ID"),
    from_date: str = typer.Option(..., "--from", "-f", help="Start date (YYYY-MM-DD)"),
    to_date: str = typer.Option(..., "--to", "-t", help="End date (YYYY-MM-DD)"),
    employee_id: Optional[int] = typer.Option(None, "--employee", "-e", help="Another employee's ID"),
    config_path: Path = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """List booked hours on a calculation position."""
    start_date = parse_date(from_date)
    end_date = parse_date(to_date)
    if start_date > end_date:
        console.print("[red]✗ Invalid date range:[/red] from_date must be <= to_date")
        raise typer.Exit(code=1)

    with connect(config_path, verbose) as client:
        time_entries = client.list_time_entries(position_id, start_date, end_date, employee_id=employee_id)

    if not time_entries:
        console.print(f"[yellow]⚠ No time entries found[/yellow] between {start_date} and {end_date}")
        raise typer.Exit(code=0)

    display_time_entries(time_entries)


@app.command()
def add(
    position_id: int = typer.Option(..., "--position", "-p", help="Calculation position ID"),
    hours: float = typer.Option(..., "--hours", "-h", help="Hours to book"),
    description: str = typer.Option(..., "--description", "-d", help="Remark for the booking"),
    on_date: Optional[str] = typer.Option(None, "--date", help="Date (YYYY-MM-DD), defaults to today"),
    config_path: Path = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Book hours on a calculation position."""
    booking_date = parse_date(on_date) if on_date else date.today()

    with connect(config_path, verbose) as client:
        client.create_time_entry(position_id, booking_date, hours, description)

    console.print(f"[green]✓[/green] Booked {hours:.2f}h on {booking_date} (position {position_id})")


@app.command()
def update(
    billing_id: int = typer.Argument(..., help="ID of the time entry to replace"),
    position_id: int = typer.Option(..., "--position", "-p", help="Calculation position ID"),
    hours: float = typer.Option(..., "--hours", "-h", help="Hours"),
    description: str = typer.Option(..., "--description", "-d", help="Remark for the booking"),
    on_date: str = typer.Option(..., "--date", help="Date (YYYY-MM-DD)"),
    config_path: Path = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Replace an existing time entry."""
    booking_date = parse_date(on_date)

    with connect(config_path, verbose) as client:
        client.update_time_entry(position_id, booking_date, hours, description, billing_id)

    console.print(f"[green]✓[/green] Updated time entry {billing_id}")


@app.command()
def delete(
    entry_id: int = typer.Argument(..., help="ID of the time entry to delete"),
    via_proxy: bool = typer.Option(False, "--via-proxy", help="Delete through the server-side proxy"),
    config_path: Path = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Delete a time entry."""
    if via_proxy:
        # the proxy authenticates on its own, no client/employee lookup needed
        with connect(config_path, verbose, initialize=False) as client:
            response = client.delete_time_entry_via_server_side_proxy(entry_id)
        if not response.ok:
            console.print(f"[red]✗ Proxy answered HTTP {response.status_code}[/red]")
            raise typer.Exit(code=1)
    else:
        with connect(config_path, verbose) as client:
            client.delete_time_entry(entry_id)

    console.print(f"[green]✓[/green] Deleted time entry {entry_id}")


@app.command()
def events(
    from_date: str = typer.Option(..., "--from", "-f", help="Start date (YYYY-MM-DD)"),
    to_date: str = typer.Option(..., "--to", "-t", help="End date (YYYY-MM-DD)"),
    event_type: Optional[CalendarEventType] = typer.Option(None, "--type", help="Only events of this type"),
    config_path: Path = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Show calendar events (holidays, absences, ...)."""
    start_date = parse_date(from_date)
    end_date = parse_date(to_date)

    with connect(config_path, verbose, initialize=False) as client:
        calendar_events = client.list_calendar_events(start_date, end_date, event_type or "")

    if not calendar_events:
        console.print(f"[yellow]⚠ No calendar events[/yellow] between {start_date} and {end_date}")
        raise typer.Exit(code=0)

    display_calendar_events(calendar_events)


if __name__ == "__main__":
    app()

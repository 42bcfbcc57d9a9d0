"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import List, Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.booking_api_client import BookingApiClient
from ..adapters.snapshot_client import SnapshotClient
from ..config import AppConfig
from ..domain.exceptions import SlotEngineError
from ..services.availability import AvailabilityService

app = typer.Typer(
    name="bookingslots",
    help="Compute bookable appointment times for a business",
    add_completion=False
)

console = Console()

SnapshotOption = Annotated[Optional[Path], typer.Option("--snapshot", help="JSON snapshot with business, bookings and blockedSlots.")]
BusinessOption = Annotated[Optional[str], typer.Option("--business", "-b", help="Business id (required with the HTTP API).")]
ApiUrlOption = Annotated[Optional[str], typer.Option("--api-url", help="Platform base URL. Overrides api_base_url from the config.")]
ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
ServiceOption = Annotated[Optional[List[str]], typer.Option("--service", "-s", help="Service name; repeat for several services.")]
StaffOption = Annotated[Optional[str], typer.Option("--staff", help="Staff member name.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _build_client(config: AppConfig, snapshot: Optional[Path], api_url: Optional[str]):
    """Pick the data source: a snapshot file wins over the HTTP API."""
    if snapshot is not None:
        return SnapshotClient(
            snapshot,
            default_duration=config.engine.default_duration_minutes,
            cell_minutes=config.engine.grid_minutes,
        )

    base_url = api_url or config.api_base_url
    if not base_url:
        console.print("[red]No data source: pass --snapshot or --api-url.[/red]")
        raise typer.Exit(1)

    return BookingApiClient(
        base_url,
        timeout=config.request_timeout_seconds,
        default_duration=config.engine.default_duration_minutes,
        cell_minutes=config.engine.grid_minutes,
    )


def _parse_day(value: Optional[str], default):
    """Parse ``YYYY-MM-DD``; without a value the given default date is used."""
    if not value:
        return default
    try:
        return pendulum.from_format(value, "YYYY-MM-DD").date()
    except ValueError as e:
        console.print(f"[red]Invalid date {value!r}: {e}[/red]")
        raise typer.Exit(1)


def _parse_now(value: Optional[str]):
    if not value:
        return pendulum.now()
    try:
        return pendulum.from_format(value, "YYYY-MM-DD HH:mm")
    except ValueError as e:
        console.print(f"[red]Invalid --now value {value!r}, expected 'YYYY-MM-DD HH:mm': {e}[/red]")
        raise typer.Exit(1)


def _load_business(client, business_id: Optional[str]):
    if business_id is None and isinstance(client, BookingApiClient):
        console.print("[red]--business is required when reading from the HTTP API.[/red]")
        raise typer.Exit(1)
    return client.get_business(business_id)


@app.command()
def slots(
    date: Annotated[Optional[str], typer.Option("--date", "-d", help="Date (YYYY-MM-DD). Defaults to the date of --now.")] = None,
    service: ServiceOption = None,
    staff: StaffOption = None,
    now: Annotated[Optional[str], typer.Option("--now", help="Current time as 'YYYY-MM-DD HH:mm'. Defaults to the system clock.")] = None,
    snapshot: SnapshotOption = None,
    business: BusinessOption = None,
    api_url: ApiUrlOption = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    List bookable start times for a date.

    Examples:

        bookingslots slots --snapshot salon.json -d 2025-03-10 -s Haircut

        bookingslots slots --snapshot salon.json -s Haircut -s Coloring --staff Ana

        bookingslots slots --api-url https://example.com -b 42 -s Haircut
    """
    _configure_logging(verbose)

    try:
        config = AppConfig.load_or_default(config_file)
        client = _build_client(config, snapshot, api_url)
        service_layer = AvailabilityService(client, settings=config.engine)

        current = _parse_now(now)
        day = _parse_day(date, current.date())
        business_record = _load_business(client, business)

        result = service_layer.find_slots_for_business(
            business_record,
            day=day,
            service_names=service or [],
            staff_name=staff,
            now=current,
        )

        for warning in result.warnings:
            console.print(f"[yellow]⚠ {warning}[/yellow]")

        request = result.request
        console.print()
        console.print(f"[bold cyan]{business_record.name or 'Business'}[/bold cyan] – {day.format('dddd, DD.MM.YYYY')}")
        console.print(f"   Services: {', '.join(request.service_names) or '-'}")
        console.print(f"   Staff: {request.staff_name or 'any'}")
        console.print(f"   Duration: {request.total_duration_minutes} min, price: {request.total_price}")
        console.print()

        if not result.slots:
            console.print("[yellow]⚠ No times available for this date.[/yellow]\n")
            return

        console.print(f"[bold green]✓ {len(result.slots)} bookable time(s):[/bold green]\n")
        for slot in result.slots:
            console.print(f"  {slot.format_display()}")
        console.print()

    except (SlotEngineError, ValueError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def staff(
    service: ServiceOption = None,
    snapshot: SnapshotOption = None,
    business: BusinessOption = None,
    api_url: ApiUrlOption = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    List staff members who can perform all given services.
    """
    _configure_logging(verbose)

    try:
        config = AppConfig.load_or_default(config_file)
        client = _build_client(config, snapshot, api_url)
        service_layer = AvailabilityService(client, settings=config.engine)
        business_record = _load_business(client, business)

        members = service_layer.eligible_staff(business_record, service or [])

        if not members:
            console.print("[yellow]No staff member offers this combination; book without a staff member.[/yellow]")
            return

        table = Table(
            title="Eligible staff",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Name", style="bold yellow")
        table.add_column("Services", style="dim")
        table.add_column("Breaks", style="dim")

        for member in members:
            services_text = ", ".join(sorted(member.assigned_service_names)) or "all"
            breaks_text = ", ".join(str(b.as_range()) for b in member.breaks) or "-"
            table.add_row(member.name, services_text, breaks_text)

        console.print()
        console.print(table)
        console.print()

    except (SlotEngineError, ValueError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def dates(
    start: Annotated[Optional[str], typer.Option("--start", help="First date (YYYY-MM-DD). Defaults to today.")] = None,
    days: Annotated[int, typer.Option("--days", help="Number of days to check.", min=1)] = 14,
    staff: StaffOption = None,
    snapshot: SnapshotOption = None,
    business: BusinessOption = None,
    api_url: ApiUrlOption = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    List dates that can be selected for a booking.
    """
    _configure_logging(verbose)

    try:
        config = AppConfig.load_or_default(config_file)
        client = _build_client(config, snapshot, api_url)
        service_layer = AvailabilityService(client, settings=config.engine)
        business_record = _load_business(client, business)

        today = pendulum.today().date()
        first_day = _parse_day(start, today)

        open_dates = service_layer.bookable_dates(
            business_record,
            start=first_day,
            days=days,
            today=today,
            staff_name=staff,
        )

        if not open_dates:
            console.print("[yellow]No bookable dates in this range.[/yellow]")
            return

        for day in open_dates:
            console.print(f"  {day.format('ddd DD.MM.YYYY')}")

    except (SlotEngineError, ValueError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]bookingslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()

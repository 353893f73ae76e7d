"""
Main CLI application using Typer.
"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..adapters.email_sender import ConsoleEmailSender
from ..adapters.in_memory_store import InMemoryAppointmentStore
from ..config import AppConfig, get_default_config_path
from ..functions import BookingApp
from ..handlers import ApiResponse
from ..request_logger import configure_logging

app = typer.Typer(
    name="barberbooking",
    help="Query free slots and manage barbershop appointments",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
MockOption = Annotated[bool, typer.Option("--mock", help="Use the in-memory store and print emails instead of sending them.")]


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """Load the YAML config; fall back to defaults when no file was given or found."""
    config_path = config_file or get_default_config_path()
    if config_file is None and not config_path.exists():
        config = AppConfig()
    else:
        config = AppConfig.load_from_yaml(config_path)
    return config.with_env_overrides()


def _build_app(config_file: Optional[Path], mock: bool) -> BookingApp:
    config = _load_config(config_file)
    configure_logging(config.log_level)

    if mock:
        console.print("[yellow]⚠  MOCK MODE: using in-memory appointments[/yellow]\n")
        store = InMemoryAppointmentStore.from_seed_file()
        return BookingApp(
            config,
            store_factory=lambda: store,
            email_sender=ConsoleEmailSender(shop_name=config.shop_name, console=console),
        )

    return BookingApp(config)


def _unwrap(response: ApiResponse):
    """Return the response data or print the error and exit."""
    body = response.body
    if body.get("success"):
        return body.get("data")

    error = body.get("error", {})
    console.print(f"[bold red]Error ({error.get('code')}):[/bold red] {error.get('message')}")
    for detail in error.get("details", []):
        console.print(f"  • {detail['field']}: {detail['message']}")
    raise typer.Exit(1)


@app.command()
def barbers(
    config_file: ConfigOption = None,
):
    """
    List all barbers.
    """
    try:
        booking_app = _build_app(config_file, mock=False)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    data = _unwrap(booking_app.barbers())

    table = Table(title="Barbers", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="bold yellow")
    table.add_column("Name")
    table.add_column("Specialty", style="dim")

    for barber in data:
        table.add_row(str(barber["id"]), barber["name"], barber.get("specialty", ""))

    console.print()
    console.print(table)
    console.print()


@app.command()
def services(
    config_file: ConfigOption = None,
):
    """
    List all services with duration and price.
    """
    try:
        booking_app = _build_app(config_file, mock=False)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    data = _unwrap(booking_app.services())

    table = Table(title="Services", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="bold yellow")
    table.add_column("Name")
    table.add_column("Category", style="dim")
    table.add_column("Duration", justify="right")
    table.add_column("Price", justify="right")

    for service in data:
        table.add_row(
            str(service["id"]),
            service["name"],
            service["category"],
            f"{service['duration']} min",
            f"R$ {service['price']:.2f}",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def slots(
    barber_id: Annotated[int, typer.Argument(help="Barber ID")],
    date: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    service_id: Annotated[Optional[int], typer.Option("--service", "-s", help="Service ID; sets slot length")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Show the free start times of a barber on a date.

    Examples:

        barberbooking slots 1 2030-01-15
        barberbooking slots 1 2030-01-15 --service 6 --mock
    """
    try:
        booking_app = _build_app(config_file, mock)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    body = {"barberId": barber_id, "date": date}
    if service_id is not None:
        body["serviceId"] = service_id

    data = _unwrap(booking_app.time_slots(body))
    available = data["availableSlots"]

    if not available:
        console.print(f"[yellow]⚠ No free slots on {date}.[/yellow]")
        return

    console.print(f"[bold green]✓ {len(available)} free slot(s) on {date}:[/bold green]\n")
    for slot in available:
        console.print(f"  {slot}")
    console.print()


@app.command()
def book(
    barber_id: Annotated[int, typer.Option("--barber", "-b", help="Barber ID")],
    service_id: Annotated[int, typer.Option("--service", "-s", help="Service ID")],
    date: Annotated[str, typer.Option("--date", "-d", help="Date (YYYY-MM-DD)")],
    time: Annotated[str, typer.Option("--time", "-t", help="Start time (HH:MM AM/PM)")],
    name: Annotated[str, typer.Option("--name", help="Customer name")],
    email: Annotated[str, typer.Option("--email", help="Customer email")],
    whatsapp: Annotated[str, typer.Option("--whatsapp", help="Customer WhatsApp number")],
    payment: Annotated[str, typer.Option("--payment", help="'later' or 'now'")] = "later",
    send_confirmation: Annotated[bool, typer.Option("--send-confirmation", help="Email the confirmation right away")] = False,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Create an appointment.
    """
    try:
        booking_app = _build_app(config_file, mock)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    appointment = _unwrap(booking_app.appointments({
        "barberId": barber_id,
        "serviceId": service_id,
        "date": date,
        "time": time,
        "customerName": name,
        "customerEmail": email,
        "customerWhatsapp": whatsapp,
        "paymentMethod": payment,
    }))

    console.print(Panel.fit(
        f"[bold green]✓ Appointment created[/bold green]\n\n"
        f"[bold]ID:[/bold] {appointment['id']}\n"
        f"[bold]Barber:[/bold] {appointment['barber']['name']}\n"
        f"[bold]Service:[/bold] {appointment['service']['name']} ({appointment['service']['duration']} min)\n"
        f"[bold]When:[/bold] {appointment['date']} {appointment['time']}\n"
        f"[bold]Code:[/bold] {appointment['confirmationCode']}",
        title="Appointment"
    ))

    if send_confirmation:
        result = _unwrap(booking_app.appointment_confirmation({"appointmentId": appointment["id"]}))
        console.print(f"[green]✓ Confirmation email sent ({result['messageId']})[/green]")


@app.command()
def confirm(
    appointment_id: Annotated[str, typer.Argument(help="Appointment ID")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Send the confirmation email of an existing appointment.
    """
    try:
        booking_app = _build_app(config_file, mock)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    result = _unwrap(booking_app.appointment_confirmation({"appointmentId": appointment_id}))
    console.print(f"\n[green]✓ Confirmation email sent ({result['messageId']})[/green]\n")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]barberbooking[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()

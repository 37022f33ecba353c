"""
Command-line front end for the flight ledger.

Uses Typer for the CLI and Rich for terminal output. The address that signed
a command is passed with --as; the admin signs admin commands and passengers
sign their own bookings.

Usage:
    flight-ledger init GADMIN --as GADMIN
    flight-ledger create-flight --max-passengers 2 --distance 50 --src NYC --dest LON --as GADMIN
    flight-ledger search NYC LON
    flight-ledger buy <flight-id> GPASS --details economy --as GPASS
    flight-ledger cancel <flight-id> GPASS --as GPASS
    flight-ledger set-status <flight-id> takeoff --as GADMIN
"""

from contextlib import contextmanager
from typing import Iterator, List, Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .errors import LedgerError
from .models.flight import FlightDetails
from .models.types import new_flight_id
from .services.ledger import FlightLedger
from .utils.config import get_config
from .utils.logging import configure_logging

app = typer.Typer(
    help="Flight-booking ledger on a key-value store",
    add_completion=False
)
console = Console()

SignerOption = typer.Option([], "--as", help="Address that signed this call (repeatable)")


def build_ledger() -> FlightLedger:
    """Create a ledger over the configured store."""
    config = get_config()
    return FlightLedger(config.build_store(), escrow_account=config.escrow_account)


def _ledger(signers: List[str]) -> FlightLedger:
    return build_ledger().with_signers(*signers)


@contextmanager
def _ledger_errors() -> Iterator[None]:
    try:
        yield
    except LedgerError as e:
        console.print(f"[red]✗ {type(e).__name__} (code {e.code}): {e}[/red]")
        raise typer.Exit(code=1)


def _flights_table(flights: List[FlightDetails], title: str) -> Table:
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Flight", style="cyan", no_wrap=True)
    table.add_column("Route")
    table.add_column("Status")
    table.add_column("Seats", justify="right")
    table.add_column("Fare", justify="right")
    table.add_column("Escrow", justify="right")

    for flight in flights:
        table.add_row(
            flight.id,
            f"{flight.src} → {flight.dest}",
            flight.status.value,
            f"{flight.passenger_count}/{flight.max_passengers}",
            str(flight.distance),
            str(flight.escrow_amount),
        )
    return table


def _show_flights(flights: List[FlightDetails], title: str) -> None:
    if not flights:
        console.print(f"[yellow]No flights found ({title.lower()})[/yellow]")
        return
    console.print(_flights_table(flights, title))


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LEDGER_LOG_LEVEL")
):
    """Flight-booking ledger."""
    configure_logging(log_level or get_config().log_level)


@app.command()
def init(admin: str, signers: List[str] = SignerOption):
    """Provision the ledger admin (once)."""
    with _ledger_errors():
        _ledger(signers).initialize(admin)
    console.print(f"[green]✓ Ledger initialized with admin {admin}[/green]")


@app.command()
def admin():
    """Show the ledger admin."""
    with _ledger_errors():
        current = build_ledger().get_admin()
    console.print(current)


@app.command("new-id")
def new_id():
    """Print a fresh random flight identifier."""
    console.print(new_flight_id())


@app.command("create-flight")
def create_flight(
    max_passengers: int = typer.Option(..., "--max-passengers", help="Seat capacity"),
    distance: int = typer.Option(..., "--distance", help="Distance, used as the per-seat fare"),
    src: str = typer.Option(..., "--src", help="Departure token"),
    dest: str = typer.Option(..., "--dest", help="Arrival token"),
    flight_id: Optional[str] = typer.Option(None, "--id", help="Flight id (random if omitted)"),
    signers: List[str] = SignerOption,
):
    """Create a flight (admin)."""
    with _ledger_errors():
        flight = _ledger(signers).create_flight(
            flight_id or new_flight_id(), max_passengers, distance, src, dest
        )
    console.print(f"[green]✓ Flight {flight.id} created, escrow {flight.escrow_amount}[/green]")


@app.command()
def buy(
    flight_id: str,
    passenger: str,
    details: str = typer.Option("economy", "--details", help="Booking tag, e.g. seat class"),
    signers: List[str] = SignerOption,
):
    """Buy a ticket (passenger)."""
    with _ledger_errors():
        receipt = _ledger(signers).buy_ticket(flight_id, passenger, details)
    console.print(
        f"[green]✓ Ticket bought for {receipt.fare} "
        f"({receipt.passenger_count} passenger(s) on board)[/green]"
    )


@app.command()
def cancel(flight_id: str, passenger: str, signers: List[str] = SignerOption):
    """Cancel every ticket a passenger holds on a flight (passenger)."""
    with _ledger_errors():
        receipt = _ledger(signers).cancel_ticket(flight_id, passenger)
    console.print(
        f"[green]✓ Cancelled {receipt.tickets_cancelled} ticket(s): "
        f"refund {receipt.total_refund}, admin fee {receipt.total_admin_fee}[/green]"
    )


@app.command("set-status")
def set_status(flight_id: str, status: str, signers: List[str] = SignerOption):
    """Mark a flight as takeoff or cancelled (admin)."""
    with _ledger_errors():
        flight = _ledger(signers).update_flight_status(flight_id, status)
    console.print(f"[green]✓ Flight {flight.id} is now {flight.status.value}[/green]")


@app.command()
def search(src: str, dest: str):
    """List flights on a route."""
    with _ledger_errors():
        flights = build_ledger().get_flights_search(src, dest)
    _show_flights(flights, f"Flights {src} → {dest}")


@app.command()
def flights(signers: List[str] = SignerOption):
    """List every flight (admin)."""
    with _ledger_errors():
        found = _ledger(signers).get_flights_admin()
    _show_flights(found, "All flights")


@app.command()
def flight(flight_id: str, signers: List[str] = SignerOption):
    """Show one flight (admin)."""
    with _ledger_errors():
        found = _ledger(signers).get_flight_admin(flight_id)
    console.print(_flights_table([found], "Flight"))


@app.command("my-flights")
def my_flights(passenger: str):
    """List the flights a passenger holds tickets on."""
    with _ledger_errors():
        found = build_ledger().get_flights_pass(passenger)
    _show_flights(found, f"Flights booked by {passenger}")


if __name__ == "__main__":
    app()

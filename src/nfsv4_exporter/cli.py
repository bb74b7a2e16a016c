"""NFSv4 exporter CLI.

Commands:
- set: Start the HTTP exporter (kernel gate first, then uvicorn)
- show: Read the kernel statistics once and print them as tables

Options left unset fall back to NFSV4_EXPORTER_* environment variables,
then to the defaults in Settings.
"""

import logging
from typing import Optional

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from nfsv4_exporter import __version__
from nfsv4_exporter.config import Settings
from nfsv4_exporter.exceptions import ScrapeError
from nfsv4_exporter.kernel import EXIT_INCOMPATIBLE_KERNEL, is_kernel_compatible
from nfsv4_exporter.main import create_app
from nfsv4_exporter.snapshot import SnapshotAssembler
from nfsv4_exporter.types import ServerSnapshot

app = typer.Typer(
    name="nfsv4-exporter",
    help="Prometheus exporter for Linux NFSv4 server statistics",
    no_args_is_help=True,
)

console = Console()


def _load_settings(**overrides) -> Settings:
    """Build Settings, letting explicitly passed options win over the environment."""
    return Settings(**{key: value for key, value in overrides.items() if value is not None})


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _version_callback(value: bool) -> None:
    if value:
        print(f"nfsv4-exporter {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Prometheus exporter for Linux NFSv4 server statistics."""


@app.command("set")
def serve(
    ip_address: Optional[str] = typer.Option(
        None, "--ip-address", "-i", help="Address to listen on (default 0.0.0.0)"
    ),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to listen on (default 9944)"),
    nfsv4_ops_clients: Optional[bool] = typer.Option(
        None,
        "--nfsv4-ops-clients/--no-nfsv4-ops-clients",
        help="Export open/lock/deleg/layout counts per client (reads two files per client)",
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Logging level"),
) -> None:
    """Start the exporter and serve /metrics until interrupted."""
    settings = _load_settings(
        ip_address=ip_address,
        port=port,
        nfsv4_ops_clients=nfsv4_ops_clients,
        log_level=log_level,
    )
    _configure_logging(settings.log_level)

    if not is_kernel_compatible(minimum=settings.min_kernel_version):
        console.print(
            f"[red]Linux kernel {settings.min_kernel_version} or newer is required[/red]"
        )
        raise typer.Exit(EXIT_INCOMPATIBLE_KERNEL)

    console.print(f"Exporter started on IP: {settings.ip_address}, Port: {settings.port}")
    if settings.nfsv4_ops_clients:
        console.print("  Per-client operation metrics: [green]enabled[/green]")

    uvicorn.run(
        create_app(settings),
        host=settings.ip_address,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


@app.command("show")
def show(
    clients: Optional[bool] = typer.Option(
        None, "--clients/--no-clients", help="Include per-client operation counts"
    ),
) -> None:
    """Read the NFS statistics once and print them."""
    settings = _load_settings()
    collect_clients = settings.nfsv4_ops_clients if clients is None else clients

    try:
        snapshot = SnapshotAssembler.from_settings(settings).assemble(collect_clients)
    except ScrapeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    _print_snapshot(snapshot, collect_clients)


def _print_snapshot(snapshot: ServerSnapshot, with_clients: bool) -> None:
    stats = snapshot.stats
    table = Table(title="NFS server")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    rows = [
        ("clients", snapshot.client_count),
        ("exports", snapshot.export_count),
        ("reply cache hits", stats.reply_cache.hits),
        ("reply cache misses", stats.reply_cache.misses),
        ("reply cache nocache", stats.reply_cache.nocache),
        ("io read bytes", stats.io.read),
        ("io write bytes", stats.io.write),
        ("net packets", stats.network.packets_total),
        ("net udp packets", stats.network.udp_packets),
        ("net tcp packets", stats.network.tcp_packets),
        ("net tcp connections", stats.network.tcp_connections),
    ]
    for name, value in rows:
        table.add_row(name, str(value))
    console.print(table)

    if not with_clients:
        return

    clients_table = Table(title="NFSv4 clients")
    clients_table.add_column("Client ID", style="cyan")
    clients_table.add_column("Address")
    clients_table.add_column("Open", justify="right")
    clients_table.add_column("Lock", justify="right")
    clients_table.add_column("Deleg", justify="right")
    clients_table.add_column("Layout", justify="right")
    for client in snapshot.clients:
        ops = client.operations
        clients_table.add_row(
            client.client_id or "-",
            client.address or "-",
            str(ops.open_count),
            str(ops.lock_count),
            str(ops.deleg_count),
            str(ops.layout_count),
        )
    console.print(clients_table)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

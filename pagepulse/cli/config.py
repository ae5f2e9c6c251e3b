# ==============================================================================
# Config Commands
# ==============================================================================
"""
Configuration commands for the pagepulse CLI.
"""

import json
from dataclasses import asdict
from typing import Annotated

import typer
from rich.table import Table

from pagepulse.cli.shared import console
from pagepulse.exceptions import ConfigurationError
from pagepulse.utils.config import get_settings


# ==============================================================================
# Commands
# ==============================================================================


def config_show(
    hostname: Annotated[
        str, typer.Option("--hostname", "-H", help="Page hostname used for environment detection")
    ] = "localhost",
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output configuration as JSON")
    ] = False,
) -> None:
    """Display the runtime configuration resolved for a hostname."""
    settings = get_settings()

    try:
        runtime = settings.tracker.resolve(hostname)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)

    storage = {
        "backend": settings.storage.backend,
        "path": str(settings.storage.path),
    }
    if settings.storage.backend == "valkey":
        storage["valkey_host"] = settings.valkey.host
        storage["valkey_port"] = settings.valkey.port

    if json_output:
        print(json.dumps({"tracker": asdict(runtime), "storage": storage}, indent=2))
        return

    table = Table(title=f"Runtime Configuration ({hostname})", show_header=True, header_style="bold")
    table.add_column("Setting")
    table.add_column("Value")

    table.add_row("Environment", "development" if runtime.development else "production")
    table.add_row("API base URL", runtime.api_base_url)
    table.add_row("Project id", runtime.project_id)
    table.add_row("Activity timeout", f"{runtime.activity_timeout_seconds:.0f}s")
    table.add_row("Batch size", str(runtime.batch_size))
    table.add_row("Batch interval", f"{runtime.batch_interval_seconds:g}s")
    table.add_row("Request timeout", f"{runtime.request_timeout_seconds:g}s")
    for key, value in storage.items():
        table.add_row(f"Storage {key}", str(value))

    console.print(table)

# ==============================================================================
# Simulate Command
# ==============================================================================
"""
Drive one scripted page visit against the configured collector.

The visit is: load -> N clicks on a tracked button -> beforeunload. Useful
for checking a collector deployment end to end without a browser.
"""

import asyncio
from dataclasses import dataclass
from typing import Annotated

import typer
from rich.table import Table

from pagepulse.cli.shared import console, setup_logging
from pagepulse.client import SessionClient
from pagepulse.core.models import PageElement, PageInfo
from pagepulse.exceptions import ConfigurationError
from pagepulse.infrastructure.environment import StaticPageEnvironment, ThreadedBeaconSender

SIMULATED_USER_AGENT = "pagepulse-simulator"


@dataclass
class VisitSummary:
    """Outcome of a simulated visit."""

    visitor_id: str
    session_id: str | None
    events_logged: int
    events_pending: int


async def run_visit(client: SessionClient, clicks: int) -> VisitSummary:
    """
    Play a visit through a client.

    Args:
        client: Client to drive (started and closed here)
        clicks: Number of tracked button clicks

    Returns:
        VisitSummary captured just before unload
    """
    button = PageElement(
        tag_name="button",
        id="simulate-button",
        attributes={"data-event-name": "Simulated Click"},
        inner_text="Simulate",
    )

    async with client:
        await client.dispatch("load")
        session_id = client.session_id

        logged = 0
        for _ in range(clicks):
            client.dispatch("mousemove")
            queued = len(client.batcher)
            client.dispatch("click", button)
            if len(client.batcher) > queued:
                logged += 1
            # Let size-triggered flushes run between clicks
            await asyncio.sleep(0)

        await client.wait_idle()
        pending = len(client.batcher)
        client.dispatch("beforeunload")

    return VisitSummary(
        visitor_id=client.visitor.get_or_create(),
        session_id=session_id,
        events_logged=logged,
        events_pending=pending,
    )


def simulate(
    clicks: Annotated[int, typer.Option("--clicks", "-n", min=0, help="Tracked clicks to send")] = 10,
    hostname: Annotated[
        str, typer.Option("--hostname", "-H", help="Page hostname (drives environment detection)")
    ] = "localhost",
    path: Annotated[str, typer.Option("--path", help="Page URL path")] = "/",
    title: Annotated[str, typer.Option("--title", help="Page title")] = "PagePulse Simulation",
    referrer: Annotated[str, typer.Option("--referrer", help="Referrer URL")] = "",
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """Simulate a page visit: load, tracked clicks, unload."""
    setup_logging(verbose)

    beacon = ThreadedBeaconSender()
    environment = StaticPageEnvironment(
        PageInfo(
            hostname=hostname,
            path=path,
            title=title,
            referrer=referrer,
            user_agent=SIMULATED_USER_AGENT,
        ),
        beacon=beacon,
    )

    try:
        client = SessionClient.from_settings(environment)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)

    summary = asyncio.run(run_visit(client, clicks))
    beacon.join(timeout=client.config.request_timeout_seconds)

    table = Table(title="Simulated Visit", show_header=True, header_style="bold")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Collector", client.config.api_base_url)
    table.add_row("Visitor id", summary.visitor_id)
    table.add_row("Session id", summary.session_id or "[red]not created[/red]")
    table.add_row("Events logged", str(summary.events_logged))
    table.add_row("Sent with session end", str(summary.events_pending))
    console.print(table)

    if summary.session_id is None:
        raise typer.Exit(1)

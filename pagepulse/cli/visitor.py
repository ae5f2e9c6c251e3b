# ==============================================================================
# Visitor Commands
# ==============================================================================
"""
Commands for inspecting and resetting the stored visitor id.
"""

from typing import Annotated

import typer

from pagepulse.cli.shared import console
from pagepulse.core.visitor import VisitorIdentity
from pagepulse.infrastructure.storage import get_storage


def visitor_show() -> None:
    """Show the stored visitor id (created if absent)."""
    identity = VisitorIdentity(get_storage())
    console.print(identity.get_or_create())


def visitor_reset(
    confirm: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation prompt")] = False,
) -> None:
    """Forget the stored visitor id; the next visit gets a new one."""
    if not confirm:
        typer.confirm("Reset the stored visitor id?", abort=True)

    identity = VisitorIdentity(get_storage())
    if identity.reset():
        console.print("Visitor id removed")
    else:
        console.print("No visitor id stored")

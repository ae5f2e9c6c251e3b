# ==============================================================================
# PagePulse CLI
# ==============================================================================
"""
Command-line interface for the pagepulse telemetry client.

Usage:
    pagepulse --help
    pagepulse config show
    pagepulse config show --json --hostname localhost
    pagepulse visitor show
    pagepulse visitor reset -y
    pagepulse simulate --clicks 10
"""

import os

import typer

if "COLUMNS" not in os.environ:
    os.environ["COLUMNS"] = "115"

app = typer.Typer(
    name="pagepulse",
    help="Client-side session telemetry CLI",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(
    help="Configuration management",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

# Register config commands from cli.config module
from pagepulse.cli.config import config_show

config_app.command("show")(config_show)

visitor_app = typer.Typer(
    help="Visitor identity operations",
    no_args_is_help=True,
)
app.add_typer(visitor_app, name="visitor")

# Register visitor commands from cli.visitor module
from pagepulse.cli.visitor import visitor_reset, visitor_show

visitor_app.command("show")(visitor_show)
visitor_app.command("reset")(visitor_reset)

# Simulate command is imported from pagepulse.cli.simulate
from pagepulse.cli.simulate import simulate

app.command("simulate")(simulate)


def main() -> None:
    app()


if __name__ == "__main__":
    main()

# ==============================================================================
# Shared Utilities for CLI Commands
# ==============================================================================
"""
Shared helpers used across CLI command modules.
"""

import logging

from rich.console import Console

from pagepulse.utils.config import get_settings

console = Console()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging from settings (DEBUG when verbose)."""
    settings = get_settings()
    level = logging.DEBUG if verbose or settings.debug else settings.log_level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)

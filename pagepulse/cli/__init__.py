# ==============================================================================
# CLI Commands Module
# ==============================================================================
"""
CLI commands for the pagepulse client.

Commands are organized into separate modules for maintainability:
- shared.py: Console, logging setup and option helpers
- config.py: Resolved configuration display
- visitor.py: Stored visitor id management
- simulate.py: Scripted page visit against the collector
"""

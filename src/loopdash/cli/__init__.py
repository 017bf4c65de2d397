"""
Loopdash CLI package.

- app.py: Layout commands (show, add, remove, move, reset, cleanup, render)
- custom.py: Custom per-mode layout commands
- utils.py: Shared utilities
"""

from loopdash.cli.app import app, main

__all__ = ["app", "main"]

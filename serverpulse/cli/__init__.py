"""
ServerPulse Command Line Interface.

Take one-off status snapshots, validate rosters, and run the HTTP status
endpoints.
"""

from .main import cli, main
from .status_cli import StatusCLI

__all__ = ["StatusCLI", "main", "cli"]

"""CLI commands for edsctl.

This package contains all subcommand implementations.
"""

from edsctl.cli.commands import install, uninstall

__all__ = ["install", "uninstall"]

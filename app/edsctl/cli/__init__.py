"""CLI package for edsctl.

This package contains the Typer application, its subcommands and the
shared display helpers. The application object lives in edsctl.cli.main.
"""

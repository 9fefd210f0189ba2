"""Shared types and utilities for CLI commands."""

import sys
from pathlib import Path
from typing import Any

from typer.core import TyperGroup

from edsctl.core.paths import get_default_config_dir, get_default_install_dir
from edsctl.platform import PlatformAdapter


def _usage_error_class() -> type[Exception]:
    """Find the UsageError class of the parser Typer groups are built on.

    Typer builds on click, or on its own bundled copy of it in newer
    releases, so the class is looked up along TyperGroup's bases.
    """
    for base in TyperGroup.__mro__:
        error = getattr(sys.modules.get(base.__module__), "UsageError", None)
        if isinstance(error, type) and issubclass(error, Exception):
            return error
    msg = "Cannot locate the UsageError class used by Typer"
    raise ImportError(msg)


UsageError = _usage_error_class()


class StrictExitGroup(TyperGroup):
    """Typer group whose usage errors exit with status 1.

    Click reports unknown options and commands with status 2; edsctl
    reports every invalid invocation with status 1.
    """

    def parse_args(self, ctx: Any, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except UsageError as e:
            e.exit_code = 1  # type: ignore[attr-defined]
            raise

    def resolve_command(self, ctx: Any, args: list[str]) -> tuple[str | None, Any, list[str]]:
        try:
            return super().resolve_command(ctx, args)
        except UsageError as e:
            e.exit_code = 1  # type: ignore[attr-defined]
            raise


def resolve_install_dir(adapter: PlatformAdapter, override: Path | None = None) -> Path:
    """Get the install directory: flag, then ``INSTALL_DIR``, then the default.

    Args:
        adapter: Adapter whose environment snapshot is consulted.
        override: Value of ``--install-dir``, if given.

    Returns:
        Absolute install directory.
    """
    if override is not None:
        return override.expanduser().absolute()
    return get_default_install_dir(adapter.env)


def resolve_config_dir(adapter: PlatformAdapter) -> Path:
    """Get the configuration directory: ``CONFIG_DIR``, then the default."""
    return get_default_config_dir(adapter.env)

"""Platform adapters for edsctl.

Each adapter exposes the same narrow interface so the lifecycle core is
written once for every platform.
"""

from collections.abc import Mapping

from edsctl.core.paths import is_windows
from edsctl.platform.base import DATABASE_PATTERNS, PlatformAdapter, same_dir
from edsctl.platform.posix import PosixAdapter
from edsctl.platform.windows import WindowsAdapter


def get_adapter(env: Mapping[str, str] | None = None) -> PlatformAdapter:
    """Get the adapter for the current platform.

    Args:
        env: Environment mapping. Defaults to a snapshot of os.environ.

    Returns:
        WindowsAdapter on Windows, PosixAdapter everywhere else.
    """
    if is_windows():
        return WindowsAdapter(env)
    return PosixAdapter(env)


__all__ = [
    "DATABASE_PATTERNS",
    "PlatformAdapter",
    "PosixAdapter",
    "WindowsAdapter",
    "get_adapter",
    "same_dir",
]

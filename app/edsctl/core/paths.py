"""Default locations for the managed application.

Resolves the install and configuration directories, honoring the
``INSTALL_DIR`` and ``CONFIG_DIR`` environment overrides.

POSIX defaults:
- Install: ~/.local/bin/
- Config: ~/.config/evaleds/ (or XDG_CONFIG_HOME/evaleds/)

Windows defaults:
- Install: %LOCALAPPDATA%\\Programs\\evaleds\\
- Config: %APPDATA%\\evaleds\\
"""

import os
import sys
from collections.abc import Mapping
from pathlib import Path

from edsctl import APP_NAME

SETTINGS_FILENAME = "config.toml"


def is_windows() -> bool:
    """Check if running on Windows."""
    return sys.platform == "win32"


def _env(env: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if env is None else env


def _home(env: Mapping[str, str]) -> Path:
    """Get the user's home directory from the given environment."""
    for var in ("HOME", "USERPROFILE"):
        value = env.get(var)
        if value:
            return Path(value)
    return Path.home()


def get_env_dir(var: str, env: Mapping[str, str] | None = None) -> Path | None:
    """Get an absolute directory from an environment override.

    A leading ``~`` is expanded against the given environment's home and a
    relative value is taken relative to the working directory.

    Args:
        var: Environment variable name (e.g., "INSTALL_DIR").
        env: Environment mapping. Defaults to os.environ.

    Returns:
        Absolute directory, or None if the variable is unset or empty.
    """
    environ = _env(env)
    value = environ.get(var)
    if not value:
        return None
    path = Path(value)
    if path.parts and path.parts[0] == "~":
        path = _home(environ).joinpath(*path.parts[1:])
    else:
        path = path.expanduser()
    return path.absolute()


def _env_dir(env: Mapping[str, str], var: str, default: Path) -> Path:
    """Get a directory from an environment variable, falling back to a default."""
    return get_env_dir(var, env) or default


def get_home(env: Mapping[str, str] | None = None) -> Path:
    """Get the home directory used for candidate paths.

    Args:
        env: Environment mapping. Defaults to os.environ.

    Returns:
        Home directory path.
    """
    return _home(_env(env))


def get_xdg_dir(env_var: str, default_subdir: str, env: Mapping[str, str] | None = None) -> Path:
    """Get the application directory under an XDG base directory.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").
        env: Environment mapping. Defaults to os.environ.

    Returns:
        Path to the application-specific directory.
    """
    environ = _env(env)
    base = environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return _home(environ) / default_subdir / APP_NAME


def get_default_install_dir(env: Mapping[str, str] | None = None) -> Path:
    """Get the install directory, honoring ``INSTALL_DIR``.

    Args:
        env: Environment mapping. Defaults to os.environ.

    Returns:
        Directory the binary is installed into.
    """
    environ = _env(env)
    if is_windows():
        local = environ.get("LOCALAPPDATA")
        base = Path(local) if local else _home(environ) / "AppData" / "Local"
        default = base / "Programs" / APP_NAME
    else:
        default = _home(environ) / ".local" / "bin"
    return _env_dir(environ, "INSTALL_DIR", default)


def get_default_config_dir(env: Mapping[str, str] | None = None) -> Path:
    """Get the configuration directory, honoring ``CONFIG_DIR``.

    Args:
        env: Environment mapping. Defaults to os.environ.

    Returns:
        Directory holding the application's settings file.
    """
    environ = _env(env)
    if is_windows():
        roaming = environ.get("APPDATA")
        base = Path(roaming) if roaming else _home(environ) / "AppData" / "Roaming"
        default = base / APP_NAME
    else:
        default = get_xdg_dir("XDG_CONFIG_HOME", ".config", environ)
    return _env_dir(environ, "CONFIG_DIR", default)


def get_settings_path(config_dir: Path) -> Path:
    """Get the settings file path inside a configuration directory."""
    return config_dir / SETTINGS_FILENAME


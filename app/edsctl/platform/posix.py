"""POSIX platform adapter (Linux, macOS).

Uses ``pgrep``/``pkill`` for the process table. PATH changes are never
persisted; the user is given the line to add to their shell startup file.
"""

import logging
from collections.abc import Mapping
from pathlib import Path

from edsctl import APP_NAME
from edsctl.core.paths import get_env_dir, get_xdg_dir
from edsctl.models.artifact import CandidateKind, CandidatePath
from edsctl.platform.base import PlatformAdapter
from edsctl.utils.shell import run_command

logger = logging.getLogger(__name__)

_SYSTEM_BIN_DIRS: tuple[Path, ...] = (Path("/usr/local/bin"), Path("/usr/bin"))


class PosixAdapter(PlatformAdapter):
    """Platform adapter for Linux and macOS.

    Args:
        env: Environment mapping. Defaults to a snapshot of os.environ.
        system_bin_dirs: System-wide binary directories searched after the
            per-user ones.
    """

    def __init__(
        self,
        env: Mapping[str, str] | None = None,
        *,
        system_bin_dirs: tuple[Path, ...] = _SYSTEM_BIN_DIRS,
    ) -> None:
        super().__init__(env)
        self._system_bin_dirs = system_bin_dirs

    @property
    def executable_name(self) -> str:
        return APP_NAME

    def candidate_paths(self) -> tuple[CandidatePath, ...]:
        """Return candidates in display order.

        ``INSTALL_DIR`` and ``CONFIG_DIR`` overrides are searched first so a
        custom install is found even when it is not on the PATH.
        """
        home = self.home
        binary_dirs: list[Path] = []
        install_override = get_env_dir("INSTALL_DIR", self.env)
        if install_override:
            binary_dirs.append(install_override)
        binary_dirs += [home / ".local" / "bin", home / "bin", *self._system_bin_dirs]

        config_dirs: list[Path] = []
        config_override = get_env_dir("CONFIG_DIR", self.env)
        if config_override:
            config_dirs.append(config_override)
        config_dirs += [
            get_xdg_dir("XDG_CONFIG_HOME", ".config", self.env),
            home / ".config" / APP_NAME,
            home / f".{APP_NAME}",
        ]

        data_dirs = [
            get_xdg_dir("XDG_DATA_HOME", ".local/share", self.env),
            home / ".local" / "share" / APP_NAME,
            home / f".{APP_NAME}",
        ]

        candidates: list[CandidatePath] = []
        seen: set[tuple[CandidateKind, Path]] = set()
        for kind, paths in (
            (CandidateKind.BINARY_DIR, binary_dirs),
            (CandidateKind.CONFIG_DIR, config_dirs),
            (CandidateKind.DATA_DIR, data_dirs),
        ):
            for path in paths:
                if not path.is_absolute() or (kind, path) in seen:
                    continue
                seen.add((kind, path))
                candidates.append(CandidatePath(kind=kind, path=path))
        return tuple(candidates)

    def shell_startup_files(self) -> tuple[Path, ...]:
        home = self.home
        return (
            home / ".bashrc",
            home / ".zshrc",
            home / ".profile",
            home / ".config" / "fish" / "config.fish",
        )

    def find_processes(self) -> list[int]:
        """Find running processes with ``pgrep -x``."""
        try:
            result = run_command(["pgrep", "-x", self.executable_name], timeout=10.0)
        except (FileNotFoundError, OSError) as e:
            logger.warning("Cannot query process table: %s", e)
            return []

        # pgrep exits 1 when nothing matched
        if not result.success:
            return []

        pids: list[int] = []
        for line in result.stdout.splitlines():
            line = line.strip()
            if line.isdigit():
                pids.append(int(line))
        return pids

    def terminate_processes(self) -> bool:
        """Send SIGTERM with ``pkill -x``."""
        try:
            result = run_command(["pkill", "-x", self.executable_name], timeout=10.0)
        except (FileNotFoundError, OSError) as e:
            logger.warning("Cannot terminate processes: %s", e)
            return False
        if not result.success:
            logger.warning("pkill failed: %s", result.stderr.strip())
        return result.success

    def shell_config_file(self) -> Path:
        """Pick the startup file for the user's login shell."""
        shell = self.env.get("SHELL", "")
        home = self.home
        if shell.endswith("/bash"):
            return home / ".bashrc"
        if shell.endswith("/zsh"):
            return home / ".zshrc"
        if shell.endswith("/fish"):
            return home / ".config" / "fish" / "config.fish"
        return home / ".profile"

    def path_setup_instructions(self, install_dir: Path) -> list[str]:
        config_file = self.shell_config_file()
        if config_file.name == "config.fish":
            return [f"fish_add_path {install_dir}"]
        return [
            f"echo 'export PATH=\"{install_dir}:$PATH\"' >> {config_file}",
            f"source {config_file}",
        ]

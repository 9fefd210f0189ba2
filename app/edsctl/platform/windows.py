"""Windows platform adapter.

Uses ``tasklist``/``taskkill`` for the process table and the per-user
``Path`` value under ``HKCU\\Environment`` as the persisted search path.
"""

import csv
import io
import logging
from pathlib import Path

from edsctl import APP_NAME
from edsctl.core.paths import get_env_dir
from edsctl.models.artifact import CandidateKind, CandidatePath
from edsctl.platform.base import PlatformAdapter, same_dir
from edsctl.utils.shell import run_command

logger = logging.getLogger(__name__)

_ENVIRONMENT_KEY = "Environment"
_HWND_BROADCAST = 0xFFFF
_WM_SETTINGCHANGE = 0x001A
_SMTO_ABORTIFHUNG = 0x0002


class WindowsAdapter(PlatformAdapter):
    """Platform adapter for Windows."""

    @property
    def executable_name(self) -> str:
        return f"{APP_NAME}.exe"

    def _local_appdata(self) -> Path:
        value = self.env.get("LOCALAPPDATA")
        return Path(value) if value else self.home / "AppData" / "Local"

    def _roaming_appdata(self) -> Path:
        value = self.env.get("APPDATA")
        return Path(value) if value else self.home / "AppData" / "Roaming"

    def candidate_paths(self) -> tuple[CandidatePath, ...]:
        home = self.home
        binary_dirs: list[Path] = []
        install_override = get_env_dir("INSTALL_DIR", self.env)
        if install_override:
            binary_dirs.append(install_override)
        binary_dirs += [
            self._local_appdata() / "Programs" / APP_NAME,
            home / ".local" / "bin",
            home / "bin",
        ]

        config_dirs: list[Path] = []
        config_override = get_env_dir("CONFIG_DIR", self.env)
        if config_override:
            config_dirs.append(config_override)
        config_dirs += [self._roaming_appdata() / APP_NAME, home / f".{APP_NAME}"]

        data_dirs = [self._local_appdata() / APP_NAME, home / f".{APP_NAME}"]

        candidates: list[CandidatePath] = []
        for kind, paths in (
            (CandidateKind.BINARY_DIR, binary_dirs),
            (CandidateKind.CONFIG_DIR, config_dirs),
            (CandidateKind.DATA_DIR, data_dirs),
        ):
            for path in paths:
                if not path.is_absolute():
                    continue
                if any(c.kind == kind and same_dir(c.path, path) for c in candidates):
                    continue
                candidates.append(CandidatePath(kind=kind, path=path))
        return tuple(candidates)

    def shell_startup_files(self) -> tuple[Path, ...]:
        documents = self.home / "Documents"
        return (
            documents / "PowerShell" / "Microsoft.PowerShell_profile.ps1",
            documents / "WindowsPowerShell" / "Microsoft.PowerShell_profile.ps1",
        )

    def find_processes(self) -> list[int]:
        """Find running processes with ``tasklist`` (CSV output)."""
        try:
            result = run_command(
                [
                    "tasklist",
                    "/FI",
                    f"IMAGENAME eq {self.executable_name}",
                    "/FO",
                    "CSV",
                    "/NH",
                ],
                timeout=15.0,
            )
        except (FileNotFoundError, OSError) as e:
            logger.warning("Cannot query process table: %s", e)
            return []

        if not result.success:
            return []

        pids: list[int] = []
        for row in csv.reader(io.StringIO(result.stdout)):
            # "evaleds.exe","1234","Console","1","10,000 K"
            if len(row) >= 2 and row[0].lower() == self.executable_name and row[1].isdigit():
                pids.append(int(row[1]))
        return pids

    def terminate_processes(self) -> bool:
        try:
            result = run_command(
                ["taskkill", "/F", "/IM", self.executable_name],
                timeout=15.0,
            )
        except (FileNotFoundError, OSError) as e:
            logger.warning("Cannot terminate processes: %s", e)
            return False
        if not result.success:
            logger.warning("taskkill failed: %s", result.stderr.strip())
        return result.success

    def path_setup_instructions(self, install_dir: Path) -> list[str]:
        return [
            '[Environment]::SetEnvironmentVariable("Path", '
            f'"{install_dir};" + [Environment]::GetEnvironmentVariable("Path", "User"), "User")',
        ]

    # -- persisted user PATH -------------------------------------------------

    @property
    def can_persist_search_path(self) -> bool:
        return True

    def persisted_search_path(self) -> list[str]:
        try:
            value = self._read_user_path()
        except OSError as e:
            logger.warning("Cannot read user PATH: %s", e)
            return []
        return [entry for entry in value.split(";") if entry]

    def persist_search_path_entry(self, directory: Path) -> None:
        entries = [entry for entry in self._read_user_path().split(";") if entry]
        if any(same_dir(entry, directory) for entry in entries):
            return
        self._write_user_path(";".join([str(directory), *entries]))

    def remove_search_path_entry(self, directory: Path) -> bool:
        entries = [entry for entry in self._read_user_path().split(";") if entry]
        kept = [entry for entry in entries if not same_dir(entry, directory)]
        if len(kept) == len(entries):
            return False
        self._write_user_path(";".join(kept))
        return True

    def _read_user_path(self) -> str:
        """Read ``HKCU\\Environment\\Path`` (empty string when unset)."""
        import winreg

        with winreg.OpenKey(winreg.HKEY_CURRENT_USER, _ENVIRONMENT_KEY) as key:
            try:
                value, _ = winreg.QueryValueEx(key, "Path")
            except FileNotFoundError:
                return ""
        return str(value)

    def _write_user_path(self, value: str) -> None:
        """Write ``HKCU\\Environment\\Path`` and notify running programs."""
        import ctypes
        import winreg

        with winreg.OpenKey(
            winreg.HKEY_CURRENT_USER, _ENVIRONMENT_KEY, 0, winreg.KEY_SET_VALUE
        ) as key:
            winreg.SetValueEx(key, "Path", 0, winreg.REG_EXPAND_SZ, value)

        ctypes.windll.user32.SendMessageTimeoutW(  # type: ignore[attr-defined]
            _HWND_BROADCAST,
            _WM_SETTINGCHANGE,
            0,
            _ENVIRONMENT_KEY,
            _SMTO_ABORTIFHUNG,
            5000,
            None,
        )

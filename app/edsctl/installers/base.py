"""Abstract base class for binary providers.

A provider puts the application executable into the install directory,
either by downloading a prebuilt release or by building from source.
"""

import os
import shutil
import stat
from abc import ABC, abstractmethod
from pathlib import Path


class InstallError(Exception):
    """Base exception for installation errors."""


class TransferError(InstallError):
    """Raised when a prebuilt release cannot be retrieved.

    Recoverable: the install flow falls back to a source build.
    """


class BuildError(InstallError):
    """Raised when the source build fails. Fatal for the install."""


class BinaryProvider(ABC):
    """Abstract base class for all binary providers.

    Attributes:
        executable_name: File name of the executable to provide.
    """

    def __init__(self, executable_name: str) -> None:
        self.executable_name = executable_name

    @property
    @abstractmethod
    def description(self) -> str:
        """Short human-readable name of the acquisition method."""

    @abstractmethod
    def provide(self, install_dir: Path) -> Path:
        """Place the executable into ``install_dir``.

        Args:
            install_dir: Existing directory to install into.

        Returns:
            Path of the installed executable.

        Raises:
            InstallError: If the executable cannot be provided.
        """

    def install_executable(self, source: Path, install_dir: Path) -> Path:
        """Copy ``source`` into ``install_dir`` and mark it executable.

        The copy goes to a temporary name first and is renamed into place,
        so a half-written binary is never left under the final name.
        """
        dest = install_dir / self.executable_name
        tmp = install_dir / f".{self.executable_name}.tmp"
        try:
            shutil.copyfile(source, tmp)
            mode = tmp.stat().st_mode
            tmp.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
            os.replace(tmp, dest)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
        return dest

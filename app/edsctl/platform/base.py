"""Abstract base class for platform adapters.

This module defines the narrow interface the lifecycle core uses to touch
the host: candidate locations, filesystem primitives, the process table
and the search path. Each supported platform supplies one implementation.
"""

import fnmatch
import logging
import os
import shutil
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from pathlib import Path

from edsctl import APP_NAME
from edsctl.core.paths import get_home
from edsctl.models.artifact import CandidateKind, CandidatePath

logger = logging.getLogger(__name__)

# Database files and their journal/WAL side-files
DATABASE_PATTERNS: tuple[str, ...] = ("*.db", "*.db-*")


def _raise(error: OSError) -> None:
    raise error


def same_dir(a: str | Path, b: str | Path) -> bool:
    """Compare two directory paths after normalizing case and separators."""
    return os.path.normcase(os.path.normpath(str(a))) == os.path.normcase(
        os.path.normpath(str(b))
    )


class PlatformAdapter(ABC):
    """Abstract base class for all platform adapters.

    Filesystem primitives are shared; candidate locations, process control
    and search-path persistence are platform-specific.

    Attributes:
        env: Environment the adapter reads (PATH, HOME, overrides).
        home: Home directory used to build candidate paths.

    Example:
        >>> adapter = get_adapter()
        >>> for candidate in adapter.candidate_paths():
        ...     print(candidate.kind.value, candidate.path)
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        """Initialize the adapter.

        Args:
            env: Environment mapping. Defaults to a snapshot of os.environ.
        """
        self.env: Mapping[str, str] = dict(os.environ) if env is None else env
        self.home = get_home(self.env)

    # -- platform-specific ---------------------------------------------------

    @property
    @abstractmethod
    def executable_name(self) -> str:
        """File name of the application executable on this platform."""

    @abstractmethod
    def candidate_paths(self) -> tuple[CandidatePath, ...]:
        """Return the ordered candidate locations for this platform."""

    @abstractmethod
    def shell_startup_files(self) -> tuple[Path, ...]:
        """Return shell startup files that may carry PATH lines."""

    @abstractmethod
    def find_processes(self) -> list[int]:
        """Return PIDs of running processes named like the executable.

        Returns an empty list when the process table cannot be queried.
        """

    @abstractmethod
    def terminate_processes(self) -> bool:
        """Terminate running processes named like the executable.

        Returns:
            True if the termination command succeeded.
        """

    @abstractmethod
    def path_setup_instructions(self, install_dir: Path) -> list[str]:
        """Return the shell commands that put ``install_dir`` on the PATH."""

    @property
    def can_persist_search_path(self) -> bool:
        """Whether the platform has a structured PATH store edsctl may edit."""
        return False

    def persisted_search_path(self) -> list[str]:
        """Return entries of the persisted user PATH (empty if unsupported)."""
        return []

    def persist_search_path_entry(self, directory: Path) -> None:
        """Add ``directory`` to the persisted user PATH.

        Raises:
            NotImplementedError: If the platform has no persisted PATH store.
            OSError: If the store cannot be written.
        """
        msg = f"{type(self).__name__} cannot persist PATH entries"
        raise NotImplementedError(msg)

    def remove_search_path_entry(self, directory: Path) -> bool:
        """Remove ``directory`` from the persisted user PATH.

        Returns:
            True if an entry was removed, False if none was present.

        Raises:
            NotImplementedError: If the platform has no persisted PATH store.
            OSError: If the store cannot be written.
        """
        msg = f"{type(self).__name__} cannot persist PATH entries"
        raise NotImplementedError(msg)

    # -- shared primitives ---------------------------------------------------

    def candidates_of(self, kind: CandidateKind) -> tuple[CandidatePath, ...]:
        """Return the candidate paths of one kind, in order."""
        return tuple(c for c in self.candidate_paths() if c.kind == kind)

    def search_path(self) -> list[str]:
        """Return the effective search path entries of this process."""
        raw = self.env.get("PATH", "")
        return [entry for entry in raw.split(os.pathsep) if entry]

    def on_search_path(self, directory: Path) -> bool:
        """Check if ``directory`` is on the effective search path."""
        return any(same_dir(entry, directory) for entry in self.search_path())

    def which(self, name: str) -> Path | None:
        """Resolve ``name`` through the search path like the shell does."""
        found = shutil.which(name, path=os.pathsep.join(self.search_path()))
        return Path(found).absolute() if found else None

    def is_file(self, path: Path) -> bool:
        """Check if ``path`` is a file; unreadable paths count as absent."""
        try:
            return path.is_file()
        except OSError:
            logger.debug("Cannot stat %s, treating as absent", path)
            return False

    def is_dir(self, path: Path) -> bool:
        """Check if ``path`` is a directory; unreadable paths count as absent."""
        try:
            return path.is_dir()
        except OSError:
            logger.debug("Cannot stat %s, treating as absent", path)
            return False

    def path_exists(self, path: Path) -> bool:
        """Check if ``path`` exists, including dangling symlinks."""
        try:
            return path.exists() or path.is_symlink()
        except OSError:
            return False

    def canonical(self, path: Path) -> Path:
        """Return the canonical absolute form of ``path`` (symlinks resolved)."""
        try:
            return path.resolve()
        except OSError:
            return path.absolute()

    def remove_path(self, path: Path) -> None:
        """Remove a file, symlink or directory tree.

        Raises:
            FileNotFoundError: If the path does not exist.
            PermissionError: If the operating system refuses the removal.
            OSError: On any other failure.
        """
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()

    def list_matching_files(
        self, root: Path, patterns: Iterable[str] = DATABASE_PATTERNS
    ) -> list[Path]:
        """List files under ``root`` whose names match any pattern.

        Walks the tree without following symlinked directories.

        Raises:
            OSError: If any directory of the tree cannot be enumerated.
        """
        pattern_list = tuple(patterns)
        matches: list[Path] = []
        for dirpath, _dirnames, filenames in os.walk(root, onerror=_raise):
            for filename in filenames:
                if any(fnmatch.fnmatch(filename, p) for p in pattern_list):
                    matches.append(Path(dirpath) / filename)
        return sorted(matches)

    def make_dirs(self, path: Path) -> None:
        """Create ``path`` and missing parents."""
        path.mkdir(parents=True, exist_ok=True)

    def write_text_if_absent(self, path: Path, content: str) -> bool:
        """Write ``content`` to ``path`` only if the file does not exist.

        Returns:
            True if the file was created, False if it already existed.
        """
        try:
            with open(path, "x", encoding="utf-8") as f:
                f.write(content)
        except FileExistsError:
            return False
        return True

    def file_mentions(self, path: Path, needles: Iterable[str]) -> bool:
        """Check if a text file contains any of ``needles``.

        Unreadable files count as not mentioning anything.
        """
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return False
        return any(needle and needle in text for needle in needles)

    def startup_file_needles(self, install_dir: Path) -> tuple[str, ...]:
        """Strings whose presence marks a startup file as PATH-related."""
        needles = [APP_NAME, str(install_dir)]
        try:
            relative = install_dir.relative_to(self.home)
            needles.append(f"$HOME/{relative.as_posix()}")
            needles.append(f"~/{relative.as_posix()}")
        except ValueError:
            pass
        return tuple(needles)

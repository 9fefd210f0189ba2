"""Search path registry handling.

On install, makes sure the user learns how the install directory gets on
the search path: either it is persisted in the platform's structured PATH
store, or the exact shell command is printed. On uninstall, only detects
startup files that mention the application; those files are never edited.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from edsctl.models.artifact import Artifact, ArtifactKind
from edsctl.platform.base import PlatformAdapter, same_dir
from edsctl.utils.formatting import (
    console,
    print_dry_run,
    print_info,
    print_success,
    print_warning,
)

logger = logging.getLogger(__name__)


class PathSetupOutcome(str, Enum):
    """How the install directory ended up discoverable.

    Attributes:
        ALREADY_ON_PATH: Nothing to do.
        PERSISTED: Added to the persisted user PATH.
        INSTRUCTIONS: The user was told which command to run.
    """

    ALREADY_ON_PATH = "already-on-path"
    PERSISTED = "persisted"
    INSTRUCTIONS = "instructions"


@dataclass(frozen=True, slots=True)
class PathSetupResult:
    """Result of the install-side PATH check.

    Attributes:
        outcome: What happened.
        instructions: Commands printed for the user (empty unless INSTRUCTIONS).
        dry_run: Whether persisting was only simulated.
    """

    outcome: PathSetupOutcome
    instructions: tuple[str, ...] = ()
    dry_run: bool = False


class PathRegistryUpdater:
    """Detects and, on install, fixes search path registration.

    Args:
        adapter: Platform adapter for PATH access.
        dry_run: Simulate persisting instead of writing the PATH store.
    """

    def __init__(self, adapter: PlatformAdapter, *, dry_run: bool = False) -> None:
        self._adapter = adapter
        self._dry_run = dry_run

    def ensure_on_path(self, install_dir: Path) -> PathSetupResult:
        """Make ``install_dir`` discoverable or tell the user how to.

        The user is always told the outcome when the directory is missing
        from the search path.
        """
        adapter = self._adapter
        if adapter.on_search_path(install_dir):
            logger.debug("%s already on PATH", install_dir)
            return PathSetupResult(outcome=PathSetupOutcome.ALREADY_ON_PATH)

        print_warning(f"{install_dir} is not in your PATH")

        if adapter.can_persist_search_path:
            if self._dry_run:
                print_dry_run(f"add {install_dir} to your user PATH")
                return PathSetupResult(outcome=PathSetupOutcome.PERSISTED, dry_run=True)
            try:
                adapter.persist_search_path_entry(install_dir)
            except (OSError, NotImplementedError) as e:
                logger.warning("Could not persist PATH entry: %s", e)
                print_warning(f"Could not update your user PATH automatically: {e}")
            else:
                print_success(f"Added {install_dir} to your user PATH")
                print_info("Restart your terminal for the change to take effect")
                return PathSetupResult(outcome=PathSetupOutcome.PERSISTED)

        instructions = tuple(adapter.path_setup_instructions(install_dir))
        print_info(f"To add {install_dir} to your PATH, run:")
        console.print()
        for line in instructions:
            console.print(f"  {line}", markup=False, highlight=False)
        console.print()
        print_info("Or restart your terminal")
        return PathSetupResult(
            outcome=PathSetupOutcome.INSTRUCTIONS,
            instructions=instructions,
            dry_run=self._dry_run,
        )

    def detect_entries(self, install_dir: Path) -> list[Artifact]:
        """Find PATH-related entries left behind for ``install_dir``.

        Returns startup files that mention the application or the install
        directory, and the persisted user PATH entry where the platform has one.
        """
        adapter = self._adapter
        needles = adapter.startup_file_needles(install_dir)
        found = [
            Artifact(kind=ArtifactKind.STARTUP_FILE, path=path)
            for path in adapter.shell_startup_files()
            if adapter.is_file(path) and adapter.file_mentions(path, needles)
        ]

        if adapter.can_persist_search_path and any(
            same_dir(entry, install_dir) for entry in adapter.persisted_search_path()
        ):
            found.append(Artifact(kind=ArtifactKind.ENV_PATH_ENTRY, path=install_dir))

        return found

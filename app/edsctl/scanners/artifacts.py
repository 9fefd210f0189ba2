"""Artifact locator.

Scans the platform's fixed, ordered candidate locations and returns
everything of the managed application that is currently on disk. The
scan is read-only and best-effort: a location that cannot be read is
treated as not present.
"""

import logging
from pathlib import Path

from edsctl.core.pathreg import PathRegistryUpdater
from edsctl.models.artifact import (
    Artifact,
    ArtifactInventory,
    ArtifactKind,
    CandidateKind,
)
from edsctl.platform.base import DATABASE_PATTERNS, PlatformAdapter, same_dir

logger = logging.getLogger(__name__)


class ArtifactLocator:
    """Discovers installed artifacts through a platform adapter.

    Every candidate is checked; none short-circuits the others. Calling
    :meth:`discover` twice without filesystem changes in between returns
    equal inventories.

    Args:
        adapter: Platform adapter providing candidates and filesystem access.
        install_dir: Install directory, used to recognize PATH entries.
    """

    def __init__(self, adapter: PlatformAdapter, install_dir: Path) -> None:
        self._adapter = adapter
        self._install_dir = install_dir

    def discover(self) -> ArtifactInventory:
        """Run one discovery pass.

        Returns:
            ArtifactInventory with binaries, configs, data and path entries.
        """
        inventory = ArtifactInventory(
            binaries=tuple(self.find_binaries()),
            configs=tuple(self.find_configs()),
            data=tuple(self.find_data()),
            path_entries=tuple(self.find_path_entries()),
        )
        logger.debug(
            "Discovered %d binaries, %d configs, %d data, %d path entries",
            len(inventory.binaries),
            len(inventory.configs),
            len(inventory.data),
            len(inventory.path_entries),
        )
        return inventory

    def find_binaries(self) -> list[Artifact]:
        """Find the executable in binary-dir candidates and on the search path.

        Duplicates are dropped by canonical path; the first location found
        is the one reported.
        """
        adapter = self._adapter
        name = adapter.executable_name
        found: list[Artifact] = []
        seen: set[Path] = set()

        for candidate in adapter.candidates_of(CandidateKind.BINARY_DIR):
            path = candidate.path / name
            if not adapter.is_file(path):
                continue
            key = adapter.canonical(path)
            if key in seen:
                continue
            seen.add(key)
            found.append(Artifact(kind=ArtifactKind.BINARY, path=path, source=candidate))

        on_path = adapter.which(name)
        if on_path is not None:
            key = adapter.canonical(on_path)
            if key not in seen:
                seen.add(key)
                found.append(Artifact(kind=ArtifactKind.BINARY, path=on_path))

        return found

    def find_configs(self) -> list[Artifact]:
        """Find existing configuration directories."""
        return [
            Artifact(kind=ArtifactKind.CONFIG_DIR, path=candidate.path, source=candidate)
            for candidate in self._adapter.candidates_of(CandidateKind.CONFIG_DIR)
            if self._adapter.is_dir(candidate.path)
        ]

    def find_data(self) -> list[Artifact]:
        """Find data directories and database files inside config directories.

        Database files are user data even when they live in a configuration
        directory. A config directory that is also a data directory is only
        reported once, as a data directory.
        """
        adapter = self._adapter
        found = [
            Artifact(kind=ArtifactKind.DATA_DIR, path=candidate.path, source=candidate)
            for candidate in adapter.candidates_of(CandidateKind.DATA_DIR)
            if adapter.is_dir(candidate.path)
        ]

        for candidate in adapter.candidates_of(CandidateKind.CONFIG_DIR):
            if not adapter.is_dir(candidate.path):
                continue
            if any(same_dir(a.path, candidate.path) for a in found):
                continue
            try:
                members = adapter.list_matching_files(candidate.path, DATABASE_PATTERNS)
            except OSError as e:
                logger.debug("Cannot scan %s for database files: %s", candidate.path, e)
                continue
            if members:
                found.append(
                    Artifact(
                        kind=ArtifactKind.DATABASE_FILES,
                        path=candidate.path,
                        source=candidate,
                        members=tuple(members),
                    )
                )

        return found

    def find_path_entries(self) -> list[Artifact]:
        """Find startup files and persisted PATH entries for the install dir."""
        return PathRegistryUpdater(self._adapter).detect_entries(self._install_dir)

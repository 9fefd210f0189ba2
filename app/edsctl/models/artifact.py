"""Artifact models for discovery.

This module defines the data structures describing where the managed
application may live on disk (candidate paths) and what was actually
found there (artifacts and the inventory that groups them).
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class CandidateKind(str, Enum):
    """Kind of location a candidate path represents.

    Attributes:
        BINARY_DIR: Directory that may contain the executable.
        CONFIG_DIR: Configuration directory of the application.
        DATA_DIR: Data directory of the application.
    """

    BINARY_DIR = "binary-dir"
    CONFIG_DIR = "config-dir"
    DATA_DIR = "data-dir"


class ArtifactKind(str, Enum):
    """Kind of artifact found on disk.

    Attributes:
        BINARY: The application executable.
        CONFIG_DIR: A configuration directory.
        DATA_DIR: A data directory.
        DATABASE_FILES: Database files (``*.db``, ``*.db-*``) inside a config directory.
        STARTUP_FILE: Shell startup file mentioning the application or install dir.
        ENV_PATH_ENTRY: Install directory persisted in the user PATH environment.
    """

    BINARY = "binary"
    CONFIG_DIR = "config-dir"
    DATA_DIR = "data-dir"
    DATABASE_FILES = "database-files"
    STARTUP_FILE = "startup-file"
    ENV_PATH_ENTRY = "env-path-entry"


class Category(str, Enum):
    """Artifact category, each processed with its own confirmation.

    Declaration order is the processing order.
    """

    BINARIES = "binaries"
    CONFIGURATION = "configuration"
    DATA = "data"
    PATH_ENTRIES = "path-entries"


CATEGORY_KINDS: dict[Category, frozenset[ArtifactKind]] = {
    Category.BINARIES: frozenset({ArtifactKind.BINARY}),
    Category.CONFIGURATION: frozenset({ArtifactKind.CONFIG_DIR}),
    Category.DATA: frozenset({ArtifactKind.DATA_DIR, ArtifactKind.DATABASE_FILES}),
    Category.PATH_ENTRIES: frozenset({ArtifactKind.STARTUP_FILE, ArtifactKind.ENV_PATH_ENTRY}),
}


@dataclass(frozen=True, slots=True)
class CandidatePath:
    """A location the locator is allowed to inspect.

    Attributes:
        kind: What the location may hold.
        path: Absolute path of the location.
    """

    kind: CandidateKind
    path: Path

    def __post_init__(self) -> None:
        """Validate candidate data after initialization."""
        if not self.path.is_absolute():
            msg = f"Candidate path must be absolute, got {self.path}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Artifact:
    """A concrete thing found on disk that belongs to the application.

    Attributes:
        kind: Kind of artifact.
        path: Absolute path. For database files this is the directory holding them.
        source: Candidate path that produced the artifact, None when found
            through the shell search path or the environment.
        members: Matched files, only set for database-file artifacts.
    """

    kind: ArtifactKind
    path: Path
    source: CandidatePath | None = None
    members: tuple[Path, ...] = ()

    @property
    def category(self) -> Category:
        """Category this artifact is processed under."""
        for category, kinds in CATEGORY_KINDS.items():
            if self.kind in kinds:
                return category
        msg = f"No category for artifact kind {self.kind}"
        raise ValueError(msg)

    @property
    def label(self) -> str:
        """Human-readable description used in prompts and reports."""
        if self.kind == ArtifactKind.DATABASE_FILES:
            return f"database files in {self.path}"
        if self.kind == ArtifactKind.CONFIG_DIR:
            return f"configuration directory {self.path}"
        if self.kind == ArtifactKind.DATA_DIR:
            return f"data directory {self.path}"
        if self.kind == ArtifactKind.STARTUP_FILE:
            return f"PATH entries in {self.path}"
        if self.kind == ArtifactKind.ENV_PATH_ENTRY:
            return f"user PATH entry {self.path}"
        return str(self.path)


@dataclass(frozen=True, slots=True)
class ArtifactInventory:
    """Everything found in one discovery pass.

    Attributes:
        binaries: Executables, deduplicated by resolved path.
        configs: Configuration directories.
        data: Data directories and database-file sets.
        path_entries: Startup files and persisted PATH entries.
    """

    binaries: tuple[Artifact, ...] = ()
    configs: tuple[Artifact, ...] = ()
    data: tuple[Artifact, ...] = ()
    path_entries: tuple[Artifact, ...] = ()

    @property
    def is_empty(self) -> bool:
        """True when no binary, configuration or data artifact was found.

        Path entries alone do not mean the application is installed.
        """
        return not (self.binaries or self.configs or self.data)

    def for_category(self, category: Category) -> tuple[Artifact, ...]:
        """Get the artifacts belonging to a category."""
        if category == Category.BINARIES:
            return self.binaries
        if category == Category.CONFIGURATION:
            return self.configs
        if category == Category.DATA:
            return self.data
        return self.path_entries

"""Run options for the install and uninstall flows.

Options are built once from parsed arguments and the environment and
passed explicitly into every component.
"""

from dataclasses import dataclass
from pathlib import Path

from edsctl.models.artifact import Category


@dataclass(frozen=True, slots=True)
class ConfirmationPolicy:
    """How confirmation gates resolve.

    Attributes:
        force: Every gate answers yes without prompting.
        preapproved: Categories whose gate is answered yes without prompting.
    """

    force: bool = False
    preapproved: frozenset[Category] = frozenset()

    def is_preapproved(self, category: Category) -> bool:
        """Check if a category gate resolves to yes without prompting."""
        return self.force or category in self.preapproved


@dataclass(frozen=True, slots=True)
class UninstallOptions:
    """Options for one uninstall run.

    Attributes:
        install_dir: Default install directory, used to recognize PATH entries.
        policy: Confirmation policy (force and pre-answered categories).
        dry_run: Describe every action without mutating anything.
    """

    install_dir: Path
    policy: ConfirmationPolicy = ConfirmationPolicy()
    dry_run: bool = False

    @classmethod
    def from_flags(
        cls,
        *,
        install_dir: Path,
        remove_config: bool = False,
        remove_data: bool = False,
        remove_all: bool = False,
        force: bool = False,
        dry_run: bool = False,
    ) -> "UninstallOptions":
        """Build options from command-line flags.

        ``remove_all`` implies both ``remove_config`` and ``remove_data``.
        """
        preapproved: set[Category] = set()
        if remove_config or remove_all:
            preapproved.add(Category.CONFIGURATION)
        if remove_data or remove_all:
            preapproved.add(Category.DATA)
        return cls(
            install_dir=install_dir,
            policy=ConfirmationPolicy(force=force, preapproved=frozenset(preapproved)),
            dry_run=dry_run,
        )


@dataclass(frozen=True, slots=True)
class InstallOptions:
    """Options for one install run.

    Attributes:
        install_dir: Directory the binary is installed into.
        config_dir: Directory receiving the default settings file.
        build_from_source: Skip the release download and build locally.
        dry_run: Describe every action without mutating anything.
    """

    install_dir: Path
    config_dir: Path
    build_from_source: bool = False
    dry_run: bool = False

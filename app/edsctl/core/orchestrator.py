"""Install and uninstall flows.

Sequences the process guard, locator, confirmation gates, executor and
PATH updater into the two user-facing flows. Both flows are explicit
state machines; the states visited are recorded on the returned report.
"""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from edsctl import APP_DISPLAY_NAME, REPO_URL
from edsctl.cli.display import create_inventory_table, create_results_table
from edsctl.core.confirm import ConfirmationGate
from edsctl.core.options import InstallOptions, UninstallOptions
from edsctl.core.pathreg import PathRegistryUpdater, PathSetupResult
from edsctl.core.paths import get_settings_path, is_windows
from edsctl.core.processes import GuardResult, ProcessGuard
from edsctl.core.settings import SettingsError, load_settings, render_default_settings
from edsctl.installers.base import BinaryProvider, InstallError, TransferError
from edsctl.models.action import (
    ActionType,
    CategoryResult,
    ExecutionResult,
    OperationPlan,
    Outcome,
    skipped_by_user,
)
from edsctl.models.artifact import Artifact, ArtifactInventory, ArtifactKind, Category
from edsctl.operators.executor import ActionExecutor, CategoryError
from edsctl.platform.base import PlatformAdapter
from edsctl.scanners.artifacts import ArtifactLocator
from edsctl.utils.formatting import (
    console,
    print_dry_run,
    print_error,
    print_info,
    print_status,
    print_success,
    print_warning,
)
from edsctl.utils.shell import run_command

logger = logging.getLogger(__name__)


class RunOutcome(str, Enum):
    """Overall outcome of a flow.

    Attributes:
        COMPLETED: The flow ran to the end.
        CANCELLED: The user declined the top-level confirmation.
        NOT_INSTALLED: Uninstall found nothing to remove.
        FAILED: Install hit an unrecoverable error.
    """

    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NOT_INSTALLED = "not-installed"
    FAILED = "failed"


# =============================================================================
# Uninstall
# =============================================================================


class UninstallState(str, Enum):
    """States of the uninstall flow, in order."""

    CHECK_PROCESSES = "check-processes"
    DISCOVER = "discover"
    SUMMARIZE = "summarize"
    CONFIRM_PROCEED = "confirm-proceed"
    PROCESS_BINARIES = "process-binaries"
    PROCESS_CONFIG = "process-config"
    PROCESS_DATA = "process-data"
    PROCESS_PATH = "process-path"
    REPORT = "report"


@dataclass(frozen=True, slots=True)
class CategoryStep:
    """Prompting and messaging for one category."""

    state: UninstallState
    category: Category
    question: str
    default: bool
    found_message: str
    none_message: str
    preserved_message: str


UNINSTALL_STEPS: tuple[CategoryStep, ...] = (
    CategoryStep(
        state=UninstallState.PROCESS_BINARIES,
        category=Category.BINARIES,
        question=f"Remove {APP_DISPLAY_NAME} binary files?",
        default=True,
        found_message=f"Found {APP_DISPLAY_NAME} binaries:",
        none_message=f"No {APP_DISPLAY_NAME} binaries found",
        preserved_message="Skipping binary removal. Binaries remain at:",
    ),
    CategoryStep(
        state=UninstallState.PROCESS_CONFIG,
        category=Category.CONFIGURATION,
        question="Remove configuration files and directories?",
        default=False,
        found_message="Found configuration directories:",
        none_message="No configuration directories found",
        preserved_message="Preserving configuration files. Configuration files preserved in:",
    ),
    CategoryStep(
        state=UninstallState.PROCESS_DATA,
        category=Category.DATA,
        question="Remove data files (evaluations, databases, exports)?",
        default=False,
        found_message="Found data files:",
        none_message="No data directories found",
        preserved_message="Preserving data files. Data files preserved in:",
    ),
    CategoryStep(
        state=UninstallState.PROCESS_PATH,
        category=Category.PATH_ENTRIES,
        question=f"Attempt to remove {APP_DISPLAY_NAME}-related PATH entries from shell configs?",
        default=False,
        found_message="Found PATH-related entries:",
        none_message="No PATH entries found to remove",
        preserved_message="Leaving PATH entries untouched in:",
    ),
)


@dataclass(frozen=True, slots=True)
class UninstallReport:
    """Result of an uninstall run.

    Attributes:
        outcome: Overall outcome.
        dry_run: Whether the run was a simulation.
        states: States visited, in order.
        guard: Result of the process check.
        inventory: What discovery found.
        categories: One result per processed category.
    """

    outcome: RunOutcome
    dry_run: bool
    states: tuple[UninstallState, ...]
    guard: GuardResult = field(default_factory=GuardResult)
    inventory: ArtifactInventory = field(default_factory=ArtifactInventory)
    categories: tuple[CategoryResult, ...] = ()

    @property
    def results(self) -> list[ExecutionResult]:
        """All per-artifact results across categories."""
        return [r for c in self.categories for r in c.results]

    def count(self, outcome: Outcome) -> int:
        """Count per-artifact results with the given outcome."""
        return sum(1 for r in self.results if r.outcome == outcome)

    @property
    def exit_code(self) -> int:
        """Uninstall always exits 0 once the flow has started."""
        return 0


class UninstallOrchestrator:
    """Runs the uninstall flow.

    Args:
        options: Immutable run options.
        adapter: Platform adapter.
        gate: Confirmation gate built from the options' policy.
    """

    def __init__(
        self,
        options: UninstallOptions,
        adapter: PlatformAdapter,
        gate: ConfirmationGate,
    ) -> None:
        self._options = options
        self._adapter = adapter
        self._gate = gate
        self._locator = ArtifactLocator(adapter, options.install_dir)
        self._executor = ActionExecutor(adapter)
        self._guard = ProcessGuard(adapter, gate, dry_run=options.dry_run)
        self._states: list[UninstallState] = []

    def _enter(self, state: UninstallState) -> None:
        logger.debug("Uninstall state: %s", state.value)
        self._states.append(state)

    def run(self) -> UninstallReport:
        """Run the flow from process check to report."""
        self._states = []
        dry_run = self._options.dry_run

        self._enter(UninstallState.CHECK_PROCESSES)
        guard = self._guard.check()

        self._enter(UninstallState.DISCOVER)
        print_status(f"Scanning system for {APP_DISPLAY_NAME} components...")
        inventory = self._locator.discover()

        self._enter(UninstallState.SUMMARIZE)
        self._print_summary(inventory)

        if inventory.is_empty:
            print_success(f"{APP_DISPLAY_NAME} does not appear to be installed")
            return self._finish(RunOutcome.NOT_INSTALLED, guard, inventory, ())

        if not dry_run:
            self._enter(UninstallState.CONFIRM_PROCEED)
            if not self._gate.confirm("Proceed with uninstallation?", default=True):
                print_info("Uninstallation cancelled")
                return self._finish(RunOutcome.CANCELLED, guard, inventory, ())
            console.print()

        categories: list[CategoryResult] = []
        for step in UNINSTALL_STEPS:
            self._enter(step.state)
            categories.append(self._process(step, inventory))

        return self._finish(RunOutcome.COMPLETED, guard, inventory, tuple(categories))

    def _process(self, step: CategoryStep, inventory: ArtifactInventory) -> CategoryResult:
        """Run one category: list, confirm, then execute or preserve."""
        artifacts = inventory.for_category(step.category)
        if not artifacts:
            print_info(step.none_message)
            return CategoryResult(category=step.category)

        print_status(step.found_message)
        for artifact in artifacts:
            console.print(f"  {artifact.label}", markup=False, highlight=False)

        plan = OperationPlan(
            category=step.category,
            artifacts=artifacts,
            action=ActionType.REMOVE,
            dry_run=self._options.dry_run,
        )

        if not self._gate.confirm_category(step.category, step.question, step.default):
            print_info(step.preserved_message)
            for artifact in artifacts:
                console.print(f"  {artifact.path}", markup=False, highlight=False)
            return skipped_by_user(plan)

        try:
            return self._executor.apply(plan)
        except CategoryError as e:
            logger.warning("Category %s failed: %s", step.category.value, e)
            print_warning(f"Could not process {step.category.value}: {e}")
            return CategoryResult(category=step.category, results=e.results, error=str(e))

    def _print_summary(self, inventory: ArtifactInventory) -> None:
        console.print()
        console.print(create_inventory_table(inventory))
        console.print()

    def _finish(
        self,
        outcome: RunOutcome,
        guard: GuardResult,
        inventory: ArtifactInventory,
        categories: tuple[CategoryResult, ...],
    ) -> UninstallReport:
        self._enter(UninstallState.REPORT)
        report = UninstallReport(
            outcome=outcome,
            dry_run=self._options.dry_run,
            states=tuple(self._states),
            guard=guard,
            inventory=inventory,
            categories=categories,
        )
        if outcome == RunOutcome.COMPLETED:
            self._print_report(report)
        if guard.may_still_run:
            print_warning(f"{APP_DISPLAY_NAME} processes may still be running")
        return report

    def _print_report(self, report: UninstallReport) -> None:
        console.print()
        for category in report.categories:
            if category.failed:
                print_warning(f"{category.category.value}: {category.error}")

        if report.dry_run:
            would = report.count(Outcome.APPLIED)
            print_info(f"Dry run: {would} action(s) would be performed.")
            print_info("Dry run complete. Run without --dry-run to actually uninstall")
            return

        if report.results:
            console.print(create_results_table(report.results))

        parts = [f"[success]{report.count(Outcome.APPLIED)} removed[/success]"]
        skipped = report.count(Outcome.SKIPPED_BY_USER)
        if skipped:
            parts.append(f"[preserved]{skipped} preserved[/preserved]")
        failed = sum(1 for r in report.results if r.is_warning)
        if failed:
            parts.append(f"[error]{failed} failed[/error]")
        review = report.count(Outcome.REVIEW_REQUIRED)
        if review:
            parts.append(f"[warning]{review} to review[/warning]")
        console.print("Summary: " + ", ".join(parts))

        print_success(f"{APP_DISPLAY_NAME} uninstallation complete!")
        print_info(f"Thank you for using {APP_DISPLAY_NAME}!")
        print_info(f"If you encountered any issues, please report them at: {REPO_URL}/issues")


# =============================================================================
# Install
# =============================================================================


class InstallState(str, Enum):
    """States of the install flow, in order."""

    PREPARE = "prepare"
    CREATE_INSTALL_DIR = "create-install-dir"
    CREATE_CONFIG = "create-config"
    ACQUIRE_BINARY = "acquire-binary"
    SETUP_PATH = "setup-path"
    VERIFY = "verify"
    REPORT = "report"


@dataclass(frozen=True, slots=True)
class InstallReport:
    """Result of an install run.

    Attributes:
        outcome: COMPLETED or FAILED.
        dry_run: Whether the run was a simulation.
        states: States visited, in order.
        binary_path: Installed executable, None if not installed.
        provider: Description of the provider that supplied the binary.
        config: Result of the configuration step.
        path_setup: Result of the PATH step.
        version: Output of ``--version``, if it ran.
        error: Fatal error message for FAILED runs.
    """

    outcome: RunOutcome
    dry_run: bool
    states: tuple[InstallState, ...]
    binary_path: Path | None = None
    provider: str | None = None
    config: ExecutionResult | None = None
    path_setup: PathSetupResult | None = None
    version: str | None = None
    error: str | None = None

    @property
    def exit_code(self) -> int:
        """1 for unrecoverable failures, 0 otherwise."""
        return 1 if self.outcome == RunOutcome.FAILED else 0


class InstallOrchestrator:
    """Runs the install flow.

    Args:
        options: Immutable run options.
        adapter: Platform adapter.
        downloader: Provider for prebuilt releases.
        builder: Provider for source builds (also the download fallback).
    """

    def __init__(
        self,
        options: InstallOptions,
        adapter: PlatformAdapter,
        *,
        downloader: BinaryProvider,
        builder: BinaryProvider,
    ) -> None:
        self._options = options
        self._adapter = adapter
        self._downloader = downloader
        self._builder = builder
        self._executor = ActionExecutor(adapter, settings_content=render_default_settings())
        self._path_updater = PathRegistryUpdater(adapter, dry_run=options.dry_run)
        self._states: list[InstallState] = []

    def _enter(self, state: InstallState) -> None:
        logger.debug("Install state: %s", state.value)
        self._states.append(state)

    def _report(self, outcome: RunOutcome, **kwargs: object) -> InstallReport:
        self._enter(InstallState.REPORT)
        return InstallReport(
            outcome=outcome,
            dry_run=self._options.dry_run,
            states=tuple(self._states),
            **kwargs,  # type: ignore[arg-type]
        )

    def _fail(self, message: str, **kwargs: object) -> InstallReport:
        print_error(message)
        return self._report(RunOutcome.FAILED, error=message, **kwargs)

    def run(self) -> InstallReport:
        """Run the flow from preparation to report."""
        self._states = []
        options = self._options
        dry_run = options.dry_run

        self._enter(InstallState.PREPARE)
        print_status(f"Installing to: {options.install_dir}")
        print_status(f"Configuration: {options.config_dir}")

        self._enter(InstallState.CREATE_INSTALL_DIR)
        if not self._adapter.is_dir(options.install_dir):
            if dry_run:
                print_dry_run(f"create installation directory {options.install_dir}")
            else:
                print_status(f"Creating installation directory: {options.install_dir}")
                try:
                    self._adapter.make_dirs(options.install_dir)
                except OSError as e:
                    return self._fail(f"Cannot create {options.install_dir}: {e}")

        self._enter(InstallState.CREATE_CONFIG)
        config_result = self._create_config()

        self._enter(InstallState.ACQUIRE_BINARY)
        if dry_run:
            method = self._builder if options.build_from_source else self._downloader
            print_dry_run(f"install {APP_DISPLAY_NAME} via {method.description}")
            self._enter(InstallState.SETUP_PATH)
            path_setup = self._path_updater.ensure_on_path(options.install_dir)
            print_info("Dry run complete. Run without --dry-run to actually install")
            return self._report(
                RunOutcome.COMPLETED, config=config_result, path_setup=path_setup
            )

        try:
            binary_path, provider = self._acquire_binary()
        except InstallError as e:
            return self._fail(str(e), config=config_result)

        self._enter(InstallState.SETUP_PATH)
        path_setup = self._path_updater.ensure_on_path(options.install_dir)

        self._enter(InstallState.VERIFY)
        expected = options.install_dir / self._adapter.executable_name
        if not self._is_executable(expected):
            return self._fail(
                "Installation verification failed",
                config=config_result,
                path_setup=path_setup,
                provider=provider,
            )
        version = self._binary_version(expected)

        print_success(f"{APP_DISPLAY_NAME} installed successfully!")
        if version:
            print_success(f"Version: {version}")
        print_info(f"Configuration directory: {options.config_dir}")
        print_info(f"Binary location: {expected}")
        console.print()
        print_info("Get started with:")
        console.print("  evaleds create my-first-evaluation --interactive", markup=False)
        console.print("  evaleds --help", markup=False)
        console.print()
        print_info(f"Documentation: {REPO_URL}#readme")

        return self._report(
            RunOutcome.COMPLETED,
            binary_path=binary_path,
            provider=provider,
            config=config_result,
            path_setup=path_setup,
            version=version,
        )

    def _create_config(self) -> ExecutionResult:
        """Create the config directory and default settings if absent."""
        config_dir = self._options.config_dir
        plan = OperationPlan(
            category=Category.CONFIGURATION,
            artifacts=(Artifact(kind=ArtifactKind.CONFIG_DIR, path=config_dir),),
            action=ActionType.CREATE,
            dry_run=self._options.dry_run,
        )
        result = self._executor.apply(plan).results[0]

        if result.outcome == Outcome.NOT_FOUND:
            try:
                load_settings(get_settings_path(config_dir))
            except SettingsError as e:
                print_warning(f"Existing configuration is not valid, leaving it untouched: {e}")
        return result

    def _acquire_binary(self) -> tuple[Path, str]:
        """Download the release, falling back to a source build.

        Raises:
            InstallError: If the source build fails.
        """
        install_dir = self._options.install_dir
        if not self._options.build_from_source:
            print_status(f"Installing {APP_DISPLAY_NAME} from {self._downloader.description}")
            try:
                path = self._downloader.provide(install_dir)
            except TransferError as e:
                logger.info("Download failed: %s", e)
                print_warning(f"{e}. Building from source...")
            else:
                print_success(f"Binary installed to {path}")
                return path, self._downloader.description

        print_status(f"Building {APP_DISPLAY_NAME} from source...")
        path = self._builder.provide(install_dir)
        print_success(f"Binary built and installed to {path}")
        return path, self._builder.description

    def _is_executable(self, path: Path) -> bool:
        if not self._adapter.is_file(path):
            return False
        return is_windows() or os.access(path, os.X_OK)

    @staticmethod
    def _binary_version(path: Path) -> str | None:
        """Run ``<binary> --version``; None if it does not run cleanly."""
        try:
            result = run_command([str(path), "--version"], timeout=15.0)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug("Version check failed: %s", e)
            return None
        if not result.success:
            return None
        return result.stdout.strip() or None

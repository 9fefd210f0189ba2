"""Action executor.

Applies an operation plan to the filesystem through the platform adapter,
with dry-run support. Each artifact is handled independently: a failure
on one is reported as a warning and the next artifact is still attempted.
"""

import logging
from pathlib import Path

from edsctl.core.paths import get_settings_path
from edsctl.models.action import (
    ActionType,
    CategoryResult,
    ExecutionResult,
    OperationPlan,
    Outcome,
)
from edsctl.models.artifact import Artifact, ArtifactKind
from edsctl.platform.base import DATABASE_PATTERNS, PlatformAdapter
from edsctl.utils.formatting import (
    print_dry_run,
    print_info,
    print_success,
    print_warning,
)

logger = logging.getLogger(__name__)


class CategoryError(Exception):
    """Raised when a whole category cannot be processed.

    Attributes:
        results: Results of the artifacts handled before the failure.
    """

    def __init__(self, message: str, results: tuple[ExecutionResult, ...] = ()) -> None:
        super().__init__(message)
        self.results = results


class ActionExecutor:
    """Performs or simulates the actions of an operation plan.

    Args:
        adapter: Platform adapter used for every filesystem mutation.
        settings_content: Payload written into created configuration
            directories. Required for CREATE plans on config directories.
    """

    def __init__(self, adapter: PlatformAdapter, *, settings_content: str | None = None) -> None:
        self._adapter = adapter
        self._settings_content = settings_content

    def apply(self, plan: OperationPlan) -> CategoryResult:
        """Apply a plan and return one result per artifact.

        Args:
            plan: Category, artifacts, action and dry-run flag.

        Returns:
            CategoryResult for the plan's category.

        Raises:
            CategoryError: If a directory the category depends on cannot be
                enumerated at all. Results gathered so far are attached.
        """
        results: list[ExecutionResult] = []
        for artifact in plan.artifacts:
            try:
                if plan.action == ActionType.CREATE:
                    result = self._create(artifact, plan.dry_run)
                else:
                    result = self._remove(artifact, plan.dry_run)
            except CategoryError as e:
                raise CategoryError(str(e), tuple(results)) from e
            results.append(result)
        return CategoryResult(category=plan.category, results=tuple(results))

    # -- remove --------------------------------------------------------------

    def _remove(self, artifact: Artifact, dry_run: bool) -> ExecutionResult:
        if artifact.kind == ArtifactKind.STARTUP_FILE:
            return self._review_startup_file(artifact, dry_run)
        if artifact.kind == ArtifactKind.ENV_PATH_ENTRY:
            return self._remove_env_path_entry(artifact, dry_run)

        if not self._adapter.path_exists(artifact.path):
            logger.info("Already gone: %s", artifact.path)
            print_info(f"Not found (already removed): {artifact.label}")
            return ExecutionResult(artifact=artifact, outcome=Outcome.NOT_FOUND, dry_run=dry_run)

        if artifact.kind == ArtifactKind.DATABASE_FILES:
            return self._remove_database_files(artifact, dry_run)

        if dry_run:
            print_dry_run(f"remove {artifact.label}")
            return ExecutionResult(artifact=artifact, outcome=Outcome.APPLIED, dry_run=True)

        try:
            self._adapter.remove_path(artifact.path)
        except FileNotFoundError:
            return ExecutionResult(artifact=artifact, outcome=Outcome.NOT_FOUND)
        except PermissionError as e:
            return self._permission_denied(artifact, e)
        except OSError as e:
            return self._failed(artifact, e)

        print_success(f"Removed {artifact.label}")
        return ExecutionResult(artifact=artifact, outcome=Outcome.APPLIED)

    def _remove_database_files(self, artifact: Artifact, dry_run: bool) -> ExecutionResult:
        """Remove the database files of a config directory, one by one."""
        try:
            members = self._adapter.list_matching_files(artifact.path, DATABASE_PATTERNS)
        except OSError as e:
            msg = f"Cannot enumerate database files in {artifact.path}: {e}"
            raise CategoryError(msg) from e

        if not members:
            print_info(f"Not found (already removed): {artifact.label}")
            return ExecutionResult(artifact=artifact, outcome=Outcome.NOT_FOUND, dry_run=dry_run)

        if dry_run:
            print_dry_run(f"remove {len(members)} {artifact.label}")
            return ExecutionResult(
                artifact=artifact,
                outcome=Outcome.APPLIED,
                dry_run=True,
                message=f"{len(members)} file(s)",
            )

        removed = 0
        denied: list[Path] = []
        errors: list[str] = []
        for member in members:
            try:
                self._adapter.remove_path(member)
                removed += 1
            except FileNotFoundError:
                continue
            except PermissionError:
                denied.append(member)
            except OSError as e:
                errors.append(f"{member}: {e}")

        if denied:
            msg = f"removed {removed} of {len(members)}; permission denied: " + ", ".join(
                str(p) for p in denied
            )
            print_warning(f"Could not remove {artifact.label} ({msg})")
            return ExecutionResult(
                artifact=artifact, outcome=Outcome.SKIPPED_PERMISSION_DENIED, message=msg
            )
        if errors:
            msg = f"removed {removed} of {len(members)}; " + "; ".join(errors)
            print_warning(f"Could not remove {artifact.label} ({msg})")
            return ExecutionResult(artifact=artifact, outcome=Outcome.FAILED, message=msg)

        print_success(f"Removed {removed} {artifact.label}")
        return ExecutionResult(
            artifact=artifact, outcome=Outcome.APPLIED, message=f"{removed} file(s)"
        )

    def _review_startup_file(self, artifact: Artifact, dry_run: bool) -> ExecutionResult:
        """Startup files are never rewritten; the user reviews them by hand."""
        if dry_run:
            print_dry_run(f"clean {artifact.label}")
            return ExecutionResult(artifact=artifact, outcome=Outcome.APPLIED, dry_run=True)
        print_info(f"Please manually review and clean {artifact.path} if needed")
        return ExecutionResult(artifact=artifact, outcome=Outcome.REVIEW_REQUIRED)

    def _remove_env_path_entry(self, artifact: Artifact, dry_run: bool) -> ExecutionResult:
        if dry_run:
            print_dry_run(f"remove {artifact.label}")
            return ExecutionResult(artifact=artifact, outcome=Outcome.APPLIED, dry_run=True)
        try:
            removed = self._adapter.remove_search_path_entry(artifact.path)
        except PermissionError as e:
            return self._permission_denied(artifact, e)
        except OSError as e:
            return self._failed(artifact, e)
        if not removed:
            return ExecutionResult(artifact=artifact, outcome=Outcome.NOT_FOUND)
        print_success(f"Removed {artifact.label}")
        return ExecutionResult(artifact=artifact, outcome=Outcome.APPLIED)

    # -- create --------------------------------------------------------------

    def _create(self, artifact: Artifact, dry_run: bool) -> ExecutionResult:
        """Create a directory, plus the default settings file for config dirs.

        An existing settings file is never overwritten.
        """
        settings_path: Path | None = None
        if artifact.kind == ArtifactKind.CONFIG_DIR:
            if self._settings_content is None:
                msg = "settings_content is required to create a configuration directory"
                raise ValueError(msg)
            settings_path = get_settings_path(artifact.path)

        if settings_path is not None and self._adapter.path_exists(settings_path):
            print_info(f"Keeping existing configuration at {settings_path}")
            return ExecutionResult(
                artifact=artifact,
                outcome=Outcome.NOT_FOUND,
                dry_run=dry_run,
                message="already present",
            )

        if dry_run:
            target = settings_path or artifact.path
            print_dry_run(f"create {target}")
            return ExecutionResult(artifact=artifact, outcome=Outcome.APPLIED, dry_run=True)

        try:
            self._adapter.make_dirs(artifact.path)
            if settings_path is not None and self._settings_content is not None:
                created = self._adapter.write_text_if_absent(
                    settings_path, self._settings_content
                )
                if not created:
                    return ExecutionResult(
                        artifact=artifact, outcome=Outcome.NOT_FOUND, message="already present"
                    )
        except PermissionError as e:
            return self._permission_denied(artifact, e)
        except OSError as e:
            return self._failed(artifact, e)

        print_success(f"Created {settings_path or artifact.path}")
        return ExecutionResult(artifact=artifact, outcome=Outcome.APPLIED)

    # -- helpers -------------------------------------------------------------

    @staticmethod
    def _permission_denied(artifact: Artifact, error: OSError) -> ExecutionResult:
        logger.warning("Permission denied for %s: %s", artifact.path, error)
        print_warning(f"Could not modify {artifact.label} (insufficient permissions?)")
        return ExecutionResult(
            artifact=artifact,
            outcome=Outcome.SKIPPED_PERMISSION_DENIED,
            message=str(error),
        )

    @staticmethod
    def _failed(artifact: Artifact, error: OSError) -> ExecutionResult:
        logger.warning("Operation failed for %s: %s", artifact.path, error)
        print_warning(f"Could not modify {artifact.label}: {error}")
        return ExecutionResult(artifact=artifact, outcome=Outcome.FAILED, message=str(error))

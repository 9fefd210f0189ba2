"""Action models for planned operations.

This module defines the plan handed to the executor for one category
and the per-artifact results it returns.
"""

from dataclasses import dataclass
from enum import Enum

from edsctl.models.artifact import Artifact, Category


class ActionType(Enum):
    """Type of lifecycle action.

    Attributes:
        REMOVE: Delete the artifact.
        CREATE: Create the artifact with default content (install only).
    """

    REMOVE = "remove"
    CREATE = "create"


class Outcome(str, Enum):
    """Outcome of handling a single artifact.

    Attributes:
        APPLIED: The action was performed (or, in dry-run, would be).
        SKIPPED_BY_USER: The user declined the category gate.
        SKIPPED_PERMISSION_DENIED: The operating system refused the mutation.
        NOT_FOUND: The artifact was already gone (or, for create, already present).
        FAILED: Any other operating system error.
        REVIEW_REQUIRED: Nothing was changed; the user must review the file by hand.
    """

    APPLIED = "applied"
    SKIPPED_BY_USER = "skipped-by-user"
    SKIPPED_PERMISSION_DENIED = "skipped-permission-denied"
    NOT_FOUND = "not-found"
    FAILED = "failed"
    REVIEW_REQUIRED = "review-required"


@dataclass(frozen=True, slots=True)
class OperationPlan:
    """Artifacts of one category slated for one action.

    Attributes:
        category: Category being processed.
        artifacts: Artifacts to act on, in display order.
        action: Action to apply to every artifact.
        dry_run: If True, describe the action without performing it.
    """

    category: Category
    artifacts: tuple[Artifact, ...]
    action: ActionType = ActionType.REMOVE
    dry_run: bool = False

    def __post_init__(self) -> None:
        """Validate that all artifacts belong to the plan's category."""
        for artifact in self.artifacts:
            if artifact.category != self.category:
                msg = (
                    f"Artifact {artifact.path} ({artifact.kind.value}) "
                    f"does not belong to category {self.category.value}"
                )
                raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Result of handling one artifact.

    Attributes:
        artifact: The artifact that was handled.
        outcome: What happened.
        dry_run: Whether this was a simulation.
        message: Optional detail (error text, affected file count).
    """

    artifact: Artifact
    outcome: Outcome
    dry_run: bool = False
    message: str | None = None

    @property
    def applied(self) -> bool:
        """Check if the action was (or would be) performed."""
        return self.outcome == Outcome.APPLIED

    @property
    def is_warning(self) -> bool:
        """Check if the outcome should be reported as a warning."""
        return self.outcome in (Outcome.SKIPPED_PERMISSION_DENIED, Outcome.FAILED)


@dataclass(frozen=True, slots=True)
class CategoryResult:
    """Results for one category.

    Attributes:
        category: The category processed.
        results: One result per artifact that was handled.
        error: Category-level failure, None if the category completed.
    """

    category: Category
    results: tuple[ExecutionResult, ...] = ()
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the category hit a category-level failure."""
        return self.error is not None


def skipped_by_user(plan: OperationPlan) -> CategoryResult:
    """Build the result of a category the user declined.

    Args:
        plan: The plan that was not executed.

    Returns:
        CategoryResult with every artifact marked skipped-by-user.
    """
    return CategoryResult(
        category=plan.category,
        results=tuple(
            ExecutionResult(artifact=a, outcome=Outcome.SKIPPED_BY_USER, dry_run=plan.dry_run)
            for a in plan.artifacts
        ),
    )

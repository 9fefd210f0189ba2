"""Data models for edsctl.

This module exports the artifact and action models used across the
locator, executor and orchestrator.
"""

from edsctl.models.action import (
    ActionType,
    CategoryResult,
    ExecutionResult,
    OperationPlan,
    Outcome,
    skipped_by_user,
)
from edsctl.models.artifact import (
    CATEGORY_KINDS,
    Artifact,
    ArtifactInventory,
    ArtifactKind,
    CandidateKind,
    CandidatePath,
    Category,
)

__all__ = [
    "CATEGORY_KINDS",
    "ActionType",
    "Artifact",
    "ArtifactInventory",
    "ArtifactKind",
    "CandidateKind",
    "CandidatePath",
    "Category",
    "CategoryResult",
    "ExecutionResult",
    "OperationPlan",
    "Outcome",
    "skipped_by_user",
]

"""Shared Rich display functions for inventories and results.

Provides the table builders used by the uninstall and install flows.
"""

from rich.table import Table
from rich.text import Text

from edsctl.models.action import ExecutionResult, Outcome
from edsctl.models.artifact import ArtifactInventory

_OUTCOME_STYLES: dict[Outcome, tuple[str, str]] = {
    Outcome.APPLIED: ("OK", "success"),
    Outcome.SKIPPED_BY_USER: ("KEPT", "preserved"),
    Outcome.SKIPPED_PERMISSION_DENIED: ("DENIED", "error"),
    Outcome.NOT_FOUND: ("GONE", "muted"),
    Outcome.FAILED: ("FAIL", "error"),
    Outcome.REVIEW_REQUIRED: ("REVIEW", "warning"),
}


def create_inventory_table(inventory: ArtifactInventory) -> Table:
    """Create a Rich table summarizing discovered components.

    Args:
        inventory: Result of discovery.

    Returns:
        Rich Table with one row per category and its count.
    """
    table = Table(
        title="Found",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Component")
    table.add_column("Count", justify="right")

    table.add_row("Binaries", str(len(inventory.binaries)))
    table.add_row("Configuration directories", str(len(inventory.configs)))
    table.add_row("Data locations", str(len(inventory.data)))
    table.add_row("PATH entries", str(len(inventory.path_entries)))
    return table


def create_results_table(results: list[ExecutionResult]) -> Table:
    """Create a Rich table displaying per-artifact results.

    Builds a table with Status, Category, Location and Message columns.
    Each outcome gets its own status label and style.

    Args:
        results: Results to display.

    Returns:
        Rich Table configured for results display.
    """
    table = Table(
        title="Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=8, justify="center")
    table.add_column("Category")
    table.add_column("Location", no_wrap=True)
    table.add_column("Message")

    for result in results:
        label, style = _OUTCOME_STYLES[result.outcome]
        table.add_row(
            f"[{style}]{label}[/{style}]",
            result.artifact.category.value,
            Text(str(result.artifact.path)),
            Text(result.message or "", style="muted"),
        )

    return table

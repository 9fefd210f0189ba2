"""Unit tests for cli/display.py.

Tests for the Rich tables shown by the uninstall flow.
"""

import io
from pathlib import Path

import pytest
from edsctl.cli.display import create_inventory_table, create_results_table
from edsctl.core.theme import get_theme
from edsctl.models.action import ExecutionResult, Outcome
from edsctl.models.artifact import Artifact, ArtifactInventory, ArtifactKind
from rich.console import Console
from rich.table import Table


def _render(table: Table) -> str:
    buf = io.StringIO()
    test_console = Console(theme=get_theme(), file=buf, color_system=None, width=200)
    test_console.print(table)
    return buf.getvalue()


@pytest.fixture
def binary() -> Artifact:
    """A discovered binary."""
    return Artifact(kind=ArtifactKind.BINARY, path=Path("/home/u/.local/bin/evaleds"))


@pytest.fixture
def config_dir() -> Artifact:
    """A discovered configuration directory."""
    return Artifact(kind=ArtifactKind.CONFIG_DIR, path=Path("/home/u/.config/evaleds"))


class TestCreateInventoryTable:
    """Tests for create_inventory_table."""

    def test_counts_per_category(self, binary: Artifact, config_dir: Artifact) -> None:
        """Each category row shows its artifact count."""
        inventory = ArtifactInventory(binaries=(binary,), configs=(config_dir,))

        table = create_inventory_table(inventory)
        output = _render(table)

        assert table.row_count == 4
        assert [col.header for col in table.columns] == ["Component", "Count"]
        rows = [line for line in output.splitlines() if "│" in line]
        lines = {row.split("│")[1].strip(): row for row in rows}
        assert "1" in lines["Binaries"]
        assert "1" in lines["Configuration directories"]
        assert "0" in lines["Data locations"]
        assert "0" in lines["PATH entries"]


class TestCreateResultsTable:
    """Tests for create_results_table."""

    def test_columns(self, binary: Artifact) -> None:
        """Table has Status, Category, Location and Message columns."""
        table = create_results_table([ExecutionResult(artifact=binary, outcome=Outcome.APPLIED)])

        assert [col.header for col in table.columns] == [
            "Status",
            "Category",
            "Location",
            "Message",
        ]

    @pytest.mark.parametrize(
        ("outcome", "label"),
        [
            (Outcome.APPLIED, "OK"),
            (Outcome.SKIPPED_BY_USER, "KEPT"),
            (Outcome.SKIPPED_PERMISSION_DENIED, "DENIED"),
            (Outcome.NOT_FOUND, "GONE"),
            (Outcome.FAILED, "FAIL"),
            (Outcome.REVIEW_REQUIRED, "REVIEW"),
        ],
    )
    def test_status_labels(self, binary: Artifact, outcome: Outcome, label: str) -> None:
        """Every outcome has its own status label."""
        output = _render(create_results_table([ExecutionResult(artifact=binary, outcome=outcome)]))

        assert label in output

    def test_row_content(self, config_dir: Artifact) -> None:
        """Rows show the category, location and message verbatim."""
        result = ExecutionResult(
            artifact=config_dir,
            outcome=Outcome.FAILED,
            message="[Errno 16] Device or resource busy",
        )

        output = _render(create_results_table([result]))

        assert "configuration" in output
        assert "/home/u/.config/evaleds" in output
        assert "[Errno 16] Device or resource busy" in output

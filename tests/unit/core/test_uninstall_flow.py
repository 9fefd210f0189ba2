"""Unit tests for the uninstall flow.

Drives UninstallOrchestrator with a fake adapter over a temporary home
and scripted confirmation answers.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from edsctl.core.confirm import ConfirmationGate
from edsctl.core.options import UninstallOptions
from edsctl.core.orchestrator import RunOutcome, UninstallOrchestrator, UninstallState
from edsctl.models.action import CategoryResult, OperationPlan, Outcome
from edsctl.models.artifact import Category
from edsctl.operators.executor import ActionExecutor, CategoryError


def _run(
    adapter: Any,
    home: Path,
    ask: Any,
    **flags: bool,
) -> Any:
    options = UninstallOptions.from_flags(install_dir=home / ".local" / "bin", **flags)
    gate = ConfirmationGate(options.policy, ask=ask)
    return UninstallOrchestrator(options, adapter, gate).run()


def _outcomes(report: Any) -> dict[Category, list[Outcome]]:
    return {c.category: [r.outcome for r in c.results] for c in report.categories}


class TestCleanSystem:
    """Tests for the not-installed short-circuit."""

    def test_not_installed(
        self,
        adapter: Any,
        home: Path,
        scripted: Callable[..., Any],
        digest: Callable[[Path], str],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Nothing found means no prompts, no mutation and exit 0."""
        ask = scripted([])
        before = digest(home)

        report = _run(adapter, home, ask)

        assert report.outcome == RunOutcome.NOT_INSTALLED
        assert report.exit_code == 0
        assert ask.questions == []
        assert digest(home) == before
        assert report.states == (
            UninstallState.CHECK_PROCESSES,
            UninstallState.DISCOVER,
            UninstallState.SUMMARIZE,
            UninstallState.REPORT,
        )
        assert "does not appear to be installed" in capsys.readouterr().out


class TestInteractive:
    """Tests for prompted runs."""

    def test_default_answers(
        self,
        adapter: Any,
        home: Path,
        installed: dict[str, Path],
        scripted: Callable[..., Any],
    ) -> None:
        """Pressing Enter everywhere removes binaries and keeps config and data."""
        ask = scripted([None, None, None, None])

        report = _run(adapter, home, ask)

        assert ask.questions == [
            "Proceed with uninstallation?",
            "Remove EvalEds binary files?",
            "Remove configuration files and directories?",
            "Remove data files (evaluations, databases, exports)?",
        ]
        assert _outcomes(report) == {
            Category.BINARIES: [Outcome.APPLIED],
            Category.CONFIGURATION: [Outcome.SKIPPED_BY_USER],
            Category.DATA: [Outcome.SKIPPED_BY_USER],
            Category.PATH_ENTRIES: [],
        }
        assert not installed["binary"].exists()
        assert installed["config"].exists()
        assert installed["data"].exists()

    def test_cancel_at_top_level(
        self,
        adapter: Any,
        home: Path,
        installed: dict[str, Path],
        scripted: Callable[..., Any],
        digest: Callable[[Path], str],
    ) -> None:
        """Declining the overall confirmation changes nothing."""
        before = digest(home)

        report = _run(adapter, home, scripted([False]))

        assert report.outcome == RunOutcome.CANCELLED
        assert report.exit_code == 0
        assert report.categories == ()
        assert report.states[-2:] == (UninstallState.CONFIRM_PROCEED, UninstallState.REPORT)
        assert digest(home) == before

    def test_flags_preanswer_categories(
        self,
        adapter: Any,
        home: Path,
        installed: dict[str, Path],
        scripted: Callable[..., Any],
    ) -> None:
        """--remove-all leaves only the top-level and binaries prompts."""
        ask = scripted([True, True])

        _run(adapter, home, ask, remove_all=True)

        assert ask.questions == ["Proceed with uninstallation?", "Remove EvalEds binary files?"]
        assert not installed["config"].exists()
        assert not installed["data"].exists()

    def test_category_order(
        self,
        adapter: Any,
        home: Path,
        installed: dict[str, Path],
        scripted: Callable[..., Any],
    ) -> None:
        """Categories are processed binaries, configuration, data, path entries."""
        (home / ".bashrc").write_text("# evaleds\n")

        report = _run(adapter, home, scripted([True, False, False, False, False]))

        assert [c.category for c in report.categories] == list(Category)
        assert report.states[-5:] == (
            UninstallState.PROCESS_BINARIES,
            UninstallState.PROCESS_CONFIG,
            UninstallState.PROCESS_DATA,
            UninstallState.PROCESS_PATH,
            UninstallState.REPORT,
        )


class TestForce:
    """Tests for --force."""

    def test_force_never_prompts(
        self,
        adapter: Any,
        home: Path,
        installed: dict[str, Path],
        scripted: Callable[..., Any],
    ) -> None:
        """Force removes everything with zero prompts."""
        rc = home / ".bashrc"
        rc.write_text('export PATH="$HOME/.local/bin:$PATH"\n')
        adapter.pids = [99]
        ask = scripted([])

        report = _run(adapter, home, ask, force=True)

        assert ask.questions == []
        assert adapter.terminated == 1
        assert report.guard.terminated is True
        assert not installed["binary"].exists()
        assert not installed["config"].exists()
        assert not installed["data"].exists()
        assert _outcomes(report)[Category.PATH_ENTRIES] == [Outcome.REVIEW_REQUIRED]
        assert rc.read_text() == 'export PATH="$HOME/.local/bin:$PATH"\n'


class TestDryRun:
    """Tests for --dry-run."""

    def test_remove_all_dry_run(
        self,
        adapter: Any,
        home: Path,
        installed: dict[str, Path],
        scripted: Callable[..., Any],
        digest: Callable[[Path], str],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Three hypothetical removals, no top-level prompt, nothing changed."""
        before = digest(home)
        ask = scripted([None])

        report = _run(adapter, home, ask, remove_all=True, dry_run=True)

        assert ask.questions == ["Remove EvalEds binary files?"]
        assert UninstallState.CONFIRM_PROCEED not in report.states
        assert report.count(Outcome.APPLIED) == 3
        assert all(r.dry_run for r in report.results)
        assert digest(home) == before
        out = capsys.readouterr().out
        assert out.count("Would remove") == 3
        assert "Dry run complete" in out


class TestResilience:
    """Tests for failures that must not stop the run."""

    def test_permission_denied_continues(
        self,
        adapter: Any,
        home: Path,
        installed: dict[str, Path],
        scripted: Callable[..., Any],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """A refused data removal is a warning; the rest is removed."""
        adapter.deny.add(installed["data"])

        report = _run(adapter, home, scripted([]), force=True)

        assert report.outcome == RunOutcome.COMPLETED
        assert report.states[-1] == UninstallState.REPORT
        assert report.count(Outcome.APPLIED) == 2
        assert report.count(Outcome.SKIPPED_PERMISSION_DENIED) == 1
        assert installed["data"].exists()
        assert "Warning:" in capsys.readouterr().err

    def test_category_error_is_reported(
        self,
        adapter: Any,
        home: Path,
        installed: dict[str, Path],
        scripted: Callable[..., Any],
    ) -> None:
        """A category-level failure is recorded and later categories still run."""
        real_apply = ActionExecutor.apply

        def failing_apply(self: ActionExecutor, plan: OperationPlan) -> CategoryResult:
            if plan.category == Category.CONFIGURATION:
                raise CategoryError("cannot enumerate")
            return real_apply(self, plan)

        with patch.object(ActionExecutor, "apply", failing_apply):
            report = _run(adapter, home, scripted([]), force=True)

        by_category = {c.category: c for c in report.categories}
        assert by_category[Category.CONFIGURATION].error == "cannot enumerate"
        assert by_category[Category.DATA].results[0].outcome == Outcome.APPLIED
        assert report.outcome == RunOutcome.COMPLETED

    def test_declined_process_stop_is_a_caveat(
        self,
        adapter: Any,
        home: Path,
        installed: dict[str, Path],
        scripted: Callable[..., Any],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Declining to stop processes still uninstalls, with a warning."""
        adapter.pids = [7]

        report = _run(adapter, home, scripted([False, True, True, False, False]))

        assert report.guard.may_still_run is True
        assert report.outcome == RunOutcome.COMPLETED
        assert "may still be running" in capsys.readouterr().err

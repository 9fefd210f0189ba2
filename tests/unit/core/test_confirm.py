"""Unit tests for confirmation gates.

Tests for terminal prompting and the force/pre-answered policy.
"""

from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import typer
from edsctl.core.confirm import ConfirmationGate, console_ask
from edsctl.core.options import ConfirmationPolicy
from edsctl.models.artifact import Category
from typer.testing import CliRunner


def _ask_with_input(question: str, default: bool, text: str) -> tuple[Any, str]:
    """Run console_ask inside a tiny Typer app fed with ``text``."""
    answers: list[bool] = []
    app = typer.Typer()

    @app.command()
    def ask() -> None:
        answers.append(console_ask(question, default))

    result = CliRunner().invoke(app, [], input=text)
    return (answers[0] if answers else None), result.output


class TestConsoleAsk:
    """Tests for console_ask function."""

    @patch("edsctl.core.confirm.typer.confirm", return_value=True)
    def test_delegates_to_typer_confirm(self, mock_confirm: MagicMock) -> None:
        """The question and default are passed to typer.confirm."""
        assert console_ask("Remove data?", False) is True
        mock_confirm.assert_called_once_with("Remove data?", default=False)

    @pytest.mark.parametrize(("default", "marker"), [(True, "[Y/n]"), (False, "[y/N]")])
    def test_enter_takes_default(self, default: bool, marker: str) -> None:
        """Pressing Enter accepts the default, shown in the prompt."""
        answer, output = _ask_with_input("Remove binaries?", default, "\n")

        assert answer is default
        assert f"Remove binaries? {marker}" in output

    @pytest.mark.parametrize(
        ("text", "expected"), [("YES\n", True), ("y\n", True), ("No\n", False)]
    )
    def test_answers_are_case_insensitive(self, text: str, expected: bool) -> None:
        """y, yes, n and no are accepted in any case."""
        answer, _ = _ask_with_input("Proceed?", not expected, text)

        assert answer is expected

    def test_reprompts_until_valid(self) -> None:
        """Invalid answers ask again without consuming the default."""
        answer, output = _ask_with_input("Remove binaries?", True, "maybe\nn\n")

        assert answer is False
        assert output.count("Remove binaries?") == 2

    def test_end_of_input_aborts(self) -> None:
        """Closed stdin ends the program like an interrupt."""
        answer, output = _ask_with_input("Proceed?", True, "")

        assert answer is None
        assert "Abort" in output


class TestConfirmationGate:
    """Tests for ConfirmationGate class."""

    def test_asks_when_not_forced(self, scripted: Callable[..., Any]) -> None:
        """Without force, the ask capability is invoked."""
        ask = scripted([None])
        gate = ConfirmationGate(ConfirmationPolicy(), ask=ask)

        assert gate.confirm("Remove data?", False) is False
        assert gate.prompts_issued == 1
        assert ask.questions == ["Remove data?"]

    def test_force_never_prompts(self, scripted: Callable[..., Any]) -> None:
        """Force resolves every gate to yes with zero prompts."""
        ask = scripted([])
        gate = ConfirmationGate(ConfirmationPolicy(force=True), ask=ask)

        assert gate.confirm("Proceed?", True)
        assert gate.confirm("Remove data?", False)
        assert gate.confirm_category(Category.PATH_ENTRIES, "Clean PATH?", False)
        assert gate.prompts_issued == 0
        assert gate.force is True

    def test_preapproved_category(self, scripted: Callable[..., Any]) -> None:
        """A pre-answered category does not prompt; others still do."""
        ask = scripted([False])
        policy = ConfirmationPolicy(preapproved=frozenset({Category.DATA}))
        gate = ConfirmationGate(policy, ask=ask)

        assert gate.confirm_category(Category.DATA, "Remove data?", False) is True
        assert gate.confirm_category(Category.CONFIGURATION, "Remove config?", False) is False
        assert ask.questions == ["Remove config?"]

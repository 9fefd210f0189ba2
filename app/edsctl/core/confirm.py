"""Confirmation gates.

A gate turns a yes/no question plus a default answer into a boolean.
The prompting itself is an injected ``ask(question, default) -> bool``
callable so tests can script the answers.
"""

import logging
from collections.abc import Callable

import typer

from edsctl.core.options import ConfirmationPolicy
from edsctl.models.artifact import Category

logger = logging.getLogger(__name__)

AskFn = Callable[[str, bool], bool]


def console_ask(question: str, default: bool) -> bool:
    """Ask on the terminal with ``typer.confirm``.

    The prompt shows ``[Y/n]`` or ``[y/N]``. Enter takes the default, and
    anything other than y, yes, n or no asks again. Never times out.

    Raises:
        typer.Abort: If standard input is closed.
    """
    return typer.confirm(question, default=default)


class ConfirmationGate:
    """Resolves confirmation questions under a policy.

    Attributes:
        prompts_issued: Number of times the ``ask`` capability was invoked.
    """

    def __init__(self, policy: ConfirmationPolicy, ask: AskFn = console_ask) -> None:
        """Initialize the gate.

        Args:
            policy: Force flag and pre-answered categories.
            ask: Prompting capability, called only when an answer is needed.
        """
        self._policy = policy
        self._ask = ask
        self.prompts_issued = 0

    @property
    def force(self) -> bool:
        """Check if every gate resolves to yes without prompting."""
        return self._policy.force

    def confirm(self, question: str, default: bool) -> bool:
        """Resolve a question, prompting unless force mode is on."""
        if self._policy.force:
            logger.debug("Force mode: auto-confirming %r", question)
            return True
        self.prompts_issued += 1
        return self._ask(question, default)

    def confirm_category(self, category: Category, question: str, default: bool) -> bool:
        """Resolve a category gate, honoring pre-answered categories."""
        if self._policy.is_preapproved(category):
            logger.debug("Category %s pre-approved", category.value)
            return True
        return self.confirm(question, default)

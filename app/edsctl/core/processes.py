"""Process guard.

Detects running instances of the managed application before anything is
removed and offers to stop them. Failing to stop them is a warning, never
a reason to abort the uninstall.
"""

import logging
from dataclasses import dataclass

from edsctl import APP_DISPLAY_NAME
from edsctl.core.confirm import ConfirmationGate
from edsctl.platform.base import PlatformAdapter
from edsctl.utils.formatting import print_dry_run, print_success, print_warning

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GuardResult:
    """Outcome of the process check.

    Attributes:
        pids: PIDs found running.
        terminated: Whether a termination was performed successfully.
        may_still_run: Whether the final report must warn about running processes.
    """

    pids: tuple[int, ...] = ()
    terminated: bool = False
    may_still_run: bool = False

    @property
    def found(self) -> bool:
        """Check if any process was found."""
        return bool(self.pids)


class ProcessGuard:
    """Finds and optionally stops running application processes.

    Args:
        adapter: Platform adapter for process table access.
        gate: Confirmation gate for the termination question.
        dry_run: Report what would be terminated without sending signals.
    """

    def __init__(self, adapter: PlatformAdapter, gate: ConfirmationGate, *, dry_run: bool) -> None:
        self._adapter = adapter
        self._gate = gate
        self._dry_run = dry_run

    def check(self) -> GuardResult:
        """Detect running processes and stop them if the user agrees."""
        pids = tuple(self._adapter.find_processes())
        if not pids:
            logger.debug("No running %s processes", self._adapter.executable_name)
            return GuardResult()

        pid_list = ", ".join(str(p) for p in pids)
        print_warning(f"{APP_DISPLAY_NAME} processes are currently running (PID {pid_list})")

        if not self._gate.confirm(f"Stop running {APP_DISPLAY_NAME} processes?", default=True):
            print_warning("Some processes may still be running after uninstall")
            return GuardResult(pids=pids, may_still_run=True)

        if self._dry_run:
            print_dry_run(f"stop {APP_DISPLAY_NAME} processes (PID {pid_list})")
            return GuardResult(pids=pids)

        if self._adapter.terminate_processes():
            print_success(f"Stopped running {APP_DISPLAY_NAME} processes")
            return GuardResult(pids=pids, terminated=True)

        print_warning(f"Could not stop {APP_DISPLAY_NAME} processes; continuing anyway")
        return GuardResult(pids=pids, may_still_run=True)

"""Unit tests for shell execution utilities."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest
from edsctl.utils.shell import CommandResult, command_exists, run_command


class TestRunCommand:
    """Tests for run_command function."""

    @patch("edsctl.utils.shell.subprocess.run")
    def test_captures_output(self, mock_run: MagicMock) -> None:
        """run_command returns captured stdout, stderr and exit code."""
        mock_run.return_value = MagicMock(stdout="out", stderr="err", returncode=3)

        result = run_command(["evaleds", "--version"])

        assert result == CommandResult(stdout="out", stderr="err", returncode=3)
        assert result.success is False
        assert mock_run.call_args.kwargs["capture_output"] is True
        assert mock_run.call_args.kwargs["text"] is True

    @patch("edsctl.utils.shell.subprocess.run")
    def test_passes_cwd_and_timeout(self, mock_run: MagicMock) -> None:
        """run_command forwards the working directory and timeout."""
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        run_command(["cargo", "build", "--release"], timeout=3600.0, cwd="/tmp/src")

        assert mock_run.call_args.kwargs["cwd"] == "/tmp/src"
        assert mock_run.call_args.kwargs["timeout"] == 3600.0

    @patch(
        "edsctl.utils.shell.subprocess.run",
        side_effect=subprocess.TimeoutExpired("pgrep", 10.0),
    )
    def test_timeout_propagates(self, mock_run: MagicMock) -> None:
        """Timeouts are raised to the caller."""
        with pytest.raises(subprocess.TimeoutExpired):
            run_command(["pgrep", "-x", "evaleds"], timeout=10.0)


class TestCommandExists:
    """Tests for command_exists function."""

    @patch("edsctl.utils.shell.shutil.which", return_value="/usr/bin/git")
    def test_found(self, mock_which: MagicMock) -> None:
        """Existing commands are reported."""
        assert command_exists("git") is True

    @patch("edsctl.utils.shell.shutil.which", return_value=None)
    def test_missing(self, mock_which: MagicMock) -> None:
        """Missing commands are reported."""
        assert command_exists("cargo") is False

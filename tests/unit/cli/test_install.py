"""Unit tests for the install command.

Binary providers are replaced with a stub that writes a tiny executable.
"""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from edsctl.cli.main import app
from edsctl.installers.base import BinaryProvider, BuildError, TransferError
from edsctl.utils.shell import CommandResult
from typer.testing import CliRunner

runner = CliRunner()


class WritingProvider(BinaryProvider):
    """Provider that writes an executable into the install dir."""

    description = "stub"

    def provide(self, install_dir: Path) -> Path:
        target = install_dir / self.executable_name
        target.write_text("#!/bin/sh\necho evaleds 1.0.0\n")
        target.chmod(0o755)
        return target


class UnreachableRelease(BinaryProvider):
    """Provider whose release cannot be downloaded."""

    description = "prebuilt release"

    def provide(self, install_dir: Path) -> Path:
        raise TransferError("Binary download failed")


class BrokenBuild(BinaryProvider):
    """Provider whose build always fails."""

    description = "source build"

    def provide(self, install_dir: Path) -> Path:
        raise BuildError("Cargo (Rust) is required to build from source")


@pytest.fixture(autouse=True)
def cli_env(monkeypatch: pytest.MonkeyPatch, home: Path) -> Iterator[None]:
    """Point the command at the temporary home and stub the version check."""
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("PATH", "")
    monkeypatch.setenv("SHELL", "/bin/bash")
    for var in ("INSTALL_DIR", "CONFIG_DIR", "XDG_CONFIG_HOME", "XDG_DATA_HOME"):
        monkeypatch.delenv(var, raising=False)
    version = CommandResult(stdout="evaleds 1.0.0\n", stderr="", returncode=0)
    with patch("edsctl.core.orchestrator.run_command", return_value=version):
        yield


class TestInstallCommand:
    """Tests for edsctl install."""

    def test_install_default_location(self, home: Path) -> None:
        """Install places the binary in ~/.local/bin and writes default config."""
        with (
            patch("edsctl.cli.commands.install.ReleaseDownloader", WritingProvider),
            patch("edsctl.cli.commands.install.SourceBuilder", BrokenBuild),
        ):
            result = runner.invoke(app, ["install"])

        assert result.exit_code == 0
        assert "installed successfully" in result.output
        assert (home / ".local" / "bin" / "evaleds").exists()
        assert (home / ".config" / "evaleds" / "config.toml").exists()
        assert "To add" in result.output

    def test_install_dir_flag(self, tmp_path: Path) -> None:
        """--install-dir overrides the default location."""
        target = tmp_path / "custom"
        with (
            patch("edsctl.cli.commands.install.ReleaseDownloader", WritingProvider),
            patch("edsctl.cli.commands.install.SourceBuilder", BrokenBuild),
        ):
            result = runner.invoke(app, ["install", "--install-dir", str(target)])

        assert result.exit_code == 0
        assert (target / "evaleds").exists()

    def test_install_dir_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """INSTALL_DIR overrides the default location."""
        target = tmp_path / "from-env"
        monkeypatch.setenv("INSTALL_DIR", str(target))
        with (
            patch("edsctl.cli.commands.install.ReleaseDownloader", WritingProvider),
            patch("edsctl.cli.commands.install.SourceBuilder", BrokenBuild),
        ):
            result = runner.invoke(app, ["install"])

        assert result.exit_code == 0
        assert (target / "evaleds").exists()

    def test_falls_back_to_source_build(self, home: Path) -> None:
        """A failed download falls back to the build."""
        with (
            patch("edsctl.cli.commands.install.ReleaseDownloader", UnreachableRelease),
            patch("edsctl.cli.commands.install.SourceBuilder", WritingProvider),
        ):
            result = runner.invoke(app, ["install"])

        assert result.exit_code == 0
        assert "Building from source" in result.output
        assert (home / ".local" / "bin" / "evaleds").exists()

    def test_build_failure_exits_1(self) -> None:
        """An unrecoverable build failure exits with status 1."""
        with (
            patch("edsctl.cli.commands.install.ReleaseDownloader", UnreachableRelease),
            patch("edsctl.cli.commands.install.SourceBuilder", BrokenBuild),
        ):
            result = runner.invoke(app, ["install"])

        assert result.exit_code == 1
        assert "Cargo (Rust) is required" in result.output

    def test_dry_run(self, home: Path) -> None:
        """--dry-run reports the plan and creates nothing."""
        with (
            patch("edsctl.cli.commands.install.ReleaseDownloader", WritingProvider),
            patch("edsctl.cli.commands.install.SourceBuilder", BrokenBuild),
        ):
            result = runner.invoke(app, ["install", "--dry-run"])

        assert result.exit_code == 0
        assert "DRY RUN MODE" in result.output
        assert list(home.iterdir()) == []

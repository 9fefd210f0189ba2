"""Source builder.

Clones the repository and builds the release binary with Cargo.
"""

import logging
import subprocess
import tempfile
from pathlib import Path

from edsctl import APP_NAME, REPO_URL
from edsctl.installers.base import BinaryProvider, BuildError
from edsctl.utils.formatting import print_status
from edsctl.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

_CLONE_TIMEOUT = 600.0
_BUILD_TIMEOUT = 3600.0


def _tail(text: str, lines: int = 20) -> str:
    return "\n".join(text.strip().splitlines()[-lines:])


class SourceBuilder(BinaryProvider):
    """Builds the executable from source with ``git`` and ``cargo``."""

    @property
    def description(self) -> str:
        return "source build"

    def check_prerequisites(self) -> None:
        """Check that git and cargo are installed.

        Raises:
            BuildError: If a required tool is missing.
        """
        if not command_exists("cargo"):
            raise BuildError(
                "Cargo (Rust) is required to build from source. "
                "Install Rust from: https://rustup.rs/"
            )
        if not command_exists("git"):
            raise BuildError("Git is required to clone the repository")

    def provide(self, install_dir: Path) -> Path:
        """Clone, build and install the executable.

        Raises:
            BuildError: If any step fails or the built binary is missing.
        """
        self.check_prerequisites()

        with tempfile.TemporaryDirectory(prefix=f"{APP_NAME}-build-") as tmp:
            checkout = Path(tmp) / APP_NAME

            print_status("Cloning repository...")
            self._run(
                ["git", "clone", "--depth", "1", f"{REPO_URL}.git", str(checkout)],
                step="clone",
                timeout=_CLONE_TIMEOUT,
            )

            print_status("Building release binary... (this may take a few minutes)")
            self._run(
                ["cargo", "build", "--release"],
                step="build",
                timeout=_BUILD_TIMEOUT,
                cwd=str(checkout),
            )

            built = checkout / "target" / "release" / self.executable_name
            if not built.is_file():
                raise BuildError("Build failed - binary not found")

            try:
                return self.install_executable(built, install_dir)
            except OSError as e:
                raise BuildError(f"Could not install built binary: {e}") from e

    def _run(self, args: list[str], *, step: str, timeout: float, cwd: str | None = None) -> None:
        try:
            result = run_command(args, timeout=timeout, cwd=cwd)
        except (FileNotFoundError, OSError, subprocess.TimeoutExpired) as e:
            raise BuildError(f"{step} failed: {e}") from e
        if not result.success:
            logger.debug("%s stderr:\n%s", step, result.stderr)
            raise BuildError(f"{step} failed:\n{_tail(result.stderr)}")

"""Prebuilt release downloader.

Looks up the latest GitHub release and installs the executable from the
platform's release archive.
"""

import logging
import platform
import tarfile
import tempfile
from collections.abc import Callable
from pathlib import Path, PurePosixPath

import httpx

from edsctl import APP_NAME, REPO_URL
from edsctl.installers.base import BinaryProvider, TransferError

logger = logging.getLogger(__name__)

LATEST_RELEASE_API = "https://api.github.com/repos/prequired/evaleds/releases/latest"

_SYSTEMS = {"linux": "linux", "darwin": "macos", "windows": "windows"}
_MACHINES = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "arm64": "aarch64",
    "aarch64": "aarch64",
    "armv7l": "armv7",
}


def detect_platform() -> str:
    """Return the release platform tag, e.g. ``linux-x86_64``."""
    system = _SYSTEMS.get(platform.system().lower(), "unknown")
    machine = _MACHINES.get(platform.machine().lower(), "unknown")
    return f"{system}-{machine}"


def release_url(version: str, platform_tag: str) -> str:
    """Build the download URL of a release archive."""
    return f"{REPO_URL}/releases/download/{version}/{APP_NAME}-{version}-{platform_tag}.tar.gz"


class ReleaseDownloader(BinaryProvider):
    """Installs the executable from a prebuilt release archive.

    Args:
        executable_name: File name of the executable inside the archive.
        client_factory: Factory for the HTTP client (swapped in tests).
        timeout: Timeout in seconds for each HTTP request.
    """

    def __init__(
        self,
        executable_name: str,
        *,
        client_factory: Callable[..., httpx.Client] = httpx.Client,
        timeout: float = 60.0,
    ) -> None:
        super().__init__(executable_name)
        self._client_factory = client_factory
        self._timeout = timeout

    @property
    def description(self) -> str:
        return "prebuilt release"

    def latest_version(self, client: httpx.Client) -> str:
        """Get the tag of the latest release.

        Raises:
            TransferError: If the tag cannot be determined.
        """
        try:
            response = client.get(LATEST_RELEASE_API, headers={"Accept": "application/json"})
            response.raise_for_status()
            tag = response.json().get("tag_name")
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            raise TransferError(f"Could not determine latest version: {e}") from e
        if not tag or not isinstance(tag, str):
            raise TransferError("Could not determine latest version: no tag_name in response")
        return tag

    def provide(self, install_dir: Path) -> Path:
        """Download, extract and install the executable.

        Raises:
            TransferError: If the download fails or the archive has no executable.
        """
        with self._client_factory(timeout=self._timeout, follow_redirects=True) as client:
            version = self.latest_version(client)
            url = release_url(version, detect_platform())
            logger.info("Downloading %s", url)

            with tempfile.TemporaryDirectory(prefix=f"{APP_NAME}-") as tmp:
                archive = Path(tmp) / f"{APP_NAME}.tar.gz"
                try:
                    with client.stream("GET", url) as response:
                        response.raise_for_status()
                        with open(archive, "wb") as f:
                            for chunk in response.iter_bytes():
                                f.write(chunk)
                except httpx.HTTPError as e:
                    raise TransferError(f"Binary download failed: {e}") from e
                except OSError as e:
                    raise TransferError(f"Could not save download: {e}") from e

                extracted = self._extract_executable(archive, Path(tmp))
                try:
                    return self.install_executable(extracted, install_dir)
                except OSError as e:
                    raise TransferError(f"Could not install downloaded binary: {e}") from e

    def _extract_executable(self, archive: Path, dest_dir: Path) -> Path:
        """Extract only the executable member from the archive.

        Raises:
            TransferError: If the archive is unreadable or has no executable.
        """
        try:
            with tarfile.open(archive, "r:gz") as tar:
                for member in tar.getmembers():
                    if member.isfile() and PurePosixPath(member.name).name == self.executable_name:
                        source = tar.extractfile(member)
                        if source is None:
                            break
                        target = dest_dir / self.executable_name
                        with source, open(target, "wb") as f:
                            f.write(source.read())
                        return target
        except (tarfile.TarError, OSError) as e:
            raise TransferError(f"Could not read release archive: {e}") from e
        raise TransferError("Binary not found in archive")

"""Binary providers for the install flow.

These are the thin collaborators that fetch or build the executable.
"""

from edsctl.installers.base import BinaryProvider, BuildError, InstallError, TransferError
from edsctl.installers.release import ReleaseDownloader
from edsctl.installers.source import SourceBuilder

__all__ = [
    "BinaryProvider",
    "BuildError",
    "InstallError",
    "ReleaseDownloader",
    "SourceBuilder",
    "TransferError",
]

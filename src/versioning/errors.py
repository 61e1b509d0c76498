"""Error taxonomy shared by the resolver, the SDK collaborators and the CLI.

Every error carries the exit code the CLI should terminate with and, for
resolution failures, an optional remedial command shown to the user.
"""

from typing import Optional

from constants import ExitCodes


class DverError(Exception):
    """Base class for all errors surfaced to the CLI."""

    exit_code = ExitCodes.IO_ERROR

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint


# ---------- validation / resolution (exit 1) ----------


class InvalidVersionFormat(DverError):
    """User supplied text that is not a version or version spec."""

    exit_code = ExitCodes.RESOLUTION_ERROR

    def __init__(self, text: str, reason: str):
        super().__init__(f"Invalid version '{text}': {reason}")
        self.text = text
        self.reason = reason


class ResolutionError(DverError):
    """A request could not be satisfied from the available versions."""

    exit_code = ExitCodes.RESOLUTION_ERROR


class NoSdkInstalled(ResolutionError):
    """No SDK is installed at all."""

    def __init__(self, message: str = "No .NET SDK is installed."):
        super().__init__(message, hint="run `dver install --lts`")


class PinUnsatisfied(ResolutionError):
    """A global.json pin exists but no installed SDK satisfies it."""

    def __init__(self, pin_text: str, source: Optional[str] = None):
        where = f" (from {source})" if source else ""
        super().__init__(
            f"No installed SDK satisfies pinned version '{pin_text}'{where}.",
            hint=f"run `dver install --version {pin_text}`",
        )
        self.pin_text = pin_text


class NoLtsAvailable(ResolutionError):
    """The release catalog lists no usable LTS channel."""

    def __init__(self, message: str = "No supported LTS release found in the release catalog."):
        super().__init__(message, hint="run `dver remote --lts` to inspect the catalog")


class NoMatchingRelease(ResolutionError):
    """The release catalog has no release matching a partial version."""

    def __init__(self, spec_text: str):
        super().__init__(
            f"No released SDK matches '{spec_text}'.",
            hint="run `dver remote` to list available versions",
        )
        self.spec_text = spec_text


# ---------- installer / I/O (exit 2) ----------


class InstallerError(DverError):
    """Failure reported by an SDK installer."""

    exit_code = ExitCodes.IO_ERROR


class DownloadFailed(InstallerError):
    """Downloading the installer or the SDK failed."""


class ChecksumMismatch(InstallerError):
    """A downloaded artifact did not match its published hash."""


class DiskFull(InstallerError):
    """The target volume ran out of space."""


class InUse(InstallerError):
    """The SDK directory could not be removed because it is in use."""


class NotFound(InstallerError):
    """The SDK to remove is not present in the install root."""


class CatalogUnavailable(DverError):
    """The release catalog could not be fetched or parsed."""


class PinWriteFailed(DverError):
    """global.json could not be written."""


class InstallRootUnreadable(DverError):
    """The SDK directory of the install root could not be listed."""

"""SDK installer contract and the dotnet-install script implementation.

The heavy lifting (resolving download URLs, fetching and unpacking the SDK
archive) is done by Microsoft's official ``dotnet-install`` script; this
module downloads the script, runs it against the install root and maps its
failures onto the installer error taxonomy.
"""
from __future__ import annotations

import abc
import errno
import logging
import os
import shutil
import stat
import subprocess
import sys
import tempfile
from typing import List, Optional

from constants import Constants
from common.http_client import download_file
from common.logging_utils import extra_context, is_debug_enabled, Timer
from sdk.repository import InstalledSdkRepository
from versioning.errors import (
    ChecksumMismatch,
    DiskFull,
    DownloadFailed,
    InstallerError,
    InUse,
    NotFound,
)
from versioning.models import SdkVersion

logger = logging.getLogger(__name__)

_IN_USE_ERRNOS = {errno.EBUSY, errno.ETXTBSY, errno.EACCES, errno.EPERM}
_OUTPUT_TAIL_LINES = 20


class SdkInstaller(abc.ABC):
    """Installs and removes SDK versions under an install root."""

    @abc.abstractmethod
    def install(self, version: SdkVersion) -> None:
        """Install ``version``.

        Raises:
            DownloadFailed, ChecksumMismatch, DiskFull
        """

    @abc.abstractmethod
    def uninstall(self, version: SdkVersion) -> None:
        """Remove ``version``.

        Raises:
            InUse, NotFound
        """


def classify_script_failure(output: str, returncode: int) -> InstallerError:
    """Map dotnet-install output onto an installer error."""
    lowered = output.lower()
    tail = "\n".join(output.strip().splitlines()[-_OUTPUT_TAIL_LINES:])
    if "no space left" in lowered or "not enough space" in lowered or "disk full" in lowered:
        return DiskFull(f"dotnet-install ran out of disk space:\n{tail}")
    if ("checksum" in lowered or "hash" in lowered) and (
        "mismatch" in lowered or "does not match" in lowered or "doesn't match" in lowered
    ):
        return ChecksumMismatch(f"dotnet-install rejected the downloaded archive:\n{tail}")
    return DownloadFailed(f"dotnet-install failed with exit code {returncode}:\n{tail}")


class ScriptSdkInstaller(SdkInstaller):
    """Installer driving ``dotnet-install.sh`` / ``dotnet-install.ps1``."""

    def __init__(
        self,
        repository: InstalledSdkRepository,
        script_url: Optional[str] = None,
        windows: Optional[bool] = None,
    ):
        self.repository = repository
        self.windows = sys.platform.startswith("win") if windows is None else windows
        if script_url:
            self.script_url = script_url
        elif self.windows:
            self.script_url = Constants.INSTALL_SCRIPT_URL_PS1
        else:
            self.script_url = Constants.INSTALL_SCRIPT_URL_SH

    def build_command(self, script_path: str, version: SdkVersion) -> List[str]:
        install_dir = str(self.repository.install_root)
        if self.windows:
            return [
                "powershell", "-NoLogo", "-NoProfile", "-NonInteractive",
                "-ExecutionPolicy", "Bypass",
                "-File", script_path,
                "-Version", str(version),
                "-InstallDir", install_dir,
                "-NoPath",
            ]
        return [
            "bash", script_path,
            "--version", str(version),
            "--install-dir", install_dir,
            "--no-path",
        ]

    def _download_script(self) -> str:
        suffix = ".ps1" if self.windows else ".sh"
        fd, script_path = tempfile.mkstemp(prefix="dotnet-install_", suffix=suffix)
        os.close(fd)
        try:
            download_file(self.script_url, script_path)
            if not self.windows:
                mode = os.stat(script_path).st_mode
                os.chmod(script_path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        except BaseException:
            os.remove(script_path)
            raise
        return script_path

    def install(self, version: SdkVersion) -> None:
        try:
            self.repository.install_root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            if exc.errno == errno.ENOSPC:
                raise DiskFull(f"No space left creating {self.repository.install_root}") from exc
            raise DownloadFailed(f"Cannot create {self.repository.install_root}: {exc}") from exc

        script_path = self._download_script()
        command = self.build_command(script_path, version)
        logger.info("Installing .NET SDK %s into %s", version, self.repository.install_root)
        try:
            with Timer() as t:
                result = subprocess.run(
                    command,
                    capture_output=True,
                    text=True,
                    timeout=Constants.INSTALL_TIMEOUT,
                    check=False,
                )
        except subprocess.TimeoutExpired as exc:
            raise DownloadFailed(
                f"dotnet-install did not finish within {Constants.INSTALL_TIMEOUT} seconds"
            ) from exc
        except OSError as exc:
            raise DownloadFailed(f"Cannot run {command[0]}: {exc}") from exc
        finally:
            try:
                os.remove(script_path)
            except OSError:
                logger.debug("Could not remove temporary script %s", script_path)

        if is_debug_enabled(logger):
            logger.debug(
                "dotnet-install finished",
                extra=extra_context(
                    event="subprocess",
                    component="installer",
                    action="install",
                    outcome="success" if result.returncode == 0 else "failure",
                    target=str(version),
                    duration_ms=t.duration_ms(),
                    returncode=result.returncode,
                ),
            )

        if result.returncode != 0:
            raise classify_script_failure(
                (result.stdout or "") + "\n" + (result.stderr or ""), result.returncode
            )
        if not self.repository.path_for(version).is_dir():
            raise DownloadFailed(
                f"dotnet-install reported success but {self.repository.path_for(version)} is missing"
            )

    def uninstall(self, version: SdkVersion) -> None:
        path = self.repository.path_for(version)
        sdk_root = self.repository.sdk_root.resolve()
        if sdk_root not in path.resolve().parents:
            raise NotFound(f"{path} is outside the managed SDK directory {sdk_root}")
        if not path.is_dir():
            raise NotFound(f"SDK {version} is not installed in {self.repository.sdk_root}")

        try:
            shutil.rmtree(path)
        except OSError as exc:
            if isinstance(exc, PermissionError) or exc.errno in _IN_USE_ERRNOS:
                raise InUse(f"SDK {version} is in use and could not be removed: {exc}") from exc
            raise InstallerError(f"Failed to remove SDK {version}: {exc}") from exc
        logger.debug("Removed %s", path)

"""Environment checks reported by ``dver doctor``.

Checks only report problems; nothing here edits PATH or shell profiles.
"""
from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Mapping, Optional

from constants import Constants
from sdk.pin_store import PinStore
from sdk.repository import InstalledSdkRepository
from versioning.errors import ResolutionError
from versioning.resolver import resolve_current

logger = logging.getLogger(__name__)


class CheckStatus(Enum):
    OK = "ok"
    WARN = "warn"
    FAIL = "fail"


@dataclass
class DoctorCheck:
    name: str
    status: CheckStatus
    message: str
    hint: Optional[str] = None


@dataclass
class DoctorReport:
    checks: List[DoctorCheck] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return any(c.status == CheckStatus.FAIL for c in self.checks)


def _same_path(a: str, b: Path) -> bool:
    try:
        return os.path.normcase(os.path.realpath(a)) == os.path.normcase(os.path.realpath(str(b)))
    except (OSError, ValueError):
        return False


def path_contains(path_value: str, directory: Path) -> bool:
    """True when ``directory`` is one of the entries of a PATH string."""
    return any(entry and _same_path(entry, directory) for entry in path_value.split(os.pathsep))


def dotnet_host_version(dotnet_path: str) -> Optional[str]:
    """Version the dotnet host picks for the current directory, or None."""
    try:
        result = subprocess.run(
            [dotnet_path, "--version"],
            capture_output=True,
            text=True,
            timeout=Constants.REQUEST_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        logger.debug("Running %s --version failed: %s", dotnet_path, exc)
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def run_doctor_checks(
    repository: InstalledSdkRepository,
    pin_store: PinStore,
    directory,
    env: Optional[Mapping[str, str]] = None,
    host_version: Callable[[str], Optional[str]] = dotnet_host_version,
) -> DoctorReport:
    """Run every check and collect the results; never raises for a failed check."""
    env = os.environ if env is None else env
    report = DoctorReport()
    install_root = repository.install_root
    path_value = env.get("PATH", "")

    dotnet_path = shutil.which("dotnet", path=path_value) if path_value else None
    if dotnet_path:
        report.checks.append(DoctorCheck(
            "dotnet_on_path", CheckStatus.OK, f"dotnet command is available at {dotnet_path}."))
    else:
        report.checks.append(DoctorCheck(
            "dotnet_on_path", CheckStatus.FAIL, "dotnet command not found in PATH.",
            hint="install an SDK with `dver install --lts` and add the install directory to PATH"))

    if path_contains(path_value, install_root):
        report.checks.append(DoctorCheck(
            "install_dir_on_path", CheckStatus.OK, f"{install_root} is in your PATH."))
    else:
        report.checks.append(DoctorCheck(
            "install_dir_on_path", CheckStatus.WARN, f"{install_root} might not be in your PATH.",
            hint=f"add {install_root} to PATH in your shell profile"))

    dotnet_root = env.get(Constants.ENV_DOTNET_ROOT)
    if not dotnet_root:
        report.checks.append(DoctorCheck(
            "dotnet_root", CheckStatus.WARN, f"{Constants.ENV_DOTNET_ROOT} is not set.",
            hint=f"export {Constants.ENV_DOTNET_ROOT}={install_root}"))
    elif _same_path(dotnet_root, install_root):
        report.checks.append(DoctorCheck(
            "dotnet_root", CheckStatus.OK, f"{Constants.ENV_DOTNET_ROOT} points to {install_root}."))
    else:
        report.checks.append(DoctorCheck(
            "dotnet_root", CheckStatus.WARN,
            f"{Constants.ENV_DOTNET_ROOT} is {dotnet_root}, not the managed root {install_root}."))

    installed = repository.scan()
    if installed:
        report.checks.append(DoctorCheck(
            "sdks_installed", CheckStatus.OK,
            f"{len(installed)} SDK(s) installed in {repository.sdk_root}."))
    else:
        report.checks.append(DoctorCheck(
            "sdks_installed", CheckStatus.FAIL, f"No SDKs found in {repository.sdk_root}.",
            hint="run `dver install --lts`"))

    pin = pin_store.read(directory)
    resolved = None
    if installed:
        try:
            resolved = resolve_current(installed, pin)
        except ResolutionError as exc:
            report.checks.append(DoctorCheck("pin", CheckStatus.FAIL, str(exc), hint=exc.hint))
        else:
            if pin is not None:
                report.checks.append(DoctorCheck(
                    "pin", CheckStatus.OK, f"Pin '{pin}' from {pin.source} resolves to {resolved}."))
            else:
                report.checks.append(DoctorCheck(
                    "pin", CheckStatus.OK, f"No {Constants.GLOBAL_JSON_FILE} pin; using {resolved}."))

    if dotnet_path and resolved is not None:
        reported = host_version(dotnet_path)
        if reported is None:
            report.checks.append(DoctorCheck(
                "host_version", CheckStatus.WARN, "`dotnet --version` did not report a version."))
        elif reported == str(resolved):
            report.checks.append(DoctorCheck(
                "host_version", CheckStatus.OK, f"`dotnet --version` reports {reported}."))
        else:
            report.checks.append(DoctorCheck(
                "host_version", CheckStatus.WARN,
                f"`dotnet --version` reports {reported} but dver resolves {resolved}; "
                "the dotnet on PATH may belong to another installation."))

    return report

"""Command handlers for the dver CLI.

Each handler takes the parsed arguments and a ``CommandContext`` holding the
collaborators, takes fresh snapshots, asks the resolver for a decision and
acts on it. Handlers return an exit code and let ``DverError`` propagate to
``dver.main``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from cli_config import Settings
from constants import Constants, ExitCodes
from sdk.doctor import CheckStatus, run_doctor_checks
from sdk.installer import ScriptSdkInstaller, SdkInstaller
from sdk.pin_store import PinStore
from sdk.releases import ReleaseCatalog
from sdk.repository import InstalledSdkRepository
from versioning.errors import CatalogUnavailable, InstallerError, InvalidVersionFormat, ResolutionError
from versioning.models import InstallPlan, SpecKind, VersionSpec
from versioning.parser import parse_pin_spec, parse_spec
from versioning.resolver import (
    match_for_uninstall,
    plan_install,
    resolve_current,
    resolve_from_catalog,
    resolve_lts,
    sort_descending,
)

logger = logging.getLogger(__name__)

_STATUS_MARKERS = {
    CheckStatus.OK: "✅",
    CheckStatus.WARN: "⚠️",
    CheckStatus.FAIL: "❌",
}


@dataclass
class CommandContext:
    """Collaborators shared by every command of one invocation."""
    settings: Settings
    repository: InstalledSdkRepository
    pin_store: PinStore
    catalog: ReleaseCatalog
    installer: SdkInstaller


def build_context(settings: Settings) -> CommandContext:
    repository = InstalledSdkRepository(settings.install_root)
    return CommandContext(
        settings=settings,
        repository=repository,
        pin_store=PinStore(),
        catalog=ReleaseCatalog(settings.releases_index_url),
        installer=ScriptSdkInstaller(repository, script_url=settings.install_script_url),
    )


def _directory(args) -> str:
    return getattr(args, "DIRECTORY", None) or os.getcwd()


def run_current(args, ctx: CommandContext) -> int:
    """Print the SDK in effect for the directory."""
    directory = _directory(args)
    installed = ctx.repository.scan()
    pin = ctx.pin_store.read(directory)
    version = resolve_current(installed, pin)
    if pin is not None:
        logger.info("Pinned to '%s' by %s", pin, pin.source)
    else:
        logger.info("No %s pin; using the highest installed SDK", Constants.GLOBAL_JSON_FILE)
    print(version)
    return ExitCodes.SUCCESS.value


def run_list(args, ctx: CommandContext) -> int:
    """Print installed SDKs, highest first, marking the current one."""
    installed = ctx.repository.scan()
    if not installed:
        logger.warning("No SDKs installed in %s (run `dver install --lts`)", ctx.repository.sdk_root)
        return ExitCodes.SUCCESS.value

    try:
        current = resolve_current(installed, ctx.pin_store.read(_directory(args)))
    except ResolutionError as exc:
        logger.warning("%s", exc)
        current = None

    for version in sort_descending(installed):
        marker = "*" if version == current else " "
        print(f"{marker} {version}")
    return ExitCodes.SUCCESS.value


def run_use(args, ctx: CommandContext) -> int:
    """Write a global.json pin for the directory."""
    spec = parse_pin_spec(args.VERSION)
    path = ctx.pin_store.write(_directory(args), spec)
    print(f"SDK version set to {spec} in {path}")

    installed = ctx.repository.scan()
    if not any(spec.matches(v) for v in installed):
        logger.warning(
            "No installed SDK satisfies '%s' yet (run `dver install --version %s`)", spec, spec
        )
    return ExitCodes.SUCCESS.value


def _install_target(args, ctx: CommandContext, installed):
    if getattr(args, "LTS", False):
        return resolve_lts(installed, ctx.catalog.channels())
    spec = parse_spec(args.VERSION)
    if spec.kind not in (SpecKind.EXACT, SpecKind.MAJOR, SpecKind.MAJOR_MINOR):
        raise InvalidVersionFormat(args.VERSION, "use --lts or a version number")
    return resolve_from_catalog(spec, ctx.catalog.channels())


def run_install(args, ctx: CommandContext) -> int:
    """Install the requested SDK unless it is already present."""
    installed = ctx.repository.scan()
    version = _install_target(args, ctx, installed)
    if plan_install(installed, version) == InstallPlan.ALREADY_INSTALLED:
        print(f"SDK {version} is already installed.")
        return ExitCodes.SUCCESS.value

    ctx.installer.install(version)
    print(f"Installed SDK {version}.")
    return ExitCodes.SUCCESS.value


def run_uninstall(args, ctx: CommandContext) -> int:
    """Remove every installed SDK matching the request."""
    if getattr(args, "ALL", False):
        spec = VersionSpec.all()
    else:
        spec = parse_spec(args.VERSION)
        if spec.kind in (SpecKind.LTS, SpecKind.ALL):
            raise InvalidVersionFormat(args.VERSION, "use --all or a version number")

    targets = match_for_uninstall(ctx.repository.scan(), spec)
    if not targets:
        print("No matching SDKs found.")
        return ExitCodes.SUCCESS.value

    failed = 0
    for version in sort_descending(targets):
        try:
            ctx.installer.uninstall(version)
        except InstallerError as exc:
            logger.error("%s", exc)
            failed += 1
            continue
        print(f"Removed {version}")
    return ExitCodes.IO_ERROR.value if failed else ExitCodes.SUCCESS.value


def run_doctor(args, ctx: CommandContext) -> int:
    """Print environment checks; exit non-zero when any check fails."""
    print("Checking for common issues...")
    report = run_doctor_checks(ctx.repository, ctx.pin_store, _directory(args))
    for check in report.checks:
        print(f"{_STATUS_MARKERS[check.status]} {check.message}")
        if check.hint and check.status != CheckStatus.OK:
            print(f"   hint: {check.hint}")
    return ExitCodes.RESOLUTION_ERROR.value if report.has_failures else ExitCodes.SUCCESS.value


def run_remote(args, ctx: CommandContext) -> int:
    """List SDK versions available per channel."""
    channels = ctx.catalog.lts_channels() if getattr(args, "LTS", False) else ctx.catalog.channels()
    print("Remote .NET SDK versions available:")
    for channel in channels:
        print(f"Channel: {channel.channel_version} "
              f"({channel.release_type or 'unknown'}, {channel.support_phase or 'unknown'})")
        try:
            versions = ctx.catalog.channel_sdk_versions(channel)
        except CatalogUnavailable as exc:
            logger.error("%s", exc)
            continue
        for version in versions:
            print(f"  {version}")
    return ExitCodes.SUCCESS.value


COMMANDS = {
    "current": run_current,
    "list": run_list,
    "use": run_use,
    "install": run_install,
    "uninstall": run_uninstall,
    "doctor": run_doctor,
    "remote": run_remote,
}

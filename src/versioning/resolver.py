"""Version selection and pinning rules.

Pure functions over pre-fetched snapshots: the caller scans the install root,
reads the pin and fetches the release catalog, then asks the resolver for a
decision. Nothing here touches the file system or the network.
"""

import logging
from typing import FrozenSet, Iterable, List, Optional

from common.logging_utils import extra_context, is_debug_enabled
from constants import SupportPhases
from .errors import NoLtsAvailable, NoMatchingRelease, NoSdkInstalled, PinUnsatisfied
from .models import (
    InstalledSdkSet,
    InstallPlan,
    Ordering,
    Pin,
    ReleaseChannel,
    SdkVersion,
    SpecKind,
    VersionSpec,
)

logger = logging.getLogger(__name__)

_UNSUPPORTED_PHASES = (SupportPhases.PREVIEW.value, SupportPhases.EOL.value)


def compare(a: SdkVersion, b: SdkVersion) -> Ordering:
    """Total order: major, minor, patch, then pre-release precedence."""
    if a < b:
        return Ordering.LESS
    if b < a:
        return Ordering.GREATER
    return Ordering.EQUAL


def sort_descending(versions: Iterable[SdkVersion]) -> List[SdkVersion]:
    """Highest first, as shown by ``dver list``."""
    return sorted(versions, reverse=True)


def highest(versions: Iterable[SdkVersion]) -> Optional[SdkVersion]:
    """Maximum by ``compare``; a release beats a pre-release of the same triple."""
    return max(versions, default=None)


def resolve_current(installed: InstalledSdkSet, pin: Optional[Pin]) -> SdkVersion:
    """Pick the SDK that is in effect for a directory.

    Raises:
        NoSdkInstalled: when nothing is installed.
        PinUnsatisfied: when a pin exists and no installed SDK satisfies it.
    """
    if not installed:
        raise NoSdkInstalled()

    if pin is None:
        chosen = installed.latest()
        reason = "highest_installed"
    else:
        chosen = highest(v for v in installed if pin.spec.matches(v))
        if chosen is None:
            raise PinUnsatisfied(str(pin.spec), str(pin.source) if pin.source else None)
        reason = "pinned"

    if is_debug_enabled(logger):
        logger.debug(
            "Resolved current SDK",
            extra=extra_context(
                event="decision",
                component="resolver",
                action="resolve_current",
                outcome=reason,
                target=str(chosen),
                candidate_count=len(installed),
            ),
        )
    return chosen


def _is_supported_lts(channel: ReleaseChannel) -> bool:
    if not channel.is_lts or channel.latest_sdk is None:
        return False
    if (channel.support_phase or "").lower() in _UNSUPPORTED_PHASES:
        return False
    return not channel.latest_sdk.is_prerelease


def resolve_lts(installed: InstalledSdkSet, catalog: Iterable[ReleaseChannel]) -> SdkVersion:
    """Pick the SDK ``install --lts`` should request.

    ``catalog`` is consumed lazily and is expected highest channel first; the
    first supported LTS channel wins. ``installed`` is only used for logging;
    idempotence is decided by ``plan_install``.

    Raises:
        NoLtsAvailable: when no supported LTS channel exists.
    """
    for channel in catalog:
        if not _is_supported_lts(channel):
            continue
        chosen = channel.latest_sdk
        if is_debug_enabled(logger):
            logger.debug(
                "Resolved LTS SDK",
                extra=extra_context(
                    event="decision",
                    component="resolver",
                    action="resolve_lts",
                    target=str(chosen),
                    channel=channel.channel_version,
                    installed=chosen in installed,
                ),
            )
        return chosen
    raise NoLtsAvailable()


def resolve_from_catalog(spec: VersionSpec, catalog: Iterable[ReleaseChannel]) -> SdkVersion:
    """Pick the newest released SDK matching a partial spec (``8`` or ``8.0``).

    Exact specs are returned unchanged; the installer is the authority on
    whether that exact version exists.

    Raises:
        NoMatchingRelease: when no channel's latest SDK satisfies ``spec``.
    """
    if spec.kind == SpecKind.EXACT:
        return spec.version
    if spec.kind not in (SpecKind.MAJOR, SpecKind.MAJOR_MINOR):
        raise ValueError(f"Cannot resolve '{spec}' against channels")
    candidates = [
        channel.latest_sdk
        for channel in catalog
        if channel.latest_sdk is not None and spec.matches(channel.latest_sdk)
    ]
    releases = [v for v in candidates if not v.is_prerelease]
    chosen = highest(releases) or highest(candidates)
    if chosen is None:
        raise NoMatchingRelease(str(spec))
    return chosen


def plan_install(installed: InstalledSdkSet, version: SdkVersion) -> InstallPlan:
    """Ensure semantics: installing an already present SDK is a no-op."""
    if version in installed:
        return InstallPlan.ALREADY_INSTALLED
    return InstallPlan.INSTALL


def match_for_uninstall(installed: InstalledSdkSet, spec: VersionSpec) -> FrozenSet[SdkVersion]:
    """Installed SDKs selected for removal; an empty result means nothing to do."""
    if spec.kind == SpecKind.ALL:
        return frozenset(installed)
    if spec.kind == SpecKind.LTS:
        return frozenset()
    return frozenset(v for v in installed if spec.matches(v))

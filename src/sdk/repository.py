"""Installed SDK discovery: enumerate ``<install_root>/sdk/<version>``."""
from __future__ import annotations

import logging
import os
from pathlib import Path

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from versioning.errors import InstallRootUnreadable, InvalidVersionFormat
from versioning.models import InstalledSdkSet, SdkVersion
from versioning.parser import parse_version

logger = logging.getLogger(__name__)


class InstalledSdkRepository:
    """Reads the SDK directory of one install root.

    Each ``scan()`` re-reads the directory; a scan racing a concurrent
    install may observe a partially created SDK directory.
    """

    def __init__(self, install_root):
        self.install_root = Path(install_root)

    @property
    def sdk_root(self) -> Path:
        return self.install_root / Constants.SDK_SUBDIR

    def path_for(self, version: SdkVersion) -> Path:
        return self.sdk_root / str(version)

    def scan(self) -> InstalledSdkSet:
        """Return the SDKs installed under the root; empty when the root is missing."""
        try:
            entries = list(os.scandir(self.sdk_root))
        except FileNotFoundError:
            logger.debug("SDK directory %s does not exist", self.sdk_root)
            return InstalledSdkSet()
        except NotADirectoryError:
            logger.warning("SDK path %s is not a directory", self.sdk_root)
            return InstalledSdkSet()
        except OSError as exc:
            raise InstallRootUnreadable(f"Cannot read SDK directory {self.sdk_root}: {exc}") from exc

        versions = []
        for entry in entries:
            if not entry.is_dir():
                continue
            try:
                version = parse_version(entry.name)
            except InvalidVersionFormat:
                version = None
            # path_for must map back to this directory, so "9" is not 9.0.0
            if version is not None and str(version) == entry.name:
                versions.append(version)
            elif is_debug_enabled(logger):
                logger.debug(
                    "Skipping non-version directory",
                    extra=extra_context(
                        event="skip",
                        component="repository",
                        action="scan",
                        target=entry.name,
                    ),
                )

        installed = InstalledSdkSet(versions)
        if is_debug_enabled(logger):
            logger.debug(
                "Scanned SDK directory",
                extra=extra_context(
                    event="scan",
                    component="repository",
                    action="scan",
                    target=str(self.sdk_root),
                    count=len(installed),
                ),
            )
        return installed

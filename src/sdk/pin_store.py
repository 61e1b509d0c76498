"""global.json pin storage.

Reading walks upward from a directory to the nearest ``global.json``, the
same lookup the dotnet host performs. A malformed file is treated as "no pin"
so ``current`` and ``list`` keep working.
"""
from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any, Optional

from constants import Constants
from versioning.errors import InvalidVersionFormat, PinWriteFailed
from versioning.models import Pin, VersionSpec
from versioning.parser import parse_pin_spec

logger = logging.getLogger(__name__)


def find_global_json(directory) -> Optional[Path]:
    """Return the nearest global.json at or above ``directory``."""
    start = Path(directory).resolve()
    for candidate_dir in (start, *start.parents):
        candidate = candidate_dir / Constants.GLOBAL_JSON_FILE
        if candidate.is_file():
            return candidate
    return None


def _extract_version(data: Any) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    sdk = data.get("sdk")
    if not isinstance(sdk, dict):
        return None
    version = sdk.get("version")
    return version if isinstance(version, str) else None


class PinStore:
    """Reads and writes ``{"sdk": {"version": ...}}`` pins."""

    def read(self, directory) -> Optional[Pin]:
        path = find_global_json(directory)
        if path is None:
            logger.debug("No %s found above %s", Constants.GLOBAL_JSON_FILE, directory)
            return None

        try:
            with open(path, "r", encoding="utf-8-sig") as fh:
                data = json.load(fh)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable %s: %s", path, exc)
            return None

        text = _extract_version(data)
        if text is None:
            logger.warning("Ignoring %s: no sdk.version entry", path)
            return None

        try:
            spec = parse_pin_spec(text)
        except InvalidVersionFormat as exc:
            logger.warning("Ignoring %s: %s", path, exc)
            return None
        return Pin(spec=spec, source=path)

    def write(self, directory, spec: VersionSpec) -> Path:
        """Overwrite ``directory/global.json`` with ``spec``, keeping a backup.

        Raises:
            ValueError: when ``spec`` is not a pinnable kind.
            PinWriteFailed: when the file cannot be written.
        """
        if not spec.is_pinnable:
            raise ValueError(f"'{spec}' cannot be written as a pin")

        path = Path(directory) / Constants.GLOBAL_JSON_FILE
        payload = {"sdk": {"version": str(spec)}}
        try:
            if path.exists():
                backup = path.with_name(path.name + Constants.GLOBAL_JSON_BACKUP_SUFFIX)
                shutil.copyfile(path, backup)
                logger.debug("Backed up %s to %s", path, backup)
            with open(path, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2)
                fh.write("\n")
        except OSError as exc:
            raise PinWriteFailed(f"Failed to write {path}: {exc}") from exc
        return path

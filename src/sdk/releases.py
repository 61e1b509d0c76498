"""Release catalog backed by the public .NET release metadata."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional

from constants import Constants
from common.http_client import get_json
from common.logging_utils import safe_url
from versioning.errors import CatalogUnavailable, InvalidVersionFormat
from versioning.models import ReleaseChannel, SdkVersion
from versioning.parser import parse_version
from versioning.resolver import sort_descending

logger = logging.getLogger(__name__)

HEADERS_JSON = {"Accept": "application/json"}


def _optional_version(text: Any) -> Optional[SdkVersion]:
    if not isinstance(text, str) or not text:
        return None
    try:
        return parse_version(text)
    except InvalidVersionFormat:
        logger.debug("Ignoring unparseable SDK version %r in release metadata", text)
        return None


def _to_channel(entry: Dict[str, Any]) -> Optional[ReleaseChannel]:
    channel_version = entry.get("channel-version")
    if not channel_version:
        return None
    return ReleaseChannel(
        channel_version=str(channel_version),
        latest_release=entry.get("latest-release"),
        latest_sdk=_optional_version(entry.get("latest-sdk")),
        release_type=entry.get("release-type"),
        support_phase=entry.get("support-phase"),
        releases_json=entry.get("releases.json"),
    )


class ReleaseCatalog:
    """Lazy view over ``releases-index.json``.

    The index lists channels newest first, which is the order ``channels()``
    yields them in.
    """

    def __init__(self, index_url: str = Constants.RELEASES_INDEX_URL):
        self.index_url = index_url
        self._index: Optional[List[Dict[str, Any]]] = None

    def _load_index(self) -> List[Dict[str, Any]]:
        if self._index is None:
            status_code, _, data = get_json(self.index_url, headers=HEADERS_JSON)
            if status_code != 200 or not isinstance(data, dict):
                raise CatalogUnavailable(
                    f"Failed to fetch release index from {safe_url(self.index_url)}"
                    + (f": HTTP {status_code}" if status_code else "")
                )
            entries = data.get("releases-index")
            if not isinstance(entries, list):
                raise CatalogUnavailable("Release index has no 'releases-index' list")
            self._index = [e for e in entries if isinstance(e, dict)]
        return self._index

    def channels(self) -> Iterator[ReleaseChannel]:
        for entry in self._load_index():
            channel = _to_channel(entry)
            if channel is not None:
                yield channel

    def lts_channels(self) -> Iterator[ReleaseChannel]:
        return (channel for channel in self.channels() if channel.is_lts)

    def channel_sdk_versions(self, channel: ReleaseChannel) -> List[SdkVersion]:
        """Every SDK released on ``channel``, highest first."""
        if not channel.releases_json:
            return []
        status_code, _, data = get_json(channel.releases_json, headers=HEADERS_JSON)
        if status_code != 200 or not isinstance(data, dict):
            raise CatalogUnavailable(
                f"Failed to fetch releases for channel {channel.channel_version}"
                + (f": HTTP {status_code}" if status_code else "")
            )

        found = set()
        for release in data.get("releases") or []:
            if not isinstance(release, dict):
                continue
            sdk_entries = [release.get("sdk")] + list(release.get("sdks") or [])
            for sdk in sdk_entries:
                if isinstance(sdk, dict):
                    version = _optional_version(sdk.get("version"))
                    if version is not None:
                        found.add(version)
        return sort_descending(found)

"""Data models for SDK versions, version specs and pins."""

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple

import semantic_version

from constants import ReleaseTypes


class Ordering(Enum):
    """Outcome of comparing two SDK versions."""
    LESS = -1
    EQUAL = 0
    GREATER = 1


class SpecKind(Enum):
    """Kinds of version selectors accepted on the command line or in a pin."""
    EXACT = "exact"
    MAJOR = "major"
    MAJOR_MINOR = "major_minor"
    LTS = "lts"
    ALL = "all"


class InstallPlan(Enum):
    """Decision taken before calling the installer."""
    INSTALL = "install"
    ALREADY_INSTALLED = "already_installed"


@total_ordering
@dataclass(frozen=True)
class SdkVersion:
    """Immutable SDK version: numeric triple plus optional pre-release label.

    Ordering follows semantic-version precedence, so ``8.0.100-preview.1``
    sorts below ``8.0.100-rc.1`` which sorts below ``8.0.100``.
    """
    major: int
    minor: int
    patch: int
    label: Optional[str] = None

    def __post_init__(self):
        # Validates the label identifiers eagerly so ordering never fails later.
        self.semver()

    @property
    def prerelease(self) -> Tuple[str, ...]:
        return tuple(self.label.split(".")) if self.label else ()

    @property
    def is_prerelease(self) -> bool:
        return self.label is not None

    def semver(self) -> semantic_version.Version:
        return semantic_version.Version(
            major=self.major,
            minor=self.minor,
            patch=self.patch,
            prerelease=self.prerelease,
            build=(),
        )

    def __lt__(self, other):
        if not isinstance(other, SdkVersion):
            return NotImplemented
        return self.semver() < other.semver()

    def __str__(self) -> str:
        core = f"{self.major}.{self.minor}.{self.patch}"
        return f"{core}-{self.label}" if self.label else core


@dataclass(frozen=True)
class VersionSpec:
    """Closed tagged variant describing which versions a request selects.

    Build instances through the ``exact``/``major_only``/``major_minor``/
    ``lts``/``all`` constructors so each kind carries exactly its fields.
    """
    kind: SpecKind
    version: Optional[SdkVersion] = None
    major: Optional[int] = None
    minor: Optional[int] = None

    @classmethod
    def exact(cls, version: SdkVersion) -> "VersionSpec":
        return cls(SpecKind.EXACT, version=version, major=version.major, minor=version.minor)

    @classmethod
    def major_only(cls, major: int) -> "VersionSpec":
        return cls(SpecKind.MAJOR, major=major)

    @classmethod
    def major_minor(cls, major: int, minor: int) -> "VersionSpec":
        return cls(SpecKind.MAJOR_MINOR, major=major, minor=minor)

    @classmethod
    def lts(cls) -> "VersionSpec":
        return cls(SpecKind.LTS)

    @classmethod
    def all(cls) -> "VersionSpec":
        return cls(SpecKind.ALL)

    @property
    def is_pinnable(self) -> bool:
        """True for kinds that may be written to global.json."""
        return self.kind in (SpecKind.EXACT, SpecKind.MAJOR, SpecKind.MAJOR_MINOR)

    def matches(self, version: SdkVersion) -> bool:
        """Return True when ``version`` is selected by this spec.

        Raises:
            ValueError: for LTS, which is only meaningful against a release catalog.
        """
        if self.kind == SpecKind.EXACT:
            return version == self.version
        if self.kind == SpecKind.MAJOR:
            return version.major == self.major
        if self.kind == SpecKind.MAJOR_MINOR:
            return version.major == self.major and version.minor == self.minor
        if self.kind == SpecKind.ALL:
            return True
        if self.kind == SpecKind.LTS:
            raise ValueError("An LTS spec must be resolved against the release catalog")
        raise ValueError(f"Unhandled spec kind: {self.kind}")

    def __str__(self) -> str:
        if self.kind == SpecKind.EXACT:
            return str(self.version)
        if self.kind == SpecKind.MAJOR:
            return str(self.major)
        if self.kind == SpecKind.MAJOR_MINOR:
            return f"{self.major}.{self.minor}"
        if self.kind == SpecKind.LTS:
            return "lts"
        if self.kind == SpecKind.ALL:
            return "all"
        raise ValueError(f"Unhandled spec kind: {self.kind}")


@dataclass(frozen=True)
class Pin:
    """A version constraint recorded in a global.json file."""
    spec: VersionSpec
    source: Optional[Path] = None

    def __str__(self) -> str:
        return str(self.spec)


class InstalledSdkSet:
    """Ascending, de-duplicated snapshot of installed SDK versions."""

    def __init__(self, versions: Iterable[SdkVersion] = ()):
        self._versions: Tuple[SdkVersion, ...] = tuple(sorted(set(versions)))

    @property
    def versions(self) -> Tuple[SdkVersion, ...]:
        return self._versions

    def latest(self) -> Optional[SdkVersion]:
        return self._versions[-1] if self._versions else None

    def __iter__(self) -> Iterator[SdkVersion]:
        return iter(self._versions)

    def __len__(self) -> int:
        return len(self._versions)

    def __contains__(self, item) -> bool:
        return item in self._versions

    def __eq__(self, other) -> bool:
        if not isinstance(other, InstalledSdkSet):
            return NotImplemented
        return self._versions == other._versions

    def __hash__(self) -> int:
        return hash(self._versions)

    def __repr__(self) -> str:
        return f"InstalledSdkSet([{', '.join(str(v) for v in self._versions)}])"


@dataclass(frozen=True)
class ReleaseChannel:
    """One channel entry of the .NET release index (e.g. ``8.0``)."""
    channel_version: str
    latest_release: Optional[str]
    latest_sdk: Optional[SdkVersion]
    release_type: Optional[str]
    support_phase: Optional[str]
    releases_json: Optional[str]

    @property
    def is_lts(self) -> bool:
        return (self.release_type or "").lower() == ReleaseTypes.LTS.value

"""Tests for SdkVersion ordering, VersionSpec matching and InstalledSdkSet."""

import itertools

import pytest

from versioning.models import InstalledSdkSet, Ordering, ReleaseChannel, SdkVersion, SpecKind, VersionSpec
from versioning.parser import parse_version
from versioning.resolver import compare, highest, sort_descending

SAMPLE = [
    parse_version(v)
    for v in [
        "6.0.428",
        "8.0.100-preview.1",
        "8.0.100-preview.2",
        "8.0.100-rc.1",
        "8.0.100-rc.1.23455.8",
        "8.0.100",
        "8.0.101",
        "8.0.406",
        "8.1.0",
        "9.0.100",
        "10.0.100-rc.2.25502.107",
    ]
]


class TestCompare:
    """compare() must be a strict total order."""

    def test_sample_is_already_ascending(self):
        assert sorted(SAMPLE) == SAMPLE

    def test_release_beats_prerelease_of_same_triple(self):
        assert compare(parse_version("8.0.100"), parse_version("8.0.100-rc.1")) == Ordering.GREATER

    def test_numeric_segments_compare_numerically(self):
        assert compare(parse_version("10.0.100"), parse_version("9.0.100")) == Ordering.GREATER
        assert compare(parse_version("8.0.99"), parse_version("8.0.100")) == Ordering.LESS

    def test_equal(self):
        assert compare(parse_version("8.0"), parse_version("8.0.0")) == Ordering.EQUAL

    def test_antisymmetric_and_consistent(self):
        for a, b in itertools.product(SAMPLE, repeat=2):
            ab, ba = compare(a, b), compare(b, a)
            assert (ab == Ordering.GREATER) == (ba == Ordering.LESS)
            assert (ab == Ordering.EQUAL) == (a == b)

    def test_transitive(self):
        for a, b, c in itertools.product(SAMPLE, repeat=3):
            if compare(a, b) == Ordering.LESS and compare(b, c) == Ordering.LESS:
                assert compare(a, c) == Ordering.LESS

    def test_sort_descending(self):
        assert sort_descending(SAMPLE) == list(reversed(SAMPLE))

    def test_highest_prefers_release(self):
        versions = [parse_version("9.0.100-rc.2"), parse_version("9.0.100")]
        assert highest(versions) == parse_version("9.0.100")

    def test_highest_of_nothing(self):
        assert highest([]) is None


class TestSdkVersion:
    """SdkVersion value semantics."""

    def test_hashable_and_immutable(self):
        v = SdkVersion(8, 0, 100)
        assert {v, SdkVersion(8, 0, 100)} == {v}
        with pytest.raises(Exception):
            v.major = 9  # type: ignore[misc]

    def test_rejects_invalid_label_on_construction(self):
        with pytest.raises(ValueError):
            SdkVersion(8, 0, 100, "rc..1")


class TestVersionSpecMatching:
    """VersionSpec.matches for every kind."""

    def test_exact(self):
        spec = VersionSpec.exact(SdkVersion(8, 0, 100))
        assert spec.matches(SdkVersion(8, 0, 100))
        assert not spec.matches(SdkVersion(8, 0, 100, "rc.1"))

    def test_major(self):
        spec = VersionSpec.major_only(8)
        assert spec.matches(SdkVersion(8, 1, 0))
        assert not spec.matches(SdkVersion(9, 0, 100))

    def test_major_minor(self):
        spec = VersionSpec.major_minor(8, 0)
        assert spec.matches(SdkVersion(8, 0, 406))
        assert not spec.matches(SdkVersion(8, 1, 100))

    def test_all(self):
        assert VersionSpec.all().matches(SdkVersion(1, 0, 0))

    def test_lts_cannot_match_locally(self):
        with pytest.raises(ValueError):
            VersionSpec.lts().matches(SdkVersion(8, 0, 100))

    def test_pinnable_kinds(self):
        assert VersionSpec.major_only(8).is_pinnable
        assert not VersionSpec.lts().is_pinnable
        assert not VersionSpec.all().is_pinnable
        assert VersionSpec.exact(SdkVersion(8, 0, 1)).kind == SpecKind.EXACT


class TestInstalledSdkSet:
    """InstalledSdkSet ordering and de-duplication."""

    def test_sorted_and_deduplicated(self):
        installed = InstalledSdkSet([SdkVersion(9, 0, 100), SdkVersion(8, 0, 100), SdkVersion(9, 0, 100)])
        assert list(installed) == [SdkVersion(8, 0, 100), SdkVersion(9, 0, 100)]
        assert len(installed) == 2

    def test_latest(self):
        installed = InstalledSdkSet([SdkVersion(8, 0, 100), SdkVersion(9, 0, 100)])
        assert installed.latest() == SdkVersion(9, 0, 100)

    def test_empty(self):
        installed = InstalledSdkSet()
        assert not installed
        assert installed.latest() is None
        assert SdkVersion(8, 0, 100) not in installed


class TestReleaseChannel:
    """Release type classification."""

    @pytest.mark.parametrize("release_type,expected", [("lts", True), ("LTS", True), ("sts", False), (None, False)])
    def test_is_lts(self, release_type, expected):
        channel = ReleaseChannel("8.0", "8.0.21", SdkVersion(8, 0, 415), release_type, "active", None)
        assert channel.is_lts is expected

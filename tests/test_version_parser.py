"""Tests for SDK version and spec parsing."""

import pytest

from versioning.errors import InvalidVersionFormat
from versioning.models import SdkVersion, SpecKind, VersionSpec
from versioning.parser import parse_pin_spec, parse_spec, parse_version


class TestParseVersion:
    """Test parse_version acceptance and rejection rules."""

    def test_full_release_version(self):
        assert parse_version("8.0.406") == SdkVersion(8, 0, 406)

    def test_prerelease_label(self):
        v = parse_version("9.0.100-preview.1.24101.2")
        assert (v.major, v.minor, v.patch) == (9, 0, 100)
        assert v.label == "preview.1.24101.2"
        assert v.is_prerelease

    def test_label_may_contain_hyphens(self):
        v = parse_version("8.0.100-rc-final")
        assert v.label == "rc-final"

    def test_surrounding_whitespace_is_ignored(self):
        assert parse_version("  8.0.100\n") == SdkVersion(8, 0, 100)

    def test_partial_versions_are_zero_filled(self):
        assert parse_version("8") == SdkVersion(8, 0, 0)
        assert parse_version("8.1") == SdkVersion(8, 1, 0)

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_rejects_empty_input(self, text):
        with pytest.raises(InvalidVersionFormat):
            parse_version(text)

    @pytest.mark.parametrize("text", ["8..100", "8.0.", ".8.0", "8.0.100-"])
    def test_rejects_empty_segments(self, text):
        with pytest.raises(InvalidVersionFormat):
            parse_version(text)

    @pytest.mark.parametrize("text", ["v8.0.100", "8.x.100", "8.0.1a", "eight"])
    def test_rejects_non_numeric_segments(self, text):
        with pytest.raises(InvalidVersionFormat):
            parse_version(text)

    def test_rejects_more_than_three_numeric_segments(self):
        with pytest.raises(InvalidVersionFormat) as excinfo:
            parse_version("8.0.100.1")
        assert "more than 3" in excinfo.value.reason

    @pytest.mark.parametrize("text", ["8.0.100-rc..1", "8.0.100-rc_1", "8.0.100-rc+build"])
    def test_rejects_malformed_labels(self, text):
        with pytest.raises(InvalidVersionFormat):
            parse_version(text)

    def test_error_is_resolution_exit_code(self):
        from constants import ExitCodes
        with pytest.raises(InvalidVersionFormat) as excinfo:
            parse_version("abc")
        assert excinfo.value.exit_code == ExitCodes.RESOLUTION_ERROR

    @pytest.mark.parametrize("text", [
        "8.0.100",
        "10.0.100-rc.2.25502.107",
        "6.0.428",
        "9.0.100-preview.7",
        "8.0",
        "7",
    ])
    def test_render_round_trips_to_equivalent_version(self, text):
        parsed = parse_version(text)
        assert parse_version(str(parsed)) == parsed


class TestParseSpec:
    """Test parse_spec kind detection."""

    def test_major_only(self):
        spec = parse_spec("8")
        assert spec.kind == SpecKind.MAJOR
        assert spec.major == 8

    def test_major_minor(self):
        spec = parse_spec("8.0")
        assert spec == VersionSpec.major_minor(8, 0)

    def test_exact(self):
        spec = parse_spec("8.0.406")
        assert spec.kind == SpecKind.EXACT
        assert spec.version == SdkVersion(8, 0, 406)

    def test_label_makes_spec_exact(self):
        spec = parse_spec("9.0.100-rc.1")
        assert spec.kind == SpecKind.EXACT
        assert spec.version.label == "rc.1"

    @pytest.mark.parametrize("text", ["lts", "LTS", "--lts"])
    def test_lts_keyword(self, text):
        assert parse_spec(text).kind == SpecKind.LTS

    @pytest.mark.parametrize("text", ["all", "--all"])
    def test_all_keyword(self, text):
        assert parse_spec(text).kind == SpecKind.ALL

    @pytest.mark.parametrize("text", ["", "8.a", "latest", "8.0.0.0"])
    def test_invalid(self, text):
        with pytest.raises(InvalidVersionFormat):
            parse_spec(text)

    def test_spec_renders_back(self):
        for text in ["8", "8.0", "8.0.406", "lts", "all"]:
            assert str(parse_spec(text)) == text


class TestParsePinSpec:
    """Test that only pinnable specs are accepted for global.json."""

    def test_accepts_major(self):
        assert parse_pin_spec("9").kind == SpecKind.MAJOR

    @pytest.mark.parametrize("text", ["lts", "all"])
    def test_rejects_keywords(self, text):
        with pytest.raises(InvalidVersionFormat):
            parse_pin_spec(text)

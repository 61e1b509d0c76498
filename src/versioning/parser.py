"""Parsing utilities for SDK versions and version specs."""

import re

from .errors import InvalidVersionFormat
from .models import SdkVersion, SpecKind, VersionSpec

_LABEL_IDENTIFIER = re.compile(r"^[0-9A-Za-z-]+$")
_MAX_NUMERIC_SEGMENTS = 3


def _split_label(text: str):
    """Split ``core-label`` on the first hyphen."""
    if "-" not in text:
        return text, None
    core, label = text.split("-", 1)
    return core, label


def _parse_numeric_segments(text: str, core: str):
    segments = core.split(".")
    if len(segments) > _MAX_NUMERIC_SEGMENTS:
        raise InvalidVersionFormat(text, "more than 3 numeric segments")
    numbers = []
    for segment in segments:
        if segment == "":
            raise InvalidVersionFormat(text, "empty segment")
        if not segment.isdigit() or not segment.isascii():
            raise InvalidVersionFormat(text, f"segment '{segment}' is not numeric")
        numbers.append(int(segment))
    return numbers


def _validate_label(text: str, label: str) -> None:
    if label == "":
        raise InvalidVersionFormat(text, "empty pre-release label")
    for identifier in label.split("."):
        if identifier == "":
            raise InvalidVersionFormat(text, "empty pre-release identifier")
        if not _LABEL_IDENTIFIER.match(identifier):
            raise InvalidVersionFormat(text, f"invalid pre-release identifier '{identifier}'")


def parse_version(text: str) -> SdkVersion:
    """Parse ``major[.minor[.patch]][-label]`` into an SdkVersion.

    Missing minor/patch segments are zero-filled, so ``8.0`` parses as
    ``8.0.0``. Use ``parse_spec`` when a partial version should select a
    range instead.

    Raises:
        InvalidVersionFormat: on empty input, empty or non-numeric segments,
            more than three numeric segments, or a malformed label.
    """
    if text is None:
        raise InvalidVersionFormat("", "no version given")
    raw = text.strip()
    if not raw:
        raise InvalidVersionFormat(text, "no version given")

    core, label = _split_label(raw)
    numbers = _parse_numeric_segments(raw, core)
    if label is not None:
        _validate_label(raw, label)
    numbers += [0] * (_MAX_NUMERIC_SEGMENTS - len(numbers))

    try:
        return SdkVersion(numbers[0], numbers[1], numbers[2], label)
    except ValueError as exc:
        # semantic_version rejects e.g. numeric identifiers with leading zeroes
        raise InvalidVersionFormat(raw, str(exc)) from exc


def parse_spec(text: str) -> VersionSpec:
    """Parse a user-supplied selector into a VersionSpec.

    ``8`` selects a major, ``8.0`` a major.minor, ``8.0.100`` (or any version
    with a label) an exact version, and ``lts``/``all`` (with or without the
    leading ``--``) the corresponding keyword kinds.
    """
    if text is None:
        raise InvalidVersionFormat("", "no version given")
    raw = text.strip()
    keyword = raw.lower().lstrip("-")
    if keyword == SpecKind.LTS.value:
        return VersionSpec.lts()
    if keyword == SpecKind.ALL.value:
        return VersionSpec.all()

    core, label = _split_label(raw)
    if label is None and raw:
        numbers = _parse_numeric_segments(raw, core)
        if len(numbers) == 1:
            return VersionSpec.major_only(numbers[0])
        if len(numbers) == 2:
            return VersionSpec.major_minor(numbers[0], numbers[1])
    return VersionSpec.exact(parse_version(raw))


def parse_pin_spec(text: str) -> VersionSpec:
    """Parse text recorded in global.json; only pinnable kinds are accepted."""
    spec = parse_spec(text)
    if not spec.is_pinnable:
        raise InvalidVersionFormat(text, f"'{spec}' cannot be used as a pin")
    return spec

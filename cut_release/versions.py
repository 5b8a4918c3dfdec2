"""Version parsing and bumping utilities.

Resolves an increment keyword or explicit version into the concrete
version to release. Increments follow npm's semver rules exactly, since
the resulting version is handed to `npm version`.
"""

from __future__ import annotations

import re

import semver

from .errors import InvalidVersionError

INCREMENTS = ("patch", "minor", "major", "prepatch", "preminor", "premajor", "prerelease")


def parse_version(version_str: str) -> semver.Version | None:
    """Parse a version string, returning None if it isn't valid semver.

    One leading "v" or "=" is accepted, so tag names like "v1.2.3" parse:
    - "1.2.3" → Version(1, 2, 3)
    - "v1.2.3-rc.0" → Version(1, 2, 3, "rc.0")
    - "1.2" → None
    - "vv1.2.3" → None
    """
    cleaned = version_str.strip()
    if cleaned[:1] in ("v", "="):
        cleaned = cleaned[1:]
    try:
        return semver.Version.parse(cleaned)
    except ValueError:
        return None


def is_valid_version(version_str: str) -> bool:
    return parse_version(version_str) is not None


def is_increment(value: str) -> bool:
    return value in INCREMENTS


def is_pre_increment(value: str) -> bool:
    """True for prepatch, preminor, premajor and prerelease."""
    return value.startswith("pre")


def is_valid_preid(preid: str) -> bool:
    """A prerelease identifier: alphanumerics and hyphens, with a letter."""
    return bool(re.fullmatch(r"[0-9A-Za-z-]+", preid) and re.search(r"[a-z]", preid))


def _bump_prerelease(parts: list[str], preid: str | None) -> list[str]:
    """Increment prerelease parts the way npm's "pre" step does.

    Examples:
        [] → ["0"]
        ["rc", "0"] → ["rc", "1"]
        ["beta"] → ["beta", "0"]
        ["alpha", "3"] with preid "rc" → ["rc", "0"]
    """
    if not parts:
        parts = ["0"]
    else:
        for i in range(len(parts) - 1, -1, -1):
            if parts[i].isdigit():
                parts[i] = str(int(parts[i]) + 1)
                break
        else:
            parts.append("0")

    if preid:
        if parts[0] != preid or len(parts) < 2 or not parts[1].isdigit():
            parts = [preid, "0"]
    return parts


def increment_version(current: str, increment: str, preid: str | None = None) -> str:
    """Apply an increment keyword to the current version.

    Examples:
        ("1.2.3", "minor") → "1.3.0"
        ("1.2.3", "prerelease", "rc") → "1.2.4-rc.0"
        ("1.2.4-rc.0", "prerelease", "rc") → "1.2.4-rc.1"
        ("1.2.4-rc.1", "patch") → "1.2.4"
        ("2.0.0-beta.2", "major") → "2.0.0"

    Raises:
        InvalidVersionError: If current isn't valid semver or the
            increment is unknown.
    """
    version = parse_version(current)
    if version is None:
        raise InvalidVersionError(f"The current version {current!r} is not a valid semantic version")
    if not is_increment(increment):
        raise InvalidVersionError(f"Unknown increment {increment!r}")

    major, minor, patch = version.major, version.minor, version.patch
    pre = version.prerelease.split(".") if version.prerelease else []

    if increment == "major":
        if minor or patch or not pre:
            major += 1
        minor = patch = 0
        pre = []
    elif increment == "minor":
        if patch or not pre:
            minor += 1
        patch = 0
        pre = []
    elif increment == "patch":
        if not pre:
            patch += 1
        pre = []
    elif increment == "premajor":
        major, minor, patch = major + 1, 0, 0
        pre = _bump_prerelease([], preid)
    elif increment == "preminor":
        minor, patch = minor + 1, 0
        pre = _bump_prerelease([], preid)
    elif increment == "prepatch":
        patch += 1
        pre = _bump_prerelease([], preid)
    else:  # prerelease
        if not pre:
            patch += 1
        pre = _bump_prerelease(pre, preid)

    return str(semver.Version(major, minor, patch, ".".join(pre) or None))


def resolve_version(current: str, increment_or_version: str, preid: str | None = None) -> str:
    """Compute the concrete version to release.

    Increment keywords are applied to current; an explicit valid version
    is returned unchanged and preid is ignored.

    Raises:
        InvalidVersionError: If the input is neither an increment keyword
            nor a valid semantic version.
    """
    if is_increment(increment_or_version):
        return increment_version(current, increment_or_version, preid)
    if is_valid_version(increment_or_version):
        return increment_or_version
    raise InvalidVersionError(
        f"{increment_or_version!r} is not a valid semantic version or one of: "
        + ", ".join(INCREMENTS)
    )

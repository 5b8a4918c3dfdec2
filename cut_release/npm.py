"""npm registry queries used to pick prompt defaults.

Failures here never stop a release: an unpublished package simply has
no dist-tags and no prior prerelease identifiers.
"""

from __future__ import annotations

import json
import subprocess

from .shell import npm
from .versions import parse_version


def parse_dist_tags(output: str) -> list[str]:
    """Parse `npm dist-tag ls` output ("latest: 1.2.3" per line) into tag names."""
    tags: list[str] = []
    for line in output.splitlines():
        name = line.split(":", 1)[0].strip()
        if name:
            tags.append(name)
    return tags


def dist_tags() -> list[str]:
    """Return the package's existing dist-tags, or [] if npm can't tell."""
    try:
        return parse_dist_tags(npm("dist-tag", "ls"))
    except (subprocess.CalledProcessError, OSError):
        return []


def tag_choices(tags: list[str], *, prerelease: bool) -> list[str]:
    """Order dist-tags for the tag prompt.

    For a prerelease, "latest" is swapped for "prerelease" at the front so
    a prerelease isn't accidentally published as the default version.
    Duplicates are dropped, first occurrence wins.
    """
    choices = list(tags)
    if prerelease and "latest" in choices:
        choices.remove("latest")
        choices.insert(0, "prerelease")
    return list(dict.fromkeys(choices))


def parse_versions(output: str) -> list[str]:
    """Parse `npm view . versions --json`, which is a bare string for one version."""
    if not output:
        return []
    data = json.loads(output)
    if isinstance(data, str):
        return [data]
    return [str(v) for v in data]


def published_versions() -> list[str]:
    try:
        return parse_versions(npm("view", ".", "versions", "--json"))
    except (subprocess.CalledProcessError, OSError, ValueError):
        return []


def find_published_preid(versions: list[str]) -> str | None:
    """Return the identifier of the newest published "<id>.<n>" prerelease.

    Example:
        ["1.0.0", "1.1.0-beta.0", "1.1.0-rc.2"] → "rc"
    """
    candidates = []
    for raw in versions:
        parsed = parse_version(raw)
        if parsed is not None and parsed.prerelease and len(parsed.prerelease.split(".")) > 1:
            candidates.append(parsed)
    if not candidates:
        return None
    return max(candidates).prerelease.split(".")[0]

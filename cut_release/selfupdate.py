"""Self-update check against PyPI.

Before releasing, cut-release asks PyPI whether a newer version of itself
exists. If the user agrees, it upgrades with pip and hands off to a fresh
process with the same arguments. The lookup is best effort: any failure
means "no update".
"""

from __future__ import annotations

import json
import sys
import urllib.request
from collections.abc import Sequence
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version

import click
from packaging.utils import canonicalize_name
from packaging.version import InvalidVersion, Version

from .errors import ReleaseError
from .shell import notice, run, warn

DIST_NAME = "cut-release"
PYPI_URL = "https://pypi.org/pypi/{name}/json"
LOOKUP_TIMEOUT = 2.0


def running_version() -> str:
    return pkg_version(DIST_NAME)


def latest_version(timeout: float = LOOKUP_TIMEOUT) -> str:
    """Fetch the latest released version from the PyPI JSON API."""
    url = PYPI_URL.format(name=canonicalize_name(DIST_NAME))
    with urllib.request.urlopen(url, timeout=timeout) as response:
        return str(json.load(response)["info"]["version"])


def is_newer(candidate: str, current: str) -> bool:
    """PEP 440 comparison: True if candidate is strictly newer than current."""
    return Version(candidate) > Version(current)


def check_for_update() -> str | None:
    """Return the latest version if it is newer than the running one.

    Network errors, timeouts and unparseable responses all return None.
    """
    try:
        latest = latest_version()
        return latest if is_newer(latest, running_version()) else None
    except (OSError, ValueError, KeyError, InvalidVersion, PackageNotFoundError):
        return None


def self_update(argv: Sequence[str]) -> None:
    """Upgrade cut-release and re-run it with the same arguments.

    On success this never returns: the process exits with the status of
    the re-invoked command. If pip fails the current version carries on.
    """
    notice("Running self-update. Please hang on...")
    result = run(sys.executable, "-m", "pip", "install", "--upgrade", DIST_NAME, check=False)
    if result.returncode != 0:
        warn(f"Self update failed; continuing with {DIST_NAME} {running_version()}")
        return

    notice("Self update completed")
    try:
        rerun = run(DIST_NAME, *argv, check=False)
    except OSError as exc:
        raise ReleaseError(f"Unable to restart {DIST_NAME}: {exc}") from exc
    sys.exit(rerun.returncode)


def maybe_self_update(argv: Sequence[str]) -> None:
    """Offer to upgrade when PyPI has a newer cut-release."""
    latest = check_for_update()
    if latest is None:
        return
    current = running_version()
    if click.confirm(
        f"A new version of {DIST_NAME} ({latest} - you've got {current}) is available. "
        "Would you like to update?",
        default=True,
    ):
        self_update(argv)

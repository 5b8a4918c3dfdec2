"""Release workflow: check → ask → validate → plan → execute.

This module orchestrates a release of the npm package in the current
directory:
1. Offer a self-update if a newer cut-release is on PyPI
2. Refuse to run with uncommitted changes
3. Ask for version, prerelease identifier, dist-tag and remote
4. Stop quietly if the user doesn't confirm
5. Check the branch is in sync and the release tag is free
6. Build the full command plan
7. Run it, reporting any commands left over on failure

Nothing is rolled back: if a command fails, the operator finishes the
release by hand from the printed list.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from .config import load_config, load_package_info
from .models import ReleaseAnswers, ReleaseOptions
from .plan import build_plan
from .prompts import gather_answers
from .repo import check_clean, check_sync, detect_tracking, resolve_tag_conflict
from .selfupdate import maybe_self_update
from .sequencer import run_plan
from .shell import info, success
from .versions import resolve_version


def validate_repository(answers: ReleaseAnswers, new_version: str, *, dry_run: bool) -> None:
    """Check sync and tag preconditions for the selected remote."""
    if not answers.remote:
        return
    check_sync(answers.remote_name, answers.remote_branch, answers.branch)
    resolve_tag_conflict(new_version, dry_run=dry_run)


def run_release(options: ReleaseOptions, argv: Sequence[str] = ()) -> bool:
    """Execute the full release workflow.

    Args:
        options: Flags from the command line.
        argv: Original arguments, replayed if a self-update restarts us.

    Returns:
        True if a release ran, False if the user declined.
    """
    root = Path.cwd()
    package = load_package_info(root)
    config = load_config(root)

    if config.self_update and not options.dry_run:
        maybe_self_update(argv)

    check_clean()

    if options.dry_run:
        info(f"Dry run release of new version of `{package.name}` (current version: {package.version})")
    else:
        info(f"Releasing a new version of `{package.name}` (current version: {package.version})")
    info("")

    answers = gather_answers(package, options, config, detect_tracking())
    if not answers.confirm:
        return False

    new_version = resolve_version(package.version, answers.version, answers.preid)
    validate_repository(answers, new_version, dry_run=options.dry_run)

    plan = build_plan(new_version, answers, options.message or config.message)
    run_plan(plan, dry_run=options.dry_run)
    success("Done")
    return True

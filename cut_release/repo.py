"""Git repository state checks.

Read-only (or fetch-only) inspection of the local repository before a
release: a clean working tree, a branch in sync with its remote, and no
release tag already taken by another commit. The one mutation is deleting
a stale tag left behind by an aborted release on the same commit.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from .errors import DirtyWorkingTreeError, FatalConflictError, GitError, OutOfSyncError
from .models import Tracking
from .shell import git, git_succeeds, info
from .versions import parse_version


def is_git_repo(root: Path | None = None) -> bool:
    """True if root (default: cwd) has a .git directory or file."""
    return ((root or Path.cwd()) / ".git").exists()


def check_clean() -> None:
    """Fail if the working tree has uncommitted changes relative to HEAD.

    Directories outside version control are treated as clean.

    Raises:
        DirtyWorkingTreeError: If `git diff-index` reports changes.
    """
    if not is_git_repo():
        return
    if not git_succeeds("diff-index", "--quiet", "HEAD", "--"):
        raise DirtyWorkingTreeError(
            "There are uncommitted changes in your local repo. "
            "Commit or revert before you cut a new release."
        )


def current_branch() -> str:
    """Return the checked-out branch name.

    Raises:
        GitError: If the branch can't be determined or HEAD is detached.
    """
    branch = git("rev-parse", "--abbrev-ref", "HEAD", check=False)
    if not branch or branch == "HEAD":
        raise GitError("Cannot determine git branch")
    return branch


def tracking_remote(branch: str) -> str | None:
    """Return the "remote/branch" that branch tracks, or None."""
    upstream = git(
        "rev-parse", "--symbolic-full-name", "--abbrev-ref", f"{branch}@{{u}}", check=False
    )
    return upstream or None


def detect_tracking() -> Tracking | None:
    """Describe the current branch and its upstream, or None outside a repo."""
    if not is_git_repo():
        return None
    branch = current_branch()
    return Tracking(branch=branch, upstream=tracking_remote(branch))


def _git_or_fail(message: str, *args: str) -> str:
    """Run git, turning a failure into a GitError carrying its stderr."""
    try:
        return git(*args)
    except subprocess.CalledProcessError as exc:
        raise GitError(f"{message}: {(exc.stderr or '').strip()}") from exc


def fetch(remote: str | None = None) -> None:
    """Fetch from remote (or the default remote).

    Raises:
        GitError: If the fetch fails.
    """
    args = ["fetch", remote] if remote else ["fetch"]
    _git_or_fail(f"git {' '.join(args)} failed", *args)


def parse_remotes(output: str) -> list[str]:
    """Parse `git remote` output into remote names."""
    return [line.strip() for line in output.splitlines() if line.strip()]


def list_remotes() -> list[str]:
    """Fetch, then list configured remotes.

    Raises:
        GitError: If there are no remotes.
    """
    fetch()
    remotes = parse_remotes(git("remote", check=False))
    if not remotes:
        raise GitError("No git remotes found")
    return remotes


def rev_parse(ref: str) -> str | None:
    """Resolve ref to a commit SHA, or None if it doesn't exist."""
    sha = git("rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}", check=False)
    return sha or None


def check_sync(remote: str, branch: str, local_branch: str | None = None) -> None:
    """Require the local branch tip to match the remote branch tip exactly.

    branch names the branch on the remote; local_branch names the local one
    when it differs (a "dev" branch tracking "origin/main").

    If the remote branch doesn't exist yet there is nothing to reconcile,
    so the check is skipped.

    Raises:
        GitError: If fetching fails.
        OutOfSyncError: If the two tips differ.
    """
    fetch(remote)
    remote_ref = f"{remote}/{branch}"
    remote_sha = rev_parse(remote_ref)
    if remote_sha is None:
        info(f"Remote branch {remote_ref} does not exist yet; skipping sync check")
        return

    local = local_branch or branch
    local_sha = rev_parse(local)
    if local_sha != remote_sha:
        raise OutOfSyncError(
            f"The local branch {local} ({(local_sha or 'unknown')[:7]}) and the remote "
            f"branch {remote_ref} ({remote_sha[:7]}) point at different commits. "
            f'Run "git pull --rebase {remote} {branch}" and push before releasing.'
        )


def parse_tags(output: str) -> dict[str, str]:
    """Map semver versions to tag names from `git tag` output.

    Tags that aren't semantic versions are skipped. When two tags resolve
    to the same version ("1.0.0" and "v1.0.0") the first one listed wins.

    Example:
        "v1.0.0\\nrelease-x\\n1.1.0" → {"1.0.0": "v1.0.0", "1.1.0": "1.1.0"}
    """
    tags: dict[str, str] = {}
    for line in output.splitlines():
        name = line.strip()
        parsed = parse_version(name) if name else None
        if parsed is not None:
            tags.setdefault(str(parsed), name)
    return tags


def resolve_tag_conflict(target_version: str, *, dry_run: bool = False) -> None:
    """Make sure the release tag for target_version is free.

    A tag on HEAD is a leftover from an aborted release of this very commit
    and is deleted; a tag on any other commit is a real collision.

    Raises:
        GitError: If tags can't be listed.
        FatalConflictError: If the tag exists on a different commit.
    """
    try:
        output = git("tag")
    except subprocess.CalledProcessError as exc:
        raise GitError("Could not list git tags") from exc

    version = parse_version(target_version)
    tag = parse_tags(output).get(str(version) if version else target_version)
    if tag is None:
        return

    tag_sha = _git_or_fail(f"Could not resolve the commit of tag {tag}", "rev-list", "-1", tag)
    head_sha = _git_or_fail("Could not resolve HEAD", "rev-parse", "HEAD")
    if tag_sha != head_sha:
        raise FatalConflictError(f"The git tag {tag} already exists")

    info(f"Removing stale tag {tag} left on HEAD by a previous release attempt")
    if not dry_run:
        _git_or_fail(f"Could not delete tag {tag}", "tag", "-d", tag)

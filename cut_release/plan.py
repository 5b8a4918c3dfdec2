"""Command plan construction.

The plan is the complete, ordered list of commands for one release. It is
built before anything runs so a failure can always report exactly which
steps are left.
"""

from __future__ import annotations

from .models import Command, ReleaseAnswers
from .versions import parse_version


def release_tag(version: str) -> str:
    """Tag name `npm version` creates for version.

    npm drops a leading "v" or "=" from an explicit version, so the tag is
    built from the normalized form: "v2.0.0" tags as "v2.0.0", not "vv2.0.0".
    """
    parsed = parse_version(version)
    return f"v{parsed if parsed is not None else version}"


def build_plan(
    new_version: str, answers: ReleaseAnswers, message: str | None = None
) -> list[Command]:
    """Build the release commands in execution order.

    1. npm version (with an optional commit message template)
    2. set the branch upstream, if it had none
    3. push the branch, if a remote was selected (as local:remote when the
       local branch is named differently from its upstream)
    4. push the release tag, if a remote was selected
    5. npm publish (with the dist-tag)
    """
    plan: list[Command] = []

    bump: Command = ("npm", "version", new_version)
    if message:
        bump += ("--message", message)
    plan.append(bump)

    if answers.remote and answers.set_remote:
        plan.append(("git", "branch", "--set-upstream-to", answers.remote))

    if answers.remote:
        remote, branch = answers.remote_name, answers.remote_branch
        local = answers.branch
        refspec = f"{local}:{branch}" if local and local != branch else branch
        plan.append(("git", "push", remote, refspec))
        plan.append(("git", "push", remote, release_tag(new_version)))

    publish: Command = ("npm", "publish")
    if answers.tag:
        publish += ("--tag", answers.tag)
    plan.append(publish)

    return plan

"""Interactive questions for a release.

The questions form an explicit ordered list. Each has a predicate over
the answers gathered so far and is asked only when it holds, so answers
supplied on the command line skip their prompts. Prompts are rendered
with click.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import click

from . import npm
from .models import PackageInfo, ReleaseAnswers, ReleaseConfig, ReleaseOptions, Tracking
from .repo import list_remotes
from .versions import INCREMENTS, is_pre_increment, is_valid_preid, is_valid_version, resolve_version

Answers = dict[str, Any]

OTHER = "Other (specify)"


@dataclass(frozen=True)
class Question:
    """One step of the prompt flow.

    Attributes:
        name: Answer key the result is stored under.
        ask: Produces the answer; may prompt the user.
        when: Whether to ask, given the answers so far.
    """

    name: str
    ask: Callable[[Answers], Any]
    when: Callable[[Answers], bool]


def ask_questions(questions: list[Question], answers: Answers | None = None) -> Answers:
    """Evaluate questions strictly in order, accumulating answers."""
    answers = dict(answers or {})
    for question in questions:
        if question.when(answers):
            answers[question.name] = question.ask(answers)
    return answers


class SemverType(click.ParamType):
    name = "version"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> str:
        if not is_valid_version(str(value)):
            self.fail("Please specify a valid semver, e.g. 1.2.3. See https://semver.org/", param, ctx)
        return str(value)


class PreidType(click.ParamType):
    name = "identifier"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> str:
        if not is_valid_preid(str(value)):
            self.fail("Please specify a valid identifier, e.g. rc", param, ctx)
        return str(value)


def choose(message: str, choices: list[str], *, other: str | None = OTHER) -> str | None:
    """Show a numbered list and return the chosen entry.

    Returns None when the trailing "other" entry is picked.
    """
    entries = [*choices, other] if other else list(choices)
    click.echo(message)
    for number, entry in enumerate(entries, start=1):
        click.echo(f"  {number}) {entry}")
    picked = click.prompt("Choice", type=click.IntRange(1, len(entries)), default=1)
    return choices[picked - 1] if picked <= len(choices) else None


def _needs_preid(answers: Answers) -> bool:
    return is_pre_increment(answers["version"]) and answers.get("preid") is None


def release_questions(
    package: PackageInfo,
    options: ReleaseOptions,
    config: ReleaseConfig,
    tracking: Tracking | None,
) -> list[Question]:
    """Build the ordered question list for one release."""

    def ask_preid(answers: Answers) -> str | None:
        published = npm.find_published_preid(npm.published_versions())
        if published:
            return published
        return choose(f"Select a {answers['version']} identifier", config.preids)

    def ask_tag(answers: Answers) -> str | None:
        if options.tag is None and not answers.get("preid"):
            return config.tag
        choices = npm.tag_choices(npm.dist_tags(), prerelease=bool(answers.get("preid")))
        label = OTHER if choices else "Add new tag"
        return choose("How should this version be tagged in npm?", choices, other=label)

    def ask_remote(answers: Answers) -> str | None:
        branch = tracking.branch if tracking else ""
        remotes = [f"{remote}/{branch}" for remote in list_remotes()]
        return choose(
            "Which git remote should your local branch be tracking?", remotes, other=None
        )

    def ask_confirm(answers: Answers) -> bool:
        new_version = resolve_version(package.version, answers["version"], answers.get("preid"))
        msg = f"Will bump from {package.version} to {new_version} and tag as {answers['tag']}. Continue"
        if options.dry_run:
            msg += " with dry run"
        return click.confirm(msg + "?", default=True)

    return [
        Question(
            "version",
            ask=lambda a: choose("Select semver increment or specify new version", list(INCREMENTS)),
            when=lambda a: "version" not in a,
        ),
        Question(
            "version",
            ask=lambda a: click.prompt("Version", type=SemverType()),
            when=lambda a: a["version"] is None,
        ),
        Question(
            "preid",
            ask=ask_preid,
            when=_needs_preid,
        ),
        Question(
            "preid",
            ask=lambda a: click.prompt("Identifier", type=PreidType()),
            when=_needs_preid,
        ),
        Question("tag", ask=ask_tag, when=lambda a: "tag" not in a),
        Question(
            "tag",
            ask=lambda a: click.prompt("Tag", default="latest"),
            when=lambda a: not a["tag"],
        ),
        Question(
            "remote",
            ask=ask_remote,
            when=lambda a: tracking is not None and tracking.upstream is None,
        ),
        Question("confirm", ask=ask_confirm, when=lambda a: "confirm" not in a),
    ]


def gather_answers(
    package: PackageInfo,
    options: ReleaseOptions,
    config: ReleaseConfig,
    tracking: Tracking | None,
) -> ReleaseAnswers:
    """Ask whatever the command line didn't answer."""
    seed: Answers = {}
    if options.increment:
        seed["version"] = options.increment
    if options.preid:
        seed["preid"] = options.preid
    if options.tag:
        seed["tag"] = options.tag
    if options.yes:
        seed["confirm"] = True
    if tracking is not None and tracking.upstream:
        seed["remote"] = tracking.upstream

    answers = ask_questions(release_questions(package, options, config, tracking), seed)
    answers["set_remote"] = tracking is not None and tracking.upstream is None
    answers["branch"] = tracking.branch if tracking is not None else None
    return ReleaseAnswers.model_validate(answers)

"""CLI entry point for cut-release."""

from __future__ import annotations

import sys
from importlib.metadata import version as pkg_version
from typing import Any

import click

from cut_release.errors import UsageError
from cut_release.models import ReleaseOptions
from cut_release.versions import INCREMENTS, is_increment, is_pre_increment, is_valid_preid, is_valid_version
from cut_release.workflow import run_release

__version__ = pkg_version("cut-release")

EPILOG = "Supported increments: <semver>, " + ", ".join(INCREMENTS)


class ReleaseCommand(click.Command):
    """Command whose argument errors exit with status 1 and show full help."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except UsageError:
            raise
        except click.UsageError as exc:
            raise UsageError(exc.format_message(), ctx=exc.ctx or ctx) from exc


def _validate_increment(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    if value and not is_increment(value) and not is_valid_version(value):
        raise UsageError(
            "The increment must be a valid semantic version, " + ", ".join(INCREMENTS), ctx=ctx
        )
    return value


def _validate_preid(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    if value and not is_valid_preid(value):
        raise UsageError(f"Invalid prerelease identifier {value!r}", ctx=ctx)
    return value


def check_preid_usage(ctx: click.Context, increment: str | None, preid: str | None) -> None:
    """--preid only makes sense for increments that start with "pre"."""
    if preid and not is_pre_increment(increment or ""):
        raise UsageError(
            'The --preid argument can only be used with increments that start with "pre", '
            'such as "prerelease".',
            ctx=ctx,
        )


@click.command(
    cls=ReleaseCommand,
    epilog=EPILOG,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.argument("increment", required=False, callback=_validate_increment)
@click.option("-y", "--yes", is_flag=True, help="Skip confirmation when present.")
@click.option("-t", "--tag", default=None, help="npm dist-tag for the release (e.g. latest, next).")
@click.option(
    "-p",
    "--preid",
    default=None,
    callback=_validate_preid,
    help="Prerelease identifier (e.g. rc, alpha, beta).",
)
@click.option("-d", "--dry-run", is_flag=True, help="Print commands to be run, but don't run them.")
@click.option(
    "-m",
    "--message",
    default=None,
    help="Version commit message; %s is replaced with the version.",
)
@click.version_option(__version__, "-v", "--version", prog_name="cut-release")
@click.pass_context
def cli(ctx: click.Context, increment: str | None, preid: str | None, **flags: Any) -> None:
    """Cut a release of the npm package in the current directory.

    Bumps the version, pushes the branch and tag, and publishes to npm.
    """
    check_preid_usage(ctx, increment, preid)
    options = ReleaseOptions(increment=increment, preid=preid, **flags)
    run_release(options, argv=sys.argv[1:])

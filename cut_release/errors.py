"""Errors that abort a release.

Every error is a click exception, so the CLI prints it and exits with
its exit_code (always 1) without any extra handling.
"""

from __future__ import annotations

from typing import IO, Any

import click

from .models import Command, ExecutionResult
from .shell import format_command


class ReleaseError(click.ClickException):
    """Base class for errors that stop a release."""

    exit_code = 1


class UsageError(click.UsageError):
    """Bad command-line arguments; printed after the command help."""

    exit_code = 1

    def show(self, file: IO[Any] | None = None) -> None:
        if self.ctx is not None:
            click.echo(self.ctx.get_help(), file=file, err=True, color=self.ctx.color)
            click.echo(file=file, err=True)
        click.secho(f"Error: {self.format_message()}", file=file, err=True, fg="red")


class InvalidVersionError(ReleaseError):
    pass


class MissingMetadataError(ReleaseError):
    pass


class ConfigError(ReleaseError):
    pass


class GitError(ReleaseError):
    pass


class DirtyWorkingTreeError(ReleaseError):
    pass


class OutOfSyncError(ReleaseError):
    pass


class FatalConflictError(ReleaseError):
    """A release tag already exists on a different commit."""


class SequenceError(ReleaseError):
    """A command in the plan failed; later commands were never attempted.

    Attributes:
        failed_command: The command that failed.
        remaining_commands: Commands after it that never ran.
        result: The failing command's captured output and failure message.
    """

    def __init__(
        self,
        failed_command: Command,
        remaining_commands: list[Command],
        result: ExecutionResult,
    ) -> None:
        super().__init__(result.message or f"The command `{format_command(failed_command)}` failed")
        self.failed_command = failed_command
        self.remaining_commands = remaining_commands
        self.result = result

    def show(self, file: IO[Any] | None = None) -> None:
        def echo(msg: str = "", **styles: Any) -> None:
            click.secho(msg, file=file, err=True, **styles)

        echo()
        for output in (self.result.stdout, self.result.stderr):
            if output.strip():
                echo(output.rstrip(), fg="red")
                echo()
        echo(self.format_message(), fg="red")
        echo()
        echo("You can finish the release by running these commands manually:", fg="yellow")
        for command in [self.failed_command, *self.remaining_commands]:
            echo(format_command(command), fg="white")

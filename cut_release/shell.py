"""Shell and git utilities.

Provides simple wrappers around subprocess calls for running git, npm and
the release commands, plus the console output helpers used everywhere else.
"""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Sequence

import click


def git(*args: str, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "rev-parse", "HEAD").
        check: If True (default), raise on non-zero exit. Set to False
               for commands that may legitimately fail (e.g., upstream lookup).

    Returns:
        Stripped stdout from the git command.
    """
    result = subprocess.run(["git", *args], capture_output=True, text=True, check=check)
    return result.stdout.strip()


def git_succeeds(*args: str) -> bool:
    """Run a git command for its exit status only (e.g., diff-index --quiet)."""
    result = subprocess.run(["git", *args], capture_output=True)
    return result.returncode == 0


def npm(*args: str, check: bool = True) -> str:
    """Run an npm command and return stripped stdout."""
    result = subprocess.run(["npm", *args], capture_output=True, text=True, check=check)
    return result.stdout.strip()


def run(*args: str, check: bool = True) -> subprocess.CompletedProcess[bytes]:
    """Run an arbitrary command with output streamed to the terminal.

    Used for the self-update install and re-invocation, where the user
    should see progress as it happens.
    """
    return subprocess.run(args, check=check)


def execute(command: Sequence[str]) -> subprocess.CompletedProcess[str]:
    """Run one release command, capturing its output.

    Raises:
        subprocess.CalledProcessError: On non-zero exit, with stdout and
            stderr attached.
        OSError: If the executable cannot be started.
    """
    return subprocess.run(list(command), capture_output=True, text=True, check=True)


def format_command(command: Sequence[str]) -> str:
    """Render a command the way a user would type it."""
    return shlex.join(command)


def step(msg: str) -> None:
    """Print an announcement, e.g. the command about to run."""
    click.echo(msg)


def info(msg: str) -> None:
    click.echo(msg)


def warn(msg: str) -> None:
    click.secho(msg, fg="yellow")


def success(msg: str) -> None:
    click.secho(msg, fg="green")


def notice(msg: str) -> None:
    """Print a self-update status line."""
    click.secho(msg, fg="blue")

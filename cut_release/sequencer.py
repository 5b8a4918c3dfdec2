"""Sequential command execution.

Runs a command plan strictly in order and stops at the first failure.
Already-executed commands are never rolled back; instead the failure
reports what is left so the operator can finish by hand.
"""

from __future__ import annotations

import subprocess

from .errors import SequenceError
from .models import Command, ExecutionResult
from .shell import execute, format_command, info, step


def run_command(command: Command, *, dry_run: bool = False) -> ExecutionResult:
    """Run one command and capture its outcome (never raises for failures)."""
    if dry_run:
        return ExecutionResult(command=command, dry_run=True)

    try:
        proc = execute(command)
    except subprocess.CalledProcessError as exc:
        return ExecutionResult(
            command=command,
            ok=False,
            stdout=exc.stdout or "",
            stderr=exc.stderr or "",
            message=(
                f"The command `{format_command(command)}` failed:\n"
                f"exited with status {exc.returncode}"
            ),
        )
    except OSError as exc:
        return ExecutionResult(
            command=command,
            ok=False,
            message=f"The command `{format_command(command)}` failed:\n{exc}",
        )
    return ExecutionResult(command=command, stdout=proc.stdout, stderr=proc.stderr)


def run_plan(plan: list[Command], *, dry_run: bool = False) -> list[ExecutionResult]:
    """Execute commands one at a time, in order.

    Args:
        plan: Commands in execution order.
        dry_run: Announce each command without running it.

    Returns:
        One result per command, all successful.

    Raises:
        SequenceError: On the first failing command. Nothing after it runs.
    """
    results: list[ExecutionResult] = []
    for index, command in enumerate(plan):
        step(f"=> {format_command(command)}")
        result = run_command(command, dry_run=dry_run)
        if not result.ok:
            raise SequenceError(command, list(plan[index + 1 :]), result)
        if result.stdout.strip():
            info(result.stdout.rstrip())
        results.append(result)
    return results

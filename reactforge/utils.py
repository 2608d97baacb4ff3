"""Shared utility functions for reactforge.

Provides async command execution, project-name validation, and Rich-based
console reporting used by every step of a scaffolding run.
"""

from __future__ import annotations

import asyncio
import os
import re
from pathlib import Path

from rich.console import Console
from rich.rule import Rule
from rich.table import Table

from .errors import InvalidProjectName, MissingArgument

console = Console()

# npm rejects package names longer than this.
MAX_PROJECT_NAME_LENGTH = 214

_PROJECT_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: int = 600,
    capture: bool = True,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run an external command asynchronously.

    Args:
        cmd: Executable followed by its arguments.  Never passed through a
            shell, so the project name cannot inject shell syntax.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
        capture: Whether to capture stdout/stderr (if ``False`` they inherit
            the parent's streams, which lets the bootstrapper talk to the
            terminal).
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  If *capture* is ``False``
        the stdout/stderr strings will be empty.  A missing executable is
        reported as return code 127.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=stdout_pipe,
            stderr=stderr_pipe,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
        )
    except FileNotFoundError:
        return (127, "", f"Command not found: {cmd[0]}")

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# Project name helpers
# ---------------------------------------------------------------------------


def validate_project_name(name: str | None) -> str:
    """Return *name* stripped of surrounding whitespace, or raise.

    The name becomes both a directory and an npm package name, so only
    letters, digits, ``.``, ``_`` and ``-`` are accepted, and it must start
    with a letter or digit.  Unsafe names are rejected rather than rewritten.

    Raises:
        MissingArgument: If *name* is ``None`` or blank.
        InvalidProjectName: If *name* contains path separators, whitespace,
            shell metacharacters, or is too long.
    """
    if name is None or not name.strip():
        raise MissingArgument("Please provide a project name, e.g. `reactforge my-app`")

    name = name.strip()
    if len(name) > MAX_PROJECT_NAME_LENGTH:
        raise InvalidProjectName(
            f"Project name is {len(name)} characters long "
            f"(maximum {MAX_PROJECT_NAME_LENGTH})"
        )
    if not _PROJECT_NAME_RE.match(name):
        raise InvalidProjectName(
            f"Invalid project name {name!r}: use letters, digits, '.', '_' or '-', "
            "starting with a letter or digit"
        )
    return name


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0.0s"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


def tail(text: str, lines: int = 10) -> str:
    """Return the last *lines* lines of *text*."""
    return "\n".join(text.strip().splitlines()[-lines:])


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_step_header(index: int, name: str) -> None:
    """Print a rule announcing step *index*."""
    console.print()
    console.print(Rule(f"[bold bright_cyan] Step {index}: {name} [/bold bright_cyan]", style="bright_cyan"))


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")

"""Exception hierarchy shared by every reactforge component.

Each error kind carries the process exit code the CLI reports for it, so a
failure anywhere in the run maps to a distinct, documented status.
"""

from __future__ import annotations


class ReactForgeError(Exception):
    """Base class for all expected reactforge failures."""

    exit_code: int = 1

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MissingArgument(ReactForgeError):
    """No project name was supplied on the command line."""

    exit_code = 2


class InvalidProjectName(ReactForgeError):
    """The project name cannot be used as a directory and package name."""

    exit_code = 3

"""External toolchain invocation: project bootstrapper and dependency installer.

Both collaborators are opaque commands.  This module only builds their
argument lists, runs them through :func:`~reactforge.utils.run_command`, and
turns a non-zero exit into a typed error carrying the exit code.
"""

from __future__ import annotations

from pathlib import Path

from .config import ToolchainConfig
from .errors import ReactForgeError
from .scaffolder.catalog import DependencySet
from .utils import console, run_command, tail


class ToolchainError(ReactForgeError):
    """An external command exited unsuccessfully."""

    def __init__(self, message: str, returncode: int, stderr: str = "") -> None:
        self.returncode = returncode
        self.stderr = stderr
        detail = f" (exit code {returncode})"
        if stderr:
            detail += f"\n{tail(stderr)}"
        super().__init__(message + detail)


class BootstrapFailure(ToolchainError):
    """The project bootstrapper failed to create the skeleton."""

    exit_code = 4


class InstallFailure(ToolchainError):
    """The package manager failed to install the declared dependencies."""

    exit_code = 5


class Toolchain:
    """Runs the bootstrapper and installer described by a :class:`ToolchainConfig`."""

    def __init__(self, config: ToolchainConfig) -> None:
        self.config = config

    def bootstrap_command(self, project_name: str) -> list[str]:
        """Return the ``npm create`` argument list for *project_name*."""
        return [
            self.config.npm,
            "create",
            self.config.create_package,
            project_name,
            "--",
            "--template",
            self.config.template,
        ]

    async def bootstrap(self, project_name: str, output_dir: Path) -> Path:
        """Create the project skeleton in ``output_dir / project_name``.

        The bootstrapper inherits the terminal so any prompt it shows reaches
        the user.

        Returns:
            The project root.

        Raises:
            BootstrapFailure: If the command fails or no ``package.json`` was
                produced.
        """
        output_dir.mkdir(parents=True, exist_ok=True)
        cmd = self.bootstrap_command(project_name)
        console.print(f"  [dim]$ {' '.join(cmd)}[/dim]")

        returncode, _, stderr = await run_command(
            cmd,
            cwd=output_dir,
            timeout=self.config.command_timeout,
            capture=False,
        )
        if returncode != 0:
            raise BootstrapFailure(
                f"`{' '.join(cmd)}` failed", returncode, stderr
            )

        project_root = output_dir / project_name
        if not (project_root / "package.json").is_file():
            raise BootstrapFailure(
                f"Bootstrapper did not create {project_root / 'package.json'}", returncode
            )
        return project_root

    async def install(self, project_root: Path, dependencies: DependencySet) -> list[list[str]]:
        """Install *dependencies* inside *project_root*, runtime packages first.

        Returns:
            The commands that were run.

        Raises:
            InstallFailure: On the first command that exits non-zero.
        """
        commands = dependencies.install_commands(self.config.npm)
        for cmd in commands:
            console.print(f"  [dim]$ {' '.join(cmd)}[/dim]")
            returncode, _, stderr = await run_command(
                cmd,
                cwd=project_root,
                timeout=self.config.command_timeout,
            )
            if returncode != 0:
                raise InstallFailure(f"`{' '.join(cmd)}` failed", returncode, stderr)
        return commands

"""reactforge pipeline orchestrator.

Runs the fixed scaffolding sequence for one project name:

Step 1: BOOTSTRAP    -- ``npm create vite@latest <name> -- --template react-ts``.
Step 2: DEPENDENCIES -- declare (and by default install) the npm packages.
Step 3: SYNTHESIZE   -- lay the template down over the skeleton.
Step 4: CLEANUP      -- remove the default stylesheet (best effort).
Step 5: MANIFEST     -- merge the automation scripts into package.json.

Usage::

    reactforge my-app
    python -m reactforge.pipeline my-app
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
import traceback
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from rich.markup import escape
from rich.panel import Panel

from .config import Config
from .errors import ReactForgeError
from .scaffolder.catalog import DEPENDENCIES, DESIRED_SCRIPTS
from .scaffolder.generator import ProjectGenerator
from .scaffolder.manifest import MANIFEST_FILE, ManifestMerger
from .toolchain import Toolchain
from .utils import (
    console,
    format_duration,
    print_error,
    print_step_header,
    print_success,
    print_summary_table,
    print_warning,
    validate_project_name,
)

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class StepFailed(ReactForgeError):
    """Raised when a step that must succeed fails."""

    def __init__(self, step: str, error: BaseException) -> None:
        self.step = step
        self.error = error
        self.exit_code = error.exit_code if isinstance(error, ReactForgeError) else 1
        super().__init__(f"Step '{step}' failed: {error}")


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


class StepResult(BaseModel):
    """Outcome of one pipeline step."""

    name: str
    status: str = "completed"  # completed | skipped | deferred | warning | failed
    detail: str = ""
    duration: str = ""


@dataclass
class Step:
    """A named unit of work and whether its failure may be tolerated."""

    name: str
    action: Callable[[], Awaitable[StepResult]]
    best_effort: bool = False


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class Pipeline:
    """Drives one scaffolding run.

    Steps run strictly in order; each later step relies on files produced by
    the earlier ones.  A failing best-effort step is reported as a warning
    and the run continues.  Any other failure stops the run; files already
    written are left in place.

    Attributes:
        config: Global configuration.
        toolchain: Wrapper around the external bootstrapper and installer.
        state: Accumulated run state, returned by :meth:`run`.
    """

    def __init__(self, config: Config, toolchain: Toolchain | None = None) -> None:
        self.config = config
        self.toolchain = toolchain or Toolchain(config.toolchain)
        self.state: dict[str, Any] = {
            "started_at": datetime.now(timezone.utc).isoformat(),
            "steps": [],
            "success": False,
            "exit_code": 1,
        }
        self.project_name = ""
        self.project_root = Path()

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def run(self, project_name: str | None) -> dict[str, Any]:
        """Execute every step for *project_name*.

        Returns:
            The final state dictionary, including ``success``, ``exit_code``
            and, on failure, ``failed_step`` and ``error``.

        Raises:
            MissingArgument: If *project_name* is empty (nothing is touched).
            InvalidProjectName: If *project_name* is unsafe (nothing is touched).
        """
        self.project_name = validate_project_name(project_name)
        self.project_root = self.config.project_root(self.project_name)
        self.state["project_name"] = self.project_name
        self.state["project_root"] = str(self.project_root)

        run_start = time.monotonic()
        console.print(
            Panel(
                f"[bold bright_cyan]Creating project: {self.project_name}[/bold bright_cyan]\n"
                f"Output   : {self.config.output_dir.resolve()}\n"
                f"Template : {self.config.toolchain.template}",
                title="[bold]reactforge[/bold]",
                border_style="bright_cyan",
            )
        )

        for index, step in enumerate(self._build_steps(), start=1):
            print_step_header(index, step.name.upper())
            step_start = time.monotonic()
            try:
                result = await step.action()
            except Exception as exc:
                elapsed = format_duration(time.monotonic() - step_start)
                if step.best_effort:
                    print_warning(f"  {step.name} failed (ignored): {escape(str(exc))}")
                    self._record(StepResult(
                        name=step.name, status="warning", detail=str(exc), duration=elapsed
                    ))
                    continue

                failure = StepFailed(step.name, exc)
                self._record(StepResult(
                    name=step.name, status="failed", detail=str(exc), duration=elapsed
                ))
                self.state["failed_step"] = step.name
                self.state["error"] = str(exc)
                self.state["exit_code"] = failure.exit_code
                print_error(f"{escape(str(failure))}")
                if not isinstance(exc, ReactForgeError):
                    console.print(f"[dim]{escape(traceback.format_exc())}[/dim]")
                break

            result.duration = format_duration(time.monotonic() - step_start)
            self._record(result)
            print_success(f"  {step.name}: {result.status} in {result.duration}")
        else:
            self.state["success"] = True
            self.state["exit_code"] = 0

        self.state["total_duration"] = format_duration(time.monotonic() - run_start)
        self.state["finished_at"] = datetime.now(timezone.utc).isoformat()
        self._print_final_summary()
        return self.state

    def _build_steps(self) -> list[Step]:
        """Return the fixed, non-reorderable step sequence."""
        return [
            Step("bootstrap", self.step_bootstrap),
            Step("dependencies", self.step_dependencies),
            Step("synthesize", self.step_synthesize),
            Step("cleanup", self.step_cleanup, best_effort=True),
            Step("manifest", self.step_manifest),
        ]

    def _record(self, result: StepResult) -> None:
        self.state["steps"].append(result.model_dump())

    # ------------------------------------------------------------------
    # Step 1: BOOTSTRAP
    # ------------------------------------------------------------------

    async def step_bootstrap(self) -> StepResult:
        """Create the skeleton, unless a previous run already did."""
        if (self.project_root / MANIFEST_FILE).is_file():
            console.print(
                f"  {self.project_root / MANIFEST_FILE} exists -- "
                "skipping the bootstrapper and updating in place."
            )
            return StepResult(name="bootstrap", status="skipped", detail="already bootstrapped")

        await self.toolchain.bootstrap(self.project_name, self.config.output_dir)
        return StepResult(name="bootstrap", detail=f"created {self.project_root}")

    # ------------------------------------------------------------------
    # Step 2: DEPENDENCIES
    # ------------------------------------------------------------------

    async def step_dependencies(self) -> StepResult:
        """Install the declared packages, or print the commands to run later."""
        counts = f"{len(DEPENDENCIES.runtime)} runtime, {len(DEPENDENCIES.dev)} dev packages"
        if not self.config.toolchain.install_dependencies:
            console.print("  Installation deferred. Run inside the project:")
            for cmd in DEPENDENCIES.install_commands(self.config.toolchain.npm):
                console.print(f"    {' '.join(cmd)}", markup=False, highlight=False)
            return StepResult(name="dependencies", status="deferred", detail=counts)

        await self.toolchain.install(self.project_root, DEPENDENCIES)
        return StepResult(name="dependencies", detail=f"installed {counts}")

    # ------------------------------------------------------------------
    # Step 3: SYNTHESIZE
    # ------------------------------------------------------------------

    async def step_synthesize(self) -> StepResult:
        """Write the template files, environment profiles and Docker files."""
        generator = ProjectGenerator(self.project_name)
        report = await generator.generate(self.project_root)
        console.print(
            f"  {len(report.directories)} directories, {len(report.written)} files written"
        )
        return StepResult(
            name="synthesize",
            status="warning" if report.warnings else "completed",
            detail=f"{len(report.written)} written, {len(report.skipped)} kept",
        )

    # ------------------------------------------------------------------
    # Step 4: CLEANUP
    # ------------------------------------------------------------------

    async def step_cleanup(self) -> StepResult:
        """Remove the bootstrapper's default stylesheet and its import."""
        generator = ProjectGenerator(self.project_name)
        report = await generator.remove_default_stylesheet(self.project_root)
        if report.warnings:
            return StepResult(name="cleanup", status="warning", detail="; ".join(report.warnings))
        return StepResult(
            name="cleanup",
            detail=f"{len(report.deleted)} deleted, {len(report.written)} updated",
        )

    # ------------------------------------------------------------------
    # Step 5: MANIFEST
    # ------------------------------------------------------------------

    async def step_manifest(self) -> StepResult:
        """Add missing automation scripts to package.json."""
        merger = ManifestMerger(DESIRED_SCRIPTS)
        result = await merger.merge(self.project_root / MANIFEST_FILE)
        if result.added:
            console.print(f"  Added scripts: {', '.join(result.added)}")
        if result.preserved:
            console.print(f"  Kept existing scripts: {', '.join(result.preserved)}")
        return StepResult(
            name="manifest",
            status="completed" if result.changed else "skipped",
            detail=f"{len(result.added)} added, {len(result.preserved)} kept",
        )

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def _print_final_summary(self) -> None:
        """Print the step table and the final status panel."""
        print_summary_table(
            {
                s["name"]: f"{s['status']} ({s['duration']}) {s['detail']}".strip()
                for s in self.state["steps"]
            },
            title="Steps",
        )

        if self.state["success"]:
            console.print(
                Panel(
                    "[bold green]Project ready![/bold green]\n\n"
                    f"cd {self.project_name} && npm install && npm run dev",
                    title=f"[bold]Done in {self.state['total_duration']}[/bold]",
                    border_style="bold green",
                )
            )
        else:
            completed = [
                s["name"] for s in self.state["steps"] if s["status"] != "failed"
            ]
            console.print(
                Panel(
                    f"[bold red]Failed at step: {self.state.get('failed_step', '?')}[/bold red]\n"
                    f"Completed before failure: {', '.join(completed) or 'none'}\n"
                    f"Files already written under {self.project_root} were left in place.",
                    title="[bold]reactforge failed[/bold]",
                    border_style="bold red",
                )
            )


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reactforge",
        description="Scaffold a React + TypeScript + Vite project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  reactforge my-app\n"
            "  REACTFORGE_INSTALL=0 reactforge my-app\n"
        ),
    )
    parser.add_argument(
        "project_name",
        nargs="?",
        default=None,
        help="Name of the project directory to create",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``reactforge`` and ``python -m reactforge.pipeline``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Validate before constructing anything that could touch the filesystem.
    try:
        project_name = validate_project_name(args.project_name)
    except ReactForgeError as exc:
        parser.print_usage(sys.stderr)
        print_error(f"Error: {escape(str(exc))}")
        sys.exit(exc.exit_code)

    try:
        config = Config.from_env()
    except ValueError as exc:
        print_error(f"Invalid REACTFORGE_* configuration: {escape(str(exc))}")
        sys.exit(1)

    pipeline = Pipeline(config)
    state = asyncio.run(pipeline.run(project_name))

    if not state.get("success"):
        sys.exit(state.get("exit_code", 1))


if __name__ == "__main__":
    main()

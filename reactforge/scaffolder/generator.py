"""Main scaffolding orchestrator.

Takes a validated project name and lays the template down on top of the
skeleton the bootstrapper created: directory set, sources and tooling files,
environment profiles and container files.  Removing the bootstrapper's
default stylesheet is a separate, best-effort operation.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from ..utils import print_warning
from .catalog import (
    DEFAULT_APP_COMPONENT,
    DEFAULT_STYLESHEET,
    DIRECTORIES,
    TEMPLATE_ENTRIES,
    build_context,
    build_file_specs,
)
from .docker_gen import DockerGenerator
from .env_gen import EnvironmentGenerator
from .synthesizer import FileSynthesizer, SynthesisReport
from .templates import TemplateRenderer


class ProjectGenerator:
    """Synthesizes the full template into an existing project root.

    Re-running the generator on the same root rewrites every always-write
    file with identical content, so the result is the same as a single run.
    """

    def __init__(self, project_name: str, renderer: TemplateRenderer | None = None) -> None:
        self.project_name = project_name
        self.renderer = renderer or TemplateRenderer()
        self.synthesizer = FileSynthesizer()
        self.env_gen = EnvironmentGenerator(self.renderer, self.synthesizer)
        self.docker_gen = DockerGenerator(self.renderer, self.synthesizer)

    # -- Public API --------------------------------------------------------

    async def generate(self, project_root: str | Path) -> SynthesisReport:
        """Generate the template into *project_root*.

        Args:
            project_root: Root of the bootstrapped project (the directory
                that holds ``package.json``).

        Returns:
            The combined :class:`SynthesisReport` of every sub-step.

        Raises:
            SynthesisError: If a file that must be written cannot be.
        """
        root = Path(project_root)
        context = self._build_context()
        report = SynthesisReport()

        # 1. Directory set
        report.extend(await self.synthesizer.create_directories(root, DIRECTORIES))

        # 2. Sources, tooling config, README
        specs = build_file_specs(TEMPLATE_ENTRIES, self.renderer, context)
        report.extend(await self.synthesizer.apply(root, specs))

        # 3. Environment profiles
        report.extend(await self.env_gen.generate(root))

        # 4. Dockerfile and .dockerignore
        report.extend(await self.docker_gen.generate(root, context))

        return report

    # -- Context building --------------------------------------------------

    def _build_context(self) -> dict[str, Any]:
        """Build the Jinja2 template context from the project name."""
        return build_context(self.project_name)

    # -- Cleanup -----------------------------------------------------------

    async def remove_default_stylesheet(self, root: str | Path) -> SynthesisReport:
        """Delete ``src/App.css`` and drop its import from ``src/App.tsx``.

        Both actions are best effort: a failure is recorded as a warning and
        never aborts the run.
        """
        root = Path(root)
        specs = build_file_specs([DEFAULT_STYLESHEET], self.renderer, {})
        report = await self.synthesizer.apply(root, specs)

        app_component = root / DEFAULT_APP_COMPONENT
        try:
            stripped = await asyncio.to_thread(
                _strip_import, app_component, Path(DEFAULT_STYLESHEET.path).name
            )
        except OSError as exc:
            message = f"Could not update {DEFAULT_APP_COMPONENT}: {exc}"
            print_warning(f"  {message}")
            report.warnings.append(message)
        else:
            if stripped:
                report.written.append(DEFAULT_APP_COMPONENT)
        return report


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _strip_import(path: Path, needle: str) -> bool:
    """Remove every line of *path* mentioning *needle*.

    Returns ``True`` if the file existed and was changed.
    """
    if not path.is_file():
        return False

    original = path.read_text(encoding="utf-8")
    lines = original.splitlines(keepends=True)
    kept = [line for line in lines if needle not in line]
    if len(kept) == len(lines):
        return False

    path.write_text("".join(kept), encoding="utf-8")
    return True

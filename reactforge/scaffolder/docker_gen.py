"""Container build file generation.

Produces the multi-stage ``Dockerfile`` (Node build stage, nginx runtime
stage) and the ``.dockerignore`` for the generated project.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .catalog import TemplateEntry, build_file_specs
from .synthesizer import FileSynthesizer, SynthesisReport
from .templates import TemplateRenderer


class DockerGenerator:
    """Generates the container build definition and its ignore list."""

    # Output file -> template name
    _DOCKER_FILES: dict[str, str] = {
        "Dockerfile": "Dockerfile.j2",
        ".dockerignore": "dockerignore.j2",
    }

    def __init__(self, renderer: TemplateRenderer, synthesizer: FileSynthesizer) -> None:
        self.renderer = renderer
        self.synthesizer = synthesizer

    async def generate(
        self,
        project_root: Path,
        context: dict[str, Any],
    ) -> SynthesisReport:
        """Render and write the Docker files to *project_root*.

        Args:
            project_root: Directory holding the generated project.
            context: Template rendering context (needs ``node_version``).

        Returns:
            The synthesis report for the written files.
        """
        entries = [
            TemplateEntry(path=output_name, template=template_name)
            for output_name, template_name in self._DOCKER_FILES.items()
        ]
        specs = build_file_specs(entries, self.renderer, context)
        return await self.synthesizer.apply(project_root, specs)

"""Environment file generation for the development and production profiles.

Every run resets ``.env``, ``.env.development`` and ``.env.production`` to
the generator's defaults.  Unlike ``package.json`` scripts, edits made to
these files between runs are discarded: the output depends only on the
profiles, never on what is already on disk.
"""

from __future__ import annotations

from pathlib import Path

from .catalog import ENVIRONMENT_PROFILES, EnvironmentProfile, FileSpec, OverwritePolicy
from .synthesizer import FileSynthesizer, SynthesisReport
from .templates import TemplateRenderer


class EnvironmentGenerator:
    """Renders and writes the ``.env*`` profile files."""

    _TEMPLATE = "env.j2"

    def __init__(
        self,
        renderer: TemplateRenderer,
        synthesizer: FileSynthesizer,
        profiles: tuple[EnvironmentProfile, ...] = ENVIRONMENT_PROFILES,
    ) -> None:
        self.renderer = renderer
        self.synthesizer = synthesizer
        self.profiles = profiles

    def file_specs(self) -> list[FileSpec]:
        """Return one always-write spec per profile, in profile order."""
        return [
            FileSpec(
                relative_path=profile.file_name,
                content=self.renderer.render(
                    self._TEMPLATE, {"variables": profile.variables}
                ),
                policy=OverwritePolicy.ALWAYS_WRITE,
            )
            for profile in self.profiles
        ]

    async def generate(self, project_root: Path) -> SynthesisReport:
        """Write every profile under *project_root*.

        Raises:
            SynthesisError: If an environment file cannot be written.
        """
        return await self.synthesizer.apply(project_root, self.file_specs())

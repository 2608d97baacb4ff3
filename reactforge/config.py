"""reactforge configuration.

Typed settings for a scaffolding run.  The only per-project input is the
project name given on the command line; everything here describes how the
tool itself talks to the external toolchain and may be tuned through
``REACTFORGE_*`` environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


_FALSY = {"0", "false", "no", "off"}


class ToolchainConfig(BaseModel):
    """How the external bootstrapper and installer are invoked."""

    npm: str = Field(default="npm", description="Package manager executable")
    create_package: str = Field(
        default="vite@latest", description="Package passed to `npm create`"
    )
    template: str = Field(default="react-ts", description="Bootstrapper template id")
    install_dependencies: bool = Field(
        default=True,
        description="Run `npm install`; when False the commands are only printed",
    )
    command_timeout: int = Field(
        default=600, ge=10, description="Per-command timeout in seconds"
    )


class Config(BaseModel):
    """Global reactforge configuration.

    Created once by the CLI entry point (usually via :meth:`from_env`) and
    handed to the :class:`~reactforge.pipeline.Pipeline`.
    """

    output_dir: Path = Field(default=Path("."))
    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)

    def project_root(self, project_name: str) -> Path:
        """Directory the bootstrapper creates for *project_name*."""
        return self.output_dir / project_name

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            REACTFORGE_OUTPUT_DIR, REACTFORGE_NPM, REACTFORGE_CREATE_PACKAGE,
            REACTFORGE_TEMPLATE, REACTFORGE_INSTALL, REACTFORGE_COMMAND_TIMEOUT.
        """
        toolchain_kwargs: dict[str, Any] = {}
        if os.environ.get("REACTFORGE_NPM"):
            toolchain_kwargs["npm"] = os.environ["REACTFORGE_NPM"]
        if os.environ.get("REACTFORGE_CREATE_PACKAGE"):
            toolchain_kwargs["create_package"] = os.environ["REACTFORGE_CREATE_PACKAGE"]
        if os.environ.get("REACTFORGE_TEMPLATE"):
            toolchain_kwargs["template"] = os.environ["REACTFORGE_TEMPLATE"]
        if os.environ.get("REACTFORGE_INSTALL"):
            toolchain_kwargs["install_dependencies"] = (
                os.environ["REACTFORGE_INSTALL"].strip().lower() not in _FALSY
            )
        if os.environ.get("REACTFORGE_COMMAND_TIMEOUT"):
            toolchain_kwargs["command_timeout"] = int(
                os.environ["REACTFORGE_COMMAND_TIMEOUT"]
            )

        return cls(
            output_dir=Path(os.environ.get("REACTFORGE_OUTPUT_DIR", ".")),
            toolchain=ToolchainConfig(**toolchain_kwargs),
        )

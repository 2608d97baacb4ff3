"""Static catalog of everything a scaffolding run produces.

The catalog is data only: directory paths, template entries with their
overwrite policy, environment profiles, the package.json scripts the
generator wants present, and the npm dependencies it declares.  Turning
entries into concrete :class:`FileSpec` objects happens in
:func:`build_file_specs`, which renders each template as a pure function of
the render context.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class OverwritePolicy(str, Enum):
    """Per-file rule applied by the synthesizer on every run."""

    ALWAYS_WRITE = "always_write"
    WRITE_IF_ABSENT = "write_if_absent"
    DELETE_IF_PRESENT = "delete_if_present"


class TemplateEntry(BaseModel):
    """One catalog row: where a file goes and how it is produced."""

    path: str = Field(..., description="Target path relative to the project root")
    template: str | None = Field(
        default=None, description="Jinja2 template name; None for delete entries"
    )
    policy: OverwritePolicy = Field(default=OverwritePolicy.ALWAYS_WRITE)
    best_effort: bool = Field(
        default=False, description="Failures are reported as warnings, not errors"
    )


class FileSpec(BaseModel):
    """A rendered file ready for the synthesizer."""

    relative_path: str
    content: str = ""
    policy: OverwritePolicy = OverwritePolicy.ALWAYS_WRITE
    best_effort: bool = False


class EnvironmentProfile(BaseModel):
    """One ``.env*`` file and the variables it defines, in order."""

    file_name: str
    variables: dict[str, str]


class DependencySet(BaseModel):
    """npm packages the generated project needs."""

    runtime: list[str] = Field(default_factory=list)
    dev: list[str] = Field(default_factory=list)

    def install_commands(self, npm: str = "npm") -> list[list[str]]:
        """Return the ``npm install`` argument lists, runtime first."""
        commands: list[list[str]] = []
        if self.runtime:
            commands.append([npm, "install", *self.runtime])
        if self.dev:
            commands.append([npm, "install", "-D", *self.dev])
        return commands


# ---------------------------------------------------------------------------
# Directory set
# ---------------------------------------------------------------------------

DIRECTORIES: tuple[str, ...] = (
    "src/pages",
    "src/layouts",
    "src/components/ui",
    "src/services",
    "src/routes",
    "src/config",
    "src/hooks",
    "src/pages/auth",
    "src/tests",
)


# ---------------------------------------------------------------------------
# Source and tooling files
# ---------------------------------------------------------------------------

TEMPLATE_ENTRIES: tuple[TemplateEntry, ...] = (
    TemplateEntry(path="vite.config.ts", template="vite.config.ts.j2"),
    TemplateEntry(path="src/index.css", template="src/index.css.j2"),
    TemplateEntry(path="src/config/index.ts", template="src/config/index.ts.j2"),
    TemplateEntry(path="src/hooks/useAuth.ts", template="src/hooks/useAuth.ts.j2"),
    TemplateEntry(path="src/layouts/main-layout.tsx", template="src/layouts/main-layout.tsx.j2"),
    TemplateEntry(path="src/pages/home.tsx", template="src/pages/home.tsx.j2"),
    TemplateEntry(path="src/pages/dashboard.tsx", template="src/pages/dashboard.tsx.j2"),
    TemplateEntry(path="src/pages/auth/login.tsx", template="src/pages/auth/login.tsx.j2"),
    TemplateEntry(path="src/pages/auth/register.tsx", template="src/pages/auth/register.tsx.j2"),
    TemplateEntry(path="src/routes/app-router.tsx", template="src/routes/app-router.tsx.j2"),
    TemplateEntry(path="src/main.tsx", template="src/main.tsx.j2"),
    TemplateEntry(path="src/services/api.ts", template="src/services/api.ts.j2"),
    TemplateEntry(path="src/components/ui/button.tsx", template="src/components/ui/button.tsx.j2"),
    TemplateEntry(
        path="src/components/ui/protected-route.tsx",
        template="src/components/ui/protected-route.tsx.j2",
    ),
    TemplateEntry(path=".gitignore", template="gitignore.j2"),
    TemplateEntry(path="README.md", template="README.md.j2"),
)

# The bootstrapper's default stylesheet is not part of this template.
DEFAULT_STYLESHEET = TemplateEntry(
    path="src/App.css",
    policy=OverwritePolicy.DELETE_IF_PRESENT,
    best_effort=True,
)
DEFAULT_APP_COMPONENT = "src/App.tsx"


# ---------------------------------------------------------------------------
# Routes shared by the layout navigation and the router
# ---------------------------------------------------------------------------

NAV_ROUTES: tuple[dict[str, str], ...] = (
    {"path": "/", "label": "Home", "component": "Home", "module": "../pages/home"},
    {
        "path": "/dashboard",
        "label": "Dashboard",
        "component": "DashboardWrapper",
        "module": "../pages/dashboard",
    },
    {"path": "/login", "label": "Login", "component": "Login", "module": "../pages/auth/login"},
    {
        "path": "/register",
        "label": "Register",
        "component": "Register",
        "module": "../pages/auth/register",
    },
)


# ---------------------------------------------------------------------------
# Environment profiles
# ---------------------------------------------------------------------------

DEVELOPMENT_API_URL = "https://dev.api.example.com"
PRODUCTION_API_URL = "https://api.example.com"

_DEVELOPMENT_VARIABLES: dict[str, str] = {
    "VITE_API_URL": DEVELOPMENT_API_URL,
    "VITE_FEATURE_NEW_DASHBOARD": "true",
}

ENVIRONMENT_PROFILES: tuple[EnvironmentProfile, ...] = (
    EnvironmentProfile(file_name=".env.development", variables=dict(_DEVELOPMENT_VARIABLES)),
    EnvironmentProfile(
        file_name=".env.production",
        variables={
            "VITE_API_URL": PRODUCTION_API_URL,
            "VITE_FEATURE_NEW_DASHBOARD": "false",
        },
    ),
    # The default profile mirrors development.
    EnvironmentProfile(file_name=".env", variables=dict(_DEVELOPMENT_VARIABLES)),
)


# ---------------------------------------------------------------------------
# package.json scripts
# ---------------------------------------------------------------------------

DESIRED_SCRIPTS: dict[str, str] = {
    "lint": "eslint 'src/**/*.{ts,tsx}'",
    "format": "prettier --write 'src/**/*.{ts,tsx,css,md}'",
    "test": "vitest",
    "dev": "vite",
    "build": "vite build",
    "preview": "vite preview",
}

SCRIPT_DESCRIPTIONS: dict[str, str] = {
    "dev": "start Vite dev server",
    "build": "production build",
    "preview": "preview production build",
    "lint": "run ESLint",
    "format": "run Prettier",
    "test": "run Vitest",
}


# ---------------------------------------------------------------------------
# npm dependencies
# ---------------------------------------------------------------------------

DEPENDENCIES = DependencySet(
    runtime=[
        "tailwindcss",
        "@tailwindcss/vite",
        "react-router-dom",
        "axios",
        "react-hook-form",
        "@hookform/resolvers",
        "zod",
    ],
    dev=[
        "eslint",
        "prettier",
        "eslint-config-prettier",
        "eslint-plugin-react",
        "eslint-plugin-react-hooks",
        "vitest",
        "@testing-library/react",
        "@testing-library/jest-dom",
        "@testing-library/user-event",
        "jsdom",
    ],
)

NODE_VERSION = "20"


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def build_context(project_name: str) -> dict[str, Any]:
    """Build the Jinja2 render context for *project_name*."""
    env_keys: list[str] = []
    for profile in ENVIRONMENT_PROFILES:
        for key in profile.variables:
            if key not in env_keys:
                env_keys.append(key)

    return {
        "project_name": project_name,
        "nav_routes": [dict(r) for r in NAV_ROUTES],
        "production_api_url": PRODUCTION_API_URL,
        "env_keys": env_keys,
        "script_descriptions": dict(SCRIPT_DESCRIPTIONS),
        "tree": source_tree(DIRECTORIES),
        "node_version": NODE_VERSION,
    }


def source_tree(directories: tuple[str, ...] | list[str], root: str = "src") -> list[str]:
    """Render *directories* under *root* as indented README tree lines.

    A directory whose parent is also listed is indented beneath it::

        ["components/ui/", "pages/", "  auth/"]
    """
    prefix = root.rstrip("/") + "/"
    relative = sorted(d[len(prefix):] for d in directories if d.startswith(prefix))
    listed = set(relative)

    lines: list[str] = []
    for rel in relative:
        parts = rel.split("/")
        depth = 0
        for i in range(1, len(parts)):
            if "/".join(parts[:i]) in listed:
                depth = i
        shown = "/".join(parts[depth:])
        lines.append("  " * depth + shown + "/")
    return lines


def build_file_specs(
    entries: tuple[TemplateEntry, ...] | list[TemplateEntry],
    renderer: TemplateRenderer,
    context: dict[str, Any],
) -> list[FileSpec]:
    """Render catalog *entries* into :class:`FileSpec` objects, in order."""
    specs: list[FileSpec] = []
    for entry in entries:
        content = renderer.render(entry.template, context) if entry.template else ""
        specs.append(
            FileSpec(
                relative_path=entry.path,
                content=content,
                policy=entry.policy,
                best_effort=entry.best_effort,
            )
        )
    return specs

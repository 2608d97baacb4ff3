"""Shared pytest fixtures for the reactforge test suite.

Provides reusable fixtures for:
- A fake bootstrapped project (what ``npm create vite`` leaves behind)
- A mocked toolchain so no npm process is ever spawned
- Configs pointing at temporary output directories
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from reactforge.config import Config, ToolchainConfig
from reactforge.toolchain import Toolchain


# ---------------------------------------------------------------------------
# Bootstrapper output
# ---------------------------------------------------------------------------

VITE_APP_TSX = """\
import { useState } from 'react'
import reactLogo from './assets/react.svg'
import viteLogo from '/vite.svg'
import './App.css'

function App() {
  const [count, setCount] = useState(0)
  return <button onClick={() => setCount((c) => c + 1)}>count is {count}</button>
}

export default App
"""


def make_package_json(name: str, scripts: dict[str, str] | None = None) -> dict[str, Any]:
    """A package.json shaped like the one create-vite writes."""
    document: dict[str, Any] = {
        "name": name,
        "private": True,
        "version": "0.0.0",
        "type": "module",
    }
    if scripts is not None:
        document["scripts"] = scripts
    document["dependencies"] = {"react": "^19.1.0", "react-dom": "^19.1.0"}
    document["devDependencies"] = {"@vitejs/plugin-react": "^4.6.0", "vite": "^7.0.0"}
    return document


def write_skeleton(
    output_dir: Path, name: str, scripts: dict[str, str] | None = None
) -> Path:
    """Create the minimal tree the bootstrapper produces and return its root."""
    root = output_dir / name
    (root / "src").mkdir(parents=True, exist_ok=True)
    (root / "package.json").write_text(
        json.dumps(make_package_json(name, scripts), indent=2) + "\n", encoding="utf-8"
    )
    (root / "src" / "App.tsx").write_text(VITE_APP_TSX, encoding="utf-8")
    (root / "src" / "App.css").write_text("#root { margin: 0 auto; }\n", encoding="utf-8")
    (root / "src" / "index.css").write_text(":root { color: black; }\n", encoding="utf-8")
    return root


@pytest.fixture
def skeleton_factory():
    """Return :func:`write_skeleton` so tests can build custom skeletons."""
    return write_skeleton


@pytest.fixture
def skeleton(tmp_path: Path) -> Path:
    """A bootstrapped ``shop`` project without any scripts."""
    return write_skeleton(tmp_path, "shop")


# ---------------------------------------------------------------------------
# Config & toolchain
# ---------------------------------------------------------------------------


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Config whose output directory is ``tmp_path``."""
    return Config(output_dir=tmp_path, toolchain=ToolchainConfig())


@pytest.fixture
def mock_toolchain(tmp_path: Path) -> MagicMock:
    """A Toolchain whose bootstrap writes a skeleton and whose install is a no-op."""
    toolchain = MagicMock(spec=Toolchain)

    async def fake_bootstrap(project_name: str, output_dir: Path) -> Path:
        return write_skeleton(Path(output_dir), project_name)

    toolchain.bootstrap = AsyncMock(side_effect=fake_bootstrap)
    toolchain.install = AsyncMock(return_value=[])
    return toolchain

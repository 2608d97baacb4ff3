"""package.json script merging.

The manifest is treated as an explicit document value: it is loaded once,
passed through the pure :func:`merge_scripts`, and persisted with an atomic
replace.  Merging only ever adds ``scripts`` keys that are missing, so a
script the user has edited survives every re-run, and merging an already
merged document is a no-op.
"""

from __future__ import annotations

import asyncio
import copy
import json
import os
import stat
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from ..errors import ReactForgeError

MANIFEST_FILE = "package.json"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ManifestCorrupt(ReactForgeError):
    """The manifest is missing or cannot be parsed into the expected shape."""

    exit_code = 7


class ManifestWriteError(ReactForgeError):
    """The merged manifest could not be written back to disk."""

    exit_code = 8


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class MergeResult(BaseModel):
    """Outcome of merging desired scripts into a manifest."""

    added: list[str] = Field(default_factory=list)
    preserved: list[str] = Field(
        default_factory=list,
        description="Desired keys already present, left untouched",
    )

    @property
    def changed(self) -> bool:
        """``True`` if the document differs from the one loaded."""
        return bool(self.added)


# ---------------------------------------------------------------------------
# Pure document operations
# ---------------------------------------------------------------------------


def merge_scripts(
    document: dict[str, Any], desired: dict[str, str]
) -> tuple[dict[str, Any], MergeResult]:
    """Return a copy of *document* with missing *desired* scripts added.

    Existing ``scripts`` values are never replaced, even when they differ
    from the desired command.  A ``scripts`` table is appended to the
    top-level keys when the document has none; a ``null`` one is replaced
    in place.  Key order of the input is
    preserved and new scripts are appended in *desired* order.

    Raises:
        ManifestCorrupt: If ``scripts`` is neither ``null`` nor a JSON object.
    """
    merged = copy.deepcopy(document)
    # A null ``scripts`` is treated like a missing one.
    if merged.get("scripts") is None:
        merged["scripts"] = {}
    scripts = merged["scripts"]
    if not isinstance(scripts, dict):
        raise ManifestCorrupt(
            f"'scripts' must be an object, found {type(scripts).__name__}"
        )

    result = MergeResult()
    for name, command in desired.items():
        if name in scripts:
            result.preserved.append(name)
            continue
        scripts[name] = command
        result.added.append(name)

    if not result.added and document.get("scripts") is None:
        # Nothing added: leave the document exactly as loaded.
        return copy.deepcopy(document), result
    return merged, result


def dump_manifest(document: dict[str, Any]) -> str:
    """Serialize *document* the way npm writes package.json."""
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


# ---------------------------------------------------------------------------
# Disk I/O
# ---------------------------------------------------------------------------


def load_manifest(path: str | Path) -> dict[str, Any]:
    """Load and parse the manifest at *path*.

    Raises:
        ManifestCorrupt: If the file is missing, is not valid JSON, or its
            top level is not an object.
    """
    file_path = Path(path)
    try:
        raw = file_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ManifestCorrupt(f"Manifest not found: {file_path}") from exc
    except OSError as exc:
        raise ManifestCorrupt(f"Cannot read manifest {file_path}: {exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ManifestCorrupt(f"Invalid JSON in {file_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ManifestCorrupt(
            f"{file_path} must contain a JSON object, found {type(data).__name__}"
        )
    return data


def save_manifest(document: dict[str, Any], path: str | Path) -> Path:
    """Write *document* to *path* atomically.

    The content goes to a temporary file in the same directory which then
    replaces the target, so a crash never leaves a half-written manifest.

    Raises:
        ManifestWriteError: If the temporary file cannot be written or moved
            into place.  The temporary file is removed.
    """
    target = Path(path)
    content = dump_manifest(document)

    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=target.parent, prefix=".package_", suffix=".json.tmp"
        )
    except OSError as exc:
        raise ManifestWriteError(f"Cannot create temporary file next to {target}: {exc}") from exc

    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(content)
        # mkstemp creates the file 0600; keep the manifest's own mode.
        if target.exists():
            os.chmod(tmp, stat.S_IMODE(target.stat().st_mode))
        os.replace(tmp, target)
    except OSError as exc:
        tmp.unlink(missing_ok=True)
        raise ManifestWriteError(f"Cannot write {target}: {exc}") from exc
    return target


# ---------------------------------------------------------------------------
# ManifestMerger
# ---------------------------------------------------------------------------


class ManifestMerger:
    """Merges a fixed script table into a project's package.json."""

    def __init__(self, desired: dict[str, str]) -> None:
        self.desired = dict(desired)

    async def merge(self, path: str | Path) -> MergeResult:
        """Load, merge and (only when something was added) save *path*.

        Returns:
            The :class:`MergeResult` describing added and preserved keys.

        Raises:
            ManifestCorrupt: If the manifest cannot be loaded.
            ManifestWriteError: If the merged manifest cannot be saved.
        """
        document = await asyncio.to_thread(load_manifest, path)
        merged, result = merge_scripts(document, self.desired)
        if result.changed:
            await asyncio.to_thread(save_manifest, merged, path)
        return result

"""File synthesis with per-file overwrite policies.

The synthesizer is the only component that writes generated files to disk.
It creates the directory set first, then walks the file specs in order and
applies each one's :class:`~reactforge.scaffolder.catalog.OverwritePolicy`.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from pydantic import BaseModel, Field

from ..errors import ReactForgeError
from ..utils import print_warning
from .catalog import FileSpec, OverwritePolicy


class SynthesisError(ReactForgeError):
    """A file or directory could not be written or deleted."""

    exit_code = 6

    def __init__(self, path: str | Path, cause: Exception) -> None:
        self.path = str(path)
        self.cause = cause
        super().__init__(f"{self.path}: {cause}")


class SynthesisReport(BaseModel):
    """What a synthesis pass did, by relative path."""

    directories: list[str] = Field(default_factory=list)
    written: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    deleted: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    def extend(self, other: "SynthesisReport") -> None:
        """Append every list of *other* onto this report."""
        self.directories.extend(other.directories)
        self.written.extend(other.written)
        self.skipped.extend(other.skipped)
        self.deleted.extend(other.deleted)
        self.warnings.extend(other.warnings)


class FileSynthesizer:
    """Writes file specs under a project root.

    Specs are applied strictly in the order given; later specs may rely on
    directories or files produced by earlier ones.  No rollback is attempted
    when a spec fails.
    """

    async def create_directories(
        self, root: Path, directories: tuple[str, ...] | list[str]
    ) -> SynthesisReport:
        """Create every directory in *directories* under *root*.

        Existing directories are left untouched.

        Raises:
            SynthesisError: If a directory cannot be created.
        """
        report = SynthesisReport()
        for rel in directories:
            target = root / rel
            try:
                await asyncio.to_thread(target.mkdir, parents=True, exist_ok=True)
            except OSError as exc:
                raise SynthesisError(rel, exc) from exc
            report.directories.append(rel)
        return report

    async def apply(self, root: Path, specs: list[FileSpec]) -> SynthesisReport:
        """Apply each spec's overwrite policy under *root*.

        Args:
            root: Project root directory.
            specs: Rendered file specs, applied in order.

        Returns:
            A :class:`SynthesisReport` of written, skipped and deleted paths.
            Failures of ``best_effort`` specs are listed under ``warnings``.

        Raises:
            SynthesisError: If a spec that is not best-effort fails.
        """
        report = SynthesisReport()
        for spec in specs:
            try:
                outcome = await asyncio.to_thread(_apply_spec, root, spec)
            except OSError as exc:
                if not spec.best_effort:
                    raise SynthesisError(spec.relative_path, exc) from exc
                message = f"Could not process {spec.relative_path}: {exc}"
                print_warning(f"  {message}")
                report.warnings.append(message)
                continue

            if outcome == "written":
                report.written.append(spec.relative_path)
            elif outcome == "skipped":
                report.skipped.append(spec.relative_path)
            elif outcome == "deleted":
                report.deleted.append(spec.relative_path)
        return report


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _apply_spec(root: Path, spec: FileSpec) -> str:
    """Synchronous helper: apply one spec and say what happened.

    Returns one of ``"written"``, ``"skipped"``, ``"deleted"`` or
    ``"absent"`` (a delete whose target did not exist).
    """
    target = root / spec.relative_path

    if spec.policy is OverwritePolicy.DELETE_IF_PRESENT:
        # exists() follows links; a dangling symlink must still go.
        if not (target.is_symlink() or target.exists()):
            return "absent"
        target.unlink(missing_ok=True)
        return "deleted"

    if spec.policy is OverwritePolicy.WRITE_IF_ABSENT and target.exists():
        return "skipped"

    _write_file(target, spec.content)
    return "written"


def _write_file(path: Path, content: str) -> None:
    """Create parent dirs and write content with LF line endings."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="\n") as fh:
        fh.write(content)

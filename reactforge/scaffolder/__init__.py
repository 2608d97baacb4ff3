"""reactforge scaffolder -- synthesizes the React + Vite template.

This package holds the static template catalog and the components that lay
it down on disk: the file synthesizer with its overwrite policies, the
environment and Docker emitters, and the package.json script merger.

Quick usage::

    from reactforge.scaffolder import ManifestMerger, ProjectGenerator
    from reactforge.scaffolder.catalog import DESIRED_SCRIPTS

    report = await ProjectGenerator("shop").generate("./shop")
    result = await ManifestMerger(DESIRED_SCRIPTS).merge("./shop/package.json")
"""

from reactforge.scaffolder.catalog import FileSpec, OverwritePolicy
from reactforge.scaffolder.generator import ProjectGenerator
from reactforge.scaffolder.manifest import (
    ManifestCorrupt,
    ManifestMerger,
    ManifestWriteError,
    MergeResult,
)
from reactforge.scaffolder.synthesizer import FileSynthesizer, SynthesisError, SynthesisReport
from reactforge.scaffolder.templates import TemplateRenderer

__all__ = [
    "FileSpec",
    "FileSynthesizer",
    "ManifestCorrupt",
    "ManifestMerger",
    "ManifestWriteError",
    "MergeResult",
    "OverwritePolicy",
    "ProjectGenerator",
    "SynthesisError",
    "SynthesisReport",
    "TemplateRenderer",
]

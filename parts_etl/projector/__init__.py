"""Projector Service.

Filters raw search results, extracts the configured columns and renders
them as JSON rows and CSV text.

Main components:
- ExtractionRule / Extracted: Named extractors with tagged results (rules.py)
- project: Filter + extract into a Projection (project.py)
- write_outputs: Persist the JSON and CSV artifacts (writer.py)
"""

from .project import Projection, project, to_csv, to_json
from .rules import Extracted, ExtractionRule, path_rule, require_paths, resolve_path
from .writer import FileWriteError, write_outputs

__all__ = [
    "Extracted",
    "ExtractionRule",
    "FileWriteError",
    "Projection",
    "path_rule",
    "project",
    "require_paths",
    "resolve_path",
    "to_csv",
    "to_json",
    "write_outputs",
]

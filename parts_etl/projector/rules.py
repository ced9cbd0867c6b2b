"""
Extraction Rules

An extraction rule maps one raw search result to one output cell. An ordered
list of rules defines the output schema: rule order is column order in both
the JSON rows and the CSV file.

Raw records come straight from the remote API and are not validated, so every
rule reports a tagged `Extracted` result instead of raising. A failed cell
becomes `None` in the output row; it never drops the row.

Paths use dots to descend into mappings and integer segments to index lists:

    item.specs.breakdown_voltage_drain_to_source.value.0
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from ..source_extractor.base import RawRecord

MISSING_PLACEHOLDER = "No Data"

# Output schema for the MOSFET search: (label, path)
DEFAULT_RULE_PATHS = (
    ("Description", "snippet"),
    ("Datasheet", "item.datasheets.0.url"),
    ("URL", "item.octopart_url"),
    ("Manufacturer Part Number", "item.mpn"),
    ("Rds On", "item.specs.rds_drain_to_source_resistance_on.value.0"),
    ("Vdss", "item.specs.breakdown_voltage_drain_to_source.value.0"),
)

# A part is only kept when both electrical specs are present
DEFAULT_KEEP_PATHS = (
    "item.specs.breakdown_voltage_drain_to_source.value.0",
    "item.specs.rds_drain_to_source_resistance_on.value.0",
)


@dataclass(frozen=True)
class Extracted:
    """Result of evaluating one rule against one record."""

    ok: bool
    value: Any = None
    error: Optional[str] = None

    @classmethod
    def success(cls, value: Any) -> "Extracted":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "Extracted":
        return cls(ok=False, error=error)

    def unwrap_or_none(self) -> Any:
        return self.value if self.ok else None


def resolve_path(record: Any, path: str) -> Extracted:
    """
    Walk a dotted path through nested mappings and sequences.

    Args:
        record: Raw record (or any nested value)
        path: Dotted path, integer segments index into lists

    Returns:
        `Extracted.success(value)` if every segment resolved, otherwise
        `Extracted.failure(...)` naming the first segment that did not.
        A value of `None` at the end of the path counts as resolved.
    """
    current = record
    walked = []
    for segment in path.split("."):
        if isinstance(current, Mapping):
            if segment not in current:
                return Extracted.failure(f"missing key '{segment}' at '{'.'.join(walked) or '<root>'}'")
            current = current[segment]
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            try:
                index = int(segment)
            except ValueError:
                return Extracted.failure(f"expected list index at '{'.'.join(walked)}', got '{segment}'")
            if not -len(current) <= index < len(current):
                return Extracted.failure(f"index {index} out of range at '{'.'.join(walked)}'")
            current = current[index]
        else:
            return Extracted.failure(
                f"cannot descend into {type(current).__name__} at '{'.'.join(walked) or '<root>'}'"
            )
        walked.append(segment)
    return Extracted.success(current)


@dataclass(frozen=True)
class ExtractionRule:
    """A named extractor producing one output column."""

    label: str
    extractor: Callable[[RawRecord], Any]

    def apply(self, record: RawRecord) -> Extracted:
        """Evaluate the extractor, capturing any failure as a tagged result."""
        try:
            value = self.extractor(record)
        except Exception as e:
            return Extracted.failure(f"{type(e).__name__}: {e}")
        if isinstance(value, Extracted):
            return value
        return Extracted.success(value)


def path_rule(label: str, path: str) -> ExtractionRule:
    """Build a rule that reads `path` from each record."""
    return ExtractionRule(label=label, extractor=lambda record: resolve_path(record, path))


def rules_from_paths(pairs: Iterable[tuple[str, str]]) -> list[ExtractionRule]:
    return [path_rule(label, path) for label, path in pairs]


def require_paths(paths: Iterable[str]) -> Callable[[RawRecord], bool]:
    """
    Build a keep predicate that accepts a record only if every path
    resolves to a non-None value.
    """
    paths = tuple(paths)

    def keep(record: RawRecord) -> bool:
        for path in paths:
            result = resolve_path(record, path)
            if not result.ok or result.value is None:
                return False
        return True

    return keep


def default_rules() -> list[ExtractionRule]:
    return rules_from_paths(DEFAULT_RULE_PATHS)


def default_keep() -> Callable[[RawRecord], bool]:
    return require_paths(DEFAULT_KEEP_PATHS)


__all__ = [
    "DEFAULT_KEEP_PATHS",
    "DEFAULT_RULE_PATHS",
    "MISSING_PLACEHOLDER",
    "Extracted",
    "ExtractionRule",
    "default_keep",
    "default_rules",
    "path_rule",
    "require_paths",
    "resolve_path",
    "rules_from_paths",
]

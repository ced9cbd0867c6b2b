"""
Record Projection

Turns the raw search results into output rows and renders them:

1. filter   - keep only records accepted by the keep predicate (stable)
2. extract  - evaluate every rule against every kept record
3. render   - JSON array of arrays, and CSV text with a header line

Column meaning is positional and follows the rule order.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Sequence

from ..source_extractor.base import RawRecord
from .rules import MISSING_PLACEHOLDER, ExtractionRule

logger = logging.getLogger(__name__)

OutputRow = list[Any]


@dataclass
class Projection:
    """Projected rows together with the labels that give them meaning."""

    labels: list[str]
    rows: list[OutputRow]
    failed_cells: int = 0
    dropped: int = 0
    missing_placeholder: str = field(default=MISSING_PLACEHOLDER)

    @property
    def json_rows(self) -> str:
        return to_json(self.rows)

    @property
    def csv_text(self) -> str:
        return to_csv(self.labels, self.rows, self.missing_placeholder)


def filter_records(
    records: Iterable[RawRecord], keep: Callable[[RawRecord], bool]
) -> list[RawRecord]:
    """Return the records accepted by `keep`, in their original order."""
    return [record for record in records if keep(record)]


def extract_row(record: RawRecord, rules: Sequence[ExtractionRule]) -> tuple[OutputRow, int]:
    """
    Evaluate every rule against one record.

    Returns:
        Tuple of (row, number of cells that failed). Failed cells are None.
    """
    row = []
    failures = 0
    for rule in rules:
        result = rule.apply(record)
        if not result.ok:
            failures += 1
            logger.debug(
                "Extraction failed, using null",
                extra={"rule": rule.label, "error": result.error},
            )
        row.append(result.unwrap_or_none())
    return row, failures


def project(
    records: Sequence[RawRecord],
    rules: Sequence[ExtractionRule],
    keep: Callable[[RawRecord], bool],
    missing_placeholder: str = MISSING_PLACEHOLDER,
) -> Projection:
    """
    Filter, then extract every surviving record into an output row.

    Args:
        records: Raw search results in fetch order
        rules: Ordered extraction rules (the output schema)
        keep: Predicate deciding which records are projected
        missing_placeholder: CSV token for null cells

    Returns:
        A `Projection` with one row per kept record, each row exactly
        `len(rules)` long.
    """
    kept = filter_records(records, keep)
    rows = []
    failed_cells = 0
    for record in kept:
        row, failures = extract_row(record, rules)
        rows.append(row)
        failed_cells += failures

    logger.info(
        "Projected records",
        extra={
            "records_in": len(records),
            "records_kept": len(kept),
            "columns": len(rules),
            "failed_cells": failed_cells,
        },
    )

    return Projection(
        labels=[rule.label for rule in rules],
        rows=rows,
        failed_cells=failed_cells,
        dropped=len(records) - len(kept),
        missing_placeholder=missing_placeholder,
    )


def to_json(rows: Sequence[OutputRow]) -> str:
    """Serialize rows as a JSON array of arrays."""
    # Non-primitive values from loose rules fall back to their string form
    return json.dumps(rows, default=str)


def _quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def format_label(label: str) -> str:
    """Header cells are bare unless they contain CSV special characters."""
    if any(ch in label for ch in ',"\r\n'):
        return _quote(label.replace("\r", "").replace("\n", ""))
    return label


def format_cell(value: Any, missing_placeholder: str = MISSING_PLACEHOLDER) -> str:
    """
    Render one CSV cell.

    Null values become the bare placeholder token. Anything else is
    stringified, stripped of line breaks, quote-doubled and quote-wrapped.
    """
    if value is None:
        return missing_placeholder
    if isinstance(value, bool):
        text = "true" if value else "false"
    else:
        text = str(value)
    return _quote(text.replace("\r", "").replace("\n", ""))


def to_csv(
    labels: Sequence[str],
    rows: Sequence[OutputRow],
    missing_placeholder: Optional[str] = None,
) -> str:
    """Render the header line plus one line per row, `\\n` terminated."""
    placeholder = MISSING_PLACEHOLDER if missing_placeholder is None else missing_placeholder
    lines = [",".join(format_label(label) for label in labels)]
    for row in rows:
        lines.append(",".join(format_cell(value, placeholder) for value in row))
    return "\n".join(lines) + "\n"

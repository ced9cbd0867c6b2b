"""Output writers for projected parts data."""

import logging
from pathlib import Path

from .project import Projection

logger = logging.getLogger(__name__)


class FileWriteError(Exception):
    """Raised when an output file cannot be written."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


def _write_text(path: Path, text: str, kind: str) -> str:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
    except OSError as e:
        logger.error(
            "Failed to write %s output",
            kind,
            extra={"path": str(path), "error": str(e), "error_type": type(e).__name__},
        )
        raise FileWriteError(f"Cannot write {kind} output to {path}: {e}", str(path)) from e

    logger.info("%s data written", kind, extra={"path": str(path), "bytes": len(text)})
    return str(path)


def write_json(projection: Projection, json_path: str) -> str:
    return _write_text(Path(json_path), projection.json_rows, "JSON")


def write_csv(projection: Projection, csv_path: str) -> str:
    return _write_text(Path(csv_path), projection.csv_text, "CSV")


def write_outputs(projection: Projection, json_path: str, csv_path: str) -> tuple[str, str]:
    """
    Write both artifacts.

    Returns:
        Tuple of (json_path, csv_path) as written

    Raises:
        FileWriteError: If either file cannot be written
    """
    return write_json(projection, json_path), write_csv(projection, csv_path)

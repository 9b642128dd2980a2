"""CSV import/export helpers for the bundled credential store."""

from __future__ import annotations

import csv
import io
import logging
import os
import tempfile
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

EXPORT_HEADER = ("ServiceName", "Username", "Password", "Notes")
DEFAULT_EXPORT_DIRNAME = "vaultbar-exports"


@dataclass(frozen=True, slots=True)
class CsvCredential:
    """One importable/exportable row; the only place a secret sits next to metadata."""

    service_name: str
    username: str
    secret: str
    notes: str = ""


def parse_credentials_csv(text: str) -> list[CsvCredential]:
    """Parse CSV text into rows, skipping the header and incomplete rows.

    Columns are ``service, username, password[, notes]``. Rows with fewer
    than three columns or an empty service, username or password are
    skipped rather than failing the whole import.
    """
    rows: list[CsvCredential] = []
    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if header is None:
        return rows
    for line_number, row in enumerate(reader, start=2):
        if len(row) < 3:
            logger.debug("Skipping CSV line %d: expected at least 3 columns", line_number)
            continue
        service_name, username, secret = (cell.strip() for cell in row[:3])
        if not service_name or not username or not secret:
            logger.debug("Skipping CSV line %d: empty required field", line_number)
            continue
        notes = row[3].strip() if len(row) > 3 else ""
        rows.append(CsvCredential(service_name, username, secret, notes))
    return rows


def read_credentials_csv(path: Path) -> list[CsvCredential]:
    """Read and parse a credentials CSV file. Raises OSError on read failure."""
    return parse_credentials_csv(path.read_text(encoding="utf-8-sig"))


def build_credentials_csv(rows: Iterable[CsvCredential]) -> str:
    """Render rows as CSV text with the export header."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)
    for row in rows:
        writer.writerow([row.service_name, row.username, row.secret, row.notes])
    return buffer.getvalue()


def default_export_dir() -> Path:
    return Path.home() / DEFAULT_EXPORT_DIRNAME


def write_export_file(
    *,
    content: str,
    export_dir: Path,
    now: datetime | None = None,
) -> Path:
    """Write export content using atomic temp-file replacement."""
    timestamp = (now or datetime.now()).strftime("%Y-%m-%d_%H%M%S")
    filepath = export_dir / f"vaultbar-{timestamp}.csv"
    export_dir.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=export_dir, suffix=".tmp", prefix=".csv-")
    closed = False
    try:
        os.write(fd, content.encode("utf-8"))
        os.close(fd)
        closed = True
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, filepath)
    except BaseException:
        if not closed:
            os.close(fd)
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
    return filepath


__all__ = [
    "DEFAULT_EXPORT_DIRNAME",
    "EXPORT_HEADER",
    "CsvCredential",
    "build_credentials_csv",
    "default_export_dir",
    "parse_credentials_csv",
    "read_credentials_csv",
    "write_export_file",
]

"""
Turn an uploaded CSV blob into a header row plus data rows.

- UTF-8 only; a leading BOM is dropped.
- Cells are stripped; fully blank lines are skipped.
- Quoting/escaping is delegated to the csv module.
"""

import csv
import io
from typing import List

from app.core.exceptions import ImportStructureError


def decode_upload(raw: bytes) -> str:
    try:
        # utf-8-sig strips the BOM Excel puts in front of "CSV UTF-8" exports
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ImportStructureError("File must be UTF-8 encoded CSV text")


def parse_csv(text: str) -> List[List[str]]:
    rows: List[List[str]] = []
    try:
        for record in csv.reader(io.StringIO(text, newline="")):
            cells = [cell.strip() for cell in record]
            if any(cells):
                rows.append(cells)
    except csv.Error as exc:
        raise ImportStructureError(f"Malformed CSV: {exc}")
    return rows

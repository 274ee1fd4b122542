"""
Excel (.xlsx) uploads and templates.

An uploaded workbook is flattened to the same header + rows table the CSV
reader produces, so importers never know which format was sent. Only the
active sheet is read.
"""

import io
from datetime import date, datetime
from typing import Any, List, Sequence

from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.datavalidation import DataValidation

from app.core.exceptions import ImportStructureError

from .columns import ColumnSpec, template_header

XLSX_MAGIC = b"PK\x03\x04"

TEMPLATE_SHEET_NAME = "Import"
TEMPLATE_VALIDATION_ROWS = 1000


def is_xlsx(content: bytes, filename: str = "") -> bool:
    if filename and filename.lower().endswith(".xlsx"):
        return True
    return content.startswith(XLSX_MAGIC)


def cell_text(value: Any) -> str:
    """Render a cell the way a user would have typed it in a CSV."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        if value.hour == value.minute == value.second == 0:
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        # Excel stores every number as float: 5 comes back as 5.0
        return str(int(value))
    return str(value).strip()


def read_workbook(content: bytes) -> List[List[str]]:
    try:
        wb = load_workbook(filename=io.BytesIO(content), read_only=True, data_only=True)
    except Exception as e:
        raise ImportStructureError(f"Invalid Excel file: {e}") from e

    try:
        ws = wb.active
        if ws is None:
            raise ImportStructureError("Excel file has no active sheet")
        rows: List[List[str]] = []
        for raw in ws.iter_rows(values_only=True):
            cells = [cell_text(c) for c in raw]
            if any(cells):
                rows.append(cells)
        return rows
    finally:
        wb.close()


def build_template_workbook(specs: Sequence[ColumnSpec]) -> bytes:
    """Header row plus dropdowns on every column restricted to a fixed set of values."""
    wb = Workbook()
    ws = wb.active
    ws.title = TEMPLATE_SHEET_NAME
    ws.append(template_header(specs))

    for idx, spec in enumerate(specs, start=1):
        if not spec.choices:
            continue
        letter = get_column_letter(idx)
        dv = DataValidation(
            type="list",
            formula1='"{}"'.format(",".join(spec.choices)),
            allow_blank=True,
        )
        dv.error = f"Select a value from the {spec.label} dropdown"
        ws.add_data_validation(dv)
        dv.add(f"{letter}2:{letter}{TEMPLATE_VALIDATION_ROWS + 1}")

    bio = io.BytesIO()
    wb.save(bio)
    return bio.getvalue()

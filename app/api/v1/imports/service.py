"""
Two-phase import controller.

preview: parse → resolve columns → snapshot → validate every row. Read only.
commit:  the same validation pass against a fresh snapshot (a client's preview
         payload is never trusted), then write valid rows in file order.
"""

import csv
import io
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.enums import ImportMode, ImportType
from app.core.exceptions import ImportCommitError, ImportStructureError
from app.core.models import School, Timetable

from .columns import template_header
from .csv_reader import decode_upload, parse_csv
from .importers.base import ImportContext, Importer
from .importers.registry import IMPORTERS
from .report import ImportReport, ValidatedRow
from .spreadsheet import build_template_workbook, is_xlsx, read_workbook

logger = logging.getLogger(__name__)


def parse_uuid(value: Optional[str], label: str) -> UUID:
    try:
        return UUID(str(value).strip())
    except (TypeError, ValueError):
        raise ImportStructureError(f"Invalid {label}")


def parse_import_type(value: str) -> ImportType:
    try:
        return ImportType(value.strip().lower())
    except ValueError:
        raise ImportStructureError("Invalid import type")


def parse_mode(value: Optional[str]) -> ImportMode:
    if not value:
        return ImportMode.PREVIEW
    try:
        return ImportMode(value.strip().lower())
    except ValueError:
        raise ImportStructureError("Invalid mode: must be preview or commit")


async def _build_context(
    db: AsyncSession,
    import_type: ImportType,
    school_id: UUID,
    timetable_id: Optional[str],
) -> ImportContext:
    school = await db.get(School, school_id)
    if school is None:
        raise ImportStructureError("School not found")

    if import_type != ImportType.TIMETABLE:
        return ImportContext(school_id=school_id)

    if not timetable_id:
        raise ImportStructureError("timetableId is required for timetable import")
    tt_id = parse_uuid(timetable_id, "timetableId")
    timetable = await db.get(Timetable, tt_id)
    if timetable is None or timetable.school_id != school_id:
        raise ImportStructureError("Timetable not found")
    return ImportContext(school_id=school_id, timetable_id=tt_id)


def _read_table(content: bytes, filename: str = "") -> List[List[str]]:
    if len(content) > settings.import_max_file_bytes:
        raise ImportStructureError(
            f"File is too large (max {settings.import_max_file_bytes} bytes)"
        )
    if is_xlsx(content, filename):
        table = read_workbook(content)
    else:
        table = parse_csv(decode_upload(content))
    if len(table) < 2:
        raise ImportStructureError("CSV must have a header row and at least one data row")
    if len(table) - 1 > settings.import_max_rows:
        raise ImportStructureError(
            f"CSV has too many rows (max {settings.import_max_rows} data rows)"
        )
    return table


async def validate_rows(
    db: AsyncSession,
    importer: Importer,
    headers: List[str],
    data_rows: List[List[str]],
) -> List[ValidatedRow]:
    """Resolve columns, load the reference snapshot once and validate rows in file order."""
    importer.bind(headers)
    await importer.load_snapshot(db)
    return [importer.validate(row, idx) for idx, row in enumerate(data_rows, start=1)]


async def commit_rows(
    db: AsyncSession,
    importer: Importer,
    report: ImportReport,
) -> None:
    """Write every valid row and fill the report counts.

    Counts are per row: a row belonging to a matched entity counts as updated,
    any other valid row as created.
    """
    per_row = settings.import_commit_per_row
    report.skipped = report.error_count
    unit_row = 0
    try:
        for unit in importer.write_units(report.rows):
            unit_row = unit.rows[0].row_index
            await importer.commit_unit(db, unit)
            if per_row:
                await db.commit()
            if unit.matched_id is not None:
                report.updated += len(unit.rows)
            else:
                report.created += len(unit.rows)
        await db.commit()
    except Exception as exc:
        await db.rollback()
        logger.exception(
            "Import write failed at row %s (%s, school=%s)",
            unit_row, importer.import_type.value, importer.context.school_id,
        )
        if per_row:
            message = f"Import failed at row {unit_row}; rows before it were saved"
        else:
            message = f"Import failed at row {unit_row}; no changes were saved"
        raise ImportCommitError(message, unit_row) from exc


async def run_import(
    db: AsyncSession,
    *,
    import_type: Optional[str],
    school_id: Optional[str],
    content: Optional[bytes],
    mode: Optional[str] = None,
    timetable_id: Optional[str] = None,
    filename: Optional[str] = None,
) -> ImportReport:
    if not import_type or not school_id or content is None:
        raise ImportStructureError("Missing required fields")

    kind = parse_import_type(import_type)
    run_mode = parse_mode(mode)
    school_uuid = parse_uuid(school_id, "schoolId")

    table = _read_table(content, filename or "")
    headers, data_rows = table[0], table[1:]

    context = await _build_context(db, kind, school_uuid, timetable_id)
    importer = IMPORTERS[kind](context)
    report = ImportReport(mode=run_mode, rows=await validate_rows(db, importer, headers, data_rows))

    if run_mode == ImportMode.COMMIT:
        await commit_rows(db, importer, report)

    logger.info(
        "Import %s/%s school=%s total=%d errors=%d created=%d updated=%d",
        kind.value, run_mode.value, school_uuid, report.total, report.error_count,
        report.created, report.updated,
    )
    return report


def build_template(import_type: ImportType) -> str:
    """CSV header line for an import type, spelled the way the resolver expects."""
    buf = io.StringIO()
    csv.writer(buf, lineterminator="\n").writerow(template_header(IMPORTERS[import_type].columns))
    return buf.getvalue()


def build_xlsx_template(import_type: ImportType) -> bytes:
    return build_template_workbook(IMPORTERS[import_type].columns)

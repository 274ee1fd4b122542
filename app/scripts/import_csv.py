"""
Run a bulk import from the command line (same engine as POST /api/v1/import).

Preview is the default; nothing is written unless --commit is given.

Usage:
  python -m app.scripts.import_csv --type teachers --school-id <uuid> --file teachers.csv
  python -m app.scripts.import_csv --type grades --school-id <uuid> --file grades.csv --commit
  python -m app.scripts.import_csv --type timetable --school-id <uuid> --timetable-id <uuid> --file lessons.csv
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from app.api.v1.imports import service
from app.core.config import settings
from app.core.enums import ImportMode, ImportType
from app.core.exceptions import ServiceError
from app.core.logging import configure_logging
from app.db.session import AsyncSessionLocal


async def run(
    import_type: str,
    school_id: str,
    path: Path,
    commit: bool,
    timetable_id: Optional[str] = None,
    show_all: bool = False,
) -> int:
    async with AsyncSessionLocal() as session:
        try:
            report = await service.run_import(
                session,
                import_type=import_type,
                school_id=school_id,
                content=path.read_bytes(),
                mode=(ImportMode.COMMIT if commit else ImportMode.PREVIEW).value,
                timetable_id=timetable_id,
                filename=path.name,
            )
        except ServiceError as e:
            print(f"Import rejected: {e.message}")
            return 1

    print(f"{report.total} rows, {report.error_count} with errors")
    for row in report.rows:
        if row.errors:
            print(f"  Row {row.row_index}: {'; '.join(row.errors)}")
        elif show_all:
            print(f"  Row {row.row_index}: {row.status.value}")
    if commit:
        print(f"Created {report.created}, updated {report.updated}, skipped {report.skipped}")
    else:
        print("Preview only (use --commit to write)")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Preview or commit a CSV bulk import")
    parser.add_argument("--type", required=True, choices=[t.value for t in ImportType])
    parser.add_argument("--school-id", required=True, help="Target school UUID")
    parser.add_argument("--file", required=True, type=Path, help="UTF-8 CSV or .xlsx file")
    parser.add_argument("--timetable-id", default=None, help="Required for --type timetable")
    parser.add_argument("--commit", action="store_true", help="Write valid rows (default: preview)")
    parser.add_argument("--all", action="store_true", help="Also list rows without errors")
    args = parser.parse_args()

    configure_logging(settings.log_level)
    sys.exit(asyncio.run(run(args.type, args.school_id, args.file, args.commit, args.timetable_id, args.all)))


if __name__ == "__main__":
    main()

"""
Common contract for per-entity importers.

One importer instance serves one request:

    importer.bind(headers)            # resolve columns, structural check
    await importer.load_snapshot(db)  # bulk-read everything rows may reference
    importer.validate(raw_row, n)     # -> ValidatedRow, pure (no I/O)
    importer.write_units(rows)        # valid rows grouped into write units
    await importer.commit_unit(db, u) # create or update, caller commits
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Iterable, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import ImportType

from ..columns import ColumnMapping, ColumnSpec, resolve_columns
from ..report import ValidatedRow

DEFAULT_COLOR = "#4f6ef7"

_INT_RE = re.compile(r"^[+-]?\d+$")


@dataclass
class ImportContext:
    school_id: UUID
    timetable_id: Optional[UUID] = None


@dataclass
class WriteUnit:
    """Rows written together. Plain importers use one row per unit."""

    rows: List[ValidatedRow]
    matched_id: Optional[UUID] = None


def parse_int(text: str) -> Optional[int]:
    """Strict integer parse; None for anything that is not a plain base-10 integer."""
    text = (text or "").strip()
    if not _INT_RE.match(text):
        return None
    return int(text)


def parse_bounded_int(
    text: str,
    errors: List[str],
    message: str,
    minimum: int = 1,
    maximum: Optional[int] = None,
) -> Optional[int]:
    value = parse_int(text)
    if value is None or value < minimum or (maximum is not None and value > maximum):
        errors.append(message)
        return None
    return value


def split_list(text: str, sep: str = ";") -> List[str]:
    return [part.strip() for part in (text or "").split(sep) if part.strip()]


async def load_school_entities(db: AsyncSession, model: Any, school_id: UUID) -> List[Any]:
    """Snapshot of a school's entities in stable store order (oldest first)."""
    result = await db.execute(
        select(model)
        .where(model.school_id == school_id)
        .order_by(model.created_at, model.id)
    )
    return list(result.scalars().all())


class Importer(ABC):
    import_type: ClassVar[ImportType]
    columns: ClassVar[Tuple[ColumnSpec, ...]]

    def __init__(self, context: ImportContext) -> None:
        self.context = context
        self.mapping: Optional[ColumnMapping] = None

    def bind(self, headers: Sequence[str]) -> ColumnMapping:
        self.mapping = resolve_columns(headers, self.columns)
        return self.mapping

    def cell(self, row: Sequence[str], field_name: str, default: str = "") -> str:
        return self.mapping.value(row, field_name, default)

    @abstractmethod
    async def load_snapshot(self, db: AsyncSession) -> None:
        ...

    @abstractmethod
    def validate(self, row: Sequence[str], row_index: int) -> ValidatedRow:
        ...

    def write_units(self, rows: Sequence[ValidatedRow]) -> Iterable[WriteUnit]:
        for row in rows:
            if row.is_valid:
                yield WriteUnit(rows=[row], matched_id=row.matched_id)

    async def commit_unit(self, db: AsyncSession, unit: WriteUnit) -> None:
        row = unit.rows[0]
        if unit.matched_id is not None:
            await self.update_row(db, row)
        else:
            await self.create_row(db, row)

    # Hooks for the default one-row-per-unit commit_unit. Importers that never
    # create or never update a single row (grades write whole groups, lessons
    # never match) leave the matching hook unsupported.
    async def create_row(self, db: AsyncSession, row: ValidatedRow) -> None:
        raise NotImplementedError(f"{self.import_type.value} rows cannot be created one by one")

    async def update_row(self, db: AsyncSession, row: ValidatedRow) -> None:
        raise NotImplementedError(f"{self.import_type.value} rows cannot be updated")

    @staticmethod
    def finish_row(
        row_index: int,
        data: Dict[str, str],
        errors: List[str],
        values: Dict[str, Any],
        match: Any = None,
    ) -> ValidatedRow:
        """Build the row; a match is only recorded for rows without errors."""
        return ValidatedRow(
            row_index=row_index,
            data=data,
            errors=errors,
            matched_id=match.id if match is not None and not errors else None,
            values=values,
        )


async def get_for_update(db: AsyncSession, model: Any, entity_id: UUID) -> Any:
    obj = await db.get(model, entity_id)
    if obj is None:
        # deleted by another writer after the snapshot was taken
        raise LookupError(f"{model.__name__} {entity_id} no longer exists")
    return obj

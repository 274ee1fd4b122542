"""
Per-row validation results and the aggregate report returned to the caller.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from uuid import UUID

from app.core.enums import ImportMode, RowStatus


@dataclass
class ValidatedRow:
    row_index: int                       # 1-based data row number (header excluded)
    data: Dict[str, str]
    errors: List[str] = field(default_factory=list)
    matched_id: Optional[UUID] = None
    # typed values and resolved ids used by the commit pass; never serialized
    values: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def status(self) -> RowStatus:
        if self.errors:
            return RowStatus.ERROR
        if self.matched_id is not None:
            return RowStatus.UPDATE
        return RowStatus.OK

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "row_index": self.row_index,
            "data": self.data,
            "status": self.status.value,
            "errors": self.errors,
            "matched_id": self.matched_id,
        }


@dataclass
class ImportReport:
    mode: ImportMode
    rows: List[ValidatedRow] = field(default_factory=list)
    created: int = 0
    updated: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return len(self.rows)

    @property
    def error_count(self) -> int:
        return sum(1 for r in self.rows if not r.is_valid)

    def to_dict(self) -> dict:
        d = {
            "total": self.total,
            "rows": [r.to_dict() for r in self.rows],
        }
        if self.mode == ImportMode.COMMIT:
            d.update(created=self.created, updated=self.updated, skipped=self.skipped)
        return d

"""
Header → field mapping driven by static alias tables.

Column order in an uploaded file is irrelevant: every importer declares
its fields with the header spellings (English/French) it accepts, and the
mapping is resolved once per file.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from app.core.exceptions import ImportStructureError

from .matching import normalize_name


@dataclass(frozen=True)
class ColumnSpec:
    field: str
    label: str  # canonical header, used in templates and error messages
    aliases: Tuple[str, ...]
    required: bool = False
    choices: Tuple[str, ...] = ()  # closed value set, offered as a dropdown in xlsx templates


class ColumnMapping:
    """Field name → header index (or None when the file has no such column)."""

    def __init__(self, indexes: Dict[str, Optional[int]]) -> None:
        self._indexes = indexes

    def index(self, field: str) -> Optional[int]:
        return self._indexes.get(field)

    def has(self, field: str) -> bool:
        return self.index(field) is not None

    def value(self, row: Sequence[str], field: str, default: str = "") -> str:
        """Stripped cell for ``field``; ``default`` when the column is absent or the cell empty."""
        idx = self.index(field)
        if idx is None or idx >= len(row):
            return default
        return row[idx].strip() or default


def resolve_columns(headers: Sequence[str], specs: Sequence[ColumnSpec]) -> ColumnMapping:
    normalized = [normalize_name(h) for h in headers]
    indexes: Dict[str, Optional[int]] = {}
    missing: List[str] = []

    for spec in specs:
        aliases = {normalize_name(a) for a in spec.aliases}
        # first header (left to right) equal to any alias wins
        idx = next((i for i, h in enumerate(normalized) if h in aliases), None)
        indexes[spec.field] = idx
        if idx is None and spec.required:
            missing.append(spec.label)

    if missing:
        raise ImportStructureError(_missing_columns_message(missing))
    return ColumnMapping(indexes)


def template_header(specs: Sequence[ColumnSpec]) -> List[str]:
    return [spec.label for spec in specs]


def _missing_columns_message(labels: List[str]) -> str:
    if len(labels) == 1:
        return f'CSV must have a "{labels[0]}" column'
    return f"CSV must have {', '.join(labels[:-1])} and {labels[-1]} columns"

from typing import List, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import ImportType, SubjectCategory
from app.core.models import Subject

from ..columns import ColumnSpec
from ..matching import match_by_key, normalize_name
from ..report import ValidatedRow
from .base import DEFAULT_COLOR, Importer, get_for_update, load_school_entities

VALID_CATEGORIES = [c.value for c in SubjectCategory]


class SubjectImporter(Importer):
    import_type = ImportType.SUBJECTS
    columns = (
        ColumnSpec("name", "Name", ("name", "subject", "nom", "matière"), required=True),
        ColumnSpec("name_fr", "Name (French)", ("name (french)", "nom (français)", "french", "namefr")),
        ColumnSpec("name_ar", "Name (Arabic)", ("name (arabic)", "nom (arabe)", "arabic", "namear")),
        ColumnSpec("category", "Category", ("category", "catégorie", "type"), choices=tuple(VALID_CATEGORIES)),
        ColumnSpec("color", "Color", ("color", "couleur", "colorhex")),
    )

    async def load_snapshot(self, db: AsyncSession) -> None:
        self.subjects = await load_school_entities(db, Subject, self.context.school_id)

    def validate(self, row: Sequence[str], row_index: int) -> ValidatedRow:
        errors: List[str] = []

        name = self.cell(row, "name")
        if not name:
            errors.append("Name is required")

        category = self.cell(row, "category", SubjectCategory.OTHER.value).upper()
        if category not in VALID_CATEGORIES:
            errors.append(f"Invalid category: {category}. Must be one of: {', '.join(VALID_CATEGORIES)}")

        match = match_by_key(self.subjects, normalize_name(name)) if name else None

        return self.finish_row(
            row_index,
            data={
                "name": name,
                "name_fr": self.cell(row, "name_fr"),
                "name_ar": self.cell(row, "name_ar"),
                "category": category,
                "color": self.cell(row, "color", DEFAULT_COLOR),
            },
            errors=errors,
            values={},
            match=match,
        )

    @staticmethod
    def _apply(subject: Subject, row: ValidatedRow) -> None:
        subject.name = row.data["name"]
        subject.name_fr = row.data["name_fr"] or None
        subject.name_ar = row.data["name_ar"] or None
        subject.category = row.data["category"]
        subject.color_hex = row.data["color"]

    async def create_row(self, db: AsyncSession, row: ValidatedRow) -> None:
        subject = Subject(school_id=self.context.school_id)
        self._apply(subject, row)
        db.add(subject)

    async def update_row(self, db: AsyncSession, row: ValidatedRow) -> None:
        self._apply(await get_for_update(db, Subject, row.matched_id), row)

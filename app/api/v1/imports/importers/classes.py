from typing import List, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import ImportType
from app.core.models import Grade, SchoolClass

from ..columns import ColumnSpec
from ..matching import ReferenceResolver, match_by_key, normalize_name
from ..report import ValidatedRow
from .base import DEFAULT_COLOR, Importer, get_for_update, load_school_entities, parse_bounded_int

DEFAULT_CAPACITY = 30


class ClassImporter(Importer):
    import_type = ImportType.CLASSES
    columns = (
        ColumnSpec("name", "Name", ("name", "class", "classe", "nom"), required=True),
        ColumnSpec("grade", "Grade", ("grade", "niveau", "level")),
        ColumnSpec("capacity", "Capacity", ("capacity", "capacité", "students", "size")),
        ColumnSpec("color", "Color", ("color", "couleur", "colorhex")),
    )

    async def load_snapshot(self, db: AsyncSession) -> None:
        self.classes = await load_school_entities(db, SchoolClass, self.context.school_id)
        self.grades = ReferenceResolver("grade", await load_school_entities(db, Grade, self.context.school_id))

    def validate(self, row: Sequence[str], row_index: int) -> ValidatedRow:
        errors: List[str] = []

        name = self.cell(row, "name")
        if not name:
            errors.append("Name is required")

        capacity_str = self.cell(row, "capacity", str(DEFAULT_CAPACITY))
        capacity = parse_bounded_int(capacity_str, errors, "Capacity must be a positive number")

        grade_name = self.cell(row, "grade")
        grade = self.grades.resolve(grade_name, errors)

        match = match_by_key(self.classes, normalize_name(name)) if name else None

        return self.finish_row(
            row_index,
            data={
                "name": name,
                "grade": grade_name,
                "capacity": capacity_str,
                "color": self.cell(row, "color", DEFAULT_COLOR),
            },
            errors=errors,
            values={"capacity": capacity, "grade_id": grade.id if grade else None},
            match=match,
        )

    @staticmethod
    def _apply(school_class: SchoolClass, row: ValidatedRow) -> None:
        school_class.name = row.data["name"]
        school_class.grade_id = row.values["grade_id"]
        school_class.capacity = row.values["capacity"]
        school_class.color_hex = row.data["color"]

    async def create_row(self, db: AsyncSession, row: ValidatedRow) -> None:
        school_class = SchoolClass(school_id=self.context.school_id)
        self._apply(school_class, row)
        db.add(school_class)

    async def update_row(self, db: AsyncSession, row: ValidatedRow) -> None:
        self._apply(await get_for_update(db, SchoolClass, row.matched_id), row)

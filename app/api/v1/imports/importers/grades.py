from typing import Iterable, List, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import ImportType
from app.core.models import Grade, GradeCurriculum, Subject

from ..associations import replace_associations
from ..columns import ColumnSpec
from ..grouping import GradeGroup, group_grade_rows
from ..matching import ReferenceResolver, match_by_key, normalize_name
from ..report import ValidatedRow
from .base import Importer, get_for_update, load_school_entities, parse_bounded_int

DEFAULT_LEVEL = 1
DEFAULT_HOURS_PER_WEEK = 2
MAX_HOURS_PER_WEEK = 20


class GradeImporter(Importer):
    """Grades plus curriculum lines, one (grade, subject, hours) per row.

    Rows naming the same grade are written as one grade whose curriculum is
    replaced by the union of those rows.
    """

    import_type = ImportType.GRADES
    columns = (
        ColumnSpec("grade", "Grade", ("grade", "name", "nom", "niveau"), required=True),
        ColumnSpec("level", "Level", ("level", "ordre", "order")),
        ColumnSpec("subject", "Subject", ("subject", "matière", "matiere")),
        ColumnSpec(
            "hours_per_week",
            "Hours/Week",
            ("hours/week", "hours per week", "heures/semaine", "h/week", "hoursperweek"),
        ),
    )

    async def load_snapshot(self, db: AsyncSession) -> None:
        self.grades = await load_school_entities(db, Grade, self.context.school_id)
        subjects = await load_school_entities(db, Subject, self.context.school_id) if self.mapping.has("subject") else []
        self.subjects = ReferenceResolver("subject", subjects)

    def validate(self, row: Sequence[str], row_index: int) -> ValidatedRow:
        errors: List[str] = []

        grade_name = self.cell(row, "grade")
        if not grade_name:
            errors.append("Grade name is required")

        level_str = self.cell(row, "level", str(DEFAULT_LEVEL))
        level = parse_bounded_int(level_str, errors, "Level must be a positive number")

        subject_name = self.cell(row, "subject")
        subject = self.subjects.resolve(subject_name, errors)

        hours_str = self.cell(row, "hours_per_week", str(DEFAULT_HOURS_PER_WEEK))
        hours = parse_bounded_int(
            hours_str, errors, f"Hours/Week must be between 1 and {MAX_HOURS_PER_WEEK}", maximum=MAX_HOURS_PER_WEEK
        )

        match = match_by_key(self.grades, normalize_name(grade_name)) if grade_name else None

        return self.finish_row(
            row_index,
            data={
                "grade": grade_name,
                "level": level_str,
                "subject": subject_name,
                "hours_per_week": hours_str,
            },
            errors=errors,
            values={
                "level": level,
                "subject_id": subject.id if subject else None,
                "hours_per_week": hours,
            },
            match=match,
        )

    def write_units(self, rows: Sequence[ValidatedRow]) -> Iterable[GradeGroup]:
        return group_grade_rows(rows).values()

    async def commit_unit(self, db: AsyncSession, unit: GradeGroup) -> None:
        if unit.matched_id is not None:
            grade = await get_for_update(db, Grade, unit.matched_id)
            grade.level = unit.level
        else:
            grade = Grade(school_id=self.context.school_id, name=unit.grade_name, level=unit.level)
            db.add(grade)
            await db.flush()

        # without a Subject column the file says nothing about curriculum
        if self.mapping.has("subject"):
            await replace_associations(
                db,
                GradeCurriculum,
                "grade_id",
                grade.id,
                [{"subject_id": sid, "hours_per_week": hours} for sid, hours in unit.subject_hours.items()],
            )

from typing import List, Sequence

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import ImportType
from app.core.models import Subject, Teacher, TeacherSubject

from ..associations import replace_associations
from ..columns import ColumnSpec
from ..matching import ReferenceResolver, match_by_key, normalize_name
from ..report import ValidatedRow
from .base import Importer, get_for_update, load_school_entities, parse_bounded_int, split_list

DEFAULT_MAX_PER_DAY = 6
DEFAULT_MAX_PER_WEEK = 24


def is_valid_email(email: str) -> bool:
    """Syntax check only; no DNS lookup during an import."""
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


class TeacherImporter(Importer):
    """Teachers with their taught subjects. Re-import replaces the subject list."""

    import_type = ImportType.TEACHERS
    columns = (
        ColumnSpec("name", "Name", ("name", "full name", "teacher name", "nom"), required=True),
        ColumnSpec("email", "Email", ("email", "e-mail", "courriel")),
        ColumnSpec("phone", "Phone", ("phone", "telephone", "tel", "téléphone")),
        ColumnSpec("subjects", "Subjects", ("subjects", "subject", "matière", "matières", "matieres")),
        ColumnSpec("max_periods_per_day", "Max/Day", ("max/day", "max per day", "max periods per day")),
        ColumnSpec("max_periods_per_week", "Max/Week", ("max/week", "max per week", "max periods per week")),
    )

    async def load_snapshot(self, db: AsyncSession) -> None:
        self.teachers = await load_school_entities(db, Teacher, self.context.school_id)
        self.subjects = ReferenceResolver(
            "subject", await load_school_entities(db, Subject, self.context.school_id)
        )

    def validate(self, row: Sequence[str], row_index: int) -> ValidatedRow:
        errors: List[str] = []

        name = self.cell(row, "name")
        if not name:
            errors.append("Name is required")

        email = self.cell(row, "email")
        if email and not is_valid_email(email):
            errors.append("Invalid email")

        max_day_str = self.cell(row, "max_periods_per_day", str(DEFAULT_MAX_PER_DAY))
        max_day = parse_bounded_int(max_day_str, errors, "Max periods per day must be a positive number")
        max_week_str = self.cell(row, "max_periods_per_week", str(DEFAULT_MAX_PER_WEEK))
        max_week = parse_bounded_int(max_week_str, errors, "Max periods per week must be a positive number")

        subject_names = split_list(self.cell(row, "subjects"))
        subjects = self.subjects.resolve_many(subject_names, errors)
        # "Math; math" must not produce two links to the same subject
        subject_ids = list(dict.fromkeys(s.id for s in subjects))

        match = match_by_key(self.teachers, normalize_name(name)) if name else None

        return self.finish_row(
            row_index,
            data={
                "name": name,
                "email": email,
                "phone": self.cell(row, "phone"),
                "subjects": "; ".join(subject_names),
                "max_periods_per_day": max_day_str,
                "max_periods_per_week": max_week_str,
            },
            errors=errors,
            values={
                "max_periods_per_day": max_day,
                "max_periods_per_week": max_week,
                "subject_ids": subject_ids,
            },
            match=match,
        )

    def _apply(self, teacher: Teacher, row: ValidatedRow) -> None:
        teacher.name = row.data["name"]
        teacher.email = row.data["email"] or None
        teacher.phone = row.data["phone"] or None
        teacher.max_periods_per_day = row.values["max_periods_per_day"]
        teacher.max_periods_per_week = row.values["max_periods_per_week"]

    async def _replace_subjects(self, db: AsyncSession, teacher_id, subject_ids) -> None:
        await replace_associations(
            db,
            TeacherSubject,
            "teacher_id",
            teacher_id,
            [{"subject_id": sid, "is_primary": idx == 0} for idx, sid in enumerate(subject_ids)],
        )

    async def create_row(self, db: AsyncSession, row: ValidatedRow) -> None:
        teacher = Teacher(school_id=self.context.school_id)
        self._apply(teacher, row)
        db.add(teacher)
        await db.flush()
        await self._replace_subjects(db, teacher.id, row.values["subject_ids"])

    async def update_row(self, db: AsyncSession, row: ValidatedRow) -> None:
        teacher = await get_for_update(db, Teacher, row.matched_id)
        self._apply(teacher, row)
        # a file without a Subjects column leaves existing links alone
        if self.mapping.has("subjects"):
            await self._replace_subjects(db, teacher.id, row.values["subject_ids"])

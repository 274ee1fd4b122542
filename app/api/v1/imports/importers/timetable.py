from typing import Dict, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import ImportType
from app.core.models import Lesson, Period, Room, SchoolClass, Subject, Teacher

from ..columns import ColumnSpec
from ..matching import ReferenceResolver, normalize_name
from ..report import ValidatedRow
from .base import Importer, load_school_entities, parse_int

# 0=Monday .. 6=Sunday
DAY_NAMES: Dict[str, int] = {
    "monday": 0, "tuesday": 1, "wednesday": 2, "thursday": 3, "friday": 4, "saturday": 5, "sunday": 6,
    "lundi": 0, "mardi": 1, "mercredi": 2, "jeudi": 3, "vendredi": 4, "samedi": 5, "dimanche": 6,
    "mon": 0, "tue": 1, "wed": 2, "thu": 3, "fri": 4, "sat": 5, "sun": 6,
}


def parse_day(value: str) -> Optional[int]:
    day = DAY_NAMES.get(normalize_name(value))
    if day is not None:
        return day
    num = parse_int(value)
    if num is not None and 0 <= num <= 6:
        return num
    return None


class LessonImporter(Importer):
    """Timetable lessons. Always created; duplicate lessons are not detected."""

    import_type = ImportType.TIMETABLE
    columns = (
        ColumnSpec("day", "Day", ("day", "jour", "day of week"), required=True),
        ColumnSpec("period", "Period", ("period", "période", "slot"), required=True),
        ColumnSpec("class", "Class", ("class", "classe"), required=True),
        ColumnSpec("subject", "Subject", ("subject", "matière", "matiere"), required=True),
        ColumnSpec("teacher", "Teacher", ("teacher", "enseignant", "professeur"), required=True),
        ColumnSpec("room", "Room", ("room", "salle")),
    )

    async def load_snapshot(self, db: AsyncSession) -> None:
        school_id = self.context.school_id
        self.periods = ReferenceResolver("period", await load_school_entities(db, Period, school_id))
        self.classes = ReferenceResolver("class", await load_school_entities(db, SchoolClass, school_id))
        self.subjects = ReferenceResolver("subject", await load_school_entities(db, Subject, school_id))
        self.teachers = ReferenceResolver("teacher", await load_school_entities(db, Teacher, school_id))
        self.rooms = ReferenceResolver("room", await load_school_entities(db, Room, school_id))

    def validate(self, row: Sequence[str], row_index: int) -> ValidatedRow:
        errors: List[str] = []

        day_str = self.cell(row, "day")
        day_of_week = parse_day(day_str)
        if not day_str:
            errors.append("Day is required")
        elif day_of_week is None:
            errors.append(f"Unknown day: {day_str}")

        period_name = self.cell(row, "period")
        class_name = self.cell(row, "class")
        subject_name = self.cell(row, "subject")
        teacher_name = self.cell(row, "teacher")
        room_name = self.cell(row, "room")

        period = self.periods.resolve(period_name, errors, required=True)
        school_class = self.classes.resolve(class_name, errors, required=True)
        subject = self.subjects.resolve(subject_name, errors, required=True)
        teacher = self.teachers.resolve(teacher_name, errors, required=True)
        room = self.rooms.resolve(room_name, errors)

        return self.finish_row(
            row_index,
            data={
                "day": day_str,
                "period": period_name,
                "class": class_name,
                "subject": subject_name,
                "teacher": teacher_name,
                "room": room_name,
                "day_of_week": "" if day_of_week is None else str(day_of_week),
            },
            errors=errors,
            values={
                "day_of_week": day_of_week,
                "period_id": period.id if period else None,
                "class_id": school_class.id if school_class else None,
                "subject_id": subject.id if subject else None,
                "teacher_id": teacher.id if teacher else None,
                "room_id": room.id if room else None,
            },
        )

    async def create_row(self, db: AsyncSession, row: ValidatedRow) -> None:
        db.add(
            Lesson(
                timetable_id=self.context.timetable_id,
                class_id=row.values["class_id"],
                subject_id=row.values["subject_id"],
                teacher_id=row.values["teacher_id"],
                room_id=row.values["room_id"],
                period_id=row.values["period_id"],
                day_of_week=row.values["day_of_week"],
            )
        )

from app.core.models.school import School
from app.core.models.subject import Subject
from app.core.models.teacher import Teacher, TeacherSubject
from app.core.models.grade import Grade, GradeCurriculum
from app.core.models.class_model import SchoolClass
from app.core.models.room import Room
from app.core.models.period import Period
from app.core.models.timetable import Lesson, Timetable
from app.core.models.school_event import SchoolEvent

__all__ = [
    "Grade",
    "GradeCurriculum",
    "Lesson",
    "Period",
    "Room",
    "School",
    "SchoolClass",
    "SchoolEvent",
    "Subject",
    "Teacher",
    "TeacherSubject",
    "Timetable",
]

from typing import Dict, Type

from app.core.enums import ImportType

from .base import Importer
from .classes import ClassImporter
from .events import EventImporter
from .grades import GradeImporter
from .rooms import RoomImporter
from .subjects import SubjectImporter
from .teachers import TeacherImporter
from .timetable import LessonImporter

IMPORTERS: Dict[ImportType, Type[Importer]] = {
    cls.import_type: cls
    for cls in (
        TeacherImporter,
        SubjectImporter,
        ClassImporter,
        RoomImporter,
        LessonImporter,
        GradeImporter,
        EventImporter,
    )
}

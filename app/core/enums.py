from enum import Enum


class ImportType(str, Enum):
    TEACHERS = "teachers"
    SUBJECTS = "subjects"
    CLASSES = "classes"
    ROOMS = "rooms"
    TIMETABLE = "timetable"
    GRADES = "grades"
    EVENTS = "events"


class ImportMode(str, Enum):
    PREVIEW = "preview"
    COMMIT = "commit"


class RowStatus(str, Enum):
    OK = "ok"
    UPDATE = "update"
    ERROR = "error"


class SubjectCategory(str, Enum):
    CORE = "CORE"
    ELECTIVE = "ELECTIVE"
    LANGUAGE = "LANGUAGE"
    SCIENCE = "SCIENCE"
    ARTS = "ARTS"
    SPORTS = "SPORTS"
    OTHER = "OTHER"


class RoomType(str, Enum):
    CLASSROOM = "CLASSROOM"
    LAB_SCIENCE = "LAB_SCIENCE"
    LAB_COMPUTER = "LAB_COMPUTER"
    GYM = "GYM"
    AUDITORIUM = "AUDITORIUM"
    ART_STUDIO = "ART_STUDIO"
    OTHER = "OTHER"


class EventType(str, Enum):
    EXAM = "EXAM"
    HOLIDAY = "HOLIDAY"
    TRIP = "TRIP"
    MEETING = "MEETING"
    SPORT = "SPORT"
    PARENT_DAY = "PARENT_DAY"
    CLOSURE = "CLOSURE"
    OTHER = "OTHER"


class TimetableStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"

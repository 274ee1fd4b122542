"""Timetable and its lessons. A lesson puts one class/subject/teacher in one day/period slot."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship

from app.core.enums import TimetableStatus
from app.db.session import Base


class Timetable(Base):
    __tablename__ = "timetables"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    school_id = Column(Uuid, ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    status = Column(String(20), nullable=False, default=TimetableStatus.DRAFT.value)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    school = relationship("School")


class Lesson(Base):
    __tablename__ = "lessons"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    timetable_id = Column(Uuid, ForeignKey("timetables.id", ondelete="CASCADE"), nullable=False, index=True)
    class_id = Column(Uuid, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False)
    subject_id = Column(Uuid, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False)
    teacher_id = Column(Uuid, ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False)
    room_id = Column(Uuid, ForeignKey("rooms.id", ondelete="SET NULL"), nullable=True)
    period_id = Column(Uuid, ForeignKey("periods.id", ondelete="CASCADE"), nullable=False)
    day_of_week = Column(Integer, nullable=False)  # 0=Monday .. 6=Sunday
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    timetable = relationship("Timetable")
    school_class = relationship("SchoolClass", foreign_keys=[class_id])
    subject = relationship("Subject")
    teacher = relationship("Teacher")
    room = relationship("Room")
    period = relationship("Period")

"""Grade levels and their curriculum (weekly hours per subject)."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from app.db.session import Base


class Grade(Base):
    __tablename__ = "grades"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    school_id = Column(Uuid, ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    level = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    school = relationship("School")


class GradeCurriculum(Base):
    __tablename__ = "grade_curriculum"
    __table_args__ = (
        UniqueConstraint("grade_id", "subject_id", name="uq_grade_curriculum_subject"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    grade_id = Column(Uuid, ForeignKey("grades.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id = Column(Uuid, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False)
    hours_per_week = Column(Integer, nullable=False, default=2)

    grade = relationship("Grade")
    subject = relationship("Subject")

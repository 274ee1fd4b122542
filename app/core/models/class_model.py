"""School classes (e.g. 7A, 7B). Model named SchoolClass to avoid Python 'class' keyword."""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship

from app.db.session import Base


class SchoolClass(Base):
    """A class group of students, optionally attached to a grade level."""

    __tablename__ = "classes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    school_id = Column(Uuid, ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    grade_id = Column(Uuid, ForeignKey("grades.id", ondelete="SET NULL"), nullable=True)
    name = Column(String(50), nullable=False)
    capacity = Column(Integer, nullable=False, default=30)
    color_hex = Column(String(9), nullable=False, default="#4f6ef7")
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    school = relationship("School")
    grade = relationship("Grade", foreign_keys=[grade_id])

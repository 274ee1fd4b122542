"""School calendar events (exams, holidays, trips...)."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.db.session import Base


class SchoolEvent(Base):
    """Calendar event. Identified on re-import by (title, start_date)."""

    __tablename__ = "school_events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    school_id = Column(Uuid, ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    title_fr = Column(String(255), nullable=True)
    title_ar = Column(String(255), nullable=True)
    type = Column(String(20), nullable=False, default="OTHER")  # EventType
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    color_hex = Column(String(9), nullable=False, default="#4f6ef7")
    is_recurring = Column(Boolean, nullable=False, default=False)
    description = Column(Text, nullable=True)
    affects_classes = Column(Text, nullable=False, default="[]")  # JSON list of class ids
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    school = relationship("School")

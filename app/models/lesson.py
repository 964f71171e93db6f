import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.core.constants import PlacementKindEnum


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Lesson(Base):
    __tablename__ = "lessons"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(String, index=True, nullable=False)
    description = Column(String, nullable=True)

    placement_kind = Column(Enum(PlacementKindEnum), nullable=False, default=PlacementKindEnum.GRADE)
    subject = Column(String, index=True, nullable=False)
    grade = Column(String, index=True, nullable=True)
    level = Column(String, index=True, nullable=True)
    year = Column(String, index=True, nullable=True)
    chapter = Column(String, nullable=True)
    lesson_type = Column(String, nullable=True)
    order = Column(Integer, nullable=True)

    pdf_url = Column(String, nullable=True)
    video_url = Column(String, nullable=True)
    published = Column(Boolean, nullable=False, default=False, index=True)
    created_by = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    links = relationship(
        "LessonLink",
        back_populates="lesson",
        cascade="all, delete-orphan",
        order_by="LessonLink.position",
        passive_deletes=True,
    )


class LessonLink(Base):
    __tablename__ = "links"

    id = Column(String(36), primary_key=True, default=_new_id)
    lesson_id = Column(String(36), ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    url = Column(String, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    lesson = relationship("Lesson", back_populates="links")

from datetime import datetime, timezone
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload
from typing import Any, List, Optional

from app.crud.base import CRUDBase
from app.core.constants import LessonOrderingEnum
from app.models.lesson import Lesson, LessonLink
from app.schemas.lesson import LessonCreate, LessonFilter, LessonUpdate, LinkCreate

class CRUDLesson(CRUDBase[Lesson, LessonCreate, LessonUpdate]):
    def get(self, db: Session, id: Any) -> Optional[Lesson]:
        return (
            db.query(self.model)
            .options(selectinload(self.model.links))
            .filter(self.model.id == id)
            .first()
        )

    def find_many(
        self,
        db: Session,
        *,
        filters: Optional[LessonFilter] = None,
        ordering: LessonOrderingEnum = LessonOrderingEnum.CREATED,
    ) -> List[Lesson]:
        query = db.query(self.model).options(selectinload(self.model.links))
        if filters:
            for field, value in filters.predicates().items():
                query = query.filter(getattr(self.model, field) == value)

        if ordering == LessonOrderingEnum.CURRICULUM:
            query = query.order_by(
                self.model.year.asc().nullslast(),
                self.model.subject.asc(),
                self.model.order.asc().nullslast(),
                self.model.created_at.desc(),
            )
        else:
            query = query.order_by(self.model.created_at.desc())
        return query.all()

    def count_links(self, db: Session, *, lesson_id: str) -> int:
        return db.query(func.count(LessonLink.id)).filter(LessonLink.lesson_id == lesson_id).scalar()

    def create(self, db: Session, *, obj_in: LessonCreate, created_by: str) -> Lesson:
        db_obj = self.model(**obj_in.lesson_fields(), created_by=created_by)
        db_obj.links = self._build_links(obj_in.links or [])
        try:
            db.add(db_obj)
            db.commit()
        except Exception:
            db.rollback()
            raise
        return self.get(db, id=db_obj.id)

    def update(self, db: Session, *, db_obj: Lesson, obj_in: LessonUpdate) -> Lesson:
        """Apply a partial update; raises pydantic ValidationError before touching the row."""
        merged = obj_in.merge(db_obj)
        try:
            for field, value in merged.lesson_fields().items():
                setattr(db_obj, field, value)
            if obj_in.links is not None:
                # Old rows are deleted and the new set inserted in the same transaction.
                db_obj.links.clear()
                db.flush()
                db_obj.links.extend(self._build_links(obj_in.links))
            db_obj.updated_at = datetime.now(timezone.utc)
            db.add(db_obj)
            db.commit()
        except Exception:
            db.rollback()
            raise
        return self.get(db, id=db_obj.id)

    @staticmethod
    def _build_links(links: List[LinkCreate]) -> List[LessonLink]:
        return [
            LessonLink(title=link.title, url=link.url, position=position)
            for position, link in enumerate(links)
        ]

lesson = CRUDLesson(Lesson)

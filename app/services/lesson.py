import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from app.core.constants import LessonOrderingEnum
from app.crud.lesson import lesson as crud_lesson
from app.models.lesson import Lesson
from app.schemas.lesson import LessonCreate, LessonFilter, LessonUpdate
from app.schemas.token import Actor

logger = logging.getLogger(__name__)

class LessonService:
    """Lesson operations. Mutations take the authenticated actor explicitly."""

    @staticmethod
    def _require_actor(actor: Optional[Actor]) -> Actor:
        if actor is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
        return actor

    @staticmethod
    def default_ordering(filters: LessonFilter) -> LessonOrderingEnum:
        if filters.grade is not None:
            return LessonOrderingEnum.CREATED
        return LessonOrderingEnum.CURRICULUM

    def list_lessons(
        self,
        db: Session,
        filters: LessonFilter,
        actor: Optional[Actor] = None,
        ordering: Optional[LessonOrderingEnum] = None,
    ) -> List[Lesson]:
        if actor is None:
            filters = filters.model_copy(update={"published": True})
        return crud_lesson.find_many(
            db, filters=filters, ordering=ordering or self.default_ordering(filters)
        )

    def get_lesson(self, db: Session, lesson_id: str, actor: Optional[Actor] = None) -> Lesson:
        lesson = crud_lesson.get(db, id=lesson_id)
        if not lesson or (actor is None and not lesson.published):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lesson not found.")
        return lesson

    def create_lesson(self, db: Session, lesson_in: LessonCreate, actor: Optional[Actor]) -> Lesson:
        actor = self._require_actor(actor)
        new_lesson = crud_lesson.create(db, obj_in=lesson_in, created_by=actor.id)
        logger.info(f"Lesson {new_lesson.id} created by {actor.id} with {len(new_lesson.links)} link(s)")
        return new_lesson

    def update_lesson(self, db: Session, lesson_id: str, lesson_in: LessonUpdate, actor: Optional[Actor]) -> Lesson:
        actor = self._require_actor(actor)
        lesson = crud_lesson.get(db, id=lesson_id)
        if not lesson:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lesson not found.")

        try:
            updated_lesson = crud_lesson.update(db, db_obj=lesson, obj_in=lesson_in)
        except ValidationError as exc:
            raise RequestValidationError(exc.errors())
        logger.info(f"Lesson {lesson_id} updated by {actor.id}")
        return updated_lesson

    def delete_lesson(self, db: Session, lesson_id: str, actor: Optional[Actor]) -> dict:
        actor = self._require_actor(actor)
        deleted = crud_lesson.delete(db, id=lesson_id)
        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lesson not found.")
        logger.info(f"Lesson {lesson_id} deleted by {actor.id}")
        return {"success": True}

lesson_service = LessonService()

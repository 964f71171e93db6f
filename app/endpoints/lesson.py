from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.constants import LessonOrderingEnum
from app.schemas.lesson import DeleteResponse, Lesson, LessonCreate, LessonFilter, LessonUpdate
from app.schemas.token import Actor
from app.services.lesson import lesson_service
from app.utils import deps

router = APIRouter()

@router.get("", response_model=List[Lesson])
def list_lessons(
    level: Optional[str] = None,
    year: Optional[str] = None,
    subject: Optional[str] = None,
    chapter: Optional[str] = None,
    grade: Optional[str] = None,
    published: Optional[bool] = None,
    ordering: Optional[LessonOrderingEnum] = None,
    db: Session = Depends(deps.get_db),
    actor: Optional[Actor] = Depends(deps.get_optional_actor)
):
    filters = LessonFilter(level=level, year=year, subject=subject, chapter=chapter, grade=grade, published=published)
    lessons = lesson_service.list_lessons(db, filters=filters, actor=actor, ordering=ordering)
    return [Lesson.model_validate(l) for l in lessons]

@router.get("/{lesson_id}", response_model=Lesson)
def get_lesson(
    lesson_id: str,
    db: Session = Depends(deps.get_db),
    actor: Optional[Actor] = Depends(deps.get_optional_actor)
):
    lesson = lesson_service.get_lesson(db, lesson_id=lesson_id, actor=actor)
    return Lesson.model_validate(lesson)

@router.post("", response_model=Lesson, status_code=status.HTTP_201_CREATED)
def create_lesson(
    lesson_in: LessonCreate,
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor)
):
    new_lesson = lesson_service.create_lesson(db, lesson_in=lesson_in, actor=actor)
    return Lesson.model_validate(new_lesson)

@router.put("/{lesson_id}", response_model=Lesson)
def update_lesson(
    lesson_id: str,
    lesson_in: LessonUpdate,
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor)
):
    updated_lesson = lesson_service.update_lesson(db, lesson_id=lesson_id, lesson_in=lesson_in, actor=actor)
    return Lesson.model_validate(updated_lesson)

@router.delete("/{lesson_id}", response_model=DeleteResponse)
def delete_lesson(
    lesson_id: str,
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor)
):
    response = lesson_service.delete_lesson(db, lesson_id=lesson_id, actor=actor)
    return DeleteResponse(**response)

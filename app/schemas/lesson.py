from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from urllib.parse import urlparse
from datetime import datetime

from app.core.config import settings
from app.core.constants import PlacementKindEnum


def _validate_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Must be an absolute http(s) URL.")
    return value


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case on input; serializes camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LinkCreate(CamelModel):
    title: str = Field(..., min_length=1)
    url: str

    @field_validator("title")
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError("Link title cannot be empty.")
        return v.strip()

    @field_validator("url")
    def validate_url(cls, v):
        url = _validate_url(v)
        if url is None:
            raise ValueError("Link URL cannot be empty.")
        return url


class Link(CamelModel):
    id: str
    title: str
    url: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class GradePlacement(BaseModel):
    """Simple placement: a subject taught at a grade."""
    kind: Literal[PlacementKindEnum.GRADE] = PlacementKindEnum.GRADE
    subject: str
    grade: str


class CurriculumPlacement(BaseModel):
    """Hierarchical placement: level / year / subject / chapter."""
    kind: Literal[PlacementKindEnum.CURRICULUM] = PlacementKindEnum.CURRICULUM
    level: str
    year: str
    subject: str
    chapter: Optional[str] = None
    lesson_type: str = settings.DEFAULT_LESSON_TYPE
    order: int = 0


Placement = Annotated[Union[GradePlacement, CurriculumPlacement], Field(discriminator="kind")]


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class LessonWrite(CamelModel):
    """Flat request body shared by create and update.

    The flat placement fields are normalized into a tagged ``Placement`` by
    ``placement``; a body with ``level`` or ``year`` is a curriculum placement,
    otherwise ``grade`` makes it a grade placement.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    subject: Optional[str] = None
    grade: Optional[str] = None
    level: Optional[str] = None
    year: Optional[str] = None
    chapter: Optional[str] = None
    lesson_type: Optional[str] = None
    order: Optional[int] = None
    pdf_url: Optional[str] = None
    video_url: Optional[str] = None
    published: bool = False
    links: Optional[List[LinkCreate]] = None

    @field_validator("title")
    def validate_title(cls, v):
        if not v or not v.strip():
            raise ValueError("Title cannot be empty.")
        return v.strip()

    @field_validator("description", "subject", "grade", "level", "year", "chapter", "lesson_type")
    def strip_blank(cls, v):
        return _blank_to_none(v)

    @field_validator("pdf_url", "video_url")
    def validate_media_url(cls, v):
        return _validate_url(v)

    def placement(self) -> Placement:
        if not self.subject:
            raise ValueError("Subject is required.")
        if self.level is not None or self.year is not None:
            if self.level is None or self.year is None:
                raise ValueError("Level and year are both required for a curriculum placement.")
            return CurriculumPlacement(
                level=self.level,
                year=self.year,
                subject=self.subject,
                chapter=self.chapter,
                lesson_type=self.lesson_type or settings.DEFAULT_LESSON_TYPE,
                order=self.order or 0,
            )
        if self.grade is None:
            raise ValueError("Either grade, or level and year, must be provided.")
        return GradePlacement(subject=self.subject, grade=self.grade)

    def lesson_fields(self) -> Dict[str, Any]:
        """Column values for every mutable lesson field, links excluded."""
        placement = self.placement()
        fields: Dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "pdf_url": self.pdf_url,
            "video_url": self.video_url,
            "published": self.published,
            "placement_kind": placement.kind,
            "subject": placement.subject,
            "grade": None,
            "level": None,
            "year": None,
            "chapter": None,
            "lesson_type": None,
            "order": None,
        }
        if isinstance(placement, CurriculumPlacement):
            fields.update(
                level=placement.level,
                year=placement.year,
                chapter=placement.chapter,
                lesson_type=placement.lesson_type,
                order=placement.order,
            )
        else:
            fields["grade"] = placement.grade
        return fields


class LessonCreate(LessonWrite):
    title: str

    @model_validator(mode="after")
    def validate_placement(self):
        self.placement()
        return self


STORED_FIELDS = (
    "title", "description", "subject", "grade", "level", "year", "chapter",
    "lesson_type", "order", "pdf_url", "video_url", "published",
)
CURRICULUM_FIELDS = ("level", "year", "chapter", "lesson_type", "order")


class LessonUpdate(LessonWrite):
    """Partial body: omitted keys keep their stored values.

    ``links=None`` keeps the current links, ``[]`` clears them. A body naming
    a level or year moves the lesson to a curriculum placement; one naming only
    a grade moves it to a grade placement.
    """

    def merge(self, lesson: Any) -> LessonCreate:
        """Apply the supplied keys to a stored lesson and validate the result."""
        values = {field: getattr(lesson, field) for field in STORED_FIELDS}
        changes = self.model_dump(exclude_unset=True, exclude={"links"})
        if changes.get("level") is not None or changes.get("year") is not None:
            values["grade"] = None
        elif changes.get("grade") is not None:
            values.update(dict.fromkeys(CURRICULUM_FIELDS))
        values.update(changes)
        return LessonCreate.model_validate(values)


class LessonFilter(BaseModel):
    level: Optional[str] = None
    year: Optional[str] = None
    subject: Optional[str] = None
    chapter: Optional[str] = None
    grade: Optional[str] = None
    published: Optional[bool] = None

    def predicates(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class Lesson(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    placement_kind: PlacementKindEnum
    subject: str
    grade: Optional[str] = None
    level: Optional[str] = None
    year: Optional[str] = None
    chapter: Optional[str] = None
    lesson_type: Optional[str] = None
    order: Optional[int] = None
    pdf_url: Optional[str] = None
    video_url: Optional[str] = None
    published: bool
    created_by: str
    created_at: datetime
    updated_at: datetime
    links: List[Link] = []

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )


class DeleteResponse(BaseModel):
    success: bool = True

from pydantic import ConfigDict
from typing import List, Optional

from app.core.constants import VideoKindEnum
from app.schemas.lesson import CamelModel, Link


class VideoMedia(CamelModel):
    kind: VideoKindEnum
    url: str

    model_config = ConfigDict(use_enum_values=True)


class BrowseLesson(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    subject: str
    chapter: Optional[str] = None
    lesson_type: Optional[str] = None
    video: Optional[VideoMedia] = None
    pdf_url: Optional[str] = None
    links: List[Link] = []


class ChapterGroup(CamelModel):
    name: str
    lessons: List[BrowseLesson] = []


class SubjectGroup(CamelModel):
    name: str
    chapters: List[ChapterGroup] = []


class PlacementGroup(CamelModel):
    """Top level of the browse tree: ``"{level} - {year}"`` or a grade."""
    name: str
    subjects: List[SubjectGroup] = []


class BrowseResponse(CamelModel):
    groups: List[PlacementGroup] = []
    levels: List[str] = []
    subjects: List[str] = []
    grades: List[str] = []
    total: int = 0

"""Public browse tree.

The tree is derived from the flat list of published lessons on every request
and is never stored.
"""
from typing import Dict, Iterable, List, Optional
from urllib.parse import urlparse, parse_qs
from sqlalchemy.orm import Session

from app.core.constants import DEFAULT_CHAPTER_LABEL, PlacementKindEnum, VideoKindEnum
from app.models.lesson import Lesson
from app.schemas.browse import (
    BrowseLesson,
    BrowseResponse,
    ChapterGroup,
    PlacementGroup,
    SubjectGroup,
    VideoMedia,
)
from app.schemas.lesson import LessonFilter, Link
from app.services.lesson import lesson_service


def _on_domain(hostname: str, domain: str) -> bool:
    return hostname == domain or hostname.endswith("." + domain)


def get_youtube_embed_url(url: str) -> Optional[str]:
    """Return the embeddable player URL for a YouTube link, or None."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return None

    hostname = parsed.hostname or ""
    video_id = None
    if _on_domain(hostname, "youtube.com"):
        video_id = parse_qs(parsed.query).get("v", [None])[0]
    elif _on_domain(hostname, "youtu.be"):
        video_id = parsed.path.lstrip("/") or None

    return f"https://www.youtube.com/embed/{video_id}" if video_id else None


def video_media(url: Optional[str]) -> Optional[VideoMedia]:
    if not url:
        return None
    embed_url = get_youtube_embed_url(url)
    if embed_url:
        return VideoMedia(kind=VideoKindEnum.EMBED, url=embed_url)
    return VideoMedia(kind=VideoKindEnum.LINK, url=url)


def placement_group_name(lesson: Lesson) -> str:
    if lesson.placement_kind == PlacementKindEnum.CURRICULUM:
        return f"{lesson.level} - {lesson.year}"
    return lesson.grade


def to_browse_lesson(lesson: Lesson) -> BrowseLesson:
    return BrowseLesson(
        id=lesson.id,
        title=lesson.title,
        description=lesson.description,
        subject=lesson.subject,
        chapter=lesson.chapter,
        lesson_type=lesson.lesson_type,
        video=video_media(lesson.video_url),
        pdf_url=lesson.pdf_url,
        links=[Link.model_validate(link) for link in lesson.links],
    )


def _distinct(values: Iterable[Optional[str]]) -> List[str]:
    return list(dict.fromkeys(v for v in values if v))


def group_lessons(lessons: List[Lesson]) -> List[PlacementGroup]:
    """Group lessons into placement -> subject -> chapter, each level sorted by name.

    Lessons inside a chapter keep the order they were listed in.
    """
    tree: Dict[str, Dict[str, Dict[str, List[BrowseLesson]]]] = {}
    for lesson in lessons:
        chapters = tree.setdefault(placement_group_name(lesson), {}).setdefault(lesson.subject, {})
        chapters.setdefault(lesson.chapter or DEFAULT_CHAPTER_LABEL, []).append(to_browse_lesson(lesson))

    return [
        PlacementGroup(
            name=group_name,
            subjects=[
                SubjectGroup(
                    name=subject,
                    chapters=[ChapterGroup(name=chapter, lessons=items) for chapter, items in sorted(chapters.items())],
                )
                for subject, chapters in sorted(subjects.items())
            ],
        )
        for group_name, subjects in sorted(tree.items())
    ]


class BrowseService:
    def browse(
        self,
        db: Session,
        level: Optional[str] = None,
        subject: Optional[str] = None,
        grade: Optional[str] = None,
    ) -> BrowseResponse:
        filters = LessonFilter(level=level, subject=subject, grade=grade, published=True)
        # Public path: always resolved without an actor, so drafts are excluded.
        lessons = lesson_service.list_lessons(db, filters=filters, actor=None)
        return BrowseResponse(
            groups=group_lessons(lessons),
            levels=_distinct(l.level for l in lessons),
            subjects=_distinct(l.subject for l in lessons),
            grades=_distinct(l.grade for l in lessons),
            total=len(lessons),
        )

browse_service = BrowseService()

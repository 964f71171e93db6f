"""Admin console for managing lessons over the HTTP API.

``LessonForm`` holds the local, not-yet-submitted state of the lesson editor,
including the link list being assembled. ``AdminConsole`` submits that state
with a single create or update call and then reloads its list from the API.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field

from app.core.config import settings
from app.core.constants import LessonTypeEnum

logger = logging.getLogger(__name__)


class LinkDraft(BaseModel):
    title: str = ""
    url: str = ""


class LessonForm(BaseModel):
    editing_id: Optional[str] = None
    title: str = ""
    description: str = ""
    subject: str = ""
    grade: str = ""
    level: str = ""
    year: str = ""
    chapter: str = ""
    lesson_type: str = settings.DEFAULT_LESSON_TYPE
    order: int = 0
    pdf_url: str = ""
    video_url: str = ""
    published: bool = False
    links: List[LinkDraft] = Field(default_factory=list)
    new_link: LinkDraft = Field(default_factory=LinkDraft)

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    @property
    def lesson_type_options(self) -> List[str]:
        """Types offered by the editor; a stored custom type stays selectable."""
        options = [lesson_type.value for lesson_type in LessonTypeEnum]
        if self.lesson_type and self.lesson_type not in options:
            options.append(self.lesson_type)
        return options

    def add_link(self) -> bool:
        """Move the link draft into the list; incomplete drafts are ignored."""
        if not (self.new_link.title and self.new_link.url):
            return False
        self.links = [*self.links, self.new_link]
        self.new_link = LinkDraft()
        return True

    def remove_link(self, index: int) -> None:
        self.links = [link for i, link in enumerate(self.links) if i != index]

    def load(self, lesson: Dict[str, Any]) -> None:
        """Fill the form from a lesson as returned by the API (camelCase)."""
        self.editing_id = lesson["id"]
        self.title = lesson["title"]
        self.description = lesson.get("description") or ""
        self.subject = lesson.get("subject") or ""
        self.grade = lesson.get("grade") or ""
        self.level = lesson.get("level") or ""
        self.year = lesson.get("year") or ""
        self.chapter = lesson.get("chapter") or ""
        self.lesson_type = lesson.get("lessonType") or settings.DEFAULT_LESSON_TYPE
        self.order = lesson.get("order") or 0
        self.pdf_url = lesson.get("pdfUrl") or ""
        self.video_url = lesson.get("videoUrl") or ""
        self.published = lesson.get("published", False)
        self.links = [LinkDraft(title=l["title"], url=l["url"]) for l in lesson.get("links", [])]
        self.new_link = LinkDraft()

    def reset(self) -> None:
        for field, info in type(self).model_fields.items():
            setattr(self, field, info.get_default(call_default_factory=True))

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "title": self.title,
            "description": self.description or None,
            "subject": self.subject,
            "pdfUrl": self.pdf_url or None,
            "videoUrl": self.video_url or None,
            "published": self.published,
            "links": [link.model_dump() for link in self.links],
        }
        if self.level or self.year:
            payload.update(
                level=self.level,
                year=self.year,
                chapter=self.chapter or None,
                lessonType=self.lesson_type,
                order=self.order,
            )
        else:
            payload["grade"] = self.grade
        return payload


class AdminConsole:
    def __init__(self, client: httpx.Client, token: str):
        self.client = client
        self.headers = {"Authorization": f"Bearer {token}"}
        self.lessons: List[Dict[str, Any]] = []
        self.error: Optional[str] = None

    def _fail(self, action: str, response: httpx.Response) -> bool:
        try:
            message = response.json()["error"]["message"]
        except (ValueError, KeyError, TypeError):
            message = response.text
        self.error = f"Failed to {action} lesson: {message}"
        logger.warning(f"{self.error} (HTTP {response.status_code})")
        return False

    def _send(self, action: str, method: str, url: str, **kwargs) -> Optional[httpx.Response]:
        """Issue a request; failures are recorded in ``error`` and yield None."""
        try:
            response = self.client.request(method, url, headers=self.headers, **kwargs)
        except httpx.RequestError as e:
            self.error = f"Failed to {action} lesson: Network error: {e}"
            logger.error(self.error)
            return None
        if not response.is_success:
            self._fail(action, response)
            return None
        return response

    def refresh(self) -> List[Dict[str, Any]]:
        response = self._send("load", "GET", "/lessons", params={"ordering": "created"})
        if response is not None:
            self.lessons = response.json()
        return self.lessons

    def submit(self, form: LessonForm) -> bool:
        self.error = None
        if form.is_editing:
            response = self._send("update", "PUT", f"/lessons/{form.editing_id}", json=form.to_payload())
        else:
            response = self._send("create", "POST", "/lessons", json=form.to_payload())
        if response is None:
            return False

        form.reset()
        self.refresh()
        return True

    def delete(self, lesson_id: str, confirm: Callable[[str], bool]) -> bool:
        self.error = None
        if not confirm("Are you sure you want to delete this lesson?"):
            return False

        if self._send("delete", "DELETE", f"/lessons/{lesson_id}") is None:
            return False

        self.refresh()
        return True

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import Field, field_validator, model_validator

from .base import Payload, aliases, coerce_enum, nested, parse_timestamp


class AnnouncementPriority(str, Enum):
    normal = "normal"
    important = "important"
    urgent = "urgent"


class Announcement(Payload):
    id: str | None = Field(default=None, validation_alias=aliases("announcement_id", "announcementId", "id"))
    course_id: str | None = Field(default=None, validation_alias=aliases("course_id", "courseId"))
    title: str = ""
    content: str = ""
    priority: AnnouncementPriority = AnnouncementPriority.normal
    is_pinned: bool = Field(default=False, validation_alias=aliases("is_pinned", "isPinned", "pinned"))
    created_at: str | None = Field(default=None, validation_alias=aliases("created_at", "createdAt"))
    author: str = "Profesor"

    @model_validator(mode="before")
    @classmethod
    def _author_name(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        author = data.get("author")
        data["author"] = (
            data.get("author_name")
            or data.get("authorName")
            or nested(data, "author", "name")
            or (author if isinstance(author, str) else None)
            or "Profesor"
        )
        return data

    @field_validator("title", "content", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return value or ""

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, value: Any) -> AnnouncementPriority:
        return coerce_enum(AnnouncementPriority, value, AnnouncementPriority.normal)

    @field_validator("is_pinned", mode="before")
    @classmethod
    def _pinned(cls, value: Any) -> bool:
        return bool(value)


_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def sort_announcements(items: list[Announcement]) -> list[Announcement]:
    """Pinned first, then newest first."""
    return sorted(
        items,
        key=lambda a: (a.is_pinned, parse_timestamp(a.created_at) or _EPOCH),
        reverse=True,
    )


def search_announcements(items: list[Announcement], term: str | None) -> list[Announcement]:
    if not term:
        return items
    needle = term.lower()
    return [a for a in items if needle in a.title.lower() or needle in a.content.lower()]

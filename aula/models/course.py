from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from .base import Payload, aliases


class CourseStatus(str, Enum):
    draft = "draft"
    published = "published"


class Course(Payload):
    id: str | None = Field(default=None, validation_alias=aliases("id", "course_id", "courseId"))
    title: str = Field(default="", validation_alias=aliases("title", "name"))
    description: str = ""
    category: str | None = None
    level: str | None = None
    tags: list[str] = Field(default_factory=list)
    schedule: Any = None
    start_date: str | None = Field(default=None, validation_alias=aliases("start_date", "startDate"))
    end_date: str | None = Field(default=None, validation_alias=aliases("end_date", "endDate"))
    max_students: int | None = Field(
        default=None, validation_alias=aliases("max_students", "maxStudents", "capacity")
    )
    duration_hours: float | None = Field(
        default=None, validation_alias=aliases("duration_hours", "durationHours")
    )
    modality: str | None = None
    status: CourseStatus | None = None
    image_url: str | None = Field(default=None, validation_alias=aliases("image_url", "imageUrl"))
    professor_id: str | None = Field(
        default=None, validation_alias=aliases("professor_id", "professorId", "teacher_id", "teacherId")
    )
    created_at: str | None = Field(default=None, validation_alias=aliases("created_at", "createdAt"))

    @field_validator("title", "description", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return value or ""

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, value: Any) -> list:
        if not value:
            return []
        if isinstance(value, str):
            return [t.strip() for t in value.split(",") if t.strip()]
        return [str(t) for t in value if t]

    @field_validator("max_students", "duration_hours", mode="before")
    @classmethod
    def _blank_number(cls, value: Any) -> Any:
        return None if value in ("", None) else value

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> CourseStatus | None:
        # courses without a (known) status are shown as if published
        if isinstance(value, CourseStatus):
            return value
        try:
            return CourseStatus(str(value).lower())
        except ValueError:
            return None

    @property
    def is_draft(self) -> bool:
        return self.status is CourseStatus.draft

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from .base import Payload, aliases, coerce_enum


class AssignmentType(str, Enum):
    homework = "homework"
    quiz = "quiz"
    project = "project"
    exam = "exam"


class AssignmentStatus(str, Enum):
    draft = "draft"
    published = "published"


DEFAULT_POINTS = 100


class Assignment(Payload):
    id: str | None = Field(default=None, validation_alias=aliases("assignment_id", "assignmentId", "id"))
    course_id: str | None = Field(default=None, validation_alias=aliases("course_id", "courseId"))
    title: str = ""
    description: str = ""
    type: AssignmentType = AssignmentType.homework
    due_date: str | None = Field(default=None, validation_alias=aliases("due_date", "dueDate"))
    points: float = Field(
        default=DEFAULT_POINTS, validation_alias=aliases("points", "maxScore", "max_score")
    )
    status: AssignmentStatus = AssignmentStatus.published
    created_at: str | None = Field(default=None, validation_alias=aliases("created_at", "createdAt"))

    @field_validator("title", "description", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return value or ""

    @field_validator("type", mode="before")
    @classmethod
    def _type(cls, value: Any) -> AssignmentType:
        return coerce_enum(AssignmentType, value, AssignmentType.homework)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> AssignmentStatus:
        return coerce_enum(AssignmentStatus, value, AssignmentStatus.published)

    @field_validator("points", mode="before")
    @classmethod
    def _points(cls, value: Any) -> Any:
        return DEFAULT_POINTS if value in (None, "", 0) else value


class SubmissionDocument(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str | None = None
    name: str = ""
    file_url: str = Field(default="", validation_alias=aliases("signedFileUrl", "fileUrl", "file_url"))


class Submission(Payload):
    id: str | None = Field(default=None, validation_alias=aliases("id", "submission_id", "submissionId"))
    assignment_id: str | None = Field(
        default=None, validation_alias=aliases("assignment_id", "assignmentId")
    )
    user_id: str | None = Field(default=None, validation_alias=aliases("user_id", "userId"))
    score: float | None = None
    comments: str | None = None
    submitted_at: str | None = Field(
        default=None,
        validation_alias=aliases("submission_date", "submissionDate", "created_at", "createdAt"),
    )
    documents: list[SubmissionDocument] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _unwrap(cls, data: Any) -> Any:
        # /submissions/assignment/{id} answers [{submission: {...}, documents: [...]}]
        if isinstance(data, dict) and isinstance(data.get("submission"), dict):
            merged = dict(data["submission"])
            merged.setdefault("documents", data.get("documents") or [])
            return merged
        return data

    @field_validator("documents", mode="before")
    @classmethod
    def _documents(cls, value: Any) -> list:
        return [d for d in (value or []) if isinstance(d, dict)]

    @computed_field
    @property
    def is_graded(self) -> bool:
        return self.score is not None and self.comments is not None


def validate_grade(score: Any, max_points: Any = None) -> float:
    """Return ``score`` as a float or raise ValueError with a user-facing message."""
    try:
        value = float(score)
    except (TypeError, ValueError):
        raise ValueError("El score debe ser un número válido mayor o igual a 0")
    if value != value or value < 0:
        raise ValueError("El score debe ser un número válido mayor o igual a 0")

    if max_points is not None:
        try:
            limit = float(max_points)
        except (TypeError, ValueError):
            raise ValueError("max_points must be a number")
        if value > limit:
            raise ValueError(f"El score no puede ser mayor a {limit:g} puntos")
    return value

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from .base import Payload, aliases


class Folder(Payload):
    id: str | None = Field(default=None, validation_alias=aliases("id", "folder_id", "folderId"))
    course_id: str | None = Field(default=None, validation_alias=aliases("course_id", "courseId"))
    parent_folder_id: str | None = Field(
        default=None, validation_alias=aliases("parent_folder_id", "parentFolderId", "parentId")
    )
    name: str = ""
    student_visible: bool = Field(
        default=True, validation_alias=aliases("student_visible", "studentVisible")
    )
    created_at: str | None = Field(default=None, validation_alias=aliases("created_at", "createdAt"))

    @field_validator("student_visible", mode="before")
    @classmethod
    def _visible(cls, value: Any) -> bool:
        return True if value is None else bool(value)


class Document(Payload):
    id: str | None = Field(default=None, validation_alias=aliases("id", "document_id", "documentId"))
    course_id: str | None = Field(default=None, validation_alias=aliases("course_id", "courseId"))
    folder_id: str | None = Field(default=None, validation_alias=aliases("folder_id", "folderId"))
    name: str = ""
    file_url: str = Field(default="", validation_alias=aliases("signedFileUrl", "fileUrl", "file_url", "url"))
    mime_type: str | None = Field(default=None, validation_alias=aliases("mime_type", "mimeType"))
    size: int | None = None
    student_visible: bool = Field(
        default=True, validation_alias=aliases("student_visible", "studentVisible")
    )
    created_at: str | None = Field(default=None, validation_alias=aliases("created_at", "createdAt"))

    @field_validator("name", "file_url", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return value or ""

    @field_validator("student_visible", mode="before")
    @classmethod
    def _visible(cls, value: Any) -> bool:
        return True if value is None else bool(value)


def visible_to_students(items: list) -> list:
    return [item for item in items if item.student_visible]

from __future__ import annotations

from typing import Any

from pydantic import Field, computed_field, field_validator, model_validator

from .base import Payload, aliases, nested


def _author_of(data: dict) -> str:
    author = data.get("author")
    return (
        nested(data, "user", "name")
        or data.get("author_name")
        or data.get("authorName")
        or nested(data, "author", "name")
        or (author if isinstance(author, str) else None)
        or "Anónimo"
    )


class ForumReply(Payload):
    id: str | None = Field(default=None, validation_alias=aliases("reply_id", "replyId", "id"))
    thread_id: str | None = Field(default=None, validation_alias=aliases("thread_id", "threadId"))
    content: str = ""
    author: str = "Anónimo"
    author_id: str | None = Field(default=None, validation_alias=aliases("author_id", "authorId", "user_id", "userId"))
    created_at: str | None = Field(default=None, validation_alias=aliases("created_at", "createdAt"))

    @model_validator(mode="before")
    @classmethod
    def _author(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            data["author"] = _author_of(data)
        return data

    @field_validator("content", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return value or ""


class ForumThread(Payload):
    id: str | None = Field(default=None, validation_alias=aliases("thread_id", "threadId", "id"))
    course_id: str | None = Field(default=None, validation_alias=aliases("course_id", "courseId"))
    title: str = ""
    content: str = ""
    category: str = "general"
    author: str = "Anónimo"
    author_id: str | None = Field(default=None, validation_alias=aliases("author_id", "authorId", "user_id", "userId"))
    is_pinned: bool = Field(default=False, validation_alias=aliases("is_pinned", "isPinned", "pinned"))
    is_locked: bool = Field(default=False, validation_alias=aliases("is_locked", "isLocked", "locked"))
    views: int = 0
    created_at: str | None = Field(default=None, validation_alias=aliases("created_at", "createdAt"))
    replies: list[ForumReply] = Field(default_factory=list)
    upstream_reply_count: int | None = Field(default=None, exclude=True)

    @model_validator(mode="before")
    @classmethod
    def _flatten(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        data["author"] = _author_of(data)
        replies = data.get("replies")
        if isinstance(replies, int):
            data["upstream_reply_count"] = replies
            data["replies"] = []
        elif nested(data, "_count", "replies") is not None:
            data["upstream_reply_count"] = nested(data, "_count", "replies")
        return data

    @field_validator("title", "content", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return value or ""

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, value: Any) -> Any:
        return value or "general"

    @field_validator("is_pinned", "is_locked", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> bool:
        return bool(value)

    @field_validator("views", mode="before")
    @classmethod
    def _views(cls, value: Any) -> Any:
        return value or 0

    @field_validator("replies", mode="before")
    @classmethod
    def _replies(cls, value: Any) -> list:
        return [r for r in (value or []) if isinstance(r, dict)]

    @computed_field
    @property
    def reply_count(self) -> int:
        if self.upstream_reply_count is not None:
            return self.upstream_reply_count
        return len(self.replies)

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import Field, field_validator, model_validator

from .base import Payload, aliases


class UserRole(str, Enum):
    admin = "admin"
    professor = "professor"
    student = "student"


# the upstream has used both names for the course owner role
_ROLE_SYNONYMS = {"teacher": UserRole.professor.value}


def normalize_role(value: Any) -> UserRole | None:
    if isinstance(value, UserRole):
        return value
    if not value:
        return None
    key = str(value).strip().lower()
    key = _ROLE_SYNONYMS.get(key, key)
    try:
        return UserRole(key)
    except ValueError:
        return None


class User(Payload):
    id: str | None = Field(default=None, validation_alias=aliases("id", "user_id", "userId"))
    name: str = Field(default="", validation_alias=aliases("name", "full_name", "fullName"))
    email: str = ""
    role: UserRole | None = None
    created_at: str | None = Field(default=None, validation_alias=aliases("created_at", "createdAt"))

    @model_validator(mode="before")
    @classmethod
    def _unwrap(cls, data: Any) -> Any:
        # /profile answers {profile: {...}}, {user: {...}} or the user itself
        if isinstance(data, dict):
            for key in ("profile", "user"):
                if isinstance(data.get(key), dict):
                    return data[key]
        return data

    @field_validator("name", "email", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return value or ""

    @field_validator("role", mode="before")
    @classmethod
    def _role(cls, value: Any) -> UserRole | None:
        return normalize_role(value)

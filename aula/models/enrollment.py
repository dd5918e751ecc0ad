"""
Enrollment (inscription) records and the reconciliation helpers built on them.

The upstream speaks a richer status vocabulary than the portal needs::

    accepted, active            -> accepted
    rejected, dropped, expired  -> rejected
    anything else (or nothing)  -> pending

``normalize_status`` collapses it; ``find_enrollment`` locates the record for
a course (and user) even when ids arrive as numbers in one payload and
strings in another.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from .base import Payload, aliases, nested


class EnrollmentStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


_STATUS_MAP = {
    "accepted": EnrollmentStatus.accepted,
    "active": EnrollmentStatus.accepted,
    "rejected": EnrollmentStatus.rejected,
    "dropped": EnrollmentStatus.rejected,
    "expired": EnrollmentStatus.rejected,
}

# vocabulary the upstream expects when a professor decides on a request
_BACKEND_STATUS = {
    EnrollmentStatus.accepted: "active",
    EnrollmentStatus.rejected: "dropped",
}

# raw statuses the catalog shows a badge for
CATALOG_STATUSES = ("pending", "active", "accepted")


def normalize_status(raw: Any) -> EnrollmentStatus:
    if isinstance(raw, EnrollmentStatus):
        return raw
    if not isinstance(raw, str):
        return EnrollmentStatus.pending
    return _STATUS_MAP.get(raw, EnrollmentStatus.pending)


def to_backend_status(status: EnrollmentStatus | str) -> str:
    status = EnrollmentStatus(status)
    if status not in _BACKEND_STATUS:
        raise ValueError("status must be 'accepted' or 'rejected'")
    return _BACKEND_STATUS[status]


class _Summary(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str | None = None
    name: str | None = Field(default=None, validation_alias=aliases("name", "title", "full_name"))
    email: str | None = None


class Enrollment(Payload):
    id: str | None = Field(
        default=None, validation_alias=aliases("id", "inscription_id", "inscriptionId", "enrollment_id")
    )
    course_id: str | None = Field(default=None, validation_alias=aliases("course_id", "courseId"))
    user_id: str | None = Field(
        default=None, validation_alias=aliases("user_id", "userId", "student_id", "studentId")
    )
    raw_status: str | None = Field(
        default=None, validation_alias=aliases("enrollment_status", "enrollmentStatus", "status")
    )
    message: str | None = None
    created_at: str | None = Field(default=None, validation_alias=aliases("created_at", "createdAt"))
    updated_at: str | None = Field(
        default=None,
        validation_alias=aliases("updated_at", "updatedAt", "acceptedAt", "accepted_at", "approvedAt"),
    )
    course: _Summary | None = None
    student: _Summary | None = Field(default=None, validation_alias=aliases("student", "user"))

    @model_validator(mode="before")
    @classmethod
    def _lift_nested_ids(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("courseId") is None and data.get("course_id") is None:
            data["course_id"] = nested(data, "course", "id")
        if data.get("userId") is None and data.get("user_id") is None:
            data["user_id"] = nested(data, "student", "id") or nested(data, "user", "id")
        return data

    @computed_field
    @property
    def status(self) -> EnrollmentStatus:
        return normalize_status(self.raw_status)

    @computed_field
    @property
    def accepted_at(self) -> str | None:
        if self.status is EnrollmentStatus.accepted:
            return self.updated_at
        return None


def _as_progress(value: Any) -> float | None:
    # upstream sometimes sends "N/A" or a blank for students with no activity
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class RosterEntry(Payload):
    """One line of a course's student list, built from an inscription."""

    id: str | None = None
    name: str = "Unknown"
    email: str = ""
    enrollment_id: str | None = None
    enrollment_date: str | None = None
    raw_status: str | None = None
    progress: float | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_inscription(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        student = data.get("student") or data.get("user") or {}
        if not isinstance(student, dict):
            student = {}
        return {
            "id": student.get("id") or data.get("userId") or data.get("user_id"),
            "name": student.get("name") or data.get("name") or "Unknown",
            "email": student.get("email") or data.get("email") or "",
            "enrollment_id": data.get("enrollmentId") or data.get("id"),
            "enrollment_date": (
                data.get("enrollmentDate")
                or data.get("enrollment_date")
                or data.get("createdAt")
                or data.get("created_at")
            ),
            "raw_status": data.get("enrollment_status") or data.get("enrollmentStatus"),
            "progress": _as_progress(data.get("progress")),
        }

    @computed_field
    @property
    def enrollment_status(self) -> EnrollmentStatus:
        return normalize_status(self.raw_status)


def _same_id(left: Any, right: Any) -> bool:
    return left is not None and right is not None and str(left) == str(right)


def find_enrollment(
    records: Iterable[Enrollment],
    course_id: Any,
    user_id: Any = None,
) -> Enrollment | None:
    """First record for ``course_id`` (and ``user_id`` when given).

    Ids are compared as strings. With no ``user_id`` the match is by course
    alone, so only pass user-scoped lists in that case.
    """
    for record in records:
        if not _same_id(record.course_id, course_id):
            continue
        if user_id is not None and not _same_id(record.user_id, user_id):
            continue
        return record
    return None


def catalog_statuses(records: Iterable[Enrollment]) -> dict[str, EnrollmentStatus]:
    """course id -> normalized status, for the records the catalog shows."""
    statuses: dict[str, EnrollmentStatus] = {}
    for record in records:
        if record.raw_status not in CATALOG_STATUSES or record.course_id is None:
            continue
        statuses.setdefault(str(record.course_id), record.status)
    return statuses

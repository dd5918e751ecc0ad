from __future__ import annotations

from enum import Enum
from typing import Any, Iterable

from pydantic import Field, computed_field, field_validator

from .base import Payload, aliases, coerce_enum


class AttendanceStatus(str, Enum):
    present = "present"
    absent = "absent"
    late = "late"
    excused = "excused"


class JustificationStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


# statuses that count as having attended
ATTENDED = (AttendanceStatus.present, AttendanceStatus.late)


class Justification(Payload):
    id: str | None = Field(default=None, validation_alias=aliases("id", "justification_id", "justificationId"))
    reason: str = ""
    status: JustificationStatus = JustificationStatus.pending
    professor_notes: str | None = Field(
        default=None, validation_alias=aliases("professor_notes", "professorNotes")
    )

    @field_validator("reason", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return value or ""

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> JustificationStatus:
        return coerce_enum(JustificationStatus, value, JustificationStatus.pending)


class AttendanceRecord(Payload):
    id: str | None = Field(default=None, validation_alias=aliases("record_id", "recordId", "id"))
    session_id: str | None = Field(default=None, validation_alias=aliases("session_id", "sessionId"))
    user_id: str | None = Field(
        default=None, validation_alias=aliases("user_id", "userId", "student_id", "studentId")
    )
    title: str | None = None
    date: str | None = Field(default=None, validation_alias=aliases("date", "session_date", "sessionDate"))
    status: AttendanceStatus = AttendanceStatus.present
    justification: Justification | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> AttendanceStatus:
        return coerce_enum(AttendanceStatus, value, AttendanceStatus.present)

    @field_validator("justification", mode="before")
    @classmethod
    def _justification(cls, value: Any) -> Any:
        if isinstance(value, list):
            value = value[-1] if value else None
        return value if isinstance(value, dict) else None

    @computed_field
    @property
    def can_justify(self) -> bool:
        return self.status in (AttendanceStatus.absent, AttendanceStatus.late) and self.justification is None


class AttendanceSession(Payload):
    id: str | None = Field(default=None, validation_alias=aliases("session_id", "sessionId", "id"))
    course_id: str | None = Field(default=None, validation_alias=aliases("course_id", "courseId"))
    title: str = ""
    description: str | None = None
    session_date: str | None = Field(default=None, validation_alias=aliases("session_date", "sessionDate", "date"))
    start_time: str | None = Field(default=None, validation_alias=aliases("start_time", "startTime"))
    end_time: str | None = Field(default=None, validation_alias=aliases("end_time", "endTime"))
    records: list[AttendanceRecord] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return value or ""

    @field_validator("records", mode="before")
    @classmethod
    def _records(cls, value: Any) -> list:
        return [r for r in (value or []) if isinstance(r, dict)]


class AttendanceSummary(Payload):
    present: int = 0
    absent: int = 0
    late: int = 0
    excused: int = 0
    attendance_rate: float = Field(default=0.0, validation_alias=aliases("attendance_rate", "attendanceRate"))

    @classmethod
    def from_records(cls, records: Iterable[AttendanceRecord]) -> "AttendanceSummary":
        counts = {status: 0 for status in AttendanceStatus}
        for record in records:
            counts[record.status] += 1

        total = sum(counts.values())
        attended = sum(counts[s] for s in ATTENDED)
        rate = round((attended / total) * 100.0, 2) if total else 0.0

        return cls(
            present=counts[AttendanceStatus.present],
            absent=counts[AttendanceStatus.absent],
            late=counts[AttendanceStatus.late],
            excused=counts[AttendanceStatus.excused],
            attendance_rate=rate,
        )


def validate_bulk_records(records: Any) -> list[dict]:
    """Check the payload of a bulk attendance save; raise ValueError when unusable."""
    if not isinstance(records, list):
        raise ValueError("records array is required")

    cleaned = []
    for index, item in enumerate(records):
        if not isinstance(item, dict):
            raise ValueError(f"records[{index}] must be an object")
        user_id = item.get("userId", item.get("user_id"))
        if user_id in (None, ""):
            raise ValueError(f"records[{index}].userId is required")
        status = item.get("status")
        try:
            AttendanceStatus(status)
        except ValueError:
            raise ValueError(
                f"records[{index}].status must be one of: present, absent, late, excused"
            )
        cleaned.append({**item, "userId": user_id, "status": status})
    return cleaned

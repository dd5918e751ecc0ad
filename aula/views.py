"""
Which course page a caller gets.

Professors (and admins) always land on the management console. Students
see one of three screens depending on where their enrollment stands:

    no enrollment / rejected -> enrollment prompt
    pending                  -> pending notice
    accepted                 -> student shell
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .models.enrollment import EnrollmentStatus, normalize_status
from .models.user import UserRole, normalize_role


class ViewKind(str, Enum):
    management_console = "management_console"
    enrollment_prompt = "enrollment_prompt"
    pending_notice = "pending_notice"
    student_shell = "student_shell"


CONSOLE_TABS = ("overview", "students", "materials", "assignments", "announcements", "forums", "attendance")
STUDENT_TABS = ("info", "materials", "assignments", "announcements", "forums", "attendance")


@dataclass(frozen=True)
class CourseView:
    kind: ViewKind
    tabs: tuple[str, ...] = field(default_factory=tuple)
    can_enroll: bool = False
    can_cancel: bool = False
    retry_after_rejection: bool = False

    def to_dict(self) -> dict:
        return {
            "view": self.kind.value,
            "tabs": list(self.tabs),
            "can_enroll": self.can_enroll,
            "can_cancel": self.can_cancel,
            "retry_after_rejection": self.retry_after_rejection,
        }


def dispatch_view(role: Any, status: Any = None) -> CourseView:
    """Pick the view for ``role`` and an enrollment status (raw, normalized or ``None``)."""
    role = normalize_role(role)
    if role in (UserRole.professor, UserRole.admin):
        return CourseView(ViewKind.management_console, CONSOLE_TABS)

    if status is None:
        return CourseView(ViewKind.enrollment_prompt, can_enroll=True)

    status = normalize_status(status)
    if status is EnrollmentStatus.accepted:
        return CourseView(ViewKind.student_shell, STUDENT_TABS)
    if status is EnrollmentStatus.pending:
        return CourseView(ViewKind.pending_notice, can_cancel=True)
    return CourseView(ViewKind.enrollment_prompt, can_enroll=True, retry_after_rejection=True)

from .announcement import Announcement, AnnouncementPriority, search_announcements, sort_announcements
from .assignment import Assignment, AssignmentStatus, AssignmentType, Submission, validate_grade
from .attendance import (
    AttendanceRecord,
    AttendanceSession,
    AttendanceStatus,
    AttendanceSummary,
    Justification,
    JustificationStatus,
    validate_bulk_records,
)
from .course import Course, CourseStatus
from .enrollment import (
    Enrollment,
    EnrollmentStatus,
    RosterEntry,
    catalog_statuses,
    find_enrollment,
    normalize_status,
    to_backend_status,
)
from .forum import ForumReply, ForumThread
from .material import Document, Folder, visible_to_students
from .token_blocklist import TokenBlocklist
from .user import User, UserRole, normalize_role

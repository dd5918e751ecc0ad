import logging

from flask import Blueprint, request

from ..backend import get_backend, unwrap_list
from ..models import (
    AttendanceRecord,
    AttendanceSession,
    AttendanceSummary,
    Justification,
    JustificationStatus,
    UserRole,
    validate_bulk_records,
)
from ..utils.auth import current_session, roles_required, session_required

logger = logging.getLogger(__name__)

attendance_bp = Blueprint("attendance", __name__)

_MANAGERS = (UserRole.admin.value, UserRole.professor.value)


def _history(data) -> dict:
    records = AttendanceRecord.from_list(unwrap_list(data, "sessions", "records"))
    stats = data.get("stats") if isinstance(data, dict) else None
    if isinstance(stats, dict):
        summary = AttendanceSummary.from_payload(stats)
    else:
        summary = AttendanceSummary.from_records(records)
    return {"sessions": [r.to_dict() for r in records], "stats": summary.to_dict()}


# -----------------------------
# SESSIONS
# -----------------------------
@attendance_bp.post("/attendance/session")
@roles_required(*_MANAGERS)
def create_session():
    session = current_session()
    data = request.get_json(silent=True) or {}

    course_id = data.get("courseId")
    title = str(data.get("title") or "").strip()
    session_date = data.get("sessionDate")
    if course_id in (None, "") or not title or not session_date:
        return {"error": "courseId, title, and sessionDate are required"}, 400

    payload = {"courseId": course_id, "title": title, "sessionDate": session_date}
    for key in ("description", "startTime", "endTime"):
        if data.get(key):
            payload[key] = data[key]

    created = get_backend().post(
        "/attendance/session", session.token, json=payload, fallback="Error al crear la sesión"
    )
    logger.info("attendance session created for course %s", course_id)
    return AttendanceSession.from_payload(created).to_dict(), 201


@attendance_bp.get("/attendance/course/<int:course_id>/sessions")
@roles_required(*_MANAGERS)
def course_sessions(course_id: int):
    session = current_session()
    data = get_backend().get(
        f"/attendance/course/{course_id}/sessions", session.token, fallback="Error al cargar sesiones"
    )
    sessions = AttendanceSession.from_list(unwrap_list(data, "sessions"))
    return {"sessions": [s.to_dict() for s in sessions], "total": len(sessions)}, 200


@attendance_bp.get("/attendance/session/<int:session_id>")
@session_required
def get_session(session_id: int):
    session = current_session()
    data = get_backend().get(
        f"/attendance/session/{session_id}", session.token, fallback="Sesión no encontrada"
    )
    return AttendanceSession.from_payload(data).to_dict(), 200


@attendance_bp.delete("/attendance/session/<int:session_id>")
@roles_required(*_MANAGERS)
def delete_session(session_id: int):
    session = current_session()
    get_backend().delete(
        f"/attendance/session/{session_id}", session.token, fallback="Error al eliminar la sesión"
    )
    return {"message": "deleted"}, 200


@attendance_bp.post("/attendance/session/<int:session_id>/bulk")
@roles_required(*_MANAGERS)
def save_attendance(session_id: int):
    session = current_session()
    data = request.get_json(silent=True) or {}

    try:
        records = validate_bulk_records(data.get("records"))
    except ValueError as exc:
        return {"error": str(exc)}, 400

    saved = get_backend().post(
        f"/attendance/session/{session_id}/bulk", session.token, json={"records": records},
        fallback="Error al guardar la asistencia",
    )
    logger.info("attendance saved for session %s: %d record(s)", session_id, len(records))
    return saved if saved is not None else {"saved": len(records)}, 200


# -----------------------------
# PER-COURSE VIEWS
# -----------------------------
@attendance_bp.get("/attendance/course/<int:course_id>/stats")
@roles_required(*_MANAGERS)
def course_stats(course_id: int):
    session = current_session()
    data = get_backend().get(
        f"/attendance/course/{course_id}/stats", session.token, fallback="Error al cargar estadísticas"
    )
    return data if data is not None else {}, 200


@attendance_bp.get("/attendance/course/<int:course_id>/my")
@session_required
def my_attendance(course_id: int):
    session = current_session()
    data = get_backend().get(
        f"/attendance/my/{course_id}", session.token, fallback="Error al cargar tu asistencia"
    )
    return _history(data), 200


@attendance_bp.get("/attendance/course/<int:course_id>/student/<int:user_id>")
@roles_required(*_MANAGERS)
def student_attendance(course_id: int, user_id: int):
    session = current_session()
    data = get_backend().get(
        f"/attendance/course/{course_id}/student/{user_id}", session.token,
        fallback="Error al cargar la asistencia del estudiante",
    )
    return _history(data), 200


# -----------------------------
# RECORDS & JUSTIFICATIONS
# -----------------------------
@attendance_bp.patch("/attendance/record/<int:record_id>")
@roles_required(*_MANAGERS)
def update_record(record_id: int):
    session = current_session()
    data = request.get_json(silent=True) or {}
    if not data:
        return {"error": "no fields to update"}, 400

    updated = get_backend().patch(
        f"/attendance/record/{record_id}", session.token, json=data,
        fallback="Error al actualizar el registro",
    )
    return AttendanceRecord.from_payload(updated).to_dict(), 200


@attendance_bp.post("/attendance/record/<int:record_id>/justification")
@session_required
def submit_justification(record_id: int):
    session = current_session()
    data = request.get_json(silent=True) or {}

    reason = str(data.get("reason") or "").strip()
    if not reason:
        return {"error": "reason is required"}, 400

    created = get_backend().post(
        f"/attendance/record/{record_id}/justification", session.token, json={"reason": reason},
        fallback="Error al enviar la justificación",
    )
    return Justification.from_payload(created).to_dict(), 201


@attendance_bp.patch("/attendance/justification/<int:justification_id>")
@roles_required(*_MANAGERS)
def review_justification(justification_id: int):
    session = current_session()
    data = request.get_json(silent=True) or {}

    status = str(data.get("status") or "").strip().lower()
    if status not in (JustificationStatus.approved.value, JustificationStatus.rejected.value):
        return {"error": "status must be 'approved' or 'rejected'"}, 400

    payload = {"status": status}
    notes = data.get("professorNotes")
    if notes:
        payload["professorNotes"] = notes

    updated = get_backend().patch(
        f"/attendance/justification/{justification_id}", session.token, json=payload,
        fallback="Error al revisar la justificación",
    )
    logger.info("justification %s -> %s", justification_id, status)
    return Justification.from_payload(updated).to_dict(), 200

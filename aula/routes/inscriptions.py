import logging

from flask import Blueprint, request

from ..backend import get_backend, unwrap_list
from ..models import Enrollment, EnrollmentStatus, UserRole, to_backend_status
from ..utils.auth import current_session, roles_required, session_required

logger = logging.getLogger(__name__)

inscriptions_bp = Blueprint("inscriptions", __name__)


def _as_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _listing(data) -> dict:
    records = Enrollment.from_list(unwrap_list(data, "inscriptions"))
    return {"inscriptions": [r.to_dict() for r in records], "total": len(records)}


@inscriptions_bp.get("/inscriptions")
@session_required
def list_inscriptions():
    session = current_session()
    data = get_backend().get("/inscriptions", session.token, fallback="Error al cargar inscripciones")
    return _listing(data), 200


@inscriptions_bp.get("/inscriptions/courses")
@session_required
def my_inscriptions():
    session = current_session()
    data = get_backend().get(
        "/inscriptions/courses", session.token, fallback="Error al cargar inscripciones"
    )
    return _listing(data), 200


@inscriptions_bp.post("/inscriptions")
@session_required
def enroll():
    session = current_session()
    data = request.get_json(silent=True) or {}

    course_id = data.get("courseId", data.get("course_id"))
    if course_id in (None, ""):
        return {"error": "courseId is required"}, 400

    course_id_num = _as_int(course_id)
    user_id_num = _as_int(session.require_user_id())
    if course_id_num is None or user_id_num is None:
        return {"error": "Invalid courseId or userId format"}, 400

    logger.info("enrollment request: user %s -> course %s", user_id_num, course_id_num)
    created = get_backend().post(
        "/inscriptions",
        session.token,
        json={"userId": user_id_num, "courseId": course_id_num},
        fallback="Error al inscribirse en el curso",
    )
    return Enrollment.from_payload(created).to_dict(), 201


@inscriptions_bp.patch("/inscriptions/<int:inscription_id>")
@roles_required(UserRole.admin.value, UserRole.professor.value)
def decide_inscription(inscription_id: int):
    session = current_session()
    data = request.get_json(silent=True) or {}

    status = str(data.get("status") or "").strip().lower()
    if status not in (EnrollmentStatus.accepted.value, EnrollmentStatus.rejected.value):
        return {"error": "status must be 'accepted' or 'rejected'"}, 400

    payload = {"enrollment_status": to_backend_status(status)}
    message = str(data.get("message") or "").strip()
    if message:
        payload["message"] = message

    updated = get_backend().patch(
        f"/inscriptions/{inscription_id}",
        session.token,
        json=payload,
        fallback="Error al actualizar la inscripción",
    )
    logger.info("inscription %s -> %s", inscription_id, status)
    return Enrollment.from_payload(updated).to_dict(), 200


@inscriptions_bp.delete("/inscriptions/<int:inscription_id>")
@session_required
def withdraw(inscription_id: int):
    session = current_session()
    get_backend().delete(
        f"/inscriptions/{inscription_id}", session.token, fallback="Error al cancelar la inscripción"
    )
    return {"message": "deleted"}, 200

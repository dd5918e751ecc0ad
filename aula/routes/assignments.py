from flask import Blueprint, request

from ..backend import get_backend, unwrap_list
from ..models import Assignment, AssignmentStatus, UserRole
from ..utils.auth import current_session, roles_required, session_required

assignments_bp = Blueprint("assignments", __name__)

_MANAGERS = (UserRole.admin.value, UserRole.professor.value)


@assignments_bp.get("/assignments/course/<int:course_id>")
@session_required
def course_assignments(course_id: int):
    session = current_session()
    data = get_backend().get(
        f"/assignments/course/{course_id}", session.token, fallback="Error al cargar tareas"
    )
    assignments = Assignment.from_list(unwrap_list(data, "assignments"))

    # drafts stay with the professor
    if not session.is_professor:
        assignments = [a for a in assignments if a.status == AssignmentStatus.published]

    return {"assignments": [a.to_dict() for a in assignments], "total": len(assignments)}, 200


@assignments_bp.post("/assignments")
@roles_required(*_MANAGERS)
def create_assignment():
    session = current_session()
    data = request.get_json(silent=True) or {}

    course_id = data.get("courseId", data.get("course_id"))
    title = str(data.get("title") or "").strip()
    if course_id in (None, "") or not title:
        return {"error": "courseId and title are required"}, 400

    created = get_backend().post(
        "/assignments", session.token, json={**data, "title": title},
        fallback="Error al crear la tarea",
    )
    return Assignment.from_payload(created).to_dict(), 201


@assignments_bp.get("/assignments/<int:assignment_id>")
@session_required
def get_assignment(assignment_id: int):
    session = current_session()
    data = get_backend().get(
        f"/assignments/{assignment_id}", session.token, fallback="Tarea no encontrada"
    )
    return Assignment.from_payload(data).to_dict(), 200


@assignments_bp.put("/assignments/<int:assignment_id>")
@roles_required(*_MANAGERS)
def update_assignment(assignment_id: int):
    session = current_session()
    data = request.get_json(silent=True) or {}

    if "title" in data and not str(data.get("title") or "").strip():
        return {"error": "title cannot be empty"}, 400

    updated = get_backend().put(
        f"/assignments/{assignment_id}", session.token, json=data,
        fallback="Error al actualizar la tarea",
    )
    return Assignment.from_payload(updated).to_dict(), 200


@assignments_bp.delete("/assignments/<int:assignment_id>")
@roles_required(*_MANAGERS)
def delete_assignment(assignment_id: int):
    session = current_session()
    get_backend().delete(
        f"/assignments/{assignment_id}", session.token, fallback="Error al eliminar la tarea"
    )
    return {"message": "deleted"}, 200

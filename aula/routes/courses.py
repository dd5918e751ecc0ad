import logging

from flask import Blueprint, current_app, request

from ..backend import get_backend, unwrap_list
from ..catalog import filter_catalog, unique_categories
from ..errors import BackendError
from ..models import Course, Enrollment, RosterEntry, UserRole, catalog_statuses, find_enrollment
from ..overview import build_overview, fetch_sources, reported_total
from ..utils.auth import current_session, roles_required, session_required
from ..views import dispatch_view

logger = logging.getLogger(__name__)

courses_bp = Blueprint("courses", __name__)

_MANAGERS = (UserRole.admin.value, UserRole.professor.value)


def _fetch_course(course_id: int, token: str) -> Course:
    data = get_backend().get(f"/course/{course_id}", token, fallback="Curso no encontrado")
    if isinstance(data, dict) and isinstance(data.get("course"), dict):
        data = data["course"]
    return Course.from_payload(data)


@courses_bp.get("/courses")
@session_required
def list_courses():
    session = current_session()
    data = get_backend().get("/course", session.token, fallback="Error al cargar cursos")
    courses = Course.from_list(unwrap_list(data, "courses"))
    return {"courses": [c.to_dict() for c in courses], "total": len(courses)}, 200


@courses_bp.get("/courses/catalog")
@session_required
def course_catalog():
    session = current_session()
    backend = get_backend()

    data = backend.get("/course", session.token, fallback="Error al cargar cursos")
    courses = Course.from_list(unwrap_list(data, "courses"))

    # /inscriptions/courses only returns the caller's own inscriptions
    statuses = {}
    try:
        mine = backend.get("/inscriptions/courses", session.token)
        statuses = catalog_statuses(Enrollment.from_list(unwrap_list(mine, "inscriptions")))
    except BackendError as exc:
        logger.warning("catalog: could not load inscriptions: %s", exc.message)

    filtered = filter_catalog(
        courses,
        search=request.args.get("search"),
        category=request.args.get("category"),
        level=request.args.get("level"),
        modality=request.args.get("modality"),
    )

    items = []
    for course in filtered:
        item = course.to_dict()
        status = statuses.get(str(course.id))
        item["enrollment_status"] = status.value if status else None
        items.append(item)

    return {
        "courses": items,
        "total": len(items),
        "categories": unique_categories(courses),
    }, 200


@courses_bp.post("/courses")
@roles_required(*_MANAGERS)
def create_course():
    session = current_session()
    data = request.get_json(silent=True) or {}

    title = str(data.get("title") or "").strip()
    description = str(data.get("description") or "").strip()
    if not title or not description:
        return {"error": "Title and description are required"}, 400

    payload = {**data, "title": title, "description": description}
    created = get_backend().post("/course", session.token, json=payload, fallback="Error al crear el curso")
    return Course.from_payload(created).to_dict(), 201


@courses_bp.get("/courses/professor")
@roles_required(*_MANAGERS)
def professor_courses():
    session = current_session()
    data = get_backend().get("/course/professor", session.token, fallback="Error al cargar cursos")
    courses = Course.from_list(unwrap_list(data, "courses"))
    return {"courses": [c.to_dict() for c in courses], "total": len(courses)}, 200


@courses_bp.get("/courses/<int:course_id>")
@session_required
def get_course(course_id: int):
    session = current_session()
    return _fetch_course(course_id, session.token).to_dict(), 200


@courses_bp.route("/courses/<int:course_id>", methods=["PUT", "PATCH"])
@roles_required(*_MANAGERS)
def update_course(course_id: int):
    session = current_session()
    data = request.get_json(silent=True) or {}

    for field in ("title", "description"):
        if field in data and not str(data.get(field) or "").strip():
            return {"error": f"{field} cannot be empty"}, 400

    updated = get_backend().request(
        request.method, f"/course/{course_id}", session.token, json=data,
        fallback="Error al actualizar el curso",
    )
    return Course.from_payload(updated).to_dict(), 200


@courses_bp.delete("/courses/<int:course_id>")
@roles_required(*_MANAGERS)
def delete_course(course_id: int):
    session = current_session()
    get_backend().delete(f"/course/{course_id}", session.token, fallback="Error al eliminar el curso")
    return {"message": "deleted"}, 200


# -----------------------------
# VIEW DISPATCH (what the course page shows)
# -----------------------------
@courses_bp.get("/courses/<int:course_id>/view")
@session_required
def course_view(course_id: int):
    session = current_session()
    course = _fetch_course(course_id, session.token)

    enrollment = None
    if not session.is_professor:
        # /inscriptions is not scoped to the caller, so match on user too
        user_id = session.require_user_id()
        data = get_backend().get("/inscriptions", session.token, fallback="Error al cargar inscripciones")
        records = Enrollment.from_list(unwrap_list(data, "inscriptions"))
        enrollment = find_enrollment(records, course_id, user_id)

    view = dispatch_view(session.role, enrollment.status if enrollment else None)

    out = view.to_dict()
    out["course"] = course.to_dict()
    out["enrollment"] = enrollment.to_dict() if enrollment else None
    return out, 200


@courses_bp.get("/courses/<int:course_id>/overview")
@roles_required(*_MANAGERS)
def course_overview(course_id: int):
    session = current_session()
    sources, failed = fetch_sources(
        get_backend(),
        course_id,
        session.token,
        max_workers=current_app.config.get("OVERVIEW_WORKERS", 4),
    )
    out = build_overview(sources, failed)
    out["course_id"] = course_id
    return out, 200


@courses_bp.get("/courses/<int:course_id>/students")
@session_required
def course_students(course_id: int):
    session = current_session()
    data = get_backend().get(
        f"/inscriptions/course/{course_id}/students", session.token,
        fallback="Error al cargar estudiantes",
    )
    students = RosterEntry.from_list(unwrap_list(data, "inscriptions", "students"))

    total = reported_total(data, len(students))
    return {"students": [s.to_dict() for s in students], "total_students": total}, 200

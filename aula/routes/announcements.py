from flask import Blueprint, request

from ..backend import get_backend, unwrap_list
from ..models import Announcement, AnnouncementPriority, UserRole, search_announcements, sort_announcements
from ..utils.auth import current_session, roles_required, session_required

announcements_bp = Blueprint("announcements", __name__)

_MANAGERS = (UserRole.admin.value, UserRole.professor.value)
_PRIORITIES = tuple(p.value for p in AnnouncementPriority)


@announcements_bp.get("/announcements/course/<int:course_id>")
@session_required
def course_announcements(course_id: int):
    session = current_session()
    data = get_backend().get(
        f"/announcements/course/{course_id}", session.token, fallback="Error al cargar anuncios"
    )
    items = Announcement.from_list(unwrap_list(data, "announcements"))
    items = sort_announcements(search_announcements(items, request.args.get("search")))
    return {"announcements": [a.to_dict() for a in items], "total": len(items)}, 200


@announcements_bp.post("/announcements")
@roles_required(*_MANAGERS)
def create_announcement():
    session = current_session()
    data = request.get_json(silent=True) or {}

    course_id = data.get("course_id", data.get("courseId"))
    title = str(data.get("title") or "").strip()
    content = str(data.get("content") or "").strip()
    if course_id in (None, "") or not title or not content:
        return {"error": "course_id, title and content are required"}, 400

    priority = str(data.get("priority") or AnnouncementPriority.normal.value).strip().lower()
    if priority not in _PRIORITIES:
        return {"error": f"priority must be one of: {', '.join(_PRIORITIES)}"}, 400

    created = get_backend().post(
        "/announcements",
        session.token,
        json={
            "course_id": course_id,
            "title": title,
            "content": content,
            "priority": priority,
            "is_pinned": bool(data.get("is_pinned", data.get("isPinned", False))),
        },
        fallback="Error al crear el anuncio",
    )
    return Announcement.from_payload(created).to_dict(), 201


@announcements_bp.put("/announcements/<int:announcement_id>")
@roles_required(*_MANAGERS)
def update_announcement(announcement_id: int):
    session = current_session()
    data = request.get_json(silent=True) or {}

    for field in ("title", "content"):
        if field in data and not str(data.get(field) or "").strip():
            return {"error": f"{field} cannot be empty"}, 400

    updated = get_backend().put(
        f"/announcements/{announcement_id}", session.token, json=data,
        fallback="Error al actualizar el anuncio",
    )
    return Announcement.from_payload(updated).to_dict(), 200


@announcements_bp.patch("/announcements/<int:announcement_id>/pin")
@roles_required(*_MANAGERS)
def pin_announcement(announcement_id: int):
    session = current_session()
    data = request.get_json(silent=True) or {}
    updated = get_backend().patch(
        f"/announcements/{announcement_id}/pin", session.token, json=data or None,
        fallback="Error al fijar el anuncio",
    )
    return Announcement.from_payload(updated).to_dict(), 200


@announcements_bp.delete("/announcements/<int:announcement_id>")
@roles_required(*_MANAGERS)
def delete_announcement(announcement_id: int):
    session = current_session()
    get_backend().delete(
        f"/announcements/{announcement_id}", session.token, fallback="Error al eliminar el anuncio"
    )
    return {"message": "deleted"}, 200

from flask import Blueprint, request

from ..backend import get_backend, unwrap_list
from ..models import ForumReply, ForumThread, UserRole
from ..utils.auth import current_session, roles_required, session_required

forums_bp = Blueprint("forums", __name__)

_MANAGERS = (UserRole.admin.value, UserRole.professor.value)


def _thread_out(data) -> dict:
    if isinstance(data, dict) and isinstance(data.get("thread"), dict):
        data = data["thread"]
    return ForumThread.from_payload(data).to_dict()


# -----------------------------
# THREADS
# -----------------------------
@forums_bp.get("/forums/course/<int:course_id>")
@session_required
def course_threads(course_id: int):
    session = current_session()

    params = {}
    for key in ("category", "search"):
        value = (request.args.get(key) or "").strip()
        if value:
            params[key] = value

    data = get_backend().get(
        f"/forums/course/{course_id}", session.token, params=params or None,
        fallback="Error al cargar el foro",
    )
    threads = ForumThread.from_list(unwrap_list(data, "threads"))
    return {"threads": [t.to_dict() for t in threads], "total": len(threads)}, 200


@forums_bp.post("/forums/thread")
@session_required
def create_thread():
    session = current_session()
    data = request.get_json(silent=True) or {}

    course_id = data.get("courseId", data.get("course_id"))
    title = str(data.get("title") or "").strip()
    content = str(data.get("content") or "").strip()
    if course_id in (None, "") or not title or not content:
        return {"error": "courseId, title and content are required"}, 400

    created = get_backend().post(
        "/forums/thread",
        session.token,
        json={
            "courseId": course_id,
            "title": title,
            "content": content,
            "category": str(data.get("category") or "general").strip() or "general",
        },
        fallback="Error al crear el tema",
    )
    return _thread_out(created), 201


@forums_bp.get("/forums/thread/<int:thread_id>")
@session_required
def get_thread(thread_id: int):
    session = current_session()
    data = get_backend().get(f"/forums/thread/{thread_id}", session.token, fallback="Tema no encontrado")
    return _thread_out(data), 200


@forums_bp.put("/forums/thread/<int:thread_id>")
@session_required
def update_thread(thread_id: int):
    session = current_session()
    data = request.get_json(silent=True) or {}

    for field in ("title", "content"):
        if field in data and not str(data.get(field) or "").strip():
            return {"error": f"{field} cannot be empty"}, 400

    updated = get_backend().put(
        f"/forums/thread/{thread_id}", session.token, json=data, fallback="Error al actualizar el tema"
    )
    return _thread_out(updated), 200


@forums_bp.delete("/forums/thread/<int:thread_id>")
@session_required
def delete_thread(thread_id: int):
    session = current_session()
    get_backend().delete(f"/forums/thread/{thread_id}", session.token, fallback="Error al eliminar el tema")
    return {"message": "deleted"}, 200


@forums_bp.patch("/forums/thread/<int:thread_id>/pin")
@roles_required(*_MANAGERS)
def pin_thread(thread_id: int):
    session = current_session()
    updated = get_backend().patch(
        f"/forums/thread/{thread_id}/pin", session.token,
        json=request.get_json(silent=True) or None, fallback="Error al fijar el tema",
    )
    return _thread_out(updated), 200


@forums_bp.patch("/forums/thread/<int:thread_id>/lock")
@roles_required(*_MANAGERS)
def lock_thread(thread_id: int):
    session = current_session()
    updated = get_backend().patch(
        f"/forums/thread/{thread_id}/lock", session.token,
        json=request.get_json(silent=True) or None, fallback="Error al bloquear el tema",
    )
    return _thread_out(updated), 200


# -----------------------------
# REPLIES
# -----------------------------
@forums_bp.post("/forums/thread/<int:thread_id>/reply")
@session_required
def reply(thread_id: int):
    session = current_session()
    data = request.get_json(silent=True) or {}

    content = str(data.get("content") or "").strip()
    if not content:
        return {"error": "content is required"}, 400

    created = get_backend().post(
        f"/forums/thread/{thread_id}/reply", session.token, json={"content": content},
        fallback="Error al responder",
    )
    return ForumReply.from_payload(created).to_dict(), 201


@forums_bp.patch("/forums/reply/<int:reply_id>")
@session_required
def update_reply(reply_id: int):
    session = current_session()
    data = request.get_json(silent=True) or {}

    content = str(data.get("content") or "").strip()
    if not content:
        return {"error": "content is required"}, 400

    updated = get_backend().patch(
        f"/forums/reply/{reply_id}", session.token, json={"content": content},
        fallback="Error al actualizar la respuesta",
    )
    return ForumReply.from_payload(updated).to_dict(), 200


@forums_bp.delete("/forums/reply/<int:reply_id>")
@session_required
def delete_reply(reply_id: int):
    session = current_session()
    get_backend().delete(f"/forums/reply/{reply_id}", session.token, fallback="Error al eliminar la respuesta")
    return {"message": "deleted"}, 200

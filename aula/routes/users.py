from flask import Blueprint, request

from ..backend import get_backend, unwrap_list
from ..models import User, UserRole
from ..utils.auth import current_session, roles_required, session_required

users_bp = Blueprint("users", __name__)


@users_bp.get("/users")
@roles_required(UserRole.admin.value)
def list_users():
    session = current_session()
    data = get_backend().get("/users", session.token, fallback="Error al cargar usuarios")
    users = User.from_list(unwrap_list(data, "users"))
    return {"users": [u.to_dict() for u in users], "total": len(users)}, 200


@users_bp.post("/users")
@roles_required(UserRole.admin.value)
def create_user():
    session = current_session()
    data = request.get_json(silent=True) or {}

    name = str(data.get("name") or "").strip()
    email = str(data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    role = str(data.get("role") or "").strip().lower()

    if role == UserRole.admin.value:
        return {
            "error": "No se pueden crear usuarios con rol administrador. "
                     "Solo existe una cuenta de administrador."
        }, 403

    if not name or not email or not password or not role:
        return {"error": "name, email, password, role are required"}, 400

    if role not in (UserRole.student.value, UserRole.professor.value):
        return {"error": "role must be student or professor"}, 400

    created = get_backend().post(
        "/users",
        session.token,
        json={"name": name, "email": email, "password": password, "role": role},
        fallback="Error al crear el usuario",
    )
    return User.from_payload(created).to_dict(), 201


@users_bp.patch("/users/<int:user_id>")
@session_required
def update_user(user_id: int):
    session = current_session()

    # anyone may edit their own profile, only admins edit others
    if not session.is_admin and session.user_id != str(user_id):
        return {"error": "forbidden"}, 403

    data = request.get_json(silent=True) or {}
    if not data:
        return {"error": "no fields to update"}, 400

    if not session.is_admin and "role" in data:
        return {"error": "forbidden"}, 403

    if str(data.get("role") or "").lower() == UserRole.admin.value:
        return {"error": "No se puede asignar el rol administrador"}, 403

    updated = get_backend().patch(
        f"/users/{user_id}", session.token, json=data, fallback="Error al actualizar el usuario"
    )
    return User.from_payload(updated).to_dict(), 200


@users_bp.delete("/users/<int:user_id>")
@roles_required(UserRole.admin.value)
def delete_user(user_id: int):
    session = current_session()

    if session.user_id == str(user_id):
        return {"error": "cannot delete your own account"}, 400

    get_backend().delete(f"/users/{user_id}", session.token, fallback="Error al eliminar el usuario")
    return "", 204

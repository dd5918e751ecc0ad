import logging

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt, set_access_cookies, unset_jwt_cookies

from ..backend import get_backend
from ..extensions import db
from ..jwt_callbacks import token_fingerprint
from ..models import TokenBlocklist, User, UserRole
from ..utils.auth import current_session, session_required

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


def _with_token_cookie(data):
    """JSON response that also stores the returned token in the ``jwt`` cookie."""
    resp = jsonify(data)
    token = None
    if isinstance(data, dict):
        token = data.get("token") or data.get("access_token") or data.get("accessToken")
    if token:
        set_access_cookies(resp, token, max_age=current_app.config["JWT_COOKIE_MAX_AGE"])
    return resp


@auth_bp.post("/auth/login")
def login():
    data = request.get_json(silent=True) or {}
    email = str(data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    if not email or not password:
        return {"error": "email and password are required"}, 400

    result = get_backend().post(
        "/auth/login",
        json={"email": email, "password": password, "name": data.get("name")},
        fallback="Login failed",
    )
    return _with_token_cookie(result), 200


@auth_bp.post("/auth/register")
def register():
    data = request.get_json(silent=True) or {}
    name = str(data.get("name") or "").strip()
    email = str(data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    role = (data.get("role") or UserRole.student.value).strip().lower()

    # admin accounts are never self-registered
    if role == UserRole.admin.value:
        return {"error": "No se puede registrar con rol administrador"}, 403

    if role not in (UserRole.student.value, UserRole.professor.value):
        return {"error": "role must be student or professor"}, 400

    if not name or not email or not password:
        return {"error": "name, email, password are required"}, 400

    result = get_backend().post(
        "/auth/register",
        json={"name": name, "email": email, "password": password, "role": role},
        fallback="Registration failed",
    )
    return _with_token_cookie(result), 201


@auth_bp.post("/auth/logout")
@session_required
def logout():
    session = current_session()
    claims = get_jwt()
    db.session.add(
        TokenBlocklist(
            fingerprint=token_fingerprint(claims),
            user_id=session.user_id,
            token_type="access",
        )
    )
    db.session.commit()
    logger.info("session revoked for user %s", session.user_id)

    resp = jsonify({"message": "logged out"})
    unset_jwt_cookies(resp)
    return resp, 200


@auth_bp.get("/profile")
@session_required
def profile():
    session = current_session()
    data = get_backend().get("/profile", session.token, fallback="Error al cargar el perfil")
    return User.from_payload(data).to_dict(), 200

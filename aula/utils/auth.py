from __future__ import annotations

from dataclasses import dataclass
from functools import wraps

from flask import current_app, g, request
from flask_jwt_extended import get_jwt, verify_jwt_in_request

from ..errors import SessionError
from ..models.user import UserRole, normalize_role

# issuers disagree on where the user id goes
USER_ID_CLAIMS = ("id", "userId", "sub")


@dataclass(frozen=True)
class SessionContext:
    """Who is calling, resolved once per request from the JWT."""

    token: str
    user_id: str | None
    role: UserRole | None
    name: str | None = None
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.admin

    @property
    def is_professor(self) -> bool:
        return self.role in (UserRole.professor, UserRole.admin)

    def require_user_id(self) -> str:
        if not self.user_id:
            raise SessionError("User ID not found")
        return self.user_id


def _raw_token() -> str:
    cookie_name = current_app.config.get("JWT_ACCESS_COOKIE_NAME", "jwt")
    token = request.cookies.get(cookie_name)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip()
    return ""


def _resolve_session() -> SessionContext:
    claims = get_jwt() or {}
    user_id = None
    for key in USER_ID_CLAIMS:
        if claims.get(key) not in (None, ""):
            user_id = claims[key]
            break

    return SessionContext(
        token=_raw_token(),
        user_id=str(user_id) if user_id not in (None, "") else None,
        role=normalize_role(claims.get("role")),
        name=claims.get("name"),
        email=claims.get("email"),
    )


def current_session() -> SessionContext:
    session = g.get("aula_session")
    if session is None:
        verify_jwt_in_request()
        session = _resolve_session()
        g.aula_session = session
    return session


def session_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        current_session()
        return fn(*args, **kwargs)
    return wrapper


def roles_required(*allowed_roles: str):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            session = current_session()
            role = session.role.value if session.role else None
            if role not in allowed_roles:
                return {"error": "forbidden"}, 403
            return fn(*args, **kwargs)
        return wrapper
    return decorator

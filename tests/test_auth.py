from datetime import datetime, timedelta, timezone

import jwt as pyjwt

from aula.extensions import db
from aula.models import TokenBlocklist

import purge_tokens


def test_protected_route_without_token(client):
    resp = client.get("/api/courses")
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Unauthorized"}


def test_garbage_token(client):
    resp = client.get("/api/courses", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_login_requires_credentials(client):
    resp = client.post("/api/auth/login", json={"email": "a@b.c"})
    assert resp.status_code == 400


def test_login_sets_cookie_and_cookie_authenticates(client, backend, make_token):
    token = make_token("7", "student")
    backend.add("POST", "/auth/login", {"token": token, "user": {"id": 7}})
    backend.add("GET", "/profile", {"profile": {"id": 7, "name": "Ana", "role": "student"}})

    resp = client.post("/api/auth/login", json={"email": "ANA@x.io ", "password": "pw"})
    assert resp.status_code == 200
    assert "jwt=" in resp.headers.get("Set-Cookie", "")
    assert backend.last("POST", "/auth/login")["json"]["email"] == "ana@x.io"

    resp = client.get("/api/profile")
    assert resp.status_code == 200
    assert resp.get_json()["name"] == "Ana"
    assert backend.last("GET", "/profile")["headers"]["Authorization"] == f"Bearer {token}"


def test_login_failure_is_forwarded(client, backend):
    backend.add("POST", "/auth/login", {"message": "Credenciales inválidas"}, status=401)
    resp = client.post("/api/auth/login", json={"email": "a@b.c", "password": "x"})
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Credenciales inválidas"}


def test_register_refuses_admin(client, backend):
    resp = client.post("/api/auth/register", json={
        "name": "Eve", "email": "e@x.io", "password": "pw", "role": "admin",
    })
    assert resp.status_code == 403
    assert backend.calls == []


def test_register_defaults_to_student(client, backend):
    backend.add("POST", "/auth/register", {"id": 9})
    resp = client.post("/api/auth/register", json={"name": "Eve", "email": "e@x.io", "password": "pw"})
    assert resp.status_code == 201
    assert backend.last("POST", "/auth/register")["json"]["role"] == "student"


def test_logout_revokes_token(client, app, student_headers):
    resp = client.post("/api/auth/logout", headers=student_headers)
    assert resp.status_code == 200

    with app.app_context():
        assert TokenBlocklist.query.count() == 1

    resp = client.get("/api/courses", headers=student_headers)
    assert resp.status_code == 401


def test_purge_tokens_removes_old_rows(app):
    with app.app_context():
        old = datetime.now(timezone.utc) - timedelta(days=30)
        db.session.add(TokenBlocklist(fingerprint="old", user_id="1", revoked_at=old))
        db.session.add(TokenBlocklist(fingerprint="new", user_id="1"))
        db.session.commit()

        assert purge_tokens.purge(days=8) == 1
        assert [t.fingerprint for t in TokenBlocklist.query.all()] == ["new"]


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


def test_user_id_from_user_id_claim(client, backend, make_token):
    backend.add("GET", "/course", [{"id": 10, "title": "Python"}])
    backend.add("GET", "/inscriptions/courses", [])
    backend.add("POST", "/inscriptions", {"id": 1, "courseId": 10, "userId": 7})
    headers = _bearer(make_token(None, "student", userId=7))

    assert client.get("/api/courses/catalog", headers=headers).status_code == 200
    assert client.post("/api/inscriptions", json={"courseId": 10}, headers=headers).status_code == 201
    assert backend.last("POST", "/inscriptions")["json"] == {"userId": 7, "courseId": 10}


def test_user_id_from_sub_claim(client, backend, make_token):
    backend.add("POST", "/inscriptions", {"id": 1, "courseId": 10, "userId": 7})
    headers = _bearer(make_token(None, "student", sub="7"))

    assert client.post("/api/inscriptions", json={"courseId": 10}, headers=headers).status_code == 201
    assert backend.last("POST", "/inscriptions")["json"]["userId"] == 7


def test_upstream_signed_token_without_jti(client, backend, app):
    token = pyjwt.encode(
        {"userId": 7, "role": "student", "name": "Ana"},
        app.config["JWT_SECRET_KEY"],
        algorithm="HS256",
    )
    backend.add("GET", "/course", [])
    backend.add("GET", "/inscriptions/courses", [])
    assert client.get("/api/courses/catalog", headers=_bearer(token)).status_code == 200


def test_token_without_user_id(client, backend, make_token):
    backend.add("GET", "/course", [{"id": 10, "title": "Python"}])
    backend.add("GET", "/inscriptions/courses", [])
    headers = _bearer(make_token(None, "student"))

    assert client.get("/api/courses/catalog", headers=headers).status_code == 200

    resp = client.post("/api/inscriptions", json={"courseId": 10}, headers=headers)
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "User ID not found"}
    assert backend.last("POST", "/inscriptions") is None

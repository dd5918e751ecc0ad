import json as jsonlib

import pytest
import requests
from flask_jwt_extended import create_access_token

from aula import create_app
from aula.config import TestConfig
from aula.extensions import db

BACKEND = TestConfig.BACKEND_URL


class FakeResponse:
    def __init__(self, status_code=200, body=None, raw=None):
        self.status_code = status_code
        if raw is not None:
            self.content = raw.encode("utf-8")
        elif body is None:
            self.content = b""
        else:
            self.content = jsonlib.dumps(body).encode("utf-8")

    @property
    def ok(self):
        return self.status_code < 400

    @property
    def text(self):
        return self.content.decode("utf-8")

    def json(self):
        return jsonlib.loads(self.text)


class FakeBackend:
    """Stands in for ``requests.Session``: answers by (method, path) and records calls."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, path, body=None, status=200, raw=None):
        self.routes[(method.upper(), path)] = FakeResponse(status, body, raw)

    def fail(self, method, path, exc=None):
        self.routes[(method.upper(), path)] = exc or requests.ConnectionError("boom")

    def request(self, method, url, **kwargs):
        path = url[len(BACKEND):] if url.startswith(BACKEND) else url
        self.calls.append({"method": method, "path": path, **kwargs})
        answer = self.routes.get((method.upper(), path))
        if answer is None:
            return FakeResponse(404, {"message": f"no fake route for {method} {path}"})
        if isinstance(answer, Exception):
            raise answer
        return answer

    def last(self, method=None, path=None):
        for call in reversed(self.calls):
            if (method is None or call["method"] == method) and (path is None or call["path"] == path):
                return call
        return None


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def app(backend):
    app = create_app(TestConfig, http=backend)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_token(app):
    def _make(user_id="7", role="student", **claims):
        if user_id is not None:
            claims.setdefault("id", str(user_id))
        with app.app_context():
            return create_access_token(identity=role, additional_claims=claims)
    return _make


@pytest.fixture
def student_headers(make_token):
    return {"Authorization": f"Bearer {make_token('7', 'student')}"}


@pytest.fixture
def professor_headers(make_token):
    return {"Authorization": f"Bearer {make_token('3', 'professor')}"}


@pytest.fixture
def admin_headers(make_token):
    return {"Authorization": f"Bearer {make_token('1', 'admin')}"}

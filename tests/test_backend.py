import pytest
import requests

from aula.backend import BackendClient, error_message, unwrap_list
from aula.errors import INVALID_RESPONSE_ERROR, UNAVAILABLE_ERROR, BackendError, BackendUnavailable

from conftest import BACKEND, FakeBackend, FakeResponse


@pytest.fixture
def fake():
    return FakeBackend()


@pytest.fixture
def client(fake):
    return BackendClient(BACKEND + "/", http=fake)


def test_sends_bearer_token(client, fake):
    fake.add("GET", "/course", [{"id": 1}])
    assert client.get("/course", "abc") == [{"id": 1}]
    call = fake.last("GET", "/course")
    assert call["headers"]["Authorization"] == "Bearer abc"
    assert call["timeout"] == 15.0


def test_no_token_no_header(client, fake):
    fake.add("POST", "/auth/login", {"token": "t"})
    client.post("/auth/login", json={"email": "a@b.c"})
    assert "Authorization" not in fake.last()["headers"]


def test_error_message_prefers_message_then_error():
    assert error_message(FakeResponse(400, {"message": "m", "error": "e"})) == "m"
    assert error_message(FakeResponse(400, {"error": "e"})) == "e"
    assert error_message(FakeResponse(400, {"message": ["a", "b"]})) == "a; b"
    assert error_message(FakeResponse(500, raw="<html>"), "fallback") == "fallback"
    assert error_message(FakeResponse(500, []), "fallback") == "fallback"


def test_non_ok_raises_backend_error(client, fake):
    fake.add("GET", "/course/9", {"message": "Curso no existe"}, status=404)
    with pytest.raises(BackendError) as info:
        client.get("/course/9", "t", fallback="Curso no encontrado")
    assert info.value.status_code == 404
    assert info.value.message == "Curso no existe"
    assert info.value.details == {"message": "Curso no existe"}


def test_non_ok_without_message_uses_fallback(client, fake):
    fake.add("DELETE", "/course/9", status=500)
    with pytest.raises(BackendError) as info:
        client.delete("/course/9", "t", fallback="Error al eliminar el curso")
    assert info.value.message == "Error al eliminar el curso"


def test_network_failure_is_unavailable(client, fake):
    fake.fail("GET", "/course", requests.ConnectionError("refused"))
    with pytest.raises(BackendUnavailable) as info:
        client.get("/course")
    assert info.value.status_code == 502
    assert info.value.message == UNAVAILABLE_ERROR


def test_empty_body_is_none(client, fake):
    fake.add("DELETE", "/inscriptions/1", status=204)
    assert client.delete("/inscriptions/1", "t") is None


def test_invalid_json_is_unavailable(client, fake):
    fake.add("GET", "/course", raw="not json")
    with pytest.raises(BackendUnavailable) as info:
        client.get("/course")
    assert info.value.message == INVALID_RESPONSE_ERROR


def test_unwrap_list():
    assert unwrap_list([1, 2], "x") == [1, 2]
    assert unwrap_list({"courses": [1]}, "courses") == [1]
    assert unwrap_list({"data": [2]}, "courses") == [2]
    assert unwrap_list({"items": [3]}) == [3]
    assert unwrap_list(None, "courses") == []
    assert unwrap_list({"courses": "nope"}, "courses") == []

def test_enroll_sends_integer_ids(client, backend, student_headers):
    backend.add("POST", "/inscriptions", {"id": 1, "courseId": 10, "userId": 7, "status": "pending"})

    resp = client.post("/api/inscriptions", json={"courseId": "10"}, headers=student_headers)
    assert resp.status_code == 201
    assert resp.get_json()["status"] == "pending"
    assert backend.last("POST", "/inscriptions")["json"] == {"userId": 7, "courseId": 10}


def test_enroll_requires_course(client, student_headers):
    resp = client.post("/api/inscriptions", json={}, headers=student_headers)
    assert resp.status_code == 400


def test_enroll_rejects_non_numeric_ids(client, backend, student_headers, make_token):
    resp = client.post("/api/inscriptions", json={"courseId": "abc"}, headers=student_headers)
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Invalid courseId or userId format"}

    headers = {"Authorization": f"Bearer {make_token('user-7', 'student')}"}
    resp = client.post("/api/inscriptions", json={"courseId": 10}, headers=headers)
    assert resp.status_code == 400
    assert backend.calls == []


def test_professor_accepts_request(client, backend, professor_headers):
    backend.add("PATCH", "/inscriptions/4", {"id": 4, "enrollment_status": "active"})

    resp = client.patch(
        "/api/inscriptions/4", json={"status": "accepted", "message": " Bienvenido "}, headers=professor_headers
    )
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "accepted"
    assert backend.last("PATCH", "/inscriptions/4")["json"] == {
        "enrollment_status": "active",
        "message": "Bienvenido",
    }


def test_professor_rejects_request(client, backend, professor_headers):
    backend.add("PATCH", "/inscriptions/4", {"id": 4, "enrollment_status": "dropped"})
    resp = client.patch("/api/inscriptions/4", json={"status": "rejected"}, headers=professor_headers)
    assert resp.get_json()["status"] == "rejected"
    assert backend.last("PATCH", "/inscriptions/4")["json"] == {"enrollment_status": "dropped"}


def test_decision_validation(client, professor_headers, student_headers):
    assert client.patch("/api/inscriptions/4", json={"status": "pending"}, headers=professor_headers).status_code == 400
    assert client.patch("/api/inscriptions/4", json={"status": "accepted"}, headers=student_headers).status_code == 403


def test_withdraw(client, backend, student_headers):
    backend.add("DELETE", "/inscriptions/4", status=204)
    assert client.delete("/api/inscriptions/4", headers=student_headers).status_code == 200


def test_user_admin_rules(client, backend, admin_headers, student_headers):
    resp = client.post("/api/users", json={
        "name": "Root", "email": "r@x.io", "password": "pw", "role": "admin",
    }, headers=admin_headers)
    assert resp.status_code == 403

    assert client.get("/api/users", headers=student_headers).status_code == 403
    assert client.patch("/api/users/8", json={"name": "x"}, headers=student_headers).status_code == 403
    assert client.patch("/api/users/7", json={"role": "professor"}, headers=student_headers).status_code == 403

    backend.add("PATCH", "/users/7", {"id": 7, "name": "Ana María"})
    resp = client.patch("/api/users/7", json={"name": "Ana María"}, headers=student_headers)
    assert resp.status_code == 200
    assert resp.get_json()["name"] == "Ana María"

    assert client.delete("/api/users/1", headers=admin_headers).status_code == 400

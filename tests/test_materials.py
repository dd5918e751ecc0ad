import io


def _seed(backend):
    backend.add("GET", "/folder/course/10", [
        {"id": 1, "name": "Semana 1", "studentVisible": True},
        {"id": 2, "name": "Soluciones", "studentVisible": False},
    ])
    backend.add("GET", "/documents/course/10", [
        {"id": 5, "name": "guia.pdf", "fileUrl": "https://x/guia.pdf"},
        {"id": 6, "name": "examen.pdf", "studentVisible": False},
    ])


def test_students_only_see_visible_materials(client, backend, student_headers):
    _seed(backend)
    body = client.get("/api/courses/10/materials", headers=student_headers).get_json()
    assert [f["name"] for f in body["folders"]] == ["Semana 1"]
    assert [d["name"] for d in body["documents"]] == ["guia.pdf"]


def test_professors_see_everything(client, backend, professor_headers):
    _seed(backend)
    body = client.get("/api/courses/10/materials", headers=professor_headers).get_json()
    assert len(body["folders"]) == 2
    assert len(body["documents"]) == 2


def test_materials_fail_when_either_source_fails(client, backend, student_headers):
    _seed(backend)
    backend.add("GET", "/documents/course/10", {"message": "storage down"}, status=503)
    resp = client.get("/api/courses/10/materials", headers=student_headers)
    assert resp.status_code == 503


def test_create_folder(client, backend, professor_headers):
    resp = client.post("/api/courses/10/materials/folder", json={"name": "x" * 101}, headers=professor_headers)
    assert resp.status_code == 400

    backend.add("POST", "/folder", {"id": 3, "name": "Semana 2"})
    resp = client.post("/api/courses/10/materials/folder", json={"name": " Semana 2 "}, headers=professor_headers)
    assert resp.status_code == 201
    assert backend.last("POST", "/folder")["json"] == {
        "courseId": 10,
        "name": "Semana 2",
        "parentFolderId": None,
        "studentVisible": True,
    }


def test_upload_only_pdf(client, backend, professor_headers):
    resp = client.post(
        "/api/courses/10/materials/upload",
        data={"file": (io.BytesIO(b"hello"), "notes.txt", "text/plain")},
        content_type="multipart/form-data",
        headers=professor_headers,
    )
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Only PDF files are allowed"}


def test_upload_size_limit(app, client, backend, professor_headers):
    app.config["MAX_UPLOAD_BYTES"] = 4
    resp = client.post(
        "/api/courses/10/materials/upload",
        data={"file": (io.BytesIO(b"%PDF-1.4"), "big.pdf", "application/pdf")},
        content_type="multipart/form-data",
        headers=professor_headers,
    )
    assert resp.status_code == 400
    assert backend.calls == []


def test_upload_forwards_multipart(client, backend, professor_headers):
    backend.add("POST", "/documents/upload", {"id": 8, "name": "guia.pdf", "studentVisible": False})
    resp = client.post(
        "/api/courses/10/materials/upload",
        data={
            "file": (io.BytesIO(b"%PDF-1.4"), "guia.pdf", "application/pdf"),
            "folderId": "3",
            "studentVisible": "false",
        },
        content_type="multipart/form-data",
        headers=professor_headers,
    )
    assert resp.status_code == 201
    call = backend.last("POST", "/documents/upload")
    assert call["data"] == {"courseId": "10", "studentVisible": "false", "folderId": "3"}
    assert call["files"]["file"][0] == "guia.pdf"


def test_students_cannot_manage_materials(client, student_headers):
    assert client.delete("/api/materials/5", headers=student_headers).status_code == 403
    assert client.delete("/api/folders/1", headers=student_headers).status_code == 403


def test_folder_contents(client, backend, student_headers):
    backend.add("GET", "/folder/parent/1", [{"id": 4, "name": "Sub", "studentVisible": False}])
    backend.add("GET", "/documents/folder/1", [{"id": 9, "name": "a.pdf"}])
    body = client.get("/api/folders/1", headers=student_headers).get_json()
    assert body["folders"] == []
    assert [d["id"] for d in body["documents"]] == ["9"]

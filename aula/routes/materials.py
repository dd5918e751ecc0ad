from flask import Blueprint, current_app, request

from ..backend import get_backend, unwrap_list
from ..models import Document, Folder, UserRole, visible_to_students
from ..utils.auth import current_session, roles_required, session_required
from ..utils.uploads import file_size, megabytes

materials_bp = Blueprint("materials", __name__)

_MANAGERS = (UserRole.admin.value, UserRole.professor.value)
MAX_FOLDER_NAME = 100


def _contents(folders_data, documents_data, professor: bool) -> dict:
    folders = Folder.from_list(unwrap_list(folders_data, "folders"))
    documents = Document.from_list(unwrap_list(documents_data, "documents"))
    if not professor:
        folders = visible_to_students(folders)
        documents = visible_to_students(documents)
    return {
        "folders": [f.to_dict() for f in folders],
        "documents": [d.to_dict() for d in documents],
    }


@materials_bp.get("/courses/<int:course_id>/materials")
@session_required
def course_materials(course_id: int):
    session = current_session()
    backend = get_backend()
    folders = backend.get(f"/folder/course/{course_id}", session.token, fallback="Error al cargar materiales")
    documents = backend.get(f"/documents/course/{course_id}", session.token, fallback="Error al cargar materiales")
    return _contents(folders, documents, session.is_professor), 200


@materials_bp.post("/courses/<int:course_id>/materials/folder")
@roles_required(*_MANAGERS)
def create_folder(course_id: int):
    session = current_session()
    data = request.get_json(silent=True) or {}

    name = str(data.get("name") or "").strip()
    if not name:
        return {"error": "Folder name is required"}, 400
    if len(name) > MAX_FOLDER_NAME:
        return {"error": f"Folder name too long (max {MAX_FOLDER_NAME} characters)"}, 400

    visible = data.get("studentVisible", data.get("student_visible"))
    created = get_backend().post(
        "/folder",
        session.token,
        json={
            "courseId": course_id,
            "name": name,
            "parentFolderId": data.get("parentFolderId") or None,
            "studentVisible": True if visible is None else bool(visible),
        },
        fallback="Error al crear la carpeta",
    )
    return Folder.from_payload(created).to_dict(), 201


@materials_bp.post("/courses/<int:course_id>/materials/upload")
@roles_required(*_MANAGERS)
def upload_material(course_id: int):
    session = current_session()

    upload = request.files.get("file")
    if upload is None or not upload.filename:
        return {"error": "No file provided"}, 400

    if upload.mimetype != "application/pdf":
        return {"error": "Only PDF files are allowed"}, 400

    limit = current_app.config["MAX_UPLOAD_BYTES"]
    if file_size(upload) > limit:
        return {"error": f"File size exceeds {megabytes(limit)}MB limit"}, 400

    form = {
        "courseId": str(course_id),
        "studentVisible": request.form.get("studentVisible", "true"),
    }
    folder_id = request.form.get("folderId")
    if folder_id:
        form["folderId"] = folder_id

    created = get_backend().post(
        "/documents/upload",
        session.token,
        data=form,
        files={"file": (upload.filename, upload.stream, upload.mimetype)},
        fallback="Error al subir el archivo",
    )
    return Document.from_payload(created).to_dict(), 201


@materials_bp.patch("/materials/<int:document_id>")
@roles_required(*_MANAGERS)
def update_material(document_id: int):
    session = current_session()
    data = request.get_json(silent=True) or {}

    payload = {k: data[k] for k in ("name", "studentVisible", "folderId") if k in data}
    if "name" in payload:
        payload["name"] = str(payload["name"] or "").strip()
        if not payload["name"]:
            return {"error": "name cannot be empty"}, 400
    if not payload:
        return {"error": "no fields to update"}, 400

    updated = get_backend().patch(
        f"/documents/{document_id}", session.token, json=payload, fallback="Error al actualizar el documento"
    )
    return Document.from_payload(updated).to_dict(), 200


@materials_bp.delete("/materials/<int:document_id>")
@roles_required(*_MANAGERS)
def delete_material(document_id: int):
    session = current_session()
    get_backend().delete(f"/documents/{document_id}", session.token, fallback="Error al eliminar el documento")
    return "", 204


@materials_bp.get("/folders/<int:folder_id>")
@session_required
def folder_contents(folder_id: int):
    session = current_session()
    backend = get_backend()
    subfolders = backend.get(f"/folder/parent/{folder_id}", session.token, fallback="Error al cargar la carpeta")
    documents = backend.get(f"/documents/folder/{folder_id}", session.token, fallback="Error al cargar la carpeta")
    return _contents(subfolders, documents, session.is_professor), 200


@materials_bp.delete("/folders/<int:folder_id>")
@roles_required(*_MANAGERS)
def delete_folder(folder_id: int):
    session = current_session()
    get_backend().delete(f"/folder/{folder_id}", session.token, fallback="Error al eliminar la carpeta")
    return "", 204

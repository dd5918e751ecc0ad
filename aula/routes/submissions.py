import logging

from flask import Blueprint, current_app, request

from ..backend import get_backend, unwrap_list
from ..errors import BackendError
from ..models import Submission, UserRole, validate_grade
from ..utils.auth import current_session, roles_required, session_required
from ..utils.uploads import file_size, megabytes

logger = logging.getLogger(__name__)

submissions_bp = Blueprint("submissions", __name__)

_MANAGERS = (UserRole.admin.value, UserRole.professor.value)


def _listing(data) -> dict:
    submissions = Submission.from_list(unwrap_list(data, "submissions"))
    return {"submissions": [s.to_dict() for s in submissions], "total": len(submissions)}


@submissions_bp.get("/submissions")
@session_required
def list_submissions():
    session = current_session()
    data = get_backend().get("/submissions", session.token, fallback="Error al cargar entregas")
    return _listing(data), 200


@submissions_bp.post("/submissions")
@session_required
def create_submission():
    session = current_session()
    data = request.get_json(silent=True) or {}

    assignment_id = data.get("assignmentId", data.get("assignment_id"))
    if assignment_id in (None, ""):
        return {"error": "assignmentId is required"}, 400

    created = get_backend().post(
        "/submissions", session.token, json={**data, "assignmentId": assignment_id},
        fallback="Error al enviar la entrega",
    )
    return Submission.from_payload(created).to_dict(), 201


@submissions_bp.post("/submissions/upload")
@session_required
def upload_submission():
    session = current_session()

    files = [f for f in request.files.getlist("files") if f and f.filename]
    assignment_id = request.form.get("assignmentId")

    if not files:
        return {"error": "At least one file is required"}, 400
    if not assignment_id:
        return {"error": "assignmentId is required"}, 400

    max_files = current_app.config["MAX_SUBMISSION_FILES"]
    if len(files) > max_files:
        return {"error": f"Maximum {max_files} files allowed"}, 400

    limit = current_app.config["MAX_UPLOAD_BYTES"]
    for upload in files:
        if file_size(upload) > limit:
            return {"error": f'File "{upload.filename}" exceeds {megabytes(limit)}MB limit'}, 400

    form = {"assignmentId": assignment_id}
    comments = request.form.get("comments")
    if comments:
        form["comments"] = comments

    logger.info("submission upload: %d file(s) for assignment %s", len(files), assignment_id)
    created = get_backend().post(
        "/submissions/upload",
        session.token,
        data=form,
        files=[("files", (f.filename, f.stream, f.mimetype)) for f in files],
        fallback="Error al subir la entrega",
    )
    return Submission.from_payload(created).to_dict(), 201


@submissions_bp.get("/submissions/assignment/<int:assignment_id>")
@roles_required(*_MANAGERS)
def assignment_submissions(assignment_id: int):
    session = current_session()
    try:
        data = get_backend().get(
            f"/submissions/assignment/{assignment_id}", session.token,
            fallback="Error al cargar entregas",
        )
    except BackendError as exc:
        # nothing submitted yet
        if exc.status_code == 404:
            return {"submissions": [], "total": 0}, 200
        raise
    return _listing(data), 200


@submissions_bp.get("/submissions/user/<int:user_id>")
@session_required
def user_submissions(user_id: int):
    session = current_session()
    if not session.is_professor and session.user_id != str(user_id):
        return {"error": "forbidden"}, 403

    data = get_backend().get(
        f"/submissions/user/{user_id}", session.token, fallback="Error al cargar entregas"
    )
    return _listing(data), 200


@submissions_bp.patch("/submissions/<int:submission_id>")
@roles_required(*_MANAGERS)
def grade_submission(submission_id: int):
    session = current_session()
    data = request.get_json(silent=True) or {}

    try:
        score = validate_grade(data.get("score"), data.get("max_points", data.get("maxPoints")))
    except ValueError as exc:
        return {"error": str(exc)}, 400

    payload = {"score": score}
    if data.get("comments") is not None:
        payload["comments"] = str(data["comments"])

    updated = get_backend().patch(
        f"/submissions/{submission_id}", session.token, json=payload,
        fallback="Error al calificar la entrega",
    )
    logger.info("submission %s graded: %s", submission_id, score)
    return Submission.from_payload(updated).to_dict(), 200

from flask import Blueprint
from sqlalchemy import text

from ..backend import get_backend
from ..extensions import db

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health():
    db.session.execute(text("SELECT 1"))
    return {"status": "ok", "db": "up"}


@health_bp.get("/api/hello")
def hello():
    data = get_backend().get("/", fallback="Failed to fetch data")
    if not isinstance(data, (dict, list)):
        data = {"message": data}
    return data, 200

import logging

from flask import Flask

from .backend import init_backend
from .config import Config
from .errors import register_error_handlers
from .extensions import db, migrate, jwt

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(app: Flask) -> None:
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logger = logging.getLogger(__name__)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.propagate = False


def create_app(config_object=Config, http=None):
    app = Flask(__name__)
    app.config.from_object(config_object)

    configure_logging(app)

    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    from .jwt_callbacks import register_jwt_callbacks
    register_jwt_callbacks(jwt)

    from . import models  # noqa: F401

    init_backend(app, http=http)
    register_error_handlers(app)

    from .routes import register_blueprints
    register_blueprints(app)

    with app.app_context():
        db.create_all()

    @app.get("/routes")
    def show_routes():
        return {"routes": sorted([str(r) for r in app.url_map.iter_rules()])}

    return app

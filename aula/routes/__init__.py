from .announcements import announcements_bp
from .assignments import assignments_bp
from .attendance import attendance_bp
from .auth import auth_bp
from .courses import courses_bp
from .forums import forums_bp
from .health import health_bp
from .inscriptions import inscriptions_bp
from .materials import materials_bp
from .submissions import submissions_bp
from .users import users_bp


def register_blueprints(app):
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(users_bp, url_prefix="/api")
    app.register_blueprint(courses_bp, url_prefix="/api")
    app.register_blueprint(inscriptions_bp, url_prefix="/api")
    app.register_blueprint(materials_bp, url_prefix="/api")
    app.register_blueprint(assignments_bp, url_prefix="/api")
    app.register_blueprint(submissions_bp, url_prefix="/api")
    app.register_blueprint(announcements_bp, url_prefix="/api")
    app.register_blueprint(forums_bp, url_prefix="/api")
    app.register_blueprint(attendance_bp, url_prefix="/api")

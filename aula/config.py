from datetime import timedelta
import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-key")

    # upstream LMS REST backend
    BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:3000")
    BACKEND_TIMEOUT = float(os.getenv("BACKEND_TIMEOUT", "15"))
    OVERVIEW_WORKERS = int(os.getenv("OVERVIEW_WORKERS", "4"))

    # only the revoked-token blocklist lives here
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///aula.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # tokens are signed by the upstream backend, the secret must match it
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    # every upstream token carries a role; the user id may be in id, userId or sub
    JWT_IDENTITY_CLAIM = os.getenv("JWT_IDENTITY_CLAIM", "role")
    JWT_VERIFY_SUB = False

    JWT_TOKEN_LOCATION = ["cookies", "headers"]
    JWT_ACCESS_COOKIE_NAME = "jwt"
    JWT_ACCESS_COOKIE_PATH = "/"
    JWT_COOKIE_SECURE = _env_bool("JWT_COOKIE_SECURE")
    JWT_COOKIE_CSRF_PROTECT = False
    JWT_SESSION_COOKIE = False
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=int(os.getenv("JWT_ACCESS_EXPIRES_DAYS", "7")))
    JWT_COOKIE_MAX_AGE = int(timedelta(days=7).total_seconds())

    MAX_UPLOAD_BYTES = 10 * 1024 * 1024
    MAX_SUBMISSION_FILES = 5

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"
    BACKEND_URL = "http://backend.test"
    BACKEND_TIMEOUT = 1.0
    LOG_LEVEL = "DEBUG"

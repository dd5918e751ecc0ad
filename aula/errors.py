from __future__ import annotations

import logging

from flask import Flask
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)

DEFAULT_ERROR = "Ocurrió un error inesperado. Por favor, intenta de nuevo."
UNAVAILABLE_ERROR = "No se pudo conectar con el servidor"
INVALID_RESPONSE_ERROR = "Respuesta inválida del servidor"


class BackendError(Exception):
    """The upstream backend answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str = DEFAULT_ERROR, details=None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {"error": self.message}


class BackendUnavailable(BackendError):
    """The upstream could not be reached or sent something that is not JSON."""

    def __init__(self, message: str = UNAVAILABLE_ERROR):
        super().__init__(502, message)


class SessionError(Exception):
    """The request carries a token but no usable user identity."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)
        self.message = message


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(BackendError)
    def handle_backend_error(err: BackendError):
        logger.warning("backend error %s: %s", err.status_code, err.message)
        return err.to_dict(), err.status_code

    @app.errorhandler(ValidationError)
    def handle_unreadable_payload(err: ValidationError):
        # a single upstream entity we cannot map
        logger.warning("unreadable upstream payload: %d error(s)", err.error_count())
        return {"error": INVALID_RESPONSE_ERROR}, 502

    @app.errorhandler(SessionError)
    def handle_session_error(err: SessionError):
        return {"error": err.message}, err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return {"error": err.description or err.name}, err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        logger.exception("unhandled error")
        return {"error": "Internal server error"}, 500

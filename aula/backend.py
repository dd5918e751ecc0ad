"""
HTTP client for the upstream LMS backend.

Every BFF route goes through :class:`BackendClient`, which attaches the
caller's bearer token, turns non-2xx answers into :class:`BackendError`
(message taken from the upstream body, falling back to a Spanish default)
and network failures into :class:`BackendUnavailable`.
"""
from __future__ import annotations

import logging
from typing import Any

import requests
from flask import Flask, current_app

from .errors import DEFAULT_ERROR, INVALID_RESPONSE_ERROR, BackendError, BackendUnavailable

logger = logging.getLogger(__name__)

EXTENSION_KEY = "aula.backend"


def error_message(resp, fallback: str = DEFAULT_ERROR) -> str:
    """Pick the most useful message out of an error response."""
    try:
        body = resp.json()
    except ValueError:
        return fallback

    if not isinstance(body, dict):
        return fallback

    message = body.get("message") or body.get("error")
    # validation errors come back as a list of messages
    if isinstance(message, list):
        message = "; ".join(str(m) for m in message if m)
    if isinstance(message, dict):
        message = message.get("message")
    return str(message) if message else fallback


def unwrap_list(data: Any, *keys: str) -> list:
    """Return the list inside ``data``: either ``data`` itself or ``data[key]``."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in keys + ("data", "items"):
            value = data.get(key)
            if isinstance(value, list):
                return value
    return []


class BackendClient:
    def __init__(self, base_url: str, timeout: float = 15.0, http: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()

    def request(
        self,
        method: str,
        path: str,
        token: str | None = None,
        *,
        json: Any = None,
        params: dict | None = None,
        data: dict | None = None,
        files: Any = None,
        fallback: str = DEFAULT_ERROR,
    ) -> Any:
        url = f"{self.base_url}{path}"
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            resp = self.http.request(
                method,
                url,
                headers=headers,
                json=json,
                params=params,
                data=data,
                files=files,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise BackendUnavailable() from exc

        logger.debug("%s %s -> %s", method, path, resp.status_code)

        if not resp.ok:
            details = None
            try:
                details = resp.json()
            except ValueError:
                details = resp.text or None
            raise BackendError(resp.status_code, error_message(resp, fallback), details)

        if resp.status_code == 204 or not resp.content:
            return None

        try:
            return resp.json()
        except ValueError as exc:
            logger.warning("%s %s returned a non-JSON body", method, path)
            raise BackendUnavailable(INVALID_RESPONSE_ERROR) from exc

    def get(self, path: str, token: str | None = None, **kwargs) -> Any:
        return self.request("GET", path, token, **kwargs)

    def post(self, path: str, token: str | None = None, **kwargs) -> Any:
        return self.request("POST", path, token, **kwargs)

    def put(self, path: str, token: str | None = None, **kwargs) -> Any:
        return self.request("PUT", path, token, **kwargs)

    def patch(self, path: str, token: str | None = None, **kwargs) -> Any:
        return self.request("PATCH", path, token, **kwargs)

    def delete(self, path: str, token: str | None = None, **kwargs) -> Any:
        return self.request("DELETE", path, token, **kwargs)


def init_backend(app: Flask, http: requests.Session | None = None) -> BackendClient:
    client = BackendClient(
        app.config["BACKEND_URL"],
        timeout=app.config.get("BACKEND_TIMEOUT", 15.0),
        http=http,
    )
    app.extensions[EXTENSION_KEY] = client
    return client


def get_backend() -> BackendClient:
    return current_app.extensions[EXTENSION_KEY]

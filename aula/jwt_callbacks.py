import hashlib
import json

from .models import TokenBlocklist


def token_fingerprint(jwt_payload: dict) -> str:
    jti = jwt_payload.get("jti")
    if jti:
        return str(jti)[:64]
    # upstream tokens do not always carry a jti
    raw = json.dumps(jwt_payload, sort_keys=True, default=str)
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def is_token_revoked(jwt_header, jwt_payload) -> bool:
    fingerprint = token_fingerprint(jwt_payload)
    return TokenBlocklist.query.filter_by(fingerprint=fingerprint).first() is not None


def register_jwt_callbacks(jwt) -> None:
    @jwt.token_in_blocklist_loader
    def token_in_blocklist_loader(jwt_header, jwt_payload):
        return is_token_revoked(jwt_header, jwt_payload)

    @jwt.unauthorized_loader
    def missing_token(reason):
        return {"error": "Unauthorized"}, 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return {"error": "Unauthorized"}, 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return {"error": "Session expired"}, 401

    @jwt.revoked_token_loader
    def revoked_token(jwt_header, jwt_payload):
        return {"error": "Unauthorized"}, 401

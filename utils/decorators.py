from __future__ import annotations
from functools import wraps
from flask import request, g, current_app
from utils.errors import unauthorized, forbidden
from utils.security import decode_access_token, TokenError, DEFAULT_ALGORITHM

BEARER_PREFIX = "Bearer "
API_KEY_PREFIX = "ApiKey "


def _credential(req, prefix: str, label: str) -> str:
    auth = req.headers.get("Authorization", "")
    if not auth or not auth.startswith(prefix):
        raise unauthorized(f"Missing or invalid Authorization header; expected {label}")
    value = auth[len(prefix):].strip()
    if not value:
        raise unauthorized(f"Empty {label}")
    return value


def get_bearer_token(req) -> str:
    """Return the raw credential after `Bearer `; it is not verified here."""
    return _credential(req, BEARER_PREFIX, "Bearer token")


def get_api_key(req) -> str:
    return _credential(req, API_KEY_PREFIX, "ApiKey")


def authenticate(req, secret: str, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """
    Resolve the access token in `req` to a user id.
    Every failure (missing header, malformed, bad signature, expired) is Unauthorized.
    """
    token = get_bearer_token(req)
    try:
        return decode_access_token(token, secret, algorithm)
    except TokenError as e:
        raise unauthorized(str(e))


def authorize_ownership(resource_owner_id: str, caller_id: str) -> None:
    """
    Caller must own the resource. Only call this once the resource is known to exist,
    so that missing (404) and not yours (403) stay distinct.
    """
    if str(resource_owner_id) != str(caller_id):
        raise forbidden("You are not allowed to modify this resource")


def jwt_required():
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            # identity always comes from the verified subject, never from the body
            g.current_user_id = authenticate(
                request,
                current_app.config["JWT_SECRET"],
                current_app.config.get("JWT_ALGORITHM", DEFAULT_ALGORITHM),
            )
            return fn(*args, **kwargs)

        return wrapper

    return decorator

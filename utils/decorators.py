from __future__ import annotations
from functools import wraps
from flask import request, g, abort, current_app
from utils.security import TokenError


def bearer_token() -> str | None:
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return None
    return auth.split(" ", 1)[1].strip() or None


def admin_required():
    """
    Require a valid access token with the admin role.
    The decoded claims are attached to g.current_admin.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = bearer_token()
            if not token:
                abort(401, description="Missing or invalid Authorization header")
            tokens = current_app.extensions["token_service"]
            try:
                decoded = tokens.verify_access_token(token)
            except TokenError:
                abort(401, description="Invalid or expired token")

            if decoded.get("role") != "admin":
                abort(403, description="Insufficient role")
            g.current_admin = decoded
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> dict:
    """The request's JSON object, or {} when the body is missing, invalid or not an object."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}

"""
Application error taxonomy.

Every error raised by the handshake controller and the content routes is one
of these; api/errors.py turns them into the uniform JSON error envelope.
"""
from __future__ import annotations


class AppError(Exception):
    status = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, status: int | None = None, details=None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status
        self.details = details


class ValidationError(AppError):
    status = 400
    code = "VALIDATION_ERROR"


class AuthError(AppError):
    """Bad credentials or token. 401 by default, 403 when the caller is known but refused."""
    status = 401
    code = "UNAUTHORIZED"

    def __init__(self, message: str, status: int | None = None, details=None):
        super().__init__(message, status, details)
        if self.status == 403:
            self.code = "FORBIDDEN"


class ConflictError(AppError):
    status = 409
    code = "CONFLICT"


class NotFoundError(AppError):
    status = 404
    code = "NOT_FOUND"


class InternalError(AppError):
    status = 500
    code = "INTERNAL_ERROR"


class ConfigError(Exception):
    """Required configuration is missing or invalid. Raised at startup only."""

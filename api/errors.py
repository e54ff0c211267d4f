from flask import jsonify
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError
import logging

from utils.errors import AppError

logger = logging.getLogger(__name__)

HTTP_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    413: "PAYLOAD_TOO_LARGE",
}


def error_response(message: str, code: str, status: int, details=None):
    payload = {"error": message, "code": code, "status": status}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def register_error_handlers(app):
    # Application errors raised by the handshake and content routes
    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        if err.status >= 500:
            logger.exception("Internal error", exc_info=err)
        return error_response(err.message, err.code, err.status, details=err.details)

    # Marshmallow validation errors map to 400 with field-level details
    @app.errorhandler(SchemaValidationError)
    def handle_validation_error(err: SchemaValidationError):
        return error_response("Validation failed", "VALIDATION_ERROR", 400, details=err.messages)

    # Unique constraints (slug collisions, duplicate usernames) surface as 409
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        message = str(getattr(err, "orig", err)).lower()
        logger.warning("Integrity error: %s", message)
        if "unique" in message:
            return error_response("Resource already exists", "CONFLICT", 409)
        if "foreign key" in message:
            return error_response("Referenced resource is in use or missing", "CONFLICT", 409)
        return error_response("Integrity error", "BAD_REQUEST", 400)

    # Werkzeug HTTPExceptions (abort(...)) map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = err.code or 400
        return error_response(err.description, HTTP_CODES.get(status, "HTTP_ERROR"), status)

    # 500 Internal Error (catch-all). Never leak the traceback to the client.
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        return error_response("Internal Server Error", "INTERNAL_ERROR", 500)

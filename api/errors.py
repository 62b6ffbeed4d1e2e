from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError
import logging

from utils.errors import ApiError, ErrorKind

logger = logging.getLogger("chirpy.errors")


def error_response(error: str, message: str, status: int, details: dict | None = None):
    payload = {"error": error, "message": message, "status": status}
    if details:
        payload["details"] = details
    response = jsonify(payload)
    response.status_code = status
    if status == ErrorKind.UNAUTHORIZED.status:
        response.headers["WWW-Authenticate"] = "Bearer"
    return response


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        if err.kind is ErrorKind.INTERNAL:
            logger.error("Internal error: %s", err.message)
        return error_response(err.kind.name, err.message, err.status)

    # Marshmallow validation errors: the client must fix the request
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return error_response("BAD_REQUEST", "Invalid input", 400, details=err.messages)

    # Werkzeug HTTPExceptions map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        code = err.code or 400
        try:
            kind = ErrorKind(code).name
        except ValueError:
            kind = "BAD_REQUEST" if code < 500 else "INTERNAL"
        return error_response(kind, err.description, code)

    # Store unavailable or unexpected database fault
    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(err: SQLAlchemyError):
        logger.exception("Database error", exc_info=err)
        return error_response("INTERNAL", "A storage error occurred", 500)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        details = None
        # In dev, include exception details to speed up debugging
        if current_app and current_app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("INTERNAL", "An unexpected error occurred", 500, details=details)

from flask import Blueprint, current_app, jsonify
from google.api_core.exceptions import GoogleAPIError

from .errors import AppError, RemoteFailure

error_handlers_bp = Blueprint("error_handlers", __name__)


def _error_response(error: AppError):
    body = {"success": False, "error": error.message, "code": error.code}
    return jsonify(body), error.status_code


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles application errors raised outside a service boundary."""
    if error.status_code >= 500:
        current_app.logger.error(f"Application Error: {error.message}")
    else:
        current_app.logger.warning(f"{type(error).__name__}: {error.message}")
    return _error_response(error)


@error_handlers_bp.app_errorhandler(GoogleAPIError)
def handle_firestore_error(e):
    """Handles Firestore errors that escaped the service layer."""
    current_app.logger.error(f"Firestore Error: {e}")
    return _error_response(RemoteFailure(str(e)))


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return jsonify({"success": False, "error": "Not found.", "code": "not_found"}), 404


@error_handlers_bp.app_errorhandler(405)
def handle_405(e):
    """Handles requests using the wrong HTTP method."""
    body = {"success": False, "error": "Method not allowed.", "code": "invalid_input"}
    return jsonify(body), 405


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    body = {"success": False, "error": "Internal server error.", "code": "app_error"}
    return jsonify(body), 500

"""Utility functions for the application."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from flask import jsonify

from .errors import ERROR_STATUS_CODES

if TYPE_CHECKING:
    from flask import Response

    from .core.types import OperationResult


def result_status(result: OperationResult, success_status: int = 200) -> int:
    """Map an operation result to an HTTP status code."""
    if result.get("success"):
        return success_status
    return ERROR_STATUS_CODES.get(result.get("code", ""), 400)


def jsonify_result(
    result: OperationResult, success_status: int = 200
) -> tuple[Response, int]:
    """Render an operation result as a JSON response."""
    return jsonify(result), result_status(result, success_status)


def first_form_error(form: Any) -> str:
    """Return the first validation message of a WTForms form."""
    for field_name, messages in form.errors.items():
        if messages:
            label = getattr(form, field_name).label.text
            return f"{label}: {messages[0]}"
    return "Invalid input."

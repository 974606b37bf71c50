"""Helpers for building operation results at the service boundary."""

from __future__ import annotations

from functools import wraps
from typing import TYPE_CHECKING, Any, Callable

from flask import current_app
from google.api_core.exceptions import GoogleAPIError

from canvasfriends.errors import AppError, RemoteFailure

if TYPE_CHECKING:
    from .types import OperationResult


def success(**payload: Any) -> OperationResult:
    """Build a successful result carrying ``payload``."""
    result: dict[str, Any] = {"success": True}
    result.update(payload)
    return result  # type: ignore[return-value]


def failure(error: AppError) -> OperationResult:
    """Build a failed result from an application error."""
    return {"success": False, "error": error.message, "code": error.code}


def returns_result(action: str) -> Callable[..., Any]:
    """Convert raised errors into a failed ``OperationResult``.

    Application errors are expected outcomes and are logged as warnings.
    Errors from the document store become ``RemoteFailure`` with the upstream
    message preserved. Nothing is retried here.

    Usage:
    @returns_result("join group")
    def join_group(db, uid, code):
        ...
    """

    def decorator(func: Callable[..., OperationResult]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> OperationResult:
            try:
                return func(*args, **kwargs)
            except AppError as e:
                current_app.logger.warning(f"Could not {action}: {e.message}")
                return failure(e)
            except GoogleAPIError as e:
                current_app.logger.error(f"Error during {action}: {e}")
                return failure(RemoteFailure(str(e)))

        return wrapper

    return decorator

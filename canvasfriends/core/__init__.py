"""Core module for the canvasfriends application."""

from .results import failure, returns_result, success
from .types import FirestoreDocument, OperationResult

__all__ = [
    "FirestoreDocument",
    "OperationResult",
    "failure",
    "returns_result",
    "success",
]

"""Core data types for the canvasfriends application."""

from typing import Any, TypedDict


class FirestoreDocument(TypedDict, total=False):
    """Generic Firestore document structure."""

    id: str
    createdAt: str


class _OperationResultBase(TypedDict):
    success: bool


class OperationResult(_OperationResultBase, total=False):
    """Outcome of a registry or directory operation.

    Successful results carry their payload as extra keys; failures carry
    ``error`` (a human readable message) and ``code`` (a stable identifier).
    """

    error: str
    code: str
    data: dict[str, Any]

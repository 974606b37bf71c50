"""Data models for the user blueprint."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TypedDict

from canvasfriends.assignments.models import Assignment
from canvasfriends.core.types import FirestoreDocument


class User(FirestoreDocument, total=False):
    """A user document in Firestore."""

    uid: str
    email: str
    displayName: str
    groups: list[str]
    assignments: list[Assignment]
    lastSync: str


class Identity(TypedDict, total=False):
    """The verified identity attached to a request."""

    uid: str
    email: str
    name: str


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def new_user_document(uid: str, email: str | None, display_name: str | None) -> User:
    """Build the initial document for a first-time user."""
    return {
        "uid": uid,
        "email": email or "",
        "displayName": display_name or "",
        "groups": [],
        "createdAt": utc_now_iso(),
    }

"""Data models for the group blueprint."""

from __future__ import annotations

from canvasfriends.core.types import FirestoreDocument
from canvasfriends.user.models import utc_now_iso


class Group(FirestoreDocument, total=False):
    """A group document in Firestore."""

    code: str
    name: str
    createdBy: str
    members: list[str]


def new_group_document(code: str, name: str, creator_id: str) -> Group:
    """Build the document for a new group with its creator as sole member."""
    return {
        "code": code,
        "name": name,
        "createdBy": creator_id,
        "members": [creator_id],
        "createdAt": utc_now_iso(),
    }

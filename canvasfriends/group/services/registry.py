"""Service layer for group documents: creation, joining and leaving.

Every operation writes the group document and the member's user document in
a single Firestore batch, so the two membership lists change together or not
at all.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore
from flask import current_app
from google.api_core.exceptions import Conflict

from canvasfriends.constants import (
    GROUP_NAME_MAX_LENGTH,
    GROUPS_COLLECTION,
    MAX_GROUP_CODE_ATTEMPTS,
    USERS_COLLECTION,
)
from canvasfriends.core import returns_result, success
from canvasfriends.errors import (
    AccessDenied,
    AlreadyMember,
    ExhaustedRetries,
    NotFoundError,
    ValidationError,
)
from canvasfriends.user.services import require_identity

from ..models import new_group_document
from ..utils import generate_group_code, is_valid_group_code, normalize_group_code

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference

    from canvasfriends.core.types import OperationResult

    from ..models import Group


def _clean_group_name(name: Any) -> str:
    """Validate and trim a group name."""
    name = name.strip() if isinstance(name, str) else ""
    if not name:
        raise ValidationError("Group name is required.")
    if len(name) > GROUP_NAME_MAX_LENGTH:
        raise ValidationError(
            f"Group name must be at most {GROUP_NAME_MAX_LENGTH} characters."
        )
    return name


def _clean_group_code(code: Any) -> str:
    """Normalize a group code, rejecting blanks and impossible codes."""
    code = normalize_group_code(code)
    if not code:
        raise ValidationError("Group code is required.")
    if not is_valid_group_code(code):
        raise NotFoundError("Group not found.")
    return code


def _get_existing_user_ref(db: Client, uid: str) -> DocumentReference:
    """Return the reference of an existing user document."""
    user_ref = db.collection(USERS_COLLECTION).document(uid)
    if not user_ref.get().exists:
        raise NotFoundError("User not found.")
    return user_ref


def _get_group_snapshot(group_ref: DocumentReference) -> DocumentSnapshot:
    """Return the snapshot of an existing group document."""
    group_doc = cast("DocumentSnapshot", group_ref.get())
    if not group_doc.exists:
        raise NotFoundError("Group not found.")
    return group_doc


def _allocate_group(
    db: Client,
    user_ref: DocumentReference,
    creator_id: str,
    name: str,
    max_attempts: int,
) -> str:
    """Persist a new group under a freshly drawn code and return the code.

    The existence lookup skips codes that are visibly taken. The batched
    ``create`` only succeeds if the document is still absent at commit time,
    so a concurrent creator drawing the same code costs this caller one more
    attempt instead of overwriting the other group.
    """
    groups_ref = db.collection(GROUPS_COLLECTION)
    for attempt in range(1, max_attempts + 1):
        code = generate_group_code()
        group_ref = groups_ref.document(code)
        if group_ref.get().exists:
            current_app.logger.info(
                f"Group code {code} already taken (attempt {attempt}/{max_attempts})"
            )
            continue

        batch = db.batch()
        batch.create(group_ref, new_group_document(code, name, creator_id))
        batch.update(user_ref, {"groups": firestore.ArrayUnion([code])})
        try:
            batch.commit()
        except Conflict:
            current_app.logger.warning(
                f"Group code {code} was claimed concurrently "
                f"(attempt {attempt}/{max_attempts})"
            )
            continue
        return code

    raise ExhaustedRetries(
        f"Could not allocate a unique group code after {max_attempts} attempts."
    )


@returns_result("create group")
def create_group(
    db: Client,
    creator_id: str | None,
    name: Any,
    max_attempts: int = MAX_GROUP_CODE_ATTEMPTS,
) -> OperationResult:
    """Create a group whose sole member is its creator."""
    creator_id = require_identity(creator_id)
    name = _clean_group_name(name)
    user_ref = _get_existing_user_ref(db, creator_id)

    code = _allocate_group(db, user_ref, creator_id, name, max_attempts)
    current_app.logger.info(f"User {creator_id} created group {code}")
    return success(code=code, name=name)


@returns_result("join group")
def join_group(db: Client, uid: str | None, code: Any) -> OperationResult:
    """Add a user to the group identified by ``code``.

    Joining a group twice is reported as ``already_member`` rather than
    silently accepted.
    """
    uid = require_identity(uid)
    code = _clean_group_code(code)
    group_ref = db.collection(GROUPS_COLLECTION).document(code)
    group_doc = _get_group_snapshot(group_ref)
    group_data = group_doc.to_dict() or {}
    if uid in (group_data.get("members") or []):
        raise AlreadyMember()
    user_ref = _get_existing_user_ref(db, uid)

    batch = db.batch()
    batch.update(group_ref, {"members": firestore.ArrayUnion([uid])})
    batch.update(user_ref, {"groups": firestore.ArrayUnion([code])})
    batch.commit()

    current_app.logger.info(f"User {uid} joined group {code}")
    return success(groupName=group_data.get("name", ""), code=code)


@returns_result("leave group")
def leave_group(db: Client, uid: str | None, code: Any) -> OperationResult:
    """Remove a user from a group.

    The group document is kept even when its last member leaves.
    """
    uid = require_identity(uid)
    code = _clean_group_code(code)
    group_ref = db.collection(GROUPS_COLLECTION).document(code)
    group_doc = _get_group_snapshot(group_ref)
    members = (group_doc.to_dict() or {}).get("members") or []

    batch = db.batch()
    batch.update(group_ref, {"members": firestore.ArrayRemove([uid])})
    user_ref = db.collection(USERS_COLLECTION).document(uid)
    if user_ref.get().exists:
        batch.update(user_ref, {"groups": firestore.ArrayRemove([code])})
    batch.commit()

    if not [member for member in members if member != uid]:
        current_app.logger.info(f"Group {code} has no members left")
    current_app.logger.info(f"User {uid} left group {code}")
    return success(code=code)


@returns_result("read group")
def get_group(db: Client, uid: str | None, code: Any) -> OperationResult:
    """Fetch a single group. Only its members may read it."""
    uid = require_identity(uid)
    code = _clean_group_code(code)
    group_data: Group = _get_group_snapshot(
        db.collection(GROUPS_COLLECTION).document(code)
    ).to_dict() or {}
    if uid not in (group_data.get("members") or []):
        raise AccessDenied("Only members can view this group.")
    group_data["code"] = code
    return success(group=group_data)


class GroupRegistry:
    """Service class for group membership operations."""

    create_group = staticmethod(create_group)
    join_group = staticmethod(join_group)
    leave_group = staticmethod(leave_group)
    get_group = staticmethod(get_group)

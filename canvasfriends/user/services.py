"""Service layer for user documents: profile, memberships and synced assignments."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from flask import current_app
from google.api_core.exceptions import GoogleAPIError

from canvasfriends.assignments.models import clean_assignment
from canvasfriends.constants import USERS_COLLECTION
from canvasfriends.core import returns_result, success
from canvasfriends.errors import NotAuthenticated, NotFoundError, ValidationError
from canvasfriends.group.utils import resolve_group_codes

from .models import new_user_document, utc_now_iso

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

    from canvasfriends.assignments.models import Assignment
    from canvasfriends.core.types import OperationResult
    from canvasfriends.group.models import Group

    from .models import User


def require_identity(uid: str | None) -> str:
    """Return ``uid`` or raise if there is no authenticated identity."""
    if not uid:
        raise NotAuthenticated()
    return uid


def display_name(user: dict[str, Any], fallback: str = "") -> str:
    """Return the label shown for a user: display name, then email."""
    return user.get("displayName") or user.get("email") or fallback


def get_user(db: Client, uid: str) -> User | None:
    """Fetch a user document by identity."""
    user_ref = db.collection(USERS_COLLECTION).document(uid)
    user_doc = cast("DocumentSnapshot", user_ref.get())
    if not user_doc.exists:
        return None
    data = user_doc.to_dict()
    if data is None:
        return None
    data["uid"] = uid
    return cast("User", data)


def ensure_user(db: Client, uid: str, email: str | None, name: str | None) -> bool:
    """Create the user document on first sign-in.

    Existing documents are left untouched. Returns True if a document was
    created.
    """
    require_identity(uid)
    user_ref = db.collection(USERS_COLLECTION).document(uid)
    if user_ref.get().exists:
        return False
    user_ref.set(new_user_document(uid, email, name))
    current_app.logger.info(f"Created user document for {uid}")
    return True


@returns_result("sync assignments")
def sync_assignments(
    db: Client, uid: str | None, assignments: list[dict[str, Any]]
) -> OperationResult:
    """Replace the user's assignment snapshot with ``assignments``.

    Each record is reduced to the persisted fields. The previous snapshot is
    discarded rather than merged.
    """
    uid = require_identity(uid)
    if not isinstance(assignments, list):
        raise ValidationError("Assignments must be a list.")
    cleaned: list[Assignment] = [clean_assignment(record) for record in assignments]

    user_ref = db.collection(USERS_COLLECTION).document(uid)
    if not user_ref.get().exists:
        raise NotFoundError("User not found.")

    last_sync = utc_now_iso()
    user_ref.update({"assignments": cleaned, "lastSync": last_sync})
    current_app.logger.info(f"Synced {len(cleaned)} assignments for {uid}")
    return success(count=len(cleaned), lastSync=last_sync)


def get_groups(db: Client, uid: str | None) -> list[Group]:
    """Return the groups a user belongs to, skipping codes that no longer resolve."""
    if not uid:
        return []
    try:
        user = get_user(db, uid)
        if user is None:
            return []
        groups, dangling = resolve_group_codes(db, user.get("groups") or [])
    except GoogleAPIError as e:
        current_app.logger.error(f"Error fetching groups for {uid}: {e}")
        return []

    if dangling:
        current_app.logger.warning(
            f"User {uid} references missing groups: {', '.join(dangling)}"
        )
    return groups


class UserDirectory:
    """Service class for user documents."""

    require_identity = staticmethod(require_identity)
    display_name = staticmethod(display_name)
    get_user = staticmethod(get_user)
    ensure_user = staticmethod(ensure_user)
    sync_assignments = staticmethod(sync_assignments)
    get_groups = staticmethod(get_groups)

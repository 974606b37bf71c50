"""Repair pass for the two-sided group membership lists.

A group's ``members`` list is treated as the source of truth. The user's own
``groups`` list is rewritten to match it: codes of missing groups, or of
groups that no longer list the user, are dropped, and codes of groups that do
list the user are restored. Running the pass twice changes nothing the second
time. Only array transforms are written, so a join landing between the read and
the commit is kept.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from firebase_admin import firestore
from flask import current_app

from canvasfriends.constants import GROUPS_COLLECTION, USERS_COLLECTION
from canvasfriends.core import returns_result, success
from canvasfriends.errors import NotFoundError
from canvasfriends.user.services import require_identity

from ..utils import resolve_group_codes

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from canvasfriends.core.types import OperationResult


def find_member_group_codes(db: Client, uid: str) -> set[str]:
    """Return the codes of every group listing ``uid`` as a member."""
    query = db.collection(GROUPS_COLLECTION).where(
        filter=firestore.FieldFilter("members", "array_contains", uid)
    )
    return {doc.id for doc in query.stream()}


@returns_result("reconcile memberships")
def reconcile_user_memberships(db: Client, uid: str | None) -> OperationResult:
    """Bring ``users/{uid}.groups`` back in line with group membership."""
    uid = require_identity(uid)
    user_ref = db.collection(USERS_COLLECTION).document(uid)
    user_doc = user_ref.get()
    if not user_doc.exists:
        raise NotFoundError("User not found.")

    listed = (user_doc.to_dict() or {}).get("groups") or []
    listed_groups, dangling = resolve_group_codes(db, listed)
    stale = dangling + [
        group["code"]
        for group in listed_groups
        if uid not in (group.get("members") or [])
    ]
    restored = sorted(find_member_group_codes(db, uid) - set(listed))

    # Duplicated codes are removed and added back once.
    duplicated = sorted(
        {code for code in listed if listed.count(code) > 1} - set(stale)
    )
    to_remove = stale + duplicated
    to_add = restored + duplicated
    if to_remove or to_add:
        batch = db.batch()
        if to_remove:
            batch.update(user_ref, {"groups": firestore.ArrayRemove(to_remove)})
        if to_add:
            batch.update(user_ref, {"groups": firestore.ArrayUnion(to_add)})
        batch.commit()
        current_app.logger.info(
            f"Reconciled groups for {uid}: removed {stale}, restored {restored}"
        )
    return success(removed=stale, restored=restored)

"""Service layer that merges the assignments of everyone a user studies with."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from flask import current_app
from google.api_core.exceptions import GoogleAPIError

from canvasfriends.constants import USERS_COLLECTION
from canvasfriends.group.services.reconcile import reconcile_user_memberships
from canvasfriends.group.utils import resolve_group_codes
from canvasfriends.user.services import display_name, get_user

from ..utils import flatten_assignments

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from canvasfriends.group.models import Group

    from ..models import AggregatedAssignment, FriendAssignments


def collect_member_ids(groups: list[Group], exclude: str) -> list[str]:
    """Union the members of ``groups``, without ``exclude``, sorted by uid."""
    member_ids: set[str] = set()
    for group in groups:
        member_ids.update(m for m in group.get("members") or [] if m)
    member_ids.discard(exclude)
    return sorted(member_ids)


def _fetch_members(db: Client, member_ids: list[str]) -> dict[str, dict[str, Any]]:
    """Batch fetch user documents and return a map by uid."""
    if not member_ids:
        return {}
    refs = [db.collection(USERS_COLLECTION).document(uid) for uid in member_ids]
    docs = db.get_all(refs)
    return {doc.id: doc.to_dict() or {} for doc in docs if doc.exists}


def get_friend_assignments(
    db: Client, uid: str | None, repair_dangling: bool = False
) -> list[FriendAssignments]:
    """Return one entry per group-mate who has synced assignments.

    Entries are ordered by the member's uid and never include the requester.
    Read failures are logged and yield an empty list so callers always get
    a usable view.
    """
    if not uid:
        return []

    try:
        user = get_user(db, uid)
        if user is None:
            return []
        groups, dangling = resolve_group_codes(db, user.get("groups") or [])
    except GoogleAPIError as e:
        current_app.logger.error(f"Error loading groups for {uid}: {e}")
        return []

    if dangling:
        current_app.logger.warning(
            f"Skipping missing groups for {uid}: {', '.join(dangling)}"
        )
        if repair_dangling:
            reconcile_user_memberships(db, uid)

    member_ids = collect_member_ids(groups, exclude=uid)
    try:
        members = _fetch_members(db, member_ids)
    except GoogleAPIError as e:
        current_app.logger.error(f"Error loading group members for {uid}: {e}")
        return []

    entries: list[FriendAssignments] = []
    for member_id in member_ids:
        member = members.get(member_id)
        if member is None:
            continue
        assignments = member.get("assignments") or []
        if not assignments:
            continue
        entries.append(
            {
                "ownerId": member_id,
                "ownerName": display_name(member, member_id),
                "assignments": list(assignments),
            }
        )
    return entries


def get_friend_timeline(
    db: Client, uid: str | None, repair_dangling: bool = False
) -> list[AggregatedAssignment]:
    """Return every group-mate's assignment in due date order."""
    return flatten_assignments(
        get_friend_assignments(db, uid, repair_dangling=repair_dangling)
    )


class AssignmentAggregator:
    """Service class for merged views of group-mates' assignments."""

    collect_member_ids = staticmethod(collect_member_ids)
    get_friend_assignments = staticmethod(get_friend_assignments)
    get_friend_timeline = staticmethod(get_friend_timeline)
    flatten_assignments = staticmethod(flatten_assignments)
